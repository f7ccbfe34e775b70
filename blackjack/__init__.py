"""Blackjack table engine - 100% UI-agnostic."""

from blackjack.cards import Card, Shoe, Rank, Suit, build_shoe
from blackjack.hand import Hand, Outcome, compare
from blackjack.betting import agent_bet_amount, validate_bet
from blackjack.errors import BlackjackError, IllegalCommand, InvalidBet, ShoeExhausted

__all__ = [
    "Card",
    "Shoe",
    "Rank",
    "Suit",
    "build_shoe",
    "Hand",
    "Outcome",
    "compare",
    "agent_bet_amount",
    "validate_bet",
    "BlackjackError",
    "IllegalCommand",
    "InvalidBet",
    "ShoeExhausted",
]
