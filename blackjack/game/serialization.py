"""Convert a table to and from plain dicts for storage."""

from random import Random
from typing import Any

from blackjack.cards import Card, Rank, Shoe, Suit
from blackjack.game.engine import AGENT, PLAYER, BlackjackTable
from blackjack.game.state import RoundPhase
from blackjack.hand import Hand
from blackjack.strategy.policy import PolicyTable
from blackjack.strategy.rules import TableRules


def serialize_card(card: Card) -> dict[str, str]:
    """Serialize a card to a dict."""
    return {"rank": card.rank.value, "suit": card.suit.value}


def deserialize_card(data: dict[str, str]) -> Card:
    """Deserialize a card from a dict."""
    return Card(Rank(data["rank"]), Suit(data["suit"]))


def serialize_hand(hand: Hand) -> dict[str, Any]:
    """Serialize a hand to a dict."""
    return {
        "cards": [serialize_card(c) for c in hand.cards],
        "chips": hand.chips,
        "bet": hand.bet,
    }


def deserialize_hand(data: dict[str, Any]) -> Hand:
    """
    Deserialize a hand from a dict.

    Cards are replayed through ``add_card`` so value and soft-ace state are
    rebuilt rather than trusted from storage.
    """
    hand = Hand(chips=data["chips"], bet=data["bet"])
    for card in data["cards"]:
        hand.add_card(deserialize_card(card))
    return hand


def serialize_table(table: BlackjackTable) -> dict[str, Any]:
    """Serialize table state for storage."""
    return {
        "phase": table.phase.name,
        "shoe_cards": [serialize_card(c) for c in table.shoe],
        "dealer": serialize_hand(table.dealer),
        "agent": serialize_hand(table.agent),
        "player": serialize_hand(table.player),
        "messages": dict(table.messages),
        "high_score": table.high_score,
        "winner": table.winner,
        "last_standing": table.last_standing,
        "rules": {
            "num_decks": table.rules.num_decks,
            "replenish_threshold": table.rules.replenish_threshold,
            "starting_chips": table.rules.starting_chips,
            "agent_bet_fraction": table.rules.agent_bet_fraction,
            "agent_bet_round_up": table.rules.agent_bet_round_up,
            "dealer_stand_threshold": table.rules.dealer_stand_threshold,
        },
    }


def deserialize_table(
    data: dict[str, Any],
    policy: PolicyTable | None = None,
    rng: Random | None = None,
) -> BlackjackTable:
    """
    Restore a table from stored data.

    Args:
        data: Output of ``serialize_table``
        policy: Agent policy to attach; policies are not stored with tables
        rng: Random number generator for future shuffles

    Raises:
        ValueError: If the stored phase is unknown
    """
    phase_name = data["phase"]
    if phase_name not in RoundPhase.__members__:
        raise ValueError(f"Unknown table phase: {phase_name}")

    rules = TableRules(**data["rules"])
    table = BlackjackTable(rules=rules, policy=policy, rng=rng)

    # Restore state machine state
    table._machine_state = phase_name.lower()

    table.shoe = Shoe(
        num_decks=rules.num_decks,
        rng=table._rng,
        cards=[deserialize_card(c) for c in data["shoe_cards"]],
    )
    table.dealer = deserialize_hand(data["dealer"])
    table.agent = deserialize_hand(data["agent"])
    table.player = deserialize_hand(data["player"])
    table.messages = {
        AGENT: data["messages"].get(AGENT, ""),
        PLAYER: data["messages"].get(PLAYER, ""),
    }

    table.high_score = data["high_score"]
    table.winner = data["winner"]
    table.last_standing = data["last_standing"]
    return table
