"""Pytest fixtures for blackjack table tests."""

import pytest
from random import Random

from hypothesis import strategies as st

from blackjack.cards import Card, Shoe, Rank, Suit
from blackjack.hand import Hand
from blackjack.game import BlackjackTable
from blackjack.strategy import PolicyTable, TableRules, basic_policy


def cards(*codes: str) -> list[Card]:
    """Build cards from short strings such as 'AS', '10H'."""
    return [Card.from_string(code) for code in codes]


def hand_of(*codes: str, chips: int = 100) -> Hand:
    """Build a hand holding the given cards."""
    hand = Hand(chips=chips)
    for card in cards(*codes):
        hand.add_card(card)
    return hand


def stack_shoe(table: BlackjackTable, *codes: str) -> None:
    """
    Put known cards on the front of the table's shoe.

    Deal order is dealer, agent, agent, player, player, then agent hits,
    player hits and dealer hits.
    """
    table.shoe = Shoe(
        num_decks=table.rules.num_decks,
        cards=cards(*codes) + list(table.shoe),
    )


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return Random(42)


@pytest.fixture
def shoe(rng):
    """A shuffled 4-deck shoe."""
    return Shoe(num_decks=4, rng=rng)


@pytest.fixture
def empty_hand():
    """An empty player hand."""
    return Hand(chips=100)


@pytest.fixture
def soft_17_hand():
    """A soft 17 hand (A-6)."""
    return hand_of("AS", "6H")


@pytest.fixture
def hard_16_hand():
    """A hard 16 hand (10-6)."""
    return hand_of("10S", "6H")


@pytest.fixture
def bust_hand():
    """A busted hand."""
    return hand_of("10S", "6H", "KC")


@pytest.fixture
def rules():
    """Default table rules."""
    return TableRules()


@pytest.fixture
def standing_policy():
    """A policy with no entries, so the agent always stands."""
    return PolicyTable()


@pytest.fixture
def table(rng, standing_policy):
    """A new table whose agent always stands."""
    return BlackjackTable(policy=standing_policy, rng=rng)


@pytest.fixture
def basic_table(rng):
    """A new table whose agent plays the basic hit/stand chart."""
    return BlackjackTable(policy=basic_policy(), rng=rng)


# Hypothesis strategies for property-based testing
@st.composite
def card_strategy(draw):
    """Generate a random card."""
    rank = draw(st.sampled_from(list(Rank)))
    suit = draw(st.sampled_from(list(Suit)))
    return Card(rank, suit)
