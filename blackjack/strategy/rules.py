"""Table configuration and the fixed dealer rule."""

from dataclasses import dataclass

from blackjack.cards import CARDS_PER_DECK

# Dealer, agent and player
HANDS_PER_ROUND = 3


def max_cards_per_round(num_decks: int) -> int:
    """
    Upper bound on the cards a single round can draw.

    Each hand stops on a hard total of at most 21 plus one final card, so the
    bound takes the smallest cards a shoe of ``num_decks`` holds until three
    hands' worth of hard points is spent.

    >>> max_cards_per_round(1)
    23
    >>> max_cards_per_round(4)
    40
    """
    points_left = HANDS_PER_ROUND * 21
    cards = HANDS_PER_ROUND
    for points in range(1, 11):
        # Tens, jacks, queens and kings all count 10
        copies = 4 * num_decks * (4 if points == 10 else 1)
        taken = min(copies, points_left // points)
        cards += taken
        points_left -= taken * points
    return cards


@dataclass(frozen=True)
class TableRules:
    """
    Table configuration, fixed when the table is created.

    All bet amounts are in whole chips.
    """

    # Shoe
    num_decks: int = 4
    replenish_threshold: float = 0.5  # Rebuild below this fraction of a full shoe

    # Seats
    starting_chips: int = 100

    # Agent betting
    agent_bet_fraction: float = 0.5
    agent_bet_round_up: int = 10  # Also the agent's minimum bet

    # Dealer
    dealer_stand_threshold: int = 17

    def __post_init__(self) -> None:
        """Validate rule combinations."""
        if self.num_decks < 1:
            raise ValueError("num_decks must be at least 1")
        if not 0.0 < self.replenish_threshold <= 1.0:
            raise ValueError("replenish_threshold must be in (0, 1]")
        # A shoe kept at or above the threshold must cover any round
        reserve = self.replenish_threshold * self.num_decks * CARDS_PER_DECK
        if reserve < max_cards_per_round(self.num_decks):
            raise ValueError(
                f"replenish_threshold {self.replenish_threshold} leaves {reserve:g} cards, "
                f"a round can need {max_cards_per_round(self.num_decks)}"
            )
        if self.starting_chips < 1:
            raise ValueError("starting_chips must be at least 1")
        if not 0.0 < self.agent_bet_fraction <= 1.0:
            raise ValueError("agent_bet_fraction must be in (0, 1]")
        if self.agent_bet_round_up < 1:
            raise ValueError("agent_bet_round_up must be at least 1")
        if not 2 <= self.dealer_stand_threshold <= 21:
            raise ValueError("dealer_stand_threshold must be between 2 and 21")


def dealer_should_hit(dealer_value: int, stand_threshold: int = 17) -> bool:
    """The dealer hits below ``stand_threshold`` and stands otherwise."""
    return dealer_value < stand_threshold
