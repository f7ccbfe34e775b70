"""Hand evaluation, chip balances and round scoring."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator

from blackjack.betting import validate_bet
from blackjack.cards import Card
from blackjack.errors import InvalidBet

BUST_LIMIT = 21

# Chip balance of a participant that never bets (the dealer).
NO_CHIPS = -1


class Outcome(Enum):
    """Result of a seat against the dealer."""

    WIN = "win"
    PUSH = "push"
    LOSE = "lose"

    @property
    def payout_multiplier(self) -> int:
        """Multiple of the stake credited back at scoring time."""
        return {Outcome.WIN: 2, Outcome.PUSH: 1, Outcome.LOSE: 0}[self]

    @property
    def message(self) -> str:
        return {Outcome.WIN: "Win!", Outcome.PUSH: "Push", Outcome.LOSE: "Lose"}[self]


@dataclass
class Hand:
    """
    A blackjack hand with its owner's chips.

    ``value`` and ``usable_ace`` are maintained incrementally as cards are
    added; at most one ace is ever counted as 11.
    """

    chips: int = NO_CHIPS
    bet: int = 0
    cards: list[Card] = field(default_factory=list, init=False)
    value: int = field(default=0, init=False)
    usable_ace: bool = field(default=False, init=False)

    def add_card(self, card: Card) -> None:
        """Add a card and update the hand value."""
        self.cards.append(card)

        if not card.is_ace:
            self.value += card.value
        elif not self.usable_ace:
            self.value += card.value
            self.usable_ace = True
        else:
            # A second soft ace would bust, so the new one counts as 1
            self.value += 1

        if self.value > BUST_LIMIT and self.usable_ace:
            self.value -= 10
            self.usable_ace = False

    def clear(self) -> None:
        """Discard all cards and the bet, keeping the chip balance."""
        self.cards.clear()
        self.value = 0
        self.usable_ace = False
        self.bet = 0

    def place_bet(self, amount: int) -> None:
        """
        Stake ``amount`` chips for the round.

        Raises:
            InvalidBet: If the amount is not positive, overflows or exceeds
                the balance. The hand is left unchanged.
        """
        if self.chips == NO_CHIPS:
            raise InvalidBet("This seat does not hold chips", amount)

        reason = validate_bet(amount, self.chips)
        if reason is not None:
            raise InvalidBet(reason, amount)

        self.chips -= amount
        self.bet = amount

    def settle(self, outcome: Outcome) -> int:
        """Credit the payout for ``outcome`` and return the amount credited."""
        credit = self.bet * outcome.payout_multiplier
        self.chips += credit
        return credit

    @property
    def is_busted(self) -> bool:
        """Check if the hand has busted (value > 21)."""
        return self.value > BUST_LIMIT

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    def __str__(self) -> str:
        cards_str = " ".join(str(card) for card in self.cards)
        value_str = f"({self.value})"
        if self.usable_ace:
            value_str = f"(soft {self.value})"
        if self.is_busted:
            value_str = "(BUST)"
        return f"{cards_str} {value_str}"

    def __repr__(self) -> str:
        return f"Hand({self.cards!r}, value={self.value}, chips={self.chips})"


def compare(seat_value: int, dealer_value: int) -> Outcome:
    """
    Compare a seat's total with the dealer's.

    A busted seat loses even when the dealer also busts.
    """
    if seat_value > BUST_LIMIT:
        return Outcome.LOSE
    if dealer_value > BUST_LIMIT:
        return Outcome.WIN
    if seat_value > dealer_value:
        return Outcome.WIN
    if seat_value < dealer_value:
        return Outcome.LOSE
    return Outcome.PUSH
