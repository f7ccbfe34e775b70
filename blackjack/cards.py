"""Cards and the multi-deck shoe they are dealt from."""

from dataclasses import dataclass
from enum import Enum
from random import Random
from typing import Iterable, Iterator

from blackjack.errors import ShoeExhausted

CARDS_PER_DECK = 52


class Suit(Enum):
    """Card suits."""

    CLUBS = "Clubs"
    DIAMONDS = "Diamonds"
    HEARTS = "Hearts"
    SPADES = "Spades"

    def __str__(self) -> str:
        return {
            Suit.CLUBS: "♣",
            Suit.DIAMONDS: "♦",
            Suit.HEARTS: "♥",
            Suit.SPADES: "♠",
        }[self]


class Rank(Enum):
    """Card ranks, valued by their printed symbol."""

    ACE = "A"
    TWO = "2"
    THREE = "3"
    FOUR = "4"
    FIVE = "5"
    SIX = "6"
    SEVEN = "7"
    EIGHT = "8"
    NINE = "9"
    TEN = "10"
    JACK = "J"
    QUEEN = "Q"
    KING = "K"

    def __str__(self) -> str:
        return self.value

    @property
    def points(self) -> int:
        """Blackjack points: Ace = 11, faces = 10, others their number."""
        if self is Rank.ACE:
            return 11
        if self in (Rank.JACK, Rank.QUEEN, Rank.KING):
            return 10
        return int(self.value)


_RANK_ALIASES = {"T": Rank.TEN}
_SUIT_ALIASES = {
    "C": Suit.CLUBS,
    "♣": Suit.CLUBS,
    "D": Suit.DIAMONDS,
    "♦": Suit.DIAMONDS,
    "H": Suit.HEARTS,
    "♥": Suit.HEARTS,
    "S": Suit.SPADES,
    "♠": Suit.SPADES,
}


@dataclass(frozen=True, slots=True)
class Card:
    """Immutable playing card."""

    rank: Rank
    suit: Suit

    def __str__(self) -> str:
        return f"{self.rank}{self.suit}"

    def __repr__(self) -> str:
        return f"Card({self.rank.name}, {self.suit.name})"

    @property
    def value(self) -> int:
        """Return the blackjack point value."""
        return self.rank.points

    @property
    def is_ace(self) -> bool:
        return self.rank is Rank.ACE

    @classmethod
    def from_string(cls, s: str) -> "Card":
        """Create a card from a string like 'AS', '10h' or 'K♥'."""
        s = s.strip().upper()
        if len(s) < 2:
            raise ValueError(f"Invalid card string: {s}")

        rank_str, suit_str = s[:-1], s[-1]
        try:
            rank = _RANK_ALIASES.get(rank_str) or Rank(rank_str)
        except ValueError:
            raise ValueError(f"Invalid rank: {rank_str}") from None
        if suit_str not in _SUIT_ALIASES:
            raise ValueError(f"Invalid suit: {suit_str}")

        return cls(rank, _SUIT_ALIASES[suit_str])


def build_shoe(num_decks: int, rng: Random | None = None) -> list[Card]:
    """
    Build ``num_decks`` full decks and return them uniformly shuffled.

    Args:
        num_decks: Number of 52-card decks
        rng: Random number generator used for the shuffle

    Returns:
        A list of ``num_decks * 52`` cards in random order
    """
    if num_decks < 1:
        raise ValueError("Shoe must have at least 1 deck")

    cards = [
        Card(rank, suit)
        for _ in range(num_decks)
        for suit in Suit
        for rank in Rank
    ]
    (rng or Random()).shuffle(cards)
    return cards


class Shoe:
    """A multi-deck shoe, dealt from the front."""

    def __init__(
        self,
        num_decks: int = 4,
        rng: Random | None = None,
        cards: Iterable[Card] | None = None,
    ) -> None:
        """
        Initialize a shoe.

        Args:
            num_decks: Number of decks in a full shoe
            rng: Random number generator for shuffling
            cards: Exact remaining cards, front first. Builds and shuffles a
                fresh shoe when omitted.
        """
        if num_decks < 1:
            raise ValueError("Shoe must have at least 1 deck")

        self._num_decks = num_decks
        self._rng = rng or Random()
        if cards is None:
            self._cards = build_shoe(num_decks, self._rng)
        else:
            self._cards = list(cards)

    def rebuild(self) -> None:
        """Replace every remaining card with a freshly shuffled full shoe."""
        self._cards = build_shoe(self._num_decks, self._rng)

    def draw(self) -> Card:
        """Remove and return the front card."""
        if not self._cards:
            raise ShoeExhausted("Cannot draw from empty shoe")
        return self._cards.pop(0)

    def should_replenish(self, threshold: float) -> bool:
        """Check whether the shoe has fallen below ``threshold`` of capacity."""
        return self.remaining_fraction < threshold

    @property
    def remaining_fraction(self) -> float:
        """Return cards left as a fraction of a full shoe."""
        return len(self._cards) / self.total_cards

    @property
    def cards_remaining(self) -> int:
        """Return the number of cards remaining."""
        return len(self._cards)

    @property
    def total_cards(self) -> int:
        """Return the total number of cards in a full shoe."""
        return self._num_decks * CARDS_PER_DECK

    @property
    def num_decks(self) -> int:
        return self._num_decks

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self._cards)
