"""Read-only views of the table for presentation layers."""

from dataclasses import dataclass

from blackjack.cards import Card
from blackjack.game.state import RoundPhase
from blackjack.hand import Hand


@dataclass(frozen=True)
class SeatSnapshot:
    """One seat after the latest transition."""

    name: str
    cards: tuple[Card, ...]
    value: int
    usable_ace: bool
    chips: int
    bet: int
    message: str

    @property
    def is_busted(self) -> bool:
        return self.value > 21

    @classmethod
    def of(cls, name: str, hand: Hand, message: str = "") -> "SeatSnapshot":
        return cls(
            name=name,
            cards=tuple(hand.cards),
            value=hand.value,
            usable_ace=hand.usable_ace,
            chips=hand.chips,
            bet=hand.bet,
            message=message,
        )


@dataclass(frozen=True)
class TableSnapshot:
    """Everything a presentation layer needs to draw the table."""

    phase: RoundPhase
    dealer: SeatSnapshot
    agent: SeatSnapshot
    player: SeatSnapshot
    game_over: bool
    winner: str | None
    high_score: int
    last_standing: str | None
    shoe_remaining: int

    @property
    def can_bet(self) -> bool:
        return self.phase is RoundPhase.IDLE

    @property
    def can_hit(self) -> bool:
        return self.phase is RoundPhase.PLAYER_TURN

    @property
    def can_stay(self) -> bool:
        return self.phase is RoundPhase.PLAYER_TURN

    @property
    def can_start_next_round(self) -> bool:
        return self.phase is RoundPhase.ROUND_OVER
