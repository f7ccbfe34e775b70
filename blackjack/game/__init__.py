"""Table engine and state management."""

from blackjack.game.events import GameEvent, EventType
from blackjack.game.state import RoundPhase
from blackjack.game.snapshot import SeatSnapshot, TableSnapshot
from blackjack.game.engine import BlackjackTable, AGENT, DEALER, PLAYER

__all__ = [
    "GameEvent",
    "EventType",
    "RoundPhase",
    "SeatSnapshot",
    "TableSnapshot",
    "BlackjackTable",
    "AGENT",
    "DEALER",
    "PLAYER",
]
