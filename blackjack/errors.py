"""Exceptions raised by the table engine."""


class BlackjackError(Exception):
    """Base class for all engine errors."""


class InvalidBet(BlackjackError, ValueError):
    """A bet was rejected. The hand and the table are left unchanged."""

    def __init__(self, reason: str, amount: object = None) -> None:
        super().__init__(reason)
        self.reason = reason
        self.amount = amount


class IllegalCommand(BlackjackError):
    """A command was issued in a phase that does not accept it."""

    def __init__(self, command: str, phase: object) -> None:
        super().__init__(f"Cannot {command} during {phase}")
        self.command = command
        self.phase = phase


class ShoeExhausted(BlackjackError, IndexError):
    """
    A card was drawn from an empty shoe.

    The shoe is replenished between rounds, so this signals a broken
    invariant rather than something a caller can recover from.
    """
