"""Round phase enumeration."""

from enum import Enum, auto


class RoundPhase(Enum):
    """
    Table state machine phases.

    Flow: IDLE → BETTING → DEALING → AGENT_TURN → PLAYER_TURN → DEALER_TURN
    → SCORING → ROUND_OVER (→ IDLE) or GAME_OVER
    """

    # Waiting for the player's bet
    IDLE = auto()

    # Bets being validated and staked
    BETTING = auto()

    # Initial cards being dealt
    DEALING = auto()

    # Agent plays from its policy
    AGENT_TURN = auto()

    # Player hits or stays
    PLAYER_TURN = auto()

    # Dealer plays
    DEALER_TURN = auto()

    # Settling both seats against the dealer
    SCORING = auto()

    # Round finished, ready for next
    ROUND_OVER = auto()

    # A seat ran out of chips; only a restart leaves this state
    GAME_OVER = auto()

    def __str__(self) -> str:
        return self.name.replace("_", " ").title()


# Valid state transitions
VALID_TRANSITIONS: dict[RoundPhase, list[RoundPhase]] = {
    RoundPhase.IDLE: [RoundPhase.BETTING],
    RoundPhase.BETTING: [RoundPhase.DEALING],
    RoundPhase.DEALING: [RoundPhase.AGENT_TURN],
    RoundPhase.AGENT_TURN: [RoundPhase.PLAYER_TURN],
    RoundPhase.PLAYER_TURN: [RoundPhase.PLAYER_TURN, RoundPhase.DEALER_TURN],
    RoundPhase.DEALER_TURN: [RoundPhase.SCORING],
    RoundPhase.SCORING: [RoundPhase.ROUND_OVER, RoundPhase.GAME_OVER],
    RoundPhase.ROUND_OVER: [RoundPhase.IDLE],
    RoundPhase.GAME_OVER: [],  # Left only through a restart
}


def is_valid_transition(from_phase: RoundPhase, to_phase: RoundPhase) -> bool:
    """
    Check if a phase transition is valid.

    Args:
        from_phase: Current phase
        to_phase: Desired phase

    Returns:
        True if the transition is allowed
    """
    return to_phase in VALID_TRANSITIONS.get(from_phase, [])
