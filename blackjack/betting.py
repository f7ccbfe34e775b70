"""Bet validation and the agent's bet sizing."""

from decimal import ROUND_CEILING, Decimal

# Largest bet accepted; anything above is treated as an overflow.
MAX_BET = 2**53 - 1


def validate_bet(amount: object, chips: int) -> str | None:
    """
    Check a bet against a chip balance.

    Args:
        amount: Requested bet
        chips: Current chip balance

    Returns:
        A human-readable rejection reason, or None if the bet is valid
    """
    if isinstance(amount, bool) or not isinstance(amount, int):
        return "Bet must be a whole number of chips"
    if amount > MAX_BET:
        return "Invalid Bet: Overflow"
    if amount <= 0:
        return "Bet must be positive"
    if amount > chips:
        return "Not Enough Chips"
    return None


def agent_bet_amount(chips: int, fraction: float, round_up: int) -> int:
    """
    Size the agent's bet.

    The agent stakes ``fraction`` of its balance rounded up to the next
    multiple of ``round_up``, capped at the balance itself. ``round_up`` is
    therefore also the minimum bet whenever the agent can afford it.

    >>> agent_bet_amount(100, 0.5, 10)
    50
    >>> agent_bet_amount(35, 0.5, 10)
    20
    >>> agent_bet_amount(5, 0.5, 10)
    5
    """
    if chips <= 0:
        return 0
    units = (Decimal(chips) * Decimal(str(fraction)) / Decimal(round_up)).to_integral_value(
        rounding=ROUND_CEILING
    )
    return min(chips, int(units) * round_up)
