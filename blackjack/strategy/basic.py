"""Hit/stand chart used when no trained policy is available."""

from typing import Mapping

from blackjack.strategy.policy import Action, PolicyKey, PolicyTable

# Dealer upcards: 2, 3, 4, 5, 6, 7, 8, 9, 10, A(11)
DEALER_UPCARDS = range(2, 12)


def _build_hard_table() -> Mapping[tuple[int, int], Action]:
    """Build hard totals (no usable ace)."""
    H = Action.HIT
    S = Action.STAND

    table: dict[tuple[int, int], Action] = {}

    # Hard 4-11: Always hit
    for total in range(4, 12):
        for dealer in DEALER_UPCARDS:
            table[(total, dealer)] = H

    # Hard 12
    for dealer in DEALER_UPCARDS:
        table[(12, dealer)] = S if dealer in (4, 5, 6) else H

    # Hard 13-16
    for total in range(13, 17):
        for dealer in range(2, 7):
            table[(total, dealer)] = S
        for dealer in range(7, 12):
            table[(total, dealer)] = H

    # Hard 17+: Always stand
    for total in range(17, 22):
        for dealer in DEALER_UPCARDS:
            table[(total, dealer)] = S

    return table


def _build_soft_table() -> Mapping[tuple[int, int], Action]:
    """Build soft totals (an ace counted as 11)."""
    H = Action.HIT
    S = Action.STAND

    table: dict[tuple[int, int], Action] = {}

    # Soft 12-17 (A,A through A,6): Always hit
    for total in range(12, 18):
        for dealer in DEALER_UPCARDS:
            table[(total, dealer)] = H

    # Soft 18 (A,7)
    for dealer in range(2, 9):
        table[(18, dealer)] = S
    for dealer in (9, 10, 11):
        table[(18, dealer)] = H

    # Soft 19+
    for total in range(19, 22):
        for dealer in DEALER_UPCARDS:
            table[(total, dealer)] = S

    return table


def basic_policy() -> PolicyTable:
    """
    Return a policy table following basic strategy restricted to hit/stand.

    Doubles are played as hits, as the table offers neither doubling nor
    splitting.
    """
    entries: dict[PolicyKey, Action] = {}
    for (total, dealer), action in _build_hard_table().items():
        entries[(dealer, total, False)] = action
    for (total, dealer), action in _build_soft_table().items():
        entries[(dealer, total, True)] = action
    return PolicyTable(entries)
