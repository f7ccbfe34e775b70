"""Table rules and seat decision policies."""

from blackjack.strategy.rules import TableRules, dealer_should_hit
from blackjack.strategy.policy import Action, PolicyTable
from blackjack.strategy.basic import basic_policy

__all__ = [
    "TableRules",
    "dealer_should_hit",
    "Action",
    "PolicyTable",
    "basic_policy",
]
