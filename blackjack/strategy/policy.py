"""Lookup-table policy that drives the agent seat."""

import json
import logging
from enum import IntEnum
from pathlib import Path
from typing import Any, Iterable, Mapping

logger = logging.getLogger(__name__)


class Action(IntEnum):
    """Agent actions, using the codes of the trained policy file."""

    NONE = 0  # No decision recorded; treated as stand
    STAND = 1
    HIT = 2

    def __str__(self) -> str:
        return self.name.title()


# (dealer upcard value, hand value, usable ace)
PolicyKey = tuple[int, int, bool]


class PolicyTable:
    """
    Read-only mapping from game situations to agent actions.

    A missing entry means the situation was never reached in training, and
    the agent stands. An empty table therefore always stands.
    """

    def __init__(self, entries: Mapping[PolicyKey, Action] | None = None) -> None:
        self._entries: dict[PolicyKey, Action] = {
            (int(dealer), int(player), bool(ace)): Action(action)
            for (dealer, player, ace), action in (entries or {}).items()
        }

    def decide(self, dealer_upcard: int, hand_value: int, usable_ace: bool) -> Action:
        """
        Choose the agent's next action.

        Args:
            dealer_upcard: Value of the dealer's visible hand (2-11, Ace = 11)
            hand_value: Agent's current hand value
            usable_ace: Whether the agent holds an ace counted as 11

        Returns:
            Action.HIT or Action.STAND
        """
        action = self._entries.get((dealer_upcard, hand_value, bool(usable_ace)))
        if action is Action.HIT:
            return Action.HIT
        return Action.STAND

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]]) -> "PolicyTable":
        """
        Build a table from trained policy records.

        Each record has the shape
        ``{"Dealer": 10, "Player": 12, "Ace": 0, "Action": 2}``.

        Raises:
            ValueError: If a record is missing a field or has an unknown action
        """
        entries: dict[PolicyKey, Action] = {}
        for index, record in enumerate(records):
            try:
                ace = int(record["Ace"])
                if ace not in (0, 1):
                    raise ValueError(f"Ace flag must be 0 or 1, got {ace}")
                key = (int(record["Dealer"]), int(record["Player"]), bool(ace))
                action = Action(int(record["Action"]))
            except (KeyError, TypeError, ValueError) as exc:
                raise ValueError(f"Invalid policy record at index {index}: {record!r}") from exc
            entries[key] = action
        return cls(entries)

    @classmethod
    def load(cls, path: str | Path) -> "PolicyTable":
        """Load a trained policy from a JSON file of records."""
        with open(path, encoding="utf-8") as fh:
            records = json.load(fh)
        if not isinstance(records, list):
            raise ValueError(f"Policy file {path} must contain a list of records")
        table = cls.from_records(records)
        logger.info("Loaded %d policy entries from %s", len(table), path)
        return table

    @property
    def is_loaded(self) -> bool:
        """Check whether the table holds any entries."""
        return bool(self._entries)

    def __len__(self) -> int:
        return len(self._entries)
