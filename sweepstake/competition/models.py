"""Data models for the competition blueprint."""

from __future__ import annotations

import datetime
from dataclasses import dataclass
from typing import Any

from sweepstake.core.constants import MATCH_ORDER, MATCH_SIDE_A, MATCH_SIDE_B


@dataclass(frozen=True)
class Match:
    """A fixture in a competition's catalog."""

    id: str
    side_a: str
    side_b: str
    order: int | None = None

    @classmethod
    def from_dict(cls, match_id: str, data: dict[str, Any] | None) -> Match:
        """Build a match from its catalog document."""
        data = data or {}
        order = data.get(MATCH_ORDER)
        return cls(
            id=match_id,
            side_a=str(data.get(MATCH_SIDE_A, "")),
            side_b=str(data.get(MATCH_SIDE_B, "")),
            order=int(order) if order is not None else None,
        )


@dataclass(frozen=True)
class Competition:
    """A sweepstake instance."""

    id: str
    name: str
    deadline: datetime.datetime | None = None

    def is_open(self, now: datetime.datetime) -> bool:
        """Submissions are accepted up to and including the deadline."""
        return self.deadline is None or now <= self.deadline

    def to_dict(self, now: datetime.datetime) -> dict[str, Any]:
        """Serialize for the JSON API."""
        return {
            "id": self.id,
            "name": self.name,
            "deadline": self.deadline.isoformat() if self.deadline else None,
            "open": self.is_open(now),
        }


def match_sort_key(match_id: str) -> tuple[int, int, str]:
    """Order match ids numerically when they are numbers, else as text."""
    if match_id.isdigit():
        return (0, int(match_id), match_id)
    return (1, 0, match_id)
