"""Data models for the team registry."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from sweepstake.core.constants import TEAM_HAS_SUBMITTED, TEAM_NAME


@dataclass(frozen=True)
class Team:
    """A registered team and its one-time submission flag."""

    id: str
    display_name: str
    has_submitted: bool = False

    @classmethod
    def from_dict(cls, team_id: str, data: dict[str, Any] | None) -> Team:
        """Build a team from a registry document, falling back to the id as name."""
        data = data or {}
        return cls(
            id=team_id,
            display_name=data.get(TEAM_NAME) or team_id,
            has_submitted=bool(data.get(TEAM_HAS_SUBMITTED, False)),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize for the JSON API."""
        return {
            "id": self.id,
            "name": self.display_name,
            "hasSubmitted": self.has_submitted,
        }
