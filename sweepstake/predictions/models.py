"""Data models for drafts and locked submissions."""

from __future__ import annotations

import datetime
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from sweepstake.core.constants import (
    LEGACY_PICK_MATCH_ID,
    LEGACY_PICK_SIDE_A,
    LEGACY_PICK_SIDE_B,
    PICK_MATCH_ID,
    PICK_SIDE_A,
    PICK_SIDE_B,
    PICK_WINNER,
    SUBMISSION_COMPETITION,
    SUBMISSION_PREDICTIONS,
    SUBMISSION_TEAM_ID,
    SUBMISSION_TEAM_NAME,
    SUBMISSION_TIME,
)
from sweepstake.core.types import PickDocument, SubmissionDocument

logger = logging.getLogger(__name__)


def _stored_match_id(data: Mapping[str, Any]) -> Any:
    match_id = data.get(PICK_MATCH_ID)
    if match_id is None:
        match_id = data.get(LEGACY_PICK_MATCH_ID)
    return match_id


@dataclass(frozen=True)
class DraftPick:
    """One predicted winner for one match."""

    match_id: str
    side_a_name: str
    side_b_name: str
    winner_name: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> DraftPick:
        """Build a pick from its stored form.

        Picks saved by the first mobile client use ``id``, ``teamA`` and
        ``teamB``; both shapes are read.
        """
        match_id = _stored_match_id(data)
        if match_id is None:
            raise KeyError(PICK_MATCH_ID)
        return cls(
            match_id=str(match_id),
            side_a_name=str(data.get(PICK_SIDE_A, data.get(LEGACY_PICK_SIDE_A, ""))),
            side_b_name=str(data.get(PICK_SIDE_B, data.get(LEGACY_PICK_SIDE_B, ""))),
            winner_name=str(data.get(PICK_WINNER, "")),
        )

    def to_dict(self) -> PickDocument:
        """Stored form of the pick."""
        return {
            PICK_MATCH_ID: self.match_id,
            PICK_SIDE_A: self.side_a_name,
            PICK_SIDE_B: self.side_b_name,
            PICK_WINNER: self.winner_name,
        }


@dataclass(frozen=True)
class Submission:
    """A team's locked predictions. Never edited once written."""

    team_id: str
    team_name: str
    competition_id: str
    submitted_at_iso: str
    picks: dict[str, DraftPick] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], team_id: str = "") -> Submission:
        """Build a submission from a stored record.

        Records written by older clients have no ``teamId``; the document id is
        used instead. Picks without a match id are skipped.
        """
        resolved_id = data.get(SUBMISSION_TEAM_ID) or team_id
        raw_picks = data.get(SUBMISSION_PREDICTIONS) or {}
        if isinstance(raw_picks, list):
            raw_picks = dict(enumerate(raw_picks))

        picks = {}
        for key, value in raw_picks.items():
            if not value:
                continue
            if not isinstance(value, Mapping) or _stored_match_id(value) is None:
                logger.warning(f"Skipping unreadable pick {key} for {resolved_id}")
                continue
            picks[str(key)] = DraftPick.from_dict(value)

        return cls(
            team_id=resolved_id,
            team_name=data.get(SUBMISSION_TEAM_NAME) or resolved_id,
            competition_id=data.get(SUBMISSION_COMPETITION, ""),
            submitted_at_iso=data.get(SUBMISSION_TIME, ""),
            picks=picks,
        )

    def to_dict(self) -> SubmissionDocument:
        """Stored form of the submission."""
        return {
            SUBMISSION_TEAM_ID: self.team_id,
            SUBMISSION_TEAM_NAME: self.team_name,
            SUBMISSION_COMPETITION: self.competition_id,
            SUBMISSION_TIME: self.submitted_at_iso,
            SUBMISSION_PREDICTIONS: {
                key: pick.to_dict() for key, pick in self.picks.items()
            },
        }


def isoformat_utc(moment: datetime.datetime) -> str:
    """Format like a JavaScript ``toISOString``: UTC, milliseconds, ``Z``."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=datetime.timezone.utc)
    moment = moment.astimezone(datetime.timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_submission(
    team_id: str,
    team_name: str,
    competition_id: str,
    picks: Iterable[DraftPick],
    now: datetime.datetime,
) -> Submission:
    """Freeze a draft into a submission, keyed by position in the draft."""
    return Submission(
        team_id=team_id,
        team_name=team_name,
        competition_id=competition_id,
        submitted_at_iso=isoformat_utc(now),
        picks={str(index): pick for index, pick in enumerate(picks)},
    )
