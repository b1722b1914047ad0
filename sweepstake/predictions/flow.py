"""Team selection and drafting state machine for one device."""

from __future__ import annotations

import datetime
import enum
from typing import TYPE_CHECKING, Any

from sweepstake.competition.services import CompetitionService, resolve_side_names
from sweepstake.errors import (
    AlreadySubmitted,
    NoTeamSelected,
    NotFoundError,
    ValidationError,
)
from sweepstake.teams.models import Team
from sweepstake.teams.services import TeamService

from .models import DraftPick, Submission
from .services import SubmissionService
from .storage import DeviceStorage, DraftStore, LockedCopy, selected_team_key

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client


class FlowState(str, enum.Enum):
    """Where a device is in the predict-then-lock journey."""

    NO_TEAM_CHOSEN = "no_team_chosen"
    TEAM_CHOSEN = "team_chosen"
    DRAFTING = "drafting"
    LOCKED = "locked"


class DraftFlow:
    """Drive ``NO_TEAM_CHOSEN -> TEAM_CHOSEN -> DRAFTING -> LOCKED``.

    The state is derived from device storage every time, so a device that
    navigates away and comes back resumes where it was. ``LOCKED`` is only
    entered through a successful ``submit`` and only left through ``forget``,
    which is what the administrative reset does on the invoking device.
    """

    def __init__(self, storage: DeviceStorage, competition_id: str) -> None:
        self.storage = storage
        self.competition_id = competition_id
        self.drafts = DraftStore(storage, competition_id)
        self.locked = LockedCopy(storage, competition_id)
        self._team_key = selected_team_key(competition_id)

    @property
    def team_id(self) -> str | None:
        return self.storage.get_item(self._team_key)

    @property
    def state(self) -> FlowState:
        if self.locked.exists():
            return FlowState.LOCKED
        if not self.team_id:
            return FlowState.NO_TEAM_CHOSEN
        if self.drafts.is_empty():
            return FlowState.TEAM_CHOSEN
        return FlowState.DRAFTING

    def _ensure_not_locked(self) -> None:
        if self.state is FlowState.LOCKED:
            locked = self.locked.load()
            raise AlreadySubmitted(locked.team_name if locked else None)

    def choose_team(self, db: Client, team_id: str | None) -> Team:
        """Select a team that has not entered yet; the state does not move otherwise."""
        self._ensure_not_locked()
        team = TeamService.select_team(db, self.competition_id, team_id)
        self.storage.set_item(self._team_key, team.id)
        return team

    def record_pick(
        self,
        db: Client,
        match_id: str,
        winner_name: str,
        now: datetime.datetime | None = None,
    ) -> list[DraftPick]:
        """Pick ``winner_name`` for ``match_id``; re-picking a match overwrites it."""
        self._ensure_not_locked()
        if not self.team_id:
            raise NoTeamSelected()
        CompetitionService.ensure_open(db, self.competition_id, now)

        catalog = CompetitionService.get_match_catalog(db, self.competition_id)
        match = next((m for m in catalog if m.id == str(match_id)), None)
        if match is None:
            raise NotFoundError(f"Match {match_id} is not in this competition.")

        side_a, side_b = resolve_side_names(
            match, TeamService.get_team_names(db, self.competition_id)
        )
        if winner_name not in (side_a, side_b):
            raise ValidationError(f"{winner_name} is not playing in this match.")

        return self.drafts.put(DraftPick(match.id, side_a, side_b, winner_name))

    def submit(self, db: Client, now: datetime.datetime | None = None) -> Submission:
        """Lock the draft, then keep a local copy and drop the draft."""
        self._ensure_not_locked()
        submission = SubmissionService.submit(
            db, self.competition_id, self.team_id, self.drafts.load(), now
        )
        self.locked.save(submission)
        self.drafts.clear()
        return submission

    def locked_submission(self) -> Submission | None:
        return self.locked.load()

    def is_stale(self, db: Client) -> bool:
        """True when the local lock no longer matches the registry.

        After an administrative reset run from another device the team's flag
        is false again while this device still holds its locked copy.
        """
        submission = self.locked.load()
        if submission is None:
            return False
        team = TeamService.get_team(db, self.competition_id, submission.team_id)
        return team is None or not team.has_submitted

    def forget(self) -> None:
        """Clear the chosen team, the draft and the locked copy."""
        self.storage.multi_remove([self._team_key, self.drafts.key, self.locked.key])

    def catalog_view(self, db: Client) -> list[dict[str, Any]]:
        """The match catalog with display names and this device's current picks."""
        team_names = TeamService.get_team_names(db, self.competition_id)
        picked = {pick.match_id: pick.winner_name for pick in self.drafts.load()}
        rows = []
        for match in CompetitionService.get_match_catalog(db, self.competition_id):
            side_a, side_b = resolve_side_names(match, team_names)
            rows.append(
                {
                    "id": match.id,
                    "sideA": side_a,
                    "sideB": side_b,
                    "winner": picked.get(match.id),
                }
            )
        return rows
