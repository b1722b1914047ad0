"""Service layer for the team registry."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, cast

from sweepstake.core.constants import (
    COMPETITIONS_COLLECTION,
    FIRESTORE_BATCH_LIMIT,
    TEAM_HAS_SUBMITTED,
    TEAMS_COLLECTION,
)
from sweepstake.core.snapshots import Subscription
from sweepstake.errors import AlreadySubmitted, NoTeamSelected, NotFoundError

from .models import Team

if TYPE_CHECKING:
    from google.cloud.firestore_v1.base_document import DocumentSnapshot
    from google.cloud.firestore_v1.client import Client
    from google.cloud.firestore_v1.collection import CollectionReference
    from google.cloud.firestore_v1.document import DocumentReference

logger = logging.getLogger(__name__)


def _sort_key(team: Team) -> tuple[str, str]:
    return (team.display_name.casefold(), team.id)


class TeamService:
    """Service class for team registry operations."""

    @staticmethod
    def teams_ref(db: Client, competition_id: str) -> CollectionReference:
        """Return the registry collection of a competition."""
        return (
            db.collection(COMPETITIONS_COLLECTION)
            .document(competition_id)
            .collection(TEAMS_COLLECTION)
        )

    @staticmethod
    def team_ref(db: Client, competition_id: str, team_id: str) -> DocumentReference:
        """Return the registry document of one team."""
        return TeamService.teams_ref(db, competition_id).document(team_id)

    @staticmethod
    def list_teams(db: Client, competition_id: str) -> list[Team]:
        """Fetch every registered team, sorted alphabetically by name."""
        teams = [
            Team.from_dict(doc.id, doc.to_dict())
            for doc in TeamService.teams_ref(db, competition_id).stream()
            if doc.exists
        ]
        return sorted(teams, key=_sort_key)

    @staticmethod
    def get_team(db: Client, competition_id: str, team_id: str) -> Team | None:
        """Read one team straight from the registry."""
        snapshot = cast(
            "DocumentSnapshot", TeamService.team_ref(db, competition_id, team_id).get()
        )
        if not snapshot.exists:
            return None
        return Team.from_dict(snapshot.id, snapshot.to_dict())

    @staticmethod
    def get_team_names(db: Client, competition_id: str) -> dict[str, str]:
        """Map team ids to display names."""
        return {
            team.id: team.display_name
            for team in TeamService.list_teams(db, competition_id)
        }

    @staticmethod
    def select_team(db: Client, competition_id: str, team_id: str | None) -> Team:
        """Validate that a device may start predicting for ``team_id``.

        The flag is checked against the registry, not against any list the
        device fetched earlier.
        """
        if not team_id:
            raise NoTeamSelected("Please select a team")

        team = TeamService.get_team(db, competition_id, team_id)
        if team is None:
            raise NotFoundError(f"Team {team_id} is not registered.")
        if team.has_submitted:
            raise AlreadySubmitted(team.display_name)
        return team

    @staticmethod
    def subscribe_teams(
        db: Client, competition_id: str, callback: Callable[[list[Team]], None]
    ) -> Subscription:
        """Watch the registry; ``callback`` receives the full sorted team list."""

        def deliver(documents: dict) -> None:
            teams = [Team.from_dict(tid, data) for tid, data in documents.items()]
            callback(sorted(teams, key=_sort_key))

        return Subscription(
            TeamService.teams_ref(db, competition_id),
            deliver,
            name=f"{competition_id}/teams",
        )

    @staticmethod
    def reset_all(db: Client, competition_id: str) -> int:
        """Clear every team's submission flag. Submission records are kept.

        Afterwards a team can have a stored submission while its flag reads
        false; that is how a competition is re-opened without losing history.
        """
        batch = db.batch()
        operation_count = 0
        reset_count = 0

        for team_doc in TeamService.teams_ref(db, competition_id).stream():
            if not team_doc.exists:
                continue
            batch.update(team_doc.reference, {TEAM_HAS_SUBMITTED: False})
            operation_count += 1
            reset_count += 1

            if operation_count >= FIRESTORE_BATCH_LIMIT:
                batch.commit()
                batch = db.batch()
                operation_count = 0

        if operation_count > 0:
            batch.commit()

        logger.info(f"Reset submission flag for {reset_count} teams in {competition_id}")
        return reset_count
