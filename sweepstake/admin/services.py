"""Service layer for admin-related operations."""

from __future__ import annotations

import datetime
import logging
import random
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from faker import Faker

from sweepstake.competition.services import (
    CompetitionService,
    resolve_side_names,
    utcnow,
)
from sweepstake.core.constants import (
    COMPETITION_DEADLINE,
    COMPETITION_NAME,
    DEMO_TEAM_COUNT,
    FIRESTORE_BATCH_LIMIT,
    MATCH_ORDER,
    MATCH_SIDE_A,
    MATCH_SIDE_B,
    MATCHES_COLLECTION,
    RESULT_WINNER,
    RESULTS_COLLECTION,
    TEAM_HAS_SUBMITTED,
    TEAM_NAME,
)
from sweepstake.errors import NotFoundError, ValidationError
from sweepstake.predictions.models import isoformat_utc
from sweepstake.predictions.services import SubmissionService
from sweepstake.teams.services import TeamService

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client

logger = logging.getLogger(__name__)


class AdminService:
    """Service class for competition administration."""

    @staticmethod
    def provision_competition(  # noqa: PLR0913
        db: Client,
        competition_id: str,
        name: str,
        deadline: datetime.datetime | None,
        teams: Mapping[str, str],
        matches: Iterable[Mapping[str, Any]],
    ) -> dict[str, int]:
        """Create a competition with its registry and catalog.

        ``teams`` maps team ids to display names; every team starts with its
        submission flag cleared. ``matches`` are ``{id, sideA, sideB}`` in
        catalog order.
        """
        matches = list(matches)
        for match in matches:
            if not match.get("id") or not match.get(MATCH_SIDE_A) or not match.get(
                MATCH_SIDE_B
            ):
                raise ValidationError("Every match needs an id, sideA and sideB.")
            if match[MATCH_SIDE_A] == match[MATCH_SIDE_B]:
                raise ValidationError(f"Match {match['id']} has the same two sides.")

        competition_ref = CompetitionService.competition_ref(db, competition_id)
        competition_ref.set(
            {
                COMPETITION_NAME: name,
                COMPETITION_DEADLINE: isoformat_utc(deadline) if deadline else None,
            },
            merge=True,
        )

        batch = db.batch()
        operation_count = 0

        def queue(ref: Any, data: dict[str, Any]) -> None:
            nonlocal batch, operation_count
            batch.set(ref, data)
            operation_count += 1
            if operation_count >= FIRESTORE_BATCH_LIMIT:
                batch.commit()
                batch = db.batch()
                operation_count = 0

        for team_id, team_name in teams.items():
            queue(
                TeamService.team_ref(db, competition_id, team_id),
                {TEAM_NAME: team_name, TEAM_HAS_SUBMITTED: False},
            )

        matches_ref = competition_ref.collection(MATCHES_COLLECTION)
        for order, match in enumerate(matches):
            queue(
                matches_ref.document(str(match["id"])),
                {
                    MATCH_SIDE_A: match[MATCH_SIDE_A],
                    MATCH_SIDE_B: match[MATCH_SIDE_B],
                    MATCH_ORDER: order,
                },
            )

        if operation_count > 0:
            batch.commit()

        logger.info(
            f"Provisioned {competition_id} with {len(teams)} teams "
            f"and {len(matches)} matches"
        )
        return {"teams": len(teams), "matches": len(matches)}

    @staticmethod
    def record_result(
        db: Client, competition_id: str, match_id: str, winner: str
    ) -> dict[str, str]:
        """Publish the winner of a match; the winner must be one of its sides."""
        catalog = CompetitionService.get_match_catalog(db, competition_id)
        match = next((m for m in catalog if m.id == str(match_id)), None)
        if match is None:
            raise NotFoundError(f"Match {match_id} is not in this competition.")

        sides = resolve_side_names(
            match, TeamService.get_team_names(db, competition_id)
        )
        if winner not in sides:
            raise ValidationError(f"{winner} did not play in match {match_id}.")

        CompetitionService.competition_ref(db, competition_id).collection(
            RESULTS_COLLECTION
        ).document(match.id).set({RESULT_WINNER: winner})
        logger.info(f"Result recorded for {competition_id}/{match.id}: {winner}")
        return {"matchId": match.id, "winner": winner}

    @staticmethod
    def find_dangling_submissions(
        db: Client, competition_id: str
    ) -> dict[str, list[str]]:
        """List teams whose submission record and flag disagree.

        ``unflagged`` holds teams with a record but a cleared flag (expected
        after a reset, or a lock that never flipped the flag); ``missing`` holds
        flagged teams with no record.
        """
        flagged = {
            team.id
            for team in TeamService.list_teams(db, competition_id)
            if team.has_submitted
        }
        recorded = {
            submission.team_id
            for submission in SubmissionService.list_submissions(db, competition_id)
        }
        return {
            "unflagged": sorted(recorded - flagged),
            "missing": sorted(flagged - recorded),
        }

    @staticmethod
    def generate_demo_competition(
        db: Client,
        competition_id: str,
        team_count: int = DEMO_TEAM_COUNT,
        days_open: int = 7,
    ) -> dict[str, int]:
        """Provision a competition with fake teams and a round of fixtures."""
        if team_count < 2:
            raise ValidationError("A competition needs at least two teams.")

        fake = Faker()
        teams = {}
        while len(teams) < team_count:
            team_name = f"{fake.city()} {fake.word().title()}s"
            team_id = team_name.lower().replace(" ", "-")
            teams.setdefault(team_id, team_name)

        team_ids = list(teams)
        random.shuffle(team_ids)  # nosec
        matches = [
            {"id": str(index + 1), MATCH_SIDE_A: side_a, MATCH_SIDE_B: side_b}
            for index, (side_a, side_b) in enumerate(
                zip(team_ids[0::2], team_ids[1::2])
            )
        ]

        return AdminService.provision_competition(
            db,
            competition_id,
            f"{fake.city()} Sweepstake",
            utcnow() + datetime.timedelta(days=days_open),
            teams,
            matches,
        )
