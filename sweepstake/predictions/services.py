"""Service layer for turning drafts into locked submissions."""

from __future__ import annotations

import datetime
import logging
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any, cast

from firebase_admin import firestore
from google.api_core.exceptions import GoogleAPIError

from sweepstake.competition.models import Match
from sweepstake.competition.services import CompetitionService, utcnow
from sweepstake.core.constants import SUBMISSIONS_COLLECTION, TEAM_HAS_SUBMITTED
from sweepstake.core.snapshots import Subscription
from sweepstake.errors import (
    AlreadySubmitted,
    NothingToSubmit,
    NoTeamSelected,
    NotFoundError,
    PersistenceFailure,
    ValidationError,
)
from sweepstake.teams.models import Team
from sweepstake.teams.services import TeamService

from .models import DraftPick, Submission, build_submission

if TYPE_CHECKING:
    from google.cloud.firestore_v1.base_document import DocumentSnapshot
    from google.cloud.firestore_v1.client import Client
    from google.cloud.firestore_v1.collection import CollectionReference
    from google.cloud.firestore_v1.document import DocumentReference
    from google.cloud.firestore_v1.transaction import Transaction

logger = logging.getLogger(__name__)


class SubmissionService:
    """Service class for submission records."""

    @staticmethod
    def submissions_ref(db: Client, competition_id: str) -> CollectionReference:
        """Return the submission collection of a competition."""
        return CompetitionService.competition_ref(db, competition_id).collection(
            SUBMISSIONS_COLLECTION
        )

    @staticmethod
    def get_submission(
        db: Client, competition_id: str, team_id: str
    ) -> Submission | None:
        """Read one team's stored submission."""
        snapshot = cast(
            "DocumentSnapshot",
            SubmissionService.submissions_ref(db, competition_id)
            .document(team_id)
            .get(),
        )
        if not snapshot.exists:
            return None
        return Submission.from_dict(snapshot.to_dict() or {}, team_id=snapshot.id)

    @staticmethod
    def list_submissions(db: Client, competition_id: str) -> list[Submission]:
        """Read every stored submission of a competition."""
        return [
            Submission.from_dict(doc.to_dict() or {}, team_id=doc.id)
            for doc in SubmissionService.submissions_ref(db, competition_id).stream()
            if doc.exists
        ]

    @staticmethod
    def subscribe_submissions(
        db: Client,
        competition_id: str,
        callback: Callable[[list[Submission]], None],
    ) -> Subscription:
        """Watch the submission set; every delivery is the complete set."""

        def deliver(documents: dict[str, dict[str, Any]]) -> None:
            callback(
                [
                    Submission.from_dict(data, team_id=team_id)
                    for team_id, data in documents.items()
                ]
            )

        return Subscription(
            SubmissionService.submissions_ref(db, competition_id),
            deliver,
            name=f"{competition_id}/submissions",
        )

    @staticmethod
    def validate_picks(catalog: Iterable[Match], picks: list[DraftPick]) -> None:
        """Check every pick refers to a catalog match and one of its two sides."""
        known_ids = {match.id for match in catalog}
        seen: set[str] = set()
        for pick in picks:
            if pick.match_id not in known_ids:
                raise ValidationError(f"Match {pick.match_id} is not in this competition.")
            if pick.match_id in seen:
                raise ValidationError(f"Match {pick.match_id} was picked more than once.")
            if pick.winner_name not in (pick.side_a_name, pick.side_b_name):
                raise ValidationError(
                    f"{pick.winner_name} is not playing in match {pick.match_id}."
                )
            seen.add(pick.match_id)

    @staticmethod
    def _lock_submission_transaction(  # noqa: PLR0913
        transaction: Transaction,
        team_ref: DocumentReference,
        submission_ref: DocumentReference,
        competition_id: str,
        picks: list[DraftPick],
        now: datetime.datetime,
    ) -> Submission:
        """Check the team is still open and lock its submission.

        Runs inside a Firestore transaction, so the flag check and both writes
        commit together or not at all; a second device racing on the same team
        fails its commit and re-runs into ``AlreadySubmitted``. The record is
        queued before the flag so that, on a store without transactions, the
        worst partial state is a record whose team can still retry.
        """
        team_snapshot = cast("DocumentSnapshot", team_ref.get(transaction=transaction))
        if not team_snapshot.exists:
            raise NotFoundError(f"Team {team_ref.id} is not registered.")

        team = Team.from_dict(team_ref.id, team_snapshot.to_dict())
        if team.has_submitted:
            raise AlreadySubmitted(team.display_name)

        previous = cast(
            "DocumentSnapshot", submission_ref.get(transaction=transaction)
        )
        if previous.exists:
            logger.warning(
                f"Replacing submission from a previous cycle for {team.id} "
                f"in {competition_id}"
            )

        submission = build_submission(
            team.id, team.display_name, competition_id, picks, now
        )
        transaction.set(submission_ref, submission.to_dict())
        transaction.update(team_ref, {TEAM_HAS_SUBMITTED: True})
        return submission

    @staticmethod
    def submit(
        db: Client,
        competition_id: str,
        team_id: str | None,
        picks: Iterable[DraftPick],
        now: datetime.datetime | None = None,
    ) -> Submission:
        """Lock ``picks`` as ``team_id``'s one submission for the competition.

        Validation failures raise before anything is written. Datastore
        failures during the lock surface as ``PersistenceFailure``, and so does
        the ``ValueError`` ``transactional`` raises once its retries run out.
        """
        if not team_id:
            raise NoTeamSelected()

        picks = list(picks)
        if not picks:
            raise NothingToSubmit()

        now = now or utcnow()
        CompetitionService.ensure_open(db, competition_id, now)
        SubmissionService.validate_picks(
            CompetitionService.get_match_catalog(db, competition_id), picks
        )

        team_ref = TeamService.team_ref(db, competition_id, team_id)
        submission_ref = SubmissionService.submissions_ref(
            db, competition_id
        ).document(team_id)

        transaction = db.transaction()
        try:
            submission = firestore.transactional(
                SubmissionService._lock_submission_transaction
            )(transaction, team_ref, submission_ref, competition_id, picks, now)
        except (GoogleAPIError, ValueError) as e:
            logger.error(
                f"Error locking submission for {team_id} in {competition_id}: {e}"
            )
            raise PersistenceFailure() from e

        logger.info(
            f"Locked {len(submission.picks)} picks for {team_id} in {competition_id}"
        )
        return submission
