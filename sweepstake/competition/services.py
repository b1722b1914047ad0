"""Service layer for competitions, the match catalog and the results feed."""

from __future__ import annotations

import datetime
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any, cast

from sweepstake.core.constants import (
    COMPETITION_DEADLINE,
    COMPETITION_NAME,
    COMPETITIONS_COLLECTION,
    MATCHES_COLLECTION,
    RESULT_WINNER,
    RESULTS_COLLECTION,
)
from sweepstake.core.snapshots import Subscription
from sweepstake.errors import DeadlinePassed, NotFoundError, ValidationError

from .models import Competition, Match, match_sort_key

if TYPE_CHECKING:
    from google.cloud.firestore_v1.base_document import DocumentSnapshot
    from google.cloud.firestore_v1.client import Client
    from google.cloud.firestore_v1.document import DocumentReference


def parse_deadline(value: Any) -> datetime.datetime | None:
    """Normalise a stored deadline to an aware UTC datetime.

    Accepts Firestore timestamps, ISO-8601 strings (with or without a ``Z``
    suffix) and epoch milliseconds. Naive values are taken as UTC.
    """
    if value is None or value == "":
        return None

    if isinstance(value, datetime.datetime):
        deadline = value
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            deadline = datetime.datetime.fromisoformat(text)
        except ValueError as e:
            raise ValidationError(f"Invalid deadline: {value!r}") from e
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        deadline = datetime.datetime.fromtimestamp(
            value / 1000, tz=datetime.timezone.utc
        )
    else:
        raise ValidationError(f"Invalid deadline: {value!r}")

    if deadline.tzinfo is None:
        deadline = deadline.replace(tzinfo=datetime.timezone.utc)
    return deadline.astimezone(datetime.timezone.utc)


def results_from_documents(documents: Mapping[str, Mapping[str, Any]]) -> dict[str, str]:
    """Turn result documents into ``{match_id: winner}``; blank winners are pending."""
    results = {}
    for match_id, data in documents.items():
        winner = (data or {}).get(RESULT_WINNER)
        if winner:
            results[str(match_id)] = str(winner)
    return results


def resolve_side_names(match: Match, team_names: Mapping[str, str]) -> tuple[str, str]:
    """Display names for both sides; sides that are team ids use the team name."""
    return (
        team_names.get(match.side_a) or match.side_a,
        team_names.get(match.side_b) or match.side_b,
    )


def utcnow() -> datetime.datetime:
    """Current time, timezone aware."""
    return datetime.datetime.now(datetime.timezone.utc)


class CompetitionService:
    """Service class for competition-level reads."""

    @staticmethod
    def competition_ref(db: Client, competition_id: str) -> DocumentReference:
        """Return the root document of a competition."""
        return db.collection(COMPETITIONS_COLLECTION).document(competition_id)

    @staticmethod
    def get_competition(db: Client, competition_id: str) -> Competition:
        """Fetch a competition's name and deadline."""
        snapshot = cast(
            "DocumentSnapshot",
            CompetitionService.competition_ref(db, competition_id).get(),
        )
        if not snapshot.exists:
            raise NotFoundError(f"Competition {competition_id} not found.")

        data = snapshot.to_dict() or {}
        return Competition(
            id=competition_id,
            name=data.get(COMPETITION_NAME) or competition_id,
            deadline=parse_deadline(data.get(COMPETITION_DEADLINE)),
        )

    @staticmethod
    def get_deadline(db: Client, competition_id: str) -> datetime.datetime | None:
        """Read the submission deadline; ``None`` when none is configured."""
        snapshot = cast(
            "DocumentSnapshot",
            CompetitionService.competition_ref(db, competition_id).get(),
        )
        if not snapshot.exists:
            return None
        return parse_deadline((snapshot.to_dict() or {}).get(COMPETITION_DEADLINE))

    @staticmethod
    def is_open(
        db: Client, competition_id: str, now: datetime.datetime | None = None
    ) -> bool:
        """Whether new submissions may still be created."""
        deadline = CompetitionService.get_deadline(db, competition_id)
        return deadline is None or (now or utcnow()) <= deadline

    @staticmethod
    def ensure_open(
        db: Client, competition_id: str, now: datetime.datetime | None = None
    ) -> None:
        """Raise ``DeadlinePassed`` once the deadline is behind ``now``."""
        deadline = CompetitionService.get_deadline(db, competition_id)
        if deadline is not None and (now or utcnow()) > deadline:
            raise DeadlinePassed(competition_id, deadline)

    @staticmethod
    def get_match_catalog(db: Client, competition_id: str) -> list[Match]:
        """Fetch the ordered match list of a competition."""
        matches = [
            Match.from_dict(doc.id, doc.to_dict())
            for doc in CompetitionService.competition_ref(db, competition_id)
            .collection(MATCHES_COLLECTION)
            .stream()
            if doc.exists
        ]
        return sorted(
            matches,
            key=lambda m: (m.order is None, m.order or 0, match_sort_key(m.id)),
        )

    @staticmethod
    def get_results(db: Client, competition_id: str) -> dict[str, str]:
        """Read the current results snapshot as ``{match_id: winner}``."""
        documents = {
            doc.id: doc.to_dict() or {}
            for doc in CompetitionService.competition_ref(db, competition_id)
            .collection(RESULTS_COLLECTION)
            .stream()
            if doc.exists
        }
        return results_from_documents(documents)

    @staticmethod
    def subscribe_results(
        db: Client, competition_id: str, callback: Callable[[dict[str, str]], None]
    ) -> Subscription:
        """Watch the results feed; every delivery is the complete mapping."""
        return Subscription(
            CompetitionService.competition_ref(db, competition_id).collection(
                RESULTS_COLLECTION
            ),
            lambda documents: callback(results_from_documents(documents)),
            name=f"{competition_id}/results",
        )
