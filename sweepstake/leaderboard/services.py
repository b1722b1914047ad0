"""Service layer for the leaderboard."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable, Mapping
from typing import TYPE_CHECKING

from sweepstake.competition.services import CompetitionService
from sweepstake.core.types import LeaderboardRow
from sweepstake.predictions.services import SubmissionService

from .scoring import percentage, tally

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client

    from sweepstake.core.snapshots import Subscription
    from sweepstake.predictions.models import Submission

logger = logging.getLogger(__name__)

LeaderboardListener = Callable[[list[LeaderboardRow]], None]


def rank(
    submissions: Iterable[Submission], results: Mapping[str, str]
) -> list[LeaderboardRow]:
    """Score every submission and order best first.

    Ties on score are ordered by team name (case-insensitive), then team id,
    so the same inputs always give the same table. Tied scores share a rank
    (1, 2, 2, 4).
    """
    scored = []
    for submission in submissions:
        correct, counted = tally(submission.picks.values(), results)
        scored.append((percentage(correct, counted), correct, counted, submission))

    scored.sort(
        key=lambda row: (-row[0], row[3].team_name.casefold(), row[3].team_id)
    )

    rows: list[LeaderboardRow] = []
    previous_score = None
    current_rank = 0
    for position, (value, correct, counted, submission) in enumerate(scored, 1):
        if value != previous_score:
            current_rank = position
            previous_score = value
        rows.append(
            {
                "rank": current_rank,
                "teamId": submission.team_id,
                "teamName": submission.team_name,
                "score": value,
                "correct": correct,
                "counted": counted,
            }
        )
    return rows


class LiveLeaderboard:
    """Continuously recomputed ranking over two full-snapshot feeds.

    Each feed replaces what was held before; the table is rebuilt from both
    current snapshots on every change, so the order in which submissions and
    results arrive never matters. Until the results feed has delivered, every
    match counts as pending.
    """

    def __init__(self, listener: LeaderboardListener) -> None:
        self._listener = listener
        self._lock = threading.Lock()
        self._submissions: list[Submission] | None = None
        self._results: dict[str, str] = {}
        self.rows: list[LeaderboardRow] = []

    def on_submissions(self, submissions: list[Submission]) -> None:
        with self._lock:
            self._submissions = list(submissions)
            self._recompute()

    def on_results(self, results: Mapping[str, str]) -> None:
        with self._lock:
            self._results = dict(results)
            self._recompute()

    def _recompute(self) -> None:
        if self._submissions is None:
            return
        self.rows = rank(self._submissions, self._results)
        self._listener(self.rows)


class LeaderboardWatch:
    """Handle over the two subscriptions feeding a ``LiveLeaderboard``."""

    def __init__(self, board: LiveLeaderboard, subscriptions: list[Subscription]):
        self.board = board
        self.subscriptions = subscriptions

    def close(self) -> None:
        for subscription in self.subscriptions:
            subscription.close()


class LeaderboardService:
    """Service class for leaderboard reads."""

    @staticmethod
    def get_leaderboard(db: Client, competition_id: str) -> list[LeaderboardRow]:
        """One-shot ranking from the current submissions and results."""
        return rank(
            SubmissionService.list_submissions(db, competition_id),
            CompetitionService.get_results(db, competition_id),
        )

    @staticmethod
    def watch(
        db: Client, competition_id: str, listener: LeaderboardListener
    ) -> LeaderboardWatch:
        """Keep ``listener`` supplied with the ranking as either feed changes."""
        board = LiveLeaderboard(listener)
        results_sub = CompetitionService.subscribe_results(
            db, competition_id, board.on_results
        )
        submissions_sub = SubmissionService.subscribe_submissions(
            db, competition_id, board.on_submissions
        )
        logger.debug(f"Watching leaderboard for {competition_id}")
        return LeaderboardWatch(board, [results_sub, submissions_sub])
