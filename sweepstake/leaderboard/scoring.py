"""Accuracy scoring of locked submissions against the results feed."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from sweepstake.competition.models import match_sort_key

if TYPE_CHECKING:
    from sweepstake.predictions.models import DraftPick, Submission

PENDING = "pending"
CORRECT = "correct"
WRONG = "wrong"


def tally(
    picks: Iterable[DraftPick], results: Mapping[str, str]
) -> tuple[int, int]:
    """Return ``(correct, counted)``; picks on matches without a result are skipped."""
    correct = 0
    counted = 0
    for pick in picks:
        winner = results.get(pick.match_id)
        if winner is None:
            continue
        counted += 1
        if pick.winner_name == winner:
            correct += 1
    return correct, counted


def percentage(correct: int, counted: int) -> int:
    """Whole-number percentage, halves rounded up; 0 when nothing is judged."""
    if counted <= 0:
        return 0
    return (200 * correct + counted) // (2 * counted)


def score(submission: Submission, results: Mapping[str, str]) -> int:
    """Accuracy of ``submission`` over the matches that have a result, 0..100."""
    return percentage(*tally(submission.picks.values(), results))


def pick_outcomes(
    submission: Submission, results: Mapping[str, str]
) -> list[dict[str, Any]]:
    """Per-pick rows for a "my predictions" view, ordered by match id."""
    rows = []
    for pick in sorted(
        submission.picks.values(), key=lambda p: match_sort_key(p.match_id)
    ):
        result = results.get(pick.match_id)
        if result is None:
            status = PENDING
        elif result == pick.winner_name:
            status = CORRECT
        else:
            status = WRONG
        rows.append(
            {
                "matchId": pick.match_id,
                "sideA": pick.side_a_name,
                "sideB": pick.side_b_name,
                "pick": pick.winner_name,
                "result": result,
                "status": status,
            }
        )
    return rows
