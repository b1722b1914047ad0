"""Core data types for the sweepstake application."""

from typing import Dict, TypedDict  # noqa: UP035


class PickDocument(TypedDict):
    """A single pick as stored inside a submission."""

    matchId: str
    sideA: str
    sideB: str
    winner: str


class SubmissionDocument(TypedDict):
    """A locked submission as stored in Firestore and on the device."""

    teamId: str
    teamName: str
    competition: str
    timeSubmitted: str
    predictions: Dict[str, PickDocument]  # noqa: UP006


class LeaderboardRow(TypedDict):
    """One display-ready leaderboard line."""

    rank: int
    teamId: str
    teamName: str
    score: int
    correct: int
    counted: int
