"""Core module for the sweepstake application."""

from .snapshots import Subscription
from .types import LeaderboardRow, SubmissionDocument

__all__ = ["LeaderboardRow", "Subscription", "SubmissionDocument"]
