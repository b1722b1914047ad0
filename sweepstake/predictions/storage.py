"""Per-device storage for drafts, the chosen team and the locked copy."""

from __future__ import annotations

import json
from collections.abc import Iterable, MutableMapping
from typing import Any

from sweepstake.core.constants import (
    STORAGE_DRAFT_KEY,
    STORAGE_LOCKED_KEY,
    STORAGE_TEAM_KEY,
)

from .models import DraftPick, Submission


def storage_key(competition_id: str, name: str) -> str:
    """Namespace a storage key by competition."""
    return f"{competition_id}:{name}"


class DeviceStorage:
    """String key/value store with JSON values.

    Wraps whatever mapping holds a device's state: the Flask session for
    browser and app clients, a plain dict in tests.
    """

    def __init__(self, backend: MutableMapping[str, Any]) -> None:
        self._backend = backend

    def get_item(self, key: str) -> Any:
        raw = self._backend.get(key)
        if raw is None:
            return None
        return json.loads(raw)

    def set_item(self, key: str, value: Any) -> None:
        self._backend[key] = json.dumps(value)

    def remove_item(self, key: str) -> None:
        self._backend.pop(key, None)

    def multi_remove(self, keys: Iterable[str]) -> None:
        for key in keys:
            self.remove_item(key)


class DraftStore:
    """In-progress picks for one competition, at most one per match."""

    def __init__(self, storage: DeviceStorage, competition_id: str) -> None:
        self.storage = storage
        self.key = storage_key(competition_id, STORAGE_DRAFT_KEY)

    def load(self) -> list[DraftPick]:
        """Picks in draft order."""
        stored = self.storage.get_item(self.key) or []
        return [DraftPick.from_dict(item) for item in stored]

    def put(self, pick: DraftPick) -> list[DraftPick]:
        """Record ``pick``, replacing any earlier pick for the same match.

        A re-picked match moves to the end of the draft.
        """
        picks = [p for p in self.load() if p.match_id != pick.match_id]
        picks.append(pick)
        self.storage.set_item(self.key, [p.to_dict() for p in picks])
        return picks

    def clear(self) -> None:
        self.storage.remove_item(self.key)

    def is_empty(self) -> bool:
        return not self.load()


class LockedCopy:
    """The device's read-only copy of its own submission."""

    def __init__(self, storage: DeviceStorage, competition_id: str) -> None:
        self.storage = storage
        self.key = storage_key(competition_id, STORAGE_LOCKED_KEY)

    def load(self) -> Submission | None:
        stored = self.storage.get_item(self.key)
        if not stored:
            return None
        return Submission.from_dict(stored)

    def save(self, submission: Submission) -> None:
        self.storage.set_item(self.key, submission.to_dict())

    def exists(self) -> bool:
        return self.storage.get_item(self.key) is not None


def selected_team_key(competition_id: str) -> str:
    return storage_key(competition_id, STORAGE_TEAM_KEY)
