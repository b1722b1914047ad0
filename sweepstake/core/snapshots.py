"""Live Firestore subscriptions that always deliver a complete snapshot."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from google.cloud.firestore_v1.base_document import DocumentSnapshot

logger = logging.getLogger(__name__)

SnapshotCallback = Callable[[dict[str, dict[str, Any]]], None]


def documents_to_dict(
    snapshots: Iterable[DocumentSnapshot],
) -> dict[str, dict[str, Any]]:
    """Convert document snapshots into a plain mapping of id -> data."""
    return {doc.id: doc.to_dict() or {} for doc in snapshots if doc.exists}


class Subscription:
    """Observer handle over a collection's ``on_snapshot`` watch.

    Every delivery is the full current state of the collection, converted to a
    plain ``{document_id: data}`` mapping. Consumers must treat each delivery as
    a replacement of everything they held before; nothing about ordering
    between two different subscriptions is promised.

    The Firestore watch calls back from its own thread and may still fire after
    ``unsubscribe`` has been requested, so deliveries are gated on ``closed``
    under a lock: once ``close()`` returns, the callback is never invoked again.
    """

    def __init__(self, query: Any, callback: SnapshotCallback, name: str = "") -> None:
        """Start watching ``query`` and forward snapshots to ``callback``."""
        self.name = name or repr(query)
        self._callback = callback
        self._lock = threading.RLock()
        self._closed = False
        self._watch = query.on_snapshot(self._on_snapshot)

    @property
    def closed(self) -> bool:
        """Whether the subscription has been released."""
        return self._closed

    def _on_snapshot(self, snapshots: Any, changes: Any, read_time: Any) -> None:
        with self._lock:
            if self._closed:
                logger.debug(f"Dropping late snapshot for closed {self.name}")
                return
            self._callback(documents_to_dict(snapshots))

    def close(self) -> None:
        """Stop the watch; idempotent."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
        watch = self._watch
        if watch is not None:
            watch.unsubscribe()
        logger.debug(f"Closed subscription {self.name}")

    def __enter__(self) -> Subscription:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
