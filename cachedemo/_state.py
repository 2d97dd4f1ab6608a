from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime
from threading import Lock

from cachedemo._utils import isoformat_millis, utcnow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DataStore:
    """
    An immutable snapshot of the server data.

    Handlers read one snapshot per request, so every field they render
    comes from the same update.
    """

    counter: int = 0
    last_updated: datetime = field(default_factory=utcnow)
    version: int = 1

    def to_json(self) -> dict[str, object]:
        return {
            "counter": self.counter,
            "lastUpdated": isoformat_millis(self.last_updated),
            "version": self.version,
        }


class ServerState:
    """
    Owner of the current `DataStore` snapshot.

    Updates build a new snapshot and swap the reference while holding a
    single lock. Readers never take the lock: the reference they get is
    always a complete snapshot.

    Example:
        ```python
        state = ServerState()
        state.snapshot().counter  # 0
        state.update().counter  # 1
        ```
    """

    def __init__(self, started_at: datetime | None = None) -> None:
        self.started_at = started_at if started_at is not None else utcnow()
        self._snapshot = DataStore(last_updated=self.started_at)
        self._lock = Lock()

    def snapshot(self) -> DataStore:
        return self._snapshot

    def update(self) -> DataStore:
        """
        Increment counter and version and stamp the update time.

        Returns:
            The snapshot that was just installed.
        """
        with self._lock:
            current = self._snapshot
            updated = replace(
                current,
                counter=current.counter + 1,
                last_updated=utcnow(),
                version=current.version + 1,
            )
            self._snapshot = updated

        logger.debug(
            "Data store updated: counter=%d version=%d",
            updated.counter,
            updated.version,
        )
        return updated

    def uptime(self) -> float:
        return (utcnow() - self.started_at).total_seconds()
