"""Snapshot Store — local persistence adapter for whole-board snapshots.

Invariants:
    - load() returns the stored snapshot dict or None; it never normalizes
    - save() replaces the row for this key wholesale (last write wins)
    - Listeners are notified with the new snapshot when an external writer changed the row
    - A failing listener is logged and never prevents the others from running

Design Decisions:
    - Change detection compares the stored updatedAt with the last one this store
      read or wrote, so the store's own saves are not echoed back
    - watch() polls check_for_changes(); cancellation is the only way to stop it
"""

import asyncio
import logging

from sqlalchemy import select

from opsmap.core.repository_protocols import SnapshotListener, Unsubscribe
from opsmap.infrastructure.database import DatabaseSessionManager
from opsmap.models.board_snapshot import BoardSnapshotRecord

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "opsMapStateV1"


def _stamp_of(snapshot: dict | None) -> str:
    if not isinstance(snapshot, dict):
        return ""
    stamp = snapshot.get("updatedAt")
    return stamp if isinstance(stamp, str) else ""


class SnapshotStore:
    """SQLAlchemy-backed implementation of SnapshotRepository."""

    def __init__(self, db: DatabaseSessionManager, key: str = DEFAULT_STORAGE_KEY):
        self._db = db
        self.key = key
        self._listeners: list[SnapshotListener] = []
        self._last_seen_stamp: str | None = None

    async def _read(self) -> BoardSnapshotRecord | None:
        async with self._db.session() as session:
            result = await session.execute(
                select(BoardSnapshotRecord).where(BoardSnapshotRecord.key == self.key),
            )
            return result.scalar_one_or_none()

    async def load(self) -> dict | None:
        record = await self._read()
        snapshot = dict(record.payload) if record and isinstance(record.payload, dict) else None
        self._last_seen_stamp = _stamp_of(snapshot)
        return snapshot

    async def save(self, snapshot: dict) -> None:
        stamp = _stamp_of(snapshot)
        async with self._db.session() as session:
            record = await session.get(BoardSnapshotRecord, self.key)
            if record is None:
                session.add(BoardSnapshotRecord(key=self.key, payload=snapshot, updated_at=stamp))
            else:
                record.payload = snapshot
                record.updated_at = stamp
            await session.commit()
        self._last_seen_stamp = stamp
        logger.debug("Snapshot saved", extra={"operation": "save"})

    def subscribe(self, on_change: SnapshotListener) -> Unsubscribe:
        self._listeners.append(on_change)

        def unsubscribe() -> None:
            if on_change in self._listeners:
                self._listeners.remove(on_change)

        return unsubscribe

    def _notify(self, snapshot: dict | None) -> None:
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception as e:
                logger.error(f"Snapshot listener failed: {e}", exc_info=True)

    async def check_for_changes(self) -> bool:
        """Re-read the row; notify listeners if another writer changed it."""
        record = await self._read()
        snapshot = dict(record.payload) if record and isinstance(record.payload, dict) else None
        stamp = _stamp_of(snapshot)
        if self._last_seen_stamp is not None and stamp == self._last_seen_stamp:
            return False
        self._last_seen_stamp = stamp
        self._notify(snapshot)
        return True

    async def watch(self, interval_seconds: float) -> None:
        """Poll for external changes until cancelled."""
        while True:
            await asyncio.sleep(interval_seconds)
            try:
                await self.check_for_changes()
            except Exception as e:
                logger.warning(f"Snapshot watch iteration failed: {e}")
