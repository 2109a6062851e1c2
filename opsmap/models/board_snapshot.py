"""Board Snapshot ORM — one row per storage key holding the whole board as JSON.

Invariants:
    - key is the primary key (one snapshot per key, replaced wholesale on save)
    - payload is the JSON snapshot exactly as produced by board_state_to_snapshot
    - updated_at mirrors payload["updatedAt"] for cheap change detection

Design Decisions:
    - JSON column over normalized tables: the board is small and always loaded whole
"""

from datetime import datetime, timezone

from sqlalchemy import JSON, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from opsmap.db.base import Base


class BoardSnapshotRecord(Base):
    """Persisted board snapshot."""
    __tablename__ = "board_snapshots"

    key: Mapped[str] = mapped_column(String(64), primary_key=True)
    payload: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    updated_at: Mapped[str] = mapped_column(String(40), nullable=False, default="")
    saved_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
