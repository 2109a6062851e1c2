"""Board Controller — holds the single current BoardState and wires core, layout and storage.

Invariants:
    - self.state is only ever replaced wholesale, by apply()
    - Every mutation method returns True iff the snapshot changed (reference inequality)
    - Accepted mutations schedule ONE debounced save; rapid edits collapse into the last state
    - Save failures are logged as warnings and never raised to the caller
    - External snapshots are normalized and applied without persisting; a snapshot whose
      updatedAt equals the current one is ignored
    - Imports are validated and normalized before apply_import replaces the board atomically

Design Decisions:
    - Debounce via a replaceable asyncio task: no rate limiting in the core
    - Outside a running event loop, saves are deferred until flush()
"""

import asyncio
import contextlib
import logging
from collections.abc import Mapping
from dataclasses import dataclass

from opsmap.core import campaign_ops, project_ops
from opsmap.core.board_snapshot import board_state_to_snapshot, normalize_state
from opsmap.core.board_state import BoardState, create_empty_state
from opsmap.core.board_summary import BoardSummary, summarize_board
from opsmap.core.errors import OpsMapError
from opsmap.core.layout_strategies import (
    PlacementStrategy, RingPlacement, SlotPlacement, get_strategy,
)
from opsmap.core.repository_protocols import SnapshotRepository, Unsubscribe
from opsmap.services.transfer_codec import (
    ImportResult, serialize_envelope, suggest_export_filename, unwrap, wrap,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImportPreview:
    """What an import would replace, shown before the user confirms."""
    incoming: ImportResult
    current: BoardSummary


class BoardController:
    """Outer loop around the pure board operations."""

    def __init__(
        self,
        store: SnapshotRepository,
        save_debounce_ms: int = 220,
        layout_strategy: str | PlacementStrategy = "ring",
    ):
        self.state: BoardState = create_empty_state()
        self._store = store
        self._debounce_seconds = max(0, save_debounce_ms) / 1000
        self.strategy = (
            get_strategy(layout_strategy) if isinstance(layout_strategy, str) else layout_strategy
        )
        self._save_task: asyncio.Task | None = None
        self._save_pending = False
        self._unsubscribe: Unsubscribe | None = None

    # --- Lifecycle ------------------------------------------------------------

    async def start(self) -> None:
        """Load the stored board (normalized, not re-persisted) and subscribe to changes."""
        try:
            raw = await self._store.load()
        except OpsMapError as e:
            logger.warning(f"Failed to load board, starting empty: {e.message}")
            raw = None
        self.apply(normalize_state(raw), persist=False)
        self._unsubscribe = self._store.subscribe(self.handle_external_snapshot)
        logger.info(
            "Board loaded",
            extra={
                "campaign_count": len(self.state.campaigns),
                "project_count": len(self.state.projects),
            },
        )

    async def stop(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        await self.flush()

    # --- State replacement ----------------------------------------------------

    def apply(self, next_state: BoardState, persist: bool = True) -> bool:
        changed = next_state is not self.state
        self.state = next_state
        if changed and persist:
            self._schedule_save()
        return changed

    def handle_external_snapshot(self, snapshot: dict | None) -> bool:
        """Replace the board with an externally observed snapshot (last applied wins)."""
        incoming = normalize_state(snapshot)
        if incoming.updated_at == self.state.updated_at:
            return False
        logger.info("Applying external board snapshot", extra={"operation": "external_apply"})
        return self.apply(incoming, persist=False)

    @property
    def summary(self) -> BoardSummary:
        return summarize_board(self.state)

    # --- Persistence ----------------------------------------------------------

    def _schedule_save(self) -> None:
        self._save_pending = True
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        if self._save_task is not None and not self._save_task.done():
            self._save_task.cancel()
        self._save_task = loop.create_task(self._save_later())

    async def _save_later(self) -> None:
        await asyncio.sleep(self._debounce_seconds)
        await self._save_now()

    async def _save_now(self) -> None:
        saving = self.state
        try:
            await self._store.save(board_state_to_snapshot(saving))
        except Exception as e:
            logger.warning(f"Failed to save board: {e}", extra={"operation": "save"})
            return
        # A newer state applied mid-save still needs its own write.
        if self.state is saving:
            self._save_pending = False

    async def flush(self) -> None:
        """Cancel the debounce timer and write any pending change now."""
        task, self._save_task = self._save_task, None
        if task is not None and not task.done():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        if self._save_pending:
            await self._save_now()

    # --- Campaigns ------------------------------------------------------------

    def add_campaign(self, name: str, color: str | None = None) -> bool:
        return self.apply(campaign_ops.add_campaign(self.state, {"name": name, "color": color}))

    def rename_campaign(self, campaign_id: str, name: str) -> bool:
        return self.apply(campaign_ops.rename_campaign(self.state, campaign_id, name))

    def update_campaign_color(self, campaign_id: str, color: str) -> bool:
        return self.apply(campaign_ops.update_campaign_color(self.state, campaign_id, color))

    def update_campaign_mission(self, campaign_id: str, mission: str) -> bool:
        return self.apply(campaign_ops.update_campaign_mission(self.state, campaign_id, mission))

    def reposition_campaign(self, campaign_id: str, position: object) -> bool:
        return self.apply(campaign_ops.reposition_campaign(self.state, campaign_id, position))

    def delete_campaign(self, campaign_id: str) -> bool:
        return self.apply(campaign_ops.delete_campaign(self.state, campaign_id))

    # --- Projects -------------------------------------------------------------

    def add_project(self, draft: Mapping) -> bool:
        return self.apply(project_ops.add_project(self.state, draft))

    def update_project(self, project_id: str, patch: Mapping) -> bool:
        return self.apply(project_ops.update_project(self.state, project_id, patch))

    def delete_project(self, project_id: str) -> bool:
        return self.apply(project_ops.delete_project(self.state, project_id))

    # --- Layout ---------------------------------------------------------------

    def layout(self, viewport: object) -> RingPlacement | SlotPlacement:
        """Place the board; a ring pass that seeded or clamped campaigns is persisted."""
        placement = self.strategy.place(self.state, viewport)
        if isinstance(placement, RingPlacement) and placement.changed:
            self.apply(campaign_ops.apply_campaign_positions(self.state, placement.campaigns))
        return placement

    # --- Export / import ------------------------------------------------------

    def export_text(self) -> str:
        return serialize_envelope(wrap(self.state))

    def export_filename(self) -> str:
        return suggest_export_filename()

    def preview_import(self, raw_text: str | bytes) -> ImportPreview:
        """Validate an import without applying it. Raises TransferFormatError."""
        return ImportPreview(incoming=unwrap(raw_text), current=self.summary)

    def apply_import(self, preview: ImportPreview) -> bool:
        changed = self.apply(preview.incoming.snapshot)
        logger.info(
            "Board replaced from import",
            extra={
                "campaign_count": preview.incoming.summary.campaign_count,
                "project_count": preview.incoming.summary.project_count,
            },
        )
        return changed
