"""Ops Map Runtime — wires settings, logging, storage and the board controller.

Invariants:
    - Logging is configured before anything else logs
    - Tables exist before the controller loads the board
    - On exit the watcher is cancelled, pending saves are flushed, and the engine disposed

Design Decisions:
    - board_runtime() is an async context manager, the same lifecycle shape as an app lifespan
"""

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterator
from dataclasses import dataclass

from opsmap.config import Settings, get_settings
from opsmap.infrastructure.database import DatabaseSessionManager, init_db
from opsmap.infrastructure.observability import setup_logging
from opsmap.infrastructure.snapshot_store import SnapshotStore
from opsmap.services.board_controller import BoardController

logger = logging.getLogger(__name__)


@dataclass
class Runtime:
    settings: Settings
    db: DatabaseSessionManager
    store: SnapshotStore
    controller: BoardController
    watch_task: asyncio.Task | None = None


@contextlib.asynccontextmanager
async def board_runtime(
    settings: Settings | None = None, watch: bool = True, configure_logging: bool = True,
) -> AsyncIterator[Runtime]:
    """Startup/shutdown lifecycle for one local board."""
    settings = settings or get_settings()
    if configure_logging:
        setup_logging(settings.log_level, settings.log_format)

    db = init_db(settings.database_url)
    await db.init_models()
    store = SnapshotStore(db, key=settings.storage_key)
    controller = BoardController(
        store,
        save_debounce_ms=settings.save_debounce_ms,
        layout_strategy=settings.layout_strategy,
    )
    await controller.start()

    runtime = Runtime(settings=settings, db=db, store=store, controller=controller)
    if watch:
        runtime.watch_task = asyncio.create_task(store.watch(settings.watch_interval_seconds))
    logger.info("Ops Map runtime started", extra={"strategy": controller.strategy.name})
    try:
        yield runtime
    finally:
        if runtime.watch_task is not None:
            runtime.watch_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await runtime.watch_task
        await controller.stop()
        await db.dispose()
        logger.info("Ops Map runtime stopped")
