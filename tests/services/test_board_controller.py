"""Board controller tests — lifecycle, debounced saves, external sync, layout, import.

Tests cover:
    - start() normalizes the stored snapshot without re-saving it
    - Mutations return True only when the snapshot changed
    - Rapid edits collapse into one debounced save of the latest state
    - Save failures are logged, never raised
    - External snapshots apply without persisting; equal updatedAt is ignored
    - A ring layout pass that seeds campaigns persists their positions once
    - Import preview validates without applying; apply_import replaces the board
"""

import asyncio
import logging

import pytest

from opsmap.core.board_snapshot import board_state_to_snapshot
from opsmap.core.errors import SnapshotStoreError, TransferFormatError
from opsmap.core.layout_geometry import Viewport
from opsmap.core.layout_strategies import RingPlacement, SlotLayout, SlotPlacement
from opsmap.infrastructure.snapshot_store import SnapshotStore
from opsmap.services.board_controller import BoardController

from tests.services.memory_store import InMemoryStore

VIEWPORT = Viewport(1200, 900)


async def _started(store, **kwargs) -> BoardController:
    kwargs.setdefault("save_debounce_ms", 10_000)
    controller = BoardController(store, **kwargs)
    await controller.start()
    return controller


# -- Lifecycle -----------------------------------------------------------------

async def test_start_normalizes_without_saving():
    store = InMemoryStore(initial={
        "campaigns": [{"id": "a", "name": "A"}],
        "projects": [{"id": "p", "name": "Orphan", "campaignIds": ["gone"]}],
        "updatedAt": "2026-01-01T00:00:00.000Z",
    })
    controller = await _started(store)
    assert [c.id for c in controller.state.campaigns] == ["a"]
    assert controller.state.projects == ()
    await controller.flush()
    assert store.saves == []


async def test_start_with_empty_store(memory_store):
    controller = await _started(memory_store)
    assert controller.summary.campaign_count == 0
    assert len(memory_store.listeners) == 1


async def test_start_survives_load_failure(caplog):
    class BrokenStore(InMemoryStore):
        async def load(self):
            raise SnapshotStoreError("locked", "execute")

    with caplog.at_level(logging.WARNING):
        controller = await _started(BrokenStore())
    assert controller.state.campaigns == ()
    assert "Failed to load board" in caplog.text


async def test_stop_unsubscribes_and_flushes(memory_store):
    controller = await _started(memory_store)
    controller.add_campaign("Writing")
    await controller.stop()
    assert memory_store.listeners == []
    assert len(memory_store.saves) == 1


# -- Mutations and saves -------------------------------------------------------

async def test_mutations_report_change(memory_store):
    controller = await _started(memory_store)
    assert controller.add_campaign("Writing") is True
    cid = controller.state.campaigns[0].id
    assert controller.add_campaign("   ") is False
    assert controller.rename_campaign(cid, "Writing") is False
    assert controller.update_campaign_mission(cid, "Ship v1") is True
    assert controller.update_campaign_color(cid, "#101010") is True
    assert controller.reposition_campaign(cid, (200, 300)) is True
    assert controller.add_project({"name": "Draft", "link": "docs.new", "campaignIds": [cid]})
    pid = controller.state.projects[0].id
    assert controller.update_project(pid, {"name": "Draft 2"}) is True
    assert controller.delete_project(pid) is True
    assert controller.delete_campaign(cid) is True
    assert controller.delete_campaign(cid) is False


async def test_rapid_edits_collapse_into_one_save(memory_store):
    controller = await _started(memory_store)
    controller.add_campaign("A")
    controller.add_campaign("B")
    controller.add_campaign("C")
    assert memory_store.saves == []

    await controller.flush()
    assert len(memory_store.saves) == 1
    assert memory_store.saves[0] == board_state_to_snapshot(controller.state)

    await controller.flush()
    assert len(memory_store.saves) == 1


async def test_debounced_save_fires_on_its_own(memory_store):
    controller = await _started(memory_store, save_debounce_ms=0)
    controller.add_campaign("A")
    for _ in range(10):
        await asyncio.sleep(0.01)
        if memory_store.saves:
            break
    assert len(memory_store.saves) == 1


async def test_rejected_mutation_schedules_no_save(memory_store):
    controller = await _started(memory_store)
    controller.rename_campaign("campaign-missing", "X")
    await controller.flush()
    assert memory_store.saves == []


async def test_save_failure_is_logged_not_raised(caplog):
    store = InMemoryStore(fail_saves=SnapshotStoreError("disk full", "commit"))
    controller = await _started(store)
    controller.add_campaign("A")
    with caplog.at_level(logging.WARNING):
        await controller.flush()
    assert "Failed to save board" in caplog.text

    # The change is still pending and is written once storage recovers.
    store.fail_saves = None
    await controller.flush()
    assert len(store.saves) == 1


# -- External snapshots --------------------------------------------------------

async def test_external_snapshot_applied_without_saving(memory_store):
    controller = await _started(memory_store)
    memory_store.emit({
        "campaigns": [{"id": "remote", "name": "Remote"}],
        "projects": [],
        "updatedAt": "2030-01-01T00:00:00.000Z",
    })
    assert [c.id for c in controller.state.campaigns] == ["remote"]
    await controller.flush()
    assert memory_store.saves == []


async def test_external_snapshot_with_same_stamp_is_ignored(memory_store):
    controller = await _started(memory_store)
    controller.add_campaign("Local")
    before = controller.state
    changed = controller.handle_external_snapshot({
        "campaigns": [], "projects": [], "updatedAt": before.updated_at,
    })
    assert changed is False
    assert controller.state is before


# -- Layout --------------------------------------------------------------------

async def test_ring_layout_persists_seeded_positions(memory_store):
    controller = await _started(memory_store)
    controller.add_campaign("A")
    controller.add_campaign("B")
    await controller.flush()

    placement = controller.layout(VIEWPORT)
    assert isinstance(placement, RingPlacement)
    assert placement.changed
    for campaign in controller.state.campaigns:
        point = placement.campaigns[campaign.id]
        assert (campaign.x, campaign.y) == (point.x, point.y)

    settled = controller.state
    again = controller.layout(VIEWPORT)
    assert not again.changed
    assert controller.state is settled

    await controller.flush()
    assert len(memory_store.saves) == 2


async def test_slot_layout_never_touches_state(memory_store):
    controller = await _started(memory_store, layout_strategy="slots")
    controller.add_campaign("A")
    before = controller.state
    placement = controller.layout(VIEWPORT)
    assert isinstance(placement, SlotPlacement)
    assert controller.state is before


async def test_strategy_instance_is_accepted(memory_store):
    controller = await _started(memory_store, layout_strategy=SlotLayout(slot_count=3))
    assert len(controller.layout(None).slots) == 3


# -- Export / import -----------------------------------------------------------

async def test_export_then_import_into_another_board():
    source = await _started(InMemoryStore())
    source.add_campaign("Writing")
    cid = source.state.campaigns[0].id
    source.add_project({"name": "Notes", "mode": "physical", "campaignIds": [cid]})

    target_store = InMemoryStore()
    target = await _started(target_store)
    target.add_campaign("Old")

    preview = target.preview_import(source.export_text())
    assert preview.incoming.summary.campaign_count == 1
    assert preview.incoming.summary.project_count == 1
    assert preview.current.campaign_count == 1
    assert [c.name for c in target.state.campaigns] == ["Old"]

    assert target.apply_import(preview) is True
    assert target.state == source.state
    await target.flush()
    assert target_store.saves[-1] == board_state_to_snapshot(source.state)


async def test_bad_import_leaves_board_untouched(memory_store):
    controller = await _started(memory_store)
    controller.add_campaign("Keep me")
    before = controller.state
    with pytest.raises(TransferFormatError):
        controller.preview_import('{"format": "ops-map-export"}')
    assert controller.state is before


async def test_export_filename(memory_store):
    controller = await _started(memory_store)
    assert controller.export_filename().startswith("ops-map-export-")


# -- With the SQLite store -----------------------------------------------------

async def test_board_survives_restart(db_manager):
    first = await _started(SnapshotStore(db_manager))
    first.add_campaign("Writing")
    await first.stop()

    second = await _started(SnapshotStore(db_manager))
    assert [c.name for c in second.state.campaigns] == ["Writing"]
    assert second.state == first.state
