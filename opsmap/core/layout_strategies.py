"""Placement Strategies — two interchangeable layouts behind one interface.

Invariants:
    - Every strategy takes (state, viewport) and returns placement data; none mutates state
    - place() never raises: inputs are coerced (see layout_geometry)
    - get_strategy resolves names from LAYOUT_STRATEGIES only

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Separate result types per strategy instead of one result with mode flags
"""

from dataclasses import dataclass
from typing import Protocol

from opsmap.core.board_state import Project
from opsmap.core.errors import UnknownLayoutStrategyError
from opsmap.core.layout_geometry import Point, coerce_state
from opsmap.core.layout_ring import place_campaigns, place_projects
from opsmap.core.layout_slots import (
    MAX_CAMPAIGN_SLOTS, CampaignSlot, build_campaign_slots, build_projects_by_campaign,
)


@dataclass(frozen=True)
class RingPlacement:
    """Free-canvas coordinates keyed by entity id."""
    campaigns: dict[str, Point]
    projects: dict[str, Point]
    campaign_radius: float
    changed: bool


@dataclass(frozen=True)
class SlotPlacement:
    """Fixed-slot board: ordered slots plus projects grouped per slotted campaign."""
    slots: tuple[CampaignSlot, ...]
    projects_by_campaign: dict[str, tuple[Project, ...]]

    @property
    def slot_index_by_campaign(self) -> dict[str, int]:
        return {
            s.campaign.id: s.slot_index for s in self.slots if s.campaign is not None
        }


class PlacementStrategy(Protocol):
    name: str

    def place(self, state: object, viewport: object) -> RingPlacement | SlotPlacement: ...


class RingLayout:
    """Ring-seeded campaigns with centroid-clustered projects."""
    name = "ring"

    def place(self, state: object, viewport: object) -> RingPlacement:
        board = coerce_state(state)
        ring = place_campaigns(board, viewport)
        return RingPlacement(
            campaigns=ring.positions,
            projects=place_projects(board, viewport, ring.positions),
            campaign_radius=ring.campaign_radius,
            changed=ring.changed,
        )


class SlotLayout:
    """First N campaigns in stored order, one per slot."""
    name = "slots"

    def __init__(self, slot_count: int = MAX_CAMPAIGN_SLOTS):
        self.slot_count = slot_count

    def place(self, state: object, viewport: object = None) -> SlotPlacement:
        # Slots ignore the viewport; it is accepted to honor the shared contract.
        board = coerce_state(state)
        return SlotPlacement(
            slots=build_campaign_slots(board, self.slot_count),
            projects_by_campaign=build_projects_by_campaign(board, self.slot_count),
        )


LAYOUT_STRATEGIES: dict[str, type] = {
    RingLayout.name: RingLayout,
    SlotLayout.name: SlotLayout,
}


def get_strategy(name: str) -> PlacementStrategy:
    """Instantiate a strategy by name ("ring" or "slots")."""
    strategy_cls = LAYOUT_STRATEGIES.get((name or "").strip().lower())
    if strategy_cls is None:
        raise UnknownLayoutStrategyError(name, sorted(LAYOUT_STRATEGIES))
    return strategy_cls()
