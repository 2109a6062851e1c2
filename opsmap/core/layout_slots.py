"""Slot Layout — fixed six-slot campaign board.

Invariants:
    - build_campaign_slots always returns exactly `slot_count` entries
    - Slots 0..k-1 hold the first k campaigns in stored order; the rest are empty placeholders
    - A project with k memberships appears once under each of its k slotted campaigns
"""

from dataclasses import dataclass

from opsmap.core.board_state import Campaign, Project
from opsmap.core.domain_types import MAX_CAMPAIGNS
from opsmap.core.layout_geometry import coerce_state


MAX_CAMPAIGN_SLOTS: int = MAX_CAMPAIGNS


@dataclass(frozen=True)
class CampaignSlot:
    slot_index: int
    campaign: Campaign | None = None

    @property
    def is_empty(self) -> bool:
        return self.campaign is None


def _slot_count(value: object) -> int:
    if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
        return value
    return MAX_CAMPAIGN_SLOTS


def build_campaign_slots(state: object, slot_count: int = MAX_CAMPAIGN_SLOTS) -> tuple[CampaignSlot, ...]:
    board = coerce_state(state)
    count = _slot_count(slot_count)
    campaigns = board.campaigns[:count]
    return tuple(
        CampaignSlot(index, campaigns[index] if index < len(campaigns) else None)
        for index in range(count)
    )


def build_projects_by_campaign(
    state: object, slot_count: int = MAX_CAMPAIGN_SLOTS,
) -> dict[str, tuple[Project, ...]]:
    """Projects grouped under each slotted campaign, duplicated across memberships."""
    board = coerce_state(state)
    grouped: dict[str, list[Project]] = {
        c.id: [] for c in board.campaigns[:_slot_count(slot_count)]
    }
    for project in board.projects:
        for campaign_id in project.campaign_ids:
            if campaign_id in grouped:
                grouped[campaign_id].append(project)
    return {cid: tuple(projects) for cid, projects in grouped.items()}
