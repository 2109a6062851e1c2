"""Campaign Operations — pure mutations over BoardState campaigns.

Invariants:
    - Every operation returns the SAME object when nothing changed (rejection or no-op)
    - Every applied operation returns a new BoardState with a later updated_at
    - Campaign count never exceeds MAX_CAMPAIGNS
    - Deleting a campaign removes its id from every project; emptied projects are deleted
    - Mission rollover: a new non-empty mission moves the prior non-empty mission into
      previous_mission; clearing leaves previous_mission untouched

Design Decisions:
    - Blank names are rejected silently; callers detect rejection via `is`
    - Membership cleanup delegated to integrity.enforce_membership_integrity
"""

from collections.abc import Mapping
from dataclasses import replace

from opsmap.core.board_state import (
    BoardState, Campaign,
    clean_text, create_id, is_finite_number, with_updated_stamp,
)
from opsmap.core.domain_types import CampaignId, MAX_CAMPAIGNS, palette_color
from opsmap.core.integrity import enforce_membership_integrity


def _replace_campaign(state: BoardState, campaign_id: str, update) -> BoardState:
    """Apply `update(campaign, index)` to one campaign; same state if it returns the input."""
    changed = False
    campaigns = []
    for index, campaign in enumerate(state.campaigns):
        if campaign.id == campaign_id:
            updated = update(campaign, index)
            changed = changed or updated is not campaign
            campaign = updated
        campaigns.append(campaign)
    return with_updated_stamp(state, campaigns=tuple(campaigns)) if changed else state


def _position(value: object) -> tuple[float, float] | None:
    """Extract finite (x, y) from a mapping or a 2-sequence."""
    if isinstance(value, Mapping):
        x, y = value.get("x"), value.get("y")
    elif isinstance(value, (tuple, list)) and len(value) == 2:
        x, y = value
    else:
        x, y = getattr(value, "x", None), getattr(value, "y", None)
    if not (is_finite_number(x) and is_finite_number(y)):
        return None
    return float(x), float(y)


# --- Create / delete ----------------------------------------------------------

def add_campaign(state: BoardState, draft: Mapping | None) -> BoardState:
    """Append a campaign. No-op at the cap or when the name is blank."""
    draft = draft or {}
    if len(state.campaigns) >= MAX_CAMPAIGNS:
        return state

    name = clean_text(draft.get("name"))
    if not name:
        return state

    position = _position(draft)
    campaign = Campaign(
        id=CampaignId(create_id("campaign")),
        name=name,
        color=clean_text(draft.get("color")) or palette_color(len(state.campaigns)),
        x=position[0] if position else None,
        y=position[1] if position else None,
    )
    return with_updated_stamp(state, campaigns=state.campaigns + (campaign,))


def delete_campaign(state: BoardState, campaign_id: str) -> BoardState:
    """Remove a campaign and cascade to memberships. No-op if unknown."""
    campaigns = tuple(c for c in state.campaigns if c.id != campaign_id)
    if len(campaigns) == len(state.campaigns):
        return state

    projects = enforce_membership_integrity(state.projects, {c.id for c in campaigns})
    return with_updated_stamp(state, campaigns=campaigns, projects=projects)


# --- Field edits --------------------------------------------------------------

def rename_campaign(state: BoardState, campaign_id: str, name: object) -> BoardState:
    next_name = clean_text(name)
    if not next_name:
        return state

    def update(campaign: Campaign, _index: int) -> Campaign:
        if campaign.name == next_name:
            return campaign
        return replace(campaign, name=next_name)

    return _replace_campaign(state, campaign_id, update)


def update_campaign_color(state: BoardState, campaign_id: str, color: object) -> BoardState:
    """Set a campaign color; blank resolves to the palette color of its slot."""
    def update(campaign: Campaign, index: int) -> Campaign:
        next_color = clean_text(color) or palette_color(index)
        if campaign.color == next_color:
            return campaign
        return replace(campaign, color=next_color)

    return _replace_campaign(state, campaign_id, update)


def update_campaign_mission(state: BoardState, campaign_id: str, mission: object) -> BoardState:
    """Replace the current mission with rollover into previous_mission."""
    next_mission = clean_text(mission)

    def update(campaign: Campaign, _index: int) -> Campaign:
        current = campaign.current_mission
        if current == next_mission:
            return campaign
        previous = campaign.previous_mission
        if next_mission and current:
            previous = current
        return replace(campaign, current_mission=next_mission, previous_mission=previous)

    return _replace_campaign(state, campaign_id, update)


# --- Positions ----------------------------------------------------------------

def reposition_campaign(state: BoardState, campaign_id: str, position: object) -> BoardState:
    """Move one campaign. Cheap no-op for non-finite or unchanged positions (drag path)."""
    point = _position(position)
    if point is None:
        return state

    def update(campaign: Campaign, _index: int) -> Campaign:
        if (campaign.x, campaign.y) == point:
            return campaign
        return replace(campaign, x=point[0], y=point[1])

    return _replace_campaign(state, campaign_id, update)


def apply_campaign_positions(state: BoardState, positions: Mapping[str, object]) -> BoardState:
    """Bulk reposition (e.g. a seeded/clamped layout pass) under a single stamp."""
    changed = False
    campaigns = []
    for campaign in state.campaigns:
        point = _position(positions.get(campaign.id))
        if point is not None and (campaign.x, campaign.y) != point:
            campaign = replace(campaign, x=point[0], y=point[1])
            changed = True
        campaigns.append(campaign)
    return with_updated_stamp(state, campaigns=tuple(campaigns)) if changed else state
