"""Board Snapshot — serialization and normalization of BoardState.

Invariants:
    - board_state_to_snapshot produces a JSON-safe dict (camelCase keys, no Enums, no tuples)
    - normalize_state accepts ANY payload and never raises
    - normalize_state is idempotent: normalize(normalize(x)) == normalize(x)
    - At most MAX_CAMPAIGNS campaigns survive; excess entries are discarded in order
    - Projects keep only memberships of surviving campaigns and are dropped when none remain

Design Decisions:
    - Malformed entries are dropped or defaulted, never reported: loaded and
      imported payloads all go through this one path
    - Default names use the 1-based position in the raw list ("Campaign 3")
"""

from collections.abc import Mapping

from opsmap.core.board_state import (
    BoardState, Campaign, Project,
    clean_text, create_id, is_finite_number, unique_ids, utc_now_iso,
)
from opsmap.core.domain_types import (
    MAX_CAMPAIGNS, STATE_VERSION, palette_color,
    sanitize_link_type, sanitize_project_mode,
)
from opsmap.core.integrity import enforce_membership_integrity
from opsmap.core.project_links import infer_link_type, normalize_project_link


# --- Serialization ------------------------------------------------------------

def campaign_to_snapshot(campaign: Campaign) -> dict:
    return {
        "id": campaign.id,
        "name": campaign.name,
        "color": campaign.color,
        "x": campaign.x,
        "y": campaign.y,
        "currentMission": campaign.current_mission,
        "previousMission": campaign.previous_mission,
    }


def project_to_snapshot(project: Project) -> dict:
    return {
        "id": project.id,
        "name": project.name,
        "mode": project.mode.value,
        "linkType": project.link_type.value,
        "link": project.link,
        "campaignIds": list(project.campaign_ids),
    }


def board_state_to_snapshot(state: BoardState) -> dict:
    """Serialize BoardState to a JSON-safe dict. Pure, no IO."""
    return {
        "version": state.version,
        "campaigns": [campaign_to_snapshot(c) for c in state.campaigns],
        "projects": [project_to_snapshot(p) for p in state.projects],
        "updatedAt": state.updated_at,
    }


# --- Normalization ------------------------------------------------------------

def _normalize_campaign(raw: object, index: int) -> Campaign | None:
    if not isinstance(raw, Mapping):
        return None

    x, y = raw.get("x"), raw.get("y")
    return Campaign(
        id=clean_text(raw.get("id")) or create_id("campaign"),
        name=clean_text(raw.get("name")) or f"Campaign {index + 1}",
        color=clean_text(raw.get("color")) or palette_color(index),
        x=float(x) if is_finite_number(x) else None,
        y=float(y) if is_finite_number(y) else None,
        current_mission=clean_text(raw.get("currentMission")),
        previous_mission=clean_text(raw.get("previousMission")),
    )


def _normalize_project(raw: object, index: int) -> Project | None:
    if not isinstance(raw, Mapping):
        return None

    link_type = sanitize_link_type(raw.get("linkType") or infer_link_type(raw.get("link")))
    return Project(
        id=clean_text(raw.get("id")) or create_id("project"),
        name=clean_text(raw.get("name")) or f"Project {index + 1}",
        mode=sanitize_project_mode(raw.get("mode")),
        link_type=link_type,
        link=normalize_project_link(raw.get("link"), link_type),
        campaign_ids=unique_ids(raw.get("campaignIds")),
    )


def _collect(entries: object, normalizer) -> tuple:
    """Normalize each entry of a list-shaped value, skipping rejected ones."""
    if not isinstance(entries, (list, tuple)):
        return ()
    collected = []
    for index, entry in enumerate(entries):
        item = normalizer(entry, index)
        if item is not None:
            collected.append(item)
    return tuple(collected)


def normalize_state(raw: object) -> BoardState:
    """Turn any payload (possibly malformed) into a well-formed BoardState."""
    if isinstance(raw, BoardState):
        raw = board_state_to_snapshot(raw)
    if not isinstance(raw, Mapping):
        return BoardState()

    campaigns = _collect(raw.get("campaigns"), _normalize_campaign)[:MAX_CAMPAIGNS]
    projects = enforce_membership_integrity(
        _collect(raw.get("projects"), _normalize_project),
        {c.id for c in campaigns},
    )

    return BoardState(
        campaigns=campaigns,
        projects=projects,
        updated_at=clean_text(raw.get("updatedAt")) or utc_now_iso(),
        version=STATE_VERSION,
    )
