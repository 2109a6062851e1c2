"""Board State — immutable snapshot of campaigns and projects.

Invariants:
    - Campaign, Project and BoardState are frozen: mutations build new instances
    - len(campaigns) <= MAX_CAMPAIGNS
    - Every project has >= 1 campaign id, each referencing a campaign in the same snapshot
    - updated_at is refreshed on every successful mutation and never moves backwards

Design Decisions:
    - Frozen dataclasses with tuple collections: reference equality doubles as the
      "did anything change" signal (no-op returns the identical object)
    - Small text/id helpers live here so ops modules and normalization share one definition
"""

import math
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta, timezone

from opsmap.core.domain_types import (
    STATE_VERSION, CampaignId, LinkType, ProjectId, ProjectMode,
)


@dataclass(frozen=True)
class Campaign:
    """A durable theme of work with at most one current/previous mission pair."""
    id: CampaignId
    name: str
    color: str
    x: float | None = None
    y: float | None = None
    current_mission: str = ""
    previous_mission: str = ""

    @property
    def has_position(self) -> bool:
        return self.x is not None and self.y is not None


@dataclass(frozen=True)
class Project:
    """A unit of work belonging to one or more campaigns."""
    id: ProjectId
    name: str
    mode: ProjectMode
    link_type: LinkType
    link: str
    campaign_ids: tuple[CampaignId, ...]

    @property
    def membership_key(self) -> str:
        """Order-independent key for the exact membership set."""
        return "|".join(sorted(self.campaign_ids))


@dataclass(frozen=True)
class BoardState:
    """Whole-board snapshot. Replaced wholesale, never edited in place."""
    campaigns: tuple[Campaign, ...] = ()
    projects: tuple[Project, ...] = ()
    updated_at: str = field(default_factory=lambda: utc_now_iso())
    version: int = STATE_VERSION

    @property
    def campaign_ids(self) -> set[CampaignId]:
        return {c.id for c in self.campaigns}

    def find_campaign(self, campaign_id: str) -> Campaign | None:
        return next((c for c in self.campaigns if c.id == campaign_id), None)

    def find_project(self, project_id: str) -> Project | None:
        return next((p for p in self.projects if p.id == project_id), None)


def create_empty_state() -> BoardState:
    return BoardState()


# --- Timestamps ---------------------------------------------------------------

def utc_now_iso() -> str:
    """ISO-8601 UTC stamp, millisecond precision, 'Z' suffix."""
    return _format_stamp(datetime.now(timezone.utc))


def _format_stamp(moment: datetime) -> str:
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _parse_stamp(value: str) -> datetime | None:
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def next_stamp(previous: str) -> str:
    """Stamp strictly later than `previous` (bumps 1ms when the clock has not advanced)."""
    now = datetime.now(timezone.utc)
    now = now.replace(microsecond=now.microsecond // 1000 * 1000)
    last = _parse_stamp(previous) if previous else None
    if last is not None and now <= last:
        try:
            now = last + timedelta(milliseconds=1)
        except OverflowError:
            # Stamp at datetime.max: restart from the wall clock.
            pass
    return _format_stamp(now)


def with_updated_stamp(state: BoardState, **changes) -> BoardState:
    """Apply field changes and bump updated_at in one step."""
    return replace(state, updated_at=next_stamp(state.updated_at), **changes)


# --- Text / id helpers --------------------------------------------------------

def clean_text(value: object) -> str:
    """Trimmed string, or "" for anything that is not a string."""
    return value.strip() if isinstance(value, str) else ""


def is_finite_number(value: object) -> bool:
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        # Python ints beyond float range.
        return False


def unique_ids(ids: object) -> tuple[str, ...]:
    """Deduplicate non-empty string ids, keeping first-seen order."""
    if not isinstance(ids, (list, tuple, set, frozenset)):
        return ()
    seen: dict[str, None] = {}
    for item in ids:
        if isinstance(item, str) and item:
            seen.setdefault(item, None)
    return tuple(seen)


def create_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4()}"
