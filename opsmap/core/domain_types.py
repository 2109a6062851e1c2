"""Domain Types — identity types, enums and board-wide constants.

Invariants:
    - CampaignId, ProjectId wrap prefixed string tokens ("campaign-<uuid>", "project-<uuid>")
    - MAX_CAMPAIGNS (6) is the single source of truth for the campaign cap
    - All valid modes and link types encoded as Enums — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders (snapshots are plain JSON)
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

CampaignId = NewType("CampaignId", str)
ProjectId = NewType("ProjectId", str)


# ─── Constants ───────────────────────────────────────────────────

STATE_VERSION: int = 1
MAX_CAMPAIGNS: int = 6

DEFAULT_CAMPAIGN_COLORS: tuple[str, ...] = (
    "#ffd99b",
    "#a8e1cf",
    "#b7d4ff",
    "#f5bed8",
    "#d1c3f2",
    "#f7d6b2",
    "#c5e9f4",
)


# ─── Enums ───────────────────────────────────────────────────────

class ProjectMode(str, Enum):
    """Launchable projects open a link; physical projects have none."""
    LAUNCHABLE = "launchable"
    PHYSICAL = "physical"


class LinkType(str, Enum):
    """How a project link is built and opened."""
    WEB = "web"
    OBSIDIAN = "obsidian"
    VSCODE = "vscode"
    CURSOR = "cursor"
    ANTIGRAVITY = "antigravity"
    CUSTOM = "custom"


def sanitize_project_mode(value: object) -> ProjectMode:
    """Unknown modes collapse to launchable."""
    try:
        return ProjectMode(value)
    except ValueError:
        return ProjectMode.LAUNCHABLE


def sanitize_link_type(value: object) -> LinkType:
    """Unknown link types collapse to web."""
    try:
        return LinkType(value)
    except ValueError:
        return LinkType.WEB


def palette_color(index: int) -> str:
    """Default campaign color for a slot index."""
    return DEFAULT_CAMPAIGN_COLORS[index % len(DEFAULT_CAMPAIGN_COLORS)]
