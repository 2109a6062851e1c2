"""Ring Layout — free-canvas campaign ring and centroid clustering of projects.

Invariants:
    - Pure: reads BoardState, never returns a modified state and never stamps
    - Campaigns lacking coordinates are seeded on a ring starting at the top (-90 deg)
    - Every campaign position lies inside the campaign bounds of the current viewport
    - `changed` is True iff at least one coordinate was seeded or clamped
    - Projects sharing an exact membership set orbit the centroid of their campaigns;
      a group of one sits exactly on the centroid
    - Same state + same viewport => identical coordinates

Design Decisions:
    - Campaign radius shrinks with crowding (beyond 3 campaigns), bounded to [MIN, MAX]
    - Orbit radius targets a neighbor spacing of RING_SPACING_FACTOR x campaign radius,
      then is clamped to the largest orbit that keeps a campaign inside the bounds
    - Project placement reads the resolved campaign positions, so seeded campaigns
      and their projects come from the same pass
"""

import math
from collections.abc import Mapping
from dataclasses import dataclass

from opsmap.core.board_state import BoardState, Project
from opsmap.core.layout_geometry import (
    Point, Viewport,
    angle_point, clamp, coerce_state, coerce_viewport, hash_to_unit, padded_bounds,
)


CAMPAIGN_RADIUS_MAX: float = 175.0
CAMPAIGN_RADIUS_MIN: float = 110.0
CROWDING_THRESHOLD: int = 3
CROWDING_SHRINK: float = 20.0
RING_SPACING_FACTOR: float = 1.5
MIN_ORBIT_RADIUS: float = 80.0
RING_CENTER_Y_OFFSET: float = 22.0

CLUSTER_BASE_RADIUS: float = 28.0
CLUSTER_RADIUS_PER_MEMBER: float = 6.0
CLUSTER_RADIUS_GROWTH_CAP: float = 46.0


@dataclass(frozen=True)
class CampaignRing:
    """Result of one campaign placement pass."""
    positions: dict[str, Point]
    campaign_radius: float
    orbit_radius: float
    changed: bool


# --- Campaign ring ------------------------------------------------------------

def campaign_radius(count: int) -> float:
    """Display radius for one campaign given how many share the canvas."""
    crowding = max(0, count - CROWDING_THRESHOLD)
    return clamp(
        CAMPAIGN_RADIUS_MAX - crowding * CROWDING_SHRINK,
        CAMPAIGN_RADIUS_MIN, CAMPAIGN_RADIUS_MAX,
    )


def ring_center(viewport: Viewport) -> Point:
    return Point(viewport.width / 2, viewport.height / 2 + RING_CENTER_Y_OFFSET)


def orbit_radius(count: int, radius: float, viewport: Viewport) -> float:
    """Spacing-derived orbit, clamped to the nearest feasible value for the viewport."""
    if count <= 1:
        return 0.0

    # Chord between neighbors on an n-gon: 2 * R * sin(pi / n).
    spacing = RING_SPACING_FACTOR * radius
    ideal = max(MIN_ORBIT_RADIUS, spacing / (2 * math.sin(math.pi / count)))

    center = ring_center(viewport)
    bounds = padded_bounds(viewport, radius)
    feasible = min(
        center.x - bounds.min_x, bounds.max_x - center.x,
        center.y - bounds.min_y, bounds.max_y - center.y,
    )
    return clamp(ideal, 0.0, max(0.0, feasible))


def place_campaigns(state: object, viewport: object) -> CampaignRing:
    """Seed missing campaign coordinates and clamp every campaign into view."""
    board = coerce_state(state)
    view = coerce_viewport(viewport)
    count = len(board.campaigns)
    radius = campaign_radius(count)
    orbit = orbit_radius(count, radius, view)
    center = ring_center(view)
    bounds = padded_bounds(view, radius)

    changed = False
    positions: dict[str, Point] = {}
    for index, campaign in enumerate(board.campaigns):
        if campaign.has_position:
            x, y = campaign.x, campaign.y
        else:
            angle = -math.pi / 2 + (2 * math.pi * index) / max(1, count)
            seeded = angle_point(center, orbit, angle)
            x, y = seeded.x, seeded.y
            changed = True

        point = bounds.clamp(x, y)
        if (point.x, point.y) != (x, y):
            changed = True
        positions[campaign.id] = point

    return CampaignRing(
        positions=positions, campaign_radius=radius,
        orbit_radius=orbit, changed=changed,
    )


# --- Project clusters ---------------------------------------------------------

def _stored_positions(board: BoardState) -> dict[str, Point]:
    return {
        c.id: Point(c.x, c.y) for c in board.campaigns if c.has_position
    }


def _centroid(campaign_ids: tuple[str, ...], positions: Mapping[str, Point], viewport: Viewport) -> Point:
    points = [positions[cid] for cid in campaign_ids if cid in positions]
    if not points:
        return viewport.center
    return Point(
        sum(p.x for p in points) / len(points),
        sum(p.y for p in points) / len(points),
    )


def cluster_radius(group_size: int) -> float:
    if group_size <= 1:
        return 0.0
    return CLUSTER_BASE_RADIUS + min(
        CLUSTER_RADIUS_GROWTH_CAP, group_size * CLUSTER_RADIUS_PER_MEMBER,
    )


def group_by_membership(projects: tuple[Project, ...]) -> dict[str, list[str]]:
    """Project ids per exact membership key, in stored order."""
    groups: dict[str, list[str]] = {}
    for project in projects:
        groups.setdefault(project.membership_key, []).append(project.id)
    return groups


def place_projects(
    state: object,
    viewport: object,
    campaign_positions: Mapping[str, Point] | None = None,
) -> dict[str, Point]:
    """Centroid-clustered project positions keyed by project id."""
    board = coerce_state(state)
    view = coerce_viewport(viewport)
    positions = campaign_positions if campaign_positions is not None else _stored_positions(board)
    groups = group_by_membership(board.projects)
    bounds = padded_bounds(view)

    placed: dict[str, Point] = {}
    for project in board.projects:
        key = project.membership_key
        group = groups[key]
        centroid = _centroid(project.campaign_ids, positions, view)

        if len(group) == 1:
            placed[project.id] = bounds.clamp(centroid.x, centroid.y)
            continue

        step = (2 * math.pi * group.index(project.id)) / len(group)
        angle = hash_to_unit(key) * 2 * math.pi + step
        point = angle_point(centroid, cluster_radius(len(group)), angle)
        placed[project.id] = bounds.clamp(point.x, point.y)

    return placed
