"""Layout Geometry — viewport coercion, bounds, clamping and the stable string hash.

Invariants:
    - coerce_viewport never fails: non-finite or non-positive dimensions become SAFE_VIEWPORT's
    - clamp(v, lo, hi) returns lo when the range is inverted (tiny viewports)
    - hash_to_unit is deterministic across runs and processes, in [0, 1)

Design Decisions:
    - hash_to_unit reproduces the 32-bit "(h << 5) - h + code" string hash so stored
      boards keep their cluster angles across implementations
"""

import math
from collections.abc import Mapping
from dataclasses import dataclass

from opsmap.core.board_snapshot import normalize_state
from opsmap.core.board_state import BoardState, is_finite_number


CANVAS_PADDING: float = 90.0


@dataclass(frozen=True)
class Viewport:
    width: float
    height: float

    @property
    def center(self) -> "Point":
        return Point(self.width / 2, self.height / 2)


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class Bounds:
    min_x: float
    max_x: float
    min_y: float
    max_y: float

    def clamp(self, x: float, y: float) -> Point:
        return Point(clamp(x, self.min_x, self.max_x), clamp(y, self.min_y, self.max_y))


SAFE_VIEWPORT = Viewport(width=960.0, height=640.0)


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _dimension(value: object, fallback: float) -> float:
    if is_finite_number(value) and value > 0:
        return float(value)
    return fallback


def coerce_viewport(raw: object) -> Viewport:
    """Accept a Viewport, {width, height} mapping, (w, h) pair, or None."""
    if isinstance(raw, Viewport):
        width, height = raw.width, raw.height
    elif isinstance(raw, Mapping):
        width, height = raw.get("width"), raw.get("height")
    elif isinstance(raw, (tuple, list)) and len(raw) == 2:
        width, height = raw
    else:
        width, height = None, None
    return Viewport(
        width=_dimension(width, SAFE_VIEWPORT.width),
        height=_dimension(height, SAFE_VIEWPORT.height),
    )


def coerce_state(raw: object) -> BoardState:
    """Layout input may be a raw payload; normalize it rather than fail."""
    return raw if isinstance(raw, BoardState) else normalize_state(raw)


def padded_bounds(viewport: Viewport, inset: float = 0.0) -> Bounds:
    """Viewport minus padding, minus an extra inset (e.g. a campaign radius)."""
    margin = CANVAS_PADDING + inset
    return Bounds(
        min_x=margin,
        max_x=viewport.width - margin,
        min_y=margin,
        max_y=viewport.height - margin,
    )


def hash_to_unit(seed: str) -> float:
    """Stable pseudo-random fraction in [0, 1) for a string seed."""
    value = 0
    for char in seed:
        value = ((value << 5) - value + ord(char)) & 0xFFFFFFFF
    if value >= 0x80000000:
        value -= 0x100000000
    return (abs(value) % 1000) / 1000


def angle_point(center: Point, radius: float, angle: float) -> Point:
    return Point(center.x + math.cos(angle) * radius, center.y + math.sin(angle) * radius)
