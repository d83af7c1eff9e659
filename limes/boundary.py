"""Territory outlines in rendering space.

The question this module answers: "what closed polygons outline this
territory?" Rendering strokes and fills them, and hit-testing uses them to
decide which territory a point belongs to.

Every fine-grid zone maps to a square in rendering space (``zone_square``)
determined by ``BoardGeometry``: the card's origin, the zone's quadrant in
its card, the border widths, and an optional inset ``margin``.

Outlines are traced by wall-following. The walker stands in a member zone
facing one of four directions, always with a non-member position (the
wall) on its left. Each step looks at the zone ahead and the zone
ahead-left:

  * **Left**, when both are members. The boundary bends around an inner
    corner. Emit the back-left corner of the zone ahead and step onto the
    ahead-left zone, now facing 90° to the left.
  * **Straight**, when only the zone ahead is a member. Step onto it. Nothing
    is emitted, since the boundary continues in a straight line.
  * **Right**, when the zone ahead is not a member. Turn right in place and
    emit the current zone's front-left corner (an outer corner). Two of
    these in a row reverse direction at a dead end.

Each (zone, facing) state has exactly one successor and one predecessor,
so the walk always comes back to its start state and closes the loop.

The outer loop starts at the territory's top-left zone facing north. For
territories of at least ``HOLE_SCAN_MIN_ZONES`` zones (the smallest
4-connected ring that can enclose anything), every member with a
non-member to its west is a candidate seed; a seed whose wall was not
already walked by an earlier loop traces a hole. Outer loops run clockwise
on screen and holes counter-clockwise, so even-odd and non-zero fill rules
agree.
"""

from __future__ import annotations

import logging
from collections.abc import Collection
from dataclasses import dataclass, field

from shapely.geometry import Polygon as ShapelyPolygon

from .types import (
    NORTH,
    WEST,
    BoardGeometry,
    InvariantError,
    Point,
)
from .zones import card_position_of, quadrant_of

log = logging.getLogger(__name__)

Loop = list[tuple[float, float]]

HOLE_SCAN_MIN_ZONES = 8

TURN_LEFT = -1
STRAIGHT = 0
TURN_RIGHT = 1

# Corner emitted per (facing, turn); None means nothing is emitted. Left
# turns take the corner from the zone ahead, right turns from the current
# zone.
_TURN_CORNERS: dict[tuple[int, int], int | None] = {}
for _facing in range(4):
    _TURN_CORNERS[(_facing, TURN_LEFT)] = (_facing + 3) % 4
    _TURN_CORNERS[(_facing, STRAIGHT)] = None
    _TURN_CORNERS[(_facing, TURN_RIGHT)] = _facing


class TraceError(InvariantError):
    """A boundary walk could not close on a valid loop."""


def zone_square(
    point: Point, geometry: BoardGeometry
) -> tuple[float, float, float, float]:
    """Rendering-space square ``(x0, y0, x1, y1)`` of a fine-grid zone."""
    card = card_position_of(point)
    ox, oy = geometry.zone_origin(quadrant_of(point))
    x0 = geometry.offset_x + card.x * geometry.card_size + ox
    y0 = geometry.offset_y + card.y * geometry.card_size + oy
    w = geometry.zone_width
    m = geometry.margin
    return (x0 + m, y0 + m, x0 + w - m, y0 + w - m)


def zone_corner(
    point: Point, corner: int, geometry: BoardGeometry
) -> tuple[float, float]:
    """Corner of a zone square: NW=0, NE=1, SE=2, SW=3."""
    x0, y0, x1, y1 = zone_square(point, geometry)
    return ((x0, y0), (x1, y0), (x1, y1), (x0, y1))[corner]


def point_in_polygon(px: float, py: float, vertices: Loop) -> bool:
    """Ray-casting point-in-polygon test."""
    n = len(vertices)
    inside = False
    j = n - 1
    for i in range(n):
        xi, yi = vertices[i]
        xj, yj = vertices[j]
        if (yi > py) != (yj > py):
            intersect_x = (xj - xi) * (py - yi) / (yj - yi) + xi
            if px < intersect_x:
                inside = not inside
        j = i
    return inside


def _loop_area(vertices: Loop) -> float:
    """Shoelace area, positive regardless of winding."""
    n = len(vertices)
    if n < 3:
        return 0.0
    area = 0.0
    for i in range(n):
        j = (i + 1) % n
        area += vertices[i][0] * vertices[j][1]
        area -= vertices[j][0] * vertices[i][1]
    return abs(area) / 2.0


def _is_connected(zones: Collection[Point]) -> bool:
    """True when every zone is reachable from every other by edge steps."""
    start = min(zones)
    seen = {start}
    stack = [start]
    while stack:
        current = stack.pop()
        for neighbor, _ in current.neighbors():
            if neighbor in zones and neighbor not in seen:
                seen.add(neighbor)
                stack.append(neighbor)
    return len(seen) == len(zones)


@dataclass
class Outline:
    outer: Loop
    holes: list[Loop] = field(default_factory=list)

    @property
    def loops(self) -> list[Loop]:
        return [self.outer, *self.holes]

    def contains(self, x: float, y: float) -> bool:
        """Even-odd membership across all loops."""
        inside = False
        for loop in self.loops:
            if point_in_polygon(x, y, loop):
                inside = not inside
        return inside

    def area(self) -> float:
        return _loop_area(self.outer) - sum(_loop_area(h) for h in self.holes)

    def to_shapely(self) -> ShapelyPolygon:
        return ShapelyPolygon(self.outer, self.holes)


def trace_loop(
    zones: Collection[Point],
    start: Point,
    geometry: BoardGeometry,
    visited: set[tuple[Point, int]],
    facing: int = NORTH,
) -> Loop:
    """Walk one closed boundary loop from ``start`` facing ``facing``.

    The position on the left of the start state must be a non-member.
    Every state walked is added to ``visited``.
    """
    if start not in zones or start.step((facing + 3) % 4) in zones:
        raise TraceError(f"No wall on the left of {start} facing {facing}")

    points: Loop = []
    start_state = (start, facing)
    state = start_state
    # Each wall state is walked at most once per loop.
    for _ in range(4 * len(zones) + 4):
        visited.add(state)
        zone, facing = state
        ahead = zone.step(facing)
        left = (facing + 3) % 4
        if ahead in zones and ahead.step(left) in zones:
            corner = _TURN_CORNERS[(facing, TURN_LEFT)]
            points.append(zone_corner(ahead, corner, geometry))
            state = (ahead.step(left), left)
        elif ahead in zones:
            state = (ahead, facing)
        else:
            corner = _TURN_CORNERS[(facing, TURN_RIGHT)]
            points.append(zone_corner(zone, corner, geometry))
            state = (zone, (facing + 1) % 4)

        if state == start_state:
            return points
        if state in visited:
            raise TraceError(
                f"Boundary walk from {start} re-entered {state[0]} "
                f"facing {state[1]}"
            )
    raise TraceError(f"Boundary walk from {start} did not close")


def trace_outline(
    zones: Collection[Point], geometry: BoardGeometry
) -> Outline:
    """Outer loop plus hole loops for a 4-connected zone set.

    Raises TraceError for an empty or disconnected set, or when a wall is
    left unwalked after all loops are traced.
    """
    if not zones:
        raise TraceError("Cannot outline an empty zone set")
    if not _is_connected(zones):
        raise TraceError(f"Zone set around {min(zones)} is not connected")
    if len(zones) == 1:
        (only,) = zones
        x0, y0, x1, y1 = zone_square(only, geometry)
        return Outline(outer=[(x0, y0), (x1, y0), (x1, y1), (x0, y1)])

    visited: set[tuple[Point, int]] = set()
    outer = trace_loop(zones, min(zones), geometry, visited)

    holes: list[Loop] = []
    if len(zones) >= HOLE_SCAN_MIN_ZONES:
        for seed in sorted(zones):
            if seed.step(WEST) in zones or (seed, NORTH) in visited:
                continue
            holes.append(trace_loop(zones, seed, geometry, visited))

    for zone in zones:
        if zone.step(WEST) not in zones and (zone, NORTH) not in visited:
            raise TraceError(f"Wall west of {zone} was never walked")

    log.debug(
        "traced %d zones into %d points and %d holes",
        len(zones),
        len(outer),
        len(holes),
    )
    return Outline(outer=outer, holes=holes)
