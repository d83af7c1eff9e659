"""Zone grid construction from placed cards.

Every placed card covers a 2x2 block of the fine (zone) grid. Card
``(cx, cy)`` puts its NW zone at ``(2cx, 2cy)``, NE at ``(2cx+1, 2cy)``,
SE at ``(2cx+1, 2cy+1)`` and SW at ``(2cx, 2cy+1)``.

Rotation is applied through the catalog's read-order table: for rotation
``r`` with order ``o``, the NW/NE/SE/SW quadrants receive raw zones
``o[0]..o[3]``, and each zone's hut flag facing canonical direction ``i``
is the raw flag ``o[i]``.

The grid is rebuilt from scratch for every placement change; it is a pure
function of the placements.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from .catalog_io import default_catalog
from .types import CardCatalog, Placement, Point, Zone

log = logging.getLogger(__name__)

ZoneGrid = dict[Point, Zone]

# Fine-grid offset of each quadrant (NW, NE, SE, SW) within its card.
QUADRANT_OFFSETS = ((0, 0), (1, 0), (1, 1), (0, 1))


def rotate_zone(zone: Zone, order: tuple[int, int, int, int]) -> Zone:
    """Remap hut flags so that output direction i takes raw flag order[i]."""
    return Zone(
        terrain=zone.terrain,
        huts=tuple(zone.huts[order[i]] for i in range(4)),
    )


def card_zones(
    card_id: int,
    rotation: int,
    catalog: CardCatalog | None = None,
) -> list[Zone]:
    """The four rotated zones of a card in NW, NE, SE, SW order."""
    catalog = catalog or default_catalog()
    card = catalog.card(card_id)
    order = catalog.order(rotation)
    return [rotate_zone(card.zones[order[q]], order) for q in range(4)]


def quadrant_of(point: Point) -> int:
    """Quadrant index (NW=0, NE=1, SE=2, SW=3) of a zone within its card."""
    return QUADRANT_OFFSETS.index((point.x % 2, point.y % 2))


def card_position_of(point: Point) -> Point:
    """Coarse card coordinate holding a fine-grid zone."""
    return Point(point.x // 2, point.y // 2)


def build_zone_grid(
    placements: Iterable[Placement],
    catalog: CardCatalog | None = None,
) -> ZoneGrid:
    """Expand placements into a map from fine-grid point to rotated zone.

    Raises ValueError if two placements share a card position, and KeyError
    for unknown card ids.
    """
    catalog = catalog or default_catalog()
    grid: ZoneGrid = {}
    seen: set[Point] = set()
    for placement in placements:
        pos = placement.position
        if pos in seen:
            raise ValueError(f"Two cards placed at {pos}")
        seen.add(pos)
        zones = card_zones(placement.card_id, placement.rotation, catalog)
        for (dx, dy), zone in zip(QUADRANT_OFFSETS, zones):
            grid[Point(pos.x * 2 + dx, pos.y * 2 + dy)] = zone

    if log.isEnabledFor(logging.DEBUG):
        log.debug("zone grid:\n%s", format_zone_grid(grid))
    return grid


def format_zone_grid(grid: ZoneGrid) -> str:
    """Render the grid as text, one row per fine-grid row.

    Each zone shows its terrain followed by its four hut digits (N, E, S,
    W); empty positions are blank.
    """
    if not grid:
        return ""
    min_x = min(p.x for p in grid)
    max_x = max(p.x for p in grid)
    min_y = min(p.y for p in grid)
    max_y = max(p.y for p in grid)

    rows = []
    for y in range(min_y, max_y + 1):
        cells = []
        for x in range(min_x, max_x + 1):
            zone = grid.get(Point(x, y))
            if zone is None:
                cells.append(" " * 5)
            else:
                cells.append(
                    zone.terrain + "".join(str(int(h)) for h in zone.huts)
                )
        rows.append(" ".join(cells).rstrip())
    return "\n".join(rows)
