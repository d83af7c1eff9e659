"""Territory partitioning of the zone grid.

A territory is a maximal 4-connected group of same-terrain zones, with one
exception: every Tower zone is a territory of its own and never merges,
not even with an orthogonally touching tower. Diagonal contact never
merges anything; the ``diagonals`` variant only affects card placement
(see ``cardmap.py``).

Each territory records:

  * ``zones`` — its member points.
  * ``bordering_zones`` — grid zones outside the territory that share an
    edge with a member.
  * ``neighbor_ids`` — ids of the territories owning those bordering zones.
  * ``hut_count`` — for water only: huts on bordering zones whose flag faces
    back across the shared edge into the water.

Ids are assigned in build order and are only meaningful within one build.
Traversal order is fixed (sorted points) so builds are reproducible, but
the partition itself does not depend on it.
"""

from __future__ import annotations

import logging

from .types import TOWER, WATER, Point, Territory, opposite
from .zones import ZoneGrid

log = logging.getLogger(__name__)


def _add_border(
    territory: Territory,
    zone_grid: ZoneGrid,
    neighbor: Point,
    direction: int,
) -> None:
    """Record a zone bordering the territory in ``direction``."""
    territory.bordering_zones.add(neighbor)
    if territory.terrain == WATER:
        if zone_grid[neighbor].huts[opposite(direction)]:
            territory.hut_count += 1


def build_territories(
    zone_grid: ZoneGrid,
) -> tuple[list[Territory], dict[Point, int]]:
    """Partition the zone grid into territories.

    Returns the territory list (``territories[i].id == i``) and the index
    from every zone to its territory id.
    """
    territories: list[Territory] = []
    zone_index: dict[Point, int] = {}
    unscanned: set[Point] = set()

    # Towers first: always singletons.
    for point in sorted(zone_grid):
        zone = zone_grid[point]
        if zone.terrain != TOWER:
            unscanned.add(point)
            continue
        territory = Territory(
            id=len(territories), terrain=TOWER, zones={point}
        )
        for neighbor, direction in point.neighbors():
            if neighbor in zone_grid:
                _add_border(territory, zone_grid, neighbor, direction)
        territories.append(territory)
        zone_index[point] = territory.id

    # Flood-fill everything else with an explicit worklist.
    for seed in sorted(unscanned):
        if seed not in unscanned:
            continue
        unscanned.discard(seed)
        terrain = zone_grid[seed].terrain
        territory = Territory(id=len(territories), terrain=terrain)
        territory.zones.add(seed)
        zone_index[seed] = territory.id
        territories.append(territory)

        stack = [seed]
        while stack:
            current = stack.pop()
            for neighbor, direction in current.neighbors():
                if neighbor not in zone_grid or neighbor in territory.zones:
                    continue
                if (
                    neighbor in unscanned
                    and zone_grid[neighbor].terrain == terrain
                ):
                    unscanned.discard(neighbor)
                    territory.zones.add(neighbor)
                    zone_index[neighbor] = territory.id
                    stack.append(neighbor)
                else:
                    _add_border(territory, zone_grid, neighbor, direction)

    for territory in territories:
        territory.neighbor_ids = {
            zone_index[p] for p in territory.bordering_zones
        }

    log.debug(
        "built %d territories from %d zones", len(territories), len(zone_grid)
    )
    return territories, zone_index
