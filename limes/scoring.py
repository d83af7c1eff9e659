"""Scoring of territories occupied by workers.

Each distinct occupied territory scores once, however many workers stand
in it; the points are attributed to the first worker position seen in
that territory. Base points by terrain:

  Field   number of zones in the territory
  Water   huts facing into the water (``Territory.hut_count``)
  Forest  number of distinct neighboring territories
  Tower   Forest zones seen along the four straight lines from the tower,
          each line stopping at the grid edge or at another tower

The ``profis`` variant adds:

  Field   workers in the territory itself and in each adjacent territory;
          with ``ferrymen`` as well, an occupied adjacent water territory
          also lends the workers of its own neighbors (one hop only)
  Water   1 per adjacent tower
  Forest  1 per hut on the forest's own zones
  Tower   Field zones seen along the same lines

``diagonals`` never changes scores, and ``ferrymen`` alone only affects
worker movement, which lives outside this engine.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field

from .state import MapState
from .types import (
    FIELD,
    FOREST,
    TOWER,
    WATER,
    InvariantError,
    Point,
    RuleVariants,
    Territory,
)
from .zones import ZoneGrid


@dataclass
class ScoreResult:
    total: int = 0
    by_zone: dict[Point, int] = field(default_factory=dict)
    by_territory: dict[int, int] = field(default_factory=dict)


def tower_sightline_counts(zone_grid: ZoneGrid, tower: Point) -> Counter:
    """Count zones by terrain along the four lines out from a tower."""
    counts: Counter = Counter()
    for direction in range(4):
        point = tower.step(direction)
        while point in zone_grid and zone_grid[point].terrain != TOWER:
            counts[zone_grid[point].terrain] += 1
            point = point.step(direction)
    return counts


def _field_worker_bonus(
    state: MapState,
    territory: Territory,
    worker_counts: Counter,
    variants: RuleVariants,
) -> int:
    counted = {territory.id} | territory.neighbor_ids
    if variants.ferrymen:
        for neighbor_id in territory.neighbor_ids:
            neighbor = state.territory(neighbor_id)
            if neighbor.terrain == WATER and worker_counts[neighbor_id]:
                counted |= neighbor.neighbor_ids
    return sum(worker_counts[tid] for tid in counted)


def territory_points(
    state: MapState,
    territory: Territory,
    worker_counts: Counter,
    variants: RuleVariants | None = None,
) -> int:
    """Points scored by one territory.

    ``worker_counts`` maps territory id to the number of workers in it.
    """
    variants = variants or RuleVariants()
    terrain = territory.terrain
    if terrain == FIELD:
        points = territory.size
        if variants.profis:
            points += _field_worker_bonus(
                state, territory, worker_counts, variants
            )
    elif terrain == WATER:
        points = territory.hut_count
        if variants.profis:
            points += sum(
                1
                for tid in territory.neighbor_ids
                if state.territory(tid).terrain == TOWER
            )
    elif terrain == FOREST:
        points = len(territory.neighbor_ids)
        if variants.profis:
            points += sum(
                state.zone_grid[p].hut_total for p in territory.zones
            )
    elif terrain == TOWER:
        counts = tower_sightline_counts(
            state.zone_grid, territory.top_left_zone
        )
        points = counts[FOREST]
        if variants.profis:
            points += counts[FIELD]
    else:
        raise InvariantError(f"Territory {territory.id} has terrain {terrain}")
    return points


def count_workers(state: MapState, workers: Iterable[Point]) -> Counter:
    """Workers per territory id. Stacked workers count individually."""
    counts: Counter = Counter()
    for worker in workers:
        territory_id = state.zone_index.get(worker)
        if territory_id is None:
            raise InvariantError(f"Worker at {worker} is not on any zone")
        counts[territory_id] += 1
    return counts


def score_workers(
    state: MapState,
    workers: Iterable[Point],
    variants: RuleVariants | None = None,
) -> ScoreResult:
    """Score every occupied territory once.

    Raises InvariantError when a worker stands on a position with no zone,
    which means ``state`` is stale.
    """
    variants = variants or RuleVariants()
    workers = list(workers)
    worker_counts = count_workers(state, workers)

    result = ScoreResult()
    for worker in workers:
        territory_id = state.zone_index[worker]
        if territory_id in result.by_territory:
            continue
        points = territory_points(
            state, state.territories[territory_id], worker_counts, variants
        )
        result.by_territory[territory_id] = points
        result.by_zone[worker] = points
        result.total += points
    return result
