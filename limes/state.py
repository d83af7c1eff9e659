"""Caller-owned snapshot of the analysed map.

``build_map_state`` runs the zone grid builder and then the territory
builder over the current placements (plus the provisional card, if any)
and returns a fresh ``MapState``. Nothing is global: whenever placements
change the caller builds a new state and drops the old one, which also
drops every outline memoized on the old territories.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from .boundary import Outline, trace_outline
from .territories import build_territories
from .types import (
    BoardGeometry,
    CardCatalog,
    InvariantError,
    Placement,
    Point,
    Territory,
)
from .zones import ZoneGrid, build_zone_grid


@dataclass
class MapState:
    placements: list[Placement]
    zone_grid: ZoneGrid
    territories: list[Territory] = field(default_factory=list)
    zone_index: dict[Point, int] = field(default_factory=dict)

    def territory(self, territory_id: int) -> Territory:
        if not 0 <= territory_id < len(self.territories):
            raise InvariantError(f"Unknown territory id: {territory_id}")
        return self.territories[territory_id]

    def territory_at(self, point: Point) -> Territory | None:
        """Territory owning the zone at ``point``, or None for empty space."""
        territory_id = self.zone_index.get(point)
        if territory_id is None:
            return None
        return self.territories[territory_id]

    def outline(
        self,
        territory: Territory | int,
        geometry: BoardGeometry | None = None,
    ) -> Outline:
        """Outline of a territory, traced on first use and then memoized."""
        if isinstance(territory, int):
            territory = self.territory(territory)
        return territory.outline(geometry or BoardGeometry(), trace_outline)

    @property
    def occupied_card_positions(self) -> set[Point]:
        return {p.position for p in self.placements}


def build_map_state(
    placements: Iterable[Placement],
    catalog: CardCatalog | None = None,
    provisional: Placement | None = None,
) -> MapState:
    """Build zone grid and territories for the given placements.

    ``provisional`` is a card being previewed before it is confirmed; it is
    analysed exactly like a placed card.
    """
    placed = list(placements)
    if provisional is not None:
        placed.append(provisional)
    zone_grid = build_zone_grid(placed, catalog)
    territories, zone_index = build_territories(zone_grid)
    return MapState(
        placements=placed,
        zone_grid=zone_grid,
        territories=territories,
        zone_index=zone_index,
    )
