"""Data types for the Limes territory engine.

Coordinates, cards, placements, territories and the configuration
dataclasses shared by every other module.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

FIELD = "Y"
WATER = "W"
FOREST = "F"
TOWER = "T"
TERRAINS = (FIELD, WATER, FOREST, TOWER)

NORTH = 0
EAST = 1
SOUTH = 2
WEST = 3
NORTH_EAST = 4
SOUTH_EAST = 5
SOUTH_WEST = 6
NORTH_WEST = 7

_STEPS = (
    (0, -1),
    (1, 0),
    (0, 1),
    (-1, 0),
    (1, -1),
    (1, 1),
    (-1, 1),
    (-1, -1),
)


class InvariantError(RuntimeError):
    """Raised when engine inputs violate an invariant the caller owns."""


def opposite(direction: int) -> int:
    return (direction + 2) % 4


@dataclass(frozen=True, order=True)
class Point:
    x: int
    y: int

    @staticmethod
    def from_key(key: str) -> Point:
        x, y = key.split(",")
        return Point(int(x), int(y))

    @property
    def key(self) -> str:
        return f"{self.x},{self.y}"

    def step(self, direction: int) -> Point:
        dx, dy = _STEPS[direction]
        return Point(self.x + dx, self.y + dy)

    def neighbors(self, diagonals: bool = False) -> list[tuple[Point, int]]:
        """Adjacent points paired with the direction leading to them.

        Orthogonal neighbors come first in N, E, S, W order; diagonal
        neighbors follow (NE, SE, SW, NW) only when requested.
        """
        count = 8 if diagonals else 4
        return [(self.step(d), d) for d in range(count)]

    def __str__(self) -> str:
        return self.key


@dataclass(frozen=True)
class Zone:
    terrain: str
    huts: tuple[bool, bool, bool, bool] = (False, False, False, False)

    @staticmethod
    def from_list(raw: list) -> Zone:
        """Parse the catalog form ``[terrain, north, east, south, west]``.

        Missing hut flags are false.
        """
        if not raw or raw[0] not in TERRAINS:
            raise ValueError(f"Unknown zone terrain: {raw!r}")
        flags = [bool(f) for f in raw[1:]]
        if len(flags) > 4:
            raise ValueError(f"Zone has more than four hut flags: {raw!r}")
        flags += [False] * (4 - len(flags))
        return Zone(terrain=raw[0], huts=tuple(flags))

    def to_list(self) -> list:
        return [self.terrain, *(int(h) for h in self.huts)]

    @property
    def hut_total(self) -> int:
        return sum(self.huts)


@dataclass(frozen=True)
class CardDefinition:
    id: int
    zones: tuple[Zone, Zone, Zone, Zone]

    @staticmethod
    def from_list(card_id: int, raw: list) -> CardDefinition:
        if len(raw) != 4:
            raise ValueError(
                f"Card {card_id} must have exactly 4 zones, got {len(raw)}"
            )
        return CardDefinition(
            id=card_id,
            zones=tuple(Zone.from_list(z) for z in raw),
        )


@dataclass
class CardCatalog:
    cards: dict[int, CardDefinition]
    rotation_order: dict[int, tuple[int, int, int, int]]
    name: str | None = None

    @staticmethod
    def from_dict(d: dict) -> CardCatalog:
        orders: dict[int, tuple[int, int, int, int]] = {}
        for rot, order in d["rotation_order"].items():
            if sorted(order) != [0, 1, 2, 3]:
                raise ValueError(
                    f"Rotation {rot} order is not a permutation: {order!r}"
                )
            orders[int(rot)] = tuple(order)
        if sorted(orders) != [0, 1, 2, 3]:
            raise ValueError(
                f"Rotation table needs rotations 0-3, got {sorted(orders)}"
            )
        cards = {
            int(cid): CardDefinition.from_list(int(cid), raw)
            for cid, raw in d["cards"].items()
        }
        return CardCatalog(
            cards=cards, rotation_order=orders, name=d.get("name")
        )

    def card(self, card_id: int) -> CardDefinition:
        try:
            return self.cards[card_id]
        except KeyError:
            raise KeyError(f"Unknown card id: {card_id!r}") from None

    def order(self, rotation: int) -> tuple[int, int, int, int]:
        return self.rotation_order[rotation % 4]


@dataclass(frozen=True)
class Placement:
    position: Point
    card_id: int
    rotation: int = 0

    @staticmethod
    def from_dict(d: dict) -> Placement:
        return Placement(
            position=Point(d["x"], d["y"]),
            card_id=d["card"],
            rotation=d.get("rotation", 0),
        )

    def to_dict(self) -> dict:
        return {
            "x": self.position.x,
            "y": self.position.y,
            "card": self.card_id,
            "rotation": self.rotation,
        }


def placements_from_cards(cards: dict[str, list[int]]) -> list[Placement]:
    """Convert a ``{"x,y": [card_id, rotation]}`` map into placements."""
    return [
        Placement(Point.from_key(key), card_id, rotation)
        for key, (card_id, rotation) in cards.items()
    ]


@dataclass
class RuleVariants:
    diagonals: bool = False
    ferrymen: bool = False
    profis: bool = False

    @staticmethod
    def from_dict(d: dict | None) -> RuleVariants:
        if not d:
            return RuleVariants()
        return RuleVariants(
            diagonals=bool(d.get("diagonals", False)),
            ferrymen=bool(d.get("ferrymen", False)),
            profis=bool(d.get("profis", False)),
        )

    def to_dict(self) -> dict:
        return {
            "diagonals": self.diagonals,
            "ferrymen": self.ferrymen,
            "profis": self.profis,
        }


@dataclass(frozen=True)
class BoardGeometry:
    """Mapping from fine-grid zones to rendering-space squares.

    Card ``(cx, cy)`` occupies ``[cx * card_size, (cx + 1) * card_size)`` on
    each axis (plus the offsets). Its four zones are squares of
    ``zone_width`` separated by the outer and inner border lines; ``margin``
    insets every zone square further.
    """

    card_size: float = 180.0
    border_width: float = 2.0
    inner_border_width: float = 2.0
    margin: float = 0.0
    offset_x: float = 0.0
    offset_y: float = 0.0

    @staticmethod
    def unit() -> BoardGeometry:
        """Geometry where zone (x, y) covers exactly [x, x+1] x [y, y+1]."""
        return BoardGeometry(
            card_size=2.0, border_width=0.0, inner_border_width=0.0
        )

    @staticmethod
    def from_dict(d: dict | None) -> BoardGeometry:
        if not d:
            return BoardGeometry()
        return BoardGeometry(
            card_size=d.get("card_size", 180.0),
            border_width=d.get("border_width", 2.0),
            inner_border_width=d.get("inner_border_width", 2.0),
            margin=d.get("margin", 0.0),
            offset_x=d.get("offset_x", 0.0),
            offset_y=d.get("offset_y", 0.0),
        )

    @property
    def zone_width(self) -> float:
        return (
            self.card_size / 2
            - self.border_width / 2
            - self.inner_border_width / 2
        )

    def zone_origin(self, quadrant: int) -> tuple[float, float]:
        """Offset of a zone square from its card origin (NW, NE, SE, SW)."""
        near = self.border_width / 2
        far = near + self.zone_width + self.inner_border_width
        return ((near, near), (far, near), (far, far), (near, far))[quadrant]


@dataclass
class Territory:
    id: int
    terrain: str
    zones: set[Point] = field(default_factory=set)
    bordering_zones: set[Point] = field(default_factory=set)
    neighbor_ids: set[int] = field(default_factory=set)
    hut_count: int = 0
    # Outlines keyed by geometry; dropped together with the territory.
    _outlines: dict = field(default_factory=dict, repr=False, compare=False)

    @property
    def size(self) -> int:
        return len(self.zones)

    @property
    def top_left_zone(self) -> Point:
        """Lowest y among the zones at the minimum x."""
        return min(self.zones)

    def outline(
        self,
        geometry: BoardGeometry,
        trace: Callable[[set[Point], BoardGeometry], Any],
    ) -> Any:
        """Outline for ``geometry``, built by ``trace(zones, geometry)`` once.

        Later calls with an equal geometry return the same object.
        """
        cached = self._outlines.get(geometry)
        if cached is None:
            cached = trace(self.zones, geometry)
            self._outlines[geometry] = cached
        return cached
