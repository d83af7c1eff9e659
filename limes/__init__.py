"""Territory analysis and scoring engine for the Limes tile-placement game.

Typical use::

    state = build_map_state(placements)
    outline = state.outline(state.territory_at(point))
    result = score_workers(state, workers, RuleVariants(profis=True))
"""

from .boundary import Outline, TraceError, trace_outline
from .cardmap import next_card_positions
from .catalog_io import default_catalog, load_catalog
from .hitmap import HitBuffer, render_hit_buffer
from .scoring import ScoreResult, score_workers
from .state import MapState, build_map_state
from .territories import build_territories
from .types import (
    BoardGeometry,
    CardCatalog,
    InvariantError,
    Placement,
    Point,
    RuleVariants,
    Territory,
    Zone,
    placements_from_cards,
)
from .zones import build_zone_grid

__all__ = [
    "BoardGeometry",
    "CardCatalog",
    "HitBuffer",
    "InvariantError",
    "MapState",
    "Outline",
    "Placement",
    "Point",
    "RuleVariants",
    "ScoreResult",
    "Territory",
    "TraceError",
    "Zone",
    "build_map_state",
    "build_territories",
    "build_zone_grid",
    "default_catalog",
    "load_catalog",
    "next_card_positions",
    "placements_from_cards",
    "render_hit_buffer",
    "score_workers",
    "trace_outline",
]
