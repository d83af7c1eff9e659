"""Tests for map state snapshots and outline memoization."""

import pytest

from limes.state import build_map_state
from limes.types import (
    FIELD,
    FOREST,
    BoardGeometry,
    CardCatalog,
    InvariantError,
    Placement,
    Point,
)


def _place(x, y, card_id, rotation=0):
    return Placement(Point(x, y), card_id, rotation)


class TestBuildMapState:
    def test_single_card(self):
        state = build_map_state([_place(0, 0, 1)])
        assert len(state.zone_grid) == 4
        assert sorted(t.terrain for t in state.territories) == [FOREST, FIELD]

    def test_provisional_card_is_analysed(self):
        state = build_map_state(
            [_place(0, 0, 12)], provisional=_place(1, 0, 20)
        )
        assert len(state.zone_grid) == 8
        assert state.territory_at(Point(2, 0)).size == 3
        assert state.occupied_card_positions == {Point(0, 0), Point(1, 0)}

    def test_rebuild_matches_one_shot_build(self):
        placements = [_place(0, 0, 12), _place(1, 0, 20)]
        incremental = build_map_state(placements[:1])
        incremental = build_map_state(
            incremental.placements + placements[1:]
        )
        direct = build_map_state(placements)
        assert incremental.zone_grid == direct.zone_grid
        assert {frozenset(t.zones) for t in incremental.territories} == {
            frozenset(t.zones) for t in direct.territories
        }

    def test_custom_catalog(self):
        catalog = CardCatalog.from_dict(
            {
                "rotation_order": {
                    "0": [0, 1, 2, 3],
                    "1": [3, 0, 1, 2],
                    "2": [2, 3, 0, 1],
                    "3": [1, 2, 3, 0],
                },
                "cards": {"1": [["Y"], ["Y"], ["Y"], ["Y"]]},
            }
        )
        state = build_map_state([_place(0, 0, 1)], catalog=catalog)
        assert len(state.territories) == 1
        assert state.territories[0].size == 4

    def test_empty(self):
        state = build_map_state([])
        assert state.zone_grid == {}
        assert state.territories == []


class TestLookups:
    def test_territory_at(self):
        state = build_map_state([_place(0, 0, 1)])
        assert state.territory_at(Point(0, 1)).terrain == FOREST
        assert state.territory_at(Point(5, 5)) is None

    def test_unknown_territory_id(self):
        state = build_map_state([_place(0, 0, 1)])
        with pytest.raises(InvariantError):
            state.territory(len(state.territories))
        with pytest.raises(InvariantError):
            state.territory(-1)


class TestOutlineCache:
    def test_outline_is_memoized(self):
        state = build_map_state([_place(0, 0, 1)])
        territory = state.territory_at(Point(0, 0))
        first = state.outline(territory)
        assert state.outline(territory.id) is first

    def test_cache_is_per_geometry(self):
        state = build_map_state([_place(0, 0, 1)])
        territory = state.territory_at(Point(0, 0))
        default = state.outline(territory)
        unit = state.outline(territory, BoardGeometry.unit())
        assert unit is not default
        assert unit.outer == [(0, 0), (1, 0), (1, 2), (0, 2)]

    def test_new_state_drops_cached_outlines(self):
        placements = [_place(0, 0, 1)]
        old = build_map_state(placements)
        old_outline = old.outline(old.territory_at(Point(0, 0)))
        new = build_map_state(placements)
        new_outline = new.outline(new.territory_at(Point(0, 0)))
        assert new_outline is not old_outline
        assert new_outline == old_outline
