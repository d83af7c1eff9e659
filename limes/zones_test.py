"""Tests for zone grid construction."""

import pytest

from limes.catalog_io import default_catalog
from limes.types import FIELD, FOREST, Placement, Point, Zone
from limes.zones import (
    build_zone_grid,
    card_position_of,
    card_zones,
    format_zone_grid,
    quadrant_of,
    rotate_zone,
)

N, E, S, W = (
    (True, False, False, False),
    (False, True, False, False),
    (False, False, True, False),
    (False, False, False, True),
)
NONE = (False, False, False, False)


def _place(x, y, card_id, rotation=0):
    return Placement(Point(x, y), card_id, rotation)


class TestRotation:
    def test_identity_order(self):
        zone = Zone(FIELD, (True, False, True, False))
        assert rotate_zone(zone, (0, 1, 2, 3)) == zone

    def test_quarter_turn_moves_huts_clockwise(self):
        # Read order for one quarter turn: the west hut ends up north.
        zone = Zone(FIELD, W)
        assert rotate_zone(zone, (3, 0, 1, 2)).huts == N
        assert rotate_zone(Zone(FIELD, N), (3, 0, 1, 2)).huts == E

    def test_card_one_unrotated(self):
        assert card_zones(1, 0) == [
            Zone(FOREST, N),
            Zone(FIELD, E),
            Zone(FIELD, NONE),
            Zone(FOREST, NONE),
        ]

    def test_card_one_quarter_turn(self):
        assert card_zones(1, 1) == [
            Zone(FOREST, NONE),
            Zone(FOREST, E),
            Zone(FIELD, S),
            Zone(FIELD, NONE),
        ]

    def test_card_one_half_turn(self):
        assert card_zones(1, 2) == [
            Zone(FIELD, NONE),
            Zone(FOREST, NONE),
            Zone(FOREST, S),
            Zone(FIELD, W),
        ]

    def test_full_turn_is_identity_for_every_card(self):
        for card_id in default_catalog().cards:
            assert card_zones(card_id, 4) == card_zones(card_id, 0)
            assert card_zones(card_id, 5) == card_zones(card_id, 1)

    def test_rotation_preserves_hut_totals(self):
        for card_id in default_catalog().cards:
            totals = {
                sum(z.hut_total for z in card_zones(card_id, r))
                for r in range(4)
            }
            assert len(totals) == 1


class TestBuildZoneGrid:
    def test_single_card_quadrants(self):
        grid = build_zone_grid([_place(0, 0, 1)])
        assert grid == {
            Point(0, 0): Zone(FOREST, N),
            Point(1, 0): Zone(FIELD, E),
            Point(1, 1): Zone(FIELD, NONE),
            Point(0, 1): Zone(FOREST, NONE),
        }

    def test_card_position_scales_by_two(self):
        grid = build_zone_grid([_place(-1, 2, 1)])
        assert set(grid) == {
            Point(-2, 4),
            Point(-1, 4),
            Point(-1, 5),
            Point(-2, 5),
        }
        assert grid[Point(-2, 4)] == Zone(FOREST, N)

    def test_placement_order_does_not_matter(self):
        placements = [_place(0, 0, 3), _place(1, 0, 9, 2), _place(0, 1, 14)]
        assert build_zone_grid(placements) == build_zone_grid(
            list(reversed(placements))
        )

    def test_duplicate_position_rejected(self):
        with pytest.raises(ValueError):
            build_zone_grid([_place(0, 0, 1), _place(0, 0, 2)])

    def test_unknown_card_is_fatal(self):
        with pytest.raises(KeyError):
            build_zone_grid([_place(0, 0, 99)])

    def test_empty(self):
        assert build_zone_grid([]) == {}


class TestFineGridHelpers:
    def test_quadrants(self):
        assert quadrant_of(Point(0, 0)) == 0
        assert quadrant_of(Point(1, 0)) == 1
        assert quadrant_of(Point(1, 1)) == 2
        assert quadrant_of(Point(0, 1)) == 3
        assert quadrant_of(Point(-1, -1)) == 2

    def test_card_position(self):
        assert card_position_of(Point(3, 2)) == Point(1, 1)
        assert card_position_of(Point(-1, -2)) == Point(-1, -1)


class TestFormatZoneGrid:
    def test_single_card(self):
        grid = build_zone_grid([_place(0, 0, 1)])
        assert format_zone_grid(grid) == "F1000 Y0100\nF0000 Y0000"

    def test_empty_positions_are_blank(self):
        grid = build_zone_grid([_place(0, 0, 1), _place(1, 1, 1)])
        lines = format_zone_grid(grid).split("\n")
        assert len(lines) == 4
        assert lines[0] == "F1000 Y0100"
        assert lines[2].startswith(" " * 11)

    def test_empty_grid(self):
        assert format_zone_grid({}) == ""
