"""Legal positions for the next card.

A new card must touch an already placed card: orthogonally, or also
diagonally under the ``diagonals`` variant. The finished map is at most
``MAX_GRID_SIZE`` cards along each axis, so once the placed cards span that
many columns (rows), positions outside that span are no longer offered.
"""

from __future__ import annotations

from collections.abc import Iterable

from .types import Point, RuleVariants

MAX_GRID_SIZE = 4


def card_grid_bounds(positions: Iterable[Point]) -> tuple[int, int, int, int]:
    """Return ``(min_x, min_y, size_x, size_y)`` of the placed cards."""
    positions = list(positions)
    if not positions:
        return (0, 0, 0, 0)
    xs = [p.x for p in positions]
    ys = [p.y for p in positions]
    return (
        min(xs),
        min(ys),
        max(xs) - min(xs) + 1,
        max(ys) - min(ys) + 1,
    )


def next_card_positions(
    positions: Iterable[Point],
    variants: RuleVariants | None = None,
) -> list[Point]:
    """Every empty card position where the next card may go, sorted."""
    variants = variants or RuleVariants()
    placed = set(positions)
    if not placed:
        return [Point(0, 0)]

    min_x, min_y, size_x, size_y = card_grid_bounds(placed)
    result: set[Point] = set()
    for card in placed:
        for neighbor, _ in card.neighbors(diagonals=variants.diagonals):
            if neighbor in placed:
                continue
            if size_x >= MAX_GRID_SIZE and not (
                min_x <= neighbor.x < min_x + size_x
            ):
                continue
            if size_y >= MAX_GRID_SIZE and not (
                min_y <= neighbor.y < min_y + size_y
            ):
                continue
            result.add(neighbor)
    return sorted(result)
