"""Off-screen hit buffer for resolving pointer positions to territories.

Each territory's outline is filled into its own 1-bit mask (outer loop
painted, holes cleared) and the masks are composited into an integer
array holding ``territory id + 1`` per pixel, 0 meaning no territory.
Looking up a pixel is then a single array read.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from PIL import Image, ImageDraw

from .state import MapState
from .types import BoardGeometry


@dataclass
class HitBuffer:
    pixels: np.ndarray  # (height, width), territory id + 1, 0 = none

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    def territory_id_at(self, x: float, y: float) -> int | None:
        ix = int(x)
        iy = int(y)
        if not (0 <= ix < self.width and 0 <= iy < self.height):
            return None
        value = int(self.pixels[iy, ix])
        return value - 1 if value else None


def render_hit_buffer(
    state: MapState,
    geometry: BoardGeometry,
    width: int,
    height: int,
) -> HitBuffer:
    """Rasterize every territory outline into a new hit buffer."""
    pixels = np.zeros((height, width), dtype=np.int32)
    for territory in state.territories:
        outline = state.outline(territory, geometry)
        mask = Image.new("1", (width, height), 0)
        draw = ImageDraw.Draw(mask)
        draw.polygon(outline.outer, fill=1)
        for hole in outline.holes:
            draw.polygon(hole, fill=0)
        pixels[np.asarray(mask, dtype=bool)] = territory.id + 1
    return HitBuffer(pixels=pixels)
