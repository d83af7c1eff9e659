"""Load card catalogs from JSON files.

A catalog file holds the card table (id -> four zones in NW, NE, SE, SW
order, each zone written as ``[terrain, north, east, south, west]`` with
trailing hut flags optional) and the rotation read-order table. The
built-in base set ships under ``limes/catalogs/``.

Used by:
  - ``zones.py`` — the default catalog when none is passed in.
  - ``state.py`` — via ``zones.build_zone_grid``.
"""

from __future__ import annotations

import functools
import json
from pathlib import Path

from .types import CardCatalog

# limes/catalogs/ sits next to this module
_CATALOGS_DIR = Path(__file__).parent / "catalogs"

DEFAULT_CATALOG_NAME = "limes"


def builtin_catalog_path(name: str) -> Path:
    """Return the path to a built-in catalog JSON file.

    Args:
        name: Catalog name without extension (e.g. "limes").

    Returns:
        Path to ``limes/catalogs/{name}.json``.
    """
    return _CATALOGS_DIR / f"{name}.json"


def load_catalog(path: Path) -> CardCatalog:
    """Load a JSON catalog file and return a typed ``CardCatalog``.

    Raises ValueError for files that are not JSON or whose card or rotation
    tables are malformed.
    """
    if path.suffix.lower() != ".json":
        raise ValueError(f"Unsupported catalog file extension: {path}")
    with open(path) as f:
        data = json.load(f)
    return CardCatalog.from_dict(data)


@functools.lru_cache(maxsize=None)
def default_catalog() -> CardCatalog:
    """The built-in base set, loaded once."""
    return load_catalog(builtin_catalog_path(DEFAULT_CATALOG_NAME))
