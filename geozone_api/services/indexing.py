# services/indexing.py
# Narrow interface over the hexagonal grid library

import re
from typing import List, Optional, Protocol, Sequence, Tuple

import h3
from shapely.geometry import Polygon

LatLng = Tuple[float, float]

# Every H3 cell prints as exactly 15 hex digits
_CELL_TEXT = re.compile(r"[0-9a-fA-F]{15}")


class IndexingEngine(Protocol):
    """
    Everything the zone services need from a hierarchical hex grid.

    Any object with these methods works; H3Engine is the default.
    Coordinates are always (lat, lng).
    """

    name: str

    def point_to_cell(self, lat: float, lng: float, resolution: int) -> str: ...

    def cell_to_point(self, cell: str) -> LatLng: ...

    def cell_to_boundary(self, cell: str) -> List[LatLng]: ...

    def cell_to_resolution(self, cell: str) -> int: ...

    def canonical_cell(self, cell: str) -> Optional[str]: ...

    def is_valid_cell(self, cell: str) -> bool: ...

    def ring_disk(self, cell: str, k: int) -> List[str]: ...

    def cell_to_parent(self, cell: str, resolution: int) -> str: ...

    def cell_to_children(self, cell: str, resolution: int) -> List[str]: ...

    def polygon_fill(self, ring: Sequence[Sequence[float]], resolution: int) -> List[str]: ...

    def are_adjacent(self, a: str, b: str) -> bool: ...


class H3Engine:
    """IndexingEngine backed by h3-py (v4 API)."""

    name = "h3 " + h3.versions()["python"]

    def point_to_cell(self, lat, lng, resolution):
        return h3.latlng_to_cell(lat, lng, resolution)

    def cell_to_point(self, cell):
        lat, lng = h3.cell_to_latlng(cell)
        return lat, lng

    def cell_to_boundary(self, cell):
        return [(lat, lng) for lat, lng in h3.cell_to_boundary(cell)]

    def cell_to_resolution(self, cell):
        return h3.get_resolution(cell)

    def canonical_cell(self, cell):
        """Lowercase form of a valid cell hash, or None if it is not one."""
        # h3 also parses "0x", "_", signs and padding, then raises on overflow
        if not isinstance(cell, str) or not _CELL_TEXT.fullmatch(cell):
            return None
        cell = cell.lower()
        try:
            valid = h3.is_valid_cell(cell)
        except (ValueError, OverflowError, TypeError):
            return None
        return cell if valid else None

    def is_valid_cell(self, cell):
        return self.canonical_cell(cell) is not None

    def ring_disk(self, cell, k):
        return list(h3.grid_disk(cell, k))

    def cell_to_parent(self, cell, resolution):
        return h3.cell_to_parent(cell, resolution)

    def cell_to_children(self, cell, resolution):
        return list(h3.cell_to_children(cell, resolution))

    def polygon_fill(self, ring, resolution):
        # h3 fails on zero-area rings (point or line boxes); they cover nothing
        if Polygon([(lng, lat) for lat, lng in ring]).area == 0:
            return []
        shape = h3.LatLngPoly([(float(lat), float(lng)) for lat, lng in ring])
        return list(h3.h3shape_to_cells(shape, resolution))

    def are_adjacent(self, a, b):
        # h3 raises for cells at different resolutions; those never touch
        if h3.get_resolution(a) != h3.get_resolution(b):
            return False
        return h3.are_neighbor_cells(a, b)
