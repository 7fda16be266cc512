# services/zones.py
# Coordinate <-> zone hash <-> hierarchy lookups

import functools
from typing import List, Optional

from shapely.geometry import Polygon, mapping

from geozone_api.config import (
    CHILDREN_PAGE_MAX, CHILDREN_PREVIEW_LIMIT, MAX_RESOLUTION, MIN_RESOLUTION,
    RESOLUTION_TABLE, USAGE_TIERS
)
from geozone_api.errors import (
    InternalError, InvalidHashError, InvalidPaginationError, ZoneQueryError
)
from geozone_api.logging_config import get_logger
from geozone_api.models import (
    AdjacencyResponse, BoundaryResponse, ChildrenPage, Coordinates, GeometryResponse,
    NeighborsResponse, ResolutionInfo, ResolutionsResponse, ZoneDetail, ZoneInput,
    ZoneRecord, ZoneResponse
)
from geozone_api.services.indexing import H3Engine, IndexingEngine
from geozone_api.validation import validate_cell_hash

logger = get_logger(__name__)

# Built once, shared by every request
RESOLUTIONS = ResolutionsResponse(
    description="H3 resolution levels with approximate sizes",
    resolutions=[
        ResolutionInfo(resolution=r, avg_hexagon_edge_length=edge, avg_hexagon_area=area)
        for r, edge, area in RESOLUTION_TABLE
    ],
    usage=dict(USAGE_TIERS),
)


def engine_call(method):
    """Turn unexpected engine failures into InternalError. API errors pass through."""

    @functools.wraps(method)
    def wrapper(*args, **kwargs):
        try:
            return method(*args, **kwargs)
        except ZoneQueryError:
            raise
        except Exception as e:
            logger.exception("Indexing engine failed in %s", method.__name__)
            raise InternalError() from e

    return wrapper


class ZoneService:
    """
    Stateless translation between coordinates, zone hashes and the hierarchy.

    Input is assumed to have passed validation already, except for hashes:
    every hash-taking method re-checks the hash and raises InvalidHashError,
    so a caller that skips validation still gets the right error. Hashes
    are echoed back in their canonical lowercase form.
    """

    def __init__(self, engine: Optional[IndexingEngine] = None):
        self.engine = engine or H3Engine()

    def _require_cell(self, cell: str) -> str:
        result = validate_cell_hash(cell, self.engine)
        if not result.is_valid:
            raise InvalidHashError(result.error)
        return self.engine.canonical_cell(cell)

    def _center(self, cell: str) -> Coordinates:
        lat, lng = self.engine.cell_to_point(cell)
        return Coordinates(lat=lat, lng=lng)

    def _boundary(self, cell: str) -> List[Coordinates]:
        return [Coordinates(lat=lat, lng=lng) for lat, lng in self.engine.cell_to_boundary(cell)]

    def record(self, cell: str) -> ZoneRecord:
        """Enrich a hash with its center and resolution."""
        return ZoneRecord(
            hash=cell,
            center=self._center(cell),
            resolution=self.engine.cell_to_resolution(cell),
        )

    def records(self, cells) -> List[ZoneRecord]:
        return [self.record(c) for c in cells]

    @engine_call
    def resolve_zone(self, lat: float, lng: float, resolution: int) -> ZoneResponse:
        cell = self.engine.point_to_cell(lat, lng, resolution)
        return ZoneResponse(
            hash=cell,
            input=ZoneInput(lat=lat, lng=lng, resolution=resolution),
            center=self._center(cell),
            resolution=self.engine.cell_to_resolution(cell),
        )

    @engine_call
    def zone_center(self, cell: str) -> ZoneRecord:
        cell = self._require_cell(cell)
        return self.record(cell)

    @engine_call
    def zone_boundary(self, cell: str) -> BoundaryResponse:
        cell = self._require_cell(cell)
        return BoundaryResponse(
            hash=cell,
            boundary=self._boundary(cell),
            resolution=self.engine.cell_to_resolution(cell),
        )

    @engine_call
    def zone_resolution(self, cell: str) -> int:
        cell = self._require_cell(cell)
        return self.engine.cell_to_resolution(cell)

    @engine_call
    def zone_neighbors(self, cell: str, k: int = 1) -> NeighborsResponse:
        """Full k-disk around the cell. The cell itself is part of the result."""
        cell = self._require_cell(cell)
        disk = self.engine.ring_disk(cell, k)
        return NeighborsResponse(
            hash=cell,
            k=k,
            neighbors=self.records(disk),
            count=len(disk),
            resolution=self.engine.cell_to_resolution(cell),
        )

    @engine_call
    def zone_detail(self, cell: str) -> ZoneDetail:
        """
        Everything about one zone.

        Neighbors exclude the zone itself. Children are capped at
        CHILDREN_PREVIEW_LIMIT but children_count is the real total.
        """
        cell = self._require_cell(cell)
        resolution = self.engine.cell_to_resolution(cell)
        neighbors = [h for h in self.engine.ring_disk(cell, 1) if h != cell]

        parent = None
        if resolution > MIN_RESOLUTION:
            parent = self.engine.cell_to_parent(cell, resolution - 1)

        children = []
        if resolution < MAX_RESOLUTION:
            children = self.engine.cell_to_children(cell, resolution + 1)

        return ZoneDetail(
            hash=cell,
            resolution=resolution,
            center=self._center(cell),
            boundary=self._boundary(cell),
            neighbors=neighbors,
            parent=parent,
            children=children[:CHILDREN_PREVIEW_LIMIT],
            children_count=len(children),
        )

    @engine_call
    def zone_children(self, cell: str, offset: int = 0, limit: int = CHILDREN_PREVIEW_LIMIT) -> ChildrenPage:
        """One page of the zone's children at the next finer resolution."""
        cell = self._require_cell(cell)
        if offset < 0:
            raise InvalidPaginationError("offset must be a non-negative integer")
        if not 1 <= limit <= CHILDREN_PAGE_MAX:
            raise InvalidPaginationError(f"limit must be an integer between 1 and {CHILDREN_PAGE_MAX}")

        resolution = self.engine.cell_to_resolution(cell)
        children = []
        if resolution < MAX_RESOLUTION:
            children = self.engine.cell_to_children(cell, resolution + 1)

        page = children[offset:offset + limit]
        return ChildrenPage(
            hash=cell,
            resolution=resolution,
            child_resolution=resolution + 1 if resolution < MAX_RESOLUTION else None,
            offset=offset,
            limit=limit,
            total=len(children),
            children=page,
            truncated=offset + len(page) < len(children),
        )

    @engine_call
    def zone_geometry(self, cell: str) -> GeometryResponse:
        """Zone boundary as a GeoJSON Polygon ([lng, lat] order)."""
        cell = self._require_cell(cell)
        poly = Polygon([(lng, lat) for lat, lng in self.engine.cell_to_boundary(cell)])
        return GeometryResponse(
            hash=cell,
            resolution=self.engine.cell_to_resolution(cell),
            geometry=mapping(poly),
        )

    @engine_call
    def are_adjacent(self, a: str, b: str) -> AdjacencyResponse:
        a = self._require_cell(a)
        b = self._require_cell(b)
        return AdjacencyResponse(a=a, b=b, adjacent=self.engine.are_adjacent(a, b))

    def resolution_info(self) -> ResolutionsResponse:
        return RESOLUTIONS
