# services/regions.py
# Region -> covering zones (bounding box, radius, polygon)

import math
from typing import List, Sequence

import numpy as np
from pyproj import Geod

from geozone_api.config import MAX_K, METERS_PER_RING
from geozone_api.logging_config import get_logger
from geozone_api.models import (
    BoundingBox, Coordinates, ZonesInAreaResponse, ZonesInPolygonResponse, ZonesInRadiusResponse
)
from geozone_api.services.zones import ZoneService, engine_call

logger = get_logger(__name__)

APPROXIMATE_NOTE = (
    "This is an approximation. For precise radius filtering, "
    "calculate actual distances from center."
)
EXACT_NOTE = (
    "Zones whose center is farther than the radius from the query point were removed. "
    "Ring traversal is still capped, so large radii may miss zones near the edge."
)

# WGS84 ellipsoid for distances and areas
GEOD = Geod(ellps="WGS84")


def estimate_k(radius_m: float) -> int:
    """
    Rough ring count for a radius: one ring per METERS_PER_RING.

    Not resolution-aware. At fine resolutions the disk is much smaller than
    the radius, at coarse ones much larger.
    """
    return max(1, math.ceil(radius_m / METERS_PER_RING))


def bounding_box_ring(box: BoundingBox) -> List[List[float]]:
    """Closed 5-vertex [lat, lng] ring around a box, counter-clockwise from the SW corner."""
    return [
        [box.min_lat, box.min_lng],
        [box.min_lat, box.max_lng],
        [box.max_lat, box.max_lng],
        [box.max_lat, box.min_lng],
        [box.min_lat, box.min_lng],  # Close the ring
    ]


def polygon_area_km2(polygon: Sequence[Sequence[float]]) -> float:
    """Geodesic area of a [lat, lng] ring, in km²."""
    lats = [p[0] for p in polygon]
    lngs = [p[1] for p in polygon]
    area, _ = GEOD.polygon_area_perimeter(lngs, lats)
    return abs(area) / 1_000_000


class RegionEnumerator:
    """
    Enumerates the zones covering a region.

    Cell order is whatever the engine returns. Every cell is enriched
    through ZoneService.record before it goes out.
    """

    def __init__(self, zones: ZoneService):
        self.zones = zones
        self.engine = zones.engine

    @engine_call
    def zones_in_area(self, box: BoundingBox, resolution: int) -> ZonesInAreaResponse:
        # Zero-area boxes (min == max on either axis) cover no zones
        cells = self.engine.polygon_fill(bounding_box_ring(box), resolution)
        logger.debug("Bounding box at res %d -> %d zones", resolution, len(cells))

        return ZonesInAreaResponse(
            bounding_box=box,
            resolution=resolution,
            zones=self.zones.records(cells),
            count=len(cells),
        )

    @engine_call
    def zones_in_radius(
        self, center: Coordinates, radius: float, resolution: int, exact: bool = False
    ) -> ZonesInRadiusResponse:
        """
        Zones around a point, approximated by a ring disk.

        estimated_k is reported before clamping to MAX_K. With exact=True the
        disk is additionally filtered by geodesic distance to each zone's center.
        """
        origin = self.engine.point_to_cell(center.lat, center.lng, resolution)
        estimated = estimate_k(radius)
        k = min(estimated, MAX_K)

        records = self.zones.records(self.engine.ring_disk(origin, k))
        if exact:
            records = self._within(records, center, radius)

        logger.debug(
            "Radius %.1fm at res %d: estimatedK=%d k=%d exact=%s -> %d zones",
            radius, resolution, estimated, k, exact, len(records)
        )

        return ZonesInRadiusResponse(
            center=center,
            radius=radius,
            resolution=resolution,
            estimated_k=estimated,
            k=k,
            exact=exact,
            zones=records,
            count=len(records),
            note=EXACT_NOTE if exact else APPROXIMATE_NOTE,
        )

    def _within(self, records, center: Coordinates, radius: float):
        if not records:
            return records
        lats = np.array([r.center.lat for r in records])
        lngs = np.array([r.center.lng for r in records])
        _, _, dist = GEOD.inv(
            np.full_like(lngs, center.lng), np.full_like(lats, center.lat), lngs, lats
        )
        return [r for r, d in zip(records, np.atleast_1d(dist)) if d <= radius]

    @engine_call
    def zones_in_polygon(self, polygon: List[List[float]], resolution: int) -> ZonesInPolygonResponse:
        # Used as given. No automatic closing, unlike the bounding box path.
        cells = self.engine.polygon_fill(polygon, resolution)
        logger.debug("Polygon with %d vertices at res %d -> %d zones", len(polygon), resolution, len(cells))

        return ZonesInPolygonResponse(
            polygon=polygon,
            resolution=resolution,
            zones=self.zones.records(cells),
            count=len(cells),
            area_km2=round(polygon_area_km2(polygon), 6),
        )
