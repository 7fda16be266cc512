# routes/regions.py
# Endpoints that enumerate zones over an area

from typing import Optional

from fastapi import APIRouter, Query

from geozone_api.models import (
    AdjacencyResponse, BoundingBox, Coordinates, ErrorResponse, PolygonRequest, ZonesInAreaResponse,
    ZonesInPolygonResponse, ZonesInRadiusResponse
)
from geozone_api.routes import params
from geozone_api.services.regions import RegionEnumerator
from geozone_api.services.zones import ZoneService

router = APIRouter(
    prefix="/zones", tags=["Regions"], responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}
)

# Replaced by main.py (or tests) through set_dependencies
zones = ZoneService()
regions = RegionEnumerator(zones)


def set_dependencies(zone_service: ZoneService, enumerator: RegionEnumerator):
    """Called by main.py to inject dependencies."""
    global zones, regions
    zones = zone_service
    regions = enumerator


@router.get("/area", response_model=ZonesInAreaResponse)
def zones_in_area(
    min_lat: Optional[str] = Query(None, alias="minLat"),
    min_lng: Optional[str] = Query(None, alias="minLng"),
    max_lat: Optional[str] = Query(None, alias="maxLat"),
    max_lng: Optional[str] = Query(None, alias="maxLng"),
    resolution: Optional[str] = Query(None)
):
    """
    Zones whose centers fall inside a bounding box.

    All five parameters are required. A box with min == max on either
    axis has zero area and yields no zones.
    """
    params.require(
        "Required: minLat, minLng, maxLat, maxLng, resolution",
        min_lat, min_lng, max_lat, max_lng, resolution
    )
    south, west, north, east = params.bounding_box(min_lat, min_lng, max_lat, max_lng)
    res = params.resolution(resolution)

    box = BoundingBox(min_lat=south, min_lng=west, max_lat=north, max_lng=east)
    return regions.zones_in_area(box, res)


@router.get("/radius", response_model=ZonesInRadiusResponse)
def zones_in_radius(
    lat: Optional[str] = Query(None),
    lng: Optional[str] = Query(None),
    radius: Optional[str] = Query(None, description="Radius in meters"),
    resolution: Optional[str] = Query(None),
    exact: bool = Query(False, description="Drop zones whose center is outside the radius")
):
    """
    Zones around a point.

    This is an approximation: the radius is turned into a ring count
    (1 ring per km, capped at 10). Set exact=true to also filter by
    geodesic distance to each zone center.
    """
    params.require("Required: lat, lng, radius (in meters), resolution", lat, lng, radius, resolution)
    lat_f, lng_f = params.coordinates(lat, lng)
    radius_m = params.radius(radius)
    res = params.resolution(resolution)

    return regions.zones_in_radius(Coordinates(lat=lat_f, lng=lng_f), radius_m, res, exact=exact)


@router.post("/polygon", response_model=ZonesInPolygonResponse)
def zones_in_polygon(req: Optional[PolygonRequest] = None):
    """
    Zones whose centers fall inside a polygon.

    The polygon is [[lat, lng], ...] with at least 3 vertices and is used
    exactly as given.
    """
    req = req or PolygonRequest()
    params.require(
        "Required: polygon (array of [lat, lng] coordinates), resolution",
        req.polygon, req.resolution
    )
    res = params.resolution(req.resolution)
    polygon = params.polygon(req.polygon)

    return regions.zones_in_polygon(polygon, res)


@router.get("/adjacent", response_model=AdjacencyResponse)
def zones_adjacent(a: Optional[str] = Query(None), b: Optional[str] = Query(None)):
    """Check whether two zones share an edge."""
    params.require("Required: a, b (zone hashes)", a, b)
    return zones.are_adjacent(params.cell(a, zones.engine), params.cell(b, zones.engine))
