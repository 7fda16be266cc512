# routes/zones.py
# Endpoints for single-zone lookups

from typing import Optional

from fastapi import APIRouter, Query

from geozone_api.config import CHILDREN_PREVIEW_LIMIT
from geozone_api.models import (
    BoundaryResponse, ChildrenPage, ErrorResponse, GeometryResponse, NeighborsResponse, ResolutionsResponse,
    ZoneDetail, ZoneRecord, ZoneResponse
)
from geozone_api.routes import params
from geozone_api.services.zones import ZoneService

router = APIRouter(tags=["Zones"], responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}})

# Replaced by main.py (or tests) through set_dependencies
zones = ZoneService()


def set_dependencies(zone_service: ZoneService):
    """Called by main.py to inject dependencies."""
    global zones
    zones = zone_service


@router.get("/zone/{lat}/{lng}/{resolution}", response_model=ZoneResponse)
def resolve_zone(lat: str, lng: str, resolution: str):
    """
    Get the zone hash covering a coordinate at a resolution (0-15).

    The returned center is the zone's center, not the input point.
    """
    lat_f, lng_f = params.coordinates(lat, lng)
    res = params.resolution(resolution)
    return zones.resolve_zone(lat_f, lng_f, res)


@router.get("/zone/{hash}/center", response_model=ZoneRecord)
def zone_center(hash: str):
    """Center coordinates of a zone."""
    return zones.zone_center(params.cell(hash, zones.engine))


@router.get("/zone/{hash}/boundary", response_model=BoundaryResponse)
def zone_boundary(hash: str):
    """
    Boundary polygon of a zone as an ordered vertex ring.

    Usually 6 vertices; pentagons and some distorted cells have 5 or 7.
    """
    return zones.zone_boundary(params.cell(hash, zones.engine))


@router.get("/zone/{hash}/neighbors", response_model=NeighborsResponse)
def zone_neighbors(hash: str, k: Optional[str] = Query(None, description="Ring distance, 1-10 (default 1)")):
    """All zones within k steps, the zone itself included."""
    cell = params.cell(hash, zones.engine)
    return zones.zone_neighbors(cell, params.k_value(k))


@router.get("/zone/{hash}/info", response_model=ZoneDetail)
def zone_info(hash: str):
    """
    Detailed information about a zone.

    Children are limited to the first 10; childrenCount is the full total.
    Use /zone/{hash}/children to page through all of them.
    """
    return zones.zone_detail(params.cell(hash, zones.engine))


@router.get("/zone/{hash}/children", response_model=ChildrenPage)
def zone_children(
    hash: str,
    offset: Optional[str] = Query(None, description="Index of the first child (default 0)"),
    limit: Optional[str] = Query(None, description="Page size, 1-1000 (default 10)")
):
    """Page through a zone's children at the next finer resolution."""
    cell = params.cell(hash, zones.engine)
    start, size = params.page(offset, limit, CHILDREN_PREVIEW_LIMIT)
    return zones.zone_children(cell, start, size)


@router.get("/zone/{hash}/geometry", response_model=GeometryResponse)
def zone_geometry(hash: str):
    """
    Zone boundary as GeoJSON.

    Useful for visualization. Note GeoJSON order is [lng, lat].
    """
    return zones.zone_geometry(params.cell(hash, zones.engine))


@router.get("/resolutions", response_model=ResolutionsResponse)
def resolutions():
    """Approximate zone sizes for every resolution, plus usage guidance."""
    return zones.resolution_info()
