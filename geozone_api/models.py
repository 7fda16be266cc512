# models.py
# Pydantic models for request/response validation

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class APIModel(BaseModel):
    """Snake-case attributes, camelCase JSON."""
    model_config = ConfigDict(populate_by_name=True)


# --- Shared ---

class Coordinates(APIModel):
    lat: float
    lng: float


class ZoneRecord(APIModel):
    """A zone enriched with its canonical center."""
    hash: str
    center: Coordinates
    resolution: int


class BoundingBox(APIModel):
    min_lat: float = Field(alias="minLat")
    min_lng: float = Field(alias="minLng")
    max_lat: float = Field(alias="maxLat")
    max_lng: float = Field(alias="maxLng")


# --- Single zone ---

class ZoneInput(APIModel):
    lat: float
    lng: float
    resolution: int


class ZoneResponse(ZoneRecord):
    """Zone resolved from a point. Center is the cell's, not the input's."""
    input: ZoneInput


class BoundaryResponse(APIModel):
    hash: str
    boundary: List[Coordinates]
    resolution: int


class NeighborsResponse(APIModel):
    hash: str
    k: int
    neighbors: List[ZoneRecord]
    count: int
    resolution: int


class ZoneDetail(APIModel):
    hash: str
    resolution: int
    center: Coordinates
    boundary: List[Coordinates]
    neighbors: List[str]
    parent: Optional[str]
    children: List[str]
    children_count: int = Field(alias="childrenCount")


class ChildrenPage(APIModel):
    hash: str
    resolution: int
    child_resolution: Optional[int] = Field(alias="childResolution")  # None at the finest resolution
    offset: int
    limit: int
    total: int
    children: List[str]
    truncated: bool = False  # True if more children follow this page


class GeometryResponse(APIModel):
    hash: str
    resolution: int
    geometry: Dict[str, Any]


class AdjacencyResponse(APIModel):
    a: str
    b: str
    adjacent: bool


# --- Regions ---

class ZonesInAreaResponse(APIModel):
    bounding_box: BoundingBox = Field(alias="boundingBox")
    resolution: int
    zones: List[ZoneRecord]
    count: int


class ZonesInRadiusResponse(APIModel):
    center: Coordinates
    radius: float
    resolution: int
    estimated_k: int = Field(alias="estimatedK")
    k: int
    exact: bool = False
    zones: List[ZoneRecord]
    count: int
    note: str


class PolygonRequest(BaseModel):
    """
    Request body for polygon queries.

    Fields stay untyped so the route can report missing/invalid input
    in the API's own error vocabulary instead of pydantic's.
    """
    polygon: Optional[Any] = Field(
        None,
        description="Polygon as [[lat, lng], ...]. At least 3 pairs, used as given (not auto-closed).",
        examples=[[[37.77, -122.42], [37.78, -122.42], [37.78, -122.41], [37.77, -122.41]]]
    )
    resolution: Optional[Any] = Field(None, description="H3 resolution, 0-15", examples=[9])


class ZonesInPolygonResponse(APIModel):
    polygon: List[List[float]]
    resolution: int
    zones: List[ZoneRecord]
    count: int
    area_km2: float = Field(alias="areaKm2")


# --- Metadata ---

class ResolutionInfo(APIModel):
    resolution: int
    avg_hexagon_edge_length: str = Field(alias="avgHexagonEdgeLength")
    avg_hexagon_area: str = Field(alias="avgHexagonArea")


class ResolutionsResponse(APIModel):
    description: str
    resolutions: List[ResolutionInfo]
    usage: Dict[str, str]


# --- System Models ---

class ServiceStatus(BaseModel):
    """Service health/status response."""
    status: str
    engine: str
    version: str


class ErrorResponse(BaseModel):
    error: str
    message: str
