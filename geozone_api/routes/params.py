# routes/params.py
# Turn raw request values into validated arguments, raising API errors

from typing import Any, Tuple

from geozone_api.errors import (
    InvalidBoundingBoxError, InvalidCoordinatesError, InvalidHashError, InvalidKError,
    InvalidPaginationError, InvalidPolygonError, InvalidRadiusError, InvalidResolutionError,
    MissingParametersError
)
from geozone_api.services.indexing import IndexingEngine
from geozone_api.validation import (
    parse_float, parse_int, validate_bounding_box, validate_cell_hash, validate_coordinates,
    validate_k, validate_polygon, validate_radius, validate_resolution
)


def _missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def require(message: str, *values) -> None:
    """Raise MissingParametersError if any value is absent or blank."""
    if any(_missing(v) for v in values):
        raise MissingParametersError(message)


def number(raw: Any, name: str, error_cls) -> float:
    # Parse failure is reported separately from range failure
    value = parse_float(raw)
    if value is None:
        raise error_cls(f"{name} must be a number, got {raw!r}")
    return value


def coordinates(lat_raw: Any, lng_raw: Any, lat_name="lat", lng_name="lng") -> Tuple[float, float]:
    lat = number(lat_raw, lat_name, InvalidCoordinatesError)
    lng = number(lng_raw, lng_name, InvalidCoordinatesError)
    result = validate_coordinates(lat, lng)
    if not result.is_valid:
        raise InvalidCoordinatesError(result.error)
    return lat, lng


def bounding_box(min_lat_raw, min_lng_raw, max_lat_raw, max_lng_raw) -> Tuple[float, float, float, float]:
    min_lat, min_lng = coordinates(min_lat_raw, min_lng_raw, "minLat", "minLng")
    max_lat, max_lng = coordinates(max_lat_raw, max_lng_raw, "maxLat", "maxLng")
    result = validate_bounding_box(min_lat, min_lng, max_lat, max_lng)
    if not result.is_valid:
        raise InvalidBoundingBoxError(result.error)
    return min_lat, min_lng, max_lat, max_lng


def resolution(raw: Any) -> int:
    value = number(raw, "resolution", InvalidResolutionError)
    result = validate_resolution(value)
    if not result.is_valid:
        raise InvalidResolutionError(result.error)
    return int(value)


def k_value(raw: Any) -> int:
    if _missing(raw):
        return 1
    value = number(raw, "k", InvalidKError)
    result = validate_k(value)
    if not result.is_valid:
        raise InvalidKError(result.error)
    return int(value)


def radius(raw: Any) -> float:
    value = number(raw, "radius", InvalidRadiusError)
    result = validate_radius(value)
    if not result.is_valid:
        raise InvalidRadiusError(result.error)
    return value


def cell(raw: Any, engine: IndexingEngine) -> str:
    result = validate_cell_hash(raw, engine)
    if not result.is_valid:
        raise InvalidHashError(result.error)
    return engine.canonical_cell(raw)


def polygon(raw: Any) -> list:
    result = validate_polygon(raw)
    if not result.is_valid:
        raise InvalidPolygonError(result.error)
    return [[float(lat), float(lng)] for lat, lng in raw]


def page(offset_raw: Any, limit_raw: Any, default_limit: int) -> Tuple[int, int]:
    offset = 0 if _missing(offset_raw) else parse_int(offset_raw)
    limit = default_limit if _missing(limit_raw) else parse_int(limit_raw)
    if offset is None or limit is None:
        raise InvalidPaginationError("offset and limit must be integers")
    return offset, limit
