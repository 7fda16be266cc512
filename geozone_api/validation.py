# validation.py
# Input parsing and validators

"""
Validators never raise for bad input. Each returns a ValidationResult and
the caller decides which error to raise. Parsers turn untyped request
strings into numbers and return None when the text is not a number, so a
parse failure is never mistaken for an out-of-range value.
"""

import math
from dataclasses import dataclass
from numbers import Real
from typing import Any, Optional

from geozone_api.config import MAX_K, MAX_RESOLUTION, MIN_K, MIN_RESOLUTION
from geozone_api.services.indexing import IndexingEngine


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    error: Optional[str] = None


VALID = ValidationResult(True)


def _invalid(reason: str) -> ValidationResult:
    return ValidationResult(False, reason)


def _is_number(value: Any) -> bool:
    # bool is an int subclass but never a coordinate
    return isinstance(value, Real) and not isinstance(value, bool) and math.isfinite(value)


def _is_integral(value: Any) -> bool:
    if not _is_number(value):
        return False
    return isinstance(value, int) or float(value).is_integer()


# --- Parsing ---

def parse_float(raw: Any) -> Optional[float]:
    """'37.77' -> 37.77. None for anything that is not a finite number."""
    if _is_number(raw):
        return float(raw)
    if not isinstance(raw, str):
        return None
    try:
        value = float(raw.strip())
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def parse_int(raw: Any) -> Optional[int]:
    """'9' -> 9, 9.0 -> 9. None for fractions and non-numbers."""
    value = parse_float(raw)
    if value is None or not value.is_integer():
        return None
    return int(value)


# --- Validators ---

def validate_coordinates(lat: Any, lng: Any) -> ValidationResult:
    if not (_is_number(lat) and _is_number(lng)):
        return _invalid("Latitude and longitude must be numbers")
    if lat < -90 or lat > 90 or lng < -180 or lng > 180:
        return _invalid("Latitude must be between -90 and 90, longitude between -180 and 180")
    return VALID


def validate_resolution(resolution: Any) -> ValidationResult:
    if not _is_integral(resolution) or not MIN_RESOLUTION <= resolution <= MAX_RESOLUTION:
        return _invalid(f"Resolution must be an integer between {MIN_RESOLUTION} and {MAX_RESOLUTION}")
    return VALID


def validate_cell_hash(cell: Any, engine: IndexingEngine) -> ValidationResult:
    if not engine.is_valid_cell(cell):
        return _invalid("The provided hash is not a valid H3 cell")
    return VALID


def validate_k(k: Any) -> ValidationResult:
    if not _is_integral(k) or not MIN_K <= k <= MAX_K:
        return _invalid(f"k must be an integer between {MIN_K} and {MAX_K}")
    return VALID


def validate_radius(radius: Any) -> ValidationResult:
    if not _is_number(radius) or radius < 0:
        return _invalid("Radius must be a non-negative number of meters")
    return VALID


def validate_bounding_box(min_lat, min_lng, max_lat, max_lng) -> ValidationResult:
    """Each corner must be valid and min must not exceed max. min == max is allowed."""
    for lat, lng in ((min_lat, min_lng), (max_lat, max_lng)):
        if not validate_coordinates(lat, lng).is_valid:
            return _invalid("All coordinates must be valid lat/lng values")
    if min_lat > max_lat or min_lng > max_lng:
        return _invalid("minLat must not exceed maxLat and minLng must not exceed maxLng")
    return VALID


def validate_polygon(polygon: Any) -> ValidationResult:
    """Check vertex count, then each vertex in order. Stops at the first bad one."""
    if not isinstance(polygon, (list, tuple)) or len(polygon) < 3:
        return _invalid("Polygon must be an array of at least 3 [lat, lng] coordinates")

    for i, coord in enumerate(polygon):
        if not isinstance(coord, (list, tuple)) or len(coord) != 2:
            return _invalid(f"Each polygon coordinate must be a [lat, lng] array (vertex {i}: {coord!r})")
        result = validate_coordinates(*coord)
        if not result.is_valid:
            return _invalid(f"Vertex {i} {list(coord)!r}: {result.error}")

    return VALID
