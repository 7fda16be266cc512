# config.py
# App configuration and constants

import os
from types import MappingProxyType


def _env_list(name: str) -> list:
    raw = os.getenv(name, "")
    return [v.strip() for v in raw.split(",") if v.strip()]


# Server settings - can be overridden via environment variables
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Empty means any origin
CORS_ALLOWED_ORIGINS = _env_list("CORS_ALLOWED_ORIGINS") or ["*"]

# Input bounds
MIN_RESOLUTION = 0
MAX_RESOLUTION = 15
MIN_K = 1
MAX_K = 10  # Ring traversal cap, keeps radius queries cheap

# Radius -> ring estimate. One ring step per kilometre, regardless of resolution.
METERS_PER_RING = 1000

# Payload caps for child listings
CHILDREN_PREVIEW_LIMIT = 10
CHILDREN_PAGE_MAX = 1000

# H3 resolution level -> average hexagon size
# (resolution, avg edge length, avg area)
RESOLUTION_TABLE = (
    (0, "1107.712591 km", "4250546.848 km²"),
    (1, "418.676005 km", "607220.9782 km²"),
    (2, "158.244655 km", "86745.85403 km²"),
    (3, "59.810857 km", "12392.26486 km²"),
    (4, "22.606379 km", "1770.323552 km²"),
    (5, "8.544408 km", "252.9033645 km²"),
    (6, "3.229482 km", "36.1290521 km²"),
    (7, "1.220629 km", "5.1612932 km²"),
    (8, "461.354684 m", "0.7373276 km²"),
    (9, "174.375668 m", "0.1053325 km²"),
    (10, "65.907807 m", "15042.5 m²"),
    (11, "24.910561 m", "2149.1 m²"),
    (12, "9.415526 m", "307.71 m²"),
    (13, "3.559893 m", "43.96 m²"),
    (14, "1.348575 m", "6.28 m²"),
    (15, "0.509713 m", "0.90 m²"),
)

USAGE_TIERS = MappingProxyType({
    "Country level": "Resolution 0-2",
    "State/Province level": "Resolution 3-4",
    "City level": "Resolution 5-7",
    "Neighborhood level": "Resolution 8-10",
    "Building level": "Resolution 11-13",
    "Room level": "Resolution 14-15",
})

# API metadata
API_TITLE = "Geozone API"
API_VERSION = "1.0.0"
