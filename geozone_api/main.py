# main.py
# Application entry point

"""
Geozone API
===========
REST API that splits the world into hexagonal zones using H3.

The service exposes two main feature groups:
1. Zone lookups - coordinates to zone hash, center, boundary, neighbors, hierarchy
2. Region queries - zones covering a bounding box, a radius or a polygon

Every call is a pure computation; nothing is stored or cached.

Run with:
    uvicorn geozone_api.main:app --reload --port 8000
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from geozone_api.config import API_TITLE, API_VERSION, CORS_ALLOWED_ORIGINS, HOST, PORT
from geozone_api.errors import InternalError, ZoneQueryError
from geozone_api.logging_config import get_logger
from geozone_api.models import ServiceStatus
from geozone_api.routes import regions, zones
from geozone_api.services.indexing import H3Engine
from geozone_api.services.regions import RegionEnumerator
from geozone_api.services.zones import ZoneService

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("=" * 50)
    logger.info("Starting %s v%s (%s)", API_TITLE, API_VERSION, engine.name)
    logger.info("Example: http://%s:%d/zone/37.7749/-122.4194/9", HOST, PORT)
    if CORS_ALLOWED_ORIGINS == ["*"]:
        logger.info("CORS allowed for any origin (set CORS_ALLOWED_ORIGINS to restrict)")
    else:
        logger.info("CORS restricted to origins: %s", ", ".join(CORS_ALLOWED_ORIGINS))
    logger.info("=" * 50)
    yield
    logger.info("Shutting down %s", API_TITLE)


# Create the app
app = FastAPI(
    title=API_TITLE,
    version=API_VERSION,
    description="Splits the world into hexagonal zones using H3 spatial indexing.",
    docs_url="/docs",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOWED_ORIGINS,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

# Global state - stateless, so built once at import
engine = H3Engine()
zone_service = ZoneService(engine)
region_enumerator = RegionEnumerator(zone_service)

zones.set_dependencies(zone_service)
regions.set_dependencies(zone_service, region_enumerator)


# --- Error handlers: every failure is {"error": ..., "message": ...} ---

def _error(status_code: int, error: str, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": error, "message": message})


@app.exception_handler(ZoneQueryError)
async def zone_query_error(request: Request, exc: ZoneQueryError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(StarletteHTTPException)
async def http_error(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        return _error(404, "Not found", "The requested endpoint does not exist")
    if exc.status_code == 405:
        return _error(405, "Method not allowed", f"{request.method} is not supported on {request.url.path}")
    return _error(exc.status_code, "Error", str(exc.detail))


@app.exception_handler(RequestValidationError)
async def request_error(request: Request, exc: RequestValidationError):
    first = exc.errors()[0] if exc.errors() else {}
    where = ".".join(str(p) for p in first.get("loc", ()))
    return _error(400, "Invalid request", f"{where}: {first.get('msg', 'malformed request')}")


@app.exception_handler(Exception)
async def unexpected_error(request: Request, exc: Exception):
    # Never leak internals to the client
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content=InternalError().to_dict())


# Mount the routers
app.include_router(zones.router)
app.include_router(regions.router)


@app.get("/api", tags=["System"])
def api_overview():
    """API overview."""
    return {
        "name": API_TITLE,
        "description": "API for splitting the world into hexagonal zones using H3 spatial indexing",
        "version": API_VERSION,
        "docs": "/docs",
        "endpoints": {
            "GET /zone/{lat}/{lng}/{resolution}": "Zone hash for coordinates at a resolution (0-15)",
            "GET /zone/{hash}/center": "Center coordinates of a zone",
            "GET /zone/{hash}/boundary": "Boundary polygon of a zone",
            "GET /zone/{hash}/neighbors": "Neighboring zones (query: k, 1-10)",
            "GET /zone/{hash}/info": "Detailed information about a zone",
            "GET /zone/{hash}/children": "Page through a zone's children (query: offset, limit)",
            "GET /zone/{hash}/geometry": "Zone boundary as GeoJSON",
            "GET /zones/area": "Zones within a bounding box (query: minLat, minLng, maxLat, maxLng, resolution)",
            "GET /zones/radius": "Zones within a radius (query: lat, lng, radius, resolution, exact)",
            "POST /zones/polygon": "Zones inside a polygon (body: polygon, resolution)",
            "GET /zones/adjacent": "Whether two zones are neighbors (query: a, b)",
            "GET /resolutions": "Approximate zone sizes per resolution"
        },
        "examples": {
            "getZone": "/zone/37.7749/-122.4194/9",
            "getCenter": "/zone/8928308280fffff/center",
            "getBoundary": "/zone/8928308280fffff/boundary",
            "getNeighbors": "/zone/8928308280fffff/neighbors",
            "getZonesInArea": "/zones/area?minLat=37.7&minLng=-122.5&maxLat=37.8&maxLng=-122.3&resolution=9",
            "getZonesInRadius": "/zones/radius?lat=37.7749&lng=-122.4194&radius=1000&resolution=9"
        }
    }


@app.get("/status", response_model=ServiceStatus, tags=["System"])
def status():
    """Check that the service is up."""
    return ServiceStatus(status="ok", engine=engine.name, version=API_VERSION)


def run():
    import uvicorn
    uvicorn.run(app, host=HOST, port=PORT)


if __name__ == "__main__":
    run()
