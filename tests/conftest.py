import pytest
from fastapi.testclient import TestClient

from geozone_api.main import app, region_enumerator, zone_service
from geozone_api.routes import regions, zones
from geozone_api.services.indexing import H3Engine
from geozone_api.services.regions import RegionEnumerator
from geozone_api.services.zones import ZoneService

from fakes import FaultyEngine

SF_LAT, SF_LNG = 37.7749, -122.4194


@pytest.fixture(scope="session")
def engine():
    return H3Engine()


@pytest.fixture(scope="session")
def service(engine):
    return ZoneService(engine)


@pytest.fixture(scope="session")
def enumerator(service):
    return RegionEnumerator(service)


@pytest.fixture(scope="session")
def sf_cell(engine):
    return engine.point_to_cell(SF_LAT, SF_LNG, 9)


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def faulty_client():
    """Client whose routes run against FaultyEngine; restores the real services after."""
    faulty = ZoneService(FaultyEngine())
    zones.set_dependencies(faulty)
    regions.set_dependencies(faulty, RegionEnumerator(faulty))
    try:
        yield TestClient(app)
    finally:
        zones.set_dependencies(zone_service)
        regions.set_dependencies(zone_service, region_enumerator)
