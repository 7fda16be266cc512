import logging

import pytest
from fastapi.testclient import TestClient

from geozone_api.main import app

SF_ZONE_URL = "/zone/37.7749/-122.4194/9"


def assert_error(response, status, error):
    assert response.status_code == status
    body = response.json()
    assert set(body) == {"error", "message"}
    assert body["error"] == error
    return body["message"]


class TestResolveZone:

    def test_success(self, client, sf_cell):
        r = client.get(SF_ZONE_URL)
        assert r.status_code == 200
        body = r.json()
        assert body["hash"] == sf_cell
        assert body["resolution"] == 9
        assert body["input"] == {"lat": 37.7749, "lng": -122.4194, "resolution": 9}
        assert set(body["center"]) == {"lat", "lng"}

    @pytest.mark.parametrize("path", ["/zone/91/0/9", "/zone/0/-180.5/9"])
    def test_out_of_range(self, client, path):
        message = assert_error(client.get(path), 400, "Invalid coordinates")
        assert "between -90 and 90" in message

    def test_not_a_number_is_reported_as_such(self, client):
        message = assert_error(client.get("/zone/abc/0/9"), 400, "Invalid coordinates")
        assert message == "lat must be a number, got 'abc'"

    @pytest.mark.parametrize("resolution", ["16", "-1", "7.5", "x"])
    def test_bad_resolution(self, client, resolution):
        assert_error(client.get(f"/zone/37.7/-122.4/{resolution}"), 400, "Invalid resolution")


class TestSingleZone:

    def test_center(self, client, sf_cell):
        body = client.get(f"/zone/{sf_cell}/center").json()
        assert body["hash"] == sf_cell
        assert body["resolution"] == 9

    def test_boundary(self, client, sf_cell):
        body = client.get(f"/zone/{sf_cell}/boundary").json()
        assert len(body["boundary"]) == 6
        assert body["resolution"] == 9

    @pytest.mark.parametrize("suffix", ["center", "boundary", "neighbors", "info", "children", "geometry"])
    def test_invalid_hash(self, client, suffix):
        message = assert_error(client.get(f"/zone/nothex/{suffix}"), 400, "Invalid H3 hash")
        assert message == "The provided hash is not a valid H3 cell"

    @pytest.mark.parametrize("cell", [
        "-1", "ffffffffffffffffff", "0x8928308280fffff", "8928_308280fffff", "%208928308280fffff",
    ])
    def test_malformed_hash(self, client, cell):
        assert_error(client.get(f"/zone/{cell}/center"), 400, "Invalid H3 hash")

    def test_uppercase_hash(self, client, sf_cell):
        body = client.get(f"/zone/{sf_cell.upper()}/info").json()
        assert body["hash"] == sf_cell
        assert sf_cell not in body["neighbors"]
        assert len(body["neighbors"]) == 6

    def test_neighbors_default_k(self, client, sf_cell):
        body = client.get(f"/zone/{sf_cell}/neighbors").json()
        assert body["k"] == 1
        assert body["count"] == 7 == len(body["neighbors"])
        assert set(body["neighbors"][0]) == {"hash", "center", "resolution"}

    def test_neighbors_k2(self, client, sf_cell):
        body = client.get(f"/zone/{sf_cell}/neighbors", params={"k": 2}).json()
        assert body["count"] == 19

    @pytest.mark.parametrize("k", ["0", "11", "2.5", "two"])
    def test_neighbors_bad_k(self, client, sf_cell, k):
        assert_error(client.get(f"/zone/{sf_cell}/neighbors", params={"k": k}), 400, "Invalid k value")

    def test_info(self, client, sf_cell):
        body = client.get(f"/zone/{sf_cell}/info").json()
        assert set(body) == {
            "hash", "resolution", "center", "boundary", "neighbors", "parent", "children", "childrenCount",
        }
        assert sf_cell not in body["neighbors"]
        assert body["childrenCount"] == 7
        assert body["parent"] is not None

    def test_info_at_resolution_zero(self, client):
        cell = client.get("/zone/37.7749/-122.4194/0").json()["hash"]
        assert client.get(f"/zone/{cell}/info").json()["parent"] is None

    def test_children_paging(self, client, sf_cell):
        body = client.get(f"/zone/{sf_cell}/children", params={"offset": 2, "limit": 3}).json()
        assert body["total"] == 7
        assert body["childResolution"] == 10
        assert len(body["children"]) == 3
        assert body["truncated"] is True

    def test_children_bad_limit(self, client, sf_cell):
        r = client.get(f"/zone/{sf_cell}/children", params={"limit": "many"})
        assert_error(r, 400, "Invalid pagination")

    def test_geometry(self, client, sf_cell):
        body = client.get(f"/zone/{sf_cell}/geometry").json()
        assert body["geometry"]["type"] == "Polygon"
        assert len(body["geometry"]["coordinates"][0]) == 7


class TestArea:

    URL = "/zones/area"
    PARAMS = {"minLat": 37.7, "minLng": -122.5, "maxLat": 37.8, "maxLng": -122.3, "resolution": 9}

    def test_success(self, client):
        body = client.get(self.URL, params=self.PARAMS).json()
        assert body["boundingBox"] == {"minLat": 37.7, "minLng": -122.5, "maxLat": 37.8, "maxLng": -122.3}
        assert body["resolution"] == 9
        assert body["count"] == len(body["zones"]) > 0

    @pytest.mark.parametrize("missing", ["minLat", "maxLng", "resolution"])
    def test_missing(self, client, missing):
        params = {k: v for k, v in self.PARAMS.items() if k != missing}
        message = assert_error(client.get(self.URL, params=params), 400, "Missing parameters")
        assert message == "Required: minLat, minLng, maxLat, maxLng, resolution"

    def test_resolution_zero_is_not_missing(self, client):
        r = client.get(self.URL, params={**self.PARAMS, "resolution": 0})
        assert r.status_code == 200

    def test_bad_coordinates(self, client):
        assert_error(client.get(self.URL, params={**self.PARAMS, "maxLat": 95}), 400, "Invalid coordinates")

    @pytest.mark.parametrize("corner", [
        {"maxLat": 37.7, "maxLng": -122.5}, {"maxLat": 37.7}, {"maxLng": -122.5},
    ])
    def test_zero_area_box(self, client, corner):
        r = client.get(self.URL, params={**self.PARAMS, **corner})
        assert r.status_code == 200
        assert r.json()["count"] == 0

    def test_inverted_box(self, client):
        r = client.get(self.URL, params={**self.PARAMS, "minLat": 37.9})
        assert_error(r, 400, "Invalid bounding box")

    def test_bad_resolution(self, client):
        assert_error(client.get(self.URL, params={**self.PARAMS, "resolution": 16}), 400, "Invalid resolution")


class TestRadius:

    URL = "/zones/radius"
    PARAMS = {"lat": 37.7749, "lng": -122.4194, "radius": 15000, "resolution": 9}

    def test_success(self, client):
        body = client.get(self.URL, params=self.PARAMS).json()
        assert body["estimatedK"] == 15
        assert body["k"] == 10
        assert body["exact"] is False
        assert body["center"] == {"lat": 37.7749, "lng": -122.4194}
        assert body["radius"] == 15000
        assert body["count"] == len(body["zones"]) == 331
        assert "approximation" in body["note"]

    def test_exact(self, client):
        body = client.get(self.URL, params={**self.PARAMS, "radius": 1500, "exact": "true"}).json()
        assert body["exact"] is True
        assert body["count"] <= 19

    def test_missing(self, client):
        r = client.get(self.URL, params={"lat": 37.7, "lng": -122.4, "resolution": 9})
        message = assert_error(r, 400, "Missing parameters")
        assert "radius" in message

    def test_zero_radius(self, client):
        body = client.get(self.URL, params={**self.PARAMS, "radius": 0}).json()
        assert body["estimatedK"] == 1
        assert body["k"] == 1
        assert body["count"] == 7

    @pytest.mark.parametrize("radius", ["-5", "far"])
    def test_bad_radius(self, client, radius):
        assert_error(client.get(self.URL, params={**self.PARAMS, "radius": radius}), 400, "Invalid radius")

    def test_bad_coordinates(self, client):
        assert_error(client.get(self.URL, params={**self.PARAMS, "lng": 200}), 400, "Invalid coordinates")


class TestPolygon:

    URL = "/zones/polygon"
    TRIANGLE = [[37.77, -122.45], [37.80, -122.40], [37.75, -122.38]]

    def test_success(self, client):
        body = client.post(self.URL, json={"polygon": self.TRIANGLE, "resolution": 9}).json()
        assert body["polygon"] == self.TRIANGLE
        assert body["resolution"] == 9
        assert body["count"] == len(body["zones"]) > 0
        assert body["areaKm2"] > 0

    def test_string_resolution(self, client):
        r = client.post(self.URL, json={"polygon": self.TRIANGLE, "resolution": "8"})
        assert r.status_code == 200
        assert r.json()["resolution"] == 8

    @pytest.mark.parametrize("payload", [{"polygon": TRIANGLE}, {"resolution": 9}, {}])
    def test_missing(self, client, payload):
        assert_error(client.post(self.URL, json=payload), 400, "Missing parameters")

    def test_no_body(self, client):
        assert_error(client.post(self.URL), 400, "Missing parameters")

    def test_too_few_vertices(self, client):
        r = client.post(self.URL, json={"polygon": [[0, 0], [1, 1]], "resolution": 9})
        assert "at least 3" in assert_error(r, 400, "Invalid polygon")

    def test_bad_vertex(self, client):
        r = client.post(self.URL, json={"polygon": [[91, 0], [0, 0], [0, 1]], "resolution": 9})
        assert assert_error(r, 400, "Invalid polygon").startswith("Vertex 0")

    def test_resolution_checked_first(self, client):
        r = client.post(self.URL, json={"polygon": [[0, 0]], "resolution": 99})
        assert_error(r, 400, "Invalid resolution")

    def test_malformed_json(self, client):
        r = client.post(self.URL, content="{not json", headers={"Content-Type": "application/json"})
        assert_error(r, 400, "Invalid request")


class TestAdjacent:

    def test_neighbors(self, client, sf_cell):
        neighbor = client.get(f"/zone/{sf_cell}/info").json()["neighbors"][0]
        body = client.get("/zones/adjacent", params={"a": sf_cell, "b": neighbor}).json()
        assert body == {"a": sf_cell, "b": neighbor, "adjacent": True}

    def test_self_is_not_adjacent(self, client, sf_cell):
        body = client.get("/zones/adjacent", params={"a": sf_cell, "b": sf_cell}).json()
        assert body["adjacent"] is False

    def test_missing(self, client, sf_cell):
        assert_error(client.get("/zones/adjacent", params={"a": sf_cell}), 400, "Missing parameters")

    def test_invalid(self, client, sf_cell):
        assert_error(client.get("/zones/adjacent", params={"a": sf_cell, "b": "x"}), 400, "Invalid H3 hash")


class TestSystem:

    def test_resolutions(self, client):
        body = client.get("/resolutions").json()
        assert len(body["resolutions"]) == 16
        assert body["resolutions"][0] == {
            "resolution": 0, "avgHexagonEdgeLength": "1107.712591 km", "avgHexagonArea": "4250546.848 km²",
        }
        assert body["usage"]["Room level"] == "Resolution 14-15"

    def test_api_overview(self, client):
        body = client.get("/api").json()
        assert "GET /zones/radius" in body["endpoints"]

    def test_status(self, client):
        body = client.get("/status").json()
        assert body["status"] == "ok"
        assert body["engine"].startswith("h3")

    def test_unknown_route(self, client):
        message = assert_error(client.get("/nowhere"), 404, "Not found")
        assert message == "The requested endpoint does not exist"

    def test_wrong_method(self, client):
        assert_error(client.delete("/resolutions"), 405, "Method not allowed")


class TestInternalErrors:

    def test_engine_fault_is_generic_500(self, faulty_client, sf_cell):
        r = faulty_client.get(f"/zone/{sf_cell}/center")
        message = assert_error(r, 500, "Internal server error")
        assert "exploded" not in message

    def test_region_fault_is_generic_500(self, faulty_client):
        r = faulty_client.get("/zones/area", params=TestArea.PARAMS)
        assert_error(r, 500, "Internal server error")

    def test_validation_still_runs_first(self, faulty_client):
        assert_error(faulty_client.get("/zone/nothex/center"), 400, "Invalid H3 hash")


def test_lifespan_logs_startup(caplog):
    caplog.set_level(logging.INFO, logger="geozone_api")
    with TestClient(app) as c:
        assert c.get("/status").status_code == 200
    assert any("Starting Geozone API" in r.getMessage() for r in caplog.records)
