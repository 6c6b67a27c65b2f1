"""
Tests for the Asset Register HTTP API

Tests covering:
1. Login and role checks on mutating routes
2. Filtered listing via query parameters
3. QA endpoint shape
4. CSV / GeoJSON downloads (media types, filenames, filters)
5. Create / update / delete / reset round trips and error mapping
"""

import json
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from core.models import AssetStatus
from core.repository import InMemoryAssetRepository
from core.seed import SEED_ASSETS
from utils.config import Config
from web.app import create_app
from web.auth import AuthSession, UserRole, sign_token


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def config():
    return Config(
        is_production=False,
        session_secret="test-secret",
        data_path=None,
        admin_password_hash=None,
        user_password_hash=None,
    )


@pytest.fixture
def repository():
    return InMemoryAssetRepository()


@pytest.fixture
def client(config, repository):
    return TestClient(create_app(config=config, repository=repository))


def login(client, username, password):
    response = client.post("/api/auth/login", json={"username": username, "password": password})
    assert response.status_code == 200
    return response.json()["token"]


@pytest.fixture
def admin_headers(client):
    return {"Authorization": f"Bearer {login(client, 'admin', 'adminPassword')}"}


@pytest.fixture
def user_headers(client):
    return {"Authorization": f"Bearer {login(client, 'user', 'userPassword')}"}


# =============================================================================
# Health
# =============================================================================


class TestHealth:

    def test_root(self, client):
        assert client.get("/").json() == {"status": "ok"}

    def test_api_health(self, client):
        body = client.get("/api/health").json()
        assert body["status"] == "healthy"
        assert body["assets"] == len(SEED_ASSETS)


# =============================================================================
# Authentication
# =============================================================================


class TestAuthentication:
    """Login and bearer-token checks."""

    def test_login_returns_session(self, client):
        response = client.post("/api/auth/login", json={"username": "admin", "password": "adminPassword"})
        body = response.json()
        assert response.status_code == 200
        assert body["username"] == "admin"
        assert body["role"] == "admin"
        assert body["displayName"]
        assert body["token"]

    def test_login_requires_both_fields(self, client):
        response = client.post("/api/auth/login", json={"username": "admin"})
        assert response.status_code == 400

    def test_login_bad_password(self, client):
        response = client.post("/api/auth/login", json={"username": "admin", "password": "nope"})
        assert response.status_code == 401

    def test_login_unknown_user(self, client):
        response = client.post("/api/auth/login", json={"username": "ghost", "password": "x"})
        assert response.status_code == 401

    def test_mutation_without_token(self, client):
        response = client.post("/api/assets", json={"name": "x"})
        assert response.status_code == 401
        assert response.json()["detail"] == "Missing token"

    def test_mutation_with_invalid_token(self, client):
        response = client.post("/api/assets", json={"name": "x"}, headers={"Authorization": "Bearer junk"})
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid token"

    def test_token_signed_with_other_secret(self, client):
        session = AuthSession(
            username="admin",
            role=UserRole.ADMIN,
            expires_at=datetime.now(timezone.utc) + timedelta(hours=1),
            session_id="s",
        )
        token = sign_token(session, "another-secret")
        response = client.delete("/api/assets/A-1001", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    def test_expired_token(self, client):
        session = AuthSession(
            username="admin",
            role=UserRole.ADMIN,
            expires_at=datetime.now(timezone.utc) - timedelta(seconds=1),
            session_id="s",
        )
        token = sign_token(session, "test-secret")
        response = client.delete("/api/assets/A-1001", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    def test_user_role_forbidden(self, client, user_headers):
        response = client.delete("/api/assets/A-1001", headers=user_headers)
        assert response.status_code == 403
        assert response.json()["detail"] == "Admin role required"

    def test_production_without_hashes_disables_login(self, repository):
        config = Config(is_production=True, session_secret="s", admin_password_hash=None, user_password_hash=None)
        client = TestClient(create_app(config=config, repository=repository))
        response = client.post("/api/auth/login", json={"username": "admin", "password": "adminPassword"})
        assert response.status_code == 401


# =============================================================================
# Listing and QA
# =============================================================================


class TestListing:
    """GET /api/assets with filters."""

    def test_unfiltered_returns_all(self, client):
        body = client.get("/api/assets").json()
        assert [a["id"] for a in body] == [a.id for a in SEED_ASSETS]

    def test_wire_fields(self, client):
        asset = client.get("/api/assets").json()[0]
        assert set(asset) == {
            "id", "name", "region", "type", "status",
            "latitude", "longitude", "createdAt", "updatedAt",
        }

    def test_region_union(self, client):
        body = client.get("/api/assets", params={"region": "north,EAST"}).json()
        assert [a["id"] for a in body] == ["A-1001", "A-1002", "A-1006", "A-1007"]

    def test_type_and_status(self, client):
        body = client.get("/api/assets", params={"type": "pump station", "status": "planned"}).json()
        assert [a["id"] for a in body] == ["A-1007"]

    def test_search(self, client):
        body = client.get("/api/assets", params={"search": "MILL"}).json()
        assert [a["id"] for a in body] == ["A-1004", "A-1005"]

    def test_no_match_is_empty_list(self, client):
        assert client.get("/api/assets", params={"region": "Atlantis"}).json() == []

    def test_get_single(self, client):
        assert client.get("/api/assets/A-1003").json()["name"] == "Valley Substation"

    def test_get_missing(self, client):
        response = client.get("/api/assets/A-404")
        assert response.status_code == 404
        assert response.json() == {"detail": "Asset not found"}


class TestQa:
    """GET /api/assets/qa."""

    def test_issue_shape(self, client):
        body = client.get("/api/assets/qa").json()
        assert all(set(issue) == {"code", "assetId", "message"} for issue in body)

    def test_seed_findings(self, client):
        body = client.get("/api/assets/qa").json()
        pairs = {(i["code"], i["assetId"]) for i in body}
        assert pairs == {
            ("MISSING_COORDINATES", "A-1007"),
            ("MISSING_FIELDS", "A-1008"),
            ("DUPLICATE_POINT", "A-1004"),
            ("DUPLICATE_POINT", "A-1005"),
        }

    def test_qa_ignores_filters(self, client):
        body = client.get("/api/assets/qa", params={"region": "North"}).json()
        assert len(body) == 4

    def test_summary(self, client):
        assert client.get("/api/assets/qa/summary").json() == {
            "total": 4,
            "byCode": {"MISSING_COORDINATES": 1, "DUPLICATE_POINT": 2, "MISSING_FIELDS": 1},
        }


# =============================================================================
# Exports
# =============================================================================


class TestExports:
    """CSV and GeoJSON downloads."""

    def test_csv_download(self, client):
        response = client.get("/api/assets/export/csv")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        disposition = response.headers["content-disposition"]
        assert disposition.startswith('attachment; filename="spatial-assets-')
        assert disposition.endswith('.csv"')
        lines = response.text.split("\n")
        assert lines[0] == "id,name,region,type,status,latitude,longitude,createdAt,updatedAt"
        assert len(lines) == len(SEED_ASSETS) + 1

    def test_csv_uses_filters(self, client):
        response = client.get("/api/assets/export/csv", params={"region": "east"})
        lines = response.text.split("\n")
        assert len(lines) == 3
        assert '"A-1007","Airport Booster","East","Pump Station","Planned","",""' in lines[2]

    def test_geojson_download(self, client):
        response = client.get("/api/assets/export/geojson")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/geo+json")
        assert response.headers["content-disposition"].endswith('.geojson"')

        collection = json.loads(response.text)
        ids = [f["properties"]["id"] for f in collection["features"]]
        assert "A-1007" not in ids
        assert len(ids) == len(SEED_ASSETS) - 1

    def test_geojson_lon_lat_order(self, client):
        response = client.get("/api/assets/export/geojson", params={"search": "harbour"})
        feature = json.loads(response.text)["features"][0]
        assert feature["geometry"]["coordinates"] == [174.7633, -36.8406]


# =============================================================================
# Mutations
# =============================================================================


class TestMutations:
    """Admin create / update / delete / reset."""

    def test_create(self, client, admin_headers):
        payload = {"name": "New Valve", "region": "West", "type": "Valve", "status": "Planned",
                   "latitude": -40.1, "longitude": 175.2}
        response = client.post("/api/assets", json=payload, headers=admin_headers)

        assert response.status_code == 201
        body = response.json()
        assert body["id"].startswith("A-")
        assert body["createdAt"] == body["updatedAt"]
        assert client.get("/api/assets").json()[0]["id"] == body["id"]

    def test_create_allows_empty_fields(self, client, admin_headers):
        response = client.post("/api/assets", json={}, headers=admin_headers)
        assert response.status_code == 201
        new_id = response.json()["id"]

        codes = {i["code"] for i in client.get("/api/assets/qa").json() if i["assetId"] == new_id}
        assert codes == {"MISSING_COORDINATES", "MISSING_FIELDS"}

    def test_create_rejects_non_numeric_coordinate(self, client, admin_headers):
        response = client.post("/api/assets", json={"latitude": "north"}, headers=admin_headers)
        assert response.status_code == 422

    def test_create_rejects_nan_coordinate(self, client, admin_headers):
        response = client.post(
            "/api/assets",
            content='{"name": "Bad Point", "latitude": NaN, "longitude": 1}',
            headers={**admin_headers, "Content-Type": "application/json"},
        )
        assert response.status_code == 422
        assert "latitude" in response.json()["detail"][0]["loc"]

        listing = client.get("/api/assets")
        assert listing.status_code == 200
        assert "Bad Point" not in [a["name"] for a in listing.json()]
        assert "NaN" not in client.get("/api/assets/export/geojson").text

    def test_update_rejects_infinite_coordinate(self, client, admin_headers):
        response = client.put(
            "/api/assets/A-1001",
            content='{"longitude": Infinity}',
            headers={**admin_headers, "Content-Type": "application/json"},
        )
        assert response.status_code == 422
        assert client.get("/api/assets/A-1001").json()["longitude"] == 174.7633

    def test_status_values_documented(self, client):
        schema = client.get("/openapi.json").json()
        description = schema["components"]["schemas"]["AssetCreateRequest"]["properties"]["status"]["description"]
        assert all(status.value in description for status in AssetStatus)

    def test_create_exhausted_is_503(self, repository, admin_headers):
        config = Config(is_production=False, session_secret="test-secret", max_id_attempts=0)
        exhausted = TestClient(create_app(config=config, repository=repository))
        response = exhausted.post("/api/assets", json={"name": "x"}, headers=admin_headers)
        assert response.status_code == 503

    def test_update(self, client, admin_headers):
        response = client.put("/api/assets/A-1008", json={"type": "Bore"}, headers=admin_headers)
        body = response.json()

        assert response.status_code == 200
        assert body["id"] == "A-1008"
        assert body["type"] == "Bore"
        assert body["name"] == "Western Bore"
        assert body["createdAt"] == "2024-01-15T09:00:00.000Z"
        assert body["updatedAt"] != body["createdAt"]

    def test_update_missing(self, client, admin_headers):
        response = client.put("/api/assets/A-404", json={"name": "x"}, headers=admin_headers)
        assert response.status_code == 404

    def test_delete(self, client, admin_headers):
        response = client.delete("/api/assets/A-1001", headers=admin_headers)
        assert response.status_code == 204
        assert client.get("/api/assets/A-1001").status_code == 404

    def test_delete_missing(self, client, admin_headers):
        response = client.delete("/api/assets/A-404", headers=admin_headers)
        assert response.status_code == 404

    def test_reset(self, client, admin_headers):
        client.delete("/api/assets/A-1001", headers=admin_headers)
        response = client.post("/api/assets/reset", headers=admin_headers)
        assert response.status_code == 200
        assert len(client.get("/api/assets").json()) == len(SEED_ASSETS)
