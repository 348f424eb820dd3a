"""HTTP adapter tests for Coffees Service routes."""

from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import IntegrityError, OperationalError

from packages.coffee_core.main import create_coffees_app
from packages.coffee_shared.config import load_settings
from packages.coffee_shared.errors import ErrorCategory
from services.coffees.api import _error_status


def _client(service, tmp_path: Path) -> TestClient:
    """Build a test client over one service without touching a database."""
    settings = load_settings(environ={}, config_path=tmp_path / "missing.yaml")
    return TestClient(create_coffees_app(settings, service=service))


class _SqlFailingService:
    """Service stand-in whose reads fail inside the SQL driver."""

    def __init__(self, exc: Exception) -> None:
        self._exc = exc

    async def find_all(self, *, offset=None, limit=None):
        raise self._exc

    async def health(self):
        raise self._exc


def test_create_returns_201_and_record(fake_service, tmp_path: Path) -> None:
    """POST /coffees should create and echo the persisted coffee."""
    with _client(fake_service, tmp_path) as client:
        response = client.post(
            "/coffees",
            json={
                "name": "Shipwreck Roast",
                "brand": "Buddy Brew",
                "flavors": ["chocolate", "vanilla"],
            },
        )

    assert response.status_code == 201
    body = response.json()
    assert body["id"] == 1
    assert {flavor["name"] for flavor in body["flavors"]} == {"chocolate", "vanilla"}
    assert body["recommendations"] == 0


def test_list_get_patch_recommend_delete_flow(fake_service, tmp_path: Path) -> None:
    """Routes should cover the full coffee lifecycle."""
    with _client(fake_service, tmp_path) as client:
        client.post("/coffees", json={"name": "a", "brand": "b"})
        client.post("/coffees", json={"name": "c", "brand": "d"})

        page = client.get("/coffees", params={"offset": 0, "limit": 1})
        patched = client.patch("/coffees/1", json={"name": "z"})
        recommended = client.post("/coffees/1/recommend")
        removed = client.delete("/coffees/2")
        remaining = client.get("/coffees")

    assert page.status_code == 200
    assert [row["id"] for row in page.json()] == [1]
    assert patched.json()["name"] == "z"
    assert patched.json()["brand"] == "b"
    assert recommended.json()["recommendations"] == 1
    assert removed.json()["name"] == "c"
    assert [row["id"] for row in remaining.json()] == [1]


def test_unknown_id_returns_404_error_body(fake_service, tmp_path: Path) -> None:
    """Unknown ids should map to not-found with the structured error body."""
    with _client(fake_service, tmp_path) as client:
        response = client.get("/coffees/99")

    assert response.status_code == 404
    assert response.json() == {
        "ok": False,
        "errors": [
            {
                "code": "COFFEE_NOT_FOUND",
                "category": "not_found",
                "message": "coffee 99 not found",
            }
        ],
    }


@pytest.mark.parametrize(
    ("method", "path"),
    [
        ("get", "/coffees/0"),
        ("get", "/coffees/-1"),
        ("get", "/coffees/99999999999999999999999"),
        ("delete", "/coffees/0"),
        ("post", "/coffees/99999999999999999999999/recommend"),
    ],
)
def test_ids_outside_key_range_return_404(
    fake_service, tmp_path: Path, method: str, path: str
) -> None:
    """Non-positive and oversized numeric ids should be structured 404s."""
    with _client(fake_service, tmp_path) as client:
        response = getattr(client, method)(path)

    assert response.status_code == 404
    assert response.json()["ok"] is False
    assert response.json()["errors"][0]["code"] == "COFFEE_NOT_FOUND"


def test_oversized_id_over_sqlite_returns_404(tmp_path: Path) -> None:
    """An id too large for the integer column should not reach the driver."""
    settings = load_settings(
        cli_params={
            "components": {
                "substrate": {"sql": {"url": f"sqlite:///{tmp_path / 'app.db'}"}}
            }
        },
        environ={},
        config_path=tmp_path / "missing.yaml",
    )

    with TestClient(create_coffees_app(settings)) as client:
        response = client.get("/coffees/99999999999999999999999")

    assert response.status_code == 404
    assert response.json()["errors"][0]["category"] == "not_found"


@pytest.mark.parametrize(
    ("method", "path", "kwargs"),
    [
        ("get", "/coffees/abc", {}),
        ("get", "/coffees/1.5", {}),
        ("get", "/coffees", {"params": {"limit": "0"}}),
        ("post", "/coffees", {"json": {"name": "", "brand": "b"}}),
        ("post", "/coffees", {"content": b"{not json"}),
        ("post", "/coffees", {"json": ["a", "b"]}),
        ("post", "/coffees", {"json": {"name": "a", "brand": "b", "extra": 1}}),
    ],
)
def test_invalid_requests_return_400(
    fake_service, tmp_path: Path, method: str, path: str, kwargs: dict
) -> None:
    """Malformed ids, bodies, and pagination should map to validation 400s."""
    with _client(fake_service, tmp_path) as client:
        response = getattr(client, method)(path, **kwargs)

    assert response.status_code == 400
    assert response.json()["ok"] is False
    assert response.json()["errors"][0]["category"] == "validation"


def test_sql_operational_error_maps_to_503(tmp_path: Path) -> None:
    """Unavailable databases should surface as retryable dependency failures."""
    exc = OperationalError("SELECT 1", {}, Exception("connection refused"))
    with _client(_SqlFailingService(exc), tmp_path) as client:
        response = client.get("/coffees")

    assert response.status_code == 503
    assert response.json()["errors"][0]["code"] == "DEPENDENCY_UNAVAILABLE"


def test_sql_unique_violation_maps_to_409(tmp_path: Path) -> None:
    """Unique-constraint failures should surface as conflicts."""
    exc = IntegrityError(
        "INSERT", {}, Exception("UNIQUE constraint failed: flavors.name")
    )
    with _client(_SqlFailingService(exc), tmp_path) as client:
        response = client.get("/coffees")

    assert response.status_code == 409
    assert response.json()["errors"][0]["category"] == "conflict"


def test_health_reports_503_when_substrate_down(
    fake_service, fake_repository, tmp_path: Path
) -> None:
    """Health should expose readiness and degrade status when SQL is down."""
    with _client(fake_service, tmp_path) as client:
        ready = client.get("/health")
        fake_repository.healthy = False
        degraded = client.get("/health")

    assert ready.status_code == 200
    assert ready.json() == {
        "service_ready": True,
        "substrate_ready": True,
        "detail": "ok",
    }
    assert degraded.status_code == 503
    assert degraded.json()["substrate_ready"] is False


def test_health_maps_sql_failures_to_503(tmp_path: Path) -> None:
    """Health probes failing inside the SQL driver should map to 503."""
    exc = OperationalError("SELECT 1", {}, Exception("connection refused"))
    with _client(_SqlFailingService(exc), tmp_path) as client:
        response = client.get("/health")

    assert response.status_code == 503
    assert response.json()["ok"] is False


def test_app_lifespan_creates_schema_over_sqlite(tmp_path: Path) -> None:
    """The default app should create its schema on startup and serve requests."""
    settings = load_settings(
        cli_params={
            "components": {
                "substrate": {"sql": {"url": f"sqlite:///{tmp_path / 'app.db'}"}}
            }
        },
        environ={},
        config_path=tmp_path / "missing.yaml",
    )

    with TestClient(create_coffees_app(settings)) as client:
        created = client.post(
            "/coffees",
            json={"name": "Shipwreck Roast", "brand": "Buddy Brew", "flavors": ["chocolate"]},
        )
        recommended = client.post(f"/coffees/{created.json()['id']}/recommend")
        health = client.get("/health")

    assert created.status_code == 201
    assert recommended.json()["recommendations"] == 1
    assert health.status_code == 200


def test_every_error_category_has_a_distinct_status() -> None:
    """Each category the service can raise should map to its own HTTP status."""
    statuses = {category: _error_status(category) for category in ErrorCategory}

    assert statuses == {
        ErrorCategory.VALIDATION: 400,
        ErrorCategory.NOT_FOUND: 404,
        ErrorCategory.CONFLICT: 409,
        ErrorCategory.DEPENDENCY: 503,
        ErrorCategory.INTERNAL: 500,
    }
