import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock
from sqlalchemy.exc import OperationalError

from counselhub.api.routers.health import router as health_router
from counselhub.boundary.db import get_async_db


@pytest.fixture
def app():
    app = FastAPI()
    app.include_router(health_router)
    return app


@pytest.fixture
def client(app):
    return TestClient(app)


def test_health_check(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "message": "Server Healthy"}


def test_health_check_db(client):
    db = AsyncMock()
    client.app.dependency_overrides[get_async_db] = lambda: db

    response = client.get("/health/db")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "message": "Database connection OK"}
    db.execute.assert_awaited_once()


def test_health_check_db_unreachable(client):
    db = AsyncMock()
    db.execute.side_effect = OperationalError("SELECT 1", {}, Exception("connection refused"))
    client.app.dependency_overrides[get_async_db] = lambda: db

    response = client.get("/health/db")

    assert response.status_code == 503
    assert response.json()["detail"] == "Database unreachable"


@pytest.fixture
def traced_client():
    from counselhub.observability.middleware import CorrelationMiddleware, RequestLoggingMiddleware

    app = FastAPI()
    app.include_router(health_router)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationMiddleware)
    return TestClient(app)


def test_correlation_id_echoed_from_caller(traced_client):
    response = traced_client.get("/health", headers={"X-Correlation-ID": "req-42"})

    assert response.headers["X-Correlation-ID"] == "req-42"


def test_correlation_id_minted_when_absent(traced_client):
    first = traced_client.get("/health").headers["X-Correlation-ID"]
    second = traced_client.get("/health").headers["X-Correlation-ID"]

    assert first and second
    assert first != second
