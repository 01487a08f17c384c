"""
Integration tests for service-level endpoints.
"""
from fastapi.testclient import TestClient

from learning_app.main import app


def test_root():
    client = TestClient(app)
    response = client.get("/")

    assert response.status_code == 200
    data = response.json()
    assert data["version"] == "1.0.0"
    assert data["docs"].endswith("/api/docs")


def test_health():
    client = TestClient(app)
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_cors_allows_frontend():
    client = TestClient(app)
    response = client.options(
        "/health",
        headers={"Origin": "http://localhost:3000", "Access-Control-Request-Method": "GET"}
    )

    assert response.headers.get("access-control-allow-origin") == "http://localhost:3000"
