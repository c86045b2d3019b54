from fastapi.testclient import TestClient

from collection_server.main import app


def test_cors_preflight_is_answered():
    client = TestClient(app)
    response = client.options(
        "/api/create-order",
        headers={
            "Origin": "https://example.com",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "Content-Type",
        },
    )
    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "*"
    assert "POST" in response.headers["access-control-allow-methods"]


def test_routes_are_mounted_under_api():
    paths = set(app.openapi()["paths"])
    assert {"/api/next-amount", "/api/create-order", "/api/verify-payment"} <= paths
