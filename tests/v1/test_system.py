# mypy: ignore-errors
"""Tests for system and transparency endpoints."""

from fastapi import status
from fastapi.testclient import TestClient


def test_system_config(client: TestClient) -> None:
    """Public configuration exposes limits but never the salt."""
    r = client.get("/api/v1/system/config")
    assert r.status_code == status.HTTP_200_OK
    data = r.json()
    assert data["throttles"]["post_create"] == {"limit": 5, "window_seconds": 600}
    assert data["moderation"]["flag_thresholds"] == {"post": 5, "comment": 3}
    assert "test-salt" not in r.text


def test_flag_reasons(client: TestClient) -> None:
    r = client.get("/api/v1/flag-reasons")
    assert r.status_code == status.HTTP_200_OK
    reasons = r.json()["reasons"]
    assert "spam" in reasons and "other" in reasons


def test_openapi_documents_error_body(client: TestClient) -> None:
    """Error statuses on content routes are documented with the ErrorResponse body."""
    schema = client.get("/openapi.json").json()
    assert schema["components"]["schemas"]["ErrorResponse"]["required"] == ["error"]

    responses = schema["paths"]["/api/v1/posts/{post_id}/vote"]["post"]["responses"]
    for code in ("400", "404", "409", "429", "500"):
        ref = responses[code]["content"]["application/json"]["schema"]["$ref"]
        assert ref.endswith("/ErrorResponse")
