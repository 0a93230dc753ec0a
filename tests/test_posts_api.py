"""
Tests for the member posts lookup.
"""

from fastapi.testclient import TestClient


def test_returns_posts_for_member(client: TestClient) -> None:
    response = client.get("/api/getmemberposts/getmemberposts", params={"member": "m1"})
    assert response.status_code == 200
    assert response.json() == [
        {"id": "p1", "categories": "news"},
        {"id": "p2", "categories": ["release", "infra"]},
    ]


def test_unknown_member_has_no_posts(client: TestClient) -> None:
    response = client.get("/api/getmemberposts/getmemberposts", params={"member": "nobody"})
    assert response.status_code == 200
    assert response.json() == []


def test_database_failure_is_500_envelope(client: TestClient, store) -> None:
    store.fail_with = "boom"
    response = client.get("/api/getmemberposts/getmemberposts", params={"member": "m1"})
    assert response.status_code == 500
    assert response.json() == {"error": "Internal Server Error", "details": "boom"}


def test_post_is_method_not_allowed(client: TestClient) -> None:
    response = client.post("/api/getmemberposts/getmemberposts", json={"member": "m1"})
    assert response.status_code == 405
    assert response.text == "Method Not Allowed"


def test_missing_member_matches_nothing(client: TestClient) -> None:
    response = client.get("/api/getmemberposts/getmemberposts")
    assert response.status_code == 200
    assert response.json() == []
