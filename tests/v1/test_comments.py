# mypy: ignore-errors
"""Tests for comment endpoints."""

import uuid

from fastapi import status
from fastapi.testclient import TestClient


def test_create_and_list_comments(client: TestClient, test_post, address_headers) -> None:
    headers = address_headers()
    url = f"/api/v1/posts/{test_post.id}/comments"

    first = client.post(url, json={"content": "  first  "}, headers=headers)
    second = client.post(url, json={"content": "second"}, headers=headers)

    assert first.status_code == status.HTTP_201_CREATED
    assert first.json()["content"] == "first"
    assert first.json()["post_id"] == str(test_post.id)

    r = client.get(url, headers=headers)
    assert r.status_code == status.HTTP_200_OK
    assert [c["id"] for c in r.json()] == [first.json()["id"], second.json()["id"]]
    assert r.json()[0]["upvotes"] == 0


def test_comment_on_unknown_post(client: TestClient, address_headers) -> None:
    r = client.post(
        f"/api/v1/posts/{uuid.uuid4()}/comments",
        json={"content": "hello"},
        headers=address_headers(),
    )
    assert r.status_code == status.HTTP_404_NOT_FOUND
    assert client.get(f"/api/v1/posts/{uuid.uuid4()}/comments").status_code == 404


def test_comment_validation(client: TestClient, test_post, address_headers) -> None:
    url = f"/api/v1/posts/{test_post.id}/comments"
    headers = address_headers()
    assert client.post(url, json={"content": "   "}, headers=headers).status_code == 400
    assert client.post(url, json={"content": "c" * 1001}, headers=headers).status_code == 400


def test_comment_on_hidden_post(client: TestClient, make_post, address_headers) -> None:
    hidden = make_post(hidden=True)
    r = client.post(
        f"/api/v1/posts/{hidden.id}/comments",
        json={"content": "still open"},
        headers=address_headers(),
    )
    assert r.status_code == status.HTTP_201_CREATED


def test_flag_comment_hides_at_three(client: TestClient, test_comment, address_headers) -> None:
    url = f"/api/v1/comments/{test_comment.id}/flag"
    for _ in range(2):
        r = client.post(url, json={"reason": "harassment"}, headers=address_headers())
        assert r.json()["hidden"] is False

    r = client.post(url, json={"reason": "harassment"}, headers=address_headers())

    assert r.status_code == status.HTTP_200_OK
    assert r.json() == {
        "message": "Comment flagged successfully",
        "flag_count": 3,
        "hidden": True,
    }
    listing = client.get(
        f"/api/v1/posts/{test_comment.post_id}/comments", headers=address_headers()
    )
    assert listing.json() == []
