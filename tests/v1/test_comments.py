# tests/v1/test_comments.py
"""Tests for comment submission endpoints."""

from __future__ import annotations

from fastapi import status


def _payload(content: str, email: str = "reader@example.com", registered: bool = False) -> dict:
    return {
        "content": content,
        "author": {
            "email": email,
            "display_name": "Reader",
            "is_registered": registered,
        },
    }


def test_submit_clean_comment_from_registered_author(client) -> None:
    response = client.post(
        "/api/v1/comments",
        json=_payload("Great article, thanks for sharing.", registered=True),
    )
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()

    assert data["moderation"] == {"status": "approved", "score": 100, "requires_review": False}
    assert data["comment"]["status"] == "approved"
    assert data["comment"]["auto_moderated"] is True
    assert data["comment"]["flags"] == []


def test_submit_from_unknown_author_requires_review(client) -> None:
    response = client.post("/api/v1/comments", json=_payload("Great article, thanks for sharing."))
    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["moderation"]["requires_review"] is True


def test_submit_spam_is_caught(client) -> None:
    response = client.post("/api/v1/comments", json=_payload("buy now! click here! free money!!!"))
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()

    assert data["moderation"]["status"] == "spam"
    flag_types = {flag["type"] for flag in data["comment"]["flags"]}
    assert {"spam", "suspicious"} <= flag_types


def test_too_short_content_is_flagged_not_refused(client) -> None:
    response = client.post("/api/v1/comments", json=_payload("a"))
    assert response.status_code == status.HTTP_201_CREATED
    flags = response.json()["comment"]["flags"]
    assert flags[0]["type"] == "length"
    assert flags[0]["severity"] == "critical"


def test_submit_rejects_malformed_email(client) -> None:
    response = client.post("/api/v1/comments", json=_payload("Hello there", email="not-an-email"))
    assert response.status_code == 422


def test_submit_requires_author(client) -> None:
    response = client.post("/api/v1/comments", json={"content": "Hello there"})
    assert response.status_code == 422


def test_get_comment(client) -> None:
    created = client.post("/api/v1/comments", json=_payload("Nice write-up")).json()
    comment_id = created["comment"]["id"]

    response = client.get(f"/api/v1/comments/{comment_id}")
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["content"] == "Nice write-up"


def test_get_missing_comment(client) -> None:
    response = client.get("/api/v1/comments/987654")
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["detail"] == "Comment not found"
