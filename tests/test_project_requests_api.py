"""Tests for the project request submission workflow."""

from unittest.mock import patch

import requests

from app.core.config import settings
from conftest import ADMIN_HEADERS

REQUESTS_URL = "/api/v1/project-requests/"

SUBMISSION = {
    "title": "Awesome tool",
    "githubLink": "https://github.com/acme/tool",
    "description": "It is <b>great</b>",
    "reason": "Saves time",
    "userId": "user-1",
}


def _submit(api_client, **overrides):
    return api_client.post(REQUESTS_URL, json=dict(SUBMISSION, **overrides))


def test_submit_and_list_own_requests(api_client):
    response = _submit(api_client)

    assert response.status_code == 201
    created = response.json()
    assert created["status"] == "pending"
    assert created["description"] == "It is great"
    assert len(created["id"]) == 36

    _submit(api_client, userId="user-2")
    mine = api_client.get(REQUESTS_URL, params={"userId": "user-1"}).json()
    assert [r["id"] for r in mine] == [created["id"]]

    single = api_client.get(REQUESTS_URL + created["id"], params={"userId": "user-1"})
    assert single.status_code == 200
    other = api_client.get(REQUESTS_URL + created["id"], params={"userId": "user-2"})
    assert other.status_code == 404


def test_submit_validation(api_client):
    assert _submit(api_client, githubLink="https://gitlab.com/acme/tool").status_code == 422
    assert _submit(api_client, title="x" * 101).status_code == 422
    assert _submit(api_client, title="<b></b>").status_code == 422
    assert _submit(api_client, userId="").status_code == 422


def test_admin_review(api_client):
    request_id = _submit(api_client).json()["id"]

    assert api_client.put(REQUESTS_URL + request_id, json={"status": "accepted"}).status_code == 401

    response = api_client.put(
        REQUESTS_URL + request_id,
        json={"status": "accepted", "adminNotes": "Nice find", "adminId": "admin-1"},
        headers=ADMIN_HEADERS,
    )
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "accepted"
    assert data["adminNotes"] == "Nice find"
    assert data["reviewedBy"] == "admin-1"

    invalid = api_client.put(REQUESTS_URL + request_id, json={"status": "maybe"}, headers=ADMIN_HEADERS)
    assert invalid.status_code == 422

    missing = api_client.put(REQUESTS_URL + "nope", json={"status": "declined"}, headers=ADMIN_HEADERS)
    assert missing.status_code == 404

    accepted = api_client.get(REQUESTS_URL + "admin", params={"status": "accepted"}, headers=ADMIN_HEADERS)
    assert [r["id"] for r in accepted.json()] == [request_id]


def test_discord_notification(api_client, monkeypatch):
    monkeypatch.setattr(settings, "DISCORD_WEBHOOK_URL", "https://discord.example/webhook")

    with patch("app.services.request_service.requests.post") as post:
        assert _submit(api_client).status_code == 201

    assert post.call_args.args[0] == "https://discord.example/webhook"
    embed = post.call_args.kwargs["json"]["embeds"][0]
    assert embed["title"] == "New project request: Awesome tool"
    assert embed["url"] == "https://github.com/acme/tool"


def test_discord_failure_does_not_fail_submission(api_client, monkeypatch):
    monkeypatch.setattr(settings, "DISCORD_WEBHOOK_URL", "https://discord.example/webhook")

    with patch("app.services.request_service.requests.post", side_effect=requests.ConnectionError("down")):
        assert _submit(api_client).status_code == 201
