"""
Tests for the HTTP API.
"""

import os
import tempfile

import pytest
from fastapi.testclient import TestClient

from member_directory.core import MemberDirectory
from member_directory.errors import StoreUnavailable
from member_directory.server import create_app
from member_directory.storage import SQLiteBackend
from tests.conftest import (
    AMY,
    BO,
    COMMUNITY_ATTENDEES,
    CY,
    HIDDEN,
    NOW,
    community_events,
    community_users,
    seed_store,
)


@pytest.fixture
def file_storage():
    """A seeded SQLite file database; worker threads need their own connections."""
    temp_dir = tempfile.TemporaryDirectory()
    storage = SQLiteBackend(os.path.join(temp_dir.name, "api.db"))
    seed_store(storage, community_users(), community_events(), COMMUNITY_ATTENDEES)

    yield storage

    storage.close()
    temp_dir.cleanup()


@pytest.fixture
def client(file_storage):
    directory = MemberDirectory(storage=file_storage, clock=lambda: NOW)
    return TestClient(create_app(directory=directory))


def test_list_members(client):
    response = client.get("/v1/members")

    assert response.status_code == 200
    body = response.json()
    assert body["loaded"] is True
    assert body["error"] is None
    assert [m["display_name"] for m in body["members"]] == ["Amy", "Bo", "Cy"]
    assert [m["hosted_events_count"] for m in body["members"]] == [2, 1, 0]


def test_list_members_store_failure(client, monkeypatch):
    def failing_list_members(self):
        raise StoreUnavailable("connection refused")

    monkeypatch.setattr(SQLiteBackend, "list_members", failing_list_members)

    response = client.get("/v1/members")

    assert response.status_code == 503
    assert response.json() == {
        "members": [],
        "loaded": False,
        "error": "connection refused",
    }


def test_get_member(client):
    response = client.get(f"/v1/members/{AMY}")

    assert response.status_code == 200
    assert response.json()["vibes"] == ["🍮", "🎉"]


def test_get_member_not_listed(client):
    assert client.get(f"/v1/members/{HIDDEN}").status_code == 404
    assert client.get("/v1/members/404").status_code == 404


def test_get_member_events(client):
    response = client.get(f"/v1/members/{AMY}/events")

    assert response.status_code == 200
    body = response.json()
    assert body["user_id"] == AMY
    assert [e["id"] for e in body["hosting"]] == ["e1"]
    assert [e["id"] for e in body["attending"]] == ["e2"]
    assert body["attending"][0]["attendees"] == [AMY, BO]
    assert body["failed"] == []


def test_get_member_events_empty(client):
    response = client.get(f"/v1/members/{CY}/events")

    assert response.status_code == 200
    assert response.json()["hosting"] == []
    assert response.json()["attending"] == []


def test_get_member_events_unknown_member(client):
    assert client.get("/v1/members/404/events").status_code == 404


def test_get_member_store_failure(client, monkeypatch):
    def failing_list_members(self):
        raise StoreUnavailable("connection refused")

    monkeypatch.setattr(SQLiteBackend, "list_members", failing_list_members)

    response = client.get(f"/v1/members/{AMY}/events")

    assert response.status_code == 503
    assert response.json()["detail"] == "connection refused"
