"""API tests for notes, business ideas, library resources and voice notes."""

import asyncio
from datetime import datetime, timezone

import pytest

from dreamdesk.services.idea_templates import IDEA_TEMPLATES
from dreamdesk.services.user_sync import UserSyncService


@pytest.fixture
def client(make_client, user_sync, make_identity):
    asyncio.run(user_sync.sync_profile(make_identity()))
    return make_client()


def stats(store, user_id="user_1"):
    profile = asyncio.run(UserSyncService(store).get_profile(user_id))
    return profile.stats


def test_signed_out_requests_are_rejected(make_client):
    client = make_client(user_id=None)
    for path in ("/api/notes", "/api/ideas", "/api/library"):
        response = client.get(path)
        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized"}
    assert client.post("/api/notes", json={"title": "x"}).status_code == 401


def test_note_lifecycle_updates_stats(client, store):
    created = client.post("/api/notes", json={"title": "Groceries", "content": "milk", "tags": ["home"]})
    assert created.status_code == 201
    note = created.json()
    assert note["title"] == "Groceries"
    assert note["userId"] == "user_1"
    assert note["createdAt"] and note["updatedAt"]
    assert stats(store).notes_count == 1

    fetched = client.get(f"/api/notes/{note['id']}")
    assert fetched.status_code == 200
    assert fetched.json()["content"] == "milk"

    updated = client.patch(f"/api/notes/{note['id']}", json={"content": "milk, eggs"})
    assert updated.status_code == 200
    assert updated.json()["content"] == "milk, eggs"
    assert updated.json()["title"] == "Groceries"

    assert client.delete(f"/api/notes/{note['id']}").status_code == 204
    assert client.get(f"/api/notes/{note['id']}").status_code == 404
    assert stats(store).notes_count == 0


def test_list_is_scoped_and_searchable(client, make_client):
    client.post("/api/notes", json={"title": "Alpha plan", "tags": ["work"]})
    client.post("/api/notes", json={"title": "Beta", "content": "about alpha testing"})
    client.post("/api/notes", json={"title": "Gamma", "tags": ["Personal"]})
    make_client(user_id="user_2").post("/api/notes", json={"title": "Alpha of someone else"})

    titles = [n["title"] for n in client.get("/api/notes").json()]
    assert sorted(titles) == ["Alpha plan", "Beta", "Gamma"]

    found = [n["title"] for n in client.get("/api/notes", params={"q": "ALPHA"}).json()]
    assert sorted(found) == ["Alpha plan", "Beta"]
    assert [n["title"] for n in client.get("/api/notes", params={"q": "personal"}).json()] == ["Gamma"]


def test_list_orders_by_last_update(client, store):
    for title, day in (("old", 1), ("newest", 3), ("middle", 2)):
        stamp = datetime(2024, 1, day, tzinfo=timezone.utc)
        asyncio.run(
            store.create("notes", {"userId": "user_1", "title": title, "tags": [], "createdAt": stamp, "updatedAt": stamp})
        )
    assert [n["title"] for n in client.get("/api/notes").json()] == ["newest", "middle", "old"]


def test_other_users_items_are_not_found(client, make_client):
    note = client.post("/api/notes", json={"title": "Private"}).json()
    intruder = make_client(user_id="user_2")

    assert intruder.get(f"/api/notes/{note['id']}").status_code == 404
    assert intruder.patch(f"/api/notes/{note['id']}", json={"title": "Mine now"}).status_code == 404
    response = intruder.delete(f"/api/notes/{note['id']}")
    assert response.status_code == 404
    assert response.json() == {"error": "Note not found"}
    assert client.get(f"/api/notes/{note['id']}").json()["title"] == "Private"


def test_invalid_body_is_a_400(client):
    response = client.post("/api/notes", json={"title": ""})
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid request"

    response = client.post("/api/ideas", json={"title": "Too good", "feasibilityScore": 11})
    assert response.status_code == 400


def test_business_ideas_by_category(client, store):
    client.post(
        "/api/ideas",
        json={"title": "Dog cafe", "category": "food", "targetMarket": "dog owners", "feasibilityScore": 7},
    )
    client.post("/api/ideas", json={"title": "Budget app", "category": "fintech", "status": "research"})

    ideas = client.get("/api/ideas", params={"category": "food"}).json()
    assert [i["title"] for i in ideas] == ["Dog cafe"]
    assert ideas[0]["feasibilityScore"] == 7
    assert ideas[0]["status"] == "idea"
    assert len(client.get("/api/ideas", params={"category": "all"}).json()) == 2
    assert stats(store).ideas_count == 2

    idea_id = ideas[0]["id"]
    updated = client.patch(f"/api/ideas/{idea_id}", json={"status": "launched"}).json()
    assert updated["status"] == "launched"
    assert updated["targetMarket"] == "dog owners"


def test_idea_suggestion_can_be_saved(client, store):
    response = client.get("/api/ideas/suggestion")
    assert response.status_code == 200
    suggestion = response.json()
    assert suggestion["title"] in [t.title for t in IDEA_TEMPLATES]
    assert suggestion["status"] == "idea"
    assert 1 <= suggestion["feasibilityScore"] <= 10
    assert suggestion["tags"]
    assert "id" not in suggestion
    assert client.get("/api/ideas").json() == []

    saved = client.post("/api/ideas", json=suggestion)
    assert saved.status_code == 201
    assert saved.json()["targetMarket"] == suggestion["targetMarket"]
    assert stats(store).ideas_count == 1


def test_idea_suggestion_requires_sign_in(make_client):
    response = make_client(user_id=None).get("/api/ideas/suggestion")
    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized"}

def test_library_image_resource_round_trip(client, store, blob_store):
    url = asyncio.run(blob_store.upload("library-images/user_1/sunset.png", b"png-bytes", content_type="image/png"))

    created = client.post(
        "/api/library",
        json={"title": "Sunset", "url": url, "type": "image", "category": "inspiration", "tags": ["sky"]},
    )
    assert created.status_code == 201
    resource = created.json()
    assert resource["type"] == "image"
    assert resource["isFavorite"] is False
    assert stats(store).resources_count == 1

    image = client.get(resource["url"].replace("http://testserver", ""))
    assert image.status_code == 200
    assert image.content == b"png-bytes"

    favorite = client.patch(f"/api/library/{resource['id']}", json={"isFavorite": True}).json()
    assert favorite["isFavorite"] is True


def test_create_without_profile_still_succeeds(make_client):
    client = make_client(user_id="no_profile_yet")
    response = client.post("/api/notes", json={"title": "Orphan"})
    assert response.status_code == 201


def test_voice_note_upload(client, store, blob_store):
    response = client.post(
        "/api/notes/voice",
        files={"audio": ("recording.webm", b"webm-audio", "audio/webm")},
        data={"title": "Standup", "content": "yesterday I shipped", "tags": "work, daily ,"},
    )
    assert response.status_code == 201
    note = response.json()
    assert note["title"] == "Standup"
    assert note["tags"] == ["work", "daily"]
    assert note["audioUrl"].startswith("http://testserver/blobs/voice-notes/user_1/voice-note-")
    assert note["audioUrl"].endswith(".webm")
    assert stats(store).notes_count == 1

    stored = asyncio.run(blob_store.list("voice-notes/user_1"))
    assert len(stored) == 1
    assert stored[0].content_type == "audio/webm"


def test_voice_note_size_limit(client, set_env):
    set_env(MAX_UPLOAD_SIZE_MB="0")
    response = client.post(
        "/api/notes/voice",
        files={"audio": ("recording.webm", b"x", "audio/webm")},
        data={"title": "Too big"},
    )
    assert response.status_code == 413
