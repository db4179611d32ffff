"""
HTTP tests for the auth and store routes, run through FastAPI's TestClient.
"""

from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient
from pymongo.errors import ServerSelectionTimeoutError

from app.config import settings
from app.db_handlers import DocumentDatabaseManager
from app.models.documents import UserDocument

ROAD_TRIP = {
    "name": "Road Trip",
    "ownerEmail": "alice@example.com",
    "songs": [
        {"title": "Fast Car", "artist": "Tracy Chapman", "year": 1988, "youTubeId": "AIOAlaACuv4"},
        {"title": "Born to Run", "artist": "Bruce Springsteen", "year": 1975, "youTubeId": "IxuThNgl3YA"},
    ],
}


def register(client: TestClient, first_name: str, email: str) -> dict:
    """Register a user and return an Authorization header carrying their token."""
    res = client.post(
        "/auth/register",
        json={
            "firstName": first_name,
            "lastName": "Tester",
            "email": email,
            "password": "correct horse",
            "passwordVerify": "correct horse",
        },
    )
    assert res.status_code == 200, res.text
    token = res.cookies.get("token")
    assert token
    client.cookies.clear()
    return {"Authorization": f"Bearer {token}"}


def test_health(client):
    res = client.get("/health")

    assert res.status_code == 200
    assert res.json() == {"status": "healthy"}


# ==================== AUTH ====================


def test_register_logs_the_user_in(client):
    res = client.post(
        "/auth/register",
        json={
            "firstName": "Alice",
            "lastName": "Anderson",
            "email": "alice@example.com",
            "password": "correct horse",
            "passwordVerify": "correct horse",
        },
    )

    assert res.status_code == 200
    assert res.json() == {
        "success": True,
        "user": {"firstName": "Alice", "lastName": "Anderson", "email": "alice@example.com"},
    }
    assert "passwordHash" not in res.text

    logged_in = client.get("/auth/loggedIn").json()
    assert logged_in["loggedIn"] is True
    assert logged_in["user"]["email"] == "alice@example.com"


def test_mixed_case_email_owns_its_playlists(client):
    owner = register(client, "Alice", "Alice@Example.COM")
    playlist = dict(ROAD_TRIP, ownerEmail="Alice@Example.COM")

    created = client.post("/store/playlist", json=playlist, headers=owner)
    assert created.status_code == 201
    playlist_id = created.json()["playlist"]["_id"]

    pairs = client.get("/store/playlistpairs", headers=owner).json()["idNamePairs"]
    assert pairs == [{"_id": playlist_id, "name": "Road Trip"}]
    assert client.get(f"/store/playlist/{playlist_id}", headers=owner).status_code == 200

    login = client.post(
        "/auth/login", json={"email": "Alice@example.com", "password": "correct horse"}
    )
    assert login.status_code == 200


def test_register_rejects_short_password(client):
    res = client.post(
        "/auth/register",
        json={
            "firstName": "Alice",
            "lastName": "Anderson",
            "email": "alice@example.com",
            "password": "short",
            "passwordVerify": "short",
        },
    )

    assert res.status_code == 400


def test_register_rejects_mismatched_passwords(client):
    res = client.post(
        "/auth/register",
        json={
            "firstName": "Alice",
            "lastName": "Anderson",
            "email": "alice@example.com",
            "password": "correct horse",
            "passwordVerify": "battery staple",
        },
    )

    assert res.status_code == 400
    assert res.json()["detail"] == "Please enter the same password twice."


def test_register_rejects_missing_fields(client):
    res = client.post("/auth/register", json={"email": "alice@example.com"})

    assert res.status_code == 422


def test_register_rejects_existing_email(client):
    register(client, "Alice", "alice@example.com")

    res = client.post(
        "/auth/register",
        json={
            "firstName": "Other",
            "lastName": "Alice",
            "email": "alice@example.com",
            "password": "correct horse",
            "passwordVerify": "correct horse",
        },
    )

    assert res.status_code == 400


def test_login_and_logout(client):
    register(client, "Alice", "alice@example.com")

    bad = client.post(
        "/auth/login", json={"email": "alice@example.com", "password": "wrong password"}
    )
    assert bad.status_code == 401

    good = client.post(
        "/auth/login", json={"email": "alice@example.com", "password": "correct horse"}
    )
    assert good.status_code == 200
    assert good.json()["user"]["firstName"] == "Alice"
    assert client.get("/auth/loggedIn").json()["loggedIn"] is True

    client.get("/auth/logout")
    assert client.get("/auth/loggedIn").json() == {"loggedIn": False, "user": None}


def test_logged_in_with_invalid_token(client):
    res = client.get("/auth/loggedIn", headers={"Authorization": "Bearer not-a-jwt"})

    assert res.json()["loggedIn"] is False


def test_update_profile(client):
    alice = register(client, "Alice", "alice@example.com")

    res = client.put(
        "/auth/me",
        json={"firstName": "Alicia", "password": "new password", "passwordVerify": "new password"},
        headers=alice,
    )

    assert res.status_code == 200
    assert res.json()["user"] == {
        "firstName": "Alicia",
        "lastName": "Tester",
        "email": "alice@example.com",
    }
    login = client.post(
        "/auth/login", json={"email": "alice@example.com", "password": "new password"}
    )
    assert login.status_code == 200


# ==================== STORE ====================


def test_store_requires_authentication(client):
    assert client.get("/store/playlistpairs").status_code == 401
    assert client.post("/store/playlist", json=ROAD_TRIP).status_code == 401
    assert client.get("/store/playlist/anything").status_code == 401


def test_playlist_lifecycle(client):
    alice = register(client, "Alice", "alice@example.com")

    created = client.post("/store/playlist", json=ROAD_TRIP, headers=alice)
    assert created.status_code == 201
    playlist = created.json()["playlist"]
    playlist_id = playlist["_id"]
    assert playlist["name"] == "Road Trip"
    assert playlist["ownerEmail"] == "alice@example.com"
    assert playlist["songs"] == ROAD_TRIP["songs"]

    pairs = client.get("/store/playlistpairs", headers=alice).json()
    assert pairs == {"success": True, "idNamePairs": [{"_id": playlist_id, "name": "Road Trip"}]}
    assert client.get("/store/playlists", headers=alice).json()["data"] == pairs["idNamePairs"]

    fetched = client.get(f"/store/playlist/{playlist_id}", headers=alice)
    assert fetched.status_code == 200
    assert fetched.json() == {"success": True, "playlist": playlist}

    new_songs = [{"title": "Nightcall", "artist": "Kavinsky", "year": 2010, "youTubeId": "MV_3Dpw-BRY"}]
    updated = client.put(
        f"/store/playlist/{playlist_id}",
        json={"playlist": {"name": "Night Drive", "songs": new_songs}},
        headers=alice,
    )
    assert updated.status_code == 200
    assert updated.json() == {"success": True, "id": playlist_id, "message": "Playlist updated!"}

    refetched = client.get(f"/store/playlist/{playlist_id}", headers=alice).json()["playlist"]
    assert refetched["name"] == "Night Drive"
    assert refetched["songs"] == new_songs

    deleted = client.delete(f"/store/playlist/{playlist_id}", headers=alice)
    assert deleted.status_code == 200
    assert deleted.json() == {}
    assert client.get(f"/store/playlist/{playlist_id}", headers=alice).status_code == 404
    assert client.get("/store/playlistpairs", headers=alice).json()["idNamePairs"] == []


def test_unknown_playlist_is_not_found(client):
    alice = register(client, "Alice", "alice@example.com")

    for playlist_id in [
        "does-not-exist",
        "0b7d1a52-6f5e-4a37-9a3e-2f4f4b7c9d10",
        "65f1c2a9e4b0a1b2c3d4e5f6",
    ]:
        assert client.get(f"/store/playlist/{playlist_id}", headers=alice).status_code == 404
        assert client.delete(f"/store/playlist/{playlist_id}", headers=alice).status_code == 404


def test_other_user_is_forbidden(client):
    alice = register(client, "Alice", "alice@example.com")
    bob = register(client, "Bob", "bob@example.com")
    playlist_id = client.post("/store/playlist", json=ROAD_TRIP, headers=alice).json()[
        "playlist"
    ]["_id"]

    assert client.get(f"/store/playlist/{playlist_id}", headers=bob).status_code == 403
    update = client.put(
        f"/store/playlist/{playlist_id}",
        json={"playlist": {"name": "Hijacked", "songs": []}},
        headers=bob,
    )
    assert update.status_code == 403
    assert client.delete(f"/store/playlist/{playlist_id}", headers=bob).status_code == 403

    untouched = client.get(f"/store/playlist/{playlist_id}", headers=alice).json()["playlist"]
    assert untouched["name"] == "Road Trip"
    assert client.get("/store/playlistpairs", headers=bob).json()["idNamePairs"] == []


def test_cannot_create_playlist_for_someone_else(client):
    register(client, "Alice", "alice@example.com")
    bob = register(client, "Bob", "bob@example.com")

    res = client.post("/store/playlist", json=ROAD_TRIP, headers=bob)

    assert res.status_code == 403


def test_update_requires_playlist_wrapper(client):
    alice = register(client, "Alice", "alice@example.com")
    playlist_id = client.post("/store/playlist", json=ROAD_TRIP, headers=alice).json()[
        "playlist"
    ]["_id"]

    res = client.put(
        f"/store/playlist/{playlist_id}",
        json={"name": "Flat body", "songs": []},
        headers=alice,
    )

    assert res.status_code == 422


def test_document_store_outage_returns_503(monkeypatch):
    from main import create_app

    def unreachable(*args, **kwargs):
        raise ServerSelectionTimeoutError("No servers found yet")

    manager = DocumentDatabaseManager(
        "mongodb://mocked", "playlister_test", client=AsyncMongoMockClient()
    )
    with TestClient(create_app(manager)) as client:
        monkeypatch.setattr(UserDocument, "find_one", unreachable)

        res = client.post(
            "/auth/login", json={"email": "alice@example.com", "password": "correct horse"}
        )

    assert res.status_code == 503
    assert res.json() == {"detail": settings.db_unavailable_hint}
