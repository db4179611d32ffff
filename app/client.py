"""
Async HTTP client for the Playlister API.

Mirrors the browser client's request layer: every call returns a
``ClientResponse`` with the status, reason phrase, parsed JSON body and
headers, and raises ``ClientRequestError`` for non-2xx responses. The auth
cookie set by login/register is kept in the underlying httpx cookie jar.
"""

from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict

from app.schemas import Song
from app.utils.logger import setup_logger

logger = setup_logger("client")

DEFAULT_BASE_URL = "http://localhost:4000"


class ClientResponse(BaseModel):
    status: int
    status_text: str
    data: Any = None
    headers: httpx.Headers

    model_config = ConfigDict(arbitrary_types_allowed=True)


class ClientRequestError(Exception):
    def __init__(self, message: str, status: int, data: Any = None):
        super().__init__(f"{message}, status: {status}")
        self.status = status
        self.data = data


def _song_payload(song: Song | dict) -> dict:
    if isinstance(song, Song):
        return song.model_dump(mode="json", by_alias=True)
    return song


class PlaylisterClient:
    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 10.0,
    ):
        self._client = httpx.AsyncClient(
            base_url=base_url, transport=transport, timeout=timeout
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "PlaylisterClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def _request(
        self, method: str, url: str, error_message: str, **kwargs
    ) -> ClientResponse:
        res = await self._client.request(method, url, **kwargs)
        try:
            data = res.json()
        except ValueError:
            data = None

        if not res.is_success:
            logger.debug(f"{method} {url} failed with {res.status_code}: {data}")
            raise ClientRequestError(error_message, res.status_code, data)

        return ClientResponse(
            status=res.status_code,
            status_text=res.reason_phrase,
            data=data,
            headers=res.headers,
        )

    # ==================== AUTH ====================

    async def get_logged_in(self) -> ClientResponse:
        return await self._request("GET", "/auth/loggedIn", "HTTP error")

    async def register_user(
        self,
        first_name: str,
        last_name: str,
        email: str,
        password: str,
        password_verify: str,
    ) -> ClientResponse:
        return await self._request(
            "POST",
            "/auth/register",
            "Could not register user",
            json={
                "firstName": first_name,
                "lastName": last_name,
                "email": email,
                "password": password,
                "passwordVerify": password_verify,
            },
        )

    async def login_user(self, email: str, password: str) -> ClientResponse:
        return await self._request(
            "POST",
            "/auth/login",
            "Couldn't login",
            json={"email": email, "password": password},
        )

    async def logout_user(self) -> ClientResponse:
        return await self._request("GET", "/auth/logout", "Could not logout user")

    # ==================== PLAYLISTS ====================

    async def create_playlist(
        self, name: str, songs: list[Song | dict], owner_email: str
    ) -> ClientResponse:
        return await self._request(
            "POST",
            "/store/playlist",
            "Couldn't create playlist",
            json={
                "name": name,
                "songs": [_song_payload(song) for song in songs],
                "ownerEmail": owner_email,
            },
        )

    async def delete_playlist_by_id(self, playlist_id: str) -> ClientResponse:
        return await self._request(
            "DELETE",
            f"/store/playlist/{playlist_id}",
            f"Could not delete playlist with {playlist_id}",
        )

    async def get_playlist_by_id(self, playlist_id: str) -> ClientResponse:
        return await self._request(
            "GET",
            f"/store/playlist/{playlist_id}",
            "Could not get Playlist by id",
        )

    async def get_playlist_pairs(self) -> ClientResponse:
        return await self._request(
            "GET", "/store/playlistpairs", "Couldn't retrieve playlist pairs"
        )

    async def update_playlist_by_id(
        self, playlist_id: str, playlist: dict
    ) -> ClientResponse:
        """``playlist`` is ``{"name": ..., "songs": [...]}``; it is sent wrapped as ``{"playlist": ...}``."""
        payload = dict(playlist)
        payload["songs"] = [_song_payload(song) for song in payload.get("songs", [])]
        return await self._request(
            "PUT",
            f"/store/playlist/{playlist_id}",
            "Could not update playlist",
            json={"playlist": payload},
        )
