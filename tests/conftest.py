"""
Shared fixtures for the test suite.

Persistence tests run against both backends: the relational manager on a
temporary SQLite file (aiosqlite) and the document manager on an in-memory
mongomock_motor client. HTTP and client tests run the FastAPI app on each
backend in turn.
"""

from collections.abc import AsyncGenerator, Generator
from pathlib import Path

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from app.db_handlers import (
    DatabaseManager,
    DocumentDatabaseManager,
    RelationalDatabaseManager,
)
from app.schemas import Song


def sqlite_url(tmp_path: Path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'playlister_test.db'}"


def make_document_manager() -> DocumentDatabaseManager:
    return DocumentDatabaseManager(
        "mongodb://mocked",
        "playlister_test",
        client=AsyncMongoMockClient(),
    )


@pytest.fixture
def road_trip_songs() -> list[Song]:
    return [
        Song(title="Fast Car", artist="Tracy Chapman", year=1988, external_media_id="AIOAlaACuv4"),
        Song(title="Life is a Highway", artist="Tom Cochrane", year=1991, external_media_id="tvfQh7fX0pY"),
        Song(title="Born to Run", artist="Bruce Springsteen", year=1975, external_media_id="IxuThNgl3YA"),
    ]


@pytest_asyncio.fixture
async def relational_manager(tmp_path: Path) -> AsyncGenerator[DatabaseManager, None]:
    manager = RelationalDatabaseManager(sqlite_url(tmp_path))
    await manager.connect()
    yield manager
    await manager.disconnect()


@pytest_asyncio.fixture
async def document_manager() -> AsyncGenerator[DatabaseManager, None]:
    manager = make_document_manager()
    await manager.connect()
    yield manager
    await manager.disconnect()


@pytest_asyncio.fixture(params=["relational", "document-store"])
async def db_manager(request, tmp_path: Path) -> AsyncGenerator[DatabaseManager, None]:
    """Each test using this fixture runs once per backend."""
    if request.param == "relational":
        manager = RelationalDatabaseManager(sqlite_url(tmp_path))
    else:
        manager = make_document_manager()
    await manager.connect()
    yield manager
    await manager.disconnect()


@pytest.fixture(params=["relational", "document-store"])
def client(request, tmp_path: Path) -> Generator[TestClient, None, None]:
    """
    Test client for the full application, once per backend.
    The TestClient runs the lifespan, which connects and disconnects the manager.
    """
    from main import create_app

    if request.param == "relational":
        manager = RelationalDatabaseManager(sqlite_url(tmp_path))
    else:
        manager = make_document_manager()
    with TestClient(create_app(manager)) as c:
        yield c
