import argparse
import asyncio
import json
from pathlib import Path

from fastapi import Request

from app.config import RELATIONAL, Settings, settings
from app.db_handlers import (
    DatabaseConnectionError,
    DatabaseManager,
    DocumentDatabaseManager,
    RelationalDatabaseManager,
)
from app.schemas import PlaylistCreate, UserCreateData, normalize_email
from app.utils.auth import get_password_hash
from app.utils.logger import setup_logger

logger = setup_logger("db")

EXAMPLE_DATA_FILE = Path(__file__).parent / "data" / "example_db_data.json"


def create_database_manager(config: Settings = settings) -> DatabaseManager:
    """Build the DatabaseManager selected by DATABASE_TYPE. Does not connect."""
    logger.info(f"Loading {config.database_type} database manager...")
    if config.database_type == RELATIONAL:
        return RelationalDatabaseManager(config.relational_database_url)
    return DocumentDatabaseManager(
        config.mongodb_url,
        config.mongodb_database,
        server_selection_timeout_ms=config.mongodb_server_selection_timeout_ms,
    )


# --- Dependency for FastAPI ---
def get_db_manager(request: Request) -> DatabaseManager:
    return request.app.state.db_manager


async def check_db_connection(db: DatabaseManager) -> bool:
    """Connect and disconnect once, reporting whether the engine is reachable."""
    try:
        async with db:
            return True
    except DatabaseConnectionError as e:
        logger.error(f"Database connectivity check failed: {e}")
        return False


async def load_example_data(db: DatabaseManager, data: dict) -> tuple[int, int]:
    """
    Insert users and playlists from an example-data mapping.

    Users carry a plaintext ``password`` in the file; it is hashed before
    storage. Emails are normalized like registration input so seeded users can
    log in. Playlist ids in the file are ignored, the engine assigns new ones.
    """
    users = data.get("users", [])
    playlists = data.get("playlists", [])

    logger.info(f"Inserting {len(users)} users...")
    for user in users:
        logger.debug(f"Creating user: {user['firstName']} {user['lastName']} ({user['email']})")
        await db.create_user(
            UserCreateData(
                first_name=user["firstName"],
                last_name=user["lastName"],
                email=normalize_email(user["email"]),
                password_hash=get_password_hash(user["password"]),
            )
        )

    logger.info(f"Inserting {len(playlists)} playlists...")
    for playlist in playlists:
        playlist_data = PlaylistCreate.model_validate(playlist)
        playlist_data.owner_email = normalize_email(playlist_data.owner_email)
        await db.create_playlist(playlist_data)

    return len(users), len(playlists)


async def reset_db(db: DatabaseManager, data_file: Path = EXAMPLE_DATA_FILE) -> None:
    """Clear all users and playlists, then reload the example data."""
    logger.warning(
        f"Resetting the {db.backend_name} database. THIS IS A DESTRUCTIVE OPERATION."
    )
    data = json.loads(Path(data_file).read_text(encoding="utf-8"))
    async with db:
        await db.clear_all()
        user_count, playlist_count = await load_example_data(db, data)
    logger.info(
        f"Database reset complete: {user_count} users, {playlist_count} playlists"
    )


async def init_db(db: DatabaseManager) -> None:
    """Connect once so the relational backend creates any missing tables."""
    async with db:
        logger.info(f"{db.backend_name} database initialized.")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(
        description=f"Playlister database utility ({settings.database_type})"
    )
    parser.add_argument(
        "action",
        choices=["init", "reset", "ping"],
        help="'init' to connect and create missing tables, "
        "'reset' to delete all data and load the example data, "
        "'ping' to check that the database is reachable.",
    )
    parser.add_argument(
        "--data-file",
        type=Path,
        default=EXAMPLE_DATA_FILE,
        help="Example data used by 'reset'.",
    )
    args = parser.parse_args()

    manager = create_database_manager(settings)

    if args.action == "init":
        asyncio.run(init_db(manager))
    elif args.action == "reset":
        confirm = input(
            f"WARNING: This will delete all users and playlists in the {settings.database_type} database. Are you sure? (yes/no): "
        )
        if confirm.lower() == "yes":
            asyncio.run(reset_db(manager, args.data_file))
        else:
            logger.info("Database reset cancelled by user.")
    elif args.action == "ping":
        if asyncio.run(check_db_connection(manager)):
            logger.info("Database connectivity confirmed.")
        else:
            raise SystemExit(1)
