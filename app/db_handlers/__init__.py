from app.db_handlers.base import (
    DatabaseConnectionError,
    DatabaseManager,
    DuplicateEmailError,
    PersistenceError,
    RecordNotFoundError,
)
from app.db_handlers.document import DocumentDatabaseManager
from app.db_handlers.relational import RelationalDatabaseManager

__all__ = [
    "DatabaseManager",
    "DocumentDatabaseManager",
    "RelationalDatabaseManager",
    "PersistenceError",
    "DatabaseConnectionError",
    "DuplicateEmailError",
    "RecordNotFoundError",
]
