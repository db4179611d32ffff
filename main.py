#!/usr/bin/env python3

"""
Main application entry point for the Playlister API.

Architecture: FastAPI application over a pluggable DatabaseManager
(MongoDB or PostgreSQL, chosen by DATABASE_TYPE).
Key Features: Lifecycle management, database connectivity at startup, error handling, CORS configuration.
"""

import asyncio
import sys

if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

import errno
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.auth import router as auth_router
from app.api.store import router as store_router
from app.config import settings
from app.db import create_database_manager
from app.db_handlers import DatabaseConnectionError, DatabaseManager
from app.utils.logger import setup_logger

logger = setup_logger("main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Connect the application's DatabaseManager for the lifetime of the server."""
    db_manager: DatabaseManager = app.state.db_manager
    logger.info(f"Application startup ({db_manager.backend_name} backend)...")
    try:
        await db_manager.connect()
    except DatabaseConnectionError as e:
        logger.critical(f"Startup error: {e}")
        raise SystemExit(f"Database connection failed: {e}") from e

    logger.info("Playlister API startup successful.")

    yield

    logger.info("Playlister API shutdown...")
    await db_manager.disconnect()
    logger.info("Shutdown complete.")


def create_app(db_manager: DatabaseManager | None = None) -> FastAPI:
    """
    Build the FastAPI application.

    The DatabaseManager is constructed here (or passed in) and stored on
    ``app.state``; route handlers receive it through ``get_db_manager``.
    """
    app = FastAPI(title="Playlister API", lifespan=lifespan)
    app.state.db_manager = db_manager or create_database_manager(settings)

    @app.exception_handler(DatabaseConnectionError)
    async def db_connection_exception_handler(
        request: Request, exc: DatabaseConnectionError
    ):
        logger.error(f"Database unavailable: {exc}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": settings.db_unavailable_hint},
        )

    @app.exception_handler(OSError)
    async def oserror_exception_handler(request: Request, exc: OSError):
        logger.error(f"OSError caught: {exc}, errno: {exc.errno}")
        if exc.errno in [errno.ETIMEDOUT, errno.ECONNREFUSED]:
            logger.error(
                f"Returning 503 due to DB connection issue: {settings.db_unavailable_hint}"
            )
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={"detail": settings.db_unavailable_hint},
            )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": f"An unexpected OS error occurred: {exc}"},
        )

    @app.get("/health")
    async def health_check():
        return {"status": "healthy"}

    app.include_router(auth_router)
    app.include_router(store_router)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    return app


app = create_app()


def main():
    port = int(settings.server_port)
    host = settings.server_host

    logger.info(f"Starting Playlister API server on {host}:{port}")

    try:
        uvicorn.run(app, host=host, port=port, workers=settings.server_workers)
    except Exception as e:
        logger.error(f"Error starting server: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
