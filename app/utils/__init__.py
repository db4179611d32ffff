"""
Common utilities package for the Playlister API.

Logging setup lives here; authentication helpers are imported from
``app.utils.auth`` directly since they depend on the application settings.
"""

from app.utils.logger import setup_logger

__all__ = [
    "setup_logger",
]
