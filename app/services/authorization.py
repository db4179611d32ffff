"""
Ownership check for playlists.

A caller may read or mutate a playlist only when the playlist's
``owner_email`` resolves to a user whose id is the caller's id. There are
no roles, delegation or admin overrides.
"""

from enum import Enum

from app.db_handlers.base import DatabaseManager
from app.schemas import UserRecord
from app.utils.logger import setup_logger

logger = setup_logger("authorization")


class AccessDecision(str, Enum):
    PERMIT = "permit"
    DENY = "deny"


def decide_playlist_access(owner: UserRecord | None, caller_id: str) -> AccessDecision:
    """Permit only when the resolved owner exists and is the caller."""
    if owner is None or not caller_id:
        return AccessDecision.DENY
    if owner.id == str(caller_id):
        return AccessDecision.PERMIT
    return AccessDecision.DENY


async def authorize_playlist_access(
    db: DatabaseManager, owner_email: str, caller_id: str
) -> AccessDecision:
    """Resolve ``owner_email`` to a user and decide whether ``caller_id`` owns it."""
    owner = await db.find_user_by_email(owner_email)
    decision = decide_playlist_access(owner, caller_id)
    if decision is AccessDecision.DENY:
        logger.info(f"Denied user {caller_id} access to playlists of {owner_email}")
    return decision
