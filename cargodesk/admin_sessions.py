"""
CargoDesk - Admin Session Management

Cookie-based session management for the admin web interface.
Sessions are stored in-memory only (no persistence across restarts).

Each session owns the signed-in user's credential record. The record changes
only through SetCredentials (login or refresh success) and ClearCredentials
(logout or failed refresh); everything else reads it.
"""

import secrets
import logging
import threading
from datetime import datetime, timezone, timedelta
from typing import Optional, Dict

from cargodesk.config import GetSettings
from cargodesk.models.infrastructure import AdminSession

logger = logging.getLogger(__name__)

# In-memory session storage
_sessions: Dict[str, AdminSession] = {}
_sessions_lock = threading.Lock()

# Session configuration
SESSION_COOKIE_NAME = GetSettings().session_cookie_name
SESSION_LIFETIME_HOURS = GetSettings().session_lifetime_hours


def CreateSession(user: dict, token: str) -> AdminSession:
    """
    Create a new admin session for a freshly authenticated user

    Args:
        user: User record returned by the backend
        token: Backend access token

    Returns:
        AdminSession object with new session ID
    """
    # Generate secure random session ID
    session_id = secrets.token_urlsafe(32)

    # Calculate expiration time
    now = datetime.now(timezone.utc)
    expires_at = now + timedelta(hours=SESSION_LIFETIME_HOURS)

    session = AdminSession(
        session_id=session_id,
        created_at_utc=now,
        expires_at_utc=expires_at
    )
    SetCredentials(session, user, token)

    with _sessions_lock:
        _sessions[session_id] = session

    logger.info(f"Created admin session for user '{session.username}' (expires in {SESSION_LIFETIME_HOURS} hours)")

    return session


def GetSession(session_id: str) -> Optional[AdminSession]:
    """
    Get an active session by ID

    Args:
        session_id: Session ID from cookie

    Returns:
        AdminSession if valid, authenticated and not expired, None otherwise
    """
    if not session_id:
        return None

    with _sessions_lock:
        session = _sessions.get(session_id)
        if not session:
            return None

        # Check if expired
        if session.IsExpired():
            logger.info(f"Session expired for user '{session.username}'")
            del _sessions[session_id]
            return None

    if not session.IsAuthenticated():
        return None

    return session


def DeleteSession(session_id: str) -> None:
    """
    Delete a session (logout)

    Args:
        session_id: Session ID to delete
    """
    with _sessions_lock:
        session = _sessions.pop(session_id, None)

    if session:
        ClearCredentials(session)
        if session.api is not None:
            session.api.close()
        logger.info(f"Deleted admin session {session_id[:8]}...")


def CleanupExpiredSessions() -> int:
    """
    Remove all expired sessions from memory

    Returns:
        Number of sessions cleaned up
    """
    with _sessions_lock:
        expired_ids = [
            session_id
            for session_id, session in _sessions.items()
            if session.IsExpired()
        ]

    for session_id in expired_ids:
        DeleteSession(session_id)

    if expired_ids:
        logger.info(f"Cleaned up {len(expired_ids)} expired admin sessions")

    return len(expired_ids)


# ==================== Credential Transitions ====================

def SetCredentials(session: AdminSession, user: Optional[dict], token: str) -> None:
    """
    Store the user record and access token on a session

    Called on login success and on refresh success.

    Args:
        session: Session to update
        user: User record (kept unchanged on refresh)
        token: New access token
    """
    with session.lock:
        session.user = user
        session.token = token

    logger.debug(f"Credentials set for session {session.session_id[:8]}...")


def ClearCredentials(session: AdminSession) -> None:
    """
    Drop the user record, token and cached data from a session

    Called on logout and when a token refresh fails.

    Args:
        session: Session to clear
    """
    with session.lock:
        session.user = None
        session.token = None
    session.cache.clear()

    logger.info(f"Credentials cleared for session {session.session_id[:8]}...")
