"""
CargoDesk - Admin Session Model

Dataclass holding one signed-in user's credential record, query cache and
pending notifications.
"""

import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, List, Optional

from cargodesk.api.query_cache import QueryCache
from cargodesk.config import GetSettings
from cargodesk.models.infrastructure.notification import Notification


@dataclass
class AdminSession:
    """Represents an active admin session"""
    session_id: str
    created_at_utc: datetime
    expires_at_utc: datetime
    user: Optional[dict] = None
    token: Optional[str] = None
    notifications: List[Notification] = field(default_factory=list)
    cache: QueryCache = field(default_factory=lambda: QueryCache(GetSettings().query_cache_max_age_seconds))
    api: Any = None  # BackendAPI bound to this session, created on first use
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def IsExpired(self) -> bool:
        """Check if session has expired"""
        return datetime.now(timezone.utc) >= self.expires_at_utc

    def IsAuthenticated(self) -> bool:
        """Check if the session still holds a backend token"""
        return self.token is not None

    @property
    def username(self) -> str:
        user = self.user or {}
        user = user.get("user", user)
        return user.get("email") or user.get("firstName") or "unknown"
