"""
CargoDesk - Session Notifications

Queue of success and error messages kept on the admin session and shown
once on the next rendered page.
"""

import logging
from typing import List, Optional

from cargodesk.models.infrastructure import AdminSession, Notification

logger = logging.getLogger(__name__)

KIND_SUCCESS = "success"
KIND_ERROR = "error"


def PushNotification(session: AdminSession, kind: str, title: str, description: Optional[str] = None) -> Notification:
    notification = Notification(kind=kind, title=title, description=description)
    with session.lock:
        session.notifications.append(notification)
    return notification


def NotifySuccess(session: AdminSession, title: str, description: Optional[str] = None) -> Notification:
    return PushNotification(session, KIND_SUCCESS, title, description)


def NotifyFailure(session: AdminSession, title: str, description: Optional[str] = None) -> Notification:
    """Queue an error; the description carries the server's reason when known"""
    logger.warning(f"{title}: {description}" if description else title)
    return PushNotification(session, KIND_ERROR, title, description)


def PopNotifications(session: Optional[AdminSession]) -> List[Notification]:
    """Remove and return every queued notification"""
    if session is None:
        return []
    with session.lock:
        pending = list(session.notifications)
        session.notifications.clear()
    return pending
