"""
CargoDesk - Infrastructure Models Package

Dataclass models for infrastructure components.
"""

from cargodesk.models.infrastructure.notification import Notification
from cargodesk.models.infrastructure.admin_session import AdminSession

__all__ = [
    'Notification',
    'AdminSession',
]
