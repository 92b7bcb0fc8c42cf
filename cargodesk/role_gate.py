"""
CargoDesk - Role-Gated Rendering

RoleGate decides whether a fragment of a page is rendered for the current
user. It starts NOT_READY and renders only fallbacks until MarkReady is
called, which happens once the session dependency has confirmed the user
against the backend profile.

Templates use Guard with a Jinja call block:

    {% call gate.Guard("carriers", "create") %}
        <a href="/admin/carriers/create">New Carrier</a>
    {% endcall %}
"""

import logging
from enum import Enum
from typing import Callable, Iterable, Optional

from markupsafe import Markup, escape

from cargodesk.models.auth import UserRole
from cargodesk.permissions import (
    ACTION_CREATE, ACTION_DELETE, ACTION_READ, ACTION_UPDATE,
    HasPermission, ResolveRole
)

logger = logging.getLogger(__name__)


class GateState(Enum):
    NOT_READY = "not_ready"
    READY = "ready"


class RoleGate:
    """Presentation-only permission check bound to one user"""

    def __init__(self, user: Optional[dict] = None):
        self.user = user
        self.role = ResolveRole(user)
        self.state = GateState.NOT_READY

    def MarkReady(self) -> None:
        """Move to READY; later calls do nothing"""
        if self.state is GateState.NOT_READY:
            self.state = GateState.READY

    def IsReady(self) -> bool:
        return self.state is GateState.READY

    def Allows(self, module: str, action: str, roles: Optional[Iterable] = None) -> bool:
        """
        Check whether a fragment may be shown

        Args:
            module: Permission module
            action: Permission action
            roles: Optional allow-list of roles checked before the table

        Returns:
            False before MarkReady, without a user, when the role is not in
            roles, or when the permission table denies the action
        """
        if not self.IsReady() or not self.user or self.role is None:
            return False

        if roles is not None:
            allowed = {role.value if isinstance(role, UserRole) else str(role) for role in roles}
            if self.role.value not in allowed:
                logger.debug(f"Role {self.role.value} not in allowed roles {sorted(allowed)}")
                return False

        return HasPermission(self.role, module, action)

    def Guard(self, module: str, action: str, fallback: str = "", roles: Optional[Iterable] = None,
              caller: Optional[Callable[[], str]] = None) -> Markup:
        """Render the call block body when allowed, otherwise the fallback"""
        if self.Allows(module, action, roles) and caller is not None:
            return Markup(caller())
        return escape(fallback)

    def CanRead(self, module: str, fallback: str = "", caller=None) -> Markup:
        return self.Guard(module, ACTION_READ, fallback, caller=caller)

    def CanCreate(self, module: str, fallback: str = "", caller=None) -> Markup:
        return self.Guard(module, ACTION_CREATE, fallback, caller=caller)

    def CanUpdate(self, module: str, fallback: str = "", caller=None) -> Markup:
        return self.Guard(module, ACTION_UPDATE, fallback, caller=caller)

    def CanDelete(self, module: str, fallback: str = "", caller=None) -> Markup:
        return self.Guard(module, ACTION_DELETE, fallback, caller=caller)

    def AdminOnly(self, fallback: str = "", caller=None) -> Markup:
        if self.IsReady() and self.role is UserRole.ADMIN and caller is not None:
            return Markup(caller())
        return escape(fallback)
