"""
CargoDesk - Role Permissions

Static mapping from role to the modules it may see and the actions it may
perform on them. Lookups are pure and fail closed: an unknown role, module
or action is denied.

This only decides what the admin interface shows. The backend enforces the
real authorization.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import FrozenSet, Mapping, Optional, Tuple, Union

from cargodesk.models.auth import UserRole

ACTION_READ = "read"
ACTION_CREATE = "create"
ACTION_UPDATE = "update"
ACTION_DELETE = "delete"

_CRUD = (ACTION_READ, ACTION_CREATE, ACTION_UPDATE, ACTION_DELETE)


@dataclass(frozen=True)
class PermissionEntry:
    """Actions a role may perform on one module"""
    module: str
    actions: FrozenSet[str]


def _Entry(module: str, *actions: str) -> PermissionEntry:
    return PermissionEntry(module, frozenset(actions))


ROLE_PERMISSIONS: Mapping[UserRole, Tuple[PermissionEntry, ...]] = MappingProxyType({
    UserRole.ADMIN: (
        _Entry("dashboard", ACTION_READ),
        _Entry("users", *_CRUD),
        _Entry("jobs", *_CRUD),
        _Entry("master-awbs", *_CRUD),
        _Entry("house-awbs", *_CRUD),
        _Entry("quick-actions", *_CRUD),
        _Entry("items", *_CRUD),
        _Entry("cost-centers", *_CRUD),
        _Entry("invoices", *_CRUD),
        _Entry("approvals", *_CRUD),
        _Entry("lists", *_CRUD),
        _Entry("transactions", *_CRUD),
        _Entry("reconcile", *_CRUD),
        _Entry("track", ACTION_READ),
        _Entry("parties", *_CRUD),
        _Entry("countries", *_CRUD),
        _Entry("cities", *_CRUD),
        _Entry("ports-airports", *_CRUD),
        _Entry("carriers", *_CRUD),
        _Entry("commodities", *_CRUD),
        _Entry("settings", ACTION_READ, ACTION_UPDATE),
    ),
    UserRole.OPERATIONS: (
        _Entry("dashboard", ACTION_READ),
        _Entry("jobs", *_CRUD),
        _Entry("master-awbs", *_CRUD),
        _Entry("house-awbs", *_CRUD),
        _Entry("quick-actions", ACTION_READ, ACTION_CREATE, ACTION_UPDATE),
        _Entry("items", *_CRUD),
        _Entry("cost-centers", *_CRUD),
        _Entry("parties", *_CRUD),
        _Entry("countries", *_CRUD),
        _Entry("cities", *_CRUD),
        _Entry("ports-airports", *_CRUD),
        _Entry("carriers", *_CRUD),
        _Entry("commodities", *_CRUD),
    ),
    UserRole.ACCOUNTS: (
        _Entry("dashboard", ACTION_READ),
        _Entry("invoices", *_CRUD),
        _Entry("approvals", *_CRUD),
        _Entry("lists", *_CRUD),
        _Entry("jobs", ACTION_READ),
        _Entry("parties", ACTION_READ, ACTION_CREATE, ACTION_UPDATE),
    ),
    UserRole.FINANCE: (
        _Entry("dashboard", ACTION_READ),
        _Entry("transactions", *_CRUD),
        _Entry("reconcile", *_CRUD),
        _Entry("invoices", ACTION_READ, ACTION_UPDATE),
        _Entry("jobs", ACTION_READ),
        _Entry("cost-centers", *_CRUD),
    ),
    UserRole.MANAGEMENT: (
        _Entry("dashboard", ACTION_READ),
        _Entry("jobs", *_CRUD),
        _Entry("invoices", *_CRUD),
        _Entry("approvals", *_CRUD),
        _Entry("transactions", ACTION_READ, ACTION_CREATE, ACTION_UPDATE),
        _Entry("users", ACTION_READ, ACTION_CREATE, ACTION_UPDATE),
        _Entry("reports", ACTION_READ, ACTION_CREATE),
    ),
    UserRole.CUSTOMER: (
        _Entry("dashboard", ACTION_READ),
        _Entry("track", ACTION_READ),
        _Entry("invoices", ACTION_READ),
        _Entry("jobs", ACTION_READ),
    ),
})


def _CoerceRole(role: Union[UserRole, str, None]) -> Optional[UserRole]:
    if isinstance(role, UserRole):
        return role
    if not isinstance(role, str):
        return None
    try:
        return UserRole(role)
    except ValueError:
        return None


def HasPermission(role: Union[UserRole, str, None], module: str, action: str) -> bool:
    """
    Check whether a role may perform an action on a module

    Args:
        role: UserRole, its string value, or None
        module: Module name (e.g., "carriers")
        action: "read", "create", "update" or "delete"

    Returns:
        True only if the table grants the action
    """
    user_role = _CoerceRole(role)
    if user_role is None:
        return False

    for entry in ROLE_PERMISSIONS.get(user_role, ()):
        if entry.module == module:
            return action in entry.actions
    return False


def CanAccessModule(role: Union[UserRole, str, None], module: str) -> bool:
    return HasPermission(role, module, ACTION_READ)


def CanCreate(role: Union[UserRole, str, None], module: str) -> bool:
    return HasPermission(role, module, ACTION_CREATE)


def CanUpdate(role: Union[UserRole, str, None], module: str) -> bool:
    return HasPermission(role, module, ACTION_UPDATE)


def CanDelete(role: Union[UserRole, str, None], module: str) -> bool:
    return HasPermission(role, module, ACTION_DELETE)


def ResolveRole(user: Optional[dict]) -> Optional[UserRole]:
    """
    Pull the role out of a user record

    Accepts both the flat {"role": ...} shape and the nested
    {"user": {"role": ...}} shape returned by some backend endpoints.

    Returns:
        UserRole, or None if missing or unknown
    """
    if not isinstance(user, dict):
        return None
    nested = user.get("user")
    if isinstance(nested, dict) and nested.get("role"):
        return _CoerceRole(nested.get("role"))
    return _CoerceRole(user.get("role"))
