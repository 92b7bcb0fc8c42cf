"""
CargoDesk - User Role Enum

Roles assigned to backend users. A user's role is fixed for the session.
"""

from enum import Enum


class UserRole(str, Enum):
    """Roles known to the permission table"""
    ADMIN = "admin"
    OPERATIONS = "operations"
    ACCOUNTS = "accounts"
    FINANCE = "finance"
    MANAGEMENT = "management"
    CUSTOMER = "customer"
