"""
CargoDesk - Auth Models Package

This package contains role and authentication models.
"""

from cargodesk.models.auth.user_role import UserRole
from cargodesk.models.auth.login_request import LoginRequest
from cargodesk.models.auth.change_password_request import ChangePasswordRequest

__all__ = [
    'UserRole',
    'LoginRequest',
    'ChangePasswordRequest',
]
