"""
CargoDesk - User Form Models

Validation rules for user administration and the profile page.
"""

from typing import Optional

from pydantic import EmailStr, Field

from cargodesk.models.auth.user_role import UserRole
from cargodesk.models.forms.base import EntityForm


class UserCreateForm(EntityForm):
    """Create form for a backend user"""
    email: EmailStr
    password: str = Field(min_length=6)
    first_name: str = Field(min_length=2, alias="firstName")
    last_name: str = Field(min_length=2, alias="lastName")
    phone: Optional[str] = None
    role: UserRole = UserRole.OPERATIONS


class UserUpdateForm(EntityForm):
    """Edit form for a backend user; password is not changed here"""
    email: EmailStr
    first_name: str = Field(min_length=2, alias="firstName")
    last_name: str = Field(min_length=2, alias="lastName")
    phone: Optional[str] = None
    role: UserRole


class ProfileForm(EntityForm):
    """Fields a user may change on their own profile"""
    first_name: str = Field(min_length=2, alias="firstName")
    last_name: str = Field(min_length=2, alias="lastName")
    phone: Optional[str] = None
