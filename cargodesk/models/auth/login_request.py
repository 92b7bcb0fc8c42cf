"""
CargoDesk - Login Request Model

Pydantic model for the login form.
"""

from pydantic import BaseModel, EmailStr, Field


class LoginRequest(BaseModel):
    """Request model for login form"""
    email: EmailStr
    password: str = Field(min_length=6)
