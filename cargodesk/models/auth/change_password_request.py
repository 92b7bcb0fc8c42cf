"""
CargoDesk - Change Password Request Model

Pydantic model for the profile page's change password form.
"""

from pydantic import BaseModel, Field, ValidationInfo, field_validator


class ChangePasswordRequest(BaseModel):
    """Request model for change password form"""
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=6)
    confirm_password: str

    @field_validator("confirm_password")
    @classmethod
    def CheckPasswordsMatch(cls, value: str, info: ValidationInfo) -> str:
        if value != info.data.get("new_password"):
            raise ValueError("Passwords do not match")
        return value

    def ToPayload(self) -> dict:
        """Body expected by /auth/change-password"""
        return {
            "currentPassword": self.current_password,
            "newPassword": self.new_password
        }
