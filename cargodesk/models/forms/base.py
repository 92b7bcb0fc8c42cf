"""
CargoDesk - Form Base Model

Shared behaviour for form models: blank strings from HTML inputs count as
missing values, and validation errors are flattened for inline display.
"""

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, ValidationError, model_validator


class EntityForm(BaseModel):
    """Base class for all form models"""

    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def DropBlankValues(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {
                key: value for key, value in data.items()
                if not (isinstance(value, str) and value.strip() == "")
            }
        return data

    def ToPayload(self) -> dict:
        """JSON body for the backend, without unset optional fields"""
        return self.model_dump(mode="json", exclude_none=True, by_alias=True)


def FormErrors(error: ValidationError) -> Dict[str, str]:
    """
    Flatten a pydantic ValidationError into {field: message}

    Nested locations are joined with dots (items.0.quantity). Only the first
    message per field is kept.

    Args:
        error: ValidationError raised by a form model

    Returns:
        Mapping of field name to message
    """
    errors: Dict[str, str] = {}
    for item in error.errors():
        field = ".".join(str(part) for part in item.get("loc", ())) or "__all__"
        message = item.get("msg", "Invalid value")
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        errors.setdefault(field, message)
    return errors
