"""
CargoDesk - API Envelope Model

Every backend response is wrapped as {success, message, data}.
"""

from typing import Any

from pydantic import BaseModel


class ApiEnvelope(BaseModel):
    """Response envelope returned by every backend endpoint"""
    success: bool = True
    message: str = ""
    data: Any = None

    @classmethod
    def IsEnvelope(cls, payload: Any) -> bool:
        """True when payload looks like {success, ..., data}"""
        return isinstance(payload, dict) and "success" in payload and "data" in payload
