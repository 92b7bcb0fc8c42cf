"""
CargoDesk - Request Error Exception

Raised when the backend refuses a request (4xx other than auth failures).
"""

from typing import Optional

from cargodesk.exceptions.api_error import CargoDeskAPIError


class CargoDeskRequestError(CargoDeskAPIError):
    """
    Exception for rejected requests.

    Carries the HTTP status and the message from the response envelope so
    pages can show the backend's own explanation.
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
