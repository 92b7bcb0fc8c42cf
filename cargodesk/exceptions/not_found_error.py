"""
CargoDesk - Not Found Error Exception

Raised when the backend answers 404 for a record.
"""

from cargodesk.exceptions.request_error import CargoDeskRequestError


class CargoDeskNotFoundError(CargoDeskRequestError):
    """Exception for missing records."""

    def __init__(self, message: str = "Record not found"):
        super().__init__(message, status_code=404)
