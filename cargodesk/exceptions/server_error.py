"""
CargoDesk - Server Error Exception

Raised for 5xx responses, timeouts and unreachable backends.
"""

from cargodesk.exceptions.api_error import CargoDeskAPIError


class CargoDeskServerError(CargoDeskAPIError):
    """Exception for server errors."""
    pass
