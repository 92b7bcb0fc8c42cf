"""
CargoDesk - Authentication Error Exception

Raised when the backend rejects the credentials and they cannot be refreshed.
"""

from cargodesk.exceptions.api_error import CargoDeskAPIError


class CargoDeskAuthError(CargoDeskAPIError):
    """Exception for authentication errors."""
    pass
