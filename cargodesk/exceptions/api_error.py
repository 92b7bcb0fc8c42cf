"""
CargoDesk - API Error Exception

Base exception class for all backend API errors.
"""


class CargoDeskAPIError(Exception):
    """Base exception for API errors."""
    pass
