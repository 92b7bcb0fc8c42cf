"""
CargoDesk - Exceptions Package

Contains all exception classes raised while talking to the backend API.
"""

from cargodesk.exceptions.api_error import CargoDeskAPIError
from cargodesk.exceptions.auth_error import CargoDeskAuthError
from cargodesk.exceptions.server_error import CargoDeskServerError
from cargodesk.exceptions.request_error import CargoDeskRequestError
from cargodesk.exceptions.not_found_error import CargoDeskNotFoundError

__all__ = [
    'CargoDeskAPIError',
    'CargoDeskAuthError',
    'CargoDeskServerError',
    'CargoDeskRequestError',
    'CargoDeskNotFoundError'
]
