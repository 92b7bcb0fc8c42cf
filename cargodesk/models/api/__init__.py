"""
CargoDesk - API Models Package

This package contains Pydantic models for backend responses and queries.
"""

from cargodesk.models.api.envelope import ApiEnvelope
from cargodesk.models.api.page import Page
from cargodesk.models.api.search_params import SearchParams, SORT_ASC, SORT_DESC

__all__ = [
    'ApiEnvelope',
    'Page',
    'SearchParams',
    'SORT_ASC',
    'SORT_DESC',
]
