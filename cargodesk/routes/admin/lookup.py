"""
CargoDesk - Admin Lookup Endpoint

Server side of the searchable dropdown. The page script calls this once the
user has stopped typing for the debounce window and swaps the returned
option list into the open dropdown.
"""

import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import HTMLResponse

from cargodesk.config import GetSettings
from cargodesk.dropdown import SearchableDropdown
from cargodesk.exceptions import CargoDeskRequestError, CargoDeskServerError
from cargodesk.permissions import ACTION_READ
from cargodesk.routes.admin.auth import EnsureAllowed, GetResourceClient, RequireSession, templates

# Create logger
logger = logging.getLogger(__name__)

# Create router instance
router = APIRouter()


@router.get("/admin/lookup/{module}", response_class=HTMLResponse, tags=["Admin"])
def admin_lookup_options(
    request: Request,
    module: str,
    q: str = Query(""),
    name: str = Query("lookup"),
    value: Optional[str] = Query(None),
    session: dict = Depends(RequireSession)
):
    """
    Render the option list for a dropdown search

    Args:
        request: FastAPI request object
        module: Module whose records are searched
        q: Text typed into the dropdown
        name: Input name of the dropdown being filled
        value: Currently selected id, marked in the list
        session: Admin session from dependency

    Returns:
        HTML fragment with the options or a loading/empty message
    """
    EnsureAllowed(session, module, ACTION_READ)
    client = GetResourceClient(session, module)

    dropdown = SearchableDropdown(
        name=name,
        value=value or None,
        loading=True,
        debounce_ms=GetSettings().dropdown_debounce_ms,
        lookup_url=f"/admin/lookup/{module}"
    )
    dropdown.Open()
    dropdown.Type(q.strip())

    error = None
    try:
        dropdown.SetOptions(client.options(q.strip()))
    except (CargoDeskRequestError, CargoDeskServerError) as e:
        logger.error(f"Lookup on {module} failed: {e}")
        dropdown.SetOptions([])
        error = "Failed to load options"
    finally:
        dropdown.Unmount()

    return templates.TemplateResponse(
        request,
        "partials/dropdown_options.html",
        {"dropdown": dropdown.Render(), "error": error}
    )
