"""
CargoDesk - Admin Profile Endpoints

The signed-in user's own profile: view, edit names and phone, and change
password. User administration itself runs through the generic record pages.
"""

import logging
from typing import Optional
from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import ValidationError

from cargodesk.exceptions import CargoDeskAPIError, CargoDeskAuthError
from cargodesk.models.auth import ChangePasswordRequest
from cargodesk.models.forms import FormErrors, ProfileForm
from cargodesk.notifications import NotifyFailure, NotifySuccess
from cargodesk.routes.admin.auth import GetResourceClient, RenderPage, RequireSession

# Create logger
logger = logging.getLogger(__name__)

# Create router instance
router = APIRouter()

PROFILE_UPDATED = "Profile updated successfully!"
PROFILE_UPDATE_FAILED = "Failed to update profile"
PASSWORD_CHANGED = "Password changed successfully!"
PASSWORD_CHANGE_FAILED = "Failed to change password"


def _ProfileUser(session: dict) -> dict:
    user = session["user"] or {}
    nested = user.get("user")
    return nested if isinstance(nested, dict) else user


def RenderProfile(request: Request, session: dict, profile_values: Optional[dict] = None,
                  profile_errors: Optional[dict] = None, password_errors: Optional[dict] = None,
                  status_code: int = 200) -> HTMLResponse:
    user = _ProfileUser(session)
    values = profile_values if profile_values is not None else {
        "firstName": user.get("firstName", ""),
        "lastName": user.get("lastName", ""),
        "phone": user.get("phone") or "",
    }
    return RenderPage(
        request,
        "profile.html",
        session,
        active_page="profile",
        status_code=status_code,
        profile=user,
        role=session["role"].value if session["role"] else None,
        values=values,
        profile_errors=profile_errors or {},
        password_errors=password_errors or {}
    )


@router.get("/admin/profile", response_class=HTMLResponse, tags=["Admin"])
def admin_profile_page(request: Request, session: dict = Depends(RequireSession)):
    """
    Display the signed-in user's profile

    Args:
        request: FastAPI request object
        session: Admin session from dependency

    Returns:
        HTML profile page
    """
    return RenderProfile(request, session)


@router.post("/admin/profile", response_class=HTMLResponse, tags=["Admin"])
def admin_profile_submit(
    request: Request,
    firstName: str = Form(""),
    lastName: str = Form(""),
    phone: str = Form(""),
    session: dict = Depends(RequireSession)
):
    """Update the signed-in user's names and phone"""
    values = {"firstName": firstName, "lastName": lastName, "phone": phone}
    try:
        form = ProfileForm.model_validate(values)
    except ValidationError as e:
        return RenderProfile(request, session, values, profile_errors=FormErrors(e), status_code=400)

    user_id = _ProfileUser(session).get("id")
    client = GetResourceClient(session, "users")
    try:
        client.update(user_id, form.ToPayload())
    except CargoDeskAuthError:
        raise
    except CargoDeskAPIError as e:
        NotifyFailure(session["session"], PROFILE_UPDATE_FAILED, str(e))
        return RenderProfile(request, session, values)

    logger.info(f"User '{session['username']}' updated their profile")
    NotifySuccess(session["session"], PROFILE_UPDATED)
    return RedirectResponse(url="/admin/profile", status_code=303)


@router.post("/admin/profile/password", response_class=HTMLResponse, tags=["Admin"])
def admin_change_password(
    request: Request,
    current_password: str = Form(""),
    new_password: str = Form(""),
    confirm_password: str = Form(""),
    session: dict = Depends(RequireSession)
):
    """
    Change the signed-in user's password

    Args:
        current_password: Current password
        new_password: New password (at least 6 characters)
        confirm_password: Must match new_password

    Returns:
        Redirect to the profile page, or the page with inline errors
    """
    try:
        form = ChangePasswordRequest(
            current_password=current_password,
            new_password=new_password,
            confirm_password=confirm_password
        )
    except ValidationError as e:
        return RenderProfile(request, session, password_errors=FormErrors(e), status_code=400)

    try:
        session["api"].change_password(form.ToPayload())
    except CargoDeskAuthError:
        raise
    except CargoDeskAPIError as e:
        NotifyFailure(session["session"], PASSWORD_CHANGE_FAILED, str(e))
        return RenderProfile(request, session)

    logger.info(f"User '{session['username']}' changed their password")
    NotifySuccess(session["session"], PASSWORD_CHANGED)
    return RedirectResponse(url="/admin/profile", status_code=303)
