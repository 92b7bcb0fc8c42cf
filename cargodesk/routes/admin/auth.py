"""
CargoDesk - Admin Authentication Endpoints

This module contains admin web interface authentication endpoints including
login, session management, and the dashboard, plus the helpers every admin
page uses to resolve the session, check permissions and render templates.
"""

import logging
from typing import Optional
from pathlib import Path
from fastapi import APIRouter, Depends, HTTPException, status, Request, Form
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from pydantic import ValidationError

import cargodesk
from cargodesk.admin_sessions import (
    CreateSession, GetSession, DeleteSession, SetCredentials,
    SESSION_COOKIE_NAME, SESSION_LIFETIME_HOURS
)
from cargodesk.api.backend_api import BackendAPI
from cargodesk.api.query_cache import CacheTag
from cargodesk.api.resources import RESOURCES, ResourceClient
from cargodesk.config import GetSettings
from cargodesk.exceptions import CargoDeskAPIError, CargoDeskAuthError
from cargodesk.models.auth import LoginRequest
from cargodesk.models.forms import FormErrors
from cargodesk.models.infrastructure import AdminSession
from cargodesk.navigation import VisibleNavItems
from cargodesk.notifications import PopNotifications
from cargodesk.permissions import HasPermission, ResolveRole
from cargodesk.role_gate import RoleGate


# Create logger
logger = logging.getLogger(__name__)

# Create router instance
router = APIRouter()

# Package directory holding templates/ and static/
script_dir = Path(__file__).parent.parent.parent

# Initialize Jinja2 templates
templates = Jinja2Templates(directory=str(script_dir / "templates"))

PROFILE_QUERY = "auth.profile"


# ==================== Helper Functions ====================

def CreateBackendAPI(session: Optional[AdminSession] = None) -> BackendAPI:
    """Build a backend client from configuration"""
    settings = GetSettings()
    return BackendAPI(
        settings.api_base_url,
        session=session,
        timeout=settings.request_timeout_seconds,
        verify_ssl=settings.verify_ssl
    )


def GetBackendAPI(session: AdminSession) -> BackendAPI:
    """Backend client bound to a session, created on first use"""
    with session.lock:
        if session.api is None:
            session.api = CreateBackendAPI(session)
        return session.api


def GetAdminSession(request: Request) -> Optional[dict]:
    """
    Dependency to get admin session from cookie
    Returns session info or None if not logged in
    """
    session_id = request.cookies.get(SESSION_COOKIE_NAME)
    if not session_id:
        return None

    session = GetSession(session_id)
    if not session:
        return None

    return {
        "session_id": session.session_id,
        "username": session.username,
        "session": session
    }


def RequireSession(request: Request) -> dict:
    """
    Dependency to require a valid session

    Confirms the user against the backend profile (cached per session until a
    User mutation invalidates it) and only then marks the role gate ready.
    """
    info = GetAdminSession(request)
    if not info:
        raise HTTPException(
            status_code=status.HTTP_303_SEE_OTHER,
            detail="Not authenticated",
            headers={"Location": "/admin/login"}
        )

    session: AdminSession = info["session"]
    api = GetBackendAPI(session)

    user_id = str((session.user or {}).get("id", ""))
    profile = session.cache.query(
        PROFILE_QUERY,
        None,
        api.get_profile,
        [CacheTag("User"), CacheTag("User", user_id)]
    )
    if isinstance(profile, dict) and profile != session.user:
        SetCredentials(session, profile, session.token)

    gate = RoleGate(session.user)
    gate.MarkReady()

    info.update({
        "username": session.username,
        "user": session.user,
        "role": ResolveRole(session.user),
        "gate": gate,
        "api": api
    })
    return info


def EnsureAllowed(context: dict, module: str, action: str) -> None:
    """Raise 403 unless the user's role grants the action on the module"""
    if not HasPermission(context["role"], module, action):
        logger.warning(f"User '{context['username']}' denied {action} on {module}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"You do not have permission to {action} {module}"
        )


def GetResourceClient(context: dict, module: str) -> ResourceClient:
    """Resource client running through the session's query cache"""
    definition = RESOURCES.get(module)
    if definition is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown module '{module}'")
    return ResourceClient(context["api"], context["session"].cache, definition)


def RenderPage(request: Request, template: str, context: Optional[dict], active_page: Optional[str] = None,
               status_code: int = 200, **extra) -> HTMLResponse:
    """
    Render an admin page with navigation, role gate and pending notifications

    Args:
        request: FastAPI request object
        template: Template name
        context: Session info from RequireSession, or None for public pages
        active_page: Module highlighted in the navigation
        status_code: Response status
        **extra: Template variables

    Returns:
        HTML response
    """
    settings = GetSettings()
    page_context = {
        "app_name": settings.app_name,
        "version": cargodesk.__version__,
        "show_nav": context is not None,
        "active_page": active_page,
        "username": context["username"] if context else None,
        "user": context["user"] if context else None,
        "gate": context["gate"] if context else RoleGate(None),
        "nav_items": VisibleNavItems(context["user"], active_page) if context else [],
        "notifications": PopNotifications(context["session"]) if context else [],
    }
    page_context.update(extra)
    return templates.TemplateResponse(request, template, page_context, status_code=status_code)


def SetSessionCookie(response, session_id: str) -> None:
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=session_id,
        max_age=SESSION_LIFETIME_HOURS * 3600,
        httponly=True,
        samesite="lax"
    )


def ClearSessionCookie(response) -> None:
    response.delete_cookie(
        key=SESSION_COOKIE_NAME,
        path="/",
        samesite="lax"
    )


# ==================== Admin Authentication Endpoints ====================

@router.get("/admin", response_class=RedirectResponse, tags=["Admin"])
def admin_root(request: Request):
    """Redirect /admin to the dashboard or the login page"""
    if GetAdminSession(request):
        return RedirectResponse(url="/admin/dashboard", status_code=303)
    return RedirectResponse(url="/admin/login", status_code=303)


@router.get("/admin/login", response_class=HTMLResponse, tags=["Admin"])
def admin_login_page(request: Request):
    """
    Display admin login page

    Returns:
        HTML login form
    """
    if GetAdminSession(request):
        return RedirectResponse(url="/admin/dashboard", status_code=303)

    return RenderPage(request, "login.html", None, error=None, errors={}, email="")


@router.post("/admin/login", response_class=HTMLResponse, tags=["Admin"])
def admin_login_submit(
    request: Request,
    email: str = Form(""),
    password: str = Form("")
):
    """
    Process admin login form submission

    Args:
        email: Email from form
        password: Password from form

    Returns:
        Redirect to dashboard on success, login form with error on failure
    """
    try:
        credentials = LoginRequest(email=email, password=password)
    except ValidationError as e:
        return RenderPage(request, "login.html", None, status_code=400,
                          error=None, errors=FormErrors(e), email=email)

    api = CreateBackendAPI()
    try:
        user, token = api.login(credentials.email, credentials.password)
    except CargoDeskAuthError:
        logger.warning(f"Failed login attempt for {credentials.email}")
        return RenderPage(request, "login.html", None, status_code=401,
                          error="Invalid email or password", errors={}, email=email)
    except CargoDeskAPIError as e:
        logger.error(f"Login failed for {credentials.email}: {e}")
        return RenderPage(request, "login.html", None, status_code=502,
                          error=str(e), errors={}, email=email)
    finally:
        api.close()

    # Create session
    session = CreateSession(user, token)

    response = RedirectResponse(url="/admin/dashboard", status_code=303)
    SetSessionCookie(response, session.session_id)
    return response


@router.post("/admin/logout", tags=["Admin"])
@router.get("/admin/logout", tags=["Admin"])
def admin_logout(request: Request):
    """
    Logout endpoint - clears session and redirects to login page
    Supports both GET and POST methods
    """
    session_id = request.cookies.get(SESSION_COOKIE_NAME)
    if session_id:
        # Delete the session from server
        DeleteSession(session_id)

    response = RedirectResponse(url="/admin/login", status_code=303)
    ClearSessionCookie(response)
    return response


@router.get("/admin/dashboard", response_class=HTMLResponse, tags=["Admin"])
def admin_dashboard(
    request: Request,
    session: dict = Depends(RequireSession)
):
    """
    Display the role-aware dashboard with module shortcuts

    Args:
        request: FastAPI request object
        session: Admin session from dependency

    Returns:
        HTML dashboard page
    """
    shortcuts = [
        item for item in VisibleNavItems(session["user"], "dashboard")
        if item["module"] != "dashboard"
    ]

    return RenderPage(
        request,
        "dashboard.html",
        session,
        active_page="dashboard",
        shortcuts=shortcuts,
        role=session["role"].value if session["role"] else None
    )
