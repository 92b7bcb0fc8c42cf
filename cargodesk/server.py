"""
CargoDesk - Main FastAPI Application

This module contains the main FastAPI application for the CargoDesk admin.
It serves the server-rendered pages that browse and edit the freight
records held by the CargoDesk backend REST API.
"""

import logging
from logging.handlers import RotatingFileHandler
from datetime import datetime
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import RedirectResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
import uvicorn

import cargodesk
from cargodesk.admin_sessions import CleanupExpiredSessions, DeleteSession, SESSION_COOKIE_NAME
from cargodesk.config import GetSettings
from cargodesk.exceptions import CargoDeskAPIError, CargoDeskAuthError, CargoDeskNotFoundError

settings = GetSettings()

# Configure logging to write to both console and file
# Create logs directory if it doesn't exist
logs_dir = Path(settings.log_dir)
logs_dir.mkdir(parents=True, exist_ok=True)

# Create log filename with timestamp
log_filename = logs_dir / f"cargodesk-{datetime.now().strftime('%Y-%m-%d')}.log"

# Configure logging with both console and file handlers
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        # Console handler
        logging.StreamHandler(),
        # File handler with rotation (max 10MB per file, keep 10 backup files)
        RotatingFileHandler(
            log_filename,
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=10,
            encoding='utf-8'
        )
    ]
)
logger = logging.getLogger(__name__)


# ==================== Lifespan Events ====================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    FastAPI lifespan event handler for startup and shutdown
    """
    # Startup
    logger.info(f"{settings.app_name} starting up...")
    logger.info(f"Backend API: {settings.api_base_url}")
    logger.info("Server startup complete")

    yield

    # Shutdown
    logger.info(f"{settings.app_name} shutting down...")
    CleanupExpiredSessions()
    logger.info("Shutdown complete")


# ==================== FastAPI Application ====================

app = FastAPI(
    title=settings.app_name,
    description="Admin web interface for freight forwarding operations",
    version=cargodesk.__version__,
    lifespan=lifespan
)

# ==================== Static Files ====================

# Get the directory where this script is located
script_dir = Path(__file__).parent

# Mount static files directory for CSS/JS assets
app.mount("/static", StaticFiles(directory=str(script_dir / "static")), name="static")


# ==================== Import Routers ====================

from cargodesk.routes import status
from cargodesk.routes.admin import auth as admin_auth, users as admin_users, lookup as admin_lookup
from cargodesk.routes.admin import jobs as admin_jobs, records as admin_records


# ==================== Exception Handlers ====================

@app.exception_handler(CargoDeskAuthError)
async def auth_error_handler(request: Request, exc: CargoDeskAuthError):
    """Backend rejected the session's credentials: sign out and go to login"""
    session_id = request.cookies.get(SESSION_COOKIE_NAME)
    if session_id:
        DeleteSession(session_id)
    logger.warning(f"Signed out after authentication failure on {request.url.path}: {exc}")

    response = RedirectResponse(url="/admin/login", status_code=303)
    admin_auth.ClearSessionCookie(response)
    return response


@app.exception_handler(CargoDeskNotFoundError)
async def not_found_handler(request: Request, exc: CargoDeskNotFoundError):
    return admin_auth.RenderPage(
        request, "not_found.html", None, status_code=404,
        message=str(exc) or "The requested record was not found"
    )


@app.exception_handler(CargoDeskAPIError)
async def api_error_handler(request: Request, exc: CargoDeskAPIError):
    logger.error(f"Backend error on {request.url.path}: {exc}")
    return admin_auth.RenderPage(
        request, "error.html", None, status_code=502,
        title="Backend unavailable", message=str(exc)
    )


@app.exception_handler(StarletteHTTPException)
async def page_http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render permission and missing-page errors for the admin; leave the rest to FastAPI"""
    if request.url.path.startswith("/admin") and exc.status_code == 403:
        return admin_auth.RenderPage(
            request, "error.html", None, status_code=403,
            title="Access denied", message=exc.detail
        )
    if request.url.path.startswith("/admin") and exc.status_code == 404:
        return admin_auth.RenderPage(
            request, "not_found.html", None, status_code=404,
            message=exc.detail
        )
    return await http_exception_handler(request, exc)


# ==================== Include Routers ====================

app.include_router(status.router)

# Fixed admin paths first; records serves the /admin/{module} pages
app.include_router(admin_auth.router)
app.include_router(admin_users.router)
app.include_router(admin_lookup.router)
app.include_router(admin_jobs.router)
app.include_router(admin_records.router)


# ==================== Main Entry Point ====================

def main():
    """
    Run the server using uvicorn
    """
    logger.info(f"Starting {settings.app_name}...")

    # reload=False: restart manually after code changes
    uvicorn.run(
        "cargodesk.server:app",
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level="info"
    )


if __name__ == "__main__":
    main()
