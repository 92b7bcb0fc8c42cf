"""
CargoDesk - Admin Job Endpoints

Job workflow status changes posted from the job detail page.
"""

import logging
from fastapi import APIRouter, Depends, Form
from fastapi.responses import RedirectResponse
from pydantic import ValidationError

from cargodesk.exceptions import CargoDeskAPIError, CargoDeskAuthError
from cargodesk.models.forms import FormErrors, JobStatusForm
from cargodesk.notifications import NotifyFailure, NotifySuccess
from cargodesk.permissions import ACTION_UPDATE
from cargodesk.routes.admin.auth import EnsureAllowed, GetResourceClient, RequireSession

# Create logger
logger = logging.getLogger(__name__)

# Create router instance
router = APIRouter()


@router.post("/admin/jobs/{job_id}/status", tags=["Admin"])
def admin_job_status_submit(
    job_id: str,
    status: str = Form(""),
    session: dict = Depends(RequireSession)
):
    """
    Change a job's workflow status

    Args:
        job_id: Job id
        status: New status ("open", "invoiced" or "closed")
        session: Admin session from dependency

    Returns:
        Redirect back to the job detail page
    """
    EnsureAllowed(session, "jobs", ACTION_UPDATE)
    client = GetResourceClient(session, "jobs")
    definition = client.definition
    detail_url = f"/admin/jobs/{job_id}"

    try:
        form = JobStatusForm(status=status)
    except ValidationError as e:
        NotifyFailure(session["session"], definition.FailureMessage("status"), FormErrors(e).get("status"))
        return RedirectResponse(url=detail_url, status_code=303)

    try:
        client.update_status(job_id, form.status)
    except CargoDeskAuthError:
        raise
    except CargoDeskAPIError as e:
        NotifyFailure(session["session"], definition.FailureMessage("status"), str(e))
        return RedirectResponse(url=detail_url, status_code=303)

    logger.info(f"User '{session['username']}' set job {job_id} status to {form.status}")
    NotifySuccess(session["session"], definition.SuccessMessage("status"))
    return RedirectResponse(url=detail_url, status_code=303)
