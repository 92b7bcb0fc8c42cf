"""
CargoDesk - Admin Record Pages

Generic list, create, detail, edit and delete pages for every module declared
in ENTITY_PAGES. Table clicks are links back to the list page carrying the
new page or sort; mutations queue a notification and redirect.
"""

import logging
from typing import Iterable, List, Optional, Tuple
from urllib.parse import urlencode
from fastapi import APIRouter, Depends, Form, HTTPException, Query, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import ValidationError

from cargodesk.config import GetSettings
from cargodesk.data_table import DataTable, PaginationState
from cargodesk.dropdown import OptionsFromRecords, SearchableDropdown
from cargodesk.exceptions import (
    CargoDeskAPIError, CargoDeskAuthError, CargoDeskNotFoundError,
    CargoDeskRequestError, CargoDeskServerError
)
from cargodesk.models.api import SORT_ASC
from cargodesk.models.forms import FormErrors
from cargodesk.notifications import NotifyFailure, NotifySuccess
from cargodesk.permissions import ACTION_CREATE, ACTION_DELETE, ACTION_READ, ACTION_UPDATE, HasPermission
from cargodesk.routes.admin.auth import EnsureAllowed, GetResourceClient, RenderPage, RequireSession
from cargodesk.routes.admin.entity_pages import ENTITY_PAGES, EntityPage, FormField

# Create logger
logger = logging.getLogger(__name__)

# Create router instance
router = APIRouter()

OPTIONS_LOAD_ERROR = "Failed to load options"


# ==================== Helper Functions ====================

def GetEntityPage(module: str) -> EntityPage:
    page = ENTITY_PAGES.get(module)
    if page is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown module '{module}'")
    return page


def ListUrl(module: str, **params) -> str:
    query = {key: value for key, value in params.items() if value not in (None, "")}
    return f"/admin/{module}?{urlencode(query)}" if query else f"/admin/{module}"


def FailureStatus(error: CargoDeskAPIError) -> int:
    code = getattr(error, "status_code", None)
    return code if code and 400 <= code < 500 else status.HTTP_502_BAD_GATEWAY


async def ReadFormData(request: Request) -> dict:
    """Dependency returning the submitted form as a nested dict"""
    form = await request.form()
    return NestFormData(form.multi_items())


def NestFormData(pairs: Iterable[Tuple[str, object]]) -> dict:
    """
    Fold "items.0.quantity" style keys into lists of row dicts

    Rows whose inputs are all blank are dropped, so an untouched spare row
    does not fail validation.
    """
    data = {}
    rows = {}
    for key, value in pairs:
        if not isinstance(value, str):
            continue
        parts = key.split(".")
        if len(parts) == 3 and parts[1].isdigit():
            rows.setdefault(parts[0], {}).setdefault(int(parts[1]), {})[parts[2]] = value
        else:
            data[key] = value

    for name, indexed in rows.items():
        data[name] = [
            indexed[index] for index in sorted(indexed)
            if any(value.strip() for value in indexed[index].values())
        ]
    return data


def _ValueText(field: FormField, value) -> object:
    if field.kind == "checkbox":
        return bool(value)
    if value is None:
        return ""
    if field.kind == "date":
        return str(value)[:10]
    return str(value)


def RecordValues(page: EntityPage, record: dict) -> dict:
    """Form values prefilled from a fetched record"""
    values = {}
    for field in page.fields:
        if field.kind == "items":
            values[field.name] = [
                {sub.name: _ValueText(sub, item.get(sub.name)) for sub in field.fields}
                for item in record.get(field.name) or []
                if isinstance(item, dict)
            ]
        else:
            values[field.name] = _ValueText(field, record.get(field.name))
    return values


def LoadRecord(context: dict, module: str, record_id: str) -> Tuple[Optional[dict], Optional[str]]:
    """
    Fetch one record for a page

    Returns:
        (record, None) on success, (None, message) when the backend failed.
        A missing record raises CargoDeskNotFoundError for the 404 handler.
    """
    client = GetResourceClient(context, module)
    try:
        return client.get(record_id), None
    except CargoDeskNotFoundError:
        raise
    except (CargoDeskRequestError, CargoDeskServerError) as e:
        logger.error(f"Failed to load {module} {record_id}: {e}")
        return None, str(e)


class FormBuilder:
    """Builds template views of form fields, fetching lookup options once per module"""

    def __init__(self, context: dict):
        self.context = context
        self.settings = GetSettings()
        self._options = {}

    def Options(self, module: str):
        """(options, error); options is None when the role cannot read the module"""
        if module not in self._options:
            if not HasPermission(self.context["role"], module, ACTION_READ):
                self._options[module] = (None, None)
            else:
                try:
                    self._options[module] = (GetResourceClient(self.context, module).options(""), None)
                except (CargoDeskRequestError, CargoDeskServerError) as e:
                    logger.error(f"Failed to load {module} options: {e}")
                    self._options[module] = ([], OPTIONS_LOAD_ERROR)
        return self._options[module]

    def Dropdown(self, field: FormField, name: str, value: str, error: Optional[str]) -> dict:
        options, load_error = self.Options(field.lookup)
        dropdown = SearchableDropdown(
            name=name,
            options=options or [],
            value=value or None,
            placeholder=f"Select {field.label.lower()}...",
            search_placeholder=f"Search {field.label.lower()}...",
            disabled=options is None,
            error=error or load_error,
            debounce_ms=self.settings.dropdown_debounce_ms,
            lookup_url=f"/admin/lookup/{field.lookup}"
        )

        # Keep the current selection visible even when it is outside the first page of options
        if value and options is not None and dropdown.SelectedOption() is None:
            client = GetResourceClient(self.context, field.lookup)
            try:
                record = client.get(value)
            except (CargoDeskRequestError, CargoDeskServerError):
                record = {client.definition.id_field: value, client.definition.name_field: value}
            extra = OptionsFromRecords([record], client.definition.id_field, client.definition.name_field)
            dropdown.SetOptions(dropdown.options + extra)

        view = dropdown.Render()
        dropdown.Unmount()
        return view

    def Field(self, field: FormField, name: str, value, error: Optional[str]) -> dict:
        view = {
            "name": name,
            "label": field.label,
            "kind": field.kind,
            "required": field.required,
            "placeholder": field.placeholder,
            "choices": field.choices,
            "value": value,
            "error": error,
            "dropdown": None,
        }
        if field.kind == "lookup":
            view["dropdown"] = self.Dropdown(field, name, value or "", error)
        return view

    def Build(self, fields: Iterable[FormField], values: dict, errors: dict) -> List[dict]:
        views = []
        for field in fields:
            if field.kind != "items":
                views.append(self.Field(field, field.name, values.get(field.name, ""), errors.get(field.name)))
                continue

            rows = list(values.get(field.name) or [])
            rows.append({})  # spare row for a new item
            row_views = []
            for index, row in enumerate(rows):
                row_views.append([
                    self.Field(
                        sub,
                        f"{field.name}.{index}.{sub.name}",
                        row.get(sub.name, ""),
                        errors.get(f"{field.name}.{index}.{sub.name}")
                    )
                    for sub in field.fields
                ])
            views.append({
                "name": field.name,
                "label": field.label,
                "kind": "items",
                "headers": [sub.label for sub in field.fields],
                "rows": row_views,
                "error": errors.get(field.name),
            })
        return views


def RenderForm(request: Request, session: dict, page: EntityPage, values: dict, errors: dict,
               record_id: Optional[str] = None, status_code: int = 200, load_error: Optional[str] = None):
    is_edit = record_id is not None
    definition = page.definition
    fields = [] if load_error else FormBuilder(session).Build(page.FieldsFor(is_edit), values, errors)
    return RenderPage(
        request,
        "form.html",
        session,
        active_page=page.module,
        status_code=status_code,
        module=page.module,
        definition=definition,
        title=f"Edit {definition.label}" if is_edit else f"Create {definition.label}",
        action=f"/admin/{page.module}/{record_id}/edit" if is_edit else f"/admin/{page.module}/create",
        submit_label=f"Update {definition.label}" if is_edit else f"Create {definition.label}",
        cancel_url=f"/admin/{page.module}",
        fields=fields,
        errors=errors,
        load_error=load_error,
        retry_url=str(request.url)
    )


def RenderDetail(request: Request, session: dict, page: EntityPage, record_id: str):
    """Detail page for one record, with line items and a status form where declared"""
    definition = page.definition
    record, load_error = LoadRecord(session, page.module, record_id)
    items_table = None
    if record is not None and page.item_columns is not None:
        items_table = DataTable(record.get("items") or [], page.item_columns(), empty_message="No items")

    status_form = None
    if record is not None and page.status_choices:
        status_form = {
            "action": f"/admin/{page.module}/{record_id}/status",
            "choices": page.status_choices,
            "current": record.get("status"),
        }

    return RenderPage(
        request,
        "detail.html",
        session,
        active_page=page.module,
        module=page.module,
        definition=definition,
        record_id=record_id,
        title=f"{definition.label} Details",
        record_name=GetResourceClient(session, page.module).record_name(record) if record else record_id,
        rows=page.DetailRows(record) if record else [],
        items_table=items_table,
        status_form=status_form,
        load_error=load_error,
        retry_url=str(request.url)
    )


# ==================== List Page ====================

@router.get("/admin/{module}", response_class=HTMLResponse, tags=["Admin"])
def admin_records_page(
    request: Request,
    module: str,
    page: int = Query(1, ge=1),
    sort_by: Optional[str] = None,
    sort_dir: str = SORT_ASC,
    search: str = "",
    session: dict = Depends(RequireSession)
):
    """
    Display a paginated, sortable list of records

    Args:
        request: FastAPI request object
        module: Module slug (e.g., "carriers")
        page: Page number
        sort_by: Sort column
        sort_dir: "ASC" or "DESC"
        search: Free-text search
        session: Admin session from dependency

    Returns:
        HTML list page
    """
    entity = GetEntityPage(module)
    EnsureAllowed(session, module, ACTION_READ)
    definition = entity.definition
    columns = entity.columns(session["gate"])

    sortable = {column.key for column in columns if column.sortable}
    if sort_by not in sortable:
        sort_by = entity.default_sort if definition.has_search else None

    pagination = PaginationState(
        page=page,
        page_size=GetSettings().default_page_size,
        sort_by=sort_by,
        sort_dir=sort_dir
    )

    client = GetResourceClient(session, module)
    error = None
    try:
        result = client.find(
            search,
            page=pagination.page,
            page_size=pagination.page_size,
            sort_by=pagination.sort_by,
            sort_dir=pagination.sort_dir
        )
    except (CargoDeskRequestError, CargoDeskServerError) as e:
        logger.error(f"Failed to load {module}: {e}")
        result, error = [], str(e)

    def SortUrl(key: str, direction: str) -> str:
        return ListUrl(module, search=search, sort_by=key, sort_dir=direction, page=1)

    def PageUrl(number: int) -> str:
        return ListUrl(module, search=search, sort_by=pagination.sort_by,
                       sort_dir=pagination.sort_dir if pagination.sort_by else None, page=number)

    # Past the last page (stale link or rows deleted elsewhere): go to the last one
    if error is None and 1 <= result.total_pages < pagination.page:
        return RedirectResponse(url=PageUrl(result.total_pages), status_code=303)

    table = DataTable(
        result,
        columns,
        pagination=pagination,
        error=error,
        on_sort=SortUrl if definition.has_search else None,
        on_page_change=PageUrl,
        search_term=search,
        placeholder=f"Search {definition.label_plural.lower()}...",
        empty_message=f"No {definition.label_plural.lower()} found",
        retry_url=str(request.url)
    )

    return RenderPage(
        request,
        "list.html",
        session,
        active_page=module,
        module=module,
        definition=definition,
        table=table,
        search=search
    )


# ==================== Create ====================

@router.get("/admin/{module}/create", response_class=HTMLResponse, tags=["Admin"])
def admin_create_page(request: Request, module: str, session: dict = Depends(RequireSession)):
    entity = GetEntityPage(module)
    EnsureAllowed(session, module, ACTION_CREATE)
    return RenderForm(request, session, entity, entity.defaults(), {})


@router.post("/admin/{module}/create", response_class=HTMLResponse, tags=["Admin"])
def admin_create_submit(
    request: Request,
    module: str,
    data: dict = Depends(ReadFormData),
    session: dict = Depends(RequireSession)
):
    """
    Validate and create a record

    Returns:
        Redirect to the list on success, the form with inline errors or a
        failure notification otherwise
    """
    entity = GetEntityPage(module)
    EnsureAllowed(session, module, ACTION_CREATE)
    definition = entity.definition

    try:
        form = entity.create_form.model_validate(data)
    except ValidationError as e:
        return RenderForm(request, session, entity, data, FormErrors(e), status_code=400)

    client = GetResourceClient(session, module)
    try:
        client.create(form.ToPayload())
    except CargoDeskAuthError:
        raise
    except CargoDeskAPIError as e:
        NotifyFailure(session["session"], definition.FailureMessage("create"), str(e))
        return RenderForm(request, session, entity, data, {}, status_code=FailureStatus(e))

    logger.info(f"User '{session['username']}' created {definition.label.lower()}")
    NotifySuccess(session["session"], definition.SuccessMessage("create"))
    return RedirectResponse(url=f"/admin/{module}", status_code=303)


# ==================== Edit ====================

@router.get("/admin/{module}/{record_id}/edit", response_class=HTMLResponse, tags=["Admin"])
def admin_edit_page(request: Request, module: str, record_id: str, session: dict = Depends(RequireSession)):
    entity = GetEntityPage(module)
    EnsureAllowed(session, module, ACTION_UPDATE)
    record, load_error = LoadRecord(session, module, record_id)
    values = RecordValues(entity, record) if record else {}
    return RenderForm(request, session, entity, values, {}, record_id=record_id, load_error=load_error)


@router.post("/admin/{module}/{record_id}/edit", response_class=HTMLResponse, tags=["Admin"])
def admin_edit_submit(
    request: Request,
    module: str,
    record_id: str,
    data: dict = Depends(ReadFormData),
    session: dict = Depends(RequireSession)
):
    entity = GetEntityPage(module)
    EnsureAllowed(session, module, ACTION_UPDATE)
    definition = entity.definition

    try:
        form = entity.update_form.model_validate(data)
    except ValidationError as e:
        return RenderForm(request, session, entity, data, FormErrors(e), record_id=record_id, status_code=400)

    client = GetResourceClient(session, module)
    try:
        client.update(record_id, form.ToPayload())
    except CargoDeskAuthError:
        raise
    except CargoDeskAPIError as e:
        NotifyFailure(session["session"], definition.FailureMessage("update"), str(e))
        return RenderForm(request, session, entity, data, {}, record_id=record_id, status_code=FailureStatus(e))

    logger.info(f"User '{session['username']}' updated {definition.label.lower()} {record_id}")
    NotifySuccess(session["session"], definition.SuccessMessage("update"))
    return RedirectResponse(url=f"/admin/{module}", status_code=303)


# ==================== Delete ====================

@router.get("/admin/{module}/{record_id}/delete", response_class=HTMLResponse, tags=["Admin"])
def admin_delete_confirm(request: Request, module: str, record_id: str, session: dict = Depends(RequireSession)):
    """
    Ask for confirmation before deleting a record

    Nothing is sent to the backend until the confirmation form is posted;
    cancelling returns to the untouched list.
    """
    entity = GetEntityPage(module)
    EnsureAllowed(session, module, ACTION_DELETE)
    definition = entity.definition
    record, load_error = LoadRecord(session, module, record_id)
    client = GetResourceClient(session, module)

    return RenderPage(
        request,
        "confirm_delete.html",
        session,
        active_page=module,
        module=module,
        definition=definition,
        record_id=record_id,
        record_name=client.record_name(record) if record else record_id,
        load_error=load_error,
        cancel_url=f"/admin/{module}"
    )


@router.post("/admin/{module}/{record_id}/delete", tags=["Admin"])
def admin_delete_submit(
    module: str,
    record_id: str,
    name: str = Form(""),
    session: dict = Depends(RequireSession)
):
    """
    Delete a record after confirmation

    Returns:
        Redirect to the list; the outcome is shown as a notification
    """
    entity = GetEntityPage(module)
    EnsureAllowed(session, module, ACTION_DELETE)
    definition = entity.definition
    name = name or record_id

    client = GetResourceClient(session, module)
    try:
        client.delete(record_id)
    except CargoDeskAuthError:
        raise
    except CargoDeskAPIError as e:
        NotifyFailure(session["session"], definition.FailureMessage("delete", name), str(e))
        return RedirectResponse(url=f"/admin/{module}", status_code=303)

    logger.info(f"User '{session['username']}' deleted {definition.label.lower()} {record_id}")
    NotifySuccess(session["session"], definition.SuccessMessage("delete", name))
    return RedirectResponse(url=f"/admin/{module}", status_code=303)


# ==================== Detail ====================

@router.get("/admin/{module}/{record_id}", response_class=HTMLResponse, tags=["Admin"])
def admin_record_detail(request: Request, module: str, record_id: str, session: dict = Depends(RequireSession)):
    entity = GetEntityPage(module)
    EnsureAllowed(session, module, ACTION_READ)
    return RenderDetail(request, session, entity, record_id)
