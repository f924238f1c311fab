"""Application ingestion and admin review.

``POST /applications`` is public: it accepts a JSON object, or a multipart
body with the answers JSON-encoded in a ``data`` part plus one part per
file question.  Answers are re-validated against the active schema before
anything is stored.

Listing, status changes and upload downloads require an admin token.
"""

import json
import logging
from datetime import datetime
from typing import Any

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, Request
from fastapi.responses import FileResponse, JSONResponse
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.datastructures import UploadFile

from applyform.models.question import Question, SchemaError
from applyform.schema import SchemaStore
from applyform.validator import validate_answers
from applyform_db.models.application import Application
from applyform_db.models.enums import ApplicationStatus
from applyform_db.repository import ApplicationRepository, FormConfigRepository

from applyform_server.config import ServerSettings
from applyform_server.dependencies import (
    get_application_repo,
    get_db,
    get_form_config_repo,
    get_notifier,
    get_settings,
    get_store,
    require_admin,
)
from applyform_server.notifications import Notifier
from applyform_server.uploads import resolve_upload, save_upload

logger = logging.getLogger(__name__)

router = APIRouter(tags=["applications"])


# ------------------------------------------------------------------
# Models
# ------------------------------------------------------------------

class SubmitResponse(BaseModel):
    success: bool
    message: str
    id: int


class ApplicationSummary(BaseModel):
    """One row of the admin table, with common fields lifted out of ``data``."""

    id: int
    data: dict[str, Any]
    status: str
    created_at: datetime | None = None
    full_name: str = ""
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    position: str = ""


class UpdateStatusRequest(BaseModel):
    id: int | None = None
    status: str | None = None


class UpdateStatusResponse(BaseModel):
    success: bool


# ------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------

def _field(data: dict[str, Any], *keys: str) -> str:
    """First non-empty value among ``keys`` (snake_case id, then legacy label)."""
    for key in keys:
        value = data.get(key)
        if value:
            return str(value)
    return ""


def summarize(row: Application) -> ApplicationSummary:
    data = row.data if isinstance(row.data, dict) else {}
    first = _field(data, "first_name", "First Name")
    last = _field(data, "last_name", "Last Name")
    full = _field(data, "full_name", "Full Name") or " ".join(p for p in (first, last) if p)
    if full and not first:
        first, _, rest = full.partition(" ")
        last = last or rest
    return ApplicationSummary(
        id=row.id,
        data=data,
        status=row.status,
        created_at=row.created_at,
        full_name=full,
        first_name=first,
        last_name=last,
        email=_field(data, "email", "Email"),
        position=_field(data, "position", "Position"),
    )


async def _active_questions(
    db: AsyncSession, repo: FormConfigRepository, store: SchemaStore,
) -> list[Question]:
    """Questions of the stored schema, or the defaults if none or unusable."""
    row = await repo.get_latest(db)
    raw = row.config if row is not None else None
    try:
        return store.resolve(raw)
    except SchemaError as exc:
        logger.warning("Stored form config is invalid, validating against defaults: %s", exc)
        return list(store.defaults)


async def _read_submission(request: Request) -> tuple[dict[str, Any], dict[str, UploadFile]]:
    """Split the request into scalar answers and uploaded files."""
    content_type = request.headers.get("content-type", "")
    if "multipart/form-data" in content_type:
        form = await request.form()
        raw = form.get("data")
        if not isinstance(raw, str):
            raise HTTPException(
                status_code=400,
                detail="Missing JSON data payload in multipart request",
            )
        try:
            body = json.loads(raw)
        except ValueError:
            body = None
        if not isinstance(body, dict):
            raise HTTPException(
                status_code=400,
                detail="Invalid JSON data inside multipart request",
            )
        files = {
            key: value
            for key, value in form.multi_items()
            if isinstance(value, UploadFile)
        }
        return body, files

    try:
        body = await request.json()
    except ValueError:
        body = None
    if not isinstance(body, dict):
        raise HTTPException(status_code=400, detail="Invalid application data")
    return body, {}


# ------------------------------------------------------------------
# Endpoints
# ------------------------------------------------------------------

@router.post("/applications", status_code=201)
async def submit_application(
    request: Request,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    repo: ApplicationRepository = Depends(get_application_repo),
    configs: FormConfigRepository = Depends(get_form_config_repo),
    store: SchemaStore = Depends(get_store),
    settings: ServerSettings = Depends(get_settings),
    notifier: Notifier = Depends(get_notifier),
) -> SubmitResponse:
    """Validate, store and announce a new application."""
    body, files = await _read_submission(request)
    if not body and not files:
        raise HTTPException(status_code=400, detail="Invalid application data")

    # Files count as answered for validation; their stored paths are
    # filled in only once the answers pass.
    questions = await _active_questions(db, configs, store)
    candidate = {**body, **{key: f.filename or key for key, f in files.items()}}
    errors = validate_answers(questions, candidate)
    if errors:
        logger.info("Rejected application: %d invalid fields", len(errors))
        return JSONResponse(
            status_code=400,
            content={"success": False, "detail": "Validation failed", "errors": errors},
        )

    for key, upload in files.items():
        content = await upload.read()
        body[key] = save_upload(settings.upload_dir, upload.filename, content)

    row = await repo.create(db, data=body)
    # Commit before announcing; get_db's own commit is then a no-op.
    await db.commit()
    logger.info("Application %d stored (%d uploads)", row.id, len(files))

    background_tasks.add_task(notifier.application_received, row.id, body)

    return SubmitResponse(
        success=True, message="Application submitted successfully", id=row.id,
    )


@router.get("/applications")
async def list_applications(
    status: str = Query("all"),
    db: AsyncSession = Depends(get_db),
    repo: ApplicationRepository = Depends(get_application_repo),
    _token: str = Depends(require_admin),
) -> list[ApplicationSummary]:
    """List applications newest first; ``all`` or an unknown status lists everything."""
    try:
        wanted: ApplicationStatus | None = ApplicationStatus(status)
    except ValueError:
        wanted = None
    rows = await repo.list_applications(db, status=wanted)
    return [summarize(row) for row in rows]


@router.patch("/applications")
async def update_application_status(
    body: UpdateStatusRequest,
    db: AsyncSession = Depends(get_db),
    repo: ApplicationRepository = Depends(get_application_repo),
    _token: str = Depends(require_admin),
) -> UpdateStatusResponse:
    if not body.id or body.status not in ApplicationStatus.values():
        raise HTTPException(status_code=400, detail="Invalid id or status")

    row = await repo.update_status(db, body.id, ApplicationStatus(body.status))
    if row is None:
        raise HTTPException(status_code=404, detail="Application not found")
    logger.info("Application %d status set to %s", body.id, body.status)
    return UpdateStatusResponse(success=True)


@router.get("/uploads/{name}")
async def download_upload(
    name: str,
    settings: ServerSettings = Depends(get_settings),
    _token: str = Depends(require_admin),
) -> FileResponse:
    """Serve a stored upload.  Unknown names surface as 404 via the ValueError handler."""
    return FileResponse(resolve_upload(settings.upload_dir, name))
