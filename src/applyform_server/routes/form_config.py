"""The live question schema.

``GET`` is public (the form fetches it on load); ``POST`` replaces it and
requires an admin token.  Rejected schemas are never stored.
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from applyform.models.question import SchemaError, parse_schema
from applyform_db.repository import FormConfigRepository

from applyform_server.dependencies import get_db, get_form_config_repo, require_admin

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/form-config", tags=["form-config"])


class SaveConfigRequest(BaseModel):
    config: Any = None


class SaveConfigResponse(BaseModel):
    success: bool
    message: str


@router.get("")
async def get_form_config(
    db: AsyncSession = Depends(get_db),
    repo: FormConfigRepository = Depends(get_form_config_repo),
) -> list[dict[str, Any]]:
    """Return the stored schema, or ``[]`` when none has been saved."""
    row = await repo.get_latest(db)
    if row is None or not isinstance(row.config, list):
        return []
    return row.config


@router.post("")
async def save_form_config(
    body: SaveConfigRequest,
    db: AsyncSession = Depends(get_db),
    repo: FormConfigRepository = Depends(get_form_config_repo),
    _token: str = Depends(require_admin),
) -> SaveConfigResponse:
    """Validate and replace the live schema."""
    try:
        questions = parse_schema(body.config)
    except SchemaError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    await repo.save(db, body.config)
    logger.info("Form config saved: %d questions", len(questions))
    return SaveConfigResponse(success=True, message="Form configuration saved")
