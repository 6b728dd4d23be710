"""
Content Templates Router - template definitions with input/output fields
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException

from mixerai.exceptions import NotFoundError
from mixerai.template_fields import template_for_response
from mixerai.users import AuthUser, EDITOR_ROLE, GLOBAL_ADMIN_ROLE
from api.auth import require_roles
from api.dependencies import get_optional_ai_client, get_repository
from api.repositories.base import BaseRepository
from api.schemas.brands import MessageResponse
from api.schemas.templates import TemplateListResponse, TemplateResponse, TemplateWriteRequest
from api.services import template_service

router = APIRouter()
logger = logging.getLogger(__name__)

TEMPLATE_NOT_FOUND = "Content template not found"


@router.get("/content-templates", response_model=TemplateListResponse)
def list_templates(
    user: AuthUser = Depends(require_roles(GLOBAL_ADMIN_ROLE, EDITOR_ROLE)),
    repo: BaseRepository = Depends(get_repository),
) -> TemplateListResponse:
    return TemplateListResponse(templates=[template_for_response(t) for t in repo.list_templates()])


@router.post("/content-templates", response_model=TemplateResponse, status_code=201)
def create_template(
    request: TemplateWriteRequest,
    user: AuthUser = Depends(require_roles(GLOBAL_ADMIN_ROLE)),
    repo: BaseRepository = Depends(get_repository),
    ai_client=Depends(get_optional_ai_client),
) -> TemplateResponse:
    try:
        payload = template_service.build_template_payload(request, ai_client, user_id=user.id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    template = repo.create_template(payload)
    logger.info(f"User {user.id} created content template {template['id']} ({template['name']})")
    return TemplateResponse(template=template_for_response(template))


@router.get("/content-templates/{template_id}", response_model=TemplateResponse)
def get_template(
    template_id: str,
    user: AuthUser = Depends(require_roles(GLOBAL_ADMIN_ROLE, EDITOR_ROLE)),
    repo: BaseRepository = Depends(get_repository),
) -> TemplateResponse:
    template = repo.get_template(template_id)
    if template is None:
        raise HTTPException(status_code=404, detail=TEMPLATE_NOT_FOUND)
    return TemplateResponse(template=template_for_response(template))


@router.put("/content-templates/{template_id}", response_model=TemplateResponse)
def update_template(
    template_id: str,
    request: TemplateWriteRequest,
    user: AuthUser = Depends(require_roles(GLOBAL_ADMIN_ROLE)),
    repo: BaseRepository = Depends(get_repository),
    ai_client=Depends(get_optional_ai_client),
) -> TemplateResponse:
    """Replace name, fields and icon; the description is regenerated."""
    try:
        payload = template_service.build_template_payload(request, ai_client)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if repo.get_template(template_id) is None:
        raise HTTPException(status_code=404, detail=TEMPLATE_NOT_FOUND)

    payload["updated_at"] = datetime.now(timezone.utc).isoformat()
    updated = repo.update_template(template_id, payload)
    if updated is None:
        raise HTTPException(status_code=404, detail="Template not found after update.")
    return TemplateResponse(template=template_for_response(updated))


@router.delete("/content-templates/{template_id}", response_model=MessageResponse)
def delete_template(
    template_id: str,
    user: AuthUser = Depends(require_roles(GLOBAL_ADMIN_ROLE)),
    repo: BaseRepository = Depends(get_repository),
) -> MessageResponse:
    """Delete a template and detach it from its content items in one RPC."""
    try:
        repo.delete_template_and_update_content(template_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail=TEMPLATE_NOT_FOUND)

    logger.info(f"User {user.id} deleted content template {template_id}")
    return MessageResponse(
        message="Content template deleted successfully and associated content items have been updated."
    )
