"""
Claims Router - marketing claims at brand, product or ingredient level
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from mixerai.exceptions import ConflictError, ForeignKeyError
from mixerai.permissions import PermissionResolver
from mixerai.users import AuthUser
from api.auth import get_current_user
from api.dependencies import get_permissions, get_repository
from api.repositories.base import BaseRepository
from api.schemas.brands import MessageResponse
from api.schemas.claims import (
    ClaimCreateRequest,
    ClaimListResponse,
    ClaimResponse,
    ClaimUpdateRequest,
)
from api.services import claim_service

router = APIRouter()
logger = logging.getLogger(__name__)

CLAIM_NOT_FOUND = "Claim not found."
DUPLICATE_CLAIM = (
    "This update would result in a duplicate claim "
    "(text, type, level, entity, country combination)."
)


@router.get("/claims", response_model=ClaimListResponse)
def list_claims(
    level: Optional[str] = Query(None),
    product_id: Optional[str] = Query(None),
    master_brand_id: Optional[str] = Query(None),
    country_code: Optional[str] = Query(None),
    user: AuthUser = Depends(get_current_user),
    repo: BaseRepository = Depends(get_repository),
    permissions: PermissionResolver = Depends(get_permissions),
) -> ClaimListResponse:
    try:
        claims = claim_service.list_visible_claims(repo, permissions, user, {
            "level": level,
            "product_id": product_id,
            "master_brand_id": master_brand_id,
            "country_code": country_code,
        })
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return ClaimListResponse(data=claims)


@router.post("/claims", response_model=ClaimResponse, status_code=201)
def create_claim(
    request: ClaimCreateRequest,
    user: AuthUser = Depends(get_current_user),
    repo: BaseRepository = Depends(get_repository),
    permissions: PermissionResolver = Depends(get_permissions),
) -> ClaimResponse:
    """
    Create a claim. Brand and product claims need admin rights on the
    owning core brand; ingredient claims need a global admin.
    """
    try:
        claim = claim_service.validate_new_claim(request.model_dump(), user.id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if not permissions.can_create_claim(user, claim):
        raise HTTPException(status_code=403, detail="You do not have permission to create this claim.")

    try:
        created = repo.create_claim(claim)
    except ConflictError:
        raise HTTPException(
            status_code=409,
            detail="This claim already exists (text, type, level, entity, country combination)."
        )
    except ForeignKeyError:
        raise HTTPException(status_code=400, detail="The referenced brand or product does not exist.")

    logger.info(f"User {user.id} created {claim['level']}-level claim {created['id']}")
    return ClaimResponse(data=created)


@router.get("/claims/{claim_id}", response_model=ClaimResponse)
def get_claim(
    claim_id: str,
    user: AuthUser = Depends(get_current_user),
    repo: BaseRepository = Depends(get_repository),
    permissions: PermissionResolver = Depends(get_permissions),
) -> ClaimResponse:
    claim = repo.get_claim(claim_id)
    if claim is None:
        raise HTTPException(status_code=404, detail=CLAIM_NOT_FOUND)
    if not permissions.can_read_claim(user, claim):
        raise HTTPException(status_code=403, detail="You do not have permission to view this claim.")
    return ClaimResponse(data=claim)


@router.put("/claims/{claim_id}", response_model=ClaimResponse)
def update_claim(
    claim_id: str,
    request: ClaimUpdateRequest,
    user: AuthUser = Depends(get_current_user),
    repo: BaseRepository = Depends(get_repository),
    permissions: PermissionResolver = Depends(get_permissions),
) -> ClaimResponse:
    """Update text, type, description or country of a claim."""
    try:
        changes = claim_service.validate_claim_update(request.model_dump(exclude_unset=True))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    claim = repo.get_claim(claim_id)
    if claim is None:
        raise HTTPException(status_code=404, detail=CLAIM_NOT_FOUND)
    if not permissions.can_modify_claim(user, claim):
        raise HTTPException(status_code=403, detail="You do not have permission to update this claim.")

    changes["updated_at"] = datetime.now(timezone.utc).isoformat()
    try:
        updated = repo.update_claim(claim_id, changes)
    except ConflictError:
        raise HTTPException(status_code=409, detail=DUPLICATE_CLAIM)
    if updated is None:
        raise HTTPException(status_code=404, detail="Claim not found or update failed.")

    logger.info(f"User {user.id} updated claim {claim_id}: {sorted(changes)}")
    return ClaimResponse(data=updated)


@router.delete("/claims/{claim_id}", response_model=MessageResponse)
def delete_claim(
    claim_id: str,
    user: AuthUser = Depends(get_current_user),
    repo: BaseRepository = Depends(get_repository),
    permissions: PermissionResolver = Depends(get_permissions),
) -> MessageResponse:
    claim = repo.get_claim(claim_id)
    if claim is None:
        raise HTTPException(status_code=404, detail=CLAIM_NOT_FOUND)
    if not permissions.can_modify_claim(user, claim):
        raise HTTPException(status_code=403, detail="You do not have permission to delete this claim.")

    if repo.delete_claim(claim_id) == 0:
        raise HTTPException(status_code=404, detail="Claim not found or already deleted.")

    logger.info(f"User {user.id} deleted claim {claim_id}")
    return MessageResponse(message="Claim deleted successfully.")
