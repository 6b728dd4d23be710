"""
Master Claim Brands Router - the claims-side aliases of core brands
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from mixerai.exceptions import ConflictError, ForeignKeyError
from mixerai.permissions import PermissionResolver
from mixerai.users import AuthUser, GLOBAL_ADMIN_ROLE
from api.auth import get_current_user, require_roles
from api.dependencies import get_permissions, get_repository
from api.repositories.base import BaseRepository
from api.schemas.master_claim_brands import (
    MasterClaimBrandCreateRequest,
    MasterClaimBrandListResponse,
    MasterClaimBrandResponse,
)

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/master-claim-brands", response_model=MasterClaimBrandListResponse)
def list_master_claim_brands(
    user: AuthUser = Depends(get_current_user),
    repo: BaseRepository = Depends(get_repository),
    permissions: PermissionResolver = Depends(get_permissions),
) -> MasterClaimBrandListResponse:
    """Global admins see every master claim brand; others only those linked to their brands."""
    rows = repo.list_master_claim_brands(permissions.accessible_brand_ids(user))
    return MasterClaimBrandListResponse(data=rows)


@router.post("/master-claim-brands", response_model=MasterClaimBrandResponse, status_code=201)
def create_master_claim_brand(
    request: MasterClaimBrandCreateRequest,
    user: AuthUser = Depends(require_roles(GLOBAL_ADMIN_ROLE)),
    repo: BaseRepository = Depends(get_repository),
) -> MasterClaimBrandResponse:
    if not isinstance(request.name, str) or not request.name.strip():
        raise HTTPException(status_code=400, detail="Master claim brand name is required and must be a non-empty string.")

    try:
        row = repo.create_master_claim_brand({
            "name": request.name.strip(),
            "mixerai_brand_id": request.mixerai_brand_id or None,
        })
    except ConflictError:
        raise HTTPException(status_code=409, detail="A master claim brand with this name already exists.")
    except ForeignKeyError:
        raise HTTPException(status_code=400, detail="Invalid MixerAI brand ID. The specified brand does not exist.")

    logger.info(f"User {user.id} created master claim brand {row['id']}")
    return MasterClaimBrandResponse(data=row)
