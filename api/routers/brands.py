"""
Brands Router - brand listing, detail, creation, update and deletion
"""

import logging
import uuid
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from mixerai.exceptions import NotFoundError
from mixerai.permissions import PermissionResolver
from mixerai.users import AuthUser, GLOBAL_ADMIN_ROLE
from api.auth import get_current_user, require_roles
from api.dependencies import get_permissions, get_repository
from api.repositories.base import BaseRepository
from api.schemas.brands import (
    BrandDetailResponse,
    BrandListResponse,
    BrandResponse,
    BrandWriteRequest,
    MessageResponse,
)
from api.services import brand_service

router = APIRouter()
logger = logging.getLogger(__name__)

NO_STORE = "no-store"


@router.get("/brands", response_model=BrandListResponse)
def list_brands(
    response: Response,
    user: AuthUser = Depends(get_current_user),
    repo: BaseRepository = Depends(get_repository),
    permissions: PermissionResolver = Depends(get_permissions),
) -> BrandListResponse:
    """Brands the user can access, ordered by name (all of them for global admins)."""
    brands = brand_service.list_brands(repo, permissions.accessible_brand_ids(user))
    response.headers["Cache-Control"] = NO_STORE
    return BrandListResponse(data=brands)


@router.post("/brands", response_model=BrandResponse, status_code=201)
def create_brand(
    request: BrandWriteRequest,
    user: AuthUser = Depends(require_roles(GLOBAL_ADMIN_ROLE)),
    repo: BaseRepository = Depends(get_repository),
) -> BrandResponse:
    try:
        brand = brand_service.create_brand(repo, user, request.model_dump(exclude_unset=True))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return BrandResponse(brand=brand)


@router.get("/brands/{brand_id}", response_model=BrandDetailResponse)
def get_brand(
    brand_id: str,
    response: Response,
    user: AuthUser = Depends(get_current_user),
    repo: BaseRepository = Depends(get_repository),
    permissions: PermissionResolver = Depends(get_permissions),
) -> BrandDetailResponse:
    """
    Brand detail with selected vetting agencies (numeric priority), brand
    admins and content/workflow counts.
    """
    if not permissions.has_brand_access(user, brand_id):
        raise HTTPException(
            status_code=403,
            detail="Forbidden: You do not have permission to access this brand."
        )

    detail = brand_service.get_brand_detail(repo, brand_id)
    if detail is None:
        raise HTTPException(status_code=404, detail="Brand not found", headers={"Cache-Control": NO_STORE})

    response.headers["Cache-Control"] = NO_STORE
    response.headers["x-data-source"] = "database"
    return BrandDetailResponse(
        **detail,
        meta={
            "source": "database",
            "isFallback": False,
            "requestId": str(uuid.uuid4()),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
    )


@router.put("/brands/{brand_id}", response_model=BrandResponse)
def update_brand(
    brand_id: str,
    request: BrandWriteRequest,
    user: AuthUser = Depends(get_current_user),
    repo: BaseRepository = Depends(get_repository),
    permissions: PermissionResolver = Depends(get_permissions),
) -> BrandResponse:
    """
    Partial brand update. ``admins`` and ``selected_agency_ids``, when sent,
    replace the brand's admin set and agency links.
    """
    if not permissions.can_admin_brand(user, brand_id):
        raise HTTPException(
            status_code=403,
            detail="Forbidden: You do not have admin rights for this brand."
        )

    if not request.name or not request.name.strip():
        raise HTTPException(status_code=400, detail="Brand name is required")

    brand = repo.get_brand(brand_id)
    if brand is None:
        raise HTTPException(status_code=404, detail="Brand not found")

    updated = brand_service.update_brand(
        repo,
        brand,
        request.model_dump(exclude_unset=True),
        now=datetime.now(timezone.utc).isoformat(),
    )
    if updated is None:
        raise HTTPException(status_code=404, detail="Brand not found")

    logger.info(f"User {user.id} updated brand {brand_id}")
    return BrandResponse(brand=updated)


@router.delete("/brands/{brand_id}", response_model=MessageResponse)
def delete_brand(
    brand_id: str,
    delete_cascade: bool = Query(False, alias="deleteCascade"),
    user: AuthUser = Depends(get_current_user),
    repo: BaseRepository = Depends(get_repository),
) -> MessageResponse:
    """Delete a brand (global admins only). Dependents require ``deleteCascade=true``."""
    if not user.is_global_admin:
        raise HTTPException(
            status_code=403,
            detail="Forbidden: You do not have permission to delete this resource."
        )

    brand = repo.get_brand(brand_id)
    if brand is None:
        raise HTTPException(status_code=404, detail="Brand not found")

    try:
        brand_service.delete_brand(repo, brand, cascade=delete_cascade)
    except brand_service.CascadeRequiredError as e:
        raise HTTPException(
            status_code=400,
            detail={
                "error": str(e),
                "contentCount": e.content_count,
                "workflowCount": e.workflow_count,
                "requiresCascade": True,
            },
        )
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Brand not found or already deleted.")

    return MessageResponse(
        message=f'Brand "{brand["name"]}" and its direct dependents have been scheduled for deletion.'
    )
