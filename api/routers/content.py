"""
Content Router - content listing and deletion
"""

import logging
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from mixerai.permissions import PermissionResolver
from mixerai.users import AuthUser
from api.auth import get_current_user
from api.dependencies import get_permissions, get_repository
from api.repositories.base import BaseRepository
from api.schemas.brands import MessageResponse
from api.schemas.content import ContentListResponse

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/content", response_model=ContentListResponse)
def list_content(
    brand_id: Optional[str] = Query(None, alias="brandId"),
    status: Literal["active", "approved", "rejected", "all"] = Query("all"),
    query: Optional[str] = Query(None, description="Case-insensitive title search"),
    user: AuthUser = Depends(get_current_user),
    repo: BaseRepository = Depends(get_repository),
    permissions: PermissionResolver = Depends(get_permissions),
) -> ContentListResponse:
    """
    Content newest first, with brand name and colour. Non-admins only see
    content of brands they hold a permission on.
    """
    brand_ids = permissions.accessible_brand_ids(user)
    if brand_id:
        if brand_ids is not None and brand_id not in brand_ids:
            raise HTTPException(
                status_code=403,
                detail="Forbidden: You do not have permission to access this brand."
            )
        brand_ids = {brand_id}

    items = repo.list_content(brand_ids=brand_ids, status=status, query=query)
    return ContentListResponse(data=items)


@router.delete("/content/{content_id}", response_model=MessageResponse)
def delete_content(
    content_id: str,
    user: AuthUser = Depends(get_current_user),
    repo: BaseRepository = Depends(get_repository),
    permissions: PermissionResolver = Depends(get_permissions),
) -> MessageResponse:
    content = repo.get_content(content_id)
    if content is None:
        raise HTTPException(status_code=404, detail="Content not found")
    if not permissions.can_delete_content(user, content):
        raise HTTPException(status_code=403, detail="You do not have permission to delete this content.")

    if not repo.delete_content(content_id):
        raise HTTPException(status_code=404, detail="Content not found")
    logger.info(f"User {user.id} deleted content {content_id}")
    return MessageResponse(message="Content deleted successfully.")
