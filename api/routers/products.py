"""
Products Router - products belong to a master claim brand
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
from api.schemas.products import (
    ProductCreateRequest,
    ProductListResponse,
    ProductResponse,
    ProductUpdateRequest,
)
from api.services import product_service

router = APIRouter()
logger = logging.getLogger(__name__)

DUPLICATE_PRODUCT = "A product with this name already exists for this brand."
NO_PERMISSION = "You do not have permission to manage this product."


@router.get("/products", response_model=ProductListResponse)
def list_products(
    master_brand_id: Optional[str] = Query(None, description="Filter by master claim brand"),
    user: AuthUser = Depends(get_current_user),
    repo: BaseRepository = Depends(get_repository),
    permissions: PermissionResolver = Depends(get_permissions),
) -> ProductListResponse:
    products = product_service.list_visible_products(repo, permissions, user, master_brand_id)
    return ProductListResponse(data=products)


@router.post("/products", response_model=ProductResponse, status_code=201)
def create_product(
    request: ProductCreateRequest,
    user: AuthUser = Depends(get_current_user),
    repo: BaseRepository = Depends(get_repository),
    permissions: PermissionResolver = Depends(get_permissions),
) -> ProductResponse:
    """
    Create a product. Requires global admin, or admin of the core brand
    linked to the product's master claim brand.
    """
    try:
        record = product_service.validate_new_product(request.name, request.description, request.master_brand_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if not permissions.can_create_product(user, record["master_brand_id"]):
        raise HTTPException(
            status_code=403,
            detail="You do not have permission to create a product for this brand."
        )

    try:
        product = repo.create_product(record)
    except ConflictError:
        raise HTTPException(status_code=409, detail=DUPLICATE_PRODUCT)
    except ForeignKeyError:
        raise HTTPException(
            status_code=400,
            detail="Invalid Master Brand ID. The specified brand does not exist."
        )

    logger.info(f"User {user.id} created product {product['id']} under master brand {record['master_brand_id']}")
    return ProductResponse(data=product)


@router.get("/products/{product_id}", response_model=ProductResponse)
def get_product(
    product_id: str,
    user: AuthUser = Depends(get_current_user),
    repo: BaseRepository = Depends(get_repository),
    permissions: PermissionResolver = Depends(get_permissions),
) -> ProductResponse:
    product = repo.get_product(product_id)
    if product is None:
        raise HTTPException(status_code=404, detail="Product not found.")
    if not permissions.can_read_product(user, product):
        raise HTTPException(status_code=403, detail="You do not have permission to view this product.")
    return ProductResponse(data=product)


@router.put("/products/{product_id}", response_model=ProductResponse)
def update_product(
    product_id: str,
    request: ProductUpdateRequest,
    user: AuthUser = Depends(get_current_user),
    repo: BaseRepository = Depends(get_repository),
    permissions: PermissionResolver = Depends(get_permissions),
) -> ProductResponse:
    product = repo.get_product(product_id)
    if product is None:
        raise HTTPException(status_code=404, detail="Product not found.")
    if not permissions.can_manage_product(user, product):
        raise HTTPException(status_code=403, detail=NO_PERMISSION)

    try:
        changes = product_service.validate_product_update(request.model_dump(exclude_unset=True))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    changes["updated_at"] = datetime.now(timezone.utc).isoformat()

    try:
        updated = repo.update_product(product_id, changes)
    except ConflictError:
        raise HTTPException(status_code=409, detail=DUPLICATE_PRODUCT)
    if updated is None:
        raise HTTPException(status_code=404, detail="Product not found.")
    return ProductResponse(data=updated)


@router.delete("/products/{product_id}", response_model=MessageResponse)
def delete_product(
    product_id: str,
    user: AuthUser = Depends(get_current_user),
    repo: BaseRepository = Depends(get_repository),
    permissions: PermissionResolver = Depends(get_permissions),
) -> MessageResponse:
    product = repo.get_product(product_id)
    if product is None:
        raise HTTPException(status_code=404, detail="Product not found.")
    if not permissions.can_manage_product(user, product):
        raise HTTPException(status_code=403, detail=NO_PERMISSION)

    if not repo.delete_product(product_id):
        raise HTTPException(status_code=404, detail="Product not found.")
    logger.info(f"User {user.id} deleted product {product_id}")
    return MessageResponse(message="Product deleted successfully.")
