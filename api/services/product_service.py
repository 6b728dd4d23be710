"""
Product Service - validation and visibility rules for products
"""

import logging
from typing import Any, Dict, List, Optional

from mixerai.permissions import PermissionResolver
from mixerai.users import AuthUser
from api.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


def validate_new_product(name: Any, description: Any, master_brand_id: Any) -> Dict[str, Any]:
    """
    Check a create request and build the row to insert (trimmed).

    Raises:
        ValueError: with the message returned to the client
    """
    if not isinstance(name, str) or not name.strip():
        raise ValueError("Product name is required and must be a non-empty string.")
    if not master_brand_id or not isinstance(master_brand_id, str):
        raise ValueError("Master Brand ID is required.")
    if description and not isinstance(description, str):
        raise ValueError("Description must be a string if provided.")

    return {
        "name": name.strip(),
        "description": (description or "").strip() or None,
        "master_brand_id": master_brand_id,
    }


def validate_product_update(fields: Dict[str, Any]) -> Dict[str, Any]:
    """
    Build the column changes for a product update.

    Raises:
        ValueError: invalid field or nothing to update
    """
    changes: Dict[str, Any] = {}
    if "name" in fields:
        name = fields["name"]
        if not isinstance(name, str) or not name.strip():
            raise ValueError("Product name must be a non-empty string.")
        changes["name"] = name.strip()
    if "description" in fields:
        description = fields["description"]
        if description is not None and not isinstance(description, str):
            raise ValueError("Description must be a string or null.")
        changes["description"] = (description or "").strip() or None

    if not changes:
        raise ValueError("No updatable fields provided.")
    return changes


def list_visible_products(
    repo: BaseRepository,
    permissions: PermissionResolver,
    user: AuthUser,
    master_brand_id: Optional[str] = None,
) -> List[Dict[str, Any]]:
    products = repo.list_products(master_brand_id)
    if user.is_global_admin:
        return products

    accessible = permissions.accessible_brand_ids(user) or set()
    core_brands: Dict[Optional[str], Optional[str]] = {}
    visible = []
    for product in products:
        master_id = product.get("master_brand_id")
        if master_id not in core_brands:
            core_brands[master_id] = permissions.core_brand_for_master_brand(master_id)
        if core_brands[master_id] in accessible:
            visible.append(product)
    return visible
