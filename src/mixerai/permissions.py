"""
Permission resolution for brands, products, claims and content.

Access is granted on core brands (rows in ``brands``) through
``user_brand_permissions``. Products and claims reach their core brand by
walking foreign keys:

    claim (brand level)   -> master_claim_brands -> brands
    claim (product level) -> products -> master_claim_brands -> brands
    product               -> master_claim_brands -> brands

Ingredient-level claims have no core brand. A broken link anywhere in the
chain resolves to "no core brand", which never grants access.
"""

import logging
from typing import Any, Dict, Optional, Set

from mixerai.exceptions import RepositoryError
from mixerai.users import AuthUser, BRAND_ADMIN_ROLES

logger = logging.getLogger(__name__)


class PermissionResolver:
    """Answers "may this user do X" questions against a repository."""

    def __init__(self, repository):
        self.repo = repository

    # ── brand level ──────────────────────────────────────

    @staticmethod
    def is_global_admin(user: AuthUser) -> bool:
        return user.is_global_admin

    def accessible_brand_ids(self, user: AuthUser) -> Optional[Set[str]]:
        """
        Brand ids the user holds any permission on.

        Returns:
            None for global admins (unrestricted), otherwise a set.
        """
        if user.is_global_admin:
            return None
        return {row["brand_id"] for row in self.repo.get_brand_permissions(user.id)}

    def has_brand_access(self, user: AuthUser, brand_id: Optional[str]) -> bool:
        if user.is_global_admin:
            return True
        if not brand_id:
            return False
        return bool(self.repo.get_brand_permissions(user.id, brand_id))

    def is_brand_admin(self, user_id: str, brand_id: Optional[str]) -> bool:
        if not brand_id:
            return False
        rows = self.repo.get_brand_permissions(user_id, brand_id)
        return any(row.get("role") in BRAND_ADMIN_ROLES for row in rows)

    def can_admin_brand(self, user: AuthUser, brand_id: Optional[str]) -> bool:
        return user.is_global_admin or self.is_brand_admin(user.id, brand_id)

    # ── chain walking ────────────────────────────────────

    def core_brand_for_master_brand(self, master_brand_id: Optional[str]) -> Optional[str]:
        if not master_brand_id:
            return None
        try:
            master_brand = self.repo.get_master_claim_brand(master_brand_id)
        except RepositoryError as e:
            logger.error(f"Failed to load master claim brand {master_brand_id}: {e}")
            return None
        if master_brand is None:
            logger.warning(f"Master claim brand {master_brand_id} not found while resolving permissions")
            return None
        core_brand_id = master_brand.get("mixerai_brand_id")
        if not core_brand_id:
            logger.info(f"Master claim brand {master_brand_id} is not linked to a core brand")
        return core_brand_id

    def core_brand_for_product(self, product: Optional[Dict[str, Any]]) -> Optional[str]:
        if not product:
            return None
        return self.core_brand_for_master_brand(product.get("master_brand_id"))

    def core_brand_for_product_id(self, product_id: Optional[str]) -> Optional[str]:
        if not product_id:
            return None
        try:
            product = self.repo.get_product(product_id)
        except RepositoryError as e:
            logger.error(f"Failed to load product {product_id}: {e}")
            return None
        if product is None:
            logger.warning(f"Product {product_id} not found while resolving permissions")
        return self.core_brand_for_product(product)

    def core_brand_for_claim(self, claim: Dict[str, Any]) -> Optional[str]:
        level = claim.get("level")
        if level == "brand":
            return self.core_brand_for_master_brand(claim.get("master_brand_id"))
        if level == "product":
            return self.core_brand_for_product_id(claim.get("product_id"))
        return None

    # ── products ─────────────────────────────────────────

    def can_create_product(self, user: AuthUser, master_brand_id: Optional[str]) -> bool:
        if user.is_global_admin:
            return True
        core_brand_id = self.core_brand_for_master_brand(master_brand_id)
        return self.is_brand_admin(user.id, core_brand_id)

    def can_manage_product(self, user: AuthUser, product: Dict[str, Any]) -> bool:
        return self.can_create_product(user, product.get("master_brand_id"))

    def can_read_product(self, user: AuthUser, product: Dict[str, Any]) -> bool:
        if user.is_global_admin:
            return True
        return self.has_brand_access(user, self.core_brand_for_product(product))

    # ── claims ───────────────────────────────────────────

    def can_read_claim(self, user: AuthUser, claim: Dict[str, Any]) -> bool:
        if user.is_global_admin or claim.get("created_by") == user.id:
            return True
        if claim.get("level") == "ingredient":
            return True
        return self.has_brand_access(user, self.core_brand_for_claim(claim))

    def can_modify_claim(self, user: AuthUser, claim: Dict[str, Any]) -> bool:
        if user.is_global_admin or claim.get("created_by") == user.id:
            return True
        # ingredient claims: global admin or creator only
        return self.is_brand_admin(user.id, self.core_brand_for_claim(claim))

    def can_create_claim(self, user: AuthUser, claim: Dict[str, Any]) -> bool:
        """``claim`` is the unsaved claim (level and entity ids set)."""
        if user.is_global_admin:
            return True
        return self.is_brand_admin(user.id, self.core_brand_for_claim(claim))

    # ── content ──────────────────────────────────────────

    def can_delete_content(self, user: AuthUser, content: Dict[str, Any]) -> bool:
        if user.is_global_admin or content.get("created_by") == user.id:
            return True
        return self.is_brand_admin(user.id, content.get("brand_id"))
