"""
Base Repository - Abstract interface for data access

This defines the contract that all repository implementations must follow.
Allows swapping between the hosted Supabase database (production) and the
in-process local store (development, tests) without changing the rest of
the API code.

Rows are plain dicts keyed by column name. Implementations raise the
exceptions from ``mixerai.exceptions``:
- ConflictError on unique constraint violations
- ForeignKeyError when a referenced row does not exist
- NotFoundError when an RPC reports a missing row
- RepositoryError for anything else
"""

from abc import ABC, abstractmethod
from typing import Any, Collection, Dict, List, Optional

from mixerai.users import AuthUser

Row = Dict[str, Any]


class BaseRepository(ABC):
    """Abstract base class for data repositories"""

    # ── auth provider ────────────────────────────────────

    @abstractmethod
    def get_user_for_token(self, token: str) -> Optional[AuthUser]:
        """
        Validate an access token with the auth provider.

        Returns:
            The user, or None when the token is invalid or expired
        """
        pass

    @abstractmethod
    def get_user_by_email(self, email: str) -> Optional[AuthUser]:
        """Look up an auth user by email (case-insensitive)."""
        pass

    @abstractmethod
    def invite_user(self, email: str, metadata: Dict[str, Any]) -> AuthUser:
        """
        Invite a new user by email.

        Args:
            email: Address to invite
            metadata: Stored on the new user (role, invited_to_brand, ...)
        """
        pass

    @abstractmethod
    def get_profiles(self, user_ids: Collection[str]) -> List[Row]:
        """Profiles (id, full_name, email, avatar_url, job_title) for users."""
        pass

    # ── brands ───────────────────────────────────────────

    @abstractmethod
    def list_brands(self, brand_ids: Optional[Collection[str]] = None) -> List[Row]:
        """
        List brands ordered by name.

        Args:
            brand_ids: Restrict to these ids (None = all brands)
        """
        pass

    @abstractmethod
    def get_brand(self, brand_id: str) -> Optional[Row]:
        pass

    @abstractmethod
    def create_brand(self, values: Row) -> Row:
        pass

    @abstractmethod
    def update_brand(self, brand_id: str, values: Row) -> Optional[Row]:
        """Returns the updated row, or None when the brand does not exist."""
        pass

    @abstractmethod
    def count_brand_content(self, brand_id: str) -> int:
        pass

    @abstractmethod
    def count_brand_workflows(self, brand_id: str) -> int:
        pass

    @abstractmethod
    def delete_brand_and_dependents(self, brand_id: str) -> None:
        """
        Delete a brand with its content, workflows, permissions and agency
        links in one database transaction (RPC).

        Raises:
            NotFoundError: brand does not exist
        """
        pass

    # ── vetting agencies ─────────────────────────────────

    @abstractmethod
    def get_selected_agencies(self, brand_id: str) -> List[Optional[Row]]:
        """
        Agencies linked to a brand.

        Returns:
            Agency rows (id, name, description, country_code, priority);
            None entries for links whose agency no longer exists
        """
        pass

    @abstractmethod
    def clear_selected_agencies(self, brand_id: str) -> None:
        pass

    @abstractmethod
    def add_selected_agencies(self, brand_id: str, agency_ids: List[str]) -> None:
        pass

    @abstractmethod
    def find_agencies_by_name(self, names: Collection[str], country_code: str) -> List[Row]:
        pass

    # ── user brand permissions ───────────────────────────

    @abstractmethod
    def get_brand_permissions(self, user_id: str, brand_id: Optional[str] = None) -> List[Row]:
        """
        Permission rows (user_id, brand_id, role) of a user.

        Args:
            brand_id: Restrict to one brand
        """
        pass

    @abstractmethod
    def list_brand_members(self, brand_id: str, roles: Collection[str]) -> List[Row]:
        """
        Users holding one of ``roles`` on a brand.

        Returns:
            Rows with user_id, role and ``profile`` (dict or None)
        """
        pass

    @abstractmethod
    def remove_brand_permissions(self, brand_id: str, user_ids: Collection[str], roles: Collection[str]) -> None:
        pass

    @abstractmethod
    def upsert_brand_permissions(self, rows: List[Row]) -> None:
        """Insert or replace permission rows on (user_id, brand_id)."""
        pass

    # ── master claim brands ──────────────────────────────

    @abstractmethod
    def list_master_claim_brands(self, core_brand_ids: Optional[Collection[str]] = None) -> List[Row]:
        pass

    @abstractmethod
    def get_master_claim_brand(self, master_brand_id: str) -> Optional[Row]:
        pass

    @abstractmethod
    def create_master_claim_brand(self, values: Row) -> Row:
        pass

    # ── products ─────────────────────────────────────────

    @abstractmethod
    def list_products(self, master_brand_id: Optional[str] = None) -> List[Row]:
        pass

    @abstractmethod
    def get_product(self, product_id: str) -> Optional[Row]:
        pass

    @abstractmethod
    def create_product(self, values: Row) -> Row:
        pass

    @abstractmethod
    def update_product(self, product_id: str, values: Row) -> Optional[Row]:
        pass

    @abstractmethod
    def delete_product(self, product_id: str) -> bool:
        """Returns True when a row was deleted."""
        pass

    # ── claims ───────────────────────────────────────────

    @abstractmethod
    def list_claims(self, filters: Optional[Dict[str, str]] = None) -> List[Row]:
        """
        List claims.

        Args:
            filters: Equality filters on level, product_id, master_brand_id,
                ingredient_id, country_code
        """
        pass

    @abstractmethod
    def get_claim(self, claim_id: str) -> Optional[Row]:
        pass

    @abstractmethod
    def create_claim(self, values: Row) -> Row:
        pass

    @abstractmethod
    def update_claim(self, claim_id: str, values: Row) -> Optional[Row]:
        pass

    @abstractmethod
    def delete_claim(self, claim_id: str) -> int:
        """Returns the number of deleted rows."""
        pass

    # ── content templates ────────────────────────────────

    @abstractmethod
    def list_templates(self) -> List[Row]:
        pass

    @abstractmethod
    def get_template(self, template_id: str) -> Optional[Row]:
        pass

    @abstractmethod
    def create_template(self, values: Row) -> Row:
        pass

    @abstractmethod
    def update_template(self, template_id: str, values: Row) -> Optional[Row]:
        pass

    @abstractmethod
    def delete_template_and_update_content(self, template_id: str) -> None:
        """
        Delete a template and detach it from content items (RPC).

        Raises:
            NotFoundError: template does not exist
        """
        pass

    # ── content ──────────────────────────────────────────

    @abstractmethod
    def list_content(
        self,
        brand_ids: Optional[Collection[str]] = None,
        status: Optional[str] = None,
        query: Optional[str] = None,
    ) -> List[Row]:
        """
        Content newest first, enriched with brand_name and brand_color.

        Args:
            brand_ids: Restrict to these brands (None = all)
            status: "active", "approved", "rejected" or "all"/None
            query: Case-insensitive title search
        """
        pass

    @abstractmethod
    def get_content(self, content_id: str) -> Optional[Row]:
        pass

    @abstractmethod
    def delete_content(self, content_id: str) -> bool:
        pass

    # ── tool run history ─────────────────────────────────

    @abstractmethod
    def record_tool_run(self, values: Row) -> None:
        """Append a row to tool_run_history."""
        pass
