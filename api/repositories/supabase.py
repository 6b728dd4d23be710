"""
Supabase Repository - Hosted Postgres access through the supabase client

Uses the service-role key, so row level security is bypassed: every
authorization decision is made by the API before calling in here.
PostgREST errors are translated to the domain exceptions declared in
``mixerai.exceptions``.
"""

import logging
from typing import Any, Collection, Dict, List, Optional

from postgrest.exceptions import APIError
from supabase import AuthApiError, Client, create_client

from mixerai.exceptions import (
    FOREIGN_KEY_VIOLATION,
    NO_ROWS,
    RAISED_EXCEPTION,
    UNIQUE_VIOLATION,
    ConflictError,
    ForeignKeyError,
    NotFoundError,
    RepositoryError,
)
from mixerai.settings import SupabaseSettings
from mixerai.users import AuthUser
from api.repositories.base import BaseRepository, Row

logger = logging.getLogger(__name__)

AGENCY_COLUMNS = "id, name, description, country_code, priority"
PROFILE_COLUMNS = "id, full_name, email, avatar_url, job_title"
CONTENT_COLUMNS = "*, brands(name, brand_color)"


def translate_api_error(error: APIError, action: str) -> RepositoryError:
    """Map a PostgREST error to the matching domain exception."""
    code = getattr(error, "code", None)
    message = getattr(error, "message", None) or str(error)
    details = getattr(error, "details", None)
    text = f"{action}: {message}"

    if code == UNIQUE_VIOLATION:
        return ConflictError(text, code=code, details=details)
    if code == FOREIGN_KEY_VIOLATION:
        return ForeignKeyError(text, code=code, details=details)
    if code == NO_ROWS:
        return NotFoundError(text, code=code, details=details)
    if code == RAISED_EXCEPTION and "not found" in message.lower():
        return NotFoundError(text, code=code, details=details)
    return RepositoryError(text, code=code, details=details)


def _to_auth_user(user) -> AuthUser:
    return AuthUser(
        id=str(user.id),
        email=user.email,
        user_metadata=user.user_metadata or {},
        app_metadata=user.app_metadata or {},
    )


class SupabaseRepository(BaseRepository):
    """Repository implementation backed by Supabase (PostgREST + GoTrue)"""

    def __init__(self, settings: SupabaseSettings, client: Optional[Client] = None):
        self.client: Client = client or create_client(
            str(settings.url), settings.service_role_key.get_secret_value()
        )
        logger.info(f"SupabaseRepository initialized for {settings.url}")

    def _execute(self, builder, action: str):
        try:
            return builder.execute()
        except APIError as e:
            logger.error(f"Supabase error while trying to {action}: {e}")
            raise translate_api_error(e, action) from e

    def _maybe_single(self, table: str, column: str, value: str, columns: str = "*") -> Optional[Row]:
        resp = self._execute(
            self.client.table(table).select(columns).eq(column, value).limit(1),
            f"fetch {table} row {value}",
        )
        return resp.data[0] if resp.data else None

    def _count(self, table: str, column: str, value: str) -> int:
        resp = self._execute(
            self.client.table(table).select("id", count="exact", head=True).eq(column, value),
            f"count {table} for {value}",
        )
        return resp.count or 0

    def _insert(self, table: str, values: Row) -> Row:
        resp = self._execute(self.client.table(table).insert(values), f"insert into {table}")
        if not resp.data:
            raise RepositoryError(f"Insert into {table} returned no row")
        return resp.data[0]

    def _update(self, table: str, row_id: str, values: Row) -> Optional[Row]:
        resp = self._execute(
            self.client.table(table).update(values).eq("id", row_id),
            f"update {table} row {row_id}",
        )
        return resp.data[0] if resp.data else None

    def _delete(self, table: str, row_id: str) -> int:
        resp = self._execute(
            self.client.table(table).delete(count="exact").eq("id", row_id),
            f"delete {table} row {row_id}",
        )
        if resp.count is not None:
            return resp.count
        return len(resp.data or [])

    # ── auth provider ────────────────────────────────────

    def get_user_for_token(self, token: str) -> Optional[AuthUser]:
        try:
            response = self.client.auth.get_user(token)
        except AuthApiError as e:
            # expired, malformed and revoked tokens; transport failures propagate
            logger.info(f"Token rejected by auth provider: {type(e).__name__}")
            return None
        if not response or not response.user:
            return None
        return _to_auth_user(response.user)

    def get_user_by_email(self, email: str) -> Optional[AuthUser]:
        wanted = email.lower()
        page = 1
        while True:
            users = self.client.auth.admin.list_users(page=page, per_page=1000)
            for user in users:
                if (user.email or "").lower() == wanted:
                    return _to_auth_user(user)
            if len(users) < 1000:
                return None
            page += 1

    def invite_user(self, email: str, metadata: Dict[str, Any]) -> AuthUser:
        response = self.client.auth.admin.invite_user_by_email(email, options={"data": metadata})
        if not response or not response.user:
            raise RepositoryError(f"Invite for {email} returned no user")
        return _to_auth_user(response.user)

    def get_profiles(self, user_ids: Collection[str]) -> List[Row]:
        if not user_ids:
            return []
        resp = self._execute(
            self.client.table("profiles").select(PROFILE_COLUMNS).in_("id", list(user_ids)),
            "fetch profiles",
        )
        return resp.data or []

    # ── brands ───────────────────────────────────────────

    def list_brands(self, brand_ids: Optional[Collection[str]] = None) -> List[Row]:
        if brand_ids is not None and not brand_ids:
            return []
        query = self.client.table("brands").select("*")
        if brand_ids is not None:
            query = query.in_("id", list(brand_ids))
        return self._execute(query.order("name"), "list brands").data or []

    def get_brand(self, brand_id: str) -> Optional[Row]:
        return self._maybe_single("brands", "id", brand_id)

    def create_brand(self, values: Row) -> Row:
        return self._insert("brands", values)

    def update_brand(self, brand_id: str, values: Row) -> Optional[Row]:
        return self._update("brands", brand_id, values)

    def count_brand_content(self, brand_id: str) -> int:
        return self._count("content", "brand_id", brand_id)

    def count_brand_workflows(self, brand_id: str) -> int:
        return self._count("workflows", "brand_id", brand_id)

    def delete_brand_and_dependents(self, brand_id: str) -> None:
        self._execute(
            self.client.rpc("delete_brand_and_dependents", {"brand_id_to_delete": brand_id}),
            f"delete brand {brand_id}",
        )

    # ── vetting agencies ─────────────────────────────────

    def get_selected_agencies(self, brand_id: str) -> List[Optional[Row]]:
        resp = self._execute(
            self.client.table("brand_selected_agencies")
            .select(f"agency_id, content_vetting_agencies({AGENCY_COLUMNS})")
            .eq("brand_id", brand_id),
            f"fetch agencies for brand {brand_id}",
        )
        return [item.get("content_vetting_agencies") for item in resp.data or []]

    def clear_selected_agencies(self, brand_id: str) -> None:
        self._execute(
            self.client.table("brand_selected_agencies").delete().eq("brand_id", brand_id),
            f"clear agencies for brand {brand_id}",
        )

    def add_selected_agencies(self, brand_id: str, agency_ids: List[str]) -> None:
        if not agency_ids:
            return
        rows = [{"brand_id": brand_id, "agency_id": agency_id} for agency_id in agency_ids]
        self._execute(
            self.client.table("brand_selected_agencies").insert(rows),
            f"link agencies to brand {brand_id}",
        )

    def find_agencies_by_name(self, names: Collection[str], country_code: str) -> List[Row]:
        if not names:
            return []
        resp = self._execute(
            self.client.table("content_vetting_agencies")
            .select("id, name")
            .in_("name", list(names))
            .eq("country_code", country_code),
            "fetch agencies by name",
        )
        return resp.data or []

    # ── user brand permissions ───────────────────────────

    def get_brand_permissions(self, user_id: str, brand_id: Optional[str] = None) -> List[Row]:
        query = self.client.table("user_brand_permissions").select("user_id, brand_id, role").eq("user_id", user_id)
        if brand_id is not None:
            query = query.eq("brand_id", brand_id)
        return self._execute(query, f"fetch brand permissions for user {user_id}").data or []

    def list_brand_members(self, brand_id: str, roles: Collection[str]) -> List[Row]:
        resp = self._execute(
            self.client.table("user_brand_permissions")
            .select(f"user_id, role, profiles({PROFILE_COLUMNS})")
            .eq("brand_id", brand_id)
            .in_("role", list(roles)),
            f"fetch members of brand {brand_id}",
        )
        return [
            {"user_id": row["user_id"], "role": row["role"], "profile": row.get("profiles")}
            for row in resp.data or []
        ]

    def remove_brand_permissions(self, brand_id: str, user_ids: Collection[str], roles: Collection[str]) -> None:
        if not user_ids:
            return
        self._execute(
            self.client.table("user_brand_permissions")
            .delete()
            .in_("user_id", list(user_ids))
            .eq("brand_id", brand_id)
            .in_("role", list(roles)),
            f"remove permissions on brand {brand_id}",
        )

    def upsert_brand_permissions(self, rows: List[Row]) -> None:
        if not rows:
            return
        self._execute(
            self.client.table("user_brand_permissions").upsert(rows, on_conflict="user_id,brand_id"),
            "upsert brand permissions",
        )

    # ── master claim brands ──────────────────────────────

    def list_master_claim_brands(self, core_brand_ids: Optional[Collection[str]] = None) -> List[Row]:
        if core_brand_ids is not None and not core_brand_ids:
            return []
        query = self.client.table("master_claim_brands").select("*")
        if core_brand_ids is not None:
            query = query.in_("mixerai_brand_id", list(core_brand_ids))
        return self._execute(query.order("name"), "list master claim brands").data or []

    def get_master_claim_brand(self, master_brand_id: str) -> Optional[Row]:
        return self._maybe_single("master_claim_brands", "id", master_brand_id)

    def create_master_claim_brand(self, values: Row) -> Row:
        return self._insert("master_claim_brands", values)

    # ── products ─────────────────────────────────────────

    def list_products(self, master_brand_id: Optional[str] = None) -> List[Row]:
        query = self.client.table("products").select("*")
        if master_brand_id:
            query = query.eq("master_brand_id", master_brand_id)
        return self._execute(query.order("name"), "list products").data or []

    def get_product(self, product_id: str) -> Optional[Row]:
        return self._maybe_single("products", "id", product_id)

    def create_product(self, values: Row) -> Row:
        return self._insert("products", values)

    def update_product(self, product_id: str, values: Row) -> Optional[Row]:
        return self._update("products", product_id, values)

    def delete_product(self, product_id: str) -> bool:
        return self._delete("products", product_id) > 0

    # ── claims ───────────────────────────────────────────

    def list_claims(self, filters: Optional[Dict[str, str]] = None) -> List[Row]:
        query = self.client.table("claims").select("*")
        for column, value in (filters or {}).items():
            query = query.eq(column, value)
        return self._execute(query.order("claim_text"), "list claims").data or []

    def get_claim(self, claim_id: str) -> Optional[Row]:
        return self._maybe_single("claims", "id", claim_id)

    def create_claim(self, values: Row) -> Row:
        return self._insert("claims", values)

    def update_claim(self, claim_id: str, values: Row) -> Optional[Row]:
        return self._update("claims", claim_id, values)

    def delete_claim(self, claim_id: str) -> int:
        return self._delete("claims", claim_id)

    # ── content templates ────────────────────────────────

    def list_templates(self) -> List[Row]:
        return self._execute(
            self.client.table("content_templates").select("*").order("name"),
            "list content templates",
        ).data or []

    def get_template(self, template_id: str) -> Optional[Row]:
        return self._maybe_single("content_templates", "id", template_id)

    def create_template(self, values: Row) -> Row:
        return self._insert("content_templates", values)

    def update_template(self, template_id: str, values: Row) -> Optional[Row]:
        return self._update("content_templates", template_id, values)

    def delete_template_and_update_content(self, template_id: str) -> None:
        self._execute(
            self.client.rpc("delete_template_and_update_content", {"template_id_to_delete": template_id}),
            f"delete template {template_id}",
        )

    # ── content ──────────────────────────────────────────

    def list_content(
        self,
        brand_ids: Optional[Collection[str]] = None,
        status: Optional[str] = None,
        query: Optional[str] = None,
    ) -> List[Row]:
        if brand_ids is not None and not brand_ids:
            return []
        builder = self.client.table("content").select(CONTENT_COLUMNS)
        if brand_ids is not None:
            builder = builder.in_("brand_id", list(brand_ids))
        if status == "active":
            builder = builder.not_.in_("status", ["approved", "rejected"])
        elif status in ("approved", "rejected"):
            builder = builder.eq("status", status)
        if query:
            builder = builder.ilike("title", f"%{query}%")

        resp = self._execute(builder.order("created_at", desc=True), "list content")
        items = []
        for row in resp.data or []:
            brand = row.pop("brands", None) or {}
            row["brand_name"] = brand.get("name")
            row["brand_color"] = brand.get("brand_color")
            items.append(row)
        return items

    def get_content(self, content_id: str) -> Optional[Row]:
        return self._maybe_single("content", "id", content_id)

    def delete_content(self, content_id: str) -> bool:
        return self._delete("content", content_id) > 0

    # ── tool run history ─────────────────────────────────

    def record_tool_run(self, values: Row) -> None:
        self._execute(self.client.table("tool_run_history").insert(values), "record tool run")
