"""
Local Repository - In-process data access implementation

Keeps every table in memory, optionally seeded from a JSON file
(``APP_LOCAL_SEED_PATH``). Used for development without a Supabase
project and by the route tests. Enforces the unique and foreign key
constraints the API relies on and implements both RPCs, raising the same
domain exceptions as the Supabase implementation.

Seed file layout: one key per table holding a list of rows, plus
``users`` (auth users, each with an optional ``access_token``).
"""

import copy
import json
import logging
import threading
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Collection, Dict, List, Optional

from mixerai.exceptions import (
    FOREIGN_KEY_VIOLATION,
    RAISED_EXCEPTION,
    UNIQUE_VIOLATION,
    ConflictError,
    ForeignKeyError,
    NotFoundError,
)
from mixerai.users import AuthUser
from api.repositories.base import BaseRepository, Row

logger = logging.getLogger(__name__)

TABLES = (
    "brands",
    "content_vetting_agencies",
    "brand_selected_agencies",
    "master_claim_brands",
    "products",
    "claims",
    "content_templates",
    "content",
    "workflows",
    "user_brand_permissions",
    "profiles",
    "tool_run_history",
)

# table -> column tuples that must be unique together
UNIQUE_KEYS = {
    "master_claim_brands": [("name",)],
    "products": [("master_brand_id", "name")],
    "claims": [("claim_text", "claim_type", "level", "master_brand_id", "product_id", "ingredient_id", "country_code")],
    "user_brand_permissions": [("user_id", "brand_id")],
}

# table -> {column: referenced table}
FOREIGN_KEYS = {
    "master_claim_brands": {"mixerai_brand_id": "brands"},
    "products": {"master_brand_id": "master_claim_brands"},
    "claims": {"master_brand_id": "master_claim_brands", "product_id": "products"},
    "content_templates": {"brand_id": "brands"},
    "content": {"brand_id": "brands"},
    "workflows": {"brand_id": "brands"},
    "brand_selected_agencies": {"brand_id": "brands", "agency_id": "content_vetting_agencies"},
    "user_brand_permissions": {"brand_id": "brands"},
}


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class LocalRepository(BaseRepository):
    """Repository implementation holding all rows in process memory"""

    def __init__(self, seed_path: Optional[Path] = None):
        self._tables: Dict[str, List[Row]] = {name: [] for name in TABLES}
        self._users: Dict[str, AuthUser] = {}
        self._tokens: Dict[str, str] = {}
        self._lock = threading.RLock()

        if seed_path is not None:
            self.load_seed(seed_path)
        logger.info(f"LocalRepository initialized (seed: {seed_path or 'none'})")

    # ── seeding helpers ──────────────────────────────────

    def load_seed(self, seed_path: Path) -> None:
        seed_path = Path(seed_path)
        if not seed_path.exists():
            raise FileNotFoundError(f"Seed file not found: {seed_path}")

        logger.info(f"Loading local seed data from {seed_path}")
        with open(seed_path, "r") as f:
            seed = json.load(f)

        for user in seed.get("users", []):
            token = user.pop("access_token", None)
            self.add_user(AuthUser(**user), token=token)
        for table in TABLES:
            for row in seed.get(table, []):
                self.insert(table, row)
        logger.info(f"Loaded {sum(len(rows) for rows in self._tables.values())} seed rows")

    def add_user(self, user: AuthUser, token: Optional[str] = None) -> AuthUser:
        """Register an auth user (and a matching profile) with an optional access token."""
        with self._lock:
            self._users[user.id] = user
            if token:
                self._tokens[token] = user.id
            if self._find_one("profiles", "id", user.id) is None:
                self._tables["profiles"].append({
                    "id": user.id,
                    "email": user.email,
                    "full_name": user.user_metadata.get("full_name"),
                    "avatar_url": None,
                    "job_title": None,
                })
        return user

    def insert(self, table: str, values: Row) -> Row:
        """Insert a row after checking constraints; fills id and timestamps."""
        with self._lock:
            row = copy.deepcopy(values)
            if table not in ("brand_selected_agencies", "user_brand_permissions", "tool_run_history"):
                row.setdefault("id", str(uuid.uuid4()))
            row.setdefault("created_at", _now())
            self._check_foreign_keys(table, row)
            self._check_unique(table, row)
            self._tables[table].append(row)
            return copy.deepcopy(row)

    def rows(self, table: str) -> List[Row]:
        return copy.deepcopy(self._tables[table])

    # ── constraint checks ────────────────────────────────

    def _find_one(self, table: str, column: str, value: Any) -> Optional[Row]:
        for row in self._tables[table]:
            if row.get(column) == value:
                return row
        return None

    def _check_foreign_keys(self, table: str, row: Row) -> None:
        for column, target in FOREIGN_KEYS.get(table, {}).items():
            value = row.get(column)
            if value is not None and self._find_one(target, "id", value) is None:
                raise ForeignKeyError(
                    f'insert or update on table "{table}" violates foreign key constraint on "{column}"',
                    code=FOREIGN_KEY_VIOLATION,
                    details=f"Key ({column})=({value}) is not present in table \"{target}\".",
                )

    def _check_unique(self, table: str, row: Row, ignore: Optional[Row] = None) -> None:
        for columns in UNIQUE_KEYS.get(table, []):
            key = tuple(row.get(c) for c in columns)
            for existing in self._tables[table]:
                if existing is ignore:
                    continue
                if tuple(existing.get(c) for c in columns) == key:
                    raise ConflictError(
                        f'duplicate key value violates unique constraint on {table} ({", ".join(columns)})',
                        code=UNIQUE_VIOLATION,
                    )

    def _get(self, table: str, row_id: str) -> Optional[Row]:
        with self._lock:
            row = self._find_one(table, "id", row_id)
            return copy.deepcopy(row) if row else None

    def _update(self, table: str, row_id: str, values: Row) -> Optional[Row]:
        with self._lock:
            current = self._find_one(table, "id", row_id)
            if current is None:
                return None
            candidate = {**current, **copy.deepcopy(values)}
            self._check_foreign_keys(table, candidate)
            self._check_unique(table, candidate, ignore=current)
            current.update(candidate)
            return copy.deepcopy(current)

    def _delete_where(self, table: str, predicate) -> int:
        with self._lock:
            before = len(self._tables[table])
            self._tables[table] = [row for row in self._tables[table] if not predicate(row)]
            return before - len(self._tables[table])

    def _sorted(self, rows: List[Row], column: str, reverse: bool = False) -> List[Row]:
        return copy.deepcopy(sorted(rows, key=lambda r: r.get(column) or "", reverse=reverse))

    # ── auth provider ────────────────────────────────────

    def get_user_for_token(self, token: str) -> Optional[AuthUser]:
        user_id = self._tokens.get(token)
        return self._users.get(user_id) if user_id else None

    def get_user_by_email(self, email: str) -> Optional[AuthUser]:
        wanted = email.lower()
        for user in self._users.values():
            if (user.email or "").lower() == wanted:
                return user
        return None

    def invite_user(self, email: str, metadata: Dict[str, Any]) -> AuthUser:
        if self.get_user_by_email(email) is not None:
            raise ConflictError(f"A user with email {email} has already been registered")
        user = AuthUser(id=str(uuid.uuid4()), email=email, user_metadata=dict(metadata))
        logger.info(f"Invited user {email} ({user.id})")
        return self.add_user(user)

    def get_profiles(self, user_ids: Collection[str]) -> List[Row]:
        wanted = set(user_ids)
        return copy.deepcopy([p for p in self._tables["profiles"] if p["id"] in wanted])

    # ── brands ───────────────────────────────────────────

    def list_brands(self, brand_ids: Optional[Collection[str]] = None) -> List[Row]:
        rows = self._tables["brands"]
        if brand_ids is not None:
            wanted = set(brand_ids)
            rows = [r for r in rows if r["id"] in wanted]
        return self._sorted(rows, "name")

    def get_brand(self, brand_id: str) -> Optional[Row]:
        return self._get("brands", brand_id)

    def create_brand(self, values: Row) -> Row:
        return self.insert("brands", values)

    def update_brand(self, brand_id: str, values: Row) -> Optional[Row]:
        return self._update("brands", brand_id, values)

    def count_brand_content(self, brand_id: str) -> int:
        return sum(1 for row in self._tables["content"] if row.get("brand_id") == brand_id)

    def count_brand_workflows(self, brand_id: str) -> int:
        return sum(1 for row in self._tables["workflows"] if row.get("brand_id") == brand_id)

    def delete_brand_and_dependents(self, brand_id: str) -> None:
        with self._lock:
            if self._find_one("brands", "id", brand_id) is None:
                raise NotFoundError(f"Brand with ID {brand_id} not found", code=RAISED_EXCEPTION)

            belongs = lambda row: row.get("brand_id") == brand_id  # noqa: E731
            for table in ("content", "workflows", "user_brand_permissions", "brand_selected_agencies", "content_templates"):
                removed = self._delete_where(table, belongs)
                logger.debug(f"Removed {removed} {table} rows of brand {brand_id}")
            for master_brand in self._tables["master_claim_brands"]:
                if master_brand.get("mixerai_brand_id") == brand_id:
                    master_brand["mixerai_brand_id"] = None
            self._delete_where("brands", lambda row: row["id"] == brand_id)

    # ── vetting agencies ─────────────────────────────────

    def get_selected_agencies(self, brand_id: str) -> List[Optional[Row]]:
        links = [r for r in self._tables["brand_selected_agencies"] if r["brand_id"] == brand_id]
        return [self._get("content_vetting_agencies", link["agency_id"]) for link in links]

    def clear_selected_agencies(self, brand_id: str) -> None:
        self._delete_where("brand_selected_agencies", lambda row: row["brand_id"] == brand_id)

    def add_selected_agencies(self, brand_id: str, agency_ids: List[str]) -> None:
        with self._lock:
            for agency_id in agency_ids:
                self.insert("brand_selected_agencies", {"brand_id": brand_id, "agency_id": agency_id})

    def find_agencies_by_name(self, names: Collection[str], country_code: str) -> List[Row]:
        wanted = set(names)
        return copy.deepcopy([
            {"id": a["id"], "name": a["name"]}
            for a in self._tables["content_vetting_agencies"]
            if a.get("name") in wanted and a.get("country_code") == country_code
        ])

    # ── user brand permissions ───────────────────────────

    def get_brand_permissions(self, user_id: str, brand_id: Optional[str] = None) -> List[Row]:
        return copy.deepcopy([
            row for row in self._tables["user_brand_permissions"]
            if row["user_id"] == user_id and (brand_id is None or row["brand_id"] == brand_id)
        ])

    def list_brand_members(self, brand_id: str, roles: Collection[str]) -> List[Row]:
        members = []
        for row in self._tables["user_brand_permissions"]:
            if row["brand_id"] == brand_id and row.get("role") in roles:
                members.append({
                    "user_id": row["user_id"],
                    "role": row["role"],
                    "profile": self._get("profiles", row["user_id"]),
                })
        return members

    def remove_brand_permissions(self, brand_id: str, user_ids: Collection[str], roles: Collection[str]) -> None:
        user_ids = set(user_ids)
        self._delete_where(
            "user_brand_permissions",
            lambda row: row["brand_id"] == brand_id and row["user_id"] in user_ids and row.get("role") in roles,
        )

    def upsert_brand_permissions(self, rows: List[Row]) -> None:
        with self._lock:
            for values in rows:
                existing = next(
                    (r for r in self._tables["user_brand_permissions"]
                     if r["user_id"] == values["user_id"] and r["brand_id"] == values["brand_id"]),
                    None,
                )
                if existing is not None:
                    existing.update(copy.deepcopy(values))
                else:
                    self.insert("user_brand_permissions", values)

    # ── master claim brands ──────────────────────────────

    def list_master_claim_brands(self, core_brand_ids: Optional[Collection[str]] = None) -> List[Row]:
        rows = self._tables["master_claim_brands"]
        if core_brand_ids is not None:
            wanted = set(core_brand_ids)
            rows = [r for r in rows if r.get("mixerai_brand_id") in wanted]
        return self._sorted(rows, "name")

    def get_master_claim_brand(self, master_brand_id: str) -> Optional[Row]:
        return self._get("master_claim_brands", master_brand_id)

    def create_master_claim_brand(self, values: Row) -> Row:
        return self.insert("master_claim_brands", values)

    # ── products ─────────────────────────────────────────

    def list_products(self, master_brand_id: Optional[str] = None) -> List[Row]:
        rows = self._tables["products"]
        if master_brand_id:
            rows = [r for r in rows if r.get("master_brand_id") == master_brand_id]
        return self._sorted(rows, "name")

    def get_product(self, product_id: str) -> Optional[Row]:
        return self._get("products", product_id)

    def create_product(self, values: Row) -> Row:
        return self.insert("products", values)

    def update_product(self, product_id: str, values: Row) -> Optional[Row]:
        return self._update("products", product_id, values)

    def delete_product(self, product_id: str) -> bool:
        with self._lock:
            deleted = self._delete_where("products", lambda row: row["id"] == product_id)
            if deleted:
                # product-level claims cascade with their product
                self._delete_where("claims", lambda row: row.get("product_id") == product_id)
            return deleted > 0

    # ── claims ───────────────────────────────────────────

    def list_claims(self, filters: Optional[Dict[str, str]] = None) -> List[Row]:
        rows = [
            r for r in self._tables["claims"]
            if all(r.get(column) == value for column, value in (filters or {}).items())
        ]
        return self._sorted(rows, "claim_text")

    def get_claim(self, claim_id: str) -> Optional[Row]:
        return self._get("claims", claim_id)

    def create_claim(self, values: Row) -> Row:
        return self.insert("claims", values)

    def update_claim(self, claim_id: str, values: Row) -> Optional[Row]:
        return self._update("claims", claim_id, values)

    def delete_claim(self, claim_id: str) -> int:
        return self._delete_where("claims", lambda row: row["id"] == claim_id)

    # ── content templates ────────────────────────────────

    def list_templates(self) -> List[Row]:
        return self._sorted(self._tables["content_templates"], "name")

    def get_template(self, template_id: str) -> Optional[Row]:
        return self._get("content_templates", template_id)

    def create_template(self, values: Row) -> Row:
        return self.insert("content_templates", values)

    def update_template(self, template_id: str, values: Row) -> Optional[Row]:
        return self._update("content_templates", template_id, values)

    def delete_template_and_update_content(self, template_id: str) -> None:
        with self._lock:
            if self._find_one("content_templates", "id", template_id) is None:
                raise NotFoundError(f"Template with ID {template_id} not found", code=RAISED_EXCEPTION)
            for row in self._tables["content"]:
                if row.get("template_id") == template_id:
                    row["template_id"] = None
            self._delete_where("content_templates", lambda row: row["id"] == template_id)

    # ── content ──────────────────────────────────────────

    def list_content(
        self,
        brand_ids: Optional[Collection[str]] = None,
        status: Optional[str] = None,
        query: Optional[str] = None,
    ) -> List[Row]:
        rows = self._tables["content"]
        if brand_ids is not None:
            wanted = set(brand_ids)
            rows = [r for r in rows if r.get("brand_id") in wanted]
        if status == "active":
            rows = [r for r in rows if r.get("status") not in ("approved", "rejected")]
        elif status in ("approved", "rejected"):
            rows = [r for r in rows if r.get("status") == status]
        if query:
            needle = query.lower()
            rows = [r for r in rows if needle in (r.get("title") or "").lower()]

        items = self._sorted(rows, "created_at", reverse=True)
        for item in items:
            brand = self._find_one("brands", "id", item.get("brand_id")) or {}
            item["brand_name"] = brand.get("name")
            item["brand_color"] = brand.get("brand_color")
        return items

    def get_content(self, content_id: str) -> Optional[Row]:
        return self._get("content", content_id)

    def delete_content(self, content_id: str) -> bool:
        return self._delete_where("content", lambda row: row["id"] == content_id) > 0

    # ── tool run history ─────────────────────────────────

    def record_tool_run(self, values: Row) -> None:
        self.insert("tool_run_history", values)
