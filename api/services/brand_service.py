"""
Brand Service - brand CRUD with admin and vetting agency synchronisation

Keeps ``user_brand_permissions`` (brand admins) and
``brand_selected_agencies`` consistent with what the client submitted.
The store offers no multi-statement transactions here, so each sync is a
delete-then-insert sequence; the cascading delete runs as one RPC.
"""

import logging
from typing import Any, Dict, List, Optional

from mixerai.brand_fields import build_brand_changes, shape_selected_agencies
from mixerai.exceptions import RepositoryError
from mixerai.users import AuthUser, BRAND_ADMIN_ROLE, BRAND_ADMIN_ROLES, EDITOR_ROLE
from mixerai.utils.url_utils import is_uuid
from api.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class CascadeRequiredError(ValueError):
    """Brand still has content or workflows and no cascade was requested"""

    def __init__(self, content_count: int, workflow_count: int):
        self.content_count = content_count
        self.workflow_count = workflow_count
        super().__init__(
            f"Cannot delete brand. It has {content_count} piece{'' if content_count == 1 else 's'} "
            f"of content and {workflow_count} workflow{'' if workflow_count == 1 else 's'} associated. "
            "Use deleteCascade=true to override."
        )


def list_brands(repo: BaseRepository, accessible_ids: Optional[set]) -> List[Dict[str, Any]]:
    """All brands for global admins (``accessible_ids`` None), else the permitted ones."""
    return repo.list_brands(accessible_ids)


def brand_admin_profiles(repo: BaseRepository, brand_id: str) -> List[Dict[str, Any]]:
    members = repo.list_brand_members(brand_id, BRAND_ADMIN_ROLES)
    return [m["profile"] for m in members if m.get("profile")]


def with_agencies(repo: BaseRepository, brand: Dict[str, Any]) -> Dict[str, Any]:
    brand["selected_vetting_agencies"] = shape_selected_agencies(repo.get_selected_agencies(brand["id"]))
    return brand


def get_brand_detail(repo: BaseRepository, brand_id: str) -> Optional[Dict[str, Any]]:
    """
    Brand with its agencies, admins and dependent counts.

    Returns:
        {"brand", "contentCount", "workflowCount"} or None when missing
    """
    brand = repo.get_brand(brand_id)
    if brand is None:
        return None

    with_agencies(repo, brand)
    brand["admins"] = brand_admin_profiles(repo, brand_id)
    return {
        "brand": brand,
        "contentCount": repo.count_brand_content(brand_id),
        "workflowCount": repo.count_brand_workflows(brand_id),
    }


def create_brand(repo: BaseRepository, user: AuthUser, fields: Dict[str, Any]) -> Dict[str, Any]:
    """
    Insert a brand, then link agencies and admins if given.

    Raises:
        ValueError: missing name
    """
    name = fields.get("name")
    if not name or not str(name).strip():
        raise ValueError("Brand name is required")

    brand_fields = {k: v for k, v in fields.items() if k not in ("admins", "selected_agency_ids")}
    brand_fields["name"] = str(name).strip()
    brand = repo.create_brand(build_brand_changes(brand_fields))
    logger.info(f"User {user.id} created brand {brand['id']} ({brand['name']})")

    if fields.get("selected_agency_ids"):
        replace_selected_agencies(repo, brand["id"], fields["selected_agency_ids"], brand.get("country"))
    if fields.get("admins"):
        sync_brand_admins(repo, brand["id"], [a["email"] for a in fields["admins"]])
    return with_agencies(repo, brand)


def update_brand(repo: BaseRepository, brand: Dict[str, Any], fields: Dict[str, Any], now: str) -> Optional[Dict[str, Any]]:
    """
    Apply a partial update to an existing brand.

    Args:
        brand: Current brand row
        fields: Only the keys the client sent
        now: ISO timestamp for updated_at

    Returns:
        The refreshed brand with ``selected_vetting_agencies``, or None
        when the brand disappeared meanwhile
    """
    brand_id = brand["id"]

    if fields.get("admins") is not None:
        sync_brand_admins(repo, brand_id, [a["email"] for a in fields["admins"]])

    brand_fields = {k: v for k, v in fields.items() if k not in ("admins", "selected_agency_ids")}
    changes = build_brand_changes(brand_fields)
    if changes:
        changes["updated_at"] = now
        updated = repo.update_brand(brand_id, changes)
    else:
        updated = repo.get_brand(brand_id)
    if updated is None:
        return None

    if "selected_agency_ids" in fields:
        country = updated.get("country") or fields.get("country")
        replace_selected_agencies(repo, brand_id, fields.get("selected_agency_ids") or [], country)

    return with_agencies(repo, updated)


def sync_brand_admins(repo: BaseRepository, brand_id: str, emails: List[str]) -> None:
    """
    Make the brand's admin set match ``emails``.

    Admins whose email is not listed lose the role; unknown addresses are
    invited. A failure for one address is logged and skipped.
    """
    wanted = [e.strip().lower() for e in emails if e and e.strip()]
    current = repo.list_brand_members(brand_id, BRAND_ADMIN_ROLES)

    current_emails = {
        (m["profile"] or {}).get("email", "").lower(): m["user_id"]
        for m in current
        if m.get("profile") and m["profile"].get("email")
    }

    to_remove = [user_id for email, user_id in current_emails.items() if email not in wanted]
    if to_remove:
        logger.info(f"Removing {len(to_remove)} admin(s) from brand {brand_id}")
        repo.remove_brand_permissions(brand_id, to_remove, BRAND_ADMIN_ROLES)

    upserts = []
    for email in wanted:
        if email in current_emails:
            continue
        try:
            user = repo.get_user_by_email(email)
        except Exception as e:
            logger.error(f"Error looking up user {email} for brand {brand_id}: {e}")
            continue

        if user is None:
            try:
                user = repo.invite_user(email, {
                    "role": EDITOR_ROLE,
                    "invited_to_brand": brand_id,
                    "invited_as_brand_role": BRAND_ADMIN_ROLE,
                })
                logger.info(f"Invited {email} as admin of brand {brand_id}")
            except Exception as e:
                logger.error(f"Failed to invite {email} to brand {brand_id}: {e}")
                continue

        upserts.append({"user_id": user.id, "brand_id": brand_id, "role": BRAND_ADMIN_ROLE})

    if upserts:
        repo.upsert_brand_permissions(upserts)


def resolve_agency_ids(repo: BaseRepository, submitted: List[Any], country: Optional[str]) -> List[str]:
    """
    Turn submitted agency references into agency ids.

    When the first entry looks like a UUID every entry is treated as an
    id (invalid ones dropped); otherwise entries are agency names looked
    up among the agencies of the brand's country.
    """
    if not submitted:
        return []

    if is_uuid(submitted[0]):
        resolved = []
        for agency_id in submitted:
            if is_uuid(agency_id):
                resolved.append(agency_id)
            else:
                logger.warning(f"Skipping agency id {agency_id!r}: not a UUID")
        return resolved

    if not country:
        logger.warning("Cannot resolve agency names without a brand country")
        return []

    names = [str(n) for n in submitted]
    try:
        found = repo.find_agencies_by_name(names, country)
    except RepositoryError as e:
        logger.error(f"Error fetching agencies by name for {country}: {e}")
        return []

    name_to_id = {a["name"]: a["id"] for a in found}
    resolved = []
    for name in names:
        if name in name_to_id:
            resolved.append(name_to_id[name])
        else:
            logger.warning(f"Agency {name!r} not found for country {country}, skipping")
    return resolved


def replace_selected_agencies(repo: BaseRepository, brand_id: str, submitted: List[Any], country: Optional[str]) -> None:
    repo.clear_selected_agencies(brand_id)
    agency_ids = list(dict.fromkeys(resolve_agency_ids(repo, submitted, country)))
    if agency_ids:
        repo.add_selected_agencies(brand_id, agency_ids)
        logger.info(f"Linked {len(agency_ids)} agencies to brand {brand_id}")
    else:
        logger.info(f"No agencies linked to brand {brand_id}")


def delete_brand(repo: BaseRepository, brand: Dict[str, Any], cascade: bool) -> None:
    """
    Delete a brand and its dependents through the database RPC.

    Raises:
        CascadeRequiredError: dependents exist and ``cascade`` is False
        NotFoundError: the RPC no longer found the brand
    """
    brand_id = brand["id"]
    if not cascade:
        content_count = repo.count_brand_content(brand_id)
        workflow_count = repo.count_brand_workflows(brand_id)
        if content_count > 0 or workflow_count > 0:
            raise CascadeRequiredError(content_count, workflow_count)

    repo.delete_brand_and_dependents(brand_id)
    logger.info(f"Brand {brand_id} ({brand.get('name')}) deleted (cascade={cascade})")
