"""
Claim Service - claim validation and visibility

A claim is attached to exactly one entity, chosen by its level:

    brand      -> master_brand_id
    product    -> product_id
    ingredient -> ingredient_id

Level and entity are fixed at creation; updates may only touch the text,
type, description and country.
"""

import logging
from typing import Any, Dict, List, Optional

from mixerai.permissions import PermissionResolver
from mixerai.users import AuthUser
from api.repositories.base import BaseRepository
from api.schemas.claims import CLAIM_LEVELS, CLAIM_TYPES

logger = logging.getLogger(__name__)

ENTITY_COLUMN_BY_LEVEL = {
    "brand": "master_brand_id",
    "product": "product_id",
    "ingredient": "ingredient_id",
}

LIST_FILTERS = ("level", "product_id", "master_brand_id", "country_code")


def _non_empty_string(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def validate_new_claim(body: Dict[str, Any], user_id: str) -> Dict[str, Any]:
    """
    Check a create request and build the claim row.

    Raises:
        ValueError: with the message returned to the client
    """
    if not _non_empty_string(body.get("claim_text")):
        raise ValueError("Claim text is required and must be a non-empty string.")
    if body.get("claim_type") not in CLAIM_TYPES:
        raise ValueError(f"claim_type must be one of: {', '.join(CLAIM_TYPES)}.")
    level = body.get("level")
    if level not in CLAIM_LEVELS:
        raise ValueError(f"level must be one of: {', '.join(CLAIM_LEVELS)}.")
    if not _non_empty_string(body.get("country_code")):
        raise ValueError("Country code is required and must be a non-empty string.")

    description = body.get("description")
    if description is not None and not isinstance(description, str):
        raise ValueError("Description must be a string or null.")

    entity_column = ENTITY_COLUMN_BY_LEVEL[level]
    if not _non_empty_string(body.get(entity_column)):
        raise ValueError(f"{entity_column} is required for {level}-level claims.")
    for other in ENTITY_COLUMN_BY_LEVEL.values():
        if other != entity_column and body.get(other):
            raise ValueError(f"{other} must not be set for {level}-level claims.")

    claim = {
        "claim_text": body["claim_text"].strip(),
        "claim_type": body["claim_type"],
        "level": level,
        "master_brand_id": None,
        "product_id": None,
        "ingredient_id": None,
        "country_code": body["country_code"].strip(),
        "description": description.strip() if isinstance(description, str) else None,
        "created_by": user_id,
    }
    claim[entity_column] = body[entity_column]
    return claim


def validate_claim_update(fields: Dict[str, Any]) -> Dict[str, Any]:
    """
    Build the column changes for a claim update from the fields sent.

    Raises:
        ValueError: invalid field or nothing to update
    """
    changes: Dict[str, Any] = {}

    if "claim_text" in fields:
        if not _non_empty_string(fields["claim_text"]):
            raise ValueError("Claim text must be a non-empty string.")
        changes["claim_text"] = fields["claim_text"].strip()

    if "claim_type" in fields:
        if fields["claim_type"] not in CLAIM_TYPES:
            raise ValueError("Invalid claim_type.")
        changes["claim_type"] = fields["claim_type"]

    if "description" in fields:
        description = fields["description"]
        if description is not None and not isinstance(description, str):
            raise ValueError("Description must be a string or null.")
        changes["description"] = None if description is None else description.strip()

    if "country_code" in fields:
        if not _non_empty_string(fields["country_code"]):
            raise ValueError("Country code must be a non-empty string.")
        changes["country_code"] = fields["country_code"].strip()

    if not changes:
        raise ValueError("No updatable fields provided.")
    return changes


def list_visible_claims(
    repo: BaseRepository,
    permissions: PermissionResolver,
    user: AuthUser,
    filters: Dict[str, Optional[str]],
) -> List[Dict[str, Any]]:
    level = filters.get("level")
    if level and level not in CLAIM_LEVELS:
        raise ValueError(f"level must be one of: {', '.join(CLAIM_LEVELS)}.")

    active_filters = {k: v for k, v in filters.items() if k in LIST_FILTERS and v}
    claims = repo.list_claims(active_filters)
    if user.is_global_admin:
        return claims
    return [claim for claim in claims if permissions.can_read_claim(user, claim)]
