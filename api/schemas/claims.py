"""
Claim API Schemas
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel

CLAIM_TYPES = ("allowed", "disallowed", "mandatory")
CLAIM_LEVELS = ("brand", "product", "ingredient")


class ClaimCreateRequest(BaseModel):
    claim_text: Optional[Any] = None
    claim_type: Optional[Any] = None
    level: Optional[Any] = None
    master_brand_id: Optional[Any] = None
    product_id: Optional[Any] = None
    ingredient_id: Optional[Any] = None
    country_code: Optional[Any] = None
    description: Optional[Any] = None


class ClaimUpdateRequest(BaseModel):
    """Level and entity ids are immutable; unknown keys are ignored."""

    claim_text: Optional[Any] = None
    claim_type: Optional[Any] = None
    description: Optional[Any] = None
    country_code: Optional[Any] = None


class ClaimListResponse(BaseModel):
    success: bool = True
    data: List[Dict[str, Any]]


class ClaimResponse(BaseModel):
    success: bool = True
    data: Dict[str, Any]
