"""
Master Claim Brand API Schemas
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class MasterClaimBrandCreateRequest(BaseModel):
    name: Optional[Any] = None
    mixerai_brand_id: Optional[str] = Field(
        default=None,
        description="Core brand this claims-side brand belongs to"
    )


class MasterClaimBrandListResponse(BaseModel):
    success: bool = True
    data: List[Dict[str, Any]]


class MasterClaimBrandResponse(BaseModel):
    success: bool = True
    data: Dict[str, Any]
