"""
Brand API Schemas - Request/response models for brand endpoints
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class BrandAdminInput(BaseModel):
    """A brand admin, identified by email"""

    email: str
    id: Optional[str] = None


class BrandWriteRequest(BaseModel):
    """
    Body of POST/PUT /brands.

    Only fields present in the body are written; explicit nulls clear a
    column. ``admins`` and ``selected_agency_ids`` are synchronised with
    the permission and agency link tables when present.
    """

    name: Optional[str] = None
    website_url: Optional[str] = None
    country: Optional[str] = None
    language: Optional[str] = None
    brand_identity: Optional[str] = None
    tone_of_voice: Optional[str] = None
    brand_summary: Optional[str] = None
    brand_color: Optional[str] = None
    approved_content_types: Optional[Any] = None
    guardrails: Optional[Any] = Field(
        default=None,
        description="List of guardrails, a JSON array string, or free text"
    )
    admins: Optional[List[BrandAdminInput]] = None
    selected_agency_ids: Optional[List[Any]] = Field(
        default=None,
        description="Agency UUIDs, or agency names resolved against the brand's country"
    )


class BrandListResponse(BaseModel):
    success: bool = True
    data: List[Dict[str, Any]]


class BrandResponse(BaseModel):
    success: bool = True
    brand: Dict[str, Any]


class ResponseMeta(BaseModel):
    source: str
    isFallback: bool = False
    requestId: str
    timestamp: str


class BrandDetailResponse(BaseModel):
    success: bool = True
    brand: Dict[str, Any]
    contentCount: int
    workflowCount: int
    meta: ResponseMeta


class MessageResponse(BaseModel):
    success: bool = True
    message: str
