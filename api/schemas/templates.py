"""
Content Template API Schemas
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class TemplateWriteRequest(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    icon: Optional[str] = None
    brand_id: Optional[str] = None
    inputFields: Optional[List[Dict[str, Any]]] = Field(
        default=None,
        description="Field definitions the user fills in"
    )
    outputFields: Optional[List[Dict[str, Any]]] = Field(
        default=None,
        description="Field definitions the AI generates"
    )


class TemplateListResponse(BaseModel):
    success: bool = True
    templates: List[Dict[str, Any]]


class TemplateResponse(BaseModel):
    success: bool = True
    template: Dict[str, Any]
