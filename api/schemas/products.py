"""
Product API Schemas

Request fields are typed loosely so the services can answer with
field-specific validation messages.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel


class ProductCreateRequest(BaseModel):
    name: Optional[Any] = None
    description: Optional[Any] = None
    master_brand_id: Optional[Any] = None


class ProductUpdateRequest(BaseModel):
    name: Optional[Any] = None
    description: Optional[Any] = None


class ProductListResponse(BaseModel):
    success: bool = True
    data: List[Dict[str, Any]]


class ProductResponse(BaseModel):
    success: bool = True
    data: Dict[str, Any]
