"""
Tool API Schemas - bulk alt text and metadata generators
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class AltTextRequest(BaseModel):
    imageUrls: Optional[Any] = Field(default=None, description="Image URLs (http(s) or data URLs)")
    language: Optional[str] = Field(default=None, description="Forces the output language")


class MetadataRequest(BaseModel):
    urls: Optional[Any] = Field(default=None, description="Page URLs")
    language: Optional[str] = None


class ToolRunResponse(BaseModel):
    success: bool
    userId: str
    results: List[Dict[str, Any]]
    error: Optional[str] = None
