"""
AI API Schemas - copywriting endpoints
"""

from typing import Any, List, Optional

from pydantic import BaseModel, Field


class WorkflowDescriptionRequest(BaseModel):
    workflowName: str = Field(..., min_length=1, description="Name of the workflow")
    brandName: Optional[str] = None
    templateName: Optional[str] = None
    stepNames: Optional[List[str]] = None
    brandCountry: Optional[str] = None
    brandLanguage: Optional[str] = None


class TemplateDescriptionRequest(BaseModel):
    templateName: str = Field(..., min_length=1)
    inputFields: List[str] = Field(default_factory=list, description="Input field names")
    outputFields: List[str] = Field(default_factory=list, description="Output field names")


class DescriptionResponse(BaseModel):
    success: bool = True
    description: str


class ArticleTitlesRequest(BaseModel):
    topic: Optional[Any] = None
    brand_id: Optional[str] = None


class ArticleTitlesResponse(BaseModel):
    success: bool = True
    suggestions: List[str]
