"""
Content API Schemas
"""

from typing import Any, Dict, List

from pydantic import BaseModel


class ContentListResponse(BaseModel):
    success: bool = True
    data: List[Dict[str, Any]]
