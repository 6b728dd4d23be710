"""
Current user schema
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel


class MeResponse(BaseModel):
    success: bool = True
    user: Dict[str, Any]
    profile: Optional[Dict[str, Any]] = None
    brand_permissions: List[Dict[str, Optional[str]]]
