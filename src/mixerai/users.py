from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

GLOBAL_ADMIN_ROLE = "admin"
EDITOR_ROLE = "editor"
VIEWER_ROLE = "viewer"

# user_brand_permissions.role values that grant brand administration.
# "brand_admin" is the legacy spelling still present in older rows.
BRAND_ADMIN_ROLES = ("admin", "brand_admin")
BRAND_ADMIN_ROLE = "admin"


class AuthUser(BaseModel):
    """An authenticated user as reported by the auth provider."""

    id: str
    email: Optional[str] = None
    user_metadata: Dict[str, Any] = Field(default_factory=dict)
    app_metadata: Dict[str, Any] = Field(default_factory=dict)

    @property
    def role(self) -> Optional[str]:
        return self.user_metadata.get("role")

    @property
    def is_global_admin(self) -> bool:
        return self.role == GLOBAL_ADMIN_ROLE
