"""
Me Router - the authenticated user, their profile and brand permissions
"""

from fastapi import APIRouter, Depends

from mixerai.users import AuthUser
from api.auth import get_current_user
from api.dependencies import get_repository
from api.repositories.base import BaseRepository
from api.schemas.me import MeResponse

router = APIRouter()


@router.get("/me", response_model=MeResponse)
def get_me(
    user: AuthUser = Depends(get_current_user),
    repo: BaseRepository = Depends(get_repository),
) -> MeResponse:
    profiles = repo.get_profiles([user.id])
    permissions = repo.get_brand_permissions(user.id)
    return MeResponse(
        user={"id": user.id, "email": user.email, "user_metadata": user.user_metadata},
        profile=profiles[0] if profiles else None,
        brand_permissions=[{"brand_id": p["brand_id"], "role": p.get("role")} for p in permissions],
    )
