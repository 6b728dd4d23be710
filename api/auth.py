"""
Authentication dependencies.

Access tokens are issued by Supabase Auth and arrive either as
``Authorization: Bearer <jwt>`` or in the auth cookie. Verification is
delegated to the auth provider through the repository.
"""

import logging
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from mixerai.settings import Settings
from mixerai.users import AuthUser
from api.dependencies import get_app_settings, get_repository
from api.repositories.base import BaseRepository

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)

FORBIDDEN_MESSAGE = "Forbidden: You do not have permission to access this resource."


def get_client_ip(request: Request) -> str:
    """First X-Forwarded-For entry, else the peer address, else "unknown"."""
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        ip = forwarded_for.split(",")[0].strip()
        if ip:
            return ip
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


def extract_token(request: Request,
                  credentials: Optional[HTTPAuthorizationCredentials],
                  cookie_name: str) -> Optional[str]:
    if credentials and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(cookie_name) or None


def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    repo: BaseRepository = Depends(get_repository),
    settings: Settings = Depends(get_app_settings),
) -> AuthUser:
    """
    Resolve the calling user.

    Raises:
        HTTPException: 401 when the token is missing, invalid or expired
    """
    token = extract_token(request, credentials, settings.auth_cookie_name)
    if not token:
        logger.info(f"Unauthenticated request to {request.url.path} from {get_client_ip(request)}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")

    user = repo.get_user_for_token(token)
    if user is None:
        logger.info(f"Invalid token for {request.url.path} from {get_client_ip(request)}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")

    logger.debug(f"Authenticated user: {user.id}")
    return user


def require_roles(*roles: str, message: str = FORBIDDEN_MESSAGE):
    """
    Dependency factory restricting a route to users whose global role is
    one of ``roles``.

    Usage:
        @router.post("/x")
        def x(user: AuthUser = Depends(require_roles("admin"))):
            ...
    """

    def dependency(user: AuthUser = Depends(get_current_user)) -> AuthUser:
        if user.role not in roles:
            logger.warning(f"User {user.id} with role {user.role!r} denied; requires one of {roles}")
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=message)
        return user

    return dependency
