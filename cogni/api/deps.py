"""
FastAPI dependencies for authentication, authorization and the platform.
"""

from typing import Annotated, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from cogni.domain.errors import NotFoundError
from cogni.domain.user import User, UserRole
from cogni.kernel.identity.jwt import get_jwt_manager
from cogni.services.platform import LearningPlatform


# Security scheme
security = HTTPBearer(auto_error=False)


def get_platform(request: Request) -> LearningPlatform:
    """The platform instance built at startup."""
    platform = getattr(request.app.state, "platform", None)
    if platform is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Platform not initialized",
        )
    return platform


Platform = Annotated[LearningPlatform, Depends(get_platform)]


async def get_current_user(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
    platform: Platform,
) -> User:
    """Get current authenticated user or raise 401."""
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    payload = get_jwt_manager().verify_access_token(credentials.credentials)
    if not payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        return platform.get_user(payload.sub)
    except NotFoundError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )


CurrentUser = Annotated[User, Depends(get_current_user)]


async def require_privileged(user: CurrentUser) -> User:
    """Require a teacher or admin."""
    if not user.is_privileged:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Teacher or admin access required",
        )
    return user


async def require_admin(user: CurrentUser) -> User:
    """Require the current user to be an admin."""
    if user.role != UserRole.ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return user


PrivilegedUser = Annotated[User, Depends(require_privileged)]
AdminUser = Annotated[User, Depends(require_admin)]
