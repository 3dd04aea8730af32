"""
Authentication endpoints.
"""

from fastapi import APIRouter, HTTPException, status

from cogni.api.deps import CurrentUser, Platform
from cogni.domain.errors import AuthFailure
from cogni.domain.user import User
from cogni.kernel.identity.jwt import get_jwt_manager
from cogni.schemas.auth import LoginRequest, RegisterRequest, TokenResponse
from cogni.schemas.common import SuccessResponse

router = APIRouter()


def _token_for(user: User) -> TokenResponse:
    token, expires_at = get_jwt_manager().create_access_token(
        user_id=user.id,
        email=user.email,
        role=user.role.value,
    )
    return TokenResponse(access_token=token, expires_at=expires_at, user=user)


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def register(data: RegisterRequest, platform: Platform):
    """
    Register a new account.

    Citizens start unassessed and must take the placement exam first.
    """
    user = await platform.register(
        name=data.name,
        email=data.email,
        password=data.password,
        role=data.role,
    )
    return _token_for(user)


@router.post("/login", response_model=TokenResponse)
async def login(data: LoginRequest, platform: Platform):
    """Authenticate and return an access token."""
    result = await platform.authenticate(data.email, data.password)
    if isinstance(result, AuthFailure):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )
    return _token_for(result)


@router.post("/logout", response_model=SuccessResponse)
async def logout(user: CurrentUser, platform: Platform):
    await platform.sign_out()
    return SuccessResponse(message="Signed out")


@router.get("/me", response_model=User)
async def get_me(user: CurrentUser):
    """Current user profile, including level and score history."""
    return user
