"""User registration routes."""

from fastapi import APIRouter, Depends, Request

from api.v1.dependencies import get_auth_service
from api.v1.schemas.auth import RegisterRequest, TokenResponse
from api.v1.schemas.common import ErrorResponse
from core.rate_limit import WRITE_LIMIT, limiter
from domain.services.auth_service import AuthService

router = APIRouter(prefix="/users", tags=["users"])


@router.post(
    "",
    response_model=TokenResponse,
    summary="Register a user",
    responses={
        200: {"description": "User registered, token issued"},
        400: {"model": ErrorResponse, "description": "User already exists or invalid input"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def register_user(
    request: Request,
    body: RegisterRequest,
    service: AuthService = Depends(get_auth_service),
) -> TokenResponse:
    """Create an account. The avatar is taken from Gravatar."""
    token = await service.register(
        name=body.name,
        email=body.email,
        password=body.password,
    )
    return TokenResponse(token=token)
