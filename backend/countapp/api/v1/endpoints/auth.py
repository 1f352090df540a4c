from fastapi import APIRouter, Depends, Request

from countapp.api.deps import get_user_service, storage_errors
from countapp.core.exceptions import AuthenticationError
from countapp.core.logging_config import logger, set_user_id, set_company_code
from countapp.core.rate_limiter import login_rate_limit
from countapp.core.security import TokenCodec, get_token_codec
from countapp.schemas.auth import (
    LoginRequest,
    LoginResponse,
    VerifyTokenRequest,
    VerifyTokenResponse,
)
from countapp.services.user_service import UserService


router = APIRouter()


@router.post("/login", response_model=LoginResponse)
@login_rate_limit()
async def login(
    request: Request,
    credentials: LoginRequest,
    service: UserService = Depends(get_user_service),
    codec: TokenCodec = Depends(get_token_codec),
):
    """Exchange company code, user ID and password for an access token"""
    with storage_errors("login", "An error occurred during login."):
        identity = await service.authenticate(
            credentials.company_code,
            credentials.user_id,
            credentials.password,
        )

    set_user_id(identity.id)
    set_company_code(identity.company_code)

    return LoginResponse(token=codec.issue(identity), user=identity)


@router.post("/verify-token", response_model=VerifyTokenResponse)
async def verify_token(
    body: VerifyTokenRequest,
    codec: TokenCodec = Depends(get_token_codec),
):
    """Check a token and return the identity it carries"""
    if not body.token:
        raise AuthenticationError("Authentication failed. No token was provided.")

    identity = codec.verify(body.token)
    logger.debug(f"Verified token for {identity.company_code}/{identity.id}")
    return VerifyTokenResponse(user=identity)
