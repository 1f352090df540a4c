from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from typing import Callable, Optional

from countapp.core.exceptions import AuthenticationError
from countapp.core.logging_config import set_user_id, set_company_code
from countapp.core.security import TokenCodec, get_token_codec
from countapp.modules.auth.policy import Operation, authorize
from countapp.schemas.auth import IdentityClaim

# Missing or non-Bearer headers reach get_current_identity as None
security = HTTPBearer(auto_error=False)


async def get_current_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    codec: TokenCodec = Depends(get_token_codec),
) -> IdentityClaim:
    """Identity claim of the caller, taken from the bearer token"""
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Authentication failed. No token was provided.")

    identity = codec.verify(credentials.credentials)

    set_user_id(identity.id)
    set_company_code(identity.company_code)
    return identity


def require(operation: Operation) -> Callable:
    """
    Dependency that authenticates the caller and checks the access policy.

    Usage:
        @router.get("/all")
        async def list_all(identity: IdentityClaim = Depends(require(Operation.RESULT_QUERY_ALL))):
            ...
    """
    async def dependency(identity: IdentityClaim = Depends(get_current_identity)) -> IdentityClaim:
        authorize(identity, operation)
        return identity

    return dependency
