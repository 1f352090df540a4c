from datetime import timedelta
from functools import lru_cache
from typing import Optional
from jose import ExpiredSignatureError, JWTError, jwt
from pydantic import ValidationError as PydanticValidationError
import bcrypt

from countapp.core.config import settings
from countapp.core.exceptions import InvalidTokenError, TokenExpiredError
from countapp.core.types import utc_now
from countapp.schemas.auth import IdentityClaim


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password"""
    # Bcrypt has a 72 byte limit - truncate password if necessary
    password_bytes = plain_password.encode('utf-8')[:72]
    return bcrypt.checkpw(password_bytes, hashed_password.encode('utf-8'))


def get_password_hash(password: str) -> str:
    """Hash password with configurable rounds (BCRYPT_ROUNDS in .env)"""
    password_bytes = password.encode('utf-8')[:72]
    hashed = bcrypt.hashpw(password_bytes, bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS))
    return hashed.decode('utf-8')


class TokenCodec:
    """
    Signs and verifies access tokens.

    The secret is fixed for the lifetime of the codec; a codec is built once
    from settings (see ``get_token_codec``) and handed to whoever needs it.
    """

    TOKEN_TYPE = "access"

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        expires_delta: timedelta = timedelta(hours=8),
    ):
        self._secret_key = secret_key
        self.algorithm = algorithm
        self.expires_delta = expires_delta

    def issue(self, claim: IdentityClaim, expires_delta: Optional[timedelta] = None) -> str:
        """Create a signed token carrying ``claim``"""
        to_encode = claim.model_dump(by_alias=True, mode="json")
        expire = utc_now() + (expires_delta or self.expires_delta)
        to_encode.update({"exp": expire, "type": self.TOKEN_TYPE})
        return jwt.encode(to_encode, self._secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> IdentityClaim:
        """
        Decode ``token`` and return its identity claim.

        Raises:
            TokenExpiredError: the token is past its expiry
            InvalidTokenError: bad signature, malformed token or claim shape
        """
        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[self.algorithm])
        except ExpiredSignatureError:
            raise TokenExpiredError()
        except JWTError:
            raise InvalidTokenError()

        if payload.get("type") != self.TOKEN_TYPE:
            raise InvalidTokenError("Authentication failed. Invalid token type.")

        try:
            return IdentityClaim.model_validate(payload)
        except PydanticValidationError:
            raise InvalidTokenError("Authentication failed. Invalid token payload.")


@lru_cache
def get_token_codec() -> TokenCodec:
    """Token codec built from process configuration"""
    return TokenCodec(
        secret_key=settings.JWT_SECRET_KEY,
        algorithm=settings.JWT_ALGORITHM,
        expires_delta=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    )
