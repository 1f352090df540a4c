from typing import Optional

from countapp.models.user import Role
from countapp.schemas.base import CamelModel


class IdentityClaim(CamelModel):
    """Identity carried verbatim inside a signed access token"""
    id: str
    name: str
    role: Role
    company_code: str

    @property
    def is_super(self) -> bool:
        return self.role == Role.SUPER


class LoginRequest(CamelModel):
    company_code: Optional[str] = None
    user_id: Optional[str] = None
    password: Optional[str] = None


class LoginResponse(CamelModel):
    token: str
    user: IdentityClaim


class VerifyTokenRequest(CamelModel):
    token: Optional[str] = None


class VerifyTokenResponse(CamelModel):
    user: IdentityClaim
