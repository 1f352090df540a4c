"""
User Service - login and account management
"""

from typing import List, Optional

from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from countapp.core.exceptions import (
    ValidationError,
    AuthenticationError,
    AuthorizationError,
    UserNotFoundError,
)
from countapp.core.logging_config import logger
from countapp.core.security import verify_password, get_password_hash
from countapp.core.types import utc_now
from countapp.models.user import User, Role
from countapp.modules.auth.tenancy import scoped, company_code_for_user
from countapp.schemas.auth import IdentityClaim
from countapp.schemas.user import UserCreate, UserUpdate

# One message for unknown user and wrong password
INVALID_CREDENTIALS = "ID or password is incorrect."


def identity_for(user: User) -> IdentityClaim:
    """Identity claim embedded in tokens issued for ``user``"""
    return IdentityClaim(
        id=user.id,
        name=user.name,
        role=user.role,
        company_code=user.company_code,
    )


class UserService:
    """Service for authenticating and managing user accounts"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def authenticate(
        self,
        company_code: Optional[str],
        user_id: Optional[str],
        password: Optional[str],
    ) -> IdentityClaim:
        """
        Check login credentials and return the identity to put in a token.

        Raises:
            ValidationError: a credential field is missing
            AuthenticationError: unknown user or wrong password
        """
        if not company_code or not user_id or not password:
            raise ValidationError("Please fill in the company code, user ID and password.")

        result = await self.db.execute(
            select(User)
            .where(User.company_code == company_code, User.user_id == user_id)
            .limit(1)
        )
        user = result.scalar_one_or_none()

        if user is None:
            logger.log_auth_event("login", False, user_id=user_id,
                                  company_code=company_code, reason="unknown user")
            raise AuthenticationError(INVALID_CREDENTIALS)

        if not verify_password(password, user.password_hash):
            logger.log_auth_event("login", False, user_id=user_id,
                                  company_code=company_code, reason="wrong password")
            raise AuthenticationError(INVALID_CREDENTIALS)

        logger.log_auth_event("login", True, user_id=user_id, company_code=company_code)
        return identity_for(user)

    async def list(self, identity: IdentityClaim) -> List[User]:
        statement = select(User).order_by(User.company_code.asc(), User.created_at.asc())
        result = await self.db.execute(scoped(statement, identity, User))
        return list(result.scalars().all())

    async def create(self, identity: IdentityClaim, data: UserCreate) -> User:
        name = (data.name or "").strip()
        user_id = (data.user_id or "").strip()
        if not name or not user_id or not data.password or data.role is None:
            raise ValidationError("Please fill in the name, user ID, password and role.")

        self._check_role_grant(identity, data.role)
        company_code = company_code_for_user(identity, data.company_code)

        user = User(
            name=name,
            user_id=user_id,
            password_hash=get_password_hash(data.password),
            role=data.role,
            company_code=company_code,
            created_at=utc_now(),
        )
        self.db.add(user)
        await self.db.commit()
        await self.db.refresh(user)

        logger.info(f"Created user {company_code}/{user_id} with role {data.role.value}")
        return user

    async def update(self, identity: IdentityClaim, user_pk: str, data: UserUpdate) -> User:
        """Apply the given fields; fields left out keep their value"""
        user = await self._get(identity, user_pk)
        if user.role == Role.SUPER and not identity.is_super:
            raise AuthorizationError("Only a super user can modify a super account.")

        if data.role is not None:
            self._check_role_grant(identity, data.role)
            user.role = data.role
        if data.company_code is not None:
            company_code = data.company_code.strip()
            if not company_code:
                raise ValidationError("The company code cannot be empty.", field="companyCode")
            if company_code != user.company_code:
                if not identity.is_super:
                    raise AuthorizationError("You cannot assign a company code other than your own.")
                user.company_code = company_code

        if data.name is not None:
            if not data.name.strip():
                raise ValidationError("The name cannot be empty.", field="name")
            user.name = data.name.strip()
        if data.user_id is not None:
            if not data.user_id.strip():
                raise ValidationError("The user ID cannot be empty.", field="userId")
            user.user_id = data.user_id.strip()
        if data.password:
            user.password_hash = get_password_hash(data.password)

        user.updated_at = utc_now()
        await self.db.commit()
        await self.db.refresh(user)

        logger.info(f"Updated user {user.id}")
        return user

    async def delete_many(self, identity: IdentityClaim, ids: Optional[List[str]]) -> int:
        """
        Delete accounts by id as one batch.

        A batch that contains the caller's own account, or a super account
        when the caller is not super, is refused as a whole.
        """
        if not ids:
            raise ValidationError("Please specify the IDs to delete.", field="ids")
        if identity.id in ids:
            raise AuthorizationError("You cannot delete your own account.")
        await self._refuse_super_targets(identity, ids)

        statement = delete(User).where(User.id.in_(ids))
        result = await self.db.execute(scoped(statement, identity, User))
        await self.db.commit()

        logger.info(f"Deleted {result.rowcount} user(s) of {len(ids)} requested")
        return result.rowcount

    async def delete_one(self, identity: IdentityClaim, user_pk: str) -> None:
        if identity.id == user_pk:
            raise AuthorizationError("You cannot delete your own account.")
        await self._refuse_super_targets(identity, [user_pk])

        statement = delete(User).where(User.id == user_pk)
        result = await self.db.execute(scoped(statement, identity, User))
        if result.rowcount == 0:
            await self.db.rollback()
            raise UserNotFoundError(user_pk)

        await self.db.commit()
        logger.info(f"Deleted user {user_pk}")

    @staticmethod
    def _check_role_grant(identity: IdentityClaim, role: Role) -> None:
        if role == Role.SUPER and not identity.is_super:
            raise AuthorizationError("Only a super user can grant the super role.")

    async def _refuse_super_targets(self, identity: IdentityClaim, ids: List[str]) -> None:
        if identity.is_super:
            return

        statement = select(User.id).where(User.id.in_(ids), User.role == Role.SUPER).limit(1)
        result = await self.db.execute(scoped(statement, identity, User))
        if result.scalar_one_or_none() is not None:
            raise AuthorizationError("Only a super user can delete a super account.")

    async def _get(self, identity: IdentityClaim, user_pk: str) -> User:
        statement = select(User).where(User.id == user_pk)
        result = await self.db.execute(scoped(statement, identity, User))
        user = result.scalar_one_or_none()
        if user is None:
            raise UserNotFoundError(user_pk)
        return user
