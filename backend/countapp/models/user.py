from sqlalchemy import Column, String, DateTime, Enum as SQLEnum, Index
import enum

from countapp.core.database import Base
from countapp.core.types import GUID, generate_uuid, utc_now


class Role(str, enum.Enum):
    """User roles. Not ordered: each privileged role is listed explicitly wherever it is allowed."""
    SUPER = "super"
    MASTER = "master"
    SURVEYOR = "surveyor"


class User(Base):
    """User account. (company_code, user_id) is the login lookup key."""
    __tablename__ = "users"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False)
    user_id = Column(String(100), nullable=False)
    password_hash = Column(String(255), nullable=False)

    role = Column(SQLEnum(Role, values_callable=lambda e: [m.value for m in e]),
                  default=Role.SURVEYOR, nullable=False)
    company_code = Column(String(64), nullable=False, index=True)

    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, nullable=True)

    __table_args__ = (
        Index("ix_users_company_user", "company_code", "user_id"),
    )

    def __repr__(self):
        return f"<User {self.company_code}/{self.user_id}>"
