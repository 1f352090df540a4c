"""
Count App - Test Configuration and Fixtures
"""
import os
from typing import AsyncGenerator, Awaitable, Callable, Dict, Optional

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import NullPool
from faker import Faker

# Set testing environment
os.environ['DATABASE_URL'] = 'sqlite+aiosqlite:///./test.db'
os.environ['JWT_SECRET_KEY'] = 'test-jwt-secret-key-for-testing'
os.environ['BCRYPT_ROUNDS'] = '4'
os.environ['RATE_LIMIT_ENABLED'] = 'false'
os.environ['LOG_FILE'] = ''

from countapp.main import app
from countapp.core.database import Base, get_db
from countapp.core.security import get_password_hash, get_token_codec
from countapp.models.user import User, Role
from countapp.schemas.auth import IdentityClaim
from countapp.services.user_service import identity_for

fake = Faker()

PASSWORD = 'testpassword123'
COMPANY_A = 'ACME'
COMPANY_B = 'GLOBEX'

# Test database setup
TEST_DATABASE_URL = 'sqlite+aiosqlite:///./test.db'
# NullPool: each test runs on its own event loop
test_engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=NullPool)
TestSessionLocal = async_sessionmaker(
    bind=test_engine,
    class_=AsyncSession,
    expire_on_commit=False
)


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a fresh database session for each test"""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        yield session
        await session.rollback()

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with database override"""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url='http://test') as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def create_user(db_session: AsyncSession) -> Callable[..., Awaitable[IdentityClaim]]:
    """
    Factory that stores a user and returns its identity claim.

    The claim is a plain pydantic object, so it stays usable after a service
    rolls the shared session back.
    """
    async def _create(role: Role, company_code: str, user_id: Optional[str] = None) -> IdentityClaim:
        user = User(
            name=fake.name(),
            user_id=user_id or fake.user_name(),
            password_hash=get_password_hash(PASSWORD),
            role=role,
            company_code=company_code,
        )
        db_session.add(user)
        await db_session.commit()
        await db_session.refresh(user)
        return identity_for(user)

    return _create


@pytest_asyncio.fixture
async def surveyor(create_user) -> IdentityClaim:
    return await create_user(Role.SURVEYOR, COMPANY_A)


@pytest_asyncio.fixture
async def master(create_user) -> IdentityClaim:
    return await create_user(Role.MASTER, COMPANY_A)


@pytest_asyncio.fixture
async def super_user(create_user) -> IdentityClaim:
    return await create_user(Role.SUPER, 'HQ')


@pytest_asyncio.fixture
async def other_surveyor(create_user) -> IdentityClaim:
    return await create_user(Role.SURVEYOR, COMPANY_B)


@pytest_asyncio.fixture
async def other_master(create_user) -> IdentityClaim:
    return await create_user(Role.MASTER, COMPANY_B)


def headers_for(identity: IdentityClaim) -> Dict[str, str]:
    """Bearer header carrying a token for ``identity``"""
    token = get_token_codec().issue(identity)
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def auth_headers() -> Callable[[IdentityClaim], Dict[str, str]]:
    return headers_for
