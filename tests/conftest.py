"""
Traffic Offence Desk - Test Configuration and Fixtures
"""
import os

os.environ['ENVIRONMENT'] = 'testing'
os.environ['SECRET_KEY'] = 'test-secret-key-for-testing-only'
os.environ['DATABASE_URL'] = 'sqlite+aiosqlite:///./test.db'

from typing import AsyncGenerator, Callable, Dict

import pytest
from faker import Faker
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from trafficdesk.core.constants import OffenseType, UserRole
from trafficdesk.core.database import aget_db
from trafficdesk.core.security import create_access_token
from trafficdesk.main import app
from trafficdesk.models import Base, Driver, TrafficOffense, User
from trafficdesk.schemas.offense import OffenseCreate
from trafficdesk.services import offense_service

fake = Faker()

DRIVER_EMAIL = "a@x.com"
DRIVER_VEHICLE = "GR-1234-24"


@pytest.fixture
async def engine(tmp_path):
    """A fresh SQLite file per test"""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        connect_args={"check_same_thread": False},
        poolclass=NullPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Session used to build fixtures; operations under test get their own"""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """Test client with one session per request, as in production"""
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[aget_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url='http://test') as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session: AsyncSession) -> Callable:
    async def _make(role: UserRole, email: str = None) -> User:
        user = User(
            name=fake.name(),
            email=email or fake.unique.email(),
            password_hash='not-a-real-hash',
            role=role,
        )
        db_session.add(user)
        await db_session.commit()
        return user

    return _make


@pytest.fixture
async def officer(make_user) -> User:
    return await make_user(UserRole.OFFICER)


@pytest.fixture
async def superadmin(make_user) -> User:
    return await make_user(UserRole.SUPERADMIN)


@pytest.fixture
async def driver_user(make_user) -> User:
    return await make_user(UserRole.DRIVER, email=DRIVER_EMAIL)


@pytest.fixture
async def other_driver(make_user) -> User:
    return await make_user(UserRole.DRIVER, email="b@x.com")


@pytest.fixture
async def registered_driver(db_session: AsyncSession) -> Driver:
    driver = Driver(
        name=fake.name(),
        email=DRIVER_EMAIL,
        license_number=fake.bothify('DL-#######'),
        vehicle_number=DRIVER_VEHICLE,
        phone_number=fake.numerify('+233#########'),
        address=fake.address(),
        offence_count=0,
    )
    db_session.add(driver)
    await db_session.commit()
    return driver


@pytest.fixture
async def offense(session_factory, officer: User, registered_driver: Driver) -> TrafficOffense:
    """An Unpaid offense with a fine of 100 against a@x.com, recorded by an officer"""
    async with session_factory() as db:
        return await offense_service.create_offense(
            db,
            officer,
            OffenseCreate(
                vehicleNumber=DRIVER_VEHICLE,
                offenceType=OffenseType.SPEEDING,
                location="Ring Road Central",
                fine=100,
            ),
        )


def auth_headers(user: User) -> Dict[str, str]:
    return {'Authorization': f'Bearer {create_access_token(user)}'}


@pytest.fixture
def headers_for() -> Callable[[User], Dict[str, str]]:
    return auth_headers
