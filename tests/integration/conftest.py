import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.utils.jwt import generate_jwt
from src.app.services.app_invite_options import AppInviteOptions
from src.app.services.invitation_email import LoggingInvitationEmailSender
from src.depends import get_unit_of_work
from src.domain.entities import User
from tests.fixtures.json_loader import TestDataLoader


@pytest.fixture
def test_data():
    return TestDataLoader()


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def email_sender():
    return LoggingInvitationEmailSender()


@pytest.fixture
def app_invite_options(email_sender):
    return AppInviteOptions(
        send_invitation_email=email_sender,
        invitation_accept_url="https://app.example.com/accept-invitation/{invitation_id}",
    )


@pytest_asyncio.fixture
async def client(session_factory, app_invite_options):
    from src.api.app import create_app

    app = create_app(ApplicationConfig, app_invite_options)

    # Fresh session per request, like the real dependency
    async def override_get_unit_of_work():
        async with session_factory() as session:
            yield SqlAlchemyUnitOfWork(session)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def create_user(session_factory):
    """Insert a user and return (user, auth headers)"""

    async def _create_user(email: str, name: str = None):
        async with session_factory() as session:
            user = User(email=email, name=name, email_verified=True)
            session.add(user)
            await session.commit()
            await session.refresh(user)
        headers = {"Authorization": f"Bearer {generate_jwt(user.id)}"}
        return user, headers

    return _create_user


@pytest.fixture
def fetch_invitation(session_factory):
    """Read an invitation back through a fresh session"""
    from src.domain.entities import AppInvitation

    async def _fetch(invitation_id: str):
        async with session_factory() as session:
            return await session.get(AppInvitation, invitation_id)

    return _fetch


@pytest.fixture
def expire_invitation(session_factory):
    """Move an invitation's expiry into the past without touching its status"""
    from datetime import timedelta

    from src.domain.base import utc_now
    from src.domain.entities import AppInvitation

    async def _expire(invitation_id: str):
        async with session_factory() as session:
            invitation = await session.get(AppInvitation, invitation_id)
            invitation.expires_at = utc_now() - timedelta(minutes=1)
            session.add(invitation)
            await session.commit()

    return _expire
