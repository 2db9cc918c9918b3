from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.utils.jwt import verify_jwt
from src.app.services.app_invite_options import AppInviteOptions

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

security = HTTPBearer()
optional_security = HTTPBearer(auto_error=False)


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


def get_app_invite_options(request: Request) -> AppInviteOptions:
    """Options the host passed to create_app"""
    return request.app.state.app_invite_options


def _decode_credentials(credentials: HTTPAuthorizationCredentials) -> dict:
    payload = verify_jwt(credentials.credentials)

    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )

    return payload


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> dict:
    """
    Dependency to extract and verify JWT token from Authorization header.

    Args:
        credentials: Bearer token from Authorization header

    Returns:
        Decoded JWT payload containing user_id

    Raises:
        HTTPException: 401 if token is invalid or expired
    """
    return _decode_credentials(credentials)


async def get_optional_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(optional_security),
) -> Optional[dict]:
    """
    Like get_current_user, but anonymous callers get None.

    A token that is present but invalid is still rejected with 401.
    """
    if credentials is None:
        return None
    return _decode_credentials(credentials)
