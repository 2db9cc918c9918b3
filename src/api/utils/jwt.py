from datetime import UTC, datetime, timedelta
from typing import Optional

from jose import JWTError, jwt

from config import ApplicationConfig


def create_access_token(user_id: str, expires_delta: timedelta) -> str:
    """
    Create JWT access token with custom expiry

    Args:
        user_id: User ID
        expires_delta: Token expiration duration

    Returns:
        JWT token string (HS256)
    """
    now = datetime.now(UTC)
    payload = {
        "user_id": user_id,
        "exp": now + expires_delta,
        "iat": now,
    }
    return jwt.encode(payload, ApplicationConfig.JWT_SECRET, algorithm="HS256")


def generate_jwt(user_id: str) -> str:
    """Access token with the configured default lifetime"""
    return create_access_token(
        user_id,
        timedelta(minutes=int(ApplicationConfig.ACCESS_TOKEN_EXPIRES_MINUTES)),
    )


def verify_jwt(token: str) -> Optional[dict]:
    """
    Verify and decode JWT token

    Args:
        token: JWT token string

    Returns:
        Decoded payload dict or None if invalid
    """
    try:
        payload = jwt.decode(
            token, ApplicationConfig.JWT_SECRET, algorithms=["HS256"]
        )
    except JWTError:
        return None
    if "user_id" not in payload:
        return None
    return payload
