import logging
from datetime import timedelta
from typing import Optional

import jwt
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from trafficdesk.core.config import settings
from trafficdesk.core.database import aget_db
from trafficdesk.core.exceptions import AuthenticationError, InvalidTokenError
from trafficdesk.models.base import utcnow
from trafficdesk.models.user import User

logger = logging.getLogger(__name__)


def create_jwt_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    issued_at = utcnow()
    expire = issued_at + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({
        "exp": expire,
        "iat": issued_at,
    })
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def create_access_token(user: User, expires_delta: Optional[timedelta] = None) -> str:
    # Only the id is trusted on the way back in; role is always re-read from storage
    return create_jwt_token({"sub": str(user.id)}, expires_delta)


def decode_jwt_token(token: str) -> dict:
    return jwt.decode(
        token,
        settings.SECRET_KEY,
        algorithms=[settings.ALGORITHM]
    )


def extract_token(request: Request) -> Optional[str]:
    """Bearer header first, then the auth cookie."""
    header = request.headers.get("Authorization")
    if header:
        scheme, _, credentials = header.partition(" ")
        if scheme.lower() == "bearer" and credentials:
            return credentials.strip()
    return request.cookies.get(settings.AUTH_COOKIE_NAME)


async def get_current_user(request: Request, db: AsyncSession = Depends(aget_db)) -> User:
    """Resolve the authenticated identity for this request."""
    token = extract_token(request)
    if not token:
        raise AuthenticationError()

    try:
        payload = decode_jwt_token(token)
        user_id = int(payload.get("sub"))
    except (jwt.PyJWTError, TypeError, ValueError) as exc:
        logger.info("Rejected token: %s", exc)
        raise InvalidTokenError()

    user = await db.get(User, user_id)
    if not user:
        raise InvalidTokenError()

    return user
