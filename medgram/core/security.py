from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from uuid import UUID
import uuid

import jwt
from passlib.context import CryptContext

from medgram.core.config import Settings
from medgram.core.exceptions import InvalidTokenError
from medgram.models.user import UserRole


@dataclass(frozen=True)
class Identity:
    """Caller identity carried by a verified token."""

    user_id: UUID
    role: UserRole


def build_password_context(rounds: int = 10) -> CryptContext:
    return CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)


def create_access_token(
    user_id: str,
    role: str,
    settings: Settings,
    expires_in_min: int | None = None,
) -> str:
    now = datetime.now(timezone.utc)
    exp = now + timedelta(minutes=expires_in_min or settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    payload = {
        "sub": user_id,
        "role": role,
        "jti": str(uuid.uuid4()),
        "iat": now,
        "exp": exp,
    }

    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str, settings: Settings) -> Identity:
    try:
        payload = jwt.decode(
            token,
            key=settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM],
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError:
        raise InvalidTokenError("Token has expired")
    except jwt.InvalidTokenError:
        raise InvalidTokenError()

    try:
        return Identity(user_id=UUID(payload["sub"]), role=UserRole(payload.get("role")))
    except (ValueError, TypeError):
        raise InvalidTokenError()
