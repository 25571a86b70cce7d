from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from passlib.context import CryptContext
from sqlalchemy.ext.asyncio import AsyncSession

from medgram.core.config import Settings
from medgram.core.database import get_session
from medgram.core.exceptions import InvalidTokenError
from medgram.core.security import Identity
from medgram.services.auth_service import AuthService
from medgram.utils.storage import MediaUploadCoordinator


def get_settings_dep(request: Request) -> Settings:
    return request.app.state.settings


def get_password_context(request: Request) -> CryptContext:
    return request.app.state.pwd_context


def get_media_coordinator(request: Request) -> MediaUploadCoordinator:
    return request.app.state.media


async def get_auth_service(
    db: AsyncSession = Depends(get_session),
    settings: Settings = Depends(get_settings_dep),
    pwd_context: CryptContext = Depends(get_password_context),
) -> AuthService:
    return AuthService(db, settings, pwd_context)


class TokenBearer(HTTPBearer):
    """Extracts the bearer token and resolves it to the caller's identity."""

    def __init__(self) -> None:
        # missing credentials must be a 401, not HTTPBearer's own error
        super().__init__(auto_error=False)

    async def __call__(self, request: Request) -> str:
        credentials: Optional[HTTPAuthorizationCredentials] = await super().__call__(request)

        if not credentials or credentials.scheme.lower() != "bearer" or not credentials.credentials:
            raise InvalidTokenError("Unauthorized")

        return credentials.credentials


async def get_current_identity(
    token: str = Depends(TokenBearer()),
    auth: AuthService = Depends(get_auth_service),
) -> Identity:
    return auth.verify(token)
