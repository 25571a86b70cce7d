from typing import Optional

from fastapi.concurrency import run_in_threadpool
from passlib.context import CryptContext
from sqlalchemy.ext.asyncio import AsyncSession

from medgram.core.config import Settings
from medgram.core.exceptions import InvalidCredentialsError, InvalidTokenError
from medgram.core.logger import logger
from medgram.core.security import Identity, create_access_token, decode_token
from medgram.models.user import User, UserRole
from medgram.services.user_service import UserService


class AuthService:
    """Registration, login and token verification.

    Passwords are bcrypt hashed in the thread pool so hashing never blocks the
    event loop. Tokens are self-contained JWTs; verifying one never touches
    the store and there is no revocation list.
    """

    def __init__(self, db: AsyncSession, settings: Settings, pwd_context: CryptContext):
        self.users = UserService(db)
        self.settings = settings
        self.pwd_context = pwd_context

    def issue_token(self, user: User) -> str:
        return create_access_token(
            user_id=str(user.id),
            role=user.role.value,
            settings=self.settings,
        )

    async def register(
        self,
        username: str,
        password: str,
        full_name: Optional[str],
        role: UserRole,
        npi_number: Optional[str] = None,
    ) -> tuple[User, str]:
        password_hash = await run_in_threadpool(self.pwd_context.hash, password)
        user = await self.users.create_user(
            username=username,
            password_hash=password_hash,
            full_name=full_name,
            role=role,
            npi_number=npi_number,
        )
        logger.info("user_registered", user_id=str(user.id), username=user.username)
        return user, self.issue_token(user)

    async def login(self, username: str, password: str) -> tuple[User, str]:
        user = await self.users.get_by_username(username)

        if user is None:
            # burn the same bcrypt cost so unknown handles are not revealed by timing
            await run_in_threadpool(self.pwd_context.dummy_verify)
            logger.warning("login_failed_invalid_credentials", username=username)
            raise InvalidCredentialsError()

        if not await run_in_threadpool(self.pwd_context.verify, password, user.password_hash):
            logger.warning("login_failed_invalid_credentials", username=username)
            raise InvalidCredentialsError()

        logger.info("user_login_successful", user_id=str(user.id), username=user.username)
        return user, self.issue_token(user)

    def verify(self, token: str) -> Identity:
        return decode_token(token, self.settings)

    async def current_user(self, identity: Identity) -> User:
        user = await self.users.get_by_id(identity.user_id)
        if user is None:
            raise InvalidTokenError("User no longer exists")
        return user

