from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from medgram.core.exceptions import AuthBackendError, ConflictError
from medgram.core.logger import logger
from medgram.models.user import User, UserRole, default_avatar_url


class UserService:
    """Credential store: user lookups and inserts."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_username(self, username: str) -> Optional[User]:
        stmt = select(User).where(User.username == username)
        try:
            result = await self.db.execute(stmt)
        except SQLAlchemyError as e:
            logger.error("user_lookup_failed", username=username, error=str(e))
            raise AuthBackendError() from e
        return result.scalars().first()

    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        stmt = select(User).where(User.id == user_id)
        try:
            result = await self.db.execute(stmt)
        except SQLAlchemyError as e:
            logger.error("user_lookup_failed", user_id=str(user_id), error=str(e))
            raise AuthBackendError() from e
        return result.scalars().first()

    async def create_user(
        self,
        username: str,
        password_hash: str,
        full_name: Optional[str],
        role: UserRole,
        npi_number: Optional[str] = None,
    ) -> User:
        """Insert a new user; the unique index on username rejects duplicates."""
        user = User(
            username=username,
            password_hash=password_hash,
            full_name=full_name,
            role=role,
            npi_number=npi_number,
            avatar_url=default_avatar_url(username),
            verified=False,
        )

        self.db.add(user)
        try:
            await self.db.commit()
            await self.db.refresh(user)
        except IntegrityError:
            await self.db.rollback()
            logger.warning("user_creation_failed_username_exists", username=username)
            raise ConflictError("Username already exists")
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("user_creation_failed", username=username, error=str(e))
            raise AuthBackendError() from e

        logger.info("user_created", user_id=str(user.id), username=user.username, role=user.role.value)
        return user
