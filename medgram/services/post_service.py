from typing import List, Optional
from uuid import UUID

from sqlalchemy import Select, select, func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError

from medgram.core.exceptions import PersistenceError
from medgram.core.logger import logger
from medgram.models.like import Like
from medgram.models.post import Post, PostType, ProcessingStatus, initial_processing_status
from medgram.models.user import User
from medgram.schemas.post import PostView
from medgram.services.feed_assembler import assemble_feed

FEED_LIMIT = 50


class PostService:
    def __init__(self, db: AsyncSession, feed_limit: int = FEED_LIMIT):
        self.db = db
        self.feed_limit = feed_limit

    async def create_post(
        self,
        author_id: UUID,
        type: PostType,
        content: Optional[str] = None,
        media_url: Optional[str] = None,
        thumbnail_url: Optional[str] = None,
    ) -> UUID:
        post = Post(
            user_id=author_id,
            type=type,
            content=content,
            media_url=media_url,
            thumbnail_url=thumbnail_url,
            processing_status=initial_processing_status(type),
        )

        self.db.add(post)
        try:
            await self.db.commit()
            await self.db.refresh(post)
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("post_creation_failed", user_id=str(author_id), type=type.value, error=str(e))
            raise PersistenceError("Failed to create post") from e

        logger.info(
            "post_created",
            post_id=str(post.id),
            user_id=str(author_id),
            type=post.type.value,
            processing_status=post.processing_status.value,
        )
        return post.id

    async def get_post(self, post_id: UUID) -> Post | None:
        stmt = select(Post).where(Post.id == post_id)
        result = await self.db.execute(stmt)

        return result.scalars().first()

    def _feed_query(self, limit: int) -> Select:
        like_count = (
            select(func.count(Like.id))
            .where(Like.post_id == Post.id)
            .correlate(Post)
            .scalar_subquery()
        )
        return (
            select(
                Post.id,
                Post.type,
                Post.content,
                Post.media_url,
                Post.thumbnail_url,
                Post.created_at,
                User.id.label("author_id"),
                User.username.label("author_name"),
                User.avatar_url.label("author_avatar"),
                User.role.label("author_role"),
                like_count.label("likes"),
            )
            .join(User, Post.user_id == User.id)
            .where(
                or_(
                    Post.processing_status == ProcessingStatus.COMPLETED,
                    Post.processing_status.is_(None),
                )
            )
            .order_by(Post.created_at.desc(), Post.id.desc())
            .limit(min(limit, self.feed_limit))
        )

    async def _run_feed(self, stmt: Select) -> List[PostView]:
        try:
            result = await self.db.execute(stmt)
        except SQLAlchemyError as e:
            logger.error("feed_query_failed", error=str(e))
            raise PersistenceError("Could not fetch feed") from e
        return assemble_feed(result.mappings().all())

    async def list_feed(self, limit: int = FEED_LIMIT) -> List[PostView]:
        """Newest visible posts first; videos still being processed are hidden."""
        return await self._run_feed(self._feed_query(limit))

    async def list_user_posts(self, user_id: UUID, limit: int = FEED_LIMIT) -> List[PostView]:
        stmt = self._feed_query(limit).where(Post.user_id == user_id)
        return await self._run_feed(stmt)

    async def mark_processing_complete(self, post_id: UUID) -> Post | None:
        """Flip a pending post to COMPLETED once external processing is done."""
        post = await self.get_post(post_id)
        if not post:
            return None

        post.processing_status = ProcessingStatus.COMPLETED
        try:
            await self.db.commit()
            await self.db.refresh(post)
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("post_status_update_failed", post_id=str(post_id), error=str(e))
            raise PersistenceError("Failed to update post") from e

        logger.info("post_processing_completed", post_id=str(post.id))
        return post
