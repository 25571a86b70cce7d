from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from medgram.core.database import get_session
from medgram.schemas.post import PostView
from medgram.services.post_service import FEED_LIMIT, PostService

router = APIRouter(tags=["feed"])


def _service(request: Request, db: AsyncSession) -> PostService:
    return PostService(db, feed_limit=request.app.state.settings.FEED_LIMIT)


@router.get("/feed", response_model=List[PostView])
async def get_feed(
    request: Request,
    limit: int = Query(FEED_LIMIT, ge=1, le=FEED_LIMIT),
    db: AsyncSession = Depends(get_session),
):
    """Public reverse-chronological feed; no auth required"""
    return await _service(request, db).list_feed(limit)


@router.get("/users/{user_id}/posts", response_model=List[PostView])
async def get_user_posts(
    user_id: UUID,
    request: Request,
    limit: int = Query(FEED_LIMIT, ge=1, le=FEED_LIMIT),
    db: AsyncSession = Depends(get_session),
):
    """Visible posts of a single author, newest first"""
    return await _service(request, db).list_user_posts(user_id, limit)
