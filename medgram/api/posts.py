from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from medgram.core.database import get_session
from medgram.core.logger import logger
from medgram.core.exceptions import PermissionDeniedError
from medgram.core.security import Identity
from medgram.dependencies.auth import get_current_identity
from medgram.schemas.post import PostCreate, PostCreated
from medgram.services.access_policy import ensure_can_create_post
from medgram.services.post_service import PostService

router = APIRouter(prefix="/posts", tags=["posts"])


@router.post("", response_model=PostCreated)
async def create_post(
    data: PostCreate,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_session),
):
    try:
        ensure_can_create_post(identity.role, data.type)
    except PermissionDeniedError as e:
        logger.warning(
            "post_creation_denied",
            user_id=str(identity.user_id),
            role=identity.role.value,
            type=data.type.value,
            reason=e.message,
        )
        raise

    service = PostService(db)
    post_id = await service.create_post(
        author_id=identity.user_id,
        type=data.type,
        content=data.content,
        media_url=data.media_url,
        thumbnail_url=data.thumbnail_url,
    )
    return PostCreated(post_id=str(post_id))
