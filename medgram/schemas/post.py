from typing import List, Optional

from pydantic import Field, model_validator

from medgram.models.post import PostType
from medgram.models.user import UserRole
from medgram.schemas.user import CamelModel


class PostCreate(CamelModel):
    type: PostType
    content: Optional[str] = Field(None, max_length=10000)
    media_url: Optional[str] = None
    thumbnail_url: Optional[str] = None

    @model_validator(mode="after")
    def check_payload(self) -> "PostCreate":
        if self.type == PostType.VIDEO:
            if not self.media_url:
                raise ValueError("mediaUrl is required for video posts")
        elif not (self.content and self.content.strip()):
            raise ValueError("content is required for text posts")
        return self


class PostCreated(CamelModel):
    success: bool = True
    post_id: str


class PostView(CamelModel):
    id: str
    type: PostType
    content: Optional[str] = None
    media_url: Optional[str] = None
    thumbnail_url: Optional[str] = None
    # milliseconds since the epoch
    timestamp: int
    author_id: str
    author_name: str
    author_avatar: Optional[str] = None
    author_role: UserRole
    likes: int = 0
    # comments are loaded by a separate path
    comments: List[dict] = Field(default_factory=list)
    # per-viewer like state is not joined on this read path
    liked_by_current_user: bool = False
