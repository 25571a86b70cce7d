from __future__ import annotations

import enum
from typing import List, Optional
from uuid import UUID

from sqlalchemy import (
    Text,
    ForeignKey,
    Enum as SqlEnum,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from medgram.core.database import Base


class PostType(str, enum.Enum):
    TEXT = "TEXT"
    THREAD = "THREAD"
    VIDEO = "VIDEO"


class ProcessingStatus(str, enum.Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"


def initial_processing_status(post_type: PostType) -> ProcessingStatus:
    """Videos wait for the external processing pipeline; everything else is live."""
    if post_type == PostType.VIDEO:
        return ProcessingStatus.PENDING
    return ProcessingStatus.COMPLETED


class Post(Base):
    __tablename__ = "posts"

    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    type: Mapped[PostType] = mapped_column(
        SqlEnum(PostType, name="post_type"),
        nullable=False,
    )

    content: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )

    media_url: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )

    thumbnail_url: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )

    # NULL is treated like COMPLETED by feed reads
    processing_status: Mapped[Optional[ProcessingStatus]] = mapped_column(
        SqlEnum(ProcessingStatus, name="processing_status"),
        nullable=True,
        index=True,
    )

    # relationships
    user: Mapped["User"] = relationship(back_populates="posts")

    likes: Mapped[List["Like"]] = relationship(
        back_populates="post",
        cascade="all, delete-orphan",
    )
