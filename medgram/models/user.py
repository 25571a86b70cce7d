from __future__ import annotations

import enum
from typing import List, Optional

from sqlalchemy import String, Boolean, Enum as SqlEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from medgram.core.database import Base


class UserRole(str, enum.Enum):
    VIEW_ONLY = "VIEW_ONLY"
    USER = "USER"
    CREATOR = "CREATOR"
    MODERATOR = "MODERATOR"


def default_avatar_url(username: str) -> str:
    return f"https://ui-avatars.com/api/?name={username}"


class User(Base):
    __tablename__ = "users"

    username: Mapped[str] = mapped_column(
        String(50),
        unique=True,
        nullable=False,
        index=True,
    )

    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    full_name: Mapped[Optional[str]] = mapped_column(
        String(100),
        nullable=True,
    )

    role: Mapped[UserRole] = mapped_column(
        SqlEnum(UserRole, name="user_role"),
        nullable=False,
        default=UserRole.USER,
    )

    avatar_url: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
    )

    verified: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
    )

    # National Provider Identifier
    npi_number: Mapped[Optional[str]] = mapped_column(
        String(20),
        nullable=True,
    )

    # reverse relationships
    posts: Mapped[List["Post"]] = relationship(
        back_populates="user",
        cascade="all, delete-orphan",
    )

    likes: Mapped[List["Like"]] = relationship(
        back_populates="user",
        cascade="all, delete-orphan",
    )
