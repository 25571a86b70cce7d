"""Shapes feed rows into the representation the web client renders."""
from datetime import datetime, timezone
from typing import Any, Iterable, List, Mapping

from medgram.schemas.post import PostView


def to_epoch_millis(value: datetime) -> int:
    # sqlite hands back naive datetimes; everything is stored as UTC
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return int(value.timestamp() * 1000)


def assemble_post_view(row: Mapping[str, Any]) -> PostView:
    return PostView(
        id=str(row["id"]),
        type=row["type"],
        content=row["content"],
        media_url=row["media_url"],
        thumbnail_url=row["thumbnail_url"],
        timestamp=to_epoch_millis(row["created_at"]),
        author_id=str(row["author_id"]),
        author_name=row["author_name"],
        author_avatar=row["author_avatar"],
        author_role=row["author_role"],
        likes=int(row["likes"] or 0),
        comments=[],
        liked_by_current_user=False,
    )


def assemble_feed(rows: Iterable[Mapping[str, Any]]) -> List[PostView]:
    return [assemble_post_view(row) for row in rows]
