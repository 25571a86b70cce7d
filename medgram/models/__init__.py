from medgram.models.user import User, UserRole
from medgram.models.post import Post, PostType, ProcessingStatus
from medgram.models.like import Like

__all__ = ["User", "UserRole", "Post", "PostType", "ProcessingStatus", "Like"]
