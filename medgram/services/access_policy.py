from dataclasses import dataclass
from typing import Optional

from medgram.core.exceptions import PermissionDeniedError
from medgram.models.post import PostType
from medgram.models.user import UserRole


@dataclass(frozen=True)
class PolicyDecision:
    allowed: bool
    reason: Optional[str] = None


ALLOW = PolicyDecision(allowed=True)
DENY_VIEW_ONLY = PolicyDecision(allowed=False, reason="Permission denied")
DENY_USER_VIDEO = PolicyDecision(allowed=False, reason="Standard users cannot post videos")


# Every (role, post type) pair is listed; a missing pair is a bug, not an allow.
POST_CREATION_POLICY: dict[tuple[UserRole, PostType], PolicyDecision] = {
    (UserRole.VIEW_ONLY, PostType.TEXT): DENY_VIEW_ONLY,
    (UserRole.VIEW_ONLY, PostType.THREAD): DENY_VIEW_ONLY,
    (UserRole.VIEW_ONLY, PostType.VIDEO): DENY_VIEW_ONLY,
    (UserRole.USER, PostType.TEXT): ALLOW,
    (UserRole.USER, PostType.THREAD): ALLOW,
    (UserRole.USER, PostType.VIDEO): DENY_USER_VIDEO,
    (UserRole.CREATOR, PostType.TEXT): ALLOW,
    (UserRole.CREATOR, PostType.THREAD): ALLOW,
    (UserRole.CREATOR, PostType.VIDEO): ALLOW,
    (UserRole.MODERATOR, PostType.TEXT): ALLOW,
    (UserRole.MODERATOR, PostType.THREAD): ALLOW,
    (UserRole.MODERATOR, PostType.VIDEO): ALLOW,
}


def can_create_post(role: UserRole, post_type: PostType) -> PolicyDecision:
    return POST_CREATION_POLICY[(UserRole(role), PostType(post_type))]


def ensure_can_create_post(role: UserRole, post_type: PostType) -> None:
    decision = can_create_post(role, post_type)
    if not decision.allowed:
        raise PermissionDeniedError(decision.reason)
