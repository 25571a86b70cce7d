import itertools

import pytest

from medgram.core.exceptions import PermissionDeniedError
from medgram.models.post import PostType
from medgram.models.user import UserRole
from medgram.services.access_policy import (
    POST_CREATION_POLICY,
    can_create_post,
    ensure_can_create_post,
)


@pytest.mark.unit
class TestPostCreationPolicy:
    def test_every_role_and_type_has_an_entry(self):
        expected = set(itertools.product(UserRole, PostType))
        assert set(POST_CREATION_POLICY) == expected

    @pytest.mark.parametrize("post_type", list(PostType))
    def test_view_only_is_denied_everything(self, post_type):
        decision = can_create_post(UserRole.VIEW_ONLY, post_type)
        assert not decision.allowed
        assert decision.reason == "Permission denied"

    @pytest.mark.parametrize("post_type", [PostType.TEXT, PostType.THREAD])
    def test_standard_user_can_write_text(self, post_type):
        assert can_create_post(UserRole.USER, post_type).allowed

    def test_standard_user_cannot_post_video(self):
        decision = can_create_post(UserRole.USER, PostType.VIDEO)
        assert not decision.allowed
        assert decision.reason == "Standard users cannot post videos"

    @pytest.mark.parametrize(
        "role, post_type",
        list(itertools.product([UserRole.CREATOR, UserRole.MODERATOR], PostType)),
    )
    def test_creators_and_moderators_can_post_anything(self, role, post_type):
        assert can_create_post(role, post_type).allowed

    def test_accepts_raw_string_values(self):
        assert not can_create_post("USER", "VIDEO").allowed

    def test_ensure_raises_with_reason(self):
        with pytest.raises(PermissionDeniedError) as exc_info:
            ensure_can_create_post(UserRole.USER, PostType.VIDEO)
        assert exc_info.value.message == "Standard users cannot post videos"
        assert exc_info.value.status_code == 403

    def test_ensure_passes_when_allowed(self):
        ensure_can_create_post(UserRole.CREATOR, PostType.VIDEO)
