from __future__ import annotations

import base64

import pytest

from recipegen.app.domain.errors import (
    AuthenticationError,
    InvalidProfilePictureError,
    UserNotFoundError,
)
from recipegen.app.services.recipe_service import RecipeService
from recipegen.app.services.user_service import (
    MAX_PICTURE_BYTES,
    UserService,
    achievements_for,
    validate_profile_picture,
)

PNG_DATA_URL = "data:image/png;base64," + base64.b64encode(b"\x89PNG fake").decode()


@pytest.fixture
def service(user_repo, recipe_repo, auth_gateway) -> UserService:
    return UserService(user_repo, recipe_repo, auth_gateway)


class TestAchievements:
    def test_none_for_new_user(self) -> None:
        assert achievements_for(0, 0) == []

    def test_thresholds(self) -> None:
        names = [a.name for a in achievements_for(50, 5)]
        assert names == ["First Recipe", "Chef in Training", "Master Chef", "Taste Maker"]

    def test_all(self) -> None:
        assert len(achievements_for(100, 20)) == 6


class TestValidateProfilePicture:
    def test_accepts_supported_data_url(self) -> None:
        assert validate_profile_picture(PNG_DATA_URL) == PNG_DATA_URL

    @pytest.mark.parametrize("value", ["data:image/gif;base64,R0lG", "https://example.com/me.png"])
    def test_rejects_other_formats(self, value: str) -> None:
        with pytest.raises(InvalidProfilePictureError, match="Only JPEG, PNG, and WebP"):
            validate_profile_picture(value)

    def test_rejects_empty(self) -> None:
        with pytest.raises(InvalidProfilePictureError, match="required"):
            validate_profile_picture("")

    def test_rejects_bad_base64(self) -> None:
        with pytest.raises(InvalidProfilePictureError):
            validate_profile_picture("data:image/jpeg;base64,@@not-base64@@")

    def test_rejects_large_image(self) -> None:
        payload = base64.b64encode(b"\0" * (MAX_PICTURE_BYTES + 1)).decode()
        with pytest.raises(InvalidProfilePictureError, match="5MB"):
            validate_profile_picture("data:image/webp;base64," + payload)


class TestProfile:
    def test_update_trims_fields(self, service, user_repo) -> None:
        user_repo.add("u1")

        profile = service.update_profile("u1", name="  Grace ", bio=" Loves soup ")

        assert profile.name == "Grace"
        assert profile.bio == "Loves soup"

    def test_update_without_changes_returns_profile(self, service, user_repo) -> None:
        user_repo.add("u1", name="Ada")
        assert service.update_profile("u1").name == "Ada"

    def test_missing_profile(self, service) -> None:
        with pytest.raises(UserNotFoundError):
            service.get_profile("ghost")

    def test_picture_set_and_removed(self, service, user_repo) -> None:
        user_repo.add("u1")

        assert service.set_profile_picture("u1", PNG_DATA_URL).profile_picture == PNG_DATA_URL
        assert service.remove_profile_picture("u1").profile_picture is None


class TestPreferences:
    def test_defaults_fill_missing_values(self, service, user_repo) -> None:
        profile = user_repo.add("u1", favorites_cuisine="Thai")

        prefs = service.get_preferences(profile)

        assert prefs.favorites_cuisine == "Thai"
        assert prefs.dietary_restrictions == "None"
        assert prefs.skill_level == "Intermediate"
        assert prefs.preferred_cooking_time == "30-45 minutes"

    def test_update_ignores_unknown_fields(self, service, user_repo) -> None:
        user_repo.add("u1")

        profile = service.update_preferences("u1", {"skill_level": "Advanced", "is_active": False})

        assert profile.skill_level == "Advanced"
        assert profile.is_active is True


class TestStats:
    def test_user_stats(self, service, user_repo, recipe_repo) -> None:
        me = user_repo.add("u1", recipes_generated=2)
        user_repo.add("u2", recipes_generated=7)
        user_repo.add("u3", recipes_generated=1)
        recipe_repo.add("u1", title="A", is_favorite=True)
        recipe_repo.add("u1", title="B")

        stats = service.get_stats(me)

        assert stats.recipes_generated == 2
        assert stats.favorite_recipes == 1
        assert stats.user_rank == 2
        assert stats.total_users == 3
        assert [r.title for r in stats.recent_recipes] == ["B", "A"]
        assert [a.name for a in stats.achievements] == ["First Recipe"]

    def test_app_stats_counts_active_users(self, service, user_repo, recipe_repo) -> None:
        user_repo.add("u1", recipes_generated=4)
        user_repo.add("u2", recipes_generated=2)
        user_repo.add("u3", recipes_generated=9, is_active=False)
        recipe_repo.add("u1")

        stats = service.app_stats()

        assert stats.total_users == 2
        assert stats.total_recipes == 1
        assert stats.avg_recipes_per_user == 3
        assert stats.total_recipes_generated == 6

    def test_app_stats_without_users(self, service) -> None:
        assert service.app_stats().avg_recipes_per_user == 0


class TestDeleteAccount:
    def test_cascade_removes_everything_owned(self, service, user_repo, recipe_repo, auth_gateway, generator) -> None:
        me = user_repo.add("u1", email="me@example.com")
        user_repo.add("u2")
        auth_gateway.add("u1", "me@example.com", "Secret1")
        for _ in range(3):
            recipe_repo.add("u1")
        other = recipe_repo.add("u2", is_favorite=True)

        removed = service.delete_account(me, "Secret1")

        assert removed == 3
        assert recipe_repo.list_by_owner("u1").recipes == []
        assert recipe_repo.count_by_owner("u1") == 0
        assert user_repo.get_profile("u1") is None
        assert auth_gateway.deleted == ["u1"]
        assert list(recipe_repo.rows) == [other.id]

        # the other owner's counters still come from a fresh count
        RecipeService(generator, recipe_repo, user_repo).refresh_counters("u2")
        assert user_repo.counter_writes[-1] == ("u2", 1, 1)

    def test_wrong_password_keeps_data(self, service, user_repo, recipe_repo, auth_gateway) -> None:
        me = user_repo.add("u1", email="me@example.com")
        auth_gateway.add("u1", "me@example.com", "Secret1")
        recipe_repo.add("u1")

        with pytest.raises(AuthenticationError, match="Invalid password"):
            service.delete_account(me, "wrong")

        assert recipe_repo.count_by_owner("u1") == 1
        assert user_repo.get_profile("u1") is not None
        assert auth_gateway.deleted == []
