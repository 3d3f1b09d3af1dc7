from __future__ import annotations

import base64
import binascii
import logging
import re
from typing import Any, Optional

from recipegen.app.domain.errors import (
    AuthenticationError,
    InvalidProfilePictureError,
    UserNotFoundError,
)
from recipegen.app.domain.models import (
    Achievement,
    AppStats,
    UserPreferences,
    UserProfile,
    UserStats,
)
from recipegen.app.infra.auth.base import AuthGateway
from recipegen.app.infra.db.base import RecipeRepository, UserRepository

logger = logging.getLogger(__name__)

MAX_PICTURE_BYTES = 5 * 1024 * 1024
RECENT_RECIPES_LIMIT = 5
_DATA_URL_RE = re.compile(r"^data:image/(jpeg|jpg|png|webp);base64,")

_RECIPE_ACHIEVEMENTS = (
    (1, "First Recipe", "Generated your first recipe!"),
    (10, "Chef in Training", "Generated 10 recipes!"),
    (50, "Master Chef", "Generated 50 recipes!"),
    (100, "Recipe Master", "Generated 100 recipes!"),
)
_FAVORITE_ACHIEVEMENTS = (
    (5, "Taste Maker", "Favorited 5 recipes!"),
    (20, "Connoisseur", "Favorited 20 recipes!"),
)

PREFERENCE_FIELDS = (
    "favorites_cuisine",
    "dietary_restrictions",
    "skill_level",
    "preferred_cooking_time",
)


def achievements_for(recipe_count: int, favorite_count: int) -> list[Achievement]:
    earned = [
        Achievement(name=name, description=description)
        for threshold, name, description in _RECIPE_ACHIEVEMENTS
        if recipe_count >= threshold
    ]
    earned.extend(
        Achievement(name=name, description=description)
        for threshold, name, description in _FAVORITE_ACHIEVEMENTS
        if favorite_count >= threshold
    )
    return earned


def validate_profile_picture(data_url: str) -> str:
    if not data_url:
        raise InvalidProfilePictureError("Profile picture data is required")
    if not _DATA_URL_RE.match(data_url):
        raise InvalidProfilePictureError("Invalid image format. Only JPEG, PNG, and WebP are supported.")

    encoded = data_url.split(",", 1)[1]
    try:
        size = len(base64.b64decode(encoded, validate=True))
    except (binascii.Error, ValueError) as exc:
        raise InvalidProfilePictureError("Invalid image data.") from exc
    if size > MAX_PICTURE_BYTES:
        raise InvalidProfilePictureError("Image size too large. Maximum size is 5MB.")
    return data_url


class UserService:
    """
    Profile, preferences, statistics and account removal.
    """

    def __init__(self, users: UserRepository, recipes: RecipeRepository, auth: AuthGateway):
        self._users = users
        self._recipes = recipes
        self._auth = auth

    def _require(self, profile: Optional[UserProfile], user_id: str) -> UserProfile:
        if profile is None:
            raise UserNotFoundError(user_id)
        return profile

    def get_profile(self, user_id: str) -> UserProfile:
        return self._require(self._users.get_profile(user_id), user_id)

    def update_profile(
        self,
        user_id: str,
        name: Optional[str] = None,
        bio: Optional[str] = None,
        favorites_cuisine: Optional[str] = None,
    ) -> UserProfile:
        changes: dict[str, Any] = {}
        if name:
            changes["name"] = name.strip()
        if bio is not None:
            changes["bio"] = bio.strip()
        if favorites_cuisine is not None:
            changes["favorites_cuisine"] = favorites_cuisine.strip()
        if not changes:
            return self.get_profile(user_id)
        return self._require(self._users.update_profile(user_id, changes), user_id)

    def set_profile_picture(self, user_id: str, data_url: str) -> UserProfile:
        picture = validate_profile_picture(data_url)
        return self._require(self._users.update_profile(user_id, {"profile_picture": picture}), user_id)

    def remove_profile_picture(self, user_id: str) -> UserProfile:
        return self._require(self._users.update_profile(user_id, {"profile_picture": None}), user_id)

    def get_preferences(self, profile: UserProfile) -> UserPreferences:
        defaults = UserPreferences(favorites_cuisine=None)
        return UserPreferences(
            favorites_cuisine=profile.favorites_cuisine,
            dietary_restrictions=profile.dietary_restrictions or defaults.dietary_restrictions,
            skill_level=profile.skill_level or defaults.skill_level,
            preferred_cooking_time=profile.preferred_cooking_time or defaults.preferred_cooking_time,
        )

    def update_preferences(self, user_id: str, changes: dict[str, Any]) -> UserProfile:
        updates = {key: value for key, value in changes.items() if key in PREFERENCE_FIELDS}
        if not updates:
            return self.get_profile(user_id)
        return self._require(self._users.update_profile(user_id, updates), user_id)

    def get_stats(self, profile: UserProfile) -> UserStats:
        recipe_count = self._recipes.count_by_owner(profile.id)
        favorite_count = self._recipes.count_by_owner(profile.id, favorites_only=True)
        ahead = self._users.count_with_more_recipes(profile.recipes_generated)

        return UserStats(
            recipes_generated=recipe_count,
            favorite_recipes=favorite_count,
            user_rank=ahead + 1,
            total_users=self._users.count_all(),
            join_date=profile.created_at,
            recent_recipes=self._recipes.recent_by_owner(profile.id, RECENT_RECIPES_LIMIT),
            achievements=achievements_for(recipe_count, favorite_count),
        )

    def app_stats(self) -> AppStats:
        active_users = self._users.count_all(active_only=True)
        generated = self._users.sum_recipes_generated(active_only=True)
        return AppStats(
            total_users=active_users,
            total_recipes=self._recipes.count_all(),
            avg_recipes_per_user=(generated / active_users) if active_users else 0,
            total_recipes_generated=generated,
        )

    def delete_account(self, profile: UserProfile, password: str) -> int:
        """
        Remove the account after re-checking the password.

        Recipes go first, then the profile, then the identity. Returns the
        number of recipes removed.
        """
        try:
            identity = self._auth.sign_in(profile.email, password)
        except AuthenticationError as exc:
            raise AuthenticationError("Invalid password") from exc
        if identity.user_id != profile.id:
            raise AuthenticationError("Invalid password")

        removed = self._recipes.delete_by_owner(profile.id)
        self._users.delete_profile(profile.id)
        self._auth.delete_user(profile.id)
        logger.info("account.deleted user=%s recipes=%d", profile.id, removed)
        return removed
