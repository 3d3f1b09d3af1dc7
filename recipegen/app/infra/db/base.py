# recipegen/app/infra/db/base.py
"""
Abstract repositories for recipes and user profiles.
Services depend on these interfaces so the store can be swapped or stubbed.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional

from recipegen.app.domain.models import (
    Category,
    ParsedRecipe,
    PromptType,
    Recipe,
    RecipePage,
    UserProfile,
)


class RecipeRepository(ABC):
    """
    Persistence for generated recipes.

    Every lookup is scoped by owner: a recipe that exists but belongs to
    someone else is reported exactly like a missing one.

    Implementations:
    - SupabaseRecipeRepository: `generated_recipes` table in Supabase
    """

    @abstractmethod
    def create(
        self,
        owner_id: str,
        parsed: ParsedRecipe,
        prompt_type: PromptType,
        original_prompt: str,
        servings: Optional[int] = None,
    ) -> Recipe:
        """
        Store a freshly generated recipe.

        Args:
            owner_id: Profile id of the requester
            parsed: Title, ingredients, category and raw text
            prompt_type: direct or ingredients
            original_prompt: What the user typed
            servings: Requested serving count

        Returns:
            The created Recipe
        """
        pass

    @abstractmethod
    def list_by_owner(
        self,
        owner_id: str,
        page: int = 1,
        limit: int = 10,
        category: Optional[Category] = None,
        favorites_only: bool = False,
    ) -> RecipePage:
        """
        Get one page of the owner's recipes, newest first.

        Args:
            owner_id: The owner
            page: 1-based page number
            limit: Page size
            category: Only recipes in this category
            favorites_only: Only favourite recipes

        Returns:
            RecipePage with the matching total
        """
        pass

    @abstractmethod
    def get(self, recipe_id: str, owner_id: str) -> Optional[Recipe]:
        """Get a recipe if it exists and belongs to `owner_id`."""
        pass

    @abstractmethod
    def set_favorite(
        self,
        recipe_id: str,
        owner_id: str,
        expected: bool,
        value: bool,
    ) -> Optional[Recipe]:
        """
        Set `is_favorite` to `value` only while it still equals `expected`.

        Returns:
            The updated Recipe, or None when the row was missing or changed
            concurrently
        """
        pass

    @abstractmethod
    def delete(self, recipe_id: str, owner_id: str) -> bool:
        """Delete one owned recipe. Returns False when nothing was deleted."""
        pass

    @abstractmethod
    def delete_by_owner(self, owner_id: str) -> int:
        """Delete every recipe of the owner and return how many were removed."""
        pass

    @abstractmethod
    def count_by_owner(self, owner_id: str, favorites_only: bool = False) -> int:
        pass

    @abstractmethod
    def count_all(self) -> int:
        pass

    @abstractmethod
    def recent_by_owner(self, owner_id: str, limit: int = 5) -> list[Recipe]:
        pass


class UserRepository(ABC):
    """
    Persistence for application profiles (credentials live in Supabase Auth).
    """

    @abstractmethod
    def create_profile(self, user_id: str, name: str, email: str) -> UserProfile:
        pass

    @abstractmethod
    def get_profile(self, user_id: str) -> Optional[UserProfile]:
        pass

    @abstractmethod
    def get_profile_by_email(self, email: str) -> Optional[UserProfile]:
        pass

    @abstractmethod
    def update_profile(self, user_id: str, changes: dict[str, Any]) -> Optional[UserProfile]:
        """
        Apply column changes and return the updated profile.

        Args:
            user_id: The profile id
            changes: Column name to new value

        Returns:
            Updated profile, or None if it does not exist
        """
        pass

    @abstractmethod
    def set_counters(self, user_id: str, recipes_generated: int, favorite_recipes: int) -> None:
        """Overwrite both denormalized counters with freshly counted values."""
        pass

    @abstractmethod
    def delete_profile(self, user_id: str) -> bool:
        pass

    @abstractmethod
    def count_all(self, active_only: bool = False) -> int:
        pass

    @abstractmethod
    def count_with_more_recipes(self, recipes_generated: int) -> int:
        """Number of profiles whose `recipes_generated` is strictly greater."""
        pass

    @abstractmethod
    def sum_recipes_generated(self, active_only: bool = True) -> int:
        """Sum of `recipes_generated` over all (active) profiles."""
        pass
