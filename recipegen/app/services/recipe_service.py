# recipegen/app/services/recipe_service.py
"""
Recipe generation flow and the owner's recipe book.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Protocol

from recipegen.app.domain.errors import RecipeNotFoundError, RepositoryError
from recipegen.app.domain.models import (
    Category,
    GenerationRequest,
    Recipe,
    RecipePage,
)
from recipegen.app.infra.db.base import RecipeRepository, UserRepository
from recipegen.services.classifier import HeuristicRecipeParser, RecipeParser
from recipegen.services.errors import AIConfigurationError
from recipegen.services.prompts import build_prompt, original_prompt

logger = logging.getLogger(__name__)

MAX_TOGGLE_ATTEMPTS = 3


class Generator(Protocol):
    def generate(self, prompt: str) -> str:
        ...


@dataclass
class GenerationOutcome:
    text: str
    recipe: Optional[Recipe] = None


class RecipeService:
    """
    Service for generating and managing recipes.

    Responsibilities:
    - Build the prompt, run the model fallback and parse the answer
    - Save generated recipes for signed-in users
    - Owner-scoped listing, lookup, favourites and deletion
    - Keep the profile counters equal to fresh counts
    """

    def __init__(
        self,
        generator: Optional[Generator],
        recipes: RecipeRepository,
        users: UserRepository,
        parser: Optional[RecipeParser] = None,
        prompt_builder: Callable[[GenerationRequest], str] = build_prompt,
    ):
        self._generator = generator
        self._recipes = recipes
        self._users = users
        self._parser = parser or HeuristicRecipeParser()
        self._build_prompt = prompt_builder

    def generate(self, request: GenerationRequest, owner_id: Optional[str] = None) -> GenerationOutcome:
        """
        Generate a recipe and, for signed-in callers, save it.

        Upstream failures propagate as GenerationError. A failure while saving
        is logged and the text is still returned with `recipe=None`.
        """
        if self._generator is None:
            raise AIConfigurationError("GEMINI_API_KEY is not configured")
        prompt = self._build_prompt(request)
        text = self._generator.generate(prompt)

        if not owner_id:
            return GenerationOutcome(text=text)

        parsed = self._parser.parse(text, request)
        try:
            recipe = self._recipes.create(
                owner_id=owner_id,
                parsed=parsed,
                prompt_type=request.kind,
                original_prompt=original_prompt(request),
                servings=request.servings,
            )
        except Exception:
            logger.exception("generate.save_fail owner=%s title=%s", owner_id, parsed.title)
            return GenerationOutcome(text=text)

        try:
            self.refresh_counters(owner_id)
        except Exception:
            logger.exception("generate.counters_fail owner=%s recipe=%s", owner_id, recipe.id)

        return GenerationOutcome(text=text, recipe=recipe)

    def list_recipes(
        self,
        owner_id: str,
        page: int = 1,
        limit: int = 10,
        category: Optional[Category] = None,
        favorites_only: bool = False,
    ) -> RecipePage:
        return self._recipes.list_by_owner(
            owner_id,
            page=page,
            limit=limit,
            category=category,
            favorites_only=favorites_only,
        )

    def get_recipe(self, recipe_id: str, owner_id: str) -> Recipe:
        recipe = self._recipes.get(recipe_id, owner_id)
        if recipe is None:
            raise RecipeNotFoundError(recipe_id)
        return recipe

    def toggle_favorite(self, recipe_id: str, owner_id: str) -> Recipe:
        """
        Flip `is_favorite` with a compare-and-set update.

        A concurrent toggle makes the conditional update miss; the current
        state is then re-read and the flip retried.
        """
        for _ in range(MAX_TOGGLE_ATTEMPTS):
            current = self.get_recipe(recipe_id, owner_id)
            updated = self._recipes.set_favorite(
                recipe_id,
                owner_id,
                expected=current.is_favorite,
                value=not current.is_favorite,
            )
            if updated is not None:
                self.refresh_counters(owner_id)
                return updated
            logger.info("favorite.retry recipe=%s owner=%s", recipe_id, owner_id)

        raise RepositoryError("toggle_favorite", "recipe kept changing concurrently")

    def delete_recipe(self, recipe_id: str, owner_id: str) -> None:
        if not self._recipes.delete(recipe_id, owner_id):
            raise RecipeNotFoundError(recipe_id)
        self.refresh_counters(owner_id)

    def count_recipes(self, owner_id: str) -> int:
        return self._recipes.count_by_owner(owner_id)

    def refresh_counters(self, owner_id: str) -> None:
        total = self._recipes.count_by_owner(owner_id)
        favorites = self._recipes.count_by_owner(owner_id, favorites_only=True)
        self._users.set_counters(owner_id, recipes_generated=total, favorite_recipes=favorites)
        logger.debug("counters.refresh owner=%s total=%d favorites=%d", owner_id, total, favorites)
