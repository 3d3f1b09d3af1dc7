from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import pytest

from recipegen.app.domain.errors import (
    AuthenticationError,
    EmailAlreadyRegisteredError,
    RepositoryError,
)
from recipegen.app.domain.models import (
    Category,
    ParsedRecipe,
    PromptType,
    Recipe,
    RecipePage,
    UserProfile,
)
from recipegen.app.infra.auth.base import AuthGateway, AuthIdentity
from recipegen.app.infra.db.base import RecipeRepository, UserRepository

BASE_TIME = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)


class InMemoryRecipeRepository(RecipeRepository):
    def __init__(self) -> None:
        self.rows: dict[str, Recipe] = {}
        self.fail_create = False
        self.races_to_lose = 0
        self._seq = 0

    def create(
        self,
        owner_id: str,
        parsed: ParsedRecipe,
        prompt_type: PromptType,
        original_prompt: str,
        servings: Optional[int] = None,
    ) -> Recipe:
        if self.fail_create:
            raise RepositoryError("create_recipe", "insert failed")
        self._seq += 1
        created = BASE_TIME + timedelta(minutes=self._seq)
        recipe = Recipe(
            id=f"recipe-{self._seq}",
            owner_id=owner_id,
            title=parsed.title,
            ingredients=list(parsed.ingredients),
            instructions=parsed.instructions,
            category=parsed.category,
            prompt_type=prompt_type,
            original_prompt=original_prompt,
            servings=servings,
            created_at=created,
            updated_at=created,
        )
        self.rows[recipe.id] = recipe
        return replace(recipe)

    def add(self, owner_id: str, title: str = "Pasta", category: Category = Category.DINNER,
            is_favorite: bool = False) -> Recipe:
        recipe = self.create(
            owner_id,
            ParsedRecipe(title=title, ingredients=["x"], category=category, instructions=title),
            PromptType.DIRECT,
            title,
            4,
        )
        self.rows[recipe.id].is_favorite = is_favorite
        return replace(self.rows[recipe.id])

    def _owned(self, owner_id: str) -> list[Recipe]:
        return [r for r in self.rows.values() if r.owner_id == owner_id]

    def list_by_owner(
        self,
        owner_id: str,
        page: int = 1,
        limit: int = 10,
        category: Optional[Category] = None,
        favorites_only: bool = False,
    ) -> RecipePage:
        rows = self._owned(owner_id)
        if category:
            rows = [r for r in rows if r.category == category]
        if favorites_only:
            rows = [r for r in rows if r.is_favorite]
        rows.sort(key=lambda r: r.created_at, reverse=True)
        start = (page - 1) * limit
        return RecipePage(
            recipes=[replace(r) for r in rows[start:start + limit]],
            page=page,
            limit=limit,
            total=len(rows),
        )

    def get(self, recipe_id: str, owner_id: str) -> Optional[Recipe]:
        recipe = self.rows.get(recipe_id)
        if recipe is None or recipe.owner_id != owner_id:
            return None
        return replace(recipe)

    def set_favorite(self, recipe_id: str, owner_id: str, expected: bool, value: bool) -> Optional[Recipe]:
        recipe = self.rows.get(recipe_id)
        if recipe is None or recipe.owner_id != owner_id:
            return None
        if self.races_to_lose:
            # another request flips the flag first
            self.races_to_lose -= 1
            recipe.is_favorite = not recipe.is_favorite
            return None
        if recipe.is_favorite != expected:
            return None
        recipe.is_favorite = value
        return replace(recipe)

    def delete(self, recipe_id: str, owner_id: str) -> bool:
        if self.get(recipe_id, owner_id) is None:
            return False
        del self.rows[recipe_id]
        return True

    def delete_by_owner(self, owner_id: str) -> int:
        owned = self._owned(owner_id)
        for recipe in owned:
            del self.rows[recipe.id]
        return len(owned)

    def count_by_owner(self, owner_id: str, favorites_only: bool = False) -> int:
        return len([r for r in self._owned(owner_id) if r.is_favorite or not favorites_only])

    def count_all(self) -> int:
        return len(self.rows)

    def recent_by_owner(self, owner_id: str, limit: int = 5) -> list[Recipe]:
        return self.list_by_owner(owner_id, 1, limit).recipes


class InMemoryUserRepository(UserRepository):
    def __init__(self) -> None:
        self.profiles: dict[str, UserProfile] = {}
        self.counter_writes: list[tuple[str, int, int]] = []
        self.fail_create = False
        self.fail_counters = False

    def add(self, user_id: str, name: str = "Ada", email: Optional[str] = None, **fields: Any) -> UserProfile:
        profile = UserProfile(
            id=user_id,
            name=name,
            email=email or f"{user_id}@example.com",
            created_at=BASE_TIME,
            **fields,
        )
        self.profiles[user_id] = profile
        return replace(profile)

    def create_profile(self, user_id: str, name: str, email: str) -> UserProfile:
        if self.fail_create:
            raise RepositoryError("create_profile", "insert failed")
        return self.add(user_id, name=name, email=email)

    def get_profile(self, user_id: str) -> Optional[UserProfile]:
        profile = self.profiles.get(user_id)
        return replace(profile) if profile else None

    def get_profile_by_email(self, email: str) -> Optional[UserProfile]:
        for profile in self.profiles.values():
            if profile.email == email.lower():
                return replace(profile)
        return None

    def update_profile(self, user_id: str, changes: dict[str, Any]) -> Optional[UserProfile]:
        profile = self.profiles.get(user_id)
        if profile is None:
            return None
        for key, value in changes.items():
            if key == "last_login" and isinstance(value, str):
                value = datetime.fromisoformat(value)
            setattr(profile, key, value)
        return replace(profile)

    def set_counters(self, user_id: str, recipes_generated: int, favorite_recipes: int) -> None:
        if self.fail_counters:
            raise RepositoryError("set_counters", "update failed")
        self.counter_writes.append((user_id, recipes_generated, favorite_recipes))
        profile = self.profiles.get(user_id)
        if profile is not None:
            profile.recipes_generated = recipes_generated
            profile.favorite_recipes = favorite_recipes

    def delete_profile(self, user_id: str) -> bool:
        return self.profiles.pop(user_id, None) is not None

    def count_all(self, active_only: bool = False) -> int:
        return len([p for p in self.profiles.values() if p.is_active or not active_only])

    def count_with_more_recipes(self, recipes_generated: int) -> int:
        return len([p for p in self.profiles.values() if p.recipes_generated > recipes_generated])

    def sum_recipes_generated(self, active_only: bool = True) -> int:
        return sum(p.recipes_generated for p in self.profiles.values() if p.is_active or not active_only)


class StubAuthGateway(AuthGateway):
    def __init__(self) -> None:
        self.accounts: dict[str, tuple[str, str]] = {}
        self.tokens: dict[str, str] = {}
        self.deleted: list[str] = []

    def add(self, user_id: str, email: str, password: str) -> str:
        self.accounts[email] = (user_id, password)
        token = f"token-{user_id}"
        self.tokens[token] = user_id
        return token

    def create_user(self, email: str, password: str, name: str) -> AuthIdentity:
        if email in self.accounts:
            raise EmailAlreadyRegisteredError(email)
        user_id = f"user-{len(self.accounts) + 1}"
        self.add(user_id, email, password)
        return AuthIdentity(user_id=user_id, email=email)

    def sign_in(self, email: str, password: str) -> AuthIdentity:
        account = self.accounts.get(email)
        if account is None or account[1] != password:
            raise AuthenticationError()
        return AuthIdentity(user_id=account[0], email=email, access_token=f"token-{account[0]}")

    def verify_token(self, token: str) -> Optional[AuthIdentity]:
        user_id = self.tokens.get(token)
        return AuthIdentity(user_id=user_id, access_token=token) if user_id else None

    def delete_user(self, user_id: str) -> None:
        self.deleted.append(user_id)
        self.accounts = {k: v for k, v in self.accounts.items() if v[0] != user_id}
        self.tokens = {k: v for k, v in self.tokens.items() if v != user_id}


class StubGenerator:
    def __init__(self, text: str = "**Spicy Ramen**\nIngredients:\n- noodles", error: Optional[Exception] = None):
        self.text = text
        self.error = error
        self.prompts: list[str] = []

    def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.text


@pytest.fixture
def recipe_repo() -> InMemoryRecipeRepository:
    return InMemoryRecipeRepository()


@pytest.fixture
def user_repo() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def auth_gateway() -> StubAuthGateway:
    return StubAuthGateway()


@pytest.fixture
def generator() -> StubGenerator:
    return StubGenerator()
