from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from typing import Any, Optional
from uuid import uuid4

from supabase import Client, create_client

from recipegen.app.domain.errors import RepositoryError
from recipegen.app.domain.models import (
    Category,
    ParsedRecipe,
    PromptType,
    Recipe,
    RecipePage,
    UserProfile,
)
from recipegen.app.infra.db.base import RecipeRepository, UserRepository

logger = logging.getLogger(__name__)

RECIPE_COLUMNS = (
    "id,owner_id,title,ingredients,instructions,category,prompt_type,"
    "original_prompt,servings,is_favorite,created_at,updated_at"
)
PROFILE_COLUMNS = (
    "id,name,email,bio,favorites_cuisine,profile_picture,dietary_restrictions,"
    "skill_level,preferred_cooking_time,recipes_generated,favorite_recipes,"
    "is_active,last_login,created_at,updated_at"
)
DEFAULT_BIO = "Passionate home cook who loves experimenting with AI-generated recipes."
DEFAULT_FAVORITES_CUISINE = "Italian, Asian, Mediterranean"
# PostgREST caps a response at max_rows (1000 by default)
PROFILE_PAGE_SIZE = 1000


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def _parse_datetime(value: str | datetime | None) -> datetime | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str):
        return None

    try:
        normalized = value.replace("Z", "+00:00") if value.endswith("Z") else value
        return datetime.fromisoformat(normalized)
    except ValueError:
        return None


def _safe_int(value: object, default: int = 0) -> int:
    return int(value) if value else default


def _safe_str(value: object) -> str | None:
    return str(value) if value else None


def _category(value: object) -> Category:
    try:
        return Category(str(value))
    except ValueError:
        return Category.DINNER


def _row_to_recipe(row: dict[str, Any]) -> Recipe:
    ingredients = row.get("ingredients") or []
    return Recipe(
        id=str(row["id"]),
        owner_id=str(row["owner_id"]),
        title=str(row.get("title") or ""),
        ingredients=[str(item) for item in ingredients],
        instructions=str(row.get("instructions") or ""),
        category=_category(row.get("category")),
        prompt_type=PromptType(str(row["prompt_type"])),
        original_prompt=str(row.get("original_prompt") or ""),
        servings=_safe_int(row.get("servings")) if row.get("servings") else None,
        is_favorite=bool(row.get("is_favorite")),
        created_at=_parse_datetime(row.get("created_at")),
        updated_at=_parse_datetime(row.get("updated_at")),
    )


def _row_to_profile(row: dict[str, Any]) -> UserProfile:
    return UserProfile(
        id=str(row["id"]),
        name=str(row.get("name") or ""),
        email=str(row.get("email") or ""),
        bio=_safe_str(row.get("bio")),
        favorites_cuisine=_safe_str(row.get("favorites_cuisine")),
        profile_picture=_safe_str(row.get("profile_picture")),
        dietary_restrictions=_safe_str(row.get("dietary_restrictions")),
        skill_level=_safe_str(row.get("skill_level")),
        preferred_cooking_time=_safe_str(row.get("preferred_cooking_time")),
        recipes_generated=_safe_int(row.get("recipes_generated")),
        favorite_recipes=_safe_int(row.get("favorite_recipes")),
        is_active=row.get("is_active") is not False,
        last_login=_parse_datetime(row.get("last_login")),
        created_at=_parse_datetime(row.get("created_at")),
        updated_at=_parse_datetime(row.get("updated_at")),
    )


def _create_supabase_client() -> Client:
    url = os.getenv("SUPABASE_URL")
    key = os.getenv("SUPABASE_SERVICE_ROLE_KEY")
    if not url or not key:
        raise ValueError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY required")
    return create_client(url, key)


def _execute(operation: str, query: Any) -> Any:
    try:
        return query.execute()
    except (ConnectionError, TimeoutError) as error:
        logger.error("Network error during %s: %s", operation, error)
        raise RepositoryError(operation, str(error)) from error


class SupabaseRecipeRepository(RecipeRepository):
    TABLE_NAME = "generated_recipes"

    def __init__(self, client: Client | None = None):
        self._client = client or _create_supabase_client()

    def _table(self) -> Any:
        return self._client.table(self.TABLE_NAME)

    def create(
        self,
        owner_id: str,
        parsed: ParsedRecipe,
        prompt_type: PromptType,
        original_prompt: str,
        servings: Optional[int] = None,
    ) -> Recipe:
        now = _now_utc().isoformat()
        data = {
            "id": str(uuid4()),
            "owner_id": str(owner_id),
            "title": parsed.title,
            "ingredients": list(parsed.ingredients),
            "instructions": parsed.instructions,
            "category": parsed.category.value,
            "prompt_type": prompt_type.value,
            "original_prompt": original_prompt,
            "servings": servings,
            "is_favorite": False,
            "created_at": now,
            "updated_at": now,
        }
        result = _execute("create_recipe", self._table().insert(data))
        if not result.data:
            raise RepositoryError("create_recipe", "insert returned no rows")

        recipe = _row_to_recipe(result.data[0])
        logger.info("Created recipe: id=%s, owner=%s, category=%s", recipe.id, owner_id, recipe.category.value)
        return recipe

    def list_by_owner(
        self,
        owner_id: str,
        page: int = 1,
        limit: int = 10,
        category: Optional[Category] = None,
        favorites_only: bool = False,
    ) -> RecipePage:
        query = (
            self._table()
            .select(RECIPE_COLUMNS, count="exact")
            .eq("owner_id", str(owner_id))
        )
        if category:
            query = query.eq("category", category.value)
        if favorites_only:
            query = query.eq("is_favorite", True)

        start = (page - 1) * limit
        end = start + limit - 1
        result = _execute("list_recipes", query.order("created_at", desc=True).range(start, end))
        recipes = [_row_to_recipe(row) for row in result.data or []]

        total = getattr(result, "count", None)
        if total is None:
            total = len(recipes)
        return RecipePage(recipes=recipes, page=page, limit=limit, total=total)

    def get(self, recipe_id: str, owner_id: str) -> Optional[Recipe]:
        result = _execute(
            "get_recipe",
            self._table()
            .select(RECIPE_COLUMNS)
            .eq("id", recipe_id)
            .eq("owner_id", str(owner_id))
            .limit(1),
        )
        rows = result.data or []
        return _row_to_recipe(rows[0]) if rows else None

    def set_favorite(
        self,
        recipe_id: str,
        owner_id: str,
        expected: bool,
        value: bool,
    ) -> Optional[Recipe]:
        result = _execute(
            "set_favorite",
            self._table()
            .update({"is_favorite": value, "updated_at": _now_utc().isoformat()})
            .eq("id", recipe_id)
            .eq("owner_id", str(owner_id))
            .eq("is_favorite", expected),
        )
        rows = result.data or []
        return _row_to_recipe(rows[0]) if rows else None

    def delete(self, recipe_id: str, owner_id: str) -> bool:
        result = _execute(
            "delete_recipe",
            self._table().delete().eq("id", recipe_id).eq("owner_id", str(owner_id)),
        )
        deleted = bool(result.data)
        if deleted:
            logger.info("Deleted recipe: id=%s, owner=%s", recipe_id, owner_id)
        return deleted

    def delete_by_owner(self, owner_id: str) -> int:
        result = _execute("delete_recipes_by_owner", self._table().delete().eq("owner_id", str(owner_id)))
        removed = len(result.data or [])
        logger.info("Deleted %d recipes of owner=%s", removed, owner_id)
        return removed

    def count_by_owner(self, owner_id: str, favorites_only: bool = False) -> int:
        query = self._table().select("id", count="exact").eq("owner_id", str(owner_id))
        if favorites_only:
            query = query.eq("is_favorite", True)
        result = _execute("count_recipes", query.limit(1))
        return getattr(result, "count", 0) or 0

    def count_all(self) -> int:
        result = _execute("count_all_recipes", self._table().select("id", count="exact").limit(1))
        return getattr(result, "count", 0) or 0

    def recent_by_owner(self, owner_id: str, limit: int = 5) -> list[Recipe]:
        result = _execute(
            "recent_recipes",
            self._table()
            .select(RECIPE_COLUMNS)
            .eq("owner_id", str(owner_id))
            .order("created_at", desc=True)
            .limit(limit),
        )
        return [_row_to_recipe(row) for row in result.data or []]


class SupabaseUserRepository(UserRepository):
    TABLE_NAME = "profiles"

    def __init__(self, client: Client | None = None):
        self._client = client or _create_supabase_client()

    def _table(self) -> Any:
        return self._client.table(self.TABLE_NAME)

    def create_profile(self, user_id: str, name: str, email: str) -> UserProfile:
        now = _now_utc().isoformat()
        data = {
            "id": str(user_id),
            "name": name,
            "email": email,
            "bio": DEFAULT_BIO,
            "favorites_cuisine": DEFAULT_FAVORITES_CUISINE,
            "profile_picture": None,
            "recipes_generated": 0,
            "favorite_recipes": 0,
            "is_active": True,
            "last_login": now,
            "created_at": now,
            "updated_at": now,
        }
        result = _execute("create_profile", self._table().insert(data))
        if not result.data:
            raise RepositoryError("create_profile", "insert returned no rows")
        logger.info("Created profile: id=%s", user_id)
        return _row_to_profile(result.data[0])

    def get_profile(self, user_id: str) -> Optional[UserProfile]:
        result = _execute(
            "get_profile",
            self._table().select(PROFILE_COLUMNS).eq("id", str(user_id)).limit(1),
        )
        rows = result.data or []
        return _row_to_profile(rows[0]) if rows else None

    def get_profile_by_email(self, email: str) -> Optional[UserProfile]:
        result = _execute(
            "get_profile_by_email",
            self._table().select(PROFILE_COLUMNS).eq("email", email.lower()).limit(1),
        )
        rows = result.data or []
        return _row_to_profile(rows[0]) if rows else None

    def update_profile(self, user_id: str, changes: dict[str, Any]) -> Optional[UserProfile]:
        payload = dict(changes)
        payload["updated_at"] = _now_utc().isoformat()
        result = _execute("update_profile", self._table().update(payload).eq("id", str(user_id)))
        rows = result.data or []
        return _row_to_profile(rows[0]) if rows else None

    def set_counters(self, user_id: str, recipes_generated: int, favorite_recipes: int) -> None:
        _execute(
            "set_counters",
            self._table()
            .update(
                {
                    "recipes_generated": recipes_generated,
                    "favorite_recipes": favorite_recipes,
                    "updated_at": _now_utc().isoformat(),
                }
            )
            .eq("id", str(user_id)),
        )

    def delete_profile(self, user_id: str) -> bool:
        result = _execute("delete_profile", self._table().delete().eq("id", str(user_id)))
        return bool(result.data)

    def count_all(self, active_only: bool = False) -> int:
        query = self._table().select("id", count="exact")
        if active_only:
            query = query.eq("is_active", True)
        result = _execute("count_profiles", query.limit(1))
        return getattr(result, "count", 0) or 0

    def count_with_more_recipes(self, recipes_generated: int) -> int:
        result = _execute(
            "count_profiles_ahead",
            self._table()
            .select("id", count="exact")
            .gt("recipes_generated", recipes_generated)
            .limit(1),
        )
        return getattr(result, "count", 0) or 0

    def sum_recipes_generated(self, active_only: bool = True) -> int:
        total = 0
        offset = 0
        while True:
            query = self._table().select("id,recipes_generated")
            if active_only:
                query = query.eq("is_active", True)
            query = query.order("id").range(offset, offset + PROFILE_PAGE_SIZE - 1)
            rows = _execute("sum_recipes_generated", query).data or []
            total += sum(_safe_int(row.get("recipes_generated")) for row in rows)
            if len(rows) < PROFILE_PAGE_SIZE:
                return total
            offset += PROFILE_PAGE_SIZE
