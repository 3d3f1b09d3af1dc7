# recipegen/app/domain/models.py
"""
Domain models for recipe generation and the user's recipe book.
These are pure data structures with no infrastructure dependencies.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Union

MAX_TITLE_LENGTH = 200
DEFAULT_SERVINGS = 4
MIN_SERVINGS = 1
MAX_SERVINGS = 20


class Category(str, Enum):
    """Meal category assigned to a generated recipe."""
    BREAKFAST = "Breakfast"
    LUNCH = "Lunch"
    DINNER = "Dinner"
    SNACK = "Snack"
    DESSERT = "Dessert"
    BEVERAGE = "Beverage"


class PromptType(str, Enum):
    """How the user asked for the recipe."""
    DIRECT = "direct"
    INGREDIENTS = "ingredients"


@dataclass(frozen=True)
class DirectRequest:
    """Generate a recipe for a named dish."""
    dish_name: str
    servings: int = DEFAULT_SERVINGS

    kind = PromptType.DIRECT

    def __post_init__(self) -> None:
        if not self.dish_name or not self.dish_name.strip():
            raise ValueError("dish_name must not be empty")
        _check_servings(self.servings)


@dataclass(frozen=True)
class IngredientsRequest:
    """Generate a recipe around ingredients the user already has."""
    ingredients: tuple[str, ...]
    servings: int = DEFAULT_SERVINGS
    time_limit_minutes: Optional[int] = None

    kind = PromptType.INGREDIENTS

    def __post_init__(self) -> None:
        if not self.ingredients:
            raise ValueError("ingredients must not be empty")
        _check_servings(self.servings)


GenerationRequest = Union[DirectRequest, IngredientsRequest]


def _check_servings(servings: int) -> None:
    if not MIN_SERVINGS <= servings <= MAX_SERVINGS:
        raise ValueError(f"servings must be between {MIN_SERVINGS} and {MAX_SERVINGS}")


@dataclass
class ParsedRecipe:
    """Structured fields pulled out of the raw model output."""
    title: str
    ingredients: list[str]
    category: Category
    instructions: str  # raw generated text, stored verbatim


@dataclass
class Recipe:
    """A generated recipe saved in the owner's recipe book."""
    id: str
    owner_id: str
    title: str
    ingredients: list[str]
    instructions: str
    category: Category
    prompt_type: PromptType
    original_prompt: str
    servings: Optional[int] = None
    is_favorite: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class RecipePage:
    """One page of an owner's recipes."""
    recipes: list[Recipe]
    page: int
    limit: int
    total: int

    @property
    def pages(self) -> int:
        if self.limit <= 0:
            return 0
        return math.ceil(self.total / self.limit)


@dataclass
class UserProfile:
    """
    Application profile of a Supabase Auth user.

    `recipes_generated` and `favorite_recipes` are denormalized counts of the
    user's recipes; services overwrite them with fresh counts after every
    change instead of adjusting them by deltas.
    """
    id: str
    name: str
    email: str
    bio: Optional[str] = None
    favorites_cuisine: Optional[str] = None
    profile_picture: Optional[str] = None
    dietary_restrictions: Optional[str] = None
    skill_level: Optional[str] = None
    preferred_cooking_time: Optional[str] = None
    recipes_generated: int = 0
    favorite_recipes: int = 0
    is_active: bool = True
    last_login: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class Achievement:
    name: str
    description: str


@dataclass
class UserStats:
    recipes_generated: int
    favorite_recipes: int
    user_rank: int
    total_users: int
    join_date: Optional[datetime]
    recent_recipes: list[Recipe] = field(default_factory=list)
    achievements: list[Achievement] = field(default_factory=list)


@dataclass
class UserPreferences:
    favorites_cuisine: Optional[str]
    dietary_restrictions: str = "None"
    skill_level: str = "Intermediate"
    preferred_cooking_time: str = "30-45 minutes"


@dataclass
class AppStats:
    total_users: int
    total_recipes: int
    avg_recipes_per_user: float
    total_recipes_generated: int


@dataclass
class AuthSession:
    """Result of a successful registration or login."""
    user: UserProfile
    token: str
