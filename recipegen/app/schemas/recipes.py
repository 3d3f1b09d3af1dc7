from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from recipegen.app.domain.models import (
    DEFAULT_SERVINGS,
    MAX_SERVINGS,
    MIN_SERVINGS,
    DirectRequest,
    GenerationRequest,
    IngredientsRequest,
    Recipe,
)

CategoryName = Literal["Breakfast", "Lunch", "Dinner", "Snack", "Dessert", "Beverage"]


class GenerateRequest(BaseModel):
    type: Literal["direct", "ingredients"]
    prompt: Optional[str] = Field(default=None, validate_default=True)
    servings: Optional[int] = Field(default=None, validate_default=True)
    ingredients: Optional[list[str]] = Field(default=None, validate_default=True)
    time: Optional[int] = Field(default=None, gt=0)

    @field_validator("prompt")
    @classmethod
    def _prompt_required_for_direct(cls, value: Optional[str], info: ValidationInfo) -> Optional[str]:
        if info.data.get("type") == "direct" and not (value and value.strip()):
            raise ValueError("Prompt is required for direct recipe generation")
        return value

    @field_validator("servings")
    @classmethod
    def _servings_in_range(cls, value: Optional[int], info: ValidationInfo) -> Optional[int]:
        if value is None and info.data.get("type") != "direct":
            return value
        if value is None or not MIN_SERVINGS <= value <= MAX_SERVINGS:
            raise ValueError(f"Servings must be a number between {MIN_SERVINGS} and {MAX_SERVINGS}")
        return value

    @field_validator("ingredients")
    @classmethod
    def _ingredients_required(cls, value: Optional[list[str]], info: ValidationInfo) -> Optional[list[str]]:
        if info.data.get("type") == "ingredients" and not value:
            raise ValueError("At least one ingredient is required")
        return value

    def to_domain(self) -> GenerationRequest:
        servings = self.servings or DEFAULT_SERVINGS
        if self.type == "direct":
            return DirectRequest(dish_name=self.prompt or "", servings=servings)
        return IngredientsRequest(
            ingredients=tuple(self.ingredients or ()),
            servings=servings,
            time_limit_minutes=self.time,
        )


class RecipeResponse(BaseModel):
    id: str
    title: str
    ingredients: list[str] = Field(default_factory=list)
    instructions: str
    category: CategoryName
    promptType: Literal["direct", "ingredients"]
    originalPrompt: str
    servings: Optional[int] = None
    isFavorite: bool = False
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None

    @classmethod
    def from_domain(cls, recipe: Recipe) -> "RecipeResponse":
        return cls(
            id=recipe.id,
            title=recipe.title,
            ingredients=list(recipe.ingredients),
            instructions=recipe.instructions,
            category=recipe.category.value,
            promptType=recipe.prompt_type.value,
            originalPrompt=recipe.original_prompt,
            servings=recipe.servings,
            isFavorite=recipe.is_favorite,
            createdAt=recipe.created_at.isoformat() if recipe.created_at else None,
            updatedAt=recipe.updated_at.isoformat() if recipe.updated_at else None,
        )


class GenerateData(BaseModel):
    text: str
    recipe: Optional[RecipeResponse] = None
    cached: bool = False


class Pagination(BaseModel):
    current: int
    pages: int
    total: int


class RecipeListData(BaseModel):
    recipes: list[RecipeResponse]
    pagination: Pagination


class RecipeData(BaseModel):
    recipe: RecipeResponse
