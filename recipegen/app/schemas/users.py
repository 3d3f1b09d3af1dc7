from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from recipegen.app.domain.models import AppStats, UserPreferences, UserStats


class RecentRecipe(BaseModel):
    id: str
    title: str
    category: str
    createdAt: Optional[str] = None


class AchievementItem(BaseModel):
    name: str
    description: str


class UserStatsResponse(BaseModel):
    recipesGenerated: int
    favoriteRecipes: int
    userRank: int
    totalUsers: int
    joinDate: Optional[str] = None
    recentRecipes: list[RecentRecipe] = Field(default_factory=list)
    achievements: list[AchievementItem] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, stats: UserStats) -> "UserStatsResponse":
        return cls(
            recipesGenerated=stats.recipes_generated,
            favoriteRecipes=stats.favorite_recipes,
            userRank=stats.user_rank,
            totalUsers=stats.total_users,
            joinDate=stats.join_date.isoformat() if stats.join_date else None,
            recentRecipes=[
                RecentRecipe(
                    id=recipe.id,
                    title=recipe.title,
                    category=recipe.category.value,
                    createdAt=recipe.created_at.isoformat() if recipe.created_at else None,
                )
                for recipe in stats.recent_recipes
            ],
            achievements=[
                AchievementItem(name=item.name, description=item.description)
                for item in stats.achievements
            ],
        )


class RecipeCountData(BaseModel):
    count: int


class PreferencesResponse(BaseModel):
    favoritesCuisine: Optional[str] = None
    dietaryRestrictions: str
    skillLevel: str
    preferredCookingTime: str

    @classmethod
    def from_domain(cls, preferences: UserPreferences) -> "PreferencesResponse":
        return cls(
            favoritesCuisine=preferences.favorites_cuisine,
            dietaryRestrictions=preferences.dietary_restrictions,
            skillLevel=preferences.skill_level,
            preferredCookingTime=preferences.preferred_cooking_time,
        )


class PreferencesUpdate(BaseModel):
    favoritesCuisine: Optional[str] = Field(default=None, max_length=200)
    dietaryRestrictions: Optional[str] = Field(default=None, max_length=200)
    skillLevel: Optional[str] = Field(default=None, max_length=50)
    preferredCookingTime: Optional[str] = Field(default=None, max_length=50)

    def to_changes(self) -> dict[str, Optional[str]]:
        provided = self.model_dump(exclude_unset=True)
        columns = {
            "favoritesCuisine": "favorites_cuisine",
            "dietaryRestrictions": "dietary_restrictions",
            "skillLevel": "skill_level",
            "preferredCookingTime": "preferred_cooking_time",
        }
        return {columns[key]: value for key, value in provided.items()}


class DeleteAccountRequest(BaseModel):
    password: str = Field(..., min_length=1)


class AppStatsResponse(BaseModel):
    totalUsers: int
    totalRecipes: int
    avgRecipesPerUser: float
    totalRecipesGenerated: int

    @classmethod
    def from_domain(cls, stats: AppStats) -> "AppStatsResponse":
        return cls(
            totalUsers=stats.total_users,
            totalRecipes=stats.total_recipes,
            avgRecipesPerUser=stats.avg_recipes_per_user,
            totalRecipesGenerated=stats.total_recipes_generated,
        )
