from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from starlette.concurrency import run_in_threadpool

from recipegen.app.deps import get_current_user, get_recipe_service, get_user_service
from recipegen.app.domain.errors import AuthenticationError, UserNotFoundError
from recipegen.app.domain.models import UserProfile
from recipegen.app.schemas.common import ApiResponse
from recipegen.app.schemas.users import (
    DeleteAccountRequest,
    PreferencesResponse,
    PreferencesUpdate,
    RecipeCountData,
    UserStatsResponse,
)
from recipegen.app.services.recipe_service import RecipeService
from recipegen.app.services.user_service import UserService

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("/stats", response_model=ApiResponse[UserStatsResponse])
async def get_stats(
    user: UserProfile = Depends(get_current_user),
    users: UserService = Depends(get_user_service),
) -> ApiResponse[UserStatsResponse]:
    stats = await run_in_threadpool(users.get_stats, user)
    return ApiResponse(data=UserStatsResponse.from_domain(stats))


@router.get("/recipes/count", response_model=ApiResponse[RecipeCountData])
async def count_recipes(
    user: UserProfile = Depends(get_current_user),
    recipes: RecipeService = Depends(get_recipe_service),
) -> ApiResponse[RecipeCountData]:
    count = await run_in_threadpool(recipes.count_recipes, user.id)
    return ApiResponse(data=RecipeCountData(count=count))


@router.get("/preferences", response_model=ApiResponse[PreferencesResponse])
async def get_preferences(
    user: UserProfile = Depends(get_current_user),
    users: UserService = Depends(get_user_service),
) -> ApiResponse[PreferencesResponse]:
    return ApiResponse(data=PreferencesResponse.from_domain(users.get_preferences(user)))


@router.put("/preferences", response_model=ApiResponse[PreferencesResponse])
async def update_preferences(
    body: PreferencesUpdate,
    user: UserProfile = Depends(get_current_user),
    users: UserService = Depends(get_user_service),
) -> ApiResponse[PreferencesResponse]:
    try:
        profile = await run_in_threadpool(users.update_preferences, user.id, body.to_changes())
    except UserNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    return ApiResponse(
        message="Preferences updated successfully",
        data=PreferencesResponse.from_domain(users.get_preferences(profile)),
    )


@router.delete("/account", response_model=ApiResponse[None])
async def delete_account(
    body: DeleteAccountRequest,
    user: UserProfile = Depends(get_current_user),
    users: UserService = Depends(get_user_service),
) -> ApiResponse[None]:
    try:
        await run_in_threadpool(users.delete_account, user, body.password)
    except AuthenticationError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return ApiResponse(message="Account deleted successfully")
