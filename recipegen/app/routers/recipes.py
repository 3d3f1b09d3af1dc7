# recipegen/app/routers/recipes.py
from __future__ import annotations

import logging
import time
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from starlette.concurrency import run_in_threadpool

from recipegen.app.deps import get_current_user, get_optional_user, get_recipe_service
from recipegen.app.domain.errors import RecipeNotFoundError
from recipegen.app.domain.models import Category, UserProfile
from recipegen.app.schemas.common import ApiResponse
from recipegen.app.schemas.recipes import (
    CategoryName,
    GenerateData,
    GenerateRequest,
    Pagination,
    RecipeData,
    RecipeListData,
    RecipeResponse,
)
from recipegen.app.services.recipe_service import RecipeService

log = logging.getLogger(__name__)
router = APIRouter(prefix="/api/recipes", tags=["recipes"])


@router.post("/generate", response_model=ApiResponse[GenerateData])
async def generate_recipe(
    body: GenerateRequest,
    user: Optional[UserProfile] = Depends(get_optional_user),
    service: RecipeService = Depends(get_recipe_service),
) -> ApiResponse[GenerateData]:
    owner_id = user.id if user else None
    t0 = time.time()
    log.info("generate.start type=%s owner=%s", body.type, owner_id)

    outcome = await run_in_threadpool(service.generate, body.to_domain(), owner_id)

    log.info(
        "generate.ok type=%s owner=%s saved=%s dt=%.2fs",
        body.type, owner_id, outcome.recipe is not None, time.time() - t0,
    )
    recipe = RecipeResponse.from_domain(outcome.recipe) if outcome.recipe else None
    return ApiResponse(data=GenerateData(text=outcome.text, recipe=recipe))


@router.get("", response_model=ApiResponse[RecipeListData])
async def list_recipes(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    category: Optional[CategoryName] = Query(default=None),
    favorite: Optional[bool] = Query(default=None),
    user: UserProfile = Depends(get_current_user),
    service: RecipeService = Depends(get_recipe_service),
) -> ApiResponse[RecipeListData]:
    result = await run_in_threadpool(
        service.list_recipes,
        user.id,
        page,
        limit,
        Category(category) if category else None,
        bool(favorite),
    )
    return ApiResponse(
        data=RecipeListData(
            recipes=[RecipeResponse.from_domain(recipe) for recipe in result.recipes],
            pagination=Pagination(current=result.page, pages=result.pages, total=result.total),
        )
    )


@router.get("/{recipe_id}", response_model=ApiResponse[RecipeData])
async def get_recipe(
    recipe_id: str,
    user: UserProfile = Depends(get_current_user),
    service: RecipeService = Depends(get_recipe_service),
) -> ApiResponse[RecipeData]:
    try:
        recipe = await run_in_threadpool(service.get_recipe, recipe_id, user.id)
    except RecipeNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    return ApiResponse(data=RecipeData(recipe=RecipeResponse.from_domain(recipe)))


@router.put("/{recipe_id}/favorite", response_model=ApiResponse[RecipeData])
async def toggle_favorite(
    recipe_id: str,
    user: UserProfile = Depends(get_current_user),
    service: RecipeService = Depends(get_recipe_service),
) -> ApiResponse[RecipeData]:
    try:
        recipe = await run_in_threadpool(service.toggle_favorite, recipe_id, user.id)
    except RecipeNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))

    message = "Recipe added to favorites" if recipe.is_favorite else "Recipe removed from favorites"
    return ApiResponse(message=message, data=RecipeData(recipe=RecipeResponse.from_domain(recipe)))


@router.delete("/{recipe_id}", response_model=ApiResponse[None])
async def delete_recipe(
    recipe_id: str,
    user: UserProfile = Depends(get_current_user),
    service: RecipeService = Depends(get_recipe_service),
) -> ApiResponse[None]:
    try:
        await run_in_threadpool(service.delete_recipe, recipe_id, user.id)
    except RecipeNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    log.info("recipe.deleted recipe=%s owner=%s", recipe_id, user.id)
    return ApiResponse(message="Recipe deleted successfully")
