from __future__ import annotations

from fastapi import APIRouter, Depends
from starlette.concurrency import run_in_threadpool

from recipegen.app.deps import get_user_service
from recipegen.app.schemas.common import ApiResponse
from recipegen.app.schemas.users import AppStatsResponse
from recipegen.app.services.user_service import UserService

router = APIRouter(prefix="/api", tags=["stats"])


@router.get("/stats", response_model=ApiResponse[AppStatsResponse])
async def app_stats(users: UserService = Depends(get_user_service)) -> ApiResponse[AppStatsResponse]:
    stats = await run_in_threadpool(users.app_stats)
    return ApiResponse(data=AppStatsResponse.from_domain(stats))
