# recipegen/app/deps.py (Supabase client singleton, services exposed as dependencies)

from __future__ import annotations

import logging
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from starlette.concurrency import run_in_threadpool
from supabase import Client, create_client

from recipegen.app.config import Settings, settings
from recipegen.app.domain.errors import AuthenticationError
from recipegen.app.domain.models import UserProfile
from recipegen.app.infra.auth.base import AuthGateway
from recipegen.app.infra.auth.supabase_auth import SupabaseAuthGateway
from recipegen.app.infra.db.base import RecipeRepository, UserRepository
from recipegen.app.infra.db.supabase_repo import SupabaseRecipeRepository, SupabaseUserRepository
from recipegen.app.services.auth_service import AuthService
from recipegen.app.services.recipe_service import RecipeService
from recipegen.app.services.user_service import UserService
from recipegen.services.errors import GeminiConfigurationError
from recipegen.services.gemini_client import GeminiClient
from recipegen.services.orchestrator import GenerationOrchestrator

logger = logging.getLogger(__name__)

_client: Client | None = None


def get_supabase() -> Client:
    global _client
    if _client is None:
        _client = create_client(str(settings.SUPABASE_URL).rstrip("/"),
                                settings.SUPABASE_SERVICE_ROLE_KEY)
    return _client


def _session_client() -> Client:
    key = settings.SUPABASE_ANON_KEY or settings.SUPABASE_SERVICE_ROLE_KEY
    return create_client(str(settings.SUPABASE_URL).rstrip("/"), key)


def build_orchestrator(config: Settings) -> Optional[GenerationOrchestrator]:
    """Create the Gemini client once; None when no API key is configured."""
    try:
        client = GeminiClient(
            api_key=config.GEMINI_API_KEY.get_secret_value(),
            model_name=config.GEMINI_MODELS[0] if config.GEMINI_MODELS else "gemini-2.5-flash",
            timeout_seconds=config.GEMINI_TIMEOUT_SECONDS,
        )
    except GeminiConfigurationError:
        logger.error("GEMINI_API_KEY is not set; recipe generation is disabled")
        return None
    return GenerationOrchestrator(
        client,
        models=config.GEMINI_MODELS,
        quota_backoff_seconds=config.GEMINI_QUOTA_BACKOFF_SECONDS,
    )


def get_orchestrator(request: Request) -> Optional[GenerationOrchestrator]:
    return getattr(request.app.state, "orchestrator", None)


def get_recipe_repository(supa: Client = Depends(get_supabase)) -> RecipeRepository:
    return SupabaseRecipeRepository(supa)


def get_user_repository(supa: Client = Depends(get_supabase)) -> UserRepository:
    return SupabaseUserRepository(supa)


def get_auth_gateway(supa: Client = Depends(get_supabase)) -> AuthGateway:
    return SupabaseAuthGateway(supa, _session_client)


def get_auth_service(
    gateway: AuthGateway = Depends(get_auth_gateway),
    users: UserRepository = Depends(get_user_repository),
) -> AuthService:
    return AuthService(gateway, users)


def get_recipe_service(
    orchestrator: Optional[GenerationOrchestrator] = Depends(get_orchestrator),
    recipes: RecipeRepository = Depends(get_recipe_repository),
    users: UserRepository = Depends(get_user_repository),
) -> RecipeService:
    return RecipeService(orchestrator, recipes, users)


def get_user_service(
    users: UserRepository = Depends(get_user_repository),
    recipes: RecipeRepository = Depends(get_recipe_repository),
    gateway: AuthGateway = Depends(get_auth_gateway),
) -> UserService:
    return UserService(users, recipes, gateway)


auth_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    cred: HTTPAuthorizationCredentials | None = Depends(auth_scheme),
    auth: AuthService = Depends(get_auth_service),
) -> UserProfile:
    """
    Receives Authorization: Bearer <access_token> issued by Supabase Auth,
    validates it and returns the caller's active profile.
    """
    if cred is None or cred.scheme.lower() != "bearer":
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Access denied. No token provided.")

    try:
        return await run_in_threadpool(auth.authenticate, cred.credentials)
    except AuthenticationError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc))


async def get_optional_user(
    cred: HTTPAuthorizationCredentials | None = Depends(auth_scheme),
    auth: AuthService = Depends(get_auth_service),
) -> Optional[UserProfile]:
    if cred is None or cred.scheme.lower() != "bearer":
        return None
    try:
        return await run_in_threadpool(auth.authenticate, cred.credentials)
    except AuthenticationError:
        return None
