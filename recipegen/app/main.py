# recipegen/app/main.py
from __future__ import annotations

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from recipegen.app.config import settings
from recipegen.app.deps import build_orchestrator
from recipegen.app.domain.errors import (
    AuthenticationError,
    EmailAlreadyRegisteredError,
    InvalidProfilePictureError,
    RecipeAppError,
    RecipeNotFoundError,
    UserNotFoundError,
)
from recipegen.app.routers.auth import router as auth_router
from recipegen.app.routers.recipes import router as recipes_router
from recipegen.app.routers.stats import router as stats_router
from recipegen.app.routers.users import router as users_router
from recipegen.app.schemas.common import ErrorResponse, FieldError
from recipegen.services.errors import GenerationError, QuotaExceededError

APP_VERSION = "1.0.0"

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
log = logging.getLogger(__name__)

app = FastAPI(title="AI Recipe Generator API", version=APP_VERSION)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.FRONTEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(recipes_router)
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(stats_router)

_DOMAIN_STATUS = (
    (RecipeNotFoundError, 404),
    (UserNotFoundError, 404),
    (AuthenticationError, 401),
    (EmailAlreadyRegisteredError, 409),
    (InvalidProfilePictureError, 400),
)


def _error_response(
    status_code: int,
    message: str,
    exc: Optional[BaseException] = None,
    **extra: Any,
) -> JSONResponse:
    body = ErrorResponse(message=message, **extra)
    if exc is not None and not settings.is_production:
        body.error = str(exc)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


def _field_error(err: dict[str, Any]) -> FieldError:
    loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
    ctx = err.get("ctx") or {}
    if err.get("type") == "value_error" and "error" in ctx:
        message = str(ctx["error"])
    else:
        message = err.get("msg", "Invalid value")
    return FieldError(field=".".join(loc) or "body", message=message)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return _error_response(400, "Validation error", errors=[_field_error(err) for err in exc.errors()])


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 404 and exc.detail == "Not Found":
        content = ErrorResponse(message="API endpoint not found").model_dump(exclude_none=True)
        content["path"] = request.url.path
        return JSONResponse(status_code=404, content=content)
    return _error_response(exc.status_code, str(exc.detail))


@app.exception_handler(GenerationError)
async def generation_error_handler(request: Request, exc: GenerationError) -> JSONResponse:
    log.warning(
        "generate.fail kind=%s models=%s error=%s",
        type(exc).__name__, ",".join(exc.models_tried), str(exc)[:200],
    )
    extra: dict[str, Any] = {}
    if isinstance(exc, QuotaExceededError):
        extra["retryAfter"] = exc.retry_after
    return _error_response(exc.status_code, exc.public_message, exc, **extra)


@app.exception_handler(RecipeAppError)
async def domain_error_handler(request: Request, exc: RecipeAppError) -> JSONResponse:
    for error_type, status_code in _DOMAIN_STATUS:
        if isinstance(exc, error_type):
            return _error_response(status_code, str(exc))
    log.error("request.fail path=%s error=%s", request.url.path, exc)
    return _error_response(500, "Internal server error", exc)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    log.exception("request.crash path=%s", request.url.path)
    return _error_response(500, "Internal server error", exc)


@app.on_event("startup")
async def startup() -> None:
    app.state.orchestrator = build_orchestrator(settings)
    log.info("startup env=%s models=%s", settings.APP_ENV, ",".join(settings.GEMINI_MODELS))


@app.get("/health")
def health() -> dict[str, Any]:
    return {
        "success": True,
        "message": "Server is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": settings.APP_ENV,
        "version": APP_VERSION,
    }


@app.post("/generate", include_in_schema=False)
def legacy_generate() -> RedirectResponse:
    return RedirectResponse(url="/api/recipes/generate", status_code=307)
