from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Sequence

if TYPE_CHECKING:
    from recipegen.services.orchestrator import AttemptResult


class ServiceError(Exception):
    pass


class GeminiConfigurationError(ServiceError):
    pass


class EmptyGenerationError(ServiceError):
    pass


class GenerationError(ServiceError):
    status_code = 500
    public_message = "Failed to generate recipe"

    def __init__(self, message: str, attempts: Optional[Sequence["AttemptResult"]] = None):
        super().__init__(message)
        self.attempts = list(attempts or [])

    @property
    def models_tried(self) -> list[str]:
        return [attempt.model for attempt in self.attempts]


class AIConfigurationError(GenerationError):
    public_message = "AI service configuration error - Invalid API key"


class ModelUnavailableError(GenerationError):
    public_message = "AI model not available. Please try again later or contact support."


class QuotaExceededError(GenerationError):
    status_code = 429
    public_message = "AI service quota exceeded. Please try again in a few minutes."

    def __init__(
        self,
        message: str,
        attempts: Optional[Sequence["AttemptResult"]] = None,
        retry_after: int = 60,
    ):
        super().__init__(message, attempts)
        self.retry_after = retry_after


def _status_code(exc: BaseException) -> Optional[int]:
    # google-genai APIError exposes `code`, older clients `status_code`
    value = getattr(exc, "code", None) or getattr(exc, "status_code", None)
    return value if isinstance(value, int) else None


def is_quota_error(exc: BaseException) -> bool:
    if _status_code(exc) == 429:
        return True
    message = str(exc)
    return "quota" in message or "QUOTA" in message or "429" in message or "RESOURCE_EXHAUSTED" in message


def classify_generation_error(
    exc: BaseException,
    attempts: Optional[Sequence["AttemptResult"]] = None,
) -> GenerationError:
    """
    Map the last upstream failure to the error the HTTP layer reports.

    An empty answer is a plain failure and an explicit HTTP 429 status is
    always quota. Otherwise the message text is checked in order:
    credentials, model availability, quota, anything else.
    """
    if isinstance(exc, GenerationError):
        return type(exc)(str(exc), attempts)

    message = str(exc) or exc.__class__.__name__
    if isinstance(exc, EmptyGenerationError):
        return GenerationError(message, attempts)
    if _status_code(exc) == 429:
        return QuotaExceededError(message, attempts)
    if "API key" in message or "API_KEY" in message:
        return AIConfigurationError(message, attempts)
    if "model" in message or "Model" in message or "not found" in message or "404" in message:
        return ModelUnavailableError(message, attempts)
    if is_quota_error(exc):
        return QuotaExceededError(message, attempts)
    return GenerationError(message, attempts)
