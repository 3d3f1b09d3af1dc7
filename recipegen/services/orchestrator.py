from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional, Protocol, Sequence

from recipegen.services.errors import GenerationError, classify_generation_error, is_quota_error

logger = logging.getLogger(__name__)

DEFAULT_MODELS = (
    "gemini-flash-latest",
    "gemini-2.5-flash",
    "gemini-2.0-flash",
    "gemini-2.0-flash-001",
    "gemini-pro-latest",
    "gemini-2.5-pro",
)

_LOG_MESSAGE_LIMIT = 200


class TextGenerator(Protocol):
    def generate_content(self, user_prompt: str, model_name: Optional[str] = None) -> str:
        ...


@dataclass
class AttemptResult:
    """Outcome of asking one model for a completion."""
    model: str
    text: Optional[str] = None
    error: Optional[Exception] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None

    @property
    def quota_limited(self) -> bool:
        return self.error is not None and is_quota_error(self.error)


class GenerationOrchestrator:
    """
    Sends a prompt to each configured model in order until one answers.

    The first successful answer is returned as-is; models later in the list
    are never called once one succeeds. When every model fails, the last
    failure is classified and raised with the full attempt history.

    `quota_backoff_seconds` adds an exponential pause after a quota-limited
    attempt before moving on (0 disables it).
    """

    def __init__(
        self,
        client: TextGenerator,
        models: Sequence[str] = DEFAULT_MODELS,
        quota_backoff_seconds: float = 0.0,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._client = client
        self.models = list(models)
        self.quota_backoff_seconds = quota_backoff_seconds
        self._sleep = sleep

    def attempt(self, prompt: str, model: str) -> AttemptResult:
        try:
            text = self._client.generate_content(prompt, model_name=model)
        except Exception as exc:
            return AttemptResult(model=model, error=exc)
        return AttemptResult(model=model, text=text)

    def generate(self, prompt: str) -> str:
        attempts: list[AttemptResult] = []
        quota_failures = 0

        for index, model in enumerate(self.models):
            logger.info("generation.try model=%s", model)
            result = self.attempt(prompt, model)
            attempts.append(result)

            if result.succeeded:
                logger.info("generation.ok model=%s attempts=%d", model, len(attempts))
                return result.text or ""

            logger.warning(
                "generation.fail model=%s quota=%s error=%s",
                model,
                result.quota_limited,
                str(result.error)[:_LOG_MESSAGE_LIMIT],
            )
            is_last = index == len(self.models) - 1
            if result.quota_limited and self.quota_backoff_seconds > 0 and not is_last:
                delay = self.quota_backoff_seconds * (2 ** quota_failures)
                quota_failures += 1
                logger.info("generation.backoff seconds=%.1f", delay)
                self._sleep(delay)

        if not attempts:
            raise GenerationError("All Gemini models failed")

        last_error = attempts[-1].error
        logger.error("generation.exhausted models=%s", ",".join(self.models))
        raise classify_generation_error(last_error, attempts) from last_error
