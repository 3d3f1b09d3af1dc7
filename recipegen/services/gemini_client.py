from __future__ import annotations

from typing import Optional

from google import genai
from google.genai import types

from recipegen.services.errors import EmptyGenerationError, GeminiConfigurationError


class GeminiClient:
    def __init__(
        self,
        api_key: str,
        model_name: str = "gemini-2.5-flash",
        timeout_seconds: Optional[float] = None,
    ) -> None:
        self.api_key = api_key
        self.model_name = model_name
        self.timeout_seconds = timeout_seconds
        self._client = self._configure_api()

    def _configure_api(self) -> genai.Client:
        if not self.api_key:
            raise GeminiConfigurationError("Missing Google API key.")
        http_options = None
        if self.timeout_seconds:
            # HttpOptions.timeout is expressed in milliseconds
            http_options = types.HttpOptions(timeout=int(self.timeout_seconds * 1000))
        return genai.Client(api_key=self.api_key, http_options=http_options)

    def generate_content(
        self,
        user_prompt: str,
        model_name: Optional[str] = None,
        system_instruction: Optional[str] = None,
    ) -> str:
        config = None
        if system_instruction:
            config = types.GenerateContentConfig(system_instruction=system_instruction)

        response = self._client.models.generate_content(
            model=model_name or self.model_name,
            contents=user_prompt,
            config=config,
        )
        text = response.text
        if not text:
            raise EmptyGenerationError("Model response did not include text content.")
        return text
