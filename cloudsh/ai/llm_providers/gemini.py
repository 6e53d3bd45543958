"""
Google Gemini LLM Provider.

Talks to the public Generative Language REST API over httpx.
"""

from typing import List, Optional

from .base import BaseLLMProvider, LLMConfig, LLMResponse, ModelCapability

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"


class GeminiProvider(BaseLLMProvider):
    """Gemini provider using the ``models/{model}:generateContent`` endpoint."""

    @property
    def name(self) -> str:
        return "gemini"

    @property
    def supported_capabilities(self) -> List[ModelCapability]:
        return [
            ModelCapability.TEXT_GENERATION,
            ModelCapability.SYSTEM_PROMPT,
        ]

    @classmethod
    def from_api_key(cls, api_key: str, model: str = "gemini-2.0-flash", **kwargs) -> 'GeminiProvider':
        """Create provider for the hosted API."""
        config = LLMConfig(
            base_url=GEMINI_BASE_URL,
            api_key=api_key,
            model=model,
            **kwargs
        )
        return cls(config)

    async def complete(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        **kwargs
    ) -> LLMResponse:
        """
        Generate completion using Gemini.

        Raises:
            ValueError: If no API key is configured
            httpx.HTTPError: If the request fails
        """
        if not self.config.api_key:
            raise ValueError("Gemini provider requires an API key")

        if not self._client:
            await self.initialize()

        generation_config = {
            "temperature": kwargs.get("temperature", self.config.temperature),
            "topP": kwargs.get("top_p", self.config.top_p),
        }
        if self.config.max_tokens:
            generation_config["maxOutputTokens"] = self.config.max_tokens

        data = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": generation_config,
        }
        if system_prompt:
            data["systemInstruction"] = {"parts": [{"text": system_prompt}]}

        response = await self._client.post(
            f"/models/{self.config.model}:generateContent",
            headers={"x-goog-api-key": self.config.api_key},
            json=data,
        )
        response.raise_for_status()

        result = response.json()
        candidates = result.get("candidates") or []
        text = ""
        finish_reason = None
        if candidates:
            parts = candidates[0].get("content", {}).get("parts", [])
            text = "".join(part.get("text", "") for part in parts)
            finish_reason = candidates[0].get("finishReason")

        usage = result.get("usageMetadata", {})
        return LLMResponse(
            content=text,
            model=self.config.model,
            finish_reason=finish_reason,
            usage={
                "prompt_tokens": usage.get("promptTokenCount", 0),
                "completion_tokens": usage.get("candidatesTokenCount", 0),
            },
            raw_response=result,
        )
