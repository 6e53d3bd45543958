"""
Ollama LLM Provider.

Talks to an Ollama server's ``/api/generate`` endpoint, either on this
machine or on another host on the network.
"""

from typing import List, Optional

from .base import BaseLLMProvider, LLMConfig, LLMResponse, ModelCapability

DEFAULT_PORT = 11434


class OllamaProvider(BaseLLMProvider):
    """Ollama provider (non-streaming generate requests)."""

    @property
    def name(self) -> str:
        return "ollama"

    @property
    def supported_capabilities(self) -> List[ModelCapability]:
        return [
            ModelCapability.TEXT_GENERATION,
            ModelCapability.SYSTEM_PROMPT,
        ]

    @classmethod
    def remote(
        cls,
        host: str = "localhost",
        port: int = DEFAULT_PORT,
        model: str = "llama3.2",
        **kwargs
    ) -> 'OllamaProvider':
        """
        Create provider for an Ollama instance.

        Example:
            >>> provider = OllamaProvider.remote(
            ...     host='192.168.1.100',
            ...     model='llama3.2'
            ... )
        """
        config = LLMConfig(
            base_url=f"http://{host}:{port}",
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
        Generate completion using Ollama.

        Args:
            prompt: User prompt
            system_prompt: Optional system prompt
            **kwargs: Sampling overrides (temperature, top_p)

        Returns:
            LLMResponse with generated text
        """
        if not self._client:
            await self.initialize()

        options = {
            "temperature": kwargs.get("temperature", self.config.temperature),
            "top_p": kwargs.get("top_p", self.config.top_p),
        }
        if self.config.max_tokens:
            options["num_predict"] = self.config.max_tokens

        data = {
            "model": self.config.model,
            "prompt": prompt,
            "stream": False,
            "options": options,
        }
        if system_prompt:
            data["system"] = system_prompt

        response = await self._client.post("/api/generate", json=data)
        response.raise_for_status()
        result = response.json()

        return LLMResponse(
            content=result.get("response", ""),
            model=result.get("model", self.config.model),
            finish_reason=result.get("done_reason"),
            usage={
                "prompt_tokens": result.get("prompt_eval_count", 0),
                "completion_tokens": result.get("eval_count", 0),
            },
            raw_response=result,
        )
