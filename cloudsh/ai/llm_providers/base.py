"""
Base abstract LLM provider interface.

Every backend the kernel fallback can talk to subclasses BaseLLMProvider and
owns one ``httpx.AsyncClient``, opened lazily on the first completion.
"""

from abc import ABC, abstractmethod
from typing import Dict, Any, List, Optional
from dataclasses import dataclass
from enum import Enum

import httpx


class ModelCapability(Enum):
    """Features a backend may offer beyond plain completion."""
    TEXT_GENERATION = "text_generation"
    SYSTEM_PROMPT = "system_prompt"


@dataclass
class LLMConfig:
    """Connection and sampling settings for one provider instance."""

    base_url: str
    api_key: Optional[str] = None

    model: str = "default"
    temperature: float = 0.7
    max_tokens: Optional[int] = None
    top_p: float = 0.9

    # Request timeout in seconds
    timeout: float = 60.0


@dataclass
class LLMResponse:
    """Text returned by a completion, plus bookkeeping from the backend."""

    content: str
    model: str
    finish_reason: Optional[str] = None
    usage: Optional[Dict[str, int]] = None
    raw_response: Optional[Dict[str, Any]] = None


class BaseLLMProvider(ABC):
    """
    Abstract base class for LLM providers.

    Subclasses build the backend-specific request in ``complete`` and use
    ``self._client``, whose base URL and timeout come from the config.
    """

    def __init__(
        self,
        config: LLMConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            config: LLM configuration
            transport: Optional httpx transport (tests use ``httpx.MockTransport``)
        """
        self.config = config
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name (e.g., 'ollama', 'gemini')."""
        pass

    @property
    @abstractmethod
    def supported_capabilities(self) -> List[ModelCapability]:
        pass

    def supports_capability(self, capability: ModelCapability) -> bool:
        return capability in self.supported_capabilities

    async def initialize(self) -> None:
        """Open the HTTP client."""
        self._client = httpx.AsyncClient(
            base_url=self.config.base_url,
            timeout=self.config.timeout,
            transport=self._transport,
        )

    async def cleanup(self) -> None:
        """Close the HTTP client, if open."""
        if self._client:
            await self._client.aclose()
            self._client = None

    @abstractmethod
    async def complete(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        **kwargs
    ) -> LLMResponse:
        """
        Generate a text completion.

        Args:
            prompt: The user prompt
            system_prompt: Optional system prompt (only honoured by providers
                that list ModelCapability.SYSTEM_PROMPT)
            **kwargs: Sampling overrides (temperature, top_p)

        Returns:
            LLMResponse with generated text

        Raises:
            httpx.HTTPError: If the request fails
        """
        pass
