"""
LLM Provider Abstractions for cloudsh.

Provides a unified interface for the backends the kernel fallback can use:
- Ollama (local and remote)
- Google Gemini
"""

from .base import BaseLLMProvider, LLMConfig, LLMResponse, ModelCapability
from .ollama import OllamaProvider
from .gemini import GeminiProvider

__all__ = [
    'BaseLLMProvider',
    'LLMConfig',
    'LLMResponse',
    'ModelCapability',
    'OllamaProvider',
    'GeminiProvider',
]
