"""
Kernel fallback: lets an LLM "execute" commands the shell doesn't implement.

The shell hands over the working directory, the directory listing, any
readable scripts next to the user, and the raw command line. Whatever text
comes back is shown to the user verbatim.
"""

import logging
from typing import Dict, List, Optional

import httpx

from cloudsh import config as cloudsh_config
from cloudsh.ai.llm_providers import (
    BaseLLMProvider,
    GeminiProvider,
    ModelCapability,
    OllamaProvider,
)

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """\
You are the kernel/shell of a simulated Linux machine (Kali GNU/Linux Rolling)
running inside a mobile OS called CloudOS. The user is typing commands into a
terminal.

Rules:
1. Reply with exactly what the terminal would print. No explanations.
2. Never wrap output in markdown code fences.
3. Simulate tools that are not installed as if they were (scanners, package
   managers, interpreters) with plausible, concise output.
4. If a file's contents are provided, base the output of running it on them.
5. If an interactive tool is active, answer as that tool would.
"""


class FallbackUnavailable(Exception):
    """The fallback interpreter could not produce a response."""
    pass


class KernelFallback:
    """
    Fallback interpreter backed by an LLM provider.

    Example:
        >>> kernel = KernelFallback(OllamaProvider.remote("localhost"))
        >>> text = await kernel.interpret("/root", ["todo.txt"], "nmap 10.0.0.1")
    """

    def __init__(self, provider: BaseLLMProvider, system_prompt: str = SYSTEM_PROMPT):
        """
        Args:
            provider: LLM provider used for completions
            system_prompt: Instruction that frames the model as a shell
        """
        self.provider = provider
        self.system_prompt = system_prompt

    def build_prompt(
        self,
        cwd: str,
        listing: List[str],
        line: str,
        active_tool: Optional[str] = None,
        files: Optional[Dict[str, str]] = None,
        user: str = "root",
    ) -> str:
        """Render the context block sent to the model."""
        listing_str = ", ".join(listing) if listing else "(empty)"
        parts = [
            f"Current User: {user}",
            f"Current Directory: {cwd}",
            f"Directory Contents: {listing_str}",
        ]
        if active_tool:
            parts.append(f"Active Interactive Tool: {active_tool}")

        for name, content in (files or {}).items():
            parts.append(f"\n[FILE START: {name}]\n{content}\n[FILE END: {name}]")

        parts.append(f"\nUser Command: {line}")
        return "\n".join(parts)

    async def interpret(
        self,
        cwd: str,
        listing: List[str],
        line: str,
        active_tool: Optional[str] = None,
        files: Optional[Dict[str, str]] = None,
        user: str = "root",
    ) -> str:
        """
        Ask the model what `line` prints.

        Returns:
            Raw response text (may be empty)

        Raises:
            FallbackUnavailable: If the provider fails for any reason
        """
        prompt = self.build_prompt(cwd, listing, line, active_tool, files, user)
        try:
            if self.provider.supports_capability(ModelCapability.SYSTEM_PROMPT):
                response = await self.provider.complete(prompt, system_prompt=self.system_prompt)
            else:
                response = await self.provider.complete(f"{self.system_prompt}\n{prompt}")
        except httpx.HTTPError as e:
            raise FallbackUnavailable(f"{self.provider.name}: {e}") from e
        except Exception as e:
            logger.debug(f"Unexpected {self.provider.name} failure", exc_info=True)
            raise FallbackUnavailable(f"{self.provider.name}: {e}") from e

        return response.content or ""

    async def close(self) -> None:
        """Release the provider's connections."""
        await self.provider.cleanup()


def create_provider(llm: cloudsh_config.LLMConfig) -> BaseLLMProvider:
    """
    Build an LLM provider from the user configuration.

    Raises:
        ValueError: On an unknown provider name
    """
    if llm.provider == "ollama":
        return OllamaProvider.remote(
            host=llm.host,
            port=llm.port,
            model=llm.model,
            temperature=llm.temperature,
            max_tokens=llm.max_tokens,
            timeout=llm.timeout,
        )
    if llm.provider == "gemini":
        return GeminiProvider.from_api_key(
            llm.resolved_api_key() or "",
            model=llm.model,
            temperature=llm.temperature,
            max_tokens=llm.max_tokens,
            timeout=llm.timeout,
        )
    raise ValueError(f"Unknown LLM provider: {llm.provider}")
