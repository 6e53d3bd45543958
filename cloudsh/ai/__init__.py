"""
AI integration for cloudsh.

The only AI feature is the kernel fallback: commands the shell does not
implement are described to an LLM, which answers with plausible output.
"""

from .kernel import KernelFallback, FallbackUnavailable, create_provider

__all__ = [
    'KernelFallback',
    'FallbackUnavailable',
    'create_provider',
]
