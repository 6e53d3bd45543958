"""Shared fixtures for cloudsh tests."""

import pytest

from cloudsh.ai import KernelFallback
from cloudsh.repl import ShellEngine
from cloudsh.vfs import VirtualFileSystem

from .fakes import FakeProvider


@pytest.fixture
def vfs():
    """A freshly seeded filesystem (cwd = /root)."""
    return VirtualFileSystem()


@pytest.fixture
def engine(vfs):
    """Engine with no fallback, no pacing and no colors."""
    return ShellEngine(vfs, pacing=0)


@pytest.fixture
def provider():
    return FakeProvider(reply="")


@pytest.fixture
def engine_with_kernel(vfs, provider):
    """Engine whose unknown commands go to a fake LLM."""
    return ShellEngine(vfs, fallback=KernelFallback(provider), pacing=0)
