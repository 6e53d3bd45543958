"""Tests for the interactive terminal front-end."""

import io

import pytest
from prompt_toolkit.document import Document
from rich.console import Console

from cloudsh.repl import TerminalShell
from cloudsh.repl.terminal import BOOT_LINES, PathCompleter


@pytest.fixture
def output():
    return io.StringIO()


@pytest.fixture
def terminal(engine, output):
    console = Console(file=output, width=120, highlight=False)
    return TerminalShell(engine, console=console, boot_delay=0)


def completions(completer, text):
    return [c.text for c in completer.get_completions(Document(text), None)]


@pytest.mark.asyncio
async def test_boot_banner(terminal, output):
    await terminal.boot()

    printed = output.getvalue()
    assert BOOT_LINES[0] in printed
    assert "Type 'help' for a list of available commands." in printed


@pytest.mark.asyncio
async def test_run_line_renders_output(terminal, output):
    assert await terminal.run_line("cat welcome.msg") is True

    assert output.getvalue().splitlines() == [
        "Welcome to the Neural Kernel.",
        "All systems operational.",
    ]


@pytest.mark.asyncio
async def test_clear_is_not_printed(terminal, output):
    await terminal.run_line("clear")

    assert "CLEAR_SIGNAL" not in output.getvalue()


@pytest.mark.asyncio
async def test_state_carries_between_lines(terminal, output):
    await terminal.run_line("mkdir loot")
    await terminal.run_line("cd loot")
    await terminal.run_line("pwd")

    assert output.getvalue().strip() == "/root/loot"
    assert terminal.engine.prompt() == "root@kali:~/loot# "


def test_path_completer(vfs):
    completer = PathCompleter(vfs)

    assert completions(completer, "cat we") == ["welcome.msg"]
    assert completions(completer, "cd /e") == ["/etc/"]
    assert completions(completer, "ls ") == ["welcome.msg", "todo.txt"]
    assert completions(completer, "ca") == []


class BrokenSession:
    """Prompt session whose first read fails."""

    async def prompt_async(self, message):
        raise RuntimeError("terminal went away")


@pytest.mark.asyncio
async def test_main_loop_releases_engine_on_error(engine_with_kernel, provider, output, monkeypatch):
    """
    Given: A terminal whose prompt raises an unexpected error
    When: The main loop runs
    Then: The error propagates and the engine's provider is still released
    """
    terminal = TerminalShell(engine_with_kernel, console=Console(file=output), boot_delay=0)
    monkeypatch.setattr(terminal, "_create_session", lambda: BrokenSession())

    with pytest.raises(RuntimeError):
        await terminal._main()

    assert provider.cleaned_up
