"""Interactive terminal front-end for the shell engine."""

import asyncio
import contextlib
import logging
import signal
from pathlib import Path
from typing import Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.history import FileHistory, InMemoryHistory
from prompt_toolkit.styles import Style
from rich.console import Console
from rich.text import Text

from cloudsh.repl.parser import CLEAR_SIGNAL
from cloudsh.repl.shell import ShellEngine
from cloudsh.vfs import VirtualFileSystem

logger = logging.getLogger(__name__)

BOOT_LINES = [
    "Initialising CloudOS Kernel v3.0.0...",
    "Loading drivers... [OK]",
    "Mounting virtual filesystem... [OK]",
    "Checking network interfaces... [OK]",
    "Establishing secure uplink... [CONNECTED]",
    "--------------------------------------------------",
    "CloudOS Shell [Version 3.0.0-kali]",
    "(c) 2024 CloudOS Security. All rights reserved.",
    "Type 'help' for a list of available commands.",
    "--------------------------------------------------",
]


class PathCompleter(Completer):
    """Tab completion for VFS paths."""

    def __init__(self, vfs: VirtualFileSystem):
        self.vfs = vfs

    def get_completions(self, document, complete_event):
        """Get path completion candidates."""
        text = document.text_before_cursor
        words = text.split()

        # Only complete arguments, and only while a word is being typed
        if len(words) > 1 and not text.endswith(" "):
            partial = words[-1]
        elif words and text.endswith(" "):
            partial = ""
        else:
            return

        for candidate in self.vfs.complete(partial):
            yield Completion(candidate, start_position=-len(partial))


class TerminalShell:
    """Interactive shell session around a ShellEngine.

    Reads lines with prompt_toolkit, streams output to a rich console and
    lets Ctrl-C cancel a command while it is still producing output.
    """

    def __init__(
        self,
        engine: ShellEngine,
        console: Optional[Console] = None,
        history_path: Optional[Path] = None,
        boot_delay: float = 0.1,
    ):
        """Initialize the terminal.

        Args:
            engine: Engine that executes the lines
            console: Output console (default: a new rich Console)
            history_path: File for input history (None: in-memory only)
            boot_delay: Delay between boot banner lines
        """
        self.engine = engine
        self.console = console or Console(highlight=False)
        self.boot_delay = boot_delay
        self.history_path = history_path

    def _create_session(self) -> PromptSession:
        if self.history_path is not None:
            self.history_path.parent.mkdir(parents=True, exist_ok=True)
            history = FileHistory(str(self.history_path))
        else:
            history = InMemoryHistory()

        return PromptSession(
            history=history,
            completer=PathCompleter(self.engine.vfs),
            style=Style.from_dict(
                {
                    "prompt": "ansired bold",
                }
            ),
        )

    def run(self) -> None:
        """Run the shell main loop until `exit` or EOF."""
        asyncio.run(self._main())

    async def _main(self) -> None:
        session = self._create_session()
        try:
            await self.boot()

            while not self.engine.closed:
                try:
                    line = await session.prompt_async([("class:prompt", self.engine.prompt())])
                except KeyboardInterrupt:
                    self.console.print("^C")
                    continue
                except EOFError:
                    break

                await self.run_line(line)
        finally:
            await self.engine.aclose()

    async def boot(self) -> None:
        """Print the boot banner."""
        for line in BOOT_LINES:
            self.console.print(line, style="dim")
            if self.boot_delay > 0:
                await asyncio.sleep(self.boot_delay)

    async def run_line(self, line: str) -> bool:
        """Execute one line, rendering output as it arrives.

        Returns:
            False if the command was interrupted, True otherwise
        """
        task = asyncio.ensure_future(self.render(line))
        loop = asyncio.get_running_loop()
        # Signal handlers are unavailable on some platforms (Windows)
        with contextlib.suppress(NotImplementedError, RuntimeError):
            loop.add_signal_handler(signal.SIGINT, task.cancel)

        try:
            await task
            return True
        except asyncio.CancelledError:
            if not task.cancelled():
                raise
            self.console.print("^C")
            logger.debug(f"Interrupted: {line}")
            return False
        finally:
            with contextlib.suppress(NotImplementedError, RuntimeError):
                loop.remove_signal_handler(signal.SIGINT)

    async def render(self, line: str) -> None:
        """Stream the output of `line` to the console."""
        stream = self.engine.execute(line)
        try:
            async for out in stream:
                if out == CLEAR_SIGNAL:
                    self.console.clear()
                else:
                    self.console.print(Text.from_ansi(out))
        finally:
            await stream.aclose()
