"""Shell engine and interactive terminal.

The engine executes single input lines against the virtual filesystem and
streams output lines; the terminal wraps it in a prompt_toolkit session.
"""

from cloudsh.repl.parser import CLEAR_SIGNAL, Builtin, CommandClass, ParsedCommand, parse_line
from cloudsh.repl.shell import ShellEngine
from cloudsh.repl.terminal import TerminalShell

__all__ = [
    "ShellEngine",
    "TerminalShell",
    "Builtin",
    "CommandClass",
    "ParsedCommand",
    "parse_line",
    "CLEAR_SIGNAL",
]
