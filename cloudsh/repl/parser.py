"""Command-line parsing and the built-in command table.

Input lines are split on whitespace only. The one piece of syntax the shell
understands is ``echo <text> > <file>``.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

# Yielded instead of text when the transcript should be wiped
CLEAR_SIGNAL = "CLEAR_SIGNAL"

REDIRECT = ">"


class CommandClass(Enum):
    """How a built-in is executed."""
    FILESYSTEM = "Core"
    CAPABILITY = "Hardware"
    NETWORK = "Network"
    HACKING = "Hacking"
    SYSTEM = "System"


class Builtin(Enum):
    """Every command the engine implements itself.

    Each member carries its command name, class, usage and a one-line
    description (used by ``help``).
    """

    LS = ("ls", CommandClass.FILESYSTEM, "ls [path]", "List directory contents")
    CD = ("cd", CommandClass.FILESYSTEM, "cd [path]", "Change directory (no path: home)")
    PWD = ("pwd", CommandClass.FILESYSTEM, "pwd", "Print working directory")
    CAT = ("cat", CommandClass.FILESYSTEM, "cat <file>...", "Print file content")
    ECHO = ("echo", CommandClass.FILESYSTEM, "echo <text> [> file]", "Print text or write it to a file")
    MKDIR = ("mkdir", CommandClass.FILESYSTEM, "mkdir [-p] <dir>...", "Create directories")
    TOUCH = ("touch", CommandClass.FILESYSTEM, "touch <file>...", "Create empty files")
    RM = ("rm", CommandClass.FILESYSTEM, "rm <path>...", "Remove files or directories")
    WHOAMI = ("whoami", CommandClass.FILESYSTEM, "whoami", "Print the current user")
    CLEAR = ("clear", CommandClass.FILESYSTEM, "clear", "Clear the terminal")
    HELP = ("help", CommandClass.FILESYSTEM, "help [command]", "Show help")

    CAMERA = ("camera", CommandClass.CAPABILITY, "camera", "Take a photo with the camera")
    MIC = ("mic", CommandClass.CAPABILITY, "mic [seconds]", "Record audio from the microphone")
    GPS = ("gps", CommandClass.CAPABILITY, "gps", "Print the current location")

    CURL = ("curl", CommandClass.NETWORK, "curl <url>", "Probe a URL and print response headers")

    NMAP = ("nmap", CommandClass.HACKING, "nmap [target]", "Scan a host for open ports")
    HYDRA = ("hydra", CommandClass.HACKING, "hydra -l <user> -P <list> <target> <service>", "Brute-force a login")
    SQLMAP = ("sqlmap", CommandClass.HACKING, "sqlmap -u <url>", "Probe a URL for SQL injection")
    MSFCONSOLE = ("msfconsole", CommandClass.HACKING, "msfconsole", "Start the Metasploit console")
    WIFITE = ("wifite", CommandClass.HACKING, "wifite", "Attack nearby wireless networks")
    AIRCRACK = ("aircrack-ng", CommandClass.HACKING, "aircrack-ng <pcap>", "Crack a captured WPA handshake")

    DATE = ("date", CommandClass.SYSTEM, "date", "Print the date and time")
    UNAME = ("uname", CommandClass.SYSTEM, "uname [-a]", "Print system information")
    SUDO = ("sudo", CommandClass.SYSTEM, "sudo <command>", "Run a command as root")
    PING = ("ping", CommandClass.SYSTEM, "ping [host]", "Send ICMP echo requests")
    IFCONFIG = ("ifconfig", CommandClass.SYSTEM, "ifconfig", "Show network interfaces")
    NEOFETCH = ("neofetch", CommandClass.SYSTEM, "neofetch", "Show system summary")
    HISTORY = ("history", CommandClass.SYSTEM, "history", "Show command history")
    APT = ("apt", CommandClass.SYSTEM, "apt <update|upgrade|install>", "Manage packages")

    def __init__(self, command: str, command_class: CommandClass, usage: str, description: str):
        self.command = command
        self.command_class = command_class
        self.usage = usage
        self.description = description

    @classmethod
    def lookup(cls, name: str) -> Optional['Builtin']:
        """Map a command name (or alias) to its built-in, if any."""
        return _BY_NAME.get(name)


ALIASES: Dict[str, Builtin] = {
    "ip": Builtin.IFCONFIG,
    "wget": Builtin.CURL,
    "apt-get": Builtin.APT,
}

_BY_NAME: Dict[str, Builtin] = {member.command: member for member in Builtin}
_BY_NAME.update(ALIASES)


@dataclass
class ParsedCommand:
    """A tokenized input line.

    Attributes:
        raw: The trimmed input line
        name: Lower-cased command name
        args: Positional arguments
        builtin: Matching built-in, or None for the fallback path
        redirect: True when the line was ``echo ... > target``
        redirect_target: File named after ``>`` (None if missing)
    """

    raw: str
    name: str
    args: List[str] = field(default_factory=list)
    builtin: Optional[Builtin] = None
    redirect: bool = False
    redirect_target: Optional[str] = None

    @property
    def text(self) -> str:
        """Arguments joined back into text, quotes stripped (echo semantics)."""
        return strip_quotes(" ".join(self.args))


def strip_quotes(text: str) -> str:
    """Remove one pair of matching surrounding quotes."""
    if len(text) >= 2 and text[0] == text[-1] and text[0] in ("'", '"'):
        return text[1:-1]
    return text


def parse_line(line: str) -> Optional[ParsedCommand]:
    """Tokenize one input line.

    Returns:
        ParsedCommand, or None for a blank line
    """
    raw = line.strip()
    if not raw:
        return None

    tokens = raw.split()
    name = tokens[0].lower()
    args = tokens[1:]
    command = ParsedCommand(raw=raw, name=name, args=args, builtin=Builtin.lookup(name))

    if command.builtin is Builtin.ECHO and REDIRECT in args:
        index = args.index(REDIRECT)
        command.args = args[:index]
        command.redirect = True
        if index + 1 < len(args):
            command.redirect_target = args[index + 1]

    return command
