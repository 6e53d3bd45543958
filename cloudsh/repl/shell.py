"""Streaming shell engine on top of the virtual filesystem."""

import asyncio
import logging
import random
from datetime import datetime
from typing import AsyncIterator, Callable, Dict, List, Optional

from cloudsh.ai import FallbackUnavailable, KernelFallback, create_provider
from cloudsh.collaborators import (
    Capability,
    CapabilityDenied,
    CapabilityProvider,
    HttpxNetworkProbe,
    NetworkProbe,
    StaticCapabilities,
    UnavailableCapabilities,
    Unreachable,
)
from cloudsh.config import CloudshConfig
from cloudsh.repl.parser import (
    CLEAR_SIGNAL,
    Builtin,
    CommandClass,
    ParsedCommand,
    parse_line,
)
from cloudsh.vfs import (
    DirectoryNode,
    EntryKind,
    FileNode,
    NotADirectoryError,
    NotAFileError,
    NotFoundError,
    RefusedRootError,
    VirtualFileSystem,
)

logger = logging.getLogger(__name__)

# Tools that put the session into a sub-tool until `exit`
INTERACTIVE_TOOLS = frozenset({
    "python", "python3", "mysql", "sqlite3",
    "ftp", "ssh", "nc", "node", "irb",
})

ANSI_RESET = "\x1b[0m"
ANSI_COLORS = {
    EntryKind.DIRECTORY: "\x1b[1;34m",
    EntryKind.EXECUTABLE: "\x1b[1;32m",
    EntryKind.ARCHIVE: "\x1b[1;31m",
}

UNAME_FULL = (
    "Linux kali 6.6.9-amd64 #1 SMP PREEMPT_DYNAMIC Kali 6.6.9-1kali1 "
    "(2024-01-08) x86_64 GNU/Linux"
)

IFCONFIG_LINES = [
    "eth0: flags=4163<UP,BROADCAST,RUNNING,MULTICAST>  mtu 1500",
    "        inet 10.0.2.15  netmask 255.255.255.0  broadcast 10.0.2.255",
    "        ether 08:00:27:1c:4a:22  txqueuelen 1000  (Ethernet)",
    "        RX packets 152  bytes 45210 (44.1 KiB)",
    "        TX packets 104  bytes 12450 (12.1 KiB)",
    "",
    "lo: flags=73<UP,LOOPBACK,RUNNING>  mtu 65536",
    "        inet 127.0.0.1  netmask 255.0.0.0",
    "        loop  txqueuelen 1000  (Local Loopback)",
]

NEOFETCH_ART = [
    "       .       ",
    "      / \\      ",
    "     /   \\     ",
    "    /_____\\    ",
    "   /       \\   ",
    "  /_________\\  ",
]

SQLMAP_BANNER = [
    "        ___",
    "       __H__",
    " ___ ___[.]_____ ___ ___  {1.7.2#stable}",
    "|_ -| . [,]     | .'| . |",
    "|___|_  [.]_|_|_|__,|  _|",
    "      |_|V...       |_|   http://sqlmap.org",
]

WIFITE_BANNER = [
    "   .               .    ",
    " .´  ·  .     .  ·  .  ",
    " :  :  :  (¯)  :  :  : ",
    " .  ·  .  ' '  .  ·  . ",
    "   '   '   wifite   '   ' ",
]

WIFITE_TARGETS = [
    "  NUM  ESSID              CH  ENCR  POWER  WPS?  CLIENT",
    "  ---  -----------------  --  ----  -----  ----  ------",
    "   1   Home_WiFi_2G        1  WPA2  45db   no    2",
    "   2   Starbucks_Guest     6  OPEN  70db   no    12",
    "   3   NETGEAR-99         11  WPA2  20db   yes   0",
]

MSF_BANNER = [
    "       =[ metasploit v6.3.55-dev                          ]",
    "+ -- --=[ 2392 exploits - 1235 auxiliary - 422 post       ]",
    "+ -- --=[ 1468 payloads - 47 encoders - 11 nops           ]",
    "+ -- --=[ 9 evasion                                       ]",
]

HYDRA_ATTEMPTS = [
    (1.0, "admin   pass: 123456"),
    (0.5, "admin   pass: password"),
    (0.5, "root    pass: toor"),
]

MSF_MODULE = "exploit/unix/ftp/vsftpd_234_backdoor"
LAB_TARGET = "192.168.1.55"

Handler = Callable[[ParsedCommand], AsyncIterator[str]]


class ShellEngine:
    """Turns input lines into lazily produced output lines.

    ``execute()`` is an async generator. Filesystem built-ins never await;
    capability, network and fallback commands (and paced output) do. Closing
    the generator early (``aclose()`` or cancelling the consuming task) stops
    output immediately; filesystem changes already made stay made.

    Example:
        >>> engine = ShellEngine(VirtualFileSystem(), pacing=0)
        >>> await engine.run_line("mkdir proj")
        []
        >>> await engine.run_line("cd proj")
        []
        >>> await engine.run_line("pwd")
        ['/root/proj']
    """

    def __init__(
        self,
        vfs: VirtualFileSystem,
        capabilities: Optional[CapabilityProvider] = None,
        network: Optional[NetworkProbe] = None,
        fallback: Optional[KernelFallback] = None,
        hostname: str = "kali",
        pacing: float = 1.0,
        line_delay: float = 0.05,
        long_output_threshold: int = 10,
        network_timeout: float = 5.0,
        color: bool = False,
    ):
        """Initialize the engine.

        Args:
            vfs: Filesystem the commands operate on
            capabilities: Hardware capability provider (default: deny all)
            network: Network probe (default: httpx HEAD requests)
            fallback: Interpreter for unknown commands (None: command not found)
            hostname: Host name shown in the prompt and by neofetch
            pacing: Multiplier for simulated latency; 0 disables sleeping
            line_delay: Delay between lines of long fallback output
            long_output_threshold: Fallback replies longer than this get paced
            network_timeout: Timeout for network probes, in seconds
            color: Emit ANSI colors in listings
        """
        self.vfs = vfs
        self.capabilities = capabilities or UnavailableCapabilities()
        self.network = network or HttpxNetworkProbe()
        self.fallback = fallback
        self.hostname = hostname
        self.pacing = pacing
        self.line_delay = line_delay
        self.long_output_threshold = long_output_threshold
        self.network_timeout = network_timeout
        self.color = color

        self.active_tool: Optional[str] = None
        self.closed = False
        self.history: List[str] = []

        # Command registry
        self.handlers: Dict[Builtin, Handler] = {
            Builtin.LS: self.cmd_ls,
            Builtin.CD: self.cmd_cd,
            Builtin.PWD: self.cmd_pwd,
            Builtin.CAT: self.cmd_cat,
            Builtin.ECHO: self.cmd_echo,
            Builtin.MKDIR: self.cmd_mkdir,
            Builtin.TOUCH: self.cmd_touch,
            Builtin.RM: self.cmd_rm,
            Builtin.WHOAMI: self.cmd_whoami,
            Builtin.CLEAR: self.cmd_clear,
            Builtin.HELP: self.cmd_help,
            Builtin.CAMERA: self.cmd_camera,
            Builtin.MIC: self.cmd_mic,
            Builtin.GPS: self.cmd_gps,
            Builtin.CURL: self.cmd_curl,
            Builtin.NMAP: self.cmd_nmap,
            Builtin.HYDRA: self.cmd_hydra,
            Builtin.SQLMAP: self.cmd_sqlmap,
            Builtin.MSFCONSOLE: self.cmd_msfconsole,
            Builtin.WIFITE: self.cmd_wifite,
            Builtin.AIRCRACK: self.cmd_aircrack,
            Builtin.DATE: self.cmd_date,
            Builtin.UNAME: self.cmd_uname,
            Builtin.SUDO: self.cmd_sudo,
            Builtin.PING: self.cmd_ping,
            Builtin.IFCONFIG: self.cmd_ifconfig,
            Builtin.NEOFETCH: self.cmd_neofetch,
            Builtin.HISTORY: self.cmd_history,
            Builtin.APT: self.cmd_apt,
        }

    @classmethod
    def from_config(cls, config: CloudshConfig, offline: bool = False) -> 'ShellEngine':
        """Build an engine and its collaborators from user configuration.

        Args:
            config: Loaded configuration
            offline: Skip the AI fallback entirely

        Raises:
            ValueError: On an unknown LLM provider or capability name
        """
        shell = config.shell
        if shell.granted_capabilities:
            capabilities = StaticCapabilities.from_names(
                shell.granted_capabilities,
                coordinates=(shell.latitude, shell.longitude, 10.0),
            )
        else:
            capabilities = UnavailableCapabilities()

        fallback = None if offline else KernelFallback(create_provider(config.llm))

        return cls(
            VirtualFileSystem(user=shell.user),
            capabilities=capabilities,
            network=HttpxNetworkProbe(),
            fallback=fallback,
            hostname=shell.hostname,
            pacing=shell.pacing,
            line_delay=shell.line_delay,
            long_output_threshold=shell.long_output_threshold,
            network_timeout=shell.network_timeout,
            color=shell.color,
        )

    # --- Caller interface ---

    @property
    def user(self) -> str:
        return self.vfs.user

    @property
    def current_path(self) -> str:
        """Working directory as shown in the prompt (home as ``~``)."""
        return self.vfs.display_path()

    def pwd(self) -> str:
        return self.vfs.pwd()

    def prompt(self) -> str:
        """Prompt text for the next input line."""
        if self.active_tool:
            return f"{self.active_tool} > "
        sigil = "#" if self.user == "root" else "$"
        return f"{self.user}@{self.hostname}:{self.current_path}{sigil} "

    async def execute(self, line: str) -> AsyncIterator[str]:
        """Execute one input line, yielding output lines as they are produced.

        Never raises for bad input or collaborator failures; the worst case
        is a single diagnostic line.
        """
        command = parse_line(line)
        if command is None:
            return

        self.history.append(command.raw)
        stream = self._dispatch(command)
        try:
            async for out in stream:
                yield out
        finally:
            await stream.aclose()

    async def run_line(self, line: str) -> List[str]:
        """Execute a line and collect all of its output."""
        return [out async for out in self.execute(line)]

    async def aclose(self) -> None:
        """Release collaborator resources."""
        if self.fallback is not None:
            await self.fallback.close()

    # --- Dispatch ---

    async def _dispatch(self, command: ParsedCommand) -> AsyncIterator[str]:
        if command.name == "exit":
            self._exit()
            return

        if command.builtin is None:
            logger.debug(f"No built-in for '{command.name}', using fallback")
            stream = self._run_fallback(command)
        else:
            stream = self.handlers[command.builtin](command)

        try:
            async for out in stream:
                yield out
        except Exception:
            logger.exception(f"Command '{command.name}' failed")
            yield f"bash: {command.name}: internal error"
        finally:
            await stream.aclose()

    def _exit(self) -> None:
        if self.active_tool is not None:
            logger.debug(f"Leaving {self.active_tool}")
            self.active_tool = None
        else:
            self.closed = True

    async def _run_fallback(self, command: ParsedCommand) -> AsyncIterator[str]:
        if self.fallback is None:
            yield self._not_found(command)
            return

        listing = [entry.name for entry in self.vfs.list()]
        try:
            text = await self.fallback.interpret(
                self.vfs.pwd(),
                listing,
                command.raw,
                active_tool=self.active_tool,
                files=self.vfs.context_files(),
                user=self.user,
            )
        except FallbackUnavailable as e:
            logger.warning(f"Kernel fallback unavailable: {e}")
            yield self._not_found(command)
            return

        if self.active_tool is None and command.name in INTERACTIVE_TOOLS:
            self.active_tool = command.name

        lines = text.splitlines()
        paced = len(lines) > self.long_output_threshold
        for index, out in enumerate(lines):
            if paced and index:
                await self._pause(self.line_delay)
            yield out

    @staticmethod
    def _not_found(command: ParsedCommand) -> str:
        return f"bash: {command.name}: command not found"

    async def _pause(self, seconds: float) -> None:
        if self.pacing > 0:
            await asyncio.sleep(seconds * self.pacing)

    @staticmethod
    def _timestamp() -> str:
        return datetime.now().strftime("%Y%m%d_%H%M%S")

    def _colorize(self, name: str, kind: EntryKind) -> str:
        color = ANSI_COLORS.get(kind)
        if not self.color or color is None:
            return name
        return f"{color}{name}{ANSI_RESET}"

    @staticmethod
    def _operands(args: List[str]) -> List[str]:
        """Arguments with option flags removed."""
        return [arg for arg in args if not (arg.startswith("-") and len(arg) > 1)]

    # --- Filesystem built-ins ---

    async def cmd_ls(self, command: ParsedCommand) -> AsyncIterator[str]:
        """List directory contents.

        Usage: ls [path]
        """
        operands = self._operands(command.args)
        path = operands[0] if operands else ""
        try:
            entries = self.vfs.list(path)
        except NotFoundError:
            yield f"ls: cannot access '{path}': No such file or directory"
            return

        if entries:
            yield "  ".join(self._colorize(entry.name, entry.kind) for entry in entries)

    async def cmd_cd(self, command: ParsedCommand) -> AsyncIterator[str]:
        """Change directory.

        Usage: cd [path]
        """
        path = command.args[0] if command.args else ""
        try:
            self.vfs.change_directory(path)
        except NotADirectoryError:
            yield f"cd: not a directory: {path}"
        except NotFoundError:
            yield f"cd: no such file or directory: {path}"

    async def cmd_pwd(self, command: ParsedCommand) -> AsyncIterator[str]:
        yield self.vfs.pwd()

    async def cmd_cat(self, command: ParsedCommand) -> AsyncIterator[str]:
        """Print each file's content as a single output item.

        Usage: cat <file>...
        """
        if not command.args:
            yield "cat: missing operand"
            return

        for path in command.args:
            content = self.vfs.read_file(path)
            if content is None:
                yield f"cat: {path}: No such file or directory"
                continue
            yield content

    async def cmd_echo(self, command: ParsedCommand) -> AsyncIterator[str]:
        """Print text, or write it to a file.

        Usage: echo <text>
               echo <text> > <file>
        """
        if not command.redirect:
            yield command.text
            return

        target = command.redirect_target
        if target is None:
            yield "bash: syntax error near unexpected token `newline'"
            return

        if isinstance(self.vfs.resolve(target), DirectoryNode):
            yield f"bash: {target}: Is a directory"
            return

        parent, name = self.vfs.resolver.resolve_parent(target, self.vfs.current)
        if parent is None or not name:
            yield f"bash: {target}: No such file or directory"
            return

        try:
            self.vfs.write_file(parent, name, command.text)
        except NotAFileError:
            yield f"bash: {target}: Is a directory"

    async def cmd_mkdir(self, command: ParsedCommand) -> AsyncIterator[str]:
        """Create directories.

        Usage: mkdir [-p] <dir>...
        """
        parents = "-p" in command.args
        operands = self._operands(command.args)
        if not operands:
            yield "mkdir: missing operand"
            return

        for path in operands:
            existing = self.vfs.resolve(path)
            if isinstance(existing, DirectoryNode):
                continue
            if isinstance(existing, FileNode):
                yield f"mkdir: cannot create directory '{path}': File exists"
                continue

            try:
                if parents:
                    self.vfs.make_path(path)
                    continue

                parent, name = self.vfs.resolver.resolve_parent(path, self.vfs.current)
                if parent is None or not name:
                    yield f"mkdir: cannot create directory '{path}': No such file or directory"
                    continue
                self.vfs.make_directory(parent, name)
            except NotADirectoryError:
                yield f"mkdir: cannot create directory '{path}': File exists"

    async def cmd_touch(self, command: ParsedCommand) -> AsyncIterator[str]:
        """Create empty files; existing entries are left alone.

        Usage: touch <file>...
        """
        operands = self._operands(command.args)
        if not operands:
            yield "touch: missing operand"
            return

        for path in operands:
            if self.vfs.resolve(path) is not None:
                continue

            parent, name = self.vfs.resolver.resolve_parent(path, self.vfs.current)
            if parent is None or not name:
                yield f"touch: cannot touch '{path}': No such file or directory"
                continue
            self.vfs.write_file(parent, name, "")

    async def cmd_rm(self, command: ParsedCommand) -> AsyncIterator[str]:
        """Remove files or directories (recursively).

        Usage: rm [-r] [-f] <path>...
        """
        operands = self._operands(command.args)
        if not operands:
            yield "rm: missing operand"
            return

        for path in operands:
            try:
                self.vfs.remove(path)
            except RefusedRootError:
                yield "rm: cannot remove root directory"
            except NotFoundError:
                yield f"rm: cannot remove '{path}': No such file or directory"

    async def cmd_whoami(self, command: ParsedCommand) -> AsyncIterator[str]:
        yield self.user

    async def cmd_clear(self, command: ParsedCommand) -> AsyncIterator[str]:
        yield CLEAR_SIGNAL

    async def cmd_help(self, command: ParsedCommand) -> AsyncIterator[str]:
        """Show help.

        Usage: help [command]
        """
        if command.args:
            topic = command.args[0].lower()
            builtin = Builtin.lookup(topic)
            if builtin is None:
                yield f"help: no help topics match '{topic}'"
                return
            yield f"{builtin.command}: {builtin.usage}"
            yield f"    {builtin.description}"
            return

        yield "GNU bash, version 5.1.16(1)-release (x86_64-pc-linux-gnu)"
        yield "These shell commands are defined internally.  Type 'help' to see this list."
        yield "Type 'help name' to find out more about the function 'name'."
        yield ""
        for command_class in CommandClass:
            names = [b.command for b in Builtin if b.command_class is command_class]
            yield f"{command_class.value + ':':<10}{', '.join(names)}"
        yield f"{'Other:':<10}anything else is handed to the kernel (john, python3, netstat, ...)"

    # --- Capability built-ins ---

    def _denied(self, command: ParsedCommand, error: CapabilityDenied) -> str:
        return f"{command.name}: {error.capability.value} access denied: {error.reason}"

    async def cmd_camera(self, command: ParsedCommand) -> AsyncIterator[str]:
        """Take a photo and store it in the current directory."""
        try:
            grant = await self.capabilities.acquire(Capability.CAMERA)
        except CapabilityDenied as e:
            yield self._denied(command, e)
            return

        yield f"[*] Camera acquired: /dev/{grant.device}"
        await self._pause(0.5)
        yield "[*] Capturing frame..."
        name = f"capture_{self._timestamp()}.jpg"
        self.vfs.write_file(self.vfs.current, name, "<binary JPEG data>")
        yield f"[+] Saved {name}"

    async def cmd_mic(self, command: ParsedCommand) -> AsyncIterator[str]:
        """Record audio and store it in the current directory.

        Usage: mic [seconds]
        """
        seconds = 3
        if command.args:
            try:
                seconds = int(command.args[0])
            except ValueError:
                seconds = 0
            if seconds <= 0:
                yield f"mic: invalid duration: {command.args[0]}"
                return

        try:
            grant = await self.capabilities.acquire(Capability.MICROPHONE)
        except CapabilityDenied as e:
            yield self._denied(command, e)
            return

        yield f"[*] Recording from {grant.device} for {seconds}s..."
        await self._pause(seconds)
        name = f"recording_{self._timestamp()}.wav"
        self.vfs.write_file(self.vfs.current, name, f"<binary WAV data, {seconds}s>")
        yield f"[+] Saved {name}"

    async def cmd_gps(self, command: ParsedCommand) -> AsyncIterator[str]:
        """Print the current location and log it to the current directory."""
        try:
            grant = await self.capabilities.acquire(Capability.GEOLOCATION)
        except CapabilityDenied as e:
            yield self._denied(command, e)
            return

        latitude, longitude, accuracy = grant.coordinates or (0.0, 0.0, 0.0)
        yield f"Latitude:  {latitude:.6f}"
        yield f"Longitude: {longitude:.6f}"
        yield f"Accuracy:  {accuracy:.0f} m"
        name = f"location_{self._timestamp()}.txt"
        self.vfs.write_file(self.vfs.current, name, f"{latitude:.6f},{longitude:.6f}")
        yield f"[+] Saved {name}"

    # --- Network built-ins ---

    async def cmd_curl(self, command: ParsedCommand) -> AsyncIterator[str]:
        """Probe a URL and print the status line and headers.

        Usage: curl <url>
        """
        operands = self._operands(command.args)
        if not operands:
            yield f"{command.name}: no URL specified!"
            return

        url = operands[0]
        try:
            result = await self.network.probe(url, self.network_timeout)
        except Unreachable as e:
            yield f"{command.name}: (7) Failed to connect to {e.url}: {e.reason}"
            return

        if not result.reachable:
            yield f"{command.name}: (7) Failed to connect to {result.url}: {result.error}"
            return

        yield f"{result.http_version} {result.status_code} {result.reason}".rstrip()
        for key, value in result.headers.items():
            yield f"{key}: {value}"

    # --- Hacking built-ins ---

    @staticmethod
    def _clock() -> str:
        return datetime.now().strftime("%H:%M:%S")

    async def cmd_nmap(self, command: ParsedCommand) -> AsyncIterator[str]:
        """Simulated port scan.

        Usage: nmap [target]
        """
        operands = self._operands(command.args)
        target = operands[0] if operands else f"192.168.1.{random.randint(1, 254)}"
        yield f"Starting Nmap 7.94 ( https://nmap.org ) at {self._clock()}"
        await self._pause(0.5)
        yield f"Nmap scan report for {target}"
        yield "Host is up (0.0023s latency)."
        await self._pause(1.0)
        yield "Not shown: 997 closed tcp ports (reset)"
        yield "PORT     STATE SERVICE"
        yield "21/tcp   open  ftp"
        yield "22/tcp   open  ssh"
        yield "80/tcp   open  http"
        await self._pause(0.5)
        yield ""
        yield "Nmap done: 1 IP address (1 host up) scanned in 1.45 seconds"

    async def cmd_hydra(self, command: ParsedCommand) -> AsyncIterator[str]:
        """Simulated login brute force; the last argument is the service.

        Usage: hydra -l <user> -P <list> <target> <service>
        """
        if len(command.args) < 2:
            yield "Hydra v9.5 (c) 2023 by van Hauser/THC - Please supply a target and service."
            yield "Syntax: hydra -l user -P passlist.txt <target> <service>"
            return

        service = command.args[-1]
        yield "Hydra v9.5 (c) 2023 by van Hauser/THC - Starting hydra (http://www.thc.org/thc-hydra)"
        yield "[DATA] max 16 tasks per 1 server, overall 16 tasks, 1 login try (l:1/p:1), ~16 tries per task"
        yield f"[DATA] attacking {service}://{LAB_TARGET}:22/"
        for delay, attempt in HYDRA_ATTEMPTS:
            await self._pause(delay)
            yield f"[Attempt] login: {attempt}"
        await self._pause(0.8)
        yield f"[22][ssh] host: {LAB_TARGET}   login: root   password: toor"
        yield "1 of 1 target successfully completed, 1 valid password found"

    async def cmd_sqlmap(self, command: ParsedCommand) -> AsyncIterator[str]:
        for out in SQLMAP_BANNER:
            yield out
        yield ""
        yield f"[*] starting at {self._clock()}"
        await self._pause(0.5)
        yield "[*] testing connection to the target URL"
        yield "[*] checking if the target is protected by some WAF/IPS"
        await self._pause(0.8)
        yield "[*] testing for SQL injection"
        yield "[*] testing 'AND boolean-based blind - WHERE or HAVING clause'"
        await self._pause(1.2)
        yield "[+] parameter 'id' appears to be 'MySQL > 5.0.12' injectable"
        yield "[*] fetching current database"
        yield "current database: 'production_db'"
        yield f"[*] fetched data logged to text files under '/{self.user}/.local/share/sqlmap/output/'"

    async def cmd_msfconsole(self, command: ParsedCommand) -> AsyncIterator[str]:
        """Scripted Metasploit session, then the ``msfconsole`` sub-tool."""
        for out in MSF_BANNER:
            yield out
        yield ""
        yield "msf6 > search vsftpd"
        await self._pause(0.6)
        yield "Matching Modules"
        yield "================"
        yield "   #  Name                                  Disclosure Date  Rank       Check  Description"
        yield "   -  ----                                  ---------------  ----       -----  -----------"
        yield f"   0  {MSF_MODULE}  2011-07-03       excellent  No     VSFTPD v2.3.4 Backdoor Command Execution"
        yield ""
        self.active_tool = command.name
        yield "msf6 > use 0"
        yield f"msf6 exploit(unix/ftp/vsftpd_234_backdoor) > set RHOSTS {LAB_TARGET}"
        yield f"RHOSTS => {LAB_TARGET}"
        yield "msf6 exploit(unix/ftp/vsftpd_234_backdoor) > exploit"
        await self._pause(1.0)
        yield f"[*] {LAB_TARGET}:21 - Banner: 220 (vsFTPd 2.3.4)"
        yield f"[+] {LAB_TARGET}:21 - Backdoor service has been spawned, handling..."
        yield "[*] Found shell."
        yield f"[*] Command shell session 1 opened (192.168.1.5:4444 -> {LAB_TARGET}:6200)"
        yield "uid=0(root) gid=0(root) groups=0(root)"

    async def cmd_wifite(self, command: ParsedCommand) -> AsyncIterator[str]:
        """Simulated wireless audit; target 1 is always picked."""
        for out in WIFITE_BANNER:
            yield out
        yield ""
        yield "[+] scanning for wireless devices..."
        await self._pause(1.0)
        yield "[+] found 1 wireless device(s)"
        yield "[+] enabling monitor mode on wlan0... done"
        yield "[+] scanning for targets (5s)..."
        await self._pause(2.0)
        for out in WIFITE_TARGETS:
            yield out
        yield ""
        yield "[+] select target(s) (1-3) or (all):"
        yield "[!] auto-selecting target 1 (Simulation Mode)"
        await self._pause(1.0)
        yield "[+] capturing handshake... [OK]"
        yield "[+] cracking pcap with aircrack-ng..."
        await self._pause(1.5)
        yield "[+] key found: 'summer2023'"

    async def cmd_aircrack(self, command: ParsedCommand) -> AsyncIterator[str]:
        """Crack a handshake capture.

        Usage: aircrack-ng <pcap>
        """
        operands = self._operands(command.args)
        if not operands:
            yield "No input file specified."
            yield "usage: aircrack-ng <pcap file>"
            return

        yield f"Opening {operands[0]}"
        yield "Read 458 packets."
        yield ""
        yield "   #  BSSID              ESSID                     Encryption"
        yield "   1  00:14:6C:7E:40:80  Teddy                     WPA (1 handshake)"
        yield ""
        yield "Choosing first network as target."
        yield "Reading wordlist: /usr/share/wordlists/rockyou.txt"
        await self._pause(0.5)
        yield "KEY FOUND! [ biscotti ]"
        yield ""
        yield "Master Key     : 6E 1A C3 ..."
        yield "Transient Key  : 4B 82 90 ..."
        yield "EAPOL HMAC     : 1F 22 33 ..."

    # --- System built-ins ---

    async def cmd_date(self, command: ParsedCommand) -> AsyncIterator[str]:
        yield datetime.now().astimezone().strftime("%a %b %d %H:%M:%S %Z %Y")

    async def cmd_uname(self, command: ParsedCommand) -> AsyncIterator[str]:
        yield UNAME_FULL if "-a" in command.args else "Linux"

    async def cmd_sudo(self, command: ParsedCommand) -> AsyncIterator[str]:
        """Run a command; the session is already root, so this just re-dispatches."""
        if not command.args:
            yield "usage: sudo -h | -K | -k | -V"
            yield "usage: sudo -v [-AknS] [-g group] [-h host] [-p prompt] [-u user]"
            return

        inner = parse_line(" ".join(command.args))
        async for out in self._dispatch(inner):
            yield out

    async def cmd_ping(self, command: ParsedCommand) -> AsyncIterator[str]:
        """Simulated ICMP echo, four paced replies.

        Usage: ping [host]
        """
        operands = self._operands(command.args)
        target = operands[0] if operands else "8.8.8.8"
        yield f"PING {target} ({target}) 56(84) bytes of data."
        for seq in range(1, 5):
            await self._pause(0.8)
            yield f"64 bytes from {target}: icmp_seq={seq} ttl=115 time={random.uniform(10, 30):.1f} ms"
        yield f"--- {target} ping statistics ---"
        yield "4 packets transmitted, 4 received, 0% packet loss, time 3004ms"

    async def cmd_ifconfig(self, command: ParsedCommand) -> AsyncIterator[str]:
        for out in IFCONFIG_LINES:
            yield out

    async def cmd_neofetch(self, command: ParsedCommand) -> AsyncIterator[str]:
        heading = f"{self.user}@{self.hostname}"
        info = [
            heading,
            "-" * len(heading),
            "OS: Kali GNU/Linux Rolling x86_64",
            "Host: CloudOS Virtual Machine",
            "Kernel: 6.6.9-amd64",
            "Uptime: 2 mins",
            "Shell: zsh 5.9",
            "Memory: 1024MiB / 8192MiB",
        ]
        blank = " " * len(NEOFETCH_ART[0])
        for index in range(max(len(NEOFETCH_ART), len(info))):
            art = NEOFETCH_ART[index] if index < len(NEOFETCH_ART) else blank
            text = info[index] if index < len(info) else ""
            yield f"{art}  {text}".rstrip()

    async def cmd_history(self, command: ParsedCommand) -> AsyncIterator[str]:
        for number, line in enumerate(self.history, 1):
            yield f"{number:>5}  {line}"

    async def cmd_apt(self, command: ParsedCommand) -> AsyncIterator[str]:
        """Package manager stub; nothing is ever installed.

        Usage: apt <update|upgrade|install> [package...]
        """
        sub = command.args[0] if command.args else None
        if sub == "update":
            yield "Hit:1 http://kali.download/kali kali-rolling InRelease"
            yield "Reading package lists... Done"
            yield "Building dependency tree... Done"
        elif sub in ("upgrade", "install"):
            yield "Reading package lists... Done"
            yield "Building dependency tree... Done"
            yield "Calculated upgrade... Done"
            yield "0 upgraded, 0 newly installed, 0 to remove and 0 not upgraded."
        else:
            yield "apt 2.7.14 (amd64)"
