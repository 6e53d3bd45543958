import asyncio
import logging
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.text import Text
from rich.traceback import install

from .config import (
    ensure_config_exists,
    get_config_path,
    get_history_path,
    load_config,
    update_config,
)
from .collaborators import Capability
from .decorators import handle_cli_errors
from .repl import CLEAR_SIGNAL, ShellEngine, TerminalShell

# Initialize Rich Traceback for better error messages
install(show_locals=False)

# Initialize Rich Console
console = Console(highlight=False)

# Configure logging to use Rich's RichHandler
logging.basicConfig(
    level=logging.INFO,
    format="%(message)s",
    datefmt="[%X]",
    handlers=[RichHandler(rich_tracebacks=True)]
)
logger = logging.getLogger(__name__)

app = typer.Typer(help="Virtual filesystem and streaming shell for the CloudOS terminal")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose mode"),
):
    """
    cloudsh - a believable Linux shell on an in-memory filesystem.

    Built-in commands run locally; anything else is handed to an
    LLM-backed kernel when one is configured.
    """
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        console.print("[bold green]Verbose mode enabled.[/bold green]")


@app.command()
def about():
    """Display information about cloudsh."""
    console.print("[bold cyan]cloudsh - CloudOS shell[/bold cyan]")
    console.print("")
    console.print("A simulated Linux terminal with:")
    console.print("  • An in-memory filesystem seeded with a Kali-like tree")
    console.print("  • Built-ins: ls, cd, pwd, cat, echo, mkdir, touch, rm, ...")
    console.print("  • Hardware probes: camera, mic, gps")
    console.print("  • Network probe: curl")
    console.print("  • An AI kernel (Ollama or Gemini) for everything else")
    console.print("")
    console.print("[bold]Commands:[/bold]")
    console.print("  cloudsh shell                 Start an interactive session")
    console.print("  cloudsh run 'ls /etc' 'pwd'   Run lines and print output")
    console.print("  cloudsh config --show         Show configuration")


def _build_engine(offline: bool, pacing: Optional[float]) -> ShellEngine:
    config = load_config()
    if pacing is not None:
        config.shell.pacing = pacing
    return ShellEngine.from_config(config, offline=offline)


@app.command()
@handle_cli_errors
def shell(
    offline: bool = typer.Option(False, "--offline", help="Disable the AI kernel fallback"),
    pacing: Optional[float] = typer.Option(None, "--pacing", help="Latency multiplier (0 = instant)"),
):
    """
    Launch an interactive shell session.

    Ctrl-C interrupts the running command; `exit` leaves the active tool
    or, at top level, ends the session.

    Example:
        cloudsh shell --offline
    """
    engine = _build_engine(offline, pacing)
    TerminalShell(engine, console=console, history_path=get_history_path()).run()


@app.command()
@handle_cli_errors
def run(
    lines: List[str] = typer.Argument(..., help="Command lines to execute in order"),
    offline: bool = typer.Option(False, "--offline", help="Disable the AI kernel fallback"),
    pacing: Optional[float] = typer.Option(None, "--pacing", help="Latency multiplier (0 = instant)"),
):
    """
    Execute command lines non-interactively and print their output.

    All lines share one session, so `cd` carries over.

    Example:
        cloudsh run --offline "mkdir proj" "cd proj" "pwd"
    """
    engine = _build_engine(offline, pacing)

    async def execute_all():
        try:
            for line in lines:
                async for out in engine.execute(line):
                    if out != CLEAR_SIGNAL:
                        console.print(Text.from_ansi(out))
                if engine.closed:
                    break
        finally:
            await engine.aclose()

    asyncio.run(execute_all())


@app.command()
@handle_cli_errors
def config(
    show: bool = typer.Option(False, "--show", help="Show current configuration"),
    init: bool = typer.Option(False, "--init", help="Initialize config file with defaults"),
    # LLM settings
    set_provider: Optional[str] = typer.Option(None, "--llm-provider", help="Set LLM provider (ollama, gemini)"),
    set_model: Optional[str] = typer.Option(None, "--llm-model", help="Set model name"),
    set_llm_host: Optional[str] = typer.Option(None, "--llm-host", help="Set Ollama host"),
    set_llm_port: Optional[int] = typer.Option(None, "--llm-port", help="Set Ollama port"),
    set_api_key: Optional[str] = typer.Option(None, "--llm-api-key", help="Set LLM API key"),
    set_temperature: Optional[float] = typer.Option(None, "--llm-temperature", help="Set temperature (0.0-1.0)"),
    # Shell settings
    set_user: Optional[str] = typer.Option(None, "--user", help="Set the shell user"),
    set_hostname: Optional[str] = typer.Option(None, "--hostname", help="Set the host name"),
    set_pacing: Optional[float] = typer.Option(None, "--pacing", help="Set latency multiplier"),
    set_color: Optional[bool] = typer.Option(None, "--color/--no-color", help="Enable ANSI colors"),
    grant: Optional[List[str]] = typer.Option(None, "--grant", help="Grant a capability (camera, microphone, geolocation); repeatable"),
):
    """
    View or edit cloudsh configuration.

    Configuration is stored at ~/.config/cloudsh/config.json (or ~/.cloudsh/config.json).

    Examples:
        # Show current configuration
        cloudsh config --show

        # Use a remote Ollama host
        cloudsh config --llm-host 192.168.0.225

        # Let the shell use the camera and GPS
        cloudsh config --grant camera --grant geolocation
    """
    if init:
        config_path = ensure_config_exists()
        console.print(f"[green]Configuration initialized at {config_path}[/green]")
        return

    if set_provider is not None and set_provider not in ("ollama", "gemini"):
        raise ValueError(f"Unknown LLM provider: {set_provider}")
    for name in grant or []:
        # Raises ValueError for unknown capability names
        Capability(name.lower())

    has_settings = any([
        set_provider, set_model, set_llm_host, set_llm_port, set_api_key,
        set_temperature is not None, set_user, set_hostname,
        set_pacing is not None, set_color is not None, grant,
    ])

    if show or not has_settings:
        cfg = load_config()
        console.print("\n[bold]cloudsh Configuration[/bold]")
        console.print(f"[dim]Location: {get_config_path()}[/dim]\n")

        console.print("[bold cyan]LLM Settings:[/bold cyan]")
        console.print(f"  Provider:    {cfg.llm.provider}")
        console.print(f"  Model:       {cfg.llm.model}")
        console.print(f"  Host:        {cfg.llm.host}:{cfg.llm.port}")
        console.print(f"  API Key:     {'set' if cfg.llm.resolved_api_key() else '[dim]not set[/dim]'}")
        console.print(f"  Temperature: {cfg.llm.temperature}")

        console.print("\n[bold cyan]Shell Settings:[/bold cyan]")
        console.print(f"  User:        {cfg.shell.user}@{cfg.shell.hostname}")
        console.print(f"  Pacing:      {cfg.shell.pacing}")
        console.print(f"  Color:       {cfg.shell.color}")
        granted = ", ".join(cfg.shell.granted_capabilities) or "[dim]none[/dim]"
        console.print(f"  Granted:     {granted}")
        return

    update_config(
        llm_provider=set_provider,
        llm_model=set_model,
        llm_host=set_llm_host,
        llm_port=set_llm_port,
        llm_api_key=set_api_key,
        llm_temperature=set_temperature,
        shell_user=set_user,
        shell_hostname=set_hostname,
        shell_pacing=set_pacing,
        shell_color=set_color,
        shell_granted_capabilities=grant,
    )
    console.print(f"[green]Configuration saved to {get_config_path()}[/green]")


if __name__ == "__main__":
    app()
