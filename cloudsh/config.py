"""
Configuration management for cloudsh.

Handles loading and saving user configuration from:
- XDG config directory: ~/.config/cloudsh/config.json
- Fallback: ~/.cloudsh/config.json
"""

import json
import logging
import os
from dataclasses import dataclass, asdict, field, fields
from pathlib import Path
from typing import Dict, Any, List, Optional

logger = logging.getLogger(__name__)

API_KEY_ENV = "CLOUDSH_API_KEY"


@dataclass
class LLMConfig:
    """LLM provider configuration for the kernel fallback."""
    provider: str = "ollama"
    model: str = "llama3.2"
    host: str = "localhost"
    port: int = 11434
    api_key: Optional[str] = None
    temperature: float = 0.7
    max_tokens: Optional[int] = None
    timeout: float = 30.0

    def resolved_api_key(self) -> Optional[str]:
        """API key from config, falling back to the environment."""
        return self.api_key or os.environ.get(API_KEY_ENV)


@dataclass
class ShellConfig:
    """Shell engine settings."""
    user: str = "root"
    hostname: str = "kali"
    # Multiplier for simulated tool latency; 0 disables sleeping
    pacing: float = 1.0
    line_delay: float = 0.05
    long_output_threshold: int = 10
    network_timeout: float = 5.0
    color: bool = True
    granted_capabilities: List[str] = field(default_factory=list)
    latitude: float = 0.0
    longitude: float = 0.0


@dataclass
class CloudshConfig:
    """Main cloudsh configuration."""
    llm: LLMConfig = field(default_factory=LLMConfig)
    shell: ShellConfig = field(default_factory=ShellConfig)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "llm": asdict(self.llm),
            "shell": asdict(self.shell),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CloudshConfig':
        """Create from dictionary, ignoring unknown keys.

        Raises:
            TypeError: If the data or one of its sections is not a mapping
        """
        if not isinstance(data, dict):
            raise TypeError(f"expected a JSON object, got {type(data).__name__}")
        return cls(
            llm=_build(LLMConfig, data.get("llm", {})),
            shell=_build(ShellConfig, data.get("shell", {})),
        )


def _build(section_cls, values: Dict[str, Any]):
    if not isinstance(values, dict):
        raise TypeError(f"{section_cls.__name__} section must be a JSON object")
    known = {f.name for f in fields(section_cls)}
    unknown = set(values) - known
    if unknown:
        logger.warning(f"Ignoring unknown {section_cls.__name__} keys: {', '.join(sorted(unknown))}")
    return section_cls(**{k: v for k, v in values.items() if k in known})


def get_config_path() -> Path:
    """
    Get configuration file path.

    Follows XDG Base Directory specification:
    1. $XDG_CONFIG_HOME/cloudsh/config.json (usually ~/.config/cloudsh/config.json)
    2. Fallback: ~/.cloudsh/config.json

    Returns:
        Path to config file
    """
    xdg = os.environ.get("XDG_CONFIG_HOME")
    xdg_config_home = Path(xdg) if xdg else Path.home() / ".config"
    if xdg_config_home.exists():
        config_dir = xdg_config_home / "cloudsh"
    else:
        config_dir = Path.home() / ".cloudsh"

    return config_dir / "config.json"


def get_history_path() -> Path:
    """Path of the interactive shell's input history file."""
    return get_config_path().parent / "history"


def load_config() -> CloudshConfig:
    """
    Load configuration from file.

    Returns:
        CloudshConfig instance with loaded values or defaults
    """
    config_path = get_config_path()

    if not config_path.exists():
        return CloudshConfig()

    try:
        with open(config_path, 'r') as f:
            data = json.load(f)
        return CloudshConfig.from_dict(data)
    except (json.JSONDecodeError, OSError, TypeError) as e:
        logger.warning(f"Failed to load config from {config_path}: {e}")
        logger.warning("Using default configuration")
        return CloudshConfig()


def save_config(config: CloudshConfig) -> Path:
    """
    Save configuration to file.

    Args:
        config: Configuration to save

    Returns:
        Path the configuration was written to
    """
    config_path = get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, 'w') as f:
        json.dump(config.to_dict(), f, indent=2)

    logger.debug(f"Configuration saved to {config_path}")
    return config_path


def ensure_config_exists() -> Path:
    """
    Ensure configuration file exists, creating with defaults if not.

    Returns:
        Path to config file
    """
    config_path = get_config_path()

    if not config_path.exists():
        save_config(CloudshConfig())
        logger.info(f"Created default configuration at {config_path}")

    return config_path


def update_config(
    # LLM settings
    llm_provider: Optional[str] = None,
    llm_model: Optional[str] = None,
    llm_host: Optional[str] = None,
    llm_port: Optional[int] = None,
    llm_api_key: Optional[str] = None,
    llm_temperature: Optional[float] = None,
    # Shell settings
    shell_user: Optional[str] = None,
    shell_hostname: Optional[str] = None,
    shell_pacing: Optional[float] = None,
    shell_color: Optional[bool] = None,
    shell_granted_capabilities: Optional[List[str]] = None,
) -> CloudshConfig:
    """
    Update configuration.

    Only updates provided values, leaving others unchanged.

    Returns:
        The saved configuration
    """
    config = load_config()

    if llm_provider is not None:
        config.llm.provider = llm_provider
    if llm_model is not None:
        config.llm.model = llm_model
    if llm_host is not None:
        config.llm.host = llm_host
    if llm_port is not None:
        config.llm.port = llm_port
    if llm_api_key is not None:
        config.llm.api_key = llm_api_key
    if llm_temperature is not None:
        config.llm.temperature = llm_temperature

    if shell_user is not None:
        config.shell.user = shell_user
    if shell_hostname is not None:
        config.shell.hostname = shell_hostname
    if shell_pacing is not None:
        config.shell.pacing = shell_pacing
    if shell_color is not None:
        config.shell.color = shell_color
    if shell_granted_capabilities is not None:
        config.shell.granted_capabilities = list(shell_granted_capabilities)

    save_config(config)
    return config
