"""
Runtime configuration for the embedded-console host program.

This module provides:
- load_envs(): load the EMBEDDED_CONSOLE_* settings from a .env file
  if they are not already present in the environment.
- RuntimeConfig: a dataclass holding the host settings (prompt, response
  capacity, history file, log level).
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import dotenv_values

# Environment variable names for host settings
PROMPT_ENV: str = "EMBEDDED_CONSOLE_PROMPT"
RESPONSE_CAPACITY_ENV: str = "EMBEDDED_CONSOLE_RESPONSE_CAPACITY"
LOG_LEVEL_ENV: str = "EMBEDDED_CONSOLE_LOG_LEVEL"

HISTORY_FILE_NAME = "prompt_history"


def load_envs(env_file: Optional[str] = None) -> None:
    """
    Load the EMBEDDED_CONSOLE_* settings from a .env file into the process
    environment if they are not already set.
    """
    env_values = dotenv_values(env_file) if env_file else dotenv_values()
    for key in (PROMPT_ENV, RESPONSE_CAPACITY_ENV, LOG_LEVEL_ENV):
        if not os.environ.get(key):
            val = env_values.get(key)
            if val:
                os.environ[key] = str(val)


@dataclass(frozen=True)
class RuntimeConfig:
    """
    Holds runtime configuration for the host program.

    Attributes:
        prompt: Prompt text emitted before each line.
        response_capacity: Maximum characters per command response (None is unbounded).
        history_file: File backing line history, or None for in-memory history.
        log_level: Name of the logging level written to the log file.
    """

    prompt: str = "cli> "
    response_capacity: Optional[int] = 2000
    history_file: Optional[Path] = None
    log_level: str = "INFO"


def get_config_dir() -> Path:
    """
    Return the embedded-console config directory under XDG_CONFIG_HOME or fallback to ~/.config.
    """
    config_home = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    return config_home / "embedded_console"


def get_data_dir() -> Path:
    """
    Return the embedded-console data directory under XDG_DATA_HOME or fallback to ~/.local/share.
    """
    data_home = Path(os.environ.get("XDG_DATA_HOME", Path.home() / ".local/share"))
    return data_home / "embedded_console"


def get_history_file() -> Path:
    return get_data_dir() / HISTORY_FILE_NAME
