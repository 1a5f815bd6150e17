"""Configuration settings and tabshell.yaml loader."""

from __future__ import annotations

import os
import re
import signal
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator


class HistoryConfig(BaseModel):
    """Line history persistence."""

    path: str = ".shell_history"
    max_length: int = 1000


class EditorConfig(BaseModel):
    """Asynchronous edit loop configuration."""

    poll_interval: float = 1.0  # seconds
    signals: list[str] = Field(default_factory=lambda: ["SIGUSR1", "SIGUSR2"])

    @field_validator("signals")
    @classmethod
    def _known_signals(cls, names: list[str]) -> list[str]:
        for name in names:
            if name not in signal.Signals.__members__:
                raise ValueError(f"Unknown signal: {name}")
        return names


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "WARNING"


class ShellConfig(BaseModel):
    """Root configuration model for tabshell.yaml."""

    prompt: str = "$ "
    history: HistoryConfig = Field(default_factory=HistoryConfig)
    editor: EditorConfig = Field(default_factory=EditorConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def load(cls, path: Path | None) -> ShellConfig:
        """Load configuration from YAML file."""
        if path is None or not path.exists():
            return cls()

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        # Expand environment variables in the config
        data = _expand_env_vars(data)
        return cls.model_validate(data)


def _expand_env_vars(obj: Any) -> Any:
    """Recursively expand ${VAR} patterns in strings."""
    if isinstance(obj, str):
        # Match ${VAR} or $VAR patterns
        pattern = re.compile(r"\$\{([^}]+)\}|\$([A-Za-z_][A-Za-z0-9_]*)")

        def replace(match: re.Match[str]) -> str:
            var_name = match.group(1) or match.group(2)
            return os.environ.get(var_name, match.group(0))

        return pattern.sub(replace, obj)
    elif isinstance(obj, dict):
        return {k: _expand_env_vars(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_expand_env_vars(item) for item in obj]
    return obj


CONFIG_FILENAME = "tabshell.yaml"


def find_config_path(start_dir: Path | None = None) -> Path | None:
    """Find tabshell.yaml by walking up directory tree."""
    current = start_dir or Path.cwd()

    while current != current.parent:
        config_path = current / CONFIG_FILENAME
        if config_path.exists():
            return config_path
        current = current.parent

    return None
