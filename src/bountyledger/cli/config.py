# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""CLI configuration: acting identity, output format and state file.

Loads from ~/.bountyledger/cli.toml with environment variable and flag overrides.
Precedence: CLI flags > env vars > config file > defaults.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from ..core.config import get_config

_DEFAULT_CONFIG_PATH = Path.home() / ".bountyledger" / "cli.toml"
_DEFAULT_OUTPUT = "text"
_OUTPUT_FORMATS = ("json", "text")


@dataclass
class CLIConfig:
    """CLI configuration loaded from file, env, and flags."""

    caller: str = ""
    output: str = _DEFAULT_OUTPUT
    state_path: Path | None = None

    @classmethod
    def load(
        cls,
        config_path: Path | None = None,
        caller: str | None = None,
        output: str | None = None,
        state_path: str | Path | None = None,
    ) -> CLIConfig:
        """Load config with precedence: flags > env > file > defaults."""
        config = cls()

        # 1. Load from file
        path = config_path or _DEFAULT_CONFIG_PATH
        if path.exists():
            config._load_from_file(path)

        # 2. Override from env
        if who := os.environ.get("BOUNTY_CALLER"):
            config.caller = who
        if out := os.environ.get("BOUNTY_OUTPUT"):
            if out in _OUTPUT_FORMATS:
                config.output = out

        # 3. Override from flags (highest precedence)
        if caller is not None:
            config.caller = caller
        if output is not None:
            config.output = output
        if state_path is not None:
            config.state_path = Path(state_path).expanduser()

        return config

    def _load_from_file(self, path: Path) -> None:
        """Parse TOML config file."""
        import tomllib

        with open(path, "rb") as f:
            data = tomllib.load(f)
        if "caller" in data:
            self.caller = str(data["caller"])
        if "output" in data and data["output"] in _OUTPUT_FORMATS:
            self.output = str(data["output"])
        if "state_path" in data:
            self.state_path = Path(str(data["state_path"])).expanduser()

    @property
    def state_file(self) -> Path:
        """State file path, falling back to BOUNTY_STATE_PATH / the core default."""
        return self.state_path or get_config().state_file


_config: CLIConfig | None = None


def get_cli_config() -> CLIConfig:
    """Get the current CLI config singleton."""
    global _config
    if _config is None:
        _config = CLIConfig.load()
    return _config


def set_cli_config(config: CLIConfig) -> None:
    """Set the CLI config singleton (called from main after parsing args)."""
    global _config
    _config = config


def reset_cli_config() -> None:
    """Reset the config singleton (for testing)."""
    global _config
    _config = None
