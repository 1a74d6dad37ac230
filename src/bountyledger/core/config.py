"""Core configuration - centralized config for the bountyledger package.

All environment-based configuration flows through this module.

Usage:
    from bountyledger.core.config import get_config
    config = get_config()

    state_path = config.state_file
    log_level = config.log_level
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, ValidationError, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigException, InvalidRewardAmount
from .rewards import (
    DEFAULT_CRITICAL_REWARD,
    DEFAULT_HIGH_REWARD,
    DEFAULT_LOW_REWARD,
    DEFAULT_MEDIUM_REWARD,
    RewardTier,
    validate_tier,
)


class LedgerSettings(BaseSettings):
    """Core configuration settings for the bounty ledger.

    Every setting can be overridden by a ``BOUNTY_``-prefixed environment
    variable or an entry in ``.env``.
    """

    model_config = SettingsConfigDict(
        env_prefix="BOUNTY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ==========================================================================
    # LOGGING SETTINGS
    # ==========================================================================

    log_level: str = Field(
        default="WARNING",
        description="Log level (DEBUG, INFO, WARNING, ERROR)",
    )
    log_format: str = Field(
        default="",
        description="Log format: 'json', 'text', or '' (auto-detect)",
    )
    log_file: str | None = Field(
        default=None,
        description="Log file path (optional)",
    )

    # ==========================================================================
    # LEDGER STATE
    # ==========================================================================

    state_path: str = Field(
        default="~/.bountyledger/state.json",
        description="JSON file holding the persisted ledger state",
    )

    # ==========================================================================
    # DEFAULT REWARD TIER (base units, used when a ledger is initialized)
    # ==========================================================================

    reward_low: int = Field(default=DEFAULT_LOW_REWARD, description="Low severity reward")
    reward_medium: int = Field(default=DEFAULT_MEDIUM_REWARD, description="Medium severity reward")
    reward_high: int = Field(default=DEFAULT_HIGH_REWARD, description="High severity reward")
    reward_critical: int = Field(default=DEFAULT_CRITICAL_REWARD, description="Critical severity reward")

    @model_validator(mode="after")
    def _check_reward_tier(self) -> LedgerSettings:
        try:
            validate_tier(self.reward_low, self.reward_medium, self.reward_high, self.reward_critical)
        except InvalidRewardAmount as e:
            raise ValueError(e.message) from e
        return self

    # ==========================================================================
    # COMPUTED PROPERTIES
    # ==========================================================================

    @property
    def state_file(self) -> Path:
        """Expanded path of the ledger state file."""
        return Path(self.state_path).expanduser()

    def default_tier(self) -> RewardTier:
        """Reward tier built from the configured defaults."""
        return RewardTier(self.reward_low, self.reward_medium, self.reward_high, self.reward_critical)


# ==========================================================================
# GLOBAL CONFIG INSTANCE (lazy loaded)
# ==========================================================================

_config: LedgerSettings | None = None


def get_config() -> LedgerSettings:
    """Get the global configuration instance.

    Returns:
        The singleton LedgerSettings instance.

    Raises:
        ConfigException: If a BOUNTY_ variable or .env entry is invalid.
    """
    global _config
    if _config is None:
        try:
            _config = LedgerSettings()
        except ValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(part) for part in first["loc"]) or None
            raise ConfigException(f"Invalid configuration: {first['msg']}", field=field) from e
    return _config


def clear_config_cache() -> None:
    """Clear the config cache. Useful for testing."""
    global _config
    _config = None
