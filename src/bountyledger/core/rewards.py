# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Severity-indexed reward schedule.

The schedule holds one amount per real severity. Amounts are strictly
increasing with severity at all times: an update either replaces all four
values or none of them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from .exceptions import InvalidRewardAmount
from .models import UNIT, Severity

logger = logging.getLogger(__name__)

DEFAULT_LOW_REWARD = UNIT // 10  # 0.1
DEFAULT_MEDIUM_REWARD = UNIT // 2  # 0.5
DEFAULT_HIGH_REWARD = UNIT  # 1.0
DEFAULT_CRITICAL_REWARD = 5 * UNIT  # 5.0


@dataclass(frozen=True)
class RewardTier:
    """Reward amounts, in base units, for each severity."""

    low: int = DEFAULT_LOW_REWARD
    medium: int = DEFAULT_MEDIUM_REWARD
    high: int = DEFAULT_HIGH_REWARD
    critical: int = DEFAULT_CRITICAL_REWARD

    def __post_init__(self) -> None:
        validate_tier(self.low, self.medium, self.high, self.critical)

    def as_tuple(self) -> tuple[int, int, int, int]:
        return (self.low, self.medium, self.high, self.critical)

    def to_dict(self) -> dict[str, Any]:
        return {
            "low": self.low,
            "medium": self.medium,
            "high": self.high,
            "critical": self.critical,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RewardTier:
        return cls(
            low=int(data["low"]),
            medium=int(data["medium"]),
            high=int(data["high"]),
            critical=int(data["critical"]),
        )


def validate_tier(low: Any, medium: Any, high: Any, critical: Any) -> None:
    """Check that amounts are integers with 0 < low < medium < high < critical.

    Raises:
        InvalidRewardAmount: If the quadruple is not strictly increasing.
    """
    amounts = (low, medium, high, critical)
    if any(isinstance(a, bool) or not isinstance(a, int) for a in amounts):
        raise InvalidRewardAmount(amounts)
    if not 0 < low < medium < high < critical:
        raise InvalidRewardAmount(amounts)


class RewardSchedule:
    """Maps severities to the reward amount currently in force."""

    def __init__(self, tier: RewardTier | None = None) -> None:
        self._tier = tier or RewardTier()

    @property
    def tier(self) -> RewardTier:
        return self._tier

    def amount_for(self, severity: Severity | int) -> int:
        """Return the reward for ``severity``, or 0 for NONE and unknown values."""
        if severity == Severity.LOW:
            return self._tier.low
        if severity == Severity.MEDIUM:
            return self._tier.medium
        if severity == Severity.HIGH:
            return self._tier.high
        if severity == Severity.CRITICAL:
            return self._tier.critical
        return 0

    def update(self, low: int, medium: int, high: int, critical: int) -> RewardTier:
        """Replace all four amounts at once.

        Raises:
            InvalidRewardAmount: If the amounts are not strictly increasing.
                The previous tier stays in force.
        """
        new_tier = RewardTier(low, medium, high, critical)
        previous = self._tier
        self._tier = new_tier
        logger.info("Reward tier updated: %s -> %s", previous.as_tuple(), new_tier.as_tuple())
        return new_tier
