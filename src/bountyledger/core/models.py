# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Core data model: severities, statuses, reports, and amounts.

Amounts are integers in base units. One whole token is ``UNIT`` base units,
so ``parse_amount("0.1")`` is ``10**17``.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import IntEnum
from typing import Any

from .exceptions import InvalidAmount, InvalidSeverity

UNIT = 10**18
ZERO_ADDRESS = "0x" + "0" * 40


class Severity(IntEnum):
    NONE = 0
    LOW = 1
    MEDIUM = 2
    HIGH = 3
    CRITICAL = 4


class ReportStatus(IntEnum):
    SUBMITTED = 0
    UNDER_REVIEW = 1
    ACCEPTED = 2
    REJECTED = 3
    PAID = 4


# Statuses in which a report carries a non-zero reward
REWARDED_STATUSES = frozenset({ReportStatus.ACCEPTED, ReportStatus.PAID})


def is_null_identity(identity: str | None) -> bool:
    """Whether ``identity`` is empty, blank, or the all-zero address."""
    if identity is None:
        return True
    stripped = identity.strip()
    return not stripped or stripped.lower() == ZERO_ADDRESS


def coerce_severity(value: Any) -> Severity:
    """Convert an int, name, or Severity into a Severity.

    Raises:
        InvalidSeverity: If the value names no severity. ``NONE`` itself is
            returned; callers decide whether it is acceptable.
    """
    if isinstance(value, Severity):
        return value
    if isinstance(value, bool):
        raise InvalidSeverity(value)
    if isinstance(value, int):
        try:
            return Severity(value)
        except ValueError:
            raise InvalidSeverity(value) from None
    if isinstance(value, str):
        key = value.strip().upper()
        if key.isdigit():
            return coerce_severity(int(key))
        try:
            return Severity[key]
        except KeyError:
            raise InvalidSeverity(value) from None
    raise InvalidSeverity(value)


def coerce_status(value: Any) -> ReportStatus:
    """Convert an int, name, or ReportStatus into a ReportStatus.

    Raises:
        ValueError: If the value names no status.
    """
    if isinstance(value, ReportStatus):
        return value
    if isinstance(value, str):
        key = value.strip().upper().replace("-", "_")
        if key.isdigit():
            return ReportStatus(int(key))
        try:
            return ReportStatus[key]
        except KeyError:
            raise ValueError(f"Unknown report status: {value!r}") from None
    return ReportStatus(value)


def parse_amount(text: str | int | Decimal) -> int:
    """Parse a decimal token amount (``"0.5"``) into base units."""
    if isinstance(text, int) and not isinstance(text, bool):
        return text
    try:
        value = Decimal(str(text)) * UNIT
    except InvalidOperation:
        raise InvalidAmount(text) from None
    if not value.is_finite() or value != value.to_integral_value():
        raise InvalidAmount(text)
    return int(value)


def format_amount(amount: int) -> str:
    """Render base units as a decimal token amount without trailing zeros."""
    value = Decimal(amount) / UNIT
    text = format(value.normalize(), "f")
    return text


@dataclass
class Report:
    """A single bounty submission and its lifecycle state."""

    id: int
    submitter: str
    description: str
    proof_of_concept: str
    severity: Severity
    status: ReportStatus = ReportStatus.SUBMITTED
    submission_time: int = 0
    reward: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "submitter": self.submitter,
            "description": self.description,
            "proof_of_concept": self.proof_of_concept,
            "severity": self.severity.name.lower(),
            "status": self.status.name.lower(),
            "submission_time": self.submission_time,
            "reward": self.reward,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Report:
        return cls(
            id=int(data["id"]),
            submitter=data["submitter"],
            description=data.get("description", ""),
            proof_of_concept=data.get("proof_of_concept", ""),
            severity=coerce_severity(data["severity"]),
            status=coerce_status(data.get("status", ReportStatus.SUBMITTED)),
            submission_time=int(data.get("submission_time", 0)),
            reward=int(data.get("reward", 0)),
        )
