# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Exception hierarchy for the bounty ledger.

Every failure of a ledger operation is raised as one of these types. A
raised exception always means the ledger state is unchanged.
"""

from __future__ import annotations

from typing import Any


class BountyLedgerException(Exception):  # noqa: N818
    """Base exception for all bounty ledger errors."""

    def __init__(self, message: str, details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class Unauthorized(BountyLedgerException):
    """Caller lacks the role required for the operation.

    Raised before any other check or state mutation.
    """

    def __init__(self, caller: str, role: str = "validator"):
        super().__init__(
            f"Unauthorized: {caller!r} is not {role}",
            {"caller": caller, "role": role},
        )
        self.caller = caller
        self.role = role


class InvalidSeverity(BountyLedgerException):
    """Severity is missing, NONE, or not a known severity."""

    def __init__(self, severity: Any = None):
        super().__init__(f"Invalid severity: {severity!r}", {"severity": str(severity)})
        self.severity = severity


class InvalidReportId(BountyLedgerException):
    """Report id is out of range."""

    def __init__(self, report_id: Any):
        super().__init__(f"Invalid report id: {report_id}", {"report_id": str(report_id)})
        self.report_id = report_id


class InvalidStatus(BountyLedgerException):
    """Report is not in a status that permits the operation."""

    def __init__(self, report_id: int, status: Any, message: str | None = None):
        status_name = getattr(status, "name", str(status))
        super().__init__(
            message or f"Invalid status for report {report_id}: {status_name}",
            {"report_id": report_id, "status": status_name},
        )
        self.report_id = report_id
        self.status = status


class AlreadyPaid(InvalidStatus):
    """Report has already been paid; no further transitions are possible."""

    def __init__(self, report_id: int):
        from .models import ReportStatus

        super().__init__(report_id, ReportStatus.PAID, f"Report {report_id} already paid")


class InsufficientFunds(BountyLedgerException):
    """Pool balance is below the reward owed."""

    def __init__(self, required: int, available: int):
        super().__init__(
            f"Insufficient funds: need {required}, pool holds {available}",
            {"required": required, "available": available},
        )
        self.required = required
        self.available = available


class InvalidValidator(BountyLedgerException):
    """Validator identity is null, or removal target is not a validator."""

    def __init__(self, identity: str, reason: str = "invalid validator"):
        super().__init__(f"Invalid validator {identity!r}: {reason}", {"identity": identity})
        self.identity = identity


class InvalidRewardAmount(BountyLedgerException):
    """Reward tier amounts are not positive and strictly increasing."""

    def __init__(self, amounts: tuple[int, ...]):
        super().__init__(
            "Reward amounts must satisfy 0 < low < medium < high < critical",
            {"amounts": [str(a) for a in amounts]},
        )
        self.amounts = amounts


class InvalidAmount(BountyLedgerException):
    """Deposit amount is not a positive integer."""

    def __init__(self, amount: Any):
        super().__init__(f"Invalid amount: {amount!r}", {"amount": str(amount)})
        self.amount = amount


class TransferFailed(BountyLedgerException):
    """External transfer of a payout failed; the payout was rolled back."""

    def __init__(self, recipient: str, amount: int, reason: str = ""):
        message = f"Transfer of {amount} to {recipient} failed"
        if reason:
            message += f": {reason}"
        super().__init__(message, {"recipient": recipient, "amount": amount})
        self.recipient = recipient
        self.amount = amount


class ConfigException(BountyLedgerException):
    """Configuration is invalid or incomplete."""

    def __init__(self, message: str, field: str | None = None):
        details = {}
        if field:
            details["field"] = field
        super().__init__(message, details)
        self.field = field


class StateFileError(BountyLedgerException):
    """Persisted ledger state could not be read or written."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"State file {path}: {reason}", {"path": path})
        self.path = path
