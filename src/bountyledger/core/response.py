# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Standard response envelope for ledger results.

The CLI wraps every command result in a ``LedgerResponse`` so JSON output
always has the same ``{success, data, error}`` shape.

Usage::

    from bountyledger.core.response import ok, err

    return ok(data={"report_id": 3})
    return err("Report 3 already paid", code="AlreadyPaid")
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .exceptions import BountyLedgerException


@dataclass
class LedgerResponse:
    """Unified response envelope.

    Attributes:
        success: True when the operation completed without error.
        data:    Payload returned on success. None for void operations.
        error:   Human-readable error message on failure. None on success.
        code:    Exception class name on failure, for machine consumers.
    """

    success: bool
    data: Any = None
    error: str | None = None
    code: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialise to a plain dict, omitting keys that carry no information."""
        d: dict[str, Any] = {"success": self.success}
        if self.data is not None:
            d["data"] = self.data
        if self.error:
            d["error"] = self.error
        if self.code:
            d["code"] = self.code
        return d


def ok(data: Any = None) -> LedgerResponse:
    return LedgerResponse(success=True, data=data)


def err(error: str, code: str | None = None) -> LedgerResponse:
    return LedgerResponse(success=False, error=error, code=code)


def from_exception(exc: BountyLedgerException) -> LedgerResponse:
    """Build a failed response from a ledger exception."""
    return LedgerResponse(success=False, error=exc.message, code=exc.__class__.__name__, data=exc.details or None)
