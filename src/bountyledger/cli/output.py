# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Output formatting for CLI commands.

JSON mode prints the ``LedgerResponse`` envelope; text mode prints the
command's human-readable summary.
"""

from __future__ import annotations

import json
import sys
from typing import Any

from ..core.exceptions import BountyLedgerException
from ..core.response import from_exception, ok
from .config import get_cli_config


def output_result(data: Any, text: str | None = None, output_format: str | None = None) -> None:
    """Print a command result in the configured output format."""
    fmt = output_format or get_cli_config().output

    if fmt == "json" or text is None:
        print(json.dumps(ok(data).to_dict(), indent=2, default=str))
    else:
        print(text)


def output_error(message: str) -> None:
    """Print error message to stderr."""
    print(f"Error: {message}", file=sys.stderr)


def output_exception(exc: BountyLedgerException, output_format: str | None = None) -> None:
    """Report a failed ledger operation."""
    fmt = output_format or get_cli_config().output
    if fmt == "json":
        print(json.dumps(from_exception(exc).to_dict(), indent=2, default=str))
    else:
        output_error(f"{exc.__class__.__name__}: {exc.message}")
