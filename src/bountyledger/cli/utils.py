# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Shared helpers for CLI command handlers."""

from __future__ import annotations

import argparse
import logging
from collections.abc import Callable
from typing import Any

from ..core.exceptions import BountyLedgerException, ConfigException
from ..core.ledger import BountyLedger
from ..core.logging import correlation_context
from ..core.models import Report, format_amount
from ..core.state import LedgerStateFile
from .config import get_cli_config
from .output import output_exception, output_result

logger = logging.getLogger(__name__)

# Handler body: (ledger, caller) -> (json data, text summary)
LedgerAction = Callable[[BountyLedger, str], tuple[Any, str]]


def get_state_file() -> LedgerStateFile:
    return LedgerStateFile(get_cli_config().state_file)


def require_caller() -> str:
    """Identity the CLI acts as.

    Raises:
        ConfigException: If neither --as nor BOUNTY_CALLER is set.
    """
    caller = get_cli_config().caller
    if not caller:
        raise ConfigException("No caller identity: pass --as or set BOUNTY_CALLER", field="caller")
    return caller


def run_ledger_command(args: argparse.Namespace, action: LedgerAction, mutates: bool = True) -> int:
    """Load the ledger, run ``action``, persist if it mutates, print the result.

    The state lock is held from load to save, so concurrent invocations
    on one state file are serialized.

    Returns the process exit code.
    """
    with correlation_context():
        try:
            caller = require_caller() if mutates else get_cli_config().caller
            state = get_state_file()
            with state.lock(exclusive=mutates):
                ledger = state.load()
                data, text = action(ledger, caller)
                if mutates:
                    state.save(ledger)
        except BountyLedgerException as e:
            logger.debug("Command %s failed: %s", getattr(args, "command", "?"), e.message)
            output_exception(e)
            return 1
    output_result(data, text)
    return 0


def format_report(report: Report) -> str:
    """Multi-line text rendering of a report."""
    lines = [
        f"Report #{report.id}",
        f"  Submitter:  {report.submitter}",
        f"  Severity:   {report.severity.name.lower()}",
        f"  Status:     {report.status.name.lower()}",
        f"  Reward:     {format_amount(report.reward)}",
        f"  Submitted:  {report.submission_time}",
        f"  Description: {report.description}",
        f"  PoC:        {report.proof_of_concept}",
    ]
    return "\n".join(lines)


def format_report_row(report: Report) -> str:
    return (
        f"#{report.id:<4} {report.status.name.lower():<13} {report.severity.name.lower():<9}"
        f" {format_amount(report.reward):>8}  {report.submitter}"
    )
