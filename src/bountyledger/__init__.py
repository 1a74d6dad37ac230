# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""bountyledger - a ledger for vulnerability bounty reports.

Untrusted parties submit reports; validators review, accept or reject them;
accepted reports are paid once from a shared pool according to a
severity-indexed reward schedule.

Architecture:
  ReportStore (reports + per-submitter index)
  AccessControl (owner + validators)
  RewardSchedule (strictly increasing amounts per severity)
    → BountyLedger (state machine, payouts, funds pool, event log)

CLI entry point: ``bountyledger``
"""

__version__ = "1.0.0"

from . import (
    core as core,
)
