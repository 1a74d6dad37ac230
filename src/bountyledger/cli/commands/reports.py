# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Report commands for filing, reviewing and paying bounty reports.

Commands:
    bountyledger submit <description> --poc <text> --severity high
    bountyledger status <report_id> accepted --severity critical
    bountyledger pay <report_id>
    bountyledger show <report_id>
    bountyledger list [--submitter ID] [--status accepted]
"""

from __future__ import annotations

import argparse

from ...core.ledger import BountyLedger
from ...core.models import ReportStatus, Severity, coerce_status, format_amount
from ..utils import format_report, format_report_row, run_ledger_command

SEVERITY_CHOICES = [s.name.lower() for s in Severity if s != Severity.NONE]
STATUS_CHOICES = [s.name.lower() for s in ReportStatus if s != ReportStatus.PAID]


def register(subparsers: argparse._SubParsersAction) -> None:
    """Register the report commands."""
    # --- submit ---
    submit_p = subparsers.add_parser("submit", help="Submit a vulnerability report")
    submit_p.add_argument("description", help="Description of the vulnerability")
    submit_p.add_argument("--poc", dest="proof_of_concept", default="", help="Proof of concept")
    submit_p.add_argument("--severity", "-s", required=True, choices=SEVERITY_CHOICES, help="Claimed severity")
    submit_p.set_defaults(func=cmd_submit)

    # --- status ---
    status_p = subparsers.add_parser("status", help="Update a report's status (validators)")
    status_p.add_argument("report_id", type=int, help="Report id")
    status_p.add_argument(
        "new_status",
        choices=STATUS_CHOICES + [s.replace("_", "-") for s in STATUS_CHOICES if "_" in s],
        help="Target status",
    )
    status_p.add_argument("--severity", "-s", choices=SEVERITY_CHOICES, help="Assessed severity (required to accept)")
    status_p.set_defaults(func=cmd_status)

    # --- pay ---
    pay_p = subparsers.add_parser("pay", help="Pay the reward of an accepted report (validators)")
    pay_p.add_argument("report_id", type=int, help="Report id")
    pay_p.set_defaults(func=cmd_pay)

    # --- show ---
    show_p = subparsers.add_parser("show", help="Show a report")
    show_p.add_argument("report_id", type=int, help="Report id")
    show_p.set_defaults(func=cmd_show)

    # --- list ---
    list_p = subparsers.add_parser("list", help="List reports")
    list_p.add_argument("--submitter", help="Only reports filed by this identity")
    list_p.add_argument("--status", choices=[s.name.lower() for s in ReportStatus], help="Filter by status")
    list_p.set_defaults(func=cmd_list)


# ---------------------------------------------------------------------------
# Command handlers
# ---------------------------------------------------------------------------


def cmd_submit(args: argparse.Namespace) -> int:
    """Submit a new report as the current caller."""

    def action(ledger: BountyLedger, caller: str):
        report_id = ledger.submit_report(caller, args.description, args.proof_of_concept, args.severity)
        return (
            {"report_id": report_id, "submitter": caller, "severity": args.severity},
            f"Submitted report #{report_id} ({args.severity})",
        )

    return run_ledger_command(args, action)


def cmd_status(args: argparse.Namespace) -> int:
    """Move a report to a new status."""

    def action(ledger: BountyLedger, caller: str):
        report = ledger.update_status(caller, args.report_id, coerce_status(args.new_status), args.severity)
        text = f"Report #{report.id} is now {report.status.name.lower()}"
        if report.reward:
            text += f" (reward {format_amount(report.reward)})"
        return report.to_dict(), text

    return run_ledger_command(args, action)


def cmd_pay(args: argparse.Namespace) -> int:
    """Pay an accepted report."""

    def action(ledger: BountyLedger, caller: str):
        amount = ledger.pay_reward(caller, args.report_id)
        report = ledger.get_report(args.report_id)
        return (
            {"report_id": report.id, "recipient": report.submitter, "amount": amount},
            f"Paid {format_amount(amount)} to {report.submitter} for report #{report.id}",
        )

    return run_ledger_command(args, action)


def cmd_show(args: argparse.Namespace) -> int:
    """Show one report."""

    def action(ledger: BountyLedger, caller: str):
        report = ledger.get_report(args.report_id)
        return report.to_dict(), format_report(report)

    return run_ledger_command(args, action, mutates=False)


def cmd_list(args: argparse.Namespace) -> int:
    """List reports, optionally filtered."""

    def action(ledger: BountyLedger, caller: str):
        status = coerce_status(args.status) if args.status else None
        reports = ledger.list_reports(status)
        if args.submitter:
            wanted = ledger.get_submissions(args.submitter)
            by_id = {r.id: r for r in reports}
            reports = [by_id[i] for i in wanted if i in by_id]
        if not reports:
            return [], "No reports."
        return [r.to_dict() for r in reports], "\n".join(format_report_row(r) for r in reports)

    return run_ledger_command(args, action, mutates=False)
