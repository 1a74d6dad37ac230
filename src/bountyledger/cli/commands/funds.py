"""Funds commands - deposit into the pool and show balances."""

from __future__ import annotations

import argparse

from ...core.funds import InMemoryTransferGateway
from ...core.ledger import BountyLedger
from ...core.models import format_amount, parse_amount
from ..utils import run_ledger_command


def register(subparsers: argparse._SubParsersAction) -> None:
    """Register the funds sub-command group."""
    funds_parser = subparsers.add_parser("funds", help="Pool deposits and balances")
    funds_sub = funds_parser.add_subparsers(dest="funds_command", required=True)

    deposit_p = funds_sub.add_parser("deposit", help="Deposit into the reward pool")
    deposit_p.add_argument("amount", help="Amount in tokens (e.g. 10 or 0.25)")
    deposit_p.set_defaults(func=cmd_funds_deposit)

    balance_p = funds_sub.add_parser("balance", help="Show pool balance and totals")
    balance_p.add_argument("--of", dest="identity", help="Also show the paid-out balance of an identity")
    balance_p.set_defaults(func=cmd_funds_balance)


def cmd_funds_deposit(args: argparse.Namespace) -> int:
    def action(ledger: BountyLedger, caller: str):
        amount = parse_amount(args.amount)
        balance = ledger.deposit(caller, amount)
        return (
            {"sender": caller, "amount": amount, "balance": balance},
            f"Deposited {format_amount(amount)}; pool balance {format_amount(balance)}",
        )

    return run_ledger_command(args, action)


def cmd_funds_balance(args: argparse.Namespace) -> int:
    def action(ledger: BountyLedger, caller: str):
        data = {"balance": ledger.balance, "total_paid": ledger.total_paid}
        lines = [
            f"Pool balance: {format_amount(ledger.balance)}",
            f"Total paid:   {format_amount(ledger.total_paid)}",
        ]
        gateway = ledger.gateway
        if args.identity and isinstance(gateway, InMemoryTransferGateway):
            received = gateway.balance_of(args.identity)
            data["received"] = {args.identity: received}
            lines.append(f"Received by {args.identity}: {format_amount(received)}")
        return data, "\n".join(lines)

    return run_ledger_command(args, action, mutates=False)
