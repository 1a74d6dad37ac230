# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Validator commands (the owner manages the set).

Commands:
    bountyledger validators add <identity>
    bountyledger validators remove <identity>
    bountyledger validators check <identity>
    bountyledger validators list
"""

from __future__ import annotations

import argparse

from ...core.ledger import BountyLedger
from ..utils import run_ledger_command


def register(subparsers: argparse._SubParsersAction) -> None:
    """Register the validators sub-command group."""
    validators_parser = subparsers.add_parser("validators", help="Manage validators")
    validators_sub = validators_parser.add_subparsers(dest="validators_command", required=True)

    add_p = validators_sub.add_parser("add", help="Authorize a validator (owner)")
    add_p.add_argument("identity", help="Validator identity")
    add_p.set_defaults(func=cmd_validators_add)

    remove_p = validators_sub.add_parser("remove", help="Revoke a validator (owner)")
    remove_p.add_argument("identity", help="Validator identity")
    remove_p.set_defaults(func=cmd_validators_remove)

    check_p = validators_sub.add_parser("check", help="Check whether an identity is a validator")
    check_p.add_argument("identity", help="Identity to check")
    check_p.set_defaults(func=cmd_validators_check)

    list_p = validators_sub.add_parser("list", help="List validators")
    list_p.set_defaults(func=cmd_validators_list)


def cmd_validators_add(args: argparse.Namespace) -> int:
    def action(ledger: BountyLedger, caller: str):
        added = ledger.add_validator(caller, args.identity)
        verb = "Added" if added else "Already a validator:"
        return {"validator": args.identity, "added": added}, f"{verb} {args.identity}"

    return run_ledger_command(args, action)


def cmd_validators_remove(args: argparse.Namespace) -> int:
    def action(ledger: BountyLedger, caller: str):
        ledger.remove_validator(caller, args.identity)
        return {"validator": args.identity, "removed": True}, f"Removed {args.identity}"

    return run_ledger_command(args, action)


def cmd_validators_check(args: argparse.Namespace) -> int:
    def action(ledger: BountyLedger, caller: str):
        member = ledger.is_validator(args.identity)
        text = f"{args.identity} is {'a validator' if member else 'not a validator'}"
        return {"identity": args.identity, "validator": member}, text

    return run_ledger_command(args, action, mutates=False)


def cmd_validators_list(args: argparse.Namespace) -> int:
    def action(ledger: BountyLedger, caller: str):
        validators = ledger.validators()
        return validators, "\n".join(validators) if validators else "No validators."

    return run_ledger_command(args, action, mutates=False)
