"""Reward tier commands."""

from __future__ import annotations

import argparse

from ...core.ledger import BountyLedger
from ...core.models import format_amount, parse_amount
from ...core.rewards import RewardTier
from ..utils import run_ledger_command


def register(subparsers: argparse._SubParsersAction) -> None:
    """Register the tiers sub-command group."""
    tiers_parser = subparsers.add_parser("tiers", help="Show or update reward tiers")
    tiers_sub = tiers_parser.add_subparsers(dest="tiers_command", required=True)

    show_p = tiers_sub.add_parser("show", help="Show the reward tier in force")
    show_p.set_defaults(func=cmd_tiers_show)

    update_p = tiers_sub.add_parser("update", help="Replace the reward tier (owner)")
    for name in ("low", "medium", "high", "critical"):
        update_p.add_argument(name, help=f"{name.capitalize()} severity reward, in tokens (e.g. 0.5)")
    update_p.set_defaults(func=cmd_tiers_update)


def _format_tier(tier: RewardTier) -> str:
    return "\n".join(f"  {name:<9} {format_amount(amount)}" for name, amount in tier.to_dict().items())


def cmd_tiers_show(args: argparse.Namespace) -> int:
    def action(ledger: BountyLedger, caller: str):
        tier = ledger.reward_tier()
        return tier.to_dict(), "Reward tier:\n" + _format_tier(tier)

    return run_ledger_command(args, action, mutates=False)


def cmd_tiers_update(args: argparse.Namespace) -> int:
    def action(ledger: BountyLedger, caller: str):
        amounts = [parse_amount(a) for a in (args.low, args.medium, args.high, args.critical)]
        tier = ledger.update_reward_tiers(caller, *amounts)
        return tier.to_dict(), "Reward tier updated:\n" + _format_tier(tier)

    return run_ledger_command(args, action)
