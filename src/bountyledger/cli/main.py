#!/usr/bin/env python3
"""
bountyledger CLI - vulnerability bounty ledger.

Commands:
  bountyledger init --owner O --validator V   Create a ledger
  bountyledger submit <description> -s high   Submit a report
  bountyledger status <id> accepted -s high   Review a report (validators)
  bountyledger pay <id>                       Pay an accepted report (validators)
  bountyledger show <id>                      Show a report
  bountyledger list                           List reports
  bountyledger validators add|remove|check    Manage validators (owner)
  bountyledger tiers show|update              Reward tiers
  bountyledger funds deposit|balance          Reward pool
"""

from __future__ import annotations

import argparse
import logging
import sys

from ..core.exceptions import BountyLedgerException
from .commands import COMMAND_MODULES
from .config import CLIConfig, set_cli_config
from .output import output_exception

logger = logging.getLogger(__name__)


def app() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="bountyledger",
        description="Vulnerability bounty report ledger",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  bountyledger init --owner alice --validator victor
  bountyledger --as alice funds deposit 10
  bountyledger --as rita submit "Reentrancy in withdraw()" --poc poc.sol -s high
  bountyledger --as victor status 0 accepted -s critical
  bountyledger --as victor pay 0
  bountyledger list --status paid
        """,
    )
    parser.add_argument("--as", dest="caller", help="Identity to act as (default: $BOUNTY_CALLER)")
    parser.add_argument("--json", dest="output", action="store_const", const="json", help="JSON output")
    parser.add_argument("--state", dest="state_path", help="Ledger state file (default: $BOUNTY_STATE_PATH)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)
    for module in COMMAND_MODULES:
        module.register(subparsers)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    from ..core.logging import configure_logging

    parser = app()
    args = parser.parse_args(argv)

    set_cli_config(CLIConfig.load(caller=args.caller, output=args.output, state_path=args.state_path))
    try:
        # --verbose wins; otherwise BOUNTY_LOG_LEVEL / BOUNTY_LOG_FORMAT apply
        configure_logging(level="DEBUG" if args.verbose else None)
    except BountyLedgerException as e:
        output_exception(e)
        return 1

    handler = getattr(args, "func", None)
    if handler is None:
        parser.print_help()
        return 1
    return handler(args)


if __name__ == "__main__":
    sys.exit(main())
