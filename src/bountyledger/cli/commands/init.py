"""Init command - create a new ledger state file."""

from __future__ import annotations

import argparse
import logging

from ...core.config import get_config
from ...core.exceptions import BountyLedgerException
from ...core.ledger import BountyLedger
from ...core.logging import correlation_context
from ..output import output_error, output_exception, output_result
from ..utils import get_state_file

logger = logging.getLogger(__name__)


def register(subparsers: argparse._SubParsersAction) -> None:
    """Register the init command on the CLI parser."""
    init_parser = subparsers.add_parser("init", help="Create a new ledger")
    init_parser.add_argument("--owner", required=True, help="Owner identity")
    init_parser.add_argument("--validator", required=True, help="Initial validator identity")
    init_parser.add_argument("--force", "-f", action="store_true", help="Overwrite an existing ledger")
    init_parser.set_defaults(func=cmd_init)


def cmd_init(args: argparse.Namespace) -> int:
    """Create the state file with an empty ledger."""
    with correlation_context():
        try:
            state = get_state_file()
            with state.lock():
                if state.exists() and not args.force:
                    output_error(f"Ledger already exists at {state.path} (use --force to overwrite)")
                    return 1
                ledger = BountyLedger(
                    owner=args.owner,
                    validator=args.validator,
                    tier=get_config().default_tier(),
                )
                state.save(ledger)
        except BountyLedgerException as e:
            output_exception(e)
            return 1

    logger.info("Initialized ledger at %s", state.path)
    output_result(
        {"state_path": str(state.path), "owner": ledger.owner, "validators": ledger.validators()},
        f"Initialized ledger at {state.path}\n  Owner:     {ledger.owner}\n  Validator: {args.validator}",
    )
    return 0
