"""CLI command modules for bountyledger.

Each module exposes a ``register(subparsers)`` function that wires up
its argparse sub-commands and sets ``parser.set_defaults(func=handler)``.
"""

from . import funds, init, reports, tiers, validators
from .funds import cmd_funds_balance, cmd_funds_deposit
from .init import cmd_init
from .reports import cmd_list, cmd_pay, cmd_show, cmd_status, cmd_submit
from .tiers import cmd_tiers_show, cmd_tiers_update
from .validators import (
    cmd_validators_add,
    cmd_validators_check,
    cmd_validators_list,
    cmd_validators_remove,
)

# All command modules with register() functions, in registration order.
COMMAND_MODULES = [
    init,
    reports,
    validators,
    tiers,
    funds,
]

__all__ = [
    "COMMAND_MODULES",
    "cmd_init",
    "cmd_submit",
    "cmd_status",
    "cmd_pay",
    "cmd_show",
    "cmd_list",
    "cmd_validators_add",
    "cmd_validators_remove",
    "cmd_validators_check",
    "cmd_validators_list",
    "cmd_tiers_show",
    "cmd_tiers_update",
    "cmd_funds_deposit",
    "cmd_funds_balance",
]
