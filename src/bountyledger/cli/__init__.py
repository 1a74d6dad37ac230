# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""bountyledger CLI - manage a bounty ledger state file."""

from .main import app, main

__all__ = ["main", "app"]
