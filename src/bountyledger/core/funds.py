# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Funds pool and the external transfer collaborator.

The pool is the single shared balance that payouts draw from. Moving value
to a submitter is delegated to a ``TransferGateway`` so hosts can plug in a
chain client or payment service; the default gateway keeps balances in
memory.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Protocol, runtime_checkable

from .exceptions import InsufficientFunds, InvalidAmount

logger = logging.getLogger(__name__)


@runtime_checkable
class TransferGateway(Protocol):
    """Moves ``amount`` base units to ``recipient``.

    Implementations raise on failure; any exception aborts the payout.
    """

    def transfer(self, recipient: str, amount: int) -> None: ...


class InMemoryTransferGateway:
    """Records credited balances per recipient."""

    def __init__(self, balances: dict[str, int] | None = None) -> None:
        self._balances: defaultdict[str, int] = defaultdict(int, balances or {})

    def transfer(self, recipient: str, amount: int) -> None:
        self._balances[recipient] += amount

    def balance_of(self, identity: str) -> int:
        return self._balances.get(identity, 0)

    def to_dict(self) -> dict[str, int]:
        return dict(self._balances)


def validate_amount(amount: Any) -> int:
    if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
        raise InvalidAmount(amount)
    return amount


class FundsPool:
    """Pool balance plus the cumulative total ever paid out."""

    def __init__(self, balance: int = 0, total_paid: int = 0) -> None:
        self._balance = balance
        self._total_paid = total_paid

    @property
    def balance(self) -> int:
        return self._balance

    @property
    def total_paid(self) -> int:
        return self._total_paid

    def deposit(self, amount: int) -> int:
        """Add ``amount`` to the pool and return the new balance."""
        self._balance += validate_amount(amount)
        return self._balance

    def ensure_available(self, amount: int) -> None:
        if self._balance < amount:
            raise InsufficientFunds(amount, self._balance)

    def debit_payout(self, amount: int) -> None:
        """Withdraw a payout and count it towards ``total_paid``."""
        self.ensure_available(amount)
        self._balance -= amount
        self._total_paid += amount

    def refund_payout(self, amount: int) -> None:
        """Undo ``debit_payout`` after a failed transfer."""
        self._balance += amount
        self._total_paid -= amount

    def to_dict(self) -> dict[str, int]:
        return {"balance": self._balance, "total_paid": self._total_paid}
