# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Owner and validator access control.

The guards here only read state. They run at the top of every privileged
ledger operation, before any lookup or mutation.
"""

from __future__ import annotations

import logging

from .exceptions import InvalidValidator, Unauthorized
from .logging import ledger_fields
from .models import is_null_identity

logger = logging.getLogger(__name__)


class AccessControl:
    """Tracks the immutable owner and the mutable validator set.

    The owner is privileged for administration but is not a validator
    unless explicitly added.

    Args:
        owner: Identity of the ledger owner.
        initial_validator: Validator seeded at construction.
    """

    def __init__(self, owner: str, initial_validator: str) -> None:
        if is_null_identity(owner):
            raise InvalidValidator(owner or "", "owner must not be the null identity")
        if is_null_identity(initial_validator):
            raise InvalidValidator(initial_validator or "", "null identity")
        self._owner = owner
        self._validators: set[str] = {initial_validator}

    @property
    def owner(self) -> str:
        return self._owner

    @property
    def validators(self) -> frozenset[str]:
        return frozenset(self._validators)

    def is_validator(self, identity: str) -> bool:
        return identity in self._validators

    def require_owner(self, caller: str) -> None:
        if caller != self._owner:
            logger.warning("Owner-only operation refused for %s", caller, extra=ledger_fields(caller=caller, role="owner"))
            raise Unauthorized(caller, role="owner")

    def require_validator(self, caller: str) -> None:
        if caller not in self._validators:
            logger.warning(
                "Validator-only operation refused for %s", caller, extra=ledger_fields(caller=caller, role="validator")
            )
            raise Unauthorized(caller, role="validator")

    def add_validator(self, identity: str) -> bool:
        """Authorize ``identity``. Idempotent.

        Returns:
            True if the identity was not already a validator.

        Raises:
            InvalidValidator: If ``identity`` is the null identity.
        """
        if is_null_identity(identity):
            raise InvalidValidator(identity or "", "null identity")
        added = identity not in self._validators
        self._validators.add(identity)
        return added

    def remove_validator(self, identity: str) -> None:
        """Revoke ``identity``.

        Raises:
            InvalidValidator: If ``identity`` is not currently a validator.
        """
        if identity not in self._validators:
            raise InvalidValidator(identity, "not a validator")
        self._validators.discard(identity)

    @classmethod
    def restore(cls, owner: str, validators: list[str]) -> AccessControl:
        """Rebuild from a snapshot. The validator set may be empty.

        Raises:
            ValueError: If the owner or any validator is the null identity.
        """
        if is_null_identity(owner):
            raise ValueError("Snapshot owner is the null identity")
        if any(is_null_identity(v) for v in validators):
            raise ValueError("Snapshot lists a null validator identity")
        access = cls.__new__(cls)
        access._owner = owner
        access._validators = set(validators)
        return access
