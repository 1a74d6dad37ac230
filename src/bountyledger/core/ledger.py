# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Bounty ledger: report lifecycle, reward computation, and payouts.

Report states::

    SUBMITTED -> UNDER_REVIEW -> ACCEPTED | REJECTED
    ACCEPTED  -> PAID

Every privileged operation checks authorization first, then validates the
report id, then applies state-machine rules. A failed operation raises and
leaves the ledger unchanged. All operations run under one re-entrant lock,
so two callers can never interleave on the same report or on the pool.

Usage::

    ledger = BountyLedger(owner="0xowner", validator="0xval")
    ledger.deposit("0xfunder", parse_amount("10"))
    rid = ledger.submit_report("0xreporter", "overflow", "poc.py", Severity.HIGH)
    ledger.update_status("0xval", rid, ReportStatus.ACCEPTED, Severity.CRITICAL)
    ledger.pay_reward("0xval", rid)
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from typing import Any

from .access import AccessControl
from .events import (
    BugReported,
    EventLog,
    FundsDeposited,
    ReportStatusUpdated,
    RewardPaid,
    RewardTierUpdated,
    ValidatorAdded,
    ValidatorRemoved,
)
from .exceptions import (
    AlreadyPaid,
    InvalidSeverity,
    InvalidStatus,
    TransferFailed,
)
from .funds import FundsPool, InMemoryTransferGateway, TransferGateway
from .logging import ledger_fields
from .models import (
    REWARDED_STATUSES,
    Report,
    ReportStatus,
    Severity,
    coerce_severity,
    coerce_status,
)
from .rewards import RewardSchedule, RewardTier
from .store import ReportStore

logger = logging.getLogger(__name__)

STATE_VERSION = 1


def _wall_clock() -> int:
    return int(time.time())


class BountyLedger:
    """Orchestrates reports, validators, reward tiers and the funds pool.

    Args:
        owner: Identity allowed to manage validators and reward tiers.
        validator: Initial validator identity.
        tier: Starting reward tier (defaults to the standard schedule).
        gateway: Transfer collaborator used for payouts.
        clock: Returns the timestamp recorded on new reports.
        events: Event log to append observations to.
    """

    def __init__(
        self,
        owner: str,
        validator: str,
        tier: RewardTier | None = None,
        gateway: TransferGateway | None = None,
        clock: Callable[[], int] | None = None,
        events: EventLog | None = None,
    ) -> None:
        self._access = AccessControl(owner, validator)
        self._schedule = RewardSchedule(tier)
        self._store = ReportStore()
        self._pool = FundsPool()
        self._gateway: TransferGateway = gateway if gateway is not None else InMemoryTransferGateway()
        self._clock = clock or _wall_clock
        self._events = events if events is not None else EventLog()
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def owner(self) -> str:
        return self._access.owner

    @property
    def events(self) -> EventLog:
        return self._events

    @property
    def gateway(self) -> TransferGateway:
        return self._gateway

    @property
    def balance(self) -> int:
        with self._lock:
            return self._pool.balance

    @property
    def total_paid(self) -> int:
        with self._lock:
            return self._pool.total_paid

    @property
    def report_count(self) -> int:
        with self._lock:
            return self._store.count

    def reward_tier(self) -> RewardTier:
        with self._lock:
            return self._schedule.tier

    def is_validator(self, identity: str) -> bool:
        with self._lock:
            return self._access.is_validator(identity)

    def validators(self) -> list[str]:
        with self._lock:
            return sorted(self._access.validators)

    def get_report(self, report_id: int) -> Report:
        """Return a copy of a report.

        Raises:
            InvalidReportId: If no report has this id.
        """
        with self._lock:
            return self._store.snapshot(report_id)

    def get_submissions(self, submitter: str) -> list[int]:
        """Report ids filed by ``submitter``, oldest first; empty if unknown."""
        with self._lock:
            return self._store.submissions(submitter)

    def list_reports(self, status: ReportStatus | None = None) -> list[Report]:
        with self._lock:
            reports = self._store.all()
        if status is None:
            return reports
        return [r for r in reports if r.status == status]

    # ------------------------------------------------------------------
    # Reports
    # ------------------------------------------------------------------

    def submit_report(
        self,
        caller: str,
        description: str,
        proof_of_concept: str,
        severity: Severity | int | str,
    ) -> int:
        """File a new report. Open to any caller.

        Raises:
            InvalidSeverity: If severity is NONE or unknown. No id is used.
        """
        sev = coerce_severity(severity)
        if sev == Severity.NONE:
            raise InvalidSeverity(sev)

        with self._lock:
            report = self._store.create(
                submitter=caller,
                description=description,
                proof_of_concept=proof_of_concept,
                severity=sev,
                submission_time=self._clock(),
            )
            self._events.emit(BugReported(report.id, caller, sev))

        logger.info(
            "Report %d submitted by %s (%s)", report.id, caller, sev.name,
            extra=ledger_fields(report_id=report.id, caller=caller, severity=sev),
        )
        return report.id

    def update_status(
        self,
        caller: str,
        report_id: int,
        new_status: ReportStatus | int | str,
        severity: Severity | int | str | None = None,
    ) -> Report:
        """Move a report to ``new_status``.

        Accepting a report stores the validator-asserted ``severity`` on it
        and fixes its reward from the schedule currently in force. Leaving
        ACCEPTED for another status clears the reward.

        Raises:
            Unauthorized: Caller is not a validator.
            InvalidReportId: No report has this id.
            AlreadyPaid: The report was already paid.
            InvalidStatus: ``new_status`` is unknown or PAID.
            InvalidSeverity: Accepting without a real severity.
        """
        with self._lock:
            self._access.require_validator(caller)
            report = self._store.get(report_id)
            if report.status == ReportStatus.PAID:
                raise AlreadyPaid(report_id)

            try:
                status = coerce_status(new_status)
            except ValueError:
                raise InvalidStatus(report_id, new_status) from None
            if status == ReportStatus.PAID:
                raise InvalidStatus(report_id, status, "Reports are marked paid only by pay_reward")

            if status == ReportStatus.ACCEPTED:
                sev = coerce_severity(severity) if severity is not None else Severity.NONE
                if sev == Severity.NONE:
                    raise InvalidSeverity(severity)
                report.severity = sev
                report.reward = self._schedule.amount_for(sev)
            elif report.status in REWARDED_STATUSES:
                report.reward = 0

            previous = report.status
            report.status = status
            self._events.emit(ReportStatusUpdated(report_id, status))
            snapshot = self._store.snapshot(report_id)

        if previous == ReportStatus.REJECTED and status == ReportStatus.ACCEPTED:
            logger.info(
                "Report %d re-accepted after rejection by %s", report_id, caller,
                extra=ledger_fields(report_id=report_id, caller=caller),
            )
        logger.info(
            "Report %d: %s -> %s by %s (reward %d)",
            report_id, previous.name, status.name, caller, snapshot.reward,
            extra=ledger_fields(
                report_id=report_id, caller=caller, status=status, severity=snapshot.severity, reward=snapshot.reward
            ),
        )
        return snapshot

    def pay_reward(self, caller: str, report_id: int) -> int:
        """Pay an accepted report's reward to its submitter, exactly once.

        The report is marked PAID and the pool debited before the transfer
        runs, so a re-entrant call for the same report fails. If the
        transfer raises, all of it is undone.

        Returns:
            The amount paid.

        Raises:
            Unauthorized: Caller is not a validator.
            InvalidReportId: No report has this id.
            AlreadyPaid: The report was already paid.
            InvalidStatus: The report is not ACCEPTED.
            InsufficientFunds: The pool cannot cover the reward.
            TransferFailed: The transfer collaborator raised.
        """
        with self._lock:
            self._access.require_validator(caller)
            report = self._store.get(report_id)
            if report.status == ReportStatus.PAID:
                raise AlreadyPaid(report_id)
            if report.status != ReportStatus.ACCEPTED:
                raise InvalidStatus(report_id, report.status)

            amount = report.reward
            self._pool.ensure_available(amount)

            report.status = ReportStatus.PAID
            self._pool.debit_payout(amount)
            try:
                self._gateway.transfer(report.submitter, amount)
            except Exception as e:
                report.status = ReportStatus.ACCEPTED
                self._pool.refund_payout(amount)
                logger.warning(
                    "Payout for report %d rolled back: transfer to %s failed: %s",
                    report_id, report.submitter, e,
                    extra=ledger_fields(report_id=report_id, caller=caller, recipient=report.submitter, amount=amount),
                )
                raise TransferFailed(report.submitter, amount, str(e)) from e

            self._events.emit(RewardPaid(report_id, report.submitter, amount))

        logger.info(
            "Report %d paid %d to %s by %s", report_id, amount, report.submitter, caller,
            extra=ledger_fields(report_id=report_id, caller=caller, recipient=report.submitter, amount=amount),
        )
        return amount

    # ------------------------------------------------------------------
    # Administration
    # ------------------------------------------------------------------

    def add_validator(self, caller: str, identity: str) -> bool:
        """Authorize a validator (owner only). Idempotent.

        Returns:
            True if ``identity`` was newly added.
        """
        with self._lock:
            self._access.require_owner(caller)
            added = self._access.add_validator(identity)
            self._events.emit(ValidatorAdded(identity))
        logger.info(
            "Validator %s %s", identity, "added" if added else "already present",
            extra=ledger_fields(caller=caller, validator=identity),
        )
        return added

    def remove_validator(self, caller: str, identity: str) -> None:
        """Revoke a validator (owner only)."""
        with self._lock:
            self._access.require_owner(caller)
            self._access.remove_validator(identity)
            self._events.emit(ValidatorRemoved(identity))
        logger.info("Validator %s removed", identity, extra=ledger_fields(caller=caller, validator=identity))

    def update_reward_tiers(self, caller: str, low: int, medium: int, high: int, critical: int) -> RewardTier:
        """Replace the reward schedule (owner only).

        Raises:
            Unauthorized: Caller is not the owner.
            InvalidRewardAmount: Amounts are not strictly increasing.
        """
        with self._lock:
            self._access.require_owner(caller)
            tier = self._schedule.update(low, medium, high, critical)
            self._events.emit(RewardTierUpdated(*tier.as_tuple()))
        return tier

    def deposit(self, sender: str, amount: int) -> int:
        """Add funds to the pool. Open to anyone.

        Returns:
            The new pool balance.
        """
        with self._lock:
            balance = self._pool.deposit(amount)
            self._events.emit(FundsDeposited(sender, amount))
        logger.info(
            "Deposit of %d from %s; pool balance %d", amount, sender, balance,
            extra=ledger_fields(caller=sender, amount=amount, balance=balance),
        )
        return balance

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        with self._lock:
            data: dict[str, Any] = {
                "version": STATE_VERSION,
                "owner": self._access.owner,
                "validators": sorted(self._access.validators),
                "reward_tier": self._schedule.tier.to_dict(),
                "pool": self._pool.to_dict(),
                **self._store.to_dict(),
            }
            if isinstance(self._gateway, InMemoryTransferGateway):
                data["balances"] = self._gateway.to_dict()
            return data

    @classmethod
    def from_dict(
        cls,
        data: dict[str, Any],
        gateway: TransferGateway | None = None,
        clock: Callable[[], int] | None = None,
        events: EventLog | None = None,
    ) -> BountyLedger:
        """Rebuild a ledger from ``to_dict`` output.

        Raises:
            ValueError: If the snapshot version is unsupported, or the
                snapshot breaks a ledger invariant.
        """
        version = data.get("version", STATE_VERSION)
        if version != STATE_VERSION:
            raise ValueError(f"Unsupported ledger state version: {version}")

        ledger = cls.__new__(cls)
        ledger._access = AccessControl.restore(data["owner"], list(data.get("validators", [])))
        ledger._schedule = RewardSchedule(RewardTier.from_dict(data["reward_tier"]))
        ledger._store = ReportStore.from_dict(data)
        pool = data.get("pool", {})
        balance, total_paid = int(pool.get("balance", 0)), int(pool.get("total_paid", 0))
        if balance < 0 or total_paid < 0:
            raise ValueError(f"Negative pool values in snapshot: balance={balance} total_paid={total_paid}")
        ledger._pool = FundsPool(balance, total_paid)
        if gateway is None:
            gateway = InMemoryTransferGateway({k: int(v) for k, v in data.get("balances", {}).items()})
        ledger._gateway = gateway
        ledger._clock = clock or _wall_clock
        ledger._events = events if events is not None else EventLog()
        ledger._lock = threading.RLock()
        return ledger
