# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Report storage and the per-submitter index.

Report ids are dense: the n-th report created has id n-1, so any id below
``count`` exists and nothing is ever deleted.
"""

from __future__ import annotations

import copy
import logging
from typing import Any

from .exceptions import InvalidReportId
from .models import REWARDED_STATUSES, Report, ReportStatus, Severity

logger = logging.getLogger(__name__)


class ReportStore:
    """Owns all reports and the submitter -> report ids index."""

    def __init__(self) -> None:
        self._reports: list[Report] = []
        # submitter -> report ids, insertion ordered
        self._by_submitter: dict[str, list[int]] = {}

    @property
    def count(self) -> int:
        return len(self._reports)

    def create(
        self,
        submitter: str,
        description: str,
        proof_of_concept: str,
        severity: Severity,
        submission_time: int,
    ) -> Report:
        """Store a new report in SUBMITTED state and index it."""
        report = Report(
            id=len(self._reports),
            submitter=submitter,
            description=description,
            proof_of_concept=proof_of_concept,
            severity=severity,
            status=ReportStatus.SUBMITTED,
            submission_time=submission_time,
            reward=0,
        )
        self._reports.append(report)
        self._by_submitter.setdefault(submitter, []).append(report.id)
        logger.debug("Stored report %d for %s", report.id, submitter)
        return report

    def _check_id(self, report_id: Any) -> int:
        if isinstance(report_id, bool) or not isinstance(report_id, int):
            raise InvalidReportId(report_id)
        if report_id < 0 or report_id >= len(self._reports):
            raise InvalidReportId(report_id)
        return report_id

    def get(self, report_id: int) -> Report:
        """Return the live report for mutation by the ledger.

        Raises:
            InvalidReportId: If ``report_id`` is out of range.
        """
        return self._reports[self._check_id(report_id)]

    def snapshot(self, report_id: int) -> Report:
        """Return a detached copy of a report, safe to hand to callers."""
        return copy.copy(self.get(report_id))

    def submissions(self, submitter: str) -> list[int]:
        """Report ids filed by ``submitter`` in submission order."""
        return list(self._by_submitter.get(submitter, ()))

    def all(self) -> list[Report]:
        return [copy.copy(r) for r in self._reports]

    def to_dict(self) -> dict[str, Any]:
        return {"reports": [r.to_dict() for r in self._reports]}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ReportStore:
        """Rebuild a store; the index is derived from report order.

        Raises:
            ValueError: If ids have gaps, or a reward does not match its
                report's status (non-zero exactly when ACCEPTED or PAID).
        """
        store = cls()
        reports = sorted((Report.from_dict(r) for r in data.get("reports", [])), key=lambda r: r.id)
        for expected_id, report in enumerate(reports):
            if report.id != expected_id:
                raise ValueError(f"Report ids are not contiguous at {expected_id}")
            rewarded = report.status in REWARDED_STATUSES
            if report.reward < 0 or (report.reward > 0) != rewarded:
                raise ValueError(f"Report {report.id} has reward {report.reward} in status {report.status.name}")
            if rewarded and report.severity == Severity.NONE:
                raise ValueError(f"Report {report.id} is {report.status.name} without a severity")
            store._reports.append(report)
            store._by_submitter.setdefault(report.submitter, []).append(report.id)
        return store
