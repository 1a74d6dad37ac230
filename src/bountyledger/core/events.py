# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Append-only observation stream for ledger state changes.

Each successful ledger operation appends exactly one event; failed
operations append nothing.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import asdict, dataclass
from typing import Any, ClassVar

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LedgerEvent:
    name: ClassVar[str] = "LedgerEvent"

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        for key, value in data.items():
            # IntEnum fields serialize by name
            if hasattr(value, "name") and isinstance(value, int):
                data[key] = value.name.lower()
        return {"event": self.name, **data}


@dataclass(frozen=True)
class BugReported(LedgerEvent):
    name: ClassVar[str] = "BugReported"

    report_id: int
    submitter: str
    severity: int


@dataclass(frozen=True)
class ReportStatusUpdated(LedgerEvent):
    name: ClassVar[str] = "ReportStatusUpdated"

    report_id: int
    new_status: int


@dataclass(frozen=True)
class RewardPaid(LedgerEvent):
    name: ClassVar[str] = "RewardPaid"

    report_id: int
    submitter: str
    amount: int


@dataclass(frozen=True)
class ValidatorAdded(LedgerEvent):
    name: ClassVar[str] = "ValidatorAdded"

    validator: str


@dataclass(frozen=True)
class ValidatorRemoved(LedgerEvent):
    name: ClassVar[str] = "ValidatorRemoved"

    validator: str


@dataclass(frozen=True)
class RewardTierUpdated(LedgerEvent):
    name: ClassVar[str] = "RewardTierUpdated"

    low: int
    medium: int
    high: int
    critical: int


@dataclass(frozen=True)
class FundsDeposited(LedgerEvent):
    name: ClassVar[str] = "FundsDeposited"

    sender: str
    amount: int


Listener = Callable[[LedgerEvent], None]


class EventLog:
    """In-process event stream with synchronous listeners.

    Listener exceptions are logged and do not affect the ledger operation
    that emitted the event, since its state is already committed.
    """

    def __init__(self) -> None:
        self._events: list[LedgerEvent] = []
        self._listeners: list[Listener] = []
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._events)

    def emit(self, event: LedgerEvent) -> None:
        with self._lock:
            self._events.append(event)
            listeners = list(self._listeners)
        logger.debug("Event %s: %s", event.name, event)
        for listener in listeners:
            try:
                listener(event)
            except Exception:
                logger.exception("Event listener failed for %s", event.name)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; returns a callable that unsubscribes it."""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def events(self, name: str | None = None) -> list[LedgerEvent]:
        """All events in emission order, optionally filtered by event name."""
        with self._lock:
            if name is None:
                return list(self._events)
            return [e for e in self._events if e.name == name]

    def last(self) -> LedgerEvent | None:
        with self._lock:
            return self._events[-1] if self._events else None
