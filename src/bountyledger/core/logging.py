# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Structured logging for the bounty ledger.

Ledger operations attach their identifiers (report id, caller, amount) to
log records with ``ledger_fields``. Both formatters render them: the JSON
formatter under a ``ledger`` key, the text formatter as ``key=value``
pairs after the message. A CLI invocation runs inside
``correlation_context`` so all of its lines share one id.
"""

from __future__ import annotations

import json
import logging
import sys
import uuid
from collections.abc import Generator
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, datetime
from enum import Enum
from typing import Any

_correlation_id: ContextVar[str | None] = ContextVar("correlation_id", default=None)

# LogRecord attribute holding ledger fields
LEDGER_FIELDS_ATTR = "ledger"


def get_correlation_id() -> str | None:
    """Correlation id of the current operation, or None outside one."""
    return _correlation_id.get()


@contextmanager
def correlation_context(
    correlation_id: str | None = None,
) -> Generator[str, None, None]:
    """Scope one ledger operation under a correlation id.

    Example:
        with correlation_context() as cid:
            ledger.pay_reward(validator, report_id)  # log lines carry cid
    """
    cid = correlation_id or str(uuid.uuid4())
    token = _correlation_id.set(cid)
    try:
        yield cid
    finally:
        _correlation_id.reset(token)


def ledger_fields(**fields: Any) -> dict[str, Any]:
    """Build the ``extra=`` mapping for a ledger log call.

    Enum values are logged by lowercase name; None values are dropped.

    Example:
        logger.info("Report %d paid", rid, extra=ledger_fields(report_id=rid, amount=amount))
    """
    clean: dict[str, Any] = {}
    for key, value in fields.items():
        if value is None:
            continue
        clean[key] = value.name.lower() if isinstance(value, Enum) else value
    return {LEDGER_FIELDS_ATTR: clean}


def _record_fields(record: logging.LogRecord) -> dict[str, Any]:
    fields = getattr(record, LEDGER_FIELDS_ATTR, None)
    return fields if isinstance(fields, dict) else {}


class JSONFormatter(logging.Formatter):
    """One JSON object per line, for log files and non-terminal stderr."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        correlation_id = get_correlation_id()
        if correlation_id:
            entry["correlation_id"] = correlation_id

        fields = _record_fields(record)
        if fields:
            entry["ledger"] = fields

        # Refused authorizations and rolled-back payouts get their call site
        if record.levelno >= logging.WARNING:
            entry["source"] = {
                "file": record.pathname,
                "line": record.lineno,
                "function": record.funcName,
            }

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


class StandardFormatter(logging.Formatter):
    """Human-readable lines for a terminal, optionally colored."""

    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"
    DIM = "\033[90m"

    def __init__(self, use_colors: bool = True):
        super().__init__(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        self.use_colors = use_colors and sys.stderr.isatty()

    def _dim(self, text: str) -> str:
        return f"{self.DIM}{text}{self.RESET}" if self.use_colors else text

    def format(self, record: logging.LogRecord) -> str:
        # Work on a copy; other handlers format the same record
        record = logging.makeLogRecord(record.__dict__)
        message = record.getMessage()

        correlation_id = get_correlation_id()
        if correlation_id:
            message = self._dim(f"[{correlation_id[:8]}]") + " " + message

        fields = _record_fields(record)
        if fields:
            message += " " + self._dim(" ".join(f"{k}={v}" for k, v in fields.items()))

        record.msg, record.args = message, None
        if self.use_colors:
            color = self.COLORS.get(record.levelname, "")
            record.levelname = f"{color}{record.levelname}{self.RESET}"

        return super().format(record)


def configure_logging(
    level: str | int | None = None,
    json_format: bool | None = None,
    log_file: str | None = None,
) -> None:
    """Install ledger log handlers on the root logger.

    Arguments left as None come from ``LedgerSettings``:
    ``BOUNTY_LOG_LEVEL``, ``BOUNTY_LOG_FORMAT`` (``json``, ``text`` or empty
    for auto-detect) and ``BOUNTY_LOG_FILE``. The log file is always JSON.

    Raises:
        ConfigException: If the settings are invalid.
    """
    from .config import get_config

    config = get_config()

    if level is None:
        level = config.log_level
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.WARNING)

    if json_format is None:
        fmt = config.log_format.lower()
        json_format = fmt == "json" if fmt in ("json", "text") else not sys.stderr.isatty()

    if log_file is None:
        log_file = config.log_file

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(JSONFormatter() if json_format else StandardFormatter())
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(JSONFormatter())
        root_logger.addHandler(file_handler)
