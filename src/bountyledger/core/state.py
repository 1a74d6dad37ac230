# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""File-backed ledger state for the CLI.

The whole ledger snapshot is one JSON document. Writes go to a temporary
file in the same directory and are renamed into place, so a crash never
leaves a half-written state file.

Several CLI processes may share one state file. Each command holds an
``flock`` on a sibling ``<state>.lock`` file for its whole load, act, save
sequence: exclusive for commands that mutate, shared for read-only ones.
"""

from __future__ import annotations

import fcntl
import json
import logging
import os
import tempfile
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path

from .exceptions import BountyLedgerException, StateFileError
from .ledger import BountyLedger

logger = logging.getLogger(__name__)


class LedgerStateFile:
    """Loads and saves a ``BountyLedger`` snapshot at ``path``."""

    def __init__(self, path: Path):
        self.path = Path(path)

    @property
    def lock_path(self) -> Path:
        return self.path.with_name(self.path.name + ".lock")

    def exists(self) -> bool:
        return self.path.exists()

    @contextmanager
    def lock(self, exclusive: bool = True) -> Generator[None, None, None]:
        """Hold the inter-process state lock, blocking until it is granted.

        Raises:
            StateFileError: If the lock file cannot be opened.
        """
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd = os.open(self.lock_path, os.O_RDWR | os.O_CREAT, 0o600)
        except OSError as e:
            raise StateFileError(str(self.path), f"cannot open lock file: {e}") from e
        try:
            fcntl.flock(fd, fcntl.LOCK_EX if exclusive else fcntl.LOCK_SH)
            logger.debug("Acquired %s lock on %s", "exclusive" if exclusive else "shared", self.lock_path)
            yield
        finally:
            fcntl.flock(fd, fcntl.LOCK_UN)
            os.close(fd)

    def load(self) -> BountyLedger:
        """Read the ledger from disk.

        Raises:
            StateFileError: If the file is missing, unreadable, or holds a
                snapshot that breaks a ledger invariant.
        """
        if not self.path.exists():
            raise StateFileError(str(self.path), "not initialized (run 'bountyledger init')")
        try:
            with open(self.path) as f:
                data = json.load(f)
            ledger = BountyLedger.from_dict(data)
        except (OSError, json.JSONDecodeError, KeyError, TypeError, ValueError, BountyLedgerException) as e:
            raise StateFileError(str(self.path), f"unreadable: {e}") from e
        logger.debug("Loaded ledger with %d reports from %s", ledger.report_count, self.path)
        return ledger

    def save(self, ledger: BountyLedger) -> None:
        """Atomically write the ledger to disk.

        Raises:
            StateFileError: If the file cannot be written. Any temporary
                file is removed whatever the failure.
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)
        data = ledger.to_dict()
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=".state-", suffix=".json")
        try:
            with os.fdopen(fd, "w") as f:
                json.dump(data, f, indent=2)
            os.replace(tmp_name, self.path)
        except OSError as e:
            Path(tmp_name).unlink(missing_ok=True)
            raise StateFileError(str(self.path), f"write failed: {e}") from e
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        self.path.chmod(0o600)
        logger.debug("Saved ledger with %d reports to %s", ledger.report_count, self.path)
