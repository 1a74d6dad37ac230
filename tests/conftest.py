"""Global test fixtures for the bountyledger test suite."""

from __future__ import annotations

import os

import pytest

from bountyledger.core.config import clear_config_cache
from bountyledger.core.ledger import BountyLedger
from bountyledger.core.models import UNIT

# ============================================================================
# Identities
# ============================================================================

OWNER = "0x1111111111111111111111111111111111111111"
VALIDATOR = "0x2222222222222222222222222222222222222222"
REPORTER = "0x3333333333333333333333333333333333333333"
OTHER = "0x4444444444444444444444444444444444444444"


@pytest.fixture
def owner() -> str:
    return OWNER


@pytest.fixture
def validator() -> str:
    return VALIDATOR


@pytest.fixture
def reporter() -> str:
    return REPORTER


@pytest.fixture
def other() -> str:
    return OTHER


# ============================================================================
# Environment
# ============================================================================


@pytest.fixture
def clean_env(monkeypatch):
    """Remove all BOUNTY_ environment variables."""
    for key in list(os.environ.keys()):
        if key.startswith("BOUNTY_"):
            monkeypatch.delenv(key, raising=False)
    clear_config_cache()
    yield
    clear_config_cache()


# ============================================================================
# Ledger fixtures
# ============================================================================


class FakeClock:
    """Deterministic clock that advances one tick per call."""

    def __init__(self, start: int = 1_700_000_000):
        self.now = start

    def __call__(self) -> int:
        self.now += 1
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def ledger(clock) -> BountyLedger:
    """Ledger with one validator and an empty pool."""
    return BountyLedger(owner=OWNER, validator=VALIDATOR, clock=clock)


@pytest.fixture
def funded_ledger(ledger) -> BountyLedger:
    """Ledger whose pool holds 10 tokens."""
    ledger.deposit(OWNER, 10 * UNIT)
    return ledger
