"""End-to-end tests for the bountyledger CLI against a temporary state file."""

from __future__ import annotations

import json
import logging
import os
import subprocess
import sys
from pathlib import Path

import pytest

import bountyledger
from bountyledger.cli.config import reset_cli_config
from bountyledger.cli.main import app, main
from bountyledger.core.config import clear_config_cache
from bountyledger.core.exceptions import ConfigException
from bountyledger.core.logging import JSONFormatter
from bountyledger.core.logging import configure_logging as real_configure_logging
from bountyledger.core.models import UNIT

OWNER = "0x1111111111111111111111111111111111111111"
VALIDATOR = "0x2222222222222222222222222222222222222222"
REPORTER = "0x3333333333333333333333333333333333333333"
OTHER = "0x4444444444444444444444444444444444444444"


@pytest.fixture(autouse=True)
def _isolate_cli(clean_env, monkeypatch, tmp_path):
    """No user config file, no root logger reconfiguration."""
    monkeypatch.setattr("bountyledger.cli.config._DEFAULT_CONFIG_PATH", tmp_path / "cli.toml")
    monkeypatch.setattr("bountyledger.core.logging.configure_logging", lambda **kwargs: None)
    reset_cli_config()
    yield
    reset_cli_config()


@pytest.fixture
def state_path(tmp_path):
    return tmp_path / "state.json"


@pytest.fixture
def cli(state_path, capsys):
    """Run the CLI; returns (exit code, stdout, stderr)."""

    def run(*argv: str, caller: str | None = None):
        args = ["--state", str(state_path)]
        if caller:
            args += ["--as", caller]
        code = main([*args, *argv])
        out, err = capsys.readouterr()
        return code, out, err

    return run


@pytest.fixture
def initialized(cli):
    code, _, _ = cli("init", "--owner", OWNER, "--validator", VALIDATOR)
    assert code == 0
    return cli


@pytest.fixture
def accepted(initialized):
    cli = initialized
    assert cli("funds", "deposit", "10", caller=OWNER)[0] == 0
    assert cli("submit", "Reentrancy in withdraw()", "--poc", "poc.sol", "-s", "high", caller=REPORTER)[0] == 0
    assert cli("status", "0", "accepted", "-s", "critical", caller=VALIDATOR)[0] == 0
    return cli


# ============================================================================
# Parser
# ============================================================================


class TestParser:
    def test_command_required(self):
        with pytest.raises(SystemExit):
            app().parse_args([])

    def test_global_flags(self):
        args = app().parse_args(["--as", OWNER, "--json", "--state", "/tmp/s.json", "show", "0"])
        assert args.caller == OWNER
        assert args.output == "json"
        assert args.state_path == "/tmp/s.json"
        assert args.report_id == 0

    def test_severity_choices(self):
        with pytest.raises(SystemExit):
            app().parse_args(["submit", "x", "-s", "none"])

    def test_cannot_request_paid_status(self):
        with pytest.raises(SystemExit):
            app().parse_args(["status", "0", "paid"])


# ============================================================================
# init
# ============================================================================


class TestInit:
    def test_creates_state(self, cli, state_path):
        code, out, _ = cli("init", "--owner", OWNER, "--validator", VALIDATOR)
        assert code == 0
        assert state_path.exists()
        assert f"Initialized ledger at {state_path}" in out
        assert VALIDATOR in out

    def test_refuses_overwrite(self, initialized):
        code, _, err = initialized("init", "--owner", OWNER, "--validator", VALIDATOR)
        assert code == 1
        assert "already exists" in err

    def test_force_overwrites(self, accepted):
        code, _, _ = accepted("init", "--owner", OWNER, "--validator", VALIDATOR, "--force")
        assert code == 0
        assert accepted("list")[1].strip() == "No reports."

    def test_null_validator_rejected(self, cli, state_path):
        code, _, err = cli("init", "--owner", OWNER, "--validator", "")
        assert code == 1
        assert "InvalidValidator" in err
        assert not state_path.exists()

    def test_commands_need_init(self, cli):
        code, _, err = cli("show", "0")
        assert code == 1
        assert "not initialized" in err


# ============================================================================
# Report lifecycle
# ============================================================================


class TestReportLifecycle:
    def test_submit(self, initialized):
        code, out, _ = initialized("submit", "Overflow", "-s", "medium", caller=REPORTER)
        assert code == 0
        assert out.strip() == "Submitted report #0 (medium)"

    def test_submit_requires_caller(self, initialized):
        code, _, err = initialized("submit", "Overflow", "-s", "medium")
        assert code == 1
        assert "No caller identity" in err

    def test_caller_from_env(self, initialized, monkeypatch):
        monkeypatch.setenv("BOUNTY_CALLER", REPORTER)
        code, _, _ = initialized("submit", "Overflow", "-s", "low")
        assert code == 0
        _, out, _ = initialized("show", "0")
        assert f"Submitter:  {REPORTER}" in out

    def test_accept_reports_reward(self, initialized):
        initialized("submit", "Overflow", "-s", "high", caller=REPORTER)
        code, out, _ = initialized("status", "0", "accepted", "-s", "critical", caller=VALIDATOR)
        assert code == 0
        assert out.strip() == "Report #0 is now accepted (reward 5)"

    def test_under_review_with_dash(self, initialized):
        initialized("submit", "Overflow", "-s", "high", caller=REPORTER)
        code, out, _ = initialized("status", "0", "under-review", caller=VALIDATOR)
        assert code == 0
        assert out.strip() == "Report #0 is now under_review"

    def test_status_requires_validator(self, initialized):
        initialized("submit", "Overflow", "-s", "high", caller=REPORTER)
        code, _, err = initialized("status", "0", "rejected", caller=REPORTER)
        assert code == 1
        assert "Unauthorized" in err

    def test_accept_without_severity(self, initialized):
        initialized("submit", "Overflow", "-s", "high", caller=REPORTER)
        code, _, err = initialized("status", "0", "accepted", caller=VALIDATOR)
        assert code == 1
        assert "InvalidSeverity" in err

    def test_unknown_report(self, initialized):
        code, _, err = initialized("show", "3")
        assert code == 1
        assert "InvalidReportId" in err

    def test_pay(self, accepted):
        code, out, _ = accepted("pay", "0", caller=VALIDATOR)
        assert code == 0
        assert out.strip() == f"Paid 5 to {REPORTER} for report #0"

        _, out, _ = accepted("funds", "balance", "--of", REPORTER)
        assert "Pool balance: 5" in out
        assert "Total paid:   5" in out
        assert f"Received by {REPORTER}: 5" in out

    def test_pay_twice(self, accepted):
        accepted("pay", "0", caller=VALIDATOR)
        code, _, err = accepted("pay", "0", caller=VALIDATOR)
        assert code == 1
        assert "AlreadyPaid" in err

    def test_pay_insufficient_funds(self, initialized):
        initialized("submit", "Overflow", "-s", "high", caller=REPORTER)
        initialized("status", "0", "accepted", "-s", "high", caller=VALIDATOR)
        code, _, err = initialized("pay", "0", caller=VALIDATOR)
        assert code == 1
        assert "InsufficientFunds" in err
        assert "accepted" in initialized("show", "0")[1]

    def test_failed_command_does_not_save(self, accepted, state_path):
        before = state_path.read_text()
        accepted("status", "0", "rejected", caller=OTHER)
        assert state_path.read_text() == before

    def test_list_filters(self, accepted):
        accepted("submit", "Second", "-s", "low", caller=OTHER)

        _, out, _ = accepted("list")
        assert len(out.strip().splitlines()) == 2

        _, out, _ = accepted("list", "--status", "accepted")
        assert out.strip().startswith("#0")
        assert len(out.strip().splitlines()) == 1

        _, out, _ = accepted("list", "--submitter", OTHER)
        assert out.strip().startswith("#1")

        _, out, _ = accepted("list", "--status", "paid")
        assert out.strip() == "No reports."


# ============================================================================
# Validators, tiers, funds
# ============================================================================


class TestValidators:
    def test_add_check_list_remove(self, initialized):
        assert initialized("validators", "add", OTHER, caller=OWNER)[1].strip() == f"Added {OTHER}"
        assert initialized("validators", "add", OTHER, caller=OWNER)[1].strip() == f"Already a validator: {OTHER}"
        assert initialized("validators", "check", OTHER)[1].strip() == f"{OTHER} is a validator"
        assert initialized("validators", "list")[1].split() == sorted([VALIDATOR, OTHER])

        assert initialized("validators", "remove", OTHER, caller=OWNER)[0] == 0
        assert initialized("validators", "check", OTHER)[1].strip() == f"{OTHER} is not a validator"

    def test_owner_only(self, initialized):
        code, _, err = initialized("validators", "add", OTHER, caller=VALIDATOR)
        assert code == 1
        assert "Unauthorized" in err

    def test_remove_unknown(self, initialized):
        code, _, err = initialized("validators", "remove", OTHER, caller=OWNER)
        assert code == 1
        assert "InvalidValidator" in err


class TestTiers:
    def test_show_defaults(self, initialized):
        code, out, _ = initialized("tiers", "show")
        assert code == 0
        assert out.startswith("Reward tier:")
        assert "critical  5" in out

    def test_update(self, initialized):
        code, out, _ = initialized("tiers", "update", "1", "2", "3", "4", caller=OWNER)
        assert code == 0
        assert out.startswith("Reward tier updated:")

        initialized("submit", "Overflow", "-s", "high", caller=REPORTER)
        _, out, _ = initialized("status", "0", "accepted", "-s", "high", caller=VALIDATOR)
        assert "(reward 3)" in out

    def test_update_rejects_non_increasing(self, initialized):
        code, _, err = initialized("tiers", "update", "2", "1", "3", "4", caller=OWNER)
        assert code == 1
        assert "InvalidRewardAmount" in err

    def test_update_owner_only(self, initialized):
        code, _, err = initialized("tiers", "update", "1", "2", "3", "4", caller=VALIDATOR)
        assert code == 1
        assert "Unauthorized" in err


class TestFunds:
    def test_deposit(self, initialized):
        code, out, _ = initialized("funds", "deposit", "2.5", caller=OTHER)
        assert code == 0
        assert out.strip() == "Deposited 2.5; pool balance 2.5"

    def test_deposit_invalid(self, initialized):
        code, _, err = initialized("funds", "deposit", "-1", caller=OTHER)
        assert code == 1
        assert "InvalidAmount" in err


# ============================================================================
# JSON output
# ============================================================================


class TestJSONOutput:
    def test_show_json(self, accepted):
        code, out, _ = accepted("--json", "show", "0")
        assert code == 0
        data = json.loads(out)
        assert data["success"] is True
        assert data["data"]["status"] == "accepted"
        assert data["data"]["reward"] == 5 * UNIT

    def test_error_json(self, accepted):
        accepted("pay", "0", caller=VALIDATOR)
        code, out, _ = accepted("--json", "pay", "0", caller=VALIDATOR)
        assert code == 1
        data = json.loads(out)
        assert data["success"] is False
        assert data["code"] == "AlreadyPaid"
        assert data["data"]["status"] == "PAID"

    def test_output_env(self, initialized, monkeypatch):
        monkeypatch.setenv("BOUNTY_OUTPUT", "json")
        _, out, _ = initialized("tiers", "show")
        assert json.loads(out)["data"]["low"] == UNIT // 10

    def test_json_output_for_config_error(self, cli, monkeypatch):
        monkeypatch.setenv("BOUNTY_REWARD_HIGH", "1")
        code, out, _ = cli("--json", "init", "--owner", OWNER, "--validator", VALIDATOR)
        assert code == 1
        assert json.loads(out)["code"] == "ConfigException"


# ============================================================================
# Bad input never escapes as a traceback
# ============================================================================


class TestBadInput:
    @pytest.mark.parametrize("amount", ["Infinity", "-inf", "NaN"])
    def test_non_finite_deposit(self, initialized, amount):
        code, _, err = initialized("funds", "deposit", amount, caller=OWNER)
        assert code == 1
        assert "InvalidAmount" in err

    def test_non_finite_tier(self, initialized):
        code, _, err = initialized("tiers", "update", "1", "2", "3", "inf", caller=OWNER)
        assert code == 1
        assert "InvalidAmount" in err

    def test_invalid_settings_on_init(self, cli, monkeypatch):
        monkeypatch.setenv("BOUNTY_REWARD_HIGH", "1")
        code, _, err = cli("init", "--owner", OWNER, "--validator", VALIDATOR)
        assert code == 1
        assert "ConfigException" in err

    def test_invalid_settings_when_configuring_logging(self, initialized, monkeypatch):
        def failing(**kwargs):
            raise ConfigException("Invalid configuration: bad level", field="log_level")

        monkeypatch.setattr("bountyledger.core.logging.configure_logging", failing)
        code, _, err = initialized("tiers", "show")
        assert code == 1
        assert "ConfigException" in err


# ============================================================================
# Logging settings reach the CLI
# ============================================================================


@pytest.fixture
def real_logging(monkeypatch):
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    monkeypatch.setattr("bountyledger.core.logging.configure_logging", real_configure_logging)
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


class TestLoggingSettings:
    def test_env_level_and_format(self, initialized, real_logging, monkeypatch):
        monkeypatch.setenv("BOUNTY_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("BOUNTY_LOG_FORMAT", "json")
        clear_config_cache()
        assert initialized("tiers", "show")[0] == 0
        assert real_logging.level == logging.DEBUG
        assert isinstance(real_logging.handlers[0].formatter, JSONFormatter)

    def test_default_level(self, initialized, real_logging):
        initialized("tiers", "show")
        assert real_logging.level == logging.WARNING

    def test_verbose_overrides_env(self, initialized, real_logging, monkeypatch):
        monkeypatch.setenv("BOUNTY_LOG_LEVEL", "ERROR")
        clear_config_cache()
        initialized("--verbose", "tiers", "show")
        assert real_logging.level == logging.DEBUG


# ============================================================================
# Several processes sharing one state file
# ============================================================================


def _subprocess_env(tmp_path: Path) -> dict[str, str]:
    env = {k: v for k, v in os.environ.items() if not k.startswith("BOUNTY_")}
    src = str(Path(bountyledger.__file__).resolve().parents[1])
    env["PYTHONPATH"] = os.pathsep.join(p for p in (src, env.get("PYTHONPATH")) if p)
    env["HOME"] = str(tmp_path)
    return env


def _spawn(state_path: Path, env: dict[str, str], caller: str, *argv: str) -> subprocess.Popen:
    return subprocess.Popen(
        [sys.executable, "-m", "bountyledger.cli.main", "--state", str(state_path), "--as", caller, *argv],
        env=env,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
    )


class TestConcurrentProcesses:
    def test_concurrent_submits_all_stored(self, initialized, state_path, tmp_path):
        env = _subprocess_env(tmp_path)
        procs = [_spawn(state_path, env, f"0xreporter{i}", "submit", f"bug {i}", "-s", "high") for i in range(12)]
        outputs = [p.communicate(timeout=60) for p in procs]

        assert [p.returncode for p in procs] == [0] * 12
        ids = sorted(int(out.split("#")[1].split()[0]) for out, _ in outputs)
        assert ids == list(range(12))

        _, out, _ = initialized("--json", "list")
        assert len(json.loads(out)["data"]) == 12

    def test_concurrent_payouts_pay_once(self, accepted, state_path, tmp_path):
        env = _subprocess_env(tmp_path)
        procs = [_spawn(state_path, env, VALIDATOR, "pay", "0") for _ in range(6)]
        outputs = [p.communicate(timeout=60) for p in procs]

        codes = [p.returncode for p in procs]
        assert codes.count(0) == 1
        assert codes.count(1) == 5
        assert sum("AlreadyPaid" in err for _, err in outputs) == 5

        _, out, _ = accepted("funds", "balance", "--of", REPORTER)
        assert "Pool balance: 5" in out
        assert f"Received by {REPORTER}: 5" in out
