"""Audit command execution."""

from __future__ import annotations

import subprocess
from typing import Any

import pytest
from tenacity import wait_fixed

from npm_audit_filter import runner
from npm_audit_filter.runner import AuditCommandError, run_audit

COMMAND = ("npm", "audit", "--json")


def _completed(stdout: str, returncode: int = 0, stderr: str = "") -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess(list(COMMAND), returncode, stdout=stdout, stderr=stderr)


@pytest.fixture(autouse=True)
def no_retry_wait(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(runner, "_invoke", runner._invoke.retry_with(wait=wait_fixed(0)))


def test_returns_output_on_success(monkeypatch: pytest.MonkeyPatch) -> None:
    seen: dict[str, Any] = {}

    def fake_run(command: list[str], **kwargs: Any) -> subprocess.CompletedProcess:
        seen["command"] = command
        seen.update(kwargs)
        return _completed('{"advisories": {}}')

    monkeypatch.setattr(runner.subprocess, "run", fake_run)

    run = run_audit(COMMAND, timeout=12)

    assert run.stdout == '{"advisories": {}}'
    assert run.returncode == 0
    assert run.command == COMMAND
    assert seen["command"] == list(COMMAND)
    assert seen["timeout"] == 12
    assert seen["check"] is False


def test_nonzero_exit_still_returns_output(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        runner.subprocess, "run", lambda *a, **k: _completed('{"advisories": {"1": {}}}', 1)
    )

    run = run_audit(COMMAND)

    assert run.returncode == 1
    assert run.stdout.startswith("{")


def test_empty_output_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        runner.subprocess, "run", lambda *a, **k: _completed("", 254, "npm ERR! network")
    )

    with pytest.raises(AuditCommandError, match="exit code 254.*npm ERR! network"):
        run_audit(COMMAND)


def test_missing_executable_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_run(*args: Any, **kwargs: Any) -> subprocess.CompletedProcess:
        raise FileNotFoundError("npm")

    monkeypatch.setattr(runner.subprocess, "run", fake_run)

    with pytest.raises(AuditCommandError, match="Audit command not found: npm"):
        run_audit(COMMAND)


def test_timeout_is_retried_then_raised(monkeypatch: pytest.MonkeyPatch) -> None:
    attempts: list[int] = []

    def fake_run(command: list[str], **kwargs: Any) -> subprocess.CompletedProcess:
        attempts.append(1)
        raise subprocess.TimeoutExpired(command, kwargs["timeout"])

    monkeypatch.setattr(runner.subprocess, "run", fake_run)

    with pytest.raises(AuditCommandError, match="timed out after 5s"):
        run_audit(COMMAND, timeout=5)

    assert len(attempts) == 3


def test_timeout_then_success(monkeypatch: pytest.MonkeyPatch) -> None:
    outcomes: list[Any] = [subprocess.TimeoutExpired(list(COMMAND), 5), _completed("{}", 0)]

    def fake_run(command: list[str], **kwargs: Any) -> subprocess.CompletedProcess:
        outcome = outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    monkeypatch.setattr(runner.subprocess, "run", fake_run)

    assert run_audit(COMMAND, timeout=5).stdout == "{}"
