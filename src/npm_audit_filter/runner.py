"""Run the audit command and capture its output.

``npm audit`` exits with status 1 whenever it finds vulnerabilities, so the
exit code says nothing about whether the captured JSON is usable. This module
only reports what the command printed; the parser decides if it is valid.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from collections.abc import Sequence

from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_fixed

from .errors import AuditFilterError

_LOG = logging.getLogger(__name__)


class AuditCommandError(AuditFilterError):
    """Raised when the audit command cannot be run or prints nothing."""


@dataclass(slots=True, frozen=True)
class AuditRun:
    """Captured result of one audit command invocation."""

    command: tuple[str, ...]
    stdout: str
    stderr: str
    returncode: int


@retry(
    reraise=True,
    stop=stop_after_attempt(3),
    wait=wait_fixed(2),
    retry=retry_if_exception_type(subprocess.TimeoutExpired),
)
def _invoke(command: Sequence[str], cwd: Path | None, timeout: float) -> subprocess.CompletedProcess:
    return subprocess.run(
        list(command),
        cwd=cwd,
        capture_output=True,
        text=True,
        encoding="utf-8",
        errors="replace",
        timeout=timeout,
        check=False,
    )


def run_audit(
    command: Sequence[str],
    cwd: Path | None = None,
    timeout: float = 300.0,
) -> AuditRun:
    """Run ``command`` and return its captured output regardless of exit code."""
    _LOG.info("Running %s", " ".join(command))

    try:
        completed = _invoke(command, cwd, timeout)
    except FileNotFoundError as exc:
        raise AuditCommandError(f"Audit command not found: {command[0]}") from exc
    except subprocess.TimeoutExpired as exc:
        raise AuditCommandError(f"Audit command timed out after {timeout:g}s") from exc
    except OSError as exc:
        raise AuditCommandError(f"Failed to run audit command: {exc}") from exc

    run = AuditRun(
        command=tuple(command),
        stdout=completed.stdout or "",
        stderr=completed.stderr or "",
        returncode=completed.returncode,
    )
    _LOG.debug(
        "Audit command exited with %d (%d characters of output)",
        run.returncode,
        len(run.stdout),
    )

    if not run.stdout.strip():
        detail = run.stderr.strip() or "no output"
        raise AuditCommandError(
            f"Audit command produced no output (exit code {run.returncode}): {detail}"
        )
    return run
