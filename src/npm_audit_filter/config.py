"""Settings for the audit gate CLI.

Each setting is resolved in priority order:
1. Explicit argument (usually a CLI flag)
2. ``NPM_AUDIT_FILTER_*`` environment variable
3. Built-in default
"""

from __future__ import annotations

import os
import shlex
from dataclasses import dataclass
from collections.abc import Mapping

from .errors import AuditFilterError
from .expiry import EXPIRING_SOON_DAYS

ALLOWLIST_ENV_VAR = "NPM_AUDIT_FILTER_ALLOWLIST"
COMMAND_ENV_VAR = "NPM_AUDIT_FILTER_COMMAND"
WINDOW_ENV_VAR = "NPM_AUDIT_FILTER_EXPIRY_WINDOW_DAYS"
TIMEOUT_ENV_VAR = "NPM_AUDIT_FILTER_TIMEOUT"
WARN_ONLY_ENV_VAR = "NPM_AUDIT_FILTER_WARN_ONLY"

DEFAULT_ALLOWLIST = ".audit-allowlist.json"
DEFAULT_COMMAND = "npm audit --json"
DEFAULT_TIMEOUT = 300.0

_TRUTHY = {"1", "true", "yes", "y"}


class ConfigError(AuditFilterError):
    """Raised when a setting has an invalid value."""


@dataclass(slots=True, frozen=True)
class Settings:
    """Resolved settings for one audit run."""

    allowlist_source: str
    audit_command: tuple[str, ...]
    window_days: int
    timeout: float
    warn_only: bool


def _parse_window(raw: str) -> int:
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigError(f"{WINDOW_ENV_VAR} must be an integer, got '{raw}'") from exc
    if value < 0:
        raise ConfigError(f"{WINDOW_ENV_VAR} must be non-negative, got {value}")
    return value


def _parse_timeout(raw: str) -> float:
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigError(f"{TIMEOUT_ENV_VAR} must be a number, got '{raw}'") from exc
    if value <= 0:
        raise ConfigError(f"{TIMEOUT_ENV_VAR} must be positive, got {value}")
    return value


def _parse_command(raw: str) -> tuple[str, ...]:
    try:
        parts = tuple(shlex.split(raw))
    except ValueError as exc:
        raise ConfigError(f"Invalid audit command '{raw}': {exc}") from exc
    if not parts:
        raise ConfigError("Audit command must not be empty")
    return parts


def load_settings(
    *,
    allowlist: str | None = None,
    command: str | None = None,
    window_days: int | None = None,
    timeout: float | None = None,
    warn_only: bool | None = None,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    """Resolve settings from explicit values, the environment and defaults.

    Raises:
        ConfigError: If any resolved value is invalid.
    """
    env = os.environ if environ is None else environ

    allowlist_source = allowlist or env.get(ALLOWLIST_ENV_VAR, "").strip() or DEFAULT_ALLOWLIST

    raw_command = command or env.get(COMMAND_ENV_VAR, "").strip() or DEFAULT_COMMAND
    audit_command = _parse_command(raw_command)

    if window_days is None:
        raw_window = env.get(WINDOW_ENV_VAR, "").strip()
        window_days = _parse_window(raw_window) if raw_window else EXPIRING_SOON_DAYS
    elif window_days < 0:
        raise ConfigError(f"Expiry window must be non-negative, got {window_days}")

    if timeout is None:
        raw_timeout = env.get(TIMEOUT_ENV_VAR, "").strip()
        timeout = _parse_timeout(raw_timeout) if raw_timeout else DEFAULT_TIMEOUT
    elif timeout <= 0:
        raise ConfigError(f"Audit timeout must be positive, got {timeout}")

    if warn_only is None:
        warn_only = env.get(WARN_ONLY_ENV_VAR, "").strip().lower() in _TRUTHY

    return Settings(
        allowlist_source=allowlist_source,
        audit_command=audit_command,
        window_days=window_days,
        timeout=timeout,
        warn_only=warn_only,
    )
