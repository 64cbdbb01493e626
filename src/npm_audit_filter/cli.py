"""Command-line wrapper around the core analysis.

Reads the allowlist, runs (or reads) the audit output, analyses it for a
reference date and maps the verdict to an exit code:

- 0: no new and no expired high/critical findings
- 1: the gate failed
- 2: the analysis could not run (bad allowlist, bad audit output, command
  failure or invalid settings)
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from datetime import date, datetime, timezone
from pathlib import Path

from .config import ConfigError, Settings, load_settings
from .core import analyze_audit_report
from .errors import AuditFilterError
from .runner import run_audit
from .sources import read_allowlist
from .summary import render_summary, render_text
from .validators.allowlist import AllowlistParseError

_LOG = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_ERROR = 2

SUMMARY_ENV_VAR = "GITHUB_STEP_SUMMARY"


def setup_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        stream=sys.stderr,
        force=True,
    )


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid date '{value}' (expected YYYY-MM-DD)") from exc


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Fail the build on high/critical npm audit findings not covered by the allowlist."
    )
    parser.add_argument("--allowlist", type=str, default=None, help="Allowlist path or URL")
    parser.add_argument(
        "--audit-file",
        type=str,
        default=None,
        help="Read captured audit JSON from this file ('-' for stdin) instead of running npm",
    )
    parser.add_argument("--command", type=str, default=None, help="Audit command to run")
    parser.add_argument("--cwd", type=Path, default=None, help="Directory to run the audit in")
    parser.add_argument(
        "--date",
        dest="reference_date",
        type=_parse_date,
        default=None,
        help="Reference date for expiry checks (default: today, UTC)",
    )
    parser.add_argument("--expiry-window-days", type=int, default=None)
    parser.add_argument("--json", dest="as_json", action="store_true", help="Print JSON result")
    parser.add_argument(
        "--warn-only",
        action="store_true",
        default=None,
        help="Report failures without failing the build",
    )
    parser.add_argument("--verbose", action="store_true")
    return parser.parse_args(argv)


def _read_audit_output(args: argparse.Namespace, settings: Settings) -> str:
    if args.audit_file == "-":
        try:
            return sys.stdin.read()
        except (OSError, UnicodeDecodeError) as exc:
            raise ConfigError(f"Failed to read audit output from stdin: {exc}") from exc
    if args.audit_file:
        try:
            return Path(args.audit_file).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise ConfigError(f"Failed to read audit file {args.audit_file}: {exc}") from exc

    run = run_audit(settings.audit_command, cwd=args.cwd, timeout=settings.timeout)
    return run.stdout


def _write_step_summary(markdown: str) -> None:
    summary_path = os.getenv(SUMMARY_ENV_VAR, "").strip()
    if not summary_path:
        return
    try:
        with open(summary_path, "a", encoding="utf-8") as handle:
            handle.write(markdown)
    except OSError as exc:
        _LOG.warning("Unable to write step summary to %s: %s", summary_path, exc)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging(args.verbose)

    reference_date = args.reference_date or datetime.now(timezone.utc).date()

    try:
        settings = load_settings(
            allowlist=args.allowlist,
            command=args.command,
            window_days=args.expiry_window_days,
            warn_only=args.warn_only,
        )
        allowlist_text = read_allowlist(settings.allowlist_source)
        audit_output = _read_audit_output(args, settings)
        result = analyze_audit_report(
            audit_output,
            allowlist_text,
            reference_date,
            window_days=settings.window_days,
        )
    except AllowlistParseError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        print("Please fix the allowlist before re-running the audit.", file=sys.stderr)
        return EXIT_ERROR
    except AuditFilterError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return EXIT_ERROR

    _LOG.info(
        "Audit analysis completed for %s: %s",
        reference_date.isoformat(),
        result.totals,
    )

    if args.as_json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        text = render_text(
            result,
            window_days=settings.window_days,
            allowlist_name=Path(settings.allowlist_source).name,
        )
        stream = sys.stdout if result.is_successful else sys.stderr
        stream.write(text)

    _write_step_summary(render_summary(result))

    if result.is_successful:
        return EXIT_OK
    if settings.warn_only:
        _LOG.warning("Audit gate failed but warn-only mode is enabled")
        return EXIT_OK
    return EXIT_FAILED


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
