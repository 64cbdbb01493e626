#!/usr/bin/env python3
"""Local CLI entrypoint to run the audit gate from a checkout.

Usage:
  python scripts/audit_filter.py [--allowlist path_or_url] [--audit-file report.json] [--warn-only]

This calls the same ``npm_audit_filter.cli.main`` installed as the
``npm-audit-filter`` console script.
"""

from __future__ import annotations

from npm_audit_filter.cli import main


if __name__ == "__main__":
    raise SystemExit(main())
