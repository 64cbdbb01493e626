"""Allowlist source resolution: local file or HTTP(S) URL."""

from __future__ import annotations

import logging
from pathlib import Path

import requests
from requests import Response
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_fixed

from .errors import AuditFilterError

_LOG = logging.getLogger(__name__)

HTTP_TIMEOUT = 10


class AllowlistSourceError(AuditFilterError):
    """Raised when an existing allowlist source cannot be read."""


def _is_url(source: str) -> bool:
    return source.startswith("http://") or source.startswith("https://")


@retry(
    reraise=True,
    stop=stop_after_attempt(3),
    wait=wait_fixed(2),
    retry=retry_if_exception_type(requests.RequestException),
)
def _http_get(url: str) -> Response:
    return requests.get(url, timeout=HTTP_TIMEOUT)


def _fetch_allowlist(url: str) -> str | None:
    try:
        response = _http_get(url)
    except requests.RequestException as exc:
        raise AllowlistSourceError(f"Failed to fetch allowlist from {url}: {exc}") from exc

    if response.status_code == 404:
        _LOG.info("Allowlist not found at %s", url)
        return None
    if response.status_code != 200:
        raise AllowlistSourceError(
            f"Unexpected status code {response.status_code} fetching allowlist from {url}"
        )
    return response.text


def read_allowlist(source: str | Path) -> str | None:
    """Return allowlist text, or None when the allowlist does not exist.

    A missing allowlist is a normal condition (strict mode). A file or URL that
    exists but cannot be read raises AllowlistSourceError instead, so a broken
    source is never mistaken for an absent one.
    """
    text_source = str(source)
    if _is_url(text_source):
        return _fetch_allowlist(text_source)

    path = Path(text_source)
    if not path.exists():
        _LOG.info("Allowlist file %s not found", path)
        return None

    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise AllowlistSourceError(f"Failed to read allowlist file {path}: {exc}") from exc

    _LOG.debug("Loaded allowlist file %s (%d characters)", path, len(content))
    return content
