"""Fetching statement content from its storage location."""

import logging
import os
from pathlib import Path
from urllib.parse import unquote, urlparse

import requests

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


def _timeout() -> float:
    return float(os.environ.get("FINTRACK_FETCH_TIMEOUT", DEFAULT_TIMEOUT))


def fetch_statement(source: str) -> str:
    """Return the text content of a statement.

    Args:
        source: http(s) URL, file:// URL or local filesystem path

    Returns:
        Decoded file content

    Raises:
        requests.RequestException: If the HTTP request fails
        OSError: If a local file cannot be read
    """
    local = Path(source)
    if local.exists():
        # Drive-letter paths such as C:\x.csv would otherwise parse as a URL scheme
        logger.debug("reading statement from %s", local)
        return local.read_text(encoding="utf-8-sig")

    parsed = urlparse(source)

    if parsed.scheme in ("http", "https"):
        logger.debug("fetching statement from %s", source)
        response = requests.get(source, timeout=_timeout())
        response.raise_for_status()
        # Statements are text; fall back to utf-8 when the server omits a charset
        if response.encoding is None:
            response.encoding = "utf-8"
        return response.text

    path = Path(unquote(parsed.path)) if parsed.scheme == "file" else Path(source)
    logger.debug("reading statement from %s", path)
    return path.read_text(encoding="utf-8-sig")
