"""
Retrieve the competition snapshot from a local file or a URL.

A missing snapshot ("not found") is an empty competition, not an error.
Every other failure is logged and re-raised for the caller to handle.
"""
import json
import logging
import os

import requests
from filelock import FileLock

from .errors import ApiError, SnapshotFormatError
from .models import CompetitionSnapshot

logger = logging.getLogger(__name__)

LOCK_TIMEOUT_SECONDS = 10
DEFAULT_REQUEST_TIMEOUT_SECONDS = 10


def _lock_for(path: str) -> FileLock:
    return FileLock(path + '.lock', timeout=LOCK_TIMEOUT_SECONDS)


def read_competition_file(path: str) -> dict:
    """Read the raw snapshot JSON; a missing file gives an empty dict."""
    if not os.path.exists(path):
        logger.info(f"No competition summary at {path}")
        return {}
    try:
        with _lock_for(path):
            with open(path, 'r', encoding='utf-8') as f:
                text = f.read()
    except FileNotFoundError:
        # Removed between the check and the read
        logger.info(f"Competition summary at {path} disappeared before reading")
        return {}
    if not text.strip():
        return {}
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse {path}: {e}")
        raise SnapshotFormatError(f"{path} is not valid JSON: {e}") from e


def fetch_competition(url: str, timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS) -> dict:
    """
    GET the raw snapshot JSON from ``url``.

    A 404 response gives an empty dict. Any other non-OK status raises
    ApiError; connection problems raise the underlying requests exception.
    """
    try:
        response = requests.get(url, timeout=timeout)
    except requests.exceptions.RequestException as e:
        logger.error(f"Failed to fetch competition summary from {url}: {e}")
        raise

    if response.status_code == 404:
        logger.info(f"No competition summary at {url}")
        return {}

    if not response.ok:
        error = ApiError(response.status_code, response.reason)
        logger.error(f"Failed to fetch competition summary from {url}: {error}")
        raise error

    try:
        return response.json()
    except ValueError as e:
        content_type = response.headers.get('Content-Type', '')
        logger.error(f"Competition summary from {url} is not JSON ({content_type}): {e}")
        raise SnapshotFormatError(f"competition summary from {url} is not JSON") from e


def load_competition(source: str, timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS) -> CompetitionSnapshot:
    """Load and parse the snapshot from a URL (http/https) or a file path."""
    if source.startswith(('http://', 'https://')):
        data = fetch_competition(source, timeout=timeout)
    else:
        data = read_competition_file(source)
    return CompetitionSnapshot.from_dict(data)
