"""Tell the user when a newer semaphore-cli release is on PyPI."""

from __future__ import annotations

import logging
from typing import Optional

import requests
from packaging.version import Version

logger = logging.getLogger("semaphore_cli.updates")

DIST_NAME = "semaphore-cli"
PYPI_URL = "https://pypi.org/pypi/{name}/json"


def check_latest_version(
    current: str,
    timeout: float = 5.0,
    session: Optional[requests.Session] = None,
) -> Optional[str]:
    """Return the latest published version if it is newer than current.

    Never raises: an unreachable index or a garbled answer just means
    no warning is shown.
    """
    http = session or requests
    url = PYPI_URL.format(name=DIST_NAME)
    try:
        resp = http.get(url, timeout=timeout)
        resp.raise_for_status()
        latest = str(resp.json()["info"]["version"])
        if Version(latest) > Version(current):
            return latest
    except (requests.RequestException, ValueError, KeyError, TypeError) as exc:
        logger.debug("Version check against %s failed: %s", url, exc)
    return None
