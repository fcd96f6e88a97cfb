"""
L4 Execution — HTTP GET.

The single place where the install pipeline touches the network.
Every transport failure (DNS, refused connection, timeout, non-2xx
status, truncated body) is reported as ``FetchError`` so callers can
classify it for their own stage.
"""

from __future__ import annotations

import http.client
import logging
import urllib.error
import urllib.request
from typing import Any, Callable

from centy_installer.core.config.loader import InstallerConfig

logger = logging.getLogger(__name__)

# ``urllib.request.urlopen``-compatible callable: (request, timeout=...) → response
Opener = Callable[..., Any]


class FetchError(Exception):
    """A GET request did not produce a 2xx response body."""

    def __init__(self, url: str, reason: str, *, status: int | None = None) -> None:
        super().__init__(reason)
        self.url = url
        self.reason = reason
        self.status = status


def http_get(
    url: str,
    *,
    config: InstallerConfig,
    accept: str | None = None,
    opener: Opener | None = None,
) -> bytes:
    """Fetch ``url`` and return the response body.

    Args:
        url: Absolute URL.
        config: Supplies the User-Agent and the per-request timeout.
        accept: Optional ``Accept`` header value.
        opener: Replacement for ``urllib.request.urlopen`` (tests).

    Raises:
        FetchError: Transport failure or non-2xx status.
    """
    headers = {"User-Agent": config.user_agent}
    if accept:
        headers["Accept"] = accept
    req = urllib.request.Request(url, headers=headers)
    open_url = opener or urllib.request.urlopen

    logger.debug("GET %s (timeout=%ss)", url, config.timeout)
    try:
        with open_url(req, timeout=config.timeout) as resp:
            status = _status_of(resp)
            if status is not None and not 200 <= status < 300:
                raise FetchError(url, f"HTTP {status}", status=status)
            body = resp.read()
    except FetchError:
        raise
    except urllib.error.HTTPError as exc:
        raise FetchError(url, f"HTTP {exc.code} {exc.reason}", status=exc.code) from exc
    except urllib.error.URLError as exc:
        raise FetchError(url, str(exc.reason)) from exc
    except (OSError, http.client.HTTPException, ValueError) as exc:
        raise FetchError(url, str(exc) or type(exc).__name__) from exc

    logger.debug("GET %s → %d bytes", url, len(body))
    return body


def _status_of(resp: Any) -> int | None:
    status = getattr(resp, "status", None)
    if status is None and hasattr(resp, "getcode"):
        status = resp.getcode()
    return status
