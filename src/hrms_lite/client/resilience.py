"""Retry plumbing for hosts that sleep when idle.

A free-tier host answers 502 (or 500 while it boots) for a while after it
wakes up. :func:`resilient` wraps a request method: on such an answer, or on a
connection error/timeout, it pings the health endpoint once, then retries with
growing delays and finally raises :class:`ServiceUnavailableError`.

Writes may already be committed when the answer is a 5xx or a timeout, so
non-GET requests are only retried when the connection itself failed.
"""

from __future__ import annotations

from functools import wraps
from typing import Optional, Sequence

import requests

from ..common.logger import get_logger

log = get_logger("client")

DEFAULT_RETRY_DELAYS: Sequence[float] = (3.0, 7.0, 12.0)
UNAVAILABLE_STATUSES = frozenset({500, 502})
WAKEUP_INTERVAL_SECONDS = 60.0
SAFE_METHODS = frozenset({"GET", "HEAD", "OPTIONS"})


class ApiError(Exception):
    def __init__(self, message: str, *, status: Optional[int] = None, errors: Optional[list] = None):
        super().__init__(message)
        self.status = status
        self.errors = list(errors or [])


class TransientError(ApiError):
    """The host answered with a status that usually clears up on retry."""


class ServiceUnavailableError(ApiError):
    """The host stayed unavailable after every retry."""


def _unavailable(error: Exception) -> ServiceUnavailableError:
    status = getattr(error, "status", None)
    return ServiceUnavailableError(
        f"Backend service is currently unavailable ({status or error})",
        status=status,
    )


def resilient(method):
    """Retry ``method(self, http_method, path, ...)`` on transient failures.

    The owner object provides ``retry_delays``, ``sleep(seconds)`` and
    ``wake_up()``.
    """

    @wraps(method)
    def wrapper(self, http_method, *args, **kwargs):
        delays = list(self.retry_delays)
        safe = str(http_method).upper() in SAFE_METHODS
        last_error: Optional[Exception] = None

        for attempt in range(len(delays) + 1):
            try:
                result = method(self, http_method, *args, **kwargs)
                if attempt > 0:
                    log.info("Backend service is responding again")
                return result
            except (TransientError, requests.ConnectionError, requests.Timeout) as e:
                last_error = e
                if attempt == 0:
                    log.warning("Backend service unavailable (%s), waking it up", e)
                    self.wake_up()
                # ConnectTimeout is a ConnectionError: the request never reached the host.
                if not safe and not isinstance(e, requests.ConnectionError):
                    log.warning("Not retrying %s %s after %s", http_method, args[0] if args else "", e)
                    raise _unavailable(e) from e
                if attempt < len(delays):
                    log.info("Retry %d/%d in %.1fs", attempt + 1, len(delays), delays[attempt])
                    self.sleep(delays[attempt])

        raise _unavailable(last_error) from last_error

    return wrapper
