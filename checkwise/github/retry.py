"""Retry envelope and pagination for GitHub API calls.

Every remote call goes through :func:`safe_api_call`. Failures are mapped to an
:class:`ErrorKind` by :func:`classify_failure`, which is the only place that
decides whether a failure is retried:

- ``RATE_LIMIT``: HTTP 403 mentioning "rate limit", raised at once as
  :class:`~checkwise.errors.RateLimitError`
- ``NETWORK``: connection resets, timeouts and DNS failures, retried with a
  linearly increasing delay and raised as :class:`~checkwise.errors.NetworkError`
  once the retries are used up
- ``UNKNOWN``: anything else, re-raised unchanged
"""

import errno
import socket
import time
from collections.abc import Callable
from enum import Enum
from typing import Any, TypeVar

import requests

from ..errors import NetworkError, RateLimitError
from ..utils import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

DEFAULT_RETRIES = 2
DEFAULT_BASE_DELAY = 1.0
DEFAULT_PER_PAGE = 100

RATE_LIMIT_MESSAGE = "GitHub API rate limit exceeded. Please try again later."
NETWORK_ERROR_MESSAGE = "Network error while contacting GitHub API. Please retry."

NETWORK_ERROR_CODES = frozenset({"ECONNRESET", "ETIMEDOUT", "ENOTFOUND", "EAI_AGAIN"})
NETWORK_ERRNOS = frozenset({errno.ECONNRESET, errno.ETIMEDOUT})


class ErrorKind(str, Enum):
    """Classification of a failed remote call."""

    RATE_LIMIT = "rate_limit"
    NETWORK = "network"
    UNKNOWN = "unknown"


def _status_code(exc: BaseException) -> int | None:
    response = getattr(exc, "response", None)
    if response is not None and getattr(response, "status_code", None) is not None:
        return response.status_code
    status = getattr(exc, "status", None)
    return status if isinstance(status, int) else None


def _failure_text(exc: BaseException) -> str:
    parts = [str(exc)]
    response = getattr(exc, "response", None)
    if response is not None:
        try:
            parts.append(response.text or "")
        except (AttributeError, ValueError):
            pass
    return " ".join(parts).lower()


def _is_network_failure(exc: BaseException) -> bool:
    if isinstance(exc, requests.ConnectionError | requests.Timeout):
        return True
    if isinstance(exc, socket.gaierror | socket.timeout | ConnectionResetError | TimeoutError):
        return True
    code = getattr(exc, "code", None)
    if isinstance(code, str) and code in NETWORK_ERROR_CODES:
        return True
    return getattr(exc, "errno", None) in NETWORK_ERRNOS


def classify_failure(exc: BaseException) -> ErrorKind:
    """Map a caught failure onto the error taxonomy.

    Args:
    ----
        exc: Exception raised by a remote call

    Returns:
    -------
        The kind of failure, evaluated as rate limit, then network, then unknown

    """
    if _status_code(exc) == 403 and "rate limit" in _failure_text(exc):
        return ErrorKind.RATE_LIMIT
    if _is_network_failure(exc):
        return ErrorKind.NETWORK
    return ErrorKind.UNKNOWN


def safe_api_call(
    fn: Callable[[], T],
    retries: int = DEFAULT_RETRIES,
    base_delay: float = DEFAULT_BASE_DELAY,
    sleep: Callable[[float], Any] = time.sleep,
) -> T:
    """Invoke ``fn`` with rate-limit and network failure handling.

    Args:
    ----
        fn: Zero-argument callable performing one remote call
        retries: Additional attempts allowed after the first one
        base_delay: Seconds to wait before the first retry; the n-th retry waits n times this
        sleep: Function used to wait between attempts

    Returns:
    -------
        Whatever ``fn`` returns

    Raises:
    ------
        RateLimitError: If GitHub reports the rate limit as exhausted
        NetworkError: If every attempt failed with a network error
        Exception: Any other failure raised by ``fn``, unchanged

    """
    for attempt in range(retries + 1):
        try:
            return fn()
        except Exception as exc:
            kind = classify_failure(exc)
            if kind is ErrorKind.RATE_LIMIT:
                logger.warning("Rate limit exceeded")
                raise RateLimitError(RATE_LIMIT_MESSAGE) from exc
            if kind is ErrorKind.NETWORK:
                if attempt < retries:
                    wait_time = (attempt + 1) * base_delay
                    logger.warning(
                        "Network error on attempt %d/%d (%s), retrying in %.1f seconds",
                        attempt + 1,
                        retries + 1,
                        exc,
                        wait_time,
                    )
                    sleep(wait_time)
                    continue
                raise NetworkError(NETWORK_ERROR_MESSAGE) from exc
            raise

    # Only reachable with a negative retry count.
    msg = f"retries must be >= 0, got {retries}"
    raise ValueError(msg)


def paginate(fetch_page: Callable[[int, int], list[T]], per_page: int = DEFAULT_PER_PAGE) -> list[T]:
    """Collect every item of a paginated endpoint.

    Pages are requested from 1 upward until a page holds fewer than
    ``per_page`` items. Total-count headers are never consulted.

    Args:
    ----
        fetch_page: Callable taking ``(page, per_page)`` and returning that page's items
        per_page: Page size

    Returns:
    -------
        All items in page order

    """
    all_results: list[T] = []
    page = 1

    while True:
        results = fetch_page(page, per_page)
        all_results.extend(results)

        # Fewer results than requested means this was the last page
        if len(results) < per_page:
            break

        page += 1

    return all_results
