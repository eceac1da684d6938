"""Retry logic with exponential backoff for ClickUp API rate limits.

This module provides retry functionality for 429 rate limit responses from
the ClickUp API. It implements exponential backoff (1s, 2s, 4s) and never
retries any other status or error.
"""

import time
import logging
from typing import Callable, TypeVar

from .errors import APIAccessError

logger = logging.getLogger(__name__)

T = TypeVar('T')

MAX_RETRIES = 3


class RateLimitedError(Exception):
    """Internal signal raised by a request function when it receives HTTP 429."""

    def __init__(self, status_code: int = 429):
        super().__init__(f"HTTP {status_code} Too Many Requests")
        self.status_code = status_code


def retry_on_rate_limit(func: Callable[..., T], *args, **kwargs) -> T:
    """Retry function on 429 rate limit with exponential backoff.

    Executes the given function with the provided arguments, retrying up to 3 times
    with exponential backoff (1s, 2s, 4s) when a rate limit error is encountered.
    Fails fast for all other errors.

    Args:
        func: The function to execute with retry logic
        *args: Positional arguments to pass to the function
        **kwargs: Keyword arguments to pass to the function

    Returns:
        The return value of the function

    Raises:
        APIAccessError: If rate limit persists after 3 retries
        Other exceptions: Passed through immediately without retry

    Example:
        >>> response = retry_on_rate_limit(session_send, "GET", url)
    """
    for retry_num in range(MAX_RETRIES + 1):  # 4 attempts total
        try:
            return func(*args, **kwargs)
        except RateLimitedError:
            if retry_num >= MAX_RETRIES:
                logger.error(
                    f"Rate limit persisted after {MAX_RETRIES} retries, giving up"
                )
                raise APIAccessError("ClickUp API failure (after 3 retries)")

            wait_time = 2 ** retry_num
            logger.info(
                f"Rate limit hit, retrying in {wait_time}s "
                f"(retry {retry_num + 1}/{MAX_RETRIES})"
            )
            time.sleep(wait_time)

    raise APIAccessError("ClickUp API failure (after 3 retries)")
