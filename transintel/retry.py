"""
Bounded retry with exponential backoff, and the upstream invoker built on it.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar

from tenacity import (
    Retrying,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential
)

from transintel.config import RetryPolicy
from transintel.errors import UpstreamError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# 1s, 2s, 4s, ... between attempts
DEFAULT_BACKOFF = wait_exponential(
    multiplier=RetryPolicy.BASE_DELAY_SECONDS,
    min=RetryPolicy.BASE_DELAY_SECONDS
)


@dataclass(frozen=True)
class RetryOutcome(Generic[T]):
    """
    Result of a retried operation: either a value or the last error.

    Attributes:
        value: Return value of the successful attempt
        error: Exception raised by the final attempt, if it failed
        attempts: Number of attempts made
    """
    value: Optional[T] = None
    error: Optional[Exception] = None
    attempts: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value, or raise the last error."""
        if self.error is not None:
            raise self.error
        return self.value


def retry_call(
    operation: Callable[[], T],
    is_retryable: Callable[[BaseException], bool],
    backoff=DEFAULT_BACKOFF,
    max_attempts: int = RetryPolicy.MAX_ATTEMPTS,
    sleep: Callable[[float], Any] = time.sleep
) -> RetryOutcome[T]:
    """
    Run an operation up to max_attempts times.

    An attempt is retried only when is_retryable accepts its exception;
    any other exception ends the ladder immediately.

    Args:
        operation: Zero-argument callable to run
        is_retryable: Predicate over the raised exception
        backoff: tenacity wait strategy between attempts
        max_attempts: Total number of attempts, including the first
        sleep: Delay function, injectable for tests

    Returns:
        RetryOutcome holding the value or the last error
    """
    retrying = Retrying(
        stop=stop_after_attempt(max_attempts),
        wait=backoff,
        retry=retry_if_exception(is_retryable),
        sleep=sleep,
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True
    )
    try:
        value = retrying(operation)
    except Exception as e:
        return RetryOutcome(error=e, attempts=retrying.statistics.get('attempt_number', 1))
    return RetryOutcome(value=value, attempts=retrying.statistics.get('attempt_number', 1))


class UpstreamInvoker:
    """
    Executes model calls with the retry ladder applied.

    Every failure is classified into an UpstreamError; only the transient
    ones (rate limit, server error, unavailable, timeout) are retried.
    """

    def __init__(
        self,
        client,
        max_attempts: int = RetryPolicy.MAX_ATTEMPTS,
        backoff=DEFAULT_BACKOFF,
        sleep: Callable[[float], Any] = time.sleep
    ):
        """
        Args:
            client: Object exposing generate(prompt, file=None) -> str
            max_attempts: Total attempts per invocation
            backoff: tenacity wait strategy between attempts
            sleep: Delay function, injectable for tests
        """
        self.client = client
        self.max_attempts = max_attempts
        self.backoff = backoff
        self.sleep = sleep

    def invoke(self, prompt: str, file=None) -> str:
        """
        Run one generation call with retries.

        Raises:
            UpstreamError: The classified error of the last attempt
        """
        outcome = retry_call(
            lambda: self._call(prompt, file),
            is_retryable=_is_retryable,
            backoff=self.backoff,
            max_attempts=self.max_attempts,
            sleep=self.sleep
        )
        if not outcome.ok:
            logger.error(f"Upstream call failed after {outcome.attempts} attempt(s): {outcome.error}")
        return outcome.unwrap()

    def _call(self, prompt: str, file) -> str:
        try:
            return self.client.generate(prompt, file=file)
        except UpstreamError:
            raise
        except Exception as e:
            raise UpstreamError.from_exception(e) from e


def _is_retryable(error: Exception) -> bool:
    return isinstance(error, UpstreamError) and error.retryable
