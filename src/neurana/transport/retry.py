"""Retry policy for request attempts."""

from dataclasses import dataclass

from neurana.config import RetryConfig
from neurana.transport.response import NETWORK_ERRORS


@dataclass(frozen=True)
class RetryDecision:
    """Outcome of a retry check."""

    retry: bool
    delay: float = 0.0

    @classmethod
    def stop(cls) -> "RetryDecision":
        return cls(retry=False)


class RetryPolicy:
    """Decides whether an attempt is reissued and after how long.

    The policy only reads its constants; attempt counts are passed in by the
    caller so concurrent operations never share retry state.
    """

    def __init__(self, config: RetryConfig | None = None):
        self.config = config or RetryConfig()

    @property
    def max_attempts(self) -> int:
        return self.config.max_attempts

    def calculate_delay(self, attempt: int) -> float:
        """Delay in seconds before the attempt following ``attempt`` (1-indexed)."""
        delay = self.config.initial_delay * self.config.backoff_factor ** (attempt - 1)
        return min(delay, self.config.max_delay)

    def has_attempts_left(self, attempt: int) -> bool:
        return attempt < self.config.max_attempts

    def is_retryable_status(self, status_code: int) -> bool:
        return status_code in self.config.retryable_statuses

    def is_retryable_error(self, error: BaseException) -> bool:
        return isinstance(error, NETWORK_ERRORS)

    def for_status(self, status_code: int, attempt: int) -> RetryDecision:
        """Decide for a completed response."""
        if self.has_attempts_left(attempt) and self.is_retryable_status(status_code):
            return RetryDecision(retry=True, delay=self.calculate_delay(attempt))
        return RetryDecision.stop()

    def for_error(self, error: BaseException, attempt: int) -> RetryDecision:
        """Decide for a transport failure that produced no response."""
        if self.has_attempts_left(attempt) and self.is_retryable_error(error):
            return RetryDecision(retry=True, delay=self.calculate_delay(attempt))
        return RetryDecision.stop()
