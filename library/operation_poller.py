"""
Polling of long-running remote operations.
Fixed interval, bounded attempts and elapsed time, cancellable wait.
"""

import time
import logging
import threading
from typing import Callable, Optional

from library.errors import GenerationCancelledError, OperationError, OperationTimeoutError
from library.models import AsyncOperation

logger = logging.getLogger(__name__)

POLL_INTERVAL = 5.0
DEFAULT_MAX_ATTEMPTS = 120


class CancellationToken:
    """Cooperative cancellation flag shared between the UI and a running request."""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def wait(self, timeout: float) -> bool:
        """Sleep up to `timeout` seconds; returns True if cancelled meanwhile."""
        return self._event.wait(timeout)


class OperationPoller:
    """Re-queries an operation until it finishes, fails, times out or is cancelled."""

    def __init__(
        self,
        refresh: Callable[[AsyncOperation], AsyncOperation],
        poll_interval: float = POLL_INTERVAL,
        max_attempts: Optional[int] = DEFAULT_MAX_ATTEMPTS,
        timeout: Optional[float] = None,
        sleep: Optional[Callable[[float], None]] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Args:
            refresh: Fetches the latest state of an operation (one outbound query)
            poll_interval: Seconds between queries
            max_attempts: Maximum number of re-queries, None for unbounded
            timeout: Maximum elapsed seconds, None for unbounded
            sleep: Replacement for the pause between queries
            clock: Monotonic time source
        """
        self.refresh = refresh
        self.poll_interval = poll_interval
        self.max_attempts = max_attempts
        self.timeout = timeout
        self._sleep = sleep
        self._clock = clock

    def _pause(self, cancel_token: Optional[CancellationToken]) -> None:
        if self._sleep is not None:
            self._sleep(self.poll_interval)
        elif cancel_token is not None:
            if cancel_token.wait(self.poll_interval):
                raise GenerationCancelledError()
        else:
            time.sleep(self.poll_interval)

    def await_completion(
        self,
        operation: AsyncOperation,
        cancel_token: Optional[CancellationToken] = None,
        progress_callback: Optional[Callable[[int, float], None]] = None,
    ) -> AsyncOperation:
        """
        Wait until the operation is done.

        Args:
            operation: Operation returned by the initial submission
            cancel_token: Optional token checked before every query
            progress_callback: Called with (attempts, elapsed seconds) after each query

        Returns:
            The completed operation

        Raises:
            OperationError: The operation finished with an error
            OperationTimeoutError: Attempts or elapsed time exhausted
            GenerationCancelledError: The token was cancelled
        """
        start = self._clock()
        attempts = 0

        while True:
            if cancel_token is not None and cancel_token.cancelled:
                logger.info(f"Operation {operation.name} cancelled after {attempts} checks")
                raise GenerationCancelledError()

            if operation.done:
                if operation.error:
                    logger.error(f"Operation {operation.name} failed: {operation.error}")
                    raise OperationError(operation.error, operation_name=operation.name)
                logger.info(f"Operation {operation.name} completed after {attempts} checks")
                return operation

            elapsed = self._clock() - start
            if self.max_attempts is not None and attempts >= self.max_attempts:
                raise OperationTimeoutError(operation.name, attempts, elapsed)
            if self.timeout is not None and elapsed >= self.timeout:
                raise OperationTimeoutError(operation.name, attempts, elapsed)

            self._pause(cancel_token)
            if cancel_token is not None and cancel_token.cancelled:
                raise GenerationCancelledError()

            operation = self.refresh(operation)
            attempts += 1
            logger.debug(f"Polled operation {operation.name} (attempt {attempts}, done={operation.done})")

            if progress_callback:
                progress_callback(attempts, self._clock() - start)
