"""Background consumption of a queue of errors."""

from __future__ import annotations

import logging
import queue
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)

_POLL_INTERVAL = 0.05


class ContextDoneError(TimeoutError):
    """Closing the consumer did not finish in the time allowed."""

    def __init__(self, message: str = "context done while closing error consumer") -> None:
        super().__init__(message)


class ErrorConsumer:
    """Runs a thread that hands every error from a queue to a callback."""

    def __init__(
        self,
        errors: "queue.Queue[BaseException]",
        consume: Callable[[BaseException], None],
    ) -> None:
        self._errors = errors
        self._consume = consume
        self._closing = threading.Event()
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()

    def _run(self) -> None:
        while not self._closing.is_set():
            try:
                err = self._errors.get(timeout=_POLL_INTERVAL)
            except queue.Empty:
                continue
            self._consume(err)

    def close(self, timeout: Optional[float] = None) -> None:
        """Stop the consumer, waiting up to ``timeout`` seconds for it to finish.

        Closing an already closed consumer does nothing. Raises ContextDoneError
        if the thread is still running when the timeout expires.
        """
        if self._closing.is_set():
            return
        self._closing.set()
        self._thread.join(timeout)
        if self._thread.is_alive():
            raise ContextDoneError()


def new_logging_error_consumer(errors: "queue.Queue[BaseException]") -> ErrorConsumer:
    """Start a consumer that logs every error it receives."""

    def _log(err: BaseException) -> None:
        logger.error("error from graph DB: %s", err)

    return ErrorConsumer(errors, _log)