"""Cancellation token for in-flight upstream requests."""

from __future__ import annotations

import asyncio

import structlog

logger = structlog.get_logger()


class CancelToken:
    """Cancels a bound task, either on demand or when a deadline passes.

    One token is created per request. Once released, cancelling is a no-op.

    Example:
        token = CancelToken()
        task = asyncio.ensure_future(send())
        token.bind(task)
        token.cancel_after(30.0)
        try:
            response = await task
        finally:
            token.release()
    """

    def __init__(self) -> None:
        self._task: asyncio.Future | None = None
        self._timer: asyncio.TimerHandle | None = None
        self._cancelled = False
        self._timed_out = False

    @property
    def cancelled(self) -> bool:
        """Whether the bound task was cancelled through this token."""
        return self._cancelled

    @property
    def timed_out(self) -> bool:
        """Whether cancellation was triggered by the deadline."""
        return self._timed_out

    def bind(self, task: asyncio.Future) -> None:
        """Attach the task that cancellation should abort."""
        self._task = task

    def cancel_after(self, seconds: float) -> None:
        """Schedule cancellation after a delay.

        Args:
            seconds: Delay before the bound task is cancelled
        """
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(seconds, self._expire, seconds)

    def cancel(self) -> bool:
        """Cancel the bound task.

        Returns:
            True if a pending task was cancelled
        """
        if self._task is None or self._task.done():
            return False
        self._cancelled = True
        self._task.cancel()
        return True

    def release(self) -> None:
        """Disarm the deadline and detach the task."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._task = None

    def _expire(self, seconds: float) -> None:
        self._timer = None
        if self.cancel():
            self._timed_out = True
            logger.warning("upstream_request_timeout", timeout_ms=int(seconds * 1000))
