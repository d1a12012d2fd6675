"""Bounded, thread-safe connection pool.

All connections are opened when the pool is built and the pool never
grows. ``borrow`` blocks until a connection is idle; ``connection()`` is
the scoped form that always returns the connection, whatever happens in
the ``with`` body.
"""

from __future__ import annotations

import logging
import threading
import time
from collections import deque
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any

from row_map.core.exceptions import (
    ConnectionSetupError,
    PoolClosedError,
    PoolError,
    PoolTimeoutError,
)

logger = logging.getLogger(__name__)

_UNSET: Any = object()


class ConnectionPool:
    """Fixed-capacity pool of pre-opened connections to one endpoint.

    Args:
        connect: Opens one new connection.
        size: Number of connections; the pool's fixed capacity.
        close: Closes one connection. Defaults to calling ``conn.close()``.
        timeout: Default seconds ``borrow`` waits; ``None`` waits forever.

    Raises:
        ConnectionSetupError: If any connection fails to open. Connections
            opened before the failure are closed again.
    """

    def __init__(
        self,
        connect: Callable[[], Any],
        size: int,
        *,
        close: Callable[[Any], None] | None = None,
        timeout: float | None = None,
    ) -> None:
        if size < 1:
            raise ValueError(f"Pool size must be at least 1, got {size}")

        self._close_conn = close or (lambda conn: conn.close())
        self._timeout = timeout
        self._capacity = size
        self._idle: deque[Any] = deque()
        self._in_use: set[int] = set()
        self._cond = threading.Condition(threading.Lock())
        self._closed = False

        opened: list[Any] = []
        try:
            for _ in range(size):
                opened.append(connect())
        except Exception as e:
            for conn in opened:
                self._discard(conn)
            raise ConnectionSetupError(
                f"Failed to open connection {len(opened) + 1} of {size}: {e}"
            ) from e

        self._idle.extend(opened)
        logger.info("Connection pool ready with %d connections", size)

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def available(self) -> int:
        with self._cond:
            return len(self._idle)

    @property
    def borrowed(self) -> int:
        with self._cond:
            return len(self._in_use)

    @property
    def closed(self) -> bool:
        return self._closed

    def borrow(self, timeout: float | None = _UNSET) -> Any:
        """Take an idle connection, blocking until one is released.

        Args:
            timeout: Seconds to wait. Defaults to the pool's timeout;
                ``None`` waits indefinitely.

        Raises:
            PoolTimeoutError: If the wait timed out.
            PoolClosedError: If the pool is or becomes closed while waiting.
        """
        if timeout is _UNSET:
            timeout = self._timeout
        deadline = None if timeout is None else time.monotonic() + timeout

        with self._cond:
            while not self._idle:
                if self._closed:
                    raise PoolClosedError("Connection pool is closed")
                if deadline is None:
                    self._cond.wait()
                    continue
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    raise PoolTimeoutError(timeout)  # type: ignore[arg-type]
                self._cond.wait(remaining)

            if self._closed:
                raise PoolClosedError("Connection pool is closed")
            conn = self._idle.popleft()
            self._in_use.add(id(conn))
            return conn

    def release(self, conn: Any) -> None:
        """Return a borrowed connection and wake one waiting borrower.

        Raises:
            PoolError: If ``conn`` is not currently borrowed from this pool.
        """
        with self._cond:
            if id(conn) not in self._in_use:
                raise PoolError("Connection was not borrowed from this pool")
            self._in_use.discard(id(conn))
            if self._closed:
                self._discard(conn)
                return
            self._idle.append(conn)
            self._cond.notify()

    @contextmanager
    def connection(self, timeout: float | None = _UNSET) -> Iterator[Any]:
        """Borrow a connection for the duration of a ``with`` block."""
        conn = self.borrow(timeout)
        try:
            yield conn
        finally:
            self.release(conn)

    def close(self) -> None:
        """Close idle connections and fail current and future borrowers.

        Connections still borrowed are closed when they are released.
        """
        with self._cond:
            if self._closed:
                return
            self._closed = True
            idle = list(self._idle)
            still_borrowed = len(self._in_use)
            self._idle.clear()
            self._cond.notify_all()

        for conn in idle:
            self._discard(conn)
        logger.info("Connection pool closed (%d still borrowed)", still_borrowed)

    def _discard(self, conn: Any) -> None:
        try:
            self._close_conn(conn)
        except Exception:
            logger.warning("Error closing pooled connection", exc_info=True)

    def __enter__(self) -> ConnectionPool:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
