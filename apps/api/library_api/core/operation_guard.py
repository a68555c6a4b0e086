"""Commit guard shared by the resource handler and the store.

The handler binds an ``OperationToken`` to the worker thread running a store
operation. Store writes commit through ``guarded_commit()``; once the handler
has given up waiting (timeout), the token is abandoned and any later commit
raises ``OperationAbandoned`` instead of mutating state.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
import threading

_state = threading.local()


class OperationAbandoned(RuntimeError):
    """Raised when a store write starts after its caller stopped waiting."""


class OperationToken:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._abandoned = False
        self._committed = False

    def abandon(self) -> bool:
        """Abandon the operation; ``False`` when a write has already committed."""
        with self._lock:
            if self._committed:
                return False
            self._abandoned = True
            return True

    @contextmanager
    def commit(self) -> Iterator[None]:
        with self._lock:
            if self._abandoned:
                raise OperationAbandoned("store operation abandoned after timeout")
            yield
            self._committed = True


@contextmanager
def bind_operation(token: OperationToken) -> Iterator[None]:
    previous = getattr(_state, "token", None)
    _state.token = token
    try:
        yield
    finally:
        _state.token = previous


@contextmanager
def guarded_commit() -> Iterator[None]:
    token: OperationToken | None = getattr(_state, "token", None)
    if token is None:
        yield
        return
    with token.commit():
        yield


__all__ = ["OperationAbandoned", "OperationToken", "bind_operation", "guarded_commit"]
