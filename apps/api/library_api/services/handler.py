"""Single-operation store handler shared by every route."""

from __future__ import annotations

import asyncio
import functools
import logging
from collections.abc import Callable
from typing import Any, TypeVar

from fastapi.concurrency import run_in_threadpool

from library_api.core.operation_guard import OperationAbandoned, OperationToken, bind_operation
from library_api.errors import ApiError, gateway_timeout, internal_error

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _drain_abandoned(name: str, task: asyncio.Future[Any]) -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if isinstance(exc, OperationAbandoned):
        logger.warning("store.abandoned operation=%s", name)
    elif exc is not None:
        logger.error("store.failed_after_timeout operation=%s error_type=%s", name, type(exc).__name__)


class ResourceHandler:
    """Runs one store-backed operation under a timeout with uniform error mapping.

    ``ApiError`` raised by the operation propagates unchanged. A timeout becomes
    504 and any other exception becomes a generic 500; the underlying cause is
    only ever written to the server log.

    A 504 means nothing was written: the worker thread keeps running, but its
    commit is refused once the operation is abandoned. If the write committed
    before the deadline, the handler waits for the operation to finish and
    returns its result instead.
    """

    def __init__(self, timeout_seconds: float) -> None:
        self._timeout_seconds = timeout_seconds

    async def run(self, name: str, operation: Callable[..., T], /, *args: Any, **kwargs: Any) -> T:
        token = OperationToken()

        def call() -> T:
            with bind_operation(token):
                return operation(*args, **kwargs)

        task = asyncio.ensure_future(run_in_threadpool(call))
        try:
            done, _ = await asyncio.wait({task}, timeout=self._timeout_seconds)
            if not done and token.abandon():
                task.add_done_callback(functools.partial(_drain_abandoned, name))
                logger.error(
                    "store.timeout operation=%s timeout_seconds=%s",
                    name,
                    self._timeout_seconds,
                )
                raise gateway_timeout()
            return await task
        except ApiError:
            raise
        except Exception as exc:
            logger.exception("store.failed operation=%s", name)
            raise internal_error() from exc

    async def run_with_fallback(
        self,
        name: str,
        fallback: Callable[[], T],
        operation: Callable[..., T],
        /,
        *args: Any,
        **kwargs: Any,
    ) -> T:
        """Like ``run`` but degrade to ``fallback()`` on store failure (public read endpoints)."""
        try:
            return await self.run(name, operation, *args, **kwargs)
        except ApiError as exc:
            if exc.status_code < 500:
                raise
            logger.warning("store.fallback operation=%s status=%s", name, exc.status_code)
            return fallback()
