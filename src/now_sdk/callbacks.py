"""Callback-based execution for the blocking client.

Every :class:`~now_sdk.NowSync` operation accepts ``callback=``. The call
is then enqueued on a thread pool and exactly one of
:meth:`ClientCallback.on_success` or :meth:`ClientCallback.on_failure`
fires once it completes.
"""

from __future__ import annotations

import functools
import logging
import threading
from abc import ABC, abstractmethod
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Generic, TypeVar

from .config import DEFAULT_MAX_WORKERS
from .exceptions import ClientClosedError

logger = logging.getLogger(__name__)

T = TypeVar("T")
F = TypeVar("F", bound=Callable[..., Any])


class ClientCallback(ABC, Generic[T]):
    """Receives the outcome of an enqueued call."""

    @abstractmethod
    def on_success(self, result: T) -> None:
        """Called with the unwrapped result of a successful call."""

    @abstractmethod
    def on_failure(self, error: Exception) -> None:
        """Called with the exception a failed call raised."""


class FunctionCallback(ClientCallback[T]):
    """Adapt two plain functions to :class:`ClientCallback`.

    Example:
        ```python
        client.list_domains(
            callback=FunctionCallback(
                on_success=lambda domains: print(len(domains)),
                on_failure=lambda error: print(f"failed: {error}"),
            )
        )
        ```
    """

    def __init__(
        self,
        on_success: Callable[[T], Any],
        on_failure: Callable[[Exception], Any],
    ) -> None:
        self._on_success = on_success
        self._on_failure = on_failure

    def on_success(self, result: T) -> None:
        self._on_success(result)

    def on_failure(self, error: Exception) -> None:
        self._on_failure(error)


class CallbackDispatcher:
    """Runs calls on a lazily created thread pool and routes their outcome."""

    def __init__(self, max_workers: int = DEFAULT_MAX_WORKERS) -> None:
        self._max_workers = max_workers
        self._executor: ThreadPoolExecutor | None = None
        self._closed = False
        self._lock = threading.Lock()

    @property
    def closed(self) -> bool:
        return self._closed

    def _ensure_executor(self) -> ThreadPoolExecutor:
        with self._lock:
            if self._closed:
                raise ClientClosedError("Cannot enqueue a call on a closed client")
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self._max_workers,
                    thread_name_prefix="now-sdk",
                )
            return self._executor

    def submit(self, fn: Callable[[], T], callback: ClientCallback[T]) -> Future[T]:
        """Enqueue ``fn`` and report its outcome to ``callback``.

        Returns:
            A future resolving to the same result or exception the
            callback receives.

        Raises:
            ClientClosedError: If the dispatcher has been shut down.
        """
        return self._ensure_executor().submit(self._run, fn, callback)

    @staticmethod
    def _run(fn: Callable[[], T], callback: ClientCallback[T]) -> T:
        try:
            result = fn()
        except Exception as e:
            _notify(callback.on_failure, e)
            raise
        _notify(callback.on_success, result)
        return result

    def shutdown(self, wait: bool = True) -> None:
        """Stop the pool, by default after queued calls finish.

        Further submissions raise :class:`ClientClosedError`.
        """
        with self._lock:
            self._closed = True
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=wait)


def _notify(handler: Callable[[Any], None], value: Any) -> None:
    # A failing handler must not trigger the other one
    try:
        handler(value)
    except Exception:
        logger.exception("Callback %r raised", handler)


def enqueueable(method: F) -> F:
    """Give a blocking client method an optional ``callback=`` argument.

    Without a callback the method runs inline. With one, the call is
    submitted to the client's dispatcher and a :class:`Future` is returned.
    """

    @functools.wraps(method)
    def wrapper(self: Any, *args: Any, callback: ClientCallback | None = None, **kwargs: Any) -> Any:
        if callback is None:
            return method(self, *args, **kwargs)
        return self._dispatcher.submit(functools.partial(method, self, *args, **kwargs), callback)

    return wrapper  # type: ignore[return-value]
