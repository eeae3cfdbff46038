"""Cooperative cancellation shared between a caller and a running operation."""

from __future__ import annotations

import threading

from geonames.common.errors import OperationCancelled


class CancellationToken:
    def __init__(self) -> None:
        self._event = threading.Event()
        self._cause: BaseException | None = None
        self._lock = threading.Lock()

    def cancel(self, cause: BaseException | None = None) -> None:
        with self._lock:
            if self._event.is_set():
                return
            self._cause = cause if cause is not None else OperationCancelled("operation cancelled")
            self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def cause(self) -> BaseException | None:
        with self._lock:
            return self._cause

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise self.cause


def raise_if_cancelled(token: CancellationToken | None) -> None:
    if token is not None:
        token.raise_if_cancelled()
