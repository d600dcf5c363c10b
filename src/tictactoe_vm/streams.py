"""
Small helpers on top of reactivex.

``ClickSubject`` is the input subject used by the view-model: every observer
gets every value, even when an earlier observer raises. ``first_value`` and
``last_value`` turn an observable into an ``asyncio.Future`` so drivers and
tests can ``await`` the state stream.
"""
from __future__ import annotations

import asyncio
from typing import Optional, TypeVar

from reactivex import Observable
from reactivex import operators as ops
from reactivex.subject import Subject

_T = TypeVar("_T")


class ClickSubject(Subject[_T]):
    """Subject that isolates its observers from one another.

    The first exception raised by an observer is re-raised to the emitter
    once all observers have been handed the value.
    """

    def _on_next_core(self, value: _T) -> None:
        with self.lock:
            observers = self.observers.copy()

        error: Optional[Exception] = None
        for observer in observers:
            try:
                observer.on_next(value)
            except Exception as e:
                if error is None:
                    error = e
        if error is not None:
            raise error


def first_value(source: Observable[_T]) -> "asyncio.Future[_T]":
    # Must be called with a running event loop
    return source.pipe(ops.first(), ops.to_future())


def last_value(source: Observable[_T]) -> "asyncio.Future[_T]":
    """Resolve with the last value once ``source`` completes.

    An empty sequence fails with
    ``reactivex.internal.exceptions.SequenceContainsNoElementsError``.
    """
    return source.pipe(ops.last(), ops.to_future())
