"""Subject — a single observable value with replay-on-subscribe.

Every subscriber is called once with the current value at subscribe time,
then again on every next(). There is no equality check: next(x) twice
notifies twice.

Re-entrancy: a next() issued by a listener while the same Subject is still
notifying is queued. The outer next() drains the queue in FIFO order once
the current round has reached every listener, so nested updates never
interleave with an in-flight round.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Callable, Generic, TypeVar

from flox.errors import DisposedError

logger = logging.getLogger(__name__)

T = TypeVar("T")

Observer = Callable[[T], None]
Unsubscribe = Callable[[], None]


class Subject(Generic[T]):
    """A mutable value with an ordered set of listeners."""

    __slots__ = ("_value", "_observers", "_disposed", "_notifying", "_queue")

    def __init__(self, value: T) -> None:
        self._value = value
        # dict keeps registration order and set semantics
        self._observers: dict[Observer[T], None] = {}
        self._disposed = False
        self._notifying = False
        self._queue: deque[T] = deque()

    @property
    def value(self) -> T:
        """The current value. Still readable after dispose()."""
        return self._value

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    @property
    def observer_count(self) -> int:
        return len(self._observers)

    def subscribe(self, observer: Observer[T]) -> Unsubscribe:
        """Register observer, call it with the current value, return an unsubscriber.

        Raises DisposedError once the Subject has been disposed.
        """
        if self._disposed:
            raise DisposedError("cannot subscribe to a disposed Subject")

        self._observers[observer] = None
        observer(self._value)

        def _unsubscribe() -> None:
            self._observers.pop(observer, None)

        return _unsubscribe

    def next(self, value: T) -> None:
        """Store value and notify every listener in registration order."""
        if self._disposed:
            return
        self._queue.append(value)
        if self._notifying:
            return

        self._notifying = True
        try:
            while self._queue:
                current = self._queue.popleft()
                self._value = current
                # Snapshot: listeners may subscribe or unsubscribe mid-round.
                for observer in list(self._observers):
                    if self._disposed:
                        return
                    try:
                        observer(current)
                    except Exception:
                        logger.exception("Error in observer %r", observer)
        finally:
            self._notifying = False
            self._queue.clear()

    def set_value(self, value: T) -> None:
        """Store value without notifying. For callers that notify themselves."""
        if self._disposed:
            return
        self._value = value

    def dispose(self) -> None:
        """Drop every listener. The last value is kept."""
        if self._disposed:
            return
        self._disposed = True
        self._observers.clear()

    def __repr__(self) -> str:
        state = "disposed" if self._disposed else f"{len(self._observers)} observers"
        return f"Subject({self._value!r}, {state})"
