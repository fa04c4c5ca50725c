"""Rx — a standalone reactive variable wrapping one Subject.

Derived variables (map/where) own their upstream subscription: disposing a
derived Rx releases it, after which the source no longer drives it.
Disposing the source does not dispose its derived variables.
"""

from __future__ import annotations

from typing import Callable, Generic, TypeVar

from flox.subject import Observer, Subject, Unsubscribe

T = TypeVar("T")
U = TypeVar("U")


class Rx(Generic[T]):
    """A reactive variable with map/where operators."""

    __slots__ = ("_subject", "_upstream")

    def __init__(self, value: T) -> None:
        self._subject: Subject[T] = Subject(value)
        self._upstream: Unsubscribe | None = None

    @property
    def value(self) -> T:
        return self._subject.value

    @value.setter
    def value(self, value: T) -> None:
        self._subject.next(value)

    @property
    def is_disposed(self) -> bool:
        return self._subject.is_disposed

    def map(self, transform: Callable[[T], U]) -> Rx[U]:
        """Derive an Rx holding transform(value), kept in sync with this one."""
        child: Rx[U] = Rx(transform(self.value))

        def _push(value: T) -> None:
            child.value = transform(value)

        child._upstream = self._subject.subscribe(_push)
        return child

    def where(self, predicate: Callable[[T], bool]) -> Rx[T]:
        """Derive an Rx that only takes upstream values satisfying predicate.

        Rejected values leave the derived value as it was.
        """
        child: Rx[T] = Rx(self.value)

        def _push(value: T) -> None:
            if predicate(value):
                child.value = value

        child._upstream = self._subject.subscribe(_push)
        return child

    def update(self, updater: Callable[[T], T]) -> None:
        self.value = updater(self.value)

    def subscribe(self, observer: Observer[T]) -> Unsubscribe:
        return self._subject.subscribe(observer)

    def dispose(self) -> None:
        """Dispose the wrapped Subject and detach from the upstream source, if any."""
        if self._upstream is not None:
            self._upstream()
            self._upstream = None
        self._subject.dispose()

    def __repr__(self) -> str:
        return f"Rx({self.value!r})"


def rx(value: T) -> Rx[T]:
    """Factory for Rx.

    Usage:
        count = rx(5)
        doubled = count.map(lambda x: x * 2)
        doubled.value  # 10
        count.value = 7
        doubled.value  # 14
    """
    return Rx(value)


def rx_int(value: int = 0) -> Rx[int]:
    return Rx(value)


def rx_string(value: str = "") -> Rx[str]:
    return Rx(value)


def rx_bool(value: bool = False) -> Rx[bool]:
    return Rx(value)
