"""Controller — a stateful unit owning named Subjects.

A Controller's lifetime belongs to whoever registered it (a Binding or the
Flox registry). The owner calls on_init() once at registration and
on_dispose() once at removal; UI code never disposes a Controller itself.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Mapping, TypeVar

from flox.subject import Subject

T = TypeVar("T")


class Controller:
    """Base class for stateful units.

    Subclasses create their Subjects in __init__ and expose domain methods
    over them:

        class CounterController(Controller):
            def __init__(self):
                super().__init__()
                self.count = self.create_subject("count", 0)

            def increment(self):
                self.count.next(self.count.value + 1)
    """

    def __init__(self) -> None:
        self._subjects: dict[str, Subject[Any]] = {}
        self._disposed = False

    def create_subject(self, key: str, value: T) -> Subject[T]:
        """Return the Subject stored under key, creating it with value if absent.

        An existing Subject is returned as-is; value is ignored in that case.
        """
        subject = self._subjects.get(key)
        if subject is None:
            subject = Subject(value)
            self._subjects[key] = subject
        return subject

    def get_subject(self, key: str) -> Subject[Any] | None:
        return self._subjects.get(key)

    def update_subject(self, key: str, value: Any) -> None:
        """next() the Subject under key. Unknown keys are ignored."""
        subject = self._subjects.get(key)
        if subject is not None:
            subject.next(value)

    def on_init(self) -> None:
        """Called once by the owner at registration time. Override for side effects."""

    def on_dispose(self) -> None:
        """Dispose every owned Subject. Idempotent.

        Overrides do their own cleanup first, then call super().on_dispose().
        """
        if self._disposed:
            return
        self._disposed = True
        for subject in self._subjects.values():
            subject.dispose()
        self._subjects.clear()

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    @property
    def subjects(self) -> Mapping[str, Subject[Any]]:
        """Read-only view of the owned Subjects by key."""
        return MappingProxyType(self._subjects)

    def __repr__(self) -> str:
        state = "disposed" if self._disposed else f"{len(self._subjects)} subjects"
        return f"{type(self).__name__}({state})"
