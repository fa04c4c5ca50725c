"""Shortcut helpers over a Flox registry.

Every helper works on the process-wide registry unless an explicit one is
passed as flox=.
"""

from __future__ import annotations

from typing import TypeVar

from flox.binding import Binding
from flox.controller import Controller
from flox.registry import Flox, get_flox

B = TypeVar("B", bound=Binding)
C = TypeVar("C", bound=Controller)


def _resolve(flox: Flox | None) -> Flox:
    return flox if flox is not None else get_flox()


def put(key: str, controller: C, *, flox: Flox | None = None) -> C:
    return _resolve(flox).put_controller(key, controller)


def find(key: str, *, flox: Flox | None = None) -> Controller:
    """Global controller under key. Raises NotFoundError."""
    return _resolve(flox).find_controller(key)


def delete(key: str, *, flox: Flox | None = None) -> bool:
    return _resolve(flox).remove_controller(key)


def put_binding(key: str, binding: B, *, flox: Flox | None = None) -> B:
    return _resolve(flox).put_binding(key, binding)


def find_binding(key: str, *, flox: Flox | None = None) -> Binding | None:
    """Binding under key, or None. Use Flox.find_binding() for the raising variant."""
    return _resolve(flox).get_binding(key)


def delete_binding(key: str, *, flox: Flox | None = None) -> bool:
    return _resolve(flox).remove_binding(key)


def is_registered(key: str, *, flox: Flox | None = None) -> bool:
    return _resolve(flox).get_controller(key) is not None


def is_binding_registered(key: str, *, flox: Flox | None = None) -> bool:
    return _resolve(flox).get_binding(key) is not None
