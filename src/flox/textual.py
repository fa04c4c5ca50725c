"""Textual integration for Flox. Opt-in — requires textual.

Bridges Subjects, Rx variables and registry lifetimes to Textual widgets.
Nothing here disposes a Controller it did not register itself.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Any, Callable, Iterator, TypeVar

from textual.css.query import NoMatches

from flox.binding import Binding
from flox.controller import Controller
from flox.errors import NotFoundError
from flox.registry import Flox, get_flox
from flox.rx import Rx
from flox.subject import Subject, Unsubscribe

B = TypeVar("B", bound=Binding)
C = TypeVar("C", bound=Controller)

# id(app) of every app inside a pause() block; bind() effects are dropped for these.
_paused_apps: set[int] = set()


@contextmanager
def pause(app):
    """Drop bind() effects for app while widgets are being replaced.

    Notifications arriving inside the block are not replayed afterwards;
    the next Subject.next() brings bound widgets up to date.
    """
    key = id(app)
    _paused_apps.add(key)
    try:
        yield
    finally:
        _paused_apps.discard(key)


def is_safe(app) -> bool:
    """Whether bind() effects may touch app's widgets: running and not paused."""
    return app.is_running and id(app) not in _paused_apps


def bind(app, source: Subject[Any] | Rx[Any], effect: Callable[[Any], None]) -> Unsubscribe:
    """Subscribe effect to a Subject or Rx on behalf of a widget.

    The effect is skipped while the app is paused or not running, NoMatches
    from widget queries is swallowed, and notifications from a background
    thread are marshaled via call_from_thread. Call the returned function
    when the widget unmounts.
    """
    _main = threading.get_ident()

    def _guarded(value):
        if not is_safe(app):
            return
        if threading.get_ident() != _main:
            app.call_from_thread(_safe, value)
        else:
            _safe(value)

    def _safe(value):
        try:
            effect(value)
        except NoMatches:
            pass

    return source.subscribe(_guarded)


def bind_controller(app, controller: Controller, key: str, effect: Callable[[Any], None]) -> Unsubscribe:
    """bind() to the Subject a controller owns under key."""
    subject = controller.get_subject(key)
    if subject is None:
        raise NotFoundError("subject", key)
    return bind(app, subject, effect)


@contextmanager
def mounted_binding(key: str, binding: B, flox: Flox | None = None) -> Iterator[B]:
    """Register binding for the lifetime of a screen; remove it on exit."""
    registry = flox if flox is not None else get_flox()
    registry.put_binding(key, binding)
    try:
        yield binding
    finally:
        registry.remove_binding(key)


@contextmanager
def mounted_controller(key: str, controller: C, flox: Flox | None = None) -> Iterator[C]:
    """Register a global controller for the lifetime of a screen; remove it on exit."""
    registry = flox if flox is not None else get_flox()
    registry.put_controller(key, controller)
    try:
        yield controller
    finally:
        registry.remove_controller(key)
