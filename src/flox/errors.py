"""Errors raised by the core.

Only lookups via the find_* family, subscribing to a disposed Subject and
misuse of the recreate-on-demand policy raise. Everything else is either a
no-op or an override with a logged warning.
"""

from __future__ import annotations


class FloxError(Exception):
    """Base class for every error raised by flox."""


class DisposedError(FloxError):
    """Subscribing to a Subject that has already been disposed."""


class NotFoundError(FloxError, LookupError):
    """A find_* lookup resolved to nothing."""

    def __init__(self, kind: str, key: str) -> None:
        self.kind = kind
        self.key = key
        super().__init__(f"{kind} with key {key!r} not found")


class NotRecreateOnDemandError(FloxError):
    """get_recreate_on_demand() called for a key registered under another policy."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"controller with key {key!r} is not registered as recreate-on-demand")
