"""Flox — the process registry of Bindings and global Controllers.

Registering under a key that is already taken disposes the previous
occupant first, so no two live occupants ever share a key.

Flox is an ordinary class: construct one and pass it where it is needed.
The process-wide default is managed explicitly:

    flox = init_flox()      # install a fresh default registry
    get_flox()              # the default (built lazily if init_flox() never ran)
    shutdown_flox()         # dispose it; the next get_flox() builds a new one
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Mapping, TypeVar

from flox.binding import Binding
from flox.controller import Controller
from flox.errors import NotFoundError

logger = logging.getLogger(__name__)

B = TypeVar("B", bound=Binding)
C = TypeVar("C", bound=Controller)


class Flox:
    """Owns the active Bindings and a pool of ungrouped global Controllers."""

    def __init__(self) -> None:
        self._bindings: dict[str, Binding] = {}
        self._controllers: dict[str, Controller] = {}

    # --- Bindings ---

    def put_binding(self, key: str, binding: B) -> B:
        """Initialize binding and store it under key.

        A binding already under key is torn down first, permanent
        controllers included. If initialize() raises, nothing is stored.
        """
        previous = self._bindings.pop(key, None)
        if previous is not None:
            logger.warning("Binding with key %r already exists, overriding", key)
            previous.teardown()

        binding.initialize()
        self._bindings[key] = binding
        return binding

    def get_binding(self, key: str) -> Binding | None:
        return self._bindings.get(key)

    def find_binding(self, key: str) -> Binding:
        binding = self._bindings.get(key)
        if binding is None:
            raise NotFoundError("binding", key)
        return binding

    def remove_binding(self, key: str) -> bool:
        """Dispose the binding under key and forget it. False if absent."""
        binding = self._bindings.get(key)
        if binding is None:
            return False
        binding.dispose()
        del self._bindings[key]
        return True

    # --- Global controllers ---

    def put_controller(self, key: str, controller: C) -> C:
        """Store controller under key and call its on_init() immediately.

        A controller already under key is disposed first.
        """
        previous = self._controllers.get(key)
        if previous is not None:
            logger.warning("Global controller with key %r already exists, overriding", key)
            previous.on_dispose()

        self._controllers[key] = controller
        controller.on_init()
        return controller

    def get_controller(self, key: str) -> Controller | None:
        return self._controllers.get(key)

    def find_controller(self, key: str) -> Controller:
        controller = self._controllers.get(key)
        if controller is None:
            raise NotFoundError("global controller", key)
        return controller

    def remove_controller(self, key: str) -> bool:
        """Dispose the global controller under key and forget it. False if absent."""
        controller = self._controllers.get(key)
        if controller is None:
            return False
        controller.on_dispose()
        del self._controllers[key]
        return True

    # --- Teardown ---

    def dispose(self) -> None:
        """Dispose every binding, then every global controller."""
        # dispose hooks may remove siblings; those are already disposed
        for key, binding in list(self._bindings.items()):
            if self._bindings.get(key) is binding:
                binding.dispose()
        self._bindings.clear()

        for key, controller in list(self._controllers.items()):
            if self._controllers.get(key) is controller:
                controller.on_dispose()
        self._controllers.clear()

    @property
    def bindings(self) -> Mapping[str, Binding]:
        return MappingProxyType(self._bindings)

    @property
    def controllers(self) -> Mapping[str, Controller]:
        return MappingProxyType(self._controllers)

    def __repr__(self) -> str:
        return f"Flox({len(self._bindings)} bindings, {len(self._controllers)} controllers)"


# ─── Process-wide default ────────────────────────────────────────────────────
_default: Flox | None = None


def get_flox() -> Flox:
    """Return the process-wide registry, building it on first access."""
    global _default
    if _default is None:
        _default = Flox()
    return _default


def init_flox() -> Flox:
    """Install a fresh process-wide registry, shutting down the previous one."""
    global _default
    shutdown_flox()
    _default = Flox()
    return _default


def shutdown_flox() -> None:
    """Dispose the process-wide registry, if any, and drop it."""
    global _default
    if _default is None:
        return
    flox, _default = _default, None
    flox.dispose()
    logger.debug("Process registry shut down")
