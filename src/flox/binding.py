"""Binding — a scoped container of Controllers with per-key lifecycle policy.

Each key holds exactly one slot tagged with a Lifecycle:

- NORMAL: stored as given, initialized by initialize(), disposed by dispose().
- RECREATE_ON_DEMAND: one instance built at registration; every
  get_recreate_on_demand() builds a brand-new one, discarding prior state.
- PERMANENT: initialized like NORMAL but survives dispose().
- LAZY: only the factory is stored; the first get_controller() builds the
  instance and calls its on_init().

A later put_* for the same key replaces the slot. The displaced controller is
not disposed; whoever replaced it is responsible for it.

States: uninitialized -> initialized -> uninitialized. dispose() resets the
binding so that initialize() can run again.
"""

from __future__ import annotations

import enum
import logging
from abc import ABC, abstractmethod
from types import MappingProxyType
from typing import Callable, Mapping, TypeVar

from flox.controller import Controller
from flox.errors import NotFoundError, NotRecreateOnDemandError

logger = logging.getLogger(__name__)

C = TypeVar("C", bound=Controller)

Factory = Callable[[], C]


class Lifecycle(enum.Enum):
    NORMAL = "normal"
    RECREATE_ON_DEMAND = "recreate_on_demand"
    PERMANENT = "permanent"
    LAZY = "lazy"


class _Slot:
    """One key's policy plus its live controller and (lazy only) factory."""

    __slots__ = ("lifecycle", "controller", "factory")

    def __init__(
        self,
        lifecycle: Lifecycle,
        controller: Controller | None = None,
        factory: Callable[[], Controller] | None = None,
    ) -> None:
        self.lifecycle = lifecycle
        self.controller = controller
        self.factory = factory

    def copy(self) -> _Slot:
        return _Slot(self.lifecycle, self.controller, self.factory)


class Binding(ABC):
    """Base class for scoped containers.

    Subclasses implement dependencies() and call the put_* methods in it:

        class HomeBinding(Binding):
            def dependencies(self):
                self.put_controller("home", HomeController())
                self.put_recreate_on_demand("user", UserController)
                self.put_permanent("app", AppController())
                self.put_lazy("settings", SettingsController)
    """

    def __init__(self) -> None:
        self._slots: dict[str, _Slot] = {}
        self._initialized = False
        # on_init() calls made by an in-flight initialize(), lazy ones included
        self._started: list[Controller] | None = None

    @abstractmethod
    def dependencies(self) -> None:
        """Register this binding's controllers via the put_* methods."""

    # --- Registration ---

    def _install(self, key: str, slot: _Slot) -> None:
        previous = self._slots.get(key)
        if previous is not None and previous.controller is not None:
            logger.warning("Controller with key %r already exists, overriding", key)
        self._slots[key] = slot

    def put_controller(self, key: str, controller: C) -> C:
        """Store controller under key with the normal lifecycle."""
        self._install(key, _Slot(Lifecycle.NORMAL, controller))
        return controller

    def put_recreate_on_demand(self, key: str, factory: Factory[C]) -> None:
        """Flag key recreate-on-demand and build its first instance now.

        The instance's on_init() only runs as part of initialize(); if the
        binding is already initialized it does not run at all.
        """
        self._install(key, _Slot(Lifecycle.RECREATE_ON_DEMAND, factory()))

    def put_permanent(self, key: str, controller: C) -> C:
        """Store controller under key; dispose() will leave it alive."""
        self._install(key, _Slot(Lifecycle.PERMANENT, controller))
        return controller

    def put_lazy(self, key: str, factory: Factory[C]) -> None:
        """Store only the factory; the controller is built on first access."""
        self._install(key, _Slot(Lifecycle.LAZY, factory=factory))

    # --- Lookup ---

    def get_controller(self, key: str) -> Controller | None:
        """Return the live controller for key, building a lazy one if needed.

        A lazily built controller gets its on_init() here, outside the
        initialize() ordering. Unknown keys return None.
        """
        slot = self._slots.get(key)
        if slot is None:
            return None
        if slot.controller is None and slot.factory is not None:
            controller = slot.factory()
            slot.controller = controller
            controller.on_init()
            if self._started is not None:
                self._started.append(controller)
        return slot.controller

    def find_controller(self, key: str) -> Controller:
        """As get_controller(), but raises NotFoundError for unknown keys."""
        controller = self.get_controller(key)
        if controller is None:
            raise NotFoundError("controller", key)
        return controller

    def has_controller(self, key: str) -> bool:
        """Whether key is registered under any policy (lazy included)."""
        return key in self._slots

    def lifecycle_of(self, key: str) -> Lifecycle | None:
        slot = self._slots.get(key)
        return slot.lifecycle if slot is not None else None

    def remove_controller(self, key: str) -> bool:
        """Dispose and remove the controller under key.

        Returns False for permanent keys, unknown keys and lazy keys that
        were never accessed; all three are left untouched.
        """
        slot = self._slots.get(key)
        if slot is None or slot.controller is None or slot.lifecycle is Lifecycle.PERMANENT:
            return False
        slot.controller.on_dispose()
        del self._slots[key]
        return True

    def get_recreate_on_demand(self, key: str, factory: Factory[C]) -> C:
        """Build a fresh instance for a recreate-on-demand key and store it.

        The previous instance is replaced without being disposed.
        Raises NotRecreateOnDemandError for keys registered otherwise.
        """
        slot = self._slots.get(key)
        if slot is None or slot.lifecycle is not Lifecycle.RECREATE_ON_DEMAND:
            raise NotRecreateOnDemandError(key)
        controller = factory()
        slot.controller = controller
        return controller

    # --- Lifecycle ---

    def initialize(self) -> None:
        """Run dependencies(), then on_init() every live non-lazy controller in order.

        No-op when already initialized. Lazy controllers are skipped; they
        initialize on first access, possibly from inside dependencies().

        If dependencies() or any on_init() raises, every controller whose
        on_init() ran during this call is disposed and dropped. All other
        slots are restored to their state before the call, and the error
        propagates.
        """
        if self._initialized:
            return

        snapshot = {key: slot.copy() for key, slot in self._slots.items()}
        self._started = started = []
        try:
            self.dependencies()
            for slot in list(self._slots.values()):
                if slot.controller is not None and slot.lifecycle is not Lifecycle.LAZY:
                    slot.controller.on_init()
                    started.append(slot.controller)
        except Exception:
            for controller in reversed(started):
                controller.on_dispose()
            disposed = {id(controller) for controller in started}
            self._slots = {
                key: slot
                for key, slot in snapshot.items()
                if slot.controller is None or id(slot.controller) not in disposed
            }
            raise
        finally:
            self._started = None

        self._initialized = True
        logger.debug("%s initialized with %d slots", type(self).__name__, len(self._slots))

    def dispose(self) -> None:
        """on_dispose() every non-permanent controller, then clear everything."""
        # on_dispose() may remove siblings; those are already disposed
        for key, slot in list(self._slots.items()):
            if self._slots.get(key) is not slot:
                continue
            if slot.controller is not None and slot.lifecycle is not Lifecycle.PERMANENT:
                slot.controller.on_dispose()
        self._slots.clear()
        self._initialized = False
        logger.debug("%s disposed", type(self).__name__)

    def teardown(self) -> None:
        """dispose(), then also on_dispose() the permanent controllers.

        Used when the binding itself is being discarded.
        """
        permanent = [
            slot.controller
            for slot in self._slots.values()
            if slot.lifecycle is Lifecycle.PERMANENT and slot.controller is not None
        ]
        self.dispose()
        for controller in permanent:
            controller.on_dispose()

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    @property
    def controllers(self) -> Mapping[str, Controller]:
        """Read-only snapshot of the live controllers by key."""
        return MappingProxyType(
            {key: slot.controller for key, slot in self._slots.items() if slot.controller is not None}
        )

    def __repr__(self) -> str:
        state = "initialized" if self._initialized else "uninitialized"
        return f"{type(self).__name__}({len(self._slots)} slots, {state})"
