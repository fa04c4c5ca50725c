"""Flox: controllers, bindings and a registry for observable UI state."""

from importlib.metadata import version as _version

__version__ = _version("flox-state")

from flox.errors import FloxError, DisposedError, NotFoundError, NotRecreateOnDemandError
from flox.subject import Subject
from flox.rx import Rx, rx, rx_int, rx_string, rx_bool
from flox.controller import Controller
from flox.binding import Binding, Lifecycle
from flox.registry import Flox, get_flox, init_flox, shutdown_flox
# textual NOT auto-imported — opt-in only

__all__ = [
    "FloxError",
    "DisposedError",
    "NotFoundError",
    "NotRecreateOnDemandError",
    "Subject",
    "Rx",
    "rx",
    "rx_int",
    "rx_string",
    "rx_bool",
    "Controller",
    "Binding",
    "Lifecycle",
    "Flox",
    "get_flox",
    "init_flox",
    "shutdown_flox",
]
