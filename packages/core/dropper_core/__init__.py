"""Core app services: settings, logging, rate limiting, loading and pointer tracking."""

from .config import AppConfig, load_config, save_config
from .controller import DropperController, DropperMode
from .loader import ImageLoader, LoadTicket
from .rate_limit import Debouncer, Throttle, threading_timer_factory
from .tracker import PointerColorTracker, TrackerState

__all__ = [
    "AppConfig",
    "Debouncer",
    "DropperController",
    "DropperMode",
    "ImageLoader",
    "LoadTicket",
    "PointerColorTracker",
    "Throttle",
    "TrackerState",
    "load_config",
    "save_config",
    "threading_timer_factory",
]
