"""Host-facing coordinator: image loading, fitting, dropper state and selection."""

from __future__ import annotations

import threading
import time
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable

from dropper_imaging import (
    DecodeFailureError,
    Dimensions,
    FitMode,
    GeometryError,
    HexColor,
    ImageSurface,
    PixelBuffer,
    Point,
    PointerSample,
    decode_image,
    fit_dimensions,
    is_image_media_type,
)

from .config import AppConfig
from .loader import ImageLoader, LoadTicket
from .logging_setup import get_logger
from .rate_limit import Debouncer, Throttle, TimerFactory, threading_timer_factory
from .tracker import PointerColorTracker, TrackerState


class DropperMode(str, Enum):
    OFF = "off"
    ON = "on"


Listener = Callable[[str], None]


class DropperController:
    """Owns the state the UI renders: selected color, magnifier grid and modes.

    Listeners receive one of ``"image"``, ``"render"``, ``"magnifier"``,
    ``"selected_color"``, ``"fit_mode"`` or ``"dropper_mode"`` after the
    corresponding state changed.

    Selection uses click-commit: hovering only refreshes the magnifier, and
    ``commit()`` promotes the center color of the magnifier on screen.

    State changes run under one re-entrant lock, so a debounced refit fired
    from a timer thread never lands in the middle of a pointer sample.
    """

    def __init__(
        self,
        config: AppConfig | None = None,
        surface: ImageSurface | None = None,
        decoder: Callable[[bytes], PixelBuffer] = decode_image,
        timer_factory: TimerFactory = threading_timer_factory,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.config = config or AppConfig()
        self.surface = surface or ImageSurface()
        self.loader = ImageLoader()
        self.tracker = PointerColorTracker(
            window_size=self.config.sampling.window_size,
            throttle=Throttle(self.config.sampling.throttle_ms / 1000.0, clock=clock),
        )
        self._decoder = decoder
        self._resize = Debouncer(self.config.view.resize_debounce_ms / 1000.0, self.refit, timer_factory)

        self._fit_mode = FitMode(self.config.view.fit_mode)
        self._dropper_mode = DropperMode.ON if self.config.ui.start_with_dropper else DropperMode.OFF
        self._image: PixelBuffer | None = None
        self._container = Dimensions(width=0, height=0)
        self._render_size: Dimensions | None = None
        self._selected_color: HexColor | None = None
        self._magnifier: PointerSample | None = None

        self._listeners: list[Listener] = []
        self._events: list[dict[str, Any]] = []
        self._lock = threading.RLock()
        self._logger = get_logger("controller")

    @property
    def image(self) -> PixelBuffer | None:
        return self._image

    @property
    def state(self) -> TrackerState:
        return self.tracker.state

    @property
    def fit_mode(self) -> FitMode:
        return self._fit_mode

    @property
    def dropper_mode(self) -> DropperMode:
        return self._dropper_mode

    @property
    def container(self) -> Dimensions:
        return self._container

    @property
    def render_size(self) -> Dimensions | None:
        return self._render_size

    @property
    def selected_color(self) -> HexColor | None:
        return self._selected_color

    @property
    def magnifier(self) -> PointerSample | None:
        return self._magnifier

    @property
    def resize_pending(self) -> bool:
        return self._resize.pending

    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self, change: str) -> None:
        for listener in list(self._listeners):
            listener(change)

    def recent_events(self, limit: int = 200) -> list[dict[str, Any]]:
        with self._lock:
            return self._events[-limit:]

    def _log_event(self, event: str, **fields: Any) -> None:
        row = {
            "ts_utc": datetime.now(timezone.utc).isoformat(),
            "event": event,
            "state": self.tracker.state.value,
        }
        row.update(fields)
        with self._lock:
            self._events.append(row)
            if len(self._events) > 1000:
                self._events = self._events[-1000:]

    # Image input

    def request_load(self, media_type: str | None) -> LoadTicket | None:
        if not is_image_media_type(media_type):
            self._logger.warning(
                "Unsupported file type. Please upload an image.",
                extra={"event": "load_rejected", "media_type": media_type},
            )
            self._log_event("load_rejected", media_type=media_type)
            return None
        ticket = self.loader.begin(media_type or "")
        self._log_event("load_start", generation=ticket.generation, media_type=ticket.media_type)
        return ticket

    def complete_load(self, ticket: LoadTicket, data: bytes) -> bool:
        """Decode ``data`` and make it the current image if ``ticket`` is still current."""
        if not self.loader.is_current(ticket):
            self._logger.info("stale image load ignored", extra={"event": "load_stale", "generation": ticket.generation})
            self._log_event("load_stale", generation=ticket.generation)
            return False

        try:
            buffer = self._decoder(data)
            if buffer.width == 0 or buffer.height == 0:
                raise DecodeFailureError("Cannot load image: unable to determine image dimensions")
        except DecodeFailureError as exc:
            self._logger.warning(str(exc), extra={"event": "load_failed", "generation": ticket.generation})
            self._log_event("load_failed", generation=ticket.generation, error=str(exc))
            return False

        with self._lock:
            # A newer request may have started while this one was decoding.
            if not self.loader.is_current(ticket):
                self._log_event("load_stale", generation=ticket.generation)
                return False
            self._image = buffer
            self._magnifier = None
            self._render_size = None
            self.surface.clear()
            self.tracker.detach()
            self._log_event("load_ok", generation=ticket.generation, width=buffer.width, height=buffer.height)
            self._notify("image")
            self.refit()
        return True

    def load(self, data: bytes, media_type: str | None) -> bool:
        ticket = self.request_load(media_type)
        if ticket is None:
            return False
        return self.complete_load(ticket, data)

    # Geometry

    def set_container_size(self, width: float, height: float, immediate: bool = False) -> None:
        with self._lock:
            self._container = Dimensions(width=max(0.0, float(width)), height=max(0.0, float(height)))
            if self._image is None:
                return
            if immediate:
                self._resize.cancel()
                self.refit()
            else:
                self._resize.trigger()

    def refit(self) -> Dimensions | None:
        with self._lock:
            image = self._image
            if image is None:
                return None
            try:
                size = fit_dimensions(
                    image.width,
                    image.height,
                    self._container.width,
                    self._container.height,
                    padding=self.config.view.padding,
                    mode=self._fit_mode,
                )
            except ValueError as exc:
                self._logger.warning(f"fit skipped: {exc}", extra={"event": "fit_failed"})
                self._log_event("fit_failed", error=str(exc))
                return None

            self.surface.draw(image, size.width, size.height)
            self._render_size = size
            if self.surface.has_frame:
                self.tracker.attach(self.surface)
            else:
                self.tracker.detach()
            self._magnifier = None
            self._log_event("render", width=size.width, height=size.height, mode=self._fit_mode.value)
            self._notify("render")
            return size

    def set_fit_mode(self, mode: FitMode | str) -> None:
        mode = FitMode(mode)
        with self._lock:
            if mode is self._fit_mode:
                return
            self._fit_mode = mode
            self._log_event("fit_mode", mode=mode.value)
            self._notify("fit_mode")
            self.refit()

    def toggle_fit_mode(self) -> FitMode:
        with self._lock:
            self.set_fit_mode(FitMode.NATURAL if self._fit_mode is FitMode.CONTAINED else FitMode.CONTAINED)
            return self._fit_mode

    # Dropper

    def set_dropper_mode(self, mode: DropperMode | str) -> None:
        mode = DropperMode(mode)
        with self._lock:
            if mode is self._dropper_mode:
                return
            self._dropper_mode = mode
            self.tracker.throttle.cancel()
            self._log_event("dropper_mode", mode=mode.value)
            self._notify("dropper_mode")
            if mode is DropperMode.OFF and self._magnifier is not None:
                self._magnifier = None
                self._notify("magnifier")

    def toggle_dropper(self) -> DropperMode:
        with self._lock:
            self.set_dropper_mode(DropperMode.OFF if self._dropper_mode is DropperMode.ON else DropperMode.ON)
            return self._dropper_mode

    def on_pointer_move(self, position: Point | None) -> PointerSample | None:
        with self._lock:
            sample = self.tracker.handle_move(position, active=self._dropper_mode is DropperMode.ON)
            if sample is None:
                return None
            self._magnifier = sample
            self._notify("magnifier")
            return sample

    def on_pointer_leave(self) -> None:
        with self._lock:
            if self._magnifier is not None:
                self._magnifier = None
                self._notify("magnifier")

    def commit(self) -> HexColor | None:
        """Promote the center color of the magnifier currently on screen."""
        with self._lock:
            if self._dropper_mode is not DropperMode.ON:
                return None
            sample = self._magnifier
            if sample is None:
                return None
            self._selected_color = sample.center_color
            self._log_event("commit", color=sample.center_color, x=sample.position.x, y=sample.position.y)
            self._notify("selected_color")
            return self._selected_color

    def shutdown(self) -> None:
        with self._lock:
            self._resize.cancel()
            self.tracker.throttle.cancel()
            self.loader.invalidate()
            self._log_event("shutdown")
