"""Desktop app runtime, view-model, and QML integration."""

from __future__ import annotations

import base64
import json
import os
import sys
from io import BytesIO
from pathlib import Path
from typing import Callable

from PySide6.QtCore import QMimeDatabase, QObject, Property, Qt, QTimer, QUrl, Signal, Slot
from PySide6.QtQml import QQmlApplicationEngine
from PySide6.QtWidgets import QApplication

from dropper_core import AppConfig, DropperController, DropperMode, LoadTicket, load_config, save_config
from dropper_core.logging_setup import configure_logging, get_logger, install_crash_hooks
from dropper_imaging import FitMode, Point, center_index, hex_to_rgb, relative_luminance

FALLBACK_COLOR_HEX = "#000000"
FALLBACK_COLOR_LABEL = "None"


class _QtTimerHandle:
    def __init__(self, timer: QTimer) -> None:
        self._timer = timer

    def cancel(self) -> None:
        self._timer.stop()
        self._timer.deleteLater()


class QtTimerFactory:
    """Single-shot ``QTimer``s for the debouncer, parented so Qt owns their lifetime."""

    def __init__(self, parent: QObject) -> None:
        self._parent = parent

    def __call__(self, delay_s: float, callback: Callable[[], None]) -> _QtTimerHandle:
        timer = QTimer(self._parent)
        timer.setSingleShot(True)

        def _fire() -> None:
            timer.deleteLater()
            callback()

        timer.timeout.connect(_fire)
        timer.start(int(delay_s * 1000))
        return _QtTimerHandle(timer)


def _readable_text_color(hex_color: str) -> str:
    return "#000000" if relative_luminance(hex_to_rgb(hex_color)) > 0.5 else "#ffffff"


def _local_path(value: str) -> Path:
    url = QUrl(value)
    if url.isLocalFile():
        return Path(url.toLocalFile())
    return Path(value)


class DropperViewModel(QObject):
    previewUrlChanged = Signal()
    frameSizeChanged = Signal()
    magnifierChanged = Signal()
    selectedColorChanged = Signal()
    dropperOnChanged = Signal()
    fitModeLabelChanged = Signal()
    statusTextChanged = Signal()

    _controllerChanged = Signal(str)

    def __init__(self, config: AppConfig, timer_parent: QObject) -> None:
        super().__init__()
        self.config = config
        self.logger = get_logger("app")
        self.controller = DropperController(config=config, timer_factory=QtTimerFactory(timer_parent))

        self._preview_url = ""
        self._status_text = ""

        # Queued when a listener fires off the GUI thread.
        self._controllerChanged.connect(self._on_controller_change)
        self.controller.add_listener(self._controllerChanged.emit)

    @Property(str, notify=previewUrlChanged)
    def previewUrl(self) -> str:
        return self._preview_url

    @Property(int, notify=frameSizeChanged)
    def frameWidth(self) -> int:
        return self.controller.surface.width

    @Property(int, notify=frameSizeChanged)
    def frameHeight(self) -> int:
        return self.controller.surface.height

    @Property(bool, notify=magnifierChanged)
    def magnifierVisible(self) -> bool:
        return self.controller.magnifier is not None and self.controller.dropper_mode is DropperMode.ON

    @Property(str, notify=magnifierChanged)
    def magnifierJson(self) -> str:
        sample = self.controller.magnifier
        if sample is None:
            return "[]"
        return json.dumps([color for row in sample.matrix for color in row])

    @Property(int, notify=magnifierChanged)
    def magnifierSize(self) -> int:
        return self.config.sampling.window_size

    @Property(int, notify=magnifierChanged)
    def magnifierCenter(self) -> int:
        return center_index(self.config.sampling.window_size)

    @Property(int, constant=True)
    def magnifierCellPx(self) -> int:
        return self.config.ui.magnifier_cell_px

    @Property(float, notify=magnifierChanged)
    def magnifierX(self) -> float:
        sample = self.controller.magnifier
        return 0.0 if sample is None else float(sample.position.x)

    @Property(float, notify=magnifierChanged)
    def magnifierY(self) -> float:
        sample = self.controller.magnifier
        return 0.0 if sample is None else float(sample.position.y)

    @Property(str, notify=magnifierChanged)
    def centerColor(self) -> str:
        sample = self.controller.magnifier
        return FALLBACK_COLOR_HEX if sample is None else sample.center_color

    @Property(str, notify=magnifierChanged)
    def centerTextColor(self) -> str:
        sample = self.controller.magnifier
        return "#ffffff" if sample is None else _readable_text_color(sample.center_color)

    @Property(str, notify=selectedColorChanged)
    def selectedColor(self) -> str:
        return self.controller.selected_color or FALLBACK_COLOR_HEX

    @Property(str, notify=selectedColorChanged)
    def selectedLabel(self) -> str:
        return self.controller.selected_color or FALLBACK_COLOR_LABEL

    @Property(bool, notify=dropperOnChanged)
    def dropperOn(self) -> bool:
        return self.controller.dropper_mode is DropperMode.ON

    @Property(str, notify=fitModeLabelChanged)
    def fitModeLabel(self) -> str:
        if self.controller.fit_mode is FitMode.CONTAINED:
            return "Use original size"
        return "Contain image in viewport"

    @Property(str, notify=statusTextChanged)
    def statusText(self) -> str:
        return self._status_text

    def _set_status(self, text: str) -> None:
        if text != self._status_text:
            self._status_text = text
            self.statusTextChanged.emit()

    def _refresh_preview(self) -> None:
        surface = self.controller.surface
        if surface.has_frame:
            buf = BytesIO()
            surface.to_image().save(buf, format="PNG")
            b64 = base64.b64encode(buf.getvalue()).decode("ascii")
            preview = f"data:image/png;base64,{b64}"
        else:
            preview = ""
        if preview != self._preview_url:
            self._preview_url = preview
            self.previewUrlChanged.emit()
        self.frameSizeChanged.emit()

    def _on_controller_change(self, change: str) -> None:
        if change in ("image", "render"):
            self._refresh_preview()
            self.magnifierChanged.emit()
        elif change == "magnifier":
            self.magnifierChanged.emit()
        elif change == "selected_color":
            self.selectedColorChanged.emit()
        elif change == "dropper_mode":
            self.dropperOnChanged.emit()
            self.magnifierChanged.emit()
        elif change == "fit_mode":
            self.fitModeLabelChanged.emit()

    @Slot(str)
    def openImage(self, value: str) -> None:
        if value:
            self.load_path(_local_path(value))

    def load_path(self, path: Path) -> None:
        media_type = QMimeDatabase().mimeTypeForFile(str(path)).name()
        ticket = self.controller.request_load(media_type)
        if ticket is None:
            self._set_status("Unsupported file type. Please upload an image.")
            return
        try:
            data = path.read_bytes()
        except OSError as exc:
            self.logger.error(f"There was an error reading the file: {exc}", extra={"event": "read_failed"})
            self._set_status("There was an error reading the file.")
            return

        # Decode on a later event-loop turn; a newer selection makes this ticket stale.
        QTimer.singleShot(0, lambda: self._finish_load(ticket, data))

    def _finish_load(self, ticket: LoadTicket, data: bytes) -> None:
        if self.controller.complete_load(ticket, data):
            self._set_status("")
        elif self.controller.loader.is_current(ticket):
            self._set_status("Cannot load image.")

    @Slot(float, float)
    def setViewportSize(self, width: float, height: float) -> None:
        self.controller.set_container_size(width, height)

    @Slot(float, float)
    def pointerMoved(self, x: float, y: float) -> None:
        self.controller.on_pointer_move(Point(x=x, y=y))

    @Slot()
    def pointerLeft(self) -> None:
        self.controller.on_pointer_leave()

    @Slot()
    def commitColor(self) -> None:
        self.controller.commit()

    @Slot()
    def toggleDropper(self) -> None:
        self.controller.toggle_dropper()

    @Slot()
    def toggleFitMode(self) -> None:
        self.controller.toggle_fit_mode()

    def shutdown(self) -> None:
        self.controller.shutdown()
        self.config.view.fit_mode = self.controller.fit_mode.value
        self.config.ui.start_with_dropper = self.controller.dropper_mode is DropperMode.ON
        save_config(self.config)


def run_gui(image_path: str | None = None) -> int:
    cfg = load_config()
    configure_logging(keep_files=cfg.diagnostics.keep_log_files)
    install_crash_hooks()
    logger = get_logger()

    os.environ.setdefault("QT_ENABLE_HIGHDPI_SCALING", "1")
    QApplication.setHighDpiScaleFactorRoundingPolicy(Qt.HighDpiScaleFactorRoundingPolicy.PassThrough)

    app = QApplication(sys.argv)
    app.setApplicationName("Dropper")

    vm = DropperViewModel(cfg, timer_parent=app)

    engine = QQmlApplicationEngine()
    engine.rootContext().setContextProperty("vm", vm)
    qml_path = Path(__file__).with_name("qml") / "Main.qml"
    engine.load(str(qml_path))

    if not engine.rootObjects():
        logger.error("failed to load QML")
        return 1

    if image_path:
        vm.load_path(Path(image_path))

    exit_code = app.exec()
    vm.shutdown()
    logger.info("app shutdown", extra={"event": "shutdown"})
    return int(exit_code)
