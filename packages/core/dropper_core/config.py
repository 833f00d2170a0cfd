"""Persistent app settings schema and load/save helpers."""

from __future__ import annotations

import json
import os
import platform
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any


CONFIG_VERSION = 2


@dataclass
class SamplingConfig:
    window_size: int = 17
    throttle_ms: int = 200


@dataclass
class ViewConfig:
    fit_mode: str = "contained"
    padding: float = 20.0
    resize_debounce_ms: int = 200


@dataclass
class UiConfig:
    magnifier_cell_px: int = 10
    start_with_dropper: bool = True


@dataclass
class DiagnosticsConfig:
    keep_log_files: int = 7


@dataclass
class AppConfig:
    config_version: int = CONFIG_VERSION
    sampling: SamplingConfig = field(default_factory=SamplingConfig)
    view: ViewConfig = field(default_factory=ViewConfig)
    ui: UiConfig = field(default_factory=UiConfig)
    diagnostics: DiagnosticsConfig = field(default_factory=DiagnosticsConfig)


def config_root() -> Path:
    system = platform.system()
    if system == "Windows":
        base = Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming"))
        return base / "Dropper"
    if system == "Darwin":
        return Path.home() / "Library" / "Application Support" / "Dropper"
    return Path.home() / ".config" / "dropper"


def config_path() -> Path:
    return config_root() / "config.json"


def _merge(dataclass_type, raw: dict[str, Any]):
    defaults = dataclass_type()  # type: ignore[misc]
    for k, v in (raw or {}).items():
        if hasattr(defaults, k):
            setattr(defaults, k, v)
    return defaults


def _normalize_sampling(cfg: AppConfig) -> None:
    size = max(1, min(63, int(cfg.sampling.window_size)))
    # Magnifier needs a single center cell.
    if size % 2 == 0:
        size -= 1
    cfg.sampling.window_size = size
    cfg.sampling.throttle_ms = max(0, min(2000, int(cfg.sampling.throttle_ms)))


def _normalize_view(cfg: AppConfig) -> None:
    if cfg.view.fit_mode not in ("contained", "natural"):
        cfg.view.fit_mode = "contained"
    cfg.view.padding = float(max(0.0, float(cfg.view.padding)))
    cfg.view.resize_debounce_ms = max(0, min(2000, int(cfg.view.resize_debounce_ms)))


def _normalize_ui(cfg: AppConfig) -> None:
    cfg.ui.magnifier_cell_px = max(4, min(32, int(cfg.ui.magnifier_cell_px)))
    cfg.ui.start_with_dropper = bool(cfg.ui.start_with_dropper)


def _migrate(raw: dict[str, Any]) -> dict[str, Any]:
    version = int(raw.get("config_version", 1))
    data = dict(raw)

    if version < 2:
        # v1 kept the magnifier side length under ui.matrix_side.
        ui = dict(data.get("ui", {}) or {})
        sampling = dict(data.get("sampling", {}) or {})
        if "matrix_side" in ui:
            sampling.setdefault("window_size", ui.pop("matrix_side"))
        data["ui"] = ui
        data["sampling"] = sampling
        data["config_version"] = 2

    return data


def load_config(path: Path | None = None) -> AppConfig:
    path = path or config_path()
    if not path.exists():
        return AppConfig()

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return AppConfig()
    if not isinstance(raw, dict):
        return AppConfig()

    data = _migrate(raw)
    cfg = AppConfig(
        config_version=int(data.get("config_version", CONFIG_VERSION)),
        sampling=_merge(SamplingConfig, data.get("sampling", {})),
        view=_merge(ViewConfig, data.get("view", {})),
        ui=_merge(UiConfig, data.get("ui", {})),
        diagnostics=_merge(DiagnosticsConfig, data.get("diagnostics", {})),
    )

    _normalize_sampling(cfg)
    _normalize_view(cfg)
    _normalize_ui(cfg)
    return cfg


def save_config(cfg: AppConfig, path: Path | None = None) -> Path:
    cfg.config_version = CONFIG_VERSION
    path = path or config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(asdict(cfg), indent=2, sort_keys=True), encoding="utf-8")
    return path
