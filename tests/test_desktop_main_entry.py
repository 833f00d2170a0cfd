from __future__ import annotations

import runpy
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT / "apps" / "desktop"))
sys.path.insert(0, str(ROOT / "packages" / "core"))
sys.path.insert(0, str(ROOT / "packages" / "imaging"))

import dropper_app.__main__ as desktop_main


def test_main_defaults_to_run(monkeypatch) -> None:
    calls: list[list[str]] = []
    monkeypatch.setattr(desktop_main, "_cli_main", lambda argv=None: calls.append(list(argv or [])) or 0)

    rc = desktop_main.main([])
    assert rc == 0
    assert calls == [["run"]]


def test_main_passes_through_args(monkeypatch) -> None:
    calls: list[list[str]] = []
    monkeypatch.setattr(desktop_main, "_cli_main", lambda argv=None: calls.append(list(argv or [])) or 0)

    rc = desktop_main.main(["fit", "--image-size", "4x3", "--container", "8x8"])
    assert rc == 0
    assert calls == [["fit", "--image-size", "4x3", "--container", "8x8"]]


def test_main_module_runpath_without_package_context() -> None:
    main_path = ROOT / "apps" / "desktop" / "dropper_app" / "__main__.py"
    result = runpy.run_path(str(main_path))
    assert "main" in result


def test_single_image_path_opens_it(monkeypatch, tmp_path) -> None:
    image = tmp_path / "photo.png"
    image.write_bytes(b"")
    calls: list[list[str]] = []
    monkeypatch.setattr(desktop_main, "_cli_main", lambda argv=None: calls.append(list(argv or [])) or 0)

    assert desktop_main.main([str(image)]) == 0
    assert calls == [["run", "--image", str(image)]]
