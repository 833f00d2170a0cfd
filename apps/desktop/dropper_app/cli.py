"""CLI entrypoints for the Dropper desktop app and headless sampling tools."""

from __future__ import annotations

import argparse
import json
import mimetypes
from dataclasses import asdict
from pathlib import Path

from dropper_core import DropperController, load_config
from dropper_core.config import config_path
from dropper_core.logging_setup import configure_logging
from dropper_imaging import PATTERN_NAMES, FitMode, Point, build_test_pattern, fit_dimensions, hex_to_rgb


def _print_json(data: object) -> None:
    print(json.dumps(data, indent=2, sort_keys=True, default=str))


def _parse_size(value: str) -> tuple[float, float]:
    try:
        w, h = value.lower().split("x", 1)
        width, height = float(w), float(h)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected WIDTHxHEIGHT, got {value!r}") from None
    if width < 0 or height < 0:
        raise argparse.ArgumentTypeError(f"size must be non-negative, got {value!r}")
    return width, height


def _padding(value: str) -> float:
    try:
        padding = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected a number, got {value!r}") from None
    if padding < 0:
        raise argparse.ArgumentTypeError(f"padding must be non-negative, got {value!r}")
    return padding


def _odd_window(value: str) -> int:
    size = int(value)
    if size < 1 or size % 2 == 0:
        raise argparse.ArgumentTypeError(f"window must be a positive odd number, got {value!r}")
    return size


def cmd_run(args: argparse.Namespace) -> int:
    from .app import run_gui

    return run_gui(image_path=args.image)


def cmd_sample(args: argparse.Namespace) -> int:
    cfg = load_config()
    if args.window is not None:
        cfg.sampling.window_size = args.window
    if args.padding is not None:
        cfg.view.padding = args.padding
    cfg.view.fit_mode = args.mode or cfg.view.fit_mode
    # One-shot sampling; nothing to rate-limit.
    cfg.sampling.throttle_ms = 0

    path = Path(args.image)
    media_type = args.media_type or mimetypes.guess_type(path.name)[0]
    controller = DropperController(config=cfg)
    try:
        controller.set_container_size(*args.container, immediate=True)
        if not controller.load(path.read_bytes(), media_type):
            _print_json({"success": False, "error": "image could not be loaded", "events": controller.recent_events()})
            return 2

        if controller.render_size is None:
            _print_json({"success": False, "error": "image does not fit the viewport", "events": controller.recent_events()})
            return 2

        sample = controller.on_pointer_move(Point(x=args.x, y=args.y))
        if sample is None:
            _print_json({"success": False, "error": "pointer outside rendered image", "render_size": controller.render_size})
            return 3

        selected = controller.commit() if args.commit else None
        _print_json(
            {
                "success": True,
                "render_size": asdict(controller.render_size) if controller.render_size else None,
                "position": asdict(sample.position),
                "center_color": sample.center_color,
                "center_rgb": list(hex_to_rgb(sample.center_color)),
                "matrix": [list(row) for row in sample.matrix],
                "selected_color": selected,
            }
        )
        return 0
    finally:
        controller.shutdown()


def cmd_fit(args: argparse.Namespace) -> int:
    image_w, image_h = args.image_size
    container_w, container_h = args.container
    try:
        dims = fit_dimensions(image_w, image_h, container_w, container_h, padding=args.padding, mode=FitMode(args.mode))
    except ValueError as exc:
        _print_json({"success": False, "error": str(exc)})
        return 2
    _print_json(asdict(dims))
    return 0


def cmd_pattern(args: argparse.Namespace) -> int:
    width, height = args.size
    image = build_test_pattern(args.name, width=int(width), height=int(height))
    out = Path(args.out)
    out.parent.mkdir(parents=True, exist_ok=True)
    image.save(out)
    _print_json({"path": str(out), "pattern": args.name, "size": list(image.size)})
    return 0


def cmd_config(args: argparse.Namespace) -> int:
    if args.config_cmd == "path":
        _print_json({"path": str(config_path())})
    else:
        _print_json(asdict(load_config()))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="dropper", description="Dropper image color picker and tools")
    sub = parser.add_subparsers(dest="command", required=True)

    run_cmd = sub.add_parser("run", help="Run desktop app")
    run_cmd.add_argument("--image", default=None, help="Optional image to open on start")
    run_cmd.set_defaults(func=cmd_run)

    sample_cmd = sub.add_parser("sample", help="Sample the color neighborhood at a point of a rendered image")
    sample_cmd.add_argument("--image", required=True, help="Path to the image file")
    sample_cmd.add_argument("--x", type=float, required=True, help="Pointer x in rendered-surface pixels")
    sample_cmd.add_argument("--y", type=float, required=True, help="Pointer y in rendered-surface pixels")
    sample_cmd.add_argument("--container", type=_parse_size, default=(800.0, 600.0), help="Viewport size, e.g. 800x600")
    sample_cmd.add_argument("--mode", choices=[m.value for m in FitMode], default=None)
    sample_cmd.add_argument("--padding", type=_padding, default=None)
    sample_cmd.add_argument("--window", type=_odd_window, default=None, help="Magnifier side length (odd)")
    sample_cmd.add_argument("--media-type", default=None, help="Override the media type guessed from the file name")
    sample_cmd.add_argument("--commit", action="store_true", help="Also commit the center color as the selection")
    sample_cmd.set_defaults(func=cmd_sample)

    fit_cmd = sub.add_parser("fit", help="Compute render dimensions for an image inside a viewport")
    fit_cmd.add_argument("--image-size", type=_parse_size, required=True)
    fit_cmd.add_argument("--container", type=_parse_size, required=True)
    fit_cmd.add_argument("--padding", type=_padding, default=0.0)
    fit_cmd.add_argument("--mode", choices=[m.value for m in FitMode], default=FitMode.CONTAINED.value)
    fit_cmd.set_defaults(func=cmd_fit)

    pat_cmd = sub.add_parser("pattern", help="Write a deterministic test image")
    pat_cmd.add_argument("--name", default="quadrants", choices=list(PATTERN_NAMES))
    pat_cmd.add_argument("--size", type=_parse_size, default=(64.0, 64.0))
    pat_cmd.add_argument("--out", required=True, help="Output image path (format from extension)")
    pat_cmd.set_defaults(func=cmd_pattern)

    config_cmd = sub.add_parser("config", help="Inspect persisted settings")
    config_sub = config_cmd.add_subparsers(dest="config_cmd", required=True)
    config_sub.add_parser("show", help="Print effective settings")
    config_sub.add_parser("path", help="Print settings file location")
    config_cmd.set_defaults(func=cmd_config)

    return parser


def main(argv: list[str] | None = None) -> int:
    configure_logging(console=False)
    parser = build_parser()
    args = parser.parse_args(argv)
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
