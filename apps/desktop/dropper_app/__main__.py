from __future__ import annotations

import sys
from pathlib import Path

try:
    from .cli import main as _cli_main
except ImportError:
    # Frozen bundles run this file without a parent package.
    from dropper_app.cli import main as _cli_main


def _launch_args(args: list[str]) -> list[str]:
    if not args:
        return ["run"]
    # "Open with" from a file manager passes just the image path.
    if len(args) == 1 and not args[0].startswith("-") and Path(args[0]).is_file():
        return ["run", "--image", args[0]]
    return args


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    return int(_cli_main(_launch_args(list(args))))


if __name__ == "__main__":
    raise SystemExit(main())
