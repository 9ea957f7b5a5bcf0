"""``python -m dialface_app`` opens the preview window unless a command is given."""

from __future__ import annotations

import sys

from dialface_app.cli import main as cli_main


def main(argv: list[str] | None = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    return int(cli_main(args or ["run"]))


if __name__ == "__main__":
    raise SystemExit(main())
