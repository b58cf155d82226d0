from __future__ import annotations

import sys

try:
    # Normal package import path.
    from .cli import main as _cli_main
except ImportError:
    # Script entrypoint path.
    from wfetch_app.cli import main as _cli_main

# Options the top-level parser owns; any other leading option is a logo flag.
GLOBAL_OPTIONS = ("--config", "--version", "-h", "--help")


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if not args or (args[0].startswith("-") and args[0].split("=", 1)[0] not in GLOBAL_OPTIONS):
        # `wfetch` and `wfetch --waifu ...` both mean the logo command.
        return int(_cli_main(["logo", *args]))
    return int(_cli_main(args))


if __name__ == "__main__":
    raise SystemExit(main())
