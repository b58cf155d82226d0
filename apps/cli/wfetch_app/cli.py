"""CLI entrypoints for logo selection, palette inspection and wallpaper thumbnails."""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import asdict
from importlib import metadata
from pathlib import Path

from wfetch_colors import PALETTE_SIZE, TERMINAL_COLOR_NAMES, WFetchError, get_palette, most_contrasting_pair
from wfetch_colors.palette import default_providers
from wfetch_core import AppConfig, LogoRequest, LogoSelector, load_config, save_config
from wfetch_core.config import config_path
from wfetch_core.logging_setup import configure_logging, get_logger, install_crash_hooks


def _print_json(data: object) -> None:
    print(json.dumps(data, indent=2, sort_keys=True, default=str))


def _installed_version() -> str:
    try:
        return metadata.version("wfetch")
    except metadata.PackageNotFoundError:
        return "0.1.0"


def _load(args: argparse.Namespace) -> AppConfig:
    return load_config(Path(args.config).expanduser() if args.config else None)


def request_from_args(args: argparse.Namespace) -> LogoRequest:
    return LogoRequest(
        hollow=args.hollow,
        smooth=args.smooth,
        filled=args.filled,
        waifu=args.waifu,
        waifu2=args.waifu2,
        wallpaper=args.wallpaper,
        wallpaper_ascii=args.wallpaper_ascii,
        image_size=args.image_size,
        ascii_size=args.ascii_size,
        extended=args.extended,
        scale=args.scale,
    )


def cmd_logo(args: argparse.Namespace) -> int:
    cfg = _load(args)
    choice = LogoSelector(cfg).select(request_from_args(args))
    _print_json(
        {
            "kind": choice.kind.value,
            "logo": choice.module(),
            "artifact": choice.source,
            "command": list(choice.command) if choice.command else None,
            "pair": [choice.pair.primary.hex, choice.pair.secondary.hex] if choice.pair else None,
        }
    )
    return 0


def cmd_palette(args: argparse.Namespace) -> int:
    cfg = _load(args)
    palette = get_palette(
        default_providers(
            cache_path=Path(cfg.palette.cache_path),
            timeout_ms=cfg.palette.query_timeout_ms,
            live_query=cfg.palette.live_query and not args.cache_only,
        )
    )
    pair = most_contrasting_pair(palette.slots)
    _print_json(
        {
            "palette": {TERMINAL_COLOR_NAMES[i]: palette[i].hex for i in range(PALETTE_SIZE)},
            "pair": {
                "colors": [pair.primary.hex, pair.secondary.hex],
                "names": list(pair.names(palette)),
                "fg": list(pair.fg_codes),
                "bg": list(pair.bg_codes),
            },
        }
    )
    return 0


def cmd_wallpaper(args: argparse.Namespace) -> int:
    cfg = _load(args)
    selector = LogoSelector(cfg)
    request = LogoRequest(wallpaper=args.path or "", image_size=args.image_size, extended=args.extended, scale=args.scale)
    resized = selector.resize_wallpaper(request, request.wallpaper or "", scale=selector.display_scale(request))
    if resized is None:
        print("wfetch: no wallpaper detected", file=sys.stderr)
        return 1
    print(resized)
    return 0


def cmd_config(args: argparse.Namespace) -> int:
    cfg = _load(args)
    if args.write:
        path = save_config(cfg, Path(args.config).expanduser() if args.config else None)
        print(path)
        return 0
    _print_json(asdict(cfg))
    return 0


def _add_logo_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--hollow", action="store_true", help="show the hollow outline logo")
    parser.add_argument("--smooth", action="store_true", help="show the smooth line logo")
    parser.add_argument("--filled", action="store_true", help="show the renderer's filled builtin logo")
    parser.add_argument("--waifu", action="store_true", help="show logo 1 recolored from the terminal palette")
    parser.add_argument("--waifu2", action="store_true", help="show logo 2 recolored from the terminal palette")
    parser.add_argument(
        "--wallpaper",
        nargs="?",
        const="",
        default=None,
        metavar="WALLPAPER",
        help="show a square section of the wallpaper (detected when no path is given)",
    )
    parser.add_argument(
        "--wallpaper-ascii",
        nargs="?",
        const="",
        default=None,
        metavar="WALLPAPER",
        help="show a square section of the wallpaper as ascii art",
    )
    parser.add_argument("--ascii-size", type=int, default=None, help="ascii width in characters")
    _add_size_flags(parser)


def _add_size_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--image-size", type=int, default=None, help="image size in pixels")
    parser.add_argument("--extended", action="store_true", help="enlarge the image to match a taller module list")
    parser.add_argument("--scale", type=float, default=None, help="display scale, instead of asking the compositor")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wfetch",
        description="Palette-aware logos and wallpaper thumbnails for fastfetch",
    )
    parser.add_argument("--config", default=None, help=f"config file (default {config_path()})")
    parser.add_argument("--version", action="version", version=f"%(prog)s {_installed_version()}")
    sub = parser.add_subparsers(dest="command", required=True)

    logo_cmd = sub.add_parser("logo", help="Pick and render the logo, print the fastfetch logo config")
    _add_logo_flags(logo_cmd)
    logo_cmd.set_defaults(func=cmd_logo)

    palette_cmd = sub.add_parser("palette", help="Print the terminal palette and the chosen color pair")
    palette_cmd.add_argument("--cache-only", action="store_true", help="do not query the terminal")
    palette_cmd.set_defaults(func=cmd_palette)

    wall_cmd = sub.add_parser("wallpaper", help="Crop and resize the wallpaper, print the output path")
    wall_cmd.add_argument("path", nargs="?", default=None, help="wallpaper path (detected when omitted)")
    _add_size_flags(wall_cmd)
    wall_cmd.set_defaults(func=cmd_wallpaper)

    config_cmd = sub.add_parser("config", help="Print the effective configuration")
    config_cmd.add_argument("--write", action="store_true", help="write the effective configuration to disk")
    config_cmd.set_defaults(func=cmd_config)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    cfg = _load(args)
    configure_logging(keep_files=cfg.logging.keep_log_files, level=cfg.logging.level)
    install_crash_hooks()
    try:
        return int(args.func(args))
    except WFetchError as exc:
        get_logger().error("%s failed: %s", args.command, exc, extra={"event": "command_failed"})
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
