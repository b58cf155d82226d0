"""Terminal emulator detection for image protocol and scale rounding decisions."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

import psutil

KNOWN_TERMINALS = ("kitty", "ghostty", "wezterm", "foot", "alacritty", "konsole", "gnome-terminal")

DEFAULT_IMAGE_TYPE = "kitty"


@dataclass(frozen=True)
class TerminalInfo:
    name: str | None
    multiplexer: str | None = None

    @property
    def image_type(self) -> str:
        """fastfetch logo type able to draw an image in this terminal."""
        if self.multiplexer == "tmux":
            return "sixel"
        if self.name == "kitty":
            return "kitty-direct"
        return DEFAULT_IMAGE_TYPE


def _from_env(env: Mapping[str, str]) -> str | None:
    if env.get("KITTY_WINDOW_ID") or env.get("TERM") == "xterm-kitty":
        return "kitty"
    if env.get("GHOSTTY_RESOURCES_DIR") or env.get("TERM") == "xterm-ghostty":
        return "ghostty"
    program = env.get("TERM_PROGRAM", "").lower()
    if program:
        for name in KNOWN_TERMINALS:
            if name in program:
                return name
    return None


def _from_process_tree() -> str | None:
    try:
        ancestors = psutil.Process().parents()
    except psutil.Error:
        return None
    for proc in ancestors:
        try:
            exe = proc.name().lower()
        except psutil.Error:
            continue
        for name in KNOWN_TERMINALS:
            if exe.startswith(name):
                return name
    return None


def detect_terminal(env: Mapping[str, str] | None = None, walk_processes: bool = True) -> TerminalInfo:
    env = os.environ if env is None else env
    multiplexer = "tmux" if env.get("TMUX") else None
    name = _from_env(env)
    if name is None and walk_processes:
        name = _from_process_tree()
    return TerminalInfo(name=name, multiplexer=multiplexer)
