"""Display scale lookup from the running Wayland compositor."""

from __future__ import annotations

import json
import logging
import math
import subprocess
from typing import Callable, Sequence

from wfetch_colors.errors import ConfigAbsent, ParseFailure, StrategiesExhausted, first_success

from .terminal import TerminalInfo

_LOG = logging.getLogger("wfetch.scale")

ScaleProvider = Callable[[], float]

HYPRCTL_MONITORS = ["hyprctl", "monitors", "-j"]
SWAYMSG_OUTPUTS = ["swaymsg", "-t", "get_outputs", "--raw"]


def _run_json(cmd: list[str], timeout: float = 1.0):
    try:
        proc = subprocess.run(cmd, capture_output=True, text=True, timeout=timeout, check=False)
    except (OSError, subprocess.TimeoutExpired) as exc:
        raise ConfigAbsent(f"{cmd[0]} unavailable: {exc}") from exc
    if proc.returncode != 0:
        raise ConfigAbsent(f"{cmd[0]} exited with status {proc.returncode}")
    try:
        return json.loads(proc.stdout)
    except ValueError as exc:
        raise ParseFailure(f"{cmd[0]} returned invalid JSON") from exc


def focused_output_scale(outputs) -> float:
    """Scale of the focused entry in a hyprctl/swaymsg output list."""
    if not isinstance(outputs, list):
        raise ParseFailure("compositor output list is not a JSON array")
    for output in outputs:
        if isinstance(output, dict) and output.get("focused"):
            try:
                scale = float(output["scale"])
            except (KeyError, TypeError, ValueError) as exc:
                raise ParseFailure("focused output has no numeric scale") from exc
            if scale <= 0:
                raise ParseFailure(f"focused output has invalid scale {scale}")
            return scale
    raise ConfigAbsent("no focused output reported")


def hyprland_scale() -> float:
    return focused_output_scale(_run_json(HYPRCTL_MONITORS))


def sway_scale() -> float:
    return focused_output_scale(_run_json(SWAYMSG_OUTPUTS))


def default_providers() -> list[tuple[str, ScaleProvider]]:
    return [("hyprland", hyprland_scale), ("sway", sway_scale)]


def compositor_scale(providers: Sequence[tuple[str, ScaleProvider]] | None = None) -> float | None:
    try:
        return first_success(
            providers if providers is not None else default_providers(),
            lambda errors: StrategiesExhausted("display scale", errors),
        )
    except StrategiesExhausted as exc:
        _LOG.debug("%s", exc)
        return None


def resolve_scale(
    explicit: float | None = None,
    terminal: TerminalInfo | None = None,
    round_up_terminals: Sequence[str] = (),
    providers: Sequence[tuple[str, ScaleProvider]] | None = None,
) -> float:
    """Explicit scale, else the compositor's, else 1.0; rounded up for terminals that blur fractional scales."""
    if explicit is not None:
        scale = explicit
    else:
        scale = compositor_scale(providers) or 1.0

    if terminal is not None and terminal.name in round_up_terminals:
        scale = float(math.ceil(scale))
    return scale
