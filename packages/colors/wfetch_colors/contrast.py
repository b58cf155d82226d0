"""Pick the most legible pair of colors from a palette."""

from __future__ import annotations

from typing import Sequence

from .errors import ParseFailure
from .models import BLACK, Color, ColorPair

# WCAG AA minimum for graphical objects and UI components.
MIN_CONTRAST = 3.0


def pair_score(first: Color, second: Color) -> float:
    """Score a pair for display on a dark background; 0.0 means rejected."""
    if first.contrast_ratio(second) < MIN_CONTRAST:
        return 0.0
    first_on_black = first.contrast_ratio(BLACK)
    second_on_black = second.contrast_ratio(BLACK)
    if max(first_on_black, second_on_black) < MIN_CONTRAST:
        return 0.0
    return first_on_black + second_on_black


def most_contrasting_pair(colors: Sequence[Color]) -> ColorPair:
    """Return the best scoring ordered pair of distinct colors.

    Iteration order is the input order and the first maximum wins, so the
    result is deterministic for a given palette. When no pair clears the
    contrast threshold, the pair furthest apart in RGB space is used.
    """
    best_score = 0.0
    best: ColorPair | None = None
    max_distance = 0.0
    farthest: ColorPair | None = None

    for first in colors:
        for second in colors:
            if first == second:
                continue

            score = pair_score(first, second)
            if score > best_score:
                best_score = score
                best = ColorPair(first, second)

            distance = first.distance(second)
            if distance > max_distance:
                max_distance = distance
                farthest = ColorPair(first, second)

    if best is not None:
        return best
    if farthest is not None:
        return farthest
    raise ParseFailure("need at least two distinct colors to pick a pair")
