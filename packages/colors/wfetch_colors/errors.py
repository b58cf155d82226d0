"""Error taxonomy shared by palette acquisition and image rendering."""

from __future__ import annotations

from typing import Callable, Sequence, TypeVar

T = TypeVar("T")


class WFetchError(Exception):
    """Base class for every failure raised by the wfetch pipeline."""


class ConfigAbsent(WFetchError):
    """An optional input (cache file, metadata, tool) is not present."""


class ParseFailure(WFetchError, ValueError):
    """Malformed color, JSON, CSV or geometry data."""


class TerminalQueryError(WFetchError):
    """The terminal did not answer a color query usefully."""


class TerminalTimeout(TerminalQueryError):
    def __init__(self, query: str, timeout_ms: int) -> None:
        super().__init__(f"no terminal response to {query!r} within {timeout_ms}ms")
        self.query = query
        self.timeout_ms = timeout_ms


class TerminalMismatch(TerminalQueryError):
    def __init__(self, slot: int, response: str) -> None:
        super().__init__(f"unexpected response for color slot {slot}: {response!r}")
        self.slot = slot
        self.response = response


class AssetIOFailure(WFetchError):
    """A template, mask or source image could not be opened or decoded."""

    def __init__(self, path: object, reason: str) -> None:
        super().__init__(f"cannot read image {path}: {reason}")
        self.path = path
        self.reason = reason


class EncodeFailure(WFetchError):
    """The rendered PNG could not be written."""

    def __init__(self, path: object, reason: str) -> None:
        super().__init__(f"cannot write image {path}: {reason}")
        self.path = path
        self.reason = reason


class StrategiesExhausted(WFetchError):
    """Every provider in a fallback chain failed; ``errors`` keeps each cause in order."""

    def __init__(self, what: str, errors: Sequence[tuple[str, WFetchError]]) -> None:
        detail = "; ".join(f"{name}: {err}" for name, err in errors) or "no strategies configured"
        super().__init__(f"{what} unavailable ({detail})")
        self.what = what
        self.errors = list(errors)


class PaletteUnavailable(StrategiesExhausted):
    def __init__(self, errors: Sequence[tuple[str, WFetchError]]) -> None:
        super().__init__("terminal palette", errors)


def first_success(
    providers: Sequence[tuple[str, Callable[[], T]]],
    on_exhausted: Callable[[list[tuple[str, WFetchError]]], StrategiesExhausted],
) -> T:
    """Return the result of the first provider that does not raise a WFetchError."""
    errors: list[tuple[str, WFetchError]] = []
    for name, provider in providers:
        try:
            return provider()
        except WFetchError as exc:
            errors.append((name, exc))
    raise on_exhausted(errors)
