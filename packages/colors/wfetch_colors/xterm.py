"""Query palette entries from an xterm-compatible terminal with OSC 4."""

from __future__ import annotations

import logging
import os
import select
import termios
import time
import tty
from dataclasses import dataclass

from .errors import ConfigAbsent, TerminalMismatch, TerminalQueryError, TerminalTimeout
from .models import Color

_LOG = logging.getLogger("wfetch.xterm")

DEFAULT_TIMEOUT_MS = 100

BEL = b"\x07"
ST = b"\x1b\\"


@dataclass(frozen=True)
class TerminalChannel:
    """File descriptors used to talk to the terminal; usually both are /dev/tty."""

    read_fd: int
    write_fd: int

    def close(self) -> None:
        os.close(self.read_fd)
        if self.write_fd != self.read_fd:
            os.close(self.write_fd)


def open_tty(path: str = "/dev/tty") -> TerminalChannel:
    try:
        fd = os.open(path, os.O_RDWR | os.O_NOCTTY)
    except OSError as exc:
        raise ConfigAbsent(f"no controlling terminal at {path}: {exc.strerror}") from exc
    return TerminalChannel(read_fd=fd, write_fd=fd)


class RawMode:
    """Puts a tty into raw mode and restores it on exit, but only if it changed it.

    Nested or concurrent holders are safe: a guard entered while the tty is
    already raw leaves the attributes alone on exit.
    """

    def __init__(self, fd: int) -> None:
        self.fd = fd
        self._saved: list | None = None

    @property
    def changed(self) -> bool:
        return self._saved is not None

    def __enter__(self) -> RawMode:
        try:
            attrs = termios.tcgetattr(self.fd)
        except termios.error as exc:
            raise TerminalQueryError(f"fd {self.fd} is not a terminal") from exc
        if attrs[3] & (termios.ICANON | termios.ECHO):
            tty.setraw(self.fd, termios.TCSANOW)
            self._saved = attrs
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if self._saved is not None:
            termios.tcsetattr(self.fd, termios.TCSADRAIN, self._saved)
            self._saved = None
        return False


def read_response(fd: int, query: str, timeout_ms: int) -> str:
    """Read until BEL or ST, returning the payload without its terminator."""
    deadline = time.monotonic() + max(timeout_ms, 1) / 1000
    buf = bytearray()
    while True:
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            raise TerminalTimeout(query, timeout_ms)
        ready, _, _ = select.select([fd], [], [], remaining)
        if not ready:
            raise TerminalTimeout(query, timeout_ms)
        # One byte at a time so a following reply is never consumed.
        chunk = os.read(fd, 1)
        if not chunk:
            raise TerminalQueryError("terminal closed while waiting for a response")
        buf += chunk
        if buf.endswith(BEL):
            return buf[: -len(BEL)].decode("ascii", errors="replace")
        if buf.endswith(ST):
            return buf[: -len(ST)].decode("ascii", errors="replace")


def query_terminal(channel: TerminalChannel, query: str, timeout_ms: int = DEFAULT_TIMEOUT_MS) -> str:
    with RawMode(channel.read_fd):
        try:
            os.write(channel.write_fd, query.encode("ascii"))
            return read_response(channel.read_fd, query, timeout_ms)
        except OSError as exc:
            raise TerminalQueryError(f"terminal I/O failed: {exc.strerror}") from exc


def color_query(slot: int) -> str:
    return f"\x1b]4;{slot};?\x07"


def parse_color_response(slot: int, response: str) -> Color:
    """Parse ``ESC ] 4 ; N ; rgb:RRRR/GGGG/BBBB`` (terminator already stripped).

    Terminals with 8-bit precision repeat their two digits, so only the most
    significant pair of each channel is used.
    """
    prefix = f"\x1b]4;{slot};rgb:"
    if not response.startswith(prefix):
        raise TerminalMismatch(slot, response)
    raw = response[len(prefix) :]
    if len(raw) < 14:
        raise TerminalMismatch(slot, response)
    parts = (raw[0:2], raw[5:7], raw[10:12])
    try:
        r, g, b = (int(p, 16) for p in parts)
    except ValueError as exc:
        raise TerminalMismatch(slot, response) from exc
    return Color(r, g, b)


def query_color(channel: TerminalChannel, slot: int, timeout_ms: int = DEFAULT_TIMEOUT_MS) -> Color:
    response = query_terminal(channel, color_query(slot), timeout_ms)
    color = parse_color_response(slot, response)
    _LOG.debug("terminal slot %d is %s", slot, color.hex)
    return color
