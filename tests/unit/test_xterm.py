import os
import pty
import select
import sys
import termios
import tty
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "colors"))

from wfetch_colors.errors import TerminalMismatch, TerminalQueryError, TerminalTimeout
from wfetch_colors.models import Color
from wfetch_colors.palette import query_terminal_palette
from wfetch_colors.xterm import RawMode, TerminalChannel, color_query, parse_color_response, query_color


def _reply(slot: int, rgb: tuple[int, int, int], terminator: bytes = b"\x1b\\") -> bytes:
    r, g, b = (f"{c:02x}{c:02x}" for c in rgb)
    return f"\x1b]4;{slot};rgb:{r}/{g}/{b}".encode("ascii") + terminator


def _drain(fd: int) -> bytes:
    out = b""
    while select.select([fd], [], [], 0.05)[0]:
        chunk = os.read(fd, 1024)
        if not chunk:
            break
        out += chunk
    return out


class ParseResponseTests(unittest.TestCase):
    def test_sixteen_bit_channels_keep_high_byte(self):
        color = parse_color_response(4, "\x1b]4;4;rgb:7e7e/baba/e4e4")
        self.assertEqual(color, Color.parse("#7ebae4"))

    def test_wrong_slot_is_mismatch(self):
        with self.assertRaises(TerminalMismatch):
            parse_color_response(3, "\x1b]4;4;rgb:7e7e/baba/e4e4")

    def test_truncated_response_is_mismatch(self):
        with self.assertRaises(TerminalMismatch):
            parse_color_response(4, "\x1b]4;4;rgb:7e/ba/e4")

    def test_query_string(self):
        self.assertEqual(color_query(11), "\x1b]4;11;?\x07")


class PtyTestCase(unittest.TestCase):
    def setUp(self):
        try:
            self.master, self.slave = pty.openpty()
        except OSError as exc:
            self.skipTest(f"no pty available: {exc}")
        self.addCleanup(os.close, self.master)
        self.addCleanup(os.close, self.slave)
        self.channel = TerminalChannel(read_fd=self.slave, write_fd=self.slave)


class RawModeTests(PtyTestCase):
    def test_restores_attributes_it_changed(self):
        before = termios.tcgetattr(self.slave)
        with RawMode(self.slave) as guard:
            self.assertTrue(guard.changed)
            self.assertFalse(termios.tcgetattr(self.slave)[3] & termios.ICANON)
        self.assertEqual(termios.tcgetattr(self.slave), before)

    def test_restores_on_error(self):
        before = termios.tcgetattr(self.slave)
        with self.assertRaises(RuntimeError):
            with RawMode(self.slave):
                raise RuntimeError("query failed")
        self.assertEqual(termios.tcgetattr(self.slave), before)

    def test_nested_guard_leaves_outer_state(self):
        with RawMode(self.slave) as outer:
            with RawMode(self.slave) as inner:
                self.assertFalse(inner.changed)
            self.assertFalse(termios.tcgetattr(self.slave)[3] & termios.ICANON)
            self.assertTrue(outer.changed)

    def test_already_raw_tty_is_left_alone(self):
        tty.setraw(self.slave)
        before = termios.tcgetattr(self.slave)
        with RawMode(self.slave) as guard:
            self.assertFalse(guard.changed)
        self.assertEqual(termios.tcgetattr(self.slave), before)

    def test_non_tty_is_query_error(self):
        read_fd, write_fd = os.pipe()
        self.addCleanup(os.close, read_fd)
        self.addCleanup(os.close, write_fd)
        with self.assertRaises(TerminalQueryError):
            with RawMode(read_fd):
                pass


class QueryColorTests(PtyTestCase):
    def test_reads_reply_and_sends_query(self):
        tty.setraw(self.slave)
        os.write(self.master, _reply(3, (0xAB, 0xCD, 0xEF)))
        color = query_color(self.channel, 3, timeout_ms=500)
        self.assertEqual(color, Color(0xAB, 0xCD, 0xEF))
        self.assertIn(color_query(3).encode("ascii"), _drain(self.master))

    def test_bel_terminated_reply(self):
        tty.setraw(self.slave)
        os.write(self.master, _reply(5, (1, 2, 3), terminator=b"\x07"))
        self.assertEqual(query_color(self.channel, 5, timeout_ms=500), Color(1, 2, 3))

    def test_silent_terminal_times_out_and_restores_mode(self):
        before = termios.tcgetattr(self.slave)
        with self.assertRaises(TerminalTimeout) as ctx:
            query_color(self.channel, 3, timeout_ms=30)
        self.assertEqual(ctx.exception.timeout_ms, 30)
        self.assertEqual(termios.tcgetattr(self.slave), before)

    def test_full_palette_query(self):
        tty.setraw(self.slave)
        replies = b"".join(_reply(slot, (slot * 10, slot, 255 - slot)) for slot in range(16))
        os.write(self.master, replies)
        palette = query_terminal_palette(timeout_ms=500, channel=self.channel)
        self.assertEqual(palette[0], Color(0, 0, 255))
        self.assertEqual(palette[15], Color(150, 15, 240))

    def test_missing_slot_fails_whole_query(self):
        tty.setraw(self.slave)
        os.write(self.master, b"".join(_reply(slot, (slot, slot, slot)) for slot in range(3)))
        with self.assertRaises(TerminalTimeout):
            query_terminal_palette(timeout_ms=30, channel=self.channel)


if __name__ == "__main__":
    unittest.main()
