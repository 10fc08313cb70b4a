"""Tests for kilo.geometry -- window size resolution."""

from __future__ import annotations

import os

import pytest

from kilo import geometry
from kilo.geometry import (
    CURSOR_TO_BOTTOM_RIGHT,
    REQUEST_CURSOR_POSITION,
    get_cursor_position,
    get_window_size,
    parse_cursor_report,
)
from kilo.terminal import GeometryError, TerminalError

from .fake_terminal import FakeTerminal


def _size(columns: int, lines: int) -> os.terminal_size:
    return os.terminal_size((columns, lines))


class TestParseCursorReport:
    def test_with_terminator(self) -> None:
        assert parse_cursor_report(b"\x1b[24;80R") == (24, 80)

    def test_without_terminator(self) -> None:
        assert parse_cursor_report(b"\x1b[50;132") == (50, 132)

    @pytest.mark.parametrize(
        "reply",
        [b"", b"24;80", b"[24;80", b"\x1b24;80", b"\x1b[;80", b"\x1b[24", b"\x1b[a;b"],
    )
    def test_malformed(self, reply: bytes) -> None:
        with pytest.raises(GeometryError):
            parse_cursor_report(reply)

    def test_geometry_error_is_terminal_error(self) -> None:
        assert issubclass(GeometryError, TerminalError)


class TestGetCursorPosition:
    def test_reads_reply(self) -> None:
        term = FakeTerminal(replies={REQUEST_CURSOR_POSITION: b"\x1b[33;101R"})
        assert get_cursor_position(term) == (33, 101)
        assert term.writes == [REQUEST_CURSOR_POSITION]

    def test_stops_at_terminator(self) -> None:
        term = FakeTerminal(replies={REQUEST_CURSOR_POSITION: b"\x1b[10;20Rxyz"})
        assert get_cursor_position(term) == (10, 20)
        assert term.read_byte() == ord("x")

    def test_no_reply(self) -> None:
        term = FakeTerminal()
        with pytest.raises(GeometryError):
            get_cursor_position(term)

    def test_reply_limit(self) -> None:
        term = FakeTerminal(replies={REQUEST_CURSOR_POSITION: b"\x1b[" + b"1" * 64 + b";5R"})
        with pytest.raises(GeometryError):
            get_cursor_position(term)
        # Only the bounded prefix was consumed
        assert term.reads == 31


class TestGetWindowSize:
    def test_direct_query(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(geometry.os, "get_terminal_size", lambda fd: _size(120, 40))
        term = FakeTerminal()
        assert get_window_size(term) == (40, 120)
        assert term.writes == []

    def test_probe_when_query_fails(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def fail(fd: int) -> os.terminal_size:
            raise OSError(25, "Inappropriate ioctl for device")

        monkeypatch.setattr(geometry.os, "get_terminal_size", fail)
        term = FakeTerminal(replies={REQUEST_CURSOR_POSITION: b"\x1b[24;80R"})
        assert get_window_size(term) == (24, 80)
        assert term.writes == [CURSOR_TO_BOTTOM_RIGHT, REQUEST_CURSOR_POSITION]

    def test_probe_when_zero_columns(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(geometry.os, "get_terminal_size", lambda fd: _size(0, 0))
        term = FakeTerminal(replies={REQUEST_CURSOR_POSITION: b"\x1b[30;90R"})
        assert get_window_size(term) == (30, 90)

    def test_probe_failure_propagates(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(geometry.os, "get_terminal_size", lambda fd: _size(0, 0))
        term = FakeTerminal(replies={REQUEST_CURSOR_POSITION: b"garbage"})
        with pytest.raises(GeometryError):
            get_window_size(term)

    def test_probe_rejects_zero_size(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(geometry.os, "get_terminal_size", lambda fd: _size(0, 0))
        term = FakeTerminal(replies={REQUEST_CURSOR_POSITION: b"\x1b[0;0R"})
        with pytest.raises(GeometryError):
            get_window_size(term)
