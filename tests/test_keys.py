"""Tests for kilo.keys -- escape sequence decoding."""

from __future__ import annotations

import pytest

from kilo.keys import Key, ctrl_key, decode_key, read_key

from .fake_terminal import FakeTerminal


def decode_one(data: bytes) -> str:
    term = FakeTerminal(data)
    return read_key(term)


def decode_keys(data: bytes) -> list[str]:
    term = FakeTerminal(data)
    keys = []
    while term.pending:
        keys.append(read_key(term))
    return keys


# ---------------------------------------------------------------------------
# Literal bytes
# ---------------------------------------------------------------------------


class TestLiteralKeys:
    def test_printable(self) -> None:
        assert decode_one(b"a") == "a"

    def test_control_character(self) -> None:
        assert decode_one(b"\x11") == ctrl_key("q")

    def test_high_byte(self) -> None:
        assert decode_one(b"\xe9") == "\xe9"

    def test_ctrl_key_mask(self) -> None:
        assert ctrl_key("q") == "\x11"
        assert ctrl_key("a") == "\x01"
        assert ctrl_key("Q") == "\x11"


# ---------------------------------------------------------------------------
# Escape sequences
# ---------------------------------------------------------------------------


class TestArrowKeys:
    @pytest.mark.parametrize(
        ("seq", "expected"),
        [
            (b"\x1b[A", Key.up),
            (b"\x1b[B", Key.down),
            (b"\x1b[C", Key.right),
            (b"\x1b[D", Key.left),
            (b"\x1b[H", Key.home),
            (b"\x1b[F", Key.end),
        ],
    )
    def test_letter_sequences(self, seq: bytes, expected: str) -> None:
        assert decode_one(seq) == expected


class TestTildeKeys:
    @pytest.mark.parametrize(
        ("seq", "expected"),
        [
            (b"\x1b[1~", Key.home),
            (b"\x1b[3~", Key.delete),
            (b"\x1b[4~", Key.end),
            (b"\x1b[5~", Key.page_up),
            (b"\x1b[6~", Key.page_down),
            (b"\x1b[7~", Key.home),
            (b"\x1b[8~", Key.end),
        ],
    )
    def test_digit_sequences(self, seq: bytes, expected: str) -> None:
        assert decode_one(seq) == expected

    def test_unmapped_digit(self) -> None:
        assert decode_one(b"\x1b[2~") == Key.escape

    def test_digit_without_tilde(self) -> None:
        assert decode_one(b"\x1b[5x") == Key.escape

    def test_digit_then_timeout(self) -> None:
        assert decode_one(b"\x1b[5") == Key.escape


class TestMalformedSequences:
    def test_lone_escape(self) -> None:
        assert decode_one(b"\x1b") == Key.escape

    def test_escape_then_one_byte(self) -> None:
        assert decode_one(b"\x1b[") == Key.escape

    def test_unknown_letter(self) -> None:
        assert decode_one(b"\x1b[Z") == Key.escape

    def test_ss3_prefix_not_recognised(self) -> None:
        assert decode_one(b"\x1bOA") == Key.escape

    def test_timeout_between_bytes(self) -> None:
        term = FakeTerminal([0x1B, None, ord("["), ord("A")])
        assert read_key(term) == Key.escape
        # The rest of the sequence arrives later as ordinary keys
        assert read_key(term) == "["
        assert read_key(term) == "A"

    def test_never_reads_past_sequence(self) -> None:
        term = FakeTerminal(b"\x1b[Ax")
        assert read_key(term) == Key.up
        assert read_key(term) == "x"


# ---------------------------------------------------------------------------
# read_key / decode_key / decode_keys
# ---------------------------------------------------------------------------


class TestReadKey:
    def test_skips_leading_timeouts(self) -> None:
        term = FakeTerminal([None, None, ord("k")])
        assert read_key(term) == "k"
        assert term.reads == 3

    def test_decode_key_uses_first_byte(self) -> None:
        term = FakeTerminal(b"[B")
        assert decode_key(0x1B, term) == Key.down

    def test_decode_keys_stream(self) -> None:
        data = b"a\x1b[5~\x1b[6~\x1b[Ab\x1b"
        assert decode_keys(data) == ["a", Key.page_up, Key.page_down, Key.up, "b", Key.escape]

    def test_decode_keys_empty(self) -> None:
        assert decode_keys(b"") == []
