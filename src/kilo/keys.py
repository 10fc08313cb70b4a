"""Keyboard input decoding.

Turns the raw byte stream coming from a raw-mode terminal into key
identifiers. Ordinary bytes come back as one-character strings; the
navigation keys that terminals send as ANSI escape sequences come back as
one of the :class:`Key` names.
"""

from __future__ import annotations

from typing import Protocol

# ---------------------------------------------------------------------------
# Type alias
# ---------------------------------------------------------------------------

KeyId = str

ESC = 0x1B


class ByteReader(Protocol):
    def read_byte(self) -> int | None: ...


# ---------------------------------------------------------------------------
# Key names
# ---------------------------------------------------------------------------


class Key:
    """Named keys produced by escape-sequence decoding."""

    escape = "escape"
    up = "up"
    down = "down"
    left = "left"
    right = "right"
    home = "home"
    end = "end"
    delete = "delete"
    page_up = "pageUp"
    page_down = "pageDown"


ARROW_KEYS: frozenset[str] = frozenset({Key.up, Key.down, Key.left, Key.right})

# ESC [ <digit> ~
_TILDE_KEYS: dict[int, KeyId] = {
    ord("1"): Key.home,
    ord("3"): Key.delete,
    ord("4"): Key.end,
    ord("5"): Key.page_up,
    ord("6"): Key.page_down,
    ord("7"): Key.home,
    ord("8"): Key.end,
}

# ESC [ <letter>
_LETTER_KEYS: dict[int, KeyId] = {
    ord("A"): Key.up,
    ord("B"): Key.down,
    ord("C"): Key.right,
    ord("D"): Key.left,
    ord("H"): Key.home,
    ord("F"): Key.end,
}


def ctrl_key(ch: str) -> KeyId:
    """Return the control character produced by Ctrl + *ch*."""
    return chr(ord(ch) & 0x1F)


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------


def decode_key(first: int, reader: ByteReader) -> KeyId:
    """Decode the key that starts with byte *first*.

    Bytes following an ``ESC`` are pulled from *reader* one at a time. A
    read that times out or a sequence that is not recognised yields
    :attr:`Key.escape`; nothing here waits longer than one read timeout.
    """
    if first != ESC:
        return chr(first)

    seq0 = reader.read_byte()
    if seq0 is None:
        return Key.escape
    seq1 = reader.read_byte()
    if seq1 is None:
        return Key.escape

    if seq0 != ord("["):
        return Key.escape

    if ord("0") <= seq1 <= ord("9"):
        seq2 = reader.read_byte()
        if seq2 != ord("~"):
            return Key.escape
        return _TILDE_KEYS.get(seq1, Key.escape)

    return _LETTER_KEYS.get(seq1, Key.escape)


def read_key(reader: ByteReader) -> KeyId:
    """Wait for the next keypress and decode it.

    Read timeouts while waiting for the first byte are not errors; the
    reader is simply polled again.
    """
    while True:
        first = reader.read_byte()
        if first is not None:
            return decode_key(first, reader)

