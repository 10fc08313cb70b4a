"""Terminal size discovery.

The size is normally taken from the tty driver. Some terminals (serial
lines, certain emulators) report zero columns, so the fallback pushes the
cursor into the bottom-right corner and asks the terminal where it ended up.
"""

from __future__ import annotations

import logging
import os
import re

from kilo.terminal import GeometryError, Terminal

logger = logging.getLogger(__name__)

CURSOR_TO_BOTTOM_RIGHT = b"\x1b[999C\x1b[999B"
REQUEST_CURSOR_POSITION = b"\x1b[6n"

# Upper bound on the size of a cursor position report, terminator included
_REPORT_LIMIT = 32

_REPORT_RE = re.compile(rb"^\x1b\[(\d+);(\d+)")


def parse_cursor_report(data: bytes) -> tuple[int, int]:
    """Parse ``ESC [ rows ; cols`` (the trailing ``R`` is optional).

    Raises :class:`GeometryError` when the reply is not a position report.
    """
    match = _REPORT_RE.match(data)
    if match is None:
        raise GeometryError("cursor position report")
    return int(match.group(1)), int(match.group(2))


def get_cursor_position(terminal: Terminal) -> tuple[int, int]:
    """Ask the terminal for the cursor position and read back its reply."""
    terminal.write(REQUEST_CURSOR_POSITION)

    reply = bytearray()
    while len(reply) < _REPORT_LIMIT - 1:
        byte = terminal.read_byte()
        if byte is None or byte == ord("R"):
            break
        reply.append(byte)

    logger.debug("cursor position reply: %r", bytes(reply))
    return parse_cursor_report(bytes(reply))


def get_window_size(terminal: Terminal) -> tuple[int, int]:
    """Return ``(rows, columns)`` of the terminal.

    Falls back to probing with escape sequences when the direct query fails
    or reports zero columns.
    """
    try:
        size = os.get_terminal_size(terminal.output_fd)
    except OSError as exc:
        logger.debug("terminal size query failed (%s), probing", exc)
    else:
        if size.columns > 0 and size.lines > 0:
            return size.lines, size.columns
        logger.debug("terminal reported an empty size, probing")

    terminal.write(CURSOR_TO_BOTTOM_RIGHT)
    rows, cols = get_cursor_position(terminal)
    if rows <= 0 or cols <= 0:
        raise GeometryError("getWindowSize")
    return rows, cols
