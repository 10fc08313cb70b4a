"""Screen rendering.

A refresh composes the whole screen (content row, filler rows, welcome
banner, cursor placement) into an :class:`AppendBuffer` and writes it to
the terminal in a single call.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from kilo import __version__
from kilo.append_buffer import AppendBuffer
from kilo.terminal import CURSOR_HOME, ERASE_LINE, HIDE_CURSOR, SHOW_CURSOR, Terminal
from kilo.utils import truncate_to_width, visible_width

if TYPE_CHECKING:
    from kilo.editor import EditorState

WELCOME_MESSAGE = f"Kilo editor -- version {__version__}"
FILLER = b"~"


def welcome_line(screen_cols: int) -> bytes:
    """Return the welcome banner centred in *screen_cols* columns.

    The banner is clipped to the screen width. When there is room left
    over, the row starts with a ``~`` marker followed by enough spaces to
    centre the text.
    """
    text = truncate_to_width(WELCOME_MESSAGE, screen_cols)
    padding = (screen_cols - visible_width(text)) // 2
    prefix = "~" + " " * padding if padding else ""
    return (prefix + text).encode("utf-8")


def draw_rows(state: EditorState, buf: AppendBuffer) -> None:
    """Append every screen row to *buf*."""
    for y in range(state.screen_rows):
        if state.row is not None and y == 0:
            buf.append(state.row[: state.screen_cols])
        elif state.row is None and y == state.screen_rows // 3:
            buf.append(welcome_line(state.screen_cols))
        else:
            buf.append(FILLER)

        buf.append(ERASE_LINE)
        # No newline after the last row, or the terminal would scroll
        if y < state.screen_rows - 1:
            buf.append(b"\r\n")


def cursor_position(row: int, col: int) -> bytes:
    """Escape sequence moving the cursor to 0-indexed ``(row, col)``."""
    return f"\x1b[{row + 1};{col + 1}H".encode("ascii")


def build_frame(state: EditorState) -> bytes:
    """Compose one complete frame for *state*."""
    with AppendBuffer() as buf:
        buf.append(HIDE_CURSOR)
        buf.append(CURSOR_HOME)
        draw_rows(state, buf)
        buf.append(cursor_position(state.cy, state.cx))
        buf.append(SHOW_CURSOR)
        return buf.getvalue()


def refresh_screen(state: EditorState, terminal: Terminal) -> None:
    """Redraw the whole screen with a single write."""
    terminal.write(build_frame(state))
