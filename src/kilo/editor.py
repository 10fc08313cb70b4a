"""Editor state, input dispatch and the main session loop."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from kilo.geometry import get_window_size
from kilo.keys import ARROW_KEYS, Key, KeyId, ctrl_key, read_key
from kilo.render import refresh_screen
from kilo.terminal import CLEAR_SCREEN, CURSOR_HOME, Terminal

logger = logging.getLogger(__name__)

QUIT_KEY = ctrl_key("q")


@dataclass
class EditorState:
    """Cursor position, screen size and the loaded document line."""

    screen_rows: int
    screen_cols: int
    cx: int = 0
    cy: int = 0
    row: bytes | None = None

    def __post_init__(self) -> None:
        if self.screen_rows <= 0 or self.screen_cols <= 0:
            raise ValueError(f"invalid screen size {self.screen_rows}x{self.screen_cols}")


def move_cursor(state: EditorState, key: KeyId) -> None:
    """Move the cursor one cell, staying inside the screen."""
    if key == Key.left:
        if state.cx > 0:
            state.cx -= 1
    elif key == Key.right:
        if state.cx < state.screen_cols - 1:
            state.cx += 1
    elif key == Key.up:
        if state.cy > 0:
            state.cy -= 1
    elif key == Key.down:
        if state.cy < state.screen_rows - 1:
            state.cy += 1


def process_key(state: EditorState, key: KeyId) -> bool:
    """Apply *key* to *state*.

    Returns ``False`` when the key asks the editor to quit.
    """
    if key == QUIT_KEY:
        return False

    if key in (Key.page_up, Key.page_down):
        direction = Key.up if key == Key.page_up else Key.down
        for _ in range(state.screen_rows):
            move_cursor(state, direction)
    elif key == Key.home:
        state.cx = 0
    elif key == Key.end:
        state.cx = state.screen_cols - 1
    elif key in ARROW_KEYS:
        move_cursor(state, key)

    return True


class Editor:
    """Runs the refresh / read / dispatch loop on one terminal."""

    def __init__(self, terminal: Terminal, state: EditorState) -> None:
        self.terminal = terminal
        self.state = state

    @classmethod
    def open(cls, terminal: Terminal, row: bytes | None = None) -> Editor:
        """Create an editor sized to *terminal*."""
        rows, cols = get_window_size(terminal)
        logger.info("screen size %dx%d", rows, cols)
        return cls(terminal, EditorState(screen_rows=rows, screen_cols=cols, row=row))

    def refresh(self) -> None:
        refresh_screen(self.state, self.terminal)

    def step(self) -> bool:
        """Read one key and dispatch it. Returns ``False`` on quit."""
        key = read_key(self.terminal)
        logger.debug("key %r", key)
        return process_key(self.state, key)

    def run(self) -> None:
        """Loop until the user quits, then clear the screen."""
        while True:
            self.refresh()
            if not self.step():
                break
        self.terminal.write(CLEAR_SCREEN + CURSOR_HOME)
