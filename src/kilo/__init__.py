"""kilo: a minimal raw-mode terminal viewer."""

__version__ = "0.0.1"

from kilo.append_buffer import AppendBuffer
from kilo.document import DocumentError, open_document
from kilo.editor import Editor, EditorState, move_cursor, process_key
from kilo.geometry import get_cursor_position, get_window_size, parse_cursor_report
from kilo.keys import Key, KeyId, ctrl_key, decode_key, read_key
from kilo.render import build_frame, refresh_screen
from kilo.terminal import GeometryError, Terminal, TerminalError, TerminalSession

__all__ = [
    "__version__",
    # Append buffer
    "AppendBuffer",
    # Terminal
    "GeometryError",
    "Terminal",
    "TerminalError",
    "TerminalSession",
    # Geometry
    "get_cursor_position",
    "get_window_size",
    "parse_cursor_report",
    # Keys
    "Key",
    "KeyId",
    "ctrl_key",
    "decode_key",
    "read_key",
    # Rendering
    "build_frame",
    "refresh_screen",
    # Editor
    "Editor",
    "EditorState",
    "move_cursor",
    "process_key",
    # Documents
    "DocumentError",
    "open_document",
]
