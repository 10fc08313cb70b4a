"""Raw-mode terminal session over a pair of file descriptors.

Provides a ``Terminal`` protocol (what the renderer and key decoder need)
and ``TerminalSession``, the concrete implementation that switches the
controlling terminal into raw mode, reads single bytes with a bounded
timeout, and guarantees the original line discipline is put back.
"""

from __future__ import annotations

import logging
import os
import signal
import sys
import termios
from typing import Protocol

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# ANSI escape constants
# ---------------------------------------------------------------------------

CLEAR_SCREEN = b"\x1b[2J"
CURSOR_HOME = b"\x1b[H"
HIDE_CURSOR = b"\x1b[?25l"
SHOW_CURSOR = b"\x1b[?25h"
ERASE_LINE = b"\x1b[K"

# Indices into the list returned by termios.tcgetattr
_IFLAG = 0
_OFLAG = 1
_CFLAG = 2
_LFLAG = 3
_CC = 6

_FORWARDED_SIGNALS = (signal.SIGTERM, signal.SIGHUP)


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class TerminalError(Exception):
    """An unrecoverable failure of a terminal control or I/O call.

    ``call`` names the operation that failed (``"tcsetattr"``, ``"read"``,
    ...) so the top level can report it the way ``perror`` would.
    """

    def __init__(self, call: str, cause: BaseException | None = None) -> None:
        self.call = call
        self.cause = cause
        super().__init__(f"{call}: {_describe(cause)}" if cause is not None else call)


class GeometryError(TerminalError):
    """The terminal size could not be determined by any method."""


def _describe(exc: BaseException) -> str:
    # termios.error carries (errno, strerror) but is not an OSError
    if isinstance(exc, OSError) and exc.strerror:
        return exc.strerror
    if isinstance(exc, termios.error) and len(exc.args) >= 2:
        return str(exc.args[1])
    return str(exc) or type(exc).__name__


# ---------------------------------------------------------------------------
# Terminal protocol
# ---------------------------------------------------------------------------


class Terminal(Protocol):
    """Byte-level terminal I/O used by the decoder, resolver and renderer."""

    def read_byte(self) -> int | None: ...

    def write(self, data: bytes) -> None: ...

    @property
    def output_fd(self) -> int: ...


# ---------------------------------------------------------------------------
# TerminalSession
# ---------------------------------------------------------------------------


class TerminalSession:
    """Owns the raw-mode lifecycle of one terminal.

    Use it as a context manager: raw mode is enabled on entry and the
    captured attributes are restored on exit, whatever the exit path.
    SIGTERM and SIGHUP are turned into ``SystemExit`` while the session is
    active so forced termination unwinds through the same guard.
    """

    def __init__(
        self,
        input_fd: int | None = None,
        output_fd: int | None = None,
        *,
        read_timeout: int = 1,
        write_log_path: str = "",
        handle_signals: bool = True,
    ) -> None:
        self._input_fd = sys.stdin.fileno() if input_fd is None else input_fd
        self._output_fd = sys.stdout.fileno() if output_fd is None else output_fd
        self._read_timeout = read_timeout
        self._write_log_path = write_log_path
        self._handle_signals = handle_signals
        self._original_mode: list | None = None
        self._previous_handlers: dict[int, object] = {}

    # -- properties ---------------------------------------------------------

    @property
    def input_fd(self) -> int:
        return self._input_fd

    @property
    def output_fd(self) -> int:
        return self._output_fd

    @property
    def is_raw(self) -> bool:
        return self._original_mode is not None

    # -- raw mode -----------------------------------------------------------

    def enter_raw_mode(self) -> None:
        """Capture the current attributes and switch the terminal to raw mode.

        Input is delivered byte by byte without echo, signal keys, flow
        control or CR translation; output post-processing is disabled; reads
        return after ``read_timeout`` tenths of a second with no data.
        """
        if self._original_mode is not None:
            return

        try:
            original = termios.tcgetattr(self._input_fd)
        except termios.error as exc:
            raise TerminalError("tcgetattr", exc) from exc

        raw = list(original)
        raw[_CC] = list(original[_CC])
        raw[_IFLAG] &= ~(termios.BRKINT | termios.INPCK | termios.ISTRIP | termios.IXON | termios.ICRNL)
        raw[_OFLAG] &= ~termios.OPOST
        raw[_CFLAG] |= termios.CS8
        raw[_LFLAG] &= ~(termios.ECHO | termios.ICANON | termios.ISIG | termios.IEXTEN)
        raw[_CC][termios.VMIN] = 0
        raw[_CC][termios.VTIME] = self._read_timeout

        try:
            termios.tcsetattr(self._input_fd, termios.TCSAFLUSH, raw)
        except termios.error as exc:
            raise TerminalError("tcsetattr", exc) from exc

        self._original_mode = original
        self._install_signal_handlers()
        logger.debug("raw mode enabled on fd %d (VTIME=%d)", self._input_fd, self._read_timeout)

    def restore_mode(self) -> None:
        """Reapply the attributes captured by :meth:`enter_raw_mode`.

        Restoring happens at most once per capture; later calls are no-ops.
        """
        if self._original_mode is None:
            return

        # The signal handlers stay installed until the mode is back, so a
        # termination signal arriving here still unwinds with the snapshot kept
        try:
            try:
                termios.tcsetattr(self._input_fd, termios.TCSAFLUSH, self._original_mode)
            except termios.error as exc:
                raise TerminalError("tcsetattr", exc) from exc
            self._original_mode = None
        finally:
            self._restore_signal_handlers()
        logger.debug("terminal mode restored on fd %d", self._input_fd)

    def __enter__(self) -> TerminalSession:
        self.enter_raw_mode()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.restore_mode()

    # -- I/O ----------------------------------------------------------------

    def read_byte(self) -> int | None:
        """Read one byte, or return ``None`` if none arrived before the timeout."""
        try:
            data = os.read(self._input_fd, 1)
        except (BlockingIOError, InterruptedError):
            return None
        except OSError as exc:
            raise TerminalError("read", exc) from exc
        if not data:
            return None
        return data[0]

    def write(self, data: bytes) -> None:
        """Write all of *data* to the output descriptor."""
        view = memoryview(data)
        while view:
            try:
                written = os.write(self._output_fd, view)
            except InterruptedError:
                continue
            except OSError as exc:
                raise TerminalError("write", exc) from exc
            view = view[written:]

        if self._write_log_path:
            try:
                with open(self._write_log_path, "ab") as f:
                    f.write(data)
            except OSError as exc:
                logger.debug("write log %s unavailable: %s", self._write_log_path, exc)

    # -- private: signals ---------------------------------------------------

    def _install_signal_handlers(self) -> None:
        if not self._handle_signals:
            return
        for signum in _FORWARDED_SIGNALS:
            try:
                self._previous_handlers[signum] = signal.signal(signum, _raise_system_exit)
            except ValueError:
                # Not on the main thread; rely on the context manager alone
                return

    def _restore_signal_handlers(self) -> None:
        for signum, handler in self._previous_handlers.items():
            # None means the handler was not installed from Python
            signal.signal(signum, signal.SIG_DFL if handler is None else handler)
        self._previous_handlers.clear()


def _raise_system_exit(signum: int, frame: object) -> None:
    """Turn a termination signal into an exception so cleanup runs."""
    raise SystemExit(128 + signum)
