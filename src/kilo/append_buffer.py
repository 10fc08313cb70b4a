"""Append-only byte buffer used to stage a full frame before writing it.

Every refresh builds its output here and hands the whole thing to the
terminal in one ``write`` call, so the user never sees a half-drawn screen.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


class AppendBuffer:
    """Growable byte accumulator.

    ``append`` either stores all of the new bytes or none of them: when the
    buffer cannot grow, previously appended content is left untouched and the
    new chunk is dropped.
    """

    def __init__(self) -> None:
        self._data = bytearray()

    def append(self, data: bytes | str) -> None:
        """Append *data* to the end of the buffer."""
        if isinstance(data, str):
            data = data.encode("utf-8")
        if not data:
            return
        try:
            self._data.extend(data)
        except MemoryError:
            logger.debug("append buffer: dropped %d bytes, out of memory", len(data))

    def clear(self) -> None:
        """Release the accumulated bytes."""
        self._data = bytearray()

    def getvalue(self) -> bytes:
        return bytes(self._data)

    def __bytes__(self) -> bytes:
        return self.getvalue()

    def __len__(self) -> int:
        return len(self._data)

    # -- context manager ----------------------------------------------------

    def __enter__(self) -> AppendBuffer:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.clear()
