"""Loading the (single-line) document shown by the viewer."""

from __future__ import annotations

import logging
import os

logger = logging.getLogger(__name__)


class DocumentError(Exception):
    """A file named on the command line could not be read."""

    def __init__(self, path: str, cause: OSError) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"{path}: {cause.strerror or cause}")


def open_document(path: str | os.PathLike[str] | None) -> bytes | None:
    """Return the first line of the file at *path*.

    The trailing newline and carriage return characters are stripped. An
    empty file, or no *path* at all, means there is no document (``None``).
    A file whose first line is blank yields ``b""``.
    """
    if path is None:
        return None

    try:
        with open(path, "rb") as f:
            line = f.readline()
    except OSError as exc:
        raise DocumentError(os.fspath(path), exc) from exc

    if not line:
        logger.info("%s is empty, no document loaded", os.fspath(path))
        return None

    line = line.rstrip(b"\r\n")
    logger.info("loaded %d bytes from %s", len(line), os.fspath(path))
    return line
