"""Settings resolved from the environment."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping

logger = logging.getLogger(__name__)

LOG_LEVELS = ("debug", "info", "warning", "error")

DEFAULT_READ_TIMEOUT = 1
# VTIME is a single cc byte
_MAX_READ_TIMEOUT = 255


@dataclass
class Settings:
    """Runtime options.

    ``read_timeout`` is the raw-mode read timeout in tenths of a second.
    ``write_log`` names a file that receives a copy of every byte written
    to the terminal.
    """

    log_file: str = ""
    log_level: str = "warning"
    write_log: str = ""
    read_timeout: int = DEFAULT_READ_TIMEOUT

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ

        log_level = env.get("KILO_LOG_LEVEL", "warning").lower()
        if log_level not in LOG_LEVELS:
            log_level = "warning"

        return cls(
            log_file=env.get("KILO_LOG_FILE", ""),
            log_level=log_level,
            write_log=env.get("KILO_WRITE_LOG", ""),
            read_timeout=_parse_read_timeout(env.get("KILO_READ_TIMEOUT")),
        )


def _parse_read_timeout(value: str | None) -> int:
    if not value:
        return DEFAULT_READ_TIMEOUT
    try:
        timeout = int(value)
    except ValueError:
        logger.warning("ignoring KILO_READ_TIMEOUT=%r: not an integer", value)
        return DEFAULT_READ_TIMEOUT
    if not 1 <= timeout <= _MAX_READ_TIMEOUT:
        logger.warning("ignoring KILO_READ_TIMEOUT=%r: out of range", value)
        return DEFAULT_READ_TIMEOUT
    return timeout
