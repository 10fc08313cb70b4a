"""CLI entry point for the kilo viewer."""

from __future__ import annotations

import argparse
import contextlib
import logging
import os
import sys

from kilo import __version__
from kilo.config import LOG_LEVELS, Settings
from kilo.document import DocumentError, open_document
from kilo.editor import Editor
from kilo.log import configure_logging
from kilo.terminal import CLEAR_SCREEN, CURSOR_HOME, TerminalError, TerminalSession

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="kilo",
        description="Minimal raw-mode terminal viewer",
    )
    parser.add_argument("filename", nargs="?", help="File whose first line is displayed")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--log-file", help="Write debug logs to this file (or set KILO_LOG_FILE)")
    parser.add_argument("--log-level", choices=LOG_LEVELS, help="Log level (default: warning)")
    return parser.parse_args(argv)


def die(session: TerminalSession, error: TerminalError) -> int:
    """Report a fatal terminal failure and return the exit status.

    Clearing the screen is best effort: the failure may be the very
    descriptor we would write to.
    """
    with contextlib.suppress(OSError):
        os.write(session.output_fd, CLEAR_SCREEN + CURSOR_HOME)
    logger.error("fatal: %s", error)
    print(f"kilo: {error}", file=sys.stderr)
    return 1


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    settings = Settings.from_env()
    if args.log_file:
        settings.log_file = args.log_file
    if args.log_level:
        settings.log_level = args.log_level
    configure_logging(settings.log_file, settings.log_level)

    # Reported after the terminal is handed back, or the screen would hide it
    notices: list[str] = []

    row: bytes | None = None
    try:
        row = open_document(args.filename)
    except DocumentError as exc:
        logger.warning("could not open document: %s", exc)
        notices.append(f"kilo: {exc}")

    session = TerminalSession(
        read_timeout=settings.read_timeout,
        write_log_path=settings.write_log,
    )
    try:
        with session:
            editor = Editor.open(session, row)
            editor.run()
    except TerminalError as exc:
        return die(session, exc)
    finally:
        for notice in notices:
            print(notice, file=sys.stderr)

    logger.info("quit")
    return 0
