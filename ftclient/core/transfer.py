"""
Consumers for the framed responses carried on the data channel.

Every response ends with the done sentinel. Listings are plain content lines;
a get response starts with either the bad sentinel (followed by an error
message) or with file content.
"""

import os
import logging
import threading
from typing import Callable, List, Optional

from ..errors import ProtocolError, SessionInterrupted, TransferIOError
from .request import Sentinel
from .resolver import CollisionResolver, SaveDecision

logger = logging.getLogger(__name__)


class FileResult:
    RECEIVED = "received"
    FAILED = "failed"
    CANCELLED = "cancelled"

    def __init__(self, status: str, saved_as: Optional[str] = None,
                 lines: Optional[List[str]] = None, lines_written: int = 0):
        self.status = status
        self.saved_as = saved_as
        self.lines = lines or []
        self.lines_written = lines_written

    def __repr__(self):
        return f"FileResult(status={self.status!r}, saved_as={self.saved_as!r}, lines_written={self.lines_written})"


def read_until_done(data_channel, on_line: Callable[[str], None], what: str = "response"):
    """Feeds every line before the done sentinel to `on_line`."""
    while True:
        line = data_channel.read_line()
        if line is None:
            raise ProtocolError(f"Data connection closed before the end of the {what}")
        if line == Sentinel.DONE:
            return
        on_line(line)


def consume_listing(data_channel, echo: Callable[[str], None] = print) -> List[str]:
    lines = []

    def surface(line):
        lines.append(line)
        echo(line)

    read_until_done(data_channel, surface, "directory listing")
    logger.info(f"Received listing with {len(lines)} entries")
    return lines


def consume_file_response(data_channel, control, requested_filename: str,
                          resolver: CollisionResolver,
                          echo: Callable[[str], None] = print,
                          cancel_event: Optional[threading.Event] = None) -> FileResult:
    first = data_channel.read_line()
    if first is None:
        raise ProtocolError("Data connection closed before the file response started")

    if first == Sentinel.BAD:
        errors = []

        def surface(line):
            errors.append(line)
            echo(line)

        read_until_done(data_channel, surface, "error message")
        logger.warning(f"Server could not send {requested_filename!r}: {' '.join(errors)}")
        return FileResult(FileResult.FAILED, lines=errors)

    # Servers that announce success with the good sentinel send it as a marker;
    # anything else on the first line is already file content.
    pending = [] if first == Sentinel.GOOD else [first]

    try:
        decision = resolver.resolve(requested_filename)
    except EOFError:
        logger.warning("Input closed while resolving the save name, cancelling")
        decision = SaveDecision.cancel()

    # an interrupt during the prompt must not touch the local file
    if cancel_event is not None and cancel_event.is_set():
        raise SessionInterrupted("Interrupted while choosing where to save the file")

    if decision.is_cancel:
        control.send_line(Sentinel.CANCEL)
        echo("File transfer cancelled.")
        logger.info(f"Transfer of {requested_filename!r} cancelled by the user")
        return FileResult(FileResult.CANCELLED)

    path = os.path.join(resolver.directory, decision.name)
    try:
        out = open(path, "w", encoding="utf-8", newline="")
    except OSError as e:
        raise TransferIOError(f"Could not open {path!r} for writing: {e}") from e

    with out:
        if decision.name == os.path.basename(requested_filename):
            echo(f'Receiving "{requested_filename}" from the server')
        else:
            echo(f'Receiving "{requested_filename}" as "{decision.name}" from the server')
        control.send_line(Sentinel.READY)

        written = 0

        def write(line):
            nonlocal written
            try:
                out.write(line + "\n")
            except OSError as e:
                raise TransferIOError(f"Error writing to {path!r}: {e}") from e
            written += 1

        for line in pending:
            write(line)
        read_until_done(data_channel, write, "file")

    echo("File transfer complete.")
    logger.info(f"Saved {written} lines to {path}")
    return FileResult(FileResult.RECEIVED, saved_as=path, lines_written=written)
