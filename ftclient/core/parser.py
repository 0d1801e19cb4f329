import logging
from typing import Optional

from ..errors import ProtocolError
from .request import RequestKind, Sentinel

logger = logging.getLogger(__name__)


class Acknowledgement:
    def __init__(self, accepted: bool, message: str):
        self.accepted = accepted
        self.message = message

    def __repr__(self):
        return f"Acknowledgement(accepted={self.accepted}, message={self.message!r})"


class ParsedRequest:
    """Request line as the server side of the protocol reads it."""

    def __init__(self, kind: RequestKind, data_port: int, filename: Optional[str] = None):
        self.kind = kind
        self.data_port = data_port
        self.filename = filename

    def __repr__(self):
        return f"ParsedRequest(kind={self.kind}, data_port={self.data_port}, filename={self.filename!r})"


class Parser:
    def parse_acknowledgement(self, line: Optional[str]) -> Acknowledgement:
        if line is None:
            raise ProtocolError("Control connection closed before the request was acknowledged")

        # A rejection replaces the sentinel, so the whole line is the server's message
        if line == Sentinel.GOOD:
            logger.debug("Request accepted")
            return Acknowledgement(True, line)
        logger.debug(f"Request rejected: {line}")
        return Acknowledgement(False, line)

    def parse_request(self, line: str) -> ParsedRequest:
        """Parses `<cmd> <dataPort>` or `<cmd> <filename> <dataPort>`."""
        parts = line.strip().split(" ")
        if len(parts) < 2:
            raise ProtocolError(f"Malformed request line: {line!r}")

        try:
            kind = RequestKind.from_token(parts[0])
        except ValueError as e:
            raise ProtocolError(str(e)) from e

        try:
            data_port = int(parts[-1])
        except ValueError as e:
            raise ProtocolError(f"Invalid data port in request: {parts[-1]!r}") from e

        if kind is RequestKind.GET:
            if len(parts) < 3:
                raise ProtocolError(f"Get request without a filename: {line!r}")
            filename = " ".join(parts[1:-1])
            return ParsedRequest(kind, data_port, filename)

        if len(parts) != 2:
            raise ProtocolError(f"Unexpected arguments for {kind.token}: {line!r}")
        return ParsedRequest(kind, data_port)
