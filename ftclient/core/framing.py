import socket
import logging
import threading
from typing import Optional

from ..errors import SessionInterrupted

logger = logging.getLogger(__name__)


class LineChannel:
    """
    Newline framing over a connected TCP socket.

    Reads block until a full line arrives, but wake up every `poll_interval`
    seconds to check `cancel_event` so an interrupted session never stays
    stuck in recv().
    """

    def __init__(self, sock: socket.socket, name: str = "channel",
                 cancel_event: Optional[threading.Event] = None,
                 poll_interval: float = 0.5, encoding: str = "utf-8"):
        self.sock = sock
        self.name = name
        self.cancel_event = cancel_event or threading.Event()
        self.poll_interval = poll_interval
        self.encoding = encoding
        self._buffer = b""
        self._eof = False
        self.sock.settimeout(poll_interval)

    def send_line(self, line: str):
        logger.debug(f"[{self.name}] → SEND: {line}")
        self.sock.sendall((line + "\n").encode(self.encoding))

    def read_line(self) -> Optional[str]:
        """Returns the next line without its terminator, or None at end of stream."""
        while b"\n" not in self._buffer:
            if self._eof:
                return self._take_remainder()
            chunk = self._recv_chunk()
            if not chunk:
                self._eof = True
                continue
            self._buffer += chunk

        raw, self._buffer = self._buffer.split(b"\n", 1)
        line = raw.decode(self.encoding, errors="replace").rstrip("\r")
        logger.debug(f"[{self.name}] ← RECV: {line}")
        return line

    def _take_remainder(self) -> Optional[str]:
        # an unterminated trailing fragment still counts as a line
        if not self._buffer:
            return None
        raw, self._buffer = self._buffer, b""
        return raw.decode(self.encoding, errors="replace").rstrip("\r")

    def _recv_chunk(self, chunk_size: int = 4096) -> bytes:
        while True:
            if self.cancel_event.is_set():
                raise SessionInterrupted(f"Interrupted while reading from the {self.name} connection")
            try:
                return self.sock.recv(chunk_size)
            except socket.timeout:
                continue
            except OSError:
                if self.cancel_event.is_set():
                    raise SessionInterrupted(f"Interrupted while reading from the {self.name} connection")
                raise

    def close(self):
        try:
            self.sock.close()
        except OSError:
            pass
