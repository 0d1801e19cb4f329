import socket
import logging
import threading
from typing import Optional

from ..errors import SessionInterrupted, TransferIOError
from .framing import LineChannel

logger = logging.getLogger(__name__)


class DataConnectionManager:
    def __init__(self, port: int, host: str = "", cancel_event: Optional[threading.Event] = None,
                 poll_interval: float = 0.5):
        """
        Client side of the data channel: a listener on `port` that accepts
        exactly one inbound connection from the server.
        """
        self.host = host
        self.port = port
        self.cancel_event = cancel_event or threading.Event()
        self.poll_interval = poll_interval
        self.listen_socket: Optional[socket.socket] = None
        self.channel: Optional[LineChannel] = None

    def listen(self):
        """
        Binds and listens. Must complete before the ready sentinel is sent on
        the control connection.
        """
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        try:
            sock.bind((self.host, self.port))
            sock.listen(1)
        except OSError as e:
            sock.close()
            logger.error(f"Could not listen on data port {self.port}: {e}")
            raise TransferIOError(f"Could not open data port {self.port}: {e}") from e

        sock.settimeout(self.poll_interval)
        self.listen_socket = sock
        logger.info(f"[DATA] Listening on port {self.port}")

    def accept(self) -> LineChannel:
        """Blocks until the server connects, polling the cancel event."""
        if self.listen_socket is None:
            raise RuntimeError("Data listener is not open.")
        if self.channel is not None:
            raise RuntimeError("Data connection already accepted.")

        while True:
            if self.cancel_event.is_set():
                raise SessionInterrupted("Interrupted while waiting for the data connection")
            try:
                conn, addr = self.listen_socket.accept()
                break
            except socket.timeout:
                continue
            except OSError as e:
                logger.error(f"Data connection error: {e}")
                raise TransferIOError(f"Could not accept data connection: {e}") from e

        logger.info(f"[DATA] Connection from {addr[0]}:{addr[1]}")
        self.channel = LineChannel(conn, "data", self.cancel_event, self.poll_interval)
        return self.channel

    def close(self):
        if self.channel is not None:
            self.channel.close()
            self.channel = None
        if self.listen_socket is not None:
            try:
                self.listen_socket.close()
            except OSError:
                pass
            self.listen_socket = None
            logger.info(f"[DATA] Closed data port {self.port}")
