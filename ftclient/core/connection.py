import socket
import logging
import threading
from typing import Optional

from ..errors import ConnectError, SessionInterrupted
from .framing import LineChannel

logger = logging.getLogger(__name__)


class ControlConnectionManager:
    def __init__(self, host: str, port: int, timeout: float = 10.0,
                 cancel_event: Optional[threading.Event] = None, poll_interval: float = 0.5):
        self.host = host
        self.port = port
        self.timeout = timeout
        self.cancel_event = cancel_event or threading.Event()
        self.poll_interval = poll_interval
        self.channel: Optional[LineChannel] = None

    @property
    def is_open(self) -> bool:
        return self.channel is not None

    def connect(self):
        if self.channel is not None:
            raise RuntimeError("Connection already established.")
        sock = None
        try:
            logger.info(f"Connecting to {self.host}:{self.port} (timeout={self.timeout}s)")
            sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
            sock.settimeout(self.timeout)
            sock.connect((self.host, self.port))
        except (socket.timeout, ConnectionRefusedError, OSError) as e:
            logger.error(f"✗ Failed to connect to {self.host}:{self.port} - {e}")
            if sock is not None:
                sock.close()
            raise ConnectError(self.host, self.port, str(e))

        self.channel = LineChannel(sock, "control", self.cancel_event, self.poll_interval)
        logger.info(f"✓ Connected to {self.host}:{self.port}")

    def disconnect(self) -> bool:
        """Closes the connection. Returns False when there was nothing to close."""
        channel, self.channel = self.channel, None
        if channel is None:
            return False
        try:
            logger.info(f"Closing connection to {self.host}:{self.port}")
            channel.sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            pass
        channel.close()
        logger.info(f"✓ Disconnected from {self.host}:{self.port}")
        return True

    def _require_channel(self):
        if self.channel is None:
            # stop(True) closes the connection under a blocked session
            if self.cancel_event.is_set():
                raise SessionInterrupted("Control connection closed by an interrupt")
            raise RuntimeError("No connection established.")

    def send_line(self, line: str):
        self._require_channel()
        self.channel.send_line(line)

    def receive_line(self) -> Optional[str]:
        self._require_channel()
        return self.channel.read_line()
