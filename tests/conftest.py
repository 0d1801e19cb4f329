import socket
import threading

import pytest

from ftclient.config import ClientConfig
from ftclient.core.request import Sentinel


class FakeDataChannel:
    """Bounded scripted data channel: returns None once the lines run out."""

    def __init__(self, lines):
        self.lines = list(lines)
        self.reads = 0

    def read_line(self):
        self.reads += 1
        if not self.lines:
            return None
        return self.lines.pop(0)


class RecordingControl:
    def __init__(self):
        self.sent = []

    def send_line(self, line):
        self.sent.append(line)


def free_port():
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


class FakeServer(threading.Thread):
    """
    Loopback stand-in for the real server. `script(server, request_line)` runs
    after the request is read and decides what to do with the connections.
    """

    def __init__(self, script):
        super().__init__(daemon=True)
        self.script = script
        self.listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self.listener.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self.listener.bind(("127.0.0.1", 0))
        self.listener.listen(1)
        self.port = self.listener.getsockname()[1]
        self.events = []
        self.control_lines = []
        self.ready_seen = threading.Event()
        self.error = None
        self.control = None
        self.control_file = None

    def run(self):
        try:
            self.listener.settimeout(5)
            self.control, _ = self.listener.accept()
            self.control.settimeout(5)
            self.control_file = self.control.makefile("r", encoding="utf-8", newline="\n")
            request_line = self.read_control()
            self.script(self, request_line)
        except Exception as e:
            self.error = e
        finally:
            if self.control_file is not None:
                self.control_file.close()
            if self.control is not None:
                self.control.close()
            self.listener.close()

    def read_control(self):
        line = self.control_file.readline()
        if not line:
            self.events.append("control-eof")
            return None
        line = line.rstrip("\n")
        self.control_lines.append(line)
        self.events.append(f"control:{line}")
        if line == Sentinel.READY:
            self.ready_seen.set()
        return line

    def send_control(self, line):
        self.control.sendall((line + "\n").encode("utf-8"))

    def drain_control(self):
        while self.read_control() is not None:
            pass

    def open_data(self, port):
        sock = socket.create_connection(("127.0.0.1", port), timeout=5)
        self.events.append("data-connected")
        return sock

    def finish(self, timeout=10):
        self.join(timeout)
        assert not self.is_alive(), "fake server did not finish"
        if self.error is not None:
            raise self.error


def send_lines(sock, lines):
    sock.sendall("".join(line + "\n" for line in lines).encode("utf-8"))


@pytest.fixture
def config(tmp_path):
    return ClientConfig(connect_timeout=5.0, poll_interval=0.05, download_dir=str(tmp_path))


@pytest.fixture
def echoed():
    return []
