import logging
import threading
from datetime import datetime
from typing import Callable, List, Optional

from ..config import ClientConfig
from ..errors import ConnectError, ProtocolError, SessionInterrupted, TransferIOError
from .connection import ControlConnectionManager
from .data_connection import DataConnectionManager
from .input_source import InputSource, StdinInputSource
from .parser import Parser
from .request import Request, Sentinel
from .resolver import CollisionResolver
from .transfer import FileResult, consume_file_response, consume_listing

logger = logging.getLogger(__name__)


class TransferOutcome:
    LISTED = "listed"
    RECEIVED = "received"
    FAILED = "failed"
    REJECTED = "rejected"
    CANCELLED = "cancelled"
    INTERRUPTED = "interrupted"
    CONNECT_FAILED = "connect failed"

    ERROR_STATUSES = (FAILED, REJECTED, INTERRUPTED, CONNECT_FAILED)

    def __init__(self, status: str, message: str = "", lines: Optional[List[str]] = None,
                 saved_as: Optional[str] = None):
        self.status = status
        self.message = message
        self.lines = lines or []
        self.saved_as = saved_as

    @property
    def is_error(self) -> bool:
        return self.status in self.ERROR_STATUSES

    def __repr__(self):
        return f"TransferOutcome(status={self.status!r}, message={self.message!r})"


class ClientSession:
    """
    Runs one request/response exchange: control connect, request,
    acknowledgement, data rendezvous, framed response, teardown.
    """

    def __init__(self, config: Optional[ClientConfig] = None,
                 input_source: Optional[InputSource] = None,
                 echo: Callable[[str], None] = print,
                 parser: Optional[Parser] = None):
        self.config = config or ClientConfig()
        self.input_source = input_source or StdinInputSource()
        self.echo = echo
        self.parser = parser or Parser()
        self.cancel_event = threading.Event()
        self.control: Optional[ControlConnectionManager] = None
        self.history = []

    def make_request(self, request: Request) -> TransferOutcome:
        """
        Raises ConnectError if the server can't be reached. Every other
        failure is reported and returned as a TransferOutcome.
        """
        self.cancel_event.clear()
        self.control = ControlConnectionManager(
            request.host, request.control_port, self.config.connect_timeout,
            self.cancel_event, self.config.poll_interval,
        )

        try:
            try:
                self.control.connect()
            except ConnectError as e:
                self._record(request, TransferOutcome(TransferOutcome.CONNECT_FAILED, str(e)))
                raise
            outcome = self._exchange(request)
        except SessionInterrupted as e:
            logger.info(f"Session interrupted: {e}")
            outcome = TransferOutcome(TransferOutcome.INTERRUPTED, str(e))
        except ProtocolError as e:
            outcome = self._report_failure("Protocol error", e)
        except TransferIOError as e:
            outcome = self._report_failure("Error receiving data from FTP server", e)
        except OSError as e:
            if self.cancel_event.is_set():
                outcome = TransferOutcome(TransferOutcome.INTERRUPTED, str(e))
            else:
                outcome = self._report_failure("Error making request to FTP server", e)
        finally:
            self.stop(False)

        self._record(request, outcome)
        return outcome

    def _exchange(self, request: Request) -> TransferOutcome:
        self.control.send_line(request.to_line())
        ack = self.parser.parse_acknowledgement(self.control.receive_line())
        if not ack.accepted:
            self.echo(ack.message)
            return TransferOutcome(TransferOutcome.REJECTED, ack.message)
        return self._receive_data(request)

    def _receive_data(self, request: Request) -> TransferOutcome:
        data = DataConnectionManager(request.data_port, cancel_event=self.cancel_event,
                                     poll_interval=self.config.poll_interval)
        try:
            data.listen()
            # the server connects as soon as it reads this line
            self.control.send_line(Sentinel.READY)
            channel = data.accept()

            if request.kind.is_listing:
                self.echo(f"Receiving directory structure from {request.host}:{request.data_port}\n")
                lines = consume_listing(channel, self.echo)
                self.echo("")
                return TransferOutcome(TransferOutcome.LISTED, f"{len(lines)} entries", lines)

            resolver = CollisionResolver(self.input_source, self.config.download_dir, self.echo)
            result = consume_file_response(channel, self.control, request.filename, resolver,
                                           self.echo, self.cancel_event)
            return self._file_outcome(result)
        finally:
            data.close()

    def _file_outcome(self, result: FileResult) -> TransferOutcome:
        if result.status == FileResult.RECEIVED:
            return TransferOutcome(TransferOutcome.RECEIVED, "File transfer complete.",
                                   saved_as=result.saved_as)
        if result.status == FileResult.CANCELLED:
            return TransferOutcome(TransferOutcome.CANCELLED, "File transfer cancelled.")
        return TransferOutcome(TransferOutcome.FAILED, " ".join(result.lines), result.lines)

    def _report_failure(self, prefix: str, error: Exception) -> TransferOutcome:
        message = f"{prefix}: {error}"
        logger.error(message)
        self.echo(message)
        return TransferOutcome(TransferOutcome.FAILED, message)

    def stop(self, is_signal: bool = False):
        """
        Closes the control connection; safe to call any number of times.
        With `is_signal`, blocked reads are woken and the server is told to
        cancel before the connection goes away.
        """
        control = self.control
        if is_signal:
            self.cancel_event.set()
            if control is not None and control.is_open:
                try:
                    control.send_line(Sentinel.CANCEL)
                except (OSError, RuntimeError):
                    pass

        if control is None:
            return
        try:
            if control.disconnect():
                self.echo(f"FTP control connection with {control.host}:{control.port} closed.\n")
        except OSError:
            pass

    def _record(self, request: Request, outcome: TransferOutcome):
        self.history.append({
            "time": datetime.now(),
            "command": request.to_line(),
            "status": outcome.status,
            "message": outcome.message,
            "error": outcome.is_error,
            "lines": list(outcome.lines),
            "saved_as": outcome.saved_as,
        })

    def get_history(self):
        """Return a copy of the history list."""
        return list(self.history)

    def clear_history(self):
        self.history.clear()
