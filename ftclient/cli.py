import re
import sys
import signal
import logging
import argparse
import threading
from typing import Callable, List, Optional

from .config import ClientConfig
from .errors import ConfigError, ConnectError
from .core import ClientSession, Request, RequestKind, TransferOutcome
from .core.input_source import InputSource, StdinInputSource
from .suggest import get_suggestion

logger = logging.getLogger("ftclient")

MIN_VALID_PORT = 1024
MAX_VALID_PORT = 65535

_HAS_WORD_CHAR = re.compile(r"\w")

_VALUE_OPTIONS = ("--download-dir", "--poll-interval", "--connect-timeout")
_FLAG_OPTIONS = ("-v", "--verbose")


class ArgumentValidator:
    """Validates positional arguments, prompting until each one is usable."""

    def __init__(self, input_source: InputSource, echo: Callable[[str], None] = print):
        self.input_source = input_source
        self.echo = echo

    def text(self, value: str, prompt: str) -> str:
        while not _HAS_WORD_CHAR.search(value):
            value = self.input_source.prompt(f"{prompt}: ")
        return value

    def _port(self, value: str) -> int:
        try:
            port = int(value.strip())
        except ValueError:
            return -1
        return port if MIN_VALID_PORT <= port <= MAX_VALID_PORT else -1

    def control_port(self, value: str) -> int:
        port = self._port(value)
        while port == -1:
            value = self.input_source.prompt(
                f"Enter a valid FTP control port ({MIN_VALID_PORT} - {MAX_VALID_PORT}): ")
            port = self._port(value)
        return port

    def data_port(self, value: str, control_port: int) -> int:
        while True:
            port = self._port(value)
            if port == control_port:
                self.echo("That port is already being used as the control port.")
            elif port != -1:
                return port
            value = self.input_source.prompt(
                f"Enter a valid FTP data port [{MIN_VALID_PORT} - {MAX_VALID_PORT}]: ")

    def command(self, value: str) -> RequestKind:
        tokens = RequestKind.tokens()
        while value not in tokens:
            if value:
                suggestion = get_suggestion(value, tokens)
                if suggestion:
                    self.echo(f"Unknown command {value!r}. Did you mean {suggestion}?")
            value = self.input_source.prompt(
                f"Enter a valid FTP command [{', '.join(tokens[:-1])}, or {tokens[-1]}]: ")
        return RequestKind.from_token(value)

    def build_request(self, positionals: List[str]) -> Request:
        filename = None
        if len(positionals) == 4:
            host, control, command, data = positionals
        elif len(positionals) == 5:
            host, control, command, filename, data = positionals
        else:
            self.echo("Invalid number of arguments.")
            host, control, command, data = "", "", "", ""

        host = self.text(host, "Enter a valid host name")
        control_port = self.control_port(control)
        kind = self.command(command)

        if kind is RequestKind.GET:
            filename = self.text(filename or "", "Enter a valid file name")
        elif filename is not None:
            self.echo(f"Ignoring filename {filename!r}: {kind.token} does not take one.")
            filename = None

        data_port = self.data_port(data, control_port)
        return Request(kind, host, control_port, data_port, filename)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="ftclient",
        description="Request a directory listing or a file from an FTP server.",
        epilog="usage forms: <host> <control_port> <-l|-la|-ll|-lr> <data_port> | "
               "<host> <control_port> -g <filename> <data_port>",
    )
    p.add_argument("positionals", nargs="*", metavar="ARG")
    p.add_argument("--download-dir", help="directory to save received files in")
    p.add_argument("--poll-interval", type=float, help="seconds between cancel checks while blocked")
    p.add_argument("--connect-timeout", type=float, help="seconds allowed for the control connection")
    p.add_argument("-v", "--verbose", action="store_true", help="log protocol traffic")
    return p


def _exit_code(outcome: TransferOutcome) -> int:
    return 2 if outcome.is_error else 0


def main(argv: Optional[List[str]] = None, input_source: Optional[InputSource] = None,
         echo: Callable[[str], None] = print) -> int:
    # leading "-l" style tokens are positionals here, not options
    args, _ = build_parser().parse_known_args(argv)
    positionals = _positionals(argv if argv is not None else sys.argv[1:])

    try:
        config = ClientConfig.from_env()
    except ConfigError as e:
        echo(f"Configuration error: {e}")
        return 2
    if args.download_dir:
        config.download_dir = args.download_dir
    if args.poll_interval:
        config.poll_interval = args.poll_interval
    if args.connect_timeout:
        config.connect_timeout = args.connect_timeout

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else config.log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    input_source = input_source or StdinInputSource()
    try:
        request = ArgumentValidator(input_source, echo).build_request(positionals)
    except (EOFError, KeyboardInterrupt):
        echo("\nNo valid request given.")
        return 2
    session = ClientSession(config, input_source, echo)

    previous = None
    if threading.current_thread() is threading.main_thread():
        def _handle_sigint(signum, frame):
            logger.info("Interrupt received, cancelling the transfer")
            session.stop(True)
        previous = signal.signal(signal.SIGINT, _handle_sigint)

    try:
        outcome = session.make_request(request)
    except ConnectError as e:
        echo(f"Error initiating contact with FTP server: {e.reason}")
        return 1
    finally:
        if previous is not None:
            signal.signal(signal.SIGINT, previous)

    logger.info(f"Request {request} finished: {outcome.status}")
    return _exit_code(outcome)


def _positionals(raw: List[str]) -> List[str]:
    """Everything that is not one of our own options, in the order given."""
    ordered = []
    skip_value = False
    for token in raw:
        if skip_value:
            skip_value = False
            continue
        if token in _VALUE_OPTIONS:
            skip_value = True
            continue
        if token in _FLAG_OPTIONS or token.split("=", 1)[0] in _VALUE_OPTIONS:
            continue
        ordered.append(token)
    return ordered


if __name__ == "__main__":
    raise SystemExit(main())
