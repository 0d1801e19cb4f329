"""
Exception hierarchy for ftclient.

FTClientError (base)
├── ConfigError - bad environment / flag value
├── ConnectError - control connection could not be opened (fatal)
├── ProtocolError - unexpected line, missing sentinel, early end of stream
├── TransferIOError - bind/accept failure or local file write failure
└── SessionInterrupted - the session was stopped while blocked on I/O
"""


class FTClientError(Exception):
    """Base exception for all ftclient errors."""


class ConfigError(FTClientError):
    pass


class ConnectError(FTClientError):
    def __init__(self, host: str, port: int, reason: str):
        self.host = host
        self.port = port
        self.reason = reason
        super().__init__(f"Failed to connect to {host}:{port} - {reason}")


class ProtocolError(FTClientError):
    pass


class TransferIOError(FTClientError):
    pass


class SessionInterrupted(FTClientError):
    pass
