import enum
from dataclasses import dataclass
from typing import Optional


class Sentinel:
    """
    Reserved protocol lines, as they appear on the wire.

    Every sentinel carries a leading backslash (`\\good`, not `good`); that is
    what deployed servers send and match against, so the bare words are
    never valid sentinels.
    """

    GOOD = "\\good"
    BAD = "\\bad"
    DONE = "\\done"
    READY = "\\ready"
    CANCEL = "\\cancel"


class RequestKind(enum.Enum):
    LIST_SHALLOW = "-l"
    LIST_ALL = "-la"
    LIST_WITH_SIZE = "-ll"
    LIST_RECURSIVE = "-lr"
    GET = "-g"

    @property
    def token(self) -> str:
        return self.value

    @property
    def is_listing(self) -> bool:
        return self is not RequestKind.GET

    @classmethod
    def from_token(cls, token: str) -> "RequestKind":
        for kind in cls:
            if kind.value == token:
                return kind
        raise ValueError(f"Unknown command token: {token!r}")

    @classmethod
    def tokens(cls):
        return [kind.value for kind in cls]


@dataclass(frozen=True)
class Request:
    """A single validated request. Ports are range-checked by the caller."""

    kind: RequestKind
    host: str
    control_port: int
    data_port: int
    filename: Optional[str] = None

    def __post_init__(self):
        if self.kind is RequestKind.GET and not self.filename:
            raise ValueError("A get request needs a filename")
        if self.kind is not RequestKind.GET and self.filename is not None:
            raise ValueError(f"{self.kind.token} does not take a filename")

    def to_line(self) -> str:
        if self.kind in (RequestKind.LIST_SHALLOW, RequestKind.LIST_ALL,
                         RequestKind.LIST_WITH_SIZE, RequestKind.LIST_RECURSIVE):
            return f"{self.kind.token} {self.data_port}"
        if self.kind is RequestKind.GET:
            return f"{self.kind.token} {self.filename} {self.data_port}"
        raise RuntimeError(f"Developer error: unsupported request kind {self.kind!r}")

    def __str__(self):
        return self.to_line()
