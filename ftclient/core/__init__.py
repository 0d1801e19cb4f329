"""
Core client logic.
Includes connection managers, framing, parser, response consumers and the session.
"""

from .connection import ControlConnectionManager
from .data_connection import DataConnectionManager
from .commands import ClientSession, TransferOutcome
from .parser import Parser, Acknowledgement, ParsedRequest
from .request import Request, RequestKind, Sentinel
from .resolver import CollisionResolver, SaveAction, SaveDecision
from .input_source import InputSource, StdinInputSource, ScriptedInputSource

__all__ = [
    "ControlConnectionManager",
    "DataConnectionManager",
    "ClientSession",
    "TransferOutcome",
    "Parser",
    "Acknowledgement",
    "ParsedRequest",
    "Request",
    "RequestKind",
    "Sentinel",
    "CollisionResolver",
    "SaveAction",
    "SaveDecision",
    "InputSource",
    "StdinInputSource",
    "ScriptedInputSource",
]
