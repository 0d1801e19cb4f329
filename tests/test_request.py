import pytest

from ftclient.core.parser import Parser
from ftclient.core.request import Request, RequestKind
from ftclient.errors import ProtocolError


@pytest.mark.parametrize("kind, token", [
    (RequestKind.LIST_SHALLOW, "-l"),
    (RequestKind.LIST_ALL, "-la"),
    (RequestKind.LIST_WITH_SIZE, "-ll"),
    (RequestKind.LIST_RECURSIVE, "-lr"),
])
def test_listing_requests_serialize_and_parse(kind, token):
    request = Request(kind, "localhost", 30021, 30020)
    assert request.to_line() == f"{token} 30020"

    parsed = Parser().parse_request(request.to_line())
    assert parsed.kind is kind
    assert parsed.data_port == 30020
    assert parsed.filename is None


def test_get_request_serializes_filename_between_command_and_port():
    request = Request(RequestKind.GET, "localhost", 30021, 30020, "notes/report.txt")
    assert request.to_line() == "-g notes/report.txt 30020"

    parsed = Parser().parse_request(request.to_line())
    assert parsed.kind is RequestKind.GET
    assert parsed.filename == "notes/report.txt"
    assert parsed.data_port == 30020


def test_filename_must_match_kind():
    with pytest.raises(ValueError):
        Request(RequestKind.GET, "localhost", 30021, 30020)
    with pytest.raises(ValueError):
        Request(RequestKind.LIST_ALL, "localhost", 30021, 30020, "a.txt")


def test_request_is_immutable():
    request = Request(RequestKind.LIST_SHALLOW, "localhost", 30021, 30020)
    with pytest.raises(Exception):
        request.data_port = 1


def test_from_token():
    assert RequestKind.from_token("-lr") is RequestKind.LIST_RECURSIVE
    with pytest.raises(ValueError):
        RequestKind.from_token("-x")
    assert RequestKind.GET.is_listing is False
    assert RequestKind.LIST_ALL.is_listing is True


@pytest.mark.parametrize("line", ["", "-l", "-x 30020", "-l abc", "-g 30020", "-l extra 30020"])
def test_parse_request_rejects_malformed_lines(line):
    with pytest.raises(ProtocolError):
        Parser().parse_request(line)


def test_acknowledgement():
    parser = Parser()
    assert parser.parse_acknowledgement("\\good").accepted is True

    ack = parser.parse_acknowledgement("Error: invalid command")
    assert ack.accepted is False
    assert ack.message == "Error: invalid command"

    with pytest.raises(ProtocolError):
        parser.parse_acknowledgement(None)
