import uuid

import pytest

from plumekit.developer.session import (
    DeveloperSession,
    RequestType,
    ResponseMeta,
    Transport,
    developer_endpoint,
)
from plumekit.errors import DeveloperSessionError, DeveloperSessionRequestFailed, ParseError


class FakeTransport(Transport):
    def __init__(self, qh=None, v1=None, error=None):
        self.qh_response = qh
        self.v1_response = v1
        self.error = error
        self.calls = []

    def qh_send_request(self, url, body):
        self.calls.append((url, body))
        if self.error is not None:
            raise self.error
        return self.qh_response

    def v1_send_request(self, url, body, request_type):
        self.calls.append((url, body, request_type))
        if self.error is not None:
            raise self.error
        return self.v1_response


def meta(**extra):
    data = {
        "creationTimestamp": "2024-01-01T00:00:00Z",
        "resultCode": 0,
        "userLocale": "en_US",
        "protocolVersion": "QH65B2",
        "requestId": "REQ",
        "responseId": "RESP",
    }
    data.update(extra)
    return data


def test_developer_endpoint():
    assert (
        developer_endpoint("/QH65B2/listTeams.action")
        == "https://developerservices2.apple.com/services/QH65B2/listTeams.action"
    )


def test_qh_request_adds_request_id_and_merges_body():
    reply = meta(extra="value")
    transport = FakeTransport(qh=reply)
    session = DeveloperSession(transport)
    result = session.qh_send_request("url", {"teamId": "TEAM"})
    assert result == reply
    url, body = transport.calls[0]
    assert url == "url"
    assert body["teamId"] == "TEAM"
    request_id = body["requestId"]
    assert str(uuid.UUID(request_id)).upper() == request_id


def test_qh_request_without_body_sends_only_request_id():
    transport = FakeTransport(qh=meta())
    DeveloperSession(transport).qh_send_request("url")
    assert set(transport.calls[0][1]) == {"requestId"}


def test_qh_request_error_code_raises():
    transport = FakeTransport(qh=meta(resultCode=35, resultString="Bad team"))
    with pytest.raises(DeveloperSessionError) as info:
        DeveloperSession(transport).qh_send_request("url")
    assert info.value.code == 35
    assert info.value.detail == "Bad team"


def test_qh_request_error_without_message_is_unknown():
    transport = FakeTransport(qh=meta(resultCode=7))
    with pytest.raises(DeveloperSessionError) as info:
        DeveloperSession(transport).qh_send_request("url")
    assert info.value.detail == "Unknown"


def test_qh_transport_failure_is_request_failed():
    transport = FakeTransport(error=OSError("down"))
    with pytest.raises(DeveloperSessionRequestFailed):
        DeveloperSession(transport).qh_send_request("url")


def test_qh_reply_without_meta_is_parse_error():
    transport = FakeTransport(qh={"resultCode": 0})
    with pytest.raises(ParseError):
        DeveloperSession(transport).qh_send_request("url")


def test_v1_request_returns_reply_and_forwards_arguments():
    reply = {"data": []}
    transport = FakeTransport(v1=reply)
    result = DeveloperSession(transport).v1_send_request("url", {"teamId": "T"}, RequestType.GET)
    assert result == reply
    assert transport.calls[0] == ("url", {"teamId": "T"}, RequestType.GET)


def test_v1_empty_errors_list_is_fine():
    reply = {"errors": [], "data": 1}
    assert DeveloperSession(FakeTransport(v1=reply)).v1_send_request("url") == reply


def test_v1_first_error_raised():
    reply = {"errors": [{"status": "409", "detail": "Conflict"}, {"status": "500"}]}
    with pytest.raises(DeveloperSessionError) as info:
        DeveloperSession(FakeTransport(v1=reply)).v1_send_request("url")
    assert info.value.code == 409
    assert info.value.detail == "Conflict"


def test_v1_error_defaults():
    reply = {"errors": [{"status": "not a number"}]}
    with pytest.raises(DeveloperSessionError) as info:
        DeveloperSession(FakeTransport(v1=reply)).v1_send_request("url")
    assert info.value.code == 0
    assert info.value.detail == "Unknown error"


def test_v1_transport_failure_is_request_failed():
    with pytest.raises(DeveloperSessionRequestFailed):
        DeveloperSession(FakeTransport(error=RuntimeError("x"))).v1_send_request("url")


def test_response_meta_from_dict():
    parsed = ResponseMeta.from_dict(meta(pageSize=10, resultString="ok"))
    assert parsed.page_size == 10
    assert parsed.result_string == "ok"
    assert parsed.user_string is None
    assert parsed.protocol_version == "QH65B2"


def test_response_meta_rejects_wrong_type():
    with pytest.raises(ParseError):
        ResponseMeta.from_dict(meta(resultCode="0"))