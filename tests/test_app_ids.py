import pytest

from plumekit.developer.app_ids import (
    AppID,
    Features,
    add_app_id,
    delete_app_id,
    ensure_app_id,
    get_app_id,
    list_app_ids,
    update_app_id,
)
from plumekit.developer.session import DeveloperSession, Transport
from plumekit.errors import DeveloperSessionRequestFailed, ParseError

META = {
    "creationTimestamp": "2024-01-01T00:00:00Z",
    "resultCode": 0,
    "userLocale": "en_US",
    "protocolVersion": "QH65B2",
    "requestId": "REQ",
    "responseId": "RESP",
}

FEATURES = {
    "push": True,
    "iCloud": False,
    "inAppPurchase": True,
    "gameCenter": True,
    "passbook": False,
    "dataProtection": "complete",
    "homeKit": False,
    "cloudKitVersion": 1,
}


class FakeTransport(Transport):
    def __init__(self, replies):
        self.replies = list(replies)
        self.calls = []

    def qh_send_request(self, url, body):
        self.calls.append((url, body))
        return self.replies.pop(0)

    def v1_send_request(self, url, body, request_type):
        self.calls.append((url, body, request_type))
        return self.replies.pop(0)


def app(identifier, app_id_id):
    return {
        "appIdId": app_id_id,
        "name": "Example",
        "appIdPlatform": "ios",
        "prefix": "ABCDE12345",
        "identifier": identifier,
        "isWildCard": False,
        "isDuplicate": False,
        "features": dict(FEATURES),
        "isDevPushEnabled": False,
        "isProdPushEnabled": False,
    }


def make_session(*replies):
    transport = FakeTransport(replies)
    return DeveloperSession(transport), transport


def test_features_from_dict():
    features = Features.from_dict(FEATURES)
    assert features.i_cloud is False
    assert features.data_protection == "complete"
    assert features.cloud_kit_version == 1


def test_features_wrong_type():
    with pytest.raises(ParseError):
        Features.from_dict({**FEATURES, "push": "yes"})


def test_app_id_optional_fields():
    parsed = AppID.from_dict(
        {**app("com.example.app", "A1"), "enabledFeatures": ["push"], "associatedIdentifiersCount": 2}
    )
    assert parsed.enabled_features == ["push"]
    assert parsed.associated_identifiers_count == 2
    assert parsed.associated_cloud_containers_count is None


def test_list_app_ids():
    session, transport = make_session({**META, "appIds": [app("com.example.app", "A1")]})
    result = list_app_ids(session, "TEAM")
    assert [a.app_id_id for a in result.app_ids] == ["A1"]
    url, body = transport.calls[0]
    assert url == "https://developerservices2.apple.com/services/QH65B2/ios/listAppIds.action"
    assert body["teamId"] == "TEAM"


def test_add_app_id_sanitises_name():
    session, transport = make_session({**META, "appId": app("com.example.app", "A1")})
    result = add_app_id(session, "TEAM", "My:App?", "com.example.app")
    assert result.app_id.identifier == "com.example.app"
    assert transport.calls[0][1]["name"] == "MyApp"


def test_delete_app_id():
    session, transport = make_session(dict(META))
    meta = delete_app_id(session, "TEAM", "A1")
    assert meta.result_code == 0
    url, body = transport.calls[0]
    assert url.endswith("/deleteAppId.action")
    assert body["appIdId"] == "A1"


def test_update_app_id_merges_features():
    session, transport = make_session({**META, "appId": app("com.example.app", "A1")})
    result = update_app_id(session, "TEAM", "A1", {"push": True, "dataProtection": "complete"})
    assert result.app_id.app_id_id == "A1"
    _, body = transport.calls[0]
    assert body["push"] is True
    assert body["dataProtection"] == "complete"
    assert body["teamId"] == "TEAM"


def test_get_app_id_found_and_missing():
    reply = {**META, "appIds": [app("com.example.app", "A1")]}
    session, _ = make_session(reply, reply)
    assert get_app_id(session, "TEAM", "com.example.app").app_id_id == "A1"
    assert get_app_id(session, "TEAM", "com.example.other") is None


def test_ensure_app_id_creates_missing():
    session, transport = make_session(
        {**META, "appIds": []},
        {**META, "appId": app("com.example.new", "A2")},
    )
    result = ensure_app_id(session, "TEAM", "New", "com.example.new")
    assert result.app_id_id == "A2"
    assert len(transport.calls) == 2


def test_ensure_app_id_existing():
    session, transport = make_session({**META, "appIds": [app("com.example.app", "A1")]})
    assert ensure_app_id(session, "TEAM", "App", "com.example.app").app_id_id == "A1"
    assert len(transport.calls) == 1


def test_transport_failure():
    session, _ = make_session()
    with pytest.raises(DeveloperSessionRequestFailed):
        list_app_ids(session, "TEAM")