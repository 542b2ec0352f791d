import time

import pytest

from plumekit.anisette import AnisetteData
from plumekit.errors import DeveloperSessionRequestFailed, ParseError, PlumeError

CLIENT_INFO = "<MacBookPro15,1> <Mac OS X;10.15.2;19C57> <com.apple.akd/1.0 (com.apple.akd/1.0)>"


def _data(age=0.0, **extra):
    headers = {"X-Mme-Client-Info": CLIENT_INFO, "X-Apple-Locale": "en_US", "X-Apple-I-MD": "token"}
    headers.update(extra)
    return AnisetteData(base_headers=headers, generated_at=time.time() - age)


def test_fresh_data():
    data = _data()
    assert data.is_valid()
    assert not data.needs_refresh()


def test_old_data_needs_refresh_but_valid():
    data = _data(age=70)
    assert data.needs_refresh()
    assert data.is_valid()


def test_expired_data_raises():
    with pytest.raises(PlumeError):
        _data(age=95).generate_headers(False, False, False)


def test_client_info_rewritten():
    headers = _data().generate_headers(False, True, False)
    assert headers["X-Mme-Client-Info"] == (
        "<MacBookPro15,1> <Mac OS X;10.15.2;19C57> <com.apple.AuthKit/1 (com.apple.dt.Xcode/3594.4.19)>"
    )


def test_client_info_dropped_when_not_requested():
    headers = _data().generate_headers(False, False, False)
    assert "X-Mme-Client-Info" not in headers
    assert headers["X-Apple-I-MD"] == "token"


def test_app_info_and_cpd_added():
    headers = _data().generate_headers(True, True, True)
    assert headers["X-Apple-App-Info"] == "com.apple.gs.xcode.auth"
    assert headers["bootstrap"] == "true"
    assert headers["loc"] == "en_GB"


def test_missing_client_info_returns_early():
    data = AnisetteData(base_headers={"X-Apple-Locale": "en_US"})
    headers = data.generate_headers(True, True, True)
    assert headers == {"X-Apple-Locale": "en_US"}


def test_malformed_client_info_raises():
    data = AnisetteData(base_headers={"X-Mme-Client-Info": "<only> <two>"})
    with pytest.raises(ParseError):
        data.generate_headers(False, True, False)


def test_to_plist_matches_headers():
    data = _data()
    assert data.to_plist(True, False, True) == data.generate_headers(True, False, True)


def test_get_header_lowercases():
    assert _data().get_header("X-APPLE-LOCALE") == "en_us"


def test_get_header_missing_raises():
    with pytest.raises(DeveloperSessionRequestFailed):
        _data().get_header("x-not-there")