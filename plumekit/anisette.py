"""Anisette headers used to authenticate requests."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any

from plumekit.errors import DeveloperSessionRequestFailed, ParseError, PlumeError

_CLIENT_INFO = "X-Mme-Client-Info"
_XCODE_CLIENT = "com.apple.AuthKit/1 (com.apple.dt.Xcode/3594.4.19)"

_APP_INFO_HEADERS = {
    "X-Apple-App-Info": "com.apple.gs.xcode.auth",
    "X-Xcode-Version": "11.2 (11B41)",
}

_CPD_HEADERS = {
    "bootstrap": "true",
    "icscrec": "true",
    "loc": "en_GB",
    "pbe": "false",
    "prkgen": "true",
    "svct": "iCloud",
}


@dataclass
class AnisetteData:
    """Headers from an anisette provider and when they were generated."""

    base_headers: dict[str, str]
    generated_at: float = field(default_factory=time.time)
    config: Any = None

    def _age(self) -> int:
        return max(0, int(time.time() - self.generated_at))

    def needs_refresh(self) -> bool:
        return self._age() > 60

    def is_valid(self) -> bool:
        return self._age() < 90

    def generate_headers(self, cpd: bool, client_info: bool, app_info: bool) -> dict[str, str]:
        """Request headers built from the base headers."""
        if not self.is_valid():
            raise PlumeError("Anisette data has expired")

        headers = dict(self.base_headers)
        old_client_info = headers.pop(_CLIENT_INFO, None)

        if client_info:
            if old_client_info is None:
                return headers
            parts = old_client_info.split("<")
            if len(parts) < 4:
                raise ParseError("Malformed client info header")
            headers[_CLIENT_INFO] = old_client_info.replace(parts[3].split(">")[0], _XCODE_CLIENT)

        if app_info:
            headers.update(_APP_INFO_HEADERS)
        if cpd:
            headers.update(_CPD_HEADERS)
        return headers

    def to_plist(self, cpd: bool, client_info: bool, app_info: bool) -> dict[str, str]:
        return dict(self.generate_headers(cpd, client_info, app_info))

    def get_header(self, header: str) -> str:
        """A header's value, looked up and returned in lower case."""
        headers = {
            key.lower(): value.lower()
            for key, value in self.generate_headers(True, True, True).items()
        }
        try:
            return headers[header.lower()]
        except KeyError:
            raise DeveloperSessionRequestFailed() from None