"""Provisioning profiles and the entitlements they grant."""

from __future__ import annotations

import copy
import os
import plistlib
import re
from pathlib import Path
from typing import Any
from xml.parsers.expat import ExpatError

from plumekit.errors import ParseError, ProvisioningEntitlementsUnknown
from plumekit.macho import MachO

_TEAM_PREFIX = re.compile(r"^[A-Z0-9]{10}\.")
_KEYCHAIN_GROUPS = "keychain-access-groups"


def _extract_plist(data: bytes) -> Any:
    start = data.find(b"<plist")
    end = data.rfind(b"</plist>")
    if start < 0 or end < 0:
        raise ProvisioningEntitlementsUnknown()
    try:
        return plistlib.loads(data[start : end + 8], fmt=plistlib.FMT_XML)
    except (ValueError, ExpatError) as exc:
        raise ParseError("Provisioning profile is not a valid property list") from exc


def _extract_entitlements(plist: Any) -> dict[str, Any]:
    entitlements = plist.get("Entitlements") if isinstance(plist, dict) else None
    if not isinstance(entitlements, dict):
        raise ProvisioningEntitlementsUnknown()
    return copy.deepcopy(entitlements)


class MobileProvision:
    """A provisioning profile: its raw bytes, property list and entitlements."""

    def __init__(self, provision_data: bytes) -> None:
        self.provision_data = bytes(provision_data)
        self.provisioning_plist = _extract_plist(self.provision_data)
        self.entitlements: dict[str, Any] = _extract_entitlements(self.provisioning_plist)

    @classmethod
    def from_path(cls, path: str | os.PathLike[str]) -> MobileProvision:
        path = Path(path)
        if not path.exists():
            raise ProvisioningEntitlementsUnknown()
        return cls(path.read_bytes())

    @classmethod
    def from_bytes(cls, data: bytes) -> MobileProvision:
        return cls(data)

    def replace_wildcard_in_entitlements(self, new_application_id: str) -> None:
        """Replace '*' in string entitlements and string list items."""
        for key, value in self.entitlements.items():
            if isinstance(value, str):
                self.entitlements[key] = value.replace("*", new_application_id)
            elif isinstance(value, list):
                self.entitlements[key] = [
                    item.replace("*", new_application_id) if isinstance(item, str) else item
                    for item in value
                ]

    def merge_entitlements(self, binary_path: str | os.PathLike[str]) -> None:
        """Take keychain groups from a signed binary, rewritten for this team."""
        binary_entitlements = MachO(binary_path).entitlements
        if binary_entitlements is None:
            raise ProvisioningEntitlementsUnknown()

        other_groups = binary_entitlements.get(_KEYCHAIN_GROUPS)
        if isinstance(other_groups, list):
            self.entitlements[_KEYCHAIN_GROUPS] = list(other_groups)

        groups = self.entitlements.get(_KEYCHAIN_GROUPS)
        if not isinstance(groups, list):
            return
        # com.apple.token is granted by default.
        groups = [g for g in groups if not (isinstance(g, str) and g.startswith("com.apple.token"))]

        team_id = self.entitlements.get("com.apple.developer.team-identifier")
        if isinstance(team_id, str):
            groups = [
                f"{team_id}.{g[11:]}" if isinstance(g, str) and _TEAM_PREFIX.match(g) else g
                for g in groups
            ]
        self.entitlements[_KEYCHAIN_GROUPS] = groups

    def entitlements_as_bytes(self) -> bytes:
        """The entitlements as an XML property list."""
        return plistlib.dumps(self.entitlements, fmt=plistlib.FMT_XML)

    def bundle_id(self) -> str | None:
        """The application identifier without its team prefix."""
        app_id = self.entitlements.get("application-identifier")
        if not isinstance(app_id, str) or not isinstance(self.provisioning_plist, dict):
            return None
        prefixes = self.provisioning_plist.get("ApplicationIdentifierPrefix")
        if not isinstance(prefixes, list) or not prefixes:
            return None
        prefix = prefixes[0]
        if isinstance(prefix, str) and app_id.startswith(prefix):
            return app_id[len(prefix) :].lstrip(".")
        return app_id