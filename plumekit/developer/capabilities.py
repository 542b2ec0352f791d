"""Capabilities that can be enabled on bundle ids."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from plumekit.developer.session import (
    DeveloperSession,
    RequestType,
    _field,
    _nested,
    _nested_list,
    developer_endpoint,
)


@dataclass
class CapabilityEntitlement:
    profile_key: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CapabilityEntitlement:
        return cls(profile_key=_field(data, "profileKey", str))


@dataclass
class CapabilityAttributes:
    entitlements: list[CapabilityEntitlement] | None
    supports_wildcard: bool

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CapabilityAttributes:
        entitlements = (
            None
            if data.get("entitlements") is None
            else _nested_list(data, "entitlements", CapabilityEntitlement.from_dict)
        )
        return cls(
            entitlements=entitlements,
            supports_wildcard=_field(data, "supportsWildcard", bool),
        )


@dataclass
class Capability:
    id: str
    attributes: CapabilityAttributes

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Capability:
        return cls(
            id=_field(data, "id", str),
            attributes=_nested(data, "attributes", CapabilityAttributes.from_dict),
        )


@dataclass
class CapabilitiesResponse:
    data: list[Capability]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CapabilitiesResponse:
        return cls(data=_nested_list(data, "data", Capability.from_dict))


def list_capabilities(session: DeveloperSession, team: str) -> CapabilitiesResponse:
    """All iOS capabilities available to a team."""
    response = session.v1_send_request(
        developer_endpoint("/v1/capabilities"),
        {"teamId": team, "urlEncodedQueryParams": "filter[platform]=IOS"},
        RequestType.GET,
    )
    return CapabilitiesResponse.from_dict(response)