"""Bundle ids of a team, through the JSON API."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable

from plumekit.developer.session import (
    DeveloperSession,
    RequestType,
    _field,
    _nested,
    _nested_list,
    developer_endpoint,
)
from plumekit.errors import DeveloperSessionRequestFailed


@dataclass
class BundleIdAttributes:
    identifier: str
    seed_id: str
    has_exclusive_managed_capabilities: bool
    name: str
    bundle_type: str
    wildcard: bool

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BundleIdAttributes:
        return cls(
            identifier=_field(data, "identifier", str),
            seed_id=_field(data, "seedId", str),
            has_exclusive_managed_capabilities=_field(
                data, "hasExclusiveManagedCapabilities", bool
            ),
            name=_field(data, "name", str),
            bundle_type=_field(data, "bundleType", str),
            wildcard=_field(data, "wildcard", bool),
        )


@dataclass
class BundleId:
    id: str
    attributes: BundleIdAttributes

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BundleId:
        return cls(
            id=_field(data, "id", str),
            attributes=_nested(data, "attributes", BundleIdAttributes.from_dict),
        )


@dataclass
class BundleIdsResponse:
    data: list[BundleId]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BundleIdsResponse:
        return cls(data=_nested_list(data, "data", BundleId.from_dict))


@dataclass
class BundleIdResponse:
    data: BundleId

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BundleIdResponse:
        return cls(data=_nested(data, "data", BundleId.from_dict))


def list_bundle_ids(session: DeveloperSession, team: str) -> BundleIdsResponse:
    response = session.v1_send_request(
        developer_endpoint("/v1/bundleIds"),
        {"teamId": team, "urlEncodedQueryParams": "limit=1000"},
        RequestType.GET,
    )
    return BundleIdsResponse.from_dict(response)


def get_bundle_id(session: DeveloperSession, team: str, identifier: str) -> BundleId | None:
    """The bundle id with this identifier, if any."""
    bundle_ids = list_bundle_ids(session, team).data
    return next((b for b in bundle_ids if b.attributes.identifier == identifier), None)


def _capability_entry(capability_id: str) -> dict[str, Any]:
    return {
        "type": "bundleIdCapabilities",
        "attributes": {"enabled": True, "settings": []},
        "relationships": {
            "capability": {"data": {"type": "capabilities", "id": capability_id}}
        },
    }


def update_bundle_id(
    session: DeveloperSession, team: str, identifier: str, capabilities: Iterable[str]
) -> BundleIdResponse:
    """Enable the given capabilities on a bundle id."""
    bundle_id = get_bundle_id(session, team, identifier)
    if bundle_id is None:
        raise DeveloperSessionRequestFailed()

    attributes = bundle_id.attributes
    payload = {
        "data": {
            "type": "bundleIds",
            "id": bundle_id.id,
            "attributes": {
                "identifier": attributes.identifier,
                "seedId": attributes.seed_id,
                "teamId": team,
                "name": attributes.name,
                "wildcard": attributes.wildcard,
            },
            "relationships": {
                "bundleIdCapabilities": {
                    "data": [_capability_entry(cap) for cap in capabilities]
                }
            },
        }
    }
    response = session.v1_send_request(
        developer_endpoint(f"/v1/bundleIds/{bundle_id.id}"), payload, RequestType.PATCH
    )
    return BundleIdResponse.from_dict(response)