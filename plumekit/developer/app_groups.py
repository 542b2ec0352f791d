"""Application groups of a team."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable

from plumekit.developer.session import (
    DeveloperSession,
    ResponseMeta,
    _field,
    _nested,
    _nested_list,
    developer_endpoint,
)
from plumekit.names import strip_invalid_name_chars


@dataclass
class ApplicationGroup:
    """An application group; ``application_group`` is its service id."""

    application_group: str
    name: str
    status: str
    prefix: str
    identifier: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ApplicationGroup:
        return cls(
            application_group=_field(data, "applicationGroup", str),
            name=_field(data, "name", str),
            status=_field(data, "status", str),
            prefix=_field(data, "prefix", str),
            identifier=_field(data, "identifier", str),
        )


@dataclass
class AppGroupsResponse:
    application_group_list: list[ApplicationGroup]
    meta: ResponseMeta

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AppGroupsResponse:
        return cls(
            application_group_list=_nested_list(
                data, "applicationGroupList", ApplicationGroup.from_dict
            ),
            meta=ResponseMeta.from_dict(data),
        )


@dataclass
class AppGroupResponse:
    application_group: ApplicationGroup
    meta: ResponseMeta

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AppGroupResponse:
        return cls(
            application_group=_nested(data, "applicationGroup", ApplicationGroup.from_dict),
            meta=ResponseMeta.from_dict(data),
        )


def list_app_groups(session: DeveloperSession, team_id: str) -> AppGroupsResponse:
    response = session.qh_send_request(
        developer_endpoint("/QH65B2/ios/listApplicationGroups.action"), {"teamId": team_id}
    )
    return AppGroupsResponse.from_dict(response)


def add_app_group(
    session: DeveloperSession, team_id: str, name: str, identifier: str
) -> AppGroupResponse:
    """Register a new application group; the name is sanitised first."""
    response = session.qh_send_request(
        developer_endpoint("/QH65B2/ios/addApplicationGroup.action"),
        {
            "teamId": team_id,
            "name": strip_invalid_name_chars(name),
            "identifier": identifier,
        },
    )
    return AppGroupResponse.from_dict(response)


def get_app_group(
    session: DeveloperSession, team_id: str, app_group_identifier: str
) -> ApplicationGroup | None:
    """The application group with this identifier, if any."""
    groups = list_app_groups(session, team_id).application_group_list
    return next((group for group in groups if group.identifier == app_group_identifier), None)


def ensure_app_group(
    session: DeveloperSession, team_id: str, name: str, identifier: str
) -> ApplicationGroup:
    """The application group with this identifier, creating it when missing."""
    group = get_app_group(session, team_id, identifier)
    if group is not None:
        return group
    return add_app_group(session, team_id, name, identifier).application_group


def assign_app_group(
    session: DeveloperSession, team_id: str, app_id_id: str, app_group_ids: Iterable[str]
) -> ResponseMeta:
    """Attach application groups to an app id."""
    response = session.qh_send_request(
        developer_endpoint("/QH65B2/ios/assignApplicationGroupToAppId.action"),
        {
            "teamId": team_id,
            "appIdId": app_id_id,
            "applicationGroups": list(app_group_ids),
        },
    )
    return ResponseMeta.from_dict(response)