"""Teams the signed-in account belongs to."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from plumekit.developer.session import (
    DeveloperSession,
    ResponseMeta,
    _field,
    _nested,
    _nested_list,
    _string_list,
    developer_endpoint,
)


@dataclass
class TeamMember:
    team_member_id: str
    person_id: int
    first_name: str
    last_name: str
    email: str
    developer_status: str | None
    roles: list[str] | None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TeamMember:
        return cls(
            team_member_id=_field(data, "teamMemberId", str),
            person_id=_field(data, "personId", int),
            first_name=_field(data, "firstName", str),
            last_name=_field(data, "lastName", str),
            email=_field(data, "email", str),
            developer_status=_field(data, "developerStatus", str, optional=True),
            roles=_string_list(data, "roles", optional=True),
        )


@dataclass
class Membership:
    membership_id: str
    membership_product_id: str
    status: str
    in_ios_reset_window: bool | None
    in_renewal_window: bool
    date_start: datetime | None
    platform: str
    delete_devices_on_expiry: bool

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Membership:
        return cls(
            membership_id=_field(data, "membershipId", str),
            membership_product_id=_field(data, "membershipProductId", str),
            status=_field(data, "status", str),
            in_ios_reset_window=_field(data, "inIosResetWindow", bool, optional=True),
            in_renewal_window=_field(data, "inRenewalWindow", bool),
            date_start=_field(data, "dateStart", datetime, optional=True),
            platform=_field(data, "platform", str),
            delete_devices_on_expiry=_field(data, "deleteDevicesOnExpiry", bool),
        )


@dataclass
class TeamProvisionSettings:
    can_developer_role_register_devices: bool
    can_developer_role_add_app_ids: bool
    can_developer_role_update_app_ids: bool

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TeamProvisionSettings:
        return cls(
            can_developer_role_register_devices=_field(
                data, "canDeveloperRoleRegisterDevices", bool
            ),
            can_developer_role_add_app_ids=_field(data, "canDeveloperRoleAddAppIds", bool),
            can_developer_role_update_app_ids=_field(data, "canDeveloperRoleUpdateAppIds", bool),
        )


@dataclass
class Team:
    status: str
    name: str
    team_id: str
    team_type: str
    team_agent: TeamMember | None
    memberships: list[Membership]
    current_team_member: TeamMember
    date_created: datetime | None
    xcode_free_only: bool
    team_provisioning_settings: TeamProvisionSettings

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Team:
        return cls(
            status=_field(data, "status", str),
            name=_field(data, "name", str),
            team_id=_field(data, "teamId", str),
            team_type=_field(data, "type", str),
            team_agent=_nested(data, "teamAgent", TeamMember.from_dict, optional=True),
            memberships=_nested_list(data, "memberships", Membership.from_dict),
            current_team_member=_nested(data, "currentTeamMember", TeamMember.from_dict),
            date_created=_field(data, "dateCreated", datetime, optional=True),
            xcode_free_only=_field(data, "xcodeFreeOnly", bool),
            team_provisioning_settings=_nested(
                data, "teamProvisioningSettings", TeamProvisionSettings.from_dict
            ),
        )


@dataclass
class TeamsResponse:
    teams: list[Team]
    meta: ResponseMeta

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TeamsResponse:
        return cls(
            teams=_nested_list(data, "teams", Team.from_dict),
            meta=ResponseMeta.from_dict(data),
        )


def list_teams(session: DeveloperSession) -> TeamsResponse:
    """All teams of the signed-in account."""
    response = session.qh_send_request(developer_endpoint("/QH65B2/listTeams.action"), None)
    return TeamsResponse.from_dict(response)