"""Team provisioning profiles."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from plumekit.developer.session import (
    DeveloperSession,
    ResponseMeta,
    _field,
    _nested,
    developer_endpoint,
)


@dataclass
class Profile:
    provisioning_profile_id: str
    name: str
    status: str
    profile_type: str
    distribution_method: str
    pro_pro_platorm: str | None
    uuid: str
    date_expire: datetime
    managing_app: str | None
    app_id_id: str
    encoded_profile: bytes
    filename: str
    is_template_profile: bool
    is_team_profile: bool
    is_free_provisioning_profile: bool | None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Profile:
        return cls(
            provisioning_profile_id=_field(data, "provisioningProfileId", str),
            name=_field(data, "name", str),
            status=_field(data, "status", str),
            profile_type=_field(data, "type", str),
            distribution_method=_field(data, "distributionMethod", str),
            pro_pro_platorm=_field(data, "proProPlatorm", str, optional=True),
            uuid=_field(data, "UUID", str),
            date_expire=_field(data, "dateExpire", datetime),
            managing_app=_field(data, "managingApp", str, optional=True),
            app_id_id=_field(data, "appIdId", str),
            encoded_profile=_field(data, "encodedProfile", bytes),
            filename=_field(data, "filename", str),
            is_template_profile=_field(data, "isTemplateProfile", bool),
            is_team_profile=_field(data, "isTeamProfile", bool),
            is_free_provisioning_profile=_field(
                data, "isFreeProvisioningProfile", bool, optional=True
            ),
        )


@dataclass
class ProfilesResponse:
    provisioning_profile: Profile
    meta: ResponseMeta

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ProfilesResponse:
        return cls(
            provisioning_profile=_nested(data, "provisioningProfile", Profile.from_dict),
            meta=ResponseMeta.from_dict(data),
        )


def get_profile(session: DeveloperSession, team_id: str, app_id_id: str) -> ProfilesResponse:
    """Download the team provisioning profile for an app id."""
    response = session.qh_send_request(
        developer_endpoint("/QH65B2/ios/downloadTeamProvisioningProfile.action"),
        {"teamId": team_id, "appIdId": app_id_id},
    )
    return ProfilesResponse.from_dict(response)