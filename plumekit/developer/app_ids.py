"""App ids of a team, through the property-list service."""

from __future__ import annotations

from dataclasses import dataclass
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
from plumekit.names import strip_invalid_name_chars


@dataclass
class Features:
    """Feature flags enabled for an app id."""

    push: bool
    i_cloud: bool
    in_app_purchase: bool
    game_center: bool
    passbook: bool
    data_protection: str
    home_kit: bool
    cloud_kit_version: int

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Features:
        return cls(
            push=_field(data, "push", bool),
            i_cloud=_field(data, "iCloud", bool),
            in_app_purchase=_field(data, "inAppPurchase", bool),
            game_center=_field(data, "gameCenter", bool),
            passbook=_field(data, "passbook", bool),
            data_protection=_field(data, "dataProtection", str),
            home_kit=_field(data, "homeKit", bool),
            cloud_kit_version=_field(data, "cloudKitVersion", int),
        )


@dataclass
class AppID:
    app_id_id: str
    name: str
    app_id_platform: str
    prefix: str
    identifier: str
    is_wild_card: bool
    is_duplicate: bool
    features: Features
    enabled_features: list[str] | None
    is_dev_push_enabled: bool
    is_prod_push_enabled: bool
    associated_application_groups_count: int | None
    associated_cloud_containers_count: int | None
    associated_identifiers_count: int | None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AppID:
        return cls(
            app_id_id=_field(data, "appIdId", str),
            name=_field(data, "name", str),
            app_id_platform=_field(data, "appIdPlatform", str),
            prefix=_field(data, "prefix", str),
            identifier=_field(data, "identifier", str),
            is_wild_card=_field(data, "isWildCard", bool),
            is_duplicate=_field(data, "isDuplicate", bool),
            features=_nested(data, "features", Features.from_dict),
            enabled_features=_string_list(data, "enabledFeatures", optional=True),
            is_dev_push_enabled=_field(data, "isDevPushEnabled", bool),
            is_prod_push_enabled=_field(data, "isProdPushEnabled", bool),
            associated_application_groups_count=_field(
                data, "associatedApplicationGroupsCount", int, optional=True
            ),
            associated_cloud_containers_count=_field(
                data, "associatedCloudContainersCount", int, optional=True
            ),
            associated_identifiers_count=_field(
                data, "associatedIdentifiersCount", int, optional=True
            ),
        )


@dataclass
class AppIDsResponse:
    app_ids: list[AppID]
    meta: ResponseMeta

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AppIDsResponse:
        return cls(
            app_ids=_nested_list(data, "appIds", AppID.from_dict),
            meta=ResponseMeta.from_dict(data),
        )


@dataclass
class AppIDResponse:
    app_id: AppID
    meta: ResponseMeta

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AppIDResponse:
        return cls(
            app_id=_nested(data, "appId", AppID.from_dict),
            meta=ResponseMeta.from_dict(data),
        )


def list_app_ids(session: DeveloperSession, team_id: str) -> AppIDsResponse:
    response = session.qh_send_request(
        developer_endpoint("/QH65B2/ios/listAppIds.action"), {"teamId": team_id}
    )
    return AppIDsResponse.from_dict(response)


def add_app_id(
    session: DeveloperSession, team_id: str, name: str, identifier: str
) -> AppIDResponse:
    """Register a new app id; the name is sanitised first."""
    response = session.qh_send_request(
        developer_endpoint("/QH65B2/ios/addAppId.action"),
        {
            "teamId": team_id,
            "name": strip_invalid_name_chars(name),
            "identifier": identifier,
        },
    )
    return AppIDResponse.from_dict(response)


def delete_app_id(session: DeveloperSession, team_id: str, app_id_id: str) -> ResponseMeta:
    response = session.qh_send_request(
        developer_endpoint("/QH65B2/ios/deleteAppId.action"),
        {"teamId": team_id, "appIdId": app_id_id},
    )
    return ResponseMeta.from_dict(response)


def update_app_id(
    session: DeveloperSession, team_id: str, app_id_id: str, features: dict[str, Any]
) -> AppIDResponse:
    """Change the features of an app id; feature keys go into the request as given."""
    body: dict[str, Any] = {"teamId": team_id, "appIdId": app_id_id}
    body.update(features)
    response = session.qh_send_request(
        developer_endpoint("/QH65B2/ios/updateAppId.action"), body
    )
    return AppIDResponse.from_dict(response)


def get_app_id(session: DeveloperSession, team_id: str, identifier: str) -> AppID | None:
    """The app id with this bundle identifier, if any."""
    app_ids = list_app_ids(session, team_id).app_ids
    return next((app for app in app_ids if app.identifier == identifier), None)


def ensure_app_id(
    session: DeveloperSession, team_id: str, name: str, identifier: str
) -> AppID:
    """The app id with this bundle identifier, registering it when missing."""
    app_id = get_app_id(session, team_id, identifier)
    if app_id is not None:
        return app_id
    return add_app_id(session, team_id, name, identifier).app_id