"""Account details of the signed-in developer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from plumekit.developer.session import (
    DeveloperSession,
    ResponseMeta,
    _field,
    _nested,
    developer_endpoint,
)


@dataclass
class Developer:
    developer_id: str
    person_id: str
    first_name: str
    last_name: str
    ds_first_name: str
    ds_last_name: str
    email: str
    developer_status: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Developer:
        return cls(
            developer_id=_field(data, "developerId", str),
            person_id=_field(data, "personId", str),
            first_name=_field(data, "firstName", str),
            last_name=_field(data, "lastName", str),
            ds_first_name=_field(data, "dsFirstName", str),
            ds_last_name=_field(data, "dsLastName", str),
            email=_field(data, "email", str),
            developer_status=_field(data, "developerStatus", str),
        )


@dataclass
class ViewDeveloperResponse:
    developer: Developer
    meta: ResponseMeta

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ViewDeveloperResponse:
        return cls(
            developer=_nested(data, "developer", Developer.from_dict),
            meta=ResponseMeta.from_dict(data),
        )


def get_account_info(session: DeveloperSession, team_id: str) -> ViewDeveloperResponse:
    """Details of the developer account within a team."""
    response = session.qh_send_request(
        developer_endpoint("/QH65B2/viewDeveloper.action"), {"teamId": team_id}
    )
    return ViewDeveloperResponse.from_dict(response)