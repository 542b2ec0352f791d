"""Devices registered with a team."""

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
    developer_endpoint,
)


@dataclass
class Device:
    device_id: str
    name: str
    device_number: str
    device_platform: str
    status: str
    device_class: str
    expiration_date: datetime | None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Device:
        return cls(
            device_id=_field(data, "deviceId", str),
            name=_field(data, "name", str),
            device_number=_field(data, "deviceNumber", str),
            device_platform=_field(data, "devicePlatform", str),
            status=_field(data, "status", str),
            device_class=_field(data, "deviceClass", str),
            expiration_date=_field(data, "expirationDate", datetime, optional=True),
        )


@dataclass
class DevicesResponse:
    devices: list[Device]
    meta: ResponseMeta

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DevicesResponse:
        return cls(
            devices=_nested_list(data, "devices", Device.from_dict),
            meta=ResponseMeta.from_dict(data),
        )


@dataclass
class DeviceResponse:
    device: Device
    meta: ResponseMeta

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DeviceResponse:
        return cls(
            device=_nested(data, "device", Device.from_dict),
            meta=ResponseMeta.from_dict(data),
        )


def list_devices(session: DeveloperSession, team_id: str) -> DevicesResponse:
    response = session.qh_send_request(
        developer_endpoint("/QH65B2/ios/listDevices.action"), {"teamId": team_id}
    )
    return DevicesResponse.from_dict(response)


def add_device(
    session: DeveloperSession, team_id: str, device_name: str, device_udid: str
) -> DeviceResponse:
    response = session.qh_send_request(
        developer_endpoint("/QH65B2/ios/addDevice.action"),
        {"teamId": team_id, "name": device_name, "deviceNumber": device_udid},
    )
    return DeviceResponse.from_dict(response)


def get_device(session: DeveloperSession, team_id: str, device_udid: str) -> Device | None:
    """The registered device with this UDID, if any."""
    devices = list_devices(session, team_id).devices
    return next((device for device in devices if device.device_number == device_udid), None)


def ensure_device(
    session: DeveloperSession, team_id: str, device_name: str, device_udid: str
) -> Device:
    """The registered device with this UDID, registering it when missing."""
    device = get_device(session, team_id, device_udid)
    if device is not None:
        return device
    return add_device(session, team_id, device_name, device_udid).device