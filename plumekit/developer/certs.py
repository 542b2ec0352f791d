"""Development certificates of a team."""

from __future__ import annotations

import uuid
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
class CertType:
    certificate_type_display_id: str
    name: str
    platform: str
    permission_type: str
    distribution_method: str
    owner_type: str
    days_overlap: int
    max_active: int

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CertType:
        return cls(
            certificate_type_display_id=_field(data, "certificateTypeDisplayId", str),
            name=_field(data, "name", str),
            platform=_field(data, "platform", str),
            permission_type=_field(data, "permissionType", str),
            distribution_method=_field(data, "distributionMethod", str),
            owner_type=_field(data, "ownerType", str),
            days_overlap=_field(data, "daysOverlap", int),
            max_active=_field(data, "maxActive", int),
        )


@dataclass
class Cert:
    name: str
    certificate_id: str
    serial_number: str
    status: str
    status_code: int
    expiration_date: datetime
    certificate_platform: str | None
    cert_type: CertType | None
    cert_content: bytes
    machine_id: str | None
    machine_name: str | None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Cert:
        return cls(
            name=_field(data, "name", str),
            certificate_id=_field(data, "certificateId", str),
            serial_number=_field(data, "serialNumber", str),
            status=_field(data, "status", str),
            status_code=_field(data, "statusCode", int),
            expiration_date=_field(data, "expirationDate", datetime),
            certificate_platform=_field(data, "certificatePlatform", str, optional=True),
            cert_type=_nested(data, "certType", CertType.from_dict, optional=True),
            cert_content=_field(data, "certContent", bytes),
            machine_id=_field(data, "machineId", str, optional=True),
            machine_name=_field(data, "machineName", str, optional=True),
        )


@dataclass
class Csr:
    cert_request_id: str
    name: str
    status_code: int
    status_string: str
    csr_platform: str
    date_requested_string: str
    date_requested: datetime
    date_created: datetime
    owner_type: str
    owner_name: str
    owner_id: str
    certificate_id: str
    certificate_status_code: int
    cert_request_status_code: int
    certificate_type_display_id: str
    serial_num: str
    serial_num_decimal: str
    type_string: str
    certificate_type: CertType | None
    machine_id: str | None
    machine_name: str | None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Csr:
        return cls(
            cert_request_id=_field(data, "certRequestId", str),
            name=_field(data, "name", str),
            status_code=_field(data, "statusCode", int),
            status_string=_field(data, "statusString", str),
            csr_platform=_field(data, "csrPlatform", str),
            date_requested_string=_field(data, "dateRequestedString", str),
            date_requested=_field(data, "dateRequested", datetime),
            date_created=_field(data, "dateCreated", datetime),
            owner_type=_field(data, "ownerType", str),
            owner_name=_field(data, "ownerName", str),
            owner_id=_field(data, "ownerId", str),
            certificate_id=_field(data, "certificateId", str),
            certificate_status_code=_field(data, "certificateStatusCode", int),
            cert_request_status_code=_field(data, "certRequestStatusCode", int),
            certificate_type_display_id=_field(data, "certificateTypeDisplayId", str),
            serial_num=_field(data, "serialNum", str),
            serial_num_decimal=_field(data, "serialNumDecimal", str),
            type_string=_field(data, "typeString", str),
            certificate_type=_nested(data, "certificateType", CertType.from_dict, optional=True),
            machine_id=_field(data, "machineId", str, optional=True),
            machine_name=_field(data, "machineName", str, optional=True),
        )


@dataclass
class CertsResponse:
    certificates: list[Cert]
    meta: ResponseMeta

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CertsResponse:
        return cls(
            certificates=_nested_list(data, "certificates", Cert.from_dict),
            meta=ResponseMeta.from_dict(data),
        )


@dataclass
class CsrResponse:
    cert_request: Csr
    meta: ResponseMeta

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CsrResponse:
        return cls(
            cert_request=_nested(data, "certRequest", Csr.from_dict),
            meta=ResponseMeta.from_dict(data),
        )


def list_certs(session: DeveloperSession, team_id: str) -> CertsResponse:
    response = session.qh_send_request(
        developer_endpoint("/QH65B2/ios/listAllDevelopmentCerts.action"), {"teamId": team_id}
    )
    return CertsResponse.from_dict(response)


def revoke_cert(session: DeveloperSession, team_id: str, serial_number: str) -> ResponseMeta:
    response = session.qh_send_request(
        developer_endpoint("/QH65B2/ios/revokeDevelopmentCert.action"),
        {"teamId": team_id, "serialNumber": serial_number},
    )
    return ResponseMeta.from_dict(response)


def submit_cert_csr(
    session: DeveloperSession, team_id: str, csr_data: str, machine_name: str
) -> CsrResponse:
    """Submit a certificate signing request under a fresh machine id."""
    response = session.qh_send_request(
        developer_endpoint("/QH65B2/ios/submitDevelopmentCSR.action"),
        {
            "teamId": team_id,
            "csrContent": csr_data,
            "machineId": str(uuid.uuid4()).upper(),
            "machineName": machine_name,
        },
    )
    return CsrResponse.from_dict(response)