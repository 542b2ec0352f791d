"""Requests to the developer services and the metadata every reply carries."""

from __future__ import annotations

import re
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, TypeVar

from plumekit.errors import DeveloperSessionError, DeveloperSessionRequestFailed, ParseError

_BASE_URL = "https://developerservices2.apple.com/services"
_STATUS_PATTERN = re.compile(r"[+-]?[0-9]+")
_I64_MIN = -(2**63)
_I64_MAX = 2**63 - 1

T = TypeVar("T")


def developer_endpoint(path: str) -> str:
    """Full URL of a developer services endpoint."""
    return f"{_BASE_URL}{path}"


class RequestType(Enum):
    """HTTP method of a JSON API request."""

    GET = "GET"
    POST = "POST"
    PATCH = "PATCH"


def _field(data: dict[str, Any], key: str, kind: Any, *, optional: bool = False) -> Any:
    """A typed value from a reply; ParseError when missing or of the wrong type."""
    value = data.get(key)
    if value is None:
        if optional:
            return None
        raise ParseError(f"Missing field {key!r}")
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise ParseError(f"Field {key!r} has the wrong type")
    return value


def _nested(
    data: dict[str, Any],
    key: str,
    factory: Callable[[dict[str, Any]], T],
    *,
    optional: bool = False,
) -> T | None:
    value = _field(data, key, dict, optional=optional)
    return None if value is None else factory(value)


def _nested_list(
    data: dict[str, Any],
    key: str,
    factory: Callable[[dict[str, Any]], T],
) -> list[T]:
    values = _field(data, key, list)
    if not all(isinstance(value, dict) for value in values):
        raise ParseError(f"Field {key!r} holds a non-dictionary item")
    return [factory(value) for value in values]


def _string_list(data: dict[str, Any], key: str, *, optional: bool = False) -> list[str] | None:
    values = _field(data, key, list, optional=optional)
    if values is None:
        return None
    if not all(isinstance(value, str) for value in values):
        raise ParseError(f"Field {key!r} holds a non-string item")
    return list(values)


def _parse_status(value: Any) -> int:
    if isinstance(value, str) and _STATUS_PATTERN.fullmatch(value):
        number = int(value)
        if _I64_MIN <= number <= _I64_MAX:
            return number
    return 0


@dataclass
class ResponseMeta:
    """Metadata present in every property-list reply."""

    creation_timestamp: str
    user_string: str | None
    result_string: str | None
    result_code: int
    http_code: int | None
    user_locale: str
    protocol_version: str
    request_id: str
    result_url: str | None
    response_id: str
    page_number: int | None
    page_size: int | None
    total_records: int | None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ResponseMeta:
        return cls(
            creation_timestamp=_field(data, "creationTimestamp", str),
            user_string=_field(data, "userString", str, optional=True),
            result_string=_field(data, "resultString", str, optional=True),
            result_code=_field(data, "resultCode", int),
            http_code=_field(data, "httpCode", int, optional=True),
            user_locale=_field(data, "userLocale", str),
            protocol_version=_field(data, "protocolVersion", str),
            request_id=_field(data, "requestId", str),
            result_url=_field(data, "resultUrl", str, optional=True),
            response_id=_field(data, "responseId", str),
            page_number=_field(data, "pageNumber", int, optional=True),
            page_size=_field(data, "pageSize", int, optional=True),
            total_records=_field(data, "totalRecords", int, optional=True),
        )


class Transport(ABC):
    """Sends authenticated requests on behalf of a signed-in account."""

    @abstractmethod
    def qh_send_request(self, url: str, body: dict[str, Any] | None) -> dict[str, Any]:
        """Send a property-list request and return the reply dictionary."""

    @abstractmethod
    def v1_send_request(
        self, url: str, body: Any, request_type: RequestType | None
    ) -> Any:
        """Send a JSON request and return the decoded reply."""


class DeveloperSession:
    """A session with the developer services, checking every reply for errors."""

    def __init__(self, transport: Transport) -> None:
        self.transport = transport

    def qh_send_request(self, url: str, body: dict[str, Any] | None = None) -> dict[str, Any]:
        """Send a property-list request with a fresh request id."""
        request: dict[str, Any] = {"requestId": str(uuid.uuid4()).upper()}
        if body:
            request.update(body)
        try:
            response = self.transport.qh_send_request(url, request)
        except Exception as exc:
            raise DeveloperSessionRequestFailed() from exc
        if not isinstance(response, dict):
            raise ParseError("Reply is not a dictionary")

        meta = ResponseMeta.from_dict(response)
        if meta.result_code != 0:
            message = meta.result_string if meta.result_string is not None else "Unknown"
            raise DeveloperSessionError(meta.result_code, message)
        return response

    def v1_send_request(
        self,
        url: str,
        body: Any = None,
        request_type: RequestType | None = None,
    ) -> Any:
        """Send a JSON request; the first reported error is raised."""
        try:
            response = self.transport.v1_send_request(url, body, request_type)
        except Exception as exc:
            raise DeveloperSessionRequestFailed() from exc

        errors = response.get("errors") if isinstance(response, dict) else None
        if isinstance(errors, list) and errors:
            first = errors[0] if isinstance(errors[0], dict) else {}
            status = _parse_status(first.get("status"))
            detail = first.get("detail")
            if not isinstance(detail, str):
                detail = "Unknown error"
            raise DeveloperSessionError(status, detail)
        return response