"""Helpers for the authentication service's property-list responses."""

from __future__ import annotations

import hashlib
import hmac
import plistlib
from typing import Any
from xml.parsers.expat import ExpatError

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from plumekit.errors import AuthSrpError, ParseError


def parse_response(body: bytes | str) -> dict[str, Any]:
    """The 'Response' dictionary of a service reply."""
    if isinstance(body, str):
        body = body.encode()
    try:
        plist = plistlib.loads(body)
    except (ValueError, ExpatError) as exc:
        raise ParseError("Response is not a valid property list") from exc
    response = plist.get("Response") if isinstance(plist, dict) else None
    if not isinstance(response, dict):
        raise ParseError()
    return response


def check_error(response: dict[str, Any]) -> None:
    """Raise AuthSrpError when the reply carries a non-zero error code."""
    status = response.get("Status")
    if not isinstance(status, dict):
        status = response
    code = status.get("ec")
    if not isinstance(code, int):
        raise ParseError("Response has no error code")
    if code != 0:
        message = status.get("em")
        if not isinstance(message, str):
            raise ParseError("Response has no error message")
        raise AuthSrpError(code, message)


def create_session_key(key: bytes, name: str) -> bytes:
    """HMAC-SHA256 of a label under the SRP session key."""
    return hmac.new(key, name.encode(), hashlib.sha256).digest()


def decrypt_cbc(key: bytes, data: bytes) -> bytes:
    """Decrypt extra data sent after login with keys derived from the session key."""
    extra_data_key = create_session_key(key, "extra data key:")
    extra_data_iv = create_session_key(key, "extra data iv:")[:16]
    decryptor = Cipher(algorithms.AES(extra_data_key), modes.CBC(extra_data_iv)).decryptor()
    unpadder = padding.PKCS7(128).unpadder()
    try:
        padded = decryptor.update(data) + decryptor.finalize()
        return unpadder.update(padded) + unpadder.finalize()
    except ValueError as exc:
        raise ParseError("Could not decrypt data") from exc