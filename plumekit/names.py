"""Name sanitising for the developer service."""

from __future__ import annotations

_INVALID_CHARS = frozenset('\\/:*?"<>|.')


def _is_control(char: str) -> bool:
    code = ord(char)
    return code < 0x20 or 0x7F <= code <= 0x9F


def strip_invalid_name_chars(name: str) -> str:
    """Keep only printable ASCII characters that are allowed in a name."""
    return "".join(
        char
        for char in name
        if char not in _INVALID_CHARS and not _is_control(char) and char.isascii()
    )