"""Reading entitlements from the code signature of a Mach-O binary."""

from __future__ import annotations

import os
import plistlib
import struct
from pathlib import Path
from typing import Any, Iterable
from xml.parsers.expat import ExpatError

from plumekit.errors import ParseError

_FAT_MAGIC = 0xCAFEBABE
_FAT_MAGIC_64 = 0xCAFEBABF
_MH_MAGIC = 0xFEEDFACE
_MH_MAGIC_64 = 0xFEEDFACF
_LC_CODE_SIGNATURE = 0x1D
_CSMAGIC_EMBEDDED_SIGNATURE = 0xFADE0CC0
_CSMAGIC_EMBEDDED_ENTITLEMENTS = 0xFADE7171
_CSSLOT_ENTITLEMENTS = 5

_APP_GROUPS_KEY = "com.apple.security.application-groups"


def _first_slice(data: bytes) -> bytes:
    """The first architecture of a universal binary, or the data itself."""
    (magic,) = struct.unpack_from(">I", data)
    if magic not in (_FAT_MAGIC, _FAT_MAGIC_64):
        return data
    (count,) = struct.unpack_from(">I", data, 4)
    if count == 0:
        raise ParseError("Universal binary holds no architectures")
    if magic == _FAT_MAGIC:
        _, _, offset, size, _ = struct.unpack_from(">iiIII", data, 8)
    else:
        _, _, offset, size, _, _ = struct.unpack_from(">iiQQII", data, 8)
    if offset + size > len(data):
        raise ParseError("Architecture slice lies outside the file")
    return data[offset : offset + size]


def _code_signature(macho: bytes) -> bytes | None:
    """The raw code signature data of a thin Mach-O, if it has one."""
    for order in ("<", ">"):
        (magic,) = struct.unpack_from(order + "I", macho)
        if magic in (_MH_MAGIC, _MH_MAGIC_64):
            break
    else:
        raise ParseError("Not a Mach-O file")

    offset = 32 if magic == _MH_MAGIC_64 else 28
    (ncmds,) = struct.unpack_from(order + "I", macho, 16)
    for _ in range(ncmds):
        cmd, cmdsize = struct.unpack_from(order + "II", macho, offset)
        if cmd == _LC_CODE_SIGNATURE:
            dataoff, datasize = struct.unpack_from(order + "II", macho, offset + 8)
            if dataoff + datasize > len(macho):
                raise ParseError("Code signature lies outside the binary")
            return macho[dataoff : dataoff + datasize]
        if cmdsize < 8:
            raise ParseError("Malformed load command")
        offset += cmdsize
    return None


def _entitlements_xml(signature: bytes) -> bytes | None:
    magic, _length, count = struct.unpack_from(">III", signature)
    if magic != _CSMAGIC_EMBEDDED_SIGNATURE:
        raise ParseError("Bad code signature magic")
    index = signature[12 : 12 + 8 * count]
    if len(index) != 8 * count:
        raise ParseError("Truncated code signature index")
    for slot, blob_offset in struct.iter_unpack(">II", index):
        if slot != _CSSLOT_ENTITLEMENTS:
            continue
        blob_magic, blob_length = struct.unpack_from(">II", signature, blob_offset)
        if blob_magic != _CSMAGIC_EMBEDDED_ENTITLEMENTS:
            return None
        return signature[blob_offset + 8 : blob_offset + blob_length]
    return None


def extract_entitlements(data: bytes) -> dict[str, Any] | None:
    """Entitlements embedded in the first architecture of a binary, if any."""
    try:
        signature = _code_signature(_first_slice(data))
        if signature is None:
            return None
        xml = _entitlements_xml(signature)
    except struct.error as exc:
        raise ParseError("Truncated Mach-O data") from exc
    if xml is None:
        return None
    try:
        value = plistlib.loads(xml, fmt=plistlib.FMT_XML)
    except (ValueError, ExpatError) as exc:
        raise ParseError("Entitlements are not a valid property list") from exc
    return value if isinstance(value, dict) else None


class MachO:
    """A Mach-O binary and the entitlements it was signed with."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = Path(path)
        self.entitlements: dict[str, Any] | None = extract_entitlements(self.path.read_bytes())

    def app_groups_for_entitlements(self) -> list[str] | None:
        """Application groups named in the entitlements."""
        if self.entitlements is None:
            return None
        groups = self.entitlements.get(_APP_GROUPS_KEY)
        if not isinstance(groups, list):
            return None
        return [group for group in groups if isinstance(group, str)]

    def capabilities_for_entitlements(self, capabilities: Iterable[Any]) -> list[str] | None:
        """Ids of the capabilities whose entitlements the binary uses."""
        if self.entitlements is None:
            return None
        keys = self.entitlements.keys()
        enabled = [
            capability.id
            for capability in capabilities
            if capability.attributes.entitlements is not None
            and any(ent.profile_key in keys for ent in capability.attributes.entitlements)
        ]
        return enabled or None