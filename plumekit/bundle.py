"""App bundles on disk: discovery and Info.plist editing."""

from __future__ import annotations

import os
import plistlib
from enum import Enum
from pathlib import Path
from typing import Any
from xml.parsers.expat import ExpatError

from plumekit.errors import BundleInfoPlistMissing

_PLIST_READ_ERRORS = (OSError, ValueError, ExpatError)


class BundleType(Enum):
    """Kinds of bundle found inside an app."""

    APP = "app"
    APP_EXTENSION = "appex"
    FRAMEWORK = "framework"
    DYLIB = "dylib"
    UNKNOWN = "unknown"

    @classmethod
    def from_extension(cls, ext: str) -> BundleType:
        """Map a file extension to a bundle type, UNKNOWN when unrecognised."""
        return _EXTENSIONS.get(ext, cls.UNKNOWN)

    def should_have_entitlements(self) -> bool:
        return self in (BundleType.APP, BundleType.APP_EXTENSION)

    def should_be_signed(self) -> bool:
        return self is not BundleType.UNKNOWN


_EXTENSIONS = {
    "app": BundleType.APP,
    "appex": BundleType.APP_EXTENSION,
    "framework": BundleType.FRAMEWORK,
    "dylib": BundleType.DYLIB,
}


class Bundle:
    """A bundle directory with an Info.plist, or a loose dylib."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.bundle_dir = Path(path)
        info_plist = self.bundle_dir / "Info.plist"
        if not info_plist.exists():
            raise BundleInfoPlistMissing()
        self.bundle_type = BundleType.from_extension(self.bundle_dir.suffix[1:])
        self.info_plist_file: Path | None = info_plist

    @classmethod
    def _dylib(cls, path: Path) -> Bundle:
        bundle = cls.__new__(cls)
        bundle.bundle_dir = path
        bundle.bundle_type = BundleType.DYLIB
        bundle.info_plist_file = None
        return bundle

    def __repr__(self) -> str:
        return f"Bundle({str(self.bundle_dir)!r}, {self.bundle_type.name})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Bundle):
            return NotImplemented
        return (self.bundle_dir, self.bundle_type) == (other.bundle_dir, other.bundle_type)

    def __hash__(self) -> int:
        return hash((self.bundle_dir, self.bundle_type))

    def collect_nested_bundles(self) -> list[Bundle]:
        return collect_embedded_bundles(self.bundle_dir)

    def collect_bundles_sorted(self) -> list[Bundle]:
        """This bundle and all nested ones, deepest first."""
        bundles = self.collect_nested_bundles()
        bundles.append(self)
        bundles.sort(key=lambda b: len(b.bundle_dir.parts))
        bundles.reverse()
        return bundles

    def _load_plist(self) -> Any:
        if self.info_plist_file is None:
            raise BundleInfoPlistMissing()
        with self.info_plist_file.open("rb") as handle:
            return plistlib.load(handle)

    def _save_plist(self, plist: Any) -> None:
        assert self.info_plist_file is not None
        with self.info_plist_file.open("wb") as handle:
            plistlib.dump(plist, handle, fmt=plistlib.FMT_XML)

    def set_info_plist_key(self, key: str, value: Any) -> None:
        plist = self._load_plist()
        if isinstance(plist, dict):
            plist[key] = value
        self._save_plist(plist)

    def set_name(self, new_name: str) -> None:
        self.set_info_plist_key("CFBundleDisplayName", new_name)
        self.set_info_plist_key("CFBundleName", new_name)

    def set_version(self, new_version: str) -> None:
        self.set_info_plist_key("CFBundleShortVersionString", new_version)
        self.set_info_plist_key("CFBundleVersion", new_version)

    def set_bundle_identifier(self, new_identifier: str) -> None:
        self.set_info_plist_key("CFBundleIdentifier", new_identifier)

    def set_matching_identifier(self, old_identifier: str, new_identifier: str) -> None:
        """Replace old_identifier inside every identifier key; write only on change."""
        plist = self._load_plist()
        changed = False

        def replace_in(mapping: dict, key: str) -> None:
            nonlocal changed
            old_value = mapping.get(key)
            if isinstance(old_value, str):
                new_value = old_value.replace(old_identifier, new_identifier)
                if new_value != old_value:
                    mapping[key] = new_value
                    changed = True

        if isinstance(plist, dict):
            replace_in(plist, "CFBundleIdentifier")
            replace_in(plist, "WKCompanionAppBundleIdentifier")
            extension = plist.get("NSExtension")
            if isinstance(extension, dict):
                attributes = extension.get("NSExtensionAttributes")
                if isinstance(attributes, dict):
                    replace_in(attributes, "WKAppBundleIdentifier")

        if changed:
            self._save_plist(plist)

    def _string(self, key: str) -> str | None:
        try:
            plist = self._load_plist()
        except (BundleInfoPlistMissing, *_PLIST_READ_ERRORS):
            return None
        if not isinstance(plist, dict):
            return None
        value = plist.get(key)
        return value if isinstance(value, str) else None

    @property
    def name(self) -> str | None:
        return self._string("CFBundleDisplayName") or self._string("CFBundleName") or self.executable

    @property
    def executable(self) -> str | None:
        return self._string("CFBundleExecutable")

    @property
    def bundle_identifier(self) -> str | None:
        return self._string("CFBundleIdentifier")

    @property
    def version(self) -> str | None:
        return self._string("CFBundleShortVersionString")

    @property
    def build_version(self) -> str | None:
        return self._string("CFBundleVersion")


def collect_embedded_bundles(directory: str | os.PathLike[str]) -> list[Bundle]:
    """Find bundles and dylibs below a directory.

    The contents of nested apps are not searched; other bundles are searched
    recursively, as are plain directories.
    """
    bundles: list[Bundle] = []
    with os.scandir(directory) as entries:
        children = sorted(entries, key=lambda e: e.name)

    for entry in children:
        path = Path(entry.path)
        name = entry.name

        if path.is_file() and name.endswith(".dylib"):
            bundles.append(Bundle._dylib(path))
            continue

        if "." in name:
            try:
                bundle = Bundle(path)
            except BundleInfoPlistMissing:
                pass
            else:
                bundles.append(bundle)
                if bundle.bundle_type is not BundleType.APP:
                    try:
                        bundles.extend(bundle.collect_nested_bundles())
                    except OSError:
                        pass
                continue

        if path.is_dir():
            try:
                bundles.extend(collect_embedded_bundles(path))
            except OSError:
                pass

    return bundles