"""IPA packages: staging, inspecting and unpacking."""

from __future__ import annotations

import os
import plistlib
import shutil
import tempfile
import uuid
import zipfile
from pathlib import Path
from typing import Any
from xml.parsers.expat import ExpatError

from plumekit.bundle import Bundle
from plumekit.errors import PackageInfoPlistMissing, ParseError
from plumekit.options import SignerApp, SignerOptions


def _is_app_info_plist(entry: str) -> bool:
    return entry.startswith("Payload/") and entry.endswith("/Info.plist") and entry.count("/") == 2


def _read_info_plist(archive: zipfile.ZipFile, entries: list[str]) -> dict[str, Any]:
    name = next((entry for entry in entries if _is_app_info_plist(entry)), None)
    if name is None:
        raise PackageInfoPlistMissing()
    try:
        plist = plistlib.loads(archive.read(name))
    except (ValueError, ExpatError) as exc:
        raise ParseError("Info.plist is not a valid property list") from exc
    if not isinstance(plist, dict):
        raise ParseError("Info.plist is not a dictionary")
    return plist


class Package:
    """A copy of an IPA staged in its own temporary directory."""

    def __init__(self, package_file: str | os.PathLike[str]) -> None:
        stage_name = f"plume_stage_{str(uuid.uuid4()).upper()}"
        self.stage_dir = Path(tempfile.gettempdir()) / stage_name
        self.stage_payload_dir = self.stage_dir / "Payload"
        self.package_file = self.stage_dir / "stage.ipa"
        self.stage_dir.mkdir(parents=True, exist_ok=True)
        try:
            shutil.copyfile(package_file, self.package_file)
            with zipfile.ZipFile(self.package_file) as archive:
                self.archive_entries = archive.namelist()
                self.info_plist = _read_info_plist(archive, self.archive_entries)
        except BaseException:
            self.remove_package_stage()
            raise

    def __enter__(self) -> Package:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.remove_package_stage()

    def get_package_bundle(self) -> Bundle:
        """Unpack the archive and return its app bundle."""
        with zipfile.ZipFile(self.package_file) as archive:
            archive.extractall(self.stage_dir)
        app_dir = next(
            (p for p in sorted(self.stage_payload_dir.iterdir()) if p.is_dir() and p.suffix == ".app"),
            None,
        )
        if app_dir is None:
            raise PackageInfoPlistMissing()
        return Bundle(app_dir)

    def remove_package_stage(self) -> None:
        shutil.rmtree(self.stage_dir, ignore_errors=True)

    def _string(self, key: str) -> str | None:
        value = self.info_plist.get(key)
        return value if isinstance(value, str) else None

    @property
    def name(self) -> str | None:
        for key in ("CFBundleDisplayName", "CFBundleName"):
            value = self._string(key)
            if value is not None:
                return value
        return self.executable

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

    def load_into_signer_options(self) -> SignerOptions:
        """Signer options suited to the app this package holds."""
        if any("SideStoreApp.framework" in entry for entry in self.archive_entries):
            app = SignerApp.LIVE_CONTAINER_AND_SIDE_STORE
        else:
            app = SignerApp.from_bundle_identifier(self.bundle_identifier)
        return SignerOptions.new_for_app(app)