"""Options that control how an app is modified, signed and installed."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto


class SignerMode(Enum):
    """What to do with the app."""

    INSTALL = auto()
    SIGN_AND_INSTALL = auto()
    SIGN_AND_INSTALL_MACOS = auto()
    ADHOC_SIGN_AND_INSTALL = auto()
    EXPORT = auto()


class SignerApp(Enum):
    """Apps that get special treatment while signing."""

    DEFAULT = auto()
    ANTRAG = auto()
    FEATHER = auto()
    PROTOKOLLE = auto()
    ALT_STORE = auto()
    SIDE_STORE = auto()
    LIVE_CONTAINER = auto()
    LIVE_CONTAINER_AND_SIDE_STORE = auto()
    STIK_DEBUG = auto()

    @classmethod
    def from_bundle_identifier(cls, identifier: str | None) -> SignerApp:
        """Recognise an app from its bundle identifier."""
        return _KNOWN_IDENTIFIERS.get(identifier, cls.DEFAULT) if identifier else cls.DEFAULT

    def supports_pairing_file(self) -> bool:
        return self not in (SignerApp.DEFAULT, SignerApp.LIVE_CONTAINER, SignerApp.ALT_STORE)

    def pairing_file_path(self) -> str | None:
        """Where inside the app's documents the pairing file goes, if anywhere."""
        return _PAIRING_PATHS.get(self)


_KNOWN_IDENTIFIERS = {
    "com.kdt.livecontainer": SignerApp.LIVE_CONTAINER,
    "thewonderofyou.syslog": SignerApp.PROTOKOLLE,
    "thewonderofyou.antrag2": SignerApp.ANTRAG,
    "thewonderofyou.Feather": SignerApp.FEATHER,
    "com.SideStore.SideStore": SignerApp.SIDE_STORE,
    "com.rileytestut.AltStore": SignerApp.ALT_STORE,
    "com.stik.js": SignerApp.STIK_DEBUG,
}

_PAIRING_PATHS = {
    SignerApp.ANTRAG: "/Documents/pairingFile.plist",
    SignerApp.FEATHER: "/Documents/pairingFile.plist",
    SignerApp.PROTOKOLLE: "/Documents/pairingFile.plist",
    SignerApp.STIK_DEBUG: "/Documents/pairingFile.plist",
    SignerApp.SIDE_STORE: "/Documents/ALTPairingFile.mobiledevicepairing",
    SignerApp.LIVE_CONTAINER_AND_SIDE_STORE: (
        "/Documents/SideStore/Documents/ALTPairingFile.mobiledevicepairing"
    ),
}


@dataclass
class SignerFeatures:
    """Optional Info.plist tweaks."""

    support_minimum_os_version: bool = False
    support_file_sharing: bool = False
    support_ipad_fullscreen: bool = False
    support_game_mode: bool = False
    support_pro_motion: bool = False
    remove_url_schemes: bool = False


@dataclass
class SignerEmbedding:
    """Embedding options."""

    single_profile: bool = False


@dataclass
class SignerOptions:
    """Settings for the signing process."""

    custom_name: str | None = None
    custom_identifier: str | None = None
    custom_version: str | None = None
    features: SignerFeatures = field(default_factory=SignerFeatures)
    embedding: SignerEmbedding = field(default_factory=SignerEmbedding)
    mode: SignerMode = SignerMode.SIGN_AND_INSTALL
    app: SignerApp = SignerApp.DEFAULT

    @classmethod
    def new_for_app(cls, app: SignerApp) -> SignerOptions:
        """Default options tuned for the given app."""
        settings = cls(app=app)
        if app in (SignerApp.LIVE_CONTAINER, SignerApp.LIVE_CONTAINER_AND_SIDE_STORE):
            settings.embedding.single_profile = True
        return settings