"""Exceptions raised by the package."""

from __future__ import annotations


class PlumeError(Exception):
    """Base class for every error the package raises."""

    message = "Plume error"

    def __str__(self) -> str:
        if self.args:
            return str(self.args[0])
        return self.message


class BundleInfoPlistMissing(PlumeError):
    """A bundle directory has no Info.plist."""

    message = "Info.plist not found"


class PackageInfoPlistMissing(PlumeError):
    """An archive holds no app Info.plist under Payload/."""

    message = "Info.plist not found"


class ProvisioningEntitlementsUnknown(PlumeError):
    """Entitlements could not be found or read."""

    message = "Entitlements not found"


class DeveloperSessionError(PlumeError):
    """The developer service answered with an error code."""

    def __init__(self, code: int, message: str) -> None:
        super().__init__(f"Developer session error {code}: {message}")
        self.code = code
        self.detail = message


class DeveloperSessionRequestFailed(PlumeError):
    """A request to the developer service could not be completed."""

    message = "Request to developer session failed"


class AuthSrpError(PlumeError):
    """Authentication failed with a status code and message."""

    def __init__(self, code: int, message: str) -> None:
        super().__init__(f"Authentication SRP error {code}: {message}")
        self.code = code
        self.detail = message


class ExtraStepRequired(PlumeError):
    """Authentication needs a step this client cannot perform."""

    def __init__(self, step: str) -> None:
        super().__init__(f"Authentication extra step required: {step}")
        self.step = step


class Bad2faCode(PlumeError):
    """The two-factor code was rejected."""

    message = "Bad 2FA code"


class ParseError(PlumeError):
    """A response could not be parsed."""

    message = "Failed to parse"