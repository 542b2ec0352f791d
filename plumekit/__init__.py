"""Bundles, packages, provisioning profiles and developer-service requests for iOS apps."""

__version__ = "1.2.1"