[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "plumekit"
version = "1.2.1"
description = "Tools for preparing iOS app bundles for signing and talking to developer provisioning services"
requires-python = ">=3.10"
dependencies = [
    "cryptography",
]
keywords = ["ios", "ipa", "provisioning", "mobileprovision", "entitlements", "bundle"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["plumekit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
