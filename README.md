# plumekit

plumekit is a library for working with iOS application packages and the
developer services used to provision them.

## What it covers

- **Bundles** (`plumekit.bundle`): `Bundle` opens an `.app`, `.appex` or
  `.framework` directory that holds an `Info.plist`. It reads `name`,
  `executable`, `bundle_identifier`, `version` and `build_version`, and edits
  the plist with `set_info_plist_key`, `set_name`, `set_version`,
  `set_bundle_identifier` and `set_matching_identifier`.
  `collect_nested_bundles` and `collect_bundles_sorted` walk nested bundles
  and loose dylibs, with the deepest ones first. `BundleType` tells whether a
  bundle should carry entitlements or be signed.
- **Packages** (`plumekit.package`): `Package` copies an `.ipa` into its own
  temporary directory and reads the app's `Info.plist` from the archive.
  `get_package_bundle` extracts the app. `load_into_signer_options` returns
  `SignerOptions` that suit the app. It is a context manager that removes its
  staging directory on exit.
- **Signer options** (`plumekit.options`): `SignerOptions`, `SignerFeatures`,
  `SignerEmbedding`, `SignerMode` and `SignerApp`. `SignerApp` recognises
  known apps by bundle identifier and knows where each one keeps its
  pairing file.
- **Provisioning profiles** (`plumekit.provision`): `MobileProvision` loads a
  `.mobileprovision` from a path or from bytes. It replaces wildcards in
  entitlements and merges keychain access groups from a signed binary. It
  also returns the entitlements as an XML plist and gives the profile's
  bundle id.
- **Mach-O entitlements** (`plumekit.macho`): `MachO` and
  `extract_entitlements` read the entitlements embedded in a binary's code
  signature. They use the first architecture of a universal binary.
- **Anisette headers** (`plumekit.anisette`): `AnisetteData` builds request
  headers from a set of base headers and tracks how old they are.
- **Authentication reply helpers** (`plumekit.gsa`): `parse_response`,
  `check_error`, `create_session_key` and `decrypt_cbc`.
- **Name sanitising** (`plumekit.names`): `strip_invalid_name_chars`.
- **Developer services** (`plumekit.developer`): typed requests and replies
  for the following areas:
  - teams (`teams`)
  - account details (`qh_account`)
  - devices (`devices`)
  - certificates (`certs`)
  - app ids (`app_ids`)
  - application groups (`app_groups`)
  - provisioning profiles (`profiles`)
  - bundle ids (`bundle_ids`)
  - capabilities (`capabilities`)

  All of these go through a `DeveloperSession`.

Errors are raised as subclasses of `plumekit.errors.PlumeError`.

## Installation

```
pip install plumekit
```

## Example

```python
from plumekit.package import Package

with Package("MyApp.ipa") as package:
    print(package.name, package.bundle_identifier, package.version)
    options = package.load_into_signer_options()

    bundle = package.get_package_bundle()
    bundle.set_name("My App")
    for nested in bundle.collect_bundles_sorted():
        print(nested.bundle_dir, nested.bundle_type)
```

Developer service calls need a `DeveloperSession` built on a `Transport`.
A `Transport` sends the actual requests:

```python
from plumekit.developer.session import DeveloperSession, Transport
from plumekit.developer.teams import list_teams


class MyTransport(Transport):
    def qh_send_request(self, url, body):
        ...  # send a property-list request, return the reply dictionary

    def v1_send_request(self, url, body, request_type):
        ...  # send a JSON request, return the decoded reply


session = DeveloperSession(MyTransport())
for team in list_teams(session).teams:
    print(team.team_id, team.name)
```

The session adds a fresh `requestId` to every property-list request. It
raises `DeveloperSessionError` when a reply reports a non-zero result code or
a JSON error.

## What it does not do

- It does not sign in to an account or run the SRP login and two-factor
  flow. `plumekit.gsa` only parses and decrypts replies.
- It has no HTTP transport. You supply the `Transport`.
- It does not fetch anisette data from a provider. `AnisetteData` works from
  headers you give it.
- It does not code-sign binaries or bundles.
- It does not talk to devices and does not install apps.
- It has no command-line tool.

## Running the tests

```
pip install -e ".[test]"
pytest
```