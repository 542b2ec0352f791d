import plistlib

import pytest

from plumekit.bundle import Bundle, BundleType, collect_embedded_bundles
from plumekit.errors import BundleInfoPlistMissing


def make_bundle(path, info=None, fmt=plistlib.FMT_XML):
    path.mkdir(parents=True)
    with (path / "Info.plist").open("wb") as handle:
        plistlib.dump(info if info is not None else {}, handle, fmt=fmt)
    return path


def read_info(path):
    with (path / "Info.plist").open("rb") as handle:
        return plistlib.load(handle)


@pytest.fixture
def app(tmp_path):
    root = make_bundle(
        tmp_path / "Demo.app",
        {"CFBundleIdentifier": "com.example.demo", "CFBundleExecutable": "Demo"},
    )
    make_bundle(
        root / "PlugIns" / "Share.appex",
        {
            "CFBundleIdentifier": "com.example.demo.share",
            "NSExtension": {"NSExtensionAttributes": {"WKAppBundleIdentifier": "com.example.demo.watch"}},
        },
    )
    fw = make_bundle(root / "Frameworks" / "Kit.framework", {"CFBundleIdentifier": "com.example.kit"})
    (fw / "libinner.dylib").write_bytes(b"\0")
    (root / "Frameworks" / "libloose.dylib").write_bytes(b"\0")
    watch = make_bundle(root / "Watch" / "Inner.app", {"CFBundleIdentifier": "com.example.demo.watch"})
    make_bundle(watch / "PlugIns" / "Hidden.appex")
    (root / "notes.txt").write_text("x")
    return root


@pytest.mark.parametrize(
    "ext, kind",
    [
        ("app", BundleType.APP),
        ("appex", BundleType.APP_EXTENSION),
        ("framework", BundleType.FRAMEWORK),
        ("dylib", BundleType.DYLIB),
        ("bundle", BundleType.UNKNOWN),
        ("", BundleType.UNKNOWN),
    ],
)
def test_from_extension(ext, kind):
    assert BundleType.from_extension(ext) is kind


@pytest.mark.parametrize(
    "ext, entitled, signed",
    [
        ("app", True, True),
        ("appex", True, True),
        ("framework", False, True),
        ("dylib", False, True),
        ("bundle", False, False),
    ],
)
def test_type_predicates(ext, entitled, signed):
    kind = BundleType.from_extension(ext)
    assert kind.should_have_entitlements() is entitled
    assert kind.should_be_signed() is signed


def test_missing_info_plist(tmp_path):
    (tmp_path / "Empty.app").mkdir()
    with pytest.raises(BundleInfoPlistMissing):
        Bundle(tmp_path / "Empty.app")


def test_bundle_type_from_directory(app):
    assert Bundle(app).bundle_type is BundleType.APP
    assert Bundle(app / "PlugIns" / "Share.appex").bundle_type is BundleType.APP_EXTENSION


def test_name_falls_back_to_executable(app):
    bundle = Bundle(app)
    assert bundle.name == "Demo"
    assert bundle.executable == "Demo"
    assert bundle.bundle_identifier == "com.example.demo"
    assert bundle.version is None


def test_set_name_and_version_round_trip(app):
    bundle = Bundle(app)
    bundle.set_name("Renamed")
    bundle.set_version("2.5")
    info = read_info(app)
    assert info["CFBundleDisplayName"] == "Renamed"
    assert info["CFBundleName"] == "Renamed"
    assert bundle.name == "Renamed"
    assert bundle.version == "2.5"
    assert bundle.build_version == "2.5"
    assert info["CFBundleExecutable"] == "Demo"


def test_set_bundle_identifier_and_bool_key(app):
    bundle = Bundle(app)
    bundle.set_bundle_identifier("com.example.other")
    bundle.set_info_plist_key("UIFileSharingEnabled", True)
    info = read_info(app)
    assert info["CFBundleIdentifier"] == "com.example.other"
    assert info["UIFileSharingEnabled"] is True


def test_set_matching_identifier_replaces_all_keys(tmp_path):
    path = make_bundle(
        tmp_path / "Ext.appex",
        {
            "CFBundleIdentifier": "com.example.demo.ext",
            "WKCompanionAppBundleIdentifier": "com.example.demo",
            "NSExtension": {"NSExtensionAttributes": {"WKAppBundleIdentifier": "com.example.demo.watch"}},
        },
    )
    Bundle(path).set_matching_identifier("com.example.demo", "com.example.demo.TEAM")
    info = read_info(path)
    assert info["CFBundleIdentifier"] == "com.example.demo.TEAM.ext"
    assert info["WKCompanionAppBundleIdentifier"] == "com.example.demo.TEAM"
    assert info["NSExtension"]["NSExtensionAttributes"]["WKAppBundleIdentifier"] == "com.example.demo.TEAM.watch"


def test_set_matching_identifier_without_match_leaves_file(tmp_path):
    path = make_bundle(tmp_path / "A.app", {"CFBundleIdentifier": "com.example.a"}, fmt=plistlib.FMT_BINARY)
    before = (path / "Info.plist").read_bytes()
    Bundle(path).set_matching_identifier("org.other", "org.new")
    assert (path / "Info.plist").read_bytes() == before


def test_set_matching_identifier_with_match_rewrites_as_xml(tmp_path):
    path = make_bundle(tmp_path / "A.app", {"CFBundleIdentifier": "com.example.a"}, fmt=plistlib.FMT_BINARY)
    Bundle(path).set_matching_identifier("com.example", "org.sample")
    assert (path / "Info.plist").read_bytes().startswith(b"<?xml")
    assert read_info(path)["CFBundleIdentifier"] == "org.sample.a"


def test_collect_nested_bundles(app):
    found = {b.bundle_dir.relative_to(app).as_posix(): b.bundle_type for b in Bundle(app).collect_nested_bundles()}
    assert found == {
        "PlugIns/Share.appex": BundleType.APP_EXTENSION,
        "Frameworks/Kit.framework": BundleType.FRAMEWORK,
        "Frameworks/Kit.framework/libinner.dylib": BundleType.DYLIB,
        "Frameworks/libloose.dylib": BundleType.DYLIB,
        "Watch/Inner.app": BundleType.APP,
    }


def test_dylib_pseudo_bundle_has_no_info(app):
    dylibs = [b for b in collect_embedded_bundles(app) if b.bundle_type is BundleType.DYLIB]
    assert len(dylibs) == 2
    assert all(d.name is None and d.bundle_identifier is None for d in dylibs)
    with pytest.raises(BundleInfoPlistMissing):
        dylibs[0].set_name("x")


def test_collect_bundles_sorted_deepest_first(app):
    root = Bundle(app)
    ordered = root.collect_bundles_sorted()
    depths = [len(b.bundle_dir.parts) for b in ordered]
    assert depths == sorted(depths, reverse=True)
    assert ordered[-1] == root
    assert len(ordered) == len(root.collect_nested_bundles()) + 1


def test_collect_from_missing_directory(tmp_path):
    with pytest.raises(FileNotFoundError):
        collect_embedded_bundles(tmp_path / "absent")