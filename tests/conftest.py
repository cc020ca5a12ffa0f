import pytest
from factories import FakeProvider, make_artifact, make_stub

from launchmeta.models.library import GroupArtifactVersionId, Library, Rule
from launchmeta.models.platform import PlatformType
from launchmeta.models.version import VersionManifest, VersionType


@pytest.fixture
def manifest() -> VersionManifest:
    return VersionManifest.from_stubs(
        [
            make_stub("17w31a", VersionType.SNAPSHOT),
            make_stub("1.12"),
            make_stub("1.11.2"),
            make_stub("b1.7.3", VersionType.BETA),
        ],
        latest_release_id="1.12",
        latest_snapshot_id="17w31a",
    )


@pytest.fixture
def fake_provider(manifest: VersionManifest) -> FakeProvider:
    return FakeProvider(manifest)


@pytest.fixture
def lwjgl_library() -> Library:
    """Library with a common artifact and per-platform natives."""
    return (
        Library.Builder(GroupArtifactVersionId.parse("org.lwjgl.lwjgl:lwjgl-platform:2.9.4"))
        .add_artifact(make_artifact("artifact"))
        .add_artifact(make_artifact("natives-windows"))
        .add_artifact(make_artifact("natives-linux"))
        .add_artifact(make_artifact("natives-osx"))
        .specify_native(PlatformType.WINDOWS, "natives-windows")
        .specify_native(PlatformType.LINUX, "natives-linux")
        .specify_native(PlatformType.OSX, "natives-osx")
        .exclude_path("META-INF/")
        .build()
    )


@pytest.fixture
def not_on_osx_library() -> Library:
    """Library allowed everywhere except OSX."""
    return (
        Library.Builder(GroupArtifactVersionId.parse("org.lwjgl.lwjgl:lwjgl:2.9.2-nightly"))
        .add_artifact(make_artifact("artifact"))
        .add_rule(Rule(allowed=True))
        .add_rule(Rule.for_os(PlatformType.OSX, allowed=False))
        .build()
    )
