"""
Version models: the manifest catalog, stubs, and full version descriptors.

INVARIANTS:
- A Version's id, type and timestamps are copied unchanged from the stub
  that produced it
- Manifest latest-release and latest-snapshot ids resolve to stubs present
  in the manifest
- All models are frozen (immutable after construction)
"""

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from types import MappingProxyType

from launchmeta.models.library import Library
from launchmeta.models.resource import AssetIndex, Resource


class VersionType(str, Enum):
    """Kinds of versions, valued by their wire names."""

    RELEASE = "release"
    SNAPSHOT = "snapshot"
    BETA = "old_beta"
    ALPHA = "old_alpha"

    @classmethod
    def from_string(cls, value: str) -> "VersionType":
        """
        Map a wire type name to a VersionType.

        Raises:
            ValueError: If the name is not a known version type
        """
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"Unknown version type: {value!r}") from None


@dataclass(frozen=True, slots=True)
class VersionStub:
    """
    Brief, addressable reference to a version.

    Attributes:
        id: Unique name of the version (e.g., "1.12")
        type: Release, snapshot, beta or alpha
        update_time: Last time the version was updated (may be newer than release)
        release_time: Time the version was first released
        url: Location of the full version descriptor
    """

    id: str
    type: VersionType
    update_time: datetime
    release_time: datetime
    url: str


@dataclass(frozen=True, slots=True)
class LauncherInfo:
    """
    Startup parameters for the game.

    Attributes:
        main_class: Entry-point class
        minimum_version: Minimum launcher version able to understand the descriptor
        arguments: Command-line tokens. ${VAR} placeholders are substituted by the launcher.
    """

    main_class: str
    minimum_version: int
    arguments: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "arguments", tuple(self.arguments))


@dataclass(frozen=True, slots=True)
class Version:
    """
    Complete descriptor of one release and its dependencies.

    Attributes:
        stub: Stub the descriptor was fetched through
        asset_index: Pointer to the version's asset list
        downloads: Named downloads (client, server, ...)
        libraries: Packages the game depends on, in document order
        launcher: Startup parameters
    """

    stub: VersionStub
    asset_index: AssetIndex
    launcher: LauncherInfo
    downloads: tuple[Resource, ...] = ()
    libraries: tuple[Library, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "downloads", tuple(self.downloads))
        object.__setattr__(self, "libraries", tuple(self.libraries))

    @property
    def id(self) -> str:
        return self.stub.id

    @property
    def type(self) -> VersionType:
        return self.stub.type

    @property
    def update_time(self) -> datetime:
        return self.stub.update_time

    @property
    def release_time(self) -> datetime:
        return self.stub.release_time

    @property
    def url(self) -> str:
        return self.stub.url

    def get_download(self, name: str) -> Resource | None:
        """Named download, e.g. "client"."""
        for download in self.downloads:
            if download.name == name:
                return download
        return None

    class Builder:
        """Accumulates downloads and libraries, then produces a Version."""

        def __init__(
            self, stub: VersionStub, asset_index: AssetIndex, launcher: LauncherInfo
        ) -> None:
            self.stub = stub
            self.asset_index = asset_index
            self.launcher = launcher
            self._downloads: list[Resource] = []
            self._libraries: list[Library] = []

        def add_download(self, download: Resource) -> "Version.Builder":
            self._downloads.append(download)
            return self

        def add_library(self, library: Library) -> "Version.Builder":
            self._libraries.append(library)
            return self

        def build(self) -> "Version":
            return Version(
                stub=self.stub,
                asset_index=self.asset_index,
                launcher=self.launcher,
                downloads=tuple(self._downloads),
                libraries=tuple(self._libraries),
            )


@dataclass(frozen=True, slots=True)
class VersionManifest:
    """
    Catalog of all known versions.

    INVARIANT: latest_release_id and latest_snapshot_id name stubs in the catalog.

    Attributes:
        stubs: Version stubs keyed by id, in document order
        latest_release_id: Id of the newest release
        latest_snapshot_id: Id of the newest snapshot
    """

    stubs: Mapping[str, VersionStub]
    latest_release_id: str
    latest_snapshot_id: str

    def __post_init__(self) -> None:
        if not isinstance(self.stubs, MappingProxyType):
            object.__setattr__(self, "stubs", MappingProxyType(dict(self.stubs)))
        for label, version_id in (
            ("release", self.latest_release_id),
            ("snapshot", self.latest_snapshot_id),
        ):
            if version_id not in self.stubs:
                raise ValueError(f"Latest {label} {version_id!r} is not in the manifest")

    @classmethod
    def from_stubs(
        cls, stubs: Iterable[VersionStub], latest_release_id: str, latest_snapshot_id: str
    ) -> "VersionManifest":
        """
        Build a manifest from a sequence of stubs.

        Raises:
            ValueError: If two stubs share an id, or a latest id is missing
        """
        keyed: dict[str, VersionStub] = {}
        for stub in stubs:
            if stub.id in keyed:
                raise ValueError(f"Duplicate version id in manifest: {stub.id!r}")
            keyed[stub.id] = stub
        return cls(
            stubs=MappingProxyType(keyed),
            latest_release_id=latest_release_id,
            latest_snapshot_id=latest_snapshot_id,
        )

    def __hash__(self) -> int:
        return hash((self.latest_release_id, self.latest_snapshot_id, len(self.stubs)))

    def __iter__(self) -> Iterator[VersionStub]:
        return iter(self.stubs.values())

    def __len__(self) -> int:
        return len(self.stubs)

    def __contains__(self, version_id: object) -> bool:
        return version_id in self.stubs

    def get(self, version_id: str) -> VersionStub | None:
        """Stub with the given id, or None."""
        return self.stubs.get(version_id)

    @property
    def latest_release(self) -> VersionStub:
        return self.stubs[self.latest_release_id]

    @property
    def latest_snapshot(self) -> VersionStub:
        return self.stubs[self.latest_snapshot_id]

    def of_type(self, version_type: VersionType) -> list[VersionStub]:
        """Stubs of one version type, in manifest order."""
        return [stub for stub in self.stubs.values() if stub.type is version_type]

    class Builder:
        """
        Accumulates stubs, then produces a VersionManifest.

        Latest ids may be set explicitly or by flagging a stub as latest
        when adding it; the flag records the stub under its own type.
        """

        def __init__(self) -> None:
            self._stubs: list[VersionStub] = []
            self.latest_release_id: str | None = None
            self.latest_snapshot_id: str | None = None

        def add_version(self, stub: VersionStub, latest: bool = False) -> "VersionManifest.Builder":
            self._stubs.append(stub)
            if latest:
                if stub.type is VersionType.RELEASE:
                    self.latest_release_id = stub.id
                elif stub.type is VersionType.SNAPSHOT:
                    self.latest_snapshot_id = stub.id
            return self

        def set_latest(self, release_id: str, snapshot_id: str) -> "VersionManifest.Builder":
            self.latest_release_id = release_id
            self.latest_snapshot_id = snapshot_id
            return self

        def build(self) -> "VersionManifest":
            if self.latest_release_id is None or self.latest_snapshot_id is None:
                raise ValueError("Manifest requires both a latest release and a latest snapshot")
            return VersionManifest.from_stubs(
                self._stubs, self.latest_release_id, self.latest_snapshot_id
            )
