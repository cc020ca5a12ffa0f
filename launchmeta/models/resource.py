"""
Downloadable objects: resources, library artifacts, and game assets.

All models are frozen (immutable after construction).
"""

from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import PurePosixPath, PureWindowsPath


@dataclass(frozen=True, slots=True)
class Resource:
    """
    Common attributes of a downloadable object.

    Attributes:
        name: String used to uniquely reference the resource
        url: Location to retrieve the resource data from
        hash: SHA-1 hash of the resource's contents
        size: Size of the resource in bytes
    """

    name: str
    url: str
    hash: str
    size: int


@dataclass(frozen=True, slots=True)
class Artifact:
    """
    File belonging to a library, bound to a local install path.

    INVARIANT: path is relative. Absolute paths are rejected.

    Attributes:
        path: Where the artifact is stored locally, relative to the library root
        resource: Information for retrieving the artifact
    """

    path: str
    resource: Resource

    def __post_init__(self) -> None:
        if PurePosixPath(self.path).is_absolute() or PureWindowsPath(self.path).is_absolute():
            raise ValueError(f"Artifact path must be relative: {self.path!r}")

    @property
    def name(self) -> str:
        return self.resource.name


@dataclass(frozen=True, slots=True)
class Asset:
    """
    A single game content object.

    Attributes:
        path: Where the asset is stored locally
        hash: SHA-1 hash of the asset's contents
        size: Size of the asset in bytes
    """

    path: str
    hash: str
    size: int


@dataclass(frozen=True, slots=True)
class AssetIndex:
    """
    Pointer to the full asset list of a version.

    Attributes:
        total_size: Combined size of all assets in bytes
        resource: Information for retrieving the asset list document
    """

    total_size: int
    resource: Resource


@dataclass(frozen=True, slots=True)
class AssetCollection:
    """
    Set of assets needed to run the game.

    INVARIANT: No two assets share an install path.

    Attributes:
        assets: All assets in the collection (order is irrelevant)
        legacy: True when the legacy asset layout must be used
    """

    assets: frozenset[Asset] = field(default_factory=frozenset)
    legacy: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.assets, frozenset):
            object.__setattr__(self, "assets", frozenset(self.assets))
        paths = {asset.path for asset in self.assets}
        if len(paths) != len(self.assets):
            raise ValueError("Asset collection contains duplicate install paths")

    def __iter__(self) -> Iterator[Asset]:
        return iter(self.assets)

    def __len__(self) -> int:
        return len(self.assets)

    def __contains__(self, item: object) -> bool:
        return item in self.assets

    def total_size(self) -> int:
        """Combined size of every asset in bytes."""
        return sum(asset.size for asset in self.assets)

    class Builder:
        """Accumulates assets, then produces an AssetCollection."""

        def __init__(self, legacy: bool = False) -> None:
            self.legacy = legacy
            self._assets: list[Asset] = []

        def add_asset(self, asset: Asset) -> "AssetCollection.Builder":
            self._assets.append(asset)
            return self

        def build(self) -> "AssetCollection":
            return AssetCollection(assets=frozenset(self._assets), legacy=self.legacy)
