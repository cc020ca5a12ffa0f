"""
Wire document parsing.

Maps the JSON documents served by the metadata service onto the data model.
Wire field names are part of the compatibility contract; they are declared
here as pydantic aliases and nowhere else.

Document shapes:
- Version manifest: {"latest": {...}, "versions": [stub, ...]}
- Version: {"assetIndex", "downloads", "id", "libraries", "mainClass",
  "minecraftArguments", "minimumLauncherVersion", "releaseTime", "time", "type"}
- Asset list: {"legacy"?, "objects": {path: {"hash", "size"}}}

Any JSON or shape failure raises MalformedDocumentError.
"""

import logging
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from launchmeta.models.failure import MalformedDocumentError
from launchmeta.models.library import (
    COMMON_ARTIFACT_NAME,
    GroupArtifactVersionId,
    Library,
    Rule,
)
from launchmeta.models.platform import PlatformType
from launchmeta.models.resource import Artifact, Asset, AssetCollection, AssetIndex, Resource
from launchmeta.models.version import (
    LauncherInfo,
    Version,
    VersionManifest,
    VersionStub,
    VersionType,
)

logger = logging.getLogger(__name__)


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)


# =============================================================================
# VERSION MANIFEST
# =============================================================================


class LatestBlock(_WireModel):
    release: str
    snapshot: str


class VersionStubBlock(_WireModel):
    """
    Stub blocks look like this:
    {
      "id": "1.12-pre7",
      "type": "snapshot",
      "time": "2017-06-13T06:57:00+00:00",
      "releaseTime": "2017-05-31T10:56:41+00:00",
      "url": "https://launchermeta.mojang.com/mc/game/.../1.12-pre7.json"
    }
    """

    id: str
    type: VersionType
    time: datetime
    release_time: datetime = Field(alias="releaseTime")
    url: str


class ManifestDocument(_WireModel):
    latest: LatestBlock
    versions: list[VersionStubBlock] = Field(default_factory=list)


# =============================================================================
# VERSION
# =============================================================================


class ResourceBlock(_WireModel):
    url: str
    sha1: str
    size: int


class AssetIndexBlock(ResourceBlock):
    id: str
    total_size: int = Field(alias="totalSize")


class ArtifactBlock(ResourceBlock):
    path: str


class LibraryDownloadsBlock(_WireModel):
    artifact: ArtifactBlock | None = None
    classifiers: dict[str, ArtifactBlock] = Field(default_factory=dict)


class ExtractBlock(_WireModel):
    exclude: list[str] = Field(default_factory=list)


class OSBlock(_WireModel):
    name: str | None = None
    version: str | None = None


class RuleBlock(_WireModel):
    action: Literal["allow", "deny"]
    os: OSBlock | None = None


class LibraryBlock(_WireModel):
    name: str
    extract: ExtractBlock | None = None
    natives: dict[str, str] = Field(default_factory=dict)
    rules: list[RuleBlock] = Field(default_factory=list)
    downloads: LibraryDownloadsBlock | None = None


class VersionDocument(_WireModel):
    asset_index: AssetIndexBlock = Field(alias="assetIndex")
    downloads: dict[str, ResourceBlock] = Field(default_factory=dict)
    id: str
    libraries: list[LibraryBlock] = Field(default_factory=list)
    main_class: str = Field(alias="mainClass")
    minecraft_arguments: str = Field(default="", alias="minecraftArguments")
    minimum_launcher_version: int = Field(alias="minimumLauncherVersion")
    release_time: datetime = Field(alias="releaseTime")
    time: datetime
    type: str


# =============================================================================
# ASSET LIST
# =============================================================================


class AssetBlock(_WireModel):
    hash: str
    size: int


class AssetListDocument(_WireModel):
    legacy: bool = False
    objects: dict[str, AssetBlock] = Field(default_factory=dict)


# =============================================================================
# CONVERSION
# =============================================================================


def _platform_or_none(name: str, context: str) -> PlatformType | None:
    try:
        return PlatformType.from_string(name)
    except ValueError:
        logger.warning(
            "UNKNOWN_PLATFORM_SKIPPED",
            extra={"platform": name, "context": context},
        )
        return None


def _to_rule(block: RuleBlock, library_name: str) -> Rule | None:
    allowed = block.action == "allow"
    if block.os is None:
        return Rule(allowed=allowed)
    if block.os.name is None:
        # Only OS name conditions are modelled (e.g. arch-only blocks are not)
        logger.warning("UNSUPPORTED_RULE_SKIPPED", extra={"library": library_name})
        return None
    platform = _platform_or_none(block.os.name, library_name)
    if platform is None:
        return None
    return Rule.for_os(platform, allowed, block.os.version)


def _to_artifact(name: str, block: ArtifactBlock) -> Artifact:
    return Artifact(
        path=block.path,
        resource=Resource(name=name, url=block.url, hash=block.sha1, size=block.size),
    )


def _to_library(block: LibraryBlock) -> Library:
    builder = Library.Builder(GroupArtifactVersionId.parse(block.name))

    if block.downloads is not None:
        if block.downloads.artifact is not None:
            builder.add_artifact(_to_artifact(COMMON_ARTIFACT_NAME, block.downloads.artifact))
        for classifier, artifact_block in block.downloads.classifiers.items():
            builder.add_artifact(_to_artifact(classifier, artifact_block))

    if block.extract is not None:
        for path in block.extract.exclude:
            builder.exclude_path(path)

    for rule_block in block.rules:
        rule = _to_rule(rule_block, block.name)
        if rule is not None:
            builder.add_rule(rule)

    for platform_name, artifact_name in block.natives.items():
        platform = _platform_or_none(platform_name, block.name)
        if platform is not None:
            builder.specify_native(platform, artifact_name)

    return builder.build()


def _to_stub(block: VersionStubBlock) -> VersionStub:
    return VersionStub(
        id=block.id,
        type=block.type,
        update_time=block.time,
        release_time=block.release_time,
        url=block.url,
    )


def parse_version_manifest(data: bytes | str) -> VersionManifest:
    """
    Parse a version manifest document.

    Args:
        data: Raw JSON document

    Returns:
        Manifest with stubs keyed by id

    Raises:
        MalformedDocumentError: If the document is not a valid manifest
    """
    try:
        document = ManifestDocument.model_validate_json(data)
        return VersionManifest.from_stubs(
            (_to_stub(block) for block in document.versions),
            latest_release_id=document.latest.release,
            latest_snapshot_id=document.latest.snapshot,
        )
    except ValueError as e:
        raise MalformedDocumentError("Malformed version manifest document", detail=str(e)) from e


def parse_version(data: bytes | str, stub: VersionStub) -> Version:
    """
    Parse a version document fetched through a stub.

    The version's id, type and timestamps come from the stub unchanged.

    Args:
        data: Raw JSON document
        stub: Stub the document was fetched through

    Returns:
        Complete version descriptor

    Raises:
        MalformedDocumentError: If the document is not a valid version descriptor
    """
    try:
        document = VersionDocument.model_validate_json(data)
        if document.id != stub.id:
            logger.warning(
                "VERSION_ID_MISMATCH",
                extra={"stub_id": stub.id, "document_id": document.id},
            )

        index_block = document.asset_index
        asset_index = AssetIndex(
            total_size=index_block.total_size,
            resource=Resource(
                name=index_block.id,
                url=index_block.url,
                hash=index_block.sha1,
                size=index_block.size,
            ),
        )
        launcher = LauncherInfo(
            main_class=document.main_class,
            minimum_version=document.minimum_launcher_version,
            arguments=tuple(document.minecraft_arguments.split()),
        )

        builder = Version.Builder(stub, asset_index, launcher)
        for name, block in document.downloads.items():
            builder.add_download(
                Resource(name=name, url=block.url, hash=block.sha1, size=block.size)
            )
        for library_block in document.libraries:
            builder.add_library(_to_library(library_block))
        return builder.build()
    except ValueError as e:
        raise MalformedDocumentError(
            f"Malformed version document for {stub.id}", detail=str(e)
        ) from e


def parse_asset_collection(data: bytes | str) -> AssetCollection:
    """
    Parse an asset list document.

    Raises:
        MalformedDocumentError: If the document is not a valid asset list
    """
    try:
        document = AssetListDocument.model_validate_json(data)
        builder = AssetCollection.Builder(legacy=document.legacy)
        for path, block in document.objects.items():
            builder.add_asset(Asset(path=path, hash=block.hash, size=block.size))
        return builder.build()
    except ValueError as e:
        raise MalformedDocumentError("Malformed asset list document", detail=str(e)) from e
