"""
Metadata provider capability interface.

A provider is the source of truth for version metadata. Structured
operations return parsed models; raw operations return bytes for content
the caller will persist.

INVARIANT: Every operation either returns a complete result or raises a
ProviderError (NotFoundError, TransportError, MalformedDocumentError).
"""

from abc import ABC, abstractmethod

from launchmeta.models.resource import Artifact, Asset, AssetCollection, AssetIndex
from launchmeta.models.version import Version, VersionManifest, VersionStub


class MetadataProvider(ABC):
    """Retrieves version information from a metadata service."""

    @abstractmethod
    async def get_version_manifest(self) -> VersionManifest:
        """Summarized information about all available versions."""

    @abstractmethod
    async def get_version(self, stub: VersionStub) -> Version:
        """Complete version information referenced by a stub."""

    @abstractmethod
    async def get_version_document(self, stub: VersionStub) -> bytes:
        """Raw version document referenced by a stub, for local storage."""

    @abstractmethod
    async def get_asset_list(self, index: AssetIndex) -> AssetCollection:
        """Assets needed for the game to run, as referenced by an index."""

    @abstractmethod
    async def get_asset_list_document(self, index: AssetIndex) -> bytes:
        """Raw asset list document referenced by an index, for local storage."""

    @abstractmethod
    async def get_asset_content(self, asset: Asset) -> bytes:
        """Raw content of one asset."""

    @abstractmethod
    async def get_artifact_content(self, artifact: Artifact) -> bytes:
        """Raw content of one library artifact."""
