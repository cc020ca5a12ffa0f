"""Data models for version metadata."""

from launchmeta.models.failure import (
    FailureKind,
    MalformedDocumentError,
    NotFoundError,
    ProviderError,
    TransportError,
)
from launchmeta.models.library import (
    COMMON_ARTIFACT_NAME,
    UNCONDITIONAL,
    Condition,
    GroupArtifactVersionId,
    Library,
    OSCondition,
    Rule,
    UnconditionalCondition,
)
from launchmeta.models.platform import (
    Environment,
    PlatformType,
    current_os_version,
    current_platform,
)
from launchmeta.models.resource import Artifact, Asset, AssetCollection, AssetIndex, Resource
from launchmeta.models.version import (
    LauncherInfo,
    Version,
    VersionManifest,
    VersionStub,
    VersionType,
)

__all__ = [
    # Failures
    "FailureKind",
    "MalformedDocumentError",
    "NotFoundError",
    "ProviderError",
    "TransportError",
    # Libraries and rules
    "COMMON_ARTIFACT_NAME",
    "UNCONDITIONAL",
    "Condition",
    "GroupArtifactVersionId",
    "Library",
    "OSCondition",
    "Rule",
    "UnconditionalCondition",
    # Platform
    "Environment",
    "PlatformType",
    "current_os_version",
    "current_platform",
    # Resources
    "Artifact",
    "Asset",
    "AssetCollection",
    "AssetIndex",
    "Resource",
    # Versions
    "LauncherInfo",
    "Version",
    "VersionManifest",
    "VersionStub",
    "VersionType",
]
