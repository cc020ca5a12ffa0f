"""
launchmeta services.

Metadata providers and the cache layer in front of them.
"""

from launchmeta.services.cache import (
    MISSING,
    CacheRegion,
    CacheStats,
    KeyedCache,
    LRUCache,
    SingletonCache,
)
from launchmeta.services.cached_provider import (
    CachingMetadataProvider,
    artifact_content_key,
    asset_content_key,
    asset_list_document_key,
    version_document_key,
)
from launchmeta.services.provider import MetadataProvider
from launchmeta.services.web_provider import WebMetadataProvider

__all__ = [
    # Cache regions
    "MISSING",
    "CacheRegion",
    "CacheStats",
    "KeyedCache",
    "LRUCache",
    "SingletonCache",
    # Providers
    "CachingMetadataProvider",
    "MetadataProvider",
    "WebMetadataProvider",
    # Payload keys
    "artifact_content_key",
    "asset_content_key",
    "asset_list_document_key",
    "version_document_key",
]
