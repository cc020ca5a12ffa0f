"""
launchmeta: cached access to game version metadata.

Typical wiring:
    provider = CachingMetadataProvider(WebMetadataProvider.official())
"""

from launchmeta.services.cached_provider import CachingMetadataProvider
from launchmeta.services.provider import MetadataProvider
from launchmeta.services.web_provider import WebMetadataProvider

__all__ = [
    "CachingMetadataProvider",
    "MetadataProvider",
    "WebMetadataProvider",
]
