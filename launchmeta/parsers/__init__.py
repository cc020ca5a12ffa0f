from launchmeta.parsers.documents import (
    parse_asset_collection,
    parse_version,
    parse_version_manifest,
)

__all__ = [
    "parse_asset_collection",
    "parse_version",
    "parse_version_manifest",
]
