"""
Library filtering for the running environment.

Rule evaluation decides which libraries apply; artifact resolution decides
which of their files are needed.
"""

from launchmeta.filtering.rule_engine import (
    ResolvedArtifacts,
    applicable_libraries,
    common_artifact,
    is_library_applicable,
    is_rule_applicable,
    native_artifact,
    required_artifacts,
    resolve_artifacts,
)

__all__ = [
    "ResolvedArtifacts",
    "applicable_libraries",
    "common_artifact",
    "is_library_applicable",
    "is_rule_applicable",
    "native_artifact",
    "required_artifacts",
    "resolve_artifacts",
]
