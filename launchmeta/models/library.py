"""
Library models: coordinates, inclusion rules, and the library itself.

Rules are a closed set of condition kinds:
- UnconditionalCondition: always applicable
- OSCondition: applicable on one platform, optionally narrowed by an OS
  version pattern

Evaluation lives in launchmeta.filtering.rule_engine. Nothing here depends
on the running environment.
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from launchmeta.models.platform import PlatformType
from launchmeta.models.resource import Artifact

COMMON_ARTIFACT_NAME = "artifact"


@dataclass(frozen=True, slots=True)
class GroupArtifactVersionId:
    """
    Maven coordinate of a library.

    String form is GROUP:ARTIFACT:VERSION.
    """

    group_id: str
    artifact_id: str
    version: str

    def __str__(self) -> str:
        return f"{self.group_id}:{self.artifact_id}:{self.version}"

    @classmethod
    def parse(cls, gav: str) -> "GroupArtifactVersionId":
        """
        Extract a coordinate from its string form.

        The version keeps any further colons (split limit of three parts).

        Raises:
            ValueError: If the string has fewer than three parts
        """
        parts = gav.split(":", 2)
        if len(parts) != 3:
            raise ValueError(f"Invalid GAV string: {gav!r}. Expected GROUP:ARTIFACT:VERSION")
        group_id, artifact_id, version = parts
        return cls(group_id=group_id, artifact_id=artifact_id, version=version)


@dataclass(frozen=True, slots=True)
class UnconditionalCondition:
    """Condition that applies everywhere."""


@dataclass(frozen=True, slots=True)
class OSCondition:
    """
    Condition on the operating system.

    Attributes:
        platform: Platform the rule applies to
        version_pattern: Regular expression searched in the OS version string.
            None matches any version.
    """

    platform: PlatformType
    version_pattern: str | None = None

    def __post_init__(self) -> None:
        if self.version_pattern is not None:
            try:
                re.compile(self.version_pattern)
            except re.error as e:
                raise ValueError(f"Invalid OS version pattern: {self.version_pattern!r}") from e


Condition = UnconditionalCondition | OSCondition

UNCONDITIONAL = UnconditionalCondition()


@dataclass(frozen=True, slots=True)
class Rule:
    """
    Library inclusion decision.

    Attributes:
        allowed: Whether the library should be included when the rule applies
        condition: When the rule applies
    """

    allowed: bool
    condition: Condition = UNCONDITIONAL

    @classmethod
    def for_os(
        cls, platform: PlatformType, allowed: bool, version_pattern: str | None = None
    ) -> "Rule":
        """Create a rule that applies only on one platform."""
        return cls(allowed=allowed, condition=OSCondition(platform, version_pattern))

    def __str__(self) -> str:
        allowed_str = "Allowed" if self.allowed else "Denied"
        if isinstance(self.condition, OSCondition):
            return f"Rule({allowed_str} on {self.condition.platform.name})"
        return f"Rule({allowed_str})"


@dataclass(frozen=True, slots=True)
class Library:
    """
    Package required for the game to run.

    INVARIANT: At most one artifact is named "artifact" (the common artifact).
    Native artifacts are looked up by name through the natives mapping.

    Attributes:
        gav: Maven coordinate of the library
        artifacts: Downloadable files of the library
        exclusions: Paths to skip when extracting the library
        rules: Inclusion rules, evaluated by the rule engine
        natives: Platform -> name of the artifact holding that platform's natives
    """

    gav: GroupArtifactVersionId
    artifacts: tuple[Artifact, ...] = ()
    exclusions: tuple[str, ...] = ()
    rules: tuple[Rule, ...] = ()
    natives: Mapping[PlatformType, str] = field(default_factory=lambda: MappingProxyType({}))

    def __post_init__(self) -> None:
        object.__setattr__(self, "artifacts", tuple(self.artifacts))
        object.__setattr__(self, "exclusions", tuple(self.exclusions))
        object.__setattr__(self, "rules", tuple(self.rules))
        if not isinstance(self.natives, MappingProxyType):
            object.__setattr__(self, "natives", MappingProxyType(dict(self.natives)))

        common = [a for a in self.artifacts if a.name == COMMON_ARTIFACT_NAME]
        if len(common) > 1:
            raise ValueError(f"{self} has more than one common artifact")

    def __str__(self) -> str:
        return f"Library({self.gav})"

    def __hash__(self) -> int:
        return hash((self.gav, self.artifacts, self.exclusions, self.rules))

    def find_artifact(self, name: str) -> Artifact | None:
        """Artifact whose resource name matches, if any."""
        for artifact in self.artifacts:
            if artifact.name == name:
                return artifact
        return None

    class Builder:
        """Accumulates library parts, then produces a Library."""

        def __init__(self, gav: GroupArtifactVersionId) -> None:
            self.gav = gav
            self._artifacts: list[Artifact] = []
            self._exclusions: list[str] = []
            self._rules: list[Rule] = []
            self._natives: dict[PlatformType, str] = {}

        def add_artifact(self, artifact: Artifact) -> "Library.Builder":
            self._artifacts.append(artifact)
            return self

        def exclude_path(self, path: str) -> "Library.Builder":
            self._exclusions.append(path)
            return self

        def add_rule(self, rule: Rule) -> "Library.Builder":
            self._rules.append(rule)
            return self

        def specify_native(self, platform: PlatformType, artifact_name: str) -> "Library.Builder":
            self._natives[platform] = artifact_name
            return self

        def build(self) -> "Library":
            return Library(
                gav=self.gav,
                artifacts=tuple(self._artifacts),
                exclusions=tuple(self._exclusions),
                rules=tuple(self._rules),
                natives=MappingProxyType(dict(self._natives)),
            )
