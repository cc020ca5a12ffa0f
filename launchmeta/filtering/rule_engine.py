"""
Library Rule Engine: Applicability and Artifact Resolution.

Decides which libraries of a version apply to an environment, and which
artifacts of an applicable library are needed.

INVARIANTS:
- No rules applicable → library included (absence of constraints applies everywhere)
- Any applicable denial excludes the library, even if other applicable rules allow it
- Evaluation is pure: libraries and rules are never mutated
- Resolved artifacts are yielded common first, then native, at most one of each
"""

import re
from collections.abc import Iterable, Iterator
from functools import lru_cache
from itertools import chain

from launchmeta.models.library import (
    COMMON_ARTIFACT_NAME,
    Library,
    OSCondition,
    Rule,
    UnconditionalCondition,
)
from launchmeta.models.platform import Environment
from launchmeta.models.resource import Artifact


@lru_cache(maxsize=128)
def _compile(pattern: str) -> re.Pattern[str]:
    return re.compile(pattern)


def _resolve_env(env: Environment | None) -> Environment:
    return env if env is not None else Environment.current()


def is_rule_applicable(rule: Rule, env: Environment | None = None) -> bool:
    """
    Check whether a rule should be considered in the environment.

    Unconditional rules always apply. OS rules apply when the platform
    matches and, if a version pattern is given, the OS version matches it.
    """
    env = _resolve_env(env)
    match rule.condition:
        case UnconditionalCondition():
            return True
        case OSCondition(platform=platform, version_pattern=pattern):
            if platform is not env.platform:
                return False
            return pattern is None or _compile(pattern).search(env.os_version) is not None
    raise TypeError(f"Unsupported rule condition: {rule.condition!r}")


def is_library_applicable(library: Library, env: Environment | None = None) -> bool:
    """
    Check whether a library should be included in the environment.

    Returns:
        True if no rule applies, or every applicable rule allows the library.
    """
    env = _resolve_env(env)
    applicable = [rule for rule in library.rules if is_rule_applicable(rule, env)]
    if not applicable:
        return True
    return all(rule.allowed for rule in applicable)


def applicable_libraries(
    libraries: Iterable[Library], env: Environment | None = None
) -> list[Library]:
    """Libraries that apply to the environment, in their original order."""
    env = _resolve_env(env)
    return [library for library in libraries if is_library_applicable(library, env)]


def common_artifact(library: Library) -> Artifact | None:
    """The artifact every platform needs, if the library has one."""
    return library.find_artifact(COMMON_ARTIFACT_NAME)


def native_artifact(library: Library, env: Environment | None = None) -> Artifact | None:
    """The platform-specific artifact for the environment, if the library declares one."""
    env = _resolve_env(env)
    name = library.natives.get(env.platform)
    if name is None:
        return None
    return library.find_artifact(name)


class ResolvedArtifacts:
    """
    Artifacts of one library needed in an environment.

    Lazy and re-iterable: each iteration recomputes from the immutable
    library, yielding the common artifact then the native artifact.
    """

    __slots__ = ("library", "env")

    def __init__(self, library: Library, env: Environment) -> None:
        self.library = library
        self.env = env

    def __iter__(self) -> Iterator[Artifact]:
        common = common_artifact(self.library)
        if common is not None:
            yield common
        native = native_artifact(self.library, self.env)
        if native is not None:
            yield native

    def __repr__(self) -> str:
        return f"ResolvedArtifacts({self.library}, {self.env.platform.name})"


def resolve_artifacts(library: Library, env: Environment | None = None) -> ResolvedArtifacts:
    """
    Artifacts of a library needed in the environment.

    Does not check applicability. Callers filter with is_library_applicable first.
    """
    return ResolvedArtifacts(library, _resolve_env(env))


def required_artifacts(
    libraries: Iterable[Library], env: Environment | None = None
) -> Iterator[Artifact]:
    """Every artifact needed across the libraries applicable to the environment."""
    env = _resolve_env(env)
    return chain.from_iterable(
        resolve_artifacts(library, env) for library in applicable_libraries(libraries, env)
    )
