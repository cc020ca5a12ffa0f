"""
Operating system detection.

The current platform is resolved once per process and never changes.
"""

import platform
import sys
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache


class PlatformType(str, Enum):
    """Operating system families known to the metadata service."""

    WINDOWS = "windows"
    OSX = "osx"
    LINUX = "linux"  # anything not Windows or OSX

    @classmethod
    def from_string(cls, value: str) -> "PlatformType":
        """
        Map a wire platform name to a PlatformType.

        Raises:
            ValueError: If the name is not a known platform
        """
        try:
            return cls(value.lower())
        except ValueError:
            raise ValueError(f"Unknown platform: {value!r}") from None

    def __str__(self) -> str:
        return self.name


def _detect_platform() -> PlatformType:
    if sys.platform.startswith("win"):
        return PlatformType.WINDOWS
    if sys.platform == "darwin":
        return PlatformType.OSX
    return PlatformType.LINUX


def _detect_os_version(platform_type: PlatformType) -> str:
    # Rule patterns are written against the full version string, e.g. "^10\\."
    if platform_type is PlatformType.WINDOWS:
        return platform.version()
    if platform_type is PlatformType.OSX:
        return platform.mac_ver()[0]
    return platform.release()


@lru_cache(maxsize=1)
def current_platform() -> PlatformType:
    """Platform of the running process. Cached after first call."""
    return _detect_platform()


@lru_cache(maxsize=1)
def current_os_version() -> str:
    """OS version string of the running process. Cached after first call."""
    return _detect_os_version(current_platform())


@dataclass(frozen=True, slots=True)
class Environment:
    """
    Inputs used when evaluating library rules.

    Attributes:
        platform: Operating system family
        os_version: Version string matched against rule version patterns
    """

    platform: PlatformType
    os_version: str = ""

    @classmethod
    def current(cls) -> "Environment":
        """Environment of the running process."""
        return cls(platform=current_platform(), os_version=current_os_version())
