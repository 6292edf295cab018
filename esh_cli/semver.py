"""
Semantic Version Module

Pure functions for parsing, rendering and comparing ``major.minor.patch``
versions. This module contains no side effects.

Only the subset of SemVer used by deployment tags is supported: the prerelease
suffix is kept verbatim and build metadata is not recognised.
"""

import re
from dataclasses import dataclass
from typing import Tuple, Union

from .exceptions import VersionParseError

_NUMBER = re.compile(r"\d+", re.ASCII)


@dataclass(frozen=True)
class SemanticVersion:
    """A parsed ``major.minor.patch[-prerelease]`` version."""
    major: int
    minor: int
    patch: int
    prerelease: str = ""

    def __str__(self) -> str:
        version = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            version += f"-{self.prerelease}"
        return version

    @property
    def core(self) -> Tuple[int, int, int]:
        """Numeric part used for ordering (prerelease is ignored)."""
        return (self.major, self.minor, self.patch)


def parse_semantic_version(version: str) -> SemanticVersion:
    """
    Parse a semantic version string.

    A single leading ``v`` is stripped. Everything after the first ``-`` is
    the prerelease suffix.

    Args:
        version: Version string such as ``1.2.3``, ``v1.2.3`` or ``1.2.3-alpha.1``

    Returns:
        SemanticVersion instance

    Raises:
        VersionParseError: If the numeric core is not exactly three integers
    """
    if version.startswith("v"):
        version = version[1:]

    core, _, prerelease = version.partition("-")

    numbers = core.split(".")
    if len(numbers) != 3:
        raise VersionParseError(f"invalid semantic version format: {version}", tag=version)

    for name, number in zip(("major", "minor", "patch"), numbers):
        if not _NUMBER.fullmatch(number):
            raise VersionParseError(f"invalid {name} version: {number}", tag=version)

    major, minor, patch = (int(n) for n in numbers)
    return SemanticVersion(major, minor, patch, prerelease.strip("."))


def _coerce(version: Union[str, SemanticVersion]) -> SemanticVersion:
    if isinstance(version, SemanticVersion):
        return version
    return parse_semantic_version(version)


def compare_semantic_versions(v1: Union[str, SemanticVersion], v2: Union[str, SemanticVersion]) -> int:
    """
    Compare two semantic versions.

    Only major, minor and patch take part in the comparison; two versions
    differing only in prerelease compare equal.

    Returns:
        -1 if v1 < v2, 0 if equal, 1 if v1 > v2

    Raises:
        VersionParseError: If either string is not a valid semantic version
    """
    core1 = _coerce(v1).core
    core2 = _coerce(v2).core
    return (core1 > core2) - (core1 < core2)
