"""
Version Analysis Module

Pure functions for filtering, ordering and comparing version tags.
This module contains no side effects - only version comparison logic.
"""

from functools import cmp_to_key
from typing import Dict, List, Optional, Tuple

from .models import Tag, Version, VersionInfo
from .semver import SemanticVersion, compare_semantic_versions

CHANGE_KINDS = ("MAJOR", "MINOR", "PATCH")


def classify_version_change(older: Version, newer: Version) -> str:
    """
    Name the semantic step from ``older`` to ``newer``.

    Returns:
        ``MAJOR``, ``MINOR`` or ``PATCH`` for an upgrade, ``none`` when
        ``newer`` is not higher, ``unknown`` when either version is legacy
    """
    if not (isinstance(older, SemanticVersion) and isinstance(newer, SemanticVersion)):
        return "unknown"
    if compare_semantic_versions(newer, older) <= 0:
        return "none"
    if newer.major != older.major:
        return "MAJOR"
    if newer.minor != older.minor:
        return "MINOR"
    return "PATCH"


def tag_sort_key(tag: Tag) -> Tuple:
    """Ordering key of a tag of either dialect: version, release, hotfix."""
    version = tag.version
    if isinstance(version, SemanticVersion):
        numbers = version.core
    else:
        numbers = (version.major, version.minor)
    return numbers, tag.release_number, tag.hotfix or 0


def _compare_versions(a: VersionInfo, b: VersionInfo) -> int:
    result = compare_semantic_versions(a.version, b.version)
    if result == 0:
        left = (a.tag.release_number, a.tag.hotfix or 0)
        right = (b.tag.release_number, b.tag.hotfix or 0)
        result = (left > right) - (left < right)
    return result


def sort_versions(versions: List[VersionInfo], by: str = "version") -> List[VersionInfo]:
    """Order versions newest first, by semantic version or by creation date."""
    if by == "date":
        return sorted(versions, key=lambda v: v.info.created, reverse=True)
    return sorted(versions, key=cmp_to_key(_compare_versions), reverse=True)


def filter_versions(
    versions: List[VersionInfo],
    major: Optional[int] = None,
    minor: Optional[int] = None,
) -> List[VersionInfo]:
    """Keep versions matching the major and minor filters (None matches all)."""
    return [
        v for v in versions
        if (major is None or v.version.major == major)
        and (minor is None or v.version.minor == minor)
    ]


def with_changes(versions: List[VersionInfo]) -> List[Tuple[VersionInfo, str]]:
    """
    Pair each version with its change from the next older one.

    Args:
        versions: Versions ordered newest first

    Returns:
        ``(version, change)`` pairs; the oldest version has an empty change
    """
    history = []
    for i, version in enumerate(versions):
        change = ""
        if i + 1 < len(versions):
            change = classify_version_change(versions[i + 1].version, version.version)
        history.append((version, change))
    return history


def count_changes(history: List[Tuple[VersionInfo, str]]) -> Dict[str, int]:
    counts = {kind: 0 for kind in CHANGE_KINDS}
    for _, change in history:
        if change in counts:
            counts[change] += 1
    return counts
