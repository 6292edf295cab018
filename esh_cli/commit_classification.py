"""
Commit Classification Module

Pure functions for inferring a version bump from conventional commit subjects.
This module contains no side effects - unrecognised messages fall back to a
patch bump.
"""

import re
from typing import Iterable

from .models import BumpKind

# Case-sensitive: a lowercase "breaking" is an ordinary word
BREAKING_PATTERN = re.compile(r"\bBREAKING\b|^\w+(\([^)]*\))?!:")
FEATURE_PATTERN = re.compile(r"^(feat|feature)(\(.+\))?:", re.IGNORECASE)
FIX_PATTERN = re.compile(r"^(fix|bugfix)(\(.+\))?:", re.IGNORECASE)


def detect_bump_type(commits: Iterable[str]) -> BumpKind:
    """
    Suggest a bump kind from commit subjects.

    Breaking changes win over features, features over fixes. Anything
    else, including an empty list, is a patch.

    Args:
        commits: Single-line commit subjects

    Returns:
        BumpKind.MAJOR, BumpKind.MINOR or BumpKind.PATCH
    """
    has_feature = False
    has_fix = False

    for commit in commits:
        message = commit.strip()
        if BREAKING_PATTERN.search(message):
            return BumpKind.MAJOR
        if FEATURE_PATTERN.match(message):
            has_feature = True
        elif FIX_PATTERN.match(message):
            has_fix = True

    if has_feature:
        return BumpKind.MINOR
    if has_fix:
        return BumpKind.PATCH
    return BumpKind.PATCH


def resolve_bump_kind(kind: BumpKind, commits: Iterable[str]) -> BumpKind:
    """Resolve AUTO to a concrete kind; other kinds are returned unchanged."""
    if kind == BumpKind.AUTO:
        return detect_bump_type(commits)
    return kind
