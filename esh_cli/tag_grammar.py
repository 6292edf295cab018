"""
Tag Grammar Module

Pure functions for parsing and validating deployment tags.
This module contains no side effects - only tag analysis logic.

Accepted shapes::

    [service_]env_major.minor[-release[.hotfix]]          (legacy)
    [service_]env_major.minor.patch[-release[.hotfix]]    (semantic)
"""

from dataclasses import dataclass
from typing import Iterable, Optional

from .config import (
    DEFAULT_ENVIRONMENTS,
    VERSION_PATTERN,
    SEMVER_VERSION_PATTERN,
    RELEASE_PATTERN,
    RELEASE_HOTFIX_PATTERN,
    VERSION_HOTFIX_PATTERN,
    RELEASE_BRANCH_PATTERN,
)
from .exceptions import MalformedTagError
from .models import LegacyVersion, Tag, Version
from .semver import SemanticVersion


@dataclass(frozen=True)
class TagGrammar:
    """Tag grammar bound to a fixed set of environments."""
    environments: Iterable[str] = DEFAULT_ENVIRONMENTS

    def __post_init__(self):
        environments = self.environments
        if isinstance(environments, str):
            environments = {environments}
        object.__setattr__(self, "environments", frozenset(environments))

    def is_environment_valid(self, environment: str) -> bool:
        return environment in self.environments

    def parse(self, tag: str) -> Tag:
        """
        Parse a tag string into its fields.

        Args:
            tag: Tag string, e.g. ``stg6_1.2-0`` or ``api_demo_0.1.1-3.1``

        Returns:
            Tag instance

        Raises:
            MalformedTagError: If the tag does not match the grammar
        """
        parts = tag.split("_")
        if len(parts) not in (2, 3):
            raise MalformedTagError(f"malformed tag: {tag!r} must have 2 or 3 '_' separated parts", tag=tag)

        service = None
        if len(parts) == 3:
            service = parts[0]
            if not service:
                raise MalformedTagError(f"malformed tag: {tag!r} has an empty service name", tag=tag)

        environment = parts[-2]
        if not self.is_environment_valid(environment):
            raise MalformedTagError(f"malformed tag: {tag!r} has unknown environment {environment!r}", tag=tag)

        # The version itself never contains '-', so split on the last one
        version_part, dash, release_part = parts[-1].rpartition("-")
        if not dash:
            version_part, release_part = release_part, None

        version = _parse_version(version_part)
        if version is None:
            raise MalformedTagError(f"malformed tag: {tag!r} has invalid version {version_part!r}", tag=tag)

        release, hotfix = None, None
        if release_part is not None:
            if match := RELEASE_PATTERN.fullmatch(release_part):
                release = int(match.group(1))
            elif match := RELEASE_HOTFIX_PATTERN.fullmatch(release_part):
                release, hotfix = int(match.group(1)), int(match.group(2))
            else:
                raise MalformedTagError(f"malformed tag: {tag!r} has invalid release {release_part!r}", tag=tag)

        return Tag(
            environment=environment,
            version=version,
            service=service,
            release=release,
            hotfix=hotfix,
        )

    def is_valid(self, tag: str) -> bool:
        """Check a tag against the grammar without raising."""
        try:
            self.parse(tag)
        except MalformedTagError:
            return False
        return True


def _parse_version(version: str) -> Optional[Version]:
    if match := VERSION_PATTERN.fullmatch(version):
        return LegacyVersion(*(int(n) for n in match.groups()))
    if match := SEMVER_VERSION_PATTERN.fullmatch(version):
        return SemanticVersion(*(int(n) for n in match.groups()))
    return None


DEFAULT_GRAMMAR = TagGrammar()


def parse_tag(tag: str, grammar: TagGrammar = DEFAULT_GRAMMAR) -> Tag:
    """Parse a tag with the given grammar (default environments if omitted)."""
    return grammar.parse(tag)


def is_tag_valid(tag: str, grammar: TagGrammar = DEFAULT_GRAMMAR) -> bool:
    """Return True if ``tag`` parses under the given grammar."""
    return grammar.is_valid(tag)


def tag_prefix(environment: str, version: str, service: str = "") -> str:
    """Build the ``[service_]env_version`` prefix of a tag."""
    prefix = f"{environment}_{version}"
    if service:
        prefix = f"{service}_{prefix}"
    return prefix


def get_env_from_tag(tag: str) -> str:
    """
    Extract the environment segment from a tag.

    Only the segment count is checked; the environment itself is not validated.

    Raises:
        MalformedTagError: If the tag does not have 2 or 3 parts
    """
    parts = tag.split("_")
    if len(parts) not in (2, 3):
        raise MalformedTagError("tag must have 2 or 3 parts", tag=tag)
    return parts[-2]


def is_version_valid(version: str, hot_fix: bool = False) -> bool:
    """
    Check a version typed on the command line.

    With ``hot_fix`` the version must carry a release and hotfix counter
    (``1.2-1.0``); otherwise a legacy ``1.2`` or semantic ``1.2.3`` version.
    """
    if hot_fix:
        return bool(VERSION_HOTFIX_PATTERN.fullmatch(version))
    return _parse_version(version) is not None


def is_release_branch(branch: str) -> bool:
    """Return True for release branches such as ``release_1.2``."""
    return bool(RELEASE_BRANCH_PATTERN.match(branch))
