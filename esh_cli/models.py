"""Data models for tags and for planning and execution separation."""

from dataclasses import dataclass, field, replace
from typing import List, Optional, Union
from enum import Enum

from .semver import SemanticVersion


class BumpKind(Enum):
    """Kind of semantic version bump."""
    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"
    AUTO = "auto"  # Resolved from commit messages before bumping


class TagAction(Enum):
    """What a plan does to produce its tag."""
    CREATE = "create"    # First tag for a version line
    INCREMENT = "increment"
    HOT_FIX = "hot_fix"
    PROMOTE = "promote"  # Re-tag an existing commit for another environment
    BUMP = "bump"        # New semantic version line


@dataclass(frozen=True)
class LegacyVersion:
    """Two-component ``major.minor`` version used by legacy tags."""
    major: int
    minor: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}"


Version = Union[LegacyVersion, SemanticVersion]


@dataclass(frozen=True)
class Tag:
    """A parsed deployment tag: ``[service_]env_version[-release[.hotfix]]``."""
    environment: str
    version: Version
    service: Optional[str] = None
    release: Optional[int] = None
    hotfix: Optional[int] = None

    def __str__(self) -> str:
        tag = f"{self.prefix}_{self.version}"
        if self.release is not None:
            tag += f"-{self.release}"
            if self.hotfix is not None:
                tag += f".{self.hotfix}"
        return tag

    @property
    def prefix(self) -> str:
        """The ``[service_]env`` part of the tag."""
        if self.service:
            return f"{self.service}_{self.environment}"
        return self.environment

    @property
    def is_semantic(self) -> bool:
        return isinstance(self.version, SemanticVersion)

    @property
    def is_bare(self) -> bool:
        """True for an unreleased base tag without a release counter."""
        return self.release is None

    @property
    def release_number(self) -> int:
        """Release counter used for ordering; bare tags count as 0."""
        return self.release if self.release is not None else 0

    def with_release(self, release: int, hotfix: Optional[int] = None) -> "Tag":
        return replace(self, release=release, hotfix=hotfix)


@dataclass(frozen=True)
class TagLine:
    """One ``<tag> <comment>`` line of a tag listing."""
    tag: str
    comment: str = ""


@dataclass
class AddTagRequest:
    """Input for the add-tag operation."""
    environment: str
    version: str
    service: str = ""
    promote_from: str = ""
    hot_fix: bool = False
    project_path: str = "."


@dataclass
class BumpRequest:
    """Input for the bump-version operation."""
    environment: str
    bump_kind: BumpKind
    service: str = ""
    from_commit: str = "HEAD"
    project_path: str = "."


@dataclass
class TagPlan:
    """A tag to be created and pushed."""
    action: TagAction
    new_tag: str
    target_commit: str
    previous_tag: Optional[str] = None
    bump_kind: Optional[BumpKind] = None
    comment: str = ""
    commits_analyzed: int = 0
    branch: str = ""
    dry_run: bool = False


@dataclass
class ExecutionResult:
    """Result of executing a tag plan."""
    success: bool
    tag: Optional[str] = None
    errors: List[str] = field(default_factory=list)
    changes_made: List[str] = field(default_factory=list)
    dry_run: bool = False


@dataclass(frozen=True)
class TagInfo:
    """A tag name with the metadata shown by version listings."""
    name: str
    created: int = 0  # Unix timestamp, 0 if unknown
    commit: str = ""
    subject: str = ""


@dataclass(frozen=True)
class VersionInfo:
    """A semantic-version tag of one environment."""
    tag: Tag
    info: TagInfo

    @property
    def name(self) -> str:
        return self.info.name

    @property
    def version(self) -> SemanticVersion:
        return self.tag.version

    @property
    def release_label(self) -> str:
        """``release[.hotfix]`` as written in the tag, empty for bare tags."""
        if self.tag.release is None:
            return ""
        if self.tag.hotfix is None:
            return str(self.tag.release)
        return f"{self.tag.release}.{self.tag.hotfix}"


@dataclass
class VersionDiff:
    """Semantic comparison of two tags.

    ``commits`` and ``files`` are None when they were not requested.
    """
    newer: str
    older: str
    newer_version: str
    older_version: str
    change: str
    commits: Optional[List[str]] = None
    files: Optional[List[str]] = None
