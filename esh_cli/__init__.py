"""Deployment tag management for git repositories.

The pure tag logic can be used without the CLI::

    from esh_cli import increment_tag, bump_tag_version, BumpKind

    increment_tag("stg6_1.2-0")                          # "stg6_1.2-1"
    bump_tag_version("stg6_1.2.3-4", BumpKind.MINOR, "stg6")  # "stg6_1.3.0-1"
"""

__version__ = "0.1.0"

from .commit_classification import detect_bump_type, resolve_bump_kind
from .exceptions import (
    EshCliError,
    MalformedTagError,
    UnsupportedBumpError,
    VersionParseError,
)
from .models import BumpKind, LegacyVersion, Tag, TagLine
from .semver import SemanticVersion, compare_semantic_versions, parse_semantic_version
from .tag_grammar import TagGrammar, is_tag_valid, parse_tag
from .tag_incrementer import increment_tag
from .tag_selection import select_latest_tag
from .version_bumper import bump_semantic_version, bump_tag_version
