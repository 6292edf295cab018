"""
Version Bumper Module

Pure functions for producing bumped semantic versions and tags.
"""

from dataclasses import replace

from .exceptions import UnsupportedBumpError
from .models import BumpKind
from .semver import parse_semantic_version
from .tag_grammar import DEFAULT_GRAMMAR, TagGrammar, tag_prefix


def bump_semantic_version(version: str, kind: BumpKind) -> str:
    """
    Bump a semantic version.

    The prerelease suffix is always dropped.

    Args:
        version: Semantic version string, optionally ``v`` prefixed
        kind: MAJOR, MINOR or PATCH

    Returns:
        The bumped version string

    Raises:
        VersionParseError: If ``version`` is not a valid semantic version
        UnsupportedBumpError: If ``kind`` is not MAJOR, MINOR or PATCH
    """
    sv = parse_semantic_version(version)

    if kind == BumpKind.MAJOR:
        sv = replace(sv, major=sv.major + 1, minor=0, patch=0)
    elif kind == BumpKind.MINOR:
        sv = replace(sv, minor=sv.minor + 1, patch=0)
    elif kind == BumpKind.PATCH:
        sv = replace(sv, patch=sv.patch + 1)
    else:
        raise UnsupportedBumpError(f"unsupported bump type: {getattr(kind, 'value', kind)}")

    return str(replace(sv, prerelease=""))


def get_version_from_tag(tag: str, grammar: TagGrammar = DEFAULT_GRAMMAR) -> str:
    """Return the version component of a tag, e.g. ``1.2.3`` for ``stg6_1.2.3-4``."""
    return str(grammar.parse(tag).version)


def bump_tag_version(
    tag: str,
    kind: BumpKind,
    environment: str,
    service: str = "",
    grammar: TagGrammar = DEFAULT_GRAMMAR,
) -> str:
    """
    Create a new tag with a bumped semantic version.

    The new tag always starts its release numbering at 1, whatever the
    release counter of the source tag.

    Args:
        tag: Source tag in the semantic dialect (``env_1.2.3-4``)
        kind: MAJOR, MINOR or PATCH
        environment: Environment of the new tag
        service: Optional service prefix of the new tag

    Returns:
        New tag string, e.g. ``stg6_1.3.0-1``

    Raises:
        MalformedTagError: If the source tag is not valid
        UnsupportedBumpError: If the source tag is a legacy tag or the kind is unsupported
    """
    parsed = grammar.parse(tag)
    if not parsed.is_semantic:
        raise UnsupportedBumpError(
            f"cannot bump legacy tag {tag!r}: semantic version bumps need a major.minor.patch tag"
        )

    new_version = bump_semantic_version(str(parsed.version), kind)
    return f"{tag_prefix(environment, new_version, service)}-1"


def validate_semantic_version_bump(
    current_tag: str,
    proposed_version: str,
    kind: BumpKind,
    grammar: TagGrammar = DEFAULT_GRAMMAR,
) -> None:
    """
    Check that ``proposed_version`` is exactly the ``kind`` bump of ``current_tag``.

    Raises:
        MalformedTagError: If the current tag is not valid
        UnsupportedBumpError: If the proposed version does not match the expected one
    """
    current_version = get_version_from_tag(current_tag, grammar)
    expected = bump_semantic_version(current_version, kind)
    if proposed_version != expected:
        raise UnsupportedBumpError(
            f"proposed version {proposed_version} does not match expected {expected} for {kind.value} bump"
        )
