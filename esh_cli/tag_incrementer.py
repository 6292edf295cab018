"""
Tag Incrementer Module

Pure function for incrementing the release or hotfix counter of a tag.
"""

from .exceptions import MalformedTagError
from .tag_grammar import DEFAULT_GRAMMAR, TagGrammar


def increment_tag(tag: str, hot_fix: bool = False, grammar: TagGrammar = DEFAULT_GRAMMAR) -> str:
    """
    Increment the release or hotfix counter of a tag.

    A normal increment bumps the release counter and drops any hotfix
    counter (``stg6_1.2-3.2`` -> ``stg6_1.2-4``). A hot fix keeps the release
    and bumps the hotfix counter, starting from 0 (``stg6_1.2-3`` ->
    ``stg6_1.2-3.1``).

    Args:
        tag: Tag with a release counter
        hot_fix: Increment the hotfix counter instead of the release

    Returns:
        The incremented tag string

    Raises:
        MalformedTagError: If the tag is invalid or has no release counter
    """
    if not tag:
        raise MalformedTagError("cannot increment an empty tag", tag=tag)

    parsed = grammar.parse(tag)
    if parsed.is_bare:
        raise MalformedTagError(f"cannot increment tag {tag!r}: it has no release counter", tag=tag)

    if hot_fix:
        hotfix = parsed.hotfix if parsed.hotfix is not None else 0
        return str(parsed.with_release(parsed.release, hotfix + 1))

    return str(parsed.with_release(parsed.release + 1))
