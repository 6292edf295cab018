"""
Tag Selection Module

Pure functions for picking the latest tag out of a ``git tag -n1`` listing.
This module contains no side effects.
"""

from typing import Iterable, Optional, Union

from .exceptions import MalformedTagError
from .models import TagLine
from .tag_grammar import DEFAULT_GRAMMAR, TagGrammar


def parse_tag_line(line: str) -> Optional[TagLine]:
    """
    Split a ``<tag> <comment>`` line.

    Returns:
        TagLine, or None for a blank line
    """
    parts = line.strip().split(None, 1)
    if not parts:
        return None
    comment = parts[1].strip() if len(parts) > 1 else ""
    return TagLine(tag=parts[0], comment=comment)


def select_latest_tag(
    tag_lines: Union[str, Iterable[str]],
    grammar: TagGrammar = DEFAULT_GRAMMAR,
) -> Optional[TagLine]:
    """
    Select the tag with the highest release counter.

    Lines whose tag does not parse are skipped. Release counters are compared
    without their hotfix part, so ``x-5.9`` loses to ``x-6`` and ties go to
    the line scanned last. A bare tag (no release counter) is only returned
    when no tag with a release counter was found.

    Args:
        tag_lines: Newline separated listing or an iterable of lines, already
            filtered to one service/environment/version prefix

    Returns:
        The selected TagLine, or None if no line holds a valid tag
    """
    if isinstance(tag_lines, str):
        tag_lines = tag_lines.splitlines()

    best: Optional[TagLine] = None
    best_release = -1
    bare: Optional[TagLine] = None

    for line in tag_lines:
        tag_line = parse_tag_line(line)
        if tag_line is None:
            continue

        try:
            tag = grammar.parse(tag_line.tag)
        except MalformedTagError:
            continue

        if tag.is_bare:
            bare = tag_line
        elif tag.release >= best_release:
            best, best_release = tag_line, tag.release

    return best if best is not None else bare
