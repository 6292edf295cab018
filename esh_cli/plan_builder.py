"""Plan builder - creates a tag plan from a request.

This module reads the repository state through the I/O layer and decides
which tag to create, but doesn't create or push anything.
"""

import logging
from dataclasses import replace
from typing import Iterable, List, Optional, Tuple

from .commit_classification import resolve_bump_kind
from .exceptions import GitOperationError, MalformedTagError, TagNotFoundError, TagRuleError
from .io_layer import IOLayer
from .message_generation import default_tag_comment, format_auto_detection
from .models import (
    AddTagRequest,
    BumpKind,
    BumpRequest,
    TagAction,
    TagLine,
    TagPlan,
    VersionDiff,
    VersionInfo,
)
from .tag_grammar import (
    DEFAULT_GRAMMAR,
    TagGrammar,
    is_release_branch,
    is_version_valid,
    tag_prefix,
)
from .tag_incrementer import increment_tag
from .tag_selection import parse_tag_line, select_latest_tag
from .version_analysis import (
    classify_version_change,
    filter_versions,
    sort_versions,
    tag_sort_key,
    with_changes,
)
from .version_bumper import bump_tag_version

logger = logging.getLogger(__name__)


def find_last_tag(
    io_layer: IOLayer,
    environment: str,
    version: str,
    service: str = "",
    grammar: TagGrammar = DEFAULT_GRAMMAR,
) -> Optional[TagLine]:
    """
    Find the tag with the highest release counter for a version line.

    Returns:
        The latest TagLine, or None if the version line has no tags yet
    """
    prefix = tag_prefix(environment, version, service)
    listing = io_layer.list_tags_with_comments(prefix, f"{prefix}-*")
    return select_latest_tag(listing, grammar)


def find_most_recent_tag(
    io_layer: IOLayer,
    environment: str,
    service: str = "",
    grammar: TagGrammar = DEFAULT_GRAMMAR,
) -> Optional[TagLine]:
    """
    Find the most recently created valid tag of an environment, any version.

    Returns:
        The newest TagLine, or None if the environment has no valid tags
    """
    prefix = f"{service}_{environment}" if service else environment
    listing = io_layer.list_tags_with_comments(f"{prefix}_*")

    for line in reversed(listing.splitlines()):
        tag_line = parse_tag_line(line)
        if tag_line is not None and grammar.is_valid(tag_line.tag):
            return tag_line
    return None


def find_latest_semantic_tag(
    io_layer: IOLayer,
    environment: str,
    service: str = "",
    grammar: TagGrammar = DEFAULT_GRAMMAR,
) -> str:
    """
    Find the highest semantic-dialect tag of an environment.

    Tags are ordered by version and then by release counter; legacy and
    invalid tags are ignored.

    Raises:
        TagNotFoundError: If the environment has no semantic tags
    """
    prefix = f"{service}_{environment}" if service else environment
    candidates = []
    for name in io_layer.list_tags(f"{prefix}_*"):
        try:
            tag = grammar.parse(name)
        except MalformedTagError:
            logger.debug(f"Skipping invalid tag {name}")
            continue
        if tag.is_semantic and tag.prefix == prefix:
            candidates.append((tag, name))

    if not candidates:
        raise TagNotFoundError(f"no semantic version tags found for environment: {environment}")

    _, latest = max(candidates, key=lambda c: (c[0].version.core, c[0].release_number))
    return latest


def prepare_add_tag_plan(
    request: AddTagRequest,
    io_layer: IOLayer,
    grammar: TagGrammar = DEFAULT_GRAMMAR,
) -> TagPlan:
    """
    Prepare the plan for ``add-tag``.

    The new tag either promotes an existing tag to another environment or
    increments the release (or hotfix) counter of the version line.

    Raises:
        MalformedTagError: If the environment, version or promoted tag is invalid
        TagRuleError: If the branch or remote state forbids tagging
        TagNotFoundError: If the promoted tag does not exist
    """
    environment = request.environment
    if not grammar.is_environment_valid(environment):
        raise MalformedTagError(
            f"invalid environment '{environment}'. Valid environments: {sorted(grammar.environments)}"
        )

    if not is_version_valid(request.version):
        raise MalformedTagError(f"version '{request.version}' is not valid")

    # Hot fixes always increment; --from is ignored for them
    promote_from = None
    if request.promote_from and not request.hot_fix:
        promote_from = grammar.parse(request.promote_from)

    branch = io_layer.current_branch()
    on_release_branch = is_release_branch(branch)
    if on_release_branch and not request.hot_fix:
        raise TagRuleError("you can tag only hot fix (use --hot-fix flag) from release branch")
    if request.hot_fix and not on_release_branch:
        raise TagRuleError("hot fix must be tagged from release branch")

    sha = io_layer.local_sha()
    if sha != io_layer.remote_sha(branch):
        raise TagRuleError("remote is not synced")

    if promote_from is not None:
        source = str(promote_from)
        try:
            commit = io_layer.resolve_commit(source)
        except GitOperationError as e:
            raise TagNotFoundError(f"tag '{source}' not found") from e

        new_tag = str(replace(promote_from, environment=environment))
        logger.info(f"Promoting {source} from {promote_from.environment} to {environment}")
        plan = TagPlan(
            action=TagAction.PROMOTE,
            new_tag=new_tag,
            target_commit=commit,
            previous_tag=source,
            branch=branch,
            dry_run=io_layer.dry_run,
        )
    else:
        last = find_last_tag(io_layer, environment, request.version, request.service, grammar)
        if last is None:
            new_tag = f"{tag_prefix(environment, request.version, request.service)}-0"
            action = TagAction.CREATE
        else:
            base = grammar.parse(last.tag)
            if base.is_bare:
                base = base.with_release(0)
            new_tag = increment_tag(str(base), request.hot_fix, grammar)
            action = TagAction.HOT_FIX if request.hot_fix else TagAction.INCREMENT

        plan = TagPlan(
            action=action,
            new_tag=new_tag,
            target_commit=sha,
            previous_tag=last.tag if last else None,
            branch=branch,
            dry_run=io_layer.dry_run,
        )

    plan.comment = default_tag_comment(plan)
    return plan


def prepare_bump_plan(
    request: BumpRequest,
    io_layer: IOLayer,
    grammar: TagGrammar = DEFAULT_GRAMMAR,
) -> TagPlan:
    """
    Prepare the plan for ``bump-version``.

    AUTO bumps are resolved from the commit subjects between the latest tag
    and ``request.from_commit``.

    Raises:
        MalformedTagError: If the environment is invalid
        TagNotFoundError: If the environment has no semantic tags
        TagRuleError: If an AUTO bump finds no commits since the latest tag
        UnsupportedBumpError: If the bump cannot be applied
    """
    environment = request.environment
    if not grammar.is_environment_valid(environment):
        raise MalformedTagError(
            f"invalid environment '{environment}'. Valid environments: {sorted(grammar.environments)}"
        )

    latest_tag = find_latest_semantic_tag(io_layer, environment, request.service, grammar)
    logger.info(f"Current latest tag: {latest_tag}")

    kind = request.bump_kind
    commits_analyzed = 0
    if kind == BumpKind.AUTO:
        commits = io_layer.commit_subjects(latest_tag, request.from_commit)
        if not commits:
            raise TagRuleError(f"no commits found since last tag {latest_tag}")
        kind = resolve_bump_kind(kind, commits)
        commits_analyzed = len(commits)
        logger.info(format_auto_detection(kind, commits_analyzed))

    new_tag = bump_tag_version(latest_tag, kind, environment, request.service, grammar)

    plan = TagPlan(
        action=TagAction.BUMP,
        new_tag=new_tag,
        target_commit=io_layer.resolve_commit(request.from_commit),
        previous_tag=latest_tag,
        bump_kind=kind,
        commits_analyzed=commits_analyzed,
        dry_run=io_layer.dry_run,
    )
    plan.comment = default_tag_comment(plan)
    return plan


def list_versions(
    io_layer: IOLayer,
    environments: Iterable[str],
    service: str = "",
    grammar: TagGrammar = DEFAULT_GRAMMAR,
    major: Optional[int] = None,
    minor: Optional[int] = None,
    sort_by: str = "version",
    limit: int = 0,
) -> List[VersionInfo]:
    """
    Collect the semantic-version tags of each environment.

    Without a service, tags of every service are included. Filters, ordering
    and ``limit`` (0 for no limit) apply per environment, and environments
    keep the order given.
    """
    versions = []
    for environment in environments:
        if service:
            patterns = [f"{service}_{environment}_*"]
        else:
            patterns = [f"{environment}_*", f"*_{environment}_*"]

        found = []
        for info in io_layer.list_tag_details(*patterns):
            try:
                tag = grammar.parse(info.name)
            except MalformedTagError:
                logger.debug(f"Skipping invalid tag {info.name}")
                continue
            if tag.is_semantic and tag.environment == environment:
                found.append(VersionInfo(tag, info))

        found = sort_versions(filter_versions(found, major, minor), sort_by)
        versions.extend(found[:limit] if limit > 0 else found)
    return versions


def version_history(
    io_layer: IOLayer,
    environment: str,
    service: str = "",
    grammar: TagGrammar = DEFAULT_GRAMMAR,
) -> List[Tuple[VersionInfo, str]]:
    """Versions of an environment, newest first, each with its change from the previous one."""
    return with_changes(list_versions(io_layer, [environment], service, grammar))


def find_previous_tag(io_layer: IOLayer, tag: str, grammar: TagGrammar = DEFAULT_GRAMMAR) -> str:
    """
    Find the tag ordered right before ``tag`` on the same ``[service_]env`` prefix.

    Raises:
        MalformedTagError: If ``tag`` is invalid
        TagNotFoundError: If ``tag`` does not exist or is the oldest tag
    """
    current = grammar.parse(tag)
    candidates = []
    for name in io_layer.list_tags(f"{current.prefix}_*"):
        try:
            parsed = grammar.parse(name)
        except MalformedTagError:
            continue
        if parsed.prefix == current.prefix:
            candidates.append(parsed)

    names = [str(t) for t in sorted(candidates, key=tag_sort_key, reverse=True)]
    if tag not in names:
        raise TagNotFoundError(f"tag '{tag}' not found")

    index = names.index(tag)
    if index + 1 == len(names):
        raise TagNotFoundError(f"no tag found before '{tag}'")
    return names[index + 1]


def prepare_version_diff(
    io_layer: IOLayer,
    tag: str,
    other_tag: str = "",
    grammar: TagGrammar = DEFAULT_GRAMMAR,
    show_commits: bool = False,
    show_files: bool = False,
) -> VersionDiff:
    """
    Compare ``tag`` with an older tag.

    Args:
        tag: The newer tag
        other_tag: The older tag; the previous tag of ``tag`` if empty
        show_commits: Collect the commit subjects between the tags
        show_files: Collect the paths changed between the tags

    Raises:
        MalformedTagError: If either tag is invalid
        TagNotFoundError: If no previous tag exists
    """
    newer = grammar.parse(tag)
    if not other_tag:
        other_tag = find_previous_tag(io_layer, tag, grammar)
    older = grammar.parse(other_tag)

    diff = VersionDiff(
        newer=tag,
        older=other_tag,
        newer_version=str(newer.version),
        older_version=str(older.version),
        change=classify_version_change(older.version, newer.version),
    )
    if show_commits:
        diff.commits = io_layer.commit_subjects(other_tag, tag)
    if show_files:
        diff.files = io_layer.changed_files(other_tag, tag)
    return diff
