#!/usr/bin/env python3

"""
Deployment Tag CLI

Simplified CLI using the Functional Core, Imperative Shell pattern.
All tag logic is in pure functions, all git access is in the I/O layer.
"""

import argparse
import logging
import sys

from . import __version__
from .config import MAIN_BRANCHES, CliConfig, load_config
from .exceptions import ConfigError, EshCliError, MalformedTagError
from .git_operations import open_repository
from .io_layer import IOLayer
from .message_generation import (
    format_auto_detection,
    format_bump_summary,
    format_confirmation,
    format_last_tag,
    format_preview,
    format_projects,
    format_version_diff,
    format_version_history,
    format_version_table,
    format_versions_compact,
    format_versions_json,
)
from .models import AddTagRequest, BumpKind, BumpRequest, ExecutionResult, TagAction
from .plan_builder import (
    find_most_recent_tag,
    list_versions,
    prepare_add_tag_plan,
    prepare_bump_plan,
    prepare_version_diff,
    version_history,
)
from .tag_grammar import TagGrammar
from .plan_executor import execute_plan
from .utils import ask, setup_logging
from .version_bumper import get_version_from_tag

logger = logging.getLogger(__name__)

VERSION_FORMATTERS = {
    "table": format_version_table,
    "json": format_versions_json,
    "compact": format_versions_compact,
}


def _open_io(args: argparse.Namespace, config: CliConfig, service: str) -> IOLayer:
    """Open the repository of ``service`` (or the current directory)."""
    project_path = "."
    if service:
        project_path = config.find_project_path(service)
        if project_path is None:
            available = ", ".join(config.project_names()) or "none"
            raise ConfigError(
                f"service '{service}' not found in configuration. Available services: {available}"
            )

    logger.debug(f"Using repository at {project_path}")
    return IOLayer(open_repository(project_path), dry_run=args.dry_run, remote=config.remote)


def _check_environment(grammar: TagGrammar, environment: str) -> None:
    if not grammar.is_environment_valid(environment):
        raise MalformedTagError(
            f"invalid environment '{environment}'. Valid environments: {sorted(grammar.environments)}"
        )


def _confirm(args: argparse.Namespace, question: str) -> bool:
    return args.yes or ask(question) == "y"


def _read_comment(args: argparse.Namespace, default: str) -> str:
    """Tag comment from --message, the prompt, or the default."""
    if args.message:
        return args.message
    if args.yes:
        return default
    return ask(f"Tag comment (default: {default})", lower=False) or default


def _report(result: ExecutionResult) -> int:
    if not result.success:
        for error in result.errors:
            print(f"Error: {error}", file=sys.stderr)
        return 1

    if result.dry_run:
        print(f"[DRY RUN] Tag {result.tag} was not created")
    else:
        print(f"✅ Successfully created and pushed tag: {result.tag}")
    return 0


def cmd_add_tag(args: argparse.Namespace, config: CliConfig) -> int:
    """Add and push a new release, hot fix or promotion tag."""
    io_layer = _open_io(args, config, args.service)
    request = AddTagRequest(
        environment=args.environment,
        version=args.version,
        service=args.service,
        promote_from=args.promote_from,
        hot_fix=args.hot_fix,
    )
    plan = prepare_add_tag_plan(request, io_layer, config.grammar)

    if plan.branch not in MAIN_BRANCHES and not args.hot_fix:
        if not _confirm(args, f"Current branch is {plan.branch}. Continue? (y/n)"):
            return 0

    if not _confirm(args, format_confirmation(plan)):
        print("Operation cancelled")
        return 0

    plan.comment = _read_comment(args, plan.comment)
    return _report(execute_plan(plan, io_layer))


def cmd_bump_version(args: argparse.Namespace, config: CliConfig) -> int:
    """Create a tag for the next semantic version."""
    grammar = config.grammar
    io_layer = _open_io(args, config, args.service)
    request = BumpRequest(
        environment=args.environment,
        bump_kind=BumpKind(args.bump),
        service=args.service,
        from_commit=args.from_commit,
    )
    plan = prepare_bump_plan(request, io_layer, grammar)

    previous_version = get_version_from_tag(plan.previous_tag, grammar)
    print(f"Current latest tag: {plan.previous_tag} (version: {previous_version})")
    if plan.commits_analyzed:
        print(format_auto_detection(plan.bump_kind, plan.commits_analyzed))

    if args.preview:
        print(format_preview(plan, args.from_commit))
        return 0

    if not _confirm(args, format_confirmation(plan)):
        print("Operation cancelled")
        return 0

    plan.comment = _read_comment(args, plan.comment)
    result = execute_plan(plan, io_layer)
    exit_code = _report(result)
    if exit_code == 0 and not result.dry_run:
        new_version = get_version_from_tag(plan.new_tag, grammar)
        print(format_bump_summary(plan, previous_version, new_version))
    return exit_code


def cmd_last_tag(args: argparse.Namespace, config: CliConfig) -> int:
    """Show the most recent tag of an environment."""
    grammar = config.grammar
    _check_environment(grammar, args.environment)

    io_layer = _open_io(args, config, args.service)
    tag_line = find_most_recent_tag(io_layer, args.environment, args.service, grammar)
    print(format_last_tag(tag_line, args.environment, args.service))
    return 0


def cmd_version_list(args: argparse.Namespace, config: CliConfig) -> int:
    """List semantic versions of one or all environments."""
    grammar = config.grammar
    if args.all:
        environments = sorted(grammar.environments)
    elif not args.environment:
        print("Error: must specify environment or use --all flag", file=sys.stderr)
        return 1
    else:
        _check_environment(grammar, args.environment)
        environments = [args.environment]

    io_layer = _open_io(args, config, args.service)
    versions = list_versions(
        io_layer,
        environments,
        args.service,
        grammar,
        major=args.major,
        minor=args.minor,
        sort_by=args.sort,
        limit=args.limit,
    )
    print(VERSION_FORMATTERS[args.format](versions))
    return 0


def cmd_version_diff(args: argparse.Namespace, config: CliConfig) -> int:
    """Compare two tags, or show the version history of an environment."""
    grammar = config.grammar
    io_layer = _open_io(args, config, args.service)

    if args.other is None and grammar.is_environment_valid(args.target):
        history = version_history(io_layer, args.target, args.service, grammar)
        print(format_version_history(args.target, history, args.stats))
        return 0

    diff = prepare_version_diff(
        io_layer,
        args.target,
        args.other or "",
        grammar,
        show_commits=args.commits,
        show_files=args.files,
    )
    print(format_version_diff(diff))
    return 0


def cmd_projects(args: argparse.Namespace, config: CliConfig) -> int:
    """List the projects configured in the config file."""
    print(format_projects(config.projects))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="esh-cli",
        description=(
            "Manage deployment tags. Tag format is "
            "[service_]env_major.minor[.patch]-release[.hotfix]"
        ),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--config", help="config file (default is $HOME/.esh-cli.yaml)")
    parser.add_argument("--dry-run", action="store_true", help="show what would be tagged without creating tags")
    parser.add_argument("-y", "--yes", action="store_true", help="answer yes to all confirmation prompts")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    add_tag = subparsers.add_parser(
        "add-tag",
        help="add and push a new tag",
        description="Adds and pushes a new release or hot fix tag, or promotes an existing tag.",
    )
    add_tag.add_argument("environment", help="environment to tag, e.g. stg6")
    add_tag.add_argument("version", help="version line, e.g. 1.2 or 1.2.1")
    add_tag.add_argument("-f", "--from", dest="promote_from", default="", help="tag to promote from")
    add_tag.add_argument("--hot-fix", action="store_true", help="tag hot fix (from a release_X.Y branch)")
    add_tag.add_argument("-s", "--service", default="", help="service name to tag")
    add_tag.add_argument("-m", "--message", default="", help="tag comment")
    add_tag.set_defaults(handler=cmd_add_tag)

    bump = subparsers.add_parser(
        "bump-version",
        help="bump the semantic version of tags",
        description="Creates env_major.minor.patch-1 for the next semantic version.",
    )
    bump.add_argument("environment", help="environment to tag, e.g. stg6")
    kinds = bump.add_mutually_exclusive_group(required=True)
    kinds.add_argument("--major", dest="bump", action="store_const", const=BumpKind.MAJOR.value,
                       help="bump major version (breaking changes)")
    kinds.add_argument("--minor", dest="bump", action="store_const", const=BumpKind.MINOR.value,
                       help="bump minor version (new features)")
    kinds.add_argument("--patch", dest="bump", action="store_const", const=BumpKind.PATCH.value,
                       help="bump patch version (bug fixes)")
    kinds.add_argument("--auto", dest="bump", action="store_const", const=BumpKind.AUTO.value,
                       help="auto-detect bump type from commit messages")
    bump.add_argument("--preview", action="store_true", help="preview the change without creating tag")
    bump.add_argument("-s", "--service", default="", help="service name to tag")
    bump.add_argument("--from-commit", default="HEAD", help="commit to tag (default: HEAD)")
    bump.add_argument("-m", "--message", default="", help="tag comment")
    bump.set_defaults(handler=cmd_bump_version)

    last_tag = subparsers.add_parser("last-tag", help="show the last tag for an environment")
    last_tag.add_argument("environment", help="environment, e.g. stg6")
    last_tag.add_argument("-s", "--service", default="", help="service name to check")
    last_tag.set_defaults(handler=cmd_last_tag)

    version_list = subparsers.add_parser(
        "version-list",
        help="list semantic versions with filtering",
        description="Lists semantic version tags of an environment, or of all environments with --all.",
    )
    version_list.add_argument("environment", nargs="?", help="environment, e.g. stg6")
    version_list.add_argument("--all", action="store_true", help="show all environments")
    version_list.add_argument("--major", type=int, help="filter by major version")
    version_list.add_argument("--minor", type=int, help="filter by minor version")
    version_list.add_argument("--format", choices=sorted(VERSION_FORMATTERS), default="table",
                              help="output format (default: table)")
    version_list.add_argument("--sort", choices=("version", "date"), default="version",
                              help="sort order (default: version)")
    version_list.add_argument("--limit", type=int, default=10,
                              help="maximum number of results per environment, 0 for all (default: 10)")
    version_list.add_argument("-s", "--service", default="", help="service name to list")
    version_list.set_defaults(handler=cmd_version_list)

    version_diff = subparsers.add_parser(
        "version-diff",
        help="compare versions and analyze semantic differences",
        description=(
            "Compares TAG with OTHER (default: the tag before TAG). "
            "Given an environment instead of a tag, shows its version history."
        ),
    )
    version_diff.add_argument("target", metavar="TAG|ENV", help="newer tag, or environment for history")
    version_diff.add_argument("other", nargs="?", metavar="OTHER", help="older tag to compare with")
    version_diff.add_argument("--commits", action="store_true", help="show commits between versions")
    version_diff.add_argument("--files", action="store_true", help="show changed files")
    version_diff.add_argument("--stats", action="store_true", help="show bump statistics of the history")
    version_diff.add_argument("-s", "--service", default="", help="service name")
    version_diff.set_defaults(handler=cmd_version_diff)

    projects = subparsers.add_parser("projects", help="list configured projects")
    projects.set_defaults(handler=cmd_projects)

    return parser


def main(argv=None):
    """Main entry point - parse arguments, plan, then execute."""
    args = build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.WARNING)

    try:
        config = load_config(args.config)

        errors = config.validate()
        if errors:
            for error in errors:
                print(f"Error: {error}", file=sys.stderr)
            sys.exit(1)

        sys.exit(args.handler(args, config))
    except EshCliError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        print("\nOperation cancelled")
        sys.exit(1)
    except Exception as e:
        print(f"Unexpected error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
