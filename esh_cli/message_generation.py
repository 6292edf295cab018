"""
Message Generation Module

Pure functions for generating tag comments and console summaries.
This module contains no side effects - only text formatting logic.
"""

import json
from datetime import datetime, timezone
from typing import List, Dict, Optional, Tuple

from .models import BumpKind, TagAction, TagLine, TagPlan, VersionDiff, VersionInfo
from .version_analysis import count_changes


def default_tag_comment(plan: TagPlan) -> str:
    """
    Generate the default annotation for a new tag.

    Bumps describe the bump; every other tag is annotated with its own name.

    Args:
        plan: The tag plan

    Returns:
        Tag comment string
    """
    if plan.bump_kind is not None:
        return f"Bump {plan.bump_kind.value} version: {plan.new_tag}"
    return plan.new_tag


def format_confirmation(plan: TagPlan) -> str:
    """Generate the yes/no question asked before a tag is created."""
    if plan.action == TagAction.PROMOTE:
        return f"promote {plan.previous_tag} to {plan.new_tag}? (y/n)"
    if plan.bump_kind is not None:
        return f"Create new tag {plan.new_tag}? (y/n)"
    return f"add {plan.new_tag}? (y/n)"


def format_preview(plan: TagPlan, from_commit: str) -> str:
    """
    Generate the preview shown by ``bump-version --preview``.

    Args:
        plan: The bump plan
        from_commit: Ref the user asked to tag

    Returns:
        Multi-line preview string
    """
    bump = plan.bump_kind.value if plan.bump_kind else "none"
    return (
        "\n🔍 Preview Mode:\n"
        f"Current tag: {plan.previous_tag}\n"
        f"Bump type:   {bump}\n"
        f"New tag:     {plan.new_tag}\n"
        f"Target commit: {from_commit}\n"
        "\nTo create this tag, run the same command without --preview"
    )


def format_bump_summary(plan: TagPlan, previous_version: str, new_version: str) -> str:
    """Generate the summary printed after a bump has been pushed."""
    return (
        "\n📋 Summary:\n"
        f"Previous: {plan.previous_tag} ({previous_version})\n"
        f"New:      {plan.new_tag} ({new_version})\n"
        f"Bump:     {plan.bump_kind.value}\n"
        f"Commit:   {plan.target_commit[:8]}"
    )


def format_auto_detection(kind: BumpKind, commit_count: int) -> str:
    return f"Auto-detected bump type: {kind.value} (analyzed {commit_count} commits)"


def format_last_tag(tag_line: Optional[TagLine], environment: str, service: str = "") -> str:
    """Generate the output of ``last-tag``."""
    if tag_line is not None:
        return f"{tag_line.tag} {tag_line.comment}".strip()
    if service:
        return f"No tags found for service '{service}' in environment '{environment}'"
    return f"No tags found in current directory for environment '{environment}'"


def format_projects(projects: List[Dict[str, str]]) -> str:
    """
    Generate the listing of configured projects.

    Args:
        projects: Project entries from the configuration

    Returns:
        Multi-line listing, or a hint to configure projects if there are none
    """
    if not projects:
        return (
            "❌ No projects found in configuration.\n"
            "Add a 'projects' list to ~/.esh-cli.yaml to tag services by name."
        )

    lines = ["📁 Available services/projects:"]
    for project in projects:
        name = project.get("name", "unknown")
        project_type = project.get("type", "unknown")
        lines.append(f"  • {name} ({project_type}) {project.get('path', '')}".rstrip())
    return "\n".join(lines)


def _format_date(created: int, fmt: str = "%Y-%m-%d %H:%M") -> str:
    """Format a Unix timestamp in UTC, or ``unknown`` when missing."""
    if not created:
        return "unknown"
    return datetime.fromtimestamp(created, tz=timezone.utc).strftime(fmt)


def format_version_table(versions: List[VersionInfo]) -> str:
    """
    Generate the table output of ``version-list``, one block per environment.

    Args:
        versions: Versions in display order

    Returns:
        Multi-line table string
    """
    if not versions:
        return "No versions found matching criteria"

    groups: Dict[str, List[VersionInfo]] = {}
    for version in versions:
        groups.setdefault(version.tag.environment, []).append(version)

    lines = []
    for environment, group in groups.items():
        lines.append(f"\n🏷️  Environment: {environment}")
        lines.append(f"{'Tag':<25} {'Version':<12} {'Release':<8} {'Date':<20} Commit")
        lines.append("-" * 85)
        for v in group:
            lines.append(
                f"{v.name:<25} {str(v.version):<12} {v.release_label:<8} "
                f"{_format_date(v.info.created):<20} {v.info.commit[:8]}".rstrip()
            )
    return "\n".join(lines)


def format_versions_compact(versions: List[VersionInfo]) -> str:
    return "\n".join(f"{v.name} ({v.version})" for v in versions)


def format_versions_json(versions: List[VersionInfo]) -> str:
    """Generate the JSON output of ``version-list``."""
    records = []
    for v in versions:
        records.append({
            "tag": v.name,
            "environment": v.tag.environment,
            "service": v.tag.service or "",
            "version": str(v.version),
            "major": v.version.major,
            "minor": v.version.minor,
            "patch": v.version.patch,
            "release": v.release_label,
            "date": datetime.fromtimestamp(v.info.created, tz=timezone.utc).isoformat() if v.info.created else None,
            "commit": v.info.commit,
            "message": v.info.subject,
        })
    return json.dumps(records, indent=2, ensure_ascii=False)


def format_version_diff(diff: VersionDiff) -> str:
    """
    Generate the output of ``version-diff`` for two tags.

    Commit and file sections are only shown when they were collected.
    """
    lines = [
        f"📋 Comparing Versions: {diff.older} → {diff.newer}",
        "",
        f"Semantic Change: {diff.older_version} → {diff.newer_version} ({diff.change})",
    ]

    if diff.commits is not None:
        lines.append(f"\n📝 Commits between {diff.older} and {diff.newer}:")
        lines.extend(f"  • {commit}" for commit in diff.commits)
        if not diff.commits:
            lines.append("  No commits found")

    if diff.files is not None:
        lines.append("\n📁 Changed Files:")
        lines.extend(f"  • {path}" for path in diff.files)
        if not diff.files:
            lines.append("  No files changed")

    return "\n".join(lines)


def format_version_history(
    environment: str,
    history: List[Tuple[VersionInfo, str]],
    show_stats: bool = False,
) -> str:
    """
    Generate the environment history shown by ``version-diff ENV``.

    Args:
        environment: Environment name
        history: ``(version, change)`` pairs, newest first
        show_stats: Append counts of major, minor and patch steps

    Returns:
        Multi-line history string
    """
    lines = [f"📊 Version History for Environment: {environment}", ""]
    if not history:
        lines.append(f"No tags found for environment '{environment}'")
        return "\n".join(lines)

    lines.append(f"Found {len(history)} versions:")
    lines.append("")
    for v, change in history:
        line = f"  {v.name} ({v.version})"
        if v.info.created:
            line += f" - {_format_date(v.info.created, '%Y-%m-%d')}"
        if change:
            line += f" ({change})"
        lines.append(line)

    if show_stats:
        counts = count_changes(history)
        total = sum(counts.values())
        lines.append("\n📊 Environment Statistics:")
        lines.append(f"  Total Releases: {len(history)}")
        lines.append(f"  Major Bumps: {counts['MAJOR']}")
        lines.append(f"  Minor Bumps: {counts['MINOR']}")
        lines.append(f"  Patch Bumps: {counts['PATCH']}")
        if total:
            lines.append(
                f"  Release Types: {counts['PATCH'] / total * 100:.1f}% patch, "
                f"{counts['MINOR'] / total * 100:.1f}% minor, "
                f"{counts['MAJOR'] / total * 100:.1f}% major"
            )

    return "\n".join(lines)
