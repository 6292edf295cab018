"""
I/O Layer for esh-cli

This module contains all git operations separated from the tag logic.
This is the "imperative shell" that handles all side effects; the functions
in tag_grammar, semver, version_bumper, tag_incrementer, tag_selection and
commit_classification never touch the repository.
"""

import logging
from typing import List

from git import Repo
from git.exc import GitCommandError

from .config import DEFAULT_REMOTE
from .exceptions import GitOperationError
from .models import TagInfo

logger = logging.getLogger(__name__)

# name, creation time, peeled commit (annotated tags), object, subject
TAG_DETAILS_FORMAT = "%(refname:short)%09%(creatordate:unix)%09%(*objectname)%09%(objectname)%09%(contents:subject)"


class IOLayer:
    """Handles all git operations for the application."""

    def __init__(self, repo: Repo, dry_run: bool = False, remote: str = DEFAULT_REMOTE):
        """Initialize the I/O layer.

        Args:
            repo: Git repository object
            dry_run: If True, don't create or push tags
            remote: Remote tags are pushed to and compared against
        """
        self.repo = repo
        self.dry_run = dry_run
        self.remote = remote

    def _git(self, command: str, *args) -> str:
        """Run a git subcommand and return its stripped output."""
        logger.debug(f"> git {command} {' '.join(str(a) for a in args)}")
        try:
            return getattr(self.repo.git, command)(*args).strip()
        except GitCommandError as e:
            raise GitOperationError(f"git {command} failed: {e.stderr.strip() if e.stderr else e}") from e

    # -----------------------------------------------------------------------------
    # Tag Queries
    # -----------------------------------------------------------------------------

    def list_tags_with_comments(self, *patterns: str) -> str:
        """List tags matching any of the globs with the first line of their message.

        Args:
            patterns: Tag globs, e.g. ``stg6_1.2`` and ``stg6_1.2-*``

        Returns:
            ``<tag> <comment>`` lines, oldest first (empty string if none)
        """
        return self._git("tag", "--list", "-n1", *patterns, "--sort=creatordate")

    def list_tags(self, pattern: str) -> List[str]:
        """List tag names matching a glob, highest version first."""
        output = self._git("tag", "--list", pattern, "--sort=-version:refname")
        return [line.strip() for line in output.splitlines() if line.strip()]

    def list_tag_details(self, *patterns: str) -> List[TagInfo]:
        """List tags matching any of the globs with creation time, commit and subject."""
        output = self._git("tag", "--list", *patterns, f"--format={TAG_DETAILS_FORMAT}")

        details = []
        for line in output.splitlines():
            fields = line.split("\t", 4)
            fields += [""] * (5 - len(fields))
            name, created, peeled, objectname, subject = fields
            if not name.strip():
                continue
            details.append(TagInfo(
                name=name.strip(),
                created=int(created) if created.isdigit() else 0,
                # Lightweight tags point at the commit directly
                commit=peeled or objectname,
                subject=subject.strip(),
            ))
        return details

    def commit_subjects(self, from_ref: str, to_ref: str) -> List[str]:
        """Get commit subjects in ``from_ref..to_ref``.

        Returns:
            List of subjects, empty if there are no commits between the refs
        """
        if not from_ref or not to_ref:
            raise GitOperationError("both refs must be provided")

        output = self._git("log", "--pretty=format:%s", f"{from_ref}..{to_ref}")
        return [line for line in output.splitlines() if line.strip()]

    def changed_files(self, from_ref: str, to_ref: str) -> List[str]:
        """Get the paths changed in ``from_ref..to_ref``."""
        output = self._git("diff", "--name-only", f"{from_ref}..{to_ref}")
        return [line for line in output.splitlines() if line.strip()]

    # -----------------------------------------------------------------------------
    # Refs
    # -----------------------------------------------------------------------------

    def resolve_commit(self, ref: str) -> str:
        """Resolve a tag, branch or commit-ish to a commit SHA."""
        sha = self._git("rev_list", "-n", "1", ref)
        if not sha:
            raise GitOperationError(f"'{ref}' does not point to a commit")
        return sha

    def current_branch(self) -> str:
        return self._git("rev_parse", "--abbrev-ref", "HEAD")

    def local_sha(self) -> str:
        return self.resolve_commit("HEAD")

    def remote_sha(self, branch: str) -> str:
        return self.resolve_commit(f"{self.remote}/{branch}")

    # -----------------------------------------------------------------------------
    # Tag Writes
    # -----------------------------------------------------------------------------

    def create_tag(self, name: str, message: str, commit: str) -> bool:
        """Create an annotated tag.

        Args:
            name: Tag name
            message: Tag annotation
            commit: Commit to tag

        Returns:
            True if created, False if dry run
        """
        if self.dry_run:
            print(f"[DRY RUN] Would create tag {name} on {commit[:8]} with message: {message}")
            return False

        self._git("tag", "-a", name, "-m", message, commit)
        return True

    def push_tag(self, name: str) -> bool:
        """Push a tag to the remote.

        Returns:
            True if pushed, False if dry run
        """
        if self.dry_run:
            print(f"[DRY RUN] Would push {name} to {self.remote}")
            return False

        self._git("push", self.remote, name)
        return True
