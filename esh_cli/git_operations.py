"""
Git Operations Module for esh-cli

This module handles opening the repository the tags live in.

Functions:
    open_repository: Opens the git repository for a project path

Raises:
    GitOperationError: When the path is not a git repository
"""

from git import Repo
from git.exc import InvalidGitRepositoryError, NoSuchPathError
from .exceptions import GitOperationError


def open_repository(path: str = ".") -> Repo:
    """Open the git repository containing ``path``."""
    try:
        return Repo(path, search_parent_directories=True)
    except (InvalidGitRepositoryError, NoSuchPathError) as e:
        raise GitOperationError(f"Not a git repository: {path}") from e
