"""
Configuration Module for esh-cli

This module contains configuration settings and data structures used throughout the application.
It defines the tag grammar constants and the configuration class loaded from
``~/.esh-cli.yaml`` that controls which environments and projects are known.

Constants:
    DEFAULT_ENVIRONMENTS: Deployment environments accepted in tags
    VERSION_PATTERN: Legacy ``major.minor`` version
    SEMVER_VERSION_PATTERN: Semantic ``major.minor.patch`` version
    RELEASE_PATTERN: Plain release counter
    RELEASE_HOTFIX_PATTERN: ``release.hotfix`` counter pair
    VERSION_HOTFIX_PATTERN: ``major.minor-release.hotfix`` as typed on the command line
    RELEASE_BRANCH_PATTERN: Release branch name (``release_1.2``)
    DEFAULT_CONFIG_FILE: Location of the YAML configuration file
    DEFAULT_REMOTE: Git remote tags are pushed to

Classes:
    CliConfig: Configuration loaded from the YAML file and environment variables
"""

import os
import re
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

import dpath
import yaml

from .exceptions import ConfigError

logger = logging.getLogger(__name__)

# Constants
DEFAULT_ENVIRONMENTS = frozenset({"dev", "mimic2", "stg6", "demo", "production2"})
# Numeric tag fields never have leading zeros
CANONICAL_NUMBER = r"(0|[1-9]\d*)"
VERSION_PATTERN = re.compile(rf"^{CANONICAL_NUMBER}\.{CANONICAL_NUMBER}$", re.ASCII)
SEMVER_VERSION_PATTERN = re.compile(rf"^{CANONICAL_NUMBER}\.{CANONICAL_NUMBER}\.{CANONICAL_NUMBER}$", re.ASCII)
RELEASE_PATTERN = re.compile(rf"^{CANONICAL_NUMBER}$", re.ASCII)
RELEASE_HOTFIX_PATTERN = re.compile(rf"^{CANONICAL_NUMBER}\.{CANONICAL_NUMBER}$", re.ASCII)
VERSION_HOTFIX_PATTERN = re.compile(rf"^{CANONICAL_NUMBER}\.{CANONICAL_NUMBER}-{CANONICAL_NUMBER}\.{CANONICAL_NUMBER}$", re.ASCII)
RELEASE_BRANCH_PATTERN = re.compile(r"^release_(\d+)\.(\d+)", re.ASCII)
DEFAULT_CONFIG_FILE = Path.home() / ".esh-cli.yaml"
DEFAULT_REMOTE = "origin"
MAIN_BRANCHES = ("master", "main")


def _lookup(data: Dict, path: str):
    """Value at a '/' separated path of the YAML document, or None."""
    matches = dpath.values(data, path)
    return matches[0] if matches else None


@dataclass
class CliConfig:
    """Configuration for tag operations."""

    environments: frozenset = DEFAULT_ENVIRONMENTS
    projects: List[Dict[str, str]] = field(default_factory=list)
    remote: str = DEFAULT_REMOTE
    config_file: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict, env: Dict[str, str], config_file: Optional[str] = None) -> "CliConfig":
        """Create configuration from parsed YAML data and environment variables.

        Args:
            data: Parsed YAML document (may be empty)
            env: Dictionary of environment variables (typically os.environ)
            config_file: Path the data was read from, if any

        Returns:
            CliConfig instance
        """
        environments = _lookup(data, "environments") or DEFAULT_ENVIRONMENTS
        if env_override := env.get("ESH_CLI_ENVIRONMENTS", "").strip():
            environments = env_override
        if isinstance(environments, str):
            environments = [e for e in environments.split(",") if e.strip()]

        projects = _lookup(data, "projects") or []
        remote = env.get("ESH_CLI_REMOTE", "").strip() or _lookup(data, "remote") or DEFAULT_REMOTE

        return cls(
            environments=frozenset(str(e).strip() for e in environments),
            projects=[p for p in projects if isinstance(p, dict)],
            remote=str(remote),
            config_file=config_file,
        )

    @property
    def grammar(self):
        """Tag grammar accepting this configuration's environments."""
        from .tag_grammar import TagGrammar

        return TagGrammar(self.environments)

    def project_names(self) -> List[str]:
        """Names of all configured projects."""
        return [str(p.get("name", "unknown")) for p in self.projects]

    def find_project_path(self, service: str) -> Optional[str]:
        """Resolve a service name to its checkout path.

        Project names are matched case-insensitively.

        Returns:
            The project path, or None if no project matches
        """
        for project in self.projects:
            name = str(project.get("name", ""))
            if name.lower() == service.lower():
                return project.get("path")
        return None

    def validate(self) -> List[str]:
        """Validate the configuration.

        Returns:
            List of error messages (empty if valid)
        """
        errors = []

        if not self.environments:
            errors.append("At least one environment must be configured")

        for environment in sorted(self.environments):
            if not environment or "_" in environment:
                errors.append(f"Invalid environment name '{environment}': must be non-empty and contain no '_'")

        for i, project in enumerate(self.projects, 1):
            if not project.get("name"):
                errors.append(f"Project #{i} has no name")
            if not project.get("path"):
                errors.append(f"Project #{i} has no path")

        return errors


def load_config(path: Optional[str] = None, env: Optional[Dict[str, str]] = None) -> CliConfig:
    """Load configuration from a YAML file.

    The file is resolved from ``path``, then ``ESH_CLI_CONFIG``, then the
    default location. A missing file yields the default configuration.

    Args:
        path: Explicit config file path (from ``--config``)
        env: Optional environment variables dict (defaults to os.environ)

    Returns:
        CliConfig instance

    Raises:
        ConfigError: If the file exists but is not a valid YAML mapping
    """
    if env is None:
        env = os.environ

    config_path = Path(path or env.get("ESH_CLI_CONFIG") or DEFAULT_CONFIG_FILE).expanduser()
    if not config_path.exists():
        if path:
            raise ConfigError(f"Config file not found: {config_path}")
        logger.debug(f"No config file at {config_path}, using defaults")
        return CliConfig.from_dict({}, env)

    try:
        with config_path.open() as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {config_path} must contain a mapping")

    logger.debug(f"Using config file: {config_path}")
    return CliConfig.from_dict(data, env, config_file=str(config_path))
