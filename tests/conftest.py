"""Test fixtures for esh-cli.

This module provides shared fixtures used across multiple test modules.
It sets up mock git repositories and configuration files that simulate
the environment needed for testing.

Fixtures:
    mock_repo: A mock GitPython repository
    io_layer: An IOLayer over the mock repository
    sample_config_file: Creates a temporary ~/.esh-cli.yaml
"""

from unittest.mock import Mock

import pytest
import yaml

from esh_cli.io_layer import IOLayer


@pytest.fixture
def mock_repo():
    """Provides a mock Git repository whose git commands return empty output."""
    repo = Mock()
    repo.git = Mock()
    for command in ("tag", "log", "diff", "rev_list", "rev_parse", "push"):
        getattr(repo.git, command).return_value = ""
    return repo


@pytest.fixture
def io_layer(mock_repo):
    """Provides an IOLayer over the mock repository."""
    return IOLayer(mock_repo, dry_run=False)


@pytest.fixture
def sample_config_file(tmp_path):
    """Creates a temporary config file with two projects.

    The file lists projects the same way a user's ~/.esh-cli.yaml does:

    projects:
      - name: api       (path: tmp_path/api)
      - name: Frontend  (path: tmp_path/frontend)

    Returns:
        dict: A dictionary containing:
            - config_file (Path): Path to the config file
            - data (dict): The config file content
    """
    data = {
        "projects": [
            {"name": "api", "path": str(tmp_path / "api"), "type": "go"},
            {"name": "Frontend", "path": str(tmp_path / "frontend"), "type": "node"},
        ],
    }
    config_file = tmp_path / ".esh-cli.yaml"
    with config_file.open("w") as f:
        yaml.dump(data, f)

    return {"config_file": config_file, "data": data}
