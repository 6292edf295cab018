"""Tests for configuration loading."""

import pytest

from esh_cli.config import DEFAULT_ENVIRONMENTS, DEFAULT_REMOTE, CliConfig, load_config
from esh_cli.exceptions import ConfigError


class TestLoadConfig:
    """Test reading ~/.esh-cli.yaml."""

    def test_missing_default_file_uses_defaults(self, tmp_path):
        config = load_config(env={"ESH_CLI_CONFIG": str(tmp_path / "missing.yaml")})

        assert config.environments == DEFAULT_ENVIRONMENTS
        assert config.projects == []
        assert config.remote == DEFAULT_REMOTE
        assert config.config_file is None

    def test_missing_explicit_file_raises(self, tmp_path):
        with pytest.raises(ConfigError):
            load_config(str(tmp_path / "missing.yaml"), env={})

    def test_projects(self, sample_config_file, tmp_path):
        config = load_config(str(sample_config_file["config_file"]), env={})

        assert config.project_names() == ["api", "Frontend"]
        assert config.find_project_path("api") == str(tmp_path / "api")
        assert config.find_project_path("frontend") == str(tmp_path / "frontend")
        assert config.find_project_path("unknown") is None
        assert config.config_file == str(sample_config_file["config_file"])

    def test_config_file_from_environment(self, sample_config_file):
        config = load_config(env={"ESH_CLI_CONFIG": str(sample_config_file["config_file"])})
        assert len(config.projects) == 2

    def test_environments_and_remote(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("environments: [dev, staging, production]\nremote: upstream\n")

        config = load_config(str(config_file), env={})

        assert config.environments == frozenset({"dev", "staging", "production"})
        assert config.remote == "upstream"
        assert config.grammar.is_valid("staging_1.2.3-1")
        assert not config.grammar.is_valid("stg6_1.2.3-1")

    def test_environment_variable_overrides(self, sample_config_file):
        env = {"ESH_CLI_ENVIRONMENTS": "qa, prod", "ESH_CLI_REMOTE": "mirror"}

        config = load_config(str(sample_config_file["config_file"]), env=env)

        assert config.environments == frozenset({"qa", "prod"})
        assert config.remote == "mirror"

    def test_invalid_yaml(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("projects: [unclosed\n")

        with pytest.raises(ConfigError):
            load_config(str(config_file), env={})

    def test_non_mapping(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("- just\n- a list\n")

        with pytest.raises(ConfigError):
            load_config(str(config_file), env={})


class TestConfigValidation:
    """Test configuration validation."""

    def test_default_config_is_valid(self):
        assert CliConfig().validate() == []

    def test_invalid_environment_names(self):
        errors = CliConfig(environments=frozenset({"prod_eu"})).validate()
        assert any("prod_eu" in e for e in errors)

    def test_empty_environments(self):
        assert "At least one environment must be configured" in CliConfig(environments=frozenset()).validate()

    def test_incomplete_projects(self):
        errors = CliConfig(projects=[{"name": "api"}, {"path": "/src"}]).validate()
        assert errors == ["Project #1 has no path", "Project #2 has no name"]
