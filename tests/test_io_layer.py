"""Unit tests for the IOLayer git commands."""

import pytest
from git.exc import GitCommandError

from esh_cli.io_layer import TAG_DETAILS_FORMAT, IOLayer
from esh_cli.models import TagInfo
from esh_cli.exceptions import GitOperationError


class TestTagQueries:
    """Test tag listing and ref queries."""

    def test_list_tags_with_comments(self, io_layer, mock_repo):
        """Test that tags are listed with comments, oldest first."""
        mock_repo.git.tag.return_value = "stg6_1.2-0 first\nstg6_1.2-1 second\n"

        output = io_layer.list_tags_with_comments("stg6_1.2", "stg6_1.2-*")

        assert output == "stg6_1.2-0 first\nstg6_1.2-1 second"
        mock_repo.git.tag.assert_called_once_with(
            "--list", "-n1", "stg6_1.2", "stg6_1.2-*", "--sort=creatordate"
        )

    def test_list_tags(self, io_layer, mock_repo):
        """Test that tag names are split into a list, highest version first."""
        mock_repo.git.tag.return_value = "stg6_1.3.0-1\nstg6_1.2.9-4\n"

        assert io_layer.list_tags("stg6_*") == ["stg6_1.3.0-1", "stg6_1.2.9-4"]
        mock_repo.git.tag.assert_called_once_with("--list", "stg6_*", "--sort=-version:refname")

    def test_list_tags_empty(self, io_layer):
        assert io_layer.list_tags("stg6_*") == []

    def test_list_tag_details(self, io_layer, mock_repo):
        """Test that annotated tags resolve to their commit and lightweight tags to their object."""
        mock_repo.git.tag.return_value = (
            "stg6_1.2.3-1\t1704067200\tc0ffee\ttagobj\tRelease 1.2.3\n"
            "api_stg6_1.2.3-2\t1704153600\t\tdeadbeef\t\t\n"
        )

        details = io_layer.list_tag_details("stg6_*", "*_stg6_*")

        assert details == [
            TagInfo("stg6_1.2.3-1", 1704067200, "c0ffee", "Release 1.2.3"),
            TagInfo("api_stg6_1.2.3-2", 1704153600, "deadbeef", ""),
        ]
        mock_repo.git.tag.assert_called_once_with(
            "--list", "stg6_*", "*_stg6_*", f"--format={TAG_DETAILS_FORMAT}"
        )

    def test_list_tag_details_empty(self, io_layer):
        assert io_layer.list_tag_details("stg6_*") == []

    def test_changed_files(self, io_layer, mock_repo):
        mock_repo.git.diff.return_value = "README.md\nsrc/app.py\n"

        assert io_layer.changed_files("stg6_1.2.3-1", "stg6_1.2.4-1") == ["README.md", "src/app.py"]
        mock_repo.git.diff.assert_called_once_with("--name-only", "stg6_1.2.3-1..stg6_1.2.4-1")

    def test_commit_subjects(self, io_layer, mock_repo):
        mock_repo.git.log.return_value = "feat: a\nfix: b"

        assert io_layer.commit_subjects("stg6_1.2.3-1", "HEAD") == ["feat: a", "fix: b"]
        mock_repo.git.log.assert_called_once_with("--pretty=format:%s", "stg6_1.2.3-1..HEAD")

    def test_commit_subjects_none(self, io_layer):
        """Test that no commits between refs is an empty list, not an error."""
        assert io_layer.commit_subjects("stg6_1.2.3-1", "HEAD") == []

    def test_commit_subjects_requires_refs(self, io_layer):
        with pytest.raises(GitOperationError):
            io_layer.commit_subjects("", "HEAD")

    def test_resolve_commit(self, io_layer, mock_repo):
        mock_repo.git.rev_list.return_value = "abc123def456\n"

        assert io_layer.resolve_commit("stg6_1.2-0") == "abc123def456"
        mock_repo.git.rev_list.assert_called_once_with("-n", "1", "stg6_1.2-0")

    def test_resolve_commit_empty(self, io_layer):
        with pytest.raises(GitOperationError):
            io_layer.resolve_commit("nothing")

    def test_remote_sha_uses_remote(self, mock_repo):
        mock_repo.git.rev_list.return_value = "abc"
        io_layer = IOLayer(mock_repo, remote="upstream")

        assert io_layer.remote_sha("main") == "abc"
        mock_repo.git.rev_list.assert_called_once_with("-n", "1", "upstream/main")

    def test_current_branch(self, io_layer, mock_repo):
        mock_repo.git.rev_parse.return_value = "release_1.2"

        assert io_layer.current_branch() == "release_1.2"
        mock_repo.git.rev_parse.assert_called_once_with("--abbrev-ref", "HEAD")

    def test_git_error_is_wrapped(self, io_layer, mock_repo):
        """Test that GitCommandError surfaces as GitOperationError."""
        mock_repo.git.tag.side_effect = GitCommandError("git tag", 128, stderr="fatal: not a git repository")

        with pytest.raises(GitOperationError, match="not a git repository"):
            io_layer.list_tags("stg6_*")


class TestTagWrites:
    """Test tag creation and push, with and without dry run."""

    def test_create_and_push(self, io_layer, mock_repo):
        assert io_layer.create_tag("stg6_1.2-1", "release", "abc123") is True
        assert io_layer.push_tag("stg6_1.2-1") is True

        mock_repo.git.tag.assert_called_once_with("-a", "stg6_1.2-1", "-m", "release", "abc123")
        mock_repo.git.push.assert_called_once_with("origin", "stg6_1.2-1")

    def test_dry_run_does_not_write(self, mock_repo, capsys):
        io_layer = IOLayer(mock_repo, dry_run=True)

        assert io_layer.create_tag("stg6_1.2-1", "release", "abc12345ffff") is False
        assert io_layer.push_tag("stg6_1.2-1") is False

        mock_repo.git.tag.assert_not_called()
        mock_repo.git.push.assert_not_called()
        output = capsys.readouterr().out
        assert "[DRY RUN] Would create tag stg6_1.2-1 on abc12345" in output
        assert "[DRY RUN] Would push stg6_1.2-1 to origin" in output
