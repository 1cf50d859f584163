"""Tests for configuration module."""

import pytest

from checkrefs.config import CheckConfig, split_magic_tasks


class TestCheckConfig:
    """Test CheckConfig class."""

    def test_default_config(self):
        """Test default configuration values."""
        config = CheckConfig(workspace="/srv/content")

        assert config.activities_csv == "./activities.csv"
        assert config.articles_csv == "./articles.csv"
        assert config.magic_tasks == ()
        assert config.git_base_sha is None
        assert config.git_head_sha is None
        assert config.task_glob == "tasks/*.json"
        assert config.media_glob == "video/*"
        assert config.article_glob == "articles/*.html"
        assert config.key_column == "UUID"
        assert config.task_link_column == "Action Link"
        assert config.article_link_column == "Article Link"
        assert config.compare_revisions is False

    def test_compare_revisions_needs_both(self):
        assert CheckConfig(workspace="/w", git_base_sha="a", git_head_sha="b").compare_revisions
        assert not CheckConfig(workspace="/w", git_base_sha="a").compare_revisions
        assert not CheckConfig(workspace="/w", git_head_sha="b").compare_revisions

    def test_validation_missing_workspace(self):
        with pytest.raises(ValueError, match="workspace must be set"):
            CheckConfig(workspace="")

    def test_validation_missing_manifest(self):
        with pytest.raises(ValueError, match="activities_csv must be set"):
            CheckConfig(workspace="/w", activities_csv="")

    def test_validation_missing_key_column(self):
        with pytest.raises(ValueError, match="key_column must be set"):
            CheckConfig(workspace="/w", key_column="")

    def test_frozen(self):
        config = CheckConfig(workspace="/w")
        with pytest.raises(AttributeError):
            config.workspace = "/other"

    def test_git_env(self):
        env = CheckConfig(workspace="/w").git_env
        assert env["LC_ALL"] == "C"
        assert env["GIT_TERMINAL_PROMPT"] == "0"
        assert env["GIT_PAGER"] == "cat"

    def test_to_provenance_dict(self):
        config = CheckConfig(
            workspace="/w",
            magic_tasks=("tasks/a.json",),
            git_base_sha="abc",
            git_head_sha="def",
        )
        provenance = config.to_provenance_dict()
        assert provenance["magic_tasks"] == ["tasks/a.json"]
        assert provenance["git_base_sha"] == "abc"
        assert provenance["globs"]["tasks"] == "tasks/*.json"
        assert provenance["columns"]["key"] == "UUID"
        assert "workspace" not in provenance


class TestSplitMagicTasks:
    """Test whitelist parsing."""

    def test_split(self):
        assert split_magic_tasks("tasks/a.json, tasks/b.json,,") == ("tasks/a.json", "tasks/b.json")

    def test_empty(self):
        assert split_magic_tasks("") == ()
