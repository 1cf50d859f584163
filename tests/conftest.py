"""Pytest configuration and fixtures for reference checker tests."""

import json
import os
import shutil
import subprocess
import tempfile
from pathlib import Path
from typing import Generator

import pytest

ACTIVITIES_HEADER = "UUID,Title,Action Link,Logic\n"


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    temp_path = Path(tempfile.mkdtemp(prefix="checkrefs_test_"))
    try:
        yield temp_path
    finally:
        if temp_path.exists():
            shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture(autouse=True)
def clean_action_env(monkeypatch):
    """Keep the runner's INPUT_* and GITHUB_* variables out of tests."""
    for name in list(os.environ):
        if name.startswith("INPUT_") or name in ("GITHUB_WORKSPACE", "GITHUB_STEP_SUMMARY"):
            monkeypatch.delenv(name, raising=False)


class GitRepoHelper:
    """Helper class for git repository operations in tests."""

    def __init__(self, repo_path: Path):
        self.repo_path = repo_path
        self.env = os.environ.copy()
        self.env.update({
            "GIT_AUTHOR_NAME": "Test User",
            "GIT_AUTHOR_EMAIL": "test@example.com",
            "GIT_COMMITTER_NAME": "Test User",
            "GIT_COMMITTER_EMAIL": "test@example.com",
        })

    def run_git(self, args: list[str]) -> subprocess.CompletedProcess:
        """Run git command in the repository."""
        return subprocess.run(
            ["git"] + args,
            cwd=self.repo_path,
            env=self.env,
            check=True,
            capture_output=True,
            text=True,
        )

    def create_file(self, path: str, content: str) -> None:
        """Create a file with content."""
        file_path = self.repo_path / path
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(content, encoding="utf-8")

    def modify_file(self, path: str, content: str) -> None:
        """Modify an existing file."""
        self.create_file(path, content)

    def delete_file(self, path: str) -> None:
        """Delete a file."""
        file_path = self.repo_path / path
        if file_path.exists():
            file_path.unlink()

    def create_task(self, path: str, *media: str) -> None:
        """Create a task descriptor whose steps reference ``media``."""
        steps = [{"videoUrl": item} for item in media]
        self.create_file(path, json.dumps({"steps": steps}))

    def create_binary_file(self, path: str) -> None:
        """Create a binary media file."""
        file_path = self.repo_path / path
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_bytes(b"\x00\x00\x00\x18ftypmp42")

    def add_and_commit(self, message: str, files: list[str] = None) -> str:
        """Add files and create a commit, return commit SHA."""
        if files:
            for file in files:
                self.run_git(["add", file])
        else:
            self.run_git(["add", "-A"])

        self.run_git(["commit", "-m", message])
        return self.get_current_sha()

    def get_current_sha(self) -> str:
        """Get current commit SHA."""
        result = self.run_git(["rev-parse", "HEAD"])
        return result.stdout.strip()


@pytest.fixture
def git_repo(temp_dir: Path) -> Generator[Path, None, None]:
    """Create a temporary git repository for testing."""
    repo_path = temp_dir / "test_repo"
    repo_path.mkdir()

    helper = GitRepoHelper(repo_path)
    helper.run_git(["init"])
    helper.run_git(["config", "user.name", "Test User"])
    helper.run_git(["config", "user.email", "test@example.com"])

    (repo_path / "README.md").write_text("# Test Repository\n")
    helper.add_and_commit("Initial commit", ["README.md"])

    yield repo_path


@pytest.fixture
def git_helper(git_repo: Path) -> GitRepoHelper:
    """Create a git repository helper."""
    return GitRepoHelper(git_repo)


@pytest.fixture
def content_repo(git_helper: GitRepoHelper) -> GitRepoHelper:
    """A committed workspace where every reference resolves."""
    git_helper.create_file(
        "activities.csv",
        ACTIVITIES_HEADER
        + "1,Breathing,tasks/a.json,\n"
        + "2,Stretching,tasks/b.json,\n",
    )
    git_helper.create_file(
        "articles.csv",
        "Title,Article Link\nWelcome,articles/welcome.html\n",
    )
    git_helper.create_task("tasks/a.json", "video/a.mp4")
    git_helper.create_task("tasks/b.json", "video/b.mp4")
    git_helper.create_binary_file("video/a.mp4")
    git_helper.create_binary_file("video/b.mp4")
    git_helper.create_file("articles/welcome.html", "<p>Welcome</p>\n")
    git_helper.add_and_commit("Add content")
    return git_helper
