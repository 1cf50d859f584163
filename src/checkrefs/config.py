"""Configuration management for the reference checker."""

import os
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple


def split_magic_tasks(value: str) -> Tuple[str, ...]:
    """Split a comma-separated whitelist of task paths, dropping blanks."""
    return tuple(item.strip() for item in value.split(",") if item.strip())


@dataclass(frozen=True)
class CheckConfig:
    """Configuration for one reference check run."""

    # Required parameters
    workspace: str

    # Manifests
    activities_csv: str = "./activities.csv"
    articles_csv: str = "./articles.csv"
    magic_tasks: Tuple[str, ...] = ()

    # Revision range
    git_base_sha: Optional[str] = None
    git_head_sha: Optional[str] = None

    # Output options
    step_summary_path: Optional[str] = None
    json_output_path: Optional[str] = None

    # File discovery
    task_glob: str = "tasks/*.json"
    media_glob: str = "video/*"
    article_glob: str = "articles/*.html"

    # Manifest columns
    key_column: str = "UUID"
    title_column: str = "Title"
    task_link_column: str = "Action Link"
    article_link_column: str = "Article Link"
    logic_column: str = "Logic"

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if not self.workspace:
            raise ValueError("workspace must be set")
        if not self.activities_csv:
            raise ValueError("activities_csv must be set")
        if not self.articles_csv:
            raise ValueError("articles_csv must be set")
        for name in ("key_column", "task_link_column", "article_link_column"):
            if not getattr(self, name):
                raise ValueError(f"{name} must be set")

    @property
    def workspace_root(self) -> str:
        """Absolute workspace path."""
        return os.path.abspath(self.workspace)

    @property
    def compare_revisions(self) -> bool:
        """Whether a base..head file diff should be computed."""
        return bool(self.git_base_sha and self.git_head_sha)

    @property
    def git_env(self) -> Dict[str, str]:
        """Get Git environment variables for deterministic output."""
        env = os.environ.copy()

        # Use platform-appropriate null device
        null_device = "NUL" if os.name == "nt" else "/dev/null"

        env.update(
            {
                "LC_ALL": "C",
                "GIT_CONFIG_SYSTEM": null_device,
                "GIT_TERMINAL_PROMPT": "0",
                "GIT_PAGER": "cat",
            }
        )
        return env

    def to_provenance_dict(self) -> Dict[str, Any]:
        """Convert config to provenance dictionary for output."""
        return {
            "activities_csv": self.activities_csv,
            "articles_csv": self.articles_csv,
            "magic_tasks": list(self.magic_tasks),
            "git_base_sha": self.git_base_sha,
            "git_head_sha": self.git_head_sha,
            "globs": {
                "tasks": self.task_glob,
                "media": self.media_glob,
                "articles": self.article_glob,
            },
            "columns": {
                "key": self.key_column,
                "title": self.title_column,
                "task_link": self.task_link_column,
                "article_link": self.article_link_column,
                "logic": self.logic_column,
            },
        }
