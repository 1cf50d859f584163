"""Version control system operations for the reference checker."""

import logging
import subprocess
from dataclasses import dataclass
from functools import cached_property
from typing import Dict, FrozenSet, List, Optional, Tuple

from .errors import VcsUnavailableError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileChangeRecord:
    """One file touched between two revisions."""

    path_from: Optional[str]
    path_to: Optional[str]
    status: str = "M"  # A, M, D, R, C, T

    @property
    def paths(self) -> Tuple[str, ...]:
        """Both sides of the change, skipping absent ones."""
        return tuple(p for p in (self.path_from, self.path_to) if p)


@dataclass(frozen=True)
class FileDiff:
    """Files touched by a base...head revision range."""

    base: str
    head: str
    records: Tuple[FileChangeRecord, ...] = ()

    @cached_property
    def changed_paths(self) -> FrozenSet[str]:
        """Every path that appears on either side of a change."""
        return frozenset(path for record in self.records for path in record.paths)

    def touches(self, path: Optional[str]) -> bool:
        """Whether ``path`` was added, removed, modified or renamed."""
        return bool(path) and path in self.changed_paths


class GitRepository:
    """Git operations against an existing checkout."""

    def __init__(self, workspace: str, env: Optional[Dict[str, str]] = None):
        """Initialize with the checkout root and git environment."""
        self.workspace = workspace
        self.env = env

    def _run_git(self, args: List[str], operation: str) -> subprocess.CompletedProcess:
        """Run git to completion, translating failures into VcsUnavailableError."""
        # Enforce deterministic git behavior across platforms
        cmd = [
            "git",
            "-c",
            "core.autocrlf=false",
            "-c",
            "color.ui=false",
            "-c",
            "core.quotepath=false",
        ] + args
        logger.debug("Running git", extra={"git_args": args})
        try:
            return subprocess.run(
                cmd,
                cwd=self.workspace,
                env=self.env,
                check=True,
                capture_output=True,
                text=True,
                encoding="utf-8",
            )
        except FileNotFoundError as e:
            raise VcsUnavailableError(operation, "git executable not found") from e
        except NotADirectoryError as e:
            raise VcsUnavailableError(operation, f"workspace {self.workspace} is not a directory") from e
        except subprocess.CalledProcessError as e:
            reason = (e.stderr or "").strip() or f"exit status {e.returncode}"
            raise VcsUnavailableError(operation, reason) from e

    def verify_revision(self, revision: str) -> str:
        """Resolve ``revision`` to a commit SHA."""
        if not revision:
            raise VcsUnavailableError("rev-parse", "empty revision")
        if revision.startswith("-"):
            raise VcsUnavailableError("rev-parse", f"invalid revision {revision}")
        try:
            result = self._run_git(
                ["rev-parse", "--verify", "--quiet", f"{revision}^{{commit}}"],
                "rev-parse",
            )
        except VcsUnavailableError as e:
            raise VcsUnavailableError("rev-parse", f"unknown revision {revision}") from e
        return result.stdout.strip()

    def is_checkout(self) -> bool:
        """Whether the workspace is inside a git work tree."""
        try:
            result = self._run_git(["rev-parse", "--is-inside-work-tree"], "rev-parse")
        except VcsUnavailableError:
            return False
        return result.stdout.strip() == "true"

    def show(self, revision: str, path: str) -> str:
        """Return the content of ``path`` as it existed at ``revision``.

        The revision is resolved to a commit first so it never reaches
        ``git show`` as an option.
        """
        commit = self.verify_revision(revision)
        git_path = path.replace("\\", "/")
        if git_path.startswith("./"):
            git_path = git_path[2:]
        result = self._run_git(["show", f"{commit}:{git_path}"], "show")
        return result.stdout

    def diff(self, base: str, head: str) -> FileDiff:
        """Get the files touched between ``base`` and ``head``."""
        self.verify_revision(base)
        self.verify_revision(head)

        diff_args = [
            "diff",
            "--name-status",
            "--find-renames",
            "--no-color",
            f"{base}...{head}",
        ]
        result = self._run_git(diff_args, "diff")

        records = []
        for line in result.stdout.split("\n"):
            if not line:
                continue
            record = self._parse_diff_line(line)
            if record:
                records.append(record)

        logger.info(
            "Collected file changes",
            extra={"base": base, "head": head, "changes": len(records)},
        )
        return FileDiff(base=base, head=head, records=tuple(records))

    def _parse_diff_line(self, line: str) -> Optional[FileChangeRecord]:
        """Parse a single line from git diff --name-status output."""
        parts = line.split("\t")
        if len(parts) < 2 or not parts[0]:
            return None

        status = parts[0][0]

        if status in "RC":
            # Rename/copy: old_path -> new_path
            if len(parts) < 3:
                return None
            return FileChangeRecord(path_from=parts[1], path_to=parts[2], status=status)
        if status == "A":
            return FileChangeRecord(path_from=None, path_to=parts[1], status=status)
        if status == "D":
            return FileChangeRecord(path_from=parts[1], path_to=None, status=status)
        return FileChangeRecord(path_from=parts[1], path_to=parts[1], status=status)
