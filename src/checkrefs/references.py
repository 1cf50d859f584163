"""Cross-referencing of manifests against the files in the workspace."""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, Set, Tuple
from urllib.parse import unquote

from .config import CheckConfig
from .errors import MalformedTaskFileError
from .sets import intersection, subtract, union
from .table import Table, referenced_files

logger = logging.getLogger(__name__)

MEDIA_KEYS = ("videoUrl", "audioUrl")

MediaReferenceMap = Dict[str, Set[str]]


def discover_files(root: str, pattern: str) -> Set[str]:
    """Glob ``pattern`` under ``root`` and return POSIX paths relative to it."""
    root_path = Path(root)
    files = {
        path.relative_to(root_path).as_posix()
        for path in root_path.glob(pattern)
        if path.is_file()
    }
    logger.debug("Discovered files", extra={"pattern": pattern, "count": len(files)})
    return files


def extract_media_references(root: str, task_files: Iterable[str]) -> MediaReferenceMap:
    """Read each task descriptor and collect the media paths its steps use."""
    references: MediaReferenceMap = {}
    for task_file in sorted(task_files):
        absolute_path = Path(root) / task_file
        try:
            task_info = json.loads(absolute_path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, ValueError) as exc:
            raise MalformedTaskFileError(task_file, str(exc)) from exc
        if not isinstance(task_info, dict):
            raise MalformedTaskFileError(task_file, "expected a JSON object")

        steps = task_info.get("steps") or []
        if not isinstance(steps, list):
            raise MalformedTaskFileError(task_file, "'steps' must be a list")

        media = set()
        for step in steps:
            if not isinstance(step, dict):
                continue
            for key in MEDIA_KEYS:
                value = step.get(key)
                if isinstance(value, str) and value:
                    media.add(unquote(value))
        references[task_file] = media
    return references


def check_files(
    discovered: Iterable[str],
    referenced: Iterable[str],
    whitelist: Iterable[str] = (),
) -> Tuple[Set[str], Set[str]]:
    """Return (missing, unused) for one family of files."""
    used = union(referenced, whitelist)
    discovered = set(discovered)
    return subtract(used, discovered), subtract(discovered, used)


@dataclass
class ReferenceReport:
    """Outcome of checking every manifest against the workspace."""

    missing_tasks: Set[str] = field(default_factory=set)
    unused_tasks: Set[str] = field(default_factory=set)
    missing_media: Set[str] = field(default_factory=set)
    unused_media: Set[str] = field(default_factory=set)
    missing_articles: Set[str] = field(default_factory=set)
    unused_articles: Set[str] = field(default_factory=set)
    media_references: MediaReferenceMap = field(default_factory=dict)

    @property
    def failed(self) -> bool:
        """Missing tasks or media fail the run; missing articles only warn."""
        return bool(self.missing_tasks or self.missing_media)

    def groups(self) -> Tuple[Tuple[Set[str], str, bool], ...]:
        """Log groups in output order as (files, title, is_error)."""
        return (
            (self.missing_tasks, "Missing task files", True),
            (self.unused_tasks, "Unused task files", False),
            (self.missing_media, "Missing media files", True),
            (self.unused_media, "Unused media files", False),
            (self.missing_articles, "Missing article files", True),
            (self.unused_articles, "Unused article files", False),
        )


class ReferenceChecker:
    """Checks manifests, task descriptors and media against the workspace."""

    def __init__(self, config: CheckConfig):
        """Initialize with configuration."""
        self.config = config
        self.root = config.workspace_root

    def check(self, activities: Table, articles: Table) -> ReferenceReport:
        """Compute missing and unused files for tasks, media and articles."""
        task_files = discover_files(self.root, self.config.task_glob)
        used_tasks = referenced_files(activities, self.config.task_link_column)
        media_references = extract_media_references(
            self.root, intersection(used_tasks, task_files)
        )
        missing_tasks, unused_tasks = check_files(
            task_files, used_tasks, self.config.magic_tasks
        )

        media_files = discover_files(self.root, self.config.media_glob)
        used_media: Set[str] = set()
        for paths in media_references.values():
            used_media = union(used_media, paths)
        missing_media, unused_media = check_files(media_files, used_media)

        article_files = discover_files(self.root, self.config.article_glob)
        used_articles = referenced_files(articles, self.config.article_link_column)
        missing_articles, unused_articles = check_files(article_files, used_articles)

        report = ReferenceReport(
            missing_tasks=missing_tasks,
            unused_tasks=unused_tasks,
            missing_media=missing_media,
            unused_media=unused_media,
            missing_articles=missing_articles,
            unused_articles=unused_articles,
            media_references=media_references,
        )
        logger.info(
            "Reference check finished",
            extra={
                "missing_tasks": len(missing_tasks),
                "unused_tasks": len(unused_tasks),
                "missing_media": len(missing_media),
                "unused_media": len(unused_media),
                "missing_articles": len(missing_articles),
                "unused_articles": len(unused_articles),
            },
        )
        return report
