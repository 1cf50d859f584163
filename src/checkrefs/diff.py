"""Row-level diffing of manifest snapshots."""

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, NamedTuple, Optional, Set
from urllib.parse import unquote

from .sets import intersection, subtract
from .table import Row, Table, get_value
from .vcs import FileDiff

logger = logging.getLogger(__name__)


class ModifiedRow(NamedTuple):
    """Both versions of a row whose key survived the revision range."""

    before: Row
    after: Row


@dataclass
class TableDiff:
    """Added, removed and modified rows keyed by identity value."""

    added: Dict[str, Row] = field(default_factory=dict)
    removed: Dict[str, Row] = field(default_factory=dict)
    modified: Dict[str, ModifiedRow] = field(default_factory=dict)

    def __bool__(self) -> bool:
        return bool(self.added or self.removed or self.modified)

    def keys(self) -> List[str]:
        """Every key in the diff, in rendering order."""
        return list(self.added) + list(self.removed) + list(self.modified)


def normalize_eol(value: str) -> str:
    """Treat CRLF and LF line endings as equal."""
    return value.replace("\r\n", "\n")


def modified_columns(before: Row, after: Row) -> List[str]:
    """Columns present in both rows whose values differ.

    Columns that only exist on one side are not reported.
    """
    columns = list(before) + [column for column in after if column not in before]
    changed = []
    for column in columns:
        old = get_value(before, column)
        new = get_value(after, column)
        if old is None or new is None:
            continue
        if normalize_eol(old) != normalize_eol(new):
            changed.append(column)
    return changed


class TableDiffer:
    """Computes the row diff between two snapshots of one manifest."""

    def __init__(self, key_column: str = "UUID", link_column: str = "Action Link"):
        """Initialize with the identity and task-link column names."""
        self.key_column = key_column
        self.link_column = link_column

    def key_table(self, table: Table) -> Dict[str, Row]:
        """Index rows by identity key, dropping empty and duplicate keys."""
        counts = Counter(get_value(row, self.key_column) for row in table)
        duplicates = sorted(key for key, count in counts.items() if key and count > 1)
        if duplicates:
            logger.warning(
                "Ignoring rows with duplicate keys",
                extra={"column": self.key_column, "keys": duplicates},
            )

        keyed: Dict[str, Row] = {}
        for row in table:
            key = get_value(row, self.key_column)
            if not key or counts[key] > 1:
                continue
            keyed[key] = row
        return keyed

    def linked_file(self, row: Row) -> Optional[str]:
        """The task path a row points at, percent-decoded."""
        value = get_value(row, self.link_column)
        if not value:
            return None
        return unquote(value)

    def changed_task(self, row: Row, file_diff: Optional[FileDiff]) -> Optional[str]:
        """The row's task path if the revision range touched it."""
        if file_diff is None:
            return None
        task = self.linked_file(row)
        if task and file_diff.touches(task):
            return task
        return None

    def changed_media(
        self,
        row: Row,
        media_references: Mapping[str, Set[str]],
        file_diff: Optional[FileDiff],
    ) -> List[str]:
        """Media paths referenced by the row's task that the range touched."""
        if file_diff is None:
            return []
        task = self.linked_file(row)
        if not task:
            return []
        return sorted(path for path in media_references.get(task, ()) if file_diff.touches(path))

    def is_modified(
        self,
        before: Row,
        after: Row,
        media_references: Mapping[str, Set[str]],
        file_diff: Optional[FileDiff] = None,
    ) -> bool:
        """Whether a row changed directly or through the files it references."""
        if modified_columns(before, after):
            return True
        if self.changed_task(after, file_diff):
            return True
        return bool(self.changed_media(after, media_references, file_diff))

    def compute_diff(
        self,
        base: Table,
        head: Table,
        media_references: Mapping[str, Set[str]],
        file_diff: Optional[FileDiff] = None,
    ) -> TableDiff:
        """Partition the keys of both snapshots into added, removed and modified."""
        base_rows = self.key_table(base)
        head_rows = self.key_table(head)

        added_keys = subtract(head_rows, base_rows)
        removed_keys = subtract(base_rows, head_rows)
        common_keys = intersection(base_rows, head_rows)

        result = TableDiff()
        for key, row in head_rows.items():
            if key in added_keys:
                result.added[key] = row
        for key, row in base_rows.items():
            if key in removed_keys:
                result.removed[key] = row
        for key, after in head_rows.items():
            if key not in common_keys:
                continue
            before = base_rows[key]
            if self.is_modified(before, after, media_references, file_diff):
                result.modified[key] = ModifiedRow(before, after)

        logger.info(
            "Computed table diff",
            extra={
                "added": len(result.added),
                "removed": len(result.removed),
                "modified": len(result.modified),
                "file_diff": file_diff is not None,
            },
        )
        return result
