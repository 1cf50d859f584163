"""Manifest loading from the working tree or from a git revision."""

import csv
import io
import logging
import os
from typing import TYPE_CHECKING, Dict, List, Optional, Set
from urllib.parse import unquote

from .errors import MalformedTableError

if TYPE_CHECKING:
    from .vcs import GitRepository

logger = logging.getLogger(__name__)

Row = Dict[str, str]
Table = List[Row]


def get_value(row: Row, column: str) -> Optional[str]:
    """Return the cell for ``column``, or None when the row lacks the column.

    A present but empty cell is returned as ``""``.
    """
    return row.get(column)


def parse_table(text: str, source: str) -> Table:
    """Parse CSV text whose first record holds the column headers."""
    if text.startswith("\ufeff"):
        text = text[1:]

    reader = csv.reader(io.StringIO(text, newline=""))
    header: Optional[List[str]] = None
    rows: Table = []
    try:
        for record in reader:
            if not record or (len(record) == 1 and not record[0].strip()):
                continue
            if header is None:
                header = record
                continue
            if len(record) != len(header):
                raise MalformedTableError(
                    source,
                    f"expected {len(header)} cells, found {len(record)}",
                    line=reader.line_num,
                )
            rows.append(dict(zip(header, record)))
    except csv.Error as exc:
        raise MalformedTableError(source, str(exc), line=reader.line_num) from exc

    logger.debug("Parsed table", extra={"source": source, "rows": len(rows)})
    return rows


def load_table(
    workspace: str,
    path: str,
    revision: Optional[str] = None,
    repo: Optional["GitRepository"] = None,
) -> Table:
    """Load a manifest from disk, or as it existed at ``revision``."""
    if revision is not None:
        if repo is None:
            raise ValueError("a GitRepository is required to load a revision")
        text = repo.show(revision, path)
        return parse_table(text, f"{revision}:{path}")

    absolute_path = os.path.join(workspace, path)
    try:
        with open(absolute_path, encoding="utf-8", newline="") as handle:
            text = handle.read()
    except (OSError, UnicodeDecodeError) as exc:
        raise MalformedTableError(path, str(exc)) from exc
    return parse_table(text, path)


def referenced_files(table: Table, column: str) -> Set[str]:
    """Collect the percent-decoded, non-empty values of ``column``."""
    files = set()
    for row in table:
        value = get_value(row, column)
        if value:
            files.add(unquote(value))
    return files
