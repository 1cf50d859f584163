"""Markdown rendering of manifest diffs for the job summary."""

import logging
from typing import List, Mapping, Optional, Sequence, Set, Tuple
from urllib.parse import quote

from .diff import TableDiff, TableDiffer, modified_columns
from .logic import LogicFlag, classify, describe_flag_change
from .table import Row, get_value
from .vcs import FileDiff

logger = logging.getLogger(__name__)

# Applied in order; the backslash goes first so later rules' backslashes survive.
MARKDOWN_ESCAPES: Tuple[Tuple[str, str], ...] = (
    ("\\", "\\\\"),
    *((char, "\\" + char) for char in "/`*_{}[]()#+-.!|"),
    ("<", "&lt;"),
    (">", "&gt;"),
)

MISSING_TITLE = "missing title"
MAX_INLINE_VALUE_LENGTH = 40


def escape_markdown(text: str, escapes: Sequence[Tuple[str, str]] = MARKDOWN_ESCAPES) -> str:
    """Escape markdown-significant characters."""
    for literal, replacement in escapes:
        text = text.replace(literal, replacement)
    return text


class ReportRenderer:
    """Renders a TableDiff as a markdown change report."""

    def __init__(
        self,
        differ: TableDiffer,
        escapes: Sequence[Tuple[str, str]] = MARKDOWN_ESCAPES,
        title_column: str = "Title",
        logic_column: str = "Logic",
        noun: str = "activities",
        link_template: str = "#{key}",
    ):
        """Initialize renderer with the differ that produced the diff."""
        self.differ = differ
        self.escapes = escapes
        self.title_column = title_column
        self.logic_column = logic_column
        self.noun = noun
        self.link_template = link_template

    def escape(self, text: str) -> str:
        return escape_markdown(text, self.escapes)

    def flag(self, row: Row) -> LogicFlag:
        return classify(get_value(row, self.logic_column))

    def _entry(self, key: str, row: Row, annotation: str) -> str:
        title = get_value(row, self.title_column)
        if not title:
            title = MISSING_TITLE
        line = f" - [{self.escape(title)}][{self.escape(key)}]"
        if annotation:
            line += f" {annotation}"
        return line + "\n"

    def _link_definitions(self, table_diff: TableDiff) -> List[str]:
        lines = []
        seen = set()
        for key in table_diff.keys():
            if key in seen:
                continue
            seen.add(key)
            target = self.link_template.format(key=quote(key, safe=""))
            lines.append(f"[{self.escape(key)}]: {target}\n")
        return lines

    def _column_changes(self, before: Row, after: Row) -> List[str]:
        lines = []
        for column in modified_columns(before, after):
            old = self.escape(get_value(before, column) or "")
            new = self.escape(get_value(after, column) or "")
            name = self.escape(column)
            if len(old) < MAX_INLINE_VALUE_LENGTH and len(new) < MAX_INLINE_VALUE_LENGTH:
                lines.append(f'   - **{name}** changed from "{old}" to "{new}"\n')
            else:
                lines.append(f"   - **{name}** changed\n")
        return lines

    def render(
        self,
        table_diff: TableDiff,
        media_references: Mapping[str, Set[str]],
        file_diff: Optional[FileDiff] = None,
    ) -> str:
        """Render added, removed and modified rows as markdown."""
        if not table_diff:
            logger.info("No %s changes to render", self.noun)
            return ""

        chunks = self._link_definitions(table_diff)
        chunks.append("\n")

        if table_diff.added:
            chunks.append(f"### New {self.noun}\n")
            for key, row in table_diff.added.items():
                flag = self.flag(row)
                chunks.append(self._entry(key, row, describe_flag_change(flag, flag)))

        if table_diff.removed:
            chunks.append(f"### Removed {self.noun}\n")
            for key, row in table_diff.removed.items():
                flag = self.flag(row)
                chunks.append(self._entry(key, row, describe_flag_change(flag, flag)))

        if table_diff.modified:
            chunks.append(f"### Modified {self.noun}\n")
            for key, (before, after) in table_diff.modified.items():
                annotation = describe_flag_change(self.flag(before), self.flag(after))
                chunks.append(self._entry(key, after, annotation))
                chunks.extend(self._column_changes(before, after))
                task = self.differ.changed_task(after, file_diff)
                if task:
                    chunks.append(f"   - Task {self.escape(task)} changed\n")
                for media in self.differ.changed_media(after, media_references, file_diff):
                    chunks.append(f"   - Media {self.escape(media)} changed\n")

        return "".join(chunks)
