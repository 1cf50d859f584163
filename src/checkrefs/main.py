"""Main CLI entry point for the reference checker."""

import argparse
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from . import actions, settings
from .config import CheckConfig, split_magic_tasks
from .diff import TableDiff, TableDiffer
from .errors import CheckRefsError, ConfigurationError, VcsUnavailableError
from .logging_utils import configure_logging
from .references import ReferenceChecker, ReferenceReport
from .render import ReportRenderer
from .serialize import DeterministicSerializer
from .table import Table, load_table
from .vcs import FileDiff, GitRepository

logger = logging.getLogger(__name__)

ACTION_NAME = "check-references"


@dataclass
class CheckResult:
    """Everything one run produced."""

    report: ReferenceReport
    table_diff: Optional[TableDiff] = None
    file_diff: Optional[FileDiff] = None
    markdown: str = ""
    notes: List[str] = field(default_factory=list)


def create_parser() -> argparse.ArgumentParser:
    """Create command line argument parser.

    Defaults come from the INPUT_* variables the Actions runner exports.
    """
    parser = argparse.ArgumentParser(
        prog=ACTION_NAME,
        description="Check that manifests, task files, media and articles reference each other",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  check-references --workspace .
  check-references --workspace . --base origin/main --head HEAD
  check-references --magic-tasks tasks/intro.json,tasks/outro.json --json result.json
        """,
    )

    parser.add_argument(
        "--workspace",
        default=settings.get_workspace(),
        help="Repository checkout to inspect (default: $GITHUB_WORKSPACE)",
    )
    parser.add_argument(
        "--activities-csv",
        default=settings.get_input("activities_csv", "./activities.csv"),
        help="Activities manifest, relative to the workspace (default: ./activities.csv)",
    )
    parser.add_argument(
        "--articles-csv",
        default=settings.get_input("articles_csv", "./articles.csv"),
        help="Articles manifest, relative to the workspace (default: ./articles.csv)",
    )
    parser.add_argument(
        "--magic-tasks",
        default=settings.get_input("magic_tasks"),
        help="Comma-separated task files that count as referenced",
    )
    parser.add_argument(
        "--base",
        default=settings.get_input("git_base_sha") or None,
        help="Base revision for the change report",
    )
    parser.add_argument(
        "--head",
        default=settings.get_input("git_head_sha") or None,
        help="Head revision for changed-file annotations",
    )
    parser.add_argument(
        "--summary",
        default=settings.get_step_summary_path(),
        help="Job summary file to append the report to (default: $GITHUB_STEP_SUMMARY)",
    )
    parser.add_argument(
        "--json",
        help="Also write the results as JSON to this file",
    )
    parser.add_argument(
        "--log-level",
        help="Logging level (default: $LOG_LEVEL or INFO)",
    )

    return parser


def create_config(args: argparse.Namespace) -> CheckConfig:
    """Create configuration from command line arguments."""
    if not args.workspace:
        raise ConfigurationError("$GITHUB_WORKSPACE", "is not set")
    try:
        return CheckConfig(
            workspace=args.workspace,
            activities_csv=args.activities_csv,
            articles_csv=args.articles_csv,
            magic_tasks=split_magic_tasks(args.magic_tasks or ""),
            git_base_sha=args.base,
            git_head_sha=args.head,
            step_summary_path=args.summary,
            json_output_path=args.json,
        )
    except ValueError as e:
        raise ConfigurationError("configuration", f"is invalid: {e}") from e


def _load_base_activities(
    config: CheckConfig, repo: GitRepository, notes: List[str]
) -> Optional[Table]:
    if not config.git_base_sha:
        return None
    try:
        return load_table(
            config.workspace_root, config.activities_csv, revision=config.git_base_sha, repo=repo
        )
    except VcsUnavailableError as e:
        logger.warning("Base snapshot unavailable", extra={"code": e.code})
        notes.append(f"Change report skipped: {e.message}")
        return None


def _load_file_diff(
    config: CheckConfig, repo: GitRepository, notes: List[str]
) -> Optional[FileDiff]:
    if not config.compare_revisions:
        return None
    try:
        return repo.diff(config.git_base_sha, config.git_head_sha)
    except VcsUnavailableError as e:
        logger.warning("File diff unavailable", extra={"code": e.code})
        notes.append(f"Changed-file annotations skipped: {e.message}")
        return None


def process_check(config: CheckConfig) -> CheckResult:
    """Run the reference check and, with a base revision, the change report."""
    root = config.workspace_root
    repo = GitRepository(root, config.git_env)
    notes: List[str] = []

    base_activities = _load_base_activities(config, repo, notes)
    file_diff = _load_file_diff(config, repo, notes) if base_activities is not None else None

    head_activities = load_table(root, config.activities_csv)
    head_articles = load_table(root, config.articles_csv)

    checker = ReferenceChecker(config)
    report = checker.check(head_activities, head_articles)
    result = CheckResult(report=report, file_diff=file_diff, notes=notes)

    if base_activities is not None:
        differ = TableDiffer(config.key_column, config.task_link_column)
        result.table_diff = differ.compute_diff(
            base_activities, head_activities, report.media_references, file_diff
        )
        renderer = ReportRenderer(
            differ,
            title_column=config.title_column,
            logic_column=config.logic_column,
        )
        result.markdown = renderer.render(result.table_diff, report.media_references, file_diff)

    return result


def output_result(config: CheckConfig, result: CheckResult) -> None:
    """Write the summary, log groups, and optional JSON output."""
    for note in result.notes:
        actions.warning(note)

    if result.markdown:
        actions.write_summary(result.markdown, config.step_summary_path)

    for files, title, is_error in result.report.groups():
        actions.log_group(files, title, is_error)

    if config.json_output_path:
        serializer = DeterministicSerializer(config)
        payload = serializer.serialize_output(
            result.report, result.table_diff, result.file_diff, result.markdown
        )
        json_str = serializer.to_json_string(serializer.create_success_envelope(payload))
        Path(config.json_output_path).write_text(json_str, encoding="utf-8")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    try:
        config = create_config(args)
        result = process_check(config)
        output_result(config, result)

    except CheckRefsError as e:
        actions.set_failed(f"{ACTION_NAME} failed with: {e.message}")
        return 1

    except Exception as e:
        logger.debug("Unexpected failure", exc_info=e)
        actions.set_failed(f"{ACTION_NAME} failed with: {e}")
        return 1

    if result.report.failed:
        actions.set_failed(f"{ACTION_NAME} failed with missing files")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
