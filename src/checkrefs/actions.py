"""GitHub Actions runner output: workflow commands and the job summary."""

import logging
from typing import Iterable, Optional, TextIO

logger = logging.getLogger(__name__)


def _escape_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def _command(name: str, message: str, stream: Optional[TextIO] = None) -> None:
    print(f"::{name}::{_escape_data(message)}", file=stream)


def error(message: str, stream: Optional[TextIO] = None) -> None:
    _command("error", message, stream)


def warning(message: str, stream: Optional[TextIO] = None) -> None:
    _command("warning", message, stream)


def set_failed(message: str, stream: Optional[TextIO] = None) -> None:
    """Report a failed run; the caller owns the exit code."""
    logger.error(message)
    error(message, stream)


def log_group(
    files: Iterable[str],
    title: str,
    is_error: bool,
    stream: Optional[TextIO] = None,
) -> None:
    """Print a collapsible group listing ``files``; empty groups are skipped."""
    files = sorted(files)
    if not files:
        return
    _command("group", title, stream)
    for filename in files:
        if is_error:
            error(filename, stream)
        else:
            print(filename, file=stream)
    print("::endgroup::", file=stream)


def write_summary(markdown: str, path: Optional[str] = None, stream: Optional[TextIO] = None) -> None:
    """Append ``markdown`` to the job summary, or print it when no summary file is set."""
    if not path:
        logger.info("GITHUB_STEP_SUMMARY is not set; printing report")
        print(markdown, file=stream)
        return
    with open(path, "a", encoding="utf-8") as handle:
        handle.write(markdown)
    logger.info("Wrote job summary", extra={"path": path, "chars": len(markdown)})
