"""Error definitions for the reference checker."""

from typing import Any, Dict, Optional


class CheckRefsError(Exception):
    """Base exception for reference checker errors."""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        """Initialize error with code, message, and optional details."""
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for JSON serialization."""
        result = {
            "code": self.code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result


class MalformedTableError(CheckRefsError):
    """A manifest could not be parsed as CSV."""

    def __init__(self, source: str, reason: str, line: Optional[int] = None):
        details: Dict[str, Any] = {"source": source, "reason": reason}
        location = source
        if line is not None:
            details["line"] = line
            location = f"{source}:{line}"
        super().__init__(
            code="MALFORMED_TABLE",
            message=f"Malformed table {location}: {reason}",
            details=details,
        )


class VcsUnavailableError(CheckRefsError):
    """A revision could not be resolved or git failed."""

    def __init__(self, operation: str, reason: str):
        super().__init__(
            code="VCS_UNAVAILABLE",
            message=f"git {operation} failed: {reason}",
            details={"operation": operation, "reason": reason},
        )


class MalformedTaskFileError(CheckRefsError):
    """A task descriptor is not a readable JSON object."""

    def __init__(self, path: str, reason: str):
        super().__init__(
            code="MALFORMED_TASK_FILE",
            message=f"Malformed task file {path}: {reason}",
            details={"path": path, "reason": reason},
        )


class ConfigurationError(CheckRefsError):
    """Required configuration is missing or invalid."""

    def __init__(self, setting: str, reason: str):
        super().__init__(
            code="CONFIGURATION_ERROR",
            message=f"{setting} {reason}",
            details={"setting": setting, "reason": reason},
        )
