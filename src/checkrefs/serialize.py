"""Deterministic serialization of reference check results."""

import hashlib
import json
import logging
from typing import Any, Dict, Optional

from .config import CheckConfig
from .diff import TableDiff
from .references import ReferenceReport
from .vcs import FileDiff

logger = logging.getLogger(__name__)


class DeterministicSerializer:
    """Handles deterministic JSON serialization with stable ordering."""

    def __init__(self, config: Optional[CheckConfig] = None):
        """Initialize with configuration."""
        self.config = config

    def serialize_output(
        self,
        report: ReferenceReport,
        table_diff: Optional[TableDiff] = None,
        file_diff: Optional[FileDiff] = None,
        markdown: str = "",
    ) -> Dict[str, Any]:
        """Serialize a run's results to a deterministic dictionary."""
        payload: Dict[str, Any] = {
            "provenance": self.config.to_provenance_dict() if self.config else {},
            "references": {
                "missing_tasks": sorted(report.missing_tasks),
                "unused_tasks": sorted(report.unused_tasks),
                "missing_media": sorted(report.missing_media),
                "unused_media": sorted(report.unused_media),
                "missing_articles": sorted(report.missing_articles),
                "unused_articles": sorted(report.unused_articles),
            },
            "media_references": {
                task: sorted(paths) for task, paths in report.media_references.items()
            },
            "failed": report.failed,
        }

        if table_diff is not None:
            payload["changes"] = {
                "added": sorted(table_diff.added),
                "removed": sorted(table_diff.removed),
                "modified": sorted(table_diff.modified),
            }
        if file_diff is not None:
            payload["changed_files"] = sorted(file_diff.changed_paths)
        if markdown:
            payload["report_markdown"] = markdown

        checksum = self._compute_checksum(payload)
        payload["provenance"]["checksum"] = checksum

        logger.debug("Serialization finished", extra={"checksum": checksum})
        return payload

    def _compute_checksum(self, payload: Dict[str, Any]) -> str:
        """Compute SHA-256 checksum of the payload, excluding the checksum field."""
        provenance = {
            key: value for key, value in payload.get("provenance", {}).items() if key != "checksum"
        }
        payload_copy = dict(payload, provenance=provenance)
        json_bytes = self._to_deterministic_json_bytes(payload_copy)
        return hashlib.sha256(json_bytes).hexdigest()

    def _to_deterministic_json_bytes(self, obj: Any) -> bytes:
        """Convert object to deterministic JSON bytes."""
        json_str = json.dumps(
            obj,
            ensure_ascii=False,
            sort_keys=True,
            separators=(",", ":"),
            indent=None,
        )
        return json_str.encode("utf-8", errors="replace")

    def to_json_string(self, payload: Dict[str, Any]) -> str:
        """Convert payload to pretty-printed JSON string."""
        return json.dumps(
            payload,
            ensure_ascii=False,
            sort_keys=True,
            indent=2,
        )

    def create_success_envelope(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Create success envelope around payload."""
        return {"ok": True, "data": payload}

    def create_error_envelope(
        self, error_code: str, error_message: str, details: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """Create error envelope."""
        logger.debug("Creating error envelope", extra={"code": error_code})
        error_data = {
            "code": error_code,
            "message": error_message,
        }
        if details:
            error_data["details"] = details

        return {"ok": False, "error": error_data}
