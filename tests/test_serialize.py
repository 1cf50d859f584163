"""Tests for deterministic serialization."""

import json

from checkrefs.config import CheckConfig
from checkrefs.diff import TableDiff
from checkrefs.references import ReferenceReport
from checkrefs.serialize import DeterministicSerializer
from checkrefs.vcs import FileChangeRecord, FileDiff


def make_report():
    return ReferenceReport(
        missing_tasks={"tasks/z.json", "tasks/a.json"},
        unused_media={"video/b.mp4", "video/a.mp4"},
        media_references={"tasks/a.json": {"video/2.mp4", "video/1.mp4"}},
    )


class TestDeterministicSerializer:
    """Test DeterministicSerializer."""

    def setup_method(self):
        self.config = CheckConfig(workspace="/w", git_base_sha="abc", git_head_sha="def")
        self.serializer = DeterministicSerializer(self.config)

    def test_sets_are_sorted(self):
        payload = self.serializer.serialize_output(make_report())
        assert payload["references"]["missing_tasks"] == ["tasks/a.json", "tasks/z.json"]
        assert payload["references"]["unused_media"] == ["video/a.mp4", "video/b.mp4"]
        assert payload["media_references"] == {"tasks/a.json": ["video/1.mp4", "video/2.mp4"]}
        assert payload["failed"] is True

    def test_optional_sections(self):
        payload = self.serializer.serialize_output(make_report())
        assert "changes" not in payload
        assert "changed_files" not in payload

        table_diff = TableDiff(added={"3": {}}, removed={"2": {}})
        file_diff = FileDiff("abc", "def", (FileChangeRecord("b", None, "D"), FileChangeRecord(None, "a", "A")))
        payload = self.serializer.serialize_output(make_report(), table_diff, file_diff, "# report")
        assert payload["changes"] == {"added": ["3"], "removed": ["2"], "modified": []}
        assert payload["changed_files"] == ["a", "b"]
        assert payload["report_markdown"] == "# report"

    def test_checksum_is_stable(self):
        first = self.serializer.serialize_output(make_report())
        second = self.serializer.serialize_output(make_report())
        assert first["provenance"]["checksum"] == second["provenance"]["checksum"]
        assert len(first["provenance"]["checksum"]) == 64

    def test_checksum_tracks_content(self):
        first = self.serializer.serialize_output(make_report())
        other = make_report()
        other.missing_tasks.add("tasks/m.json")
        second = self.serializer.serialize_output(other)
        assert first["provenance"]["checksum"] != second["provenance"]["checksum"]

    def test_json_string_round_trips(self):
        payload = self.serializer.serialize_output(make_report())
        assert json.loads(self.serializer.to_json_string(payload)) == payload

    def test_envelopes(self):
        assert self.serializer.create_success_envelope({"x": 1}) == {"ok": True, "data": {"x": 1}}
        error = self.serializer.create_error_envelope("CODE", "message", {"k": "v"})
        assert error == {"ok": False, "error": {"code": "CODE", "message": "message", "details": {"k": "v"}}}
