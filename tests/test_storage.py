"""Tests for the shared file helpers (agentic_mailbox/storage.py)."""

from datetime import timedelta

from helpers import BASE_TIME, make_entry

from agentic_mailbox.schemas.triage import ActionLogEntry
from agentic_mailbox.storage import atomic_write_text, read_jsonl


def _write_entries(path, entries):
    path.write_text("".join(e.model_dump_json() + "\n" for e in entries))


class TestReadJsonl:
    def test_missing_file(self, tmp_path):
        assert read_jsonl(tmp_path / "nope.jsonl", ActionLogEntry) == []

    def test_file_order_and_blank_lines(self, tmp_path):
        path = tmp_path / "log.jsonl"
        path.write_text(
            make_entry("a", minutes=0).model_dump_json()
            + "\n\n"
            + make_entry("b", minutes=1).model_dump_json()
            + "\n"
        )
        assert [e.sender for e in read_jsonl(path, ActionLogEntry)] == ["a", "b"]

    def test_limit_returns_most_recent_oldest_first(self, tmp_path):
        path = tmp_path / "log.jsonl"
        _write_entries(path, [make_entry(f"s{i}", minutes=i) for i in range(5)])

        records = read_jsonl(path, ActionLogEntry, limit=3)
        assert [e.sender for e in records] == ["s2", "s3", "s4"]

    def test_since_applies_before_limit(self, tmp_path):
        path = tmp_path / "log.jsonl"
        _write_entries(path, [make_entry(f"s{i}", minutes=i) for i in range(5)])

        records = read_jsonl(
            path, ActionLogEntry, since=BASE_TIME + timedelta(minutes=3), limit=10
        )
        assert [e.sender for e in records] == ["s4"]


class TestAtomicWriteText:
    def test_writes_and_creates_parents(self, tmp_path):
        path = tmp_path / "nested" / "rules.json"
        atomic_write_text(path, '{"rules": []}')
        assert path.read_text() == '{"rules": []}'

    def test_leaves_no_temp_files(self, tmp_path):
        path = tmp_path / "rules.json"
        atomic_write_text(path, "one")
        atomic_write_text(path, "two")
        assert path.read_text() == "two"
        assert [p.name for p in tmp_path.iterdir()] == ["rules.json"]
