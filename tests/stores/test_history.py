"""Tests for the JSON execution and error logs."""

from __future__ import annotations

import json

from apidocgen.stores.history import ErrorLog, ExecutionLog


def test_execution_log_appends_entries(tmp_path) -> None:
    log = ExecutionLog(tmp_path / "logs" / "execution_log.json")

    log.log("scan", True, "Scan success", ["/p/A.kt"])
    entry = log.log("merge", False, "No fragments to merge")

    entries = json.loads(log.path.read_text(encoding="utf-8"))
    assert [item["command"] for item in entries] == ["scan", "merge"]
    assert entries[0]["changed_files"] == ["/p/A.kt"]
    assert entries[1]["success"] is False
    assert entries[1]["changed_files"] == []
    assert entry.timestamp.endswith("Z")


def test_error_log_records_exception_details(tmp_path) -> None:
    log = ErrorLog(tmp_path / "error.json")
    try:
        raise ValueError("bad yaml")
    except ValueError as exc:
        log.log_error("A.kt: bad yaml", exc)
    log.log_error("No OpenAPI YAML generated.")

    first, second = log.read()
    assert first["message"] == "A.kt: bad yaml"
    assert first["exception_type"] == "builtins.ValueError"
    assert "ValueError: bad yaml" in first["stack_trace"]
    assert second["exception_type"] is None
    assert second["stack_trace"] is None


def test_unreadable_log_starts_over(tmp_path) -> None:
    path = tmp_path / "execution_log.json"
    path.write_text("{not json", encoding="utf-8")
    log = ExecutionLog(path)

    assert log.read() == []
    log.log("scan", True)
    assert len(log.read()) == 1
