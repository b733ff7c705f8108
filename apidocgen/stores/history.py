"""Append-only JSON logs of run steps and errors."""

from __future__ import annotations

import json
import traceback
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


@dataclass
class ExecutionLogEntry:
    """One step of a run and whether it succeeded."""

    timestamp: str
    command: str
    success: bool
    message: Optional[str] = None
    changed_files: List[str] = field(default_factory=list)


@dataclass
class ErrorLogEntry:
    timestamp: str
    message: str
    exception_type: Optional[str] = None
    stack_trace: Optional[str] = None


class _JsonListFile:
    """A JSON file holding a list of objects; every append rewrites the file."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def read(self) -> List[Dict[str, Any]]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return []
        if not raw.strip():
            return []
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError:
            return []
        if not isinstance(payload, list):
            return []
        return [item for item in payload if isinstance(item, dict)]

    def append(self, entry: Dict[str, Any]) -> None:
        entries = self.read()
        entries.append(entry)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(entries, indent=2, ensure_ascii=False), encoding="utf-8")


class ExecutionLog(_JsonListFile):
    """``execution_log.json``: which steps ran and with what outcome."""

    def log(
        self,
        command: str,
        success: bool,
        message: str | None = None,
        changed_files: Sequence[str] = (),
    ) -> ExecutionLogEntry:
        entry = ExecutionLogEntry(
            timestamp=_timestamp(),
            command=command,
            success=success,
            message=message,
            changed_files=list(changed_files),
        )
        self.append(asdict(entry))
        return entry


class ErrorLog(_JsonListFile):
    """``error.json``: failures with exception type and traceback."""

    def log_error(self, message: str, exc: BaseException | None = None) -> ErrorLogEntry:
        entry = ErrorLogEntry(timestamp=_timestamp(), message=message)
        if exc is not None:
            entry.exception_type = f"{type(exc).__module__}.{type(exc).__qualname__}"
            entry.stack_trace = "".join(
                traceback.format_exception(type(exc), exc, exc.__traceback__)
            )
        self.append(asdict(entry))
        return entry


__all__ = ["ErrorLog", "ErrorLogEntry", "ExecutionLog", "ExecutionLogEntry"]
