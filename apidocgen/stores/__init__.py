"""On-disk records kept between runs."""

from .history import ErrorLog, ErrorLogEntry, ExecutionLog, ExecutionLogEntry

__all__ = ["ErrorLog", "ErrorLogEntry", "ExecutionLog", "ExecutionLogEntry"]
