"""Structured event logging for gridcalc.

Provides a unified event schema, a filesystem NDJSON sink, and safe
emit helpers that never raise uncaught exceptions.
"""

from gridcalc.logging.events import (
    EventLevel,
    EventType,
    GridEvent,
    clear_log_dir,
    emit,
    emit_error,
    emit_info,
    emit_warning,
    set_log_dir,
)
from gridcalc.logging.sink import EventSink

__all__ = [
    "EventLevel",
    "EventSink",
    "EventType",
    "GridEvent",
    "clear_log_dir",
    "emit",
    "emit_error",
    "emit_info",
    "emit_warning",
    "set_log_dir",
]
