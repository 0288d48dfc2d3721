"""JSONL trace of generation runs."""

from modelgen.trace.event import new_event
from modelgen.trace.logger import SafeTraceLogger, TraceLogger

__all__ = ["SafeTraceLogger", "TraceLogger", "new_event"]
