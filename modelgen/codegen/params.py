"""Per-run generation parameters."""

from __future__ import annotations

from dataclasses import dataclass

from modelgen.writer.base import OutputSink


@dataclass(frozen=True)
class GenerationParameters:
    """Immutable options for one visitor pass."""

    output_sink: OutputSink
    module_import_path: str
    include_reserved_definitions: bool = False
