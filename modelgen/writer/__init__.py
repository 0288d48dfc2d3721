"""Output sinks for generated files."""

from modelgen.writer.base import OutputSink, Writer
from modelgen.writer.file_writer import FileWriter
from modelgen.writer.memory import InMemoryWriter

__all__ = ["FileWriter", "InMemoryWriter", "OutputSink", "Writer"]
