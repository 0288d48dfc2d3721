"""Output sink that keeps emitted files in memory."""

from __future__ import annotations

from modelgen.writer.base import FileSinkBase


class InMemoryWriter(FileSinkBase):
    """Collects closed files into ``files`` keyed by relative path."""

    def __init__(self, indent_unit: str = "    ") -> None:
        super().__init__(indent_unit)
        self.files: dict[str, str] = {}

    def _persist(self, relative_path: str, content: str) -> None:
        self.files[relative_path] = content

    def get_files_in_memory(self) -> dict[str, str]:
        return dict(self.files)
