"""Line-buffered text writer shared by all output sinks."""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import Protocol


class OutputSink(Protocol):
    """Write API visitors use to emit files."""

    def open_file(self, file_name: str) -> None: ...

    def open_relative_file(self, relative_dir: str, file_name: str) -> None: ...

    def write_line(self, indent: int, text: str) -> None: ...

    def write_before_line(self, indent: int, text: str) -> None: ...

    def close_file(self) -> None: ...


class Writer:
    """Accumulates lines of text with a fixed indentation unit.

    Lines written with ``write_before_line`` are placed ahead of the main
    buffer, which lets a visitor emit an import header after it has seen the
    body that needs it.
    """

    def __init__(self, indent_unit: str = "    ") -> None:
        self.indent_unit = indent_unit
        self._before: list[str] = []
        self._lines: list[str] = []

    def write_line(self, indent: int, text: str) -> None:
        self._lines.append(self._indent(indent, text))

    def write_before_line(self, indent: int, text: str) -> None:
        self._before.append(self._indent(indent, text))

    def _indent(self, indent: int, text: str) -> str:
        if not isinstance(text, str):
            raise TypeError(f"Can only append strings, got {type(text).__name__}")
        if indent < 0:
            raise ValueError("indent must be >= 0")
        prefix = self.indent_unit * indent
        return "\n".join(prefix + line if line else line for line in text.split("\n"))

    def get_buffer(self) -> str:
        """Return the buffered text, before-lines first, with a trailing newline."""

        lines = self._before + self._lines
        if not lines:
            return ""
        return "\n".join(lines) + "\n"

    def clear_buffer(self) -> None:
        self._before = []
        self._lines = []

    @property
    def line_count(self) -> int:
        text = self.get_buffer()
        return text.count("\n")


class FileSinkBase(Writer):
    """Writer that tracks one open file at a time and persists it on close."""

    def __init__(self, indent_unit: str = "    ") -> None:
        super().__init__(indent_unit)
        self.file_name: str | None = None
        self.relative_dir: str | None = None
        self.written_files: list[str] = []

    def open_file(self, file_name: str) -> None:
        self._check_name(file_name)
        self.clear_buffer()
        self.file_name = file_name
        self.relative_dir = None

    def open_relative_file(self, relative_dir: str, file_name: str) -> None:
        self._check_name(file_name)
        if PurePosixPath(relative_dir).is_absolute() or ".." in PurePosixPath(relative_dir).parts:
            raise ValueError(f"Relative directory escapes the output directory: {relative_dir!r}")
        self.clear_buffer()
        self.file_name = file_name
        self.relative_dir = relative_dir

    def write_line(self, indent: int, text: str) -> None:
        if not self.file_name:
            raise RuntimeError("File has not been opened")
        super().write_line(indent, text)

    def write_before_line(self, indent: int, text: str) -> None:
        if not self.file_name:
            raise RuntimeError("File has not been opened")
        super().write_before_line(indent, text)

    def close_file(self) -> None:
        if not self.file_name:
            raise RuntimeError("No file open")
        relative_path = self.current_path()
        self._persist(relative_path, self.get_buffer())
        self.written_files.append(relative_path)
        self.clear_buffer()
        self.file_name = None
        self.relative_dir = None

    def current_path(self) -> str:
        """Return the open file's path relative to the sink root (POSIX style)."""

        if not self.file_name:
            raise RuntimeError("No file open")
        if self.relative_dir:
            return str(PurePosixPath(self.relative_dir) / self.file_name)
        return self.file_name

    def _persist(self, relative_path: str, content: str) -> None:
        raise NotImplementedError

    @staticmethod
    def _check_name(file_name: str) -> None:
        if not file_name or "/" in file_name or "\\" in file_name or file_name in (".", ".."):
            raise ValueError(f"Invalid file name: {file_name!r}")
