"""Output sink that writes emitted files below a target directory."""

from __future__ import annotations

from pathlib import Path

from modelgen.core.errors import GenerationIOError
from modelgen.writer.base import FileSinkBase


class FileWriter(FileSinkBase):
    """Writes each closed file to ``output_dir`` (UTF-8, ``\\n`` newlines).

    Existing files with the same name are overwritten; other files already in
    the directory are left alone. When ``create_dirs`` is false the output
    directory must already exist.
    """

    def __init__(
        self,
        output_dir: str | Path,
        *,
        create_dirs: bool = True,
        indent_unit: str = "    ",
    ) -> None:
        super().__init__(indent_unit)
        self.output_directory = Path(output_dir)
        self.create_dirs = create_dirs
        if create_dirs:
            try:
                self.output_directory.mkdir(parents=True, exist_ok=True)
            except OSError as exc:
                raise GenerationIOError(
                    f"Cannot create output directory {str(self.output_directory)!r}: {exc}"
                ) from exc
        elif not self.output_directory.is_dir():
            raise GenerationIOError(
                f"Output directory {str(self.output_directory)!r} does not exist"
            )

    def _persist(self, relative_path: str, content: str) -> None:
        path = self.output_directory / relative_path
        try:
            if path.parent != self.output_directory:
                if not self.create_dirs and not path.parent.is_dir():
                    raise GenerationIOError(
                        f"Directory {str(path.parent)!r} does not exist"
                    )
                path.parent.mkdir(parents=True, exist_ok=True)
            with path.open("w", encoding="utf-8", newline="\n") as fh:
                fh.write(content)
        except OSError as exc:
            raise GenerationIOError(f"Cannot write {str(path)!r}: {exc}") from exc

    def written_paths(self) -> list[Path]:
        return [self.output_directory / name for name in self.written_files]
