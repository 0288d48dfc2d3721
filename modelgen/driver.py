"""Generation driver: registry in, generated files out.

One run is a single synchronous pass:

1. take a registry holding the reserved built-in model,
2. remove the reserved model,
3. bind a ``FileWriter`` to the target directory,
4. build ``GenerationParameters``,
5. hand the registry to the visitor.

Failures are returned as a ``GenerationResult`` rather than raised; the
outermost caller maps the result to an exit status. Files written before a
failure stay on disk.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, TextIO

from modelgen.codegen.params import GenerationParameters
from modelgen.codegen.visitor import ModelVisitor
from modelgen.core.errors import (
    ConfigurationError,
    FailureKind,
    GenerationError,
    GenerationIOError,
    VisitationError,
    classify_exception,
)
from modelgen.core.registry import ModelRegistry
from modelgen.core.system import RESERVED_NAMESPACE
from modelgen.trace import new_event
from modelgen.writer.file_writer import FileWriter


@dataclass(frozen=True)
class GenerationResult:
    """Outcome of one generation run."""

    ok: bool
    output_dir: Path
    files: tuple[str, ...] = field(default_factory=tuple)
    error: GenerationError | None = None

    @property
    def kind(self) -> FailureKind | None:
        return None if self.error is None else self.error.kind

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 1


def run(
    target_dir: str | Path,
    visitor: ModelVisitor,
    *,
    registry: ModelRegistry | Callable[[], ModelRegistry] | None = None,
    module_import_path: str | None = None,
    remove_reserved: bool = True,
    include_reserved: bool = False,
    create_dirs: bool = True,
    trace=None,
) -> GenerationResult:
    """Run one generation pass into ``target_dir``.

    ``registry`` may be a registry instance, a zero-argument factory, or
    ``None`` for a fresh ``ModelRegistry()``. ``module_import_path`` defaults
    to the visitor's ``default_module_import_path``. ``trace`` is any object
    with an ``append(event)`` method.
    """

    output_dir = Path(target_dir)
    if module_import_path is None:
        module_import_path = getattr(visitor, "default_module_import_path", "")
    sink: FileWriter | None = None

    _trace(
        trace,
        new_event(
            "start",
            f"generating into {output_dir}",
            data={
                "visitor": getattr(visitor, "name", type(visitor).__name__),
                "module_import_path": module_import_path,
                "include_reserved": include_reserved,
                "create_dirs": create_dirs,
            },
        ),
    )

    try:
        model_registry = _build_registry(registry)

        if remove_reserved:
            model_registry.delete_model(RESERVED_NAMESPACE)

        sink = FileWriter(output_dir, create_dirs=create_dirs)
        parameters = GenerationParameters(
            output_sink=sink,
            module_import_path=module_import_path,
            include_reserved_definitions=include_reserved,
        )
        try:
            model_registry.accept(visitor, parameters)
        except GenerationError:
            raise
        except OSError as exc:
            raise GenerationIOError(str(exc)) from exc
        except Exception as exc:  # noqa: BLE001 - visitor boundary
            raise VisitationError(
                f"{type(exc).__name__}: {exc}",
                component=getattr(visitor, "name", None),
            ) from exc
    except GenerationError as exc:
        files = tuple(sink.written_files) if sink is not None else ()
        kind, message = classify_exception(exc)
        _trace(
            trace,
            new_event("error", message, data={"kind": kind.value}, files=list(files)),
        )
        return GenerationResult(ok=False, output_dir=output_dir, files=files, error=exc)

    files = tuple(sink.written_files)
    for name in files:
        _trace(trace, new_event("file_written", name, data={"path": str(output_dir / name)}))
    _trace(trace, new_event("final", f"{len(files)} files", files=list(files)))
    return GenerationResult(ok=True, output_dir=output_dir, files=files)


def report(result: GenerationResult, *, stream: TextIO | None = None) -> int:
    """Write a diagnostic for a failed result and return the exit status."""

    if not result.ok:
        print(f"ERROR: {result.error}", file=stream or sys.stderr)
    return result.exit_code


def _build_registry(
    registry: ModelRegistry | Callable[[], ModelRegistry] | None,
) -> ModelRegistry:
    if registry is None:
        factory: Callable[[], ModelRegistry] = ModelRegistry
    elif callable(registry):
        factory = registry
    else:
        return registry
    try:
        return factory()
    except GenerationError:
        raise
    except Exception as exc:  # noqa: BLE001 - registry boundary
        raise ConfigurationError(
            f"Cannot build model registry: {type(exc).__name__}: {exc}"
        ) from exc


def _trace(trace, event: dict) -> None:
    if trace is not None:
        trace.append(event)
