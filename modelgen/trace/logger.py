"""Append-only JSONL trace logger."""

from __future__ import annotations

import json
import sys
from pathlib import Path


class TraceLogger:
    """Append-only JSONL logger for generation events."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._fh = self.path.open("a", encoding="utf-8")

    def append(self, event: dict) -> None:
        """Append one compact JSON event line."""

        line = json.dumps(event, ensure_ascii=False, separators=(",", ":"))
        self._fh.write(line + "\n")

    def flush(self) -> None:
        self._fh.flush()

    def close(self) -> None:
        self._fh.close()


class SafeTraceLogger:
    """Trace logger whose failures are reported as warnings and never raised."""

    def __init__(self, path: str | Path) -> None:
        self._logger: TraceLogger | None = None
        self._enabled = True
        try:
            self._logger = TraceLogger(path)
        except Exception as exc:  # noqa: BLE001 - tracing is optional
            self._enabled = False
            _warn(f"trace logging disabled: {exc}")

    @property
    def enabled(self) -> bool:
        return self._enabled

    def append(self, event: dict) -> None:
        if not self._enabled or self._logger is None:
            return
        try:
            self._logger.append(event)
        except Exception as exc:  # noqa: BLE001 - tracing is optional
            self._enabled = False
            _warn(f"trace logging failed: {exc}")

    def flush(self) -> None:
        if not self._enabled or self._logger is None:
            return
        try:
            self._logger.flush()
        except Exception as exc:  # noqa: BLE001 - tracing is optional
            self._enabled = False
            _warn(f"trace flush failed: {exc}")

    def close(self) -> None:
        if self._logger is None:
            return
        try:
            self._logger.close()
        except Exception as exc:  # noqa: BLE001 - tracing is optional
            _warn(f"trace close failed: {exc}")


def _warn(message: str) -> None:
    print(f"WARNING: {message}", file=sys.stderr)
