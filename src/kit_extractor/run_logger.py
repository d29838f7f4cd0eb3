"""Run logging for Kit Extractor.

The engine never prints directly.  It is handed a :class:`RunLogger`
which fans each message out to the console, an optional callback (for
embedding the engine in another tool) and, while a run is active, the
``run_log.txt`` file of that run.  Every call is also kept in
:attr:`RunLogger.records` as a structured dict, which lets tests assert
on log output without capturing stdout.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, TextIO

LEVELS = ("debug", "info", "warning", "error")


@dataclass
class RunLogger:
    """Structured logger injected into :class:`~kit_extractor.engine.KitExportEngine`."""

    to_console: bool = True
    verbose: bool = False
    log_callback: Optional[Callable[[str], None]] = None
    records: List[Dict[str, Any]] = field(default_factory=list)
    _handle: Optional[TextIO] = field(init=False, default=None, repr=False)

    @classmethod
    def silent(cls) -> "RunLogger":
        """Return a logger that only keeps records."""
        return cls(to_console=False)

    def open_file(self, path: Path) -> None:
        self.close_file()
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        self._handle = open(path, "w", encoding="utf-8", buffering=1)

    def close_file(self) -> None:
        if self._handle is not None:
            self._handle.close()
            self._handle = None

    def _format(self, level: str, message: str, context: Dict[str, Any]) -> str:
        text = message
        if context:
            text += " " + " ".join(f"{k}={v!r}" for k, v in context.items())
        if level == "info":
            return text
        return f"{level.upper()}: {text}"

    def log(self, level: str, message: str, **context: Any) -> None:
        if level not in LEVELS:
            raise ValueError(f"unknown log level {level!r}")
        self.records.append({"level": level, "message": message, **context})
        if level == "debug" and not self.verbose:
            return
        line = self._format(level, message, context)
        if self.to_console:
            print(line)
        if self.log_callback is not None:
            self.log_callback(line)
        if self._handle is not None:
            self._handle.write(line + "\n")

    def debug(self, message: str, **context: Any) -> None:
        self.log("debug", message, **context)

    def info(self, message: str, **context: Any) -> None:
        self.log("info", message, **context)

    def warning(self, message: str, **context: Any) -> None:
        self.log("warning", message, **context)

    def error(self, message: str, **context: Any) -> None:
        self.log("error", message, **context)

    def messages(self, level: Optional[str] = None) -> List[str]:
        """Return recorded messages, optionally filtered by level."""
        return [r["message"] for r in self.records if level is None or r["level"] == level]
