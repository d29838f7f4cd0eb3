"""Exception hierarchy for Kit Extractor.

Faults fall into three groups:

* **Environment faults** abort the whole run (unsupported platform,
  missing home directory, unusable export directory, invalid config).
* **Preset faults** also abort the run: a preset that cannot be read
  points at a broken installation rather than a single bad file.
* **Sample faults** are recoverable.  The engine logs them with the
  preset and sample context and moves on to the next sample.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class KitExtractorError(Exception):
    """Base class for every error raised by Kit Extractor."""


class UnsupportedPlatformError(KitExtractorError):
    pass


class MissingHomeDirectoryError(KitExtractorError):
    pass


class ExportDirectoryError(KitExtractorError):
    pass


class ConfigError(KitExtractorError):
    pass


class PresetReadError(KitExtractorError):
    """A preset document could not be opened or read."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"failed to process path {self.path}: {reason}")


class SampleCopyError(KitExtractorError):
    """Copying a single sample failed."""

    def __init__(self, src: Path, reason: str, dest: Optional[Path] = None) -> None:
        self.src = Path(src)
        self.dest = Path(dest) if dest is not None else None
        self.reason = reason
        super().__init__(reason)


class SampleNotFoundError(SampleCopyError):
    def __init__(self, src: Path) -> None:
        super().__init__(src, f"{src} does not exist")


class NotARegularFileError(SampleCopyError):
    def __init__(self, src: Path) -> None:
        super().__init__(src, f"{src} is not a regular file")
