"""Kit Extractor package

This package contains the engine, services and command‑line interface
for copying the samples referenced by Bitwig drum presets into a
folder per preset, split by velocity layer.  See ``DESIGN.md`` in the
project root for an overview.

Public classes are re‑exported here for convenience.
"""

from .classifier import ClassificationStrategy  # noqa: F401
from .config_service import ConfigService  # noqa: F401
from .engine import KitExportEngine  # noqa: F401
from .run_logger import RunLogger  # noqa: F401
from .source_provider import (  # noqa: F401
    BitwigMacProvider,
    DirectorySourceProvider,
    SampleSourceProvider,
)

__all__ = [
    "KitExportEngine",
    "ClassificationStrategy",
    "ConfigService",
    "RunLogger",
    "SampleSourceProvider",
    "BitwigMacProvider",
    "DirectorySourceProvider",
]
