"""Where presets and samples live.

The engine only needs two things from the host: the list of preset
documents to process and the root of the sample library that the
preset references are relative to.  :class:`SampleSourceProvider`
captures that, and a concrete provider is chosen per platform.

* :class:`BitwigMacProvider` points at the packages Bitwig Studio
  installs on macOS.  It is the only built-in location.
* :class:`DirectorySourceProvider` uses explicit locations given on
  the command line or in ``config.json`` and works anywhere.
"""

from __future__ import annotations

import glob
import os
import platform
from pathlib import Path
from typing import Any, Dict, List, Optional

from .errors import MissingHomeDirectoryError, UnsupportedPlatformError

BITWIG_PACKAGES_MAC = "Library/Application Support/Bitwig/Bitwig Studio/installed-packages/1.0"
BITWIG_SAMPLE_PATH_MAC = BITWIG_PACKAGES_MAC + "/samples"
BITWIG_PRESET_GLOB_MAC = BITWIG_PACKAGES_MAC + "/presets/Bitwig/Nektar's Acoustic Drums/*.bwpreset"


class SampleSourceProvider:
    """Interface for preset discovery and sample library resolution."""

    def list_presets(self) -> List[Path]:
        raise NotImplementedError

    def sample_root(self) -> Path:
        raise NotImplementedError

    def describe(self) -> Dict[str, Any]:
        return {"provider": type(self).__name__, "sample_root": str(self.sample_root())}


def _glob_sorted(pattern: str) -> List[Path]:
    return sorted(Path(p) for p in glob.glob(pattern))


class DirectorySourceProvider(SampleSourceProvider):
    """Presets matched by ``preset_glob``; samples under ``sample_root``."""

    def __init__(self, preset_glob: str, sample_root: Path) -> None:
        self.preset_glob = str(Path(preset_glob).expanduser())
        self._sample_root = Path(sample_root).expanduser()

    def list_presets(self) -> List[Path]:
        return _glob_sorted(self.preset_glob)

    def sample_root(self) -> Path:
        return self._sample_root

    def describe(self) -> Dict[str, Any]:
        info = super().describe()
        info["preset_glob"] = self.preset_glob
        return info


class BitwigMacProvider(DirectorySourceProvider):
    """Bitwig Studio's installed packages below the user's home on macOS."""

    def __init__(self, home: Path) -> None:
        home = Path(home)
        super().__init__(
            preset_glob=str(home / BITWIG_PRESET_GLOB_MAC),
            sample_root=home / BITWIG_SAMPLE_PATH_MAC,
        )
        self.home = home

    @classmethod
    def for_host(cls, system: Optional[str] = None, home: Optional[Path] = None) -> "BitwigMacProvider":
        """Build the provider for the running host.

        Raises :class:`UnsupportedPlatformError` on anything but macOS and
        :class:`MissingHomeDirectoryError` when the home directory cannot
        be determined.
        """
        system = (system or platform.system()).lower()
        if system != "darwin":
            raise UnsupportedPlatformError(
                "sorry, the built-in Bitwig locations are only known for macOS; "
                "pass --preset-glob and --sample-root to use other locations"
            )
        if home is None:
            expanded = os.path.expanduser("~")
            if expanded == "~":
                raise MissingHomeDirectoryError(
                    "failed to find home directory for getting path to Bitwig samples"
                )
            home = Path(expanded)
        return cls(home)


def resolve_provider(config: Dict[str, Any], system: Optional[str] = None) -> SampleSourceProvider:
    """Pick a provider from the effective configuration."""
    preset_glob = config.get("preset_glob")
    sample_root = config.get("sample_root")
    if preset_glob and sample_root:
        return DirectorySourceProvider(str(preset_glob), Path(str(sample_root)))
    return BitwigMacProvider.for_host(system=system)
