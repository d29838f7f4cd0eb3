"""Configuration management for Kit Extractor.

Configuration lives in ``config.json``.  In the default mode the file
is read from the platform AppData/XDG directory; in portable mode it
sits next to the application.  Portable mode is selected by a
``portable.flag`` file in the application directory or by passing
``--portable`` on the command line; the flag file takes precedence.

Every configuration is validated against the packaged
``schemas/config.schema.json`` with :mod:`jsonschema` before use.

Example usage::

    from kit_extractor.config_service import ConfigService

    config_service = ConfigService(app_dir=Path.cwd())
    cfg = config_service.load_config()
    cfg["export_dir"] = "/Volumes/Samples/export"
    config_service.save_config(cfg)

"""

from __future__ import annotations

import json
import os
import platform
from dataclasses import dataclass, field
from json import JSONDecodeError
from pathlib import Path
from typing import Any, Dict, Optional

import jsonschema

from .errors import ConfigError

SCHEMA_PATH = Path(__file__).resolve().parent / "schemas" / "config.schema.json"

DEFAULT_CONFIG: Dict[str, Any] = {
    "export_dir": "export",
    "sample_root": None,
    "preset_glob": None,
    "probe_audio": False,
    "verbose": False,
}


def _get_appdata_root(app_name: str = "KitExtractor") -> Path:
    """Return the platform‑specific base directory for config files."""
    system = platform.system().lower()
    if system == "windows":
        appdata = os.environ.get("APPDATA")
        if appdata:
            return Path(appdata) / app_name
        return Path.home() / f"AppData/Roaming/{app_name}"
    if system == "darwin":
        return Path.home() / "Library/Application Support" / app_name
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / app_name
    return Path.home() / ".config" / app_name


def _load_json(path: Path) -> Any:
    if not path.exists():
        return None
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def _save_json(data: Any, file_path: Path) -> None:
    file_path.parent.mkdir(parents=True, exist_ok=True)
    with file_path.open("w", encoding="utf-8", newline="\n") as f:
        json.dump(data, f, indent=2)


def _validate_json(data: Any, schema_path: Path) -> None:
    schema = _load_json(schema_path)
    if not schema:
        return
    try:
        jsonschema.validate(instance=data, schema=schema)
    except jsonschema.ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc.message}") from exc


@dataclass
class ConfigService:
    """Resolve, load and save the Kit Extractor configuration."""

    app_dir: Path
    portable_flag_filename: str = "portable.flag"
    config_filename: str = "config.json"
    schema_path: Path = SCHEMA_PATH
    _cached_mode: Optional[bool] = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        self.app_dir = Path(self.app_dir)

    def _portable_flag_exists(self) -> bool:
        return (self.app_dir / self.portable_flag_filename).exists()

    def detect_mode(self, cli_portable: bool = False) -> bool:
        """Return ``True`` if portable mode should be used.

        A ``portable.flag`` file in the application directory always
        forces portable mode; otherwise ``cli_portable`` decides.  The
        result is cached for subsequent calls.
        """
        if self._cached_mode is None:
            if self._portable_flag_exists():
                self._cached_mode = True
            else:
                self._cached_mode = bool(cli_portable)
        return self._cached_mode

    def get_config_dir(self, cli_portable: bool = False) -> Path:
        if self.detect_mode(cli_portable=cli_portable):
            return self.app_dir
        return _get_appdata_root()

    def get_config_path(self, cli_portable: bool = False) -> Path:
        return self.get_config_dir(cli_portable) / self.config_filename

    def load_config(self, cli_portable: bool = False) -> Dict[str, Any]:
        """Return the defaults merged with the validated config file.

        Raises :class:`ConfigError` when the file is not valid JSON or
        does not match the schema.
        """
        cfg_path = self.get_config_path(cli_portable)
        try:
            data = _load_json(cfg_path)
        except JSONDecodeError as exc:
            raise ConfigError(f"Invalid configuration in {cfg_path}: {exc}") from exc
        except OSError as exc:
            raise ConfigError(f"Cannot read configuration {cfg_path}: {exc}") from exc
        cfg = dict(DEFAULT_CONFIG)
        if data is not None:
            _validate_json(data, self.schema_path)
            cfg.update(data)
        return cfg

    def save_config(self, config: Dict[str, Any], cli_portable: bool = False) -> Path:
        """Validate ``config`` and write it to the resolved path."""
        _validate_json(config, self.schema_path)
        path = self.get_config_path(cli_portable)
        _save_json(config, path)
        return path
