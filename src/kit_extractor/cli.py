"""Command‑line interface for Kit Extractor.

Each run subcommand builds a :class:`kit_extractor.engine.KitExportEngine`
from the effective configuration (config file overridden by flags).
Run ``python -m kit_extractor --help`` for usage.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from .config_service import DEFAULT_CONFIG, ConfigService
from .engine import KitExportEngine
from .errors import KitExtractorError
from .run_logger import RunLogger
from .source_provider import resolve_provider

SUMMARY_KEYS = (
    "run_id",
    "mode",
    "export_dir",
    "sample_root",
    "presets_processed",
    "samples_found",
    "samples_copied",
    "files_written",
    "failed",
)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kit-extractor",
        description="Kit Extractor – copy the samples of Bitwig drum presets into per-velocity folders",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_portable(subparser: argparse.ArgumentParser) -> None:
        subparser.add_argument(
            "--portable",
            "-p",
            action="store_true",
            help="Force portable mode (ignored if portable.flag is present)",
        )

    def add_common(subparser: argparse.ArgumentParser) -> None:
        add_portable(subparser)
        subparser.add_argument("--export-dir", help="Destination root (config default: export)")
        subparser.add_argument("--sample-root", help="Root of the sample library the presets refer to")
        subparser.add_argument("--preset-glob", help="Glob pattern matching the .bwpreset files")
        subparser.add_argument(
            "--probe-audio",
            action="store_true",
            default=None,
            help="Read samplerate/channels/length of every exported sample",
        )
        subparser.add_argument("--verbose", action="store_true", default=None, help="Show debug output")
        subparser.add_argument("--quiet", "-q", action="store_true", help="Do not print log lines")
        subparser.add_argument(
            "--full-report", action="store_true", help="Print per-sample details, not just the summary"
        )

    sp = subparsers.add_parser("export", help="Copy the referenced samples into the export tree")
    add_common(sp)
    sp = subparsers.add_parser("dry-run", help="Write the run log and report without copying")
    add_common(sp)
    sp = subparsers.add_parser("analyze", help="List presets and samples; write nothing")
    add_common(sp)

    sp = subparsers.add_parser("show-config", help="Print the resolved configuration")
    add_portable(sp)
    sp = subparsers.add_parser("init-config", help="Write a configuration file with default values")
    add_portable(sp)
    sp.add_argument("--force", action="store_true", help="Overwrite an existing configuration file")
    return parser


def _effective_config(config: Dict[str, Any], args: argparse.Namespace) -> Dict[str, Any]:
    cfg = dict(config)
    overrides = {
        "export_dir": args.export_dir,
        "sample_root": args.sample_root,
        "preset_glob": args.preset_glob,
        "probe_audio": args.probe_audio,
        "verbose": args.verbose,
    }
    for key, value in overrides.items():
        if value is not None:
            cfg[key] = value
    return cfg


def _construct_engine(config: Dict[str, Any], quiet: bool) -> KitExportEngine:
    logger = RunLogger(to_console=not quiet, verbose=bool(config.get("verbose")))
    return KitExportEngine(
        provider=resolve_provider(config),
        export_dir=Path(config.get("export_dir") or DEFAULT_CONFIG["export_dir"]),
        logger=logger,
        probe_audio=bool(config.get("probe_audio")),
    )


def _run(args: argparse.Namespace, config_service: ConfigService) -> int:
    cli_portable = bool(getattr(args, "portable", False))
    if args.command == "show-config":
        payload = {
            "config_path": str(config_service.get_config_path(cli_portable)),
            "portable": config_service.detect_mode(cli_portable),
            "config": config_service.load_config(cli_portable),
        }
        print(json.dumps(payload, indent=2))
        return 0
    if args.command == "init-config":
        path = config_service.get_config_path(cli_portable)
        if path.exists() and not args.force:
            print(f"Error: {path} already exists (use --force to overwrite)")
            return 1
        written = config_service.save_config(dict(DEFAULT_CONFIG), cli_portable)
        print(f"Wrote {written}")
        return 0

    config = _effective_config(config_service.load_config(cli_portable), args)
    engine = _construct_engine(config, args.quiet)
    report = engine.run(mode=args.command)
    if not args.full_report:
        report = {key: report[key] for key in SUMMARY_KEYS}
    print(json.dumps(report, indent=2))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    config_service = ConfigService(app_dir=Path.cwd())
    try:
        return _run(args, config_service)
    except KitExtractorError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
