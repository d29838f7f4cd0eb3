"""Core engine for Kit Extractor.

The :class:`KitExportEngine` walks the presets offered by a
:class:`~kit_extractor.source_provider.SampleSourceProvider`, extracts
the sample references of each preset, classifies every sample and
copies it into the export tree::

    <export>/<preset>/<velocity or "rim">/<sample>.wav
    <export>/<preset>/all/<sample>.wav

Processing is strictly sequential: presets in discovery order, samples
in file order.  A preset that cannot be read aborts the run; a sample
that cannot be copied is logged and skipped.

Modes:

- ``analyze``: report only, no filesystem writes at all.
- ``dry-run``: writes the run log and report, never copies samples.
- ``export``: copies samples, writes the run log, report and audit trail.

This engine is UI-agnostic and depends only on the provider, the
classification strategy and an injected :class:`RunLogger`.
"""

from __future__ import annotations

import csv
import datetime
import json
import stat
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, TypedDict

from . import preset_scanner
from .audio_info import probe_sample
from .classifier import ALL_CATEGORY, ClassificationStrategy
from .copier import copy_sample_file, get_dest_file_path
from .errors import ExportDirectoryError, PresetReadError, SampleCopyError
from .run_logger import RunLogger
from .source_provider import SampleSourceProvider

MODES = ("analyze", "dry-run", "export")
LOGS_DIRNAME = "logs"


class SampleEntry(TypedDict, total=False):
    reference: str
    source: str
    sample_type: str
    velocity: str
    category: str
    destinations: list[str]
    action: str
    error: str
    audio_summary: dict[str, Any]


class PresetReport(TypedDict, total=False):
    preset: str
    path: str
    samples: list[SampleEntry]
    counts: dict[str, int]


@dataclass
class KitExportEngine:
    """Copy the samples referenced by each preset into the export tree."""

    provider: SampleSourceProvider
    export_dir: Path = Path("export")
    logger: RunLogger = field(default_factory=RunLogger)
    strategy: ClassificationStrategy = field(default_factory=ClassificationStrategy)
    probe_audio: bool = False

    def __post_init__(self) -> None:
        self.export_dir = Path(self.export_dir)

    # ------------------------------------------------------------------
    # Export directory
    def ensure_export_dir(self) -> None:
        """Create the export directory if needed.

        Raises :class:`ExportDirectoryError` when it cannot be inspected
        or created, or when the path exists but is not a directory.
        """
        try:
            st = self.export_dir.stat()
        except FileNotFoundError:
            self.logger.info("creating export directory", path=str(self.export_dir))
            try:
                self.export_dir.mkdir(parents=True, exist_ok=True)
            except OSError as exc:
                raise ExportDirectoryError(f"failed to create export directory: {exc}") from exc
            return
        except OSError as exc:
            raise ExportDirectoryError(f"failed to stat export directory: {exc}") from exc
        if not stat.S_ISDIR(st.st_mode):
            raise ExportDirectoryError(f"export path {self.export_dir} is not a directory")

    def preset_dir(self, preset_name: str) -> Path:
        return self.export_dir / preset_name

    # ------------------------------------------------------------------
    # Per-sample processing
    def classify_sample(self, preset_name: str, sample_root: Path, reference: str) -> SampleEntry:
        """Resolve source path, facets and destinations for one reference."""
        source = Path(sample_root) / reference
        sample_type = self.strategy.sample_type(reference)
        velocity = self.strategy.sample_velocity(reference)
        category = self.strategy.destination_category(str(source), velocity)
        base = self.preset_dir(preset_name)
        destinations = [
            get_dest_file_path(base / category, source),
            get_dest_file_path(base / ALL_CATEGORY, source),
        ]
        return {
            "reference": reference,
            "source": str(source),
            "sample_type": sample_type,
            "velocity": velocity,
            "category": category,
            "destinations": [str(d) for d in destinations],
            "action": "NONE",
        }

    def process_sample(self, preset_name: str, entry: SampleEntry) -> SampleEntry:
        """Copy one classified sample to each of its destinations.

        The first failing copy stops the sample; the error is recorded on
        the entry and logged, never raised.
        """
        source = Path(entry["source"])
        self.logger.info(f"copying sample for preset '{preset_name}': {source}")
        try:
            for dest in entry["destinations"]:
                copy_sample_file(source, Path(dest))
        except SampleCopyError as exc:
            entry["action"] = "FAILED"
            entry["error"] = str(exc)
            self.logger.error(
                f"failed to process sample '{entry['reference']}' for preset '{preset_name}': {exc}",
                preset=preset_name,
                sample=entry["reference"],
            )
            return entry
        entry["action"] = "COPIED"
        if self.probe_audio:
            summary = probe_sample(Path(entry["destinations"][-1]))
            entry["audio_summary"] = summary
            if "error" in summary:
                self.logger.warning(
                    f"could not read audio properties of '{source.name}': {summary['error']}",
                    preset=preset_name,
                    sample=entry["reference"],
                )
        return entry

    def process_preset(
        self,
        preset_path: Path,
        references: List[str],
        sample_root: Path,
        do_copy: bool,
        audit_writer: Any = None,
    ) -> PresetReport:
        preset_name = self.strategy.preset_name(str(preset_path))
        self.logger.info(f"samples for preset '{preset_name}' (path: {preset_path}):")
        report: PresetReport = {
            "preset": preset_name,
            "path": str(preset_path),
            "samples": [],
            "counts": {"found": len(references), "copied": 0, "failed": 0},
        }
        for reference in references:
            entry = self.classify_sample(preset_name, sample_root, reference)
            self.logger.debug(
                "classified sample",
                sample=reference,
                sample_type=entry["sample_type"],
                velocity=entry["velocity"],
                category=entry["category"],
            )
            if do_copy:
                entry = self.process_sample(preset_name, entry)
                if entry["action"] == "COPIED":
                    report["counts"]["copied"] += 1
                else:
                    report["counts"]["failed"] += 1
            if audit_writer is not None:
                audit_writer.writerow(
                    [
                        preset_name,
                        reference,
                        entry["source"],
                        entry["category"],
                        entry["action"],
                        entry.get("error", ""),
                    ]
                )
            report["samples"].append(entry)
        return report

    # ------------------------------------------------------------------
    # Run
    def run(self, mode: str = "export") -> Dict[str, Any]:
        """Execute a run and return the report dict.

        :class:`PresetReadError` and :class:`ExportDirectoryError` are
        fatal and propagate to the caller.
        """
        mode = (mode or "export").lower().strip()
        if mode not in MODES:
            raise ValueError(f"unknown mode {mode!r}; expected one of {', '.join(MODES)}")
        write_logs = mode in {"dry-run", "export"}
        do_copy = mode == "export"

        sample_root = self.provider.sample_root()
        run_id = datetime.datetime.now().strftime("%Y%m%d_%H%M%S_") + uuid.uuid4().hex[:8]
        report: Dict[str, Any] = {
            "run_id": run_id,
            "mode": mode,
            "timestamp": datetime.datetime.now().isoformat(),
            "export_dir": str(self.export_dir.resolve()),
            "sample_root": str(sample_root),
            "presets_processed": 0,
            "samples_found": 0,
            "samples_copied": 0,
            "files_written": 0,
            "failed": 0,
            "presets": [],
        }

        log_dir: Optional[Path] = None
        if write_logs:
            self.ensure_export_dir()
            log_dir = self.export_dir / LOGS_DIRNAME / run_id
            self.logger.open_file(log_dir / "run_log.txt")

        audit_file = None
        audit_writer = None
        try:
            presets = self.provider.list_presets()
            self.logger.info(f"Kit Extractor run_id={run_id} mode={mode}")
            self.logger.info(f"Export root: {self.export_dir}")
            self.logger.info(f"Presets discovered: {len(presets)}")

            if do_copy and log_dir is not None:
                audit_file = open(log_dir / "audit.csv", "w", newline="", encoding="utf-8")
                audit_writer = csv.writer(audit_file)
                audit_writer.writerow(["preset", "reference", "source", "category", "action", "detail"])

            for preset_path in presets:
                try:
                    references = preset_scanner.scan_preset(preset_path)
                except PresetReadError as exc:
                    self.logger.error(str(exc), preset=str(preset_path))
                    raise
                preset_report = self.process_preset(
                    preset_path, references, sample_root, do_copy, audit_writer
                )
                counts = preset_report["counts"]
                report["presets_processed"] += 1
                report["samples_found"] += counts["found"]
                report["samples_copied"] += counts["copied"]
                report["files_written"] += 2 * counts["copied"]
                report["failed"] += counts["failed"]
                report["presets"].append(preset_report)

            self.logger.info(
                f"Done. presets={report['presets_processed']} "
                f"samples={report['samples_found']} copied={report['samples_copied']} "
                f"failed={report['failed']}"
            )
        finally:
            if audit_file:
                audit_file.close()
            self.logger.close_file()

        if log_dir is not None:
            (log_dir / "run_report.json").write_text(json.dumps(report, indent=2), encoding="utf-8")
        return report
