import json
import platform
from pathlib import Path

import sys
import pytest

# Add the src directory to sys.path so that kit_extractor can be imported
SRC_DIR = Path(__file__).resolve().parents[1] / "src"
sys.path.insert(0, str(SRC_DIR))

from kit_extractor.cli import main

KICK = "Bitwig/Nektar's Acoustic Drums/samples/Kick/Kick 1 v5.wav"
KICK_RAW = "Bitwig/Nektar's Acoustic Drums:7/samples/samples/Kick/Kick 1 v5.wav"


@pytest.fixture
def workspace(tmp_path: Path, monkeypatch) -> Path:
    """A working directory with one preset and its sample."""
    monkeypatch.chdir(tmp_path)
    sample = tmp_path / "samples" / KICK
    sample.parent.mkdir(parents=True)
    sample.write_bytes(b"kick")
    presets = tmp_path / "presets"
    presets.mkdir()
    (presets / "MyKit.bwpreset").write_bytes(b"\x00head\n\x01" + KICK_RAW.encode("utf-8") + b"\x00\n")
    return tmp_path


def _run_args(workspace: Path, command: str, *extra: str) -> list:
    return [
        command,
        "--portable",
        "--quiet",
        "--sample-root",
        str(workspace / "samples"),
        "--preset-glob",
        str(workspace / "presets" / "*.bwpreset"),
        *extra,
    ]


def test_export_command(workspace: Path, capsys):
    assert main(_run_args(workspace, "export")) == 0
    summary = json.loads(capsys.readouterr().out)
    assert summary["samples_copied"] == 1
    assert "presets" not in summary
    assert (workspace / "export" / "MyKit" / "v5" / "Kick 1 v5.wav").exists()
    assert (workspace / "export" / "MyKit" / "all" / "Kick 1 v5.wav").exists()


def test_export_dir_flag_and_full_report(workspace: Path, capsys):
    out_dir = workspace / "elsewhere"
    assert main(_run_args(workspace, "export", "--export-dir", str(out_dir), "--full-report")) == 0
    report = json.loads(capsys.readouterr().out)
    assert report["presets"][0]["preset"] == "MyKit"
    assert (out_dir / "MyKit" / "all" / "Kick 1 v5.wav").exists()


def test_analyze_command_writes_nothing(workspace: Path, capsys):
    assert main(_run_args(workspace, "analyze")) == 0
    assert json.loads(capsys.readouterr().out)["samples_found"] == 1
    assert not (workspace / "export").exists()


def test_missing_sample_does_not_change_exit_status(workspace: Path, capsys):
    (workspace / "samples" / KICK).unlink()
    assert main(_run_args(workspace, "export")) == 0
    assert json.loads(capsys.readouterr().out)["failed"] == 1


def test_fatal_export_dir_returns_one(workspace: Path, capsys):
    (workspace / "export").write_text("file", encoding="utf-8")
    assert main(_run_args(workspace, "export")) == 1
    assert "Error:" in capsys.readouterr().err


def test_unsupported_platform_without_locations(workspace: Path, monkeypatch, capsys):
    monkeypatch.setattr(platform, "system", lambda: "Linux")
    assert main(["export", "--portable", "--quiet"]) == 1
    assert "only known for macOS" in capsys.readouterr().err


def test_config_file_supplies_locations(workspace: Path, capsys):
    config = {
        "sample_root": str(workspace / "samples"),
        "preset_glob": str(workspace / "presets" / "*.bwpreset"),
        "export_dir": "from-config",
    }
    (workspace / "config.json").write_text(json.dumps(config), encoding="utf-8")
    assert main(["export", "--portable", "--quiet"]) == 0
    assert (workspace / "from-config" / "MyKit" / "v5" / "Kick 1 v5.wav").exists()


def test_invalid_config_is_fatal(workspace: Path, capsys):
    (workspace / "config.json").write_text(json.dumps({"verbose": "loud"}), encoding="utf-8")
    assert main(["export", "--portable", "--quiet"]) == 1
    assert "Invalid configuration" in capsys.readouterr().err


def test_init_and_show_config(workspace: Path, capsys):
    assert main(["init-config", "--portable"]) == 0
    assert (workspace / "config.json").exists()
    assert main(["init-config", "--portable"]) == 1
    assert main(["init-config", "--portable", "--force"]) == 0
    capsys.readouterr()
    assert main(["show-config", "--portable"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["portable"] is True
    assert payload["config"]["export_dir"] == "export"
