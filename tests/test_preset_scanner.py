from pathlib import Path

import sys
import pytest

# Add the src directory to sys.path so that kit_extractor can be imported
SRC_DIR = Path(__file__).resolve().parents[1] / "src"
sys.path.insert(0, str(SRC_DIR))

from kit_extractor import preset_scanner
from kit_extractor.errors import PresetReadError

KICK = "Bitwig/Nektar's Acoustic Drums/samples/Kick/Kick 1 v5.wav"
KICK_RAW = "Bitwig/Nektar's Acoustic Drums:7/samples/samples/Kick/Kick 1 v5.wav"


def test_single_match_on_line():
    line = f"\x00\x12...{KICK}...\x00"
    assert preset_scanner.match_line(line) == KICK


def test_last_match_on_line_wins():
    line = "\x00Bitwig/meta/copy one.wav\x00Bitwig/meta/copy two.wav\x00" + KICK_RAW + "\x07"
    assert preset_scanner.match_line(line) == KICK


def test_line_without_reference():
    assert preset_scanner.match_line("\x00\x01 no samples here .wav") is None
    assert preset_scanner.match_line("Bitwig/Kick.aif") is None


def test_marker_is_stripped_and_cleaning_is_idempotent():
    cleaned = preset_scanner.clean_sample_reference(KICK_RAW)
    assert preset_scanner.LIBRARY_MARKER not in cleaned
    assert preset_scanner.clean_sample_reference(cleaned) == cleaned


def test_scan_text_keeps_file_order():
    text = "\n".join(
        [
            "header",
            "x Bitwig/Nektar's Acoustic Drums:7/samples/samples/Snare/Snare 2 v1.wav y",
            "binary \x00\x01\x02",
            f"z {KICK_RAW}",
        ]
    )
    assert preset_scanner.scan_text(text) == [
        "Bitwig/Nektar's Acoustic Drums/samples/Snare/Snare 2 v1.wav",
        KICK,
    ]


def test_scan_preset_reads_binary_file(tmp_path: Path):
    preset = tmp_path / "Warm Kit.bwpreset"
    preset.write_bytes(b"\xff\xfe\x00BtWg\n\x80\x81" + KICK_RAW.encode("utf-8") + b"\x00\r\n\x90tail\n")
    assert preset_scanner.scan_preset(preset) == [KICK]


def test_scan_preset_without_references(tmp_path: Path):
    preset = tmp_path / "Empty.bwpreset"
    preset.write_bytes(b"\x00\x01\x02\n")
    assert preset_scanner.scan_preset(preset) == []


def test_scan_missing_preset_raises(tmp_path: Path):
    with pytest.raises(PresetReadError) as excinfo:
        preset_scanner.scan_preset(tmp_path / "missing.bwpreset")
    assert excinfo.value.path == tmp_path / "missing.bwpreset"
    assert "failed to process path" in str(excinfo.value)


def test_lone_carriage_return_does_not_split_line(tmp_path: Path):
    meta = "Bitwig/Nektar's Acoustic Drums/samples/Kick/meta copy.wav"
    data = "\x00" + meta + "\x00\r\x01" + KICK_RAW + "\x00\n"
    preset = tmp_path / "Binary.bwpreset"
    preset.write_bytes(data.encode("utf-8"))
    assert preset_scanner.scan_preset(preset) == [KICK]
    assert preset_scanner.scan_text(data) == [KICK]


def test_crlf_line_endings(tmp_path: Path):
    preset = tmp_path / "Crlf.bwpreset"
    preset.write_bytes(b"head\r\nx " + KICK_RAW.encode("utf-8") + b"\r\ntail\r\n")
    assert preset_scanner.scan_preset(preset) == [KICK]


def test_vertical_tab_separates_references():
    # \v is not part of the reference character class
    line = "Bitwig/meta/copy one.wav\x0b" + KICK_RAW
    assert preset_scanner.SAMPLE_REFERENCE_RE.findall("Bitwig/a b\x0bc.wav") == []
    assert preset_scanner.match_line(line) == KICK
