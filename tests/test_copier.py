import os
from pathlib import Path

import sys
import pytest

# Add the src directory to sys.path so that kit_extractor can be imported
SRC_DIR = Path(__file__).resolve().parents[1] / "src"
sys.path.insert(0, str(SRC_DIR))

from kit_extractor.copier import copy_sample_file, get_dest_file_path
from kit_extractor.errors import NotARegularFileError, SampleCopyError, SampleNotFoundError


def test_copy_creates_parent_chain(tmp_path: Path):
    src = tmp_path / "Kick 1 v5.wav"
    src.write_bytes(b"RIFF....WAVEdata")
    dest = tmp_path / "export" / "MyKit" / "v5" / "Kick 1 v5.wav"
    assert copy_sample_file(src, dest) == dest
    assert dest.read_bytes() == src.read_bytes()


def test_copy_overwrites_existing(tmp_path: Path):
    src = tmp_path / "a.wav"
    src.write_bytes(b"new")
    dest = tmp_path / "out" / "a.wav"
    dest.parent.mkdir()
    dest.write_bytes(b"old content that is longer")
    copy_sample_file(src, dest)
    assert dest.read_bytes() == b"new"


def test_missing_source_creates_nothing(tmp_path: Path):
    dest = tmp_path / "out" / "missing.wav"
    with pytest.raises(SampleNotFoundError):
        copy_sample_file(tmp_path / "missing.wav", dest)
    assert not dest.exists()
    assert not dest.parent.exists()


def test_directory_source_is_rejected(tmp_path: Path):
    src = tmp_path / "folder.wav"
    src.mkdir()
    with pytest.raises(NotARegularFileError) as excinfo:
        copy_sample_file(src, tmp_path / "out" / "folder.wav")
    assert isinstance(excinfo.value, SampleCopyError)
    assert "not a regular file" in str(excinfo.value)


@pytest.mark.skipif(not hasattr(os, "symlink") or os.name == "nt", reason="symlinks need POSIX")
def test_symlink_source_is_rejected(tmp_path: Path):
    target = tmp_path / "real.wav"
    target.write_bytes(b"data")
    link = tmp_path / "link.wav"
    link.symlink_to(target)
    with pytest.raises(NotARegularFileError):
        copy_sample_file(link, tmp_path / "out" / "link.wav")


def test_dest_file_path_keeps_base_name(tmp_path: Path):
    assert get_dest_file_path(tmp_path / "all", Path("/lib/Kick/Kick 1 v5.wav")) == tmp_path / "all" / "Kick 1 v5.wav"
