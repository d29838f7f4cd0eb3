"""Copy a single sample file into the export tree."""

from __future__ import annotations

import shutil
import stat
from pathlib import Path

from .errors import NotARegularFileError, SampleCopyError, SampleNotFoundError


def get_dest_file_path(dest_dir: Path, sample_path: Path) -> Path:
    return Path(dest_dir) / Path(sample_path).name


def copy_sample_file(src: Path, dest: Path) -> Path:
    """Copy ``src`` to ``dest`` and return ``dest``.

    The source must be a regular file; symlinks, directories and devices
    are rejected.  Missing parent directories of ``dest`` are created and
    an existing destination is overwritten.  A failed copy may leave a
    partial destination file behind.
    """
    src = Path(src)
    dest = Path(dest)
    try:
        st = src.lstat()
    except FileNotFoundError as exc:
        raise SampleNotFoundError(src) from exc
    except OSError as exc:
        raise SampleCopyError(src, f"failed to stat {src}: {exc}", dest) from exc
    if not stat.S_ISREG(st.st_mode):
        raise NotARegularFileError(src)

    try:
        dest.parent.mkdir(parents=True, exist_ok=True)
        with src.open("rb") as source, dest.open("wb") as target:
            shutil.copyfileobj(source, target)
    except OSError as exc:
        raise SampleCopyError(src, f"failed to copy {src} to {dest}: {exc}", dest) from exc
    return dest
