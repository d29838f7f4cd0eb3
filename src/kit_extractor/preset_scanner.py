"""Extract sample references from Bitwig preset documents.

A ``.bwpreset`` file is mostly binary, but the sample paths of a drum
kit are stored as plain text.  A line may repeat a path several times
(internal metadata first, the real reference last), so only the last
match of each line is kept.

References are stored with a library marker (``:7/samples``) that has
to be removed before the reference can be joined onto the sample
library root as a relative path.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable, List, Optional

from .errors import PresetReadError

LIBRARY_MARKER = ":7/samples"

SAMPLE_REFERENCE_RE = re.compile(r"Bitwig[a-zA-Z0-9\t\n\f\r /:\-']+\.wav")


def clean_sample_reference(text: str) -> str:
    """Strip the library marker from a raw reference (idempotent)."""
    return text.replace(LIBRARY_MARKER, "")


def match_line(line: str) -> Optional[str]:
    """Return the normalised last reference on ``line`` or ``None``."""
    matches = SAMPLE_REFERENCE_RE.findall(line)
    if not matches:
        return None
    return clean_sample_reference(matches[-1])


def _strip_line_ending(line: str) -> str:
    # Only "\n" ends a line; a single "\r" before it is dropped
    if line.endswith("\n"):
        line = line[:-1]
    if line.endswith("\r"):
        line = line[:-1]
    return line


def scan_lines(lines: Iterable[str]) -> List[str]:
    references: List[str] = []
    for line in lines:
        ref = match_line(_strip_line_ending(line))
        if ref is not None:
            references.append(ref)
    return references


def scan_text(text: str) -> List[str]:
    """Scan an in-memory preset document."""
    return scan_lines(text.split("\n"))


def scan_preset(path: Path) -> List[str]:
    """Return the sample references of the preset at ``path`` in file order.

    Undecodable bytes are replaced rather than raising, since the
    references themselves are always plain ASCII.  Any failure to open
    or read the file is raised as :class:`PresetReadError`.
    """
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8", errors="replace", newline="\n") as f:
            return scan_lines(f)
    except OSError as exc:
        raise PresetReadError(path, exc.strerror or str(exc)) from exc
