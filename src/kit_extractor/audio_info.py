"""Read basic WAV properties of exported samples with soundfile."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

import soundfile as sf


def probe_sample(path: Path) -> Dict[str, Any]:
    """Return an audio summary for ``path``.

    Unreadable files yield ``{"error": ...}`` instead of raising so a
    bad sample never turns into a failed copy.
    """
    try:
        info = sf.info(str(path))
    except (RuntimeError, OSError) as exc:
        # soundfile raises LibsndfileError (a RuntimeError) for non-audio content
        return {"error": str(exc)}
    duration = float(info.frames) / float(info.samplerate) if info.samplerate else 0.0
    return {
        "samplerate": int(info.samplerate),
        "channels": int(info.channels),
        "frames": int(info.frames),
        "duration": round(duration, 6),
        "format": info.format,
        "subtype": info.subtype,
    }
