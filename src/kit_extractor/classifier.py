"""Derive preset name, sample type and velocity from paths.

All three derivations are best-effort string heuristics over the fixed
layout of Nektar's Acoustic Drums.  When a pattern does not match, a
defined fallback is used instead of raising.

The functions are grouped in :class:`ClassificationStrategy` so the
engine can be handed a different strategy without touching any file
system code.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import PurePath
from typing import Callable

PRESET_SUFFIX = ".bwpreset"
SAMPLE_SUFFIX = ".wav"
SAMPLE_LIBRARY_PREFIX = "Bitwig/Nektar's Acoustic Drums/samples/"

RIM_MARKER = "Rim"
RIM_CATEGORY = "rim"
ALL_CATEGORY = "all"

_PRESET_NAME_RE = re.compile(r"([\w -]+)\.bwpreset", re.ASCII)
_VELOCITY_RE = re.compile(r"([a-zA-Z0-9]{1,2})\.wav")


def _base_name(path: str) -> str:
    # References always use "/" regardless of host platform
    return PurePath(str(path).replace("\\", "/")).name


def get_preset_name(path: str) -> str:
    """Return the preset name for a ``.bwpreset`` path.

    ``"Warm Kit.bwpreset"`` gives ``"Warm Kit"``.  When the name holds
    characters outside ``[\\w -]`` the suffix is stripped literally; a
    name without the suffix is returned unchanged.
    """
    name = _base_name(path)
    match = _PRESET_NAME_RE.search(name)
    if match:
        return match.group(1)
    if name.endswith(PRESET_SUFFIX):
        return name[: -len(PRESET_SUFFIX)]
    return name


def get_sample_type(reference: str) -> str:
    """Return the instrument zone (first folder below the library root).

    References outside the expected library prefix are not rejected;
    the first segment of the reference as given is returned.
    """
    remainder = reference
    if remainder.startswith(SAMPLE_LIBRARY_PREFIX):
        remainder = remainder[len(SAMPLE_LIBRARY_PREFIX):]
    return remainder.split("/")[0]


def get_sample_velocity(reference: str) -> str:
    """Return the velocity/articulation token at the end of the file name."""
    match = _VELOCITY_RE.search(reference)
    if match:
        return match.group(1)
    stem = _base_name(reference)
    if stem.endswith(SAMPLE_SUFFIX):
        stem = stem[: -len(SAMPLE_SUFFIX)]
    return stem.split(" ")[-1]


def get_destination_category(source_path: str, velocity: str) -> str:
    # Rimshots only have two samples, so they share one folder
    if RIM_MARKER in str(source_path):
        return RIM_CATEGORY
    return velocity


@dataclass(frozen=True)
class ClassificationStrategy:
    """Bundle of the pure classification functions used by the engine."""

    preset_name: Callable[[str], str] = get_preset_name
    sample_type: Callable[[str], str] = get_sample_type
    sample_velocity: Callable[[str], str] = get_sample_velocity
    destination_category: Callable[[str, str], str] = get_destination_category
