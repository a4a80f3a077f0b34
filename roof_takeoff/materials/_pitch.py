"""Roof pitch parsing.

A pitch is written ``"rise/run"`` (usually ``"6/12"``).  The slope
factor ``sqrt(1 + (rise/run)**2)`` converts plan area to sloped area.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass

_PITCH_RE = re.compile(r"(\d+(?:\.\d+)?)\s*/\s*(\d+(?:\.\d+)?)")

DEFAULT_RUN = 12.0


@dataclass(frozen=True, slots=True)
class PitchInfo:
    """Parsed roof pitch.

    Attributes:
        pitch: Normalised pitch label (``"flat"`` when unparseable).
        rise: Rise in inches.
        run: Run in inches.
        slope_factor: ``sqrt(1 + (rise/run)**2)``.
        degrees: Roof angle in degrees.
    """

    pitch: str
    rise: float
    run: float
    slope_factor: float
    degrees: float


FLAT = PitchInfo(pitch="flat", rise=0.0, run=DEFAULT_RUN, slope_factor=1.0, degrees=0.0)


def parse_pitch(pitch: str | None) -> PitchInfo:
    """Parse a ``"rise/run"`` pitch string.

    Empty or unparseable input is treated as a flat roof.
    """
    match = _PITCH_RE.search(pitch or "")
    if match is None:
        return FLAT

    rise = float(match.group(1))
    run = float(match.group(2)) or DEFAULT_RUN
    ratio = rise / run
    return PitchInfo(
        pitch=f"{match.group(1)}/{match.group(2)}",
        rise=rise,
        run=run,
        slope_factor=math.sqrt(1.0 + ratio * ratio),
        degrees=math.degrees(math.atan(ratio)),
    )
