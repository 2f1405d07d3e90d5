"""Peak signal-to-noise ratio between two frames."""

from __future__ import annotations

import math
import struct
from typing import Sequence


def _single(value: float) -> float:
    """Round a value to single precision."""
    return struct.unpack("f", struct.pack("f", value))[0]


def psnr(
    current: Sequence[int] | bytes,
    output: Sequence[int] | bytes,
    rows: int,
    cols: int,
) -> float:
    """PSNR in decibels of ``output`` against ``current`` over a ``rows x cols`` frame.

    The peak energy is accumulated in single precision. Identical frames
    give infinity.
    """
    size = rows * cols
    if rows < 0 or cols < 0:
        raise ValueError(f"frame dimensions must not be negative, got {rows}x{cols}")
    if len(current) < size or len(output) < size:
        raise ValueError(f"both frames need {size} pixels for {rows}x{cols}")
    msd = float(
        sum((a - b) * (a - b) for a, b in zip(current[:size], output[:size]))
    )
    peak = _single(rows)
    for factor in (cols, 255, 255):
        peak = _single(peak * factor)
    if msd == 0.0:
        return math.inf
    return 10 * math.log10(peak / msd)