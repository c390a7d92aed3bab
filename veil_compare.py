# -*- coding: utf-8 -*-
"""
Veil: Compact cosine-basis placeholders for raster images
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Module: veil_compare.py - Tolerance-based comparison of two pixel buffers.

Strategies disagree in the last bits of their sums, which occasionally
flips an 8-bit rounding. Byte equality is therefore too strict to compare
them; ``compare_per_pixel`` counts pixels whose worst channel is off by
more than a tolerance and accepts a small fraction of those.

Only the RGB channels are compared. Alpha and row padding are ignored.
"""

from typing import NamedTuple

import numpy as np

from veil_structure import InvalidDimensions, PixelBuffer

__all__ = [
    "ComparisonResult",
    "DifferenceStats",
    "compare_per_pixel",
    "compare_strict",
    "difference_stats",
]


class ComparisonResult(NamedTuple):
    passed: bool
    bad_pixel_rate: float


class DifferenceStats(NamedTuple):
    """Absolute per-channel differences in 8-bit units."""
    mean: float
    p95: float
    maximum: int


def _channel_difference(a: PixelBuffer, b: PixelBuffer) -> np.ndarray:
    if (a.width, a.height) != (b.width, b.height):
        raise InvalidDimensions(
            f"Cannot compare a {a.width}x{a.height} buffer with a {b.width}x{b.height} buffer"
        )
    return np.abs(a.rgb().astype(np.int16) - b.rgb().astype(np.int16))


def compare_per_pixel(
    a: PixelBuffer,
    b: PixelBuffer,
    per_pixel_tolerance: float = 0.05,
    overall_tolerance: float = 0.02,
) -> ComparisonResult:
    """
    Counts pixels where any channel differs by more than ``per_pixel_tolerance``.

    Args:
        per_pixel_tolerance: Allowed channel difference in [0, 1] units.
        overall_tolerance: Allowed fraction of bad pixels.

    Returns:
        ``passed`` is True when the bad-pixel rate does not exceed
        ``overall_tolerance``.
    """
    diff = _channel_difference(a, b) / 255.0
    bad = np.any(diff > per_pixel_tolerance, axis=2)
    rate = float(np.count_nonzero(bad)) / bad.size
    return ComparisonResult(rate <= overall_tolerance, rate)


def compare_strict(a: PixelBuffer, b: PixelBuffer) -> ComparisonResult:
    """Passes only when every RGB byte matches."""
    bad = np.any(_channel_difference(a, b) != 0, axis=2)
    rate = float(np.count_nonzero(bad)) / bad.size
    return ComparisonResult(rate == 0.0, rate)


def difference_stats(a: PixelBuffer, b: PixelBuffer) -> DifferenceStats:
    diff = _channel_difference(a, b)
    return DifferenceStats(
        mean=float(diff.mean()),
        p95=float(np.percentile(diff, 95)),
        maximum=int(diff.max()),
    )
