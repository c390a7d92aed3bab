# -*- coding: utf-8 -*-
"""
Veil: Compact cosine-basis placeholders for raster images
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

sRGB Transfer Engine
====================
Conversion between 8-bit sRGB channel values and linear light.

The hash format stores its DC term as 8-bit sRGB and reconstructs pixels
back into 8-bit sRGB, so both directions must reproduce the reference
rounding rule exactly: add 0.5, then truncate. Any deviation (banker's
rounding, fastmath reassociation) changes hash digits.

Layout:
    - Scalar functions (``to_linear``, ``to_srgb8``) for single values.
    - A 256-entry lookup table for whole-buffer linearisation.
    - A strict IEEE 754 Numba kernel for whole-buffer encoding back to sRGB.

References:
    - IEC 61966-2-1:1999 (sRGB Standard)
"""

import math
from typing import Final, TypeAlias

import numpy as np
import numpy.typing as npt
from numba import njit

__all__ = [
    "ArrayFloat",
    "ArrayU8",
    "SRGB_THRESHOLD",
    "LINEAR_THRESHOLD",
    "SRGB8_TO_LINEAR",
    "to_linear",
    "to_srgb8",
    "srgb8_to_linear",
    "linear_to_srgb8",
]

# --- Type Aliases ---
ArrayFloat: TypeAlias = npt.NDArray[np.float64]
ArrayU8: TypeAlias = npt.NDArray[np.uint8]

# --- Constants ---
# IEC 61966-2-1 breakpoints. The EOTF switches from the linear segment to the
# power segment at 0.04045 (encoded) which maps to 0.0031308 (linear).
SRGB_THRESHOLD: Final[float] = 0.04045
LINEAR_THRESHOLD: Final[float] = 0.0031308
_SLOPE: Final[float] = 12.92
_GAMMA: Final[float] = 2.4
_INV_GAMMA: Final[float] = 1.0 / 2.4


# =============================================================================
# 1. SCALAR TRANSFER FUNCTIONS
# =============================================================================

def to_linear(channel: int) -> float:
    """
    Applies the sRGB EOTF to one 8-bit channel value.

    Args:
        channel: Encoded channel value in [0, 255]. Range is not checked.

    Returns:
        Linear light value in [0, 1].
    """
    v = channel / 255.0
    if v <= SRGB_THRESHOLD:
        return v / _SLOPE
    return ((v + 0.055) / 1.055) ** _GAMMA


def to_srgb8(value: float) -> int:
    """
    Applies the sRGB OETF and quantizes to 8 bits.

    The input is clamped to [0, 1] first. Rounding is ``int(x + 0.5)`` on a
    non-negative value, i.e. round-half-up.
    """
    v = max(0.0, min(1.0, value))
    if v <= LINEAR_THRESHOLD:
        return int(v * _SLOPE * 255.0 + 0.5)
    return int((1.055 * math.pow(v, _INV_GAMMA) - 0.055) * 255.0 + 0.5)


# =============================================================================
# 2. LOOKUP TABLE (built once, never mutated)
# =============================================================================

def _build_linear_table() -> ArrayFloat:
    table = np.array([to_linear(c) for c in range(256)], dtype=np.float64)
    table.setflags(write=False)
    return table


SRGB8_TO_LINEAR: Final[ArrayFloat] = _build_linear_table()


def srgb8_to_linear(srgb: ArrayU8) -> ArrayFloat:
    """
    Linearises an array of 8-bit channel values of any shape.

    Indexing the table gives results bit-identical to ``to_linear``.
    """
    return SRGB8_TO_LINEAR[np.asarray(srgb, dtype=np.uint8)]


# =============================================================================
# 3. ARRAY ENCODING KERNEL
# =============================================================================
# NOTE: fastmath stays off. Reassociating (1.055 * v**(1/2.4) - 0.055) * 255
# moves values across the +0.5 truncation boundary.

@njit(cache=True, fastmath=False)
def _linear_to_srgb8_kernel(linear: ArrayFloat) -> ArrayU8:
    """sRGB OETF with 8-bit quantization over a contiguous array."""
    out = np.empty(linear.shape, dtype=np.uint8)
    linear_flat = linear.ravel()
    out_flat = out.ravel()

    for i in range(linear.size):
        v = linear_flat[i]
        if v < 0.0:
            v = 0.0
        elif v > 1.0:
            v = 1.0
        if v <= 0.0031308:
            out_flat[i] = np.uint8(int(v * 12.92 * 255.0 + 0.5))
        else:
            out_flat[i] = np.uint8(int((1.055 * (v ** (1.0 / 2.4)) - 0.055) * 255.0 + 0.5))
    return out


def linear_to_srgb8(linear: ArrayFloat) -> ArrayU8:
    """
    Array form of ``to_srgb8``.

    NaN inputs are not expected; the kernel clamps every other value, so the
    result always fits in ``uint8``.

    Args:
        linear: Linear light values of any shape.

    Returns:
        ``uint8`` array of the same shape.
    """
    arr = np.ascontiguousarray(linear, dtype=np.float64)
    return _linear_to_srgb8_kernel(arr)
