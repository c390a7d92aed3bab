# -*- coding: utf-8 -*-
"""
Veil: Compact cosine-basis placeholders for raster images
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Module: veil_quantizer.py - Packing of linear RGB coefficients into integers.

DC term:
    Each channel goes through the sRGB OETF to 8 bits and the three bytes are
    packed as 0xRRGGBB (fits 4 base-83 digits).

AC terms:
    Each channel is normalised by the shared maximum magnitude and quantized
    to 19 levels with a square-root companding curve:

        q = clamp(floor(sign_pow(c / max, 0.5) * 9 + 9.5), 0, 18)

    Level 9 is zero. The curve spends more levels near zero, where most AC
    energy of natural images sits. Decoding squares the curve back:

        c = sign_pow((q - 9) / 9, 2) * max

    Three levels pack as qR*19^2 + qG*19 + qB < 19^3 (fits 2 base-83 digits).

Maximum magnitude:
    The largest |AC channel| is itself quantized to 83 steps of 1/166 so that
    it fits one digit; the *quantized* value (q + 1) / 166 is what both sides
    use as ``max``.
"""

import math
from typing import Final, Iterable, Tuple

from veil_colorengine import to_linear, to_srgb8

__all__ = [
    "LinearTriple",
    "AC_LEVELS",
    "MAXIMUM_STEPS",
    "sign_pow",
    "encode_dc",
    "decode_dc",
    "encode_ac",
    "decode_ac",
    "quantize_maximum",
    "maximum_from_index",
]

LinearTriple = Tuple[float, float, float]

AC_LEVELS: Final[int] = 19
_AC_HALF: Final[float] = 9.0
MAXIMUM_STEPS: Final[float] = 166.0
_MAXIMUM_INDEX_LIMIT: Final[int] = 82


def sign_pow(value: float, exponent: float) -> float:
    """``|value| ** exponent`` carrying the sign of ``value``."""
    return math.copysign(math.pow(abs(value), exponent), value)


# =============================================================================
# DC
# =============================================================================

def encode_dc(rgb: LinearTriple) -> int:
    r, g, b = rgb
    return (to_srgb8(r) << 16) | (to_srgb8(g) << 8) | to_srgb8(b)


def decode_dc(packed: int) -> LinearTriple:
    return (
        to_linear(packed >> 16),
        to_linear((packed >> 8) & 255),
        to_linear(packed & 255),
    )


# =============================================================================
# AC
# =============================================================================

def _quantize_ac_channel(value: float, maximum_value: float) -> int:
    q = math.floor(sign_pow(value / maximum_value, 0.5) * _AC_HALF + 9.5)
    return int(max(0, min(AC_LEVELS - 1, q)))


def encode_ac(rgb: LinearTriple, maximum_value: float) -> int:
    """
    Quantizes one AC coefficient.

    Args:
        rgb: Linear coefficient triple.
        maximum_value: Effective normalisation, see ``quantize_maximum``.

    Returns:
        Packed level index in [0, 19**3).
    """
    r, g, b = rgb
    return (
        _quantize_ac_channel(r, maximum_value) * AC_LEVELS * AC_LEVELS
        + _quantize_ac_channel(g, maximum_value) * AC_LEVELS
        + _quantize_ac_channel(b, maximum_value)
    )


def decode_ac(packed: int, maximum_value: float) -> LinearTriple:
    """Inverse of ``encode_ac`` up to quantization error."""
    quant_r = packed // (AC_LEVELS * AC_LEVELS)
    quant_g = (packed // AC_LEVELS) % AC_LEVELS
    quant_b = packed % AC_LEVELS
    return (
        sign_pow((quant_r - _AC_HALF) / _AC_HALF, 2.0) * maximum_value,
        sign_pow((quant_g - _AC_HALF) / _AC_HALF, 2.0) * maximum_value,
        sign_pow((quant_b - _AC_HALF) / _AC_HALF, 2.0) * maximum_value,
    )


# =============================================================================
# Shared AC normalisation
# =============================================================================

def quantize_maximum(ac_values: Iterable[LinearTriple]) -> Tuple[int, float]:
    """
    Derives the serialised maximum index and the effective maximum.

    Args:
        ac_values: All AC coefficient triples (DC excluded).

    Returns:
        ``(q, effective_maximum)``. With no AC terms this is ``(0, 1.0)``.
    """
    magnitudes = [abs(c) for triple in ac_values for c in triple]
    if not magnitudes:
        return 0, 1.0

    actual = max(magnitudes)
    q = int(max(0, min(_MAXIMUM_INDEX_LIMIT, math.floor(actual * MAXIMUM_STEPS - 0.5))))
    return q, (q + 1) / MAXIMUM_STEPS


def maximum_from_index(q: int, punch: float = 1.0) -> float:
    """
    Rebuilds the AC normalisation on the decode side.

    ``punch`` > 1 exaggerates every AC term (more contrast), < 1 flattens it.
    """
    return (q + 1) / MAXIMUM_STEPS * punch
