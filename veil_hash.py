# -*- coding: utf-8 -*-
"""
Veil: Compact cosine-basis placeholders for raster images
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Module: veil_hash.py - Serialisation of coefficient grids to hash strings.

Layout (all fields base-83, most significant digit first):

    offset      digits  field
    0           1       size flag = (components_x - 1) + (components_y - 1) * 9
    1           1       quantized AC maximum q (0 when there are no AC terms)
    2           4       DC, packed 0xRRGGBB sRGB
    6 + 2k      2       AC term k + 1, 19-level companded triple

Total length is 4 + 2 * components_x * components_y. There is no version
tag and no checksum.
"""

import warnings
from typing import Final

import numpy as np

import veil_base83 as base83
from veil_quantizer import (
    decode_ac,
    decode_dc,
    encode_ac,
    encode_dc,
    maximum_from_index,
    quantize_maximum,
)
from veil_structure import (
    MAX_COMPONENTS,
    CoefficientGrid,
    ComponentGrid,
    MalformedHash,
)

__all__ = ["MIN_HASH_LENGTH", "assemble", "parse", "components"]

MIN_HASH_LENGTH: Final[int] = 6
_MAX_SIZE_FLAG: Final[int] = MAX_COMPONENTS * MAX_COMPONENTS - 1


def assemble(grid: CoefficientGrid) -> str:
    """Writes a coefficient grid as a hash string."""
    ac_terms = [tuple(term) for term in grid.ac]
    q, maximum_value = quantize_maximum(ac_terms)

    parts = [
        base83.encode(grid.components.size_flag, 1),
        base83.encode(q, 1),
        base83.encode(encode_dc(grid.dc), 4),
    ]
    parts.extend(base83.encode(encode_ac(term, maximum_value), 2) for term in ac_terms)
    return "".join(parts)


def _check_alphabet(hash_string: str, strict: bool) -> None:
    bad = base83.invalid_characters(hash_string)
    if not bad:
        return
    if strict:
        raise MalformedHash(f"Hash contains characters outside the base-83 alphabet: {bad!r}")
    warnings.warn(
        f"Hash {hash_string!r} contains characters outside the base-83 alphabet "
        f"({bad!r}); they are skipped while decoding.",
        UserWarning,
        stacklevel=3,
    )


def _read_components(hash_string: str) -> ComponentGrid:
    if len(hash_string) < MIN_HASH_LENGTH:
        raise MalformedHash(
            f"A hash has at least {MIN_HASH_LENGTH} characters, got {len(hash_string)}"
        )
    flag = base83.decode(hash_string[0])
    if flag > _MAX_SIZE_FLAG:
        raise MalformedHash(
            f"Size flag {hash_string[0]!r} ({flag}) exceeds {_MAX_SIZE_FLAG}"
        )
    return ComponentGrid.from_size_flag(flag)


def components(hash_string: str) -> ComponentGrid:
    """
    Reads the component counts from the size flag without decoding the rest.

    Raises:
        MalformedHash: Shorter than 6 characters or size flag above 80.
    """
    return _read_components(hash_string)


def parse(hash_string: str, punch: float = 1.0, strict: bool = False) -> CoefficientGrid:
    """
    Reads a hash string back into linear coefficients.

    Args:
        hash_string: Hash produced by ``assemble`` or any compatible encoder.
        punch: Multiplier on every AC term; 1.0 reproduces the encoder.
        strict: Reject characters outside the alphabet instead of skipping
            them with a warning.

    Raises:
        MalformedHash: Bad length, size flag or (strict only) characters.
    """
    _check_alphabet(hash_string, strict)
    grid = _read_components(hash_string)

    expected = grid.hash_length
    if len(hash_string) != expected:
        raise MalformedHash(
            f"Hash length {len(hash_string)} does not match "
            f"{grid.components_x}x{grid.components_y} components (expected {expected})"
        )

    maximum_value = maximum_from_index(base83.decode(hash_string[1]), punch)

    values = np.empty((grid.count, 3), dtype=np.float64)
    values[0] = decode_dc(base83.decode(hash_string[2:6]))
    for k in range(1, grid.count):
        start = 4 + 2 * k
        values[k] = decode_ac(base83.decode(hash_string[start:start + 2]), maximum_value)
    return CoefficientGrid(grid, values)
