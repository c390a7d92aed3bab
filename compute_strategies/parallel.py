# -*- coding: utf-8 -*-
"""
Veil: Compact cosine-basis placeholders for raster images
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Module: parallel.py - Data-parallel strategy on Numba CPU threads.

Forward:
    The input image is cut into TILE x TILE pixel tiles. Each ``prange``
    iteration owns one tile and accumulates a private partial coefficient
    grid, so no two threads write the same memory. A serial pass then sums
    the partials in tile order and applies the 1 / (W * H) scale.

Inverse:
    Output rows are distributed over ``prange``; every output pixel is an
    independent sum over the coefficient grid.

The kernels default to ``fastmath=True``. ``set_strict_ieee(True)`` swaps
in ``fastmath=False`` builds of the same kernels. Even in strict mode the
result is not bit-identical to the scalar strategy, because tiling changes
the summation order.
"""

import numpy as np
from numba import njit, prange

from .strategy import ComputeStrategy

__all__ = ["TILE", "DataParallelStrategy", "set_strict_ieee", "is_strict_ieee"]

TILE: int = 16


# --- Runtime Configuration ---
# Toggle at runtime via:
#     from compute_strategies import parallel
#     parallel.set_strict_ieee(True)   # fastmath=False kernels
#     parallel.set_strict_ieee(False)  # back to fast mode (default)
_STRICT_IEEE: bool = False


def set_strict_ieee(enabled: bool = True) -> None:
    """
    Toggle between fast (default) and strict IEEE 754 Numba kernels.

    Args:
        enabled: If True, use ``fastmath=False`` kernels.
    """
    global _STRICT_IEEE
    _STRICT_IEEE = bool(enabled)


def is_strict_ieee() -> bool:
    return _STRICT_IEEE


# =============================================================================
# KERNEL BODIES
# =============================================================================
# Plain Python functions, compiled twice below. Only the fast builds are
# cached on disk; both builds share one ``py_func`` and would otherwise
# collide in the cache index.

def _forward_tiles(linear, cos_x, cos_y, tile):
    height = linear.shape[0]
    width = linear.shape[1]
    num_x = cos_x.shape[0]
    num_y = cos_y.shape[0]
    cells = num_x * num_y

    tiles_x = (width + tile - 1) // tile
    tiles_y = (height + tile - 1) // tile
    n_tiles = tiles_x * tiles_y
    partials = np.zeros((n_tiles, cells, 3), dtype=np.float64)

    for t in prange(n_tiles):
        x0 = (t % tiles_x) * tile
        y0 = (t // tiles_x) * tile
        x1 = min(x0 + tile, width)
        y1 = min(y0 + tile, height)
        for j in range(num_y):
            for i in range(num_x):
                k = i + j * num_x
                r = 0.0
                g = 0.0
                b = 0.0
                for x in range(x0, x1):
                    cx = cos_x[i, x]
                    for y in range(y0, y1):
                        basis = cx * cos_y[j, y]
                        r += basis * linear[y, x, 0]
                        g += basis * linear[y, x, 1]
                        b += basis * linear[y, x, 2]
                partials[t, k, 0] = r
                partials[t, k, 1] = g
                partials[t, k, 2] = b

    out = np.zeros((cells, 3), dtype=np.float64)
    for t in range(n_tiles):
        for k in range(cells):
            for c in range(3):
                out[k, c] += partials[t, k, c]

    scale = 1.0 / (width * height)
    for k in range(cells):
        norm = 1.0 if k == 0 else 2.0
        for c in range(3):
            out[k, c] *= norm * scale
    return out


def _inverse_rows(values, cos_x, cos_y):
    num_x = cos_x.shape[0]
    num_y = cos_y.shape[0]
    width = cos_x.shape[1]
    height = cos_y.shape[1]

    out = np.empty((height, width, 3), dtype=np.float64)
    for y in prange(height):
        for x in range(width):
            r = 0.0
            g = 0.0
            b = 0.0
            for j in range(num_y):
                cy = cos_y[j, y]
                for i in range(num_x):
                    basis = cos_x[i, x] * cy
                    k = i + j * num_x
                    r += values[k, 0] * basis
                    g += values[k, 1] * basis
                    b += values[k, 2] * basis
            out[y, x, 0] = r
            out[y, x, 1] = g
            out[y, x, 2] = b
    return out


_forward_fast = njit(parallel=True, fastmath=True, cache=True)(_forward_tiles)
_inverse_fast = njit(parallel=True, fastmath=True, cache=True)(_inverse_rows)

# --- Strict IEEE 754 variants (fastmath=False) ---
_forward_strict = njit(parallel=True, fastmath=False)(_forward_tiles)
_inverse_strict = njit(parallel=True, fastmath=False)(_inverse_rows)


class DataParallelStrategy(ComputeStrategy):
    """
    Tile-parallel forward and row-parallel inverse.

    Args:
        tile: Edge length of the square input tiles of the forward pass.
    """

    name = "parallel"

    def __init__(self, tile: int = TILE):
        if tile < 1:
            raise ValueError(f"tile must be >= 1, got {tile}")
        self.tile = int(tile)

    def _forward(self, linear, cos_x, cos_y):
        if _STRICT_IEEE:
            return _forward_strict(linear, cos_x, cos_y, self.tile)
        return _forward_fast(linear, cos_x, cos_y, self.tile)

    def _inverse(self, values, cos_x, cos_y):
        if _STRICT_IEEE:
            return _inverse_strict(values, cos_x, cos_y)
        return _inverse_fast(values, cos_x, cos_y)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r}, tile={self.tile})"
