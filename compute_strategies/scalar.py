# -*- coding: utf-8 -*-
"""
Veil: Compact cosine-basis placeholders for raster images
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Module: scalar.py - Nested-loop reference strategy.

This is the correctness oracle the other strategies are tested against.
Its summation order is fixed:

    forward:  cells row-major over (j, i); per cell, outer loop over x,
              inner loop over y; basis = norm * cos_x[i, x] * cos_y[j, y];
              accumulate basis * pixel, multiply by 1 / (W * H) at the end.
    inverse:  pixels row-major over (y, x); per pixel, outer loop over j,
              inner loop over i; basis = cos_x[i, x] * cos_y[j, y].

The kernels compile with ``fastmath=False`` so LLVM keeps that order and
every run is bit-identical.
"""

import numpy as np
from numba import njit

from .strategy import ComputeStrategy

__all__ = ["ScalarStrategy"]


@njit(cache=True, fastmath=False)
def _forward_reference(linear, cos_x, cos_y):
    height = linear.shape[0]
    width = linear.shape[1]
    num_x = cos_x.shape[0]
    num_y = cos_y.shape[0]
    scale = 1.0 / (width * height)

    out = np.zeros((num_x * num_y, 3), dtype=np.float64)
    for j in range(num_y):
        for i in range(num_x):
            norm = 1.0 if (i == 0 and j == 0) else 2.0
            r = 0.0
            g = 0.0
            b = 0.0
            for x in range(width):
                cx = cos_x[i, x]
                for y in range(height):
                    basis = norm * cx * cos_y[j, y]
                    r += basis * linear[y, x, 0]
                    g += basis * linear[y, x, 1]
                    b += basis * linear[y, x, 2]
            k = i + j * num_x
            out[k, 0] = r * scale
            out[k, 1] = g * scale
            out[k, 2] = b * scale
    return out


@njit(cache=True, fastmath=False)
def _inverse_reference(values, cos_x, cos_y):
    num_x = cos_x.shape[0]
    num_y = cos_y.shape[0]
    width = cos_x.shape[1]
    height = cos_y.shape[1]

    out = np.empty((height, width, 3), dtype=np.float64)
    for y in range(height):
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


class ScalarStrategy(ComputeStrategy):
    """Sequential nested loops in the reference summation order."""

    name = "scalar"
    reproducible = True

    def _forward(self, linear, cos_x, cos_y):
        return _forward_reference(linear, cos_x, cos_y)

    def _inverse(self, values, cos_x, cos_y):
        return _inverse_reference(values, cos_x, cos_y)
