# -*- coding: utf-8 -*-
"""
Veil: Compact cosine-basis placeholders for raster images
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Module: vectorized.py - Batched NumPy strategy.

The basis is separable, so both directions reduce to two matrix products
per colour channel:

    forward:  C[j, i] = norm[j, i] / (W H) * sum_y cos_y[j, y] * sum_x L[y, x] * cos_x[i, x]
    inverse:  L[y, x] = sum_j cos_y[j, y] * sum_i C[j, i] * cos_x[i, x]

BLAS picks its own summation order, so results match the scalar
reference only to within reassociation error (~1e-15 relative).
"""

import numpy as np

from .strategy import ComputeStrategy

__all__ = ["VectorizedStrategy"]


def _normalisation(num_y: int, num_x: int) -> np.ndarray:
    norm = np.full((num_y, num_x, 1), 2.0, dtype=np.float64)
    norm[0, 0, 0] = 1.0
    return norm


class VectorizedStrategy(ComputeStrategy):
    """Separable tensor contractions over whole arrays."""

    name = "vectorized"

    def _forward(self, linear, cos_x, cos_y):
        height, width = linear.shape[:2]
        num_x = cos_x.shape[0]
        num_y = cos_y.shape[0]

        # (num_y, W, 3): project every column onto the vertical basis
        rows = np.tensordot(cos_y, linear, axes=(1, 0))
        # (num_y, num_x, 3): then every result onto the horizontal basis
        cells = np.einsum("jxc,ix->jic", rows, cos_x)

        cells *= _normalisation(num_y, num_x) / (width * height)
        return cells.reshape(num_y * num_x, 3)

    def _inverse(self, values, cos_x, cos_y):
        num_x = cos_x.shape[0]
        num_y = cos_y.shape[0]
        cells = values.reshape(num_y, num_x, 3)

        # (num_y, W, 3)
        rows = np.einsum("jic,ix->jxc", cells, cos_x)
        # (H, W, 3)
        return np.tensordot(cos_y.T, rows, axes=(1, 0))
