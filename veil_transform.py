# -*- coding: utf-8 -*-
"""
Veil: Compact cosine-basis placeholders for raster images
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Module: veil_transform.py - Forward and inverse 2D cosine-basis transform.

Forward (image -> coefficients), for i < components_x, j < components_y:

    C(i, j) = norm(i, j) / (W * H)
              * sum_{x, y} cos(pi i x / W) * cos(pi j y / H) * lin(x, y)

    norm(0, 0) = 1, otherwise 2.

Inverse (coefficients -> image of any requested size):

    lin(x, y) = sum_{i, j} C(i, j) * cos(pi i x / W) * cos(pi j y / H)

The normalisation is not re-applied on the way back. This module owns the
tables and the sRGB conversion around the sums; the sums themselves run in a
``compute_strategies`` strategy.
"""

import functools
from typing import Tuple, Union

import numpy as np

from compute_strategies import StrategyLike, get_strategy
from veil_colorengine import ArrayFloat, linear_to_srgb8, srgb8_to_linear
from veil_structure import (
    CoefficientGrid,
    ComponentGrid,
    PixelBuffer,
    validate_dimensions,
)

__all__ = ["cosine_table", "linearize", "forward", "inverse", "render"]

ComponentsLike = Union[ComponentGrid, Tuple[int, int]]


@functools.lru_cache(maxsize=64)
def cosine_table(components: int, size: int) -> ArrayFloat:
    """
    ``table[i, x] = cos(pi * i * x / size)`` for i < components, x < size.

    Memoised and read-only; every strategy and both directions share it.
    """
    validate_dimensions(size, components, label="cosine table")
    i = np.arange(components, dtype=np.float64)[:, None]
    x = np.arange(size, dtype=np.float64)[None, :]
    table = np.cos(np.pi * i * x / size)
    table.setflags(write=False)
    return table


def linearize(pixels: PixelBuffer) -> ArrayFloat:
    """(H, W, 3) linear-light copy of the RGB channels."""
    return srgb8_to_linear(pixels.rgb())


def forward(
    pixels: PixelBuffer,
    components: ComponentsLike,
    strategy: StrategyLike = None,
) -> CoefficientGrid:
    """
    Projects an image onto a components_x x components_y cosine grid.

    Raises:
        InvalidComponents: Either axis outside [1, 9].
        InvalidDimensions: Zero or negative image size.
    """
    grid = ComponentGrid.coerce(components)
    validate_dimensions(pixels.width, pixels.height)
    engine = get_strategy(strategy)

    values = engine.forward(
        linearize(pixels),
        cosine_table(grid.components_x, pixels.width),
        cosine_table(grid.components_y, pixels.height),
    )
    return CoefficientGrid(grid, values)


def inverse(
    grid: CoefficientGrid,
    width: int,
    height: int,
    strategy: StrategyLike = None,
) -> ArrayFloat:
    """
    Reconstructs a (height, width, 3) linear image from coefficients.

    Values are not clamped; overshoot from the truncated basis survives
    until ``render`` converts to 8 bits.
    """
    validate_dimensions(width, height, label="decode target")
    engine = get_strategy(strategy)
    components = grid.components
    return engine.inverse(
        grid.values,
        cosine_table(components.components_x, width),
        cosine_table(components.components_y, height),
    )


def render(
    grid: CoefficientGrid,
    width: int,
    height: int,
    strategy: StrategyLike = None,
) -> PixelBuffer:
    """``inverse`` followed by the sRGB OETF, packed as RGB rows of 3 * width bytes."""
    srgb = linear_to_srgb8(inverse(grid, width, height, strategy))
    return PixelBuffer.from_array(srgb)
