# -*- coding: utf-8 -*-
"""
Veil: Compact cosine-basis placeholders for raster images
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Module: strategy.py - Base class for basis-transform execution strategies.

A strategy only owns the double summation. Everything around it (cosine
tables, sRGB conversion, normalisation of the DC/AC split, quantization)
is shared, so two strategies fed the same tables must agree to within
floating-point reassociation error.

Shapes:
    linear  : (H, W, 3) float64, C-contiguous
    cos_x   : (components_x, W) float64, cos(pi * i * x / W)
    cos_y   : (components_y, H) float64, cos(pi * j * y / H)
    values  : (components_x * components_y, 3) float64, index i + j * cx
"""

import numpy as np


class ComputeStrategy:
    """
    Base class for the forward/inverse double summation.

    Subclasses override ``_forward()`` and ``_inverse()``. The public
    ``forward()`` / ``inverse()`` wrappers normalise array layout and check
    shapes once, so the kernels can assume dense float64 input.

    Attributes:
        name : str
            Registry key (``"scalar"``, ``"vectorized"``, ``"parallel"``).
        reproducible : bool
            True when repeated runs and the reference summation order are
            guaranteed bit-identical.
    """

    name: str = "base"
    reproducible: bool = False

    def forward(
        self, linear: np.ndarray, cos_x: np.ndarray, cos_y: np.ndarray
    ) -> np.ndarray:
        """
        Projects a linear image onto the cosine basis.

        Returns:
            (components_x * components_y, 3) coefficients, normalisation and
            1 / (W * H) scale already applied.
        """
        linear = np.ascontiguousarray(linear, dtype=np.float64)
        cos_x = np.ascontiguousarray(cos_x, dtype=np.float64)
        cos_y = np.ascontiguousarray(cos_y, dtype=np.float64)
        if linear.ndim != 3 or linear.shape[2] != 3:
            raise ValueError(f"Expected an (H, W, 3) linear image, got {linear.shape}")
        height, width = linear.shape[:2]
        if cos_x.shape[1] != width or cos_y.shape[1] != height:
            raise ValueError(
                f"Cosine tables {cos_x.shape}/{cos_y.shape} do not match "
                f"image size {width}x{height}"
            )
        return self._forward(linear, cos_x, cos_y)

    def inverse(
        self, values: np.ndarray, cos_x: np.ndarray, cos_y: np.ndarray
    ) -> np.ndarray:
        """
        Sums the cosine basis back into a linear image.

        Output width and height are taken from the table lengths.

        Returns:
            (H, W, 3) linear image.
        """
        values = np.ascontiguousarray(values, dtype=np.float64)
        cos_x = np.ascontiguousarray(cos_x, dtype=np.float64)
        cos_y = np.ascontiguousarray(cos_y, dtype=np.float64)
        expected = (cos_x.shape[0] * cos_y.shape[0], 3)
        if values.shape != expected:
            raise ValueError(
                f"Expected coefficients of shape {expected}, got {values.shape}"
            )
        return self._inverse(values, cos_x, cos_y)

    def _forward(
        self, linear: np.ndarray, cos_x: np.ndarray, cos_y: np.ndarray
    ) -> np.ndarray:
        """Override in subclass."""
        raise NotImplementedError(
            f"{self.__class__.__name__} must implement _forward()"
        )

    def _inverse(
        self, values: np.ndarray, cos_x: np.ndarray, cos_y: np.ndarray
    ) -> np.ndarray:
        """Override in subclass."""
        raise NotImplementedError(
            f"{self.__class__.__name__} must implement _inverse()"
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"
