# -*- coding: utf-8 -*-
"""
Veil: Compact cosine-basis placeholders for raster images
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Module: veil_structure.py - Value types shared by every codec stage.

  1.  PixelBuffer describes raw 8-bit RGB(A) bytes with an explicit row
      stride, so buffers handed over by an image library can be used without
      repacking. ``rgb()`` gives a strided (H, W, 3) view that skips alpha
      and row padding.
  2.  ComponentGrid is the (components_x, components_y) pair and owns the
      size-flag arithmetic.
  3.  CoefficientGrid is the (x*y, 3) float64 array produced by the forward
      transform, indexed i + j * components_x.
  4.  ImageSource / ImageSink are the seams towards platform image objects;
      nothing in this project implements them against a GUI toolkit.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import (
    Any,
    NamedTuple,
    Protocol,
    Tuple,
    Union,
    runtime_checkable,
)

import numpy as np
from numpy.lib.stride_tricks import as_strided

__all__ = [
    "VeilError",
    "InvalidComponents",
    "InvalidDimensions",
    "MalformedHash",
    "MAX_COMPONENTS",
    "ComponentGrid",
    "CoefficientGrid",
    "PixelBuffer",
    "ImageSource",
    "ImageSink",
    "validate_dimensions",
]

MAX_COMPONENTS = 9


# ═══════════════════════════════════════════════════════════════════════════════
# Errors
# ═══════════════════════════════════════════════════════════════════════════════
class VeilError(ValueError):
    """Base class for every validation failure raised by the codec."""


class InvalidComponents(VeilError):
    """A component count lies outside [1, 9]."""


class InvalidDimensions(VeilError):
    """A pixel width or height is zero or negative."""


class MalformedHash(VeilError):
    """A hash string cannot be parsed."""


def validate_dimensions(width: int, height: int, label: str = "image") -> None:
    if width <= 0 or height <= 0:
        raise InvalidDimensions(
            f"{label} dimensions must be positive, got {width}x{height}"
        )


# ═══════════════════════════════════════════════════════════════════════════════
# 1.  ComponentGrid
# ═══════════════════════════════════════════════════════════════════════════════
class ComponentGrid(NamedTuple):
    """Number of cosine-basis cells sampled along each axis."""
    components_x: int
    components_y: int

    @classmethod
    def coerce(cls, components: Union["ComponentGrid", Tuple[int, int]]) -> "ComponentGrid":
        """Accepts any (x, y) pair and validates it."""
        try:
            x, y = components
        except (TypeError, ValueError) as exc:
            raise InvalidComponents(
                f"components must be an (x, y) pair, got {components!r}"
            ) from exc
        grid = cls(x, y)
        grid.validate()
        return grid

    @classmethod
    def from_size_flag(cls, flag: int) -> "ComponentGrid":
        return cls(flag % MAX_COMPONENTS + 1, flag // MAX_COMPONENTS + 1)

    def validate(self) -> None:
        for axis, value in (("x", self.components_x), ("y", self.components_y)):
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
                raise InvalidComponents(
                    f"components_{axis} must be an integer, got {value!r}"
                )
            if not 1 <= value <= MAX_COMPONENTS:
                raise InvalidComponents(
                    f"components_{axis} must be between 1 and {MAX_COMPONENTS}, got {value}"
                )

    @property
    def count(self) -> int:
        return self.components_x * self.components_y

    @property
    def size_flag(self) -> int:
        return (self.components_x - 1) + (self.components_y - 1) * MAX_COMPONENTS

    @property
    def hash_length(self) -> int:
        """Length of a hash carrying this grid: 1 + 1 + 4 + 2 * (count - 1)."""
        return 4 + 2 * self.count


# ═══════════════════════════════════════════════════════════════════════════════
# 2.  CoefficientGrid
# ═══════════════════════════════════════════════════════════════════════════════
@dataclass(slots=True, frozen=True)
class CoefficientGrid:
    """
    Linear-RGB cosine coefficients for one image.

    ``values[i + j * components_x]`` holds the coefficient of horizontal
    frequency ``i`` and vertical frequency ``j``. Row 0 is the DC term.
    """
    components: ComponentGrid
    values: np.ndarray

    def __post_init__(self) -> None:
        values = np.array(self.values, dtype=np.float64, copy=True)
        expected = (self.components.count, 3)
        if values.shape != expected:
            raise ValueError(
                f"CoefficientGrid expects values of shape {expected}, got {values.shape}"
            )
        values.setflags(write=False)
        object.__setattr__(self, "values", values)

    @property
    def dc(self) -> Tuple[float, float, float]:
        r, g, b = self.values[0]
        return float(r), float(g), float(b)

    @property
    def ac(self) -> np.ndarray:
        return self.values[1:]

    def __getitem__(self, index: Tuple[int, int]) -> np.ndarray:
        i, j = index
        return self.values[i + j * self.components.components_x]


# ═══════════════════════════════════════════════════════════════════════════════
# 3.  PixelBuffer
# ═══════════════════════════════════════════════════════════════════════════════
@dataclass(slots=True, frozen=True)
class PixelBuffer:
    """
    Row-major 8-bit RGB(A) pixels.

    Each pixel starts with R, G, B at byte offsets 0, 1, 2. With
    ``bytes_per_pixel == 4`` the fourth byte (alpha or padding) is ignored.
    ``row_stride`` may exceed ``width * bytes_per_pixel``.
    """
    data: np.ndarray
    width: int
    height: int
    row_stride: int
    bytes_per_pixel: int = 3

    def __post_init__(self) -> None:
        validate_dimensions(self.width, self.height, label="PixelBuffer")
        if self.bytes_per_pixel not in (3, 4):
            raise ValueError(
                f"bytes_per_pixel must be 3 or 4, got {self.bytes_per_pixel}"
            )
        row_bytes = self.width * self.bytes_per_pixel
        if self.row_stride < row_bytes:
            raise ValueError(
                f"row_stride {self.row_stride} is smaller than one row ({row_bytes} bytes)"
            )

        data = np.frombuffer(self.data, dtype=np.uint8) if isinstance(
            self.data, (bytes, bytearray, memoryview)
        ) else np.ascontiguousarray(self.data, dtype=np.uint8).ravel()
        required = (self.height - 1) * self.row_stride + row_bytes
        if data.size < required:
            raise ValueError(
                f"PixelBuffer needs at least {required} bytes, got {data.size}"
            )
        object.__setattr__(self, "data", data)

    @classmethod
    def from_array(cls, array: np.ndarray) -> "PixelBuffer":
        """Packs an (H, W, 3) or (H, W, 4) uint8 array."""
        arr = np.asarray(array)
        if arr.ndim != 3 or arr.shape[2] not in (3, 4):
            raise ValueError(f"Expected an (H, W, 3|4) array, got shape {arr.shape}")
        if arr.dtype != np.uint8:
            raise ValueError(f"Expected uint8 pixels, got {arr.dtype}")
        height, width, channels = arr.shape
        validate_dimensions(width, height, label="PixelBuffer")
        packed = np.ascontiguousarray(arr).ravel().copy()
        return cls(
            data=packed,
            width=width,
            height=height,
            row_stride=width * channels,
            bytes_per_pixel=channels,
        )

    def rgb(self) -> np.ndarray:
        """Read-only (H, W, 3) view honouring ``row_stride``."""
        return as_strided(
            self.data,
            shape=(self.height, self.width, 3),
            strides=(self.row_stride, self.bytes_per_pixel, 1),
            writeable=False,
        )

    def to_array(self) -> np.ndarray:
        return np.ascontiguousarray(self.rgb())


# ═══════════════════════════════════════════════════════════════════════════════
# 4.  Platform image seams
# ═══════════════════════════════════════════════════════════════════════════════
@runtime_checkable
class ImageSource(Protocol):
    """Anything that can hand over its decoded pixels."""
    def to_pixel_buffer(self) -> PixelBuffer: ...


@runtime_checkable
class ImageSink(Protocol):
    """Builds a platform image object from reconstructed pixels."""
    def from_pixel_buffer(self, buffer: PixelBuffer) -> Any: ...
