# -*- coding: utf-8 -*-
"""
Veil: Compact cosine-basis placeholders for raster images
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Veil Codec
==========
Public entry points: pixels -> hash -> placeholder pixels.

    hash = encode(pixels, components=(4, 3))
    placeholder = decode(hash, 32, 32)

Pipeline:
    encode:  PixelBuffer -> sRGB LUT -> forward transform -> quantize -> base83
    decode:  base83 -> dequantize (x punch) -> inverse transform -> sRGB OETF

Every call is synchronous and stateless; the only shared state is read-only
tables and the default-strategy setting in ``compute_strategies``.

``strategy`` accepts ``"scalar"``, ``"vectorized"``, ``"parallel"``, a
``ComputeStrategy`` instance, or ``None`` for the configured default.
"""

from typing import Any, Tuple, Union

import numpy as np

import veil_hash
import veil_transform
from compute_strategies import StrategyLike
from veil_about import __version__
from veil_colorengine import ArrayFloat
from veil_structure import (
    ComponentGrid,
    ImageSink,
    ImageSource,
    PixelBuffer,
)

__all__ = [
    "__version__",
    "DEFAULT_COMPONENTS",
    "encode",
    "decode",
    "decode_linear",
    "components",
    "encode_image",
    "decode_image",
]

DEFAULT_COMPONENTS: Tuple[int, int] = (4, 3)

ComponentsLike = Union[ComponentGrid, Tuple[int, int]]


def encode(
    pixels: PixelBuffer,
    components: ComponentsLike = DEFAULT_COMPONENTS,
    strategy: StrategyLike = None,
) -> str:
    """
    Encodes an image into a hash of length 4 + 2 * components_x * components_y.

    Args:
        pixels: 8-bit RGB or RGBX/RGBA buffer; alpha is ignored.
        components: (components_x, components_y), each in [1, 9].
        strategy: Compute strategy for the forward transform.

    Raises:
        InvalidComponents: Either axis outside [1, 9].
        InvalidDimensions: Zero or negative image size.
    """
    grid = veil_transform.forward(pixels, components, strategy)
    return veil_hash.assemble(grid)


def decode_linear(
    hash_string: str,
    width: int,
    height: int,
    punch: float = 1.0,
    strategy: StrategyLike = None,
    strict: bool = False,
) -> ArrayFloat:
    """Reconstruction before the sRGB OETF, (height, width, 3) float64, unclamped."""
    grid = veil_hash.parse(hash_string, punch=punch, strict=strict)
    return veil_transform.inverse(grid, width, height, strategy)


def decode(
    hash_string: str,
    width: int,
    height: int,
    punch: float = 1.0,
    strategy: StrategyLike = None,
    strict: bool = False,
) -> PixelBuffer:
    """
    Decodes a hash into a width x height placeholder.

    Args:
        hash_string: Hash string, see ``veil_hash``.
        width, height: Output size; independent of the encoded image size.
        punch: AC contrast multiplier; 1.0 reproduces the encoder.
        strategy: Compute strategy for the inverse transform.
        strict: Reject characters outside the base-83 alphabet.

    Returns:
        Packed RGB buffer (``row_stride == 3 * width``).

    Raises:
        MalformedHash: Bad length, size flag, or (strict only) characters.
        InvalidDimensions: Zero or negative output size.
    """
    grid = veil_hash.parse(hash_string, punch=punch, strict=strict)
    return veil_transform.render(grid, width, height, strategy)


def components(hash_string: str) -> ComponentGrid:
    """Component counts of a hash, read from its size flag."""
    return veil_hash.components(hash_string)


def encode_image(
    source: ImageSource,
    components: ComponentsLike = DEFAULT_COMPONENTS,
    strategy: StrategyLike = None,
) -> str:
    """``encode`` for any object implementing ``ImageSource``."""
    if not isinstance(source, ImageSource):
        raise TypeError(
            f"{type(source).__name__} does not implement to_pixel_buffer()"
        )
    return encode(source.to_pixel_buffer(), components, strategy)


def decode_image(
    hash_string: str,
    width: int,
    height: int,
    sink: ImageSink,
    punch: float = 1.0,
    strategy: StrategyLike = None,
) -> Any:
    """Decodes and hands the pixels to ``sink.from_pixel_buffer``."""
    if not isinstance(sink, ImageSink):
        raise TypeError(
            f"{type(sink).__name__} does not implement from_pixel_buffer()"
        )
    return sink.from_pixel_buffer(decode(hash_string, width, height, punch, strategy))


if __name__ == "__main__":
    from compute_strategies import STRATEGIES
    from veil_compare import compare_per_pixel, difference_stats
    from veil_structure import InvalidComponents, MalformedHash

    print(f"--- Veil {__version__} Codec Validation ---")

    # 1. Known vector
    print("1. Decoding the reference hash...")
    known = "LEHV6nWB2yk8pyo0adR*.7kCMdnj"
    print(f"   Components: {components(known)}")
    grid = veil_hash.parse(known)
    print(f"   DC (linear): {np.round(grid.dc, 4)}")

    # 2. Round trip on a smooth synthetic image
    print("2. Testing Round-Trip (gradient, 6x6 components)...")
    yy, xx = np.mgrid[0:48, 0:64]
    image = np.stack(
        [xx * 255 // 63, yy * 255 // 47, (xx + yy) * 255 // 110], axis=-1
    ).astype(np.uint8)
    pixels = PixelBuffer.from_array(image)
    encoded = encode(pixels, (6, 6))
    restored = decode(encoded, 64, 48)
    stats = difference_stats(pixels, restored)
    print(f"   Hash: {encoded} (len {len(encoded)})")
    print(f"   Mean |diff|: {stats.mean:.2f}  p95: {stats.p95:.1f}  max: {stats.maximum} "
          f"{'[PASS]' if stats.mean < 25.0 else '[FAIL]'}")

    # 3. Cross-strategy agreement
    print("3. Testing Cross-Strategy Agreement...")
    reference = decode(encoded, 64, 48, strategy="scalar")
    for name in STRATEGIES:
        coeff_ref = veil_transform.forward(pixels, (6, 6), strategy="scalar").values
        coeff = veil_transform.forward(pixels, (6, 6), strategy=name).values
        delta = float(np.max(np.abs(coeff_ref - coeff)))
        result = compare_per_pixel(reference, decode(encoded, 64, 48, strategy=name))
        print(f"   {name:<10s} max coeff delta {delta:.2e}  bad pixels "
              f"{result.bad_pixel_rate:.2%} {'[PASS]' if result.passed and delta < 1e-3 else '[FAIL]'}")

    # 4. Format errors
    print("4. Testing Format Errors...")
    for label, call in (
        ("(10, 1) components", lambda: encode(pixels, (10, 1))),
        ("short hash", lambda: decode("00TI:", 4, 4)),
        ("length mismatch", lambda: decode(known[:-2], 4, 4)),
    ):
        try:
            call()
            print(f"   [FAIL] {label} accepted")
        except (InvalidComponents, MalformedHash) as e:
            print(f"   Caught expected error ({label}): {e}")
