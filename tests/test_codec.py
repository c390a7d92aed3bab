"""End-to-end tests for the public codec."""

import numpy as np
import pytest

import veil_about
import veil_codec
from veil_compare import compare_per_pixel, difference_stats
from veil_structure import InvalidDimensions, MalformedHash, PixelBuffer


def test_version_is_exported():
    assert veil_codec.__version__ == veil_about.__version__


def test_default_components(gradient_pixels):
    hash_string = veil_codec.encode(gradient_pixels)
    assert len(hash_string) == 28
    assert veil_codec.components(hash_string) == veil_codec.DEFAULT_COMPONENTS


def test_round_trip_is_close(gradient_pixels):
    detailed = veil_codec.encode(gradient_pixels, (6, 6))
    flat = veil_codec.encode(gradient_pixels, (1, 1))
    detailed_error = difference_stats(gradient_pixels, veil_codec.decode(detailed, 64, 48)).mean
    flat_error = difference_stats(gradient_pixels, veil_codec.decode(flat, 64, 48)).mean
    assert detailed_error < 25.0
    assert detailed_error < flat_error


@pytest.mark.parametrize("strategy", ["scalar", "vectorized", "parallel"])
def test_encoding_is_deterministic(noise_pixels, strategy):
    first = veil_codec.encode(noise_pixels, (4, 3), strategy=strategy)
    assert veil_codec.encode(noise_pixels, (4, 3), strategy=strategy) == first


@pytest.mark.parametrize("strategy", ["vectorized", "parallel"])
def test_decoded_images_agree_across_strategies(known_hash, strategy):
    reference = veil_codec.decode(known_hash, 40, 30, strategy="scalar")
    other = veil_codec.decode(known_hash, 40, 30, strategy=strategy)
    assert compare_per_pixel(reference, other).passed


def test_decode_output_layout(known_hash):
    for width, height in ((1, 1), (32, 32), (7, 3)):
        out = veil_codec.decode(known_hash, width, height)
        assert (out.width, out.height) == (width, height)
        assert out.row_stride == 3 * width
        assert out.data.size == 3 * width * height


def test_single_component_decodes_to_solid_colour():
    out = veil_codec.decode("00TI:j", 3, 2)
    assert np.all(out.to_array() == [255, 0, 0])


def test_zero_punch_flattens_image(gradient_pixels):
    hash_string = veil_codec.encode(gradient_pixels, (4, 4))
    pixels = veil_codec.decode(hash_string, 16, 8, punch=0.0).to_array()
    assert np.all(pixels == pixels[0, 0])


def test_punch_raises_contrast(gradient_pixels):
    hash_string = veil_codec.encode(gradient_pixels, (4, 4))
    normal = veil_codec.decode_linear(hash_string, 16, 8)
    punched = veil_codec.decode_linear(hash_string, 16, 8, punch=2.0)
    assert np.all(punched.std(axis=(0, 1)) > normal.std(axis=(0, 1)))


def test_decode_linear_is_unquantized(known_hash):
    lin = veil_codec.decode_linear(known_hash, 20, 10)
    assert lin.shape == (10, 20, 3)
    assert lin.dtype == np.float64


def test_alpha_and_padding_do_not_change_the_hash(gradient_array):
    rgb = PixelBuffer.from_array(gradient_array)
    height, width, _ = gradient_array.shape
    rgba = np.concatenate(
        [gradient_array, np.full((height, width, 1), 77, dtype=np.uint8)], axis=2
    )
    stride = width * 4 + 12
    raw = np.zeros(stride * height, dtype=np.uint8)
    for y in range(height):
        raw[y * stride:y * stride + width * 4] = rgba[y].ravel()
    padded = PixelBuffer(raw, width=width, height=height, row_stride=stride, bytes_per_pixel=4)
    assert veil_codec.encode(padded) == veil_codec.encode(rgb)


def test_decode_rejects_empty_target(known_hash):
    with pytest.raises(InvalidDimensions):
        veil_codec.decode(known_hash, 0, 10)
    with pytest.raises(InvalidDimensions):
        veil_codec.decode_linear(known_hash, 10, 0)


def test_strict_decode(known_hash):
    with pytest.raises(MalformedHash):
        veil_codec.decode(known_hash.replace("*", " "), 4, 4, strict=True)


class TestImageSeams:
    class Source:
        def __init__(self, array):
            self.array = array

        def to_pixel_buffer(self):
            return PixelBuffer.from_array(self.array)

    class Sink:
        def from_pixel_buffer(self, buffer):
            return ("image", buffer.to_array())

    def test_encode_image(self, gradient_array, gradient_pixels):
        source = self.Source(gradient_array)
        assert veil_codec.encode_image(source, (3, 3)) == veil_codec.encode(gradient_pixels, (3, 3))

    def test_decode_image(self, known_hash):
        kind, pixels = veil_codec.decode_image(known_hash, 8, 6, self.Sink())
        assert kind == "image"
        assert pixels.shape == (6, 8, 3)
        np.testing.assert_array_equal(pixels, veil_codec.decode(known_hash, 8, 6).to_array())

    def test_rejects_non_conforming_objects(self, known_hash):
        with pytest.raises(TypeError):
            veil_codec.encode_image(object())
        with pytest.raises(TypeError):
            veil_codec.decode_image(known_hash, 4, 4, object())
