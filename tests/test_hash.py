"""Tests for hash assembly and parsing."""

import warnings

import numpy as np
import pytest

import veil_hash
from veil_colorengine import to_srgb8
from veil_structure import InvalidComponents, MalformedHash
from veil_transform import forward


class TestKnownVector:
    def test_components(self, known_hash):
        assert veil_hash.components(known_hash) == (4, 3)

    def test_dc(self, known_hash):
        grid = veil_hash.parse(known_hash)
        assert tuple(to_srgb8(c) for c in grid.dc) == (151, 150, 149)

    def test_ac_is_bounded_by_maximum(self, known_hash):
        grid = veil_hash.parse(known_hash)
        # 'E' -> q = 14
        assert grid.ac.shape == (11, 3)
        assert np.max(np.abs(grid.ac)) <= 15 / 166 + 1e-15

    def test_punch_scales_ac_only(self, known_hash):
        plain = veil_hash.parse(known_hash)
        punched = veil_hash.parse(known_hash, punch=2.0)
        assert punched.dc == plain.dc
        np.testing.assert_allclose(punched.ac, 2.0 * plain.ac)


def test_solid_red_single_component(red_pixels):
    assert veil_hash.assemble(forward(red_pixels, (1, 1))) == "00TI:j"


def test_single_component_has_zero_maximum(noise_pixels):
    hash_string = veil_hash.assemble(forward(noise_pixels, (1, 1)))
    assert len(hash_string) == 6
    assert hash_string[1] == "0"


def test_length_for_every_grid(noise_pixels):
    for x in range(1, 10):
        for y in range(1, 10):
            hash_string = veil_hash.assemble(forward(noise_pixels, (x, y)))
            assert len(hash_string) == 4 + 2 * x * y
            assert veil_hash.components(hash_string) == (x, y)


def test_largest_grid(noise_pixels):
    assert len(veil_hash.assemble(forward(noise_pixels, (9, 9)))) == 166
    with pytest.raises(InvalidComponents):
        forward(noise_pixels, (10, 1))


def test_assembled_hash_parses_back(gradient_pixels):
    grid = forward(gradient_pixels, (5, 3))
    parsed = veil_hash.parse(veil_hash.assemble(grid))
    assert parsed.components == grid.components
    np.testing.assert_allclose(parsed.dc, grid.dc, atol=0.01)
    np.testing.assert_allclose(parsed.ac, grid.ac, atol=0.1)


class TestMalformed:
    @pytest.mark.parametrize("hash_string", ["", "0", "00TI:"])
    def test_too_short(self, hash_string):
        with pytest.raises(MalformedHash, match="at least 6"):
            veil_hash.parse(hash_string)
        with pytest.raises(MalformedHash):
            veil_hash.components(hash_string)

    def test_length_mismatch(self, known_hash):
        with pytest.raises(MalformedHash, match="does not match"):
            veil_hash.parse(known_hash[:-2])
        with pytest.raises(MalformedHash, match="does not match"):
            veil_hash.parse(known_hash + "00")

    def test_size_flag_out_of_range(self):
        # '~' = 82 would need a tenth row of components
        with pytest.raises(MalformedHash, match="Size flag"):
            veil_hash.parse("~00000")


class TestAlphabet:
    def test_strict_rejects_unknown_characters(self, known_hash):
        with pytest.raises(MalformedHash, match="outside the base-83 alphabet"):
            veil_hash.parse(known_hash[:-1] + "!", strict=True)

    def test_permissive_warns_and_skips(self, known_hash):
        with pytest.warns(UserWarning, match="outside the base-83 alphabet"):
            grid = veil_hash.parse(known_hash[:-1] + "!")
        assert grid.components == (4, 3)

    def test_valid_hash_does_not_warn(self, known_hash):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            veil_hash.parse(known_hash, strict=False)
