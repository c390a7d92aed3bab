"""Tests for base-83 numerals."""

import pytest

import veil_base83 as base83


def test_alphabet():
    assert base83.BASE == 83
    assert len(set(base83.ALPHABET)) == 83
    assert base83.ALPHABET[:10] == "0123456789"
    assert base83.ALPHABET[-21:] == "#$%*+,-.:;=?@[]^_{|}~"


def test_decode_map_is_read_only():
    assert base83.DECODE_MAP["~"] == 82
    with pytest.raises(TypeError):
        base83.DECODE_MAP["!"] = 0


def test_single_digits():
    assert base83.encode(0, 1) == "0"
    assert base83.encode(82, 1) == "~"
    assert base83.decode("A") == 10


def test_fixed_width_output():
    assert base83.encode(0, 4) == "0000"
    assert base83.encode(1, 2) == "01"
    assert base83.encode(83, 2) == "10"


def test_dc_digits():
    # 0xFF0000, pure red
    assert base83.encode(16711680, 4) == "TI:j"
    assert base83.decode("TI:j") == 16711680


def test_invertible_over_two_digits():
    for value in range(83 ** 2):
        assert base83.decode(base83.encode(value, 2)) == value


def test_high_digits_are_dropped():
    assert base83.encode(83, 1) == "0"


@pytest.mark.parametrize("value, length", [(-1, 1), (5, 0), (5, -2)])
def test_encode_rejects_bad_arguments(value, length):
    with pytest.raises(ValueError):
        base83.encode(value, length)


def test_decode_skips_unknown_characters():
    assert base83.decode("1 2") == 1 * 83 + 2
    assert base83.decode("!!") == 0


def test_invalid_characters():
    assert base83.invalid_characters("ab!! c!") == "! "
    assert base83.invalid_characters("LEHV6nWB") == ""
    assert base83.is_valid("LEHV6nWB2yk8pyo0adR*.7kCMdnj")
    assert not base83.is_valid("LEHV 6n")
