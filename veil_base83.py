# -*- coding: utf-8 -*-
"""
Veil: Compact cosine-basis placeholders for raster images
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Module: veil_base83.py - Fixed-width base-83 numerals.

Every field of a hash is a non-negative integer written most-significant
digit first with a fixed number of digits. There is no sign and no
leading-zero suppression.

Decoding is permissive: characters outside the alphabet contribute nothing
and are skipped. Hashes in the wild depend on that, so it is kept here;
``invalid_characters`` / ``is_valid`` let the hash layer opt into strict
validation instead.
"""

from types import MappingProxyType
from typing import Final, Mapping

__all__ = [
    "ALPHABET",
    "BASE",
    "DECODE_MAP",
    "encode",
    "decode",
    "invalid_characters",
    "is_valid",
]

ALPHABET: Final[str] = (
    "0123456789"
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
    "abcdefghijklmnopqrstuvwxyz"
    "#$%*+,-.:;=?@[]^_{|}~"
)
BASE: Final[int] = len(ALPHABET)

DECODE_MAP: Final[Mapping[str, int]] = MappingProxyType(
    {char: index for index, char in enumerate(ALPHABET)}
)


def encode(value: int, length: int) -> str:
    """
    Writes ``value`` as exactly ``length`` base-83 digits.

    Digits above ``length`` are dropped, matching the reference encoders,
    which never range-check. Every caller in this project stays in range.

    Raises:
        ValueError: If ``value`` is negative or ``length`` < 1.
    """
    if value < 0:
        raise ValueError(f"Base83 values must be non-negative, got {value}")
    if length < 1:
        raise ValueError(f"Base83 length must be >= 1, got {length}")

    digits = []
    for position in range(1, length + 1):
        digit = (value // BASE ** (length - position)) % BASE
        digits.append(ALPHABET[digit])
    return "".join(digits)


def decode(text: str) -> int:
    """Folds ``text`` left into an integer, skipping unknown characters."""
    value = 0
    for char in text:
        digit = DECODE_MAP.get(char)
        if digit is not None:
            value = value * BASE + digit
    return value


def invalid_characters(text: str) -> str:
    """Returns the characters of ``text`` outside the alphabet, first-seen order, once each."""
    return "".join(dict.fromkeys(c for c in text if c not in DECODE_MAP))


def is_valid(text: str) -> bool:
    return all(c in DECODE_MAP for c in text)
