# -*- coding: utf-8 -*-
# Veil: Compact cosine-basis placeholders for raster images.
#
# Copyright (c) 2026 opticsWolf
#
# SPDX-License-Identifier: LGPL-3.0-or-later

"""
Project metadata for Veil.
"""

from typing import Final

from veil_base83 import ALPHABET

# Metadata Definitions
__title__: Final[str] = "Veil"
__description__: Final[str] = (
    "Encodes raster images into short base-83 strings of quantized "
    "cosine-basis coefficients and decodes them back into blurred placeholders."
)
__version__: Final[str] = "0.1.0"
__author__: Final[str] = "opticsWolf"
__license__: Final[str] = "LGPL-3.0-or-later"
__copyright__: Final[str] = "Copyright (c) 2026 opticsWolf"

# Hash wire format; unversioned, bumped only if the layout ever changes.
__hash_format__: Final[str] = "blurhash-compatible"

def metadata_summary() -> dict[str, str]:
    """Returns a dictionary of project metadata for introspection."""
    return {
        "title": __title__,
        "version": __version__,
        "license": __license__,
        "description": __description__,
        "copyright": __copyright__,
        "hash_format": __hash_format__,
        "alphabet": ALPHABET,
    }
