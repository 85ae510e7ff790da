"""Core constants used across csv-to-mtx modules.

This module centralizes container layout values and defaults.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

MTX_MAGIC = 0xC4D4F1B2
MTX_VERSION = 1
MTX_TYPE_FLOAT32 = 1
MTX_DIMENSIONS = 2
MTX_HEADER_FORMAT = "<Iiiiii"
MTX_ZONE_DTYPE = "<i4"
MTX_VALUE_DTYPE = "<f4"
COMPRESSED_SUFFIXES = (".gz",)
DEFAULT_COMPRESSION_LEVEL = 6
DEFAULT_CSV_DELIMITER = ","
SPARSE_FIELD_COUNT = 3
ZONE_ID_MIN = -(2**31)
ZONE_ID_MAX = 2**31 - 1
