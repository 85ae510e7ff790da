"""Runtime configuration model for csv-to-mtx.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os

from core.constants import DEFAULT_COMPRESSION_LEVEL, DEFAULT_CSV_DELIMITER
from core.errors import MtxConfigError


@dataclass(frozen=True)
class MtxConfig:
    """Validated runtime configuration.

    Attributes:
        csv_delimiter: Single-character field delimiter for CSV inputs.
        compression_level: Gzip level used for compressed outputs.
    """

    csv_delimiter: str = DEFAULT_CSV_DELIMITER
    compression_level: int = DEFAULT_COMPRESSION_LEVEL

    @classmethod
    def from_env(cls) -> "MtxConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            MtxConfigError: If environment values are invalid.
        """
        delimiter_value = os.getenv("MTX_CSV_DELIMITER", DEFAULT_CSV_DELIMITER)
        level_value = os.getenv("MTX_COMPRESSION_LEVEL", str(DEFAULT_COMPRESSION_LEVEL))
        return cls(
            csv_delimiter=parse_csv_delimiter(delimiter_value),
            compression_level=_parse_compression_level(level_value),
        )


def parse_csv_delimiter(raw_value: str) -> str:
    """Validate a CSV delimiter value.

    Args:
        raw_value: Raw delimiter string.

    Returns:
        The delimiter character.

    Raises:
        MtxConfigError: If value is not exactly one character.
    """
    if len(raw_value) != 1:
        raise MtxConfigError(
            "Invalid CSV delimiter: "
            f"expected a single character, got '{raw_value}'. "
            "Set MTX_CSV_DELIMITER (or --delimiter) to one character such as ',' or ';'."
        )
    return raw_value


def _parse_compression_level(raw_value: str) -> int:
    """Parse the compression level environment value.

    Args:
        raw_value: Raw string from environment.

    Returns:
        Parsed level in [0, 9].

    Raises:
        MtxConfigError: If value is not an integer in range.
    """
    try:
        level = int(raw_value)
    except ValueError as error:
        raise MtxConfigError(
            "Invalid MTX_COMPRESSION_LEVEL value: "
            f"expected integer, got '{raw_value}'. "
            "Set MTX_COMPRESSION_LEVEL to a value between 0 and 9."
        ) from error
    if not 0 <= level <= 9:
        raise MtxConfigError(
            f"Invalid MTX_COMPRESSION_LEVEL value: {level} is outside 0-9. "
            "Set MTX_COMPRESSION_LEVEL to a value between 0 and 9."
        )
    return level
