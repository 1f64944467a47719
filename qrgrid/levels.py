"""Error-correction levels."""

from __future__ import annotations

import enum
from typing import Union


class ErrorCorrectionLevel(enum.Enum):
    """
    The four QR error-correction levels, in order of increasing
    redundancy.

    Levels
    ------
    L
        Low (approximately 7% codewords restored).
    M
        Medium (approximately 15%).
    Q
        Quartile (approximately 25%).
    H
        High (approximately 30%).
    """

    L = "L"
    M = "M"
    Q = "Q"
    H = "H"

    @property
    def index(self) -> int:
        """Column of this level in the capacity tables (0..3)."""
        return _INDEX[self]

    @property
    def format_bits(self) -> int:
        """Two-bit level indicator written into the format information."""
        return _FORMAT_BITS[self]

    @classmethod
    def parse(cls, value: Union[str, "ErrorCorrectionLevel"]) -> "ErrorCorrectionLevel":
        """
        Normalize a level name or member to a member.

        Raises
        ------
        ValueError
            If `value` is not one of {'L', 'M', 'Q', 'H'}
            (case-insensitive).
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str) and value.upper() in cls.__members__:
            return cls[value.upper()]
        raise ValueError("error correction level must be one of {'L', 'M', 'Q', 'H'}")

    def __lt__(self, other: "ErrorCorrectionLevel") -> bool:
        if not isinstance(other, ErrorCorrectionLevel):
            return NotImplemented
        return self.index < other.index


_INDEX = {
    ErrorCorrectionLevel.L: 0,
    ErrorCorrectionLevel.M: 1,
    ErrorCorrectionLevel.Q: 2,
    ErrorCorrectionLevel.H: 3,
}

# Note the indicator order differs from the redundancy order.
_FORMAT_BITS = {
    ErrorCorrectionLevel.L: 0b01,
    ErrorCorrectionLevel.M: 0b00,
    ErrorCorrectionLevel.Q: 0b11,
    ErrorCorrectionLevel.H: 0b10,
}
