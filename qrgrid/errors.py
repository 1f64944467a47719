"""
Exception types raised while encoding QR symbols.

All encoding failures are input-validation failures: nothing is retried
and no partial symbol is returned. Every class derives from
``QRGridError``, which is itself a ``ValueError`` so that callers
catching ``ValueError`` keep working.
"""

from __future__ import annotations


class QRGridError(ValueError):
    """Base error for all qrgrid encoding operations."""


class CapacityExceededError(QRGridError):
    """
    Payload does not fit in the largest supported version.

    Parameters
    ----------
    length : int
        Payload length in bytes.
    level : str
        Error-correction level name ('L', 'M', 'Q' or 'H').
    capacity : int
        Largest payload, in bytes, that fits at `level`.
    """

    def __init__(self, length: int, level: str, capacity: int) -> None:
        self.length = length
        self.level = level
        self.capacity = capacity
        super().__init__(
            f"payload of {length} bytes exceeds the capacity of "
            f"{capacity} bytes at level {level}"
        )


class CharacterCountOverflowError(QRGridError):
    """Character count does not fit in the 8-bit count field."""

    def __init__(self, count: int, limit: int = 255) -> None:
        self.count = count
        self.limit = limit
        super().__init__(
            f"character count {count} does not fit in the count field "
            f"(maximum {limit})"
        )


class NonLatinCodepointError(QRGridError):
    """A character cannot be represented as a single byte."""

    def __init__(self, char: str, position: int) -> None:
        self.char = char
        self.position = position
        super().__init__(
            f"character {char!r} (U+{ord(char):04X}) at position {position} "
            f"is outside the single-byte range"
        )


class UnencodableTextError(QRGridError):
    """A character has no UTF-8 encoding (an unpaired surrogate)."""

    def __init__(self, char: str, position: int) -> None:
        self.char = char
        self.position = position
        super().__init__(
            f"character U+{ord(char):04X} at position {position} "
            f"cannot be encoded as UTF-8"
        )
