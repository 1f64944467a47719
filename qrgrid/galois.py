"""
Galois field GF(2^8) arithmetic for Reed-Solomon coding.

The field is generated by the primitive polynomial
x^8 + x^4 + x^3 + x^2 + 1 (0x11d) with generator alpha = 2, as used by
QR codes. Exponent and logarithm tables are built once per instance and
are read-only afterwards, so a single instance can be shared between
threads without locking.

Classes
-------
GaloisField
    Immutable table-driven GF(256) arithmetic.
"""

from __future__ import annotations

import numpy as np

PRIMITIVE_POLY = 0x11d
FIELD_ORDER = 255  # size of the multiplicative group


class GaloisField:
    """
    Table-driven arithmetic over GF(256).

    Attributes
    ----------
    exp_table : numpy.ndarray
        Read-only array of length 255; ``exp_table[i]`` is alpha^i.
    log_table : numpy.ndarray
        Read-only array of length 256; ``log_table[x]`` is the exponent i
        with alpha^i == x for x in 1..255. ``log_table[0]`` is unused.
    """

    def __init__(self, primitive: int = PRIMITIVE_POLY) -> None:
        exp = np.zeros(FIELD_ORDER, dtype=np.int32)
        log = np.zeros(FIELD_ORDER + 1, dtype=np.int32)

        x = 1
        for i in range(FIELD_ORDER):
            exp[i] = x
            log[x] = i
            x <<= 1
            if x & 0x100:
                x ^= primitive

        exp.flags.writeable = False
        log.flags.writeable = False
        self._exp = exp
        self._log = log

    @property
    def exp_table(self) -> np.ndarray:
        return self._exp

    @property
    def log_table(self) -> np.ndarray:
        return self._log

    @staticmethod
    def _check(value: int, name: str) -> None:
        if not 0 <= value <= 0xFF:
            raise ValueError(f"'{name}' must be a byte (0..255), got {value}")

    def exp(self, exponent: int) -> int:
        """Return alpha^exponent."""
        return int(self._exp[exponent % FIELD_ORDER])

    def multiply(self, a: int, b: int) -> int:
        """
        Multiply two field elements.

        Returns
        -------
        int
            The product, or 0 if either operand is 0.
        """
        self._check(a, "a")
        self._check(b, "b")
        if a == 0 or b == 0:
            return 0
        return int(self._exp[(self._log[a] + self._log[b]) % FIELD_ORDER])

    def power(self, base: int, exponent: int) -> int:
        """
        Raise a field element to a non-negative integer power.

        Returns
        -------
        int
            1 when `exponent` is 0 (including 0^0), 0 when `base` is 0,
            otherwise base^exponent.
        """
        self._check(base, "base")
        if exponent == 0:
            return 1
        if base == 0:
            return 0
        return int(self._exp[(int(self._log[base]) * exponent) % FIELD_ORDER])


# Shared read-only instance. Pass an explicit GaloisField to the encoder
# to use a different one.
DEFAULT_FIELD = GaloisField()
