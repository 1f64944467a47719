"""
Symbol versions, capacities and error-correction layouts.

Two sets of tables live here. ``CAPACITY_BITS`` and
``COMPAT_ALIGNMENT_POSITIONS`` drive the compat profile, which keeps
the simplified layout older consumers render. The ISO/IEC 18004 tables
(``EC_CODEWORDS_PER_BLOCK``, ``EC_BLOCKS``, ``ALIGNMENT_POSITIONS``)
drive the standard profile and produce scannable symbols.

Functions
---------
symbol_size
    Side length in modules for a version.
select_version
    Smallest compat version for a payload (capacity-table lookup).
select_standard_version
    Smallest standard version for a byte-mode payload.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Tuple

from . import config
from .errors import CapacityExceededError
from .levels import ErrorCorrectionLevel

logger = logging.getLogger(__name__)

VERSIONS = range(config.MIN_VERSION, config.MAX_VERSION + 1)

# Data capacity in bits per version, columns ordered L, M, Q, H.
CAPACITY_BITS: Tuple[Tuple[int, int, int, int], ...] = (
    (152, 128, 104, 72),     # 1
    (272, 224, 176, 128),    # 2
    (440, 352, 272, 208),    # 3
    (640, 512, 384, 288),    # 4
    (864, 688, 496, 368),    # 5
    (1088, 864, 608, 480),   # 6
    (1248, 992, 704, 528),   # 7
    (1552, 1232, 880, 688),  # 8
    (1856, 1456, 1056, 800), # 9
    (2192, 1728, 1232, 976), # 10
)

COMPAT_ALIGNMENT_POSITIONS = (6, 18, 30, 42, 54, 66, 78)

# ISO/IEC 18004 table, versions 1..10.
ALIGNMENT_POSITIONS: Dict[int, Tuple[int, ...]] = {
    1: (),
    2: (6, 18),
    3: (6, 22),
    4: (6, 26),
    5: (6, 30),
    6: (6, 34),
    7: (6, 22, 38),
    8: (6, 24, 42),
    9: (6, 26, 46),
    10: (6, 28, 50),
}

# Index 0 unused; columns L, M, Q, H.
EC_CODEWORDS_PER_BLOCK: Tuple[Tuple[int, ...], ...] = (
    (-1, 7, 10, 15, 20, 26, 18, 20, 24, 30, 18),   # L
    (-1, 10, 16, 26, 18, 24, 16, 18, 22, 22, 26),  # M
    (-1, 13, 22, 18, 26, 18, 24, 18, 22, 20, 24),  # Q
    (-1, 17, 28, 22, 16, 22, 28, 26, 26, 24, 28),  # H
)

EC_BLOCKS: Tuple[Tuple[int, ...], ...] = (
    (-1, 1, 1, 1, 1, 1, 2, 2, 2, 2, 4),  # L
    (-1, 1, 1, 1, 2, 2, 4, 4, 4, 5, 5),  # M
    (-1, 1, 1, 2, 2, 4, 4, 6, 6, 8, 8),  # Q
    (-1, 1, 1, 2, 4, 4, 4, 5, 6, 8, 8),  # H
)

MODE_INDICATOR_BITS = 4


def _check_version(version: int) -> None:
    if version not in VERSIONS:
        raise ValueError(
            f"version must be in {config.MIN_VERSION}..{config.MAX_VERSION}, got {version}"
        )


def symbol_size(version: int) -> int:
    """Side length, in modules, of a symbol of the given version."""
    return version * 4 + 17


def compat_ec_count(version: int) -> int:
    """Error-correction codewords used by the compat profile."""
    return min(10, version * 2)


def compat_alignment_positions(version: int) -> List[int]:
    """Alignment coordinates used by the compat profile."""
    if version < 2:
        return []
    return list(COMPAT_ALIGNMENT_POSITIONS[: version - 1])


def select_version(
    payload_byte_length: int,
    level: ErrorCorrectionLevel,
    *,
    clamp: bool = True,
) -> int:
    """
    Pick the smallest version whose capacity holds the payload.

    Parameters
    ----------
    payload_byte_length : int
        Payload length in bytes (characters in byte mode).
    level : ErrorCorrectionLevel
        Requested error-correction level.
    clamp : bool, optional
        If True (the default), payloads larger than the version 10
        capacity select version 10. If False they raise instead.

    Returns
    -------
    int
        Version in 1..10.

    Raises
    ------
    CapacityExceededError
        If `clamp` is False and the payload does not fit in version 10.
    """
    bits = payload_byte_length * 8
    for version, row in enumerate(CAPACITY_BITS, start=1):
        if bits <= row[level.index]:
            return version

    largest = CAPACITY_BITS[-1][level.index]
    if not clamp:
        raise CapacityExceededError(payload_byte_length, level.value, largest // 8)
    logger.warning(
        "payload of %d bytes exceeds version %d capacity at level %s; clamping",
        payload_byte_length, config.MAX_VERSION, level.value,
    )
    return config.MAX_VERSION


def raw_data_modules(version: int) -> int:
    """
    Number of modules available for codewords and remainder bits.

    This is the symbol area minus every function pattern, format and
    version information.
    """
    _check_version(version)
    result = (16 * version + 128) * version + 64
    if version >= 2:
        num_align = version // 7 + 2
        result -= (25 * num_align - 10) * num_align - 55
        if version >= 7:
            result -= 36
    return result


def total_codewords(version: int) -> int:
    """Data plus error-correction codewords in a standard symbol."""
    return raw_data_modules(version) // 8


def ec_block_layout(version: int, level: ErrorCorrectionLevel) -> Tuple[int, int]:
    """
    Error-correction layout of a standard symbol.

    Returns
    -------
    tuple of int
        Pair (ec_codewords_per_block, number_of_blocks).
    """
    _check_version(version)
    return (
        EC_CODEWORDS_PER_BLOCK[level.index][version],
        EC_BLOCKS[level.index][version],
    )


def data_codewords(version: int, level: ErrorCorrectionLevel) -> int:
    """Data codewords available in a standard symbol."""
    per_block, blocks = ec_block_layout(version, level)
    return total_codewords(version) - per_block * blocks


def count_indicator_bits(version: int) -> int:
    """Width of the byte-mode character count field."""
    return 8 if version <= 9 else 16


def select_standard_version(payload_byte_length: int, level: ErrorCorrectionLevel) -> int:
    """
    Pick the smallest standard version that holds a byte-mode payload.

    Raises
    ------
    CapacityExceededError
        If the payload does not fit in version 10.
    """
    for version in VERSIONS:
        needed = MODE_INDICATOR_BITS + count_indicator_bits(version) + payload_byte_length * 8
        if needed <= data_codewords(version, level) * 8:
            return version

    largest = data_codewords(config.MAX_VERSION, level) - (
        MODE_INDICATOR_BITS + count_indicator_bits(config.MAX_VERSION) + 7
    ) // 8
    raise CapacityExceededError(payload_byte_length, level.value, largest)
