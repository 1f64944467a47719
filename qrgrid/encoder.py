"""
Text to QR module matrix.

This module ties the pieces together: version selection, byte-mode
encoding, Reed-Solomon error correction and matrix construction. The
result is an immutable ``QRCode`` holding a boolean module matrix.

Two layout profiles are available:

``compat``
    The simplified layout existing consumers render: capacity-table
    version selection, ``min(10, 2 * version)`` error-correction
    codewords in a single block, the compat alignment table, no format
    or version information and no mask.
``standard``
    ISO/IEC 18004 byte-mode symbols for versions 1-10: UTF-8 payload,
    terminator and pad codewords, blocked and interleaved
    error correction, format and version information and a fixed mask
    pattern. These decode with ordinary QR readers.

Functions
---------
encode
    Encode text with a QROptions configuration.
make_qr
    Keyword-argument convenience wrapper around ``encode``.

Classes
-------
QROptions
    Immutable encoding configuration.
QRCode
    Immutable encoding result.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import List, Optional, Union

import numpy as np

from . import config
from .bitstream import (
    bits_to_bytes,
    bytes_to_bits,
    encode_byte_mode,
    encode_bytes,
    pad_codewords,
    utf16_code_units,
)
from .errors import UnencodableTextError
from .galois import DEFAULT_FIELD, GaloisField
from .levels import ErrorCorrectionLevel
from .matrix import MASK_PATTERNS, ModuleMatrix
from .reed_solomon import generate_ec_codewords
from .versions import (
    ALIGNMENT_POSITIONS,
    compat_alignment_positions,
    compat_ec_count,
    count_indicator_bits,
    data_codewords,
    ec_block_layout,
    select_standard_version,
    select_version,
    total_codewords,
)

logger = logging.getLogger(__name__)


class Profile(enum.Enum):
    """Symbol layout profile."""

    COMPAT = "compat"
    STANDARD = "standard"

    @classmethod
    def parse(cls, value: Union[str, "Profile"]) -> "Profile":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError("'profile' must be one of {'compat', 'standard'}") from None


@dataclass(frozen=True)
class QROptions:
    """
    Immutable encoding configuration.

    Parameters
    ----------
    error_correction : {'L', 'M', 'Q', 'H'} or ErrorCorrectionLevel, optional
        Error-correction level, case-insensitive. The default is 'M'.
    profile : {'compat', 'standard'} or Profile, optional
        Layout profile. The default is 'compat'.
    lossy : bool, optional
        Compat profile only. If True, payloads that are too long select
        version 10, character counts wrap at 256 and code points above
        255 keep only their low byte. If False (the default) these
        conditions raise.
    mask_pattern : int, optional
        Standard profile only. Mask pattern 0..7 applied to the data
        modules. The default is 0.

    Notes
    -----
    String values are normalized to their enum members during
    ``__post_init__``.

    Raises
    ------
    ValueError
        If any field is out of range.
    """

    error_correction: Union[str, ErrorCorrectionLevel] = config.DEFAULT_ERROR_CORRECTION
    profile: Union[str, Profile] = config.DEFAULT_PROFILE
    lossy: bool = False
    mask_pattern: int = config.DEFAULT_MASK_PATTERN

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "error_correction", ErrorCorrectionLevel.parse(self.error_correction)
        )
        object.__setattr__(self, "profile", Profile.parse(self.profile))
        if not 0 <= self.mask_pattern < len(MASK_PATTERNS):
            raise ValueError("'mask_pattern' must be in 0..7")


@dataclass(frozen=True, eq=False)
class QRCode:
    """
    Encoded QR symbol.

    Attributes
    ----------
    modules : numpy.ndarray
        Read-only boolean array of shape (size, size), row-major. True
        indicates a dark module.
    size : int
        Side length in modules, ``version * 4 + 17``.
    version : int
        Symbol version (1..10).
    level : ErrorCorrectionLevel
        Error-correction level used.
    profile : Profile
        Layout profile used.
    """

    modules: np.ndarray
    size: int
    version: int
    level: ErrorCorrectionLevel
    profile: Profile

    def to_list(self) -> List[List[bool]]:
        """Module matrix as nested lists of bool."""
        return self.modules.tolist()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, QRCode):
            return NotImplemented
        return (
            self.version == other.version
            and self.level is other.level
            and self.profile is other.profile
            and np.array_equal(self.modules, other.modules)
        )

    def __hash__(self) -> int:
        return hash((self.version, self.level, self.profile, self.modules.tobytes()))


# ---------- Compat profile ----------

def _encode_compat(text: str, options: QROptions, field: GaloisField) -> QRCode:
    level = options.error_correction
    length = len(utf16_code_units(text)) if options.lossy else len(text)
    version = select_version(length, level, clamp=options.lossy)
    bits = encode_byte_mode(text, lossy=options.lossy)

    data = bits_to_bytes(bits)
    ecc = generate_ec_codewords(data, compat_ec_count(version), field)
    logger.debug(
        "compat version %d-%s: %d data + %d ec codewords",
        version, level.value, len(data), len(ecc),
    )

    matrix = ModuleMatrix(version)
    matrix.add_finder_patterns()
    matrix.add_timing_patterns()
    matrix.add_alignment_patterns(compat_alignment_positions(version))
    placed = matrix.place_data(bytes_to_bits(data + ecc))
    if placed < 8 * (len(data) + len(ecc)):
        logger.warning(
            "only %d of %d bits fit in a version %d symbol",
            placed, 8 * (len(data) + len(ecc)), version,
        )

    return QRCode(matrix.to_array(), matrix.size, version, level, Profile.COMPAT)


# ---------- Standard profile ----------

def interleave_blocks(
    data: List[int],
    version: int,
    level: ErrorCorrectionLevel,
    field: Optional[GaloisField] = None,
) -> List[int]:
    """
    Split data codewords into blocks, append error correction to each
    block and interleave the result.

    Parameters
    ----------
    data : list of int
        Exactly ``data_codewords(version, level)`` padded codewords.
    version : int
        Symbol version.
    level : ErrorCorrectionLevel
        Error-correction level.
    field : GaloisField, optional
        Field used for Reed-Solomon arithmetic.

    Returns
    -------
    list of int
        ``total_codewords(version)`` codewords in placement order.
    """
    per_block, num_blocks = ec_block_layout(version, level)
    raw = total_codewords(version)
    if len(data) != raw - per_block * num_blocks:
        raise ValueError(
            f"expected {raw - per_block * num_blocks} data codewords, got {len(data)}"
        )

    num_short = num_blocks - raw % num_blocks
    short_len = raw // num_blocks - per_block

    blocks = []
    start = 0
    for i in range(num_blocks):
        length = short_len + (0 if i < num_short else 1)
        chunk = data[start:start + length]
        start += length
        blocks.append((chunk, generate_ec_codewords(chunk, per_block, field)))

    result = []
    for i in range(short_len + 1):
        for chunk, _ in blocks:
            if i < len(chunk):
                result.append(chunk[i])
    for i in range(per_block):
        for _, ecc in blocks:
            result.append(ecc[i])
    return result


def _encode_standard(text: str, options: QROptions, field: GaloisField) -> QRCode:
    level = options.error_correction
    try:
        payload = text.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise UnencodableTextError(text[exc.start], exc.start) from exc
    version = select_standard_version(len(payload), level)

    capacity = data_codewords(version, level)
    bits = encode_bytes(payload, count_indicator_bits(version))
    data = pad_codewords(bits, capacity)
    codewords = interleave_blocks(data, version, level, field)
    logger.debug(
        "standard version %d-%s: %d payload bytes, %d data / %d total codewords, mask %d",
        version, level.value, len(payload), capacity, len(codewords), options.mask_pattern,
    )

    matrix = ModuleMatrix(version)
    matrix.add_finder_patterns()
    matrix.add_timing_patterns()
    matrix.add_alignment_patterns(ALIGNMENT_POSITIONS[version])
    matrix.add_format_information(level, options.mask_pattern)
    matrix.add_version_information()
    matrix.place_data(bytes_to_bits(codewords))
    matrix.apply_mask(options.mask_pattern)

    return QRCode(matrix.to_array(), matrix.size, version, level, Profile.STANDARD)


# ---------- Entry points ----------

def encode(
    text: str,
    options: Optional[QROptions] = None,
    *,
    field: Optional[GaloisField] = None,
) -> QRCode:
    """
    Encode text into a QR module matrix.

    Parameters
    ----------
    text : str
        Payload. May be empty.
    options : QROptions, optional
        Encoding configuration. The default is ``QROptions()``
        (level M, compat profile, strict input checks).
    field : GaloisField, optional
        Field used for Reed-Solomon arithmetic. The default is the
        shared read-only field.

    Returns
    -------
    QRCode
        Immutable encoded symbol.

    Raises
    ------
    TypeError
        If `text` is not a string.
    CapacityExceededError
        If the payload does not fit in version 10 (unless compat
        `lossy` is set).
    CharacterCountOverflowError
        If the compat 8-bit count field overflows (unless `lossy`).
    NonLatinCodepointError
        If a compat payload has a code point above 255 (unless `lossy`).
    UnencodableTextError
        If a standard payload contains an unpaired surrogate.
    """
    if not isinstance(text, str):
        raise TypeError("'text' must be a string")
    options = options or QROptions()
    field = field or DEFAULT_FIELD

    if options.profile is Profile.STANDARD:
        return _encode_standard(text, options, field)
    return _encode_compat(text, options, field)


def make_qr(
    text: str,
    *,
    ecc: Union[str, ErrorCorrectionLevel] = config.DEFAULT_ERROR_CORRECTION,
    profile: Union[str, Profile] = config.DEFAULT_PROFILE,
    lossy: bool = False,
    mask_pattern: int = config.DEFAULT_MASK_PATTERN,
) -> QRCode:
    """
    Encode text from keyword arguments.

    See ``QROptions`` for the meaning of each argument.
    """
    options = QROptions(
        error_correction=ecc,
        profile=profile,
        lossy=lossy,
        mask_pattern=mask_pattern,
    )
    return encode(text, options)
