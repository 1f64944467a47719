"""
Byte-mode data encoding and bit/byte conversion.

A bitstream is a list of 0/1 integers, most significant bit first.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Sequence

from .errors import CharacterCountOverflowError, NonLatinCodepointError

logger = logging.getLogger(__name__)

MODE_BYTE = 0b0100
PAD_CODEWORDS = (0xEC, 0x11)
COMPAT_COUNT_BITS = 8


def int_to_bits(value: int, length: int) -> List[int]:
    """Return the low `length` bits of `value`, most significant first."""
    return [(value >> i) & 1 for i in range(length - 1, -1, -1)]


def utf16_code_units(text: str) -> List[int]:
    """
    Split text into UTF-16 code units.

    Characters above U+FFFF become a surrogate pair and lone surrogates
    are kept as a single unit, which is how JavaScript strings index
    their characters.
    """
    raw = text.encode("utf-16-be", errors="surrogatepass")
    return [(raw[i] << 8) | raw[i + 1] for i in range(0, len(raw), 2)]


def encode_byte_mode(text: str, *, lossy: bool = False) -> List[int]:
    """
    Encode text in byte mode with an 8-bit character count.

    Each character contributes the low 8 bits of its code point.

    Parameters
    ----------
    text : str
        Payload. May be empty.
    lossy : bool, optional
        If True, the text is read as UTF-16 code units: the count is the
        number of units and wraps above 255, and each unit contributes
        its low byte without complaint. A character above U+FFFF
        therefore counts twice. The default is False.

    Returns
    -------
    list of int
        Mode indicator (4 bits), count (8 bits) and 8 bits per character.

    Raises
    ------
    CharacterCountOverflowError
        If `text` has more than 255 characters and `lossy` is False.
    NonLatinCodepointError
        If a code point exceeds 255 and `lossy` is False.
    """
    codes = utf16_code_units(text) if lossy else [ord(char) for char in text]
    count = len(codes)
    if count > 0xFF and not lossy:
        raise CharacterCountOverflowError(count)

    bits = int_to_bits(MODE_BYTE, 4)
    bits += int_to_bits(count, COMPAT_COUNT_BITS)
    for position, code in enumerate(codes):
        if code > 0xFF:
            if not lossy:
                raise NonLatinCodepointError(text[position], position)
            logger.debug("truncating code unit %04X at position %d to its low byte", code, position)
        bits += int_to_bits(code, 8)
    return bits


def encode_bytes(payload: bytes, count_bits: int) -> List[int]:
    """
    Encode raw bytes in byte mode with a count field of `count_bits`.

    Raises
    ------
    CharacterCountOverflowError
        If ``len(payload)`` does not fit in the count field.
    """
    limit = (1 << count_bits) - 1
    if len(payload) > limit:
        raise CharacterCountOverflowError(len(payload), limit)
    bits = int_to_bits(MODE_BYTE, 4)
    bits += int_to_bits(len(payload), count_bits)
    for byte in payload:
        bits += int_to_bits(byte, 8)
    return bits


def bits_to_bytes(bits: Sequence[int]) -> List[int]:
    """
    Pack a bitstream into bytes, eight bits at a time.

    A trailing chunk shorter than eight bits is packed as its own value,
    so ``[1, 0, 1]`` becomes ``5``; it gains leading zeros when expanded
    back to eight bits.
    """
    out = []
    for i in range(0, len(bits), 8):
        byte = 0
        for bit in bits[i:i + 8]:
            byte = (byte << 1) | bit
        out.append(byte)
    return out


def bytes_to_bits(codewords: Iterable[int]) -> List[int]:
    """Expand bytes to a bitstream, eight bits each."""
    bits: List[int] = []
    for byte in codewords:
        bits += int_to_bits(byte, 8)
    return bits


def pad_codewords(bits: Sequence[int], capacity: int) -> List[int]:
    """
    Terminate, byte-align and pad a bitstream to `capacity` codewords.

    Up to four terminator bits are appended, then zero bits up to the
    next byte boundary, then alternating 0xEC / 0x11 pad codewords.

    Parameters
    ----------
    bits : sequence of int
        Encoded segment bits. Must fit in ``capacity * 8`` bits.
    capacity : int
        Number of data codewords in the symbol.

    Returns
    -------
    list of int
        Exactly `capacity` data codewords.
    """
    capacity_bits = capacity * 8
    if len(bits) > capacity_bits:
        raise ValueError(f"{len(bits)} bits do not fit in {capacity} codewords")

    padded = list(bits)
    padded += [0] * min(4, capacity_bits - len(padded))
    padded += [0] * (-len(padded) % 8)

    codewords = bits_to_bytes(padded)
    i = 0
    while len(codewords) < capacity:
        codewords.append(PAD_CODEWORDS[i % 2])
        i += 1
    return codewords
