"""
Reed-Solomon error-correction codewords for QR symbols.

Polynomials are lists of field elements ordered from the highest degree
term to the constant term, which matches the order codewords appear in
the symbol.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from .galois import DEFAULT_FIELD, GaloisField


def generator_polynomial(degree: int, field: Optional[GaloisField] = None) -> List[int]:
    """
    Build the generator polynomial (x - a^0)(x - a^1)...(x - a^(degree-1)).

    Parameters
    ----------
    degree : int
        Number of error-correction codewords the generator produces.
    field : GaloisField, optional
        Field used for the arithmetic. The default is the shared field.

    Returns
    -------
    list of int
        ``degree + 1`` coefficients, highest degree first. The leading
        coefficient is always 1.
    """
    if degree < 0:
        raise ValueError("'degree' must be non-negative")
    gf = field or DEFAULT_FIELD

    gen = [1]
    for i in range(degree):
        root = gf.exp(i)
        # Multiply by (x + root); subtraction is addition in GF(2^8).
        nxt = gen + [0]
        for j in range(1, len(nxt)):
            nxt[j] ^= gf.multiply(gen[j - 1], root)
        gen = nxt
    return gen


def generate_ec_codewords(
    data: Sequence[int],
    ecc_count: int,
    field: Optional[GaloisField] = None,
) -> List[int]:
    """
    Compute the error-correction codewords for a block of data codewords.

    The data polynomial is multiplied by x^ecc_count and divided by the
    generator; the remainder is returned.

    Parameters
    ----------
    data : sequence of int
        Data codewords (0..255), first codeword is the highest degree
        coefficient.
    ecc_count : int
        Number of error-correction codewords to produce.
    field : GaloisField, optional
        Field used for the arithmetic. The default is the shared field.

    Returns
    -------
    list of int
        Exactly `ecc_count` codewords. Empty `data` yields zeros.
    """
    if ecc_count < 0:
        raise ValueError("'ecc_count' must be non-negative")
    if ecc_count == 0:
        return []
    gf = field or DEFAULT_FIELD
    generator = generator_polynomial(ecc_count, gf)

    buf = list(data) + [0] * ecc_count
    for i in range(len(data)):
        factor = buf[i]
        if factor == 0:
            continue
        for j, coef in enumerate(generator):
            buf[i + j] ^= gf.multiply(coef, factor)

    return buf[len(data):]
