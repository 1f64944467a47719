"""
qrgrid: QR Code symbols from scratch.

Encodes text into a boolean QR module matrix using table-driven GF(256)
arithmetic and Reed-Solomon error correction, and renders the matrix as
SVG, PNG or terminal text.

>>> from qrgrid import encode, QROptions
>>> qr = encode("Hi", QROptions(error_correction="Q"))
>>> qr.size
21
"""

from .encoder import Profile, QRCode, QROptions, encode, make_qr
from .errors import (
    CapacityExceededError,
    CharacterCountOverflowError,
    NonLatinCodepointError,
    QRGridError,
    UnencodableTextError,
)
from .galois import GaloisField
from .levels import ErrorCorrectionLevel
from .reed_solomon import generate_ec_codewords
from .render import (
    QRImage,
    RenderOptions,
    generate_data_url,
    save_qr_png,
    to_data_url,
    to_svg,
    to_text,
)
from .versions import select_version

__version__ = "1.0.0"
__all__ = [
    "encode", "make_qr", "QRCode", "QROptions", "Profile",
    "ErrorCorrectionLevel", "GaloisField", "generate_ec_codewords", "select_version",
    "to_svg", "to_data_url", "generate_data_url", "to_text", "save_qr_png",
    "QRImage", "RenderOptions",
    "QRGridError", "CapacityExceededError", "CharacterCountOverflowError",
    "NonLatinCodepointError", "UnencodableTextError",
]
