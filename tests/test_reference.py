"""Conformance checks against the qrcode library and OpenCV's decoder."""

import numpy as np
import pytest

from qrgrid import ErrorCorrectionLevel, QROptions, encode
from qrgrid.matrix import format_information, version_information
from qrgrid.render import QRImage, RenderOptions
from qrgrid.versions import data_codewords, ec_block_layout

qrcode = pytest.importorskip("qrcode")
from qrcode.base import rs_blocks  # noqa: E402
from qrcode.constants import (  # noqa: E402
    ERROR_CORRECT_H,
    ERROR_CORRECT_L,
    ERROR_CORRECT_M,
    ERROR_CORRECT_Q,
)
from qrcode.util import MODE_8BIT_BYTE, QRData, BCH_type_info, BCH_type_number  # noqa: E402

ECC_MAP = {
    ErrorCorrectionLevel.L: ERROR_CORRECT_L,
    ErrorCorrectionLevel.M: ERROR_CORRECT_M,
    ErrorCorrectionLevel.Q: ERROR_CORRECT_Q,
    ErrorCorrectionLevel.H: ERROR_CORRECT_H,
}


def reference_matrix(text, version, level, mask):
    qr = qrcode.QRCode(
        version=version,
        error_correction=ECC_MAP[level],
        box_size=1,
        border=0,
        mask_pattern=mask,
    )
    qr.add_data(QRData(text.encode("utf-8"), mode=MODE_8BIT_BYTE))
    qr.make(fit=False)
    return np.array(qr.get_matrix(), dtype=bool)


@pytest.mark.parametrize("level", list(ErrorCorrectionLevel))
@pytest.mark.parametrize("version", range(1, 11))
def test_block_layout_matches_reference(version, level):
    blocks = rs_blocks(version, ECC_MAP[level])
    per_block, count = ec_block_layout(version, level)
    assert len(blocks) == count
    assert all(b.total_count - b.data_count == per_block for b in blocks)
    assert sum(b.data_count for b in blocks) == data_codewords(version, level)


@pytest.mark.parametrize("level", list(ErrorCorrectionLevel))
@pytest.mark.parametrize("mask", range(8))
def test_format_word_matches_reference(level, mask):
    assert format_information(level, mask) == BCH_type_info((ECC_MAP[level] << 3) | mask)


@pytest.mark.parametrize("version", range(7, 11))
def test_version_word_matches_reference(version):
    assert version_information(version) == BCH_type_number(version)


@pytest.mark.parametrize(
    "text, level, mask",
    [
        ("TEST", "M", 0),
        ("HELLO WORLD", "Q", 0),
        ("https://example.com/path?q=1", "L", 2),
        ("Hello 世界", "H", 5),
        ("x" * 150, "M", 0),
        ("a" * 250, "L", 7),
    ],
)
def test_standard_matrix_matches_reference(text, level, mask):
    qr = encode(text, QROptions(level, "standard", mask_pattern=mask))
    expected = reference_matrix(text, qr.version, qr.level, mask)
    assert expected.shape == qr.modules.shape
    assert np.array_equal(qr.modules, expected)


def test_round_trip_decode():
    cv2 = pytest.importorskip("cv2")  # noqa: F841
    qr = encode("TEST", QROptions("M", "standard"))
    assert qr.size == 21
    image = QRImage(qr, RenderOptions(margin=4, scale=10))
    assert image.validate("TEST")
