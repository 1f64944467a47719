import numpy as np
import pytest

from qrgrid import (
    CapacityExceededError,
    CharacterCountOverflowError,
    ErrorCorrectionLevel,
    GaloisField,
    NonLatinCodepointError,
    Profile,
    QRGridError,
    QROptions,
    UnencodableTextError,
    encode,
    make_qr,
)
from qrgrid.encoder import interleave_blocks
from qrgrid.matrix import DARK, ModuleMatrix
from qrgrid.versions import compat_alignment_positions, data_codewords, total_codewords

LEVELS = ["L", "M", "Q", "H"]
PROFILES = ["compat", "standard"]


def compat_function_layout(version):
    m = ModuleMatrix(version)
    m.add_finder_patterns()
    m.add_timing_patterns()
    m.add_alignment_patterns(compat_alignment_positions(version))
    return m


def test_default_options():
    opts = QROptions()
    assert opts.error_correction is ErrorCorrectionLevel.M
    assert opts.profile is Profile.COMPAT
    assert opts.lossy is False
    assert opts.mask_pattern == 0


def test_options_normalize_strings():
    opts = QROptions(error_correction="q", profile="STANDARD")
    assert opts.error_correction is ErrorCorrectionLevel.Q
    assert opts.profile is Profile.STANDARD


@pytest.mark.parametrize(
    "kwargs",
    [{"error_correction": "X"}, {"profile": "micro"}, {"mask_pattern": 8}, {"mask_pattern": -1}],
)
def test_invalid_options(kwargs):
    with pytest.raises(ValueError):
        QROptions(**kwargs)


def test_options_are_frozen():
    opts = QROptions()
    with pytest.raises(AttributeError):
        opts.lossy = True


@pytest.mark.parametrize("profile", PROFILES)
@pytest.mark.parametrize("text", ["Hello", "https://example.com", "", "1234567890"])
def test_determinism(profile, text):
    opts = QROptions(profile=profile)
    assert encode(text, opts) == encode(text, opts)


@pytest.mark.parametrize("profile", PROFILES)
@pytest.mark.parametrize("level", LEVELS)
def test_squareness_and_version_size_law(profile, level):
    qr = encode("This is a test message for QR code generation", QROptions(level, profile))
    assert qr.modules.shape == (qr.size, qr.size)
    assert len(qr.to_list()) == qr.size
    assert all(len(row) == qr.size for row in qr.to_list())
    assert qr.size == qr.version * 4 + 17


@pytest.mark.parametrize("profile", PROFILES)
@pytest.mark.parametrize("text", ["Test", "A" * 100, "Hello! @#$%^&*()"])
def test_finder_pattern_presence(profile, text):
    qr = encode(text, QROptions(profile=profile))
    m, n = qr.modules, qr.size
    for top, left in ((0, 0), (0, n - 7), (n - 7, 0)):
        assert m[top, left] and m[top + 6, left] and m[top, left + 6] and m[top + 6, left + 6]
        assert m[top + 3, left + 3]
        assert not m[top + 1, left + 1]


def test_distinct_inputs_give_distinct_matrices():
    assert not np.array_equal(encode("Hello").modules, encode("World").modules)


@pytest.mark.parametrize("profile", PROFILES)
@pytest.mark.parametrize("level", LEVELS)
def test_minimum_version(profile, level):
    qr = encode("Hi", QROptions(level, profile))
    assert qr.version == 1
    assert qr.size == 21


@pytest.mark.parametrize("profile", PROFILES)
@pytest.mark.parametrize("level", LEVELS)
def test_monotonic_growth(profile, level):
    opts = QROptions(level, profile)
    versions = [encode("x" * n, opts).version for n in range(0, 120, 3)]
    assert versions == sorted(versions)


def test_longer_text_increases_size():
    assert encode("A" * 50).size > encode("Hi").size


def test_empty_text_boundary():
    qr = encode("")
    assert qr.size == 21
    data_region = ~compat_function_layout(1).function_mask
    assert qr.modules[data_region].any()


def test_compat_data_never_overwrites_function_modules():
    for text in ("Hi", "A" * 40, "x" * 150):
        qr = encode(text)
        layout = compat_function_layout(qr.version)
        fn = layout.function_mask
        assert np.array_equal(qr.modules[fn], layout.cells[fn] == DARK)


def test_compat_first_codeword_placement():
    # The first data codeword is 0x40 | high nibble of the count; its
    # first bits land in the bottom-right corner: 0, 1, 0, 0.
    m = encode("Hi").modules
    assert [m[20, 20], m[20, 19], m[19, 20], m[19, 19]] == [False, True, False, False]


def test_symbols_are_hashable():
    a = encode("hash me")
    b = encode("hash me")
    assert a == b
    assert hash(a) == hash(b)
    assert len({a, b, encode("other")}) == 2


def test_modules_are_read_only():
    qr = encode("Hello")
    with pytest.raises(ValueError):
        qr.modules[0, 0] = False


def test_explicit_field_matches_default():
    assert encode("Injected", field=GaloisField()) == encode("Injected")


def test_profiles_differ():
    assert encode("TEST", QROptions(profile="compat")) != encode("TEST", QROptions(profile="standard"))


def test_standard_test_payload_is_version_one():
    qr = encode("TEST", QROptions("M", "standard"))
    assert qr.size == 21
    assert qr.profile is Profile.STANDARD


def test_standard_profile_accepts_unicode():
    qr = encode("Hello 世界 🌍", QROptions(profile="standard"))
    assert qr.version >= 1


def test_standard_mask_changes_data_only():
    a = encode("mask", QROptions(profile="standard", mask_pattern=0)).modules
    b = encode("mask", QROptions(profile="standard", mask_pattern=3)).modules
    assert not np.array_equal(a, b)
    assert np.array_equal(a[0:7, 0:7], b[0:7, 0:7])


def test_compat_capacity_exceeded():
    with pytest.raises(CapacityExceededError):
        encode("a" * 300)


def test_compat_lossy_clamps_to_version_ten():
    qr = encode("a" * 300, QROptions(lossy=True))
    assert qr.version == 10
    assert qr.size == 57


def test_compat_character_count_overflow():
    # Fits the version 10-L capacity (274 bytes) but not the 8-bit count.
    with pytest.raises(CharacterCountOverflowError):
        encode("a" * 260, QROptions("L"))
    assert encode("a" * 260, QROptions("L", lossy=True)).version == 10


def test_compat_non_latin_codepoint():
    with pytest.raises(NonLatinCodepointError):
        encode("Hello 世界")
    assert encode("Hello 世界", QROptions(lossy=True)).size == 21


def test_compat_lossy_counts_astral_characters_twice():
    # 16 code points, 17 UTF-16 units: one unit past the 1-M capacity.
    text = "a" * 15 + "\U0001F30D"
    assert encode(text, QROptions(lossy=True)).version == 2
    assert encode("a" * 16, QROptions(lossy=True)).version == 1


def test_standard_unpaired_surrogate():
    with pytest.raises(UnencodableTextError) as info:
        encode("ok\ud800", QROptions(profile="standard"))
    assert isinstance(info.value, QRGridError)
    assert info.value.position == 2


def test_compat_lossy_accepts_unpaired_surrogate():
    assert encode("\ud800", QROptions(lossy=True)).version == 1


def test_standard_capacity_exceeded():
    with pytest.raises(CapacityExceededError):
        encode("a" * 300, QROptions("L", "standard"))


def test_rejects_non_string():
    with pytest.raises(TypeError):
        encode(b"bytes")


def test_make_qr_keywords():
    qr = make_qr("Hello", ecc="h", profile="standard", mask_pattern=2)
    assert qr.level is ErrorCorrectionLevel.H
    assert qr == encode("Hello", QROptions("H", "standard", mask_pattern=2))


def test_interleave_single_block_is_data_then_ecc():
    level = ErrorCorrectionLevel.M
    data = list(range(data_codewords(1, level)))
    result = interleave_blocks(data, 1, level)
    assert len(result) == total_codewords(1)
    assert result[:16] == data


def test_interleave_multiple_blocks():
    # Version 5-Q: two blocks of 15 and two of 16 data codewords.
    level = ErrorCorrectionLevel.Q
    data = list(range(62))
    result = interleave_blocks(data, 5, level)
    assert len(result) == 134
    assert result[:4] == [0, 15, 30, 46]
    # The 16th column only exists in the long blocks.
    assert result[60:62] == [45, 61]


def test_interleave_rejects_wrong_length():
    with pytest.raises(ValueError):
        interleave_blocks([0] * 5, 1, ErrorCorrectionLevel.M)
