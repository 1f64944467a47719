import numpy as np
import pytest

from qrgrid.galois import DEFAULT_FIELD, GaloisField


@pytest.fixture(scope="module")
def gf():
    return GaloisField()


def test_exp_table_starts_with_powers_of_two(gf):
    assert [int(v) for v in gf.exp_table[:8]] == [1, 2, 4, 8, 16, 32, 64, 128]
    # 2^8 reduces modulo 0x11d
    assert gf.exp_table[8] == 0x1d


def test_tables_are_inverse(gf):
    for i in range(255):
        assert gf.log_table[gf.exp_table[i]] == i


def test_exp_table_covers_every_nonzero_element(gf):
    assert sorted(int(v) for v in gf.exp_table) == list(range(1, 256))


def test_tables_are_read_only(gf):
    with pytest.raises(ValueError):
        gf.exp_table[0] = 5
    with pytest.raises(ValueError):
        gf.log_table[1] = 5


def test_multiply_by_zero(gf):
    assert gf.multiply(0, 77) == 0
    assert gf.multiply(77, 0) == 0
    assert gf.multiply(0, 0) == 0


def test_multiply_known_values(gf):
    assert gf.multiply(1, 200) == 200
    assert gf.multiply(2, 128) == 0x1d
    assert gf.multiply(3, 7) == 9  # (x + 1)(x^2 + x + 1) = x^3 + 1


def test_multiply_is_commutative_and_has_inverses(gf):
    for a in range(1, 256):
        assert gf.multiply(a, gf.power(a, 254)) == 1
        assert gf.multiply(a, 91) == gf.multiply(91, a)


def test_power(gf):
    assert gf.power(2, 0) == 1
    assert gf.power(0, 0) == 1
    assert gf.power(0, 3) == 0
    assert gf.power(2, 8) == 0x1d
    assert gf.power(2, 255) == 1
    assert gf.power(5, 3) == gf.multiply(5, gf.multiply(5, 5))


def test_exp_wraps_around(gf):
    assert gf.exp(255) == 1
    assert gf.exp(256) == 2


def test_rejects_non_bytes(gf):
    with pytest.raises(ValueError):
        gf.multiply(256, 1)
    with pytest.raises(ValueError):
        gf.power(-1, 2)


def test_default_field_matches_fresh_instance(gf):
    assert np.array_equal(DEFAULT_FIELD.exp_table, gf.exp_table)
    assert np.array_equal(DEFAULT_FIELD.log_table, gf.log_table)
