import pytest

from frostsig.scalar import ORDER, Scalar


@pytest.mark.parametrize("value", [1, 2, 200, 499, 1025])
def test_from_int_matches_repeated_addition(value):
    one = Scalar.from_canonical_bytes(b"\x01" + bytes(31))
    total = Scalar(0)
    for _ in range(value):
        total = total + one
    assert Scalar.from_int(value) == total


@pytest.mark.parametrize("value", [-1, 2**32])
def test_from_int_rejects_out_of_range(value):
    with pytest.raises(ValueError):
        Scalar.from_int(value)


def test_canonical_round_trip():
    s = Scalar.random()
    assert Scalar.from_canonical_bytes(bytes(s)) == s
    assert len(bytes(s)) == 32


def test_canonical_rejects_order_and_accepts_below():
    with pytest.raises(ValueError):
        Scalar.from_canonical_bytes(ORDER.to_bytes(32, "little"))
    top = Scalar.from_canonical_bytes((ORDER - 1).to_bytes(32, "little"))
    assert top + Scalar(1) == Scalar(0)


@pytest.mark.parametrize("size", [0, 31, 33, 64])
def test_canonical_rejects_wrong_length(size):
    with pytest.raises(ValueError):
        Scalar.from_canonical_bytes(bytes(size))


def test_uniform_bytes_reduces_modulo_order():
    assert Scalar.from_uniform_bytes(ORDER.to_bytes(64, "little")).is_zero()
    assert Scalar.from_uniform_bytes((ORDER + 5).to_bytes(64, "little")) == Scalar(5)


def test_uniform_bytes_rejects_wrong_length():
    with pytest.raises(ValueError):
        Scalar.from_uniform_bytes(bytes(32))


def test_clamping_ignores_low_bits_and_high_bit():
    base = bytes(32)
    variants = [bytes([i]) + bytes(30) + bytes([0x80]) for i in range(8)]
    expected = Scalar.from_bytes_with_clamping(base)
    assert all(Scalar.from_bytes_with_clamping(v) == expected for v in variants)


def test_clamping_rejects_wrong_length():
    with pytest.raises(ValueError):
        Scalar.from_bytes_with_clamping(bytes(64))


def test_text_form_of_one():
    assert Scalar(1).to_text() == "AQ" + "A" * 41 + "="
    assert str(Scalar(1)) == Scalar(1).to_text()


def test_text_round_trip():
    s = Scalar.random()
    assert Scalar.from_text(s.to_text()) == s


def test_text_rejects_invalid_base64():
    with pytest.raises(ValueError):
        Scalar.from_text("not base64!")


def test_arithmetic_identities():
    a, b = Scalar.random(), Scalar.random()
    assert a - a == Scalar(0)
    assert a + (-a) == Scalar(0)
    assert a * a.invert() == Scalar(1) or a.is_zero()
    assert a.multiply_add(b, Scalar(3)) == a * b + Scalar(3)
    assert (a + b) - b == a


def test_invert_of_zero_is_zero():
    assert Scalar(0).invert().is_zero()


def test_equal_scalars_hash_equally():
    assert {Scalar(7), Scalar(7 + ORDER)} == {Scalar(7)}