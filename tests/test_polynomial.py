import pytest

from frostsig.party import id_scalar, random_id
from frostsig.polynomial import Exponent, Polynomial, sum_exponents
from frostsig.ristretto import Element
from frostsig.scalar import Scalar


def test_polynomial_evaluate_one_plus_x_squared():
    polynomial = Polynomial([Scalar.from_int(1), Scalar.from_int(0), Scalar.from_int(1)])
    for _ in range(100):
        x = random_id()
        computed = polynomial.evaluate(id_scalar(x))
        assert int.from_bytes(bytes(computed)[:8], "little") == 1 + x * x


def test_polynomial_random_shape():
    constant = Scalar.random()
    polynomial = Polynomial.random(5, constant)
    assert polynomial.degree() == 5
    assert len(polynomial) == 6
    assert polynomial.constant() == constant


def test_polynomial_evaluate_zero_raises():
    polynomial = Polynomial.random(3, Scalar.random())
    with pytest.raises(ValueError):
        polynomial.evaluate(Scalar(0))


def test_polynomial_reset_zeroes_coefficients():
    polynomial = Polynomial.random(3, Scalar.random())
    polynomial.reset()
    assert all(c.is_zero() for c in polynomial.coefficients)
    assert polynomial.evaluate(Scalar(7)).is_zero()


def test_polynomial_requires_coefficients():
    with pytest.raises(ValueError):
        Polynomial([])


def test_exponent_evaluate_matches_scalar_evaluation():
    secret = Scalar.random()
    polynomial = Polynomial.random(1000, secret)
    exponent = Exponent.from_polynomial(polynomial)
    index = id_scalar(random_id())
    assert Element.base_mult(polynomial.evaluate(index)) == exponent.evaluate(index)
    assert exponent.constant() == Element.base_mult(secret)
    assert exponent.degree() == 1000


def test_sum():
    index = id_scalar(random_id())
    evaluation_scalar = Scalar(0)
    evaluation_partial = Element.identity()
    exponents = []
    for _ in range(20):
        polynomial = Polynomial.random(10, Scalar.random())
        exponent = Exponent.from_polynomial(polynomial)
        exponents.append(exponent)
        evaluation_scalar = evaluation_scalar + polynomial.evaluate(index)
        evaluation_partial = evaluation_partial + exponent.evaluate(index)

    summed = sum_exponents(exponents)
    evaluation_sum = summed.evaluate(index)
    assert evaluation_sum == Element.base_mult(evaluation_scalar)
    assert evaluation_sum == evaluation_partial


def test_sum_leaves_inputs_unchanged():
    first = Exponent.from_polynomial(Polynomial.random(2, Scalar.random()))
    second = Exponent.from_polynomial(Polynomial.random(2, Scalar.random()))
    before = first.copy()
    sum_exponents([first, second])
    assert first == before


def test_sum_empty_raises():
    with pytest.raises(ValueError):
        sum_exponents([])


def test_exponent_add_mismatched_degree_raises():
    first = Exponent.from_polynomial(Polynomial.random(2, Scalar.random()))
    second = Exponent.from_polynomial(Polynomial.random(3, Scalar.random()))
    with pytest.raises(ValueError):
        first.add(second)


def test_exponent_evaluate_zero_raises():
    exponent = Exponent.from_polynomial(Polynomial.random(2, Scalar.random()))
    with pytest.raises(ValueError):
        exponent.evaluate(Scalar(0))


def test_exponent_evaluate_multi():
    polynomial = Polynomial.random(3, Scalar.random())
    exponent = Exponent.from_polynomial(polynomial)
    results = exponent.evaluate_multi([1, 2, 5])
    assert sorted(results) == [1, 2, 5]
    for party_id, point in results.items():
        assert point == Element.base_mult(polynomial.evaluate(id_scalar(party_id)))


def test_exponent_round_trip():
    exponent = Exponent.from_polynomial(Polynomial.random(4, Scalar.random()))
    data = exponent.to_bytes()
    assert len(data) == exponent.size() == 2 + 5 * 32
    assert data[:2] == b"\x00\x04"
    decoded = Exponent.from_bytes(data)
    assert decoded == exponent
    assert decoded.to_bytes() == data


def test_exponent_from_bytes_bad_length():
    exponent = Exponent.from_polynomial(Polynomial.random(2, Scalar.random()))
    data = exponent.to_bytes()
    with pytest.raises(ValueError):
        Exponent.from_bytes(data[:-1])
    with pytest.raises(ValueError):
        Exponent.from_bytes(data[:-32])


def test_exponent_copy_is_independent():
    exponent = Exponent.from_polynomial(Polynomial.random(2, Scalar.random()))
    duplicate = exponent.copy()
    exponent.reset()
    assert all(c == Element.identity() for c in exponent.coefficients)
    assert duplicate != exponent