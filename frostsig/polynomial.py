"""Polynomials over the scalar field and their commitments "in the exponent"."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from frostsig.party import ID_BYTE_SIZE, id_from_bytes, id_scalar, id_to_bytes
from frostsig.ristretto import ELEMENT_SIZE, Element
from frostsig.scalar import Scalar


class Polynomial:
    """A polynomial f(X) = a_0 + a_1 X + ... + a_t X^t with scalar coefficients."""

    __slots__ = ("_coefficients",)

    def __init__(self, coefficients: Iterable[Scalar]) -> None:
        coeffs = list(coefficients)
        if not coeffs:
            raise ValueError("polynomial: at least one coefficient is required")
        for coefficient in coeffs:
            if not isinstance(coefficient, Scalar):
                raise TypeError(
                    f"polynomial: expected Scalar coefficients, got {type(coefficient).__name__}"
                )
        self._coefficients = coeffs

    @property
    def coefficients(self) -> tuple[Scalar, ...]:
        """The coefficients, constant term first."""
        return tuple(self._coefficients)

    @classmethod
    def random(cls, degree: int, constant: Scalar) -> Polynomial:
        """Return a polynomial of the given degree with the given constant term
        and uniformly random remaining coefficients."""
        if degree < 0:
            raise ValueError("polynomial: degree must not be negative")
        return cls([constant, *(Scalar.random() for _ in range(degree))])

    def evaluate(self, index: Scalar) -> Scalar:
        """Evaluate the polynomial at a non-zero index using Horner's method."""
        if index.is_zero():
            raise ValueError("polynomial: attempt to leak secret")
        result = Scalar(0)
        for coefficient in reversed(self._coefficients):
            result = result.multiply_add(index, coefficient)
        return result

    def constant(self) -> Scalar:
        """Return the constant coefficient."""
        return self._coefficients[0]

    def degree(self) -> int:
        """Return the highest power of the polynomial."""
        return len(self._coefficients) - 1

    def __len__(self) -> int:
        return len(self._coefficients)

    def reset(self) -> None:
        """Set every coefficient to zero."""
        self._coefficients = [Scalar(0)] * len(self._coefficients)

    def __repr__(self) -> str:
        return f"Polynomial(degree={self.degree()})"


class Exponent:
    """A polynomial whose coefficients are group elements: F(X) = [a_0]B + ... + [a_t]B X^t."""

    __slots__ = ("_coefficients",)

    def __init__(self, coefficients: Iterable[Element]) -> None:
        coeffs = list(coefficients)
        if not coeffs:
            raise ValueError("polynomial: at least one coefficient is required")
        for coefficient in coeffs:
            if not isinstance(coefficient, Element):
                raise TypeError(
                    f"polynomial: expected Element coefficients, got {type(coefficient).__name__}"
                )
        self._coefficients = coeffs

    @property
    def coefficients(self) -> tuple[Element, ...]:
        """The coefficients, constant term first."""
        return tuple(self._coefficients)

    @classmethod
    def from_polynomial(cls, polynomial: Polynomial) -> Exponent:
        """Commit to every coefficient of polynomial: a_i becomes [a_i] B."""
        return cls(Element.base_mult(c) for c in polynomial.coefficients)

    def evaluate(self, index: Scalar) -> Element:
        """Evaluate at a non-zero index; use constant() for index zero."""
        if index.is_zero():
            raise ValueError("polynomial: use constant() to evaluate at zero")
        powers = []
        power = Scalar(1)
        for _ in self._coefficients:
            powers.append(power)
            power = power * index
        return Element.multi_scalar_mult(powers, self._coefficients)

    def evaluate_multi(self, indices: Iterable[int]) -> dict[int, Element]:
        """Evaluate at each party ID, returning a mapping from ID to result."""
        return {party_id: self.evaluate(id_scalar(party_id)) for party_id in indices}

    def degree(self) -> int:
        """Return the degree t of the polynomial."""
        return len(self._coefficients) - 1

    def add(self, other: Exponent) -> None:
        """Add other to this polynomial coefficient-wise, in place."""
        if len(self._coefficients) != len(other._coefficients):
            raise ValueError("polynomial: q is not the same length as p")
        self._coefficients = [a + b for a, b in zip(self._coefficients, other._coefficients)]

    def constant(self) -> Element:
        """Return the constant coefficient."""
        return self._coefficients[0]

    def copy(self) -> Exponent:
        """Return an independent copy."""
        return Exponent(self._coefficients)

    def reset(self) -> None:
        """Set every coefficient to the identity element."""
        self._coefficients = [Element.identity()] * len(self._coefficients)

    def to_bytes(self) -> bytes:
        """Encode as the two-byte degree followed by each coefficient."""
        return id_to_bytes(self.degree()) + b"".join(bytes(c) for c in self._coefficients)

    @classmethod
    def from_bytes(cls, data: bytes) -> Exponent:
        """Decode the encoding produced by to_bytes."""
        data = bytes(data)
        degree = id_from_bytes(data)
        remaining = data[ID_BYTE_SIZE:]
        if len(remaining) % ELEMENT_SIZE:
            raise ValueError("polynomial: length of data is wrong")
        if len(remaining) != (degree + 1) * ELEMENT_SIZE:
            raise ValueError("polynomial: wrong number of coefficients embedded")
        chunks = (
            remaining[start : start + ELEMENT_SIZE]
            for start in range(0, len(remaining), ELEMENT_SIZE)
        )
        return cls(Element.from_canonical_bytes(chunk) for chunk in chunks)

    def size(self) -> int:
        """Return the number of bytes in the encoding."""
        return ID_BYTE_SIZE + ELEMENT_SIZE * len(self._coefficients)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Exponent):
            return NotImplemented
        if len(self._coefficients) != len(other._coefficients):
            return False
        return all(a == b for a, b in zip(self._coefficients, other._coefficients))

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Exponent(degree={self.degree()})"


def sum_exponents(polynomials: Sequence[Exponent]) -> Exponent:
    """Return the sum of the given polynomials, which must share one degree."""
    polynomials = list(polynomials)
    if not polynomials:
        raise ValueError("polynomial: nothing to sum")
    summed = polynomials[0].copy()
    for polynomial in polynomials[1:]:
        summed.add(polynomial)
    return summed