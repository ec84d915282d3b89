"""The ristretto255 prime-order group, built on the edwards25519 curve."""

from __future__ import annotations

import base64
import binascii
import functools
from collections.abc import Sequence

from frostsig.scalar import Scalar

ELEMENT_SIZE = 32
UNIFORM_SIZE = 64

_P = 2**255 - 19
_FIELD_MASK = (1 << 255) - 1

_D = 37095705934669439343138083508754565189542113879843219016388785533085940283555
_D2 = (2 * _D) % _P
_SQRT_M1 = 19681161376707505956807079304988542015446066515923890162744021073123829784752
_SQRT_AD_MINUS_ONE = (
    25063068953384623474111414158702152701244531502492656460079210482610430750235
)
_INVSQRT_A_MINUS_D = (
    54469307008909316920995813868745141605393597292927456921205312896311721017578
)
_ONE_MINUS_D_SQ = (
    1159843021668779879193775521855586647937357759715417654439879720876111806838
)
_D_MINUS_ONE_SQ = (
    40440834346308536858101042469323190826248399146238708352240133220865137265952
)

_BASE_X = 15112221349535400772501151409588531511454012693041857206046113283949847762202
_BASE_Y = 46316835694926478169428394003475163141307993866256225615783033603165251855960

# Points are kept as extended twisted Edwards coordinates (X, Y, Z, T).
_IDENTITY = (0, 1, 1, 0)
_BASE = (_BASE_X, _BASE_Y, 1, _BASE_X * _BASE_Y % _P)

_WINDOW_SHIFTS = range(252, -1, -4)


class InvalidEncodingError(ValueError):
    """Raised when bytes are not a canonical ristretto255 encoding."""


def _is_negative(x: int) -> bool:
    return (x % _P) & 1 == 1


def _abs(x: int) -> int:
    x %= _P
    return (-x) % _P if x & 1 else x


def _sqrt_ratio_m1(u: int, v: int) -> tuple[bool, int]:
    u %= _P
    v %= _P
    v3 = v * v % _P * v % _P
    v7 = v3 * v3 % _P * v % _P
    r = u * v3 % _P * pow(u * v7 % _P, (_P - 5) // 8, _P) % _P
    check = v * r % _P * r % _P
    correct_sign = check == u
    flipped_sign = check == (-u) % _P
    flipped_sign_i = check == (-u * _SQRT_M1) % _P
    if flipped_sign or flipped_sign_i:
        r = r * _SQRT_M1 % _P
    return correct_sign or flipped_sign, _abs(r)


def _add(p: tuple, q: tuple) -> tuple:
    x1, y1, z1, t1 = p
    x2, y2, z2, t2 = q
    a = (y1 - x1) * (y2 - x2) % _P
    b = (y1 + x1) * (y2 + x2) % _P
    c = t1 * _D2 % _P * t2 % _P
    d = 2 * z1 * z2 % _P
    e = b - a
    f = d - c
    g = d + c
    h = b + a
    return (e * f % _P, g * h % _P, f * g % _P, e * h % _P)


def _double(p: tuple) -> tuple:
    x1, y1, z1, _ = p
    a = x1 * x1 % _P
    b = y1 * y1 % _P
    c = 2 * z1 * z1 % _P
    h = a + b
    e = h - (x1 + y1) * (x1 + y1) % _P
    g = a - b
    f = c + g
    return (e * f % _P, g * h % _P, f * g % _P, e * h % _P)


def _negate(p: tuple) -> tuple:
    x, y, z, t = p
    return ((-x) % _P, y, z, (-t) % _P)


def _window_table(point: tuple) -> list[tuple]:
    table = [_IDENTITY, point]
    for _ in range(14):
        table.append(_add(table[-1], point))
    return table


def _multi_mult(pairs: Sequence[tuple[int, tuple]]) -> tuple:
    tables = [(k, _window_table(point)) for k, point in pairs if k]
    result = _IDENTITY
    started = False
    for shift in _WINDOW_SHIFTS:
        if started:
            for _ in range(4):
                result = _double(result)
        for k, table in tables:
            nibble = (k >> shift) & 15
            if nibble:
                result = _add(result, table[nibble])
                started = True
    return result


@functools.lru_cache(maxsize=None)
def _base_table() -> tuple[tuple[tuple, ...], ...]:
    rows = []
    point = _BASE
    for _ in range(64):
        row = _window_table(point)
        rows.append(tuple(row))
        point = _add(row[-1], point)
    return tuple(rows)


def _base_mult(k: int) -> tuple:
    result = _IDENTITY
    for index, row in enumerate(_base_table()):
        nibble = (k >> (4 * index)) & 15
        if nibble:
            result = _add(result, row[nibble])
    return result


def _field_from_bytes(data: bytes) -> int:
    return (int.from_bytes(data, "little") & _FIELD_MASK) % _P


def _map_to_point(t: int) -> tuple:
    r = _SQRT_M1 * t % _P * t % _P
    u = (r + 1) * _ONE_MINUS_D_SQ % _P
    c = _P - 1
    v = (c - r * _D) * (r + _D) % _P
    was_square, s = _sqrt_ratio_m1(u, v)
    s_prime = (-_abs(s * t)) % _P
    if not was_square:
        s = s_prime
        c = r
    n = (c * (r - 1) % _P * _D_MINUS_ONE_SQ - v) % _P
    s2 = s * s % _P
    w0 = 2 * s * v % _P
    w1 = n * _SQRT_AD_MINUS_ONE % _P
    w2 = (1 - s2) % _P
    w3 = (1 + s2) % _P
    return (w0 * w3 % _P, w2 * w1 % _P, w1 * w3 % _P, w0 * w2 % _P)


def _scalar_value(scalar: Scalar) -> int:
    if not isinstance(scalar, Scalar):
        raise TypeError(f"expected a Scalar, got {type(scalar).__name__}")
    return scalar.value


class Element:
    """An immutable element of the ristretto255 group."""

    __slots__ = ("_point",)

    def __init__(self, coordinates: tuple = _IDENTITY) -> None:
        self._point = tuple(c % _P for c in coordinates)

    @classmethod
    def identity(cls) -> Element:
        """Return the identity element."""
        return cls(_IDENTITY)

    @classmethod
    def generator(cls) -> Element:
        """Return the canonical generator."""
        return cls(_BASE)

    @classmethod
    def from_canonical_bytes(cls, data: bytes) -> Element:
        """Decode a 32-byte canonical encoding, raising on any invalid input."""
        data = bytes(data)
        if len(data) != ELEMENT_SIZE:
            raise InvalidEncodingError("ristretto: invalid element encoding")
        s = int.from_bytes(data, "little")
        if s >= _P or s & 1:
            raise InvalidEncodingError("ristretto: invalid element encoding")
        ss = s * s % _P
        u1 = (1 - ss) % _P
        u2 = (1 + ss) % _P
        u2_sqr = u2 * u2 % _P
        v = (-(_D * u1 % _P * u1) - u2_sqr) % _P
        was_square, invsqrt = _sqrt_ratio_m1(1, v * u2_sqr)
        den_x = invsqrt * u2 % _P
        den_y = invsqrt * den_x % _P * v % _P
        x = _abs(2 * s * den_x)
        y = u1 * den_y % _P
        t = x * y % _P
        if not was_square or _is_negative(t) or y == 0:
            raise InvalidEncodingError("ristretto: invalid element encoding")
        return cls((x, y, 1, t))

    @classmethod
    def from_uniform_bytes(cls, data: bytes) -> Element:
        """Map 64 uniformly random bytes to a uniformly distributed element."""
        data = bytes(data)
        if len(data) != UNIFORM_SIZE:
            raise ValueError("ristretto: SetUniformBytes input is not 64 bytes long")
        first = _map_to_point(_field_from_bytes(data[:32]))
        second = _map_to_point(_field_from_bytes(data[32:]))
        return cls(_add(first, second))

    @classmethod
    def from_text(cls, text: str | bytes) -> Element:
        """Decode the standard base64 text form of a canonical encoding."""
        try:
            raw = base64.b64decode(text, validate=True)
        except binascii.Error as exc:
            raise InvalidEncodingError(f"ristretto: invalid base64 text: {exc}") from exc
        return cls.from_canonical_bytes(raw)

    @classmethod
    def base_mult(cls, scalar: Scalar) -> Element:
        """Return scalar * B, where B is the canonical generator."""
        return cls(_base_mult(_scalar_value(scalar)))

    @classmethod
    def double_scalar_base_mult(cls, a: Scalar, point: Element, b: Scalar) -> Element:
        """Return a * point + b * B."""
        product = _multi_mult([(_scalar_value(a), point._point)])
        return cls(_add(product, _base_mult(_scalar_value(b))))

    @classmethod
    def multi_scalar_mult(
        cls, scalars: Sequence[Scalar], points: Sequence[Element]
    ) -> Element:
        """Return the sum of scalars[i] * points[i]; the sequences must match in length."""
        scalars = list(scalars)
        points = list(points)
        if len(scalars) != len(points):
            raise ValueError("ristretto: multi_scalar_mult invoked with mismatched lengths")
        pairs = [(_scalar_value(s), p._point) for s, p in zip(scalars, points)]
        return cls(_multi_mult(pairs))

    def __add__(self, other: object) -> Element:
        if not isinstance(other, Element):
            return NotImplemented
        return Element(_add(self._point, other._point))

    def __sub__(self, other: object) -> Element:
        if not isinstance(other, Element):
            return NotImplemented
        return Element(_add(self._point, _negate(other._point)))

    def __neg__(self) -> Element:
        return Element(_negate(self._point))

    def __mul__(self, scalar: object) -> Element:
        if not isinstance(scalar, Scalar):
            return NotImplemented
        return Element(_multi_mult([(scalar.value, self._point)]))

    def __rmul__(self, scalar: object) -> Element:
        return self.__mul__(scalar)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Element):
            return NotImplemented
        x1, y1, _, _ = self._point
        x2, y2, _, _ = other._point
        return (x1 * y2 - y1 * x2) % _P == 0 or (y1 * y2 - x1 * x2) % _P == 0

    def __hash__(self) -> int:
        return hash((Element, bytes(self)))

    def __bytes__(self) -> bytes:
        x0, y0, z0, t0 = self._point
        u1 = (z0 + y0) * (z0 - y0) % _P
        u2 = x0 * y0 % _P
        _, invsqrt = _sqrt_ratio_m1(1, u2 * u2 % _P * u1)
        den1 = invsqrt * u1 % _P
        den2 = invsqrt * u2 % _P
        z_inv = den1 * den2 % _P * t0 % _P
        if _is_negative(t0 * z_inv):
            x = y0 * _SQRT_M1 % _P
            y = x0 * _SQRT_M1 % _P
            den_inv = den1 * _INVSQRT_A_MINUS_D % _P
        else:
            x, y, den_inv = x0, y0, den2
        if _is_negative(x * z_inv):
            y = (-y) % _P
        s = _abs(den_inv * (z0 - y))
        return s.to_bytes(ELEMENT_SIZE, "little")

    def __str__(self) -> str:
        return self.to_text()

    def __repr__(self) -> str:
        return f"Element({bytes(self).hex()})"

    def to_text(self) -> str:
        """Return the standard base64 encoding of the canonical bytes."""
        return base64.b64encode(bytes(self)).decode("ascii")

    def bytes_ed25519(self) -> bytes:
        """Return the Ed25519 encoding of the underlying point, with the cofactor cleared."""
        point = self._point
        for _ in range(3):
            point = _double(point)
        eight_inverse = Scalar(8).invert().value
        x, y, z, _ = _multi_mult([(eight_inverse, point)])
        z_inv = pow(z, _P - 2, _P)
        affine_x = x * z_inv % _P
        affine_y = y * z_inv % _P
        encoded = affine_y | ((affine_x & 1) << 255)
        return encoded.to_bytes(ELEMENT_SIZE, "little")