"""Scalars of the ristretto255 group: integers modulo the prime group order."""

from __future__ import annotations

import base64
import binascii
import secrets

ORDER = 2**252 + 27742317777372353535851937790883648493
"""The prime order l of the ristretto255 group."""

SCALAR_SIZE = 32
UNIFORM_SIZE = 64
_UINT32_LIMIT = 2**32


class Scalar:
    """An immutable integer modulo the ristretto255 group order."""

    __slots__ = ("_value",)

    def __init__(self, value: int = 0) -> None:
        self._value = int(value) % ORDER

    @property
    def value(self) -> int:
        """The reduced integer value, in [0, l)."""
        return self._value

    @classmethod
    def from_int(cls, value: int) -> Scalar:
        """Return the scalar for an unsigned 32-bit integer."""
        if not 0 <= value < _UINT32_LIMIT:
            raise ValueError(f"scalar: {value} is not an unsigned 32-bit integer")
        return cls(value)

    @classmethod
    def random(cls) -> Scalar:
        """Return a uniformly distributed scalar from the system's secure source."""
        return cls.from_uniform_bytes(secrets.token_bytes(UNIFORM_SIZE))

    @classmethod
    def from_canonical_bytes(cls, data: bytes) -> Scalar:
        """Decode a 32-byte little-endian canonical encoding."""
        data = bytes(data)
        if len(data) != SCALAR_SIZE:
            raise ValueError("ristretto255: invalid scalar length")
        value = int.from_bytes(data, "little")
        if value >= ORDER:
            raise ValueError("ristretto255: invalid scalar encoding")
        return cls(value)

    @classmethod
    def from_uniform_bytes(cls, data: bytes) -> Scalar:
        """Reduce 64 uniformly random bytes, read little-endian, modulo l."""
        data = bytes(data)
        if len(data) != UNIFORM_SIZE:
            raise ValueError("ristretto255: SetUniformBytes input is not 64 bytes long")
        return cls(int.from_bytes(data, "little"))

    @classmethod
    def from_bytes_with_clamping(cls, data: bytes) -> Scalar:
        """Apply RFC 8032 clamping to 32 bytes and reduce the result modulo l."""
        data = bytes(data)
        if len(data) != SCALAR_SIZE:
            raise ValueError("edwards25519: invalid SetBytesWithClamping input length")
        clamped = bytearray(data)
        clamped[0] &= 248
        clamped[31] &= 63
        clamped[31] |= 64
        return cls.from_uniform_bytes(bytes(clamped) + bytes(SCALAR_SIZE))

    @classmethod
    def from_text(cls, text: str | bytes) -> Scalar:
        """Decode the standard base64 text form of a canonical encoding."""
        try:
            raw = base64.b64decode(text, validate=True)
        except binascii.Error as exc:
            raise ValueError(f"scalar: invalid base64 text: {exc}") from exc
        return cls.from_canonical_bytes(raw)

    def __add__(self, other: object) -> Scalar:
        if not isinstance(other, Scalar):
            return NotImplemented
        return Scalar(self._value + other._value)

    def __sub__(self, other: object) -> Scalar:
        if not isinstance(other, Scalar):
            return NotImplemented
        return Scalar(self._value - other._value)

    def __mul__(self, other: object) -> Scalar:
        if not isinstance(other, Scalar):
            return NotImplemented
        return Scalar(self._value * other._value)

    def __neg__(self) -> Scalar:
        return Scalar(-self._value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Scalar):
            return NotImplemented
        return secrets.compare_digest(bytes(self), bytes(other))

    def __hash__(self) -> int:
        return hash((Scalar, self._value))

    def __bytes__(self) -> bytes:
        return self._value.to_bytes(SCALAR_SIZE, "little")

    def __str__(self) -> str:
        return self.to_text()

    def __repr__(self) -> str:
        return f"Scalar({self._value})"

    def invert(self) -> Scalar:
        """Return the multiplicative inverse; the inverse of zero is zero."""
        return Scalar(pow(self._value, ORDER - 2, ORDER))

    def multiply_add(self, y: Scalar, z: Scalar) -> Scalar:
        """Return self * y + z."""
        return Scalar(self._value * y._value + z._value)

    def is_zero(self) -> bool:
        """Return True if this scalar is zero."""
        return self._value == 0

    def to_text(self) -> str:
        """Return the standard base64 encoding of the canonical bytes."""
        return base64.b64encode(bytes(self)).decode("ascii")