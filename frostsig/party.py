"""Party identifiers, ordered identifier sets and Lagrange coefficients."""

from __future__ import annotations

import bisect
import random
import re
from collections.abc import Iterable, Iterator

from frostsig.scalar import Scalar

ID_BYTE_SIZE = 2
"""Number of bytes in the encoding of an ID or a size."""

MAX_ID = 0xFFFF
_DECIMAL = re.compile(r"[0-9]+")


def _check_id(party_id: int) -> int:
    if not isinstance(party_id, int) or not 0 <= party_id <= MAX_ID:
        raise ValueError(f"party: {party_id!r} is not a 16-bit party ID")
    return party_id


class IDSlice:
    """A sorted, immutable sequence of party IDs."""

    __slots__ = ("_ids",)

    def __init__(self, ids: Iterable[int] = ()) -> None:
        self._ids = tuple(sorted(_check_id(i) for i in ids))

    def __contains__(self, party_id: object) -> bool:
        index = bisect.bisect_left(self._ids, party_id)
        return index < len(self._ids) and self._ids[index] == party_id

    def __iter__(self) -> Iterator[int]:
        return iter(self._ids)

    def __len__(self) -> int:
        return len(self._ids)

    def __getitem__(self, index):
        if isinstance(index, slice):
            return IDSlice(self._ids[index])
        return self._ids[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, IDSlice):
            return NotImplemented
        return self._ids == other._ids

    def __hash__(self) -> int:
        return hash(self._ids)

    def __repr__(self) -> str:
        return f"IDSlice({list(self._ids)})"

    def is_subset_of(self, other: IDSlice) -> bool:
        """Return True if every ID here is also in other."""
        return all(party_id in other for party_id in self._ids)


def id_scalar(party_id: int) -> Scalar:
    """Return the scalar whose value is the ID."""
    return Scalar.from_int(_check_id(party_id))


def id_to_bytes(party_id: int) -> bytes:
    """Encode an ID as two big-endian bytes."""
    return _check_id(party_id).to_bytes(ID_BYTE_SIZE, "big")


def id_from_bytes(data: bytes) -> int:
    """Read an ID from the first two bytes of data."""
    if len(data) < ID_BYTE_SIZE:
        raise ValueError("party: data is not long enough to hold an ID")
    return int.from_bytes(bytes(data[:ID_BYTE_SIZE]), "big")


def id_from_text(text: str | bytes) -> int:
    """Parse the base-10 text form of an ID."""
    if isinstance(text, (bytes, bytearray)):
        text = bytes(text).decode("ascii", errors="replace")
    if not _DECIMAL.fullmatch(text):
        raise ValueError(f"party: invalid ID text {text!r}")
    value = int(text)
    if value > MAX_ID:
        raise ValueError(f"party: ID {text} overflows")
    return value


def random_id() -> int:
    """Return a pseudo-random non-zero ID."""
    return random.randint(0, MAX_ID) or 1


def lagrange(party_id: int, party_ids: Iterable[int]) -> Scalar:
    """Return the Lagrange coefficient of party_id over party_ids, at x = 0."""
    if party_id == 0:
        raise ValueError("party: Lagrange: id was 0 (invalid)")
    x_j = id_scalar(party_id)
    numerator = Scalar(1)
    denominator = Scalar(1)
    found = False
    for other in party_ids:
        if other == party_id:
            found = True
            continue
        x_m = id_scalar(other)
        numerator = numerator * x_m
        denominator = denominator * (x_m - x_j)
    if not found:
        raise ValueError("party: Lagrange: party IDs do not contain id")
    if denominator.is_zero():
        raise ValueError("party: Lagrange: denominator was 0")
    return numerator * denominator.invert()