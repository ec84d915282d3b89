"""Ed25519-compatible keys, key shares and signatures for threshold signing."""

from __future__ import annotations

import base64
import binascii
import hashlib
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from frostsig.party import ID_BYTE_SIZE, IDSlice, id_from_bytes, id_from_text, id_to_bytes, lagrange
from frostsig.ristretto import ELEMENT_SIZE, Element
from frostsig.scalar import SCALAR_SIZE, Scalar

SIGNATURE_SIZE = ELEMENT_SIZE + SCALAR_SIZE
SECRET_SHARE_SIZE = ID_BYTE_SIZE + SCALAR_SIZE


def compute_challenge(r: Element, group_key: PublicKey, message: bytes) -> Scalar:
    """Return H(R, A, M) as a scalar, with R and A in their Ed25519 encodings."""
    digest = hashlib.sha512(
        r.bytes_ed25519() + group_key.to_ed25519() + bytes(message)
    ).digest()
    return Scalar.from_uniform_bytes(digest)


@dataclass(frozen=True, eq=False)
class PublicKey:
    """A verification key for signatures made by the group."""

    point: Element

    def verify(self, message: bytes, signature: Signature) -> bool:
        """Return True if signature is valid for message under this key."""
        challenge = compute_challenge(signature.r, self, message)
        r_prime = Element.double_scalar_base_mult(challenge, -self.point, signature.s)
        return r_prime == signature.r

    def to_ed25519(self) -> bytes:
        """Return the 32-byte Ed25519 public key encoding."""
        return self.point.bytes_ed25519()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PublicKey):
            return NotImplemented
        return self.point == other.point

    def __hash__(self) -> int:
        return hash((PublicKey, bytes(self.point)))


@dataclass(frozen=True)
class Signature:
    """An EdDSA signature (R, S)."""

    r: Element
    s: Scalar

    def to_ed25519(self) -> bytes:
        """Return the 64-byte signature accepted by standard Ed25519 verifiers."""
        return self.r.bytes_ed25519() + bytes(self.s)

    def to_bytes(self) -> bytes:
        """Encode as the ristretto encoding of R followed by S."""
        return bytes(self.r) + bytes(self.s)

    @classmethod
    def from_bytes(cls, data: bytes) -> Signature:
        """Decode the encoding produced by to_bytes."""
        data = bytes(data)
        if len(data) < SIGNATURE_SIZE:
            raise ValueError("sig: invalid message")
        try:
            r = Element.from_canonical_bytes(data[:ELEMENT_SIZE])
        except ValueError as exc:
            raise ValueError(f"sig.R: {exc}") from exc
        try:
            s = Scalar.from_canonical_bytes(data[ELEMENT_SIZE:])
        except ValueError as exc:
            raise ValueError(f"sig.S: {exc}") from exc
        return cls(r=r, s=s)

    def size(self) -> int:
        """Return the number of bytes in the encoding."""
        return SIGNATURE_SIZE


@dataclass(frozen=True, eq=False)
class SecretShare:
    """A party's Shamir share of the group secret, with its public counterpart."""

    party_id: int
    secret: Scalar = field(repr=False)
    public: Element = field(init=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "public", Element.base_mult(self.secret))

    def to_bytes(self) -> bytes:
        """Encode as the two-byte ID followed by the secret scalar."""
        return id_to_bytes(self.party_id) + bytes(self.secret)

    @classmethod
    def from_bytes(cls, data: bytes) -> SecretShare:
        """Decode the encoding produced by to_bytes."""
        data = bytes(data)
        if len(data) != SECRET_SHARE_SIZE:
            raise ValueError("SecretShare: data is not the right size")
        party_id = id_from_bytes(data)
        return cls(party_id, Scalar.from_canonical_bytes(data[ID_BYTE_SIZE:]))

    def to_json_dict(self) -> dict[str, Any]:
        """Return a JSON-ready mapping with the ID and the base64 secret."""
        encoded = base64.b64encode(bytes(self.secret)).decode()
        return {"id": self.party_id, "secret": encoded}

    @classmethod
    def from_json_dict(cls, data: Mapping[str, Any]) -> SecretShare:
        """Build a share from the mapping produced by to_json_dict."""
        try:
            party_id = int(data["id"])
            raw = base64.b64decode(data["secret"], validate=True)
        except (KeyError, TypeError, ValueError, binascii.Error) as exc:
            raise ValueError(f"SecretShare: malformed JSON data: {exc}") from exc
        id_to_bytes(party_id)
        return cls(party_id, Scalar.from_canonical_bytes(raw))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SecretShare):
            return NotImplemented
        return self.party_id == other.party_id and self.secret == other.secret

    def __hash__(self) -> int:
        return hash((SecretShare, self.party_id, bytes(self.secret)))


def _compute_group_key(party_ids: IDSlice, shares: Mapping[int, Element]) -> PublicKey:
    coefficients = [lagrange(party_id, party_ids) for party_id in party_ids]
    points = [shares[party_id] for party_id in party_ids]
    return PublicKey(Element.multi_scalar_mult(coefficients, points))


@dataclass(eq=False)
class Public:
    """The public output of key generation: parties, threshold, key shares and group key."""

    party_ids: IDSlice
    threshold: int
    shares: dict[int, Element]
    group_key: PublicKey

    @classmethod
    def create(cls, shares: Mapping[int, Element], threshold: int) -> Public:
        """Build from public key shares, interpolating the group key."""
        shares = dict(shares)
        party_ids = IDSlice(shares)
        if threshold + 1 > len(party_ids):
            raise ValueError("PublicShares: Threshold should be < N - 1")
        return cls(
            party_ids=party_ids,
            threshold=threshold,
            shares=shares,
            group_key=_compute_group_key(party_ids, shares),
        )

    def to_json_dict(self) -> dict[str, Any]:
        """Return a JSON-ready mapping of threshold, group key and shares."""
        return {
            "t": self.threshold,
            "groupkey": self.group_key.point.to_text(),
            "shares": {
                str(party_id): self.shares[party_id].to_text() for party_id in self.party_ids
            },
        }

    @classmethod
    def from_json_dict(cls, data: Mapping[str, Any]) -> Public:
        """Build from the mapping produced by to_json_dict, checking the group key."""
        try:
            threshold = int(data["t"])
            group_key = PublicKey(Element.from_text(data["groupkey"]))
            shares = {
                id_from_text(key): Element.from_text(value)
                for key, value in data["shares"].items()
            }
        except (KeyError, TypeError, AttributeError) as exc:
            raise ValueError(f"PublicShares: malformed JSON data: {exc}") from exc
        public = cls.create(shares, threshold)
        if public.group_key != group_key:
            raise ValueError("PublicShares: inconsistent group key")
        return public

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Public):
            return NotImplemented
        if len(self.shares) != len(other.shares):
            return False
        if self.party_ids != other.party_ids or self.threshold != other.threshold:
            return False
        if self.group_key != other.group_key:
            return False
        return all(self.shares.get(i) == other.shares.get(i) for i in self.party_ids)

    __hash__ = None  # type: ignore[assignment]