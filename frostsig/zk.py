"""Non-interactive Schnorr proofs of knowledge of a discrete logarithm."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass

from frostsig.party import id_to_bytes
from frostsig.ristretto import Element
from frostsig.scalar import SCALAR_SIZE, Scalar

CONTEXT_SIZE = 32
PROOF_SIZE = 2 * SCALAR_SIZE


def _challenge(party_id: int, context: bytes, public: Element, commitment: Element) -> Scalar:
    """Return H(ID || context || public || commitment) as a scalar."""
    context = bytes(context)
    if len(context) < CONTEXT_SIZE:
        raise ValueError(f"zk: context must be at least {CONTEXT_SIZE} bytes")
    digest = hashlib.sha512(
        id_to_bytes(party_id)
        + context[:CONTEXT_SIZE]
        + bytes(public)
        + bytes(commitment)
    ).digest()
    return Scalar.from_uniform_bytes(digest)


@dataclass(frozen=True)
class SchnorrProof:
    """A proof (s, r) that the prover knows x with public = [x] B.

    s is the challenge H(ID, context, public, [k] B) and r = k + x * s.
    """

    s: Scalar
    r: Scalar

    @classmethod
    def prove(
        cls, party_id: int, public: Element, context: bytes, private: Scalar
    ) -> SchnorrProof:
        """Prove knowledge of private, the discrete logarithm of public."""
        nonce = Scalar.random()
        commitment = Element.base_mult(nonce)
        challenge = _challenge(party_id, context, public, commitment)
        return cls(s=challenge, r=private.multiply_add(challenge, nonce))

    def verify(self, party_id: int, public: Element, context: bytes) -> bool:
        """Return True if the proof is valid for this party, public point and context."""
        commitment = Element.double_scalar_base_mult(self.s, -public, self.r)
        return _challenge(party_id, context, public, commitment) == self.s

    def to_bytes(self) -> bytes:
        """Encode the proof as s followed by r."""
        return bytes(self.s) + bytes(self.r)

    @classmethod
    def from_bytes(cls, data: bytes) -> SchnorrProof:
        """Decode a proof; data must hold exactly two canonical scalars."""
        data = bytes(data)
        if len(data) < PROOF_SIZE:
            raise ValueError("zk: length is wrong")
        s = Scalar.from_canonical_bytes(data[:SCALAR_SIZE])
        r = Scalar.from_canonical_bytes(data[SCALAR_SIZE:])
        return cls(s=s, r=r)

    def size(self) -> int:
        """Return the number of bytes in the encoding."""
        return PROOF_SIZE