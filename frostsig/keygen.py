"""Distributed key generation rounds for threshold Ed25519 keys."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from frostsig.eddsa import Public, PublicKey, SecretShare
from frostsig.messages import Message, MessageType, new_keygen1, new_keygen2
from frostsig.party import IDSlice, id_scalar
from frostsig.polynomial import Exponent, Polynomial
from frostsig.ristretto import Element
from frostsig.scalar import Scalar
from frostsig.state import ProtocolError, Round
from frostsig.zk import CONTEXT_SIZE, SchnorrProof

_ACCEPTED_TYPES = (MessageType.NONE, MessageType.KEYGEN1, MessageType.KEYGEN2)


@dataclass
class KeygenOutput:
    """The result of key generation, filled in when the protocol completes."""

    public: Public | None = None
    secret_key: SecretShare | None = None


@dataclass
class _KeygenContext:
    threshold: int
    output: KeygenOutput | None
    secret: Scalar = field(default_factory=Scalar)
    polynomial: Polynomial | None = None
    commitments_sum: Exponent | None = None
    commitments: dict[int, Exponent] = field(default_factory=dict)


def _context_bytes() -> bytes:
    return bytes(CONTEXT_SIZE)


class _KeygenRound(Round):
    def __init__(self, self_id: int, party_ids: IDSlice, context: _KeygenContext) -> None:
        super().__init__(self_id, party_ids)
        self._ctx = context

    def _advance(self, kind: type[_KeygenRound]) -> _KeygenRound:
        return kind(self.self_id, self.party_ids, self._ctx)

    def accepted_message_types(self) -> list[MessageType]:
        return list(_ACCEPTED_TYPES)

    def reset(self) -> None:
        ctx = self._ctx
        ctx.secret = Scalar(0)
        if ctx.polynomial is not None:
            ctx.polynomial.reset()
        if ctx.commitments_sum is not None:
            ctx.commitments_sum.reset()
        for commitment in ctx.commitments.values():
            commitment.reset()
        ctx.output = None


class _Round0(_KeygenRound):
    def generate_messages(self) -> list[Message]:
        ctx = self._ctx
        constant = Scalar.random()
        ctx.polynomial = Polynomial.random(ctx.threshold, constant)
        ctx.commitments_sum = Exponent.from_polynomial(ctx.polynomial)
        proof = SchnorrProof.prove(
            self.self_id, ctx.commitments_sum.constant(), _context_bytes(), constant
        )
        # From here on, secret accumulates the shares addressed to us.
        ctx.secret = ctx.polynomial.evaluate(id_scalar(self.self_id))
        return [new_keygen1(self.self_id, proof, ctx.commitments_sum.copy())]

    def next_round(self) -> Round:
        return self._advance(_Round1)


class _Round1(_KeygenRound):
    def process_message(self, msg: Message | None) -> None:
        sender = msg.sender
        content = msg.keygen1
        if content is None:
            raise ProtocolError(sender, "message carries no KEYGEN1 content")
        ctx = self._ctx
        if not content.proof.verify(sender, content.commitments.constant(), _context_bytes()):
            raise ProtocolError(sender, "ZK Schnorr failed")
        if content.commitments.degree() != ctx.threshold:
            raise ProtocolError(sender, "commitments have the wrong degree")
        commitments = content.commitments.copy()
        ctx.commitments[sender] = commitments
        ctx.commitments_sum.add(commitments)

    def generate_messages(self) -> list[Message]:
        ctx = self._ctx
        outgoing = [
            new_keygen2(self.self_id, party_id, ctx.polynomial.evaluate(id_scalar(party_id)))
            for party_id in self.party_ids
            if party_id != self.self_id
        ]
        ctx.polynomial.reset()
        return outgoing

    def next_round(self) -> Round:
        return self._advance(_Round2)


class _Round2(_KeygenRound):
    def process_message(self, msg: Message | None) -> None:
        sender = msg.sender
        content = msg.keygen2
        if content is None:
            raise ProtocolError(sender, "message carries no KEYGEN2 content")
        ctx = self._ctx
        expected = ctx.commitments[sender].evaluate(id_scalar(self.self_id))
        if Element.base_mult(content.share) != expected:
            raise ProtocolError(sender, "VSS failed to validate")
        ctx.secret = ctx.secret + content.share

    def generate_messages(self) -> list[Message]:
        ctx = self._ctx
        shares = {
            party_id: ctx.commitments_sum.evaluate(id_scalar(party_id))
            for party_id in self.party_ids
        }
        ctx.output.public = Public(
            party_ids=self.party_ids,
            threshold=ctx.threshold,
            shares=shares,
            group_key=PublicKey(ctx.commitments_sum.constant()),
        )
        ctx.output.secret_key = SecretShare(self.self_id, ctx.secret)
        return []

    def next_round(self) -> None:
        return None


def new_round(
    self_id: int, party_ids: Iterable[int], threshold: int
) -> tuple[Round, KeygenOutput]:
    """Return the first key generation round and the output it will fill in.

    threshold is the number of tolerated corruptions: T+1 parties can sign.
    """
    if not isinstance(party_ids, IDSlice):
        party_ids = IDSlice(party_ids)
    n = len(party_ids)
    if threshold < 1:
        raise ValueError("threshold must be at least 1, or a minimum of T+1=2 signers")
    if threshold > n - 1:
        raise ValueError("threshold must be at most N-1, or a maximum of T+1=N signers")
    output = KeygenOutput()
    context = _KeygenContext(threshold=threshold, output=output)
    return _Round0(self_id, party_ids, context), output