"""Threshold signing rounds producing Ed25519-compatible signatures."""

from __future__ import annotations

import hashlib
from collections.abc import Iterable
from dataclasses import dataclass, field

from frostsig.eddsa import Public, PublicKey, SecretShare, Signature, compute_challenge
from frostsig.messages import Message, MessageType, new_sign1, new_sign2
from frostsig.party import IDSlice, id_to_bytes, lagrange
from frostsig.ristretto import Element
from frostsig.scalar import Scalar
from frostsig.state import ProtocolError, Round

HASH_DOMAIN_SEPARATION = b"FROST-SHA512"
ERR_SIGNATURE_SHARE = "signature share is invalid"
ERR_SIGNATURE = "full signature is invalid"

_ACCEPTED_TYPES = (MessageType.NONE, MessageType.SIGN1, MessageType.SIGN2)


@dataclass
class SignOutput:
    """The result of signing, filled in when the protocol completes."""

    signature: Signature | None = None


@dataclass
class _Signer:
    """Everything kept about one co-signer during a signing session."""

    # Additive share of the group key: the public share times the Lagrange coefficient.
    public: Element
    di: Element = field(default_factory=Element.identity)
    ei: Element = field(default_factory=Element.identity)
    ri: Element = field(default_factory=Element.identity)
    pi: Scalar = field(default_factory=Scalar)
    zi: Scalar = field(default_factory=Scalar)

    def reset(self) -> None:
        self.di = Element.identity()
        self.ei = Element.identity()
        self.ri = Element.identity()
        self.pi = Scalar(0)
        self.zi = Scalar(0)


@dataclass
class _SignContext:
    message: bytes
    group_key: PublicKey
    secret_key_share: Scalar
    parties: dict[int, _Signer]
    output: SignOutput | None
    d: Scalar = field(default_factory=Scalar)
    e: Scalar = field(default_factory=Scalar)
    c: Scalar = field(default_factory=Scalar)
    r: Element = field(default_factory=Element.identity)


class _SignRound(Round):
    def __init__(self, self_id: int, party_ids: IDSlice, context: _SignContext) -> None:
        super().__init__(self_id, party_ids)
        self._ctx = context

    def _advance(self, kind: type[_SignRound]) -> _SignRound:
        return kind(self.self_id, self.party_ids, self._ctx)

    def accepted_message_types(self) -> list[MessageType]:
        return list(_ACCEPTED_TYPES)

    def reset(self) -> None:
        ctx = self._ctx
        ctx.message = b""
        ctx.secret_key_share = Scalar(0)
        ctx.d = Scalar(0)
        ctx.e = Scalar(0)
        ctx.c = Scalar(0)
        ctx.r = Element.identity()
        for signer in ctx.parties.values():
            signer.reset()
        ctx.parties.clear()
        ctx.output = None


class _Round0(_SignRound):
    def generate_messages(self) -> list[Message]:
        ctx = self._ctx
        me = ctx.parties[self.self_id]
        ctx.d = Scalar.random()
        me.di = Element.base_mult(ctx.d)
        ctx.e = Scalar.random()
        me.ei = Element.base_mult(ctx.e)
        return [new_sign1(self.self_id, me.di, me.ei)]

    def next_round(self) -> Round:
        return self._advance(_Round1)


class _Round1(_SignRound):
    def process_message(self, msg: Message | None) -> None:
        sender = msg.sender
        content = msg.sign1
        if content is None:
            raise ProtocolError(sender, "message carries no SIGN1 content")
        identity = Element.identity()
        if content.di == identity or content.ei == identity:
            raise ProtocolError(sender, "commitment Ei or Di was the identity")
        signer = self._ctx.parties[sender]
        signer.di = content.di
        signer.ei = content.ei

    def _compute_binding_factors(self) -> None:
        # rho_i = SHA-512("FROST-SHA512" || i || SHA-512(M) || B),
        # with B the concatenation of (j || D_j || E_j) over sorted signers j.
        ctx = self._ctx
        message_hash = hashlib.sha512(ctx.message).digest()
        commitments = b"".join(
            id_to_bytes(party_id) + bytes(ctx.parties[party_id].di) + bytes(ctx.parties[party_id].ei)
            for party_id in self.party_ids
        )
        for party_id in self.party_ids:
            digest = hashlib.sha512(
                HASH_DOMAIN_SEPARATION + id_to_bytes(party_id) + message_hash + commitments
            ).digest()
            ctx.parties[party_id].pi = Scalar.from_uniform_bytes(digest)

    def generate_messages(self) -> list[Message]:
        ctx = self._ctx
        self._compute_binding_factors()

        ctx.r = Element.identity()
        for signer in ctx.parties.values():
            signer.ri = signer.ei * signer.pi + signer.di
            ctx.r = ctx.r + signer.ri

        ctx.c = compute_challenge(ctx.r, ctx.group_key, ctx.message)

        # z = d + e * rho + s * c, where s already includes the Lagrange coefficient.
        me = ctx.parties[self.self_id]
        me.zi = ctx.e.multiply_add(me.pi, ctx.secret_key_share * ctx.c) + ctx.d
        return [new_sign2(self.self_id, me.zi)]

    def next_round(self) -> Round:
        return self._advance(_Round2)


class _Round2(_SignRound):
    def process_message(self, msg: Message | None) -> None:
        sender = msg.sender
        content = msg.sign2
        if content is None:
            raise ProtocolError(sender, "message carries no SIGN2 content")
        ctx = self._ctx
        signer = ctx.parties[sender]
        r_prime = Element.double_scalar_base_mult(ctx.c, -signer.public, content.zi)
        if r_prime != signer.ri:
            raise ProtocolError(sender, ERR_SIGNATURE_SHARE)
        signer.zi = content.zi

    def generate_messages(self) -> list[Message]:
        ctx = self._ctx
        total = Scalar(0)
        for signer in ctx.parties.values():
            total = total + signer.zi
        signature = Signature(r=ctx.r, s=total)
        if not ctx.group_key.verify(ctx.message, signature):
            raise ProtocolError(0, ERR_SIGNATURE)
        ctx.output.signature = signature
        return []

    def next_round(self) -> None:
        return None


def new_round(
    party_ids: Iterable[int], secret: SecretShare, shares: Public, message: bytes
) -> tuple[Round, SignOutput]:
    """Return the first signing round and the output it will fill in."""
    if not isinstance(party_ids, IDSlice):
        party_ids = IDSlice(party_ids)
    if secret.party_id not in party_ids:
        raise ValueError("base.NewRound: owner of SecretShare is not contained in partyIDs")
    if not party_ids.is_subset_of(shares.party_ids):
        raise ValueError("base.NewRound: not all parties of partyIDs are contained in shares")

    parties: dict[int, _Signer] = {}
    for party_id in party_ids:
        if party_id == 0:
            raise ValueError("base.NewRound: id 0 is not valid")
        coefficient = lagrange(party_id, party_ids)
        parties[party_id] = _Signer(public=shares.shares[party_id] * coefficient)

    # Normalise the secret share so the sharing can be treated as additive.
    secret_key_share = lagrange(secret.party_id, party_ids) * secret.secret

    output = SignOutput()
    context = _SignContext(
        message=bytes(message),
        group_key=shares.group_key,
        secret_key_share=secret_key_share,
        parties=parties,
        output=output,
    )
    return _Round0(secret.party_id, party_ids, context), output