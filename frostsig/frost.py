"""Entry points that set up the key generation and signing protocols."""

from __future__ import annotations

from collections.abc import Iterable

from frostsig import keygen, sign
from frostsig.eddsa import Public, SecretShare
from frostsig.keygen import KeygenOutput
from frostsig.sign import SignOutput
from frostsig.state import State


def new_keygen_state(
    self_id: int, party_ids: Iterable[int], threshold: int, timeout: float | None = None
) -> tuple[State, KeygenOutput]:
    """Return a State running key generation and the output it will fill in.

    The output is safe to use once State.wait_for_error() returns None.
    """
    round0, output = keygen.new_round(self_id, party_ids, threshold)
    return State(round0, timeout), output


def new_sign_state(
    party_ids: Iterable[int],
    secret: SecretShare,
    shares: Public,
    message: bytes,
    timeout: float | None = None,
) -> tuple[State, SignOutput]:
    """Return a State running the signing protocol and the output it will fill in.

    The output is safe to use once State.wait_for_error() returns None.
    """
    round0, output = sign.new_round(party_ids, secret, shares, message)
    return State(round0, timeout), output