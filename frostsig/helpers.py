"""Utilities for running all parties locally and for dealing keys in tests."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from frostsig.eddsa import Public, SecretShare
from frostsig.messages import Message
from frostsig.party import IDSlice, id_scalar
from frostsig.polynomial import Polynomial
from frostsig.scalar import Scalar
from frostsig.state import State


def new_party_slice(n: int) -> list[int]:
    """Return the party IDs 1, ..., n."""
    return list(range(1, n + 1))


def generate_set(n: int) -> IDSlice:
    """Return the sorted set of party IDs 1, ..., n."""
    return IDSlice(new_party_slice(n))


def party_routine(incoming: Iterable[bytes] | None, state: State) -> list[bytes]:
    """Feed encoded messages to state, run it, and return its encoded output.

    Raises the protocol's error if it aborted.
    """
    for data in incoming or ():
        try:
            msg = Message.from_bytes(data)
        except ValueError as exc:
            raise ValueError(f"failed to unmarshal message: {exc}") from exc
        try:
            state.handle_message(msg)
        except ValueError as exc:
            raise ValueError(f"failed to handle message: {exc}") from exc
    out = [msg.to_bytes() for msg in state.process_all()]
    if state.is_finished():
        error = state.wait_for_error()
        if error is not None:
            raise error
    return out


def generate_secrets(
    party_ids: Iterable[int], threshold: int
) -> tuple[Scalar, dict[int, SecretShare]]:
    """Deal a random secret into Shamir shares of the given threshold."""
    if not isinstance(party_ids, IDSlice):
        party_ids = IDSlice(party_ids)
    if threshold >= len(party_ids):
        raise ValueError("threshold must be at most the size of set minus 1")
    secret = Scalar.random()
    polynomial = Polynomial.random(threshold, secret)
    shares = {
        party_id: SecretShare(party_id, polynomial.evaluate(id_scalar(party_id)))
        for party_id in party_ids
    }
    return secret, shares


def generate_public(threshold: int, secret_shares: Mapping[int, SecretShare]) -> Public:
    """Return the public data matching a set of secret shares."""
    return Public.create(
        {party_id: share.public for party_id, share in secret_shares.items()}, threshold
    )