"""Command-line tools: deal keys with a local key generation, and sign with them."""

from __future__ import annotations

import json
import sys
from collections.abc import Iterable, Sequence
from pathlib import Path

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PublicKey

from frostsig.eddsa import Public, PublicKey, SecretShare, Signature
from frostsig.frost import new_keygen_state, new_sign_state
from frostsig.helpers import generate_set, party_routine
from frostsig.party import id_from_text
from frostsig.state import ProtocolError, State

MAX_N = 100
KEYGEN_OUTPUT = "keygenout.json"
_ROUNDS = 3


def _keygen_usage() -> None:
    print(f"usage: frostsig keygen t n\nwhere 0 < t < n < {MAX_N}")


def _signer_usage() -> None:
    print("usage: frostsig sign <JSON file> message")


def _run_rounds(states: Iterable[State]) -> None:
    states = list(states)
    outgoing: list[bytes] = []
    for _ in range(_ROUNDS):
        incoming, outgoing = outgoing, []
        for state in states:
            outgoing.extend(party_routine(incoming, state))


def _unfinished_error(states: Iterable[State]) -> str | None:
    for state in states:
        if not state.is_finished():
            return "protocol did not finish"
        if state.error() is not None:
            return str(state.error())
    return None


def _ed25519_valid(public_key: PublicKey, message: bytes, signature: Signature) -> bool:
    try:
        Ed25519PublicKey.from_public_bytes(public_key.to_ed25519()).verify(
            signature.to_ed25519(), message
        )
    except (InvalidSignature, ValueError):
        return False
    return True


def keygen_main(argv: Sequence[str] | None = None) -> int:
    """Run key generation for parties 1..n locally and write the result as JSON."""
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) != 2:
        _keygen_usage()
        return 1
    try:
        t = int(args[0])
        n = int(args[1])
    except ValueError as exc:
        print(exc)
        _keygen_usage()
        return 1
    if n > MAX_N or t >= n or n < 1:
        _keygen_usage()
        return 1

    party_ids = generate_set(n)
    states, outputs = {}, {}
    try:
        for party_id in party_ids:
            states[party_id], outputs[party_id] = new_keygen_state(party_id, party_ids, t)
        _run_rounds(states.values())
    except (ValueError, ProtocolError) as exc:
        print(exc)
        return 1
    problem = _unfinished_error(states.values())
    if problem is not None:
        print(problem)
        return 1

    public = outputs[party_ids[0]].public
    print("Group Key:")
    print(f"  {public.group_key.to_ed25519().hex()}\n")

    secrets_by_id = {}
    for party_id in party_ids:
        share = outputs[party_id].secret_key
        secrets_by_id[party_id] = share
        print(
            f"Party {party_id}:\n"
            f"  secret: {bytes(share.secret).hex()}\n"
            f"  public: {bytes(public.shares[party_id]).hex()}"
        )

    document = {
        "Secrets": {str(pid): share.to_json_dict() for pid, share in secrets_by_id.items()},
        "Shares": public.to_json_dict(),
    }
    try:
        Path(KEYGEN_OUTPUT).write_text(json.dumps(document, indent=1), encoding="utf-8")
    except OSError as exc:
        print(exc)
        return 1
    print(f"Success: output written to {KEYGEN_OUTPUT}")
    return 0


def signer_main(argv: Sequence[str] | None = None) -> int:
    """Sign a message with every party of a key generation output file."""
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) != 2:
        _signer_usage()
        return 1
    filename, message = args[0], args[1].encode()

    try:
        document = json.loads(Path(filename).read_text(encoding="utf-8"))
        shares_by_id = {
            id_from_text(key): SecretShare.from_json_dict(value)
            for key, value in document["Secrets"].items()
        }
        public = Public.from_json_dict(document["Shares"])
    except (OSError, ValueError, KeyError, TypeError, AttributeError) as exc:
        print(exc)
        return 1

    n = len(public.party_ids)
    t = public.threshold
    print(f"(t, n) = ({t}, {n})")

    party_ids = generate_set(n)
    states, outputs = {}, {}
    try:
        for party_id in party_ids:
            share = shares_by_id.get(party_id)
            if share is None:
                print(f"no secret share for party {party_id}")
                return 1
            states[party_id], outputs[party_id] = new_sign_state(
                party_ids, share, public, message
            )
        _run_rounds(states.values())
    except (ValueError, ProtocolError) as exc:
        print(exc)
        return 1

    signature = outputs[party_ids[0]].signature
    if signature is None:
        print("null signature")
        return 1
    group_key = public.group_key
    if not _ed25519_valid(group_key, message, signature):
        print("signature verification failed (ed25519)")
        return 1
    if not group_key.verify(message, signature):
        print("signature verification failed")
        return 1

    print(
        f"Success: signature is\nr: {bytes(signature.r).hex()}\ns: {bytes(signature.s).hex()}"
    )
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Dispatch to the keygen or sign command."""
    args = list(sys.argv[1:] if argv is None else argv)
    commands = {"keygen": keygen_main, "sign": signer_main}
    if not args or args[0] not in commands:
        print("usage: frostsig {keygen,sign} ...")
        return 1
    return commands[args[0]](args[1:])


if __name__ == "__main__":
    sys.exit(main())