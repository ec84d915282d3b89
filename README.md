# frostsig

`frostsig` implements FROST, a two-round threshold signature scheme. A group
of `n` parties runs a distributed key generation once. Afterwards any `t + 1`
of them can sign a message together, and no smaller group can. The result is
an ordinary Ed25519 signature. Any Ed25519 verifier accepts it against the
group's public key.

Internally, keys and nonces live in the prime-order ristretto255 group
(`frostsig.ristretto.Element`, `frostsig.scalar.Scalar`). Keys and signatures
are converted to the Ed25519 encoding when they leave the protocol.

## Installation

```
pip install frostsig
```

The package requires Python 3.10 or newer and depends on `cryptography`.

## Command-line tools

Two commands run every party of a protocol inside one process. They are useful
for trying the scheme out and for producing test material. Each is available
as its own command and as a subcommand of `frostsig`:

| Command                                   | Same as                          |
|-------------------------------------------|----------------------------------|
| `frostsig-keygen T N`                     | `frostsig keygen T N`            |
| `frostsig-signer FILE MESSAGE`            | `frostsig sign FILE MESSAGE`     |

The commands exit with status 0 on success and 1 on any error, after printing
the reason or a usage line.

### Key generation

```
frostsig-keygen T N
```

This runs a distributed key generation for `N` parties, numbered `1` to `N`,
with threshold `T`. The values must satisfy `0 < T < N <= 100`. Any `T + 1`
parties can sign afterwards.

The command prints:

- the group key, in Ed25519 form, as hex;
- the secret share of each party, as hex;
- the public share of each party, as hex (ristretto255 encoding).

It also writes everything to `keygenout.json` in the current directory. The
file holds an object with two members: `Secrets`, mapping each party ID to
`{"id": ..., "secret": <base64>}`, and `Shares`, holding the threshold `t`,
the base64 `groupkey` and the base64 public `shares` of every party.

### Signing

```
frostsig-signer keygenout.json "message to sign"
```

This reads the key generation output and has all `N` parties in the file sign
the message. It then checks the signature twice:

- as a plain Ed25519 signature, with `cryptography`;
- with `PublicKey.verify`.

If both checks pass, it prints the `r` and `s` halves of the signature as hex.
Reading the file also checks that the stored group key matches the one
interpolated from the public shares.

## Library use

A protocol run is driven by a `frostsig.state.State`. Each party has its own
state. You feed it the messages received from the other parties with
`handle_message`, and `process_all` returns the messages that party must send
next once the current round is complete. When the protocol finishes, the
output object returned next to the state has been filled in.

`frostsig.helpers.party_routine` does one step for one party. It takes the
serialized messages received so far and a state, and returns the serialized
messages to send. If the protocol has aborted, it raises the state's
`ProtocolError`. The example below runs a whole key generation in one process
this way:

```python
from frostsig.frost import new_keygen_state
from frostsig.helpers import generate_set, party_routine

threshold = 2
party_ids = generate_set(5)          # parties 1..5

states, outputs = {}, {}
for party_id in party_ids:
    states[party_id], outputs[party_id] = new_keygen_state(
        party_id, party_ids, threshold, 0
    )

round1 = [m for s in states.values() for m in party_routine([], s)]
round2 = [m for s in states.values() for m in party_routine(round1, s)]
for s in states.values():
    party_routine(round2, s)

for s in states.values():
    assert s.wait_for_error() is None   # the error, or None on success
```

When the run succeeds, each party's `KeygenOutput` holds:

- `secret_key`: its own `SecretShare`;
- `public`: the group's `Public` data: the party list, the threshold, every
  party's public share and the group key.

Signing works the same way. Use `frostsig.frost.new_sign_state` with the signing
set, the party's `SecretShare`, the group's `Public` and the message. The
example below uses `frostsig.helpers.generate_secrets` and
`frostsig.helpers.generate_public` to deal keys with a trusted dealer instead of
running the key generation:

```python
from frostsig.frost import new_sign_state
from frostsig.helpers import generate_public, generate_secrets, generate_set, party_routine

threshold = 2
party_ids = generate_set(5)
_, secret_shares = generate_secrets(party_ids, threshold)
public = generate_public(threshold, secret_shares)

signers = party_ids[: threshold + 1]
message = b"hello"

states, outputs = {}, {}
for party_id in signers:
    states[party_id], outputs[party_id] = new_sign_state(
        signers, secret_shares[party_id], public, message, 0
    )

round1 = [m for s in states.values() for m in party_routine([], s)]
round2 = [m for s in states.values() for m in party_routine(round1, s)]
for s in states.values():
    party_routine(round2, s)

signature = outputs[signers[0]].signature
assert public.group_key.verify(message, signature)
ed25519_signature = signature.to_ed25519()          # 64 bytes
ed25519_public_key = public.group_key.to_ed25519()  # 32 bytes
```

`SecretShare` and `Public` convert to and from JSON-ready dictionaries with
`to_json_dict` / `from_json_dict`; `SecretShare` and `Signature` also have
binary `to_bytes` / `from_bytes`.

### Errors and timeouts

Invalid arguments, such as a threshold outside `1..N-1` or a signer that is
not among the key holders, raise `ValueError` when a state is created.
`State.handle_message` raises `ValueError` for a message it cannot accept, for
instance a second message from the same party in one round.

A state aborts when something goes wrong during a round: a failed proof, an
invalid share, or a signature share that does not verify. It then stops
accepting messages, `is_finished()` becomes true, and `wait_for_error()` and
`error()` return a `frostsig.state.ProtocolError`. The error's `party_id`
names the party at fault where one can be identified (0 otherwise), and
`round_number` gives the round in which the fault happened.
`wait_for_error(timeout)` blocks until the protocol is done, raising
`TimeoutError` if `timeout` seconds pass first.

You can give a positive timeout, in seconds, when you create a state. The run
is then aborted with a `ProtocolError` if no message arrives within that time.
A timeout of `0` or `None` disables this.

### Wire format

`frostsig.messages.Message` objects serialize with `to_bytes()` and
`Message.from_bytes()`. Each message has a five-byte header holding:

- the message type (`MessageType`);
- the sender, as a two-byte big-endian ID;
- the receiver, which is `0` for broadcasts.

The payload follows the header. Malformed input raises
`frostsig.messages.MessageError`, a subclass of `ValueError`.

## What the package does not do

The package has no network transport. A `State` only consumes and produces
`Message` objects; getting them from one party to another, over sockets or
any other channel, is left to the caller. The command-line tools sidestep this
by running all parties in a single process.

## Running the tests

```
pip install "frostsig[test]"
pytest
```