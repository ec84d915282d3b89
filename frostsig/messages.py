"""Wire messages exchanged by the key generation and signing protocols."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Union

from frostsig.eddsa import PublicKey  # noqa: F401  (re-exported type context)
from frostsig.party import ID_BYTE_SIZE, id_from_bytes, id_to_bytes
from frostsig.polynomial import Exponent
from frostsig.ristretto import ELEMENT_SIZE, Element
from frostsig.scalar import SCALAR_SIZE, Scalar
from frostsig.zk import PROOF_SIZE, SchnorrProof

HEADER_SIZE = 1 + 2 * ID_BYTE_SIZE
KEYGEN2_SIZE = SCALAR_SIZE
SIGN1_SIZE = 2 * ELEMENT_SIZE
SIGN2_SIZE = SCALAR_SIZE


class MessageError(ValueError):
    """Raised when a message cannot be encoded or decoded."""


class MessageType(enum.IntEnum):
    """The kind of a protocol message; values increase with protocol progress."""

    NONE = 0
    KEYGEN1 = 1
    KEYGEN2 = 2
    SIGN1 = 3
    SIGN2 = 4


_BROADCAST_TYPES = frozenset({MessageType.KEYGEN1, MessageType.SIGN1, MessageType.SIGN2})


def _validate(msg_type: MessageType, sender: int, receiver: int, where: str) -> None:
    if msg_type in _BROADCAST_TYPES:
        if receiver != 0:
            raise MessageError(f"{where}: receiver must be 0 to indicate broadcast")
    elif msg_type == MessageType.KEYGEN2:
        if receiver == 0:
            raise MessageError(f"{where}: KEYGEN2 messages require a receiver")
    else:
        raise MessageError(f"{where}: invalid message type")
    if sender == 0:
        raise MessageError(f"{where}: message must include a non 0 sender")


@dataclass(frozen=True)
class Header:
    """Type, sender and receiver of a message; a receiver of 0 means broadcast."""

    type: MessageType
    sender: int
    receiver: int = 0

    def to_bytes(self) -> bytes:
        """Encode as the type byte followed by the sender and receiver IDs."""
        _validate(self.type, self.sender, self.receiver, "Header.to_bytes")
        return bytes([int(self.type)]) + id_to_bytes(self.sender) + id_to_bytes(self.receiver)

    @classmethod
    def from_bytes(cls, data: bytes) -> Header:
        """Decode a header from the start of data."""
        data = bytes(data)
        if len(data) < HEADER_SIZE:
            raise MessageError(
                f"Header.from_bytes: data should be at least {HEADER_SIZE} bytes (got {len(data)})"
            )
        sender = id_from_bytes(data[1:])
        receiver = id_from_bytes(data[1 + ID_BYTE_SIZE :])
        try:
            msg_type = MessageType(data[0])
        except ValueError as exc:
            raise MessageError("Header.from_bytes: invalid message type") from exc
        _validate(msg_type, sender, receiver, "Header.from_bytes")
        return cls(type=msg_type, sender=sender, receiver=receiver)

    def is_broadcast(self) -> bool:
        """Return True if the message is intended to be broadcast."""
        return self.receiver == 0

    def size(self) -> int:
        """Return the number of bytes in the encoding."""
        return HEADER_SIZE


@dataclass(frozen=True)
class KeyGen1:
    """First key generation message: a proof of the constant term and the commitments."""

    proof: SchnorrProof
    commitments: Exponent

    def to_bytes(self) -> bytes:
        """Encode as the proof followed by the commitments."""
        return self.proof.to_bytes() + self.commitments.to_bytes()

    @classmethod
    def from_bytes(cls, data: bytes) -> KeyGen1:
        """Decode the encoding produced by to_bytes."""
        data = bytes(data)
        if len(data) < PROOF_SIZE:
            raise MessageError("msg1: invalid message")
        try:
            proof = SchnorrProof.from_bytes(data[:PROOF_SIZE])
            commitments = Exponent.from_bytes(data[PROOF_SIZE:])
        except MessageError:
            raise
        except ValueError as exc:
            raise MessageError(f"msg1: {exc}") from exc
        return cls(proof=proof, commitments=commitments)

    def size(self) -> int:
        """Return the number of bytes in the encoding."""
        return self.proof.size() + self.commitments.size()


@dataclass(frozen=True)
class KeyGen2:
    """Second key generation message: a Shamir share for the receiver."""

    share: Scalar

    def to_bytes(self) -> bytes:
        """Encode the share."""
        return bytes(self.share)

    @classmethod
    def from_bytes(cls, data: bytes) -> KeyGen2:
        """Decode the encoding produced by to_bytes."""
        data = bytes(data)
        if len(data) != KEYGEN2_SIZE:
            raise MessageError("msg2: invalid message")
        try:
            return cls(share=Scalar.from_canonical_bytes(data))
        except ValueError as exc:
            raise MessageError(f"msg2.Share: {exc}") from exc

    def size(self) -> int:
        """Return the number of bytes in the encoding."""
        return KEYGEN2_SIZE


@dataclass(frozen=True)
class Sign1:
    """First signing message: the nonce commitments D = [d] B and E = [e] B."""

    di: Element
    ei: Element

    def to_bytes(self) -> bytes:
        """Encode D followed by E."""
        return bytes(self.di) + bytes(self.ei)

    @classmethod
    def from_bytes(cls, data: bytes) -> Sign1:
        """Decode the encoding produced by to_bytes."""
        data = bytes(data)
        if len(data) != SIGN1_SIZE:
            raise MessageError("msg1: invalid message")
        try:
            di = Element.from_canonical_bytes(data[:ELEMENT_SIZE])
        except ValueError as exc:
            raise MessageError(f"msg1.D: {exc}") from exc
        try:
            ei = Element.from_canonical_bytes(data[ELEMENT_SIZE:])
        except ValueError as exc:
            raise MessageError(f"msg1.E: {exc}") from exc
        return cls(di=di, ei=ei)

    def size(self) -> int:
        """Return the number of bytes in the encoding."""
        return SIGN1_SIZE


@dataclass(frozen=True)
class Sign2:
    """Second signing message: the sender's share of the signature's S part."""

    zi: Scalar

    def to_bytes(self) -> bytes:
        """Encode the signature share."""
        return bytes(self.zi)

    @classmethod
    def from_bytes(cls, data: bytes) -> Sign2:
        """Decode the encoding produced by to_bytes."""
        data = bytes(data)
        if len(data) != SIGN2_SIZE:
            raise MessageError("msg2: invalid message")
        try:
            return cls(zi=Scalar.from_canonical_bytes(data))
        except ValueError as exc:
            raise MessageError(f"msg2.Zi: {exc}") from exc

    def size(self) -> int:
        """Return the number of bytes in the encoding."""
        return SIGN2_SIZE


Content = Union[KeyGen1, KeyGen2, Sign1, Sign2]

_CONTENT_CLASSES: dict[MessageType, type] = {
    MessageType.KEYGEN1: KeyGen1,
    MessageType.KEYGEN2: KeyGen2,
    MessageType.SIGN1: Sign1,
    MessageType.SIGN2: Sign2,
}


@dataclass(frozen=True)
class Message:
    """A protocol message: a header and the content matching its type."""

    header: Header
    content: Content | None = None

    @property
    def type(self) -> MessageType:
        return self.header.type

    @property
    def sender(self) -> int:
        return self.header.sender

    @property
    def receiver(self) -> int:
        return self.header.receiver

    def _content_of(self, kind: type):
        return self.content if isinstance(self.content, kind) else None

    @property
    def keygen1(self) -> KeyGen1 | None:
        return self._content_of(KeyGen1)

    @property
    def keygen2(self) -> KeyGen2 | None:
        return self._content_of(KeyGen2)

    @property
    def sign1(self) -> Sign1 | None:
        return self._content_of(Sign1)

    @property
    def sign2(self) -> Sign2 | None:
        return self._content_of(Sign2)

    def _matching_content(self) -> Content | None:
        kind = _CONTENT_CLASSES.get(self.header.type)
        if kind is None or not isinstance(self.content, kind):
            return None
        return self.content

    def to_bytes(self) -> bytes:
        """Encode the header followed by the content."""
        try:
            header = self.header.to_bytes()
        except MessageError as exc:
            raise MessageError(f"message.to_bytes: {exc}") from exc
        content = self._matching_content()
        if content is None:
            raise MessageError("message does not contain any data")
        return header + content.to_bytes()

    @classmethod
    def from_bytes(cls, data: bytes) -> Message:
        """Decode a full message, header and content."""
        data = bytes(data)
        header = Header.from_bytes(data)
        kind = _CONTENT_CLASSES.get(header.type)
        if kind is None:
            raise MessageError("messages.from_bytes: invalid message type")
        return cls(header=header, content=kind.from_bytes(data[header.size() :]))

    def size(self) -> int:
        """Return the number of bytes in the encoding."""
        content = self._matching_content()
        return self.header.size() + (content.size() if content is not None else 0)

    def is_broadcast(self) -> bool:
        """Return True if the message is intended to be broadcast."""
        return self.header.is_broadcast()


def new_keygen1(sender: int, proof: SchnorrProof, commitments: Exponent) -> Message:
    """Return a broadcast KEYGEN1 message."""
    return Message(Header(MessageType.KEYGEN1, sender), KeyGen1(proof, commitments))


def new_keygen2(sender: int, receiver: int, share: Scalar) -> Message:
    """Return a KEYGEN2 message carrying a share for receiver."""
    return Message(Header(MessageType.KEYGEN2, sender, receiver), KeyGen2(share))


def new_sign1(sender: int, commitment_d: Element, commitment_e: Element) -> Message:
    """Return a broadcast SIGN1 message."""
    return Message(Header(MessageType.SIGN1, sender), Sign1(commitment_d, commitment_e))


def new_sign2(sender: int, signature_share: Scalar) -> Message:
    """Return a broadcast SIGN2 message."""
    return Message(Header(MessageType.SIGN2, sender), Sign2(signature_share))