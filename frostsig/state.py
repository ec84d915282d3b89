"""Coordination of round-based protocols: message intake, ordering, timeouts and aborts."""

from __future__ import annotations

import abc
import threading
from collections.abc import Iterable, Sequence

from frostsig.messages import Message, MessageType
from frostsig.party import IDSlice


class ProtocolError(Exception):
    """A fault in the protocol execution that forces an abort.

    A party_id of 0 means the fault could not be attributed to a single party.
    """

    def __init__(self, party_id: int, message: str | BaseException) -> None:
        super().__init__(str(message))
        self.party_id = party_id
        self.message = str(message)
        self.round_number = 0

    def __str__(self) -> str:
        return f"party {self.party_id}: round {self.round_number}: {self.message}"


class Round(abc.ABC):
    """One round of a protocol, seen from a single participant.

    process_message is called for every message of the round, then
    generate_messages, then next_round; the last round returns None.
    """

    def __init__(self, self_id: int, party_ids: Iterable[int]) -> None:
        if not isinstance(party_ids, IDSlice):
            party_ids = IDSlice(party_ids)
        if self_id not in party_ids:
            raise ValueError("party IDs should contain self ID")
        self._self_id = self_id
        self._party_ids = party_ids

    @property
    def self_id(self) -> int:
        """The ID of this participant."""
        return self._self_id

    @property
    def party_ids(self) -> IDSlice:
        """All parties taking part in the round."""
        return self._party_ids

    def process_message(self, msg: Message | None) -> None:
        """Validate and store msg, raising ProtocolError on a fault.

        The first round receives no messages, so it accepts anything.
        """
        return None

    @abc.abstractmethod
    def generate_messages(self) -> Sequence[Message]:
        """Return the messages to send at the end of this round."""

    @abc.abstractmethod
    def next_round(self) -> Round | None:
        """Return the following round, or None when the protocol is complete."""

    @abc.abstractmethod
    def accepted_message_types(self) -> Sequence[MessageType]:
        """Return the message types of every round, in order."""

    @abc.abstractmethod
    def reset(self) -> None:
        """Erase any sensitive data held by the round."""


class State:
    """Drives a Round-based protocol: stores incoming messages and advances rounds."""

    def __init__(self, round: Round, timeout: float | None = None) -> None:
        self._round = round
        self._accepted: list[MessageType] = list(round.accepted_message_types())
        # The first round takes no input; placeholders let it run at once.
        self._received: dict[int, Message | None] = {
            party_id: None for party_id in round.party_ids if party_id != round.self_id
        }
        self._queue: list[Message] = []
        self._round_number = 0
        self._finished = False
        self._done = threading.Event()
        self._error: ProtocolError | None = None
        self._lock = threading.Lock()
        self._timeout = timeout if timeout and timeout > 0 else None
        self._timer: threading.Timer | None = None
        self._start_timer()

    @property
    def round_number(self) -> int:
        """The index of the current round, starting at 0."""
        return self._round_number

    def _start_timer(self) -> None:
        if self._timeout is None:
            return

        def fire() -> None:
            self._on_timeout(timer)

        timer = threading.Timer(self._timeout, fire)
        timer.daemon = True
        self._timer = timer
        timer.start()

    def _ack_message(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._start_timer()

    def _stop_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _on_timeout(self, timer: threading.Timer) -> None:
        with self._lock:
            if self._timer is timer:
                self._report_error(ProtocolError(0, "message timeout"))

    def _rejected(self, reason: str, culprit: int) -> ValueError:
        where = f"party {self._round.self_id}, round {self._round_number}"
        if culprit:
            where += f", culprit {culprit}"
        return ValueError(f"{where}: {reason}")

    def handle_message(self, msg: Message) -> None:
        """Accept msg for the current or a later round.

        Messages from ourselves or addressed to another party are ignored.
        Raises ValueError if the message cannot be accepted.
        """
        sender = msg.sender
        with self._lock:
            if self._finished:
                raise self._rejected("protocol already finished", sender)
            if not self._accepted:
                raise self._rejected("no more messages being accepted", sender)
            if sender == self._round.self_id:
                return
            if not msg.is_broadcast() and msg.receiver != self._round.self_id:
                return
            if sender not in self._round.party_ids:
                raise self._rejected("sender is not a party", sender)
            if sender in self._received:
                raise self._rejected("message from this party was already received", sender)
            if msg.type not in self._accepted:
                raise self._rejected(
                    "message type is not accepted for this type of round", sender
                )
            self._ack_message()
            if msg.type == self._accepted[0]:
                self._received[sender] = msg
            else:
                self._queue.append(msg)

    def process_all(self) -> list[Message]:
        """Run the current round if all its messages have arrived.

        Returns the messages to send, or an empty list when waiting or aborted.
        """
        with self._lock:
            if self._finished:
                return []
            if len(self._received) != len(self._round.party_ids) - 1:
                return []
            try:
                for msg in self._received.values():
                    self._round.process_message(msg)
                self._received.clear()
                new_messages = list(self._round.generate_messages())
            except ProtocolError as err:
                self._report_error(err)
                return []

            self._accepted.pop(0)
            if self._accepted:
                current = self._accepted[0]
                remaining = []
                for msg in self._queue:
                    if msg.type == current:
                        self._received[msg.sender] = msg
                    else:
                        remaining.append(msg)
                self._queue = remaining

            next_round = self._round.next_round()
            if next_round is None:
                self._finish()
            else:
                self._round_number += 1
                self._round = next_round
            return new_messages

    def _finish(self) -> None:
        if self._finished:
            return
        self._finished = True
        try:
            self._round.reset()
        finally:
            self._stop_timer()
            self._done.set()

    def _report_error(self, err: ProtocolError) -> None:
        if self._finished:
            return
        if self._error is None:
            err.round_number = self._round_number
            self._error = err
        self._finish()

    def done(self) -> threading.Event:
        """Return an event that is set once the protocol has finished or aborted."""
        return self._done

    def error(self) -> ProtocolError | None:
        """Return the error that aborted the protocol, if any."""
        return self._error

    def wait_for_error(self, timeout: float | None = None) -> ProtocolError | None:
        """Block until the protocol is done and return its error, or None on success.

        Raises TimeoutError if timeout seconds pass first.
        """
        if not self._done.wait(timeout):
            raise TimeoutError("protocol has not finished")
        return self._error

    def is_finished(self) -> bool:
        """Return True if the protocol has finished or aborted."""
        return self._finished