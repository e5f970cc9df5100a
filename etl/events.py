# etl/events.py
"""
etl.events

Positional layouts of the event payloads the transforms read. Each layout is
checked once when it is built from event.data; mappers then use field names.
"""
from __future__ import annotations

from typing import NamedTuple, Sequence, Tuple

# Hyperlane Dispatch event: nonce sits at data[6], message body starts at data[15]
DISPATCH_NONCE_INDEX = 6
DISPATCH_BODY_OFFSET = 15


class EventLayoutError(ValueError):
    pass


def _unpack(layout, data: Sequence[str]):
    n = len(layout._fields)
    if len(data) < n:
        raise EventLayoutError(f"{layout.__name__} expects {n} data felts, got {len(data)}")
    return layout(*data[:n])


class SpotEntry(NamedTuple):
    timestamp: str
    source: str
    publisher: str
    price: str
    pair_id: str
    volume: str

    @classmethod
    def from_data(cls, data: Sequence[str]) -> SpotEntry:
        return _unpack(cls, data)


class FutureEntry(NamedTuple):
    timestamp: str
    source: str
    publisher: str
    price: str
    pair_id: str
    volume: str
    expiration_timestamp: str  # milliseconds

    @classmethod
    def from_data(cls, data: Sequence[str]) -> FutureEntry:
        return _unpack(cls, data)


class CheckpointSpotEntry(NamedTuple):
    pair_id: str
    timestamp: str
    price: str
    aggregation_mode: str
    nb_sources_aggregated: str

    @classmethod
    def from_data(cls, data: Sequence[str]) -> CheckpointSpotEntry:
        return _unpack(cls, data)


class RandomnessRequest(NamedTuple):
    request_id: str
    caller_address: str
    seed: str
    minimum_block_number: str
    callback_address: str
    callback_fee_limit: str
    num_words: str

    @classmethod
    def from_data(cls, data: Sequence[str]) -> RandomnessRequest:
        return _unpack(cls, data)


class RandomnessStatusChange(NamedTuple):
    caller_address: str
    request_id: str
    status: str

    @classmethod
    def from_data(cls, data: Sequence[str]) -> RandomnessStatusChange:
        return _unpack(cls, data)


class AssertionDisputed(NamedTuple):
    assertion_id: str
    caller: str
    disputer: str
    request_id: str

    @classmethod
    def from_data(cls, data: Sequence[str]) -> AssertionDisputed:
        return _unpack(cls, data)


class AssertionSettled(NamedTuple):
    assertion_id: str
    bond_recipient: str
    disputed: str
    settlement_resolution: str
    settle_caller: str

    @classmethod
    def from_data(cls, data: Sequence[str]) -> AssertionSettled:
        return _unpack(cls, data)


class AssertionMade(NamedTuple):
    """
    Variable length layout:

        [0] assertion_id
        [1..2] domain_id low, high
        [3] n = number of full 31 byte claim words
        [4 .. 4+n] claim words followed by the pending word
        [5+n] pending word length
        then asserter, callback_recipient, escalation_manager, caller,
        expiration_timestamp, currency, bond low, bond high, identifier
    """

    assertion_id: str
    domain_id_low: str
    domain_id_high: str
    claim_words: Tuple[str, ...]
    asserter: str
    callback_recipient: str
    escalation_manager: str
    caller: str
    expiration_timestamp: str
    currency: str
    bond_low: str
    bond_high: str
    identifier: str

    @classmethod
    def from_data(cls, data: Sequence[str]) -> AssertionMade:
        if len(data) < 4:
            raise EventLayoutError(f"AssertionMade expects at least 4 data felts, got {len(data)}")
        try:
            claim_len = int(str(data[3]), 16)
        except ValueError as e:
            raise EventLayoutError(f"AssertionMade claim length is not hex: {data[3]!r}") from e
        if claim_len < 0:
            raise EventLayoutError(f"AssertionMade claim length is negative: {data[3]!r}")
        tail_start = 6 + claim_len
        if len(data) < tail_start + 9:
            raise EventLayoutError(
                f"AssertionMade with {claim_len} claim words expects {tail_start + 9} data felts, got {len(data)}"
            )
        return cls(
            data[0],
            data[1],
            data[2],
            tuple(data[4 : 5 + claim_len]),
            *data[tail_start : tail_start + 9],
        )


class Dispatch(NamedTuple):
    nonce: str
    message_words: Tuple[str, ...]

    @classmethod
    def from_data(cls, data: Sequence[str]) -> Dispatch:
        if len(data) < DISPATCH_BODY_OFFSET:
            raise EventLayoutError(
                f"Dispatch expects at least {DISPATCH_BODY_OFFSET} data felts, got {len(data)}"
            )
        return cls(data[DISPATCH_NONCE_INDEX], tuple(data[DISPATCH_BODY_OFFSET:]))
