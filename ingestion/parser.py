# ingestion/parser.py
"""
ingestion.parser
Turn the raw batch handed over by the streaming runtime into typed records.

A batch looks like
    {"header": {"blockNumber", "blockHash", "timestamp"},
     "events": [{"event": {...}, "transaction": {...}?, "receipt": {...}?}, ...]}
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


@dataclass(frozen=True)
class BlockHeader:
    block_number: int
    block_hash: Optional[str]
    timestamp: Any


@dataclass(frozen=True)
class StarknetEvent:
    from_address: Optional[str]
    keys: Tuple[str, ...]
    data: Tuple[str, ...]
    index: int = 0

    @property
    def selector(self) -> Optional[str]:
        return self.keys[0] if self.keys else None


@dataclass(frozen=True)
class EventItem:
    event: StarknetEvent
    transaction_hash: Optional[str]
    sender_address: Optional[str] = None


@dataclass(frozen=True)
class Batch:
    header: BlockHeader
    events: List[EventItem] = field(default_factory=list)


def _to_int(value) -> int:
    if isinstance(value, bool):
        raise ValueError("block number must be an integer")
    if isinstance(value, int):
        return value
    s = str(value).strip().lower()
    return int(s, 16) if s.startswith("0x") else int(s)


def parse_header(header_json: dict) -> BlockHeader:
    if not header_json or "blockNumber" not in header_json:
        raise ValueError("Invalid block header JSON")
    return BlockHeader(
        block_number=_to_int(header_json["blockNumber"]),
        block_hash=header_json.get("blockHash"),
        timestamp=header_json.get("timestamp"),
    )


def parse_event(event_json: dict) -> StarknetEvent:
    if not event_json or "data" not in event_json:
        raise ValueError("Invalid event JSON")
    index = event_json.get("index")
    return StarknetEvent(
        from_address=event_json.get("fromAddress"),
        keys=tuple(event_json.get("keys") or ()),
        data=tuple(event_json.get("data") or ()),
        index=0 if index is None else _to_int(index),
    )


def _transaction_hash(item: Dict[str, Any]) -> Optional[str]:
    tx = item.get("transaction") or {}
    meta = tx.get("meta") or {}
    if meta.get("hash"):
        return meta["hash"]
    receipt = item.get("receipt") or {}
    return receipt.get("transactionHash")


def _sender_address(item: Dict[str, Any]) -> Optional[str]:
    tx = item.get("transaction") or {}
    invoke = tx.get("invokeV1") or tx.get("invokeV3") or {}
    return invoke.get("senderAddress") or invoke.get("sender_address")


def parse_event_item(item_json: dict) -> EventItem:
    if not item_json or "event" not in item_json:
        raise ValueError("Invalid event item JSON")
    return EventItem(
        event=parse_event(item_json["event"]),
        transaction_hash=_transaction_hash(item_json),
        sender_address=_sender_address(item_json),
    )


def parse_batch(batch_json: dict) -> Batch:
    if not batch_json or "header" not in batch_json:
        raise ValueError("Invalid batch JSON")
    return Batch(
        header=parse_header(batch_json["header"]),
        events=[parse_event_item(it) for it in batch_json.get("events") or []],
    )
