# etl/indexers.py
"""
etl.indexers

One entry per transform script: which contract it listens to, which event
selectors it wants, how each event is mapped, and the sink options the
runtime should use for it.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from codec import CodecError
from etl.selectors import same_felt, selector_from_name
from etl.transform import (
    ASSERTION_DISPUTED_SELECTOR,
    ASSERTION_MADE_SELECTOR,
    ASSERTION_SETTLED_SELECTOR,
    RANDOMNESS_REQUEST_SELECTOR,
    RANDOMNESS_STATUS_CHANGE_SELECTOR,
    TransformContext,
    map_checkpoint,
    map_dispatch,
    map_future_entry,
    map_oracle_assertion,
    map_spot_entry,
    map_vrf_request,
)
from ingestion.parser import BlockHeader, EventItem, StarknetEvent, parse_batch

logger = logging.getLogger(__name__)

MapFn = Callable[[BlockHeader, EventItem, TransformContext], List[Dict[str, Any]]]


@dataclass(frozen=True)
class Indexer:
    name: str
    contract_role: str
    selectors: Tuple[str, ...]
    map_event: MapFn
    entity_mode: bool = False
    include_transaction: bool = True
    include_receipt: bool = False

    def matches(self, event: StarknetEvent, contract: str) -> bool:
        if not same_felt(event.from_address, contract):
            return False
        return any(same_felt(event.selector, s) for s in self.selectors)

    def sink_options(self) -> Dict[str, Any]:
        if self.entity_mode:
            return {"entityMode": True}
        return {"raw": True}


INDEXERS: Dict[str, Indexer] = {
    ix.name: ix
    for ix in (
        Indexer("spot", "oracle", (selector_from_name("SubmittedSpotEntry"),), map_spot_entry),
        Indexer("spot-checkpoint", "checkpoint_oracle", (selector_from_name("CheckpointSpotEntry"),), map_checkpoint),
        Indexer(
            "future",
            "future_oracle",
            (selector_from_name("SubmittedFutureEntry"),),
            map_future_entry,
            include_receipt=True,
        ),
        Indexer("dispatch", "hyperlane_mailbox", (selector_from_name("Dispatch"),), map_dispatch),
        Indexer(
            "vrf-requests",
            "vrf",
            (RANDOMNESS_REQUEST_SELECTOR, RANDOMNESS_STATUS_CHANGE_SELECTOR),
            map_vrf_request,
            entity_mode=True,
        ),
        Indexer(
            "oo-requests",
            "oracle_assertions",
            (ASSERTION_MADE_SELECTOR, ASSERTION_SETTLED_SELECTOR, ASSERTION_DISPUTED_SELECTOR),
            map_oracle_assertion,
            entity_mode=True,
        ),
    )
}


def get_indexer(name: str) -> Indexer:
    try:
        return INDEXERS[name]
    except KeyError:
        raise ValueError(f"unknown indexer {name!r}, expected one of {sorted(INDEXERS)}") from None


def build_filter(indexer: Indexer, contract: str) -> Dict[str, Any]:
    """Event filter handed to the streaming runtime, one entry per selector."""
    return {
        # only request the header if any event matches
        "header": {"weak": True},
        "events": [
            {
                "fromAddress": contract,
                "keys": [selector],
                "includeTransaction": indexer.include_transaction,
                "includeReceipt": indexer.include_receipt,
            }
            for selector in indexer.selectors
        ],
    }


def transform_batch(
    indexer: Indexer,
    raw_batch: Dict[str, Any],
    ctx: TransformContext,
    *,
    contract: Optional[str] = None,
    skip_failed_events: bool = False,
) -> List[Dict[str, Any]]:
    """
    Map every event of one batch, header first then events in order.

    With a contract given, events that do not match the indexer filter are
    dropped. A failing event raises unless skip_failed_events is set, in
    which case it is logged and left out.
    """
    batch = parse_batch(raw_batch)
    out: List[Dict[str, Any]] = []
    for item in batch.events:
        if contract is not None and not indexer.matches(item.event, contract):
            continue
        try:
            out.extend(indexer.map_event(batch.header, item, ctx))
        except (CodecError, ValueError) as e:
            if not skip_failed_events:
                raise
            logger.warning(
                "%s: skipping event %s_%s in block %s: %s",
                indexer.name, item.transaction_hash, item.event.index, batch.header.block_number, e,
            )
    return out
