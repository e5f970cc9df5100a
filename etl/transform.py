# etl/transform.py
"""
etl.transform

Map one matched on-chain event (plus its block header and transaction) into
what the sink expects:

    plain record        {"column": value, ...}
    entity insert       {"insert": record}
    entity update       {"entity": {key fields}, "update": {fields}}

Every mapper returns a list so events without an actionable selector can
return [] and callers can flat-map.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List

from codec import CountRadix, SizeTableMode, decode_feeds_updated
from etl.events import (
    AssertionDisputed,
    AssertionMade,
    AssertionSettled,
    CheckpointSpotEntry,
    Dispatch,
    FutureEntry,
    RandomnessRequest,
    RandomnessStatusChange,
    SpotEntry,
)
from etl.felt import (
    concatenate_hex,
    felt_is_zero,
    felt_to_int,
    felt_to_str,
    to_iso_timestamp,
    to_iso_timestamp_ms,
    trim_leading_zeros,
    u256_to_decstr,
)
from etl.selectors import same_felt
from ingestion.parser import BlockHeader, EventItem

logger = logging.getLogger(__name__)

Output = Dict[str, Any]

RANDOMNESS_REQUEST_SELECTOR = "0x00e3e1c077138abb6d570b1a7ba425f5479b12f50a78a72be680167d4cf79c48"
RANDOMNESS_STATUS_CHANGE_SELECTOR = "0x015510b399942790499934b72bc68b883f0905dee5da5aa36e489c9ffb096b8c"

ASSERTION_MADE_SELECTOR = "0x02b74480ce203d4ca6ee46c062a2d658129587cdccb3904c52a6f4dfb406a3f2"
ASSERTION_DISPUTED_SELECTOR = "0x033efc8167fe91406d16c1680e593c3c2cad864220645cc2a48efd67e8f7ca73"
ASSERTION_SETTLED_SELECTOR = "0x00ed635610f8859765fb89b19bec7866c02bbc2f03bb048acec6ba6536aa7cb9"


@dataclass(frozen=True)
class TransformContext:
    network: str
    size_table: SizeTableMode = SizeTableMode.ASSET_CLASS_GATED
    count_radix: CountRadix = CountRadix.DECIMAL

    @classmethod
    def from_settings(cls, settings) -> TransformContext:
        return cls(
            network=settings.network,
            size_table=settings.codec.size_table,
            count_radix=settings.codec.count_radix,
        )


def data_id(item: EventItem) -> str:
    return f"{item.transaction_hash}_{item.event.index}"


def _block_fields(header: BlockHeader, item: EventItem) -> Output:
    return {
        "block_hash": header.block_hash,
        "block_number": header.block_number,
        "block_timestamp": header.timestamp,
        "transaction_hash": item.transaction_hash,
    }


def _entry_record(entry, header: BlockHeader, item: EventItem, ctx: TransformContext) -> Output:
    return {
        "network": ctx.network,
        "pair_id": felt_to_str(entry.pair_id),
        "data_id": data_id(item),
        **_block_fields(header, item),
        "price": felt_to_int(entry.price),
        "timestamp": to_iso_timestamp(entry.timestamp),
        "publisher": felt_to_str(entry.publisher),
        "source": felt_to_str(entry.source),
        "volume": felt_to_int(entry.volume),
    }


def map_spot_entry(header: BlockHeader, item: EventItem, ctx: TransformContext) -> List[Output]:
    entry = SpotEntry.from_data(item.event.data)
    return [_entry_record(entry, header, item, ctx)]


def map_future_entry(header: BlockHeader, item: EventItem, ctx: TransformContext) -> List[Output]:
    entry = FutureEntry.from_data(item.event.data)
    rec = _entry_record(entry, header, item, ctx)
    rec["expiration_timestamp"] = to_iso_timestamp_ms(entry.expiration_timestamp)
    return [rec]


def map_checkpoint(header: BlockHeader, item: EventItem, ctx: TransformContext) -> List[Output]:
    cp = CheckpointSpotEntry.from_data(item.event.data)
    return [{
        "network": ctx.network,
        "pair_id": felt_to_str(cp.pair_id),
        "data_id": data_id(item),
        **_block_fields(header, item),
        "price": felt_to_int(cp.price),
        "timestamp": to_iso_timestamp(cp.timestamp),
        "aggregation_mode": felt_to_int(cp.aggregation_mode),
        "nb_sources_aggregated": felt_to_int(cp.nb_sources_aggregated),
        "sender_address": item.sender_address,
    }]


def map_dispatch(header: BlockHeader, item: EventItem, ctx: TransformContext) -> List[Output]:
    """Hyperlane Dispatch carrying a batch of feed updates."""
    msg = Dispatch.from_data(item.event.data)
    logger.debug("dispatch %s message words %s", item.transaction_hash, msg.message_words)
    feeds = decode_feeds_updated(
        msg.message_words, size_table=ctx.size_table, count_radix=ctx.count_radix
    )
    return [{
        "network": ctx.network,
        **_block_fields(header, item),
        "hyperlane_message_nonce": felt_to_int(msg.nonce),
        "feeds_updated": feeds,
    }]


def map_vrf_request(header: BlockHeader, item: EventItem, ctx: TransformContext) -> List[Output]:
    selector = item.event.selector
    tx = item.transaction_hash
    if same_felt(selector, RANDOMNESS_REQUEST_SELECTOR):
        req = RandomnessRequest.from_data(item.event.data)
        return [{
            "insert": {
                "data_id": data_id(item),
                "network": ctx.network,
                "request_id": felt_to_int(req.request_id),
                "seed": felt_to_int(req.seed),
                "created_at": header.timestamp,
                "created_at_tx": tx,
                "minimum_block_number": felt_to_int(req.minimum_block_number),
                "callback_address": req.callback_address,
                "callback_fee_limit": felt_to_int(req.callback_fee_limit),
                "num_words": felt_to_int(req.num_words),
                "requestor_address": req.caller_address,
                "updated_at": header.timestamp,
                "updated_at_tx": tx,
                "status": 0,
            }
        }]
    if same_felt(selector, RANDOMNESS_STATUS_CHANGE_SELECTOR):
        change = RandomnessStatusChange.from_data(item.event.data)
        return [{
            "entity": {
                "request_id": felt_to_int(change.request_id),
                "requestor_address": change.caller_address,
            },
            "update": {
                "status": felt_to_int(change.status),
                "updated_at": header.timestamp,
                "updated_at_tx": tx,
            },
        }]
    return []


def _assertion_insert(made: AssertionMade, header: BlockHeader, item: EventItem, ctx: TransformContext) -> Output:
    # the pending claim word is left padded, drop the padding before joining
    claim_words = list(made.claim_words)
    if claim_words:
        claim_words[-1] = trim_leading_zeros(claim_words[-1])
    return {
        "network": ctx.network,
        "data_id": data_id(item),
        "assertion_id": made.assertion_id,
        "domain_id": u256_to_decstr(made.domain_id_low, made.domain_id_high),
        "claim": concatenate_hex(claim_words),
        "asserter": made.asserter,
        "callback_recipient": made.callback_recipient,
        "escalation_manager": made.escalation_manager,
        "caller": made.caller,
        "expiration_timestamp": to_iso_timestamp(made.expiration_timestamp),
        "currency": made.currency,
        "bond": u256_to_decstr(made.bond_low, made.bond_high),
        "identifier": trim_leading_zeros(made.identifier),
        "updated_at": header.timestamp,
        "updated_at_tx": item.transaction_hash,
    }


def map_oracle_assertion(header: BlockHeader, item: EventItem, ctx: TransformContext) -> List[Output]:
    selector = item.event.selector
    if same_felt(selector, ASSERTION_MADE_SELECTOR):
        made = AssertionMade.from_data(item.event.data)
        return [{"insert": _assertion_insert(made, header, item, ctx)}]
    if same_felt(selector, ASSERTION_DISPUTED_SELECTOR):
        disputed = AssertionDisputed.from_data(item.event.data)
        return [{
            "entity": {"assertion_id": disputed.assertion_id},
            "update": {
                "disputer_caller": disputed.caller,
                "disputer": disputed.disputer,
                "disputed": True,
                "dispute_id": disputed.request_id,
            },
        }]
    if same_felt(selector, ASSERTION_SETTLED_SELECTOR):
        settled = AssertionSettled.from_data(item.event.data)
        return [{
            "entity": {"assertion_id": settled.assertion_id},
            "update": {
                "settlement_resolution": not felt_is_zero(settled.settlement_resolution),
                "disputed": not felt_is_zero(settled.disputed),
                "settle_caller": settled.settle_caller,
                "settled": True,
                "updated_at": header.timestamp,
                "updated_at_tx": item.transaction_hash,
            },
        }]
    return []
