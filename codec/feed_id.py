# codec/feed_id.py
"""
codec.feed_id

Split a packed 256 bit feed identifier into its bit fields.

    [248, 256)  reserved, zero for every published feed
    [232, 248)  asset class
    [216, 232)  feed type, upper byte is the main type
    [0, 216)    pair id
"""
from __future__ import annotations

from dataclasses import dataclass

from codec.u256 import U256

FEED_ID_HEX_LEN = 64

ASSET_CLASS_SHIFT = 232
FEED_TYPE_SHIFT = 216
RESERVED_SHIFT = 248
FIELD_MASK = 0xFFFF
PAIR_ID_MASK = (1 << FEED_TYPE_SHIFT) - 1


@dataclass(frozen=True)
class FeedId:
    asset_class: int
    feed_type: int
    pair_id: int
    reserved: int = 0

    @property
    def main_type(self) -> int:
        return self.feed_type >> 8

    def to_u256(self) -> U256:
        return (
            (U256(self.reserved) << RESERVED_SHIFT)
            | (U256(self.asset_class) << ASSET_CLASS_SHIFT)
            | (U256(self.feed_type) << FEED_TYPE_SHIFT)
            | U256(self.pair_id)
        )


def split_feed_id(value: U256) -> FeedId:
    return FeedId(
        asset_class=int((value >> ASSET_CLASS_SHIFT) & FIELD_MASK),
        feed_type=int((value >> FEED_TYPE_SHIFT) & FIELD_MASK),
        pair_id=int(value & PAIR_ID_MASK),
        reserved=int(value >> RESERVED_SHIFT),
    )


def decode_feed_id(feed_id_hex: str) -> FeedId:
    """
    Decode a 64 character hex feed id (0x prefix optional).

    No validation of the asset class or feed type happens here, that is the
    job of codec.feed_size.
    """
    return split_feed_id(U256.from_hex(feed_id_hex))
