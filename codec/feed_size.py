# codec/feed_size.py
from __future__ import annotations

from enum import Enum

from codec.errors import UnsupportedFeedKind

ASSET_CLASS_CRYPTO = 0

MAIN_TYPE_UNIQUE = 0
MAIN_TYPE_TWAP = 1

# record span in hex characters, feed id included
UNIQUE_RECORD_HEX_LEN = 214  # 856 bits
TWAP_RECORD_HEX_LEN = 470  # 1880 bits

FEED_SIZES = {
    MAIN_TYPE_UNIQUE: UNIQUE_RECORD_HEX_LEN,
    MAIN_TYPE_TWAP: TWAP_RECORD_HEX_LEN,
}


class SizeTableMode(str, Enum):
    """
    ASSET_CLASS_GATED rejects every asset class but Crypto before looking at
    the feed type. MAIN_TYPE_ONLY looks at the main feed type alone, the
    behaviour of older decoders.
    """

    ASSET_CLASS_GATED = "asset_class_gated"
    MAIN_TYPE_ONLY = "main_type_only"


def size_of(
    asset_class: int,
    feed_type: int,
    mode: SizeTableMode = SizeTableMode.ASSET_CLASS_GATED,
) -> int:
    """Return the hex character length of one encoded feed record."""
    mode = SizeTableMode(mode)
    if mode is SizeTableMode.ASSET_CLASS_GATED and asset_class != ASSET_CLASS_CRYPTO:
        raise UnsupportedFeedKind(asset_class, feed_type)
    size = FEED_SIZES.get(feed_type >> 8)
    if size is None:
        raise UnsupportedFeedKind(asset_class, feed_type)
    return size
