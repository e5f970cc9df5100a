# codec/batch.py
"""
codec.batch

Walk a concatenated feed update stream:

    [4 hex chars: count][count x (64 hex feed id + rest of record)]

Only the feed ids are returned. Each record is skipped by its full size from
the size table so the next id lines up.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import List

from codec.errors import MalformedWord, TruncatedMessage
from codec.feed_id import FEED_ID_HEX_LEN, decode_feed_id
from codec.feed_size import SizeTableMode, size_of

logger = logging.getLogger(__name__)

COUNT_HEX_LEN = 4


class CountRadix(str, Enum):
    # deployed decoders read the count characters as decimal digits
    DECIMAL = "decimal"
    HEX = "hex"


def read_count(prefix: str, radix: CountRadix = CountRadix.DECIMAL) -> int:
    radix = CountRadix(radix)
    if radix is CountRadix.DECIMAL:
        if not (prefix.isascii() and prefix.isdigit()):
            raise MalformedWord(f"record count is not decimal: {prefix!r}")
        return int(prefix, 10)
    try:
        return int(prefix, 16)
    except ValueError as e:
        raise MalformedWord(f"record count is not hex: {prefix!r}") from e


def _take(stream: str, cursor: int, width: int) -> str:
    end = cursor + width
    if end > len(stream):
        raise TruncatedMessage(needed=end, available=len(stream))
    return stream[cursor:end]


def decode_feed_batch(
    stream: str,
    *,
    size_table: SizeTableMode = SizeTableMode.ASSET_CLASS_GATED,
    count_radix: CountRadix = CountRadix.DECIMAL,
) -> List[str]:
    """
    Return the 0x prefixed feed ids carried by the stream, in emission order.

    Trailing characters after the last declared record are ignored. A stream
    that ends before the declared records raises TruncatedMessage; an unknown
    feed kind raises UnsupportedFeedKind. Nothing partial is returned.
    """
    count = read_count(_take(stream, 0, COUNT_HEX_LEN), count_radix)
    cursor = COUNT_HEX_LEN

    feed_ids: List[str] = []
    for _ in range(count):
        feed_id_hex = _take(stream, cursor, FEED_ID_HEX_LEN)
        feed = decode_feed_id(feed_id_hex)
        span = size_of(feed.asset_class, feed.feed_type, size_table)
        _take(stream, cursor, span)
        feed_ids.append("0x" + feed_id_hex)
        cursor += span

    if cursor < len(stream):
        logger.debug("ignoring %d trailing hex chars after %d records", len(stream) - cursor, count)
    return feed_ids
