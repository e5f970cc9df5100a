# codec/__init__.py
from .batch import CountRadix, decode_feed_batch
from .envelope import strip_words
from .errors import CodecError, InvalidInteger, MalformedWord, TruncatedMessage, UnsupportedFeedKind
from .feed_id import FeedId, decode_feed_id
from .feed_size import SizeTableMode, size_of
from .u256 import U256


def decode_feeds_updated(words, *, size_table=SizeTableMode.ASSET_CLASS_GATED, count_radix=CountRadix.DECIMAL):
    """Feed ids updated by a Hyperlane message body given as transport words."""
    return decode_feed_batch(strip_words(words), size_table=size_table, count_radix=count_radix)


__all__ = [
    "CodecError",
    "CountRadix",
    "FeedId",
    "InvalidInteger",
    "MalformedWord",
    "SizeTableMode",
    "TruncatedMessage",
    "U256",
    "UnsupportedFeedKind",
    "decode_feed_batch",
    "decode_feed_id",
    "decode_feeds_updated",
    "size_of",
    "strip_words",
]
