import pytest

from codec import decode_feeds_updated
from codec.batch import CountRadix, decode_feed_batch, read_count
from codec.errors import MalformedWord, TruncatedMessage, UnsupportedFeedKind
from codec.feed_size import SizeTableMode

UNIQUE = 0x0000
TWAP = 0x0100


def feed_id_hex(asset_class: int = 0, feed_type: int = UNIQUE, pair_id: int = 1) -> str:
    return format((asset_class << 232) | (feed_type << 216) | pair_id, "064x")


def record(fid: str, feed_type: int = UNIQUE) -> str:
    size = 470 if feed_type >> 8 == 1 else 214
    return fid + "e" * (size - 64)


def test_single_unique_record():
    fid = "0" * 63 + "1"
    stream = "0001" + fid + "0" * 150
    assert decode_feed_batch(stream) == ["0x" + fid]


def test_mixed_records_in_emission_order():
    a = feed_id_hex(pair_id=0xAA)
    b = feed_id_hex(feed_type=TWAP, pair_id=0xBB)
    c = feed_id_hex(pair_id=0xCC)
    stream = "0003" + record(a) + record(b, TWAP) + record(c)
    assert decode_feed_batch(stream) == ["0x" + a, "0x" + b, "0x" + c]


def test_trailing_bytes_after_declared_count_are_ignored():
    a = feed_id_hex(pair_id=1)
    stream = "0001" + record(a) + "deadbeef" * 10
    assert decode_feed_batch(stream) == ["0x" + a]


def test_zero_count_yields_nothing():
    assert decode_feed_batch("0000") == []


def test_declared_two_but_one_present_is_truncated():
    stream = "0002" + record(feed_id_hex())
    with pytest.raises(TruncatedMessage):
        decode_feed_batch(stream)


def test_partial_record_body_is_truncated():
    stream = "0001" + feed_id_hex() + "0" * 100
    with pytest.raises(TruncatedMessage) as ei:
        decode_feed_batch(stream)
    assert ei.value.needed == 4 + 214
    assert ei.value.available == len(stream)


def test_missing_count_is_truncated():
    with pytest.raises(TruncatedMessage):
        decode_feed_batch("00")


def test_unsupported_kind_fails_without_partial_result():
    good = feed_id_hex(pair_id=1)
    bad = feed_id_hex(asset_class=1, pair_id=2)
    stream = "0002" + record(good) + record(bad)
    with pytest.raises(UnsupportedFeedKind) as ei:
        decode_feed_batch(stream)
    assert ei.value.asset_class == 1


def test_main_type_only_accepts_other_asset_classes():
    fid = feed_id_hex(asset_class=1, pair_id=2)
    stream = "0001" + record(fid)
    assert decode_feed_batch(stream, size_table=SizeTableMode.MAIN_TYPE_ONLY) == ["0x" + fid]


def test_count_read_as_decimal_digits_by_default():
    ids = [feed_id_hex(pair_id=i) for i in range(10)]
    stream = "0010" + "".join(record(f) for f in ids)
    assert decode_feed_batch(stream) == ["0x" + f for f in ids]
    # the same prefix read as hex asks for sixteen records
    with pytest.raises(TruncatedMessage):
        decode_feed_batch(stream, count_radix=CountRadix.HEX)


def test_read_count_radix():
    assert read_count("0012") == 12
    assert read_count("0012", CountRadix.HEX) == 0x12
    assert read_count("00ff", "hex") == 255
    with pytest.raises(MalformedWord):
        read_count("00a1")
    with pytest.raises(MalformedWord):
        read_count("000a")
    with pytest.raises(MalformedWord):
        read_count("00zz", CountRadix.HEX)


def test_non_hex_feed_id_is_malformed():
    stream = "0001" + "x" * 64 + "0" * 150
    with pytest.raises(MalformedWord):
        decode_feed_batch(stream)


def test_decoding_is_idempotent():
    stream = "0002" + record(feed_id_hex(pair_id=3)) + record(feed_id_hex(feed_type=TWAP), TWAP)
    assert decode_feed_batch(stream) == decode_feed_batch(stream)


def test_decode_from_transport_words():
    a = feed_id_hex(pair_id=0x4254432f555344)
    b = feed_id_hex(feed_type=TWAP, pair_id=0x4554482f555344)
    stream = "0002" + record(a) + record(b, TWAP)
    header = "f" * 32
    words = ["0x" + header + stream[i : i + 32] for i in range(0, len(stream), 32)]
    words.append("0x" + header)  # padding word
    assert decode_feeds_updated(words) == ["0x" + a, "0x" + b]
