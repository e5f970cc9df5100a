from dataclasses import FrozenInstanceError

import pytest
from hypothesis import given
from hypothesis.strategies import integers

from codec.feed_id import FeedId, decode_feed_id, split_feed_id
from codec.u256 import U256


def feed_id_hex(asset_class: int = 0, feed_type: int = 0, pair_id: int = 1) -> str:
    return format((asset_class << 232) | (feed_type << 216) | pair_id, "064x")


def test_decode_unique_crypto_feed():
    f = decode_feed_id("0x" + feed_id_hex(0, 0x0000, 0x4254432f555344))
    assert f.asset_class == 0
    assert f.feed_type == 0
    assert f.main_type == 0
    assert f.pair_id == 0x4254432f555344
    assert f.reserved == 0


def test_decode_twap_feed_type_main_byte():
    f = decode_feed_id(feed_id_hex(0, 0x0102, 7))
    assert f.feed_type == 0x0102
    assert f.main_type == 1
    assert f.pair_id == 7


def test_fields_read_at_fixed_offsets():
    f = decode_feed_id(feed_id_hex(0xBEEF, 0xCAFE, (1 << 216) - 1))
    assert (f.asset_class, f.feed_type, f.pair_id) == (0xBEEF, 0xCAFE, (1 << 216) - 1)


@given(integers(0, 2**248 - 1))
def test_three_fields_rebuild_value(v: int):
    f = split_feed_id(U256(v))
    assert (f.asset_class << 232) | (f.feed_type << 216) | f.pair_id == v
    assert f.reserved == 0


@given(integers(0, 2**256 - 1))
def test_decomposition_is_lossless(v: int):
    assert split_feed_id(U256(v)).to_u256() == U256(v)


def test_feed_id_is_immutable():
    f = FeedId(asset_class=0, feed_type=0, pair_id=1)
    with pytest.raises(FrozenInstanceError):
        f.pair_id = 2
