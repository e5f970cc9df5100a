# etl/felt.py
"""
etl.felt

Helpers for Starknet field elements as they arrive in event payloads:
0x prefixed hex strings, occasionally decimal strings or ints.

Numeric fields stay Python ints all the way to the sink; nothing is routed
through float. 256 bit amounts are emitted as exact decimal strings.
"""
import re
from datetime import datetime, timedelta, timezone

from codec.u256 import U256

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_LEADING_CONTROL = re.compile(r"^[\x00-\x1f]+")


def _strip_0x(s: str) -> str:
    return s[2:] if isinstance(s, str) and s.startswith("0x") else s


def felt_to_int(hex_or_int) -> int:
    if hex_or_int is None:
        return 0
    if isinstance(hex_or_int, int):
        return hex_or_int
    s = str(hex_or_int).strip().lower()
    return int(s, 16) if s.startswith("0x") else int(s)


def felt_is_zero(felt) -> bool:
    return felt_to_int(felt) == 0


def decode_short_string(felt) -> str:
    """
    Decode a Cairo short string (up to 31 ASCII bytes packed big endian).
    Zero padding on the left decodes to NUL characters, see
    escape_invalid_characters.
    """
    if isinstance(felt, int):
        digits = format(felt, "x")
    elif str(felt).lower().startswith("0x"):
        digits = _strip_0x(str(felt).lower())
    else:
        digits = format(int(str(felt)), "x")
    if len(digits) % 2:
        digits = "0" + digits
    return bytes.fromhex(digits).decode("latin-1")


def escape_invalid_characters(s: str) -> str:
    return _LEADING_CONTROL.sub("", s)


def felt_to_str(felt) -> str:
    return escape_invalid_characters(decode_short_string(felt))


def _iso(dt: datetime) -> str:
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def to_iso_timestamp(seconds) -> str:
    """Unix seconds (felt) to an ISO 8601 UTC string with milliseconds."""
    try:
        return _iso(_EPOCH + timedelta(seconds=felt_to_int(seconds)))
    except OverflowError as e:
        raise ValueError(f"timestamp out of range: {seconds!r}") from e


def to_iso_timestamp_ms(millis) -> str:
    try:
        return _iso(_EPOCH + timedelta(milliseconds=felt_to_int(millis)))
    except OverflowError as e:
        raise ValueError(f"timestamp out of range: {millis!r}") from e


def trim_leading_zeros(hex_string: str) -> str:
    if hex_string.startswith("0x"):
        return "0x" + hex_string[2:].lstrip("0")
    return hex_string.lstrip("0")


def concatenate_hex(words) -> str:
    return "".join(_strip_0x(w) for w in words)


def u256_to_decstr(low, high) -> str:
    return str(U256.compose(low, high))
