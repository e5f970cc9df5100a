# codec/u256.py
from __future__ import annotations

from typing import Tuple, Union

from codec.errors import InvalidInteger, MalformedWord

HexOrInt = Union[int, str]

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


def _strip_0x(s: str) -> str:
    return s[2:] if s[:2] in ("0x", "0X") else s


def parse_hex(text: str, max_digits: int | None = None) -> int:
    """
    Parse an optionally 0x prefixed hex string into a non negative int.
    Raises MalformedWord for anything that is not plain hex digits.
    """
    if not isinstance(text, str):
        raise MalformedWord(f"expected hex string, got {type(text).__name__}")
    digits = _strip_0x(text)
    if not digits or not _HEX_DIGITS.issuperset(digits):
        raise MalformedWord(f"not a hex word: {text!r}")
    if max_digits is not None and len(digits) > max_digits:
        raise MalformedWord(f"hex word wider than {max_digits} digits: {text!r}")
    return int(digits, 16)


def _coerce(value: HexOrInt) -> int:
    if isinstance(value, bool):
        raise InvalidInteger("bool is not an integer operand")
    if isinstance(value, U256):
        return value.value
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        return parse_hex(value)
    raise InvalidInteger(f"cannot use {type(value).__name__} as an integer operand")


class U256:
    """
    Fixed width 256 bit unsigned integer.

    Construction is range checked so every instance holds a value in
    [0, 2**256). Operations that could leave the range raise InvalidInteger
    instead of wrapping.

    >>> U256.compose(1, 2).value == (2 << 128) + 1
    True
    >>> str(U256(2**256 - 1))
    '115792089237316195423570985008687907853269984665640564039457584007913129639935'
    """

    BITS = 256
    MAX = (1 << 256) - 1
    HALF_BITS = 128
    HALF_MAX = (1 << 128) - 1

    __slots__ = ("_value",)

    def __init__(self, value: int):
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidInteger(f"U256 needs an int, got {type(value).__name__}")
        if value < 0 or value > self.MAX:
            raise InvalidInteger(f"value out of 256 bit range: {value}")
        self._value = value

    @classmethod
    def from_hex(cls, text: str) -> U256:
        return cls(parse_hex(text, max_digits=64))

    @classmethod
    def compose(cls, low: HexOrInt, high: HexOrInt) -> U256:
        lo = _coerce(low)
        hi = _coerce(high)
        for name, half in (("low", lo), ("high", hi)):
            if half < 0 or half > cls.HALF_MAX:
                raise InvalidInteger(f"{name} half out of 128 bit range: {half}")
        return cls((hi << cls.HALF_BITS) + lo)

    def decompose(self) -> Tuple[int, int]:
        return self._value & self.HALF_MAX, self._value >> self.HALF_BITS

    @property
    def value(self) -> int:
        return self._value

    def __rshift__(self, n: int) -> U256:
        if n < 0:
            raise InvalidInteger("negative shift count")
        return U256(self._value >> n)

    def __lshift__(self, n: int) -> U256:
        if n < 0:
            raise InvalidInteger("negative shift count")
        return U256(self._value << n)

    def __and__(self, mask: HexOrInt) -> U256:
        return U256(self._value & U256(_coerce(mask)).value)

    def __or__(self, other: HexOrInt) -> U256:
        return U256(self._value | U256(_coerce(other)).value)

    def __int__(self) -> int:
        return self._value

    __index__ = __int__

    def __eq__(self, other: object) -> bool:
        if isinstance(other, U256):
            return self._value == other._value
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._value)

    def __str__(self) -> str:
        return str(self._value)

    def __repr__(self) -> str:
        return f"U256({self.to_hex(prefix=True)})"

    def to_hex(self, prefix: bool = False) -> str:
        h = format(self._value, "064x")
        return "0x" + h if prefix else h
