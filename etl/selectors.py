# etl/selectors.py
from functools import lru_cache

from web3 import Web3

from etl.felt import felt_to_int

# starknet keccak keeps the low 250 bits of keccak256
_MASK_250 = (1 << 250) - 1


@lru_cache(maxsize=None)
def selector_from_name(name: str) -> str:
    """Event/function selector as Starknet computes it, 0x prefixed, not padded."""
    digest = int.from_bytes(bytes(Web3.keccak(text=name)), "big")
    return hex(digest & _MASK_250)


def same_felt(a, b) -> bool:
    """Compare two felts by value so padded and unpadded hex match."""
    if a is None or b is None:
        return False
    return felt_to_int(a) == felt_to_int(b)
