# codec/envelope.py
from __future__ import annotations

from typing import Iterable

# every transport word starts with a 16 byte header
WORD_HEADER_HEX_LEN = 32


def strip_word(word: str) -> str:
    w = word[2:] if word.startswith("0x") else word
    return w[WORD_HEADER_HEX_LEN:]


def strip_words(words: Iterable[str]) -> str:
    """
    Drop the transport header of each word and join the remainders in order.
    Words no longer than the header contribute nothing.
    """
    return "".join(strip_word(w) for w in words)
