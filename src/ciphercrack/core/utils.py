from __future__ import annotations

import math
import re
from collections import Counter
from typing import Iterable

from .directives import DEFAULT_ALPHABET, DEFAULT_PADDING

_WHITESPACE_RE = re.compile(r"\s+")
_NON_WORD_RE = re.compile(r"\W+")


def keep_alphabet(s: str, alphabet: str = DEFAULT_ALPHABET) -> str:
    """Uppercase and keep only symbols of the alphabet."""
    if not s:
        return ""
    allowed = set(alphabet)
    return "".join(ch for ch in s.upper() if ch in allowed)


def remove_whitespace(s: str) -> str:
    return _WHITESPACE_RE.sub("", s)


def remove_non_word(s: str) -> str:
    return _NON_WORD_RE.sub("", s)


def reverse(s: str) -> str:
    return s[::-1]


def shannon_entropy(s: str) -> float:
    """Shannon entropy in bits/char."""
    if not s:
        return 0.0
    counts = Counter(s)
    n = len(s)
    ent = 0.0
    for c in counts.values():
        p = c / n
        ent -= p * math.log2(p)
    return ent


def collect_frequency(
    text: str,
    alphabet: str = DEFAULT_ALPHABET,
    *,
    use_upper: bool = True,
    alphabetic_only: bool = True,
    padding_chars: str = DEFAULT_PADDING,
) -> dict[str, int]:
    """
    Count symbols in the text. With alphabetic_only, only alphabet symbols are
    counted; otherwise everything but padding is.
    """
    if use_upper:
        text = text.upper()
    allowed = set(alphabet)
    counts: Counter[str] = Counter()
    for ch in text:
        if alphabetic_only:
            if ch in allowed:
                counts[ch] += 1
        elif ch not in padding_chars:
            counts[ch] += 1
    return dict(counts)


def collect_frequency_all(text: str, alphabet: str = DEFAULT_ALPHABET) -> dict[str, int]:
    """Like collect_frequency but every alphabet symbol is present, zero counts included."""
    counts = {c: 0 for c in alphabet}
    for ch in text.upper():
        if ch in counts:
            counts[ch] += 1
    return counts


def count_alphabetic(text: str, alphabet: str = DEFAULT_ALPHABET) -> int:
    allowed = set(alphabet)
    return sum(1 for ch in text.upper() if ch in allowed)


def count_non_padding(text: str, padding_chars: str = DEFAULT_PADDING) -> int:
    return sum(1 for ch in text if ch not in padding_chars)


def ioc_from_counts(counts: Iterable[int]) -> float:
    values = list(counts)
    n = sum(values)
    if n < 2:
        return 0.0
    return sum(c * (c - 1) for c in values) / (n * (n - 1))


def index_of_coincidence(s: str, alphabet: str = DEFAULT_ALPHABET) -> float:
    """IOC over alphabet symbols only; 0.0 if fewer than two."""
    return ioc_from_counts(collect_frequency(s, alphabet).values())


def chunked(seq: Iterable, size: int):
    buf = []
    for x in seq:
        buf.append(x)
        if len(buf) == size:
            yield buf
            buf = []
    if buf:
        yield buf


def factors_of(num: int) -> list[int]:
    """All factors of num including 1 and num itself."""
    if num <= 0:
        return []
    if num == 1:
        return [1]
    return [i for i in range(1, num // 2 + 1) if num % i == 0] + [num]
