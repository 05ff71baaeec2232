from __future__ import annotations

import math
from typing import Optional, Tuple

from ciphercrack.core.directives import DEFAULT_ALPHABET, KeywordExtend
from ciphercrack.core.scoring import contains_all_cribs, crib_set

__all__ = [
    "ALPHABET",
    "shift_symbol",
    "shift_text",
    "map_text",
    "egcd",
    "modinv",
    "are_coprime",
    "apply_keyword_extend",
    "keyword_to_columns",
    "parse_int_list",
    "crib_set",
    "contains_all_cribs",
]

ALPHABET = DEFAULT_ALPHABET


def _with_case(sym: str, original: str) -> str:
    return sym.lower() if original.islower() else sym


def shift_symbol(ch: str, shift: int, alphabet: str = ALPHABET) -> str:
    """Shift one symbol along the alphabet; symbols outside it are returned as-is."""
    idx = alphabet.find(ch.upper())
    if idx < 0:
        return ch
    return _with_case(alphabet[(idx + shift) % len(alphabet)], ch)


def shift_text(text: str, shift: int, alphabet: str = ALPHABET) -> str:
    """Caesar shift; preserves non-alphabet symbols; preserves case."""
    return "".join(shift_symbol(ch, shift, alphabet) for ch in text)


def map_text(text: str, source: str, target: str) -> str:
    """
    Replace each symbol of `source` found in the text by the symbol at the
    same position in `target`, keeping case; anything else passes through.
    """
    out = []
    for ch in text:
        idx = source.find(ch.upper())
        out.append(ch if idx < 0 else _with_case(target[idx], ch))
    return "".join(out)


def egcd(a: int, b: int) -> Tuple[int, int, int]:
    if a == 0:
        return (b, 0, 1)
    g, y, x = egcd(b % a, a)
    return (g, x - (b // a) * y, y)


def modinv(a: int, m: int) -> int:
    """Modular inverse of a under mod m; raises ValueError if none."""
    a %= m
    g, x, _ = egcd(a, m)
    if g != 1:
        raise ValueError(f"No modular inverse for a={a} mod {m}.")
    return x % m


def are_coprime(a: int, b: int) -> bool:
    """0 is never coprime, even with 1."""
    if a == 0 or b == 0:
        return False
    return math.gcd(a, b) == 1


def apply_keyword_extend(extend: KeywordExtend, keyword: str, alphabet: str = ALPHABET, exclude: str = "") -> str:
    """
    Fill a short keyword out to a full alphabet: first the unique keyword
    symbols, then the remaining alphabet symbols in order, starting after a
    point chosen by `extend`. Excluded symbols never appear.

    >>> apply_keyword_extend(KeywordExtend.LAST, "ZEBRA")
    'ZEBRACDFGHIJKLMNOPQSTUVWXY'
    """
    kw = keyword.upper()
    if extend is KeywordExtend.NONE:
        return kw

    used: list[str] = []
    for ch in kw:
        if ch in alphabet and ch not in exclude and ch not in used:
            used.append(ch)

    prev = alphabet[-1]
    if used:
        if extend is KeywordExtend.MIN:
            prev = min(used)
        elif extend is KeywordExtend.MAX:
            prev = max(used)
        elif extend is KeywordExtend.LAST:
            prev = used[-1]

    doubled = alphabet + alphabet
    out = list(used)
    seen = set(used)
    for ch in doubled[alphabet.index(prev) + 1:]:
        if ch not in seen and ch not in exclude:
            out.append(ch)
            seen.add(ch)
    return "".join(out)


def keyword_to_columns(keyword: str) -> Optional[tuple[int, ...]]:
    """
    Turn a column key into a column order. Digits like "3,2,1,0" are used as
    given; for letters, column i is where the i-th letter in alphabetical
    order sits in the keyword, so "BETA" gives (3, 0, 1, 2).
    None if the key is empty or has repeats.
    """
    key = keyword.strip().upper()
    if not key:
        return None
    if key[0].isdigit():
        try:
            cols = tuple(parse_int_list(key))
        except ValueError:
            return None
    else:
        if not key.isalpha() or len(set(key)) != len(key):
            return None
        cols = tuple(key.index(ch) for ch in sorted(key))
    if sorted(cols) != list(range(len(cols))):
        return None
    return cols


def parse_int_list(raw: str) -> list[int]:
    """
    Parse lists like "3,2,1,0", "7 8 11 11" or "[1, 2]".
    """
    cleaned = raw.strip().strip("[]()").replace(":", ",").replace(" ", ",")
    parts = [p for p in cleaned.split(",") if p]
    if not parts:
        raise ValueError("Expected a list of integers like '3,2,1,0'.")
    try:
        return [int(p) for p in parts]
    except ValueError as e:
        raise ValueError(f"Bad integer list '{raw}'.") from e
