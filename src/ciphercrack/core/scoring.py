from __future__ import annotations

from typing import Iterable, Optional

from .directives import DEFAULT_ALPHABET
from .features import RARE_LETTERS
from .language import Dictionary
from .utils import index_of_coincidence, remove_whitespace

# ----------------------------
# Cribs
# ----------------------------


def crib_set(cribs: str) -> set[str]:
    """'the, And ,have' -> {'THE', 'AND', 'HAVE'}"""
    if not cribs:
        return set()
    cleaned = cribs.upper().replace(" ", "")
    return {c for c in cleaned.split(",") if c}


def contains_all_cribs(text: str, cribs: Iterable[str]) -> bool:
    """Every crib appears in the upper-cased, whitespace-free text."""
    cribs = list(cribs)
    if not cribs:
        return False
    flat = remove_whitespace(text.upper())
    return all(c in flat for c in cribs)


# ----------------------------
# Fitness measures (higher is better)
# ----------------------------


def word_count_fitness(text: str, dictionary: Optional[Dictionary]) -> float:
    """
    Number of letters covered by dictionary words (length > 1) in the text,
    counting non-overlapping occurrences of each word.
    """
    if dictionary is None:
        return 0.0
    flat = remove_whitespace(text.upper())
    found = 0
    for word in dictionary:
        if len(word) > 1:
            found += flat.count(word) * len(word)
    return float(found)


def ioc_fitness(text: str, alphabet: str = DEFAULT_ALPHABET) -> float:
    return index_of_coincidence(text, alphabet)


def rare_letter_count(text: str, rare: str = RARE_LETTERS) -> int:
    up = text.upper()
    return sum(up.count(c) for c in rare)
