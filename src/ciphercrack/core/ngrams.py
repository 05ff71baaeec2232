from __future__ import annotations

from collections import Counter
from typing import Optional

from .directives import DEFAULT_ALPHABET
from .language import Language
from .results import FrequencyEntry
from .utils import keep_alphabet


def gram_frequency(text: str, size: int, alphabet: str = DEFAULT_ALPHABET) -> dict[str, int]:
    """
    Sliding-window gram counts over the alphabet symbols of the text, so
    padding and punctuation never split a gram.
    """
    if size < 1:
        raise ValueError("Gram size must be at least 1.")
    s = keep_alphabet(text, alphabet)
    counts: Counter[str] = Counter(s[i:i + size] for i in range(len(s) - size + 1))
    return dict(counts)


def frequency_table(
    text: str,
    size: int = 1,
    language: Optional[Language] = None,
    alphabet: str = DEFAULT_ALPHABET,
    *,
    limit: Optional[int] = None,
) -> list[FrequencyEntry]:
    """Gram counts as FrequencyEntry rows, most frequent first (ties alphabetical)."""
    counts = gram_frequency(text, size, alphabet)
    total = sum(counts.values())
    rows = []
    for gram, count in sorted(counts.items(), key=lambda kv: (-kv[1], kv[0])):
        pct = 100.0 * count / total if total else 0.0
        normal = language.frequency_of(gram) if language is not None else 0.0
        rows.append(FrequencyEntry(gram=gram, count=count, percent=pct, normal=normal))
    return rows[:limit] if limit is not None else rows


def repeated_gram_rate(text: str, size: int = 3, alphabet: str = DEFAULT_ALPHABET) -> float:
    """Share of grams that occur more than once."""
    counts = gram_frequency(text, size, alphabet)
    total = sum(counts.values())
    if not total:
        return 0.0
    return sum(c for c in counts.values() if c > 1) / total
