from __future__ import annotations

import re
import string
from typing import Callable, Optional

from .directives import DEFAULT_PADDING
from .language import Dictionary

_PUNCT_RE = re.compile("[" + re.escape(string.punctuation) + "]")

# A space goes after these when the next char is not already a space
_SPACE_AFTER = set(".!?)]},;:")

# Words looked ahead when choosing where to split
SPLIT_LOOK_AHEAD = 4


def upper_case(text: str) -> str:
    return text.upper()


def lower_case(text: str) -> str:
    return text.lower()


def reverse(text: str) -> str:
    return text[::-1]


def remove_padding(text: str, padding_chars: str = DEFAULT_PADDING) -> str:
    return "".join(ch for ch in text if ch not in padding_chars)


def remove_punctuation(text: str) -> str:
    return _PUNCT_RE.sub("", text)


def remove_non_alphabetic(text: str) -> str:
    return "".join(ch for ch in text if ch.isalpha())


def reverse_words(text: str, padding_chars: str = DEFAULT_PADDING) -> str:
    """Reverse each run of non-padding characters in place."""
    out: list[str] = []
    word: list[str] = []
    for ch in text:
        if ch in padding_chars:
            out.extend(reversed(word))
            word.clear()
            out.append(ch)
        else:
            word.append(ch)
    out.extend(reversed(word))
    return "".join(out)


def swap_rows_and_cols(text: str) -> str:
    """
    Transpose lines, so "ABC\\nDEF" becomes "AD\\nBE\\nCF\\n". Short lines are
    padded with spaces.
    """
    rows = text.split("\n")
    if rows and rows[-1] == "":
        rows.pop()
    width = max((len(r) for r in rows), default=0)
    out = []
    for col in range(width):
        out.append("".join(r[col] if col < len(r) else " " for r in rows) + "\n")
    return "".join(out)


def split_every(text: str, count: int, insert: str = " ") -> str:
    """Insert `insert` after every `count` characters."""
    if count <= 0:
        raise ValueError("Split count must be positive.")
    return insert.join(text[i:i + count] for i in range(0, len(text), count))


def _match_case(word: str, original: str) -> str:
    return "".join(w if o.isupper() else w.lower() for w, o in zip(word, original))


def _best_word(text: str, dictionary: Dictionary, look_ahead: int) -> tuple[str, int]:
    """
    Best word to take from the front of the (upper-case) text, scoring a run
    of words by the sum of their squared lengths over the next few words.
    """
    best, best_score = "", 0
    if look_ahead == 0 or len(text) < 2:
        return best, best_score

    prefixes = [text[:2]]
    if text[0] in dictionary.single_letter_words:
        prefixes.append(text[0])

    for prefix in prefixes:
        for word in dictionary.prefix_index.get(prefix, ()):
            if not text.startswith(word):
                continue
            n = len(word)
            if n == len(text) or not text[n].isalpha():
                best, best_score = word, n * n
            else:
                _, rest = _best_word(text[n:], dictionary, look_ahead - 1)
                if rest + n * n > best_score:
                    best, best_score = word, rest + n * n
    return best, best_score


def split_by_words(text: str, dictionary: Optional[Dictionary]) -> str:
    """
    Insert spaces between dictionary words in run-together text, keeping the
    original case. Without a dictionary the text is returned unchanged.
    """
    if dictionary is None:
        return text
    out: list[str] = []
    upper = text.upper()
    pos = 0
    while pos < len(text):
        ch = upper[pos]
        if ch.isalpha():
            word, score = _best_word(upper[pos:], dictionary, SPLIT_LOOK_AHEAD)
            if score == 0:
                word = ch
            out.append(_match_case(word, text[pos:pos + len(word)]))
            pos += len(word)
            if pos < len(text) and (text[pos].isalpha() or text[pos].isdigit()):
                out.append(" ")
        else:
            out.append(text[pos])
            pos += 1
            if pos < len(text) and text[pos] != " " and (ch in _SPACE_AFTER or ch.isdigit()):
                out.append(" ")
    return "".join(out)


TRANSFORMS: dict[str, Callable[[str], str]] = {
    "upper": upper_case,
    "lower": lower_case,
    "reverse": reverse,
    "reverse-words": reverse_words,
    "remove-padding": remove_padding,
    "remove-punctuation": remove_punctuation,
    "remove-non-alphabetic": remove_non_alphabetic,
    "swap-rows-cols": swap_rows_and_cols,
}
