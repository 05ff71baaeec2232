from __future__ import annotations

import logging
import math
from typing import Optional

from ciphercrack.classical.base import Cipher
from ciphercrack.classical.common import apply_keyword_extend, crib_set
from ciphercrack.core.directives import CrackMethod, Directives, KeywordExtend
from ciphercrack.core.job import CrackJob
from ciphercrack.core.registry import register_cipher
from ciphercrack.core.results import CrackResult
from ciphercrack.core.search import dictionary_search

logger = logging.getLogger(__name__)

GRID_SIZES = (9, 16, 25, 36)
MAX_CRACK_HEADING = 6
CRACK_OMITTED = "J"
CRACK_REPLACE = "JI"
DIGITS = "0123456789"


def polybius_encode(text: str, keyword: str, heading: str, replace: str = "") -> str:
    """Each grid symbol becomes its row then column heading; anything else is copied."""
    keyword = keyword.upper()
    heading = heading.upper()
    swaps = replace.upper()
    size = len(heading)
    out = []
    for ch in text:
        pos = keyword.find(ch.upper())
        if pos < 0:
            at = swaps.find(ch.upper())
            if at >= 0 and at % 2 == 0:
                pos = keyword.find(swaps[at + 1])
        if pos < 0:
            out.append(ch)
        else:
            out.append(heading[pos // size] + heading[pos % size])
    return "".join(out)


def polybius_decode(text: str, keyword: str, heading: str) -> str:
    keyword = keyword.upper()
    heading = heading.upper()
    size = len(heading)
    out = []
    i = 0
    while i < len(text):
        row = heading.find(text[i].upper())
        if row < 0 or i == len(text) - 1:
            out.append(text[i])
            i += 1
            continue
        col = heading.find(text[i + 1].upper())
        index = size * row + col
        if col < 0 or index >= len(keyword):
            out.append(text[i:i + 2])
        else:
            out.append(keyword[index])
        i += 2
    return "".join(out)


def crack_alphabet(alphabet: str, cells: int) -> str:
    """Symbols for a cracked grid: J dropped, digits added if the grid is bigger."""
    letters = alphabet.replace(CRACK_OMITTED, "")
    if cells > len(letters):
        letters += "".join(ch for ch in alphabet + DIGITS if ch not in letters)
    return letters


class PolybiusCipher(Cipher):
    name = "Polybius"
    family = "polygraphic"
    crack_methods = (CrackMethod.DICTIONARY,)

    def _validate_heading(self, heading: str) -> Optional[str]:
        if len(heading) < 3:
            return "Heading is missing or too short"
        for i, ch in enumerate(heading):
            if heading.find(ch, i + 1) > 0:
                return f"Symbol {ch} is repeated in the Heading"
        return None

    def validate_parameters(self, dirs: Directives) -> Optional[str]:
        keyword = dirs.keyword.upper()
        heading = dirs.heading.upper()
        if len(keyword) < GRID_SIZES[0]:
            return "Keyword is empty or too short"
        if len(keyword) not in GRID_SIZES:
            return "Keyword length must be a square number"
        for i, ch in enumerate(keyword):
            if ch not in dirs.alphabet and ch not in DIGITS:
                return f"Symbol {ch} at offset {i} in the keyword is not in the alphabet"
        for i, ch in enumerate(keyword):
            if keyword.find(ch, i + 1) > 0:
                return f"Symbol {ch} is repeated in the keyword"
        reason = self._validate_heading(heading)
        if reason is not None:
            return reason
        if len(heading) != math.isqrt(len(keyword)):
            return "Heading length must be square-root of keyword length"
        replace = dirs.replace.upper()
        if len(replace) % 2:
            return f"Invalid replacement length {len(replace)}"
        for pos in range(0, len(replace), 2):
            if replace[pos] in keyword:
                return f"Replace symbol {replace[pos]} must not be in the keyword"
            if replace[pos + 1] not in keyword:
                return f"Replace with symbol {replace[pos + 1]} must be in the keyword"
        return None

    def validate_crack(self, dirs: Directives) -> Optional[str]:
        reason = super().validate_crack(dirs) or self.requires_dictionary(dirs)
        if reason is not None:
            return reason
        heading = dirs.heading.upper()
        reason = self._validate_heading(heading)
        if reason is None and len(heading) > MAX_CRACK_HEADING:
            return "Heading too long to crack"
        return reason

    def encode(self, text: str, dirs: Directives) -> str:
        return polybius_encode(text, dirs.keyword, dirs.heading, dirs.replace)

    def decode(self, text: str, dirs: Directives) -> str:
        return polybius_decode(text, dirs.keyword, dirs.heading)

    def describe(self, dirs: Directives) -> str:
        return f"Polybius cipher ({dirs.keyword.upper() or 'n/a'}, heading={dirs.heading.upper()})"

    def crack(self, text: str, dirs: Directives, job: CrackJob) -> CrackResult:
        heading = dirs.heading.upper()
        cells = len(heading) ** 2
        alphabet = crack_alphabet(dirs.alphabet, cells)
        dictionary = dirs.dictionary

        def derive(word: str):
            return [
                apply_keyword_extend(extend, word, alphabet, exclude=CRACK_OMITTED)[:cells]
                for extend in KeywordExtend
                if extend is not KeywordExtend.NONE
            ]

        outcome = dictionary_search(
            text,
            dictionary,
            derive,
            lambda t, kw: polybius_decode(t, kw, heading),
            crib_set(dirs.cribs),
            job,
            total=len(dictionary),
            stop_at_first=dirs.stop_at_first,
            consider_reverse=dirs.consider_reverse,
            describe=lambda word, kw: f"Keyword {kw} (from {word})",
        )
        logger.info("polybius dictionary crack tried %d grids", outcome.tried)
        key = {}
        if outcome.found:
            key = {"keyword": outcome.key, "heading": heading, "replace": CRACK_REPLACE}
        return self.from_outcome(
            text, dirs, outcome, key,
            f"Success: Searched using {len(dictionary)} dictionary words as keys and found all cribs [{dirs.cribs}]",
            f"Fail: Searched using {len(dictionary)} dictionary words as keys but did not find all cribs [{dirs.cribs}]",
        )


register_cipher(PolybiusCipher())
