from __future__ import annotations

import logging
from dataclasses import dataclass, field
from importlib import resources
from pathlib import Path
from typing import Iterable, Iterator, Optional

from .directives import DEFAULT_ALPHABET

logger = logging.getLogger(__name__)


class Dictionary:
    """
    Upper-cased word list in load order, plus a lazily built index of words by
    their first two letters (one-letter words are indexed under themselves).
    """

    def __init__(self, words: Iterable[str] = ()):
        self._words: list[str] = []
        self._set: set[str] = set()
        self.single_letter_words: set[str] = set()
        self._prefixes: Optional[dict[str, list[str]]] = None
        for w in words:
            self.add(w)

    @classmethod
    def from_text(cls, text: str) -> "Dictionary":
        return cls(line for line in text.splitlines() if not line.startswith("#"))

    @classmethod
    def from_file(cls, path: str | Path) -> "Dictionary":
        return cls.from_text(Path(path).read_text(encoding="utf-8"))

    def add(self, word: str) -> None:
        w = word.strip().upper()
        if not w or w in self._set:
            return
        self._words.append(w)
        self._set.add(w)
        if len(w) == 1:
            self.single_letter_words.add(w)
        self._prefixes = None

    def __contains__(self, word: object) -> bool:
        return isinstance(word, str) and word.upper() in self._set

    def __iter__(self) -> Iterator[str]:
        return iter(self._words)

    def __len__(self) -> int:
        return len(self._words)

    def words_of_length(self, *lengths: int) -> list[str]:
        return [w for w in self._words if len(w) in lengths]

    @property
    def prefix_index(self) -> dict[str, list[str]]:
        if self._prefixes is None:
            index: dict[str, list[str]] = {}
            for w in self._words:
                index.setdefault(w[:2], []).append(w)
            self._prefixes = index
        return self._prefixes

    def words_with_prefix(self, prefix: str) -> list[str]:
        return self.prefix_index.get(prefix.upper()[:2], [])


@dataclass(frozen=True)
class Language:
    name: str
    expected_ioc: float
    letter_frequencies: dict[str, float]
    bigram_frequencies: dict[str, float] = field(default_factory=dict)
    trigram_frequencies: dict[str, float] = field(default_factory=dict)
    alphabet: str = DEFAULT_ALPHABET
    dictionary: Optional[Dictionary] = field(default=None, compare=False, repr=False)

    def letters_by_frequency(self) -> list[str]:
        """Letters of the language, most frequent first."""
        return sorted(self.letter_frequencies, key=lambda c: self.letter_frequencies[c], reverse=True)

    def frequency_of(self, gram: str) -> float:
        g = gram.upper()
        if len(g) == 3:
            table = self.trigram_frequencies
        elif len(g) == 2:
            table = self.bigram_frequencies
        else:
            table = self.letter_frequencies
        return table.get(g, 0.0)

    def with_dictionary(self, dictionary: Optional[Dictionary]) -> "Language":
        return Language(
            name=self.name,
            expected_ioc=self.expected_ioc,
            letter_frequencies=self.letter_frequencies,
            bigram_frequencies=self.bigram_frequencies,
            trigram_frequencies=self.trigram_frequencies,
            alphabet=self.alphabet,
            dictionary=dictionary,
        )


# Percentages
_ENGLISH_LETTERS = {
    "A": 8.167, "B": 1.492, "C": 2.782, "D": 4.253, "E": 12.702, "F": 2.228,
    "G": 2.015, "H": 6.094, "I": 6.966, "J": 0.153, "K": 0.772, "L": 4.025,
    "M": 2.406, "N": 6.749, "O": 7.507, "P": 1.929, "Q": 0.095, "R": 5.987,
    "S": 6.327, "T": 9.056, "U": 2.758, "V": 0.978, "W": 2.360, "X": 0.150,
    "Y": 1.974, "Z": 0.074,
}

_ENGLISH_BIGRAMS = {
    "TH": 2.71, "HE": 2.33, "IN": 2.03, "ER": 1.78, "AN": 1.61, "RE": 1.41,
    "ES": 1.32, "ON": 1.32, "ST": 1.25, "NT": 1.17, "EN": 1.13, "AT": 1.12,
    "ED": 1.08, "ND": 1.07, "TO": 1.07, "OR": 1.06, "EA": 1.00, "TI": 0.99,
    "AR": 0.98, "TE": 0.98,
}

_ENGLISH_TRIGRAMS = {
    "THE": 1.81, "AND": 0.73, "ING": 0.72, "ENT": 0.42, "ION": 0.42, "HER": 0.36,
    "FOR": 0.34, "THA": 0.33, "NTH": 0.33, "INT": 0.32, "ERE": 0.31, "TIO": 0.31,
    "TER": 0.30, "EST": 0.28, "ERS": 0.28, "ATI": 0.26, "HAT": 0.26, "ATE": 0.25,
    "ALL": 0.25, "ETH": 0.24,
}

ENGLISH_IOC = 0.066895

GERMAN_ALPHABET = "AÄBCDEFGHIJKLMNOÖPQRSßTUÜVWXYZ"

_GERMAN_LETTERS = {
    "A": 6.34, "B": 2.21, "C": 2.71, "D": 4.92, "E": 15.99, "F": 1.80,
    "G": 3.02, "H": 4.11, "I": 7.60, "J": 0.27, "K": 1.50, "L": 3.72,
    "M": 2.75, "N": 9.59, "O": 2.75, "P": 1.06, "Q": 0.04, "R": 7.71,
    "S": 6.41, "T": 6.43, "U": 3.76, "V": 0.94, "W": 1.40, "X": 0.07,
    "Y": 0.13, "Z": 1.22, "Ä": 0.54, "Ö": 0.24, "Ü": 0.63, "ß": 0.15,
}

_GERMAN_BIGRAMS = {
    "ER": 3.90, "EN": 3.61, "CH": 2.36, "DE": 2.31, "EI": 1.98, "TE": 1.98,
    "IN": 1.71, "ND": 1.68, "IE": 1.48, "GE": 1.45, "ST": 1.21, "NE": 1.19,
    "BE": 1.17, "ES": 1.17, "UN": 1.13, "RE": 1.11, "AN": 1.07, "HE": 0.89,
    "AU": 0.89, "NG": 0.87,
}

_GERMAN_TRIGRAMS = {
    "DER": 1.04, "EIN": 0.83, "SCH": 0.76, "ICH": 0.75, "NDE": 0.72, "DIE": 0.62,
    "CHE": 0.58, "DEN": 0.56, "TEN": 0.51, "UND": 0.48, "INE": 0.48, "TER": 0.44,
    "GEN": 0.44, "END": 0.44, "ERS": 0.42, "STE": 0.42, "CHT": 0.41, "UNG": 0.39,
    "DAS": 0.38, "ERE": 0.38,
}

GERMAN_IOC = 0.076667

_DUTCH_LETTERS = {
    "A": 7.79, "B": 1.38, "C": 1.31, "D": 5.48, "E": 19.34, "F": 0.74,
    "G": 3.17, "H": 3.16, "I": 5.04, "J": 1.34, "K": 2.83, "L": 3.85,
    "M": 2.60, "N": 10.04, "O": 5.89, "P": 1.51, "Q": 0.01, "R": 5.70,
    "S": 3.91, "T": 6.50, "U": 2.15, "V": 2.27, "W": 1.74, "X": 0.05,
    "Y": 0.06, "Z": 1.62,
}

_DUTCH_BIGRAMS = {
    "EN": 6.08, "DE": 3.28, "ER": 2.97, "EE": 2.09, "AN": 2.05, "ET": 2.03,
    "GE": 1.96, "TE": 1.93, "IJ": 1.69, "AA": 1.66, "EL": 1.47, "IN": 1.46,
    "HE": 1.44, "IE": 1.39, "CH": 1.18, "AR": 1.17, "OO": 1.06, "ST": 1.05,
    "LE": 1.04, "ND": 1.03,
}

_DUTCH_TRIGRAMS = {
    "EEN": 1.40, "AAR": 1.14, "HET": 1.08, "VER": 0.96, "VAN": 0.92, "GEN": 0.77,
    "OOR": 0.76, "NDE": 0.71, "CHT": 0.69, "NIE": 0.67, "ING": 0.67, "TEN": 0.63,
    "DEN": 0.61, "SCH": 0.61, "EER": 0.61, "DER": 0.59, "DAT": 0.59, "IET": 0.58,
    "STE": 0.53, "AND": 0.50,
}

DUTCH_IOC = 0.0798

_LANGUAGES: dict[str, Language] = {}


def load_dictionary(filename: str = "dictionary_english.txt") -> Dictionary:
    raw = resources.files("ciphercrack.data").joinpath(filename).read_text(encoding="utf-8")
    d = Dictionary.from_text(raw)
    logger.debug("loaded %d words from %s", len(d), filename)
    return d


def english() -> Language:
    """The shared English reference data, dictionary included. Loaded once."""
    lang = _LANGUAGES.get("english")
    if lang is None:
        lang = Language(
            name="English",
            expected_ioc=ENGLISH_IOC,
            letter_frequencies=dict(_ENGLISH_LETTERS),
            bigram_frequencies=dict(_ENGLISH_BIGRAMS),
            trigram_frequencies=dict(_ENGLISH_TRIGRAMS),
            dictionary=load_dictionary(),
        )
        _LANGUAGES["english"] = lang
    return lang


# No word lists ship for these, so they serve analysis but not dictionary cracks
GERMAN = Language(
    name="German",
    expected_ioc=GERMAN_IOC,
    letter_frequencies=_GERMAN_LETTERS,
    bigram_frequencies=_GERMAN_BIGRAMS,
    trigram_frequencies=_GERMAN_TRIGRAMS,
    alphabet=GERMAN_ALPHABET,
)

DUTCH = Language(
    name="Dutch",
    expected_ioc=DUTCH_IOC,
    letter_frequencies=_DUTCH_LETTERS,
    bigram_frequencies=_DUTCH_BIGRAMS,
    trigram_frequencies=_DUTCH_TRIGRAMS,
)

LANGUAGE_NAMES = ("english", "german", "dutch")


def get_language(name: str) -> Optional[Language]:
    key = name.strip().lower()
    if key == "english":
        return english()
    if key == "german":
        return GERMAN
    if key == "dutch":
        return DUTCH
    return None
