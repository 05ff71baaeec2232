from __future__ import annotations

import logging
import random
from typing import Optional

from ciphercrack.classical.base import Cipher
from ciphercrack.classical.common import apply_keyword_extend, crib_set, map_text
from ciphercrack.core.directives import CrackMethod, Directives, KeywordExtend
from ciphercrack.core.job import CrackJob
from ciphercrack.core.language import Language
from ciphercrack.core.registry import register_cipher
from ciphercrack.core.results import CrackResult
from ciphercrack.core.scoring import word_count_fitness
from ciphercrack.core.search import dictionary_search, simulated_annealing
from ciphercrack.core.utils import collect_frequency_all

logger = logging.getLogger(__name__)


def validate_full_keyword(keyword: str, alphabet: str) -> Optional[str]:
    if len(keyword) != len(alphabet):
        return f"Keyword length {len(keyword)} must be the same as the alphabet length {len(alphabet)}"
    if len(set(keyword)) != len(keyword):
        return f"Keyword {keyword} contains repeated symbols"
    bad = [ch for ch in keyword if ch not in alphabet]
    if bad:
        return f"Keyword contains symbol '{bad[0]}' which is not in the alphabet"
    return None


def frequency_keyword(text: str, alphabet: str, language: Language) -> str:
    """
    Starting key for annealing: the most frequent cipher symbol stands for the
    language's most frequent letter, and so on down.
    """
    remaining = collect_frequency_all(text, alphabet)
    assigned: dict[str, str] = {}
    order = [c for c in language.letters_by_frequency() if c in alphabet]
    order += [c for c in alphabet if c not in order]
    for plain in order:
        # ties go to the earliest symbol in the alphabet
        best = max(remaining, key=lambda c: (remaining[c], -alphabet.index(c)))
        assigned[plain] = best
        del remaining[best]
    return "".join(assigned[c] for c in alphabet)


class SubstitutionCipher(Cipher):
    """Keyword substitution: each alphabet symbol maps to the same position in a full keyword."""

    name = "Substitution"
    family = "monoalphabetic"
    crack_methods = (CrackMethod.DICTIONARY, CrackMethod.WORD_COUNT)

    def validate_parameters(self, dirs: Directives) -> Optional[str]:
        return validate_full_keyword(dirs.keyword.upper(), dirs.alphabet)

    def validate_crack(self, dirs: Directives) -> Optional[str]:
        return super().validate_crack(dirs) or self.requires_dictionary(dirs)

    def encode(self, text: str, dirs: Directives) -> str:
        return map_text(text, dirs.alphabet, dirs.keyword.upper())

    def decode(self, text: str, dirs: Directives) -> str:
        return map_text(text, dirs.keyword.upper(), dirs.alphabet)

    def fitness(self, text: str, dirs: Directives) -> float:
        return word_count_fitness(text, dirs.dictionary)

    def describe(self, dirs: Directives) -> str:
        return f"Keyword Substitution cipher with keyword {dirs.keyword.upper()}"

    def crack(self, text: str, dirs: Directives, job: CrackJob) -> CrackResult:
        if dirs.crack_method is CrackMethod.WORD_COUNT:
            return self._crack_word_count(text, dirs, job)
        return self._crack_dictionary(text, dirs, job)

    def _crack_dictionary(self, text: str, dirs: Directives, job: CrackJob) -> CrackResult:
        alphabet = dirs.alphabet
        dictionary = dirs.dictionary
        words = [w for w in dictionary if len(w) > 1]
        extends = [e for e in KeywordExtend if e is not KeywordExtend.NONE]

        def derive(word: str):
            return [apply_keyword_extend(extend, word, alphabet) for extend in extends]

        outcome = dictionary_search(
            text,
            words,
            derive,
            lambda t, kw: map_text(t, kw, alphabet),
            crib_set(dirs.cribs),
            job,
            total=len(words),
            stop_at_first=dirs.stop_at_first,
            consider_reverse=dirs.consider_reverse,
            describe=lambda word, kw: f"Using {word} gave keyword {kw}",
        )
        logger.info("substitution dictionary crack tried %d keywords", outcome.tried)
        return self.from_outcome(
            text, dirs, outcome, {"keyword": outcome.key},
            f"Success: Searched using {len(dictionary)} dictionary words as keys and found all cribs [{dirs.cribs}]",
            f"Fail: Searched using {len(dictionary)} dictionary words as keys but did not find cribs [{dirs.cribs}]",
        )

    def _crack_word_count(self, text: str, dirs: Directives, job: CrackJob) -> CrackResult:
        alphabet = dirs.alphabet
        cribs = crib_set(dirs.cribs)
        rng = random.Random(dirs.seed)

        def decode(t: str, kw: str) -> str:
            return map_text(t, kw, alphabet)

        def fitness(plain: str) -> float:
            return self.fitness(plain, dirs)

        start = frequency_keyword(text, alphabet, dirs.language)

        # short texts do best starting cool: < 600 -> 1, 600-1199 -> 2, ...
        temperature = len(text) // 600 + 1
        job.update(1, f"Annealing from frequency key {start}")
        first = simulated_annealing(
            text, start, decode, fitness, cribs, job,
            temperature=temperature, cycles=5000 // temperature, rng=rng, describe=self.name,
        )
        logger.info("substitution word count: first pass best=%s found=%s", first.key, first.found)
        outcome = first
        activity = first.explain
        if not first.found:
            job.update(50, "Second pass from best key so far")
            outcome = simulated_annealing(
                text, first.key, decode, fitness, cribs, job,
                temperature=8, cycles=500, rng=rng, describe=self.name,
            )
            activity += outcome.explain

        if outcome.found:
            return self.success(
                text, dirs, outcome.plain_text,
                f"Success: Searched for largest word match and found all cribs [{dirs.cribs}] "
                f"with key {outcome.key}\n{activity}",
                {"keyword": outcome.key},
            )
        return self.failure(
            text, dirs,
            f"Fail: Searched for largest word match but did not find cribs [{dirs.cribs}], "
            f"best key was {outcome.key}\n{activity}",
            plain_text=outcome.plain_text,
        )


register_cipher(SubstitutionCipher())
