from __future__ import annotations

import logging
from typing import Optional

from ciphercrack.classical.base import Cipher
from ciphercrack.classical.common import crib_set
from ciphercrack.core.directives import CrackMethod, Directives
from ciphercrack.core.features import IOC_SIGNIFICANCE, cyclic_ioc, likely_key_lengths
from ciphercrack.core.job import CrackJob
from ciphercrack.core.language import ENGLISH_IOC
from ciphercrack.core.registry import register_cipher
from ciphercrack.core.results import CrackResult
from ciphercrack.core.scoring import ioc_fitness
from ciphercrack.core.search import brute_force, hill_climb, preview, resolve_shift

logger = logging.getLogger(__name__)

# Longest keyword guessed from cyclic IOC when no length is given
MAX_GUESSED_KEY_LENGTH = 20


def _key_shifts(keyword: str, alphabet: str) -> list[int]:
    return [alphabet.index(ch) for ch in keyword.upper()]


def periodic_apply(text: str, keyword: str, alphabet: str, combine) -> str:
    """
    Apply combine(symbol_ordinal, key_ordinal) -> ordinal along the text. The
    key advances only on alphabet symbols; everything else passes through.
    """
    shifts = _key_shifts(keyword, alphabet)
    n = len(alphabet)
    out = []
    j = 0
    for ch in text:
        idx = alphabet.find(ch.upper())
        if idx < 0:
            out.append(ch)
            continue
        sym = alphabet[combine(idx, shifts[j % len(shifts)]) % n]
        out.append(sym.lower() if ch.islower() else sym)
        j += 1
    return "".join(out)


def _vigenere_encrypt(text: str, keyword: str, alphabet: str) -> str:
    return periodic_apply(text, keyword, alphabet, lambda p, k: p + k)


def _vigenere_decrypt(text: str, keyword: str, alphabet: str) -> str:
    return periodic_apply(text, keyword, alphabet, lambda c, k: c - k)


def guess_key_length(text: str, alphabet: str, expected_ioc: float = ENGLISH_IOC) -> int:
    """
    Shortest key length whose columns read like the language. Longer multiples
    of the real length score as well or better on short columns, so the best
    average alone overshoots. Falls back to the best average when no length
    comes close.
    """
    cycles = cyclic_ioc(text, alphabet, max_cycles=MAX_GUESSED_KEY_LENGTH + 1)
    for k in range(2, len(cycles)):
        if cycles[k] >= expected_ioc * IOC_SIGNIFICANCE:
            return k
    ranked = [(k, v) for k, v in likely_key_lengths(text, alphabet, MAX_GUESSED_KEY_LENGTH) if k > 1]
    return ranked[0][0] if ranked else 1


class VigenereCipher(Cipher):
    name = "Vigenere"
    family = "polyalphabetic"
    crack_methods = (CrackMethod.DICTIONARY, CrackMethod.IOC)

    def validate_parameters(self, dirs: Directives) -> Optional[str]:
        keyword = dirs.keyword.upper()
        if len(keyword) < 2:
            return "Keyword is empty or too short"
        for i, ch in enumerate(keyword):
            if ch not in dirs.alphabet:
                return f"Character {ch} at offset {i} in the keyword is not in the alphabet"
        return None

    def validate_crack(self, dirs: Directives) -> Optional[str]:
        reason = super().validate_crack(dirs)
        if reason is not None:
            return reason
        if dirs.crack_method is CrackMethod.IOC and dirs.keyword_length < 0:
            return "Keyword length must be a positive integer, or 0 to guess it"
        if dirs.crack_method is CrackMethod.DICTIONARY:
            return self.requires_dictionary(dirs)
        return None

    def encode(self, text: str, dirs: Directives) -> str:
        return _vigenere_encrypt(text, dirs.keyword, dirs.alphabet)

    def decode(self, text: str, dirs: Directives) -> str:
        return _vigenere_decrypt(text, dirs.keyword, dirs.alphabet)

    def decode_with(self, text: str, keyword: str, alphabet: str) -> str:
        return _vigenere_decrypt(text, keyword, alphabet)

    def fitness(self, text: str, dirs: Directives) -> float:
        return ioc_fitness(text, dirs.alphabet)

    def describe(self, dirs: Directives) -> str:
        return f"{self.name} cipher with keyword {dirs.keyword.upper() or 'n/a'}"

    def crack(self, text: str, dirs: Directives, job: CrackJob) -> CrackResult:
        if dirs.crack_method is CrackMethod.IOC:
            return self._crack_ioc(text, dirs, job)
        return self._crack_dictionary(text, dirs, job)

    def _crack_dictionary(self, text: str, dirs: Directives, job: CrackJob) -> CrackResult:
        job.update(message=f"Starting {self.name} dictionary crack")
        alphabet = dirs.alphabet
        dictionary = dirs.dictionary
        words = [w for w in dictionary if all(ch in alphabet for ch in w)]
        outcome = brute_force(
            text,
            words,
            lambda t, kw: self.decode_with(t, kw, alphabet),
            crib_set(dirs.cribs),
            job,
            describe=lambda kw: f"Keyword {kw}",
            total=len(words),
            stop_at_first=dirs.stop_at_first,
            consider_reverse=dirs.consider_reverse,
        )
        return self.from_outcome(
            text, dirs, outcome, {"keyword": outcome.key},
            f"Success: Dictionary scan: Searched using {len(dictionary)} dictionary words as keywords "
            f"looking for cribs [{dirs.cribs}].",
            f"Fail: Searched using {len(dictionary)} dictionary words as keywords, looking for cribs "
            f"[{dirs.cribs}] but found none.",
        )

    def _crack_ioc(self, text: str, dirs: Directives, job: CrackJob) -> CrackResult:
        job.update(message=f"Starting {self.name} hill climb using IOC fitness")
        alphabet = dirs.alphabet
        length = dirs.keyword_length
        guessed = ""
        if length <= 0:
            expected = ENGLISH_IOC if dirs.language is None else dirs.language.expected_ioc
            length = guess_key_length(text, alphabet, expected)
            guessed = f"Keyword length {length} chosen as the shortest cycle with a language-like IOC.\n"
            logger.info("%s IOC crack: guessed keyword length %d", self.name, length)

        def decode(t: str, kw: str) -> str:
            return self.decode_with(t, kw, alphabet)

        def fitness(plain: str) -> float:
            return self.fitness(plain, dirs)

        climb = hill_climb(text, alphabet[0] * length, alphabet, decode, fitness, job)
        logger.info("%s IOC climb settled on %s after %d decodes", self.name, climb.key, climb.tried)
        job.update(90, f"Trying all shifts of {climb.key}")

        # IOC is the same for every uniform shift of the key, so the cribs decide
        shifted = resolve_shift(text, climb.key, alphabet, decode, crib_set(dirs.cribs))
        activity = guessed + climb.explain + shifted.explain
        if shifted.found:
            return self.success(
                text, dirs, shifted.plain_text,
                f"Success: Searched for best IOC and found all cribs [{dirs.cribs}] with key {shifted.key}\n"
                + activity,
                {"keyword": shifted.key},
            )
        return self.failure(
            text, dirs,
            f"Fail: Searched for best IOC, but did not find cribs [{dirs.cribs}], best key was {shifted.key}, "
            f"which gave text starting: {preview(shifted.plain_text)}\n" + activity,
            plain_text=shifted.plain_text,
        )


register_cipher(VigenereCipher())
