from __future__ import annotations

import itertools
import logging
import math
from typing import Optional, Sequence

from ciphercrack.classical.base import Cipher
from ciphercrack.classical.common import crib_set, keyword_to_columns
from ciphercrack.core.directives import CrackMethod, Directives
from ciphercrack.core.job import CrackJob
from ciphercrack.core.registry import register_cipher
from ciphercrack.core.results import CrackResult
from ciphercrack.core.search import brute_force, dictionary_search
from ciphercrack.core.utils import remove_whitespace

logger = logging.getLogger(__name__)

PAD_SYMBOL = "X"


def _prepare(text: str, width: int) -> str:
    # punctuation is kept, only gaps are removed
    flat = remove_whitespace(text)
    if len(flat) % width:
        flat += PAD_SYMBOL * (width - len(flat) % width)
    return flat


def permutation_encode(text: str, permutation: Sequence[int], read_across: bool) -> str:
    width = len(permutation)
    plain = _prepare(text, width)
    if read_across:
        return "".join(
            plain[line + col] for line in range(0, len(plain), width) for col in permutation
        )
    # read down each column, taking the columns in permutation order
    return "".join(plain[line + col] for col in permutation for line in range(0, len(plain), width))


def permutation_decode(text: str, permutation: Sequence[int], read_across: bool) -> str:
    width = len(permutation)
    cipher = _prepare(text, width)
    rows = len(cipher) // width
    plain = [""] * len(cipher)
    if read_across:
        for line in range(0, len(cipher), width):
            for i, col in enumerate(permutation):
                plain[line + col] = cipher[line + i]
    else:
        for i, col in enumerate(permutation):
            for row in range(rows):
                plain[row * width + col] = cipher[i * rows + row]
    return "".join(plain)


def format_permutation(permutation: Sequence[int], read_across: bool) -> str:
    return ",".join(str(p) for p in permutation) + (":across" if read_across else ":down")


def _decode_key(text: str, key: tuple[tuple[int, ...], bool]) -> str:
    return permutation_decode(text, key[0], key[1])


class PermutationCipher(Cipher):
    """Columnar transposition: the text is written in rows and the columns reordered."""

    name = "Permutation"
    family = "transposition"
    crack_methods = (CrackMethod.DICTIONARY, CrackMethod.BRUTE_FORCE)

    def validate_parameters(self, dirs: Directives) -> Optional[str]:
        perm = dirs.permutation
        if not perm:
            return "Permutation is not valid"
        for i, p in enumerate(perm):
            if p < 0:
                return f"Permutation element {p} is negative"
            if p >= len(perm):
                return f"Permutation element {p} is too large"
            if p in perm[i + 1:]:
                return f"Permutation element {p} is repeated"
        return None

    def validate_crack(self, dirs: Directives) -> Optional[str]:
        reason = super().validate_crack(dirs)
        if reason is None and dirs.crack_method is CrackMethod.DICTIONARY:
            return self.requires_dictionary(dirs)
        if reason is None and dirs.max_columns < 1:
            return f"Maximum columns {dirs.max_columns} must be at least 1"
        return reason

    def encode(self, text: str, dirs: Directives) -> str:
        return permutation_encode(text, dirs.permutation, dirs.read_across)

    def decode(self, text: str, dirs: Directives) -> str:
        return permutation_decode(text, dirs.permutation, dirs.read_across)

    def describe(self, dirs: Directives) -> str:
        return f"Permutation cipher with columns {format_permutation(dirs.permutation, dirs.read_across)}"

    def crack(self, text: str, dirs: Directives, job: CrackJob) -> CrackResult:
        if dirs.crack_method is CrackMethod.BRUTE_FORCE:
            return self._crack_brute_force(text, dirs, job)
        return self._crack_dictionary(text, dirs, job)

    def _key(self, found: tuple[tuple[int, ...], bool]) -> dict:
        return {"permutation": list(found[0]), "read_across": found[1]}

    def _crack_dictionary(self, text: str, dirs: Directives, job: CrackJob) -> CrackResult:
        dictionary = dirs.dictionary
        words = [w for w in dictionary if len(w) > 1]

        def derive(word: str):
            cols = keyword_to_columns(word)
            return [] if cols is None else [(cols, True), (cols, False)]

        outcome = dictionary_search(
            text,
            words,
            derive,
            _decode_key,
            crib_set(dirs.cribs),
            job,
            total=len(words),
            stop_at_first=dirs.stop_at_first,
            consider_reverse=dirs.consider_reverse,
            describe=lambda word, key: f"Found cribs with {word}, columns: {format_permutation(*key)}",
        )
        logger.info("permutation dictionary crack tried %d column orders", outcome.tried)
        return self.from_outcome(
            text, dirs, outcome, self._key(outcome.key) if outcome.found else {},
            "Success: Dictionary scan: tried using all words in the dictionary as keys to form "
            f"permutations and look for cribs [{dirs.cribs}] in the decoded text.",
            f"Fail: Dictionary scan: tried using {outcome.tried} column orders from the dictionary of "
            f"{len(dictionary)} words as keys to form permutations and look for cribs [{dirs.cribs}] "
            "in the decoded text but did not find them.",
        )

    def _crack_brute_force(self, text: str, dirs: Directives, job: CrackJob) -> CrackResult:
        max_columns = dirs.max_columns
        candidates = (
            (perm, across)
            for width in range(1, max_columns + 1)
            for perm in itertools.permutations(range(width))
            for across in (False, True)
        )
        total = 2 * sum(math.factorial(w) for w in range(1, max_columns + 1))
        outcome = brute_force(
            text,
            candidates,
            _decode_key,
            crib_set(dirs.cribs),
            job,
            describe=lambda key: f"Found cribs with {len(key[0])} columns: {format_permutation(*key)}",
            total=total,
            stop_at_first=dirs.stop_at_first,
            consider_reverse=dirs.consider_reverse,
        )
        return self.from_outcome(
            text, dirs, outcome, self._key(outcome.key) if outcome.found else {},
            f"Success: Brute Force: tried decode all permutations up to {max_columns} columns looking "
            f"for cribs [{dirs.cribs}] in the decoded text.",
            f"Fail: Brute force approach: tried decode all permutations up to {max_columns} columns "
            f"looking for cribs [{dirs.cribs}] in the decoded text but did not find them.",
        )


register_cipher(PermutationCipher())
