from __future__ import annotations

import itertools
import logging
from typing import Iterator, Optional, Sequence

from ciphercrack.classical.base import Cipher
from ciphercrack.classical.common import crib_set
from ciphercrack.core.directives import CrackMethod, Directives
from ciphercrack.core.job import CrackJob
from ciphercrack.core.matrix import (
    format_matrix,
    invert_matrix,
    is_invertible,
    is_square_size,
    keyword_to_matrix,
    matrix_size,
    matrix_to_keyword,
    mod_determinant,
    multiply,
)
from ciphercrack.core.registry import register_cipher
from ciphercrack.core.results import CrackResult
from ciphercrack.core.search import brute_force, crib_drag, dictionary_search

logger = logging.getLogger(__name__)

PAD_SYMBOL = "X"
MAX_CRIB_DRAG_LENGTH = 30
# shortest usable crib to drag, by rows_and_cols
MIN_CRIB_DRAG_LENGTH = {22: 5, 33: 11}


def _block_size(rows_and_cols: int) -> int:
    return rows_and_cols // 10


def clean_text(text: str, alphabet: str) -> str:
    return "".join(ch for ch in text.upper() if ch in alphabet)


def apply_hill(text: str, matrix: Sequence[int], alphabet: str) -> str:
    """
    Multiply each block of symbols by the matrix. Anything outside the
    alphabet is dropped first and the last block is padded out with X.
    """
    plain = clean_text(text, alphabet)
    size = matrix_size(matrix)
    pad = PAD_SYMBOL if PAD_SYMBOL in alphabet else alphabet[-1]
    if len(plain) % size:
        plain += pad * (size - len(plain) % size)
    mod = len(alphabet)
    out = []
    for pos in range(0, len(plain), size):
        vector = [alphabet.index(ch) for ch in plain[pos:pos + size]]
        out.extend(alphabet[v] for v in multiply(matrix, vector, mod))
    return "".join(out)


def _all_matrices(size: int, mod: int) -> Iterator[tuple[int, ...]]:
    for candidate in itertools.product(range(mod), repeat=size * size):
        if is_invertible(candidate, mod):
            yield candidate


class HillCipher(Cipher):
    name = "Hill"
    family = "polygraphic"
    crack_methods = (CrackMethod.DICTIONARY, CrackMethod.BRUTE_FORCE, CrackMethod.CRIB_DRAG)

    def validate_parameters(self, dirs: Directives) -> Optional[str]:
        matrix = dirs.matrix
        mod = len(dirs.alphabet)
        if not matrix:
            return "Matrix is not valid"
        if matrix_size(matrix) == 0:
            return "Matrix must be square"
        if len(matrix) > 9:
            return "Cannot invert 4x4 or higher matrices yet"
        if not is_square_size(len(matrix)):
            return "Matrix must be at least 2x2"
        for value in matrix:
            if value < 0:
                return f"Matrix element {value} is negative"
            if value >= mod:
                return f"Matrix element {value} is too large, must be less than {mod}"
        det = mod_determinant(matrix, mod)
        if det == 0:
            return "Determinant is 0, matrix is singular and cannot decode"
        if not is_invertible(matrix, mod):
            return f"Matrix determinant is {det}, cannot decode uniquely"
        return None

    def validate_crack(self, dirs: Directives) -> Optional[str]:
        reason = super().validate_crack(dirs)
        if reason is not None:
            return reason
        method = dirs.crack_method
        if method is CrackMethod.DICTIONARY:
            return self.requires_dictionary(dirs)
        if dirs.rows_and_cols not in (22, 33):
            return f"Invalid Rows and Cols: {dirs.rows_and_cols}"
        if method is CrackMethod.CRIB_DRAG:
            crib = dirs.crib_drag.upper()
            if not crib:
                return "Crib to drag is missing"
            if len(crib) < MIN_CRIB_DRAG_LENGTH[dirs.rows_and_cols]:
                return "Crib to drag is too short"
            if len(crib) > MAX_CRIB_DRAG_LENGTH:
                return "Crib to drag is too long"
            for ch in crib:
                if ch not in dirs.alphabet:
                    return f"Non-letter ({ch}) in crib to drag"
        return None

    def encode(self, text: str, dirs: Directives) -> str:
        return apply_hill(text, dirs.matrix, dirs.alphabet)

    def decode(self, text: str, dirs: Directives) -> str:
        inverse = invert_matrix(dirs.matrix, len(dirs.alphabet))
        if inverse is None:
            return f"Unable to decode: no inverse exists for {format_matrix(dirs.matrix)}"
        return apply_hill(text, inverse, dirs.alphabet)

    def describe(self, dirs: Directives) -> str:
        return f"Hill cipher with matrix {format_matrix(dirs.matrix)}"

    def crack(self, text: str, dirs: Directives, job: CrackJob) -> CrackResult:
        if dirs.crack_method is CrackMethod.DICTIONARY:
            return self._crack_dictionary(text, dirs, job)
        if dirs.crack_method is CrackMethod.CRIB_DRAG:
            return self._crack_crib_drag(text, dirs, job)
        return self._crack_brute_force(text, dirs, job)

    def _key(self, matrix: Sequence[int], alphabet: str) -> dict:
        return {"matrix": list(matrix), "keyword": matrix_to_keyword(matrix, alphabet)}

    def _decode_with(self, alphabet: str):
        mod = len(alphabet)

        def decode(t: str, matrix: tuple[int, ...]) -> str:
            return apply_hill(t, invert_matrix(matrix, mod), alphabet)

        return decode

    def _crack_dictionary(self, text: str, dirs: Directives, job: CrackJob) -> CrackResult:
        alphabet = dirs.alphabet
        mod = len(alphabet)
        dictionary = dirs.dictionary
        words = dictionary.words_of_length(4, 9)

        def derive(word: str):
            matrix = keyword_to_matrix(word, alphabet)
            return [matrix] if matrix is not None and is_invertible(matrix, mod) else []

        outcome = dictionary_search(
            text,
            words,
            derive,
            self._decode_with(alphabet),
            crib_set(dirs.cribs),
            job,
            total=len(words),
            stop_at_first=dirs.stop_at_first,
            consider_reverse=dirs.consider_reverse,
            describe=lambda word, m: f"Found cribs with word {word.upper()}, matrix: {format_matrix(m)}",
        )
        logger.info("hill dictionary crack: %d of %d words formed usable matrices", outcome.tried, len(words))
        return self.from_outcome(
            text, dirs, outcome, self._key(outcome.key, alphabet) if outcome.found else {},
            "Success: Dictionary scan: tried using acceptable words in the dictionary as keys to form "
            f"matrices and look for cribs [{dirs.cribs}] in the decoded text.",
            f"Fail: Dictionary scan: tried using {outcome.tried} acceptable words in the dictionary of "
            f"{len(dictionary)} words as keys to form matrices and look for cribs [{dirs.cribs}] "
            "in the decoded text but did not find them.",
        )

    def _crack_brute_force(self, text: str, dirs: Directives, job: CrackJob) -> CrackResult:
        alphabet = dirs.alphabet
        size = _block_size(dirs.rows_and_cols)
        job.update(0, f"Scanning all {size}x{size} matrices")
        outcome = brute_force(
            text,
            _all_matrices(size, len(alphabet)),
            self._decode_with(alphabet),
            crib_set(dirs.cribs),
            job,
            describe=lambda m: f"Found cribs with matrix {format_matrix(m)}, keyword {matrix_to_keyword(m, alphabet)}",
            stop_at_first=dirs.stop_at_first,
            consider_reverse=dirs.consider_reverse,
        )
        return self.from_outcome(
            text, dirs, outcome, self._key(outcome.key, alphabet) if outcome.found else {},
            f"Success: Brute Force: tried all possible matrices looking for cribs [{dirs.cribs}] "
            "in the decoded text",
            f"Fail: Brute Force: tried using {outcome.tried} invertible matrices, looked for cribs "
            f"[{dirs.cribs}] in the decoded text but did not find them.",
        )

    def _crack_crib_drag(self, text: str, dirs: Directives, job: CrackJob) -> CrackResult:
        alphabet = dirs.alphabet
        mod = len(alphabet)
        size = _block_size(dirs.rows_and_cols)
        cipher_text = clean_text(text, alphabet)
        crib = dirs.crib_drag.upper()

        def derive(cipher_part: str, crib_part: str) -> Optional[tuple[int, ...]]:
            # blocks stand as the columns of each matrix, so fill down
            cipher_block = keyword_to_matrix(cipher_part, alphabet, across=False)
            crib_block = keyword_to_matrix(crib_part, alphabet, across=False)
            if cipher_block is None or crib_block is None:
                return None
            inverse_block = invert_matrix(cipher_block, mod, check_coprime=False)
            if inverse_block is None:
                return None
            decrypt = multiply(crib_block, inverse_block, mod)
            # only worth testing if the encrypt matrix it implies exists
            return decrypt if is_invertible(decrypt, mod) else None

        outcome = crib_drag(
            cipher_text,
            crib,
            size,
            derive,
            lambda t, decrypt: apply_hill(t, decrypt, alphabet),
            crib_set(dirs.cribs),
            job,
            stop_at_first=dirs.stop_at_first,
        )
        key = {}
        if outcome.found:
            key = self._key(invert_matrix(outcome.key, mod), alphabet)
            outcome.activity.append(
                f"Decrypt matrix {format_matrix(outcome.key)} gives encryption matrix "
                f"{format_matrix(key['matrix'])}, which is keyword {key['keyword']}."
            )
        return self.from_outcome(
            text, dirs, outcome, key,
            f"Success: Crib Drag scan: tried dragging the supplied crib ({crib}) and look for cribs "
            f"[{dirs.cribs}] in the decoded text.",
            f"Fail: Crib Drag scan: tried using {outcome.tried} positions and matrix inverses with "
            f"drag-crib ({crib}), looking for cribs [{dirs.cribs}] in the decoded text but did not find them.",
        )


register_cipher(HillCipher())
