from __future__ import annotations

import logging
import random
from typing import Optional

from ciphercrack.classical.base import Cipher
from ciphercrack.classical.common import apply_keyword_extend, crib_set
from ciphercrack.core.directives import CrackMethod, Directives, KeywordExtend
from ciphercrack.core.job import CrackJob
from ciphercrack.core.registry import register_cipher
from ciphercrack.core.results import CrackResult
from ciphercrack.core.scoring import word_count_fitness
from ciphercrack.core.search import dictionary_search, mutate_key, simulated_annealing
from ciphercrack.core.utils import count_alphabetic

logger = logging.getLogger(__name__)

PAD_SYMBOL = "X"
# cracks work on a 25 letter square with J written as I
CRACK_OMITTED = "J"
CRACK_REPLACE = "JI"
# shuffles applied to the crack alphabet before annealing starts
START_SHUFFLES = 14


def split_grid(rows_and_cols: int) -> tuple[int, int]:
    return rows_and_cols // 10, rows_and_cols % 10


def _replacements(replace: str) -> dict[str, str]:
    """'JIQK' -> {'J': 'I', 'Q': 'K'}"""
    up = replace.upper()
    return {up[i]: up[i + 1] for i in range(0, len(up) - 1, 2)}


def _digraphs(text: str, keyword: str, replace: str) -> list[tuple[str, str]]:
    """
    Letters of the text found in the grid (after replacement), taken two at a
    time. A doubled pair or a lone final letter gets X as its second letter.
    """
    swaps = _replacements(replace)
    pad = PAD_SYMBOL if PAD_SYMBOL in keyword else keyword[-1]
    letters = []
    for ch in text.upper():
        ch = swaps.get(ch, ch)
        if ch in keyword:
            letters.append(ch)
    pairs = []
    for pos in range(0, len(letters), 2):
        first = letters[pos]
        second = letters[pos + 1] if pos + 1 < len(letters) else pad
        if first == second:
            second = pad
        pairs.append((first, second))
    return pairs


def apply_playfair(text: str, keyword: str, rows_and_cols: int, replace: str, step: int) -> str:
    """Encode with step 1, decode with step -1."""
    keyword = keyword.upper()
    rows, cols = split_grid(rows_and_cols)
    where = {ch: divmod(i, cols) for i, ch in enumerate(keyword)}
    out = []
    for first, second in _digraphs(text, keyword, replace):
        row1, col1 = where[first]
        row2, col2 = where[second]
        if row1 == row2:
            col1, col2 = (col1 + step) % cols, (col2 + step) % cols
        elif col1 == col2:
            row1, row2 = (row1 + step) % rows, (row2 + step) % rows
        else:
            col1, col2 = col2, col1
        out.append(keyword[row1 * cols + col1])
        out.append(keyword[row2 * cols + col2])
    return "".join(out)


def format_grid(keyword: str, rows_and_cols: int) -> str:
    _, cols = split_grid(rows_and_cols)
    return "\n".join(" ".join(keyword[r:r + cols]) for r in range(0, len(keyword), cols))


class PlayfairCipher(Cipher):
    """Digraph substitution over a keyword grid, usually 5x5 with J written as I."""

    name = "Playfair"
    family = "polygraphic"
    crack_methods = (CrackMethod.DICTIONARY, CrackMethod.WORD_COUNT)

    def validate_parameters(self, dirs: Directives) -> Optional[str]:
        rows, cols = split_grid(dirs.rows_and_cols)
        if rows < 3 or rows > 9 or cols < 3:
            return f"Invalid value {dirs.rows_and_cols} for rows and columns"
        keyword = dirs.keyword.upper()
        if not keyword:
            return "Keyword is missing"
        if len(keyword) < rows * cols:
            return f"Keyword length is {len(keyword)}, should be {rows * cols}"
        if len(keyword) > rows * cols:
            return "Keyword is longer than expected size"
        for i, ch in enumerate(keyword):
            if ch not in dirs.alphabet:
                return f"Symbol {ch} at offset {i} in the keyword is not in the alphabet"
        for i, ch in enumerate(keyword):
            if keyword.find(ch, i + 1) > 0:
                return f"Symbol {ch} is repeated in the keyword"
        if PAD_SYMBOL not in keyword:
            return f"Symbol {PAD_SYMBOL} must be in the keyword, it is used for padding"
        return self._validate_replace(dirs.replace.upper(), keyword)

    def _validate_replace(self, replace: str, keyword: Optional[str]) -> Optional[str]:
        if len(replace) % 2:
            return f"Invalid replacement length {len(replace)}"
        if keyword is None:
            return None
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
        rows, cols = split_grid(dirs.rows_and_cols)
        if rows < 3 or rows > 5 or cols < 3 or cols > 5:
            return f"Cannot crack with rows and columns: {dirs.rows_and_cols}"
        return self._validate_replace(dirs.replace.upper(), None)

    def encode(self, text: str, dirs: Directives) -> str:
        return apply_playfair(text, dirs.keyword, dirs.rows_and_cols, dirs.replace, 1)

    def decode(self, text: str, dirs: Directives) -> str:
        return apply_playfair(text, dirs.keyword, dirs.rows_and_cols, dirs.replace, -1)

    def fitness(self, text: str, dirs: Directives) -> float:
        return word_count_fitness(text, dirs.dictionary)

    def describe(self, dirs: Directives) -> str:
        return f"Playfair cipher ({dirs.keyword.upper() or 'n/a'}, size={dirs.rows_and_cols})"

    def crack(self, text: str, dirs: Directives, job: CrackJob) -> CrackResult:
        if dirs.crack_method is CrackMethod.WORD_COUNT:
            return self._crack_word_count(text, dirs, job)
        return self._crack_dictionary(text, dirs, job)

    def _crack_alphabet(self, dirs: Directives) -> str:
        return dirs.alphabet.replace(CRACK_OMITTED, "")

    def _crack_decoder(self, dirs: Directives):
        rows, cols = split_grid(dirs.rows_and_cols)
        size = rows * cols

        def decode(t: str, keyword: str) -> str:
            return apply_playfair(t, keyword[:size], dirs.rows_and_cols, CRACK_REPLACE, -1)

        return decode

    def _crack_dictionary(self, text: str, dirs: Directives, job: CrackJob) -> CrackResult:
        alphabet = self._crack_alphabet(dirs)
        dictionary = dirs.dictionary
        words = [w for w in dictionary if len(w) > 1]
        extends = [e for e in KeywordExtend if e is not KeywordExtend.NONE]

        def derive(word: str):
            return [apply_keyword_extend(extend, word, alphabet, exclude=CRACK_OMITTED) for extend in extends]

        outcome = dictionary_search(
            text,
            words,
            derive,
            self._crack_decoder(dirs),
            crib_set(dirs.cribs),
            job,
            total=len(words),
            stop_at_first=dirs.stop_at_first,
            consider_reverse=dirs.consider_reverse,
            describe=lambda word, kw: f"Keyword {kw} (from {word})",
        )
        logger.info("playfair dictionary crack tried %d grids", outcome.tried)
        key = {}
        if outcome.found:
            key = {"keyword": outcome.key, "rows_and_cols": dirs.rows_and_cols, "replace": CRACK_REPLACE}
        return self.from_outcome(
            text, dirs, outcome, key,
            f"Success: Dictionary scan: Searched using {len(dictionary)} dictionary words as keywords, "
            f"looking for cribs [{dirs.cribs}] in decoded text.",
            f"Fail: Dictionary scan: Searched using {len(dictionary)} dictionary words as keywords, "
            f"looking for cribs [{dirs.cribs}] but did not find them.",
        )

    def _crack_word_count(self, text: str, dirs: Directives, job: CrackJob) -> CrackResult:
        alphabet = self._crack_alphabet(dirs)
        cribs = crib_set(dirs.cribs)
        rng = random.Random(dirs.seed)
        decode = self._crack_decoder(dirs)

        def fitness(plain: str) -> float:
            return self.fitness(plain, dirs)

        start = mutate_key(alphabet, START_SHUFFLES, rng)
        temperature = count_alphabetic(text, dirs.alphabet) // 400 + 2
        job.update(1, f"Annealing from shuffled grid {start}")
        first = simulated_annealing(
            text, start, decode, fitness, cribs, job,
            temperature=temperature, cycles=5000 // temperature, rng=rng, describe=self.name,
        )
        logger.info("playfair word count: first pass best=%s found=%s", first.key, first.found)
        outcome = first
        activity = first.explain
        if not first.found:
            job.update(50, "Second pass from best grid so far")
            outcome = simulated_annealing(
                text, first.key, decode, fitness, cribs, job,
                temperature=10, cycles=1000, rng=rng, describe=self.name,
            )
            activity += outcome.explain

        if outcome.found:
            return self.success(
                text, dirs, outcome.plain_text,
                f"Success: Searched for largest word match and found all cribs [{dirs.cribs}] "
                f"with grid:\n{format_grid(outcome.key, dirs.rows_and_cols)}\n{activity}",
                {"keyword": outcome.key, "rows_and_cols": dirs.rows_and_cols, "replace": CRACK_REPLACE},
            )
        return self.failure(
            text, dirs,
            f"Fail: Searched for largest word match but did not find cribs [{dirs.cribs}], "
            f"best grid was {outcome.key}\n{activity}",
            plain_text=outcome.plain_text,
        )


register_cipher(PlayfairCipher())
