"""
Key search strategies shared by the ciphers.

None of these know about a particular cipher or language: each takes a
`decode(text, key)` callable, a fitness callable where needed, the crib set and
the job handle it polls for cancellation.
"""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Any, Callable, Hashable, Iterable, Optional

from .job import POLL_INTERVAL, CrackJob
from .scoring import contains_all_cribs, rare_letter_count

logger = logging.getLogger(__name__)

# How much of a decode is quoted in explanations
CRACK_PLAIN_LENGTH = 60

Decode = Callable[[str, Any], str]
Fitness = Callable[[str], float]


def preview(text: str, length: int = CRACK_PLAIN_LENGTH) -> str:
    return text[:length]


@dataclass
class SearchOutcome:
    found: bool = False
    key: Any = None
    plain_text: str = ""
    reversed_text: bool = False
    tried: int = 0
    matches: int = 0
    best_fitness: float = float("-inf")
    history: list[float] = field(default_factory=list)
    activity: list[str] = field(default_factory=list)

    @property
    def explain(self) -> str:
        return "".join(line if line.endswith("\n") else line + "\n" for line in self.activity)

    def record(self, key: Any, plain: str, reverse: bool, line: str) -> None:
        self.found = True
        self.key = key
        self.plain_text = plain
        self.reversed_text = reverse
        self.matches += 1
        self.activity.append(line)


def _progress(job: CrackJob, done: int, total: Optional[int], what: str) -> None:
    job.check()
    if total:
        pct = 100 * done // total
        job.update(pct, f"{done} {what} of {total}: {pct}% complete")
    else:
        job.update(message=f"{done} {what} tried")


def brute_force(
    cipher_text: str,
    candidates: Iterable[Any],
    decode: Decode,
    cribs: set[str],
    job: CrackJob,
    *,
    describe: Callable[[Any], str] = str,
    total: Optional[int] = None,
    stop_at_first: bool = True,
    consider_reverse: bool = True,
) -> SearchOutcome:
    """
    Decode with every candidate key in order, looking for the cribs in the
    decoded text and, optionally, in the decode of the reversed text.
    """
    outcome = job.track(SearchOutcome())
    reverse_text = cipher_text[::-1]
    for key in candidates:
        if outcome.tried % POLL_INTERVAL == 0:
            _progress(job, outcome.tried, total, "keys")
        outcome.tried += 1

        plain = decode(cipher_text, key)
        if contains_all_cribs(plain, cribs):
            outcome.record(key, plain, False, f"{describe(key)}, decoded text starts: {preview(plain)}")
            if stop_at_first:
                return outcome
        if consider_reverse:
            plain = decode(reverse_text, key)
            if contains_all_cribs(plain, cribs):
                outcome.record(key, plain, True, f"{describe(key)}, decoded REVERSE text starts: {preview(plain)}")
                if stop_at_first:
                    return outcome
    return outcome


def dictionary_search(
    cipher_text: str,
    words: Iterable[str],
    derive_keys: Callable[[str], Iterable[Hashable]],
    decode: Decode,
    cribs: set[str],
    job: CrackJob,
    *,
    total: Optional[int] = None,
    stop_at_first: bool = True,
    consider_reverse: bool = True,
    describe: Callable[[str, Any], str] = lambda word, key: f"Keyword {key} (from {word})",
) -> SearchOutcome:
    """
    Each word yields one or more candidate keys (e.g. one per keyword
    extension policy); keys already tried are skipped.
    """
    outcome = job.track(SearchOutcome())
    tried: set[Hashable] = set()
    reverse_text = cipher_text[::-1]
    for n, word in enumerate(words):
        if n % POLL_INTERVAL == 0:
            _progress(job, n, total, "words")
            if n:
                logger.info("dictionary search: %d words tried, %d keys, found=%d", n, len(tried), outcome.matches)
        for key in derive_keys(word):
            if key is None or key in tried:
                continue
            tried.add(key)
            outcome.tried += 1
            plain = decode(cipher_text, key)
            if contains_all_cribs(plain, cribs):
                outcome.record(key, plain, False, f"{describe(word, key)}, decoded text starts: {preview(plain)}")
                if stop_at_first:
                    return outcome
            if consider_reverse:
                plain = decode(reverse_text, key)
                if contains_all_cribs(plain, cribs):
                    outcome.record(key, plain, True, f"{describe(word, key)}, decoded REVERSE text starts: {preview(plain)}")
                    if stop_at_first:
                        return outcome
    return outcome


def hill_climb(
    cipher_text: str,
    start_key: str,
    alphabet: str,
    decode: Decode,
    fitness: Fitness,
    job: CrackJob,
) -> SearchOutcome:
    """
    Try every alphabet symbol at each key position in turn, keeping whichever
    key scores best. Stops after a full pass that changes nothing.
    """
    best_key = start_key
    best_plain = decode(cipher_text, best_key)
    outcome = job.track(SearchOutcome(key=best_key, plain_text=best_plain, best_fitness=fitness(best_plain)))
    outcome.history.append(outcome.best_fitness)
    outcome.activity.append(f"Climb from key {start_key}, measure {outcome.best_fitness:7.6f}")

    while True:
        pass_start = best_key
        for pos in range(len(best_key)):
            job.check()
            dynamic = list(best_key)
            for ch in alphabet:
                dynamic[pos] = ch
                key = "".join(dynamic)
                plain = decode(cipher_text, key)
                measure = fitness(plain)
                outcome.tried += 1
                if measure > outcome.best_fitness:
                    outcome.best_fitness = measure
                    best_key = outcome.key = key
                    outcome.plain_text = plain
                    outcome.history.append(measure)
                    outcome.activity.append(
                        f"Key {key} improves measure to {measure:7.6f}, text={preview(plain, 50)}"
                    )
        if best_key == pass_start:
            break
    return outcome


def shift_key(key: str, shift: int, alphabet: str) -> str:
    n = len(alphabet)
    return "".join(alphabet[(alphabet.index(c) + shift) % n] for c in key)


def resolve_shift(
    cipher_text: str,
    key: str,
    alphabet: str,
    decode: Decode,
    cribs: set[str],
) -> SearchOutcome:
    """
    IOC cannot tell a key from its uniform shifts, so try every shift of the
    key against the cribs. Without a crib match, prefer the decode with the
    fewest rare letters.
    """
    outcome = SearchOutcome()
    fewest = None
    for shift in range(len(alphabet)):
        candidate = shift_key(key, shift, alphabet)
        plain = decode(cipher_text, candidate)
        outcome.tried += 1
        if contains_all_cribs(plain, cribs):
            outcome.record(candidate, plain, False, f"Shifted key {candidate} gave decoded text: {preview(plain)}")
            return outcome
        rare = rare_letter_count(plain)
        if fewest is None or rare < fewest:
            fewest = rare
            outcome.key = candidate
            outcome.plain_text = plain
    outcome.activity.append(
        f"No shift of {key} contains the cribs, key {outcome.key} has fewest rare letters ({fewest})"
    )
    return outcome


def mutate_key(key: str, temperature: int, rng: random.Random) -> str:
    """Swap `temperature` random pairs of distinct positions."""
    chars = list(key)
    n = len(chars)
    if n < 2:
        return key
    for _ in range(temperature):
        i = rng.randrange(n)
        j = rng.randrange(n - 1)
        if j >= i:
            j += 1
        chars[i], chars[j] = chars[j], chars[i]
    return "".join(chars)


def simulated_annealing(
    cipher_text: str,
    start_key: str,
    decode: Decode,
    fitness: Fitness,
    cribs: set[str],
    job: CrackJob,
    *,
    temperature: int,
    cycles: int,
    rng: random.Random,
    describe: str = "",
) -> SearchOutcome:
    """
    Greedy annealing: at each temperature from `temperature` down to 1 run
    `cycles` mutations of the best key, accepting only strict improvements.
    Ends early once the best decode holds every crib.
    """
    best_key = start_key
    best_plain = decode(cipher_text, best_key)
    best = fitness(best_plain)
    outcome = job.track(SearchOutcome(key=best_key, plain_text=best_plain, best_fitness=best, history=[best]))
    outcome.activity.append(
        f"Perform a hill climb ({temperature}x{cycles}) for {describe or 'cipher'} with start key {start_key}"
    )

    iterations = 0
    for temp in range(temperature, 0, -1):
        logger.info("annealing loop temp=%d cycles=%d best=%.3f key=%s", temp, cycles, best, best_key)
        for cycle in range(cycles):
            if cycle % POLL_INTERVAL == 0:
                job.check()
            trial = mutate_key(best_key, temp, rng)
            plain = decode(cipher_text, trial)
            measure = fitness(plain)
            iterations += 1
            if measure > best:
                best, best_key, best_plain = measure, trial, plain
                outcome.key, outcome.plain_text, outcome.best_fitness = trial, plain, measure
                outcome.activity.append(f"Key {trial} improves measure to {measure:7.6f}, text={preview(plain, 50)}")
                if contains_all_cribs(best_plain, cribs):
                    break
            outcome.history.append(best)
        else:
            continue
        break

    outcome.tried = iterations
    outcome.key = best_key
    outcome.plain_text = best_plain
    outcome.best_fitness = best
    outcome.activity.append(f"Found best key {best_key} with best measure {best:7.6f} after {iterations} iterations")
    if contains_all_cribs(best_plain, cribs):
        outcome.found = True
        outcome.activity.append("Decoded text contains all cribs")
    return outcome


def crib_drag(
    cipher_text: str,
    crib: str,
    block: int,
    derive_key: Callable[[str, str], Optional[Hashable]],
    decode: Decode,
    cribs: set[str],
    job: CrackJob,
    *,
    stop_at_first: bool = True,
) -> SearchOutcome:
    """
    Take each block-aligned stretch of block*block cipher symbols and pair it
    with every same-length piece of the crib, so the crib may start at any
    plain text offset. derive_key(cipher_part, crib_part) proposes a key, which
    is tested by decoding the whole text.

    cipher_text must already be reduced to alphabet symbols.
    """
    outcome = job.track(SearchOutcome())
    tried: set[Hashable] = set()
    crib = crib.upper()
    width = block * block
    positions = range(0, max(len(cipher_text) - width + 1, 0), block)
    total = len(positions)
    for n, text_pos in enumerate(positions):
        _progress(job, n, total, "positions")
        cipher_part = cipher_text[text_pos:text_pos + width]
        for crib_offset in range(0, len(crib) - width + 1):
            crib_part = crib[crib_offset:crib_offset + width]
            key = derive_key(cipher_part, crib_part)
            if key is None or key in tried:
                continue
            tried.add(key)
            outcome.tried += 1
            plain = decode(cipher_text, key)
            if contains_all_cribs(plain, cribs):
                outcome.record(
                    key, plain, False,
                    f"Crib {crib_part} at offset {text_pos} gave key {key}: {preview(plain)}",
                )
                if stop_at_first:
                    return outcome
    return outcome
