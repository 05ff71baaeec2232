from __future__ import annotations

from typing import Optional

from ciphercrack.classical.base import Cipher
from ciphercrack.classical.common import are_coprime, crib_set, map_text, modinv
from ciphercrack.core.directives import CrackMethod, Directives
from ciphercrack.core.job import CrackJob
from ciphercrack.core.registry import register_cipher
from ciphercrack.core.results import CrackResult
from ciphercrack.core.search import brute_force


def affine_alphabet(a: int, b: int, alphabet: str) -> str:
    """Cipher symbol for each plain symbol: alphabet[(a*x + b) mod n]."""
    n = len(alphabet)
    return "".join(alphabet[(a * x + b) % n] for x in range(n))


def _affine_decrypt(text: str, a: int, b: int, alphabet: str) -> str:
    return map_text(text, affine_alphabet(a, b, alphabet), alphabet)


def modinv_or_none(a: int, n: int) -> Optional[int]:
    try:
        return modinv(a, n)
    except ValueError:
        return None


class AffineCipher(Cipher):
    name = "Affine"
    family = "monoalphabetic"
    crack_methods = (CrackMethod.BRUTE_FORCE,)

    def validate_parameters(self, dirs: Directives) -> Optional[str]:
        n = len(dirs.alphabet)
        if dirs.a < 0 or dirs.a >= n:
            return f"Value of 'a' ({dirs.a}) must be between 0 and {n - 1}"
        if dirs.b < 0 or dirs.b >= n:
            return f"Value of 'b' ({dirs.b}) must be between 0 and {n - 1}"
        if not are_coprime(dirs.a, n):
            return f"Value of 'a' ({dirs.a}) is not coprime with the alphabet length {n}"
        return None

    def encode(self, text: str, dirs: Directives) -> str:
        return map_text(text, dirs.alphabet, affine_alphabet(dirs.a, dirs.b, dirs.alphabet))

    def decode(self, text: str, dirs: Directives) -> str:
        if modinv_or_none(dirs.a, len(dirs.alphabet)) is None:
            return f"Unable to decode: 'a' ({dirs.a}) has no inverse mod {len(dirs.alphabet)}"
        return _affine_decrypt(text, dirs.a, dirs.b, dirs.alphabet)

    def describe(self, dirs: Directives) -> str:
        return f"Affine cipher with a={dirs.a} and b={dirs.b}"

    def crack(self, text: str, dirs: Directives, job: CrackJob) -> CrackResult:
        alphabet = dirs.alphabet
        n = len(alphabet)
        # only coprime a, else two plain symbols share one cipher symbol
        keys = [(a, b) for a in range(n) if are_coprime(a, n) for b in range(n)]
        outcome = brute_force(
            text,
            keys,
            lambda t, ab: _affine_decrypt(t, ab[0], ab[1], alphabet),
            crib_set(dirs.cribs),
            job,
            describe=lambda ab: f"Found all cribs with a={ab[0]} and b={ab[1]}",
            total=len(keys),
            stop_at_first=dirs.stop_at_first,
            consider_reverse=dirs.consider_reverse,
        )
        a, b = outcome.key if outcome.found else (None, None)
        return self.from_outcome(
            text, dirs, outcome, {"a": a, "b": b},
            f"Success: Brute Force: tried each possible value of a and b from 0 to {n - 1} "
            f"looking for the cribs [{dirs.cribs}] in the decoded text and found them all with a={a} and b={b}.",
            f"Fail: Brute Force: tried each possible value of a and b from 0 to {n - 1} "
            f"looking for the cribs [{dirs.cribs}] in the decoded text but did not find them.",
        )


register_cipher(AffineCipher())
