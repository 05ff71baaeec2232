from __future__ import annotations

from typing import Optional

from ciphercrack.classical.base import Cipher
from ciphercrack.classical.common import contains_all_cribs, crib_set, shift_text
from ciphercrack.core.directives import CrackMethod, Directives
from ciphercrack.core.job import CrackJob
from ciphercrack.core.registry import register_cipher
from ciphercrack.core.results import CrackResult
from ciphercrack.core.search import brute_force

ROT13_SHIFT = 13


class CaesarCipher(Cipher):
    name = "Caesar"
    family = "monoalphabetic"
    crack_methods = (CrackMethod.BRUTE_FORCE,)

    def validate_parameters(self, dirs: Directives) -> Optional[str]:
        n = len(dirs.alphabet)
        if not 0 <= dirs.shift < n:
            return f"Shift value {dirs.shift} must be between 0 and {n - 1}"
        return None

    def encode(self, text: str, dirs: Directives) -> str:
        return shift_text(text, dirs.shift, dirs.alphabet)

    def decode(self, text: str, dirs: Directives) -> str:
        # Decrypt means shift backwards
        return shift_text(text, -dirs.shift, dirs.alphabet)

    def describe(self, dirs: Directives) -> str:
        return f"Caesar cipher with shift {dirs.shift}"

    def crack(self, text: str, dirs: Directives, job: CrackJob) -> CrackResult:
        alphabet = dirs.alphabet
        n = len(alphabet)
        outcome = brute_force(
            text,
            range(n),
            lambda t, s: shift_text(t, -s, alphabet),
            crib_set(dirs.cribs),
            job,
            describe=lambda s: f"Found all cribs with shift {s}",
            total=n,
            stop_at_first=dirs.stop_at_first,
            consider_reverse=dirs.consider_reverse,
        )
        return self.from_outcome(
            text, dirs, outcome, {"shift": outcome.key},
            f"Success Brute Force: tried each possible Caesar shift from 0 to {n - 1} "
            f"looking for cribs [{dirs.cribs}] in the decoded text.",
            f"Fail: Brute Force: tried each possible Caesar shift from 0 to {n - 1} "
            f"looking for the cribs [{dirs.cribs}] in the decoded text but did not find them.",
        )


class Rot13Cipher(CaesarCipher):
    """Caesar with a fixed shift of 13, so encode and decode are the same."""

    name = "ROT13"

    def validate_parameters(self, dirs: Directives) -> Optional[str]:
        if len(dirs.alphabet) != 26:
            return "ROT13 needs an alphabet of exactly 26 symbols"
        return None

    def validate_crack(self, dirs: Directives) -> Optional[str]:
        return super().validate_crack(dirs) or self.validate_parameters(dirs)

    def encode(self, text: str, dirs: Directives) -> str:
        return shift_text(text, ROT13_SHIFT, dirs.alphabet)

    def decode(self, text: str, dirs: Directives) -> str:
        return shift_text(text, -ROT13_SHIFT, dirs.alphabet)

    def describe(self, dirs: Directives) -> str:
        return "ROT13 cipher"

    def crack(self, text: str, dirs: Directives, job: CrackJob) -> CrackResult:
        job.check()
        plain = self.decode(text, dirs)
        if contains_all_cribs(plain, crib_set(dirs.cribs)):
            return self.success(
                text, dirs, plain,
                f"Success: Brute force approach: Applied shift {ROT13_SHIFT} and found all cribs.\n",
                {"shift": ROT13_SHIFT},
            )
        return self.failure(
            text, dirs,
            f"Fail: Brute force approach: Applied shift {ROT13_SHIFT} looking for the cribs "
            f"[{dirs.cribs}] in the decoded text but did not find them.\n",
        )


register_cipher(CaesarCipher())
register_cipher(Rot13Cipher())
