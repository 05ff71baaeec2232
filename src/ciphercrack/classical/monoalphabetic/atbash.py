from __future__ import annotations

from typing import Optional

from ciphercrack.classical.base import Cipher
from ciphercrack.classical.common import crib_set, map_text
from ciphercrack.core.directives import CrackMethod, Directives
from ciphercrack.core.job import CrackJob
from ciphercrack.core.registry import register_cipher
from ciphercrack.core.results import CrackResult
from ciphercrack.core.search import brute_force


def _apply(text: str, alphabet: str) -> str:
    return map_text(text, alphabet, alphabet[::-1])


class AtbashCipher(Cipher):
    """Keyless: the alphabet mirrored, so decode is the same as encode."""

    name = "Atbash"
    family = "monoalphabetic"
    crack_methods = (CrackMethod.BRUTE_FORCE,)

    def validate(self, dirs: Directives) -> Optional[str]:
        reason = super().validate(dirs)
        if reason is None and len(dirs.alphabet) % 2:
            return f"Alphabet has odd length ({len(dirs.alphabet)}) but needs to be even"
        return reason

    def encode(self, text: str, dirs: Directives) -> str:
        return _apply(text, dirs.alphabet)

    def decode(self, text: str, dirs: Directives) -> str:
        return _apply(text, dirs.alphabet)

    def crack(self, text: str, dirs: Directives, job: CrackJob) -> CrackResult:
        job.update(message=f"Started {self.name} crack")
        alphabet = dirs.alphabet
        outcome = brute_force(
            text,
            [None],
            lambda t, _: _apply(t, alphabet),
            crib_set(dirs.cribs),
            job,
            describe=lambda _: "Applied Atbash",
            stop_at_first=dirs.stop_at_first,
            consider_reverse=dirs.consider_reverse,
        )
        return self.from_outcome(
            text, dirs, outcome, {},
            f"Success: Brute force approach: Applied Atbash and found all cribs [{dirs.cribs}].",
            f"Fail: Brute force approach: Applied Atbash but did not find all cribs [{dirs.cribs}].",
        )


register_cipher(AtbashCipher())
