from __future__ import annotations

import math
from typing import Optional

from ciphercrack.classical.base import Cipher
from ciphercrack.classical.common import crib_set
from ciphercrack.core.directives import CrackMethod, Directives
from ciphercrack.core.job import CrackJob
from ciphercrack.core.registry import register_cipher
from ciphercrack.core.results import CrackResult
from ciphercrack.core.search import brute_force
from ciphercrack.core.transforms import remove_non_alphabetic

MAX_CYCLE_LENGTH = 1000


def skytale_encode(text: str, cycle_length: int) -> str:
    """
    Wind the letters round a staff with `cycle_length` faces; the cipher text
    is read off along the staff. Unused cells are spaces.
    """
    plain = remove_non_alphabetic(text)
    along = math.ceil(len(plain) / cycle_length)
    cells = [" "] * (along * cycle_length)
    for pos, ch in enumerate(plain):
        cells[(pos % along) * cycle_length + pos // along] = ch
    return "".join(cells)


def skytale_decode(text: str, cycle_length: int) -> str:
    lines = [text[start::cycle_length] for start in range(cycle_length)]
    return "".join(lines).strip()


class SkytaleCipher(Cipher):
    name = "Skytale"
    family = "transposition"
    crack_methods = (CrackMethod.BRUTE_FORCE,)

    def validate_parameters(self, dirs: Directives) -> Optional[str]:
        if not 2 <= dirs.cycle_length <= MAX_CYCLE_LENGTH:
            return f"Cycle length: {dirs.cycle_length} must be between 2 and {MAX_CYCLE_LENGTH}"
        return None

    def encode(self, text: str, dirs: Directives) -> str:
        return skytale_encode(text, dirs.cycle_length)

    def decode(self, text: str, dirs: Directives) -> str:
        return skytale_decode(text, dirs.cycle_length)

    def describe(self, dirs: Directives) -> str:
        return f"Skytale cipher with cycle length {dirs.cycle_length}"

    def crack(self, text: str, dirs: Directives, job: CrackJob) -> CrackResult:
        max_cycle = max(2, min(MAX_CYCLE_LENGTH, len(text) // 2))
        outcome = brute_force(
            text,
            range(2, max_cycle + 1),
            skytale_decode,
            crib_set(dirs.cribs),
            job,
            describe=lambda c: f"Found cribs with cycle length {c}",
            total=max_cycle - 1,
            stop_at_first=dirs.stop_at_first,
            consider_reverse=dirs.consider_reverse,
        )
        return self.from_outcome(
            text, dirs, outcome, {"cycle_length": outcome.key},
            f"Success: Brute Force: tried possible cycle lengths from 2 to {max_cycle} looking for the cribs "
            f"[{dirs.cribs}] in the decoded text and found them with {outcome.key} cycle length.",
            f"Fail: Brute force approach: tried possible cycle lengths from 2 to {max_cycle} looking for "
            f"the cribs [{dirs.cribs}] in the decoded text but did not find them.",
        )


register_cipher(SkytaleCipher())
