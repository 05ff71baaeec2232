from __future__ import annotations

from typing import Optional

from ciphercrack.classical.base import Cipher
from ciphercrack.classical.common import crib_set
from ciphercrack.core.directives import CrackMethod, Directives
from ciphercrack.core.job import CrackJob
from ciphercrack.core.registry import register_cipher
from ciphercrack.core.results import CrackResult
from ciphercrack.core.search import brute_force


def rail_pattern(length: int, rails: int) -> list[int]:
    """Rail of each position when writing `length` symbols in a zig-zag."""
    period = 2 * rails - 2
    out = []
    for i in range(length):
        step = i % period
        out.append(step if step < rails else period - step)
    return out


def railfence_encode(text: str, rails: int) -> str:
    pattern = rail_pattern(len(text), rails)
    return "".join(text[i] for i in sorted(range(len(text)), key=lambda i: pattern[i]))


def railfence_decode(text: str, rails: int) -> str:
    # the rails are consecutive runs of the cipher text, in zig-zag order
    pattern = rail_pattern(len(text), rails)
    order = sorted(range(len(text)), key=lambda i: pattern[i])
    out = [""] * len(text)
    for ch, pos in zip(text, order):
        out[pos] = ch
    return "".join(out)


class RailfenceCipher(Cipher):
    name = "Railfence"
    family = "transposition"
    crack_methods = (CrackMethod.BRUTE_FORCE,)

    def validate_parameters(self, dirs: Directives) -> Optional[str]:
        if not 2 <= dirs.rails <= dirs.max_rails:
            return f"Number of rails: {dirs.rails} must be between 2 and {dirs.max_rails}"
        return None

    def encode(self, text: str, dirs: Directives) -> str:
        return railfence_encode(text, dirs.rails)

    def decode(self, text: str, dirs: Directives) -> str:
        return railfence_decode(text, dirs.rails)

    def describe(self, dirs: Directives) -> str:
        return f"Railfence cipher with {dirs.rails} rails"

    def crack(self, text: str, dirs: Directives, job: CrackJob) -> CrackResult:
        max_rails = max(2, min(dirs.max_rails, len(text) // 2))
        outcome = brute_force(
            text,
            range(2, max_rails + 1),
            railfence_decode,
            crib_set(dirs.cribs),
            job,
            describe=lambda r: f"Found cribs with {r} rails",
            total=max_rails - 1,
            stop_at_first=dirs.stop_at_first,
            consider_reverse=dirs.consider_reverse,
        )
        return self.from_outcome(
            text, dirs, outcome, {"rails": outcome.key},
            f"Success: Brute force scan: tried possible rails from 2 to {max_rails} looking for the cribs "
            f"[{dirs.cribs}] in the decoded text and found them with {outcome.key} rails.",
            f"Fail: Brute force scan: tried possible rails from 2 to {max_rails} looking for the cribs "
            f"[{dirs.cribs}] in the decoded text but did not find them.",
        )


register_cipher(RailfenceCipher())
