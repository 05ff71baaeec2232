from __future__ import annotations

from ciphercrack.classical.polyalphabetic.vigenere import VigenereCipher, periodic_apply
from ciphercrack.core.directives import Directives
from ciphercrack.core.registry import register_cipher


def _beaufort(text: str, keyword: str, alphabet: str) -> str:
    # cipher = key - plain, and so plain = key - cipher
    return periodic_apply(text, keyword, alphabet, lambda p, k: k - p)


class BeaufortCipher(VigenereCipher):
    """Vigenere with key minus plain; reciprocal, so decode is encode."""

    name = "Beaufort"

    def encode(self, text: str, dirs: Directives) -> str:
        return _beaufort(text, dirs.keyword, dirs.alphabet)

    def decode(self, text: str, dirs: Directives) -> str:
        return _beaufort(text, dirs.keyword, dirs.alphabet)

    def decode_with(self, text: str, keyword: str, alphabet: str) -> str:
        return _beaufort(text, keyword, alphabet)


register_cipher(BeaufortCipher())
