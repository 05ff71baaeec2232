from __future__ import annotations


def register_all() -> None:
    from .monoalphabetic import caesar, atbash, affine, substitution  # noqa: F401
    from .polyalphabetic import vigenere, beaufort  # noqa: F401
    from .polygraphic import hill, playfair, polybius  # noqa: F401
    from .transposition import railfence, permutation, skytale, amsco  # noqa: F401
    from .encoding import binary, morse  # noqa: F401
