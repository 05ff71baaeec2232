from __future__ import annotations

from typing import Optional

from ciphercrack.classical.base import Cipher
from ciphercrack.core.directives import CrackMethod, Directives
from ciphercrack.core.registry import register_cipher

BINARY_DIGITS = "01"
MAX_NUMBER_SIZE = 50
# placeholders for groups that cannot be decoded
BEYOND_ALPHABET = "z"
NOT_A_NUMBER = "x"


def binary_encode(text: str, alphabet: str, digits: str = BINARY_DIGITS, separator: str = "",
                  number_size: int = 0) -> str:
    """
    Each alphabet symbol as its ordinal in base 2, written with `digits`.
    Anything not in the alphabet is dropped.
    """
    groups = []
    for ch in text.upper():
        ordinal = alphabet.find(ch)
        if ordinal < 0:
            continue
        bits = format(ordinal, "b")
        if number_size:
            bits = bits.zfill(number_size)[-number_size:]
        groups.append(bits.translate(str.maketrans(BINARY_DIGITS, digits.upper())))
    return separator.upper().join(groups)


def _groups(text: str, separator: str, number_size: int) -> list[str]:
    if separator:
        return text.split(separator)
    return [text[i:i + number_size] for i in range(0, len(text), number_size)]


def binary_decode(text: str, alphabet: str, digits: str = BINARY_DIGITS, separator: str = "",
                  number_size: int = 0) -> str:
    cipher = text.upper()
    if not separator.isspace():
        cipher = cipher.replace(" ", "")
    out = []
    table = str.maketrans(digits.upper(), BINARY_DIGITS)
    for group in _groups(cipher, separator.upper(), number_size):
        if not group:
            continue
        try:
            ordinal = int(group.translate(table), 2)
        except ValueError:
            out.append(NOT_A_NUMBER)
            continue
        out.append(alphabet[ordinal] if ordinal < len(alphabet) else BEYOND_ALPHABET)
    return "".join(out)


class BinaryCipher(Cipher):
    name = "Binary"
    family = "encoding"
    crack_methods = (CrackMethod.BRUTE_FORCE,)

    def _digits(self, dirs: Directives) -> str:
        return dirs.digits or BINARY_DIGITS

    def validate_parameters(self, dirs: Directives) -> Optional[str]:
        digits = self._digits(dirs).upper()
        if len(digits) < 2:
            return "Too few digits"
        if len(digits) > 2:
            return f"Too many digits ({len(digits)})"
        if digits[0] == digits[1]:
            return f"Character {digits[0]} is duplicated in the digits"
        if any(d in dirs.separator.upper() for d in digits):
            return "Separator contains a digit"
        size = dirs.number_size
        if size < 0:
            return f"Number size {size} too small"
        if size == 0 and not dirs.separator:
            return "Specify either number size or separator"
        if size > MAX_NUMBER_SIZE:
            return f"Number size {size} too large"
        return None

    def encode(self, text: str, dirs: Directives) -> str:
        return binary_encode(text, dirs.alphabet, self._digits(dirs), dirs.separator, dirs.number_size)

    def decode(self, text: str, dirs: Directives) -> str:
        return binary_decode(text, dirs.alphabet, self._digits(dirs), dirs.separator, dirs.number_size)

    def describe(self, dirs: Directives) -> str:
        return f"Binary encoding with digits {self._digits(dirs)}"


register_cipher(BinaryCipher())
