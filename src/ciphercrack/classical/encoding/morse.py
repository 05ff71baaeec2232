from __future__ import annotations

import re
from typing import Optional

from ciphercrack.classical.base import Cipher
from ciphercrack.core.directives import CrackMethod, Directives
from ciphercrack.core.registry import register_cipher

MORSE_SYMBOLS = ".-"
DEFAULT_SEPARATOR = " "

MORSE_CODE = {
    "A": ".-", "B": "-...", "C": "-.-.", "D": "-..", "E": ".", "F": "..-.",
    "G": "--.", "H": "....", "I": "..", "J": ".---", "K": "-.-", "L": ".-..",
    "M": "--", "N": "-.", "O": "---", "P": ".--.", "Q": "--.-", "R": ".-.",
    "S": "...", "T": "-", "U": "..-", "V": "...-", "W": ".--", "X": "-..-",
    "Y": "-.--", "Z": "--..",
    "0": "-----", "1": ".----", "2": "..---", "3": "...--", "4": "....-",
    "5": ".....", "6": "-....", "7": "--...", "8": "---..", "9": "----.",
}
_DECODING = {code: ch for ch, code in MORSE_CODE.items()}

# not standard, but it turns up in puzzles
CH_CODE = "----"

_NON_MORSE_RE = re.compile("[^A-Za-z0-9]")


def morse_encode(text: str, symbols: str = MORSE_SYMBOLS, separator: str = DEFAULT_SEPARATOR) -> str:
    to_symbols = str.maketrans(MORSE_SYMBOLS, symbols.upper())
    out = []
    for ch in _NON_MORSE_RE.sub("", text).upper():
        code = MORSE_CODE.get(ch)
        out.append(f"<{ch}>" if code is None else code.translate(to_symbols))
    return separator.upper().join(out)


def morse_decode(text: str, symbols: str = MORSE_SYMBOLS, separator: str = DEFAULT_SEPARATOR) -> str:
    symbols = symbols.upper()
    keep = set(symbols + separator.upper())
    cipher = "".join(ch for ch in text.upper() if ch in keep)
    out = []
    for group in cipher.split(separator.upper()):
        if not group:
            # two separators together, most likely a gap between words
            out.append(" ")
            continue
        if any(ch not in symbols for ch in group):
            out.append(f"[{group}]")
            continue
        code = "".join(MORSE_SYMBOLS[symbols.index(ch)] for ch in group)
        letter = _DECODING.get(code)
        if letter is not None:
            out.append(letter)
        elif code == CH_CODE:
            out.append("CH")
        else:
            out.append("{" + group + "}")
    return "".join(out)


class MorseCipher(Cipher):
    name = "Morse"
    family = "encoding"
    crack_methods = (CrackMethod.BRUTE_FORCE,)

    def _symbols(self, dirs: Directives) -> str:
        return dirs.digits or MORSE_SYMBOLS

    def _separator(self, dirs: Directives) -> str:
        return dirs.separator or DEFAULT_SEPARATOR

    def validate_parameters(self, dirs: Directives) -> Optional[str]:
        symbols = self._symbols(dirs).upper()
        if len(symbols) < 2:
            return "Too few symbols"
        if len(symbols) > len(MORSE_SYMBOLS):
            return f"Too many symbols ({len(symbols)})"
        if symbols[0] == symbols[1]:
            return f"Character {symbols[0]} is duplicated in the symbols"
        if any(s in self._separator(dirs).upper() for s in symbols):
            return "Separator contains a symbol"
        return None

    def encode(self, text: str, dirs: Directives) -> str:
        return morse_encode(text, self._symbols(dirs), self._separator(dirs))

    def decode(self, text: str, dirs: Directives) -> str:
        return morse_decode(text, self._symbols(dirs), self._separator(dirs))

    def describe(self, dirs: Directives) -> str:
        return f"Morse code with symbols {self._symbols(dirs)}"


register_cipher(MorseCipher())
