from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from .language import Language

DEFAULT_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
DEFAULT_PADDING = " "
DEFAULT_CRIBS = "the,and,have"


class CrackMethod(Enum):
    NONE = "none"
    IOC = "ioc"
    BRUTE_FORCE = "brute-force"
    DICTIONARY = "dictionary"
    CRIB_DRAG = "crib-drag"
    WORD_COUNT = "word-count"

    @property
    def label(self) -> str:
        return _METHOD_LABELS[self]

    @classmethod
    def parse(cls, value: str | None) -> "CrackMethod":
        """Accept 'brute-force', 'BRUTE_FORCE' or 'brute force'."""
        if not value:
            return cls.NONE
        norm = value.strip().lower().replace("_", "-").replace(" ", "-")
        for m in cls:
            if m.value == norm:
                return m
        raise ValueError(f"Unknown crack method '{value}'. Use one of: {', '.join(m.value for m in cls)}")


_METHOD_LABELS = {
    CrackMethod.NONE: "None",
    CrackMethod.IOC: "IOC Climb",
    CrackMethod.BRUTE_FORCE: "Brute Force",
    CrackMethod.DICTIONARY: "Dictionary Scan",
    CrackMethod.CRIB_DRAG: "Crib Drag",
    CrackMethod.WORD_COUNT: "Simulated Annealing Word Count",
}


class KeywordExtend(Enum):
    """How a short keyword is filled out to a whole alphabet."""

    FIRST = "first"  # continue from the last symbol of the alphabet, i.e. restart at the first
    MIN = "min"  # continue after the lowest symbol used so far
    MAX = "max"  # continue after the highest symbol used so far
    LAST = "last"  # continue after the final symbol of the keyword
    NONE = "none"  # use as-is


@dataclass(frozen=True)
class Directives:
    """
    Everything one encode/decode/crack call needs.

    Built once per operation and never mutated; use `with_changes` to derive a
    variant (e.g. the same directives with a candidate keyword).
    """

    alphabet: str = DEFAULT_ALPHABET
    language: Optional["Language"] = field(default=None, compare=False)
    cribs: str = ""
    padding_chars: str = DEFAULT_PADDING
    crack_method: CrackMethod = CrackMethod.NONE

    # caesar / rot13
    shift: int = 0
    # affine
    a: int = 0
    b: int = 0
    # vigenere, beaufort, substitution, playfair, polybius
    keyword: str = ""
    keyword_length: int = 0
    # hill
    matrix: tuple[int, ...] = ()
    crib_drag: str = ""
    # railfence / skytale
    rails: int = 0
    cycle_length: int = 0
    # permutation / amsco
    permutation: tuple[int, ...] = ()
    read_across: bool = True
    chars_per_cell: tuple[int, ...] = ()
    # binary / morse
    digits: str = ""
    separator: str = ""
    number_size: int = 0
    # hill crack size and playfair grid, e.g. 22, 33, 55
    rows_and_cols: int = 0
    # polybius
    heading: str = ""
    # playfair / polybius, pairs like "JI" meaning J is written as I
    replace: str = ""

    # search behaviour
    stop_at_first: bool = True
    consider_reverse: bool = True
    max_rails: int = 20
    max_columns: int = 8
    seed: Optional[int] = None

    def with_changes(self, **changes: Any) -> "Directives":
        return replace(self, **changes)

    @property
    def dictionary(self):
        return None if self.language is None else self.language.dictionary

    def key_material(self, *names: str) -> dict[str, Any]:
        out: dict[str, Any] = {}
        for name in names:
            value = getattr(self, name)
            out[name] = list(value) if isinstance(value, tuple) else value
        return out
