from __future__ import annotations

from typing import Optional, Sequence

from ciphercrack.classical.base import Cipher
from ciphercrack.core.directives import CrackMethod, Directives
from ciphercrack.core.registry import register_cipher
from ciphercrack.core.utils import remove_non_word


def cell_sizes(length: int, width: int, chars_per_cell: Sequence[int]) -> list[list[int]]:
    """
    Characters held by each cell, row by row. Cell sizes cycle through
    chars_per_cell along a row, each row starting one step further on; the
    final cells are cut short where the text runs out.
    """
    rows = []
    pos = 0
    cycle = len(chars_per_cell)
    row_no = 0
    while pos < length:
        row = []
        for col in range(width):
            size = min(chars_per_cell[(row_no % cycle + col) % cycle], length - pos)
            row.append(size)
            pos += size
        rows.append(row)
        row_no += 1
    return rows


def amsco_encode(text: str, permutation: Sequence[int], chars_per_cell: Sequence[int]) -> str:
    plain = remove_non_word(text)
    cells = []
    pos = 0
    for sizes in cell_sizes(len(plain), len(permutation), chars_per_cell):
        row = []
        for size in sizes:
            row.append(plain[pos:pos + size])
            pos += size
        cells.append(row)
    return "".join(row[col] for col in permutation for row in cells)


def amsco_decode(text: str, permutation: Sequence[int], chars_per_cell: Sequence[int]) -> str:
    cipher = remove_non_word(text)
    table = cell_sizes(len(cipher), len(permutation), chars_per_cell)
    grid = [[""] * len(permutation) for _ in table]
    pos = 0
    for col in permutation:
        for r, sizes in enumerate(table):
            grid[r][col] = cipher[pos:pos + sizes[col]]
            pos += sizes[col]
    return "".join("".join(row) for row in grid)


class AmscoCipher(Cipher):
    """Columnar transposition where cells alternately hold one or more characters."""

    name = "Amsco"
    family = "transposition"
    crack_methods = (CrackMethod.BRUTE_FORCE,)

    def validate_parameters(self, dirs: Directives) -> Optional[str]:
        perm = dirs.permutation
        if not perm:
            return "Permutation is not valid"
        for i, p in enumerate(perm):
            if p < 0:
                return f"Permutation element {p} is negative"
            if p >= len(perm):
                return f"Permutation element {p} is too large"
            if p in perm[i + 1:]:
                return f"Permutation element {p} is repeated"
        cells = dirs.chars_per_cell
        if not cells:
            return "Chars per Cell is not valid"
        for i, c in enumerate(cells):
            if c <= 0:
                return f"Chars per Cell element {c} is too small"
            if c in cells[i + 1:]:
                return f"Chars per Cell element {c} is repeated"
        return None

    def encode(self, text: str, dirs: Directives) -> str:
        return amsco_encode(text, dirs.permutation, dirs.chars_per_cell)

    def decode(self, text: str, dirs: Directives) -> str:
        return amsco_decode(text, dirs.permutation, dirs.chars_per_cell)

    def describe(self, dirs: Directives) -> str:
        perm = ",".join(str(p) for p in dirs.permutation)
        cells = ",".join(str(c) for c in dirs.chars_per_cell)
        return f"Amsco cipher with columns {perm} and cells {cells}"


register_cipher(AmscoCipher())
