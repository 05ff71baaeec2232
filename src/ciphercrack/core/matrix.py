"""
Modular matrix arithmetic for the Hill cipher.

Matrices are flat tuples in row-major order, so a 2x2 matrix [[a, b], [c, d]]
is (a, b, c, d). Only 2x2 and 3x3 matrices can be inverted.
"""
from __future__ import annotations

import math
from typing import Optional, Sequence

from .directives import DEFAULT_ALPHABET


def matrix_size(matrix: Sequence[int]) -> int:
    """Side length of a square flat matrix, or 0 if it is not square."""
    n = math.isqrt(len(matrix))
    return n if n > 0 and n * n == len(matrix) else 0


def keyword_to_matrix(keyword: str, alphabet: str = DEFAULT_ALPHABET, across: bool = True) -> Optional[tuple[int, ...]]:
    """
    Letters of a 4, 9 or 16 letter keyword as alphabet ordinals. With across the
    matrix is filled row by row; otherwise column by column.
    """
    kw = keyword.upper()
    if len(kw) not in (4, 9, 16):
        return None
    ords = [alphabet.find(ch) for ch in kw]
    if any(o < 0 for o in ords):
        return None
    if across:
        return tuple(ords)
    n = matrix_size(ords)
    out = [0] * len(ords)
    for i, o in enumerate(ords):
        out[(i % n) * n + i // n] = o
    return tuple(out)


def matrix_to_keyword(matrix: Sequence[int], alphabet: str = DEFAULT_ALPHABET) -> str:
    return "".join(alphabet[v % len(alphabet)] for v in matrix)


def determinant(matrix: Sequence[int]) -> int:
    """Plain integer determinant of a 2x2 or 3x3 matrix; 0 for anything else."""
    if len(matrix) == 4:
        a, b, c, d = matrix
        return a * d - b * c
    if len(matrix) == 9:
        a, b, c, d, e, f, g, h, i = matrix
        return a * (e * i - f * h) - b * (d * i - f * g) + c * (d * h - e * g)
    return 0


def mod_determinant(matrix: Sequence[int], mod: int) -> int:
    return determinant(matrix) % mod


def mod_inverse(value: int, mod: int) -> Optional[int]:
    """Multiplicative inverse of value mod m by linear scan, or None."""
    v = value % mod
    for candidate in range(1, mod):
        if (v * candidate) % mod == 1:
            return candidate
    return None


def invert_matrix(matrix: Sequence[int], mod: int, check_coprime: bool = True) -> Optional[tuple[int, ...]]:
    """
    Inverse of a 2x2 or 3x3 matrix modulo mod, built from the adjugate.

    Returns None when the determinant is 0 mod m or has no inverse. With
    check_coprime=False a non-coprime determinant is only rejected when the
    scan for its inverse fails.
    """
    size = matrix_size(matrix)
    if size not in (2, 3):
        return None
    det = mod_determinant(matrix, mod)
    if det == 0:
        return None
    if check_coprime and math.gcd(det, mod) != 1:
        return None
    det_inv = mod_inverse(det, mod)
    if det_inv is None:
        return None

    if size == 2:
        a, b, c, d = matrix
        adj = (d, -b, -c, a)
    else:
        a, b, c, d, e, f, g, h, i = matrix
        adj = (
            e * i - f * h, c * h - b * i, b * f - c * e,
            f * g - d * i, a * i - c * g, c * d - a * f,
            d * h - e * g, b * g - a * h, a * e - b * d,
        )
    return tuple((det_inv * v) % mod for v in adj)


def multiply(matrix: Sequence[int], other: Sequence[int], mod: int) -> tuple[int, ...]:
    """
    matrix x other (mod m). `other` is either a vector of the same side length
    or a square matrix of the same size.
    """
    n = matrix_size(matrix)
    if n == 0:
        raise ValueError("Matrix must be square.")
    if len(other) == n:
        return tuple(sum(matrix[r * n + k] * other[k] for k in range(n)) % mod for r in range(n))
    if len(other) == len(matrix):
        return tuple(
            sum(matrix[r * n + k] * other[k * n + c] for k in range(n)) % mod
            for r in range(n)
            for c in range(n)
        )
    raise ValueError(f"Cannot multiply a {n}x{n} matrix by {len(other)} values.")


def is_invertible(matrix: Sequence[int], mod: int) -> bool:
    det = mod_determinant(matrix, mod)
    return det != 0 and math.gcd(det, mod) == 1


def format_matrix(matrix: Sequence[int]) -> str:
    n = matrix_size(matrix) or len(matrix)
    rows = [list(matrix[r * n:(r + 1) * n]) for r in range(len(matrix) // n)]
    return str(rows)


def is_square_size(length: int) -> bool:
    """True for the flat lengths of the matrices we can invert (4 and 9)."""
    return length in (4, 9)
