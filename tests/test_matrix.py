from __future__ import annotations

import pytest

from ciphercrack.classical.polygraphic.hill import apply_hill
from ciphercrack.core.directives import DEFAULT_ALPHABET
from ciphercrack.core.matrix import (
    determinant,
    format_matrix,
    invert_matrix,
    is_invertible,
    keyword_to_matrix,
    matrix_size,
    matrix_to_keyword,
    mod_determinant,
    mod_inverse,
    multiply,
)

HILL = (7, 8, 11, 11)


def test_matrix_size():
    assert matrix_size(HILL) == 2
    assert matrix_size(range(9)) == 3
    assert matrix_size((1, 2, 3)) == 0


def test_determinant_and_mod():
    assert determinant(HILL) == -11
    assert mod_determinant(HILL, 26) == 15


def test_mod_inverse():
    assert mod_inverse(15, 26) == 7
    assert mod_inverse(2, 26) is None


def test_invert_2x2():
    inverse = invert_matrix(HILL, 26)
    assert inverse == (25, 22, 1, 23)
    assert multiply(HILL, inverse, 26) == (1, 0, 0, 1)


def test_invert_3x3_gives_identity():
    m = (6, 24, 1, 13, 16, 10, 20, 17, 15)
    inverse = invert_matrix(m, 26)
    assert inverse is not None
    assert multiply(m, inverse, 26) == (1, 0, 0, 0, 1, 0, 0, 0, 1)


@pytest.mark.parametrize("matrix", [(1, 2, 2, 4), (2, 4, 6, 8), (1, 2, 3)])
def test_no_inverse(matrix):
    assert invert_matrix(matrix, 26) is None


def test_is_invertible():
    assert is_invertible(HILL, 26)
    assert not is_invertible((2, 4, 6, 8), 26)


def test_multiply_vector():
    assert multiply(HILL, (7, 4), 26) == (3, 17)


def test_multiply_bad_shape():
    with pytest.raises(ValueError):
        multiply(HILL, (1, 2, 3), 26)


def test_keyword_matrix_round_trip():
    assert keyword_to_matrix("hill") == HILL
    assert keyword_to_matrix("HILL", across=False) == (7, 11, 8, 11)
    assert matrix_to_keyword(HILL) == "HILL"
    assert keyword_to_matrix("HIL") is None
    assert keyword_to_matrix("HI1L") is None


def test_format_matrix():
    assert format_matrix(HILL) == "[[7, 8], [11, 11]]"


def test_hill_block_encrypt():
    assert apply_hill("HE", HILL, DEFAULT_ALPHABET) == "DR"
    assert apply_hill("DR", invert_matrix(HILL, 26), DEFAULT_ALPHABET) == "HE"
