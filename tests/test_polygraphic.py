from __future__ import annotations

import pytest

from ciphercrack.classical.common import apply_keyword_extend
from ciphercrack.classical.polygraphic.playfair import apply_playfair, format_grid, split_grid
from ciphercrack.classical.polygraphic.polybius import crack_alphabet, polybius_decode, polybius_encode
from ciphercrack.core.directives import DEFAULT_ALPHABET, CrackMethod, Directives, KeywordExtend
from ciphercrack.core.registry import get_cipher, run_crack

HILL = (7, 8, 11, 11)
PLAYFAIR_GRID = "PLAYFIREXMBCDGHKNOQSTUVWZ"
POLYBIUS_GRID = "ABCDEFGHIKLMNOPQRSTUVWXYZ"
NO_DOUBLES = "WE HAVE THE KEY AND THE MAP"


def _castle_grid():
    return apply_keyword_extend(KeywordExtend.FIRST, "CASTLE", DEFAULT_ALPHABET.replace("J", ""), exclude="J")


# ----------------------------
# Hill
# ----------------------------


def test_hill_known_vector():
    hill = get_cipher("hill")
    dirs = Directives(matrix=(3, 3, 2, 5))
    assert hill.validate(dirs) is None
    assert hill.encode("HELP", dirs) == "HIAT"
    assert hill.decode("HIAT", dirs) == "HELP"


def test_hill_pads_last_block():
    assert get_cipher("hill").encode("hel", Directives(matrix=(1, 0, 0, 1))) == "HELX"


@pytest.mark.parametrize(
    "matrix,reason",
    [
        ((), "Matrix is not valid"),
        ((1, 2, 3), "Matrix must be square"),
        ((5,), "Matrix must be at least 2x2"),
        (tuple(range(16)), "Cannot invert 4x4 or higher matrices yet"),
        ((-1, 2, 3, 4), "Matrix element -1 is negative"),
        ((30, 1, 1, 1), "Matrix element 30 is too large, must be less than 26"),
        ((1, 2, 2, 4), "Determinant is 0, matrix is singular and cannot decode"),
        ((2, 4, 6, 8), "Matrix determinant is 18, cannot decode uniquely"),
    ],
)
def test_hill_validation(matrix, reason):
    assert get_cipher("hill").validate(Directives(matrix=matrix)) == reason


def test_hill_decode_without_inverse():
    text = get_cipher("hill").decode("ABCD", Directives(matrix=(1, 2, 2, 4)))
    assert text == "Unable to decode: no inverse exists for [[1, 2], [2, 4]]"


def test_hill_dictionary_crack(lang):
    cipher = get_cipher("hill").encode("The enemy have gone to the hill and wait", Directives(matrix=HILL))
    result = run_crack("hill", cipher, Directives(crack_method=CrackMethod.DICTIONARY, cribs="the,and,have",
                                                  language=lang))
    assert result.success
    assert result.key == {"matrix": list(HILL), "keyword": "HILL"}


def test_hill_brute_force_crack():
    cipher = get_cipher("hill").encode("The enemy have gone and wait", Directives(matrix=(1, 0, 1, 1)))
    dirs = Directives(crack_method=CrackMethod.BRUTE_FORCE, cribs="the,and,have", rows_and_cols=22)
    result = run_crack("hill", cipher, dirs)
    assert result.success
    assert result.key["matrix"] == [1, 0, 1, 1]


def test_hill_crib_drag_crack():
    plain = "ATTACKATDAWNTHEENEMYHAVEFLEDANDTHECASTLEISOURS"
    cipher = get_cipher("hill").encode(plain, Directives(matrix=HILL))
    dirs = Directives(crack_method=CrackMethod.CRIB_DRAG, cribs="the,and,have", rows_and_cols=22,
                      crib_drag="ATTACKATDAWN")
    result = run_crack("hill", cipher, dirs)
    assert result.success
    assert result.key == {"matrix": list(HILL), "keyword": "HILL"}
    assert result.plain_text == plain
    assert "which is keyword HILL" in result.explain


def test_hill_crib_drag_crib_starting_mid_block():
    # the crib starts at offset 1, so it never lines up with a 2 letter block
    plain = "XDEFENDTHEEASTWALLOFTHECASTLEX"
    cipher = get_cipher("hill").encode(plain, Directives(matrix=HILL))
    dirs = Directives(crack_method=CrackMethod.CRIB_DRAG, cribs="the,castle", rows_and_cols=22,
                      crib_drag="DEFENDTHEEAST")
    result = run_crack("hill", cipher, dirs)
    assert result.success
    assert result.key == {"matrix": list(HILL), "keyword": "HILL"}
    assert result.plain_text == plain


@pytest.mark.parametrize(
    "changes,reason",
    [
        ({"rows_and_cols": 44}, "Invalid Rows and Cols: 44"),
        ({"crib_drag": ""}, "Crib to drag is missing"),
        ({"crib_drag": "ATT"}, "Crib to drag is too short"),
        ({"crib_drag": "A" * 31}, "Crib to drag is too long"),
        ({"crib_drag": "ATTACK1"}, "Non-letter (1) in crib to drag"),
    ],
)
def test_hill_crib_drag_validation(changes, reason):
    dirs = Directives(crack_method=CrackMethod.CRIB_DRAG, cribs="the", rows_and_cols=22, crib_drag="ATTACKATDAWN")
    assert get_cipher("hill").validate(dirs.with_changes(**changes)) == reason


# ----------------------------
# Playfair
# ----------------------------


def test_playfair_grid_from_keyword():
    assert apply_keyword_extend(KeywordExtend.FIRST, "PLAYFAIREXAMPLE", exclude="J") == PLAYFAIR_GRID
    assert split_grid(55) == (5, 5)
    assert format_grid(PLAYFAIR_GRID, 55).splitlines()[0] == "P L A Y F"


def test_playfair_known_vector():
    playfair = get_cipher("playfair")
    dirs = Directives(keyword=PLAYFAIR_GRID, rows_and_cols=55, replace="JI")
    assert playfair.validate(dirs) is None
    assert playfair.encode("Hide the gold", dirs) == "BMODZBXDNAGE"
    assert playfair.decode("BMODZBXDNAGE", dirs) == "HIDETHEGOLDX"


def test_playfair_doubled_letters_take_padding():
    assert apply_playfair("EE", PLAYFAIR_GRID, 55, "", 1) == apply_playfair("EX", PLAYFAIR_GRID, 55, "", 1)


def test_playfair_replace():
    assert apply_playfair("JA", PLAYFAIR_GRID, 55, "JI", 1) == apply_playfair("IA", PLAYFAIR_GRID, 55, "", 1)


@pytest.mark.parametrize(
    "changes,reason",
    [
        ({"rows_and_cols": 22}, "Invalid value 22 for rows and columns"),
        ({"keyword": ""}, "Keyword is missing"),
        ({"keyword": "ABC"}, "Keyword length is 3, should be 25"),
        ({"keyword": PLAYFAIR_GRID + "J"}, "Keyword is longer than expected size"),
        ({"keyword": "ABCDEFGHIJKLMNOPQRSTUVWYZ"}, "Symbol X must be in the keyword, it is used for padding"),
        ({"replace": "J"}, "Invalid replacement length 1"),
        ({"replace": "AI"}, "Replace symbol A must not be in the keyword"),
    ],
)
def test_playfair_validation(changes, reason):
    dirs = Directives(keyword=PLAYFAIR_GRID, rows_and_cols=55, replace="JI")
    assert get_cipher("playfair").validate(dirs.with_changes(**changes)) == reason


def test_playfair_dictionary_crack(lang):
    grid = _castle_grid()
    cipher = get_cipher("playfair").encode(NO_DOUBLES, Directives(keyword=grid, rows_and_cols=55, replace="JI"))
    dirs = Directives(crack_method=CrackMethod.DICTIONARY, cribs="the,and,have", rows_and_cols=55, language=lang)
    result = run_crack("playfair", cipher, dirs)
    assert result.success
    assert result.key == {"keyword": grid, "rows_and_cols": 55, "replace": "JI"}
    assert result.plain_text.startswith("WEHAVETHEKEYANDTHEMAP")


def test_playfair_crack_needs_language():
    dirs = Directives(crack_method=CrackMethod.WORD_COUNT, cribs="the", rows_and_cols=55)
    assert get_cipher("playfair").validate(dirs) == "Missing language"


def test_playfair_crack_grid_too_large(lang):
    dirs = Directives(crack_method=CrackMethod.WORD_COUNT, cribs="the", rows_and_cols=66, language=lang)
    assert get_cipher("playfair").validate(dirs) == "Cannot crack with rows and columns: 66"


# ----------------------------
# Polybius
# ----------------------------


def test_polybius_round_trip():
    assert polybius_encode("HELLO", POLYBIUS_GRID, "ABCDE") == "BCAECACACD"
    assert polybius_decode("BCAECACACD", POLYBIUS_GRID, "ABCDE") == "HELLO"
    assert polybius_encode("Hi there", POLYBIUS_GRID, "abcde") == "BCBD DDBCAEDBAE"


def test_polybius_replace():
    assert polybius_encode("JAM", POLYBIUS_GRID, "ABCDE", "JI") == "BDAACB"


def test_polybius_cipher():
    polybius = get_cipher("polybius")
    dirs = Directives(keyword=POLYBIUS_GRID, heading="12345", replace="JI")
    assert polybius.validate(dirs) is None
    assert polybius.encode("AB", dirs) == "1112"
    assert polybius.decode("1112", dirs) == "AB"


@pytest.mark.parametrize(
    "changes,reason",
    [
        ({"keyword": "ABC"}, "Keyword is empty or too short"),
        ({"keyword": "ABCDEFGHIK"}, "Keyword length must be a square number"),
        ({"keyword": "AACDEFGHI", "heading": "ABC"}, "Symbol A is repeated in the keyword"),
        ({"heading": "AB"}, "Heading is missing or too short"),
        ({"heading": "ABCDA"}, "Symbol A is repeated in the Heading"),
        ({"heading": "ABCD"}, "Heading length must be square-root of keyword length"),
        ({"replace": "JZ", "keyword": "ABCDEFGHIKLMNOPQRSTUVWXYJ"}, "Replace symbol J must not be in the keyword"),
    ],
)
def test_polybius_validation(changes, reason):
    dirs = Directives(keyword=POLYBIUS_GRID, heading="ABCDE")
    assert get_cipher("polybius").validate(dirs.with_changes(**changes)) == reason


def test_crack_alphabet():
    assert crack_alphabet(DEFAULT_ALPHABET, 25) == POLYBIUS_GRID
    assert crack_alphabet(DEFAULT_ALPHABET, 36) == POLYBIUS_GRID + "J0123456789"


def test_polybius_dictionary_crack(lang):
    grid = _castle_grid()
    cipher = polybius_encode(NO_DOUBLES, grid, "ABCDE")
    dirs = Directives(crack_method=CrackMethod.DICTIONARY, cribs="the,and,have", heading="ABCDE", language=lang)
    result = run_crack("polybius", cipher, dirs)
    assert result.success
    assert result.key == {"keyword": grid, "heading": "ABCDE", "replace": "JI"}
    assert result.plain_text == NO_DOUBLES


def test_polybius_crack_heading_too_long(lang):
    dirs = Directives(crack_method=CrackMethod.DICTIONARY, cribs="the", heading="ABCDEFG", language=lang)
    assert get_cipher("polybius").validate(dirs) == "Heading too long to crack"
