from __future__ import annotations

import pytest

from ciphercrack.classical.common import keyword_to_columns
from ciphercrack.classical.transposition.amsco import amsco_decode, amsco_encode, cell_sizes
from ciphercrack.classical.transposition.permutation import (
    format_permutation,
    permutation_decode,
    permutation_encode,
)
from ciphercrack.classical.transposition.railfence import rail_pattern, railfence_decode, railfence_encode
from ciphercrack.classical.transposition.skytale import skytale_decode, skytale_encode
from ciphercrack.core.directives import CrackMethod, Directives
from ciphercrack.core.registry import get_cipher, run_crack

PLAIN = "WEHAVETHEKEYANDTHEMAP"


def _brute(name, text, **changes):
    return run_crack(name, text, Directives(crack_method=CrackMethod.BRUTE_FORCE, cribs="the,and,have", **changes))


# ----------------------------
# Railfence
# ----------------------------


def test_rail_pattern():
    assert rail_pattern(6, 3) == [0, 1, 2, 1, 0, 1]


def test_railfence_known_vector():
    assert railfence_encode("WEAREDISCOVEREDFLEEATONCE", 3) == "WECRLTEERDSOEEFEAOCAIVDEN"
    assert railfence_decode("WECRLTEERDSOEEFEAOCAIVDEN", 3) == "WEAREDISCOVEREDFLEEATONCE"


def test_railfence_validation():
    railfence = get_cipher("railfence")
    assert railfence.validate(Directives(rails=3)) is None
    assert railfence.validate(Directives(rails=1)) == "Number of rails: 1 must be between 2 and 20"
    assert railfence.validate(Directives(rails=21)) == "Number of rails: 21 must be between 2 and 20"


def test_railfence_crack():
    result = _brute("railfence", railfence_encode(PLAIN, 4))
    assert result.success
    assert result.key == {"rails": 4}
    assert result.plain_text == PLAIN


def test_railfence_crack_reversed_text():
    result = _brute("railfence", railfence_encode(PLAIN, 3)[::-1])
    assert result.success
    assert "REVERSE" in result.explain


# ----------------------------
# Skytale
# ----------------------------


def test_skytale_round_trip():
    assert skytale_encode("ABCDEF", 2) == "ADBECF"
    assert skytale_decode("ADBECF", 2) == "ABCDEF"


def test_skytale_pads_with_spaces():
    assert skytale_encode("AB CDE", 2) == "ADBEC "
    assert skytale_decode("ADBEC ", 2) == "ABCDE"


def test_skytale_validation():
    assert get_cipher("skytale").validate(Directives(cycle_length=1)) == "Cycle length: 1 must be between 2 and 1000"


def test_skytale_crack():
    result = _brute("skytale", skytale_encode(PLAIN, 3))
    assert result.success
    assert result.key == {"cycle_length": 3}


# ----------------------------
# Permutation
# ----------------------------


def test_permutation_across():
    assert permutation_encode("WEARE DISCO VERED", (2, 0, 1), True) == "AWEDRECISEOVDRE"
    assert permutation_decode("AWEDRECISEOVDRE", (2, 0, 1), True) == "WEAREDISCOVERED"


def test_permutation_down():
    assert permutation_encode("WEAREDISCOVERED", (2, 0, 1), False) == "ADCEDWRIOREESVE"
    assert permutation_decode("ADCEDWRIOREESVE", (2, 0, 1), False) == "WEAREDISCOVERED"


def test_permutation_pads_with_x():
    assert permutation_encode("ABCD", (1, 0, 2), True) == "BACXDX"


def test_format_permutation():
    assert format_permutation((2, 0, 1), True) == "2,0,1:across"
    assert format_permutation([1, 0], False) == "1,0:down"


@pytest.mark.parametrize(
    "key,expected",
    [("BETA", (3, 0, 1, 2)), ("3,2,1,0", (3, 2, 1, 0)), ("ABA", None), ("1,1", None), ("", None)],
)
def test_keyword_to_columns(key, expected):
    assert keyword_to_columns(key) == expected


@pytest.mark.parametrize(
    "perm,reason",
    [
        ((), "Permutation is not valid"),
        ((0, 0), "Permutation element 0 is repeated"),
        ((0, 3), "Permutation element 3 is too large"),
        ((-1, 0), "Permutation element -1 is negative"),
    ],
)
def test_permutation_validation(perm, reason):
    assert get_cipher("permutation").validate(Directives(permutation=perm)) == reason


def test_permutation_dictionary_crack(lang):
    cols = keyword_to_columns("ZEBRA")
    cipher = permutation_encode(PLAIN + "TODAY", cols, False)
    dirs = Directives(crack_method=CrackMethod.DICTIONARY, cribs="the,and,have", language=lang)
    result = run_crack("permutation", cipher, dirs)
    assert result.success
    assert result.key == {"permutation": [4, 2, 1, 3, 0], "read_across": False}


def test_permutation_brute_force_crack():
    result = _brute("permutation", permutation_encode(PLAIN, (1, 0, 2), True), max_columns=4)
    assert result.success
    assert result.key == {"permutation": [1, 0, 2], "read_across": True}
    assert result.plain_text == PLAIN


# ----------------------------
# Amsco
# ----------------------------


def test_cell_sizes():
    assert cell_sizes(10, 3, (1, 2)) == [[1, 2, 1], [2, 1, 2], [1, 0, 0]]


def test_amsco_round_trip():
    assert amsco_encode("ABCDE FGHIJ", (1, 0, 2), (1, 2)) == "BCGAEFJDHI"
    assert amsco_decode("BCGAEFJDHI", (1, 0, 2), (1, 2)) == "ABCDEFGHIJ"


def test_amsco_cipher_round_trip():
    amsco = get_cipher("amsco")
    dirs = Directives(permutation=(3, 1, 0, 2), chars_per_cell=(1, 2))
    assert amsco.validate(dirs) is None
    assert amsco.decode(amsco.encode(PLAIN, dirs), dirs) == PLAIN


@pytest.mark.parametrize(
    "cells,reason",
    [
        ((), "Chars per Cell is not valid"),
        ((0, 1), "Chars per Cell element 0 is too small"),
        ((1, 1), "Chars per Cell element 1 is repeated"),
    ],
)
def test_amsco_validation(cells, reason):
    assert get_cipher("amsco").validate(Directives(permutation=(1, 0), chars_per_cell=cells)) == reason


def test_amsco_crack_not_available():
    result = _brute("amsco", "BCGAEFJDHI")
    assert not result.success
    assert result.explain == "Fail: Not yet able to crack Amsco cipher.\n"
