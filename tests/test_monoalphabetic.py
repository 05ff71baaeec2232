from __future__ import annotations

import pytest

from ciphercrack.classical.common import ALPHABET, apply_keyword_extend, are_coprime, modinv, shift_text
from ciphercrack.classical.monoalphabetic.affine import affine_alphabet
from ciphercrack.classical.monoalphabetic.substitution import frequency_keyword
from ciphercrack.core.directives import CrackMethod, Directives, KeywordExtend
from ciphercrack.core.language import Dictionary
from ciphercrack.core.registry import get_cipher, run_crack

ZEBRA_KEY = "ZEBRACDFGHIJKLMNOPQSTUVWXY"
PLAIN = "We have the plans and will attack the castle at dawn"


def _crack(name, text, method, lang=None, **changes):
    dirs = Directives(crack_method=method, cribs=changes.pop("cribs", "the,and,have"), language=lang, **changes)
    return run_crack(name, text, dirs)


def test_shift_text_keeps_case_and_punctuation():
    assert shift_text("Hello, World!", 3) == "Khoor, Zruog!"
    assert shift_text("abc", -1) == "zab"


def test_caesar_round_trip():
    caesar = get_cipher("caesar")
    dirs = Directives(shift=3)
    assert caesar.validate(dirs) is None
    assert caesar.encode("Hello, World!", dirs) == "Khoor, Zruog!"
    assert caesar.decode("Khoor, Zruog!", dirs) == "Hello, World!"


def test_caesar_shift_out_of_range():
    assert get_cipher("caesar").validate(Directives(shift=26)) == "Shift value 26 must be between 0 and 25"


def test_caesar_crack():
    result = _crack("caesar", "KHOOR ZRUOG", CrackMethod.BRUTE_FORCE, cribs="hello")
    assert result.success
    assert result.key == {"shift": 3}
    assert result.plain_text == "HELLO WORLD"
    assert result.explain.startswith("Success")


def test_caesar_crack_fails_without_cribs_in_text():
    result = _crack("caesar", "KHOOR ZRUOG", CrackMethod.BRUTE_FORCE, cribs="castle")
    assert not result.success
    assert "did not find them" in result.explain


def test_rot13():
    rot13 = get_cipher("rot13")
    dirs = Directives()
    assert rot13.encode("Hello", dirs) == "Uryyb"
    assert rot13.decode("Uryyb", dirs) == "Hello"
    result = _crack("rot13", "URYYB", CrackMethod.BRUTE_FORCE, cribs="hello")
    assert result.success
    assert result.key == {"shift": 13}


def test_rot13_needs_26_symbols():
    assert get_cipher("ROT13").validate(Directives(alphabet="ABCD")) == "ROT13 needs an alphabet of exactly 26 symbols"


def test_atbash():
    atbash = get_cipher("atbash")
    dirs = Directives()
    assert atbash.encode("ABC xyz", dirs) == "ZYX cba"
    assert atbash.decode("ZYX cba", dirs) == "ABC xyz"
    assert atbash.validate(Directives(alphabet="ABCDE")) == "Alphabet has odd length (5) but needs to be even"
    result = _crack("atbash", "GSV XZG", CrackMethod.BRUTE_FORCE, cribs="the,cat")
    assert result.success
    assert result.plain_text == "THE CAT"


def test_affine_known_vector():
    affine = get_cipher("affine")
    dirs = Directives(a=5, b=8)
    assert affine.encode("AFFINE", dirs) == "IHHWVC"
    assert affine.decode("IHHWVC", dirs) == "AFFINE"
    assert affine_alphabet(1, 0, ALPHABET) == ALPHABET


@pytest.mark.parametrize(
    "a,b,reason",
    [
        (2, 1, "Value of 'a' (2) is not coprime with the alphabet length 26"),
        (26, 1, "Value of 'a' (26) must be between 0 and 25"),
        (3, -1, "Value of 'b' (-1) must be between 0 and 25"),
    ],
)
def test_affine_validation(a, b, reason):
    assert get_cipher("affine").validate(Directives(a=a, b=b)) == reason


def test_affine_crack():
    cipher = get_cipher("affine").encode(PLAIN, Directives(a=5, b=8))
    result = _crack("affine", cipher, CrackMethod.BRUTE_FORCE)
    assert result.success
    assert result.key == {"a": 5, "b": 8}
    assert result.plain_text == PLAIN


def test_coprime_and_inverse():
    assert are_coprime(5, 26)
    assert not are_coprime(0, 1)
    assert modinv(5, 26) == 21
    with pytest.raises(ValueError):
        modinv(13, 26)


@pytest.mark.parametrize(
    "extend,expected",
    [
        (KeywordExtend.LAST, ZEBRA_KEY),
        (KeywordExtend.MAX, "ZEBRACDFGHIJKLMNOPQSTUVWXY"),
        (KeywordExtend.NONE, "ZEBRA"),
    ],
)
def test_keyword_extend(extend, expected):
    assert apply_keyword_extend(extend, "zebra") == expected


def test_keyword_extend_continues_after_last_letter():
    assert apply_keyword_extend(KeywordExtend.LAST, "KEY") == "KEYZABCDFGHIJLMNOPQRSTUVWX"
    assert apply_keyword_extend(KeywordExtend.MIN, "KEY") == "KEYFGHIJLMNOPQRSTUVWXZABCD"
    assert apply_keyword_extend(KeywordExtend.FIRST, "KEY", exclude="J") == "KEYABCDFGHILMNOPQRSTUVWXZ"


def test_substitution_round_trip():
    sub = get_cipher("substitution")
    dirs = Directives(keyword=ZEBRA_KEY)
    assert sub.validate(dirs) is None
    assert sub.encode("HELLO", dirs) == "FAJJM"
    assert sub.decode("FAJJM", dirs) == "HELLO"


def test_substitution_validation():
    sub = get_cipher("substitution")
    assert sub.validate(Directives(keyword="ABC")) == "Keyword length 3 must be the same as the alphabet length 26"
    assert sub.validate(Directives(keyword="A" * 26)) == f"Keyword {'A' * 26} contains repeated symbols"


def test_substitution_dictionary_crack(lang):
    cipher = get_cipher("substitution").encode(PLAIN, Directives(keyword=ZEBRA_KEY))
    result = _crack("substitution", cipher, CrackMethod.DICTIONARY, lang)
    assert result.success
    assert result.key == {"keyword": ZEBRA_KEY}
    assert result.plain_text.upper() == PLAIN.upper()


def test_substitution_dictionary_crack_only_tries_full_keywords(lang):
    # "xy" on its own would leave this text untouched and match the cribs
    narrow = lang.with_dictionary(Dictionary(["xy"]))
    result = _crack("substitution", "the cat and the hat", CrackMethod.DICTIONARY, narrow, cribs="the,and")
    assert not result.success
    assert result.key == {}


def test_substitution_crack_needs_language():
    result = _crack("substitution", "ABC", CrackMethod.DICTIONARY)
    assert not result.success
    assert result.explain == "Invalid directives: Missing language"


def test_frequency_keyword(lang):
    key = frequency_keyword("XXXXX QQQ", ALPHABET, lang)
    assert sorted(key) == sorted(ALPHABET)
    assert key[ALPHABET.index("E")] == "X"
    assert key[ALPHABET.index("T")] == "Q"
