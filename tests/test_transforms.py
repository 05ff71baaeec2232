from __future__ import annotations

import pytest

from ciphercrack.core.language import Dictionary
from ciphercrack.core.transforms import (
    TRANSFORMS,
    remove_non_alphabetic,
    remove_padding,
    remove_punctuation,
    reverse_words,
    split_by_words,
    split_every,
    swap_rows_and_cols,
)


def test_simple_transforms():
    assert TRANSFORMS["upper"]("abc") == "ABC"
    assert TRANSFORMS["reverse"]("abc") == "cba"
    assert remove_punctuation("a,b.c!") == "abc"
    assert remove_padding("a b c") == "abc"
    assert remove_non_alphabetic("a1 b-c") == "abc"


def test_reverse_words():
    assert reverse_words("abc def") == "cba fed"


def test_swap_rows_and_cols():
    assert swap_rows_and_cols("ABC\nDEF") == "AD\nBE\nCF\n"
    assert swap_rows_and_cols("AB\nC\n") == "AC\nB \n"


def test_split_every():
    assert split_every("ABCDEFG", 3) == "ABC DEF G"
    with pytest.raises(ValueError):
        split_every("ABC", 0)


def test_split_by_words(lang):
    assert split_by_words("HELLOWORLD", lang.dictionary) == "HELLO WORLD"
    assert split_by_words("helloworld", lang.dictionary) == "hello world"


def test_split_by_words_prefers_longer_words():
    d = Dictionary(["he", "hell", "hello", "low", "world"])
    assert split_by_words("HELLOWORLD", d) == "HELLO WORLD"


def test_split_by_words_without_dictionary():
    assert split_by_words("HELLOWORLD", None) == "HELLOWORLD"
