from __future__ import annotations

import pytest

from ciphercrack.core.features import (
    analyze_text,
    cyclic_ioc,
    likely_key_lengths,
    significant_period,
    suggest_ciphers,
)
from ciphercrack.core.language import get_language
from ciphercrack.core.ngrams import frequency_table, gram_frequency, repeated_gram_rate
from ciphercrack.core.utils import (
    chunked,
    collect_frequency,
    collect_frequency_all,
    count_alphabetic,
    factors_of,
    index_of_coincidence,
    keep_alphabet,
    shannon_entropy,
)


def test_index_of_coincidence():
    assert index_of_coincidence("AABB") == pytest.approx(1 / 3)
    assert index_of_coincidence("aa bb!") == pytest.approx(1 / 3)
    assert index_of_coincidence("A") == 0.0
    assert index_of_coincidence("") == 0.0


def test_collect_frequency():
    assert collect_frequency("Hello, World") == {"H": 1, "E": 1, "L": 3, "O": 2, "W": 1, "R": 1, "D": 1}
    assert collect_frequency("a b!", alphabetic_only=False) == {"A": 1, "B": 1, "!": 1}
    counts = collect_frequency_all("ab")
    assert len(counts) == 26
    assert counts["A"] == 1 and counts["Z"] == 0


def test_counts_and_filters():
    assert count_alphabetic("ab1 c") == 3
    assert keep_alphabet("Hi, there!") == "HITHERE"


@pytest.mark.parametrize("num,expected", [(12, [1, 2, 3, 4, 6, 12]), (7, [1, 7]), (1, [1]), (0, [])])
def test_factors_of(num, expected):
    assert factors_of(num) == expected


def test_entropy():
    assert shannon_entropy("AB") == pytest.approx(1.0)
    assert shannon_entropy("AAAA") == 0.0
    assert shannon_entropy("") == 0.0


def test_chunked():
    assert list(chunked("ABCDE", 2)) == [["A", "B"], ["C", "D"], ["E"]]


def test_gram_frequency():
    assert gram_frequency("the cat", 2) == {"TH": 1, "HE": 1, "EC": 1, "CA": 1, "AT": 1}
    with pytest.raises(ValueError):
        gram_frequency("abc", 0)


def test_frequency_table(lang):
    rows = frequency_table("AAB", 1, lang, limit=1)
    assert len(rows) == 1
    assert rows[0].gram == "A"
    assert rows[0].count == 2
    assert rows[0].percent == pytest.approx(200 / 3)
    assert rows[0].normal == pytest.approx(8.167)


def test_repeated_gram_rate():
    assert repeated_gram_rate("ABAB", 2) == pytest.approx(2 / 3)
    assert repeated_gram_rate("", 3) == 0.0


def test_cyclic_ioc_finds_period():
    text = "AB" * 20
    cycles = cyclic_ioc(text)
    assert cycles[0] == 0.0
    assert cycles[2] == pytest.approx(1.0)
    assert likely_key_lengths(text)[0] == (2, pytest.approx(1.0))


def test_significant_period():
    cycles = [0.0, 0.04, 0.07, 0.01, 0.07, 0.01, 0.07]
    assert significant_period(cycles, 0.066) == 2
    assert significant_period([0.0, 0.04, 0.01, 0.01], 0.066) is None


def test_suggests_binary():
    assert "Binary" in suggest_ciphers("0101 1100 0110")


def test_suggests_polybius_for_five_symbols():
    assert "Polybius" in suggest_ciphers("ABCDE EDCBA AABBE")


def test_analyze_text(lang):
    report = analyze_text("Hello", lang)
    assert report.length == 5
    assert report.alphabetic == 5
    assert report.distinct_symbols == 4
    assert report.expected_ioc == lang.expected_ioc
    assert report.to_dict()["suggestions"] == report.suggestions


def test_english_ioc_is_near_the_language_value(lang):
    sample = (
        "It is a truth universally acknowledged, that a single man in possession of a good fortune, "
        "must be in want of a wife. However little known the feelings or views of such a man may be on "
        "his first entering a neighbourhood, this truth is so well fixed in the minds of the surrounding "
        "families, that he is considered the rightful property of some one or other of their daughters."
    )
    assert abs(index_of_coincidence(sample) - lang.expected_ioc) < 0.012


def test_suggestions_compare_with_the_chosen_language():
    text = "Der schnelle braune Fuchs springt ueber den faulen Hund"
    assert "the default for German is 0.076667" in suggest_ciphers(text, get_language("german"))
