from __future__ import annotations

from typing import Optional

from .directives import DEFAULT_ALPHABET
from .language import Language, english
from .ngrams import repeated_gram_rate
from .results import TextReport
from .utils import (
    collect_frequency,
    count_alphabetic,
    factors_of,
    index_of_coincidence,
    keep_alphabet,
    shannon_entropy,
)

MAX_IOC_CYCLES = 30

# A cycle whose average IOC reaches this share of the language IOC is "significant"
IOC_SIGNIFICANCE = 0.91

RARE_LETTERS = "JQXZ"
VOWELS = "AEIOU"


def cyclic_ioc(text: str, alphabet: str = DEFAULT_ALPHABET, max_cycles: int = MAX_IOC_CYCLES) -> list[float]:
    """
    Average IOC of the k interleaved columns of the text, indexed by k.
    Index 0 is unused and left at 0.0.
    """
    az = keep_alphabet(text, alphabet)
    limit = min(len(az), max_cycles)
    out = [0.0] * max(limit, 1)
    for k in range(1, limit):
        cols = [az[i::k] for i in range(k)]
        out[k] = sum(index_of_coincidence(c, alphabet) for c in cols) / k
    return out


def likely_key_lengths(text: str, alphabet: str = DEFAULT_ALPHABET, max_len: int = 20) -> list[tuple[int, float]]:
    """(k, avg_ioc) for k = 1..max_len, best first."""
    cycles = cyclic_ioc(text, alphabet, max_cycles=max_len + 1)
    scores = [(k, cycles[k]) for k in range(1, len(cycles))]
    return sorted(scores, key=lambda x: x[1], reverse=True)


def significant_period(cycles: list[float], expected_ioc: float) -> Optional[int]:
    """
    First cycle length whose IOC is close to the language, provided several of
    its multiples are also close and few other lengths are.
    """
    first = 0
    multiples = noise = 0
    for k in range(2, len(cycles)):
        if cycles[k] > expected_ioc * IOC_SIGNIFICANCE:
            if first == 0:
                first = k
            elif k % first == 0:
                multiples += 1
            else:
                noise += 1
    if first and multiples >= 2 and noise < 2:
        return first
    return None


def _symbol_counts(text: str) -> dict[str, int]:
    counts: dict[str, int] = {}
    for ch in text.upper():
        if not ch.isspace():
            counts[ch] = counts.get(ch, 0) + 1
    return counts


def _percent(part: int, whole: int) -> float:
    return 100.0 * part / whole if whole else 0.0


def suggest_ciphers(text: str, language: Optional[Language] = None, alphabet: str = DEFAULT_ALPHABET) -> str:
    """
    Look at the statistics of the text and describe which cipher families could
    have produced it.
    """
    lang = language or english()
    symbols = _symbol_counts(text)
    distinct = len(symbols)
    lines: list[str] = []

    if distinct == 0:
        return "The text is empty.\n"

    if distinct == 2:
        a, b = sorted(symbols)
        return (
            f"The text has only 2 distinct symbols: {a} and {b} "
            "which would indicate Binary, Morse Code or Baconian ciphers.\n"
        )
    if distinct == 3 and any(s in symbols for s in "/|"):
        return "The text has 3 distinct symbols, one looking like a separator, which would indicate Morse Code.\n"

    if distinct < 10:
        chars = set(symbols)
        if distinct == 5:
            if chars == set("ADFGX"):
                lines.append("The text has only A, D, F, G and X, which indicates an ADFGX cipher.")
            else:
                lines.append("The text has only 5 distinct symbols which would indicate a Polybius Square.")
        elif distinct == 6:
            if chars == set("ADFGVX"):
                lines.append("The text has only A, D, F, G, V and X, which indicates an ADFGVX cipher.")
            else:
                lines.append("The text has only 6 distinct symbols but not ADFGVX, though it could be a similar cipher.")
        elif all(c.isdigit() for c in chars):
            lines.append(f"The text has only {distinct} distinct digits which could indicate a numeric Polybius Square.")
        else:
            lines.append(f"The text has only {distinct} distinct symbols, too few for a letter substitution.")
        return "\n".join(lines) + "\n"

    freq = collect_frequency(text, alphabet)
    letters = count_alphabetic(text, alphabet)
    if letters < 2:
        return "The text has too few letters of the alphabet to analyse.\n"
    ioc = index_of_coincidence(text, alphabet)
    expected = lang.expected_ioc
    lines.append(
        f"The text has Index of Coincidence (IOC) {ioc:7.6f}, while the default for "
        f"{lang.name} is {expected:7.6f}."
    )

    if ioc > expected * 0.95:
        lines.append("This similarity rules out a poly-alphabetic cipher.")

        rare = sum(freq.get(c, 0) for c in RARE_LETTERS)
        rare_pct = _percent(rare, letters)
        likely_transposition = rare_pct < 5.0
        lines.append(
            f"The percentage of {', '.join(RARE_LETTERS)} in the text is {rare_pct:4.2f}%"
            + (" which is low enough to indicate a Transposition cipher."
               if likely_transposition else " which is higher than a Transposition cipher would have.")
        )

        vowel_pct = _percent(sum(freq.get(c, 0) for c in VOWELS), letters)
        expected_vowels = sum(lang.letter_frequencies.get(c, 0.0) for c in VOWELS)
        if abs(vowel_pct - expected_vowels) < 5.0:
            likely_transposition = True
            lines.append(
                f"Vowels make up {vowel_pct:4.2f}% of the text, close to {expected_vowels:4.2f}% "
                f"in {lang.name}, which suggests a Transposition cipher."
            )
        else:
            lines.append(
                f"Vowels make up {vowel_pct:4.2f}% of the text, but {expected_vowels:4.2f}% "
                f"in {lang.name}, which suggests a substitution cipher."
            )

        top_char = max(sorted(freq), key=lambda c: freq[c])
        lang_top = lang.letters_by_frequency()[0]
        if top_char == lang_top:
            likely_transposition = True
            lines.append(
                f"The most frequent letter is {top_char}, matching the most frequent letter in "
                f"{lang.name}, which suggests a Transposition cipher."
            )
        else:
            lines.append(
                f"The most frequent letter is {top_char}, but in {lang.name} the most frequent "
                f"letter is {lang_top}, which suggests a substitution cipher."
            )

        if likely_transposition:
            factors = factors_of(letters)
            lines.append(
                f"The text length is {letters}, which has {len(factors)} factors: "
                f"{', '.join(str(f) for f in factors)}."
            )
            if len(factors) > 2:
                lines.append("This may suggest the Skytale cycle size or column transposition keyword length.")
            else:
                lines.append("This does not help with a Skytale cycle size or column transposition keyword length.")
            lines.append("Possible transposition ciphers are Railfence, Skytale, Permutation and Amsco.")
        else:
            lines.append("Possible substitution ciphers are Caesar, ROT13, Atbash, Affine and Keyword Substitution.")
    else:
        lines.append("This difference indicates a poly-alphabetic cipher.")
        period = significant_period(cyclic_ioc(text, alphabet), expected)
        if period is not None:
            lines.append(
                f"Checking for periodic IOC shows likely period of {period} which indicates a keyword "
                "poly-alphabetic cipher such as Vigenere or Beaufort with that keyword length."
            )
        else:
            lines.append(
                "Checking for periodic IOC shows no significant pattern which excludes Vigenere and "
                "Beaufort, but could indicate a Playfair, Hill, Autokey, Running Key or one-time pad cipher."
            )
            if letters % 2:
                lines.append(
                    f"The text contains an odd number ({letters}) of alphabetic letters which rules out "
                    "bi-graphic ciphers such as 2x2 Hill and Playfair."
                )
            else:
                lines.append(
                    f"The text contains an even number ({letters}) of alphabetic letters which could "
                    "indicate 2x2 Hill or Playfair ciphers."
                )
                if len(freq) == 25:
                    lines.append("In fact there are 25 distinct letters, which suggests a square cipher such as Playfair.")

        repeats = repeated_gram_rate(text, 3, alphabet)
        if letters >= 60 and repeats > 0.25:
            lines.append(
                f"{repeats * 100:4.1f}% of trigrams repeat, which is typical of a periodic key over "
                "repeated plain text."
            )

    return "\n".join(lines) + "\n"


def analyze_text(text: str, language: Optional[Language] = None, alphabet: str = DEFAULT_ALPHABET) -> TextReport:
    """Headline statistics for a text plus the cipher suggestion narrative."""
    lang = language or english()
    freq = collect_frequency(text, alphabet)
    letters = sum(freq.values())
    stripped = "".join(ch for ch in text if not ch.isspace())
    return TextReport(
        length=len(text),
        alphabetic=letters,
        distinct_symbols=len(_symbol_counts(text)),
        ioc=index_of_coincidence(text, alphabet),
        expected_ioc=lang.expected_ioc,
        entropy=shannon_entropy(stripped.upper()),
        vowel_percent=_percent(sum(freq.get(c, 0) for c in VOWELS), letters),
        rare_percent=_percent(sum(freq.get(c, 0) for c in RARE_LETTERS), letters),
        suggestions=suggest_ciphers(text, lang, alphabet),
    )
