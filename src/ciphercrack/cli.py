from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer

from ciphercrack.classical import register_all
from ciphercrack.classical.common import apply_keyword_extend, keyword_to_columns, parse_int_list
from ciphercrack.core.directives import DEFAULT_ALPHABET, DEFAULT_CRIBS, CrackMethod, Directives, KeywordExtend
from ciphercrack.core.features import analyze_text, likely_key_lengths
from ciphercrack.core.job import CrackService
from ciphercrack.core.language import LANGUAGE_NAMES, Dictionary, english, get_language
from ciphercrack.core.ngrams import frequency_table
from ciphercrack.core.registry import get_cipher, list_ciphers
from ciphercrack.core.transforms import TRANSFORMS, split_by_words, split_every

app = typer.Typer(help="ciphercrack: encode, decode and crack classical ciphers.")

logger = logging.getLogger(__name__)

# Shared directive options
SHIFT = typer.Option(0, "--shift", help="Caesar shift.")
A = typer.Option(0, "--a", help="Affine multiplier.")
B = typer.Option(0, "--b", help="Affine offset.")
KEYWORD = typer.Option("", "--keyword", "-k", help="Keyword or full keyword grid.")
EXTEND = typer.Option("none", "--extend", help="Fill a short keyword out: first, min, max, last or none.")
KEYWORD_LENGTH = typer.Option(0, "--keyword-length", help="Vigenere IOC crack key length (0 guesses).")
MATRIX = typer.Option("", "--matrix", help="Hill matrix, e.g. '7,8,11,11', or a 4/9 letter keyword.")
RAILS = typer.Option(0, "--rails", help="Railfence rails.")
CYCLE = typer.Option(0, "--cycle", help="Skytale cycle length.")
PERM = typer.Option("", "--perm", help="Column order, e.g. '3,2,1,0', or a keyword.")
ACROSS = typer.Option(True, "--across/--down", help="Permutation: read across or down the columns.")
CELLS = typer.Option("1,2", "--cells", help="Amsco characters per cell, e.g. '1,2'.")
DIGITS = typer.Option("", "--digits", help="Binary digits or Morse symbols, e.g. '01' or '.-'.")
SEPARATOR = typer.Option("", "--separator", help="Binary/Morse separator.")
SIZE = typer.Option(0, "--size", help="Binary number size.")
ROWS_COLS = typer.Option(55, "--rows-cols", help="Grid or matrix size as rows then columns, e.g. 55 or 22.")
HEADING = typer.Option("", "--heading", help="Polybius row/column heading, e.g. 'ABCDE'.")
REPLACE = typer.Option("", "--replace", help="Replacement pairs, e.g. 'JI' writes J as I.")
ALPHABET = typer.Option(DEFAULT_ALPHABET, "--alphabet", help="Symbols the cipher works over.")
LANGUAGE = typer.Option("english", "--language", "-l", help="Reference language: english, german or dutch.")


def _read_text(text: str) -> str:
    if text == "-":
        return typer.get_text_stream("stdin").read()
    return text


def _int_list(raw: str, what: str) -> tuple[int, ...]:
    if not raw:
        return ()
    try:
        return tuple(parse_int_list(raw))
    except ValueError as e:
        raise typer.BadParameter(f"{what}: {e}")


def _matrix(raw: str, alphabet: str) -> tuple[int, ...]:
    if raw and raw.strip().isalpha():
        return tuple(alphabet.find(ch) for ch in raw.strip().upper())
    return _int_list(raw, "Matrix")


def _permutation(raw: str) -> tuple[int, ...]:
    if not raw:
        return ()
    cols = keyword_to_columns(raw)
    if cols is None:
        raise typer.BadParameter(f"Permutation '{raw}' is not a column order or a keyword without repeats.")
    return cols


def _extend(raw: str) -> KeywordExtend:
    try:
        return KeywordExtend(raw.strip().lower())
    except ValueError:
        raise typer.BadParameter(f"Unknown keyword extension '{raw}'. Use one of: first, min, max, last, none.")


def _language(name: str):
    lang = get_language(name)
    if lang is None:
        raise typer.BadParameter(f"Unknown language '{name}'. Use one of: {', '.join(LANGUAGE_NAMES)}.")
    return lang


def _method(raw: str) -> CrackMethod:
    try:
        return CrackMethod.parse(raw)
    except ValueError as e:
        raise typer.BadParameter(str(e))


def _build(
    *,
    alphabet: str,
    shift: int = 0,
    a: int = 0,
    b: int = 0,
    keyword: str = "",
    extend: str = "none",
    keyword_length: int = 0,
    matrix: str = "",
    rails: int = 0,
    cycle: int = 0,
    perm: str = "",
    across: bool = True,
    cells: str = "",
    digits: str = "",
    separator: str = "",
    size: int = 0,
    rows_cols: int = 0,
    heading: str = "",
    replace: str = "",
    **search,
) -> Directives:
    alphabet = alphabet.upper()
    full_keyword = keyword
    if keyword:
        # letters that are written as others never appear in the grid
        full_keyword = apply_keyword_extend(_extend(extend), keyword, alphabet, exclude=replace.upper()[0::2])
    return Directives(
        alphabet=alphabet,
        shift=shift,
        a=a,
        b=b,
        keyword=full_keyword,
        keyword_length=keyword_length,
        matrix=_matrix(matrix, alphabet),
        rails=rails,
        cycle_length=cycle,
        permutation=_permutation(perm),
        read_across=across,
        chars_per_cell=_int_list(cells, "Chars per cell"),
        digits=digits,
        separator=separator,
        number_size=size,
        rows_and_cols=rows_cols,
        heading=heading,
        replace=replace,
        **search,
    )


def _cipher(name: str):
    cipher = get_cipher(name)
    if cipher is None:
        raise typer.BadParameter(f"Cipher '{name}' is not supported. Available: {', '.join(list_ciphers())}")
    return cipher


@app.callback()
def _init(verbose: bool = typer.Option(False, "--verbose", "-v", help="Log progress to stderr.")):
    # Register ciphers exactly once per CLI run
    register_all()
    if verbose:
        logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")


@app.command()
def ciphers():
    """List all registered ciphers and the crack methods each supports."""
    for name in list_ciphers():
        cipher = get_cipher(name)
        methods = ", ".join(m.value for m in cipher.crack_methods) or "-"
        typer.echo(f"{name:<14} {cipher.family:<15} crack: {methods}")


@app.command()
def analyze(
    text: str = typer.Argument(..., help="Text to analyse, or '-' for stdin."),
    freq: int = typer.Option(0, "--freq", help="If >0, show the most frequent letters, bigrams and trigrams."),
    iocmax: int = typer.Option(0, help="If >0, show IoC scan up to this key length."),
    alphabet: str = ALPHABET,
    language: str = LANGUAGE,
):
    """Text statistics and a guess at which ciphers could have produced it."""
    lang = _language(language)
    text = _read_text(text)
    report = analyze_text(text, lang, alphabet.upper())
    for k, v in report.to_dict().items():
        if k != "suggestions":
            typer.echo(f"{k}: {v:.4f}" if isinstance(v, float) else f"{k}: {v}")
    typer.echo("")
    typer.echo(report.suggestions.rstrip())

    if freq > 0:
        for gram_size in (1, 2, 3):
            typer.echo(f"\nTop {freq} grams of size {gram_size}:")
            for row in frequency_table(text, gram_size, lang, alphabet.upper(), limit=freq):
                typer.echo(f"  {row.gram:<3} {row.count:5d} {row.percent:6.2f}%  normal {row.normal:5.2f}%")

    if iocmax > 0:
        typer.echo("\nTop IoC candidates:")
        for klen, val in likely_key_lengths(text, alphabet.upper(), iocmax)[:10]:
            typer.echo(f"  k={klen:2d}  avg_ioc={val:.5f}")


def _code(
    encode: bool,
    cipher_name: str,
    text: str,
    **params,
) -> str:
    cipher = _cipher(cipher_name)
    dirs = _build(**params)
    reason = cipher.validate(dirs)
    if reason is not None:
        raise typer.BadParameter(reason)
    text = _read_text(text)
    return cipher.encode(text, dirs) if encode else cipher.decode(text, dirs)


@app.command()
def encode(
    cipher: str = typer.Argument(..., help="Cipher name, e.g. caesar, hill, playfair."),
    text: str = typer.Argument(..., help="Plain text, or '-' for stdin."),
    shift: int = SHIFT, a: int = A, b: int = B,
    keyword: str = KEYWORD, extend: str = EXTEND,
    matrix: str = MATRIX, rails: int = RAILS, cycle: int = CYCLE,
    perm: str = PERM, across: bool = ACROSS, cells: str = CELLS,
    digits: str = DIGITS, separator: str = SEPARATOR, size: int = SIZE,
    rows_cols: int = ROWS_COLS, heading: str = HEADING, replace: str = REPLACE,
    alphabet: str = ALPHABET,
):
    """Encode text with a known key."""
    typer.echo(_code(
        True, cipher, text, alphabet=alphabet, shift=shift, a=a, b=b, keyword=keyword, extend=extend,
        matrix=matrix, rails=rails, cycle=cycle, perm=perm, across=across, cells=cells, digits=digits,
        separator=separator, size=size, rows_cols=rows_cols, heading=heading, replace=replace,
    ))


@app.command()
def decode(
    cipher: str = typer.Argument(..., help="Cipher name, e.g. caesar, hill, playfair."),
    text: str = typer.Argument(..., help="Cipher text, or '-' for stdin."),
    shift: int = SHIFT, a: int = A, b: int = B,
    keyword: str = KEYWORD, extend: str = EXTEND,
    matrix: str = MATRIX, rails: int = RAILS, cycle: int = CYCLE,
    perm: str = PERM, across: bool = ACROSS, cells: str = CELLS,
    digits: str = DIGITS, separator: str = SEPARATOR, size: int = SIZE,
    rows_cols: int = ROWS_COLS, heading: str = HEADING, replace: str = REPLACE,
    alphabet: str = ALPHABET,
):
    """Decode text when you already know the cipher and its key."""
    typer.echo(_code(
        False, cipher, text, alphabet=alphabet, shift=shift, a=a, b=b, keyword=keyword, extend=extend,
        matrix=matrix, rails=rails, cycle=cycle, perm=perm, across=across, cells=cells, digits=digits,
        separator=separator, size=size, rows_cols=rows_cols, heading=heading, replace=replace,
    ))


@app.command()
def crack(
    cipher: str = typer.Argument(..., help="Cipher name, e.g. caesar, vigenere, substitution."),
    text: str = typer.Argument(..., help="Cipher text, or '-' for stdin."),
    method: str = typer.Option(..., "--method", "-m", help="brute-force, dictionary, ioc, word-count or crib-drag."),
    cribs: str = typer.Option(DEFAULT_CRIBS, "--cribs", help="Comma separated words expected in the plain text."),
    keyword_length: int = KEYWORD_LENGTH,
    rows_cols: int = ROWS_COLS,
    heading: str = HEADING,
    replace: str = REPLACE,
    crib_drag: str = typer.Option("", "--crib-drag", help="Hill: probable plain text to drag along the cipher text."),
    alphabet: str = ALPHABET,
    dictionary: Optional[Path] = typer.Option(None, "--dictionary", help="Word list to use instead of the built-in one."),
    all_matches: bool = typer.Option(False, "--all-matches", help="Keep searching after the first match."),
    no_reverse: bool = typer.Option(False, "--no-reverse", help="Do not also try the reversed cipher text."),
    max_rails: int = typer.Option(20, "--max-rails", help="Railfence: most rails tried."),
    max_columns: int = typer.Option(8, "--max-columns", help="Permutation: most columns tried by brute force."),
    seed: Optional[int] = typer.Option(None, "--seed", help="Random seed for the annealing cracks."),
    language: str = LANGUAGE,
):
    """Crack cipher text with one of the cipher's crack methods, looking for the cribs."""
    found = _cipher(cipher)
    lang = _language(language)
    if dictionary is not None:
        lang = lang.with_dictionary(Dictionary.from_file(dictionary))
    dirs = _build(
        alphabet=alphabet,
        keyword_length=keyword_length,
        rows_cols=rows_cols,
        heading=heading,
        replace=replace,
        language=lang,
        cribs=cribs,
        crack_method=_method(method),
        crib_drag=crib_drag,
        stop_at_first=not all_matches,
        consider_reverse=not no_reverse,
        max_rails=max_rails,
        max_columns=max_columns,
        seed=seed,
    )
    if dirs.crack_method is CrackMethod.NONE:
        raise typer.BadParameter("A crack method other than 'none' is needed.")
    reason = found.validate(dirs)
    if reason is not None:
        raise typer.BadParameter(reason)

    text = _read_text(text)
    with CrackService(max_workers=1) as service:
        job = service.crack(found.name, text, dirs)
        try:
            result = service.result(job.id)
        except KeyboardInterrupt:
            service.cancel(job.id)
            result = service.result(job.id)

    typer.echo(f"{result.state}: {'success' if result.success else 'failed'} in {result.milliseconds} ms")
    if result.key:
        typer.echo(f"key: {result.key}")
    if result.plain_text:
        typer.echo(result.plain_text)
    typer.echo("-" * 60)
    typer.echo(result.explain.rstrip())


@app.command()
def transform(
    name: str = typer.Argument(..., help=f"One of: {', '.join(sorted(TRANSFORMS))}, split-every, split-words."),
    text: str = typer.Argument(..., help="Text to transform, or '-' for stdin."),
    every: int = typer.Option(5, "--every", help="split-every: group size."),
):
    """Apply a text transform, e.g. reverse or split run-together words."""
    text = _read_text(text)
    key = name.strip().lower()
    if key == "split-every":
        try:
            typer.echo(split_every(text, every))
        except ValueError as e:
            raise typer.BadParameter(str(e))
        return
    if key == "split-words":
        typer.echo(split_by_words(text, english().dictionary))
        return
    func = TRANSFORMS.get(key)
    if func is None:
        raise typer.BadParameter(f"Unknown transform '{name}'. Available: {', '.join(sorted(TRANSFORMS))}")
    typer.echo(func(text))


def main():
    app()


if __name__ == "__main__":
    main()
