from __future__ import annotations

import regex


ZWJ = "\u200d"
AL_LAKUNA = "\u0dca"

_VOWEL_LETTERS = frozenset("aeiouAEIOU")
_OPENERS = frozenset("([{<\"'\u201c\u2018")
_SEPARATORS = frozenset(":-,;=")
_GRAPHEME_RE = regex.compile(r"\X")


def is_space(ch: str) -> bool:
    return ch.isspace()


def is_ascii_letter(ch: str) -> bool:
    o = ord(ch)
    return (65 <= o <= 90) or (97 <= o <= 122)


def is_ascii_digit(ch: str) -> bool:
    o = ord(ch)
    return 48 <= o <= 57


def is_ascii_alnum(ch: str) -> bool:
    return is_ascii_letter(ch) or is_ascii_digit(ch)


def is_vowel_letter(ch: str) -> bool:
    return ch in _VOWEL_LETTERS


def is_attempt_position(text: str, i: int) -> bool:
    """True where a preserved run may begin: text start, after whitespace or an opener."""
    if i >= len(text) or is_space(text[i]):
        return False
    if i == 0:
        return True
    prev = text[i - 1]
    return is_space(prev) or prev in _OPENERS


def follows_separator(text: str, i: int) -> bool:
    """True right after in-word punctuation that may glue a link or code to a word."""
    return 0 < i < len(text) and text[i - 1] in _SEPARATORS and not is_space(text[i])


def chunk_end(text: str, i: int) -> int:
    n = len(text)
    j = i
    while j < n and not is_space(text[j]):
        j += 1
    return j


def word_end(text: str, i: int) -> int:
    n = len(text)
    j = i
    while j < n and is_ascii_letter(text[j]):
        j += 1
    return j


def split_graphemes(text: str) -> list[str]:
    """Split Sinhala text into extended grapheme clusters (letter + vowel signs)."""
    if not text:
        return []
    return _GRAPHEME_RE.findall(text)
