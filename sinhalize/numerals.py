from __future__ import annotations

from dataclasses import dataclass

from .resources import SinhalizeResources
from .util import is_ascii_digit, is_ascii_letter


@dataclass(frozen=True)
class NumeralRewrite:
    original: str
    rewritten: str
    suffix: str
    particle: str


def split_numeral_suffix(text: str) -> tuple[str, str, str]:
    """Split ``rs.500k`` into (prefix, numeral, letter suffix) = ("rs.", "500", "k")."""
    j = len(text)
    while j > 0 and is_ascii_letter(text[j - 1]):
        j -= 1
    suffix = text[j:]
    k = j
    while k > 0 and (is_ascii_digit(text[k - 1]) or text[k - 1] in ".,:"):
        k -= 1
    # Separators only count between digits.
    while k < j and not is_ascii_digit(text[k]):
        k += 1
    return text[:k], text[k:j], suffix


def is_unit_suffix(suffix: str, resources: SinhalizeResources) -> bool:
    low = suffix.lower()
    return any(u == suffix or u.lower() == low for u in resources.units)


def normalize_numeral(text: str, resources: SinhalizeResources) -> tuple[str, NumeralRewrite | None]:
    """
    Attach a grammatical particle to a numeral written with a bare Latin suffix.

    Checked in priority order: a known unit keeps the token verbatim, then a
    particle suffix is replaced by its Sinhala particle, and anything else is
    left untouched.
    """
    prefix, numeral, suffix = split_numeral_suffix(text)
    if not suffix or not numeral or not is_ascii_digit(numeral[-1]):
        return text, None

    if is_unit_suffix(suffix, resources):
        return text, None

    for pat in resources.particle_patterns:
        if suffix != pat.suffix:
            continue
        if not pat.numeral_matches(numeral):
            continue
        rewritten = prefix + numeral + pat.particle
        return rewritten, NumeralRewrite(
            original=text,
            rewritten=rewritten,
            suffix=suffix,
            particle=pat.particle,
        )

    return text, None
