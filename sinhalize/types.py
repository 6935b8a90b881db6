from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Callable, Literal, Optional


SpanKind = Literal["preserve", "candidate"]
PreserveRuleName = Literal[
    "email",
    "url",
    "code",
    "numeral",
    "quoted",
    "loanword",
    "proper_noun",
    "acronym",
]
RuleKind = Literal["consonant", "vowel", "mark"]
RuleContext = Literal["initial", "after_vowel", "after_consonant"]
TokenSource = Literal["word", "syllable", "unmatched"]


@dataclass(frozen=True)
class Span:
    span_id: str
    kind: SpanKind
    start: int
    end: int
    text: str
    rule: PreserveRuleName | None = None


@dataclass(frozen=True)
class RawChar:
    """One input letter; ``is_signal`` marks an upper case that selects a phoneme."""

    letter: str
    is_signal: bool = False

    def key(self) -> str:
        return self.letter if self.is_signal else self.letter.lower()


@dataclass(frozen=True)
class Token:
    span_id: str
    index_in_span: int
    start: int
    end: int
    text: str
    romanized: str
    chars: tuple[RawChar, ...]
    source: TokenSource = "syllable"

    @property
    def has_signal(self) -> bool:
        return any(c.is_signal for c in self.chars)


@dataclass
class GraphemeDecision:
    roman: str
    offset_in_token: int
    chosen: str
    resolved_by: Literal["word", "rule", "default", "unknown"]
    rule_id: str | None = None
    signal: bool = False
    notes: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class RomanizationRule:
    rule_id: str
    pattern: str
    kind: RuleKind
    output: str
    sign: str = ""
    context: RuleContext | None = None
    conjunct: bool = False

    @property
    def specificity(self) -> int:
        return 1 if self.context else 0


# matcher(text, start, resources) -> end offset of the preserved run, or None.
Matcher = Callable[[str, int, object], Optional[int]]


@dataclass(frozen=True)
class PreservationRule:
    name: PreserveRuleName
    matcher: Matcher
    rationale: str


@dataclass(frozen=True)
class NumeralParticlePattern:
    suffix: str
    particle: str
    numeral_regex: str = r"\d+(?:[.,]\d+)*"

    def numeral_matches(self, numeral: str) -> bool:
        return re.fullmatch(self.numeral_regex, numeral) is not None
