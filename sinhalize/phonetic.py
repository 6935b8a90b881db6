from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from .rules import RuleMatch, RuleTable
from .types import GraphemeDecision, RawChar
from .util import AL_LAKUNA, ZWJ


@dataclass(frozen=True)
class _Unit:
    start: int
    end: int
    match: RuleMatch | None = None


@dataclass
class MappedToken:
    text: str
    graphemes: list[str]
    decisions: list[GraphemeDecision]
    warnings: list[str] = field(default_factory=list)


def to_raw_chars(text: str) -> tuple[RawChar, ...]:
    """Tag each letter; an upper case letter is a signal unless it starts the word."""
    return tuple(
        RawChar(letter=ch, is_signal=(i > 0 and ch.isupper())) for i, ch in enumerate(text)
    )


def scan_units(chars: Sequence[RawChar], table: RuleTable) -> list[_Unit]:
    units: list[_Unit] = []
    prev_kind = None
    i = 0
    n = len(chars)
    while i < n:
        m = table.match(chars, i, prev_kind=prev_kind)
        if m is None:
            units.append(_Unit(start=i, end=i + 1))
            prev_kind = None
            i += 1
            continue
        units.append(_Unit(start=m.start, end=m.end, match=m))
        prev_kind = m.rule.kind
        i = m.end
    return units


def map_token(chars: Sequence[RawChar], table: RuleTable) -> MappedToken:
    roman = "".join(c.letter for c in chars)
    units = scan_units(chars, table)
    clusters: list[str] = []
    decisions: list[GraphemeDecision] = []
    warnings: list[str] = []

    def decide(m: RuleMatch, chosen: str, *notes: str) -> None:
        dec = GraphemeDecision(
            roman=roman[m.start : m.end],
            offset_in_token=m.start,
            chosen=chosen,
            resolved_by="default" if m.signal_dropped else "rule",
            rule_id=m.rule.rule_id,
            signal=m.signal_used,
            notes=list(notes),
        )
        if m.signal_dropped:
            dec.notes.append("signal_discarded")
        decisions.append(dec)

    def match_at(k: int) -> RuleMatch | None:
        return units[k].match if k < len(units) else None

    i = 0
    while i < len(units):
        unit = units[i]
        m = unit.match
        if m is None:
            ch = roman[unit.start : unit.end]
            decisions.append(
                GraphemeDecision(
                    roman=ch,
                    offset_in_token=unit.start,
                    chosen=ch,
                    resolved_by="unknown",
                    notes=["no_rule"],
                )
            )
            warnings.append(f"unmapped_char: token='{roman}' char='{ch}' offset={unit.start}")
            clusters.append(ch)
            i += 1
            continue

        rule = m.rule
        if rule.kind == "vowel":
            decide(m, rule.output)
            clusters.append(rule.output)
            i += 1
            continue

        if rule.kind == "mark":
            decide(m, rule.output)
            if clusters:
                clusters[-1] += rule.output
            else:
                clusters.append(rule.output)
            i += 1
            continue

        nxt = match_at(i + 1)
        nxt2 = match_at(i + 2)
        if nxt is not None and nxt.rule.kind == "vowel":
            decide(m, rule.output)
            decide(nxt, nxt.rule.sign)
            clusters.append(rule.output + nxt.rule.sign)
            i += 2
            continue

        if (
            nxt is not None
            and nxt.rule.kind == "consonant"
            and nxt.rule.conjunct
            and not rule.conjunct
            and nxt2 is not None
            and nxt2.rule.kind == "vowel"
        ):
            joined = rule.output + AL_LAKUNA + ZWJ
            decide(m, joined, "conjunct")
            decide(nxt, nxt.rule.output)
            decide(nxt2, nxt2.rule.sign)
            clusters.append(joined + nxt.rule.output + nxt2.rule.sign)
            i += 3
            continue

        if nxt is not None and nxt.rule.kind == "mark":
            # Inherent vowel carries the nasal mark.
            decide(m, rule.output)
            clusters.append(rule.output)
            i += 1
            continue

        decide(m, rule.output + AL_LAKUNA)
        clusters.append(rule.output + AL_LAKUNA)
        i += 1

    return MappedToken(
        text="".join(clusters),
        graphemes=clusters,
        decisions=decisions,
        warnings=warnings,
    )
