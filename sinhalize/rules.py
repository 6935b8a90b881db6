from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping, Sequence

from .types import RawChar, RomanizationRule, RuleKind


_KINDS = {"consonant", "vowel", "mark"}
_CONTEXTS = {"initial", "after_vowel", "after_consonant"}


@dataclass(frozen=True)
class RuleMatch:
    rule: RomanizationRule
    start: int
    end: int
    # The capital at ``start`` selected this rule.
    signal_used: bool = False
    # The capital at ``start`` had no rule of its own and was read as lower case.
    signal_dropped: bool = False


def parse_rule(raw: dict[str, Any], index: int) -> RomanizationRule | None:
    pattern = raw.get("pattern")
    kind = raw.get("kind")
    output = raw.get("output")
    if not isinstance(pattern, str) or not pattern:
        return None
    if kind not in _KINDS or not isinstance(output, str):
        return None
    sign = raw.get("sign", "")
    if not isinstance(sign, str):
        sign = ""
    context = raw.get("context")
    if context not in _CONTEXTS:
        context = None
    rid = raw.get("id")
    return RomanizationRule(
        rule_id=rid if isinstance(rid, str) and rid else f"r{index:04d}",
        pattern=pattern,
        kind=kind,
        output=output,
        sign=sign,
        context=context,
        conjunct=bool(raw.get("conjunct", False)),
    )


def sort_rules(rules: Sequence[RomanizationRule]) -> list[RomanizationRule]:
    order = {id(r): i for i, r in enumerate(rules)}

    def key(r: RomanizationRule) -> tuple[int, int, int]:
        # longest pattern, then most specific context, then registration order
        return (-len(r.pattern), -r.specificity, order[id(r)])

    return sorted(rules, key=key)


def context_holds(rule: RomanizationRule, *, at_start: bool, prev_kind: RuleKind | None) -> bool:
    if rule.context is None:
        return True
    if rule.context == "initial":
        return at_start
    if rule.context == "after_vowel":
        return prev_kind == "vowel"
    if rule.context == "after_consonant":
        return prev_kind == "consonant"
    return False


@dataclass(frozen=True)
class RuleTable:
    rules: tuple[RomanizationRule, ...]
    by_first: Mapping[str, tuple[RomanizationRule, ...]]
    joining_pairs: frozenset[str]

    @staticmethod
    def build(rules: Sequence[RomanizationRule]) -> "RuleTable":
        ordered = sort_rules(rules)
        grouped: dict[str, list[RomanizationRule]] = {}
        pairs: set[str] = set()
        for r in ordered:
            grouped.setdefault(r.pattern[0], []).append(r)
            low = r.pattern.lower()
            for k in range(len(low) - 1):
                pairs.add(low[k : k + 2])
        return RuleTable(
            rules=tuple(ordered),
            by_first=MappingProxyType({k: tuple(v) for k, v in grouped.items()}),
            joining_pairs=frozenset(pairs),
        )

    def can_start(self, ch: RawChar) -> bool:
        return ch.key() in self.by_first or ch.letter.lower() in self.by_first

    def joins(self, left: str, right: str) -> bool:
        """True when ``left`` followed by ``right`` can be read as one longer pattern."""
        return (left + right).lower() in self.joining_pairs

    def match(
        self,
        chars: Sequence[RawChar],
        i: int,
        *,
        prev_kind: RuleKind | None = None,
    ) -> RuleMatch | None:
        n = len(chars)
        head = chars[i]
        attempts = (False, True) if head.is_signal else (False,)
        for lower_first in attempts:
            first = head.letter.lower() if lower_first else head.key()
            for rule in self.by_first.get(first, ()):
                end = i + len(rule.pattern)
                if end > n:
                    continue
                if any(rule.pattern[k] != chars[i + k].key() for k in range(1, len(rule.pattern))):
                    continue
                if not context_holds(rule, at_start=(i == 0), prev_kind=prev_kind):
                    continue
                return RuleMatch(
                    rule=rule,
                    start=i,
                    end=end,
                    signal_used=head.is_signal and not lower_first,
                    signal_dropped=lower_first,
                )
        return None
