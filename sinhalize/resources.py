from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

from .rules import RuleTable, parse_rule
from .types import NumeralParticlePattern, RomanizationRule
from .util import is_ascii_letter


DEFAULT_DATA_DIR = Path(__file__).resolve().parent / "data"


class ResourceError(ValueError):
    pass


def _read_json(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def _is_roman_word(s: str) -> bool:
    return bool(s) and all(is_ascii_letter(ch) for ch in s)


def _load_word_sinhala_map(path: Path) -> dict[str, str]:
    # One JSON object per line, optionally wrapped in [ ] with trailing commas.
    out: dict[str, str] = {}
    with path.open("r", encoding="utf-8") as f:
        for line in f:
            s = line.strip()
            if not s or s == "[" or s == "]":
                continue
            if s.endswith(","):
                s = s[:-1]
            obj = json.loads(s)
            word = obj.get("word")
            sinhala = obj.get("sinhala")
            if not isinstance(word, str) or not isinstance(sinhala, str):
                continue
            if not _is_roman_word(word) or not sinhala:
                continue
            out[word.lower()] = sinhala
    return out


def _load_lexicon(path: Path) -> dict[str, str]:
    if not path.exists():
        return {}
    raw = _read_json(path)
    out: dict[str, str] = {}
    if isinstance(raw, dict) and "items" in raw:
        items = raw.get("items")
        if isinstance(items, list):
            for it in items:
                if not isinstance(it, dict):
                    continue
                w = it.get("word")
                s = it.get("sinhala")
                if isinstance(w, str) and isinstance(s, str) and s and _is_roman_word(w):
                    out[w.lower()] = s
        return out
    if isinstance(raw, dict):
        for k, v in raw.items():
            if isinstance(k, str) and isinstance(v, str) and v and _is_roman_word(k):
                out[k.lower()] = v
    return out


def _load_romanization_rules(path: Path) -> tuple[RomanizationRule, ...]:
    raw = _read_json(path)
    items = raw.get("rules", []) if isinstance(raw, dict) else raw
    rules: list[RomanizationRule] = []
    if isinstance(items, list):
        for idx, it in enumerate(items):
            if not isinstance(it, dict):
                continue
            rule = parse_rule(it, idx)
            if rule is not None:
                rules.append(rule)
    if not rules:
        raise ResourceError(f"no usable romanization rules in {path}")
    return tuple(rules)


def _load_items(path: Path) -> list[str]:
    raw = _read_json(path)
    items = raw.get("items", []) if isinstance(raw, dict) else raw
    if not isinstance(items, list):
        return []
    return [s.strip() for s in items if isinstance(s, str) and s.strip()]


def _index_phrases(items: list[str]) -> dict[str, tuple[tuple[str, ...], ...]]:
    grouped: dict[str, list[tuple[str, ...]]] = {}
    for item in items:
        words = tuple(w.lower() for w in item.split())
        if words:
            grouped.setdefault(words[0], []).append(words)
    return {
        k: tuple(sorted(set(v), key=lambda p: (-len(p), p))) for k, v in grouped.items()
    }


def _str_list(raw: dict[str, Any], key: str) -> list[str]:
    vals = raw.get(key)
    if not isinstance(vals, list):
        return []
    return [v for v in vals if isinstance(v, str) and v]


def _longest_first(vals: list[str]) -> tuple[str, ...]:
    return tuple(sorted(set(vals), key=lambda s: (-len(s), s)))


def _load_units(path: Path) -> tuple[tuple[str, ...], tuple[str, ...], tuple[str, ...]]:
    raw = _read_json(path)
    if not isinstance(raw, dict):
        return (), (), ()
    return (
        _longest_first(_str_list(raw, "units")),
        _longest_first(_str_list(raw, "spaced_units")),
        _longest_first(_str_list(raw, "currencies")),
    )


def _load_particles(path: Path) -> tuple[NumeralParticlePattern, ...]:
    raw = _read_json(path)
    items = raw.get("patterns", []) if isinstance(raw, dict) else raw
    out: list[NumeralParticlePattern] = []
    if not isinstance(items, list):
        return ()
    for it in items:
        if not isinstance(it, dict):
            continue
        suffix = it.get("suffix")
        particle = it.get("particle")
        if not isinstance(suffix, str) or not suffix or not isinstance(particle, str):
            continue
        rx = it.get("numeral_regex")
        if isinstance(rx, str) and rx:
            try:
                re.compile(rx)
            except re.error:
                continue
            out.append(NumeralParticlePattern(suffix=suffix, particle=particle, numeral_regex=rx))
        else:
            out.append(NumeralParticlePattern(suffix=suffix, particle=particle))
    return tuple(out)


@dataclass(frozen=True)
class PreservationLexicon:
    sql_keywords: frozenset[str] = frozenset()
    code_keywords: frozenset[str] = frozenset()
    operators: tuple[str, ...] = ()
    code_symbols: frozenset[str] = frozenset()
    url_schemes: tuple[str, ...] = ()
    tlds: frozenset[str] = frozenset()


def _load_preservation(path: Path) -> PreservationLexicon:
    raw = _read_json(path)
    if not isinstance(raw, dict):
        return PreservationLexicon()
    symbols = raw.get("code_symbols")
    return PreservationLexicon(
        sql_keywords=frozenset(_str_list(raw, "sql_keywords")),
        code_keywords=frozenset(k.lower() for k in _str_list(raw, "code_keywords")),
        operators=_longest_first(_str_list(raw, "operators")),
        code_symbols=frozenset(symbols) if isinstance(symbols, str) else frozenset(),
        url_schemes=_longest_first(_str_list(raw, "url_schemes")),
        tlds=frozenset(t.lower() for t in _str_list(raw, "tlds")),
    )


@dataclass(frozen=True)
class SinhalizeResources:
    word_sinhala: Mapping[str, str]
    lexicon_sinhala: Mapping[str, str]
    rule_table: RuleTable
    loanwords: Mapping[str, tuple[tuple[str, ...], ...]]
    proper_nouns: frozenset[str]
    units: tuple[str, ...]
    spaced_units: tuple[str, ...]
    currencies: tuple[str, ...]
    particle_patterns: tuple[NumeralParticlePattern, ...]
    preservation: PreservationLexicon = field(default_factory=PreservationLexicon)
    words: Mapping[str, str] = field(init=False, repr=False)
    max_word_len_by_first: Mapping[str, int] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        # Loaded tables are exposed read-only.
        for name in ("word_sinhala", "lexicon_sinhala", "loanwords"):
            object.__setattr__(self, name, MappingProxyType(dict(getattr(self, name))))
        merged = self.combined_word_sinhala()
        max_len: dict[str, int] = {}
        for w in merged:
            max_len[w[0]] = max(max_len.get(w[0], 0), len(w))
        object.__setattr__(self, "words", MappingProxyType(merged))
        object.__setattr__(self, "max_word_len_by_first", MappingProxyType(max_len))

    @staticmethod
    def load_from_dir(
        data_dir: str | Path,
        *,
        rules_json: str = "rules.json",
        words_json: str = "words.json",
        lexicon_json: str = "lexicon.json",
        loanwords_json: str = "loanwords.json",
        proper_nouns_json: str = "proper_nouns.json",
        units_json: str = "units.json",
        particles_json: str = "particles.json",
        preservation_json: str = "preservation.json",
    ) -> "SinhalizeResources":
        base = Path(data_dir)

        rules = _load_romanization_rules(base / rules_json)
        word_sinhala = _load_word_sinhala_map(base / words_json)
        lexicon_sinhala = _load_lexicon(base / lexicon_json)
        loanwords = _index_phrases(_load_items(base / loanwords_json))
        proper_nouns = frozenset(w.lower() for w in _load_items(base / proper_nouns_json))
        units, spaced_units, currencies = _load_units(base / units_json)
        particle_patterns = _load_particles(base / particles_json)
        preservation = _load_preservation(base / preservation_json)

        return SinhalizeResources(
            word_sinhala=word_sinhala,
            lexicon_sinhala=lexicon_sinhala,
            rule_table=RuleTable.build(rules),
            loanwords=loanwords,
            proper_nouns=proper_nouns,
            units=units,
            spaced_units=spaced_units,
            currencies=currencies,
            particle_patterns=particle_patterns,
            preservation=preservation,
        )

    @staticmethod
    def load_default() -> "SinhalizeResources":
        return SinhalizeResources.load_from_dir(DEFAULT_DATA_DIR)

    def combined_word_sinhala(self) -> dict[str, str]:
        merged = dict(self.word_sinhala)
        merged.update(self.lexicon_sinhala)
        return merged
