from __future__ import annotations

import json
import sys
from dataclasses import dataclass
from typing import Any

from .numerals import NumeralRewrite, normalize_numeral
from .phonetic import map_token, to_raw_chars
from .preprocess import split_spans
from .resources import SinhalizeResources
from .rules import RuleTable
from .types import GraphemeDecision, RawChar, Span, Token, TokenSource
from .util import is_ascii_letter, is_vowel_letter, split_graphemes


@dataclass(frozen=True)
class SinhalizeOptions:
    resources: SinhalizeResources
    debug: bool = False


@dataclass(frozen=True)
class TransliterateResult:
    output_text: str
    report: dict[str, Any]

    @property
    def warnings(self) -> list[str]:
        return list(self.report.get("warnings", []))


def _letter_runs(text: str) -> list[tuple[int, int]]:
    runs: list[tuple[int, int]] = []
    i = 0
    n = len(text)
    while i < n:
        if not is_ascii_letter(text[i]):
            i += 1
            continue
        j = i
        while j < n and is_ascii_letter(text[j]):
            j += 1
        runs.append((i, j))
        i = j
    return runs


def _is_boundary(lower: str, end: int, table: RuleTable) -> bool:
    # A word may only end where the next letter starts a fresh syllable.
    if end >= len(lower):
        return True
    nxt = lower[end]
    if is_vowel_letter(nxt):
        return False
    return not table.joins(lower[end - 1], nxt)


def _syllable_len(chars: tuple[RawChar, ...], i: int, table: RuleTable) -> int:
    """Consonant units followed by at most one vowel unit."""
    j = i
    prev = None
    n = len(chars)
    while j < n:
        m = table.match(chars, j, prev_kind=prev)
        if m is None:
            break
        j = m.end
        if m.rule.kind == "vowel":
            break
        prev = m.rule.kind
    return j - i


def _segment_run(
    chars: tuple[RawChar, ...],
    resources: SinhalizeResources,
) -> list[tuple[int, int, TokenSource]]:
    table = resources.rule_table
    words = resources.words
    max_len_by_first = resources.max_word_len_by_first
    lower = "".join(c.letter for c in chars).lower()
    n = len(lower)

    pieces: list[tuple[int, int, TokenSource]] = []
    i = 0
    while i < n:
        matched_len = 0
        for L in range(min(max_len_by_first.get(lower[i], 0), n - i), 1, -1):
            if lower[i : i + L] in words and _is_boundary(lower, i + L, table):
                matched_len = L
                break
        if matched_len:
            pieces.append((i, i + matched_len, "word"))
            i += matched_len
            continue

        L = _syllable_len(chars, i, table)
        if L == 0:
            j = i + 1
            while j < n and not table.can_start(chars[j]):
                j += 1
            pieces.append((i, j, "unmatched"))
            i = j
            continue

        if pieces and pieces[-1][2] == "syllable" and pieces[-1][1] == i:
            pieces[-1] = (pieces[-1][0], i + L, "syllable")
        else:
            pieces.append((i, i + L, "syllable"))
        i += L
    return pieces


def _tokens_from_spans(spans: list[Span], resources: SinhalizeResources) -> list[Token]:
    tokens: list[Token] = []
    for sp in spans:
        if sp.kind != "candidate":
            continue
        idx = 0
        for run_start, run_end in _letter_runs(sp.text):
            run = sp.text[run_start:run_end]
            chars = to_raw_chars(run)
            for start, end, source in _segment_run(chars, resources):
                surface = run[start:end]
                tokens.append(
                    Token(
                        span_id=sp.span_id,
                        index_in_span=idx,
                        start=sp.start + run_start + start,
                        end=sp.start + run_start + end,
                        text=surface,
                        romanized=surface.lower(),
                        chars=chars[start:end],
                        source=source,
                    )
                )
                idx += 1
    return tokens


def _analyze_token(
    tok: Token,
    resources: SinhalizeResources,
) -> tuple[str, list[str], list[GraphemeDecision], list[str]]:
    """
    Returns (sinhala, graphemes, decisions, warnings) for one token.
    """
    if tok.source == "unmatched":
        dec = GraphemeDecision(
            roman=tok.text,
            offset_in_token=0,
            chosen=tok.text,
            resolved_by="unknown",
            notes=["no_syllable_match"],
        )
        return tok.text, [tok.text], [dec], [f"unresolved_token: token='{tok.text}' start={tok.start}"]

    if tok.source == "word":
        entry = resources.words.get(tok.romanized)
        if entry and not tok.has_signal:
            dec = GraphemeDecision(
                roman=tok.text,
                offset_in_token=0,
                chosen=entry,
                resolved_by="word",
            )
            return entry, split_graphemes(entry), [dec], []

    mapped = map_token(tok.chars, resources.rule_table)
    if tok.source == "word" and mapped.decisions:
        # Case signals override the dictionary spelling.
        mapped.decisions[0].notes.append("word_entry_skipped_for_signal")
    return mapped.text, mapped.graphemes, mapped.decisions, mapped.warnings


def _decision_dict(d: GraphemeDecision) -> dict[str, Any]:
    return {
        "roman": d.roman,
        "offset_in_token": d.offset_in_token,
        "chosen": d.chosen,
        "resolved_by": d.resolved_by,
        "rule_id": d.rule_id,
        "signal": d.signal,
        "notes": d.notes,
    }


def _span_dict(sp: Span) -> dict[str, Any]:
    return {
        "span_id": sp.span_id,
        "kind": sp.kind,
        "rule": sp.rule,
        "start": sp.start,
        "end": sp.end,
        "text": sp.text,
    }


def transliterate(text: str, options: SinhalizeOptions) -> TransliterateResult:
    def _debug_step(step_name: str, data: Any) -> None:
        if options.debug:
            print(f"\n{'='*60}", file=sys.stderr)
            print(f"[DEBUG] {step_name}", file=sys.stderr)
            print(f"{'='*60}", file=sys.stderr)
            if isinstance(data, (list, dict)):
                print(json.dumps(data, ensure_ascii=False, indent=2), file=sys.stderr)
            else:
                print(data, file=sys.stderr)

    resources = options.resources

    spans = split_spans(text, resources)
    _debug_step("Step 1: Span classification", [_span_dict(sp) for sp in spans])

    tokens = _tokens_from_spans(spans, resources)
    _debug_step("Step 2: Segmentation", [
        {"span_id": tok.span_id, "index_in_span": tok.index_in_span,
         "start": tok.start, "end": tok.end, "text": tok.text, "source": tok.source}
        for tok in tokens
    ])

    token_sinhala: dict[tuple[int, int], str] = {}
    token_graphemes: dict[tuple[int, int], list[str]] = {}
    token_decisions: dict[tuple[int, int], list[GraphemeDecision]] = {}
    warnings: list[str] = []

    for tok in tokens:
        key = (tok.start, tok.end)
        out, graphemes, decisions, w = _analyze_token(tok, resources)
        token_sinhala[key] = out
        token_graphemes[key] = graphemes
        token_decisions[key] = decisions
        warnings.extend(w)

    _debug_step("Step 3: Phonetic mapping", [
        {
            "token_text": tok.text,
            "source": tok.source,
            "sinhala": token_sinhala[(tok.start, tok.end)],
            "decisions": [_decision_dict(d) for d in token_decisions[(tok.start, tok.end)]],
        }
        for tok in tokens
    ])

    span_output: dict[str, str] = {}
    rewrites: list[tuple[str, NumeralRewrite]] = []
    for sp in spans:
        if sp.kind == "preserve" and sp.rule == "numeral":
            out, rw = normalize_numeral(sp.text, resources)
            span_output[sp.span_id] = out
            if rw is not None:
                rewrites.append((sp.span_id, rw))
    _debug_step("Step 4: Numeral normalization", [
        {"span_id": sid, "original": rw.original, "rewritten": rw.rewritten}
        for sid, rw in rewrites
    ])

    # Output stitching.
    span_to_tokens: dict[str, list[Token]] = {}
    for tok in tokens:
        span_to_tokens.setdefault(tok.span_id, []).append(tok)

    out_parts: list[str] = []
    for sp in spans:
        if sp.kind == "preserve":
            out_parts.append(span_output.get(sp.span_id, sp.text))
            continue
        cursor = sp.start
        for tok in span_to_tokens.get(sp.span_id) or []:
            out_parts.append(text[cursor : tok.start])
            out_parts.append(token_sinhala[(tok.start, tok.end)])
            cursor = tok.end
        out_parts.append(text[cursor : sp.end])

    output_text = "".join(out_parts)
    _debug_step("Step 5: Output stitching", {
        "output_parts": out_parts,
        "final_output": output_text,
    })

    report = {
        "schema_version": 1,
        "text": text,
        "spans": [_span_dict(sp) for sp in spans],
        "tokens": [
            {
                "span_id": tok.span_id,
                "index_in_span": tok.index_in_span,
                "start": tok.start,
                "end": tok.end,
                "text": tok.text,
                "source": tok.source,
                "sinhala": token_sinhala[(tok.start, tok.end)],
                "graphemes": token_graphemes[(tok.start, tok.end)],
                "decisions": [_decision_dict(d) for d in token_decisions[(tok.start, tok.end)]],
            }
            for tok in tokens
        ],
        "numerals": [
            {
                "span_id": sid,
                "original": rw.original,
                "rewritten": rw.rewritten,
                "suffix": rw.suffix,
                "particle": rw.particle,
            }
            for sid, rw in rewrites
        ],
        "warnings": warnings,
    }

    return TransliterateResult(output_text=output_text, report=report)


def translate(text: str, options: SinhalizeOptions) -> str:
    return transliterate(text, options).output_text
