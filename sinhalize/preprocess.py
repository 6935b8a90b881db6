from __future__ import annotations

from .resources import SinhalizeResources
from .types import PreservationRule, PreserveRuleName, Span
from .util import (
    chunk_end,
    follows_separator,
    is_ascii_alnum,
    is_ascii_digit,
    is_ascii_letter,
    is_attempt_position,
    word_end,
)


_TRAILING_PUNCT = ".,!?;:)\"'"
_QUOTE_OPEN = {'"': '"', "“": "”"}
# Bracketed expressions longer than this are treated as prose.
_MAX_EXPRESSION_LEN = 256
_MAX_QUOTED_LEN = 256
_MAX_LOCAL_LEN = 64
_MAX_HOST_LEN = 253


def _trim_trailing_punct(text: str, start: int, end: int) -> int:
    while end > start and text[end - 1] in _TRAILING_PUNCT:
        end -= 1
    return end


def _at_boundary(text: str, i: int) -> bool:
    return i >= len(text) or not is_ascii_alnum(text[i])


def _is_host_char(ch: str) -> bool:
    return is_ascii_alnum(ch) or ch in ".-"


def _scan_host(text: str, i: int) -> int | None:
    """Dot-separated labels of [A-Za-z0-9-]; returns the end of the last label."""
    n = len(text)
    limit = min(n, i + _MAX_HOST_LEN)
    stop = i
    while stop < limit and _is_host_char(text[stop]):
        stop += 1
    if stop == limit and stop < n and _is_host_char(text[stop]):
        return None
    j = i
    last = None
    while True:
        k = j
        while k < stop and (is_ascii_alnum(text[k]) or text[k] == "-"):
            k += 1
        if k == j:
            break
        last = k
        if k + 1 < stop and text[k] == "." and is_ascii_alnum(text[k + 1]):
            j = k + 1
            continue
        break
    return last


def _alpha_tld(host: str) -> str | None:
    if "." not in host:
        return None
    tld = host.rsplit(".", 1)[1]
    if len(tld) < 2 or not all(is_ascii_letter(c) for c in tld):
        return None
    return tld.lower()


def _match_email(text: str, i: int, res: SinhalizeResources) -> int | None:
    n = len(text)
    limit = min(n, i + _MAX_LOCAL_LEN)
    j = i
    while j < limit and (is_ascii_alnum(text[j]) or text[j] in "._%+-"):
        j += 1
    if j == i or j >= n or text[j] != "@":
        return None
    end = _scan_host(text, j + 1)
    if end is None or _alpha_tld(text[j + 1 : end]) is None:
        return None
    return end


def _match_url(text: str, i: int, res: SinhalizeResources) -> int | None:
    lex = res.preservation
    n = len(text)
    for scheme in lex.url_schemes:
        if text[i : i + len(scheme)].lower() == scheme:
            end = _trim_trailing_punct(text, i, chunk_end(text, i))
            return end if end > i + len(scheme) else None

    host_end = _scan_host(text, i)
    if host_end is None:
        return None
    tld = _alpha_tld(text[i:host_end])
    if tld is None:
        return None
    if host_end < n and text[host_end] in "/?#":
        return _trim_trailing_punct(text, i, chunk_end(text, i))
    if tld in lex.tlds and _at_boundary(text, host_end) and (host_end >= n or text[host_end] != "@"):
        return host_end
    return None


def _match_sql(text: str, i: int, res: SinhalizeResources) -> int | None:
    we = word_end(text, i)
    if we == i or text[i:we] not in res.preservation.sql_keywords:
        return None
    if we < len(text) and not text[we].isspace():
        return None
    end = text.find("\n", we)
    if end == -1:
        end = len(text)
    while end > we and text[end - 1].isspace():
        end -= 1
    return end


def _match_expression(text: str, i: int, res: SinhalizeResources) -> int | None:
    lex = res.preservation
    n = len(text)
    j = i
    we = word_end(text, i)
    if we > i:
        if text[i:we].lower() not in lex.code_keywords:
            return None
        j = we
        while j < n and text[j] in " \t":
            j += 1
    if j >= n or text[j] != "(":
        return None

    depth = 0
    k = j
    limit = min(n, j + _MAX_EXPRESSION_LEN)
    while k < limit and text[k] != "\n":
        if text[k] == "(":
            depth += 1
        elif text[k] == ")":
            depth -= 1
            if depth == 0:
                break
        k += 1
    if k >= limit or text[k] != ")":
        return None
    body = text[j + 1 : k]
    if not any(op in body for op in lex.operators):
        return None
    return k + 1


def _match_symbol_chunk(text: str, i: int, res: SinhalizeResources) -> int | None:
    # Whitespace-delimited chunks only.
    if i > 0 and not text[i - 1].isspace():
        return None
    symbols = res.preservation.code_symbols
    end = _trim_trailing_punct(text, i, chunk_end(text, i))
    chunk = text[i:end]
    if not any(is_ascii_alnum(c) for c in chunk):
        return None
    if not any(c in symbols for c in chunk):
        return None
    return end


def _match_code(text: str, i: int, res: SinhalizeResources) -> int | None:
    for scan in (_match_sql, _match_expression, _match_symbol_chunk):
        end = scan(text, i, res)
        if end is not None:
            return end
    return None


def _match_unit(text: str, j: int, units: tuple[str, ...]) -> int | None:
    for u in units:
        if text.startswith(u, j):
            end = j + len(u)
            # "a.m." style units end on punctuation already.
            if _at_boundary(text, end) or not is_ascii_alnum(u[-1]):
                return end
    return None


def _scan_digits(text: str, j: int) -> int:
    n = len(text)
    while j < n and is_ascii_digit(text[j]):
        j += 1
    while j + 1 < n and text[j] in ".,:" and is_ascii_digit(text[j + 1]):
        j += 1
        while j < n and is_ascii_digit(text[j]):
            j += 1
    return j


def _match_numeral(text: str, i: int, res: SinhalizeResources) -> int | None:
    n = len(text)
    j = i
    for cur in res.currencies:
        if not text.startswith(cur, i):
            continue
        j = i + len(cur)
        if j < n and is_ascii_digit(text[j]):
            break
        if _at_boundary(text, j) or not is_ascii_alnum(cur[-1]):
            # Currency stands alone; any amount is matched on its own.
            return j
        j = i
    if j >= n or not is_ascii_digit(text[j]):
        return None

    j = _scan_digits(text, j)
    end = _match_unit(text, j, res.units)
    if end is not None:
        return end
    if j < n and is_ascii_letter(text[j]):
        # Unknown letter suffix; left to the numeral normalizer.
        return word_end(text, j)
    if j + 1 < n and text[j] == " ":
        end = _match_unit(text, j + 1, res.spaced_units)
        if end is not None:
            return end
    if j < n and is_ascii_alnum(text[j]):
        return None
    return j


def _match_quoted(text: str, i: int, res: SinhalizeResources) -> int | None:
    close = _QUOTE_OPEN.get(text[i])
    if close is None:
        return None
    limit = min(len(text), i + _MAX_QUOTED_LEN)
    k = i + 1
    while k < limit and text[k] != "\n" and text[k] != close and text[k] != '"':
        k += 1
    if k >= limit or text[k] not in (close, '"'):
        return None
    words = text[i + 1 : k].split()
    if not words:
        return None
    for w in words:
        first = next((c for c in w if is_ascii_alnum(c)), None)
        if first is None:
            continue
        if not (first.isupper() or first.isdigit()):
            return None
    return k + 1


def _match_loanword(text: str, i: int, res: SinhalizeResources) -> int | None:
    we = word_end(text, i)
    if we == i:
        return None
    phrases = res.loanwords.get(text[i:we].lower())
    if not phrases:
        return None
    n = len(text)
    for phrase in phrases:
        pos = we
        ok = True
        for w in phrase[1:]:
            if pos >= n or text[pos] != " ":
                ok = False
                break
            nxt = word_end(text, pos + 1)
            if text[pos + 1 : nxt].lower() != w:
                ok = False
                break
            pos = nxt
        if ok and _at_boundary(text, pos):
            return pos
    return None


def _match_proper_noun(text: str, i: int, res: SinhalizeResources) -> int | None:
    we = word_end(text, i)
    if we == i or not text[i].isupper():
        return None
    if text[i:we].lower() not in res.proper_nouns or not _at_boundary(text, we):
        return None
    return we


def _match_acronym(text: str, i: int, res: SinhalizeResources) -> int | None:
    we = word_end(text, i)
    if we - i < 2 or not text[i:we].isupper() or not _at_boundary(text, we):
        return None
    return we


PRESERVATION_RULES: tuple[PreservationRule, ...] = (
    PreservationRule("email", _match_email, "personal identifiers must not be transliterated"),
    PreservationRule("url", _match_url, "links stay clickable"),
    PreservationRule("code", _match_code, "SQL, expressions and symbol-heavy tokens are not prose"),
    PreservationRule("numeral", _match_numeral, "numerals, units and currency stay in Latin digits"),
    PreservationRule("quoted", _match_quoted, "quoted capitalized titles are proper nouns"),
    PreservationRule("loanword", _match_loanword, "English loanwords are written in English"),
    PreservationRule("proper_noun", _match_proper_noun, "known names keep their spelling"),
    PreservationRule("acronym", _match_acronym, "ALL-CAPS words are acronyms or brand names"),
)
# Tried right after in-word separators such as "eka:https://..." or "eka-SELECT".
_GLUED_RULES: tuple[PreservationRule, ...] = tuple(
    r for r in PRESERVATION_RULES if r.name in ("email", "url", "code")
)


def split_spans(text: str, resources: SinhalizeResources) -> list[Span]:
    spans: list[Span] = []
    span_idx = 0
    n = len(text)

    def push_span(
        start: int,
        end: int,
        rule: PreserveRuleName | None = None,
    ) -> None:
        nonlocal span_idx
        if start >= end:
            return
        spans.append(
            Span(
                span_id=f"S{span_idx}",
                kind="preserve" if rule else "candidate",
                start=start,
                end=end,
                text=text[start:end],
                rule=rule,
            )
        )
        span_idx += 1

    cand_start = 0
    i = 0
    while i < n:
        if is_attempt_position(text, i):
            rules = PRESERVATION_RULES
        elif follows_separator(text, i):
            rules = _GLUED_RULES
        else:
            i += 1
            continue
        for rule in rules:
            end = rule.matcher(text, i, resources)
            if end is None or end <= i:
                continue
            push_span(cand_start, i)
            push_span(i, end, rule.name)
            i = end
            cand_start = end
            break
        else:
            i += 1
    push_span(cand_start, n)
    return spans
