"""Romanization rule table tests - ordering, case signals and contexts."""

from __future__ import annotations

import unittest

from sinhalize.phonetic import to_raw_chars
from sinhalize.rules import RuleTable, context_holds, parse_rule, sort_rules
from sinhalize.types import RomanizationRule


def _rule(rid: str, pattern: str, kind: str = "consonant", output: str = "", **kw) -> RomanizationRule:
    return RomanizationRule(rule_id=rid, pattern=pattern, kind=kind, output=output or rid, **kw)


class TestParseRule(unittest.TestCase):
    def test_valid_rule(self) -> None:
        r = parse_rule({"id": "c_k", "pattern": "k", "kind": "consonant", "output": "ක"}, 0)
        self.assertIsNotNone(r)
        assert r is not None
        self.assertEqual(r.rule_id, "c_k")
        self.assertEqual(r.output, "ක")
        self.assertFalse(r.conjunct)
        self.assertIsNone(r.context)

    def test_default_id(self) -> None:
        r = parse_rule({"pattern": "a", "kind": "vowel", "output": "අ"}, 3)
        assert r is not None
        self.assertEqual(r.rule_id, "r0003")

    def test_invalid_entries(self) -> None:
        self.assertIsNone(parse_rule({"pattern": "", "kind": "vowel", "output": "අ"}, 0))
        self.assertIsNone(parse_rule({"pattern": "a", "kind": "letter", "output": "අ"}, 0))
        self.assertIsNone(parse_rule({"pattern": "a", "kind": "vowel", "output": 5}, 0))

    def test_unknown_context_dropped(self) -> None:
        r = parse_rule({"pattern": "u", "kind": "vowel", "output": "උ", "context": "sometimes"}, 0)
        assert r is not None
        self.assertIsNone(r.context)


class TestOrdering(unittest.TestCase):
    def test_longest_first(self) -> None:
        rules = [_rule("k", "k"), _rule("kh", "kh")]
        self.assertEqual([r.rule_id for r in sort_rules(rules)], ["kh", "k"])

    def test_context_before_plain(self) -> None:
        plain = _rule("u", "u", kind="vowel")
        glide = _rule("wu", "u", kind="vowel", context="after_vowel")
        self.assertEqual([r.rule_id for r in sort_rules([plain, glide])], ["wu", "u"])

    def test_registration_order_breaks_ties(self) -> None:
        rules = [_rule("v", "v"), _rule("w", "w"), _rule("v2", "v")]
        self.assertEqual([r.rule_id for r in sort_rules(rules)], ["v", "w", "v2"])

    def test_context_holds(self) -> None:
        glide = _rule("wu", "u", kind="vowel", context="after_vowel")
        self.assertTrue(context_holds(glide, at_start=False, prev_kind="vowel"))
        self.assertFalse(context_holds(glide, at_start=False, prev_kind="consonant"))
        initial = _rule("i", "a", kind="vowel", context="initial")
        self.assertTrue(context_holds(initial, at_start=True, prev_kind=None))
        self.assertFalse(context_holds(initial, at_start=False, prev_kind=None))


class TestMatch(unittest.TestCase):
    def setUp(self) -> None:
        self.table = RuleTable.build(
            [
                _rule("t", "t"),
                _rule("T", "T"),
                _rule("th", "th"),
                _rule("Th", "Th"),
                _rule("b", "b"),
                _rule("a", "a", kind="vowel"),
                _rule("u", "u", kind="vowel"),
                _rule("wu", "u", kind="vowel", context="after_vowel"),
            ]
        )

    def test_maximal_munch(self) -> None:
        m = self.table.match(to_raw_chars("tha"), 0)
        assert m is not None
        self.assertEqual(m.rule.rule_id, "th")
        self.assertEqual((m.start, m.end), (0, 2))

    def test_signal_capital(self) -> None:
        chars = to_raw_chars("aTha")
        m = self.table.match(chars, 1)
        assert m is not None
        self.assertEqual(m.rule.rule_id, "Th")
        self.assertTrue(m.signal_used)
        self.assertFalse(m.signal_dropped)

    def test_word_initial_capital_is_not_signal(self) -> None:
        m = self.table.match(to_raw_chars("Tha"), 0)
        assert m is not None
        self.assertEqual(m.rule.rule_id, "th")
        self.assertFalse(m.signal_used)

    def test_signal_without_rule_is_dropped(self) -> None:
        m = self.table.match(to_raw_chars("aBa"), 1)
        assert m is not None
        self.assertEqual(m.rule.rule_id, "b")
        self.assertTrue(m.signal_dropped)
        self.assertFalse(m.signal_used)

    def test_context_rule(self) -> None:
        chars = to_raw_chars("au")
        self.assertEqual(self.table.match(chars, 1, prev_kind="vowel").rule.rule_id, "wu")
        self.assertEqual(self.table.match(chars, 1, prev_kind="consonant").rule.rule_id, "u")

    def test_no_rule(self) -> None:
        self.assertIsNone(self.table.match(to_raw_chars("q"), 0))

    def test_joins_and_can_start(self) -> None:
        self.assertTrue(self.table.joins("t", "h"))
        self.assertTrue(self.table.joins("T", "h"))
        self.assertFalse(self.table.joins("t", "b"))
        self.assertTrue(self.table.can_start(to_raw_chars("t")[0]))
        self.assertFalse(self.table.can_start(to_raw_chars("q")[0]))


if __name__ == "__main__":
    unittest.main()
