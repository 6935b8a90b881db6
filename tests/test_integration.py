"""Integration tests for sinhalize.

These run the end-to-end Singlish cases shipped with the benchmark script.
"""

from __future__ import annotations

import json
import re
import unittest
from pathlib import Path

from sinhalize import SinhalizeOptions, SinhalizeResources, translate, transliterate
from sinhalize.preprocess import split_spans

CASES_PATH = Path(__file__).resolve().parent.parent / "benchmark_cases.json"


def _collapse(text: str) -> str:
    return re.sub(r"\s+", " ", text).strip()


class TestBenchmarkCases(unittest.TestCase):
    """Every benchmark case, compared with whitespace runs collapsed."""

    @classmethod
    def setUpClass(cls) -> None:
        cls.opts = SinhalizeOptions(resources=SinhalizeResources.load_default())
        cls.cases = json.loads(CASES_PATH.read_text(encoding="utf-8"))

    def test_cases(self) -> None:
        self.assertGreater(len(self.cases), 40)
        for case in self.cases:
            with self.subTest(case=case["id"]):
                actual = translate(case["input"], self.opts)
                self.assertEqual(_collapse(actual), _collapse(case["expected"]))

    def test_cases_keep_input_whitespace(self) -> None:
        for case in self.cases:
            text = case["input"]
            with self.subTest(case=case["id"]):
                actual = translate(text, self.opts)
                self.assertEqual(re.findall(r"\s+", actual), re.findall(r"\s+", text))

    def test_span_coverage_on_cases(self) -> None:
        for case in self.cases:
            text = case["input"]
            spans = split_spans(text, self.opts.resources)
            self.assertEqual("".join(sp.text for sp in spans), text)


class TestParagraph(unittest.TestCase):
    def setUp(self) -> None:
        self.opts = SinhalizeOptions(resources=SinhalizeResources.load_default())

    def test_multi_line(self) -> None:
        text = "mama gedhara enavaa.\nSELECT * FROM users\napi bath kanavaa."
        self.assertEqual(
            translate(text, self.opts),
            "මම ගෙදර එනවා.\nSELECT * FROM users\nඅපි බත් කනවා.",
        )

    def test_report_tokens_match_output(self) -> None:
        res = transliterate("Eyaa avoth, mama enne naehae.", self.opts)
        self.assertEqual(res.output_text, "එයා අවොත්, මම එන්නෙ නැහැ.")
        self.assertEqual(
            [t["sinhala"] for t in res.report["tokens"]],
            ["එයා", "අවොත්", "මම", "එන්නෙ", "නැහැ"],
        )
        self.assertEqual(res.warnings, [])


if __name__ == "__main__":
    unittest.main()
