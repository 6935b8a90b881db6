#!/usr/bin/env python
"""Benchmark sinhalize against the end-to-end Singlish cases."""

import argparse
import json
import re
from pathlib import Path

from sinhalize.core import SinhalizeOptions, translate
from sinhalize.resources import DEFAULT_DATA_DIR, SinhalizeResources

# Configuration
CASES_PATH = Path(__file__).resolve().parent / "benchmark_cases.json"
MAX_BAD_CASES = 10


def normalize_output(text: str, ignore_whitespace: bool) -> str:
    if not ignore_whitespace:
        return text
    return re.sub(r"\s+", " ", text).strip()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="benchmark.py")
    parser.add_argument("--cases", default=str(CASES_PATH), help="Path to benchmark case JSON.")
    parser.add_argument("--max-cases", type=int, default=None, help="Maximum number of cases to run.")
    parser.add_argument("--data-dir", default=str(DEFAULT_DATA_DIR), help="Directory containing *.json data files.")
    parser.add_argument(
        "--ignore-whitespace",
        action="store_true",
        help="Collapse runs of whitespace before comparing.",
    )
    args = parser.parse_args(argv)

    cases_path = Path(args.cases)
    print(f"Loading cases from {cases_path}...")
    with open(cases_path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if args.max_cases is not None:
        data = data[: args.max_cases]
    print(f"Loaded {len(data)} cases")

    print("Loading sinhala resources...")
    resources = SinhalizeResources.load_from_dir(Path(args.data_dir))
    opts = SinhalizeOptions(resources=resources)

    results = {
        "total": 0,
        "correct": 0,
        "incorrect": 0,
        "bad_cases": [],
    }

    print("\n" + "=" * 70)
    print("STARTING BENCHMARK")
    print("=" * 70)

    for idx, item in enumerate(data, 1):
        case_id = item.get("id", f"case_{idx}")
        expected = normalize_output(item["expected"], args.ignore_whitespace)
        actual = normalize_output(translate(item["input"], opts), args.ignore_whitespace)

        results["total"] += 1
        if actual == expected:
            results["correct"] += 1
            status = "✓ PASS"
        else:
            results["incorrect"] += 1
            status = "✗ FAIL"
            if len(results["bad_cases"]) < MAX_BAD_CASES:
                diff_pos = next(
                    (i for i, (e, a) in enumerate(zip(expected, actual)) if e != a),
                    min(len(expected), len(actual)),
                )
                results["bad_cases"].append(
                    {
                        "id": case_id,
                        "input": item["input"],
                        "expected": expected,
                        "actual": actual,
                        "diff_at": diff_pos,
                    }
                )

        accuracy = results["correct"] / results["total"] * 100
        print(f"[{idx}/{len(data)}] {case_id}: {status} | Accuracy: {accuracy:.1f}% ({results['correct']}/{results['total']})")

    print("\n" + "=" * 70)
    print("FINAL RESULTS")
    print("=" * 70)
    accuracy = results["correct"] / results["total"] * 100 if results["total"] > 0 else 0
    print(f"Total cases:    {results['total']}")
    print(f"Correct:        {results['correct']} ({accuracy:.1f}%)")
    print(f"Incorrect:      {results['incorrect']} ({100-accuracy:.1f}%)")

    if results["bad_cases"]:
        print("\n" + "=" * 70)
        print("BAD CASES (Mismatch)")
        print("=" * 70)
        for case in results["bad_cases"]:
            print(f"\n  {case['id']}: {case['input']}")
            print(f"    Expected: {case['expected']}")
            print(f"    Actual:   {case['actual']}")
            print(f"    Diff at:  {case['diff_at']}")

    return 0 if results["incorrect"] == 0 else 1


if __name__ == "__main__":
    raise SystemExit(main())
