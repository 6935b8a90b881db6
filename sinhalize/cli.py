from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .core import SinhalizeOptions, transliterate
from .resources import DEFAULT_DATA_DIR, SinhalizeResources


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="sinhalize")
    parser.add_argument("text", nargs="?", help="Input text. If omitted, read from stdin.")
    parser.add_argument(
        "--data-dir",
        default=str(DEFAULT_DATA_DIR),
        help="Directory containing *.json data files (defaults to the bundled tables).",
    )
    parser.add_argument("--report", default=None, help="Write report JSON to this path.")
    parser.add_argument("--debug", action="store_true", help="Print intermediate processing steps.")
    args = parser.parse_args(argv)

    text = args.text
    if text is None:
        text = sys.stdin.read()

    resources = SinhalizeResources.load_from_dir(Path(args.data_dir))
    opts = SinhalizeOptions(resources=resources, debug=args.debug)
    res = transliterate(text, opts)

    sys.stdout.write(res.output_text)
    if not res.output_text.endswith("\n"):
        sys.stdout.write("\n")

    if args.report:
        Path(args.report).write_text(
            json.dumps(res.report, ensure_ascii=False, indent=2) + "\n", encoding="utf-8"
        )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
