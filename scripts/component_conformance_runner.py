"""Run the per-component unittest suites and report pass rates."""

from __future__ import annotations

import argparse
from pathlib import Path

from rray_jax.conformance import aggregate, run_components, to_markdown, write_json


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--tests-dir",
        default="tests",
        help="directory containing unittest test files",
    )
    parser.add_argument(
        "--json-out",
        default="benchmarks/output/conformance/components.json",
        help="where to write machine-readable results",
    )
    parser.add_argument(
        "--markdown-out",
        default=None,
        help="optionally also write the markdown table to this path",
    )
    args = parser.parse_args()

    rows = run_components(tests_dir=Path(args.tests_dir))
    overall = aggregate("all", [stats for _, stats in rows])

    rate = "n/a" if overall.pass_rate is None else f"{overall.pass_rate:.2f}%"
    report = "\n".join(
        [
            "# Component Conformance",
            "",
            to_markdown(rows),
            "",
            f"- Total tests run: {overall.tests_run}",
            f"- Executable pass rate: {rate}",
            f"- Status: `{overall.status}`",
        ]
    )
    print(report)

    write_json(Path(args.json_out), rows)
    if args.markdown_out:
        Path(args.markdown_out).parent.mkdir(parents=True, exist_ok=True)
        Path(args.markdown_out).write_text(report + "\n", encoding="utf-8")

    return 1 if overall.status == "fail" else 0


if __name__ == "__main__":
    raise SystemExit(main())
