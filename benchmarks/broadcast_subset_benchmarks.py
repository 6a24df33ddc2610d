"""Benchmarks for broadcast, subset, subset-assign and yank over growing shapes."""

from __future__ import annotations

import argparse
import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Callable

import jax.numpy as jnp

from _bench_utils import host_metadata, time_case
from rray_jax import Rray, broadcast, subset, subset_assign, yank


@dataclass(frozen=True)
class BenchRow:
    name: str
    side: int
    elements: int
    mean_ms: float
    p50_ms: float
    p90_ms: float
    cv_pct: float
    samples: int


def _cases(side: int) -> dict[str, Callable[[], object]]:
    matrix = Rray(jnp.arange(side * side, dtype=jnp.float32).reshape(side, side))
    column = Rray(jnp.arange(side, dtype=jnp.float32).reshape(side, 1))
    rows = list(range(1, side + 1, 2))
    mask = Rray(jnp.arange(side * side).reshape(side, side) % 3 == 0)
    return {
        "broadcast_column": lambda: broadcast(column, (side, side, 2)),
        "subset_rows": lambda: subset(matrix, rows),
        "subset_assign_rows": lambda: subset_assign(matrix, rows, value=0.0),
        "yank_mask": lambda: yank(matrix, mask),
        "add_broadcast": lambda: matrix + column,
    }


def run(sides: list[int], *, repeats: int, warmup: int, samples: int) -> list[BenchRow]:
    out: list[BenchRow] = []
    for side in sides:
        for name, fn in _cases(side).items():
            timing = time_case(fn, repeats=repeats, warmup=warmup, samples=samples)
            out.append(BenchRow(name=name, side=side, elements=side * side, **asdict(timing)))
    return out


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--sides", default="16,64,256", help="comma separated square side lengths")
    parser.add_argument("--repeats", type=int, default=20)
    parser.add_argument("--warmup", type=int, default=3)
    parser.add_argument("--samples", type=int, default=5)
    parser.add_argument("--json-out", default="benchmarks/output/broadcast_subset.json")
    args = parser.parse_args()

    sides = [int(part) for part in args.sides.split(",") if part.strip()]
    rows = run(sides, repeats=args.repeats, warmup=args.warmup, samples=args.samples)

    print("| Case | Side | Elements | Mean ms | P50 ms | P90 ms |")
    print("|---|---:|---:|---:|---:|---:|")
    for row in rows:
        print(f"| `{row.name}` | {row.side} | {row.elements} | {row.mean_ms:.4f} | {row.p50_ms:.4f} | {row.p90_ms:.4f} |")

    path = Path(args.json_out)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps({"host": host_metadata(), "rows": [asdict(row) for row in rows]}, indent=2), encoding="utf-8")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
