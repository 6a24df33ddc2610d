"""Per-component test-suite runs and pass-rate reporting."""

from __future__ import annotations

import io
import json
import unittest
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Final


@dataclass(frozen=True)
class SuiteStats:
    name: str
    tests_run: int
    passed: int
    failed: int
    errors: int
    skipped: int
    pass_rate: float | None
    status: str

    @property
    def executable(self) -> int:
        return self.tests_run - self.skipped

    @property
    def ok(self) -> bool:
        return self.status in {"pass", "skipped"}


@dataclass(frozen=True)
class Component:
    key: str
    title: str
    patterns: tuple[str, ...]


_COMPONENTS: Final[tuple[Component, ...]] = (
    Component(key="shape", title="Shape algebra", patterns=("test_shape_algebra.py",)),
    Component(key="names", title="Dimension-name propagation", patterns=("test_dim_names.py",)),
    Component(key="broadcast", title="Broadcast materializer", patterns=("test_broadcast.py",)),
    Component(key="index", title="Index resolver", patterns=("test_index_resolver.py",)),
    Component(
        key="subset",
        title="Subsetting engine",
        patterns=("test_subset_engine.py", "test_yank_extract.py"),
    ),
    Component(key="reshape", title="Reshape and squeeze", patterns=("test_reshape_squeeze.py",)),
    Component(key="arith", title="Arithmetic dispatch", patterns=("test_arith.py",)),
    Component(
        key="model",
        title="Value model and errors",
        patterns=("test_value_model.py", "test_errors.py"),
    ),
    Component(key="properties", title="Cross-component properties", patterns=("test_properties.py",)),
)


def default_components() -> tuple[Component, ...]:
    return _COMPONENTS


def _status(failed: int, errors: int, executable: int) -> str:
    if failed or errors:
        return "fail"
    if executable == 0:
        return "skipped"
    return "pass"


def _rate(passed: int, executable: int) -> float | None:
    return None if executable == 0 else (passed / executable) * 100.0


def run_component(component: Component, *, tests_dir: Path = Path("tests")) -> SuiteStats:
    loader = unittest.TestLoader()
    suite = unittest.TestSuite()
    for pattern in component.patterns:
        suite.addTests(loader.discover(start_dir=str(tests_dir), pattern=pattern, top_level_dir=str(tests_dir)))

    result = unittest.TextTestRunner(stream=io.StringIO(), verbosity=0).run(suite)
    failed = len(result.failures)
    errors = len(result.errors)
    skipped = len(result.skipped)
    executable = result.testsRun - skipped
    passed = executable - failed - errors
    return SuiteStats(
        name=component.key,
        tests_run=result.testsRun,
        passed=passed,
        failed=failed,
        errors=errors,
        skipped=skipped,
        pass_rate=_rate(passed, executable),
        status=_status(failed, errors, executable),
    )


def run_components(*, tests_dir: Path = Path("tests")) -> list[tuple[Component, SuiteStats]]:
    return [(component, run_component(component, tests_dir=tests_dir)) for component in default_components()]


def aggregate(name: str, stats: list[SuiteStats]) -> SuiteStats:
    tests_run = sum(s.tests_run for s in stats)
    passed = sum(s.passed for s in stats)
    failed = sum(s.failed for s in stats)
    errors = sum(s.errors for s in stats)
    skipped = sum(s.skipped for s in stats)
    executable = tests_run - skipped
    return SuiteStats(
        name=name,
        tests_run=tests_run,
        passed=passed,
        failed=failed,
        errors=errors,
        skipped=skipped,
        pass_rate=_rate(passed, executable),
        status=_status(failed, errors, executable),
    )


def to_markdown(rows: list[tuple[Component, SuiteStats]]) -> str:
    lines = [
        "| Component | Run | Passed | Skipped | Failed | Errors | Pass Rate | Status |",
        "|---|---:|---:|---:|---:|---:|---:|---|",
    ]
    for component, stats in rows:
        rate = "n/a" if stats.pass_rate is None else f"{stats.pass_rate:.2f}%"
        lines.append(
            f"| {component.title} (`{component.key}`) | {stats.tests_run} | {stats.passed} | "
            f"{stats.skipped} | {stats.failed} | {stats.errors} | {rate} | {stats.status} |"
        )
    return "\n".join(lines)


def write_json(path: Path, rows: list[tuple[Component, SuiteStats]]) -> None:
    overall = aggregate("all", [stats for _, stats in rows])
    payload = {
        "components": [
            {"key": component.key, "title": component.title, "stats": asdict(stats)}
            for component, stats in rows
        ],
        "summary": asdict(overall),
    }
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
