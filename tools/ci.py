#!/usr/bin/env python3
# Copyright 2026 TinyLex Contributors
# SPDX-License-Identifier: Apache-2.0

"""Run all CI checks locally: format, lint, tests, and build."""

import subprocess
import sys
import time
from pathlib import Path

from yachalk import chalk

# ###############
# Public Interface
# ###############

STEPS: list[tuple[str, list[str]]] = [
    ("Format check", ["uv", "run", "ruff", "format", "--check", "src/", "tests/", "tools/"]),
    ("Lint", ["uv", "run", "ruff", "check", "src/", "tests/", "tools/"]),
    ("Tests", ["uv", "run", "pytest", "--cov=tinylex", "--cov-report=term-missing"]),
    ("Build", ["uv", "build"]),
]


def main() -> int:
    """Run all CI steps and report results."""
    results = [_run_step(name, cmd) for name, cmd in STEPS]
    _print_header("Summary")

    for name, passed, elapsed in results:
        status = "PASS" if passed else "FAIL"
        color = chalk.green if passed else chalk.red
        print(color(f"  {status}  {name} ({elapsed:.1f}s)"))

    print()
    return 0 if all(passed for _, passed, _ in results) else 1


# ################
# Implementation
# ################


def _run_step(name: str, cmd: list[str]) -> tuple[str, bool, float]:
    """Run one step from the repository root and time it."""
    _print_header(name)
    start = time.monotonic()
    proc = subprocess.run(cmd, cwd=Path(__file__).parent.parent)
    return name, proc.returncode == 0, time.monotonic() - start


def _print_header(title: str) -> None:
    sep = chalk.blue("=" * 60)
    print(f"\n{sep}")
    print(chalk.blue(title))
    print(sep)


if __name__ == "__main__":
    sys.exit(main())
