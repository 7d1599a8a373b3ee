#!/usr/bin/env python3
"""
Test runner for the forecasting engine.

    python3 run_tests.py                 # basic, edge case and performance suites
    python3 run_tests.py --edge-cases    # one suite
    python3 run_tests.py --coverage      # everything, with a coverage report (pytest-cov)
"""

import sys
import subprocess
import argparse
import time

COVERED_MODULES = ["ts_core", "data_utils", "decomposition", "trend", "metrics", "models", "utils"]

SUITES = {
    "basic": ("Basic test suite", ["tests/", "-m", "not performance"]),
    "edge_cases": ("Edge case tests", ["tests/test_edge_cases.py", "-m", "edge_case"]),
    "performance": ("Performance tests", ["tests/test_performance.py", "-m", "performance"]),
    "coverage": (
        "All tests with coverage",
        ["tests/", *[f"--cov={m}" for m in COVERED_MODULES], "--cov-report=term"],
    ),
}
DEFAULT_SUITES = ["basic", "edge_cases", "performance"]


def run_suite(name):
    """Run one pytest suite; print its output and return whether it passed."""
    description, args = SUITES[name]
    cmd = [sys.executable, "-m", "pytest", "-v", *args]
    print(f"\n{'='*60}\n{description}: {' '.join(cmd)}\n{'='*60}")

    start_time = time.time()
    result = subprocess.run(cmd, capture_output=True, text=True)
    elapsed = time.time() - start_time

    print(result.stdout)
    if result.returncode != 0:
        print(result.stderr)
        print(f"❌ {description} failed after {elapsed:.2f}s (exit code {result.returncode})")
        return False
    print(f"✅ {description} passed in {elapsed:.2f}s")
    return True


def main():
    parser = argparse.ArgumentParser(description="Test runner for the forecasting engine")
    parser.add_argument("--basic", action="store_true", help="Run the basic suite")
    parser.add_argument("--edge-cases", action="store_true", help="Run edge case tests")
    parser.add_argument("--performance", action="store_true", help="Run performance tests")
    parser.add_argument("--coverage", action="store_true", help="Run all tests with coverage")
    args = parser.parse_args()

    selected = [name for name in SUITES if getattr(args, name)] or DEFAULT_SUITES
    results = [run_suite(name) for name in selected]

    if not all(results):
        print("\n💥 Some test suites failed!")
        sys.exit(1)
    print("\n🎉 All test suites completed successfully!")


if __name__ == "__main__":
    main()
