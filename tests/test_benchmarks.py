"""Structural tests for the treekit benchmark module."""
from __future__ import annotations

import importlib
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "benchmarks"))


def test_bench_throughput_importable() -> None:
    """Verify bench_throughput module can be imported."""
    mod = importlib.import_module("bench_throughput")
    assert hasattr(mod, "bench_insert_throughput")
    assert hasattr(mod, "bench_reorder_throughput")


def test_insert_throughput_returns_expected_keys() -> None:
    from bench_throughput import bench_insert_throughput

    result = bench_insert_throughput(50)
    assert result["iterations"] == 50
    assert "ops_per_second" in result
    assert "avg_latency_ms" in result


def test_reorder_throughput_completes() -> None:
    from bench_throughput import bench_reorder_throughput

    result = bench_reorder_throughput(50)
    assert result["operation"] == "treekit_reorder_throughput"
