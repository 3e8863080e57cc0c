"""Benchmark: treekit edit throughput through the history store.

Measures how many appending inserts and full-list reorders a
``HistoryStore`` can commit per second, each edit recorded as one undo
step.
"""
from __future__ import annotations

import json
import sys
import time
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from treekit import HistoryStore, Node, TreeConfig

_OPERATIONS: int = 500


def _report(operation: str, iterations: int, total: float) -> dict[str, object]:
    result: dict[str, object] = {
        "operation": operation,
        "iterations": iterations,
        "total_seconds": round(total, 4),
        "ops_per_second": round(iterations / total, 1) if total else float("inf"),
        "avg_latency_ms": round(total / iterations * 1000, 4),
    }
    print(
        f"[bench_throughput] {result['operation']}: "
        f"{result['ops_per_second']:,.0f} ops/sec  "
        f"avg {result['avg_latency_ms']:.4f} ms"
    )
    return result


def _filled_store(operations: int) -> HistoryStore:
    store = HistoryStore(config=TreeConfig(history_limit=None))
    root_id = store.snapshot.root_id
    for index in range(operations):
        store.insert_node(root_id, Node(id=f"perf-node-{index}", name=f"Perf {index}"))
    return store


def bench_insert_throughput(operations: int = _OPERATIONS) -> dict[str, object]:
    """Benchmark appending inserts under a single parent.

    Returns
    -------
    dict with keys: operation, iterations, total_seconds, ops_per_second,
    avg_latency_ms.
    """
    start = time.perf_counter()
    _filled_store(operations)
    total = time.perf_counter() - start
    return _report("treekit_insert_throughput", operations, total)


def bench_reorder_throughput(operations: int = _OPERATIONS) -> dict[str, object]:
    """Benchmark moving every sibling to the front of a list of ``operations`` nodes."""
    store = _filled_store(operations)
    start = time.perf_counter()
    for index in range(operations):
        result = store.reorder_sibling(f"perf-node-{index}", 0)
        if not result.success:
            raise RuntimeError(f"reorder failed for perf-node-{index}: {result.error}")
    total = time.perf_counter() - start
    return _report("treekit_reorder_throughput", operations, total)


if __name__ == "__main__":
    results_dir = Path(__file__).parent / "results"
    results_dir.mkdir(exist_ok=True)

    for bench_fn, fname in [
        (bench_insert_throughput, "insert_throughput_baseline.json"),
        (bench_reorder_throughput, "reorder_throughput_baseline.json"),
    ]:
        result = bench_fn()
        output_path = results_dir / fname
        with open(output_path, "w", encoding="utf-8") as fh:
            json.dump(result, fh, indent=2)
        print(f"Results saved to {output_path}")
