#!/usr/bin/env python3
"""
Performance benchmarking demonstration for the HTML entity codec.

This example runs the codec benchmark over the default test texts, compares
it with the standard library's html.escape/html.unescape and prints a JSON
report.
"""

import json
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from html_entity_codec.tools.benchmarks import CODEC_NAME, STDLIB_NAME, CodecBenchmark


def main():
    """Run the benchmark and print a summary."""
    print("HTML Entity Codec - Performance Benchmark")
    print("=" * 50)

    benchmark = CodecBenchmark(warmup_runs=1, benchmark_runs=5)
    suite = benchmark.run_benchmark(include_stdlib=True)

    for implementation in (CODEC_NAME, STDLIB_NAME):
        operations = sorted({r.operation for r in suite.get_results(implementation)})
        for operation in operations:
            stats = suite.get_statistics(implementation, operation)
            if stats:
                print(f"{implementation:>18} {operation:<18} "
                      f"mean {stats['mean'] / 1e6:8.2f} Mchar/s")

    print("\nFull report:")
    print(json.dumps(suite.generate_report(), indent=2))


if __name__ == "__main__":
    main()
