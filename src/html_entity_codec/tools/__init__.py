"""Developer tools for the HTML entity codec."""

from .benchmarks import BenchmarkResult, BenchmarkSuite, CodecBenchmark, default_test_cases

__all__ = ["BenchmarkResult", "BenchmarkSuite", "CodecBenchmark", "default_test_cases"]
